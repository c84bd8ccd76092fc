from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from packages.domain.errors import (
    TableExtractionError,
    TableProcessingError,
    UnsupportedFileTypeError,
)
from packages.domain.file_formats import (
    FORMAT_PDF,
    OCTET_STREAM,
    TEXT_FAMILIES,
    classify_format,
    is_image,
    is_supported_table_format,
)
from packages.domain.models import (
    ORIGIN_CLEAN,
    ORIGIN_NOISY,
    ExtractionAttempt,
    Row,
    TableExtraction,
)
from packages.ports.extraction_trace_port import ExtractionTracePort
from packages.ports.file_type_port import FileTypeDetectorPort
from packages.ports.pdf_parser_port import PdfParserPort
from packages.ports.structured_table_port import StructuredTableReaderPort
from packages.ports.table_extractor_port import TableExtractorPort

IMAGE_REJECTION_MESSAGE = (
    'Image files cannot be used for table extraction. '
    'Please upload Excel, CSV, PDF or other tabular documents.'
)


@dataclass(frozen=True)
class ExtractTableDataInput:
    file_path: Path
    filename: str = ''
    declared_type: str | None = None


@dataclass(frozen=True)
class ExtractTableDataOutput:
    file_type: str
    format_family: str
    headers: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)
    strategy: str | None = None
    attempts: list[ExtractionAttempt] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.rows


def _ordered_keys(rows: list[Row]) -> list[str]:
    keys: dict[str, None] = {}
    for row in rows:
        for key in row:
            keys.setdefault(key, None)
    return list(keys)


def _read_text(path: Path, family: str, pdf_parser: PdfParserPort) -> str:
    if family == FORMAT_PDF:
        return pdf_parser.extract_text(str(path))
    try:
        return path.read_bytes().decode('utf-8-sig')
    except UnicodeDecodeError as exc:
        raise TableProcessingError(f'Text file is not valid UTF-8: {exc.reason}') from exc


def _read_structured(
    path: Path,
    family: str,
    file_type: str,
    structured_readers: dict[str, StructuredTableReaderPort],
) -> TableExtraction:
    reader = structured_readers.get(family)
    if reader is None:
        raise UnsupportedFileTypeError(file_type)

    rows = reader.read_rows(str(path), file_type)
    headers = _ordered_keys(rows)
    attempt = ExtractionAttempt(
        strategy=f'{family}_reader',
        outcome='matched' if rows else 'no_rows',
        header_count=len(headers),
        row_count=len(rows),
        detail={'reader': type(reader).__name__},
    )
    return TableExtraction(
        headers=headers,
        rows=rows,
        strategy=attempt.strategy if rows else None,
        attempts=[attempt],
    )


def _trace_payload(data: ExtractTableDataInput, output: ExtractTableDataOutput) -> dict[str, Any]:
    return {
        'timestamp': datetime.now(UTC).isoformat(),
        'filename': data.filename or data.file_path.name,
        'file_type': output.file_type,
        'format_family': output.format_family,
        'strategy': output.strategy,
        'header_count': len(output.headers),
        'row_count': len(output.rows),
        'attempts': [attempt.to_dict() for attempt in output.attempts],
    }


def extract_table_data_use_case(
    data: ExtractTableDataInput,
    *,
    file_type_detector: FileTypeDetectorPort,
    pdf_parser: PdfParserPort,
    structured_readers: dict[str, StructuredTableReaderPort],
    table_extractor: TableExtractorPort,
    trace_logger: ExtractionTracePort | None = None,
) -> ExtractTableDataOutput:
    if not data.file_path.is_file():
        raise TableProcessingError(f'File not found: {data.file_path}')

    try:
        detected = file_type_detector.detect(str(data.file_path), data.filename, data.declared_type)
    except Exception as exc:
        raise TableProcessingError(f'Failed to detect the file type: {exc}') from exc
    file_type = detected or OCTET_STREAM
    if is_image(file_type):
        raise UnsupportedFileTypeError(file_type, IMAGE_REJECTION_MESSAGE)
    family = classify_format(file_type) if is_supported_table_format(file_type) else None
    if family is None:
        raise UnsupportedFileTypeError(file_type)

    try:
        if family in TEXT_FAMILIES:
            text = _read_text(data.file_path, family, pdf_parser)
            origin = ORIGIN_NOISY if family == FORMAT_PDF else ORIGIN_CLEAN
            extraction = table_extractor.extract(text, origin)
        else:
            extraction = _read_structured(data.file_path, family, file_type, structured_readers)
    except TableExtractionError:
        raise
    except Exception as exc:
        raise TableProcessingError(f'Failed to read {family} file: {exc}') from exc

    output = ExtractTableDataOutput(
        file_type=file_type,
        format_family=family,
        headers=_ordered_keys(extraction.rows) if extraction.rows else list(extraction.headers),
        rows=extraction.rows,
        strategy=extraction.strategy,
        attempts=list(extraction.attempts),
    )

    if trace_logger is not None:
        trace_logger.log(_trace_payload(data, output))

    return output
