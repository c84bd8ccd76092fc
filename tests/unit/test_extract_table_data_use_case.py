from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Any

import pytest

from packages.adapters.tables.heuristic_table_extractor_adapter import (
    HeuristicTableExtractorAdapter,
)
from packages.application.use_cases.extract_table_data import (
    ExtractTableDataInput,
    extract_table_data_use_case,
)
from packages.domain.errors import TableProcessingError, UnsupportedFileTypeError
from packages.domain.models import Row
from packages.ports.extraction_trace_port import ExtractionTracePort
from packages.ports.file_type_port import FileTypeDetectorPort
from packages.ports.pdf_parser_port import ParsedPdfPage, PdfParserPort
from packages.ports.structured_table_port import StructuredTableReaderPort


class FixedDetector(FileTypeDetectorPort):
    def __init__(self, mime: str | None) -> None:
        self._mime = mime

    def detect(self, file_path: str, filename: str = '', declared_type: str | None = None) -> str | None:
        _ = file_path, filename, declared_type
        return self._mime


class FakePdfParser(PdfParserPort):
    def __init__(self, pages: list[str]) -> None:
        self._pages = pages

    def parse(self, pdf_path: str) -> list[ParsedPdfPage]:
        _ = pdf_path
        return [ParsedPdfPage(page_number=i, text=t) for i, t in enumerate(self._pages, start=1)]


class FakeReader(StructuredTableReaderPort):
    def __init__(self, rows: list[Row] | None = None, error: Exception | None = None) -> None:
        self._rows = rows or []
        self._error = error
        self.calls: list[tuple[str, str]] = []

    def read_rows(self, file_path: str, file_type: str) -> list[Row]:
        self.calls.append((file_path, file_type))
        if self._error is not None:
            raise self._error
        return list(self._rows)


class RecordingTrace(ExtractionTracePort):
    def __init__(self) -> None:
        self.payloads: list[dict[str, Any]] = []

    def log(self, payload: dict[str, Any]) -> None:
        self.payloads.append(payload)


def _run(
    path: Path,
    mime: str | None,
    *,
    pdf_pages: list[str] | None = None,
    readers: dict[str, StructuredTableReaderPort] | None = None,
    trace: ExtractionTracePort | None = None,
):
    return extract_table_data_use_case(
        ExtractTableDataInput(file_path=path, filename=path.name),
        file_type_detector=FixedDetector(mime),
        pdf_parser=FakePdfParser(pdf_pages or []),
        structured_readers=readers if readers is not None else {},
        table_extractor=HeuristicTableExtractorAdapter(),
        trace_logger=trace,
    )


@pytest.fixture()
def upload(tmp_path: Path) -> Path:
    path = tmp_path / 'upload.dat'
    path.write_bytes(b'placeholder')
    return path


def test_pdf_text_goes_through_noisy_chain(upload: Path) -> None:
    result = _run(
        upload,
        'application/pdf',
        pdf_pages=['Name  Age  City\nAlice  30  Paris', 'Bob  25  London'],
    )

    assert result.format_family == 'pdf'
    assert result.headers == ['Name', 'Age', 'City']
    assert len(result.rows) == 2
    assert result.strategy == 'delimited_header'


def test_pdf_without_table_is_empty_not_an_error(upload: Path) -> None:
    result = _run(upload, 'application/pdf', pdf_pages=['Cover page', 'Thanks for reading'])
    assert result.is_empty()
    assert result.headers == []
    assert result.strategy is None


def test_plain_text_goes_through_strict_chain(tmp_path: Path) -> None:
    path = tmp_path / 'people.txt'
    path.write_bytes('Name\tAge\nAlice\t30\nBob\t25\t!\n'.encode('utf-8'))

    result = _run(path, 'text/plain')

    assert result.format_family == 'text'
    assert result.rows == [{'Name': 'Alice', 'Age': '30'}]
    assert result.strategy == 'strict_delimited'


def test_text_that_is_not_utf8_is_a_processing_fault(tmp_path: Path) -> None:
    path = tmp_path / 'legacy.txt'
    path.write_bytes(b'name,age\n\xff\xfe,1\n')

    with pytest.raises(TableProcessingError):
        _run(path, 'text/plain')


def test_structured_rows_come_from_reader(upload: Path) -> None:
    reader = FakeReader(rows=[{'A': '1'}, {'A': '2', 'B': '3'}])

    result = _run(upload, 'text/csv', readers={'csv': reader})

    assert reader.calls == [(str(upload), 'text/csv')]
    assert result.headers == ['A', 'B']
    assert result.rows == [{'A': '1'}, {'A': '2', 'B': '3'}]
    assert result.strategy == 'csv_reader'
    assert result.attempts[0].detail == {'reader': 'FakeReader'}


def test_empty_structured_result(upload: Path) -> None:
    result = _run(upload, 'text/csv', readers={'csv': FakeReader(rows=[])})
    assert result.is_empty()
    assert result.strategy is None
    assert result.attempts[0].outcome == 'no_rows'


def test_reader_failure_is_wrapped(upload: Path) -> None:
    reader = FakeReader(error=KeyError('sheet'))

    with pytest.raises(TableProcessingError) as exc_info:
        _run(upload, 'application/vnd.ms-excel', readers={'spreadsheet': reader})

    assert isinstance(exc_info.value.__cause__, KeyError)


def test_missing_reader_means_unsupported(upload: Path) -> None:
    with pytest.raises(UnsupportedFileTypeError):
        _run(upload, 'application/msword', readers={})


def test_images_rejected_with_dedicated_message(upload: Path) -> None:
    with pytest.raises(UnsupportedFileTypeError) as exc_info:
        _run(upload, 'image/png')
    assert 'Image files' in str(exc_info.value)
    assert exc_info.value.file_type == 'image/png'


@pytest.mark.parametrize('mime', ['application/json', None])
def test_unsupported_types_rejected(upload: Path, mime: str | None) -> None:
    with pytest.raises(UnsupportedFileTypeError) as exc_info:
        _run(upload, mime)
    assert 'not supported' in str(exc_info.value)


def test_missing_file_is_a_processing_fault(tmp_path: Path) -> None:
    with pytest.raises(TableProcessingError):
        _run(tmp_path / 'gone.csv', 'text/csv')


def test_trace_logger_receives_attempts(upload: Path) -> None:
    trace = RecordingTrace()

    _run(upload, 'application/pdf', pdf_pages=['a b\nc d\ne f'], trace=trace)

    assert len(trace.payloads) == 1
    payload = trace.payloads[0]
    assert payload['filename'] == 'upload.dat'
    assert payload['file_type'] == 'application/pdf'
    assert payload['strategy'] == 'pattern_frequency'
    assert payload['row_count'] == 3
    assert [a['outcome'] for a in payload['attempts']] == ['no_header', 'matched']
    assert 'timestamp' in payload


class BrokenDetector(FileTypeDetectorPort):
    def detect(self, file_path: str, filename: str = '', declared_type: str | None = None) -> str | None:
        _ = file_path, filename, declared_type
        raise zipfile.BadZipFile('truncated central directory')


def test_detector_failure_is_a_processing_fault(upload: Path) -> None:
    with pytest.raises(TableProcessingError) as exc_info:
        extract_table_data_use_case(
            ExtractTableDataInput(file_path=upload, filename='damaged.xlsx'),
            file_type_detector=BrokenDetector(),
            pdf_parser=FakePdfParser([]),
            structured_readers={},
            table_extractor=HeuristicTableExtractorAdapter(),
        )

    assert isinstance(exc_info.value.__cause__, zipfile.BadZipFile)
