from __future__ import annotations

import re
import shutil
import uuid
from datetime import UTC, datetime
from pathlib import Path

from fastapi import FastAPI, File, Form, HTTPException, UploadFile

from packages.adapters.filetype.magic_file_type_detector import MagicFileTypeDetector
from packages.adapters.pdf.pypdf_parser_adapter import PypdfParserAdapter
from packages.adapters.structured.factory import create_structured_readers
from packages.adapters.tables.heuristic_table_extractor_adapter import (
    HeuristicTableExtractorAdapter,
)
from packages.adapters.tracing.jsonl_extraction_trace_logger import JsonlExtractionTraceLogger
from packages.application.config import AppConfig, load_config
from packages.application.use_cases.extract_table_data import (
    ExtractTableDataInput,
    extract_table_data_use_case,
)
from packages.domain.errors import TableProcessingError, UnsupportedFileTypeError
from packages.domain.models import ORIGINS


NO_TABLE_MESSAGE = (
    'No table data found in the file. '
    'Please upload a file containing structured data in a table format.'
)

_BOOT_CONFIG = load_config()
UPLOADS_DIR = Path(_BOOT_CONFIG.uploads_dir)

app = FastAPI(title='Table to Forms API', version='0.3.0')


def _safe_filename(value: str) -> str:
    name = Path(value).name
    safe = re.sub(r'[^a-zA-Z0-9._-]+', '_', name.strip()).strip('._')
    return safe or 'upload'


def _build_table_extractor(cfg: AppConfig) -> HeuristicTableExtractorAdapter:
    return HeuristicTableExtractorAdapter(cfg.thresholds())


def _build_pdf_parser(cfg: AppConfig):
    return PypdfParserAdapter(extraction_mode=cfg.pdf_extraction_mode)


def _build_trace_logger(cfg: AppConfig):
    if not cfg.trace_extractions:
        return None
    return JsonlExtractionTraceLogger(Path(cfg.extraction_trace_file))


@app.get('/health')
def health() -> dict[str, object]:
    cfg = load_config()
    thresholds = cfg.thresholds()
    return {
        'status': 'ok',
        'app_env': cfg.app_env,
        'pdf_extraction_mode': cfg.pdf_extraction_mode,
        'trace_extractions': cfg.trace_extractions,
        'thresholds': {
            'header_window': thresholds.header_window,
            'min_header_tokens': thresholds.min_header_tokens,
            'row_tolerance': thresholds.row_tolerance,
            'min_row_tokens': thresholds.min_row_tokens,
            'min_pattern_frequency': thresholds.min_pattern_frequency,
            'min_pattern_tokens': thresholds.min_pattern_tokens,
        },
    }


@app.post('/upload')
def upload_table_document(file: UploadFile = File(...)) -> dict[str, object]:
    if not file.filename:
        raise HTTPException(status_code=400, detail='No file uploaded')

    cfg = load_config()
    ts = datetime.now(UTC).strftime('%Y%m%d%H%M%S')
    UPLOADS_DIR.mkdir(parents=True, exist_ok=True)
    temp_path = UPLOADS_DIR / f'upload-{ts}-{uuid.uuid4().hex[:8]}-{_safe_filename(file.filename)}'

    try:
        with temp_path.open('wb') as fh:
            shutil.copyfileobj(file.file, fh)

        result = extract_table_data_use_case(
            ExtractTableDataInput(
                file_path=temp_path,
                filename=file.filename,
                declared_type=file.content_type,
            ),
            file_type_detector=MagicFileTypeDetector(),
            pdf_parser=_build_pdf_parser(cfg),
            structured_readers=create_structured_readers(),
            table_extractor=_build_table_extractor(cfg),
            trace_logger=_build_trace_logger(cfg),
        )
    except UnsupportedFileTypeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except TableProcessingError as exc:
        raise HTTPException(status_code=500, detail=f'Failed to process the file: {exc}') from exc
    finally:
        temp_path.unlink(missing_ok=True)

    if result.is_empty():
        raise HTTPException(status_code=400, detail=NO_TABLE_MESSAGE)

    return {
        'success': True,
        'fileType': result.file_type,
        'tableData': result.rows,
        'headers': result.headers,
        'strategy': result.strategy,
    }


@app.post('/extract/text')
def extract_text_table(
    text: str = Form(...),
    origin: str = Form(default='noisy'),
) -> dict[str, object]:
    normalized = origin.strip().lower()
    if normalized not in ORIGINS:
        raise HTTPException(
            status_code=400,
            detail=f'origin must be one of: {", ".join(ORIGINS)}',
        )

    cfg = load_config()
    extraction = _build_table_extractor(cfg).extract(text, normalized)
    return {
        'found': not extraction.is_empty(),
        'origin': normalized,
        'headers': extraction.headers,
        'rows': extraction.rows,
        'strategy': extraction.strategy,
        'attempts': [attempt.to_dict() for attempt in extraction.attempts],
    }
