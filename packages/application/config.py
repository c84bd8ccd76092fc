from __future__ import annotations

import os
from dataclasses import dataclass

from packages.domain.models import HeuristicThresholds


def _env(key: str, default: str) -> str:
    return os.getenv(key, default)


def _env_alias(keys: list[str], default: str) -> str:
    for key in keys:
        value = os.getenv(key)
        if value is not None and value != '':
            return value
    return default


def _env_int(key: str, default: int, minimum: int = 0) -> int:
    raw = _env(key, str(default)).strip()
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f'{key} must be an integer, got {raw!r}') from exc
    if value < minimum:
        raise ValueError(f'{key} must be >= {minimum}, got {value}')
    return value


def _env_bool(key: str, default: bool) -> bool:
    return _env(key, 'true' if default else 'false').strip().lower() == 'true'


@dataclass(frozen=True)
class AppConfig:
    app_env: str
    uploads_dir: str
    extraction_trace_file: str
    trace_extractions: bool
    pdf_extraction_mode: str
    header_window: int
    min_header_tokens: int
    row_tolerance: int
    min_row_tokens: int
    min_pattern_frequency: int
    min_pattern_tokens: int
    max_preview_rows: int

    def thresholds(self) -> HeuristicThresholds:
        return HeuristicThresholds(
            header_window=self.header_window,
            min_header_tokens=self.min_header_tokens,
            row_tolerance=self.row_tolerance,
            min_row_tokens=self.min_row_tokens,
            min_pattern_frequency=self.min_pattern_frequency,
            min_pattern_tokens=self.min_pattern_tokens,
        )


def load_config() -> AppConfig:
    defaults = HeuristicThresholds()
    return AppConfig(
        app_env=_env('APP_ENV', 'local'),
        uploads_dir=_env('UPLOADS_DIR', 'data/uploads'),
        extraction_trace_file=_env_alias(
            ['EXTRACTION_TRACE_FILE', 'TRACE_FILE'], '.context/reports/extraction_traces.jsonl'
        ),
        trace_extractions=_env_bool('TRACE_EXTRACTIONS', False),
        pdf_extraction_mode=_env('PDF_EXTRACTION_MODE', 'layout').strip().lower(),
        header_window=_env_int('TABLE_HEADER_WINDOW', defaults.header_window, minimum=1),
        min_header_tokens=_env_int('TABLE_MIN_HEADER_TOKENS', defaults.min_header_tokens, minimum=1),
        row_tolerance=_env_int('TABLE_ROW_TOLERANCE', defaults.row_tolerance),
        min_row_tokens=_env_int('TABLE_MIN_ROW_TOKENS', defaults.min_row_tokens, minimum=1),
        min_pattern_frequency=_env_int(
            'TABLE_MIN_PATTERN_FREQUENCY', defaults.min_pattern_frequency, minimum=1
        ),
        min_pattern_tokens=_env_int('TABLE_MIN_PATTERN_TOKENS', defaults.min_pattern_tokens, minimum=1),
        max_preview_rows=_env_int('UI_MAX_PREVIEW_ROWS', 9, minimum=1),
    )
