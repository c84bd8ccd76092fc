from __future__ import annotations

import json
from pathlib import Path

from packages.adapters.tracing.jsonl_extraction_trace_logger import JsonlExtractionTraceLogger


def test_appends_one_json_line_per_payload(tmp_path: Path) -> None:
    trace_file = tmp_path / 'reports' / 'nested' / 'traces.jsonl'
    logger = JsonlExtractionTraceLogger(trace_file)

    logger.log({'filename': 'a.csv', 'row_count': 2})
    logger.log({'filename': 'b.pdf', 'row_count': 0, 'strategy': None})

    lines = trace_file.read_text(encoding='utf-8').splitlines()
    assert [json.loads(line) for line in lines] == [
        {'filename': 'a.csv', 'row_count': 2},
        {'filename': 'b.pdf', 'row_count': 0, 'strategy': None},
    ]
    assert logger.trace_file == trace_file


def test_non_ascii_is_escaped(tmp_path: Path) -> None:
    trace_file = tmp_path / 'traces.jsonl'
    JsonlExtractionTraceLogger(trace_file).log({'filename': 'résumé.docx'})

    raw = trace_file.read_text(encoding='utf-8')
    assert '\\u00e9' in raw
    assert json.loads(raw)['filename'] == 'résumé.docx'
