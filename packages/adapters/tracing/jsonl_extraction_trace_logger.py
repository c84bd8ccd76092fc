from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from packages.ports.extraction_trace_port import ExtractionTracePort


class JsonlExtractionTraceLogger(ExtractionTracePort):
    def __init__(self, trace_file: Path) -> None:
        self._trace_file = trace_file

    @property
    def trace_file(self) -> Path:
        return self._trace_file

    def log(self, payload: dict[str, Any]) -> None:
        self._trace_file.parent.mkdir(parents=True, exist_ok=True)
        with self._trace_file.open('a', encoding='utf-8') as fh:
            fh.write(json.dumps(payload, ensure_ascii=True))
            fh.write('\n')
