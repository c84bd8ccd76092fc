from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


ORIGIN_NOISY = 'noisy'
ORIGIN_CLEAN = 'clean'
ORIGINS = (ORIGIN_NOISY, ORIGIN_CLEAN)

DELIMITER_SPACE_RUN = 'space'
DELIMITER_COMMA = 'comma'
DELIMITER_TAB = 'tab'
DELIMITER_SEMICOLON = 'semicolon'
DELIMITER_WHITESPACE = 'whitespace'

# Evaluation order for header detection; earlier entries win ties.
HEADER_DELIMITERS = (DELIMITER_SPACE_RUN, DELIMITER_COMMA, DELIMITER_TAB)

Row = dict[str, str]


@dataclass(frozen=True)
class HeuristicThresholds:
    header_window: int = 5
    min_header_tokens: int = 2
    row_tolerance: int = 1
    min_row_tokens: int = 2
    min_pattern_frequency: int = 3
    min_pattern_tokens: int = 2


@dataclass(frozen=True)
class HeaderCandidate:
    line_index: int
    delimiter: str
    headers: list[str]

    @property
    def token_count(self) -> int:
        return len(self.headers)


@dataclass(frozen=True)
class ExtractionAttempt:
    strategy: str
    outcome: str
    delimiter: str | None = None
    header_line: int | None = None
    header_count: int = 0
    candidates_evaluated: int = 0
    row_count: int = 0
    detail: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            'strategy': self.strategy,
            'outcome': self.outcome,
            'delimiter': self.delimiter,
            'header_line': self.header_line,
            'header_count': self.header_count,
            'candidates_evaluated': self.candidates_evaluated,
            'row_count': self.row_count,
            'detail': dict(self.detail),
        }


@dataclass(frozen=True)
class TableExtraction:
    headers: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)
    strategy: str | None = None
    attempts: list[ExtractionAttempt] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.rows
