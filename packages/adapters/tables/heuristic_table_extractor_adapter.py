from __future__ import annotations

from typing import Callable

from packages.domain.errors import TableProcessingError
from packages.domain.models import (
    HEADER_DELIMITERS,
    ORIGIN_CLEAN,
    ORIGIN_NOISY,
    ExtractionAttempt,
    HeuristicThresholds,
    Row,
    TableExtraction,
)
from packages.domain.table_heuristics import (
    choose_strict_delimiter,
    detect_header,
    extract_delimited_rows,
    extract_pattern_rows,
    extract_strict_rows,
    normalize_lines,
    row_token_bounds,
    select_pattern_width,
    word_count_histogram,
)
from packages.ports.table_extractor_port import TableExtractorPort

# A table needs at least a header line and one data line.
MIN_TABLE_LINES = 2

StrategyResult = tuple[ExtractionAttempt, list[str], list[Row]]
Strategy = Callable[[list[str], HeuristicThresholds], StrategyResult]


def _too_few_lines(strategy: str, lines: list[str]) -> StrategyResult:
    attempt = ExtractionAttempt(
        strategy=strategy,
        outcome='too_few_lines',
        detail={'line_count': len(lines)},
    )
    return attempt, [], []


def delimited_header_strategy(lines: list[str], thresholds: HeuristicThresholds) -> StrategyResult:
    name = 'delimited_header'
    if len(lines) < MIN_TABLE_LINES:
        return _too_few_lines(name, lines)

    evaluated = min(thresholds.header_window, len(lines)) * len(HEADER_DELIMITERS)
    candidate = detect_header(lines, thresholds)
    if candidate is None:
        attempt = ExtractionAttempt(
            strategy=name,
            outcome='no_header',
            candidates_evaluated=evaluated,
        )
        return attempt, [], []

    rows = extract_delimited_rows(lines, candidate, thresholds)
    low, high = row_token_bounds(candidate.token_count, thresholds)
    attempt = ExtractionAttempt(
        strategy=name,
        outcome='matched' if rows else 'no_rows',
        delimiter=candidate.delimiter,
        header_line=candidate.line_index,
        header_count=candidate.token_count,
        candidates_evaluated=evaluated,
        row_count=len(rows),
        detail={'accepted_token_range': [low, high]},
    )
    return attempt, list(candidate.headers), rows


def pattern_frequency_strategy(lines: list[str], thresholds: HeuristicThresholds) -> StrategyResult:
    name = 'pattern_frequency'
    if len(lines) < MIN_TABLE_LINES:
        return _too_few_lines(name, lines)

    histogram = word_count_histogram(lines)
    detail = {'word_count_histogram': {str(width): freq for width, freq in histogram.items()}}
    if select_pattern_width(histogram, thresholds) is None:
        attempt = ExtractionAttempt(
            strategy=name,
            outcome='no_pattern',
            candidates_evaluated=len(histogram),
            detail=detail,
        )
        return attempt, [], []

    headers, rows = extract_pattern_rows(lines, thresholds)
    attempt = ExtractionAttempt(
        strategy=name,
        outcome='matched' if rows else 'no_rows',
        delimiter='whitespace',
        header_count=len(headers),
        candidates_evaluated=len(histogram),
        row_count=len(rows),
        detail=detail,
    )
    return attempt, headers, rows


def strict_delimited_strategy(lines: list[str], thresholds: HeuristicThresholds) -> StrategyResult:
    _ = thresholds
    name = 'strict_delimited'
    if len(lines) < MIN_TABLE_LINES:
        return _too_few_lines(name, lines)

    headers, rows = extract_strict_rows(lines)
    attempt = ExtractionAttempt(
        strategy=name,
        outcome='matched' if rows else 'no_rows',
        delimiter=choose_strict_delimiter(lines[0]),
        header_line=0,
        header_count=len(headers),
        candidates_evaluated=1,
        row_count=len(rows),
        detail={'dropped_lines': len(lines) - 1 - len(rows)},
    )
    return attempt, headers, rows


class HeuristicTableExtractorAdapter(TableExtractorPort):
    """Runs an ordered chain of table strategies over extracted text.

    Noisy text (PDF text layers) tries delimiter-based header detection with
    tolerant rows, then the word-count pattern fallback.  Clean text (plain or
    TSV files) only runs the strict extractor.  The first strategy that yields
    rows wins; otherwise the last strategy's (empty) result is returned.
    Every strategy appends an ``ExtractionAttempt`` describing what it tried.
    """

    CHAINS: dict[str, tuple[Strategy, ...]] = {
        ORIGIN_NOISY: (delimited_header_strategy, pattern_frequency_strategy),
        ORIGIN_CLEAN: (strict_delimited_strategy,),
    }

    def __init__(self, thresholds: HeuristicThresholds | None = None) -> None:
        self._thresholds = thresholds or HeuristicThresholds()

    @property
    def thresholds(self) -> HeuristicThresholds:
        return self._thresholds

    def extract(self, text: str, origin: str) -> TableExtraction:
        chain = self.CHAINS.get((origin or '').strip().lower())
        if chain is None:
            raise ValueError(f'Unsupported text origin: {origin}')
        if not isinstance(text, str):
            raise TableProcessingError(
                f'Expected decoded text for table extraction, got {type(text).__name__}'
            )

        lines = normalize_lines(text)
        attempts: list[ExtractionAttempt] = []
        headers: list[str] = []
        for strategy in chain:
            attempt, headers, rows = strategy(lines, self._thresholds)
            attempts.append(attempt)
            if rows:
                return TableExtraction(
                    headers=list(dict.fromkeys(headers)),
                    rows=rows,
                    strategy=attempt.strategy,
                    attempts=attempts,
                )

        return TableExtraction(
            headers=list(dict.fromkeys(headers)),
            rows=[],
            strategy=None,
            attempts=attempts,
        )
