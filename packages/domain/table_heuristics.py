"""Heuristics that recover a flat table from text with no declared schema.

Noisy text (PDF text layers) goes through header detection, tolerant row
extraction and, failing that, the word-count pattern fallback.  Clean text
(plain/TSV files) goes through the strict extractor only.  Every function here
is pure; "no table" is always an empty result, never an exception.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
import re

from packages.domain.models import (
    DELIMITER_COMMA,
    DELIMITER_SEMICOLON,
    DELIMITER_SPACE_RUN,
    DELIMITER_TAB,
    DELIMITER_WHITESPACE,
    HEADER_DELIMITERS,
    HeaderCandidate,
    HeuristicThresholds,
    Row,
)

DEFAULT_THRESHOLDS = HeuristicThresholds()

_SPACE_RUN = re.compile(r' {2,}')

_LITERAL_SEPARATORS = {
    DELIMITER_COMMA: ',',
    DELIMITER_TAB: '\t',
    DELIMITER_SEMICOLON: ';',
}


def normalize_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.strip()]


def split_tokens(line: str, delimiter: str, *, drop_empty: bool) -> list[str]:
    """Split ``line`` on ``delimiter`` and trim every token."""
    if delimiter == DELIMITER_SPACE_RUN:
        parts = _SPACE_RUN.split(line)
    elif delimiter == DELIMITER_WHITESPACE:
        parts = line.split()
    elif delimiter in _LITERAL_SEPARATORS:
        parts = line.split(_LITERAL_SEPARATORS[delimiter])
    else:
        raise ValueError(f'Unsupported delimiter: {delimiter}')

    tokens = [part.strip() for part in parts]
    if drop_empty:
        tokens = [token for token in tokens if token]
    return tokens


def build_row(headers: list[str], tokens: list[str]) -> Row:
    # zip stops at the shorter side: short rows omit trailing headers,
    # long rows lose their trailing tokens.
    row: Row = {}
    for header, value in zip(headers, tokens):
        row[header] = value
    return row


def column_headers(width: int) -> list[str]:
    return [f'Column{idx}' for idx in range(1, width + 1)]


# ------------------------------------------------------------ noisy text


def header_candidates(lines: list[str], header_window: int) -> Iterator[HeaderCandidate]:
    """Yield header hypotheses in tie-break order: delimiter first, then line."""
    window = lines[: max(0, min(header_window, len(lines)))]
    for delimiter in HEADER_DELIMITERS:
        for line_index, line in enumerate(window):
            yield HeaderCandidate(
                line_index=line_index,
                delimiter=delimiter,
                headers=split_tokens(line, delimiter, drop_empty=True),
            )


def detect_header(
    lines: list[str],
    thresholds: HeuristicThresholds = DEFAULT_THRESHOLDS,
) -> HeaderCandidate | None:
    best: HeaderCandidate | None = None
    for candidate in header_candidates(lines, thresholds.header_window):
        if best is None or candidate.token_count > best.token_count:
            best = candidate

    if best is None or best.token_count < thresholds.min_header_tokens:
        return None
    return best


def row_token_bounds(header_count: int, thresholds: HeuristicThresholds) -> tuple[int, int]:
    low = max(thresholds.min_row_tokens, header_count - thresholds.row_tolerance)
    high = header_count + thresholds.row_tolerance
    return low, high


def extract_delimited_rows(
    lines: list[str],
    candidate: HeaderCandidate,
    thresholds: HeuristicThresholds = DEFAULT_THRESHOLDS,
) -> list[Row]:
    low, high = row_token_bounds(candidate.token_count, thresholds)
    # Tab exports keep empty fields; comma/space splits of PDF text do not.
    drop_empty = candidate.delimiter != DELIMITER_TAB

    rows: list[Row] = []
    for line in lines[candidate.line_index + 1 :]:
        tokens = split_tokens(line, candidate.delimiter, drop_empty=drop_empty)
        if low <= len(tokens) <= high:
            rows.append(build_row(candidate.headers, tokens))
    return rows


def word_count_histogram(lines: list[str]) -> Counter[int]:
    # Counter keeps first-seen order, which settles frequency ties.
    return Counter(len(line.split()) for line in lines)


def select_pattern_width(
    histogram: Counter[int],
    thresholds: HeuristicThresholds = DEFAULT_THRESHOLDS,
) -> int | None:
    best_width = 0
    best_frequency = 0
    for width, frequency in histogram.items():
        if width < thresholds.min_pattern_tokens:
            continue
        if frequency > best_frequency:
            best_width = width
            best_frequency = frequency

    if best_frequency < thresholds.min_pattern_frequency:
        return None
    return best_width


def extract_pattern_rows(
    lines: list[str],
    thresholds: HeuristicThresholds = DEFAULT_THRESHOLDS,
) -> tuple[list[str], list[Row]]:
    """Fallback for noisy text: the most frequent word count defines the table."""
    width = select_pattern_width(word_count_histogram(lines), thresholds)
    if width is None:
        return [], []

    headers = column_headers(width)
    rows: list[Row] = []
    for line in lines:
        words = line.split()
        if len(words) == width:
            rows.append(build_row(headers, words))
    return headers, rows


# ------------------------------------------------------------ clean text


def choose_strict_delimiter(first_line: str) -> str:
    if '\t' in first_line:
        return DELIMITER_TAB
    if ',' in first_line:
        return DELIMITER_COMMA
    if ';' in first_line:
        return DELIMITER_SEMICOLON
    return DELIMITER_WHITESPACE


def extract_strict_rows(lines: list[str]) -> tuple[list[str], list[Row]]:
    if len(lines) < 2:
        return [], []

    delimiter = choose_strict_delimiter(lines[0])
    # An empty field between two literal delimiters is a real (empty) header.
    drop_empty = delimiter == DELIMITER_WHITESPACE
    headers = split_tokens(lines[0], delimiter, drop_empty=drop_empty)

    rows: list[Row] = []
    for line in lines[1:]:
        tokens = split_tokens(line, delimiter, drop_empty=drop_empty)
        if len(tokens) == len(headers):
            rows.append(build_row(headers, tokens))
    return headers, rows
