from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from packages.domain.models import Row

EMPTY_HEADER = '__EMPTY'


def cell_text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'TRUE' if value else 'FALSE'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value).strip()


def unique_headers(cells: list[str]) -> list[str]:
    """Blank headers become ``__EMPTY``; repeats get ``_1``, ``_2`` suffixes."""
    used: set[str] = set()
    suffixes: dict[str, int] = {}
    headers: list[str] = []
    for cell in cells:
        base = cell.strip() or EMPTY_HEADER
        name = base
        n = suffixes.get(base, 0)
        while name in used:
            n += 1
            name = f'{base}_{n}'
        suffixes[base] = n
        used.add(name)
        headers.append(name)
    return headers


def records_from_grid(grid: list[list[str]]) -> list[Row]:
    """First non-blank row is the header; blank cells are left out of records."""
    header_idx = next((idx for idx, row in enumerate(grid) if any(c.strip() for c in row)), None)
    if header_idx is None:
        return []

    width = max(len(row) for row in grid)
    header_cells = list(grid[header_idx]) + [''] * (width - len(grid[header_idx]))
    headers = unique_headers(header_cells)

    records: list[Row] = []
    for raw in grid[header_idx + 1 :]:
        record: Row = {}
        for header, value in zip(headers, raw):
            if value != '':
                record[header] = value
        if record:
            records.append(record)
    return records
