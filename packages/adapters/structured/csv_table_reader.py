from __future__ import annotations

import csv

from packages.adapters.structured.grid_records import records_from_grid
from packages.domain.models import Row
from packages.ports.structured_table_port import StructuredTableReaderPort


class CsvTableReader(StructuredTableReaderPort):
    def read_rows(self, file_path: str, file_type: str) -> list[Row]:
        _ = file_type
        with open(file_path, 'r', encoding='utf-8-sig', newline='') as fh:
            grid = [[cell.strip() for cell in row] for row in csv.reader(fh)]
        return records_from_grid(grid)
