from __future__ import annotations

from openpyxl import load_workbook

from packages.adapters.structured.grid_records import cell_text, records_from_grid
from packages.domain.models import Row
from packages.ports.structured_table_port import StructuredTableReaderPort


class OpenpyxlSheetReader(StructuredTableReaderPort):
    """First worksheet only; its first non-blank row supplies the headers."""

    def read_rows(self, file_path: str, file_type: str) -> list[Row]:
        _ = file_type
        workbook = load_workbook(file_path, read_only=True, data_only=True)
        try:
            if not workbook.worksheets:
                return []
            sheet = workbook.worksheets[0]
            grid = [
                [cell_text(value) for value in row]
                for row in sheet.iter_rows(values_only=True)
            ]
        finally:
            workbook.close()
        return records_from_grid(grid)
