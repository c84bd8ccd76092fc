from __future__ import annotations

import zipfile

import pandas as pd

from packages.adapters.structured.grid_records import cell_text, records_from_grid
from packages.domain.models import Row
from packages.ports.structured_table_port import StructuredTableReaderPort


class PandasLegacySheetReader(StructuredTableReaderPort):
    """First worksheet of a workbook openpyxl cannot open.

    BIFF ``.xls`` files go through the xlrd engine, binary ``.xlsb`` workbooks
    (a zip container) through pyxlsb.
    """

    def read_rows(self, file_path: str, file_type: str) -> list[Row]:
        _ = file_type
        frame = pd.read_excel(
            file_path,
            sheet_name=0,
            header=None,
            dtype=object,
            engine=legacy_engine(file_path),
        )
        grid = [
            [cell_text(None if pd.isna(value) else value) for value in record]
            for record in frame.itertuples(index=False, name=None)
        ]
        return records_from_grid(grid)


def legacy_engine(file_path: str) -> str:
    return 'pyxlsb' if zipfile.is_zipfile(file_path) else 'xlrd'
