from __future__ import annotations

import zipfile

from packages.adapters.structured.openpyxl_sheet_reader import OpenpyxlSheetReader
from packages.adapters.structured.pandas_legacy_sheet_reader import PandasLegacySheetReader
from packages.domain.models import Row
from packages.ports.structured_table_port import StructuredTableReaderPort


class ExcelWorkbookReader(StructuredTableReaderPort):
    """openpyxl for OOXML workbooks (.xlsx/.xlsm), the legacy reader otherwise."""

    def __init__(
        self,
        ooxml_reader: StructuredTableReaderPort | None = None,
        legacy_reader: StructuredTableReaderPort | None = None,
    ) -> None:
        self._ooxml_reader = ooxml_reader or OpenpyxlSheetReader()
        self._legacy_reader = legacy_reader or PandasLegacySheetReader()

    def read_rows(self, file_path: str, file_type: str) -> list[Row]:
        if is_ooxml_workbook(file_path):
            return self._ooxml_reader.read_rows(file_path, file_type)
        return self._legacy_reader.read_rows(file_path, file_type)


def is_ooxml_workbook(file_path: str) -> bool:
    if not zipfile.is_zipfile(file_path):
        return False
    with zipfile.ZipFile(file_path) as archive:
        return 'xl/workbook.xml' in archive.namelist()
