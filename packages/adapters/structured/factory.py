from __future__ import annotations

from packages.adapters.structured.csv_table_reader import CsvTableReader
from packages.adapters.structured.docx_table_reader import DocxTableReader
from packages.adapters.structured.excel_workbook_reader import ExcelWorkbookReader
from packages.domain.file_formats import FORMAT_CSV, FORMAT_SPREADSHEET, FORMAT_WORD
from packages.ports.structured_table_port import StructuredTableReaderPort


def create_structured_readers() -> dict[str, StructuredTableReaderPort]:
    return {
        FORMAT_SPREADSHEET: ExcelWorkbookReader(),
        FORMAT_CSV: CsvTableReader(),
        FORMAT_WORD: DocxTableReader(),
    }
