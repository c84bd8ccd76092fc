from __future__ import annotations

import zipfile

from docx import Document

from packages.domain.errors import UnsupportedFileTypeError
from packages.domain.models import Row
from packages.ports.structured_table_port import StructuredTableReaderPort

LEGACY_WORD_MESSAGE = (
    'Legacy Word (.doc) documents are not supported for table extraction. '
    'Save the document as .docx and upload it again.'
)


class DocxTableReader(StructuredTableReaderPort):
    """Rows of every DOCX table, concatenated in document order.

    The first row of each table is its header row.  Tables without at least one
    data row are skipped, and data rows whose cell count differs from the
    header count are dropped.
    """

    def read_rows(self, file_path: str, file_type: str) -> list[Row]:
        if not zipfile.is_zipfile(file_path):
            raise UnsupportedFileTypeError(file_type, LEGACY_WORD_MESSAGE)
        document = Document(file_path)
        records: list[Row] = []

        for table in document.tables:
            table_rows = list(table.rows)
            if len(table_rows) < 2:
                continue
            headers = [cell.text.strip() for cell in table_rows[0].cells]
            if not headers:
                continue
            for row in table_rows[1:]:
                cells = [cell.text.strip() for cell in row.cells]
                if len(cells) != len(headers):
                    continue
                records.append(dict(zip(headers, cells)))

        return records
