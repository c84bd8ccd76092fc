from __future__ import annotations


FORMAT_SPREADSHEET = 'spreadsheet'
FORMAT_CSV = 'csv'
FORMAT_PDF = 'pdf'
FORMAT_WORD = 'word'
FORMAT_TEXT = 'text'

OCTET_STREAM = 'application/octet-stream'

SUPPORTED_TABLE_MIME_TYPES = (
    # Excel
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'application/vnd.ms-excel.sheet.macroEnabled.12',
    'application/vnd.ms-excel.sheet.binary.macroEnabled.12',
    # CSV / TSV
    'text/csv',
    'text/comma-separated-values',
    'text/tab-separated-values',
    # PDF
    'application/pdf',
    # Word
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    # Plain text that may hold a delimited table
    'text/plain',
)

# Families whose text goes through the heuristic engine rather than a reader.
TEXT_FAMILIES = (FORMAT_PDF, FORMAT_TEXT)


def is_supported_table_format(mime_type: str) -> bool:
    lowered = mime_type.lower()
    return any(fmt.lower() in lowered for fmt in SUPPORTED_TABLE_MIME_TYPES)


def is_image(mime_type: str) -> bool:
    return mime_type.lower().startswith('image/')


def classify_format(mime_type: str) -> str | None:
    lowered = mime_type.lower()
    if any(marker in lowered for marker in ('spreadsheetml', 'excel', 'xlsx', 'xls')):
        return FORMAT_SPREADSHEET
    if 'csv' in lowered or 'comma-separated' in lowered:
        return FORMAT_CSV
    if 'pdf' in lowered:
        return FORMAT_PDF
    if 'docx' in lowered or 'word' in lowered:
        return FORMAT_WORD
    if 'text/plain' in lowered or 'tsv' in lowered or 'tab-separated' in lowered:
        return FORMAT_TEXT
    return None
