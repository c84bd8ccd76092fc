from __future__ import annotations

import mimetypes
import zipfile

import magic

from packages.domain.file_formats import OCTET_STREAM, is_image
from packages.ports.file_type_port import FileTypeDetectorPort

XLSX_MIME = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
XLSB_MIME = 'application/vnd.ms-excel.sheet.binary.macroEnabled.12'
DOCX_MIME = 'application/vnd.openxmlformats-officedocument.wordprocessingml.document'

_EXTRA_TYPES = {
    '.xlsx': XLSX_MIME,
    '.xlsm': 'application/vnd.ms-excel.sheet.macroEnabled.12',
    '.xlsb': XLSB_MIME,
    '.xls': 'application/vnd.ms-excel',
    '.docx': DOCX_MIME,
    '.doc': 'application/msword',
    '.tsv': 'text/tab-separated-values',
    '.csv': 'text/csv',
}

# libmagic answers that name a container or nothing at all.
_GENERIC_TYPES = {
    OCTET_STREAM,
    'application/zip',
    'application/x-zip-compressed',
    'application/cdfv2',
    'application/x-ole-storage',
    'inode/x-empty',
}

# Member that identifies each OOXML flavour inside the zip container.
_OOXML_PARTS = (
    ('word/document.xml', DOCX_MIME),
    ('xl/workbook.xml', XLSX_MIME),
    ('xl/workbook.bin', XLSB_MIME),
)


class MagicFileTypeDetector(FileTypeDetectorPort):
    """libmagic decides from the bytes.  The file name, then the uploader's
    declared type, only refine answers that are plain text or a bare container;
    they can never turn bytes libmagic recognised into something else."""

    def __init__(self) -> None:
        self._mimetypes = mimetypes.MimeTypes()
        for ext, mime in _EXTRA_TYPES.items():
            self._mimetypes.add_type(mime, ext)

    def detect(self, file_path: str, filename: str = '', declared_type: str | None = None) -> str | None:
        sniffed = magic.from_file(file_path, mime=True)
        lowered = sniffed.lower()

        if zipfile.is_zipfile(file_path):
            ooxml = _ooxml_type(file_path)
            if ooxml:
                return ooxml

        # OLE2 compound files: libmagic may only say CDFV2 (or CDFV2-corrupt).
        if lowered in _GENERIC_TYPES or lowered.startswith('application/cdfv2'):
            return self._hinted_type(filename or file_path, declared_type)

        if lowered.startswith('text/'):
            hinted = self._hinted_type(filename or file_path, declared_type)
            # Text bytes are never an image, whatever the name says.
            if hinted and not is_image(hinted):
                return hinted
        return sniffed

    def _hinted_type(self, name: str, declared_type: str | None) -> str | None:
        guessed, _ = self._mimetypes.guess_type(name, strict=False)
        if guessed:
            return guessed
        declared = (declared_type or '').split(';', 1)[0].strip().lower()
        if declared and declared != OCTET_STREAM:
            return declared
        return None


def _ooxml_type(file_path: str) -> str | None:
    with zipfile.ZipFile(file_path) as archive:
        names = set(archive.namelist())
    for part, mime in _OOXML_PARTS:
        if part in names:
            return mime
    return None
