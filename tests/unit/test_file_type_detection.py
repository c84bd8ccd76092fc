from __future__ import annotations

import zipfile
from pathlib import Path

import pytest
from docx import Document
from openpyxl import Workbook

from packages.adapters.filetype.magic_file_type_detector import (
    DOCX_MIME,
    XLSB_MIME,
    XLSX_MIME,
    MagicFileTypeDetector,
)
from packages.domain.file_formats import classify_format, is_image, is_supported_table_format

# Signature plus IHDR chunk of a 1x1 RGB image.
PNG_BYTES = (
    b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR'
    b'\x00\x00\x00\x01\x00\x00\x00\x01\x08\x02\x00\x00\x00\x90wS\xde'
)


@pytest.fixture()
def detector() -> MagicFileTypeDetector:
    return MagicFileTypeDetector()


def test_pdf_detected_from_content(tmp_path: Path, detector: MagicFileTypeDetector) -> None:
    path = tmp_path / 'upload.bin'
    path.write_bytes(b'%PDF-1.4\n%fake\n')
    assert detector.detect(str(path), 'upload.bin', 'application/octet-stream') == 'application/pdf'


def test_image_bytes_win_over_name_and_declared_type(
    tmp_path: Path, detector: MagicFileTypeDetector
) -> None:
    path = tmp_path / 'upload-2'
    path.write_bytes(PNG_BYTES)

    detected = detector.detect(str(path), 'table.csv', 'text/csv')

    assert detected == 'image/png'
    assert is_image(detected)


def test_ooxml_containers_detected_from_content(
    tmp_path: Path, detector: MagicFileTypeDetector
) -> None:
    workbook_path = tmp_path / 'sheet.bin'
    Workbook().save(workbook_path)
    document_path = tmp_path / 'doc.bin'
    Document().save(str(document_path))
    binary_workbook_path = tmp_path / 'binary.bin'
    with zipfile.ZipFile(binary_workbook_path, 'w') as archive:
        archive.writestr('[Content_Types].xml', '<Types/>')
        archive.writestr('xl/workbook.bin', b'\x83\x01\x00')

    assert detector.detect(str(workbook_path), 'sheet.bin') == XLSX_MIME
    assert detector.detect(str(document_path), 'doc.bin') == DOCX_MIME
    assert detector.detect(str(binary_workbook_path), 'binary.bin') == XLSB_MIME


@pytest.mark.parametrize(
    ('filename', 'expected'),
    [
        ('people.csv', 'text/csv'),
        ('people.tsv', 'text/tab-separated-values'),
        ('notes.txt', 'text/plain'),
    ],
)
def test_text_content_refined_by_file_name(
    tmp_path: Path, detector: MagicFileTypeDetector, filename: str, expected: str
) -> None:
    path = tmp_path / 'upload-1'
    path.write_bytes(b'a,b\n1,2\n')
    assert detector.detect(str(path), filename) == expected


def test_text_content_named_as_image_stays_text(
    tmp_path: Path, detector: MagicFileTypeDetector
) -> None:
    path = tmp_path / 'upload-3'
    path.write_bytes(b'a,b\n1,2\n')

    detected = detector.detect(str(path), 'photo.png', 'image/png')

    assert detected is not None
    assert detected.startswith('text/')


def test_declared_type_refines_unnamed_text(tmp_path: Path, detector: MagicFileTypeDetector) -> None:
    path = tmp_path / 'blob'
    path.write_bytes(b'a\tb\n1\t2\n')

    assert detector.detect(str(path), 'blob', 'text/plain; charset=utf-8') == 'text/plain'
    assert detector.detect(str(path), 'blob', 'application/octet-stream').startswith('text/')


def test_unrecognised_bytes_without_hints_are_unknown(
    tmp_path: Path, detector: MagicFileTypeDetector
) -> None:
    path = tmp_path / 'blob'
    path.write_bytes(b'\xa7\x1f\xe2\x9b' * 128)

    assert detector.detect(str(path), 'blob', 'application/octet-stream') is None
    assert detector.detect(str(path), 'legacy.xls') == 'application/vnd.ms-excel'


@pytest.mark.parametrize(
    ('mime', 'family'),
    [
        (XLSX_MIME, 'spreadsheet'),
        (XLSB_MIME, 'spreadsheet'),
        ('application/vnd.ms-excel', 'spreadsheet'),
        ('application/vnd.ms-excel.sheet.macroEnabled.12', 'spreadsheet'),
        ('text/csv', 'csv'),
        ('text/comma-separated-values', 'csv'),
        ('application/pdf', 'pdf'),
        ('application/msword', 'word'),
        (DOCX_MIME, 'word'),
        ('text/plain', 'text'),
        ('text/tab-separated-values', 'text'),
    ],
)
def test_supported_types_map_to_families(mime: str, family: str) -> None:
    assert is_supported_table_format(mime)
    assert classify_format(mime) == family


def test_unsupported_and_image_types() -> None:
    assert not is_supported_table_format('application/json')
    assert classify_format('application/json') is None
    assert not is_supported_table_format('image/png')
    assert is_image('image/png')
    assert not is_image('application/pdf')
