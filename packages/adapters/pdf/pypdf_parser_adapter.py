from __future__ import annotations

import warnings

from pypdf import PdfReader
from pypdf.errors import PdfReadWarning

from packages.ports.pdf_parser_port import ParsedPdfPage, PdfParserPort


class PypdfParserAdapter(PdfParserPort):
    def __init__(self, extraction_mode: str = 'layout') -> None:
        normalized = extraction_mode.strip().lower()
        if normalized not in {'layout', 'plain'}:
            raise ValueError(f'Unsupported PDF extraction mode: {extraction_mode}')
        self._extraction_mode = normalized

    def parse(self, pdf_path: str) -> list[ParsedPdfPage]:
        reader = PdfReader(pdf_path)
        pages: list[ParsedPdfPage] = []

        for idx, page in enumerate(reader.pages, start=1):
            pages.append(ParsedPdfPage(page_number=idx, text=self._page_text(page)))

        return pages

    def _page_text(self, page) -> str:
        if self._extraction_mode == 'plain':
            return page.extract_text() or ''
        # Layout mode keeps the 2+ space gaps between columns that the
        # space-run delimiter relies on; some pages (e.g. malformed content
        # streams) only survive the default extractor.
        try:
            with warnings.catch_warnings():
                warnings.simplefilter('ignore', PdfReadWarning)
                return page.extract_text(extraction_mode='layout') or ''
        except Exception:
            return page.extract_text() or ''
