from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from packages.adapters.filetype.magic_file_type_detector import MagicFileTypeDetector
from packages.adapters.pdf.pypdf_parser_adapter import PypdfParserAdapter
from packages.adapters.structured.factory import create_structured_readers
from packages.adapters.tables.heuristic_table_extractor_adapter import (
    HeuristicTableExtractorAdapter,
)
from packages.adapters.tracing.jsonl_extraction_trace_logger import JsonlExtractionTraceLogger
from packages.application.use_cases.extract_table_data import (
    ExtractTableDataInput,
    extract_table_data_use_case,
)
from packages.domain.errors import TableExtractionError
from packages.domain.models import ORIGINS, HeuristicThresholds


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = HeuristicThresholds()
    parser = argparse.ArgumentParser(description='Extract a table from one document')
    parser.add_argument('--file', required=True, type=Path, help='Document to extract from')
    parser.add_argument('--declared-type', default=None, help='MIME type claimed by the uploader')
    parser.add_argument(
        '--text-origin',
        choices=ORIGINS,
        default=None,
        help='Skip format detection and read the file as text of this origin',
    )
    parser.add_argument('--pdf-mode', default='layout', help='PDF text extraction: layout|plain')
    parser.add_argument('--header-window', type=int, default=defaults.header_window)
    parser.add_argument('--min-header-tokens', type=int, default=defaults.min_header_tokens)
    parser.add_argument('--row-tolerance', type=int, default=defaults.row_tolerance)
    parser.add_argument('--min-row-tokens', type=int, default=defaults.min_row_tokens)
    parser.add_argument('--min-pattern-frequency', type=int, default=defaults.min_pattern_frequency)
    parser.add_argument('--min-pattern-tokens', type=int, default=defaults.min_pattern_tokens)
    parser.add_argument('--trace-file', type=Path, default=None, help='Append a JSONL trace line')
    return parser.parse_args(argv)


def _thresholds(args: argparse.Namespace) -> HeuristicThresholds:
    return HeuristicThresholds(
        header_window=args.header_window,
        min_header_tokens=args.min_header_tokens,
        row_tolerance=args.row_tolerance,
        min_row_tokens=args.min_row_tokens,
        min_pattern_frequency=args.min_pattern_frequency,
        min_pattern_tokens=args.min_pattern_tokens,
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if not args.file.is_file():
        print(f'ERROR: file not found: {args.file}')
        return 1

    table_extractor = HeuristicTableExtractorAdapter(_thresholds(args))

    if args.text_origin:
        try:
            text = args.file.read_text(encoding='utf-8-sig')
        except UnicodeDecodeError as exc:
            print(f'ERROR: {args.file} is not valid UTF-8: {exc.reason}')
            return 1
        extraction = table_extractor.extract(text, args.text_origin)
        payload = {
            'file': str(args.file),
            'origin': args.text_origin,
            'found': not extraction.is_empty(),
            'strategy': extraction.strategy,
            'headers': extraction.headers,
            'rows': extraction.rows,
            'attempts': [attempt.to_dict() for attempt in extraction.attempts],
        }
    else:
        trace_logger = JsonlExtractionTraceLogger(args.trace_file) if args.trace_file else None
        try:
            result = extract_table_data_use_case(
                ExtractTableDataInput(
                    file_path=args.file,
                    filename=args.file.name,
                    declared_type=args.declared_type,
                ),
                file_type_detector=MagicFileTypeDetector(),
                pdf_parser=PypdfParserAdapter(extraction_mode=args.pdf_mode),
                structured_readers=create_structured_readers(),
                table_extractor=table_extractor,
                trace_logger=trace_logger,
            )
        except TableExtractionError as exc:
            print(f'ERROR: {exc}')
            return 1
        payload = {
            'file': str(args.file),
            'file_type': result.file_type,
            'format_family': result.format_family,
            'found': not result.is_empty(),
            'strategy': result.strategy,
            'headers': result.headers,
            'rows': result.rows,
            'attempts': [attempt.to_dict() for attempt in result.attempts],
        }

    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0 if payload['found'] else 2


if __name__ == '__main__':
    raise SystemExit(main())
