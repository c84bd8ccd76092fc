from __future__ import annotations


class TableExtractionError(Exception):
    """Base class for failures raised while turning an upload into a table."""


class UnsupportedFileTypeError(TableExtractionError, ValueError):
    def __init__(self, file_type: str, message: str | None = None) -> None:
        self.file_type = file_type
        super().__init__(
            message
            or 'This file type is not supported for table extraction. '
            'Please upload Excel, CSV, PDF or other tabular documents.'
        )


class TableProcessingError(TableExtractionError, RuntimeError):
    """The file could not be read or decoded; distinct from "no table found"."""
