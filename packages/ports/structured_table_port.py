from __future__ import annotations

from abc import ABC, abstractmethod

from packages.domain.models import Row


class StructuredTableReaderPort(ABC):
    """Reads formats whose table layout is declared by the file itself."""

    @abstractmethod
    def read_rows(self, file_path: str, file_type: str) -> list[Row]:
        raise NotImplementedError
