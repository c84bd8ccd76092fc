from __future__ import annotations

from abc import ABC, abstractmethod


class FileTypeDetectorPort(ABC):
    @abstractmethod
    def detect(self, file_path: str, filename: str = '', declared_type: str | None = None) -> str | None:
        raise NotImplementedError
