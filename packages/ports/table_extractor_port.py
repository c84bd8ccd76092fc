from __future__ import annotations

from abc import ABC, abstractmethod

from packages.domain.models import TableExtraction


class TableExtractorPort(ABC):
    @abstractmethod
    def extract(self, text: str, origin: str) -> TableExtraction:
        """Infer a table from ``text``; ``origin`` is ``'noisy'`` or ``'clean'``."""
        raise NotImplementedError
