"""Base classes for key-file selector plugins."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..models import SourceFile


class KeyFileSelector(ABC):
    """Contract for strategies that pick which files get full extraction."""

    @abstractmethod
    def select(self, files: Sequence[SourceFile]) -> List[SourceFile]:
        """Return the files worth scanning, most relevant first."""
