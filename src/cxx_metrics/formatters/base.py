"""Base formatter interface for cxx-metrics output rendering."""

import io
from abc import ABC, abstractmethod
from typing import Iterable, TextIO

from ..analysis import FileAnalysis

RECORD_COLUMNS = ("module", "file", "name", "args", "lines", "mccabe")


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, analyses: Iterable[FileAnalysis], stream: TextIO) -> None:
        """Write file outcomes to ``stream``.

        ``analyses`` may be a lazy iterator; streaming formatters write each
        file as soon as it arrives.
        """

    def format(self, analyses: Iterable[FileAnalysis]) -> str:
        """Return the formatted output as a string."""
        output = io.StringIO()
        self.render(analyses, output)
        return output.getvalue()
