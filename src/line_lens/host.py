"""Interface to the program hosting the annotations (editor, TUI, ...)."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path

from .presenter import RenderSpec


class TimerHandle(ABC):
    """A scheduled callback that can be cancelled before it fires."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop the timer. Does nothing if it has already fired."""
        pass


class Host(ABC):
    """Abstract base class for annotation hosts."""

    @abstractmethod
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        """Call `callback` once after `delay_ms` milliseconds."""
        pass

    @abstractmethod
    def show_annotation(self, path: Path, line: int, text: str, style: str) -> None:
        """Display `text` next to `line` (1-based) of the buffer for `path`."""
        pass

    @abstractmethod
    def clear_annotation(self) -> None:
        """Remove the displayed annotation, if any."""
        pass

    @abstractmethod
    def open_diff(self, spec: RenderSpec) -> None:
        """Open a read-only, dismissable panel showing a diff."""
        pass

    @abstractmethod
    def notify(self, message: str, severity: str = "information") -> None:
        """Tell the user something. Severity is "information" or "error"."""
        pass

    @abstractmethod
    def viewport_size(self) -> tuple[int, int]:
        """Current (width, height) of the host's display, in cells."""
        pass
