"""Turn a DiffResult into something a host can display."""

from dataclasses import dataclass

from rich.cells import cell_len

from .diff import DiffResult

# Auto-sized panels take at most this share of the viewport
VIEWPORT_FRACTION = 0.8


@dataclass(frozen=True)
class RenderSpec:
    """What the host needs to open a diff panel."""

    lines: list[str]
    title: str
    width: int
    height: int
    border: str = "round"


def _auto_size(content: int, viewport: int) -> int:
    return max(1, min(content, int(viewport * VIEWPORT_FRACTION)))


def present(
    result: DiffResult,
    viewport: tuple[int, int],
    width: int = 0,
    height: int = 0,
    border: str = "round",
) -> RenderSpec:
    """
    Build the RenderSpec for a diff panel.

    A width or height of 0 is computed from the content, capped at 80% of
    the viewport. Any other value is used as given.
    """
    viewport_width, viewport_height = viewport
    lines = list(result.lines)

    if width == 0:
        longest = max((cell_len(line) for line in lines), default=0)
        width = _auto_size(longest, viewport_width)
    if height == 0:
        height = _auto_size(len(lines), viewport_height)

    return RenderSpec(
        lines=lines,
        title=f"Diff for {result.target_hash[:7]}",
        width=width,
        height=height,
        border=border,
    )
