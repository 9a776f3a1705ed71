"""Decides when blame annotations appear and disappear, and runs user commands."""

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .blame import Annotation, annotate
from .config import LensConfig
from .diff import DiffResult, retrieve_diff
from .formatter import format_annotation
from .git_ops import GitUnavailableError, locate
from .host import Host, TimerHandle
from .presenter import present

logger = logging.getLogger(__name__)


class State(enum.Enum):
    IDLE = "idle"
    PENDING_SHOW = "pending-show"
    VISIBLE = "visible"


class Mode(enum.Enum):
    NORMAL = "normal"
    INSERT = "insert"


@dataclass(frozen=True)
class Cursor:
    """A position in a buffer."""

    path: Path
    line: int  # 1-indexed


class TimerSlot:
    """
    Holds at most one pending timer of a given kind.

    Arming the slot cancels whatever it held before. Each arm gets a new
    generation number; a callback that fires after its generation has been
    superseded does nothing.
    """

    def __init__(self, host: Host, name: str):
        self._host = host
        self.name = name
        self._generation = 0
        self._handle: TimerHandle | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    @property
    def generation(self) -> int:
        return self._generation

    def arm(self, delay_ms: int, action: Callable[[], None]):
        self.cancel()
        generation = self._generation

        def fire():
            if generation != self._generation:
                logger.debug("Dropping stale %s timer (generation %d)", self.name, generation)
                return
            self._handle = None
            self._generation += 1
            action()

        self._handle = self._host.schedule(delay_ms, fire)

    def cancel(self):
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class BlameController:
    """
    Owns the configuration and the two timers (auto-show and hide).

    All host events and user commands go through one instance. Every call
    carries its buffer position explicitly.
    """

    def __init__(
        self,
        host: Host,
        config: LensConfig | None = None,
        locator=locate,
        annotator=annotate,
        differ=retrieve_diff,
    ):
        self.host = host
        self.config = config or LensConfig()
        self._locator = locator
        self._annotator = annotator
        self._differ = differ
        self._pending_show = TimerSlot(host, "show")
        self._hide = TimerSlot(host, "hide")
        self._visible = False

    @property
    def state(self) -> State:
        if self._pending_show.armed:
            return State.PENDING_SHOW
        if self._visible:
            return State.VISIBLE
        return State.IDLE

    def setup(self, **options):
        """Merge `options` over the current configuration."""
        self.config = self.config.merged(options)
        if not self.config.auto_show:
            self._reset()

    # Host events

    def cursor_settled(self, cursor: Cursor, mode: Mode = Mode.NORMAL):
        """The cursor has rested on a line for the host's dwell time."""
        if not self.config.auto_show or mode != Mode.NORMAL:
            return
        self._pending_show.arm(self.config.auto_show_delay, lambda: self._show(cursor))

    def cursor_moved(self):
        self._reset()

    def insert_entered(self):
        self._reset()

    def buffer_left(self):
        self._reset()

    # User commands

    def show_now(self, cursor: Cursor):
        """Show the annotation for `cursor` immediately."""
        self._pending_show.cancel()
        self._show(cursor)

    def show_diff(self, cursor: Cursor) -> DiffResult | None:
        """Open the diff of the commit that last touched the line at `cursor`."""
        if not self.config.show_diff:
            self.host.notify("Diff display is disabled")
            return None

        timeout = self.config.git_cmd_timeout
        try:
            location = self._locator(cursor.path, timeout)
            if location is None:
                logger.debug("%s is not in a repository", cursor.path)
                return None

            annotation = self._annotator(
                location.root, location.relative_path, cursor.line, timeout
            )
            if annotation is None:
                return None
            if not annotation.is_committed:
                self.host.notify("This line is not committed yet")
                return None

            result = self._differ(
                location.root, location.relative_path, annotation.commit_hash, timeout
            )
        except GitUnavailableError as e:
            logger.error("%s", e)
            self.host.notify(str(e), severity="error")
            return None

        if not result.has_content:
            self.host.notify(result.message)
            return result

        spec = present(
            result,
            self.host.viewport_size(),
            width=self.config.diff_window_width,
            height=self.config.diff_window_height,
            border=self.config.diff_window_border,
        )
        self.host.open_diff(spec)
        return result

    def toggle_auto_show(self) -> bool:
        enabled = not self.config.auto_show
        self.config = self.config.merged({"auto_show": enabled})
        if enabled:
            self.host.notify("Auto show enabled")
        else:
            self._reset()
            self.host.notify("Auto show disabled")
        return enabled

    # Internals

    def _lookup(self, cursor: Cursor) -> Annotation | None:
        timeout = self.config.git_cmd_timeout
        location = self._locator(cursor.path, timeout)
        if location is None:
            return None
        return self._annotator(location.root, location.relative_path, cursor.line, timeout)

    def _show(self, cursor: Cursor):
        try:
            annotation = self._lookup(cursor)
        except GitUnavailableError as e:
            logger.error("%s", e)
            self.host.notify(str(e), severity="error")
            return

        self._hide.cancel()
        self._clear()
        if annotation is None:
            logger.debug("No blame for %s:%d", cursor.path, cursor.line)
            return

        text = format_annotation(annotation, self.config.display)
        self.host.show_annotation(cursor.path, cursor.line, text, self.config.hl_group)
        self._visible = True
        self._hide.arm(self.config.show_time, self._clear)
        logger.debug("Showing blame for %s:%d", cursor.path, cursor.line)

    def _clear(self):
        self.host.clear_annotation()
        self._visible = False

    def _reset(self):
        self._pending_show.cancel()
        self._hide.cancel()
        self._clear()
