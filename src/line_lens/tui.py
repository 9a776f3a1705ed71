"""TUI file viewer that shows blame annotations, using textual."""

from pathlib import Path

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, ScrollableContainer
from textual.screen import ModalScreen
from textual.timer import Timer
from textual.widgets import Static, TextArea

from .config import LensConfig
from .controller import BlameController, Cursor, Mode
from .host import Host, TimerHandle
from .presenter import RenderSpec

# How long the cursor must rest on a line before it counts as settled (ms)
DWELL_MS = 500

HELP_NORMAL = "b blame  d diff  a auto show  i insert  q quit"
HELP_INSERT = "-- INSERT --  esc normal mode"


def diff_text(lines: list[str]) -> Text:
    """Colour unified diff lines."""
    text = Text(no_wrap=True)

    for i, line in enumerate(lines):
        if line.startswith(("+++", "---", "diff ", "index ")):
            text.append(line, style="bold")
        elif line.startswith("+"):
            text.append(line, style="green")
        elif line.startswith("-"):
            text.append(line, style="red")
        elif line.startswith("@@"):
            text.append(line, style="cyan")
        else:
            text.append(line)

        if i < len(lines) - 1:
            text.append("\n")

    return text


class AnnotationBar(Static):
    """Widget to display the blame annotation for the cursor line."""

    def show_annotation(self, line: int, text: str, style: str):
        self.update(Text.assemble((f"{line:5d} │", "dim"), (text, style)))

    def clear(self):
        self.update("")


class DiffScreen(ModalScreen):
    """Read-only panel showing the diff of one commit."""

    DEFAULT_CSS = """
    DiffScreen {
        align: center middle;
    }

    #diff-panel {
        background: $surface;
        padding: 0 1;
    }

    #diff-body {
        width: auto;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close", show=True),
        Binding("q", "close", "Close", show=False),
    ]

    def __init__(self, spec: RenderSpec, **kwargs):
        super().__init__(**kwargs)
        self.spec = spec

    def compose(self) -> ComposeResult:
        yield ScrollableContainer(
            Static(diff_text(self.spec.lines), id="diff-body"),
            id="diff-panel",
        )

    def on_mount(self):
        panel = self.query_one("#diff-panel")
        # Border and padding take two cells on each axis
        panel.styles.width = self.spec.width + 4
        panel.styles.height = self.spec.height + 2
        panel.styles.border = (self.spec.border, "green")
        panel.border_title = self.spec.title

    def action_close(self):
        self.dismiss()


class _TextualTimer(TimerHandle):
    def __init__(self, timer: Timer):
        self._timer = timer

    def cancel(self):
        self._timer.stop()


class TextualHost(Host):
    """Host implementation backed by a LineLensApp."""

    def __init__(self, app: "LineLensApp"):
        self.app = app

    def schedule(self, delay_ms, callback):
        return _TextualTimer(self.app.set_timer(delay_ms / 1000, callback))

    def show_annotation(self, path, line, text, style):
        self.app.annotation_bar.show_annotation(line, text, style)

    def clear_annotation(self):
        self.app.annotation_bar.clear()

    def open_diff(self, spec):
        self.app.push_screen(DiffScreen(spec))

    def notify(self, message, severity="information"):
        self.app.notify(message, severity=severity)

    def viewport_size(self):
        return (self.app.size.width, self.app.size.height)


class LineLensApp(App):
    """TUI app for viewing a file with blame annotations."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #header-bar {
        height: 1;
        background: $primary;
        color: $text;
        text-align: center;
        padding: 0 1;
    }

    #buffer {
        height: 1fr;
    }

    #annotation-bar {
        height: 1;
        background: $surface;
        padding: 0 1;
    }

    #nav-help {
        height: 1;
        background: $surface;
        text-align: center;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("b", "show_blame", "Blame", show=True),
        Binding("d", "show_diff", "Diff", show=True),
        Binding("a", "toggle_auto_show", "Auto show", show=True),
        Binding("i", "insert_mode", "Insert", show=False),
        Binding("escape", "normal_mode", "Normal", show=False, priority=True),
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(self, file_path: Path, config: LensConfig | None = None, line: int = 1):
        super().__init__()
        self.file_path = Path(file_path).absolute()
        self.start_line = line
        self.mode = Mode.NORMAL
        self.controller = BlameController(TextualHost(self), config)
        self._dwell: Timer | None = None

    def compose(self) -> ComposeResult:
        # Kept as attributes: timers may fire while another screen is active
        self.source_area = TextArea(
            self._read_source(),
            read_only=True,
            show_line_numbers=True,
            id="buffer",
        )
        self.annotation_bar = AnnotationBar(id="annotation-bar")

        yield Static(f"File: {self.file_path}", id="header-bar")
        yield self.source_area
        yield self.annotation_bar
        yield Container(Static(HELP_NORMAL, id="help-text"), id="nav-help")

    def _read_source(self) -> str:
        try:
            return self.file_path.read_text(errors="replace")
        except FileNotFoundError:
            # New, never-saved file
            return ""

    def check_action(self, action: str, parameters) -> bool | None:
        # Escape only belongs to the buffer while editing
        if action == "normal_mode":
            return self.mode == Mode.INSERT
        return True

    def on_mount(self):
        self.source_area.cursor_location = (max(self.start_line - 1, 0), 0)
        self.source_area.focus()
        self._restart_dwell()

    @property
    def cursor(self) -> Cursor:
        row, _ = self.source_area.cursor_location
        return Cursor(self.file_path, row + 1)

    def _restart_dwell(self):
        if self._dwell is not None:
            self._dwell.stop()
        self._dwell = self.set_timer(DWELL_MS / 1000, self._cursor_settled)

    def _cursor_settled(self):
        self._dwell = None
        self.controller.cursor_settled(self.cursor, self.mode)

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged):
        self.controller.cursor_moved()
        self._restart_dwell()

    def on_descendant_blur(self, event: events.DescendantBlur):
        self.controller.buffer_left()

    def _set_help(self, text: str):
        self.query_one("#help-text", Static).update(text)

    def action_show_blame(self):
        self.controller.show_now(self.cursor)

    def action_show_diff(self):
        self.controller.show_diff(self.cursor)

    def action_toggle_auto_show(self):
        self.controller.toggle_auto_show()

    def action_insert_mode(self):
        if self.mode == Mode.INSERT:
            return
        self.mode = Mode.INSERT
        self.source_area.read_only = False
        self.controller.insert_entered()
        self._set_help(HELP_INSERT)

    def action_normal_mode(self):
        if self.mode == Mode.NORMAL:
            return
        self.mode = Mode.NORMAL
        self.source_area.read_only = True
        self._set_help(HELP_NORMAL)
        self._restart_dwell()


def run_tui(file_path: Path, config: LensConfig | None = None, line: int = 1):
    """Run the TUI app."""
    app = LineLensApp(file_path, config, line=line)
    app.run()
