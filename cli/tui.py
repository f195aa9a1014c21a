"""DreamLines TUI — Textual-based chat interface.

Layout:
  ┌─ banner (static) ───────────────────────────────┐
  ├─ status bar (static) ───────────────────────────┤
  ├─ chat log (scrollable, fills remaining space) ──┤
  └─ input box (fixed at bottom) ───────────────────┘
"""

import logging

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Input, RichLog, Static

logger = logging.getLogger(__name__)

_PLACEHOLDER = "Ask for ideas... (/help for commands)"


class _TUIConsole:
    """Proxy that redirects console.print() calls to Textual's RichLog.

    Passed to ChatSession so replies appear inside the TUI chat area instead
    of raw terminal output. The chat worker runs on the app's event loop, so
    writes go straight to the log.
    """

    def __init__(self, app: "DreamLinesTUI"):
        self._app = app

    def input(self, prompt: str = "") -> str:
        raise RuntimeError("TUI mode: use the Input widget, not console.input()")

    def print(self, *args, style: str = None, end: str = "\n", markup: bool = True, **kwargs) -> None:
        if not args:
            return
        if isinstance(args[0], str):
            text = args[0]
            if end != "\n":
                # inline prefixes such as "AI>" are folded into the next write
                self._app._pending_prefix = f"[{style}]{text}[/]" if style else text
                return
            content: object = f"[{style}]{text}[/]" if style else text
        else:
            content = args[0]
        self._app._log_write(content)


class DreamLinesTUI(App):
    """DreamLines Textual TUI application."""

    CSS = """
    Screen {
        background: black;
        layers: base;
    }

    #banner {
        height: auto;
        background: #121212;
        border: tall #3a3a3a;
        padding: 1 2;
        content-align: center middle;
    }

    #status {
        height: 1;
        padding: 0 2;
        color: #767676;
        background: transparent;
    }

    #chat_log {
        height: 1fr;
        border: round #4e4e4e;
        padding: 0 1;
        background: transparent;
        scrollbar-gutter: stable;
    }

    #input_box {
        height: 3;
        border: round dodgerblue;
        background: transparent;
        padding: 0 1;
        margin-top: 0;
    }

    Input:focus {
        border: round royalblue;
    }
    """

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+l", "clear_chat", "Clear"),
        Binding("escape", "quit", "Quit"),
    ]

    def __init__(self, session, model: str = ""):
        super().__init__()
        self.session = session
        self.model = model
        self._pending_prefix = ""

    # ── Layout ────────────────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        from cli.chat import _build_banner
        yield Static(_build_banner(), id="banner")
        yield Static(f"[dim]~/dreamlines    chat-mode    {self.model}[/]", id="status")
        yield RichLog(id="chat_log", markup=True, highlight=True, wrap=True)
        yield Input(placeholder=_PLACEHOLDER, id="input_box")

    def on_mount(self) -> None:
        self.session.console = _TUIConsole(self)

        for name in ("google_genai", "httpx"):
            logging.getLogger(name).setLevel(logging.WARNING)

        log = self.query_one("#chat_log", RichLog)
        log.write(f"[bold cyan]AI>[/] {self.session.messages[0].text}")
        log.write("[dim]/help  /clear  /quit[/]")
        self.query_one("#input_box", Input).focus()

    # ── Helpers ───────────────────────────────────────────────────────────

    def _log_write(self, content) -> None:
        log = self.query_one("#chat_log", RichLog)
        if self._pending_prefix:
            log.write(self._pending_prefix)
            self._pending_prefix = ""
        log.write(content)

    # ── Input handling ────────────────────────────────────────────────────

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        user_msg = event.value.strip()
        if not user_msg:
            return

        inp = self.query_one("#input_box", Input)
        log = self.query_one("#chat_log", RichLog)
        inp.value = ""

        log.write(f"[bold bright_blue]You>[/] {user_msg}")

        if user_msg.startswith("/"):
            result = self.session.handle_command(user_msg)
            if result is None:
                self.exit()
                return
            if user_msg.strip().lower() == "/clear":
                log.clear()
            log.write(result)
            return

        inp.disabled = True
        inp.placeholder = "Thinking..."
        self._run_ai(user_msg)

    @work(exclusive=True)
    async def _run_ai(self, user_msg: str) -> None:
        # ChatAssistant.reply never raises for provider errors
        try:
            await self.session.send(user_msg)
        finally:
            self._on_ai_done()

    def _on_ai_done(self) -> None:
        inp = self.query_one("#input_box", Input)
        inp.disabled = False
        inp.placeholder = _PLACEHOLDER
        inp.focus()

    # ── Actions ───────────────────────────────────────────────────────────

    def action_quit(self) -> None:
        self.exit()

    def action_clear_chat(self) -> None:
        self.session.handle_command("/clear")
        self.query_one("#chat_log", RichLog).clear()
        self._log_write("[dim]Conversation cleared[/]")
