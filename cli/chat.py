"""DreamLines — brainstorming chat with the creative assistant.

The assistant is stateless per turn: every send passes the whole message log
so far. The log is append-only and only ``/clear`` resets it to the greeting.
"""

import logging
from typing import Optional

from rich.markdown import Markdown
from rich.table import Table
from rich.text import Text

from agents.assistant import ChatAssistant
from cli.theme import get_console
from models.enums import ChatRole
from models.project import ChatMessage, now_ms

logger = logging.getLogger(__name__)

# ── Banner ────────────────────────────────────────────────────────────────

_BANNER_WORD: list[tuple[str, str]] = [
    ("D", "bright_blue"),
    ("r", "dodger_blue1"),
    ("e", "deep_sky_blue1"),
    ("a", "medium_purple3"),
    ("m", "purple"),
    ("L", "magenta"),
    ("i", "hot_pink"),
    ("n", "bright_red"),
    ("e", "red1"),
    ("s", "red"),
]


def _build_banner() -> Text:
    """Build the gradient DreamLines title."""
    text = Text(justify="center")
    for letter, color in _BANNER_WORD:
        text.append(letter, style=f"bold {color}")
    text.append("\ncreative assistant", style="dim")
    return text


def render_welcome(console):
    console.print(_build_banner())
    console.print()

    left = Text()
    left.append("Commands\n", style="bold bright_red")
    left.append("/help        ", style="cyan")
    left.append("show help\n", style="dim")
    left.append("/clear       ", style="cyan")
    left.append("start over\n", style="dim")
    left.append("/quit        ", style="cyan")
    left.append("leave\n", style="dim")

    right = Text()
    right.append("Try\n", style="bold bright_red")
    right.append('"Ideas for a dinosaur book"\n', style="dim")
    right.append('"Make my theme more exciting"\n', style="dim")

    table = Table(show_header=False, show_edge=False, box=None, padding=(0, 2))
    table.add_column(ratio=3)
    table.add_column(ratio=2)
    table.add_row(left, right)
    console.print(table)
    console.print()


def render_ai_response(console, text: str):
    """Render an assistant reply as Markdown."""
    console.print()
    console.print(Markdown(text))
    console.print()


# ── ChatSession ───────────────────────────────────────────────────────────

class ChatSession:
    """Holds the chat log and talks to the assistant."""

    def __init__(self, assistant: ChatAssistant, console=None):
        self.assistant = assistant
        self.console = console or get_console()
        self.messages: list[ChatMessage] = []
        self._seed()

    def _seed(self) -> None:
        self.messages = [ChatMessage(role=ChatRole.MODEL, text=self.assistant.greeting)]

    def _stamp(self) -> int:
        # ids are timestamps; keep them unique within fast exchanges
        ts = now_ms()
        if self.messages and ts <= self.messages[-1].timestamp:
            ts = self.messages[-1].timestamp + 1
        return ts

    async def send(self, user_message: str) -> ChatMessage:
        """Append the user's message, ask the assistant, append and render its reply."""
        history = list(self.messages)
        self.messages.append(ChatMessage(role=ChatRole.USER, text=user_message, timestamp=self._stamp()))

        text = await self.assistant.reply(history, user_message)
        reply = ChatMessage(role=ChatRole.MODEL, text=text, timestamp=self._stamp())
        self.messages.append(reply)

        self.console.print("AI>", style="bold cyan", end=" ")
        render_ai_response(self.console, text)
        return reply

    # ── Slash commands ────────────────────────────────────────────────

    def handle_command(self, cmd: str) -> Optional[str]:
        """Handle a slash command. Returns display text, or None to quit."""
        parts = cmd.strip().split(maxsplit=1)
        command = parts[0].lower() if parts else ""

        if command in ("/quit", "/exit"):
            return None

        if command == "/help":
            return self._cmd_help()

        if command == "/clear":
            return self._cmd_clear()

        return f"[error]Unknown command: {command}[/]\nType /help for the command list"

    def _cmd_help(self) -> str:
        lines = [
            "[bold]Commands[/]",
            "",
            "  [accent]/help[/]    show this help",
            "  [accent]/quit[/]    leave the chat",
            "  [accent]/clear[/]   forget the conversation",
            "",
            "Ask for theme ideas, scene ideas, or a better wording for your theme.",
        ]
        return "\n".join(lines)

    def _cmd_clear(self) -> str:
        self._seed()
        return "[success]Conversation cleared[/]"

    # ── Main loop ─────────────────────────────────────────────────────

    async def run(self):
        """Plain terminal chat loop."""
        render_welcome(self.console)
        self.console.print(f"[accent]AI>[/] {self.messages[0].text}\n")

        while True:
            try:
                user_input = self.console.input("[bright_blue]>[/] ").strip()
            except (EOFError, KeyboardInterrupt):
                self.console.print("\n[muted]Bye![/]")
                break

            if not user_input:
                continue

            if user_input.startswith("/"):
                result = self.handle_command(user_input)
                if result is None:
                    self.console.print("[muted]Bye![/]")
                    break
                self.console.print(result)
                self.console.print()
                continue

            self.console.print("[muted]Thinking...[/]")
            await self.send(user_input)
