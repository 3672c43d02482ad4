"""Terminal chat surface."""

import asyncio

from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from turix.chat.session import EXAMPLE_TASKS, ChatMessage, ChatSession
from turix.config import Configuration

console = Console()

EXIT_COMMANDS = {"/exit", "/quit", "exit", "quit"}


def _render_message(message: ChatMessage) -> None:
    if message.is_user:
        console.print(f"[dim]{message.time_label}[/dim] [bold blue]You:[/bold blue] {message.content}")
    else:
        console.print(Panel(
            message.content,
            title=f"TuriX [dim]{message.time_label}[/dim]",
            title_align="left",
            border_style="cyan",
            width=70,
        ))


def run_chat(config: Configuration | None = None, session: ChatSession | None = None) -> None:
    """Read-eval loop over a ChatSession until the user exits."""
    session = session or ChatSession()
    examples = "\n".join(f"  - {task}" for task in EXAMPLE_TASKS)
    brain = f"\n[dim]Brain: {config.brain_llm.provider} / {config.brain_llm.model_name}[/dim]" if config else ""
    console.print(Panel(
        "[bold]Welcome to TuriX[/bold]\n"
        "Ask me to perform tasks on your desktop.\n\n"
        f"Example tasks:\n{examples}\n\n"
        f"[dim]Type /exit to leave.[/dim]{brain}",
        title="TuriX",
        border_style="blue",
        width=70,
    ))

    while True:
        try:
            text = Prompt.ask("\n[bold]Message[/bold]").strip()
        except (KeyboardInterrupt, EOFError):
            console.print()
            return
        if text.lower() in EXIT_COMMANDS:
            return
        if not session.can_send(text):
            continue
        try:
            with console.status("[bold cyan]Thinking...[/bold cyan]", spinner="dots"):
                reply = asyncio.run(session.send(text))
        except Exception as e:
            logger.error(f"Chat responder failed: {e}")
            console.print(f"[red]Could not get a reply:[/red] {e}")
            continue
        if reply:
            _render_message(reply)
