"""
Rich rendering for snippets and AI replies.
"""

from rich.console import Console, Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from devmind.state import AIExchange
from devmind.store.models import LANGUAGES, Snippet

console = Console()


def _lexer(language: str) -> str:
    # Language tags double as pygments lexer names
    return language or "text"


def show_snippet_table(snippets: list[Snippet], query: str = "") -> None:
    """Print snippets as a table, newest first."""
    if not snippets:
        if query:
            console.print(f"[dim]No snippets match '{query}'[/dim]")
        else:
            console.print("[dim]No snippets yet. Add one with 'devmind add'.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold blue")
    table.add_column("Language", style="dim")
    table.add_column("Tags", style="green")
    table.add_column("Lines", justify="right", style="dim")

    for snippet in snippets:
        table.add_row(
            str(snippet.id),
            snippet.title,
            snippet.language.upper(),
            ", ".join(snippet.tags) or "-",
            str(len(snippet.code.splitlines())),
        )

    console.print(table)


def show_snippet(snippet: Snippet) -> None:
    """Print one snippet with syntax highlighting."""
    subtitle = ", ".join(f"#{t}" for t in snippet.tags) or None
    console.print(
        Panel(
            Syntax(snippet.code, _lexer(snippet.language), theme="monokai", line_numbers=True),
            title=f"[bold blue]{snippet.title}[/bold blue] [dim]{snippet.language.upper()}[/dim]",
            subtitle=subtitle,
            border_style="blue",
        )
    )


def show_languages() -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Tag", style="cyan")
    table.add_column("Name")
    for tag, name in LANGUAGES:
        table.add_row(tag, name)
    console.print(table)


def show_exchange(exchange: AIExchange) -> None:
    """Print an AI reply, framed as an error when the request failed."""
    if exchange.is_error:
        console.print(
            Panel(
                Text(exchange.response_text or ""),
                title="[bold red]AI Error[/bold red]",
                border_style="red",
            )
        )
        return

    scope = exchange.scope
    where = (
        f"selection {scope.range.start}-{scope.range.end}" if scope.range is not None else "whole document"
    )
    body = [Markdown(exchange.response_text or "")]
    if exchange.extracted_code is not None:
        body.append(Text(""))
        body.append(Text(f"Suggested replacement for {where}:", style="bold"))
        body.append(Syntax(exchange.extracted_code, _lexer(exchange.language), theme="monokai"))

    console.print(
        Panel(
            Group(*body),
            title=f"[bold cyan]AI {exchange.mode}[/bold cyan] [dim]({where})[/dim]",
            border_style="cyan",
        )
    )
