"""
DevMind CLI - Typer Commands

Snippet management plus AI explain/refactor on files.
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.prompt import Confirm

from devmind.ai.client import AIClient, ping_sync
from devmind.cli.display import console, show_exchange, show_languages, show_snippet, show_snippet_table
from devmind.config import DevMindConfig, get_api_key, load_config
from devmind.editor.document import TextDocument
from devmind.exceptions import ConfigError
from devmind.logging import setup_console_logging
from devmind.session import Session
from devmind.store.models import guess_language
from devmind.store.repository import STATUS_LOAD_FAILED, SnippetStore

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="devmind",
    help="Personal code-snippet manager with AI explain/refactor",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Personal code-snippet manager with AI explain/refactor."""
    setup_console_logging(verbose=verbose)


def _load_config() -> DevMindConfig:
    try:
        return load_config()
    except ConfigError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(1)


def _open_session(config: DevMindConfig, editor: TextDocument | None = None,
                  ai_client: AIClient | None = None, writable: bool = False) -> Session:
    """Create a session and load the snippet file."""
    store = SnippetStore(config.data_path, require_non_empty_code=config.require_non_empty_code)
    session = Session(store, editor or TextDocument(), ai_client=ai_client, config=config)
    status = session.start()

    if status == STATUS_LOAD_FAILED:
        console.print(f"[bold red]{status}:[/bold red] {store.last_error}")
        # Writing now would replace the unreadable file with an empty list
        if writable:
            raise typer.Exit(1)
    return session


def _read_code(code: str | None, file: Path | None) -> str | None:
    if file is not None:
        try:
            return file.read_text(encoding="utf-8")
        except OSError as e:
            console.print(f"[bold red]Cannot read {file}:[/bold red] {e}")
            raise typer.Exit(1)
    return code


def _finish_save(session: Session, ok: bool, success_message: str) -> None:
    status = session.context.current_status()
    if not ok:
        console.print(f"[bold red]Error:[/bold red] {status}")
        raise typer.Exit(1)
    if session.store.last_error is not None:
        console.print(f"[bold red]{status}:[/bold red] {session.store.last_error}")
        raise typer.Exit(1)
    console.print(f"[green]{success_message}[/green]")


@app.command(name="list")
def list_snippets(
    query: str = typer.Option("", "--query", "-q", help="Filter by title, code or tag"),
) -> None:
    """List snippets, newest first."""
    session = _open_session(_load_config())
    show_snippet_table(session.visible_snippets(query), query=query)


@app.command()
def show(snippet_id: int = typer.Argument(..., help="Snippet ID")) -> None:
    """Show one snippet with syntax highlighting."""
    session = _open_session(_load_config())
    snippet = session.store.get(snippet_id)
    if snippet is None:
        console.print(f"[red]No snippet with ID {snippet_id}[/red]")
        raise typer.Exit(1)
    show_snippet(snippet)


@app.command()
def add(
    title: str = typer.Argument(..., help="Snippet title"),
    code: str = typer.Option(None, "--code", "-c", help="Code body"),
    file: Path = typer.Option(None, "--file", "-f", help="Read code body from a file"),
    language: str = typer.Option(None, "--language", "-l", help="Language tag (see 'devmind languages')"),
    tags: str = typer.Option("", "--tags", "-t", help="Comma-separated tags"),
) -> None:
    """Add a new snippet."""
    session = _open_session(_load_config(), writable=True)
    body = _read_code(code, file) or ""
    if language is None:
        language = guess_language(file.name) if file is not None else session.language

    ok = session.save_snippet(title, body, language, tags)
    _finish_save(session, ok, f"Added snippet '{title.strip()}'")


@app.command()
def edit(
    snippet_id: int = typer.Argument(..., help="Snippet ID"),
    title: str = typer.Option(None, "--title", help="New title"),
    code: str = typer.Option(None, "--code", "-c", help="New code body"),
    file: Path = typer.Option(None, "--file", "-f", help="Read new code body from a file"),
    language: str = typer.Option(None, "--language", "-l", help="New language tag"),
    tags: str = typer.Option(None, "--tags", "-t", help="New comma-separated tags"),
) -> None:
    """Edit a snippet. Options left out keep their current value."""
    session = _open_session(_load_config(), writable=True)
    snippet = session.start_editing(snippet_id)
    if snippet is None:
        console.print(f"[red]No snippet with ID {snippet_id}[/red]")
        raise typer.Exit(1)

    body = _read_code(code, file)
    ok = session.save_snippet(
        title if title is not None else snippet.title,
        body if body is not None else snippet.code,
        language or snippet.language,
        tags if tags is not None else snippet.tags_text,
    )
    _finish_save(session, ok, f"Updated snippet {snippet_id}")


@app.command()
def remove(snippet_id: int = typer.Argument(..., help="Snippet ID to remove")) -> None:
    """Remove a snippet."""
    session = _open_session(_load_config(), writable=True)
    snippet = session.store.get(snippet_id)
    if snippet is None:
        console.print(f"[yellow]No snippet with ID {snippet_id}[/yellow]")
        return
    session.delete_snippet(snippet_id)
    _finish_save(session, True, f"Removed snippet '{snippet.title}'")


@app.command()
def languages() -> None:
    """List the known language tags."""
    show_languages()


def _run_ai(
    mode: str,
    file: Path,
    start: int | None,
    end: int | None,
    language: str | None,
) -> tuple[Session, TextDocument]:
    config = _load_config()
    try:
        api_key = get_api_key(config)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    try:
        document = TextDocument.from_file(file)
    except OSError as e:
        console.print(f"[bold red]Cannot read {file}:[/bold red] {e}")
        raise typer.Exit(1)

    if start is not None or end is not None:
        document.select(start or 0, end if end is not None else len(document.text))

    client = AIClient(
        api_key,
        base_url=config.base_url,
        model=config.model,
        temperature=config.temperature,
        timeout=config.timeout,
    )
    session = Session(SnippetStore(config.data_path), document, ai_client=client, config=config)
    session.language = language or guess_language(file.name)

    async def run() -> None:
        try:
            with console.status(f"[bold blue]Asking AI to {mode}...[/bold blue]"):
                exchange = await session.request_ai(mode)
        finally:
            await client.close()
        if exchange is None:
            console.print(f"[yellow]{session.context.current_status()}[/yellow]")
            raise typer.Exit(1)
        show_exchange(exchange)

    asyncio.run(run())
    return session, document


@app.command()
def explain(
    file: Path = typer.Argument(..., help="File to explain"),
    start: int = typer.Option(None, "--start", help="Selection start offset"),
    end: int = typer.Option(None, "--end", help="Selection end offset"),
    language: str = typer.Option(None, "--language", "-l", help="Language tag (default: from suffix)"),
) -> None:
    """Explain a file, or a character range of it."""
    session, _ = _run_ai("explain", file, start, end, language)
    if session.exchange is not None and session.exchange.is_error:
        raise typer.Exit(1)


@app.command()
def refactor(
    file: Path = typer.Argument(..., help="File to refactor"),
    start: int = typer.Option(None, "--start", help="Selection start offset"),
    end: int = typer.Option(None, "--end", help="Selection end offset"),
    language: str = typer.Option(None, "--language", "-l", help="Language tag (default: from suffix)"),
    apply: bool = typer.Option(False, "--apply", "-y", help="Write the fix without asking"),
) -> None:
    """Refactor a file, or a character range of it, and optionally apply the fix."""
    session, document = _run_ai("refactor", file, start, end, language)
    exchange = session.exchange
    if exchange is None or exchange.is_error:
        raise typer.Exit(1)

    if exchange.extracted_code is None:
        console.print("[yellow]The reply has no code block, nothing to apply[/yellow]")
        session.dismiss()
        return

    if not apply and not Confirm.ask(f"Apply the fix to {file}?", default=False):
        session.dismiss()
        console.print("[dim]Dismissed[/dim]")
        return

    result = session.apply_fix()
    try:
        document.save()
    except OSError as e:
        console.print(f"[bold red]Cannot write {file}:[/bold red] {e}")
        raise typer.Exit(1)
    if result.stale:
        console.print("[yellow]Selection no longer matched, replaced the whole file[/yellow]")
    console.print(f"[green]Applied fix to {file} ({result.target})[/green]")


@app.command()
def ping() -> None:
    """Test AI provider connectivity."""
    config = _load_config()
    try:
        api_key = get_api_key(config)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    with console.status("[bold blue]Pinging AI provider...[/bold blue]"):
        success, message = ping_sync(api_key, base_url=config.base_url, model=config.model)

    if success:
        console.print(f"[green]AI provider OK:[/green] {message}")
    else:
        console.print(f"[red]AI provider failed:[/red] {message}")
        raise typer.Exit(1)


def run() -> None:
    """Entry point wrapper that invokes the Typer app."""
    app()


if __name__ == "__main__":
    run()
