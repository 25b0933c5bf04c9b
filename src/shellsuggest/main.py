"""Typer CLI for inspecting shell completion traffic.

Examples:
    $ shellsuggest decode 'Completions;0;3;3;[["git",2],["gci",2]]' --prompt gi
    $ shellsuggest replay pwsh-session.log --prompt "cd src"
    $ shellsuggest cache show
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from shellsuggest.application import GlobalCommandCache, PwshCompletionProvider, load_suggest_config
from shellsuggest.application.wire import SuggestCommand, split_message
from shellsuggest.domain.events import Bell, SuggestionAccepted
from shellsuggest.domain.exceptions import ProtocolDecodeError
from shellsuggest.domain.types import CompletionItem
from shellsuggest.infrastructure.state import FileStateProvider, InMemoryStateProvider
from shellsuggest.infrastructure.terminal import HeadlessTerminal, StaticPromptInput
from shellsuggest.logger import get_logger, setup_logger

load_dotenv()

logger = get_logger("cli")
console = Console()

cli = typer.Typer(
    name="shellsuggest",
    help="Decode and replay PowerShell terminal completion messages",
    add_completion=False,
)
cache_cli = typer.Typer(help="Inspect the persisted global command cache")
cli.add_typer(cache_cli, name="cache")


@cli.callback()
def main(
    debug: bool = typer.Option(False, "--debug", help="Log to stderr at DEBUG level"),
    trace: bool = typer.Option(False, "--trace", help="Write the shell traffic to protocol.log"),
) -> None:
    setup_logger(log_level="DEBUG" if debug else None, console_output=debug, trace=trace or None)


def _build_cache(storage_dir: Optional[Path], ephemeral: bool) -> GlobalCommandCache:
    if ephemeral:
        return GlobalCommandCache(InMemoryStateProvider())
    directory = storage_dir or load_suggest_config().storage_dir
    return GlobalCommandCache(FileStateProvider(directory))


def _build_provider(prompt: str, cache: GlobalCommandCache) -> tuple[PwshCompletionProvider, HeadlessTerminal]:
    provider = PwshCompletionProvider(cache, load_suggest_config())
    terminal = HeadlessTerminal(provider.event_bus)
    provider.activate(terminal)
    provider.set_prompt_input_model(StaticPromptInput(prompt))
    provider.event_bus.subscribe(
        SuggestionAccepted,
        lambda event: logger.debug(f"Would write {event.sequence!r} to the shell"),
    )
    terminal.send_input(prompt)
    return provider, terminal


def _render(items: Optional[list[CompletionItem]], title: str) -> None:
    if items is None:
        console.print(f"[yellow]{title}: no completions (terminal not ready)[/yellow]")
        return
    table = Table(title=f"{title} ({len(items)} items)")
    table.add_column("Label", style="cyan")
    table.add_column("Detail")
    table.add_column("Icon", style="magenta")
    table.add_column("Kind")
    table.add_column("Replace", justify="right")
    for item in items:
        kind = "dir" if item.is_directory else "file" if item.is_file else "keyword" if item.is_keyword else ""
        table.add_row(
            item.label,
            item.detail,
            item.icon.value,
            kind,
            f"{item.replacement_index}+{item.replacement_length}",
        )
    console.print(table)


async def _collect(provider: PwshCompletionProvider, feed) -> tuple[bool, Optional[list[CompletionItem]]]:
    """Run ``feed`` while a completion request is waiting.

    Returns:
        Whether the request was answered, and its result
    """
    request = asyncio.create_task(provider.request_completions())
    await asyncio.sleep(0)
    feed()
    await asyncio.sleep(0)
    if request.done():
        return True, request.result()
    request.cancel()
    try:
        await request
    except asyncio.CancelledError:
        pass
    return False, None


@cli.command()
def decode(
    message: str = typer.Argument(..., help="OSC 633 data, e.g. 'Completions;0;3;3;[...]'"),
    prompt: str = typer.Option("", "--prompt", "-p", help="Prompt line the completions apply to"),
    storage_dir: Optional[Path] = typer.Option(None, "--storage-dir", help="State directory"),
    ephemeral: bool = typer.Option(True, "--ephemeral/--persistent", help="Use an in-memory command cache"),
) -> None:
    """Decode a single completion message and print the normalized items."""
    command, _ = split_message(message)
    cache = _build_cache(storage_dir, ephemeral)

    async def runner() -> None:
        await cache.ensure_hydrated()
        provider, _ = _build_provider(prompt, cache)
        if command == SuggestCommand.COMPLETIONS_PWSH_COMMANDS.value:
            provider.handle_sequence(message)
            await cache.flush()
            _render(cache.snapshot(), "Global commands")
            return
        answered, items = await _collect(provider, lambda: provider.handle_sequence(message))
        if not answered:
            console.print(f"[red]Unhandled sequence '{command}'[/red]")
            raise typer.Exit(code=1)
        _render(items, "Completions")

    try:
        asyncio.run(runner())
    except ProtocolDecodeError as exc:
        console.print(f"[red]❌ {exc}[/red]")
        raise typer.Exit(code=2)


@cli.command()
def replay(
    transcript: Path = typer.Argument(..., exists=True, dir_okay=False, help="Captured terminal output"),
    prompt: str = typer.Option("", "--prompt", "-p", help="Prompt line the completions apply to"),
    storage_dir: Optional[Path] = typer.Option(None, "--storage-dir", help="State directory"),
    ephemeral: bool = typer.Option(True, "--ephemeral/--persistent", help="Use an in-memory command cache"),
) -> None:
    """Stream a captured terminal transcript through the provider line by line."""
    cache = _build_cache(storage_dir, ephemeral)
    bells = 0

    def count_bell(_: Bell) -> None:
        nonlocal bells
        bells += 1

    async def runner() -> None:
        await cache.ensure_hydrated()
        provider, terminal = _build_provider(prompt, cache)
        provider.event_bus.subscribe(Bell, count_bell)
        batches = 0
        for line_number, line in enumerate(transcript.read_text(encoding="utf-8").splitlines(keepends=True), 1):
            try:
                answered, items = await _collect(provider, lambda: terminal.write_output(line))
            except ProtocolDecodeError as exc:
                console.print(f"[red]line {line_number}: {exc}[/red]")
                continue
            if answered:
                batches += 1
                _render(items, f"Batch {batches} (line {line_number})")
        await cache.flush()
        console.print(f"{batches} completion batch(es), {len(cache)} cached global command(s), {bells} bell(s)")

    asyncio.run(runner())


@cache_cli.command("show")
def cache_show(
    storage_dir: Optional[Path] = typer.Option(None, "--storage-dir", help="State directory"),
) -> None:
    """Print the persisted global commands."""
    cache = _build_cache(storage_dir, ephemeral=False)
    asyncio.run(cache.ensure_hydrated())
    _render(cache.snapshot(), "Global commands")


@cache_cli.command("clear")
def cache_clear(
    storage_dir: Optional[Path] = typer.Option(None, "--storage-dir", help="State directory"),
) -> None:
    """Remove the persisted global commands."""
    cache = _build_cache(storage_dir, ephemeral=False)
    cache.clear()
    console.print("Global command cache cleared")
