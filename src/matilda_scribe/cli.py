"""Matilda Scribe command line interface."""

import asyncio
import dataclasses
import json
from pathlib import Path

import rich_click as click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import __version__
from .core.config import ConfigLoader, get_config
from .core.logging import configure_logging
from .recognition import CommitPolicy, SessionConfig
from .replay import ScriptError, load_script, replay_script

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_OPTION = "#ff79c6"
click.rich_click.STYLE_ARGUMENT = "#8be9fd"
click.rich_click.STYLE_COMMAND = "#50fa7b"
click.rich_click.STYLE_USAGE = "#bd93f9"
click.rich_click.STYLE_HELPTEXT = "#b3b8c0"

STRATEGY_SUMMARIES = {
    CommitPolicy.WHOLE_BUFFER: "Commit every final as received; no dedup (baseline)",
    CommitPolicy.DEBOUNCED: "Commit the latest text after a pause in speech (default)",
    CommitPolicy.INCREMENTAL: "Commit each final index once, suffix deltas for growing finals",
    CommitPolicy.INDEX_WINDOW: "Commit each final index once, verbatim",
}


@click.group()
@click.version_option(version=__version__, prog_name="Matilda Scribe")
def main():
    """🎙️ [bold cyan]Matilda Scribe[/bold cyan] - Clean, append-only transcripts from noisy recognition streams"""


@main.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="Configuration file path")
@click.option("--strategy", type=click.Choice([p.value for p in CommitPolicy]), help="Commit strategy")
@click.option("--pause-ms", type=int, help="Silence window for the debounced strategy")
@click.option("--language", help="Language tag passed to the engine (e.g. 'vi-VN')")
@click.option("--no-flush-on-end", is_flag=True, help="Do not commit pending text when the engine ends")
@click.option("--interim", is_flag=True, help="Also print live previews")
@click.option("--json", "as_json", is_flag=True, help="Output JSON lines")
@click.option("--debug", is_flag=True, help="Enable detailed debug logging")
def replay(script, config_path, strategy, pause_ms, language, no_flush_on_end, interim, as_json, debug):
    """Replay a JSON-lines engine event SCRIPT and print the committed transcript."""
    loader = ConfigLoader(config_path) if config_path else get_config()
    configure_logging(loader, debug=debug)

    overrides = {}
    if strategy:
        overrides["strategy"] = strategy
    if pause_ms is not None:
        overrides["pause_ms"] = pause_ms
    if language:
        overrides["language"] = language
    if no_flush_on_end:
        overrides["flush_on_end"] = False

    try:
        config = dataclasses.replace(SessionConfig.from_config(loader), **overrides)
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    try:
        events = load_script(script)
    except ScriptError as e:
        raise click.ClickException(f"{script}: {e}") from e

    outcome = asyncio.run(replay_script(events, config))

    console = Console(soft_wrap=True)
    for item in outcome.items:
        if not item.is_final and not interim:
            continue
        if as_json:
            click.echo(json.dumps(item.to_dict(), ensure_ascii=False))
        elif item.is_final:
            console.print(Text(item.text))
        else:
            console.print(Text(f"… {item.text}", style="dim"))

    error_console = Console(stderr=True, soft_wrap=True)
    for error in outcome.errors:
        error_console.print(Text(str(error), style="red"))


@main.command()
def strategies():
    """List the available commit strategies."""
    table = Table(title="Commit strategies")
    table.add_column("Name", style="green", no_wrap=True)
    table.add_column("Behaviour")
    for policy in CommitPolicy:
        table.add_row(policy.value, STRATEGY_SUMMARIES[policy])
    Console(width=120).print(table)


if __name__ == "__main__":
    main()
