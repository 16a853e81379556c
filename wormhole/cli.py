"""Command-line interface for the wormhole engine."""

import json
import logging
import random
import sys
from pathlib import Path
from typing import Iterable, List, Optional

import click
from rich.console import Console
from rich.syntax import Syntax

from . import __version__
from .config import ConfigManager, WormholeConfig
from .core.engine import WormholeEngine
from .errors import ConfigurationError, FingerprintError
from .reporting import WormholeReporter
from .traversal import traverse_wormhole
from .utils.logging_setup import log_operation, setup_logging

console = Console()
logger = logging.getLogger(__name__)


def collect_files(paths: Iterable[Path]) -> List[Path]:
    """Collect ``*.py`` files from files and directories, sorted per root."""
    files: List[Path] = []
    for base in paths:
        if not base.exists():
            logger.warning(f"Path does not exist: {base}")
            continue
        if base.is_file():
            files.append(base)
        else:
            files.extend(sorted(p for p in base.rglob("*.py") if p.is_file()))
    return files


def _load_config(config_path: Optional[str]) -> WormholeConfig:
    try:
        return ConfigManager(config_path).load()
    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))


def _insert_file(engine: WormholeEngine, path: Path) -> bool:
    try:
        code = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Skipping unreadable file {path}: {e}")
        return False
    try:
        engine.insert(code, soul_id=str(path), origin=str(path))
    except FingerprintError as e:
        logger.warning(f"Skipping {path}: {e.message}")
        return False
    return True


@click.group(name="wormhole")
@click.version_option(__version__, prog_name="wormhole")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging verbosity"
)
def cli(log_level):
    """Find structural bridges between pieces of code."""
    setup_logging('wormhole', level=log_level)


@cli.command(name="scan")
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.option("--config", "config_path", type=click.Path(), help="Path to config file")
@click.option("--top", default=10, show_default=True, help="Number of wormholes to display")
@click.option("--export", "export_path", type=click.Path(path_type=Path),
              help="Write the exported graph as JSON")
def scan(paths, config_path, top, export_path):
    """Insert every Python file under PATHS and report discovered wormholes."""
    config = _load_config(config_path)
    engine = WormholeEngine(config=config)
    log_operation(logger, "scan", paths=[str(p) for p in paths])

    files = collect_files(paths)
    inserted = sum(1 for f in files if _insert_file(engine, f))
    skipped = len(files) - inserted
    if skipped:
        console.print(f"[yellow]Skipped {skipped} file(s) that could not be fingerprinted[/yellow]")

    graph = engine.export_graph()
    WormholeReporter(console).render(engine.stats(), graph, top=top)

    if export_path:
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(json.dumps(graph, indent=2), encoding="utf-8")
        console.print(f"[green]✓ Exported graph to {export_path}[/green]")


@cli.command(name="traverse")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("target", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--seed", type=int, default=None, help="Seed for a reproducible blend")
@click.option("--config", "config_path", type=click.Path(), help="Path to config file")
def traverse(source, target, seed, config_path):
    """Blend SOURCE toward TARGET through their wormhole."""
    engine = WormholeEngine(config=_load_config(config_path))

    for path in (target, source):
        if not _insert_file(engine, path):
            raise click.ClickException(f"Cannot fingerprint {path}")

    connection = next(
        (c for c in engine.connections_for(str(source)) if c.target.id == str(target)),
        None
    )
    if connection is None:
        console.print(f"[red]✗ No wormhole between {source} and {target}[/red]")
        sys.exit(1)

    result = traverse_wormhole(connection, random.Random(seed))
    console.print(Syntax(result.transformed_code, "python", line_numbers=True))
    console.print(
        f"[cyan]similarity={connection.similarity:.4f} "
        f"energy={result.energy_cost:.4f} time={result.traversal_time:.4f}[/cyan]"
    )


@cli.group(name="config")
def config_group():
    """Manage wormhole configuration."""
    pass


@config_group.command(name="init")
@click.option(
    "--path",
    type=click.Path(),
    default=ConfigManager.DEFAULT_CONFIG_FILE,
    help="Path for config file"
)
def config_init(path):
    """Write a default configuration file."""
    config_path = Path(path)

    if config_path.exists():
        if not click.confirm(f"Config file {path} already exists. Overwrite?"):
            console.print("[yellow]Aborted[/yellow]")
            return

    ConfigManager(config_path).save(WormholeConfig())
    console.print(f"[green]✓ Created config file at {path}[/green]")


@config_group.command(name="show")
@click.option("--path", type=click.Path(exists=True), help="Path to config file")
def config_show(path):
    """Display the active configuration."""
    manager = ConfigManager(path)
    try:
        config = manager.load()
    except (ConfigurationError, ValueError) as e:
        raise click.ClickException(str(e))
    manager.display(config, console=console)


def main():
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
