"""CLI entry point for hotpotato."""

from __future__ import annotations

import json
import time
from collections import Counter
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.syntax import Syntax

from hotpotato.config import HotPotatoConfig, load_config
from hotpotato.config.loader import DEFAULT_CONFIG_TEMPLATE
from hotpotato.console import ConsoleHost, freshness_table, scan_workspace
from hotpotato.decorator import FreshnessDecorator
from hotpotato.freshness import Freshness, Thresholds
from hotpotato.logging_config import setup_logging
from hotpotato.watcher import WorkspaceWatcher

app = typer.Typer(
    name="hotpotato",
    help="Mark files hot, warm or cold by how recently they changed.",
)

config_app = typer.Typer(help="Manage hotpotato configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: HotPotatoConfig | None = None


def _get_config() -> HotPotatoConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to hotpotato.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    setup_logging(_config)


def _resolve_dir(path: str) -> Path:
    root = Path(path).resolve()
    if not root.is_dir():
        rprint(f"[red]Error:[/red] not a directory: {path}")
        raise typer.Exit(1)
    return root


@app.command()
def status(
    path: str = typer.Argument(".", help="Directory to inspect"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON instead of a table"),
) -> None:
    """Show the freshness bucket of every file under PATH."""
    cfg = _get_config()
    root = _resolve_dir(path)
    thresholds = Thresholds.from_multiplier(cfg.time_multiplier_seconds)
    rows = scan_workspace(root, thresholds, cfg.watch.ignore_patterns)

    if as_json:
        data = {
            "files": [{"path": p, "freshness": f.value} for p, f in rows],
            "counts": {f.value: n for f, n in Counter(f for _, f in rows).items()},
        }
        print(json.dumps(data))
        return

    decorated = [(p, f) for p, f in rows if f is not Freshness.none]
    if not decorated:
        rprint(f"[green]Nothing changed recently under {root}[/green]")
        return
    rprint(freshness_table(decorated, title=f"Freshness of {root}"))


@app.command()
def watch(
    path: str = typer.Argument(".", help="Directory to watch"),
    duration: float | None = typer.Option(
        None, "--duration", help="Stop after this many seconds (default: until Ctrl+C)"
    ),
) -> None:
    """Watch PATH and keep redrawing freshness decorations."""
    cfg = _get_config()
    root = _resolve_dir(path)
    ignore = cfg.watch.ignore_patterns

    watcher = WorkspaceWatcher(root, ignore)
    host = ConsoleHost(root, ignore_patterns=ignore)
    decorator = FreshnessDecorator(cfg, host, source=watcher)
    host.attach(decorator)

    rprint(
        f"[bold]Watching[/bold] {root} "
        f"(refresh every {decorator.thresholds.hot / 1000:g}s, Ctrl+C to stop)"
    )
    deadline = time.monotonic() + duration if duration is not None else None
    failed = False
    try:
        with watcher:
            host.sync_exec(host.update_decorations)
            while not decorator.stopped:
                if deadline is not None and time.monotonic() >= deadline:
                    break
                time.sleep(0.1)
            failed = decorator.stopped
    except KeyboardInterrupt:
        pass
    finally:
        decorator.dispose()

    if failed:
        rprint("[yellow]Periodic updates stopped after an error; see log.[/yellow]")
        raise typer.Exit(1)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(mode="json"), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default hotpotato.yaml in current directory."""
    target = Path("hotpotato.yaml")
    if target.exists() and not force:
        rprint("[yellow]hotpotato.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
