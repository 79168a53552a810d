from __future__ import annotations

import dataclasses
import json
import logging
import queue
from pathlib import Path
from typing import Any, Optional

import typer

from ..core.environment import Environment
from ..core.errors import ReconfError
from ..core.manager import ConfigManager

app = typer.Typer(help="reconf CLI")


def _env(name: str, config: Optional[Path]) -> Environment:
    try:
        return Environment(name, config_path=config)
    except ReconfError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _start(e: Environment) -> ConfigManager:
    try:
        manager = e.manager()
        manager.start()
    except ReconfError as err:
        typer.echo(f"Error: {err}", err=True)
        raise typer.Exit(1)
    return manager


def _dump(cfg: Any) -> str:
    return json.dumps(dataclasses.asdict(cfg), indent=2, default=str)


@app.callback()
def main(log_level: str = typer.Option("WARNING", "--log-level")):
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def loaders(
    env: str = typer.Option("development", "--env"),
    config: Optional[Path] = typer.Option(None, "--config"),
):
    e = _env(env, config)
    typer.echo(json.dumps([
        {
            "source": repr(loader.source),
            "formatter": type(loader.formatter).__name__,
            "watcher": repr(loader.watcher) if loader.watcher else None,
        }
        for loader in e.loaders
    ], indent=2))


@app.command()
def show(
    env: str = typer.Option("development", "--env"),
    config: Optional[Path] = typer.Option(None, "--config"),
):
    manager = _start(_env(env, config))
    try:
        typer.echo(_dump(manager.config()))
    finally:
        manager.stop()


@app.command()
def watch(
    env: str = typer.Option("development", "--env"),
    config: Optional[Path] = typer.Option(None, "--config"),
):
    e = _env(env, config)
    updates: "queue.Queue[None]" = queue.Queue()

    def on_error(err: BaseException) -> None:
        typer.echo(f"Error while updating config: {err}", err=True)

    for loader in e.loaders:
        loader.on_update_success = lambda: updates.put(None)
        loader.on_update_error = on_error

    manager = _start(e)
    typer.echo(_dump(manager.config()))
    try:
        while True:
            updates.get()
            typer.echo(_dump(manager.config()))
    except KeyboardInterrupt:
        pass
    finally:
        manager.stop()


if __name__ == "__main__":
    app()
