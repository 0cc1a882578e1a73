import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from godotpilot.checkpoint import BuildLock, BuildStateStore
from godotpilot.config import Settings, load_settings
from godotpilot.constants import PHASE_NAMES, VERSION
from godotpilot.exceptions import BridgeError, CheckpointCorruptError
from godotpilot.logger import setup_logging
from godotpilot.session import ToolSession
from godotpilot.state import BuildState, PhaseStatus
from godotpilot.stop_guard import run_stop_hook
from godotpilot.tools.dispatcher import ToolCall, ToolDispatcher
from godotpilot.tools.registry import TOOL_SPECS

app = typer.Typer(help="godotpilot - MCP tool server for AI-driven Godot game builds")
console = Console()
err_console = Console(stderr=True)

__version__ = VERSION


def version_callback(value: bool):
    if value:
        console.print(f"godotpilot version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    project: Optional[Path] = typer.Option(
        None,
        "--project",
        "-p",
        help="Godot project root (default: GODOT_PROJECT_PATH or current directory)"
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging"
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show godotpilot version and exit"
    )
):
    """
    godotpilot CLI entry point.
    """
    settings = load_settings()
    if project is not None:
        settings.project_root = project.resolve()
    if debug:
        settings.debug = True
    setup_logging(debug=settings.debug, log_file=settings.log_file)
    ctx.obj = settings


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else load_settings()


def _dispatch(ctx: typer.Context, name: str, arguments: Optional[Dict[str, Any]] = None):
    """Run one tool through the dispatcher and print its response."""
    dispatcher = ToolDispatcher(ToolSession.from_settings(_settings(ctx)))
    response = dispatcher.handle(ToolCall(name=name, arguments=arguments or {}))
    if response.is_error:
        err_console.print(response.text, style="bold red", markup=False)
        raise typer.Exit(code=1)
    console.print_json(response.text)


@app.command()
def serve(ctx: typer.Context):
    """
    Run the MCP tool server on stdio.
    """
    from godotpilot.server import serve as run_server

    run_server(_settings(ctx))


@app.command("stop-guard")
def stop_guard():
    """
    Stop hook: block the agent from stopping while a build is in progress.

    Reads the hook JSON from stdin and prints a block decision when needed.
    """
    payload = run_stop_hook(sys.stdin.read())
    if payload is not None:
        typer.echo(json.dumps(payload))


@app.command()
def tools():
    """
    List the registered tools.
    """
    table = Table(title=f"{len(TOOL_SPECS)} tools")
    table.add_column("Tool", style="cyan", no_wrap=True)
    table.add_column("Effect")
    table.add_column("Description")
    for name, spec in TOOL_SPECS.items():
        table.add_row(name, spec.effect.value, spec.description)
    console.print(table)


@app.command()
def call(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Tool name, e.g. godot_get_project_state"),
    arguments: str = typer.Option(
        "{}",
        "--args",
        "-a",
        help="Tool arguments as a JSON object"
    )
):
    """
    Invoke one tool and print the JSON result.
    """
    try:
        parsed = json.loads(arguments)
    except json.JSONDecodeError as e:
        err_console.print(f"[bold red]Invalid --args JSON:[/bold red] {e}")
        raise typer.Exit(code=1)
    if not isinstance(parsed, dict):
        err_console.print("[bold red]--args must be a JSON object[/bold red]")
        raise typer.Exit(code=1)
    _dispatch(ctx, name, parsed)


@app.command()
def status(ctx: typer.Context):
    """
    Check whether the editor bridge is reachable.
    """
    session = ToolSession.from_settings(_settings(ctx))
    try:
        result = session.bridge.get_status()
    except BridgeError as e:
        err_console.print(f"[bold red]Editor offline:[/bold red] {e}")
        raise typer.Exit(code=1)
    console.print(f"[bold green]Editor connected[/bold green] at {session.bridge.base_url}")
    console.print_json(json.dumps(result))


@app.command()
def errors(
    ctx: typer.Context,
    fast: bool = typer.Option(
        False,
        "--fast",
        help="Skip headless validation"
    )
):
    """
    Show script errors reported by the editor.
    """
    _dispatch(ctx, "godot_get_errors", {"detailed": not fast})


@app.command()
def run(
    ctx: typer.Context,
    scene: str = typer.Argument("", help="res:// scene path (default: main scene)")
):
    """
    Run a scene in the editor.
    """
    _dispatch(ctx, "godot_run_scene", {"scene_path": scene})


@app.command()
def stop(ctx: typer.Context):
    """
    Stop the running scene.
    """
    _dispatch(ctx, "godot_stop_scene")


@app.command()
def reload(ctx: typer.Context):
    """
    Rescan the project filesystem and report errors.
    """
    _dispatch(ctx, "godot_reload_filesystem")


@app.command()
def log(
    ctx: typer.Context,
    message: str = typer.Argument(..., help="Message for the editor dock")
):
    """
    Send a message to the editor dock.
    """
    _dispatch(ctx, "godot_log", {"message": message})


@app.command()
def phase(
    ctx: typer.Context,
    number: int = typer.Argument(..., help="Phase number (0-6)"),
    phase_status: PhaseStatus = typer.Argument(..., metavar="STATUS", help="pending | in_progress | completed"),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-n",
        help="Phase name (default: the standard name for the phase number)"
    )
):
    """
    Report a phase transition.
    """
    _dispatch(ctx, "godot_update_phase", {
        "phase_number": number,
        "phase_name": name or PHASE_NAMES.get(number, f"Phase {number}"),
        "status": phase_status.value,
    })


@app.command("build-state")
def build_state(
    ctx: typer.Context,
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Print the raw checkpoint"
    )
):
    """
    Show the saved build checkpoint and build lock.
    """
    settings = _settings(ctx)
    lock = BuildLock(settings.project_root)
    try:
        state = BuildStateStore(settings.project_root).get()
    except CheckpointCorruptError as e:
        err_console.print(str(e), style="bold red", markup=False)
        raise typer.Exit(code=1)

    if output_json:
        console.print_json(json.dumps({"build_in_progress": lock.label(), "state": state}))
        return

    label = lock.label()
    if label:
        console.print(f"[bold yellow]Build in progress:[/bold yellow] {label}")
    else:
        console.print("[green]No build in progress[/green]")

    if state is None:
        console.print("No build checkpoint found.")
        return

    try:
        summary = BuildState.model_validate(state).summary()
    except ValidationError as e:
        err_console.print(f"[yellow]Checkpoint does not match the build state schema:[/yellow] {e}")
        console.print_json(json.dumps(state))
        return
    console.print(f"[cyan]Game:[/cyan] {summary['game_name'] or 'unknown'}")
    console.print(
        f"[cyan]Current phase:[/cyan] {summary['current_phase']} {summary['current_phase_name'] or ''}"
    )
    console.print(f"[cyan]Completed phases:[/cyan] {summary['completed_phase_numbers']}")
    console.print(f"[cyan]Files written:[/cyan] {summary['files_written']}")
    console.print(f"[cyan]Unresolved errors:[/cyan] {summary['unresolved_errors']}")
    for step in summary["next_steps"]:
        console.print(f"  • {step}")


@app.command("cancel-build")
def cancel_build(
    ctx: typer.Context,
    clear_state: bool = typer.Option(
        False,
        "--clear-state",
        help="Also delete the build checkpoint"
    )
):
    """
    Remove the build lock so the agent is allowed to stop.
    """
    settings = _settings(ctx)
    if BuildLock(settings.project_root).release():
        console.print("[green]Build lock removed[/green]")
    else:
        console.print("No build lock present.")
    if clear_state and BuildStateStore(settings.project_root).clear():
        console.print("[green]Build checkpoint deleted[/green]")


if __name__ == "__main__":
    app()
