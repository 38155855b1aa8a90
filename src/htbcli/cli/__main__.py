"""Command-line interface for the Hack The Box API.

Usage:
    htb list linux --diff easy
    htb info lame
    eval "$(htb info lame --eval)"
    htb join lame
    htb submit lame <flag> 30
    htb leave

Exit codes: 0 on success, 1 when an API call or local operation fails,
2 when the lab directory path is unusable (or on invalid usage).
"""

import logging
from typing import Annotated, NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.text import Text

from htbcli.api import (
    filter_machines,
    get_machine,
    get_machines,
    join_machine,
    leave_machine,
    machine_page,
    own_machine,
    sanitize_name,
)
from htbcli.client import HtbClient
from htbcli.config import get_settings
from htbcli.errors import HtbError, LabPathError
from htbcli.lab import ensure_lab_dir, render_exports
from htbcli.models import Difficulty, Machine, OperatingSystem

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="htb",
    help="Interact with the HackTheBox API.",
    no_args_is_help=True,
    add_completion=False,
    pretty_exceptions_show_locals=False,
)
console = Console(highlight=False)

MachineArg = Annotated[str, typer.Argument(help="Machine name (non-alphanumerics are dropped)")]


@app.callback()
def callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
) -> None:
    """Interact with the HackTheBox API."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def open_client() -> HtbClient:
    return HtbClient.from_settings()


def _fail(operation: str, error: object, code: int = 1) -> NoReturn:
    typer.echo(f"{operation}: {error}", err=True)
    raise typer.Exit(code)


def _summary(machine: Machine) -> Text:
    return Text.assemble(
        f"#{machine.id} ",
        (machine.name, "bold"),
        f" [{machine.os.value} <> {machine.difficulty.value}]",
    )


def _resolve(client: HtbClient, raw_name: str) -> Machine:
    try:
        name = sanitize_name(raw_name)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="'MACHINE'") from e
    try:
        return get_machine(client, name)
    except (HtbError, ValidationError) as e:
        _fail("get_machine", e)


@app.command("list")
def list_machines(
    os: Annotated[
        OperatingSystem | None,
        typer.Argument(help="Filter machines by operating system", case_sensitive=False),
    ] = None,
    difficulty: Annotated[
        Difficulty | None,
        typer.Option("--diff", "-d", help="Filter machines by difficulty", case_sensitive=False),
    ] = None,
) -> None:
    """List playable machines."""
    try:
        with open_client() as client:
            machines = get_machines(client)
    except (HtbError, ValidationError) as e:
        _fail("get_machines", e)

    machines = filter_machines(machines, os=os, difficulty=difficulty)
    for machine in machines:
        console.print(_summary(machine))
    typer.echo(f"Found {len(machines)} machines.")


@app.command()
def info(
    machine: MachineArg,
    eval_mode: Annotated[
        bool,
        typer.Option("--eval", help="Print information in eval-compatible format"),
    ] = False,
    no_dir: Annotated[
        bool,
        typer.Option("--no-dir", help="Skip creating directory"),
    ] = False,
    test: Annotated[bool, typer.Option("--test", hidden=True)] = False,
) -> None:
    """Display information about a live machine."""
    try:
        with open_client() as client:
            target = _resolve(client, machine)
    except HtbError as e:
        _fail("get_machine", e)

    if test:
        raise typer.Exit(0)

    if not eval_mode:
        summary = _summary(target)
        summary.append(f" @ {target.ip or '-'}")
        console.print(summary)
        typer.echo(machine_page(target))
        return

    if not no_dir:
        try:
            ensure_lab_dir(target.home)
        except LabPathError as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(2)
        except OSError as e:
            _fail("create_dir", e)

    for line in render_exports(target, get_settings().cs_opt):
        typer.echo(line)


@app.command()
def join(machine: MachineArg) -> None:
    """Join a live machine."""
    try:
        with open_client() as client:
            target = _resolve(client, machine)
            join_machine(client, target)
    except HtbError as e:
        _fail("join_machine", e)

    console.print(Text.assemble("Spawned ", (target.name, "bold"), f" on {target.ip or '-'}!"))


@app.command()
def leave() -> None:
    """Leave the user's active machine."""
    try:
        with open_client() as client:
            name = leave_machine(client)
    except HtbError as e:
        _fail("leave_machine", e)

    if name is None:
        typer.echo("You have no active machine!")
    else:
        console.print(Text.assemble("Left ", (name, "bold"), "!"))


@app.command()
def submit(
    machine: MachineArg,
    flag: Annotated[str, typer.Argument(help="Flag to submit")],
    difficulty: Annotated[
        int,
        typer.Argument(min=1, max=100, help="Your difficulty rating (1-100)"),
    ],
) -> None:
    """Submit a flag to a machine."""
    try:
        with open_client() as client:
            target = _resolve(client, machine)
            message = own_machine(client, target, flag, difficulty)
    except HtbError as e:
        _fail("own_machine", e)

    typer.echo(message)


if __name__ == "__main__":
    app()
