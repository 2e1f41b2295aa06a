"""rootsync CLI entry point."""

import typer

app = typer.Typer(
    name="rootsync",
    help="rootsync — root surface synchronization for UI test drivers",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        from rootsync import __version__

        typer.echo(f"rootsync {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """rootsync — root surface synchronization for UI test drivers."""


# -- Register commands --------------------------------------------------------

from rootsync.cli.commands.config_cmd import config_app  # noqa: E402
from rootsync.cli.commands.simulate_cmd import simulate_command  # noqa: E402
from rootsync.cli.commands.validate_cmd import validate_command  # noqa: E402

app.add_typer(config_app, name="config")
app.command(name="validate")(validate_command)
app.command(name="simulate")(simulate_command)
