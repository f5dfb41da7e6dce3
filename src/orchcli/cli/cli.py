"""CLI application for the edge orchestrator."""

import typer

from orchcli.cli.commands.catalog import catalog_app
from orchcli.cli.commands.wipe import wipe
from orchcli.cli.common.logs import setup_logging
from orchcli.cli.common.options import VerboseOpt

app = typer.Typer(
    help="orch-cli - Edge Orchestrator command line interface",
    no_args_is_help=True,
)


@app.callback()
def _root(verbose: bool = VerboseOpt):
    """Configure logging for every command."""
    setup_logging(verbose)


app.add_typer(catalog_app, name="catalog")
app.command("wipe")(wipe)


if __name__ == "__main__":
    app()
