"""Common CLI options for the CLI."""

import typer

from orchcli.core.auth import ACCESS_TOKEN_ENV, DEFAULT_API_ENDPOINT

ApiEndpointOpt = typer.Option(
    DEFAULT_API_ENDPOINT,
    "--api-endpoint",
    envvar="ORCH_API_ENDPOINT",
    help="API Service Endpoint",
)

ProjectOpt = typer.Option(
    ...,
    "--project",
    "-p",
    envvar="ORCH_PROJECT",
    help="Active project name",
)

TokenOpt = typer.Option(
    None,
    "--token",
    envvar=ACCESS_TOKEN_ENV,
    help="Access token sent as a bearer token",
    show_default=False,
)

NoAuthOpt = typer.Option(
    False,
    "--noauth",
    "-n",
    help="Use without authentication checks",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Produce verbose (debug) log output",
)

YesOpt = typer.Option(
    False,
    "--yes",
    "-y",
    help="Confirm the operation without prompting",
)

OrderByOpt = typer.Option(
    None,
    "--order-by",
    help="Sort order, e.g. 'name asc'",
)

FilterOpt = typer.Option(
    None,
    "--filter",
    help="Server-side filter expression, e.g. 'name=foo'",
)
