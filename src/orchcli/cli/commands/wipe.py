"""Command for wiping a project's catalog."""

from __future__ import annotations

from orchcli.cli.common.context import build_catalog_context
from orchcli.cli.common.exits import die
from orchcli.cli.common.options import (
    ApiEndpointOpt,
    NoAuthOpt,
    ProjectOpt,
    TokenOpt,
    YesOpt,
)
from orchcli.cli.common.output import out
from orchcli.core.wipe import Wiper


def wipe(
    project: str = ProjectOpt,
    api_endpoint: str = ApiEndpointOpt,
    token: str | None = TokenOpt,
    noauth: bool = NoAuthOpt,
    yes: bool = YesOpt,
):
    """
    Wipe all data associated with the specified project.

    Example: orch-cli wipe --project some-project --yes
    """
    appctx = build_catalog_context(project, api_endpoint, token=token, no_auth=noauth)

    if not yes:
        out.kv({"Project": appctx.project, "Endpoint": appctx.endpoint})
        question = (
            "Delete ALL deployment packages, applications, artifacts and "
            f"registries of project '{appctx.project}'?"
        )
        if not out.confirm(question):
            die("you have to say yes", code=1)

    with out.status(f"Wiping project {appctx.project}..."):
        errors = Wiper(appctx.adapter).wipe(appctx.project)

    for i, err in enumerate(errors):
        out.plain(f"#{i}: {err}")

    # Best effort: partial failures are reported but do not fail the command.
    if errors:
        out.warn(f"Wipe finished with {len(errors)} error(s).")
    else:
        out.success(f"Project '{appctx.project}' wiped.")
