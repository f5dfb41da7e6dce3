from __future__ import annotations

from typing import Callable

import typer

from orchcli.cli.common.context import CatalogAppContext, build_catalog_context
from orchcli.cli.common.exits import exit_from_exc, warn_exit
from orchcli.cli.common.options import (
    ApiEndpointOpt,
    FilterOpt,
    NoAuthOpt,
    OrderByOpt,
    ProjectOpt,
    TokenOpt,
)
from orchcli.cli.common.output import out
from orchcli.core.catalog_models import (
    CatalogError,
    CatalogStatusError,
    CatalogTransportError,
)
from orchcli.core.paging import paginate

catalog_app = typer.Typer(
    help="List catalog entities of a project.",
    no_args_is_help=True,
)


@catalog_app.callback()
def _init(
    ctx: typer.Context,
    project: str = ProjectOpt,
    api_endpoint: str = ApiEndpointOpt,
    token: str | None = TokenOpt,
    noauth: bool = NoAuthOpt,
):
    """Initialize catalog context."""
    ctx.obj = build_catalog_context(project, api_endpoint, token=token, no_auth=noauth)


def _list_all_or_exit(
    appctx: CatalogAppContext,
    what: str,
    fetch: Callable,
    *,
    order_by: str | None,
    filter_: str | None,
) -> list:
    """Drain a paginated listing and convert failures into CLI exits."""
    try:
        with out.status(f"Loading {what}..."):
            return list(
                paginate(
                    lambda size, offset: fetch(
                        appctx.project,
                        page_size=size,
                        offset=offset,
                        order_by=order_by,
                        filter_=filter_,
                    )
                )
            )
    except CatalogStatusError as exc:
        if exc.status_code == 404:
            exit_from_exc(exc, message=f"Project '{appctx.project}' does not exist.", code=1)
        if exc.status_code in (401, 403):
            exit_from_exc(
                exc, message=f"No permission to list {what} in '{appctx.project}'.", code=1
            )
        exit_from_exc(exc, message=f"Error listing {what}: {exc}", code=1)
    except CatalogTransportError as exc:
        exit_from_exc(exc, message=f"Cannot reach {appctx.endpoint}: {exc}", code=1)
    except CatalogError as exc:
        exit_from_exc(exc, message=f"Error listing {what}: {exc}", code=1)


@catalog_app.command("deployment-packages")
def deployment_packages_list(
    ctx: typer.Context,
    order_by: str | None = OrderByOpt,
    filter_: str | None = FilterOpt,
):
    """List deployment packages."""
    appctx: CatalogAppContext = ctx.obj
    packages = _list_all_or_exit(
        appctx,
        "deployment packages",
        appctx.adapter.list_deployment_packages,
        order_by=order_by,
        filter_=filter_,
    )

    if not packages:
        warn_exit("No deployment packages found.")

    out.info(f"Project: {appctx.project} | Deployment packages: {len(packages)}")
    out.packages_table(packages)


@catalog_app.command("applications")
def applications_list(
    ctx: typer.Context,
    order_by: str | None = OrderByOpt,
    filter_: str | None = FilterOpt,
):
    """List applications."""
    appctx: CatalogAppContext = ctx.obj
    apps = _list_all_or_exit(
        appctx,
        "applications",
        appctx.adapter.list_applications,
        order_by=order_by,
        filter_=filter_,
    )

    if not apps:
        warn_exit("No applications found.")

    out.info(f"Project: {appctx.project} | Applications: {len(apps)}")
    out.applications_table(apps)


@catalog_app.command("artifacts")
def artifacts_list(
    ctx: typer.Context,
    order_by: str | None = OrderByOpt,
    filter_: str | None = FilterOpt,
):
    """List artifacts."""
    appctx: CatalogAppContext = ctx.obj
    artifacts = _list_all_or_exit(
        appctx,
        "artifacts",
        appctx.adapter.list_artifacts,
        order_by=order_by,
        filter_=filter_,
    )

    if not artifacts:
        warn_exit("No artifacts found.")

    out.info(f"Project: {appctx.project} | Artifacts: {len(artifacts)}")
    out.artifacts_table(artifacts)


@catalog_app.command("registries")
def registries_list(
    ctx: typer.Context,
    order_by: str | None = OrderByOpt,
    filter_: str | None = FilterOpt,
):
    """List registries."""
    appctx: CatalogAppContext = ctx.obj
    registries = _list_all_or_exit(
        appctx,
        "registries",
        appctx.adapter.list_registries,
        order_by=order_by,
        filter_=filter_,
    )

    if not registries:
        warn_exit("No registries found.")

    out.info(f"Project: {appctx.project} | Registries: {len(registries)}")
    out.registries_table(registries)
