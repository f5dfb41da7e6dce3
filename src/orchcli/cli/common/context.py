"""Application context management for the CLI."""

from dataclasses import dataclass

import requests

from orchcli.cli.common.exits import die
from orchcli.core.adapters.catalog import CatalogAdapter
from orchcli.core.auth import AuthError, get_session


@dataclass
class CatalogAppContext:
    """Application context holding the HTTP session and catalog adapter."""

    project: str
    endpoint: str
    session: requests.Session
    adapter: CatalogAdapter


def build_catalog_context(
    project: str,
    api_endpoint: str | None,
    *,
    token: str | None = None,
    no_auth: bool = False,
) -> CatalogAppContext:
    """Build and return the application context for catalog commands.

    Args:
        project: Project whose catalog is addressed.
        api_endpoint: Orchestrator API endpoint URL.
        token: Access token (required unless no_auth is set).
        no_auth: Skip authentication.

    Returns:
        CatalogAppContext: Context with configured session and adapter.
    """
    if not project or not project.strip():
        die("Project is not set. Use --project or ORCH_PROJECT.", code=2)
    try:
        session, endpoint = get_session(api_endpoint, token=token, no_auth=no_auth)
    except AuthError as exc:
        die(str(exc), code=1)
    adapter = CatalogAdapter(session, endpoint)
    return CatalogAppContext(
        project=project.strip(), endpoint=endpoint, session=session, adapter=adapter
    )
