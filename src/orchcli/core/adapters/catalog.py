from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, TypeVar
from urllib.parse import quote

import requests

from orchcli.core.catalog_models import (
    Application,
    Artifact,
    CatalogStatusError,
    CatalogTransportError,
    DeploymentPackage,
    Registry,
)
from orchcli.core.paging import MAX_PAGE_SIZE, Page

log = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 30.0


def _error_message(resp: requests.Response) -> str:
    """Extract the server's error message from a failed response."""
    try:
        body = resp.json()
    except ValueError:
        return (resp.text or "").strip()
    if isinstance(body, Mapping) and body.get("message"):
        return str(body["message"])
    return (resp.text or "").strip()


class CatalogAdapter:
    """Adapter around the catalog service REST API (packages/apps/artifacts/registries)."""

    def __init__(
        self,
        session: requests.Session,
        endpoint: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.session = session
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout

    def _url(self, project: str, *parts: str) -> str:
        path = "/".join(quote(p, safe="") for p in parts)
        return f"{self.endpoint}/v3/projects/{quote(project, safe='')}/catalog/{path}"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise CatalogTransportError(f"{method} {url} failed: {exc}") from exc
        log.debug("%s %s -> %s", method, url, resp.status_code)
        if not resp.ok:
            raise CatalogStatusError(method, url, resp.status_code, _error_message(resp))
        return resp

    def _json(self, method: str, url: str, **kwargs: Any) -> Mapping[str, Any]:
        resp = self._request(method, url, **kwargs)
        try:
            body = resp.json()
        except ValueError as exc:
            raise CatalogTransportError(f"{method} {url}: invalid JSON response") from exc
        if not isinstance(body, Mapping):
            raise CatalogTransportError(f"{method} {url}: unexpected response body")
        return body

    def _list(
        self,
        project: str,
        collection: str,
        key: str,
        parse: Callable[[Mapping[str, Any]], T],
        *,
        page_size: int,
        offset: int,
        order_by: str | None = None,
        filter_: str | None = None,
    ) -> Page[T]:
        params: dict[str, Any] = {
            "pageSize": min(page_size, MAX_PAGE_SIZE),
            "offset": offset,
        }
        if order_by:
            params["orderBy"] = order_by
        if filter_:
            params["filter"] = filter_
        url = self._url(project, collection)
        body = self._json("GET", url, params=params)
        try:
            items = [parse(item) for item in body.get(key) or []]
            total = body.get("totalElements")
            total = int(total) if total is not None else None
        except (AttributeError, TypeError, ValueError) as exc:
            raise CatalogTransportError(f"GET {url}: malformed {key} listing") from exc
        return Page(items=items, total_elements=total)

    def _get(self, url: str, key: str) -> Mapping[str, Any]:
        """GET a single entity and unwrap it from its ``key`` envelope."""
        entity = self._json("GET", url).get(key)
        if not isinstance(entity, Mapping):
            raise CatalogTransportError(f"GET {url}: response has no '{key}'")
        return entity

    # deployment packages

    def list_deployment_packages(
        self,
        project: str,
        *,
        page_size: int = MAX_PAGE_SIZE,
        offset: int = 0,
        order_by: str | None = None,
        filter_: str | None = None,
    ) -> Page[DeploymentPackage]:
        """List one page of deployment packages."""
        return self._list(
            project,
            "deployment_packages",
            "deploymentPackages",
            DeploymentPackage.from_payload,
            page_size=page_size,
            offset=offset,
            order_by=order_by,
            filter_=filter_,
        )

    def get_deployment_package(
        self, project: str, name: str, version: str
    ) -> DeploymentPackage:
        """Fetch the current representation of a deployment package."""
        url = self._url(project, "deployment_packages", name, "versions", version)
        return DeploymentPackage.from_payload(self._get(url, "deploymentPackage"))

    def update_deployment_package(
        self, project: str, name: str, version: str, pkg: DeploymentPackage
    ) -> None:
        """Replace deployment package ``name:version`` with the given representation."""
        url = self._url(project, "deployment_packages", name, "versions", version)
        self._request("PUT", url, json=pkg.to_payload())

    def delete_deployment_package(self, project: str, name: str, version: str) -> None:
        """Delete a deployment package version."""
        url = self._url(project, "deployment_packages", name, "versions", version)
        self._request("DELETE", url)

    # applications

    def list_applications(
        self,
        project: str,
        *,
        page_size: int = MAX_PAGE_SIZE,
        offset: int = 0,
        order_by: str | None = None,
        filter_: str | None = None,
    ) -> Page[Application]:
        """List one page of applications."""
        return self._list(
            project,
            "applications",
            "applications",
            Application.from_payload,
            page_size=page_size,
            offset=offset,
            order_by=order_by,
            filter_=filter_,
        )

    def get_application(self, project: str, name: str, version: str) -> Application:
        """Fetch the current representation of an application."""
        url = self._url(project, "applications", name, "versions", version)
        return Application.from_payload(self._get(url, "application"))

    def update_application(
        self, project: str, name: str, version: str, app: Application
    ) -> None:
        """Replace application ``name:version`` with the given representation."""
        url = self._url(project, "applications", name, "versions", version)
        self._request("PUT", url, json=app.to_payload())

    def delete_application(self, project: str, name: str, version: str) -> None:
        """Delete an application version."""
        url = self._url(project, "applications", name, "versions", version)
        self._request("DELETE", url)

    # artifacts

    def list_artifacts(
        self,
        project: str,
        *,
        page_size: int = MAX_PAGE_SIZE,
        offset: int = 0,
        order_by: str | None = None,
        filter_: str | None = None,
    ) -> Page[Artifact]:
        """List one page of artifacts."""
        return self._list(
            project,
            "artifacts",
            "artifacts",
            Artifact.from_payload,
            page_size=page_size,
            offset=offset,
            order_by=order_by,
            filter_=filter_,
        )

    def delete_artifact(self, project: str, name: str) -> None:
        """Delete an artifact."""
        self._request("DELETE", self._url(project, "artifacts", name))

    # registries

    def list_registries(
        self,
        project: str,
        *,
        page_size: int = MAX_PAGE_SIZE,
        offset: int = 0,
        order_by: str | None = None,
        filter_: str | None = None,
    ) -> Page[Registry]:
        """List one page of registries."""
        return self._list(
            project,
            "registries",
            "registries",
            Registry.from_payload,
            page_size=page_size,
            offset=offset,
            order_by=order_by,
            filter_=filter_,
        )

    def delete_registry(self, project: str, name: str) -> None:
        """Delete a registry."""
        self._request("DELETE", self._url(project, "registries", name))
