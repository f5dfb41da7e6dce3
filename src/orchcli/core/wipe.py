"""Dependency-aware bulk deletion of a project's catalog.

The catalog refuses to delete a deployment package while it still references
applications or profiles, and an application while it still carries profiles.
Wiping therefore runs in two passes: every package and application is first
stripped of its references, and only then is anything deleted.

This module never prints and never raises for individual entity failures.
Every failure becomes a ``WipeError`` in the returned list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Protocol, TypeVar

from orchcli.core.catalog_models import (
    Application,
    Artifact,
    CatalogStatusError,
    DeploymentPackage,
    Registry,
)
from orchcli.core.paging import MAX_PAGE_SIZE, Page, paginate

log = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogClient(Protocol):
    """Interface for the catalog operations used by the wiper."""

    def list_deployment_packages(
        self, project: str, *, page_size: int, offset: int
    ) -> Page[DeploymentPackage]: ...

    def get_deployment_package(
        self, project: str, name: str, version: str
    ) -> DeploymentPackage: ...

    def update_deployment_package(
        self, project: str, name: str, version: str, pkg: DeploymentPackage
    ) -> None: ...

    def delete_deployment_package(self, project: str, name: str, version: str) -> None: ...

    def list_applications(
        self, project: str, *, page_size: int, offset: int
    ) -> Page[Application]: ...

    def get_application(self, project: str, name: str, version: str) -> Application: ...

    def update_application(
        self, project: str, name: str, version: str, app: Application
    ) -> None: ...

    def delete_application(self, project: str, name: str, version: str) -> None: ...

    def list_artifacts(
        self, project: str, *, page_size: int, offset: int
    ) -> Page[Artifact]: ...

    def delete_artifact(self, project: str, name: str) -> None: ...

    def list_registries(
        self, project: str, *, page_size: int, offset: int
    ) -> Page[Registry]: ...

    def delete_registry(self, project: str, name: str) -> None: ...


@dataclass(frozen=True)
class WipeError:
    """
    A single failure recorded during a wipe.

    Attributes:
        step: ``list``, ``prepare`` or ``delete``.
        kind: Entity kind (``deployment-package``, ``application``, ...).
        key: Entity key (``name:version`` or ``name``); None for list failures.
        error: Human-readable error message.
    """

    step: str
    kind: str
    key: str | None
    error: str

    def __str__(self) -> str:
        target = f"{self.kind} {self.key}" if self.key else self.kind
        return f"{self.step} {target}: {self.error}"


class Wiper:
    """Deletes all packages, applications, artifacts and registries of a project."""

    def __init__(self, client: CatalogClient, *, page_size: int = MAX_PAGE_SIZE) -> None:
        self.client = client
        self.page_size = page_size

    def wipe(self, project: str) -> list[WipeError]:
        """Run the preparation pass, then the deletion pass; return all failures."""
        steps: list[Callable[[str], list[WipeError]]] = [
            self.prepare_packages,
            self.prepare_applications,
            self.wipe_packages,
            self.wipe_applications,
            self.wipe_artifacts,
            self.wipe_registries,
        ]
        errors: list[WipeError] = []
        for step in steps:
            errors.extend(step(project))
        log.info("Wipe of project %s finished with %d error(s)", project, len(errors))
        return errors

    def _listing(
        self,
        kind: str,
        fetch: Callable[..., Page[T]],
        project: str,
        errors: list[WipeError],
    ) -> Iterator[T]:
        """Iterate a listing, turning list failures into recorded errors."""
        try:
            yield from paginate(
                lambda size, offset: fetch(project, page_size=size, offset=offset),
                page_size=self.page_size,
            )
        except CatalogStatusError as exc:
            # Non-2xx on a listing means there is nothing (more) to clean up.
            log.debug("Listing %ss returned %s; skipping", kind, exc.status_code)
        except Exception as e:  # noqa: BLE001
            errors.append(WipeError(step="list", kind=kind, key=None, error=str(e)))

    def prepare_packages(self, project: str) -> list[WipeError]:
        """Mark every package as not deployed and sever its references."""
        log.info("Preparing deployment packages of %s for deletion", project)
        errors: list[WipeError] = []
        for listed in self._listing(
            "deployment-package", self.client.list_deployment_packages, project, errors
        ):
            try:
                pkg = self.client.get_deployment_package(
                    project, listed.name, listed.version
                )
                self.client.update_deployment_package(
                    project, listed.name, listed.version, pkg.prepared_for_deletion()
                )
                log.debug("Prepared deployment package %s", listed.display_key)
            except Exception as e:  # noqa: BLE001
                errors.append(
                    WipeError(
                        step="prepare",
                        kind="deployment-package",
                        key=listed.display_key,
                        error=str(e),
                    )
                )
        return errors

    def prepare_applications(self, project: str) -> list[WipeError]:
        """Strip profiles from every application."""
        log.info("Preparing applications of %s for deletion", project)
        errors: list[WipeError] = []
        for listed in self._listing(
            "application", self.client.list_applications, project, errors
        ):
            try:
                app = self.client.get_application(project, listed.name, listed.version)
                self.client.update_application(
                    project, listed.name, listed.version, app.prepared_for_deletion()
                )
                log.debug("Prepared application %s", listed.display_key)
            except Exception as e:  # noqa: BLE001
                errors.append(
                    WipeError(
                        step="prepare",
                        kind="application",
                        key=listed.display_key,
                        error=str(e),
                    )
                )
        return errors

    def _delete_all(
        self,
        kind: str,
        fetch: Callable[..., Page[T]],
        delete: Callable[[T], None],
        project: str,
    ) -> list[WipeError]:
        errors: list[WipeError] = []
        # Snapshot first: deleting while paging by offset would skip items.
        items = list(self._listing(kind, fetch, project, errors))
        log.info("Deleting %d %s(s) of %s", len(items), kind, project)
        for item in items:
            key = getattr(item, "display_key", None)
            try:
                delete(item)
                log.debug("Deleted %s %s", kind, key)
            except Exception as e:  # noqa: BLE001
                errors.append(WipeError(step="delete", kind=kind, key=key, error=str(e)))
        return errors

    def wipe_packages(self, project: str) -> list[WipeError]:
        return self._delete_all(
            "deployment-package",
            self.client.list_deployment_packages,
            lambda p: self.client.delete_deployment_package(project, p.name, p.version),
            project,
        )

    def wipe_applications(self, project: str) -> list[WipeError]:
        return self._delete_all(
            "application",
            self.client.list_applications,
            lambda a: self.client.delete_application(project, a.name, a.version),
            project,
        )

    def wipe_artifacts(self, project: str) -> list[WipeError]:
        return self._delete_all(
            "artifact",
            self.client.list_artifacts,
            lambda a: self.client.delete_artifact(project, a.name),
            project,
        )

    def wipe_registries(self, project: str) -> list[WipeError]:
        return self._delete_all(
            "registry",
            self.client.list_registries,
            lambda r: self.client.delete_registry(project, r.name),
            project,
        )
