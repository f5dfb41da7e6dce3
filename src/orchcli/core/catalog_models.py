"""Core domain models for the application catalog.

These models represent catalog entities in a simple, immutable form. They are
intentionally free of HTTP and CLI concerns.

A field set to ``None`` is *absent* and is left out of the wire payload; an
empty tuple or mapping is *present but empty* and is sent as ``[]`` / ``{}``.
Keys the tool does not interpret are kept in ``extra`` so that a
read-modify-write update does not drop them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping


class CatalogError(RuntimeError):
    """Base class for catalog service failures."""


class CatalogTransportError(CatalogError):
    """Raised when the catalog service cannot be reached or answers garbage."""


class CatalogStatusError(CatalogError):
    """Raised when the catalog service answers with a non-2xx status."""

    def __init__(self, method: str, url: str, status_code: int, message: str = ""):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.message = message
        detail = f": {message}" if message else ""
        super().__init__(f"{method} {url} returned {status_code}{detail}")


def _tuple_or_none(value: Any) -> tuple | None:
    if value is None:
        return None
    return tuple(value)


def _put(payload: dict[str, Any], key: str, value: Any) -> None:
    """Set ``key`` only when the value is present."""
    if value is not None:
        payload[key] = value


@dataclass(frozen=True)
class ApplicationReference:
    """Edge from a deployment package to one application version."""

    name: str
    version: str

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "ApplicationReference":
        return cls(name=str(data.get("name", "")), version=str(data.get("version", "")))

    def to_payload(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}


@dataclass(frozen=True)
class ApplicationDependency:
    """Directed edge: application ``name`` requires application ``requires``."""

    name: str
    requires: str

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "ApplicationDependency":
        return cls(name=str(data.get("name", "")), requires=str(data.get("requires", "")))

    def to_payload(self) -> dict[str, Any]:
        return {"name": self.name, "requires": self.requires}


_PACKAGE_KEYS = {
    "name",
    "version",
    "isDeployed",
    "profiles",
    "applicationReferences",
    "applicationDependencies",
    "defaultNamespaces",
    "defaultProfileName",
}


@dataclass(frozen=True)
class DeploymentPackage:
    """
    A named, versioned bundle of applications plus deployment profiles.

    Attributes:
        name: Package name.
        version: Package version.
        is_deployed: Whether the catalog considers the package deployed.
        profiles: Deployment profiles as raw mappings, or None when absent.
        application_references: Applications bundled by this package.
        application_dependencies: ``requires`` edges between bundled apps.
        default_namespaces: Application name to target namespace.
        default_profile_name: Name of the profile used when none is chosen.
        extra: Payload keys not interpreted by this tool.
    """

    name: str
    version: str
    is_deployed: bool | None = None
    profiles: tuple[Mapping[str, Any], ...] | None = None
    application_references: tuple[ApplicationReference, ...] | None = None
    application_dependencies: tuple[ApplicationDependency, ...] | None = None
    default_namespaces: Mapping[str, str] | None = None
    default_profile_name: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def display_key(self) -> str:
        return f"{self.name}:{self.version}"

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "DeploymentPackage":
        refs = data.get("applicationReferences")
        deps = data.get("applicationDependencies")
        namespaces = data.get("defaultNamespaces")
        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version", "")),
            is_deployed=data.get("isDeployed"),
            profiles=_tuple_or_none(data.get("profiles")),
            application_references=(
                tuple(ApplicationReference.from_payload(r) for r in refs)
                if refs is not None
                else None
            ),
            application_dependencies=(
                tuple(ApplicationDependency.from_payload(d) for d in deps)
                if deps is not None
                else None
            ),
            default_namespaces=dict(namespaces) if namespaces is not None else None,
            default_profile_name=data.get("defaultProfileName"),
            extra={k: v for k, v in data.items() if k not in _PACKAGE_KEYS},
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        payload["name"] = self.name
        payload["version"] = self.version
        _put(payload, "isDeployed", self.is_deployed)
        if self.profiles is not None:
            payload["profiles"] = [dict(p) for p in self.profiles]
        if self.application_references is not None:
            payload["applicationReferences"] = [
                r.to_payload() for r in self.application_references
            ]
        if self.application_dependencies is not None:
            payload["applicationDependencies"] = [
                d.to_payload() for d in self.application_dependencies
            ]
        if self.default_namespaces is not None:
            payload["defaultNamespaces"] = dict(self.default_namespaces)
        _put(payload, "defaultProfileName", self.default_profile_name)
        return payload

    def prepared_for_deletion(self) -> "DeploymentPackage":
        """Return a copy with every outbound reference severed and not deployed."""
        return replace(
            self,
            is_deployed=False,
            profiles=None,
            application_references=None,
            application_dependencies=None,
            default_namespaces=None,
            default_profile_name=None,
        )


_APPLICATION_KEYS = {
    "name",
    "version",
    "profiles",
    "defaultProfileName",
    "helmRegistryName",
    "imageRegistryName",
}


@dataclass(frozen=True)
class Application:
    """A named, versioned application (Helm chart plus profiles)."""

    name: str
    version: str
    profiles: tuple[Mapping[str, Any], ...] | None = None
    default_profile_name: str | None = None
    helm_registry_name: str | None = None
    image_registry_name: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def display_key(self) -> str:
        return f"{self.name}:{self.version}"

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Application":
        return cls(
            name=str(data.get("name", "")),
            version=str(data.get("version", "")),
            profiles=_tuple_or_none(data.get("profiles")),
            default_profile_name=data.get("defaultProfileName"),
            helm_registry_name=data.get("helmRegistryName"),
            image_registry_name=data.get("imageRegistryName"),
            extra={k: v for k, v in data.items() if k not in _APPLICATION_KEYS},
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        payload["name"] = self.name
        payload["version"] = self.version
        if self.profiles is not None:
            payload["profiles"] = [dict(p) for p in self.profiles]
        _put(payload, "defaultProfileName", self.default_profile_name)
        _put(payload, "helmRegistryName", self.helm_registry_name)
        _put(payload, "imageRegistryName", self.image_registry_name)
        return payload

    def prepared_for_deletion(self) -> "Application":
        """Return a copy without profiles or a default profile."""
        return replace(self, profiles=None, default_profile_name=None)


@dataclass(frozen=True)
class Artifact:
    """Lightweight representation of a catalog artifact."""

    name: str
    mime_type: str | None = None
    description: str | None = None

    @property
    def display_key(self) -> str:
        return self.name

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Artifact":
        return cls(
            name=str(data.get("name", "")),
            mime_type=data.get("mimeType"),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class Registry:
    """Lightweight representation of a Helm or image registry."""

    name: str
    type: str | None = None
    root_url: str | None = None

    @property
    def display_key(self) -> str:
        return self.name

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Registry":
        return cls(
            name=str(data.get("name", "")),
            type=data.get("type"),
            root_url=data.get("rootUrl"),
        )
