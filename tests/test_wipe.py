import pytest

from orchcli.core.catalog_models import (
    Application,
    ApplicationDependency,
    ApplicationReference,
    Artifact,
    CatalogStatusError,
    CatalogTransportError,
    DeploymentPackage,
    Registry,
)
from orchcli.core.paging import Page
from orchcli.core.wipe import WipeError, Wiper


class _CatalogStub:
    """In-memory catalog that records every call as `<op>:<kind>[:<key>]`."""

    def __init__(
        self,
        *,
        packages=(),
        applications=(),
        artifacts=(),
        registries=(),
        list_transport_errors=(),
        list_status_errors=(),
        failing=(),
    ):
        self.calls: list[str] = []
        self.store = {
            "deployment-package": {p.display_key: p for p in packages},
            "application": {a.display_key: a for a in applications},
            "artifact": {a.display_key: a for a in artifacts},
            "registry": {r.display_key: r for r in registries},
        }
        self.updated: dict[str, object] = {}
        self.list_transport_errors = set(list_transport_errors)
        self.list_status_errors = set(list_status_errors)
        self.failing = set(failing)

    def _page(self, kind: str, page_size: int, offset: int) -> Page:
        self.calls.append(f"list:{kind}:{offset}")
        if kind in self.list_transport_errors:
            raise CatalogTransportError("connection refused")
        if kind in self.list_status_errors:
            raise CatalogStatusError("GET", f"/{kind}", 500, "internal error")
        items = list(self.store[kind].values())
        return Page(items=items[offset : offset + page_size], total_elements=len(items))

    def _op(self, op: str, kind: str, key: str) -> None:
        call = f"{op}:{kind}:{key}"
        self.calls.append(call)
        if call in self.failing:
            raise CatalogStatusError("X", f"/{kind}/{key}", 409, f"{key} is busy")

    def list_deployment_packages(self, project, *, page_size, offset):
        return self._page("deployment-package", page_size, offset)

    def get_deployment_package(self, project, name, version):
        self._op("get", "deployment-package", f"{name}:{version}")
        return self.store["deployment-package"][f"{name}:{version}"]

    def update_deployment_package(self, project, name, version, pkg):
        self._op("update", "deployment-package", f"{name}:{version}")
        self.updated[f"{name}:{version}"] = pkg

    def delete_deployment_package(self, project, name, version):
        self._op("delete", "deployment-package", f"{name}:{version}")
        del self.store["deployment-package"][f"{name}:{version}"]

    def list_applications(self, project, *, page_size, offset):
        return self._page("application", page_size, offset)

    def get_application(self, project, name, version):
        self._op("get", "application", f"{name}:{version}")
        return self.store["application"][f"{name}:{version}"]

    def update_application(self, project, name, version, app):
        self._op("update", "application", f"{name}:{version}")
        self.updated[f"{name}:{version}"] = app

    def delete_application(self, project, name, version):
        self._op("delete", "application", f"{name}:{version}")
        del self.store["application"][f"{name}:{version}"]

    def list_artifacts(self, project, *, page_size, offset):
        return self._page("artifact", page_size, offset)

    def delete_artifact(self, project, name):
        self._op("delete", "artifact", name)
        del self.store["artifact"][name]

    def list_registries(self, project, *, page_size, offset):
        return self._page("registry", page_size, offset)

    def delete_registry(self, project, name):
        self._op("delete", "registry", name)
        del self.store["registry"][name]


def _package() -> DeploymentPackage:
    return DeploymentPackage(
        name="pkg",
        version="1.0",
        is_deployed=True,
        profiles=({"name": "default", "applicationProfiles": {"app": "small"}},),
        application_references=(ApplicationReference("app", "1.0"),),
        application_dependencies=(ApplicationDependency("app", "db"),),
        default_namespaces={"app": "apps"},
        default_profile_name="default",
        extra={"displayName": "Package"},
    )


def _application() -> Application:
    return Application(
        name="app",
        version="1.0",
        profiles=({"name": "small"},),
        default_profile_name="small",
        helm_registry_name="harbor",
    )


def test_wipe_prepares_then_deletes_in_order():
    stub = _CatalogStub(packages=[_package()], applications=[_application()])

    errors = Wiper(stub).wipe("proj")

    assert errors == []
    assert stub.calls == [
        "list:deployment-package:0",
        "get:deployment-package:pkg:1.0",
        "update:deployment-package:pkg:1.0",
        "list:application:0",
        "get:application:app:1.0",
        "update:application:app:1.0",
        "list:deployment-package:0",
        "delete:deployment-package:pkg:1.0",
        "list:application:0",
        "delete:application:app:1.0",
        "list:artifact:0",
        "list:registry:0",
    ]

    pkg = stub.updated["pkg:1.0"]
    assert pkg.is_deployed is False
    assert pkg.profiles is None
    assert pkg.application_references is None
    assert pkg.application_dependencies is None
    assert pkg.default_namespaces is None
    assert pkg.default_profile_name is None
    assert pkg.extra == {"displayName": "Package"}

    app = stub.updated["app:1.0"]
    assert app.profiles is None
    assert app.default_profile_name is None
    assert app.helm_registry_name == "harbor"


def test_every_prepare_happens_before_any_delete():
    packages = [
        DeploymentPackage(name=f"pkg{i}", version="1.0", is_deployed=True)
        for i in range(3)
    ]
    apps = [Application(name=f"app{i}", version="1.0") for i in range(3)]
    stub = _CatalogStub(packages=packages, applications=apps)

    Wiper(stub).wipe("proj")

    last_update = max(i for i, c in enumerate(stub.calls) if c.startswith("update:"))
    first_delete = min(i for i, c in enumerate(stub.calls) if c.startswith("delete:"))
    assert last_update < first_delete


def test_transport_error_on_list_is_reported_once_and_other_steps_run():
    stub = _CatalogStub(
        registries=[Registry(name="reg1")],
        list_transport_errors={"artifact"},
    )

    errors = Wiper(stub).wipe("proj")

    assert len(errors) == 1
    assert errors[0].step == "list"
    assert errors[0].kind == "artifact"
    assert errors[0].key is None
    assert "delete:registry:reg1" in stub.calls


def test_status_error_on_list_is_treated_as_empty():
    stub = _CatalogStub(
        artifacts=[Artifact(name="a1")],
        registries=[Registry(name="reg1")],
        list_status_errors={"artifact", "deployment-package"},
    )

    errors = Wiper(stub).wipe("proj")

    assert errors == []
    assert "delete:artifact:a1" not in stub.calls
    assert "delete:registry:reg1" in stub.calls


def test_failed_delete_does_not_stop_the_sweep():
    stub = _CatalogStub(
        registries=[Registry(name="reg1"), Registry(name="reg2")],
        failing={"delete:registry:reg1"},
    )

    errors = Wiper(stub).wipe("proj")

    assert len(errors) == 1
    assert (errors[0].step, errors[0].kind, errors[0].key) == ("delete", "registry", "reg1")
    assert "reg1 is busy" in errors[0].error
    assert "delete:registry:reg2" in stub.calls
    assert list(stub.store["registry"]) == ["reg1"]


def test_failed_prepare_is_recorded_and_deletion_still_attempted():
    stub = _CatalogStub(
        packages=[_package()],
        failing={"get:deployment-package:pkg:1.0"},
    )

    errors = Wiper(stub).wipe("proj")

    assert [(e.step, e.kind, e.key) for e in errors] == [
        ("prepare", "deployment-package", "pkg:1.0")
    ]
    assert "update:deployment-package:pkg:1.0" not in stub.calls
    assert "delete:deployment-package:pkg:1.0" in stub.calls


def test_unexpected_exception_on_entity_is_recorded():
    class _Broken(_CatalogStub):
        def delete_artifact(self, project, name):
            raise KeyError(name)

    stub = _Broken(artifacts=[Artifact(name="a1"), Artifact(name="a2")])

    errors = Wiper(stub).wipe("proj")

    assert [e.key for e in errors] == ["a1", "a2"]


@pytest.mark.parametrize("count", [0, 1, 2, 5])
def test_deletion_covers_every_page_exactly_once(count: int):
    stub = _CatalogStub(artifacts=[Artifact(name=f"a{i}") for i in range(count)])

    errors = Wiper(stub, page_size=2).wipe_artifacts("proj")

    assert errors == []
    deletes = [c for c in stub.calls if c.startswith("delete:")]
    assert sorted(deletes) == sorted(f"delete:artifact:a{i}" for i in range(count))
    assert stub.store["artifact"] == {}
    offsets = [int(c.rsplit(":", 1)[1]) for c in stub.calls if c.startswith("list:")]
    assert offsets == sorted(set(offsets))


def test_prepare_pages_through_all_applications():
    apps = [Application(name=f"app{i}", version="1.0") for i in range(5)]
    stub = _CatalogStub(applications=apps)

    errors = Wiper(stub, page_size=2).prepare_applications("proj")

    assert errors == []
    assert [c for c in stub.calls if c.startswith("list:")] == [
        "list:application:0",
        "list:application:2",
        "list:application:4",
    ]
    assert sorted(stub.updated) == sorted(a.display_key for a in apps)


def test_wipe_error_renders_single_line():
    err = WipeError(step="delete", kind="registry", key="reg1", error="409 busy")
    assert str(err) == "delete registry reg1: 409 busy"
    assert str(WipeError(step="list", kind="artifact", key=None, error="down")) == (
        "list artifact: down"
    )


def test_prepare_updates_the_listed_key_not_the_fetched_one():
    class _Anonymous(_CatalogStub):
        def get_deployment_package(self, project, name, version):
            self._op("get", "deployment-package", f"{name}:{version}")
            return DeploymentPackage(name="", version="", is_deployed=True)

    stub = _Anonymous(packages=[_package()])

    errors = Wiper(stub).prepare_packages("proj")

    assert errors == []
    assert "update:deployment-package:pkg:1.0" in stub.calls
    assert stub.updated["pkg:1.0"].is_deployed is False
