import pytest

from caretaker.discovery import ModuleDiscovery, StaticDiscovery
from caretaker.errors import NamespaceResolutionError
from lifecycle_fixtures.app import NotAComponent
from lifecycle_fixtures.app.services import AuditLog, UserService
from lifecycle_fixtures.app.storage import Database, QueryHelper


def test_module_discovery_walks_subpackages():
    discovered = ModuleDiscovery().discover("lifecycle_fixtures.app")

    assert discovered == {NotAComponent, Database, QueryHelper, UserService, AuditLog}


def test_module_discovery_without_recursion_scans_only_the_package():
    discovered = ModuleDiscovery(recursive=False).discover("lifecycle_fixtures.app")

    assert discovered == {NotAComponent}


def test_module_discovery_of_single_module_ignores_imported_classes():
    discovered = ModuleDiscovery().discover("lifecycle_fixtures.app.services")

    assert discovered == {UserService, AuditLog}


def test_module_discovery_of_empty_package():
    assert ModuleDiscovery().discover("lifecycle_fixtures.empty") == set()


def test_module_discovery_of_unknown_namespace_raises():
    with pytest.raises(NamespaceResolutionError, match="Unable to resolve namespace 'lifecycle_fixtures.missing'") as raised:
        ModuleDiscovery().discover("lifecycle_fixtures.missing")

    assert raised.value.namespace == "lifecycle_fixtures.missing"
    assert isinstance(raised.value.__cause__, ImportError)


@pytest.mark.parametrize(
    "namespace",
    ["", ".relative", "lifecycle_fixtures.broken", "lifecycle_fixtures.broken.failing"],
)
def test_module_discovery_of_unimportable_namespace_raises(namespace):
    with pytest.raises(NamespaceResolutionError) as raised:
        ModuleDiscovery().discover(namespace)

    assert raised.value.__cause__ is not None


def test_module_discovery_names_the_failing_submodule():
    with pytest.raises(NamespaceResolutionError, match="lifecycle_fixtures.broken.failing") as raised:
        ModuleDiscovery().discover("lifecycle_fixtures.broken")

    assert raised.value.namespace == "lifecycle_fixtures.broken.failing"
    assert isinstance(raised.value.__cause__, RuntimeError)


def test_module_discovery_of_failing_subpackage_raises():
    with pytest.raises(NamespaceResolutionError) as raised:
        ModuleDiscovery().discover("lifecycle_fixtures.broken_package")

    assert raised.value.namespace == "lifecycle_fixtures.broken_package.inner"


def test_module_discovery_without_recursion_skips_failing_submodules():
    assert ModuleDiscovery(recursive=False).discover("lifecycle_fixtures.broken") == set()


def test_static_discovery():
    discovery = StaticDiscovery()

    @discovery.component("app")
    class Registered:
        pass

    discovery.register("app", Database)
    discovery.register("app", Database)
    discovery.register("other", QueryHelper)

    assert discovery.discover("app") == {Registered, Database}
    assert discovery.discover("other") == {QueryHelper}


def test_static_discovery_of_unknown_namespace_raises():
    with pytest.raises(NamespaceResolutionError, match="no types registered"):
        StaticDiscovery().discover("unknown")
