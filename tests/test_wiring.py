from dataclasses import dataclass

import pytest

from caretaker.domain import ComponentDescriptor, DependencySlot
from caretaker.errors import (
    ComponentConstructionError,
    DuplicateComponentNameError,
    UnresolvedDependencyError,
)
from caretaker.wiring import WiringManager


class Database:
    pass


class Cache:
    pass


class Service:
    pass


@dataclass(frozen=True)
class FrozenService:
    pass


@pytest.fixture
def wiring() -> WiringManager:
    return WiringManager()


@pytest.fixture
def descriptors() -> list[ComponentDescriptor]:
    return [
        ComponentDescriptor(Database, name="db"),
        ComponentDescriptor(Cache, slots=(DependencySlot("db", Database),)),
        ComponentDescriptor(
            Service,
            slots=(DependencySlot("db", Database), DependencySlot("cache", Cache)),
        ),
    ]


def test_wire_returns_instances_in_registration_order(wiring, descriptors):
    wired = wiring.wire(descriptors)

    assert [type(component) for component in wired] == [Database, Cache, Service]


def test_components_are_registered_by_resolved_name(wiring, descriptors):
    wiring.wire(descriptors)

    assert list(wiring.components) == [
        "db",
        f"{__name__}.Cache",
        f"{__name__}.Service",
    ]


def test_every_slot_holds_the_registered_instance(wiring, descriptors):
    wiring.wire(descriptors)
    components = wiring.components
    database = components["db"]
    cache = components[f"{__name__}.Cache"]
    service = components[f"{__name__}.Service"]

    assert cache.db is database
    assert service.db is database
    assert service.cache is cache


def test_injection_does_not_depend_on_construction_order(wiring):
    wired = wiring.wire(
        [
            ComponentDescriptor(Service, slots=(DependencySlot("db", Database),)),
            ComponentDescriptor(Database),
        ]
    )

    assert wired[0].db is wired[1]


def test_injects_into_frozen_dataclass(wiring):
    wired = wiring.wire(
        [
            ComponentDescriptor(Database),
            ComponentDescriptor(FrozenService, slots=(DependencySlot("db", Database),)),
        ]
    )

    assert wired[1].db is wired[0]


def test_uses_descriptor_factory(wiring):
    database = Database()

    wired = wiring.wire([ComponentDescriptor(Database, factory=lambda: database)])

    assert wired == [database]


def test_components_view_is_read_only(wiring, descriptors):
    wiring.wire(descriptors)

    with pytest.raises(TypeError):
        wiring.components["other"] = object()


def test_duplicate_name_raises(wiring):
    with pytest.raises(DuplicateComponentNameError, match="Component for 'x' already exists"):
        wiring.wire(
            [ComponentDescriptor(Database, name="x"), ComponentDescriptor(Cache, name="x")]
        )

    assert len(wiring.components) == 0


def test_construction_failure_raises(wiring):
    class Broken:
        def __init__(self):
            raise ValueError("boom")

    with pytest.raises(ComponentConstructionError, match="Unable to construct component 'broken'") as raised:
        wiring.wire([ComponentDescriptor(Database), ComponentDescriptor(Broken, name="broken")])

    assert isinstance(raised.value.__cause__, ValueError)
    assert raised.value.component == "broken"
    assert len(wiring.components) == 0


def test_constructor_requiring_arguments_raises(wiring):
    class NeedsArgument:
        def __init__(self, value):
            self.value = value

    with pytest.raises(ComponentConstructionError):
        wiring.wire([ComponentDescriptor(NeedsArgument)])


def test_unresolved_dependency_raises(wiring):
    with pytest.raises(UnresolvedDependencyError, match="Dependency .*Cache.* not found"):
        wiring.wire([ComponentDescriptor(Service, slots=(DependencySlot("cache", Cache),))])

    assert len(wiring.components) == 0


def test_wiring_nothing_returns_nothing(wiring):
    assert wiring.wire([]) == []
