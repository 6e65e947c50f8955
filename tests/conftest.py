import pytest

from archiplan.catalog.compatibility import MatrixCompatibilityOracle
from archiplan.models.graph import Element, Relationship, View
from archiplan.persistence.in_memory import InMemoryModelStore


@pytest.fixture
def oracle():
    return MatrixCompatibilityOracle()


@pytest.fixture
def store():
    """A small model: Alice (actor), CRM (component), Invoice (object).

    CRM serves Alice through r1, and an empty view v1 exists.
    """
    store = InMemoryModelStore()
    store.add(Element(id="e1", type="business-actor", name="Alice"))
    store.add(Element(id="e2", type="application-component", name="CRM"))
    store.add(Element(id="e3", type="business-object", name="Invoice"))
    store.add(
        Relationship(
            id="r1",
            type="serving-relationship",
            source_id="e2",
            target_id="e1",
        )
    )
    store.add(View(id="v1", name="Main"))
    return store


def _make_plan(*actions, status="ready", **fields):
    plan = {
        "schema_version": "2.0",
        "status": status,
        "summary": "Test plan",
        "actions": list(actions),
    }
    plan.update(fields)
    return plan


@pytest.fixture
def make_plan():
    """Builds a raw wire plan from sparse action dicts."""
    return _make_plan
