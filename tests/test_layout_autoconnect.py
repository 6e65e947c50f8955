import pytest

from archiplan.execution.autoconnect import auto_connect, connect_view
from archiplan.execution.config import ExecutorConfig
from archiplan.execution.executor import PlanExecutor
from archiplan.execution.layout import grid_position
from archiplan.models.graph import Relationship
from archiplan.persistence.in_memory import InMemoryModelStore


class TestGrid:
    @pytest.mark.parametrize(
        "slot, expected",
        [(0, (30, 30)), (1, (190, 30)), (2, (350, 30)), (3, (510, 30)), (4, (30, 110))],
    )
    def test_default_grid(self, slot, expected):
        assert grid_position(slot) == expected

    def test_custom_grid(self):
        config = ExecutorConfig(grid_columns=2, grid_origin_x=0, grid_origin_y=0)
        assert grid_position(3, config) == (160, 80)

    def test_fresh_view_fills_grid(self, oracle, make_plan):
        store = InMemoryModelStore()
        actions = [{"op": "create_view", "name": "Landscape", "ref_id": "v"}]
        for i in range(5):
            actions.append(
                {"op": "create_element", "type": "Node", "name": f"N{i}", "ref_id": f"n{i}"}
            )
        for i in range(5):
            actions.append({"op": "add_to_view", "view_id": "v", "element_id": f"n{i}"})

        result = PlanExecutor(store, oracle).apply(make_plan(*actions))

        assert result.ok
        placements = [(r.details["x"], r.details["y"]) for r in result.results[6:]]
        assert placements == [(30, 30), (190, 30), (350, 30), (510, 30), (30, 110)]
        assert all(r.details["auto_placed"] for r in result.results[6:])
        assert result.results[6].details["width"] == 120
        assert result.results[6].details["height"] == 55

    def test_given_axis_overrides_grid(self, executor_for, make_plan):
        result = executor_for().apply(
            make_plan(
                {"op": "add_to_view", "view_id": "v1", "element_id": "e1", "x": 500},
                {"op": "add_to_view", "view_id": "v1", "element_id": "e2", "x": 5, "y": 5},
                {"op": "add_to_view", "view_id": "v1", "element_id": "e3", "width": 200},
            )
        )
        first, second, third = (r.details for r in result.results)
        assert (first["x"], first["y"], first["auto_placed"]) == (500, 30, True)
        assert (second["x"], second["y"], second["auto_placed"]) == (5, 5, False)
        # explicit coordinates do not consume a slot
        assert (third["x"], third["y"], third["width"]) == (190, 30, 200)

    def test_counters_are_per_view(self, executor_for, make_plan):
        result = executor_for().apply(
            make_plan(
                {"op": "create_view", "name": "Other", "ref_id": "o"},
                {"op": "add_to_view", "view_id": "v1", "element_id": "e1"},
                {"op": "add_to_view", "view_id": "o", "element_id": "e1"},
            )
        )
        assert (result.results[1].details["x"], result.results[1].details["y"]) == (30, 30)
        assert (result.results[2].details["x"], result.results[2].details["y"]) == (30, 30)


@pytest.fixture
def executor_for(store, oracle):
    def factory(**config):
        return PlanExecutor(store, oracle, ExecutorConfig(**config))

    return factory


class TestAutoConnect:
    def test_apply_connects_placed_endpoints(self, store, executor_for, make_plan):
        result = executor_for().apply(
            make_plan(
                {"op": "add_to_view", "view_id": "v1", "element_id": "e1"},
                {"op": "add_to_view", "view_id": "v1", "element_id": "e2"},
            )
        )
        assert result.auto_connected == 1
        [connection] = store.connections(store.get("v1"))
        assert connection.relationship_id == "r1"

    def test_idempotent(self, store, executor_for, make_plan):
        executor_for().apply(
            make_plan(
                {"op": "add_to_view", "view_id": "v1", "element_id": "e1"},
                {"op": "add_to_view", "view_id": "v1", "element_id": "e2"},
            )
        )
        assert auto_connect(store, ["v1"]) == 0
        assert connect_view(store, store.get("v1")) == 0
        assert len(store.connections(store.get("v1"))) == 1

    def test_unrelated_and_non_view_ids_are_ignored(self, store):
        view = store.get("v1")
        store.add_element(view, store.get("e1"), 0, 0, 120, 55)
        store.add_element(view, store.get("e3"), 200, 0, 120, 55)
        assert auto_connect(store, ["v1", "e1", "missing"]) == 0

    def test_first_object_per_element_is_used(self, store):
        view = store.get("v1")
        first = store.add_element(view, store.get("e2"), 0, 0, 120, 55)
        store.add_element(view, store.get("e2"), 0, 200, 120, 55)
        alice = store.add_element(view, store.get("e1"), 200, 0, 120, 55)

        assert connect_view(store, view) == 1
        [connection] = store.connections(view)
        assert connection.source_object_id == first.id
        assert connection.target_object_id == alice.id

    def test_self_relationship_on_single_element_view(self, store):
        store.add(
            Relationship(
                id="r2",
                type="composition-relationship",
                source_id="e2",
                target_id="e2",
            )
        )
        view = store.get("v1")
        crm = store.add_element(view, store.get("e2"), 0, 0, 120, 55)

        assert connect_view(store, view) == 1
        [connection] = store.connections(view)
        assert connection.relationship_id == "r2"
        assert connection.source_object_id == connection.target_object_id == crm.id

    def test_disabled(self, store, executor_for, make_plan):
        result = executor_for(auto_connect=False).apply(
            make_plan(
                {"op": "add_to_view", "view_id": "v1", "element_id": "e1"},
                {"op": "add_to_view", "view_id": "v1", "element_id": "e2"},
            )
        )
        assert result.auto_connected == 0
        assert store.connections(store.get("v1")) == []

    def test_preview_never_connects(self, store, executor_for, make_plan):
        result = executor_for().preview(
            make_plan({"op": "add_to_view", "view_id": "v1", "element_id": "e1"})
        )
        assert result.auto_connected == 0
        assert store.children(store.get("v1")) == []

    def test_failure_is_reported_without_failing_plan(self, oracle, store, make_plan):
        class NoConnections(InMemoryModelStore):
            def add_connection(self, view, relationship, source, target):
                raise RuntimeError("connections unsupported")

        broken = NoConnections.from_snapshot(store.to_snapshot())
        result = PlanExecutor(broken, oracle).apply(
            make_plan(
                {"op": "add_to_view", "view_id": "v1", "element_id": "e1"},
                {"op": "add_to_view", "view_id": "v1", "element_id": "e2"},
            )
        )
        assert result.ok
        assert result.applied == 2
        assert result.auto_connect_error == "connections unsupported"
