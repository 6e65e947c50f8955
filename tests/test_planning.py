from archiplan.catalog.labels import RELATIONSHIP_LABELS
from archiplan.catalog.operations import get_valid_ops
from archiplan.persistence.in_memory import DEFAULT_FOLDERS, InMemoryModelStore
from archiplan.planning.context import (
    build_planning_context,
    build_relationship_guide,
    format_element_type,
)


class TestPlanningContext:
    def test_whole_model(self, store):
        context = build_planning_context(store)

        assert context.schema_version == "2.0"
        assert context.scope.mode == "all"
        assert (
            context.scope.element_count,
            context.scope.relationship_count,
            context.scope.view_count,
        ) == (3, 1, 1)
        assert [(e.id, e.type) for e in context.elements] == [
            ("e1", "Business Actor"),
            ("e2", "Application Component"),
            ("e3", "Business Object"),
        ]
        [relationship] = context.relationships
        assert relationship.type == "Serving"
        assert (relationship.source_id, relationship.target_id) == ("e2", "e1")
        assert context.allowed_ops == get_valid_ops()
        assert context.allowed_relationship_types == list(RELATIONSHIP_LABELS)
        assert context.folders == DEFAULT_FOLDERS

    def test_selected_elements(self, store):
        context = build_planning_context(store, element_ids=["e1", "e3", "r1", "ghost"])

        assert context.scope.mode == "selected"
        assert [e.id for e in context.elements] == ["e1", "e3"]
        # r1 has an endpoint outside the selection
        assert context.relationships == []
        assert [v.name for v in context.views] == ["Main"]

    def test_optional_detail(self, store):
        alice = store.get("e1")
        store.set_documentation(alice, "A customer")
        store.set_property(alice, "tier", "gold")

        bare = build_planning_context(store).to_json_dict()["elements"][0]
        assert "documentation" not in bare and "properties" not in bare

        rich = build_planning_context(
            store, include_documentation=True, include_properties=True
        ).to_json_dict()["elements"][0]
        assert rich["documentation"] == "A customer"
        assert rich["properties"] == {"tier": "gold"}

    def test_limits_and_flags(self, store):
        context = build_planning_context(
            store,
            max_elements=1,
            include_relationships=False,
            allowed_ops=["rename_element"],
        )
        assert [e.id for e in context.elements] == ["e1"]
        assert context.relationships == []
        assert context.allowed_ops == ["rename_element"]

    def test_folder_paths_list_parents_first(self):
        store = InMemoryModelStore()
        business = next(f for f in store.top_level_folders() if f.name == "Business")
        actors = store.create_folder("Actors", parent=business)
        store.create_folder("External", parent=actors)

        folders = build_planning_context(store).folders
        assert folders.index("Business") < folders.index("Business/Actors")
        assert folders.index("Business/Actors") < folders.index("Business/Actors/External")

    def test_format_element_type(self):
        assert format_element_type("application-component") == "Application Component"
        assert format_element_type("custom-thing") == "Custom Thing"
        assert format_element_type("") == "Unknown"


class TestRelationshipGuide:
    def test_guide_lists_allowed_pairs(self, store, oracle):
        guide = build_relationship_guide(build_planning_context(store), oracle)
        lines = guide.splitlines()

        assert lines[0] == "## Allowed Relationships Reference"
        assert "Application Component:" in lines
        start = lines.index("Application Component:")
        to_actor = next(
            line for line in lines[start + 1 :] if line.startswith("  -> Business Actor:")
        )
        assert "Serving" in to_actor
        assert "Assignment" not in to_actor

    def test_empty_context(self, oracle):
        context = build_planning_context(InMemoryModelStore())
        assert build_relationship_guide(context, oracle) == ""
