import json
import runpy
from pathlib import Path

import jsonschema

TOOL_PATH = Path(__file__).resolve().parents[1] / "tools" / "export_schemas.py"


class TestTools:
    def test_export_schemas(self, tmp_path):
        tool = runpy.run_path(str(TOOL_PATH))
        written = tool["export_schemas"](tmp_path / "schemas")

        names = sorted(p.name for p in written)
        assert names == [
            "change_plan.schema.json",
            "execution_result.schema.json",
            "model_snapshot.schema.json",
            "plan_output.schema.json",
            "validation_result.schema.json",
        ]
        for path in written:
            schema = json.loads(path.read_text(encoding="utf-8"))
            # Will raise if invalid
            jsonschema.Draft202012Validator.check_schema(schema)

    def test_plan_output_schema_accepts_flat_plan(self, tmp_path, make_plan):
        from archiplan.catalog.operations import flatten_action

        tool = runpy.run_path(str(TOOL_PATH))
        tool["export_schemas"](tmp_path)
        schema = json.loads((tmp_path / "plan_output.schema.json").read_text(encoding="utf-8"))

        plan = make_plan(
            flatten_action(
                {"op": "create_element", "type": "Business Actor", "name": "Alice"}
            ),
            questions=None,
        )
        jsonschema.validate(plan, schema)
