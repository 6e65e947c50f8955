import json
from pathlib import Path

from archiplan.catalog.operations import build_output_schema
from archiplan.models.execution_result import PlanExecutionResult
from archiplan.models.plan import ChangePlan
from archiplan.models.snapshot import ModelSnapshot
from archiplan.models.validation import ValidationResult


OUTPUT_DIR = Path("docs/schemas")


MODELS = {
    "change_plan.schema.json": ChangePlan,
    "validation_result.schema.json": ValidationResult,
    "execution_result.schema.json": PlanExecutionResult,
    "model_snapshot.schema.json": ModelSnapshot,
}


def export_schemas(output_dir: Path = OUTPUT_DIR) -> list[Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    documents = {"plan_output.schema.json": build_output_schema()}
    for filename, model in MODELS.items():
        documents[filename] = model.model_json_schema()

    written = []
    for filename, schema in documents.items():
        path = output_dir / filename
        path.write_text(json.dumps(schema, indent=2), encoding="utf-8")
        written.append(path)
    return written


def main() -> None:
    export_schemas()


if __name__ == "__main__":
    main()
