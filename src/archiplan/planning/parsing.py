"""Turning producer output into a validated plan.

Producers do not always return bare JSON: the plan may be wrapped in prose or
in a markdown code fence. `prepare_plan` extracts the plan, normalizes its
flat actions and validates it, without ever raising.
"""

import json
import re
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from ..catalog.compatibility import CompatibilityOracle
from ..catalog.operations import normalize_actions
from ..models.plan import ChangePlan, PlanDecodeError, decode_plan
from ..models.validation import ValidationResult
from ..observability.logging import get_logger
from ..persistence.repository import EntityStore
from ..validation.validator import PlanValidator

logger = get_logger(__name__)

_FENCE = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```")


def _parse_object(text: str) -> Optional[dict[str, Any]]:
    try:
        value = json.loads(text)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def extract_json_from_text(text: Any) -> Optional[dict[str, Any]]:
    """Extracts a JSON object from text that may contain surrounding prose.

    Tries a direct parse, then the outermost {...} block, then a markdown
    code fence.

    Returns:
        The parsed object, or None if no JSON object could be found.
    """
    if not isinstance(text, str) or not text.strip():
        return None
    text = text.strip()

    parsed = _parse_object(text)
    if parsed is not None:
        return parsed

    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        parsed = _parse_object(text[start : end + 1])
        if parsed is not None:
            return parsed

    match = _FENCE.search(text)
    if match:
        return _parse_object(match.group(1).strip())
    return None


def load_plan_text(text: str) -> dict[str, Any]:
    """Extracts and normalizes a raw plan from producer text.

    Raises:
        PlanDecodeError: If the text contains no JSON object.
    """
    plan = extract_json_from_text(text)
    if plan is None:
        raise PlanDecodeError("Failed to extract JSON from response")
    return normalize_actions(plan)


class PreparedPlan(BaseModel):
    """The outcome of preparing producer output for execution.

    Attributes:
        ok: Whether the plan passed both validation phases.
        plan: The extracted, normalized raw plan.
        change_plan: The decoded plan, set when ok.
        validation: The validation result, if validation ran.
        error: Why the plan is not usable.
    """

    ok: bool = Field(default=False)
    plan: Optional[dict[str, Any]] = Field(default=None)
    change_plan: Optional[ChangePlan] = Field(default=None)
    validation: Optional[ValidationResult] = Field(default=None)
    error: Optional[str] = Field(default=None)


def prepare_plan(
    raw: Union[str, dict[str, Any]],
    store: EntityStore,
    oracle: CompatibilityOracle,
    scope: Optional[set[str]] = None,
) -> PreparedPlan:
    """Extracts, normalizes and validates a plan.

    Args:
        raw: Producer text or an already parsed plan object. Parsed objects
            are normalized in place.
        store: The model the plan targets.
        oracle: Compatibility oracle for the semantic phase.
        scope: Optional set of live ids actions may target.

    Returns:
        The prepared plan; `error` explains any failure.
    """
    result = PreparedPlan()

    plan = raw if isinstance(raw, dict) else extract_json_from_text(raw)
    if plan is None:
        result.error = "Failed to extract JSON from response"
        return result

    normalize_actions(plan)
    result.plan = plan

    validation = PlanValidator(store, oracle).validate(plan, scope=scope)
    result.validation = validation

    if not validation.schema_valid:
        result.error = "Schema validation failed: " + "; ".join(validation.errors)
        return result
    if not validation.semantic_valid:
        result.error = "Semantic validation failed: " + "; ".join(validation.errors)
        return result

    try:
        result.change_plan = decode_plan(plan)
    except PlanDecodeError as e:
        result.error = str(e)
        return result

    result.ok = True
    logger.info(
        "Plan prepared",
        extra={
            "extra_fields": {
                "event": "plan_prepared",
                "action_count": len(result.change_plan.actions),
                "warning_count": len(validation.warnings),
            }
        },
    )
    return result
