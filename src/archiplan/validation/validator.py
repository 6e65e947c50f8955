"""Two-phase plan validation.

The schema phase runs on the raw wire plan. The semantic phase runs only if
the schema phase is clean and the plan has at least one action. Neither phase
raises; problems are reported in the returned `ValidationResult`.
"""

from typing import Any, Optional

from ..catalog.compatibility import CompatibilityOracle
from ..models.plan import ChangePlan, PlanDecodeError, decode_plan
from ..models.validation import ValidationResult
from ..observability.logging import get_logger
from ..persistence.repository import EntityStore
from .schema import validate_schema
from .semantic import SemanticValidator

logger = get_logger(__name__)


class PlanValidator:
    """
    Validates change plans against the catalog, the live model and an oracle.
    """

    def __init__(self, store: EntityStore, oracle: CompatibilityOracle) -> None:
        self._semantic = SemanticValidator(store, oracle)

    def validate(
        self, plan: Any, scope: Optional[set[str]] = None
    ) -> ValidationResult:
        """Validates a plan.

        Args:
            plan: A raw (normalized) wire plan, or an already decoded ChangePlan.
            scope: Optional set of live ids actions may target. The schema
                phase never consults it.

        Returns:
            The combined result of both phases.
        """
        raw = plan.to_wire() if isinstance(plan, ChangePlan) else plan

        schema_errors = validate_schema(raw)
        if schema_errors:
            logger.info(
                f"Plan rejected by schema validation ({len(schema_errors)} errors)",
                extra={
                    "extra_fields": {
                        "event": "plan_schema_invalid",
                        "error_count": len(schema_errors),
                    }
                },
            )
            return ValidationResult(schema_valid=False, errors=schema_errors)

        try:
            decoded = decode_plan(plan)
        except PlanDecodeError as e:
            return ValidationResult(schema_valid=False, errors=[str(e)])

        if not decoded.actions:
            return ValidationResult(schema_valid=True)

        report = self._semantic.validate(decoded, scope=scope)
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=not report.errors,
            errors=report.errors,
            warnings=report.warnings,
        )
        logger.info(
            f"Validated plan with {len(decoded.actions)} actions: "
            f"{len(result.errors)} errors, {len(result.warnings)} warnings",
            extra={
                "extra_fields": {
                    "event": "plan_validated",
                    "action_count": len(decoded.actions),
                    "semantic_valid": result.semantic_valid,
                }
            },
        )
        return result


def validate_plan(
    plan: Any,
    store: EntityStore,
    oracle: CompatibilityOracle,
    scope: Optional[set[str]] = None,
) -> ValidationResult:
    """Convenience wrapper around `PlanValidator.validate`."""
    return PlanValidator(store, oracle).validate(plan, scope=scope)
