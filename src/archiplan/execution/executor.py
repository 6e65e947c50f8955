"""Plan executor.

Interprets a validated change plan in one of two modes. Preview describes
every action without touching the model; apply mutates the model action by
action, then wires the touched views with the auto-connect post-pass. Both
modes walk the actions strictly in order and never raise for a failing action.
"""

from typing import Any, Mapping, Optional, Union

from ..catalog.compatibility import CompatibilityOracle
from ..models.enums import ExecutionMode, PlanStatus
from ..models.execution_result import ActionOutcome, PlanExecutionResult
from ..models.plan import ChangePlan, PlanAction, PlanDecodeError, decode_action
from ..observability.logging import get_logger
from ..persistence.repository import ModelStore
from .autoconnect import auto_connect
from .config import ExecutorConfig
from .context import ExecutionContext
from .dispatch import OPERATION_HANDLERS
from .errors import ActionFailure

logger = get_logger(__name__)

# (decoded action or None, op name, decode error)
_Entry = tuple[Optional[PlanAction], Optional[str], Optional[str]]


def _unpack(plan: Union[ChangePlan, Mapping[str, Any]]):
    if isinstance(plan, ChangePlan):
        entries: list[_Entry] = [(a, a.op, None) for a in plan.actions]
        return plan.status.value, plan.summary, list(plan.questions), entries

    entries = []
    raw_actions = plan.get("actions")
    for raw in raw_actions if isinstance(raw_actions, list) else []:
        op = raw.get("op") if isinstance(raw, Mapping) else None
        op = op if isinstance(op, str) else None
        try:
            entries.append((decode_action(raw), op, None))
        except PlanDecodeError as e:
            entries.append((None, op, str(e)))
    status = plan.get("status")
    if isinstance(status, PlanStatus):
        status = status.value
    return status, plan.get("summary"), list(plan.get("questions") or []), entries


def _guard_message(status: Any, summary: Any, questions: list[str]) -> str:
    match status:
        case PlanStatus.NEEDS_CLARIFICATION.value:
            return "Plan needs clarification. Questions: " + "; ".join(questions)
        case PlanStatus.REFUSAL.value:
            return f"Plan was refused: {summary}"
        case _:
            return f"Plan status {status!r} is not executable"


class PlanExecutor:
    """
    Previews or applies change plans against a model store.
    """

    def __init__(
        self,
        store: ModelStore,
        oracle: CompatibilityOracle,
        config: Optional[ExecutorConfig] = None,
    ) -> None:
        self._store = store
        self._oracle = oracle
        self._config = config or ExecutorConfig()

    @property
    def config(self) -> ExecutorConfig:
        return self._config

    def preview(self, plan: Union[ChangePlan, Mapping[str, Any]]) -> PlanExecutionResult:
        return self.execute(plan, mode=ExecutionMode.PREVIEW)

    def apply(
        self,
        plan: Union[ChangePlan, Mapping[str, Any]],
        stop_on_error: Optional[bool] = None,
    ) -> PlanExecutionResult:
        return self.execute(plan, mode=ExecutionMode.APPLY, stop_on_error=stop_on_error)

    def execute(
        self,
        plan: Union[ChangePlan, Mapping[str, Any]],
        mode: Union[ExecutionMode, str] = ExecutionMode.PREVIEW,
        stop_on_error: Optional[bool] = None,
    ) -> PlanExecutionResult:
        """Executes a plan.

        The plan is expected to have passed validation. A raw wire plan is
        accepted too; actions that cannot be decoded are reported as failed,
        and input that is not a plan object yields a failed result.

        Args:
            plan: A ChangePlan or a raw (normalized) wire plan.
            mode: Preview (describe only) or apply (mutate).
            stop_on_error: Whether later actions are skipped after the first
                failure. Defaults to the executor config.

        Returns:
            The aggregate execution result.
        """
        mode = ExecutionMode(mode)
        stop = self._config.stop_on_error if stop_on_error is None else stop_on_error
        result = PlanExecutionResult(mode=mode)

        if not isinstance(plan, (ChangePlan, Mapping)):
            result.ok = False
            result.message = "Plan must be a JSON object"
            logger.warning(
                f"Plan not executed: {result.message}",
                extra={"extra_fields": {"event": "plan_rejected", "type": type(plan).__name__}},
            )
            return result

        status, summary, questions, entries = _unpack(plan)

        if status != PlanStatus.READY.value:
            result.ok = False
            result.message = _guard_message(status, summary, questions)
            logger.info(
                f"Plan not executed: {result.message}",
                extra={"extra_fields": {"event": "plan_not_ready", "status": status}},
            )
            return result

        if not entries:
            result.message = "No actions in plan."
            return result

        ctx = ExecutionContext(
            mode=mode, store=self._store, oracle=self._oracle, config=self._config
        )
        stopped = False
        for index, (action, op, decode_error) in enumerate(entries):
            outcome = ActionOutcome(index=index, op=op)

            if stopped:
                outcome.skipped = True
                result.skipped += 1
                result.results.append(outcome)
                continue

            if decode_error is not None:
                outcome.error = f"Malformed action: {decode_error}"
            elif ctx.is_preview:
                self._describe(action, outcome, ctx)
            else:
                self._apply(action, outcome, ctx)

            if outcome.ok:
                result.applied += 1
            else:
                result.failed += 1
                result.ok = False
                logger.warning(
                    f"Action {index} ({op}) failed: {outcome.error}",
                    extra={
                        "extra_fields": {
                            "event": "plan_action_failed",
                            "index": index,
                            "op": op,
                        }
                    },
                )
                if stop:
                    stopped = True
            result.results.append(outcome)

        if not ctx.is_preview and self._config.auto_connect and ctx.touched_views:
            self._auto_connect(ctx, result)

        logger.info(
            f"Plan {mode.value} finished: {result.applied} applied, "
            f"{result.failed} failed, {result.skipped} skipped",
            extra={
                "extra_fields": {
                    "event": "plan_executed",
                    "mode": mode.value,
                    "applied": result.applied,
                    "failed": result.failed,
                    "skipped": result.skipped,
                    "auto_connected": result.auto_connected,
                }
            },
        )
        return result

    def _describe(self, action: PlanAction, outcome: ActionOutcome, ctx: ExecutionContext):
        try:
            outcome.preview = OPERATION_HANDLERS[action.op].describe(action, ctx)
            outcome.ok = True
        except Exception as e:
            logger.exception(f"Unexpected error describing {action.op}: {str(e)}")
            outcome.error = str(e)

    def _apply(self, action: PlanAction, outcome: ActionOutcome, ctx: ExecutionContext):
        try:
            outcome.details = OPERATION_HANDLERS[action.op].apply(action, ctx)
            outcome.ok = True
        except ActionFailure as e:
            outcome.error = e.detail
        except Exception as e:
            logger.exception(f"Unexpected error applying {action.op}: {str(e)}")
            outcome.error = str(e)

    def _auto_connect(self, ctx: ExecutionContext, result: PlanExecutionResult):
        try:
            result.auto_connected = auto_connect(self._store, ctx.touched_views)
        except Exception as e:
            result.auto_connect_error = str(e)
            logger.warning(
                f"Auto-connect failed: {str(e)}",
                extra={"extra_fields": {"event": "auto_connect_failed"}},
            )


def execute_plan(
    plan: Union[ChangePlan, Mapping[str, Any]],
    store: ModelStore,
    oracle: CompatibilityOracle,
    preview: bool = True,
    stop_on_error: Optional[bool] = None,
    config: Optional[ExecutorConfig] = None,
) -> PlanExecutionResult:
    """Convenience wrapper around `PlanExecutor.execute`."""
    mode = ExecutionMode.PREVIEW if preview else ExecutionMode.APPLY
    return PlanExecutor(store, oracle, config).execute(
        plan, mode=mode, stop_on_error=stop_on_error
    )
