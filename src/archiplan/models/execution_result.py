"""Data models for reporting plan execution outcomes.

This module defines the structures returned by the plan executor after a
preview or apply run.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import ExecutionMode


class ActionOutcome(BaseModel):
    """The outcome of a single plan action.

    Attributes:
        index: Position of the action in the plan.
        op: The operation name, or None for an action too malformed to tell.
        ok: Whether the action was described (preview) or applied (apply).
        skipped: Whether the action was skipped after an earlier failure.
        preview: One-line human description (preview mode only).
        error: Failure detail if the action could not be carried out.
        details: Operation-specific data such as created IDs and old values.
    """

    index: int = Field(..., ge=0, description="Position of the action in the plan.")
    op: Optional[str] = Field(default=None, description="Operation name.")
    ok: bool = Field(default=False, description="Whether the action succeeded.")
    skipped: bool = Field(
        default=False, description="Whether the action was skipped after a failure."
    )
    preview: Optional[str] = Field(
        default=None, description="Human-readable description (preview mode)."
    )
    error: Optional[str] = Field(
        default=None, description="Failure detail, if any."
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Operation-specific data (created IDs, old values, positions).",
    )


class PlanExecutionResult(BaseModel):
    """The aggregate result of executing a change plan.

    Attributes:
        ok: False if the plan was not executable or any action failed.
        mode: Whether the plan was previewed or applied.
        applied: Number of actions described or applied.
        failed: Number of actions that failed.
        skipped: Number of actions skipped after a failure.
        results: Per-action outcomes, in plan order.
        auto_connected: Number of view connections added by the post-pass.
        auto_connect_error: Post-pass failure detail; never affects ok.
        message: Summary message for non-executable or empty plans.
    """

    model_config = ConfigDict(use_enum_values=True)

    ok: bool = Field(default=True, description="Overall success flag.")
    mode: ExecutionMode = Field(..., description="Preview or apply.")
    applied: int = Field(default=0, ge=0, description="Actions applied or described.")
    failed: int = Field(default=0, ge=0, description="Actions that failed.")
    skipped: int = Field(default=0, ge=0, description="Actions skipped.")
    results: list[ActionOutcome] = Field(
        default_factory=list, description="Per-action outcomes in plan order."
    )
    auto_connected: int = Field(
        default=0, ge=0, description="Connections added by the auto-connect pass."
    )
    auto_connect_error: Optional[str] = Field(
        default=None, description="Auto-connect failure detail, if any."
    )
    message: Optional[str] = Field(
        default=None, description="Summary message, e.g. for non-ready plans."
    )
