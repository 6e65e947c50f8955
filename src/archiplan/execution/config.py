import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {raw!r}")


class ExecutorConfig(BaseModel):
    """
    Static configuration for the plan executor.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    stop_on_error: bool = Field(
        default=True,
        description="Whether every action after the first failure is skipped.",
    )
    auto_connect: bool = Field(
        default=True,
        description="Whether touched views are wired with existing relationships after apply.",
    )
    grid_columns: int = Field(
        default=4, ge=1, description="Number of columns in the auto-grid."
    )
    grid_origin_x: int = Field(default=30, description="X of the first grid cell.")
    grid_origin_y: int = Field(default=30, description="Y of the first grid cell.")
    grid_step_x: int = Field(default=160, description="Horizontal distance between cells.")
    grid_step_y: int = Field(default=80, description="Vertical distance between cells.")
    default_width: int = Field(
        default=120, ge=10, description="Width used when an action gives none."
    )
    default_height: int = Field(
        default=55, ge=10, description="Height used when an action gives none."
    )

    @classmethod
    def from_env(cls, **overrides) -> "ExecutorConfig":
        """Builds a config from ARCHIPLAN_STOP_ON_ERROR and ARCHIPLAN_AUTO_CONNECT.

        Args:
            **overrides: Field values that take precedence over the environment.

        Raises:
            ValueError: If an environment variable is not a recognizable boolean.
        """
        values: dict[str, Optional[bool]] = {
            "stop_on_error": _env_flag("ARCHIPLAN_STOP_ON_ERROR", True),
            "auto_connect": _env_flag("ARCHIPLAN_AUTO_CONNECT", True),
        }
        values.update(overrides)
        return cls(**values)
