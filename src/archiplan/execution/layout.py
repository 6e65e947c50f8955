"""Deterministic placement of elements on views.

Objects placed without explicit coordinates fill a grid, left to right and
then top to bottom, one counter per view and per execution.
"""

from typing import Optional

from pydantic import BaseModel, Field

from ..models.plan import AddToView
from .config import ExecutorConfig
from .context import ExecutionContext


class Placement(BaseModel):
    x: float = Field(..., description="Left coordinate.")
    y: float = Field(..., description="Top coordinate.")
    width: float = Field(..., description="Width in pixels.")
    height: float = Field(..., description="Height in pixels.")
    auto: bool = Field(
        default=False, description="Whether a grid slot was consumed."
    )


def grid_position(slot: int, config: Optional[ExecutorConfig] = None) -> tuple[int, int]:
    """Returns the (x, y) of the given auto-grid slot.

    With the default config, slots 0..4 land at (30, 30), (190, 30),
    (350, 30), (510, 30) and (30, 110).
    """
    config = config or ExecutorConfig()
    column = slot % config.grid_columns
    row = slot // config.grid_columns
    return (
        config.grid_origin_x + column * config.grid_step_x,
        config.grid_origin_y + row * config.grid_step_y,
    )


def place(action: AddToView, view_key: str, ctx: ExecutionContext) -> Placement:
    """Computes where an add_to_view action puts its object.

    A grid slot is consumed whenever x or y is missing; a coordinate the
    action does give still overrides its own axis.
    """
    config = ctx.config
    width = action.width if action.width is not None else config.default_width
    height = action.height if action.height is not None else config.default_height

    if action.x is not None and action.y is not None:
        return Placement(x=action.x, y=action.y, width=width, height=height)

    grid_x, grid_y = grid_position(ctx.next_grid_slot(view_key), config)
    return Placement(
        x=action.x if action.x is not None else grid_x,
        y=action.y if action.y is not None else grid_y,
        width=width,
        height=height,
        auto=True,
    )
