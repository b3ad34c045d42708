from __future__ import annotations

from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Rectangle(BaseModel):
    """Rectangle with identifier and real-world dimensions (in millimetres)."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    id: str = Field(description="Unique identifier for the rectangle")
    width_mm: float = Field(gt=0, description="Width of the rectangle in mm")
    height_mm: float = Field(gt=0, description="Height of the rectangle in mm")


class PrintObject(Rectangle):
    """A rectangle placed in layout space, optionally carrying a texture."""

    label: str = Field(default="", description="Display label")
    x_mm: float = Field(default=0.0, description="X offset of the top-left corner in layout space")
    y_mm: float = Field(default=0.0, description="Y offset of the top-left corner in layout space")
    color: str = Field(default="#5c6ac4", description="Fill colour as a hex string")
    texture_src: Optional[str] = Field(
        default=None,
        description="Texture source: a filesystem path or a base64 data URL")


class SheetDimensions(BaseModel):
    """Size of a single physical sheet."""

    model_config = ConfigDict(allow_inf_nan=False)

    width_mm: float = Field(gt=0, description="Sheet width in mm")
    height_mm: float = Field(gt=0, description="Sheet height in mm")


class Placement(BaseModel):
    """Top-left offset of a rectangle's origin in layout space."""

    x_mm: float
    y_mm: float


class PackingResult(BaseModel):
    """Grid size and placement map chosen by the layout optimiser."""

    columns: int = Field(ge=1)
    rows: int = Field(ge=1)
    placements: dict[str, Placement] = Field(default_factory=dict)
    layout_width_mm: float = 0.0
    layout_height_mm: float = 0.0
    waste_area: float = 0.0


class FillCommand(BaseModel):
    """Flat colour rectangle in sheet-relative mm, always outlined."""

    kind: Literal["fill"] = "fill"
    object_id: str
    x: float
    y: float
    w: float
    h: float
    color_rgb: Tuple[int, int, int]
    stroke: bool = True


class ImageCropCommand(BaseModel):
    """Source pixel crop drawn into a sheet-relative mm rectangle, always outlined."""

    kind: Literal["image"] = "image"
    object_id: str
    x: float
    y: float
    w: float
    h: float
    src_x: float
    src_y: float
    src_w: float
    src_h: float
    stroke: bool = True


DrawCommand = Annotated[Union[FillCommand, ImageCropCommand], Field(discriminator="kind")]


class Page(BaseModel):
    """Draw commands for one non-empty sheet cell."""

    row_index: int = Field(ge=0)
    column_index: int = Field(ge=0)
    commands: list[DrawCommand] = Field(default_factory=list)
