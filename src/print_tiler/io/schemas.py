"""Data schemas for input/output operations."""

from __future__ import annotations

import logging
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from print_tiler.constants import get_sheet_dimensions
from print_tiler.layout import create_print_objects
from print_tiler.models import PackingResult, Page, PrintObject, SheetDimensions

logger = logging.getLogger(__name__)


class PrintSpecSchema(BaseModel):
    """Schema for a batch of identical prints entered in user units."""
    model_config = ConfigDict(allow_inf_nan=False)

    width: float = Field(gt=0, description="Width of the print")
    height: float = Field(gt=0, description="Height of the print")
    unit: Literal["mm", "cm", "in"] = Field(default="mm", description="Unit of width and height")
    quantity: int = Field(default=1, ge=1, description="Number of copies (capped at 25)")
    texture_src: Optional[str] = Field(default=None, description="Texture path or data URL")


class LayoutRequestSchema(BaseModel):
    """Schema for a layout: sheet, grid and the objects on it."""
    sheet: Optional[SheetDimensions] = Field(default=None, description="Explicit sheet size in mm")
    paper: Optional[str] = Field(default=None, description="Paper preset, e.g. 'a4'")
    orientation: Literal["portrait", "landscape"] = "portrait"
    columns: int = Field(default=1, ge=1, description="Sheet grid columns")
    rows: int = Field(default=1, ge=1, description="Sheet grid rows")
    objects: List[PrintObject] = Field(default_factory=list, description="Objects in layout mm")
    prints: List[PrintSpecSchema] = Field(default_factory=list, description="Prints to create")

    def resolve_sheet(self) -> SheetDimensions:
        """Explicit sheet wins over a paper preset; A4 when neither is given."""
        if self.sheet is not None:
            return self.sheet
        return get_sheet_dimensions(self.paper or "a4", self.orientation)

    def texture_sources(self) -> list[str]:
        """Every texture source named by the request, objects first."""
        sources = [obj.texture_src for obj in self.objects if obj.texture_src]
        sources.extend(spec.texture_src for spec in self.prints if spec.texture_src)
        return sources

    def build_objects(self) -> tuple[list[PrintObject], list[str]]:
        """Explicit objects followed by the objects created from `prints`."""
        sheet = self.resolve_sheet()
        objects = list(self.objects)
        notices: list[str] = []
        for spec in self.prints:
            created, spec_notices = create_print_objects(
                spec.width, spec.height, spec.unit, spec.quantity,
                existing_count=len(objects), sheet=sheet,
                columns=self.columns, rows=self.rows,
            )
            if spec.texture_src:
                created = [obj.model_copy(update={"texture_src": spec.texture_src}) for obj in created]
            objects.extend(created)
            notices.extend(spec_notices)
        for notice in notices:
            logger.info(notice)
        return objects, notices


class OptimizeResultSchema(BaseModel):
    """Schema for an optimisation result."""
    sheet: SheetDimensions
    result: PackingResult
    objects: List[PrintObject]
    notices: List[str] = Field(default_factory=list)


class TileResultSchema(BaseModel):
    """Schema for a tiling result."""
    sheet: SheetDimensions
    columns: int = Field(ge=1)
    rows: int = Field(ge=1)
    page_count: int = Field(ge=0)
    pages: List[Page]
