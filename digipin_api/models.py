# digipin_api/models.py
from typing import Any, Dict, List

from pydantic import BaseModel, Field

from .digipin import MAX_LEVELS


class CoordinatesRequest(BaseModel):
    latitude: float = Field(..., allow_inf_nan=False, description="Latitude in decimal degrees (2.5 to 38.5)")
    longitude: float = Field(..., allow_inf_nan=False, description="Longitude in decimal degrees (63.5 to 99.5)")


class DigipinRequest(BaseModel):
    digipin: str = Field(..., description="DIGIPIN code, with or without hyphens")


class ToolCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict, description="Raw tool arguments")


class CellsRequest(BaseModel):
    codes: List[str] = Field(..., description="DIGIPIN codes to export")
    level: int = Field(default=MAX_LEVELS, ge=1, le=MAX_LEVELS, description="Hierarchy level of the cells")
