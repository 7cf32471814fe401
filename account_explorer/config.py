"""Chart options and environment settings."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, model_validator

load_dotenv()

CREDIT_PALETTE = ["#3182bd", "#c6dbef", "#31a354", "#c7e9c0", "#00ff00"]
DEBIT_PALETTE = ["#e6550d", "#fdd0a2", "#756bb1", "#dadaeb", "#ff0000"]


class Margin(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    top: int = Field(30, ge=0)
    right: int = Field(20, ge=0)
    bottom: int = Field(20, ge=0)
    left: int = Field(20, ge=0)


class ChartOptions(BaseModel):
    """Every option the chart understands, with its default.

    Unknown keys are rejected so a typo never silently falls back to a
    default.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: int = Field(1200, gt=0, description="Canvas width in pixels, margins included")
    height: int = Field(700, gt=0, description="Canvas height in pixels, margins included")
    margin: Margin = Field(default_factory=Margin)

    # Share of the inner height used by the main credit/debit chart
    chart_fraction: float = Field(0.65, gt=0, le=1)
    # Vertical band (fractions of the inner height) used by search results
    overlay_band: Tuple[float, float] = (0.65, 0.85)

    credit_colour: str = "rgb(0, 200, 0)"
    debit_colour: str = "rgb(200, 0, 0)"
    balance_colour: str = "white"

    credit_palette: List[str] = Field(default_factory=lambda: list(CREDIT_PALETTE), min_length=1)
    debit_palette: List[str] = Field(default_factory=lambda: list(DEBIT_PALETTE), min_length=1)
    # A single colour for every search layer, overriding the palettes
    overlay_credit_colour: Optional[str] = None
    overlay_debit_colour: Optional[str] = None

    default_query: str = ""
    dayfirst: bool = False

    @model_validator(mode="after")
    def _check_geometry(self) -> "ChartOptions":
        if self.margin.left + self.margin.right >= self.width:
            raise ValueError("horizontal margins leave no room for the chart")
        if self.margin.top + self.margin.bottom >= self.height:
            raise ValueError("vertical margins leave no room for the chart")
        low, high = self.overlay_band
        if not 0 <= low < high <= 1:
            raise ValueError("overlay_band must be an increasing pair within [0, 1]")
        return self

    @property
    def inner_width(self) -> int:
        return self.width - self.margin.left - self.margin.right

    @property
    def inner_height(self) -> int:
        return self.height - self.margin.top - self.margin.bottom


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    dataset: str
    data_dir: str
    log_level: str
    s3_bucket: Optional[str] = None
    aws_region: str = "us-east-1"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        dataset=os.getenv("ACCOUNT_EXPLORER_DATASET", "bankhistory.csv"),
        data_dir=os.getenv("ACCOUNT_EXPLORER_DATA_DIR", "bank_data"),
        log_level=os.getenv("ACCOUNT_EXPLORER_LOG_LEVEL", "INFO"),
        s3_bucket=os.getenv("S3_BUCKET") or None,
        aws_region=os.getenv("AWS_REGION", "us-east-1"),
    )
