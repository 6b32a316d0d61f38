from __future__ import annotations

import re
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from gradechart.partitioner import DEFAULT_BUCKET_COUNT
from gradechart.precision import DEFAULT_PRECISION

_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


class HistogramConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    bucket_count: int = Field(default=DEFAULT_BUCKET_COUNT, ge=1)
    decimal_precision: int = Field(default=DEFAULT_PRECISION, ge=0, le=10)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GRADECHART_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    enabled_groups: Annotated[list[str], NoDecode] = Field(default_factory=list)
    db_path: Path = Path("data/gradechart.sqlite3")
    chart_dir: Path = Path("data/charts")
    bucket_count: int = Field(default=DEFAULT_BUCKET_COUNT, ge=1)
    decimal_precision: int = Field(default=DEFAULT_PRECISION, ge=0, le=10)
    chart_color: str = "#0f6cbf"
    font_path: str | None = None

    @field_validator("enabled_groups", mode="before")
    @classmethod
    def _parse_groups(cls, value: object) -> list[str]:
        if value is None:
            return []
        if isinstance(value, int):
            return [str(value)]
        if isinstance(value, str):
            return [p.strip() for p in value.split(",") if p.strip()]
        if isinstance(value, list):
            return [str(v).strip() for v in value if str(v).strip()]
        raise ValueError("GRADECHART_ENABLED_GROUPS must be comma separated string or list")

    @field_validator("chart_color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        if not _COLOR_PATTERN.match(value):
            raise ValueError("GRADECHART_CHART_COLOR must look like #0f6cbf")
        return value

    def histogram_config(self) -> HistogramConfig:
        return HistogramConfig(
            bucket_count=self.bucket_count,
            decimal_precision=self.decimal_precision,
        )


settings = Settings()
