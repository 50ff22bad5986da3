"""Pydantic configuration schema for YAML and CLI input."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ValidationFailure


class StoreConfig(BaseModel):
    backend: Literal["memory", "rest"] = "memory"
    path: str | None = None
    endpoint: str | None = None
    api_key: str | None = None
    table: str = "applicants"
    timeout: float = Field(default=10.0, gt=0)

    model_config = ConfigDict(extra="forbid")


class ExportConfig(BaseModel):
    directory: str = "."
    timezone: str | None = None
    locale: str = "en"
    date_format: str = "L"

    model_config = ConfigDict(extra="forbid")


class AnalyticsConfig(BaseModel):
    trend_months: int = Field(default=6, ge=1)

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    store: StoreConfig = Field(default_factory=StoreConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    log_level: str = "INFO"

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> dict[str, Any]:
        return self.model_dump(mode="python")

    def with_overrides(self, overrides: dict[str, dict[str, Any]]) -> AppConfig:
        """Return a copy with non-None section values replaced."""
        merged = self.to_settings()
        for section, values in overrides.items():
            merged.setdefault(section, {}).update(
                {key: value for key, value in values.items() if value is not None}
            )
        return AppConfig.model_validate(merged)


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValidationFailure("config", "Config must be a mapping")
    return AppConfig.model_validate(raw)
