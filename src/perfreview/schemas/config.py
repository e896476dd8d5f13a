"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError


class CoreConfig(BaseModel):
    score_weights: dict[str, float] | None = None
    pass_threshold: float | None = None


class SignatureConfig(BaseModel):
    poll_interval_seconds: float | None = Field(default=None, gt=0)
    storage_base_url: str | None = None
    request_timeout_seconds: float | None = Field(default=None, gt=0)


class AppConfig(BaseModel):
    core: CoreConfig = Field(default_factory=CoreConfig)
    signature: SignatureConfig = Field(default_factory=SignatureConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        core_settings = self.core.model_dump(exclude_none=True)
        if core_settings:
            settings["core"] = core_settings
        signature_settings = self.signature.model_dump(exclude_none=True)
        if signature_settings:
            settings["signature"] = signature_settings
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
