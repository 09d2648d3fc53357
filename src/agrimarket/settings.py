"""Process-wide application settings.

Settings are read once from the ``custom`` table of the domain
configuration (``[tool.protean.custom]`` in ``pyproject.toml``, with the
``PROTEAN_ENV`` overlay applied) and handed explicitly to the components
that need them. Nothing reads them from module globals.
"""

from typing import Literal

from protean.domain import Domain
from pydantic import BaseModel, ConfigDict, Field, field_validator


class MarketSettings(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=str.upper, populate_by_name=True)

    gateway: Literal["flutterwave", "fake"] = "flutterwave"
    flw_base_url: str = "https://api.flutterwave.com/v3"
    flw_secret_key: str = ""
    flw_webhook_hash: str = ""
    gateway_timeout: float = Field(15.0, gt=0)
    currency: str = "RWF"
    checkout_title: str = "AgriMarket Rwanda"
    checkout_description: str = "Payment for items in cart"
    public_base_url: str = "http://localhost:5173"

    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"

    allowed_origins: list[str] = Field(default_factory=list)

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @classmethod
    def from_domain(cls, domain: Domain) -> "MarketSettings":
        """Build settings from the domain's ``custom`` configuration table."""
        custom = domain.config.get("custom") or {}
        return cls.model_validate({key.upper(): value for key, value in custom.items()})
