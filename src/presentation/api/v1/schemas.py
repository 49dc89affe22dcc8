"""
Pydantic v2 request/response schemas for the provisioning API.

Request bodies accept both snake_case names and the camelCase names used
by the dashboard client. Every response is wrapped in the
``{success, data | error}`` envelope.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from domain.models.pricing import CostBreakdown
from domain.models.resources import LimitCatalog, ResourceBundle
from domain.models.server import ProvisioningOptions

# ---------------------------------------------------------------------------
# Base / shared
# ---------------------------------------------------------------------------


class _ApiModel(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        json_schema_extra={"$schema": "https://json-schema.org/draft/2020-12/schema"},
    )


class ResourceFields(_ApiModel):
    """The full resource bundle; partial updates are not accepted."""

    cpu: int = Field(..., ge=0, strict=True, description="CPU share in percent.")
    ram: int = Field(..., ge=0, strict=True, description="Memory in MiB.")
    disk: int = Field(..., ge=0, strict=True, description="Disk in MiB.")
    databases: int = Field(..., ge=0, strict=True, description="Database slots.")
    allocations: int = Field(..., ge=0, strict=True, description="Extra network allocations.")
    backups: int = Field(..., ge=0, strict=True, description="Backup slots.")

    def to_bundle(self) -> ResourceBundle:
        return ResourceBundle(
            cpu=self.cpu,
            ram=self.ram,
            disk=self.disk,
            databases=self.databases,
            allocations=self.allocations,
            backups=self.backups,
        )


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


def _text(value: int | str | None) -> str | None:
    return None if value is None else str(value)


class QuoteRequest(ResourceFields):
    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"cpu": 10, "ram": 256, "disk": 512, "databases": 1, "allocations": 1, "backups": 1}
            ]
        },
    )


class ModifyServerRequest(ResourceFields):
    egg: int | str | None = Field(default=None, alias="serverType", description="Panel egg id.")
    nest: int | str | None = Field(default=None, alias="nestId", description="Panel nest id.")
    auto_renew: bool | None = Field(default=None, alias="autoRenew")

    def to_options(self) -> ProvisioningOptions:
        return ProvisioningOptions(
            egg=_text(self.egg), nest=_text(self.nest), auto_renew=self.auto_renew
        )


class CreateServerRequest(ModifyServerRequest):
    name: str = Field(..., min_length=1, max_length=191)
    location_id: int | str | None = Field(default=None, alias="locationId")
    auto_renew: bool | None = Field(default=True, alias="autoRenew")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "name": "survival",
                    "serverType": "5",
                    "nestId": "1",
                    "locationId": "1",
                    "cpu": 100,
                    "ram": 2048,
                    "disk": 4096,
                    "databases": 1,
                    "allocations": 0,
                    "backups": 1,
                    "autoRenew": True,
                }
            ]
        },
    )

    def to_options(self) -> ProvisioningOptions:
        return ProvisioningOptions(
            name=self.name,
            egg=_text(self.egg),
            nest=_text(self.nest),
            location_id=_text(self.location_id),
            auto_renew=self.auto_renew,
        )


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class CostBreakdownOut(_ApiModel):
    """Cost lines rounded to two decimals for display."""

    base: Decimal
    cpu: Decimal
    ram: Decimal
    disk: Decimal
    databases: Decimal
    allocations: Decimal
    backups: Decimal
    total: Decimal

    @classmethod
    def from_domain(cls, breakdown: CostBreakdown) -> CostBreakdownOut:
        return cls(**breakdown.rounded().as_dict())


class RenewalQuoteOut(_ApiModel):
    server_id: str
    breakdown: CostBreakdownOut
    balance: Decimal
    remaining_after: Decimal
    days_until_expiry: int
    renewable: bool
    affordable: bool


class LimitOut(_ApiModel):
    min: int
    max: int
    step: int
    default: int


class LimitCatalogOut(_ApiModel):
    cpu: LimitOut
    ram: LimitOut
    disk: LimitOut
    databases: LimitOut
    allocations: LimitOut
    backups: LimitOut

    @classmethod
    def from_domain(cls, catalog: LimitCatalog) -> LimitCatalogOut:
        return cls(
            **{
                dimension.value: LimitOut(
                    min=limit.min, max=limit.max, step=limit.step, default=limit.default
                )
                for dimension, limit in catalog.limits.items()
            }
        )


class ErrorBody(_ApiModel):
    message: str = Field(..., description="Human-readable explanation.")
    status: int = Field(..., description="HTTP status code.")
    title: str | None = None
    details: Any = Field(default=None, description="Backend payload or field errors.")


class ErrorEnvelope(_ApiModel):
    success: Literal[False] = False
    error: ErrorBody


class QuoteEnvelope(_ApiModel):
    success: Literal[True] = True
    data: CostBreakdownOut


class RenewalQuoteEnvelope(_ApiModel):
    success: Literal[True] = True
    data: RenewalQuoteOut


class LimitCatalogEnvelope(_ApiModel):
    success: Literal[True] = True
    data: LimitCatalogOut


class MutationEnvelope(_ApiModel):
    success: Literal[True] = True
    data: Any = Field(default=None, description="Backend response, relayed unchanged.")
    charged: Decimal | None = Field(default=None, description="Locally quoted charge.")
    breakdown: CostBreakdownOut | None = None
