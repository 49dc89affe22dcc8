from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from domain.models.resources import ResourceDimension

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number (or numeric string) to :class:`Decimal` without float artefacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("booleans are not monetary amounts")
    return Decimal(str(value))


@dataclass(frozen=True)
class PricingSchedule:
    """Per-unit prices plus a flat base fee, as quoted by the backend."""

    base: Decimal = ZERO
    per_unit: Mapping[ResourceDimension, Decimal] = field(default_factory=dict)

    def unit_price(self, dimension: ResourceDimension) -> Decimal:
        return self.per_unit.get(dimension, ZERO)

    def missing_dimensions(self) -> list[ResourceDimension]:
        return [d for d in ResourceDimension if d not in self.per_unit]

    def as_dict(self) -> dict[str, Decimal]:
        data = {"base": self.base}
        data.update({d.value: self.unit_price(d) for d in ResourceDimension})
        return data


@dataclass(frozen=True)
class CostBreakdown:
    """One monetary line per dimension, the base fee, and their sum."""

    base: Decimal = ZERO
    cpu: Decimal = ZERO
    ram: Decimal = ZERO
    disk: Decimal = ZERO
    databases: Decimal = ZERO
    allocations: Decimal = ZERO
    backups: Decimal = ZERO
    total: Decimal = ZERO

    def line(self, dimension: ResourceDimension) -> Decimal:
        return getattr(self, dimension.value)

    def rounded(self) -> CostBreakdown:
        """Presentation copy with every line rounded to two decimals."""
        return CostBreakdown(
            **{
                name: getattr(self, name).quantize(CENT, rounding=ROUND_HALF_UP)
                for name in _BREAKDOWN_FIELDS
            }
        )

    def as_dict(self) -> dict[str, Decimal]:
        return {name: getattr(self, name) for name in _BREAKDOWN_FIELDS}


_BREAKDOWN_FIELDS: tuple[str, ...] = (
    "base",
    *(d.value for d in ResourceDimension),
    "total",
)


@dataclass(frozen=True)
class ModificationQuote:
    breakdown: CostBreakdown
    total_additional_cost: Decimal
