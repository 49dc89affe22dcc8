from __future__ import annotations

from decimal import Decimal

from domain.models.pricing import ZERO, CostBreakdown, ModificationQuote, PricingSchedule
from domain.models.resources import ResourceBundle, ResourceDimension


class CostCalculator:
    """Prices resource bundles against a :class:`PricingSchedule`.

    All arithmetic is exact :class:`Decimal`; nothing is rounded here.
    A dimension missing from the schedule is priced at zero.
    """

    def line_cost(
        self,
        dimension: ResourceDimension,
        quantity: int,
        pricing: PricingSchedule,
    ) -> Decimal:
        return Decimal(quantity) * pricing.unit_price(dimension)

    def compute_cost(self, bundle: ResourceBundle, pricing: PricingSchedule) -> CostBreakdown:
        lines = {
            dimension.value: self.line_cost(dimension, quantity, pricing)
            for dimension, quantity in bundle.items()
        }
        total = pricing.base + sum(lines.values(), ZERO)
        return CostBreakdown(base=pricing.base, total=total, **lines)

    def compute_delta(
        self,
        current: ResourceBundle,
        requested: ResourceBundle,
        pricing: PricingSchedule,
    ) -> ModificationQuote:
        """Incremental charge for resizing *current* into *requested*.

        Each line is the non-negative increase for its dimension, so
        downsizing costs nothing and never refunds. The base fee is charged
        on every modification.
        """
        lines: dict[str, Decimal] = {}
        for dimension in ResourceDimension:
            before = self.line_cost(dimension, current.quantity(dimension), pricing)
            after = self.line_cost(dimension, requested.quantity(dimension), pricing)
            lines[dimension.value] = max(ZERO, after - before)

        total = pricing.base + sum(lines.values(), ZERO)
        breakdown = CostBreakdown(base=pricing.base, total=total, **lines)
        return ModificationQuote(breakdown=breakdown, total_additional_cost=total)
