from __future__ import annotations

from dataclasses import dataclass

from domain.exceptions import ResourceValidationError
from domain.models.resources import LimitCatalog, ResourceBundle, ResourceDimension


@dataclass(frozen=True)
class Violation:
    dimension: ResourceDimension
    value: int
    minimum: int
    maximum: int

    def to_error(self) -> ResourceValidationError:
        return ResourceValidationError(
            dimension=self.dimension.value,
            minimum=self.minimum,
            maximum=self.maximum,
            unit=self.dimension.unit,
        )


class ResourceValidator:

    def __init__(self, catalog: LimitCatalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> LimitCatalog:
        return self._catalog

    def check(self, bundle: ResourceBundle) -> Violation | None:
        """Return the first out-of-bounds dimension, or ``None`` if the bundle fits."""
        for dimension, value in bundle.items():
            limit = self._catalog.limit_for(dimension)
            if not limit.contains(value):
                return Violation(
                    dimension=dimension,
                    value=value,
                    minimum=limit.min,
                    maximum=limit.max,
                )
        return None

    def validate(self, bundle: ResourceBundle) -> None:
        violation = self.check(bundle)
        if violation is not None:
            raise violation.to_error()
