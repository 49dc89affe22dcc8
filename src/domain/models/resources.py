from __future__ import annotations

import enum
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field


class ResourceDimension(enum.Enum):
    """Resource quantities a server bundle is made of.

    Declaration order is the order in which bundles are validated and
    priced.
    """

    CPU = "cpu"
    RAM = "ram"
    DISK = "disk"
    DATABASES = "databases"
    ALLOCATIONS = "allocations"
    BACKUPS = "backups"

    @property
    def unit(self) -> str:
        return _UNITS.get(self, "")


_UNITS: dict[ResourceDimension, str] = {
    ResourceDimension.RAM: "MiB",
    ResourceDimension.DISK: "MiB",
}


@dataclass(frozen=True)
class ResourceBundle:
    cpu: int = 0
    ram: int = 0
    disk: int = 0
    databases: int = 0
    allocations: int = 0
    backups: int = 0

    def __post_init__(self) -> None:
        for dimension in ResourceDimension:
            value = getattr(self, dimension.value)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{dimension.value} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"{dimension.value} must be non-negative, got {value}")

    def quantity(self, dimension: ResourceDimension) -> int:
        return getattr(self, dimension.value)

    def items(self) -> Iterator[tuple[ResourceDimension, int]]:
        for dimension in ResourceDimension:
            yield dimension, self.quantity(dimension)

    def as_dict(self) -> dict[str, int]:
        return {dimension.value: value for dimension, value in self.items()}

    @classmethod
    def from_mapping(cls, data: Mapping[str, int]) -> ResourceBundle:
        """Build a bundle from a ``{"cpu": ..., ...}`` mapping.

        Dimensions absent from *data* default to zero.
        """
        return cls(**{d.value: data.get(d.value, 0) for d in ResourceDimension})


@dataclass(frozen=True)
class ResourceLimit:
    min: int
    max: int
    step: int = 1
    default: int | None = None

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        if self.step <= 0:
            raise ValueError("step must be positive")
        if self.default is None:
            object.__setattr__(self, "default", self.min)
        elif not self.min <= self.default <= self.max:
            raise ValueError(
                f"default ({self.default}) must lie within [{self.min}, {self.max}]"
            )

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class LimitCatalog:
    """Administratively configured bounds, one :class:`ResourceLimit` per dimension."""

    limits: Mapping[ResourceDimension, ResourceLimit] = field(default_factory=dict)

    def __post_init__(self) -> None:
        missing = [d.value for d in ResourceDimension if d not in self.limits]
        if missing:
            raise ValueError(f"Limit catalog is missing dimensions: {', '.join(missing)}")

    def limit_for(self, dimension: ResourceDimension) -> ResourceLimit:
        return self.limits[dimension]


DEFAULT_LIMITS: dict[ResourceDimension, ResourceLimit] = {
    ResourceDimension.CPU: ResourceLimit(min=5, max=400, step=5, default=5),
    ResourceDimension.RAM: ResourceLimit(min=128, max=16384, step=128, default=128),
    ResourceDimension.DISK: ResourceLimit(min=128, max=32768, step=128, default=128),
    ResourceDimension.DATABASES: ResourceLimit(min=0, max=10, step=1, default=0),
    ResourceDimension.ALLOCATIONS: ResourceLimit(min=0, max=5, step=1, default=0),
    ResourceDimension.BACKUPS: ResourceLimit(min=0, max=10, step=1, default=0),
}
