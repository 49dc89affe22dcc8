from domain.models.pricing import CostBreakdown, ModificationQuote, PricingSchedule
from domain.models.resources import (
    DEFAULT_LIMITS,
    LimitCatalog,
    ResourceBundle,
    ResourceDimension,
    ResourceLimit,
)
from domain.models.server import (
    AccountState,
    MutationKind,
    MutationRequest,
    ProvisioningOptions,
    ServerInstance,
    ServerStatus,
)

__all__ = [
    "DEFAULT_LIMITS",
    "AccountState",
    "CostBreakdown",
    "LimitCatalog",
    "ModificationQuote",
    "MutationKind",
    "MutationRequest",
    "PricingSchedule",
    "ProvisioningOptions",
    "ResourceBundle",
    "ResourceDimension",
    "ResourceLimit",
    "ServerInstance",
    "ServerStatus",
]
