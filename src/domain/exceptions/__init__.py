from domain.exceptions.provisioning_exceptions import (
    BackendError,
    BackendUnavailableError,
    DomainError,
    InsufficientBalanceError,
    LifecycleError,
    MalformedResponseError,
    ResourceValidationError,
    ServerNotFoundError,
    UnauthenticatedError,
)

ValidationError = ResourceValidationError

__all__ = [
    "BackendError",
    "BackendUnavailableError",
    "DomainError",
    "InsufficientBalanceError",
    "LifecycleError",
    "MalformedResponseError",
    "ResourceValidationError",
    "ServerNotFoundError",
    "UnauthenticatedError",
    "ValidationError",
]
