from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from domain.models.resources import ResourceBundle


class ServerStatus(enum.Enum):
    ACTIVE = "Active"
    SUSPENDED = "Suspended"
    DELETED = "Deleted"


class MutationKind(enum.Enum):
    CREATE = "CREATE"
    MODIFY = "MODIFY"
    RENEW = "RENEW"
    DELETE = "DELETE"


@dataclass(frozen=True)
class ServerInstance:
    id: str
    resources: ResourceBundle = field(default_factory=ResourceBundle)
    status: ServerStatus = ServerStatus.ACTIVE
    expires_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    auto_renew: bool = False
    identifier: str = ""
    name: str = ""


@dataclass(frozen=True)
class AccountState:
    """Snapshot of an account as reported by the provisioning backend."""

    id: str
    balance: Decimal = Decimal("0")
    instances: tuple[ServerInstance, ...] = ()

    def find_instance(self, server_id: str) -> ServerInstance | None:
        for instance in self.instances:
            if instance.id == server_id:
                return instance
        return None


@dataclass(frozen=True)
class ProvisioningOptions:
    """Opaque server settings forwarded to the backend unchanged."""

    name: str = ""
    egg: str | None = None
    nest: str | None = None
    location_id: str | None = None
    auto_renew: bool | None = None


@dataclass(frozen=True)
class MutationRequest:
    kind: MutationKind
    account_id: str
    server_id: str | None = None
    bundle: ResourceBundle | None = None
    options: ProvisioningOptions = field(default_factory=ProvisioningOptions)

    def __post_init__(self) -> None:
        if self.kind is MutationKind.CREATE and self.server_id is not None:
            raise ValueError("create requests must not reference an existing server")
        if self.kind is not MutationKind.CREATE and self.server_id is None:
            raise ValueError(f"{self.kind.value} requests require a server id")
        if self.kind in (MutationKind.CREATE, MutationKind.MODIFY) and self.bundle is None:
            raise ValueError(f"{self.kind.value} requests require a resource bundle")

    def describe(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "account_id": self.account_id,
            "server_id": self.server_id,
            "bundle": self.bundle.as_dict() if self.bundle else None,
        }
