from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal


@dataclass
class ServerEvent:
    account_id: str = ""
    server_id: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_type: str = ""


@dataclass
class ServerCreated(ServerEvent):
    event_type: str = "ServerCreated"
    cost: Decimal = Decimal("0")
    resources: dict[str, int] = field(default_factory=dict)


@dataclass
class ServerModified(ServerEvent):
    event_type: str = "ServerModified"
    additional_cost: Decimal = Decimal("0")
    previous_resources: dict[str, int] = field(default_factory=dict)
    resources: dict[str, int] = field(default_factory=dict)


@dataclass
class ServerRenewed(ServerEvent):
    event_type: str = "ServerRenewed"
    cost: Decimal = Decimal("0")
    days_until_expiry: int = 0


@dataclass
class ServerDeleted(ServerEvent):
    event_type: str = "ServerDeleted"
