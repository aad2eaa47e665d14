"""Broadcaster — fan one event out to every registered subscriber.

Learn: Delivery is fire-and-forget. The event is serialized once, sent to
every connection in a registry snapshot, and no acknowledgment is awaited.
Each send is isolated and bounded by send_timeout: a socket that raises,
or whose send has not finished when the timeout expires, is pruned from
the registry while the rest still get the event. A stalled subscriber
therefore costs the triggering request at most one timeout, never a hang.
Nothing raised by a subscriber ever leaves broadcast().
"""

import asyncio
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog
from starlette.websockets import WebSocketState

from weatherrelay.realtime.registry import ConnectionRegistry

logger = structlog.get_logger()


class DeliveryOutcome(str, Enum):
    DELIVERED = "delivered"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class BroadcastReport:
    """Per-broadcast tally. Informational only; callers may ignore it."""

    delivered: int = 0
    skipped: int = 0
    failed: int = 0
    outcomes: list[DeliveryOutcome] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)


def is_open(connection: Any) -> bool:
    """True when both ends of the WebSocket still consider it connected."""
    return (
        getattr(connection, "client_state", None) == WebSocketState.CONNECTED
        and getattr(connection, "application_state", None) == WebSocketState.CONNECTED
    )


class Broadcaster:
    def __init__(self, registry: ConnectionRegistry, send_timeout: float = 5.0):
        self.registry = registry
        self.send_timeout = send_timeout

    async def broadcast(self, event: Any) -> BroadcastReport:
        payload = json.dumps(event)
        connections = self.registry.snapshot()

        outcomes = await asyncio.gather(
            *(self._deliver(connection, payload) for connection in connections)
        )

        report = BroadcastReport(outcomes=list(outcomes))
        for outcome in outcomes:
            if outcome is DeliveryOutcome.DELIVERED:
                report.delivered += 1
            elif outcome is DeliveryOutcome.SKIPPED:
                report.skipped += 1
            else:
                report.failed += 1

        logger.info(
            "broadcast.completed",
            subscribers=len(connections),
            delivered=report.delivered,
            skipped=report.skipped,
            failed=report.failed,
        )
        return report

    async def _deliver(self, connection: Any, payload: str) -> DeliveryOutcome:
        if not is_open(connection):
            return DeliveryOutcome.SKIPPED

        try:
            await asyncio.wait_for(connection.send_text(payload), self.send_timeout)
        except asyncio.TimeoutError:
            logger.warning("broadcast.delivery_timed_out", timeout=self.send_timeout)
            self.registry.remove(connection)
            return DeliveryOutcome.FAILED
        except Exception as e:
            # Dead socket: prune it
            logger.warning("broadcast.delivery_failed", error=str(e))
            self.registry.remove(connection)
            return DeliveryOutcome.FAILED

        return DeliveryOutcome.DELIVERED
