"""Real-time infrastructure — subscriber registry + WebSocket fan-out.

Events flow one way:
1. Fetch relay → Broadcaster.broadcast(event)
2. Broadcaster → every WebSocket in the ConnectionRegistry

There is no history: a subscriber only sees events broadcast while it
is connected.
"""

from weatherrelay.realtime.broadcaster import Broadcaster, BroadcastReport
from weatherrelay.realtime.registry import ConnectionRegistry

__all__ = ["Broadcaster", "BroadcastReport", "ConnectionRegistry"]
