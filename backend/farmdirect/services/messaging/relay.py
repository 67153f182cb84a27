# backend/farmdirect/services/messaging/relay.py
"""
In-process broadcast relay for new-message notifications.

The registry maps user ids to the sockets that joined as that user. It lives
on the event loop and is only touched from coroutines running there, so no
locking is needed.

Delivery is at-most-once and best-effort: nothing is queued or replayed, and
a socket whose send fails or stalls past the send timeout is dropped while
delivery to the others continues. HTTP handlers hand publishing to
``schedule_new_message`` so a slow socket never holds up a response.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol, Set

from ...core.config import settings
from ...monitoring.prometheus_metrics import prometheus_metrics
from .events import build_new_message_event

logger = logging.getLogger(__name__)

SCOPE_PARTICIPANTS = "participants"
SCOPE_ALL = "all"


class RelayConnection(Protocol):
    """The part of a Starlette WebSocket the registry relies on."""

    async def send_json(self, data: Any, mode: str = "text") -> None: ...


class ConnectionRegistry:
    """Tracks open relay sockets and which user each one joined as."""

    def __init__(self) -> None:
        self._anonymous: Set[RelayConnection] = set()
        self._by_user: Dict[str, Set[RelayConnection]] = {}
        self._user_of: Dict[RelayConnection, str] = {}
        self._pending: Set["asyncio.Task[int]"] = set()

    def register(self, connection: RelayConnection) -> None:
        """Track an accepted socket that has not joined yet."""
        self._anonymous.add(connection)

    def identify(self, connection: RelayConnection, user_id: str) -> None:
        """Record *connection* as joined for *user_id*. Re-joining moves it."""
        previous = self._user_of.get(connection)
        if previous is not None and previous != user_id:
            self._discard_identified(connection, previous)
        self._anonymous.discard(connection)
        self._by_user.setdefault(user_id, set()).add(connection)
        self._user_of[connection] = user_id

    def unregister(self, connection: RelayConnection) -> None:
        """Forget *connection*. Safe to call more than once."""
        self._anonymous.discard(connection)
        user_id = self._user_of.get(connection)
        if user_id is not None:
            self._discard_identified(connection, user_id)

    def _discard_identified(self, connection: RelayConnection, user_id: str) -> None:
        self._user_of.pop(connection, None)
        sockets = self._by_user.get(user_id)
        if sockets is None:
            return
        sockets.discard(connection)
        if not sockets:
            del self._by_user[user_id]

    def user_of(self, connection: RelayConnection) -> Optional[str]:
        return self._user_of.get(connection)

    def connections_for(self, user_id: str) -> Set[RelayConnection]:
        return set(self._by_user.get(user_id, ()))

    @property
    def identified_count(self) -> int:
        return len(self._user_of)

    @property
    def connection_count(self) -> int:
        return len(self._anonymous) + len(self._user_of)

    def _targets(self, sender_id: str, recipient_id: str, scope: str) -> List[RelayConnection]:
        if scope == SCOPE_ALL:
            return list(self._user_of)
        targets: Set[RelayConnection] = set()
        for user_id in (sender_id, recipient_id):
            targets.update(self._by_user.get(user_id, ()))
        return list(targets)

    async def _deliver(
        self, connection: RelayConnection, event: Dict[str, Any], timeout: float
    ) -> bool:
        try:
            await asyncio.wait_for(connection.send_json(event), timeout=timeout)
        except asyncio.TimeoutError:
            logger.debug(
                "Relay delivery timed out, dropping connection",
                extra={"user_id": self._user_of.get(connection), "timeout": timeout},
            )
            self.unregister(connection)
            prometheus_metrics.record_relay_delivery("timeout")
            return False
        except Exception as e:
            # Delivery miss: drop the socket and keep going
            logger.debug(
                "Relay delivery failed, dropping connection",
                extra={"user_id": self._user_of.get(connection), "error": str(e)},
            )
            self.unregister(connection)
            prometheus_metrics.record_relay_delivery("failed")
            return False
        prometheus_metrics.record_relay_delivery("delivered")
        return True

    async def publish_new_message(
        self,
        message: Dict[str, Any],
        sender_id: str,
        recipient_id: str,
        scope: Optional[str] = None,
    ) -> int:
        """
        Notify joined sockets about a stored message.

        Sends run concurrently and each is bounded by
        ``relay_send_timeout_seconds``; a socket that fails or times out is
        dropped from the registry.

        Args:
            message: Serialized message JSON
            sender_id: Author of the message
            recipient_id: Addressee of the message
            scope: ``participants`` (sender and recipient only) or ``all``;
                defaults to the configured broadcast scope

        Returns:
            Number of sockets the notification was handed to
        """
        event = build_new_message_event(message, sender_id, recipient_id)
        targets = self._targets(sender_id, recipient_id, scope or settings.message_broadcast_scope)
        if not targets:
            return 0
        timeout = settings.relay_send_timeout_seconds
        results = await asyncio.gather(
            *(self._deliver(connection, event, timeout) for connection in targets)
        )
        return sum(1 for ok in results if ok)

    def schedule_new_message(
        self,
        message: Dict[str, Any],
        sender_id: str,
        recipient_id: str,
        scope: Optional[str] = None,
    ) -> "asyncio.Task[int]":
        """
        Publish in a background task on the running loop and return the task.

        The task is held until it finishes so it cannot be garbage collected
        mid-delivery.
        """
        task = asyncio.create_task(
            self.publish_new_message(message, sender_id, recipient_id, scope)
        )
        self._pending.add(task)
        task.add_done_callback(self._publish_done)
        return task

    def _publish_done(self, task: "asyncio.Task[int]") -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "[RELAY] Failed to publish new message",
                extra={"error": str(error)},
            )
            return
        logger.debug("[RELAY] New message published", extra={"delivered": task.result()})

    @property
    def pending_count(self) -> int:
        return len(self._pending)


relay = ConnectionRegistry()
