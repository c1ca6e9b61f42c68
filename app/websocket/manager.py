"""
WebSocket subscriptions for appointment, slot and fraud events

Citizens subscribe to the events of their own Aadhaar record; admin dashboards
receive every event.
"""
from typing import Dict, Optional, Set
from fastapi import WebSocket
import logging

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Routes published events to record subscribers and admin dashboards"""

    def __init__(self):
        self.record_subscribers: Dict[str, Set[WebSocket]] = {}
        self.admin_connections: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket, aadhaar_record_id: Optional[str] = None, is_admin: bool = False):
        await websocket.accept()
        if is_admin:
            self.admin_connections.add(websocket)
        elif aadhaar_record_id:
            self.record_subscribers.setdefault(aadhaar_record_id, set()).add(websocket)
        logger.info(
            f"WebSocket connected ({'admin' if is_admin else f'record {aadhaar_record_id}'}), "
            f"{self.connection_count()} open"
        )

    def disconnect(self, websocket: WebSocket, aadhaar_record_id: Optional[str] = None, is_admin: bool = False):
        if is_admin:
            self.admin_connections.discard(websocket)
        elif aadhaar_record_id:
            self._drop(aadhaar_record_id, {websocket})
        logger.info(f"WebSocket disconnected, {self.connection_count()} open")

    def connection_count(self) -> int:
        return len(self.admin_connections) + sum(len(s) for s in self.record_subscribers.values())

    async def publish(self, event: dict, aadhaar_record_id: Optional[str] = None) -> int:
        """
        Deliver an event to the subscribers of aadhaar_record_id (if any) and to
        every admin. Connections that fail are dropped. Returns the number of
        successful deliveries.
        """
        delivered = 0
        if aadhaar_record_id:
            subscribers = self.record_subscribers.get(aadhaar_record_id, set())
            sent, failed = await self._send(subscribers, event)
            delivered += sent
            self._drop(aadhaar_record_id, failed)

        sent, failed = await self._send(self.admin_connections, event)
        delivered += sent
        self.admin_connections -= failed
        return delivered

    def _drop(self, aadhaar_record_id: str, connections: Set[WebSocket]) -> None:
        subscribers = self.record_subscribers.get(aadhaar_record_id)
        if subscribers is None:
            return
        subscribers -= connections
        if not subscribers:
            del self.record_subscribers[aadhaar_record_id]

    @staticmethod
    async def _send(connections: Set[WebSocket], event: dict):
        sent, failed = 0, set()
        for connection in list(connections):
            try:
                await connection.send_json(event)
                sent += 1
            except Exception as e:
                logger.error(f"Dropping WebSocket after failed {event.get('type')} delivery: {e}")
                failed.add(connection)
        return sent, failed


manager = ConnectionManager()
