"""
In-memory index of live WebSocket connections

Connections are tagged with (user_id, society_id, role) once the relay has
authenticated them. Nothing here is persisted; after a restart clients must
reconnect and authenticate again.

Lookups return list snapshots, so callers may await sends while other
connections register or unregister.
"""
import json
import logging
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from fastapi.encoders import jsonable_encoder

from .errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Connection:
    transport: Any
    connection_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    user_id: Optional[int] = None
    society_id: Optional[int] = None
    role: Optional[str] = None
    is_authenticated: bool = False
    connected_at: datetime = field(default_factory=datetime.utcnow)

    async def send(self, payload: Dict[str, Any]) -> None:
        await self.transport.send_text(json.dumps(jsonable_encoder(payload)))

    def describe(self) -> str:
        if not self.is_authenticated:
            return f"{self.connection_id[:8]} (anonymous)"
        return f"{self.connection_id[:8]} (user {self.user_id}, {self.role}, society {self.society_id})"


class ConnectionRegistry:
    """Connections by id, indexed by user and by (society, role)"""

    def __init__(self):
        self._connections: Dict[str, Connection] = {}
        self._by_user: Dict[int, Set[str]] = defaultdict(set)
        self._by_society_role: Dict[Tuple[int, str], Set[str]] = defaultdict(set)

    def __len__(self) -> int:
        return len(self._connections)

    def register(self, transport: Any) -> str:
        connection = Connection(transport=transport)
        self._connections[connection.connection_id] = connection
        logger.info(f"New WebSocket connection {connection.connection_id[:8]} ({len(self._connections)} open)")
        return connection.connection_id

    def get(self, connection_id: str) -> Optional[Connection]:
        return self._connections.get(connection_id)

    def bind(self, connection_id: str, user_id: int, society_id: Optional[int], role: str) -> Connection:
        """Attach an identity to a connection; re-authentication replaces the previous one"""
        connection = self._connections.get(connection_id)
        if connection is None:
            # pruned by the heartbeat while its socket was still open
            raise AuthError("Connection is no longer registered")
        self._unindex(connection)
        connection.user_id = user_id
        connection.society_id = society_id
        connection.role = role
        connection.is_authenticated = True
        self._by_user[user_id].add(connection_id)
        if society_id is not None:
            self._by_society_role[(society_id, role)].add(connection_id)
        return connection

    def unregister(self, connection_id: str) -> None:
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return
        self._unindex(connection)
        logger.info(f"WebSocket connection closed {connection.describe()} ({len(self._connections)} open)")

    def _unindex(self, connection: Connection) -> None:
        if connection.user_id is not None:
            ids = self._by_user.get(connection.user_id)
            if ids is not None:
                ids.discard(connection.connection_id)
                if not ids:
                    del self._by_user[connection.user_id]
        if connection.society_id is not None and connection.role is not None:
            key = (connection.society_id, connection.role)
            ids = self._by_society_role.get(key)
            if ids is not None:
                ids.discard(connection.connection_id)
                if not ids:
                    del self._by_society_role[key]

    def _resolve(self, ids: Iterable[str]) -> List[Connection]:
        return [self._connections[cid] for cid in list(ids) if cid in self._connections]

    def all(self) -> List[Connection]:
        return list(self._connections.values())

    def find(self, predicate: Callable[[Connection], bool]) -> List[Connection]:
        return [c for c in self.all() if predicate(c)]

    def by_user(self, user_id: int, society_id: Optional[int] = None) -> List[Connection]:
        connections = self._resolve(self._by_user.get(user_id, ()))
        if society_id is not None:
            connections = [c for c in connections if c.society_id == society_id]
        return connections

    def by_role(self, society_id: Optional[int], roles: Iterable[str]) -> List[Connection]:
        if society_id is None:
            return []
        connections: List[Connection] = []
        for role in roles:
            connections.extend(self._resolve(self._by_society_role.get((society_id, role), ())))
        return connections

    def by_society(self, society_id: Optional[int], exclude_user_id: Optional[int] = None) -> List[Connection]:
        if society_id is None:
            return []
        return self.find(
            lambda c: c.is_authenticated and c.society_id == society_id and c.user_id != exclude_user_id
        )

    async def heartbeat(self) -> int:
        """
        Send a heartbeat frame to every open connection and prune the ones
        whose transport fails. Returns the number pruned.
        """
        frame = {"type": "heartbeat", "timestamp": datetime.utcnow().isoformat()}
        pruned = 0
        for connection in self.all():
            try:
                await connection.send(frame)
            except Exception as e:
                logger.warning(f"Heartbeat failed for {connection.describe()}: {e}; pruning")
                self.unregister(connection.connection_id)
                pruned += 1
        return pruned
