"""
Tests for the in-memory WebSocket connection registry.
"""
import asyncio

import pytest

from realtime.errors import AuthError


@pytest.mark.unit
class TestConnectionRegistry:
    def test_register_starts_anonymous(self, registry, fake_transport):
        connection_id = registry.register(fake_transport())
        connection = registry.get(connection_id)
        assert len(registry) == 1
        assert connection.is_authenticated is False
        assert connection.user_id is None

    def test_bind_indexes_by_user_and_role(self, registry, fake_transport):
        cid = registry.register(fake_transport())
        registry.bind(cid, user_id=5, society_id=1, role="guard")

        assert [c.connection_id for c in registry.by_user(5)] == [cid]
        assert [c.connection_id for c in registry.by_role(1, ("guard",))] == [cid]
        assert registry.by_role(1, ("admin",)) == []
        assert registry.by_role(2, ("guard",)) == []

    def test_by_user_filters_society(self, registry, fake_transport):
        cid = registry.register(fake_transport())
        registry.bind(cid, user_id=5, society_id=1, role="resident")
        assert registry.by_user(5, society_id=2) == []
        assert len(registry.by_user(5, society_id=1)) == 1

    def test_rebind_moves_indexes(self, registry, fake_transport):
        cid = registry.register(fake_transport())
        registry.bind(cid, user_id=5, society_id=1, role="guard")
        registry.bind(cid, user_id=6, society_id=2, role="admin")

        assert registry.by_user(5) == []
        assert registry.by_role(1, ("guard",)) == []
        assert len(registry.by_role(2, ("admin",))) == 1

    def test_one_user_many_connections(self, registry, fake_transport):
        ids = [registry.register(fake_transport()) for _ in range(3)]
        for cid in ids:
            registry.bind(cid, user_id=9, society_id=1, role="resident")
        assert len(registry.by_user(9)) == 3

        registry.unregister(ids[0])
        assert len(registry.by_user(9)) == 2

    def test_unregister_is_idempotent(self, registry, fake_transport):
        cid = registry.register(fake_transport())
        registry.bind(cid, user_id=5, society_id=1, role="guard")

        registry.unregister(cid)
        registry.unregister(cid)
        registry.unregister("never-registered")

        assert len(registry) == 0
        assert registry.get(cid) is None
        assert registry.by_user(5) == []
        assert registry.by_role(1, ("guard",)) == []

    def test_bind_after_unregister_raises(self, registry, fake_transport):
        cid = registry.register(fake_transport())
        registry.unregister(cid)

        with pytest.raises(AuthError, match="no longer registered"):
            registry.bind(cid, user_id=5, society_id=1, role="guard")
        assert registry.by_user(5) == []

    def test_by_society_excludes_sender_and_anonymous(self, registry, fake_transport):
        sender = registry.register(fake_transport())
        peer = registry.register(fake_transport())
        outsider = registry.register(fake_transport())
        registry.register(fake_transport())  # never authenticates
        registry.bind(sender, user_id=1, society_id=1, role="resident")
        registry.bind(peer, user_id=2, society_id=1, role="guard")
        registry.bind(outsider, user_id=3, society_id=2, role="resident")

        targets = registry.by_society(1, exclude_user_id=1)
        assert [c.connection_id for c in targets] == [peer]
        assert registry.by_society(None) == []

    def test_lookups_return_snapshots(self, registry, fake_transport):
        cid = registry.register(fake_transport())
        registry.bind(cid, user_id=5, society_id=1, role="guard")
        snapshot = registry.by_role(1, ("guard",))
        registry.unregister(cid)
        assert len(snapshot) == 1


@pytest.mark.unit
class TestHeartbeat:
    def test_heartbeat_reaches_every_connection(self, registry, fake_transport):
        transports = [fake_transport(), fake_transport()]
        for t in transports:
            registry.register(t)

        pruned = asyncio.run(registry.heartbeat())

        assert pruned == 0
        for t in transports:
            assert [f["type"] for f in t.frames()] == ["heartbeat"]
            assert "timestamp" in t.frames()[0]

    def test_heartbeat_prunes_dead_connections(self, registry, fake_transport):
        alive = registry.register(fake_transport())
        dead = registry.register(fake_transport(fail=True))
        registry.bind(dead, user_id=4, society_id=1, role="admin")

        pruned = asyncio.run(registry.heartbeat())

        assert pruned == 1
        assert registry.get(dead) is None
        assert registry.get(alive) is not None
        assert registry.by_role(1, ("admin",)) == []
