"""Tests for verifyit.services.store — in-memory and Redis analysis stores."""
import json
import time

import pytest
from unittest.mock import patch

from verifyit.services.store import (
    AnalysisNotFoundError,
    AnalysisStore,
    RedisAnalysisStore,
    StoredAnalysis,
    create_store,
)


LEAD = {'name': 'Dana Whitfield', 'title': 'VP of Engineering', 'company': 'Northwind Labs'}


class TestAnalysisStore:
    """In-process TTL map with lazy eviction and a background sweep."""

    def test_create_and_get(self, store, sample_analysis, clock):
        entry = store.create(LEAD, sample_analysis)
        assert entry.expires_at == clock.now + 3600
        fetched = store.get(entry.id)
        assert fetched is entry
        assert fetched.analysis.verdict == sample_analysis.verdict

    def test_ids_are_unique(self, store, sample_analysis):
        ids = {store.create(LEAD, sample_analysis).id for _ in range(20)}
        assert len(ids) == 20

    def test_unknown_id(self, store):
        assert store.get('missing') is None

    def test_expired_entry_is_evicted_on_read(self, store, sample_analysis, clock):
        entry = store.create(LEAD, sample_analysis)
        clock.advance(3601)
        assert store.get(entry.id) is None
        assert len(store) == 0

    def test_entry_alive_until_expiry(self, store, sample_analysis, clock):
        entry = store.create(LEAD, sample_analysis)
        clock.advance(3599)
        assert store.get(entry.id) is entry

    def test_delete(self, store, sample_analysis):
        entry = store.create(LEAD, sample_analysis)
        assert store.delete(entry.id) is True
        assert store.get(entry.id) is None
        assert store.delete(entry.id) is False

    def test_sweep_removes_only_expired(self, store, sample_analysis, clock):
        old = store.create(LEAD, sample_analysis)
        clock.advance(3000)
        fresh = store.create(LEAD, sample_analysis)
        clock.advance(700)
        assert store.sweep() == 1
        assert store.get(old.id) is None
        assert store.get(fresh.id) is fresh

    def test_background_sweep_runs_and_stops(self, sample_analysis):
        now = [1000.0]
        store = AnalysisStore(ttl=10, sweep_interval=0.01, clock=lambda: now[0])
        store.create(LEAD, sample_analysis)
        now[0] += 60
        store.start_sweep()
        try:
            deadline = time.monotonic() + 2
            while len(store) and time.monotonic() < deadline:
                time.sleep(0.01)
        finally:
            store.stop_sweep()
        assert len(store) == 0
        assert store._sweeper is None

    def test_start_sweep_is_idempotent(self):
        store = AnalysisStore(sweep_interval=60)
        store.start_sweep()
        first = store._sweeper
        store.start_sweep()
        assert store._sweeper is first
        store.stop_sweep()

    def test_expires_at_iso(self, store, sample_analysis):
        entry = store.create(LEAD, sample_analysis)
        assert entry.expires_at_iso.endswith('+00:00')


class TestRedisAnalysisStore:
    """SETEX + JSON, lazy expiry on read."""

    def test_create_writes_setex(self, fake_redis, sample_analysis, clock):
        store = RedisAnalysisStore(client=fake_redis, ttl=3600, clock=clock)
        entry = store.create(LEAD, sample_analysis)
        key = f'analysis:{entry.id}'
        assert fake_redis.ttls[key] == 3600
        assert json.loads(fake_redis.get_store[key])['lead'] == LEAD

    def test_round_trip(self, fake_redis, sample_analysis, clock):
        store = RedisAnalysisStore(client=fake_redis, ttl=3600, clock=clock)
        entry = store.create(LEAD, sample_analysis)
        fetched = store.get(entry.id)
        assert isinstance(fetched, StoredAnalysis)
        assert fetched.analysis.to_dict() == sample_analysis.to_dict()
        assert fetched.expires_at == entry.expires_at

    def test_expired_blob_is_deleted(self, fake_redis, sample_analysis, clock):
        store = RedisAnalysisStore(client=fake_redis, ttl=3600, clock=clock)
        entry = store.create(LEAD, sample_analysis)
        clock.advance(4000)
        assert store.get(entry.id) is None
        assert f'analysis:{entry.id}' not in fake_redis.get_store

    def test_delete(self, fake_redis, sample_analysis, clock):
        store = RedisAnalysisStore(client=fake_redis, clock=clock)
        entry = store.create(LEAD, sample_analysis)
        assert store.delete(entry.id) is True
        assert store.get(entry.id) is None

    def test_sweep_is_noop(self, fake_redis):
        store = RedisAnalysisStore(client=fake_redis)
        store.start_sweep()
        assert store.sweep() == 0
        store.stop_sweep()


class TestCreateStore:

    def test_memory(self):
        assert create_store('memory').backend == 'memory'

    def test_redis(self, fake_redis):
        with patch('verifyit.extensions.redis_client', fake_redis):
            store = create_store('redis')
        assert store.backend == 'redis'
        assert store.r is fake_redis

    def test_unknown_falls_back_to_memory(self):
        assert isinstance(create_store('dynamo'), AnalysisStore)


class TestAnalysisNotFoundError:

    def test_is_lookup_error(self):
        err = AnalysisNotFoundError('abc')
        assert isinstance(err, LookupError)
        assert err.analysis_id == 'abc'
