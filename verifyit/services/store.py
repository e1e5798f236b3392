"""
Analysis store — completed verifications keyed by an opaque id, with expiry.

Two backends share one contract (create / get / delete):
  AnalysisStore       in-process map guarded by a lock; a daemon thread sweeps
                      expired entries every ANALYSIS_SWEEP_INTERVAL_SECONDS and
                      reads evict an expired entry before reporting "not found"
  RedisAnalysisStore  JSON blobs under analysis:{id} written with SETEX; Redis
                      expires them, reads double-check expires_at

The host application owns the lifecycle: create_app() starts the sweep and
stop_sweep() ends it.
"""
import json
import logging
import threading
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from verifyit.config import ANALYSIS_STORE, ANALYSIS_SWEEP_INTERVAL_SECONDS, ANALYSIS_TTL_SECONDS
from verifyit.models.analysis import AnalysisResult

logger = logging.getLogger('services.store')


class AnalysisNotFoundError(LookupError):
    """Raised when an analysis id is unknown or has expired."""
    def __init__(self, analysis_id):
        self.analysis_id = analysis_id
        super().__init__(f"Analysis {analysis_id} not found")


def _iso(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


@dataclass
class StoredAnalysis:
    """One store entry: the lead as submitted plus its finished analysis."""
    id: str
    lead: Dict
    analysis: AnalysisResult
    created_at: float
    expires_at: float

    @property
    def expires_at_iso(self) -> str:
        return _iso(self.expires_at)

    def is_expired(self, now: float) -> bool:
        return self.expires_at <= now

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'lead': self.lead,
            'analysis': self.analysis.to_dict(),
            'created_at': self.created_at,
            'expires_at': self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'StoredAnalysis':
        return cls(
            id=data['id'],
            lead=data.get('lead') or {},
            analysis=AnalysisResult.from_dict(data['analysis']),
            created_at=float(data['created_at']),
            expires_at=float(data['expires_at']),
        )


class AnalysisStore:
    """
    In-process TTL map.

    Usage:
        store = AnalysisStore(ttl=86400)
        store.start_sweep()
        entry = store.create(lead.to_dict(), analysis)
        store.get(entry.id)
        store.stop_sweep()
    """
    backend = 'memory'

    def __init__(self, ttl: float = ANALYSIS_TTL_SECONDS,
                 sweep_interval: float = ANALYSIS_SWEEP_INTERVAL_SECONDS,
                 clock: Callable[[], float] = time.time):
        self.ttl = ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, StoredAnalysis] = {}
        self._stop = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def create(self, lead: Dict, analysis: AnalysisResult) -> StoredAnalysis:
        now = self._clock()
        entry = StoredAnalysis(
            id=str(uuid.uuid4()),
            lead=lead,
            analysis=analysis,
            created_at=now,
            expires_at=now + self.ttl,
        )
        with self._lock:
            self._entries[entry.id] = entry
        logger.info("Stored analysis %s (expires %s)", entry.id, entry.expires_at_iso,
                    extra={'analysis_id': entry.id})
        return entry

    def get(self, analysis_id: str) -> Optional[StoredAnalysis]:
        """Return the entry, or None when unknown. Expired entries are evicted here."""
        with self._lock:
            entry = self._entries.get(analysis_id)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[analysis_id]
                logger.info("Evicted expired analysis %s on read", analysis_id)
                return None
            return entry

    def delete(self, analysis_id: str) -> bool:
        with self._lock:
            return self._entries.pop(analysis_id, None) is not None

    def sweep(self) -> int:
        """Delete every expired entry. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info("Sweep removed %d expired analyses", len(expired))
        return len(expired)

    def start_sweep(self):
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        self._stop.clear()
        self._sweeper = threading.Thread(target=self._sweep_loop, name='analysis-sweep', daemon=True)
        self._sweeper.start()
        logger.debug("Sweep started (every %.0fs)", self.sweep_interval)

    def stop_sweep(self):
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=5)
            self._sweeper = None

    def _sweep_loop(self):
        while not self._stop.wait(self.sweep_interval):
            try:
                self.sweep()
            except Exception as e:
                logger.error("Sweep failed: %s", e)


class RedisAnalysisStore:
    """
    Redis-backed store.

    Keys:
        analysis:{id}  → JSON blob of StoredAnalysis, TTL = ttl seconds
    """
    backend = 'redis'
    key_prefix = 'analysis:'

    def __init__(self, client=None, ttl: float = ANALYSIS_TTL_SECONDS,
                 clock: Callable[[], float] = time.time):
        if client is None:
            from verifyit.extensions import redis_client
            client = redis_client
        self.r = client
        self.ttl = ttl
        self._clock = clock

    def _key(self, analysis_id: str) -> str:
        return f'{self.key_prefix}{analysis_id}'

    def create(self, lead: Dict, analysis: AnalysisResult) -> StoredAnalysis:
        now = self._clock()
        entry = StoredAnalysis(
            id=str(uuid.uuid4()),
            lead=lead,
            analysis=analysis,
            created_at=now,
            expires_at=now + self.ttl,
        )
        self.r.setex(self._key(entry.id), max(1, int(round(self.ttl))), json.dumps(entry.to_dict()))
        logger.info("Stored analysis %s in Redis (expires %s)", entry.id, entry.expires_at_iso)
        return entry

    def get(self, analysis_id: str) -> Optional[StoredAnalysis]:
        data = self.r.get(self._key(analysis_id))
        if not data:
            return None
        entry = StoredAnalysis.from_dict(json.loads(data))
        if entry.is_expired(self._clock()):
            self.r.delete(self._key(analysis_id))
            return None
        return entry

    def delete(self, analysis_id: str) -> bool:
        return bool(self.r.delete(self._key(analysis_id)))

    def sweep(self) -> int:
        # Redis TTLs do the work
        return 0

    def start_sweep(self):
        pass

    def stop_sweep(self):
        pass


def create_store(backend: str = ANALYSIS_STORE):
    """Build the configured store backend ('memory' or 'redis')."""
    if backend == 'redis':
        return RedisAnalysisStore()
    if backend != 'memory':
        logger.warning("Unknown ANALYSIS_STORE %r, using in-memory store", backend)
    return AnalysisStore()
