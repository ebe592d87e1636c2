import asyncio
from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from ember.logging import setup_logger
from ember.services.focus.models import FocusWorkflow, utcnow


class SessionStore(ABC):
    """Storage contract for focus workflows keyed by (session key, category)"""

    @abstractmethod
    async def get(self, session_key: str, category: str) -> Optional[FocusWorkflow]:
        """Return a copy of the stored workflow, or None"""

    @abstractmethod
    async def put(self, workflow: FocusWorkflow) -> None:
        """Insert or replace the workflow for its (session key, category) pair"""

    @abstractmethod
    async def list_by_session(self, session_key: str) -> List[FocusWorkflow]:
        """Return copies of all workflows for a session key, in no particular order"""

    @abstractmethod
    async def purge_expired(self) -> int:
        """Drop workflows idle past the TTL and return how many were removed"""


class InMemorySessionStore(SessionStore):
    """
    Process-local store with idle TTL and a hard record limit.

    Records idle longer than ttl_seconds are treated as absent. When a new
    pair would push the store past max_records, expired records go first,
    then the least recently updated ones.
    """

    def __init__(
        self,
        ttl_seconds: int,
        max_records: int,
        clock: Callable[[], datetime] = utcnow,
    ):
        if max_records < 1:
            raise ValueError("max_records must be at least 1")
        self.logger = setup_logger(__name__)
        self.ttl = timedelta(seconds=ttl_seconds)
        self.max_records = max_records
        self._clock = clock
        self._records: "OrderedDict[Tuple[str, str], FocusWorkflow]" = OrderedDict()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def _is_expired(self, workflow: FocusWorkflow) -> bool:
        return self._clock() - workflow.updated_at > self.ttl

    async def get(self, session_key: str, category: str) -> Optional[FocusWorkflow]:
        async with self._lock:
            key = (session_key, category)
            workflow = self._records.get(key)
            if workflow is None:
                return None
            if self._is_expired(workflow):
                del self._records[key]
                self.logger.info(f"Expired focus session {key}")
                return None
            return workflow.model_copy(deep=True)

    async def put(self, workflow: FocusWorkflow) -> None:
        async with self._lock:
            key = workflow.key
            if key not in self._records and len(self._records) >= self.max_records:
                self._evict_unlocked()
            self._records[key] = workflow.model_copy(deep=True)
            self._records.move_to_end(key)
            self.logger.debug(f"Stored focus session {key} ({len(self._records)} total)")

    async def list_by_session(self, session_key: str) -> List[FocusWorkflow]:
        async with self._lock:
            result = []
            for key, workflow in list(self._records.items()):
                if key[0] != session_key:
                    continue
                if self._is_expired(workflow):
                    del self._records[key]
                    continue
                result.append(workflow.model_copy(deep=True))
            return result

    async def purge_expired(self) -> int:
        async with self._lock:
            return self._purge_expired_unlocked()

    def _purge_expired_unlocked(self) -> int:
        expired = [k for k, w in self._records.items() if self._is_expired(w)]
        for key in expired:
            del self._records[key]
        if expired:
            self.logger.info(f"Purged {len(expired)} expired focus sessions")
        return len(expired)

    def _evict_unlocked(self) -> None:
        self._purge_expired_unlocked()
        while len(self._records) >= self.max_records:
            key, _ = self._records.popitem(last=False)
            self.logger.warning(f"Store full, evicted least recently used focus session {key}")
