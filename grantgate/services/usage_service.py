import asyncio
import logging
import weakref
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from grantgate.config import settings
from grantgate.domain.monetization.errors import StorageUnavailableError
from grantgate.domain.monetization.schemas import UsageCounter, UsageSnapshot
from grantgate.domain.monetization.validators import (
    validate_feature_name,
    validate_user_id,
)
from grantgate.domain.monetization.windows import add_one_month, utcnow
from grantgate.storage.base import KeyValueStore
from grantgate.storage.keys import StoreKeys

logger = logging.getLogger(__name__)


class UsageLedger:
    """
    Per-user, per-feature consumption counters with a monthly window.

    Storage layout (one document per user):
        "<user_id>" -> {"<feature>": {"count": int, "resetDate": epoch_ms}}

    A counter whose window has ended is reset to zero, with a new window
    ending one calendar month from now, before it is read or incremented.
    The reset is persisted, so reads can write.

    Updates to one user's document are serialized per process. A lock
    only lives while some call holds or waits on it. Separate processes
    sharing a store are last-writer-wins.
    """

    def __init__(
        self,
        store: KeyValueStore,
        limit: Optional[int] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.limit = settings.USAGE_LIMIT if limit is None else limit
        self.clock = clock
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    # ─────────────────────────────────────────────
    # Public API
    # ─────────────────────────────────────────────

    async def get_usage(self, user_id: int, feature_name: str) -> UsageSnapshot:
        counter = await self._apply(user_id, feature_name, increment=False)
        return self.snapshot(counter)

    async def record_usage(self, user_id: int, feature_name: str) -> UsageSnapshot:
        """
        Count one consumption. Never refuses, even past the limit.
        """
        counter = await self._apply(user_id, feature_name, increment=True)
        logger.debug(
            f"Recorded usage of '{feature_name}' for user {user_id} "
            f"(count={counter.count})"
        )
        return self.snapshot(counter)

    async def get_counter(self, user_id: int, feature_name: str) -> UsageCounter:
        return await self._apply(user_id, feature_name, increment=False)

    async def list_user_usage(self, user_id: int) -> Dict[str, UsageCounter]:
        """
        Every counter of a user, with stale windows reset.
        """
        validate_user_id(user_id)
        key = StoreKeys.user(user_id)

        async with self._lock_for(key):
            document = await self._load(key)
            now = self.clock()
            counters: Dict[str, UsageCounter] = {}
            changed = False

            for feature_name, record in document.items():
                counter, reset = self._current(user_id, feature_name, record, now)
                counters[feature_name] = counter
                if reset:
                    document[feature_name] = counter.to_record()
                    changed = True

            if changed:
                await self.store.set(key, document)

        return counters

    # ─────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────

    async def _apply(
        self,
        user_id: int,
        feature_name: str,
        increment: bool,
    ) -> UsageCounter:
        validate_user_id(user_id)
        validate_feature_name(feature_name)
        key = StoreKeys.user(user_id)

        async with self._lock_for(key):
            document = await self._load(key)
            counter, changed = self._current(
                user_id,
                feature_name,
                document.get(feature_name),
                self.clock(),
            )

            if increment:
                counter.count += 1
                changed = True

            if changed:
                document[feature_name] = counter.to_record()
                await self.store.set(key, document)

        return counter

    def _current(
        self,
        user_id: int,
        feature_name: str,
        record: Optional[Dict[str, Any]],
        now: datetime,
    ) -> tuple[UsageCounter, bool]:
        """
        Resolve the live counter. The flag tells whether it differs from
        what is stored.
        """
        if record is None:
            return self._fresh(user_id, feature_name, now), True

        try:
            counter = UsageCounter.from_record(user_id, feature_name, record)
        except (
            KeyError,
            TypeError,
            ValueError,
            OverflowError,
            OSError,
            ValidationError,
        ) as e:
            logger.error(
                f"Corrupt usage record for user {user_id}, "
                f"feature '{feature_name}': {record!r}"
            )
            raise StorageUnavailableError(
                f"Usage record for '{feature_name}' is unreadable"
            ) from e

        if counter.is_stale(now):
            logger.debug(
                f"Usage window for user {user_id}, feature '{feature_name}' "
                f"ended at {counter.window_end.isoformat()}; resetting"
            )
            return self._fresh(user_id, feature_name, now), True

        return counter, False

    def _fresh(self, user_id: int, feature_name: str, now: datetime) -> UsageCounter:
        return UsageCounter(
            user_id=user_id,
            feature_name=feature_name,
            count=0,
            window_end=add_one_month(now),
        )

    async def _load(self, key: str) -> Dict[str, Any]:
        document = await self.store.get(key)
        if document is None:
            return {}

        if not isinstance(document, dict):
            logger.error(f"Usage document for user {key} is not a mapping")
            raise StorageUnavailableError(f"Usage document for user {key} is unreadable")

        return document

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    # ─────────────────────────────────────────────
    # Quota
    # ─────────────────────────────────────────────

    def snapshot(self, counter: UsageCounter) -> UsageSnapshot:
        """
        Count, limit and remaining quota for a counter. Remaining never
        drops below zero.
        """
        return UsageSnapshot(
            count=counter.count,
            limit=self.limit,
            remaining=max(0, self.limit - counter.count),
        )
