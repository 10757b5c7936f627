"""
Dashboard position state
Tracks the current record index and industry filter, hydrates them from
storage once the dataset is known, and writes changes back afterwards.
"""

import logging
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from business_records import BusinessRecord, filter_by_industry, list_industries
from position_store import FILTER_KEY, INDEX_KEY, INDUSTRY_PARAM, KeyValueStore

logger = logging.getLogger(__name__)


class Lifecycle(Enum):
    UNINITIALIZED = "uninitialized"
    HYDRATING = "hydrating"
    HYDRATED = "hydrated"


def clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def parse_index(raw: Optional[str]) -> int:
    if raw is None:
        return 0
    try:
        return int(str(raw).strip())
    except ValueError:
        return 0


def _safe_get(store: Optional[KeyValueStore], key: str) -> Optional[str]:
    if store is None:
        return None
    try:
        return store.get(key)
    except Exception as e:
        logger.debug("Ignoring storage read failure for %s: %s", key, e)
        return None


def _safe_call(store: Optional[KeyValueStore], method: str, *args) -> None:
    if store is None:
        return
    try:
        getattr(store, method)(*args)
    except Exception as e:
        logger.debug("Ignoring storage %s failure for %s: %s", method, args[0], e)


class DashboardState:
    """Owns the index/filter pair shown by the dashboard.

    ``storage`` keeps the saved index and filter; ``url_params`` mirrors the
    filter as the ``industry`` query param. Nothing is written to either until
    the state is hydrated against a loaded dataset, so an empty first load
    never overwrites a saved position.
    """

    def __init__(self, storage: Optional[KeyValueStore] = None,
                 url_params: Optional[KeyValueStore] = None):
        self.storage = storage
        self.url_params = url_params
        self.lifecycle = Lifecycle.UNINITIALIZED
        self.index = 0
        self.industry: Optional[str] = None
        self.records: Tuple[BusinessRecord, ...] = ()

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------
    def start(self) -> "DashboardState":
        """Read the tentative index and filter. Only the first call has effect."""
        if self.lifecycle is not Lifecycle.UNINITIALIZED:
            return self

        stored_industry = _safe_get(self.storage, FILTER_KEY) or None
        url_industry = _safe_get(self.url_params, INDUSTRY_PARAM) or None
        index = parse_index(_safe_get(self.storage, INDEX_KEY))

        if url_industry and url_industry != stored_industry:
            # saved index belongs to a different subsequence
            index = 0
        self.industry = url_industry or stored_industry
        self.index = max(index, 0)
        self.lifecycle = Lifecycle.HYDRATING
        logger.debug("Tentative state index=%s industry=%r", self.index, self.industry)
        return self

    def attach(self, records: Sequence[BusinessRecord]) -> None:
        """Point the state at a loaded dataset, hydrating on the first non-empty one."""
        if self.lifecycle is Lifecycle.UNINITIALIZED:
            self.start()
        self.records = tuple(records)

        if self.lifecycle is Lifecycle.HYDRATING:
            if not self.records:
                return
            if self.industry and self.industry not in list_industries(self.records):
                logger.info("Dropping unknown industry filter %r", self.industry)
                self.industry = None
                self.index = 0
            self.index = self._clamped(self.index)
            self.lifecycle = Lifecycle.HYDRATED
            logger.info("Hydrated at index %d of %d", self.index, self.total)
            self._persist()
            return

        if not self.records:
            return
        clamped = self._clamped(self.index)
        if clamped != self.index:
            self.index = clamped
            self._persist()

    @property
    def hydrated(self) -> bool:
        return self.lifecycle is Lifecycle.HYDRATED

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------
    @property
    def active(self) -> Tuple[BusinessRecord, ...]:
        return filter_by_industry(self.records, self.industry)

    @property
    def total(self) -> int:
        return len(self.active)

    @property
    def industries(self):
        return list_industries(self.records)

    @property
    def current(self) -> Optional[BusinessRecord]:
        active = self.active
        if not active:
            return None
        return active[self._clamped(self.index)]

    @property
    def can_go_previous(self) -> bool:
        return self.total > 0 and self.index > 0

    @property
    def can_go_next(self) -> bool:
        return self.total > 0 and self.index < self.total - 1

    def _clamped(self, value: int) -> int:
        total = self.total
        if total == 0:
            return 0
        return clamp(value, 0, total - 1)

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------
    def go_previous(self) -> bool:
        if not self.can_go_previous:
            return False
        return self._move_to(self.index - 1)

    def go_next(self) -> bool:
        if not self.can_go_next:
            return False
        return self._move_to(self.index + 1)

    def jump_to(self, position: Union[int, str, None]) -> bool:
        """Move to a 1-based position. Anything outside 1..total is ignored."""
        if isinstance(position, bool) or position is None:
            return False
        if isinstance(position, str):
            try:
                position = int(position.strip())
            except ValueError:
                return False
        if not isinstance(position, int) or not 1 <= position <= self.total:
            return False
        return self._move_to(position - 1)

    def set_industry(self, industry: Optional[str]) -> bool:
        industry = industry or None
        if industry == self.industry:
            return False
        self.industry = industry
        self.index = 0
        self._persist()
        return True

    def _move_to(self, index: int) -> bool:
        index = self._clamped(index)
        if index == self.index:
            return False
        self.index = index
        self._persist()
        return True

    # -------------------------------------------------------------------------
    # Write-back
    # -------------------------------------------------------------------------
    def _persist(self) -> None:
        if not self.hydrated:
            return
        _safe_call(self.storage, "set", INDEX_KEY, str(self.index))
        _safe_call(self.storage, "set", FILTER_KEY, self.industry or "")
        if self.industry:
            _safe_call(self.url_params, "set", INDUSTRY_PARAM, self.industry)
        else:
            _safe_call(self.url_params, "remove", INDUSTRY_PARAM)
