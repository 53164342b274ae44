"""
Per-browser screen state.

Each admin session gets its own CountriesManager (and store), so open
modals, draft filters and pending delete confirmations never cross between
browsers. The CountryClient and its connection pool stay shared.
"""

from collections import OrderedDict
from typing import Callable

import structlog

from views.countries_manager import CountriesManager

logger = structlog.get_logger(__name__)

ManagerFactory = Callable[[], CountriesManager]


class SessionRegistry:
    """Bounded map of session id -> CountriesManager, least recently used first."""

    def __init__(self, factory: ManagerFactory, max_sessions: int = 500):
        self._factory = factory
        self._max_sessions = max_sessions
        self._managers: "OrderedDict[str, CountriesManager]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._managers)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._managers

    def get(self, session_id: str) -> CountriesManager:
        """Return the session's manager, creating it on first use."""
        manager = self._managers.get(session_id)
        if manager is not None:
            self._managers.move_to_end(session_id)
            return manager

        manager = self._factory()
        self._managers[session_id] = manager
        logger.debug("countries_session_created", active_sessions=len(self._managers))

        while len(self._managers) > self._max_sessions:
            self._managers.popitem(last=False)
            logger.info("countries_session_evicted", active_sessions=len(self._managers))
        return manager
