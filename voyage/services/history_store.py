"""
Historia planowania zapisywana w diskcache.

Jedna lista na sesję, najnowsze wpisy na początku, maksymalnie
HISTORY_LIMIT wpisów.
"""

import logging
from typing import List, Optional

from diskcache import Cache

from voyage.config.settings import HISTORY_LIMIT, HISTORY_CACHE_DIR
from voyage.models.history import HistoryRecord

logger = logging.getLogger(__name__)


class HistoryStore:
    """
    Ograniczona historia planów per sesja.

    Attributes:
        cache: Cache diskcache (klucz: 'history:<session_id>')
        limit: Maksymalna liczba wpisów na sesję
    """

    def __init__(self, cache: Optional[Cache] = None, limit: int = HISTORY_LIMIT):
        self.cache = cache if cache is not None else Cache(HISTORY_CACHE_DIR)
        self.limit = limit

    @staticmethod
    def _key(session_id: str) -> str:
        return f"history:{session_id}"

    def add(self, session_id: str, record: HistoryRecord) -> List[HistoryRecord]:
        """
        Dodaje wpis na początek historii i przycina ją do limitu.

        Returns:
            Historia po dodaniu wpisu
        """
        key = self._key(session_id)
        with self.cache.transact():
            entries = self.cache.get(key, [])
            entries = [record.to_dict()] + entries
            entries = entries[:self.limit]
            self.cache.set(key, entries)

        logger.info(f"[{session_id[:8]}] Zapisano historię: {record.origin} → {record.destination} "
                    f"(wpisów: {len(entries)})")
        return [HistoryRecord.from_dict(entry) for entry in entries]

    def list(self, session_id: str) -> List[HistoryRecord]:
        """Zwraca historię sesji, najnowsze na początku"""
        return [HistoryRecord.from_dict(entry) for entry in self.cache.get(self._key(session_id), [])]

    def get(self, session_id: str, record_id: str) -> Optional[HistoryRecord]:
        """Zwraca wpis o danym ID lub None"""
        for record in self.list(session_id):
            if record.id == record_id:
                return record
        return None

    def clear(self, session_id: str) -> bool:
        """Usuwa historię sesji"""
        return self.cache.delete(self._key(session_id))
