"""Persistence of the current table session, one per restaurant slug."""

import logging

from dishlens_schemas import TableSession
from pydantic import ValidationError

from apps.dishlens.storage import LocalStorage

logger = logging.getLogger(__name__)


def session_key(slug: str) -> str:
    return f"dishlens_table_session:{slug}"


class TableSessionStore:
    """Reads and writes ``dishlens_table_session:{slug}``."""

    def __init__(self, storage: LocalStorage) -> None:
        self.storage = storage

    def load(self, slug: str) -> TableSession | None:
        """The persisted session, or None if absent or unreadable."""
        data = self.storage.get_json(session_key(slug))
        if data is None:
            return None
        try:
            return TableSession.model_validate(data)
        except ValidationError:
            logger.warning("Discarding corrupt table session record for %s", slug)
            self.storage.remove(session_key(slug))
            return None

    def save(self, slug: str, session: TableSession) -> bool:
        return self.storage.set_json(session_key(slug), session.to_wire())

    def clear(self, slug: str) -> None:
        self.storage.remove(session_key(slug))
