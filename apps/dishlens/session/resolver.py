"""
Table session resolution.

Decides which table a device is sitting at, from (in order) a QR token in
the ``t`` parameter, a ``table`` parameter, the persisted session, or a
guest session for table 1. Whatever is resolved is persisted per slug.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import UTC, datetime

from dishlens_schemas import TableSession
from pydantic import ValidationError

from apps.dishlens.api.public import PublicAPI
from apps.dishlens.exceptions import DishLensAPIError, DishLensError, SessionExpiredError
from apps.dishlens.session.device import get_or_create_device_id
from apps.dishlens.session.store import TableSessionStore
from apps.dishlens.storage import LocalStorage

logger = logging.getLogger(__name__)

MIN_TOKEN_LENGTH = 8
MIN_ACCESS_TOKEN_LENGTH = 16
MAX_TABLE_LENGTH = 40
DEFAULT_TABLE = "1"


def normalize_table_number(value: str | None) -> str:
    """Trim, cap at 40 characters, and default to table "1"."""
    table = (value or "").strip()[:MAX_TABLE_LENGTH]
    return table or DEFAULT_TABLE


def is_access_token(token: str) -> bool:
    """QR capability tokens are long and never contain a dot."""
    return len(token) >= MIN_ACCESS_TOKEN_LENGTH and "." not in token


class TableSessionResolver:
    """
    Produce one ``TableSession`` for a slug and query string.

    Usage:
        resolver = TableSessionResolver(api, storage)
        session = await resolver.resolve("demo", {"t": token})
        if session is None:
            show_error(resolver.last_error)
    """

    def __init__(
        self,
        api: PublicAPI,
        storage: LocalStorage,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Args:
            api: Public API client used for the session calls.
            storage: Where the session and the device id are persisted.
            clock: Returns the current aware datetime (tests pin it).
        """
        self.api = api
        self.storage = storage
        self.store = TableSessionStore(storage)
        self.clock = clock or (lambda: datetime.now(UTC))
        self.last_error: DishLensError | None = None

    async def resolve(
        self, slug: str, query: Mapping[str, str | None] | None = None
    ) -> TableSession | None:
        """
        Resolve the session, or return None if that fails.

        The failure is logged and kept in ``last_error``; its ``message`` is
        fit to show to the customer.
        """
        self.last_error = None
        try:
            return await self.resolve_strict(slug, query)
        except DishLensError as e:
            logger.error("Table session resolution failed for %s: %s", slug, e.message)
            self.last_error = e
            return None
        except ValidationError as e:
            logger.error("Malformed table session response for %s: %s", slug, e)
            self.last_error = DishLensAPIError("Unexpected table session response")
            return None

    async def resolve_strict(
        self, slug: str, query: Mapping[str, str | None] | None = None
    ) -> TableSession:
        """
        Resolve the session, raising on failure.

        Raises:
            SessionExpiredError: The QR access token is expired or revoked.
            DishLensError: Any other API or connection failure.
        """
        query = query or {}
        token = (query.get("t") or "").strip()
        table = (query.get("table") or "").strip()

        if len(token) >= MIN_TOKEN_LENGTH:
            session = await self._from_token(slug, token)
        elif table:
            session = await self._start_guest(slug, table)
            logger.info("Guest session started for %s table %s", slug, session.table_number)
        else:
            session = await self._from_storage(slug)
            if session is not None:
                return session
            session = await self._start_guest(slug, DEFAULT_TABLE)
            logger.info("Guest session started for %s table %s", slug, session.table_number)

        self.store.save(slug, session)
        return session

    async def _from_token(self, slug: str, token: str) -> TableSession:
        device_id = get_or_create_device_id(self.storage)

        if not is_access_token(token):
            session = await self.api.start_table_session(slug, token, device_id)
            logger.info("Legacy token session started for %s table %s", slug, session.table_number)
            return session

        try:
            session = await self.api.resolve_table_session(slug, token, device_id)
        except DishLensAPIError as e:
            if e.is_session_expired:
                raise SessionExpiredError() from e
            raise
        logger.info("Access token resolved for %s table %s", slug, session.table_number)
        return session

    async def _from_storage(self, slug: str) -> TableSession | None:
        stored = self.store.load(slug)
        if stored is None:
            return None
        if not stored.is_expired(self.clock()):
            return stored

        logger.info("Persisted session for %s expired; starting a new guest session", slug)
        session = await self._start_guest(slug, stored.table_number)
        self.store.save(slug, session)
        return session

    async def _start_guest(self, slug: str, table: str) -> TableSession:
        device_id = get_or_create_device_id(self.storage)
        return await self.api.start_guest_session(
            slug, normalize_table_number(table), device_id
        )
