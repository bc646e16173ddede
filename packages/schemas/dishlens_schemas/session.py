"""Table session schemas - the identity a device holds while seated at a table."""

from datetime import UTC, datetime

from pydantic import Field, field_validator

from dishlens_schemas.common import WireModel

# =============================================================================
# Sessions
# =============================================================================


class TableSession(WireModel):
    """
    Server-issued binding between a device and a physical table.

    Returned by the resolve, start, and guest session endpoints, and persisted
    locally per restaurant slug so a reload keeps the same table.
    """

    table_session_id: str
    table_number: str
    session_secret: str | None = Field(
        default=None,
        description="Required to place orders; absent for read-only sessions",
    )
    expires_at: datetime | None = None

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @property
    def can_order(self) -> bool:
        """Whether this session carries the secret needed to place orders."""
        return bool(self.session_secret)

    def is_expired(self, now: datetime | None = None) -> bool:
        """True once ``expires_at`` has passed. Sessions without one never expire."""
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or datetime.now(UTC))


class TrackedOrder(WireModel):
    """The last order placed from this device, kept so its status can be polled."""

    order_id: str
    order_token: str | None = None
