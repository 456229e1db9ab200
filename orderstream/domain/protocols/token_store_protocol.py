"""Token store protocol.

The bearer token and partner profile live in local persisted key-value
storage owned by the host app. The SSE client reads the token before every
connect attempt; the source selector reads the partner id once.
"""

from typing import Protocol


class TokenStoreProtocol(Protocol):
    """Read access to the persisted session."""

    async def get_token(self) -> str | None:
        """Return the bearer token, or None when the partner is logged out."""
        ...

    async def get_partner_id(self) -> str | None:
        """Return the logged-in partner id, or None if unknown."""
        ...
