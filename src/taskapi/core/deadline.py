"""Request-scoped deadlines propagated from the HTTP edge into store calls."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass


@dataclass(frozen=True)
class Deadline:
    """Absolute expiry on the running event loop's clock.

    Minted once per request and handed down to every store call.
    """

    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        return cls(expires_at=asyncio.get_running_loop().time() + seconds)

    def remaining(self) -> float:
        return max(0.0, self.expires_at - asyncio.get_running_loop().time())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def bound(self) -> asyncio.Timeout:
        """Cancel the enclosed awaits when the deadline passes.

        Usage:
            async with deadline.bound():
                await collection.find_one(...)
        """
        return asyncio.timeout_at(self.expires_at)
