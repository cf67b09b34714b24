"""Paste service: validation, identifier assignment and persistence.

This service is the only writer of pastes. It handles:
- Normalization of untrusted input into strict Paste fields
- Collision-checked identifier assignment with a bounded number of attempts
- Expiration and TTL computation
- Format checks on identifiers before any store lookup
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Callable

from quickpaste.adapters.store.base import AbstractPasteStore, utc_now
from quickpaste.core.config import PasteSettings, settings
from quickpaste.core.errors import (
    ContentTooLargeError,
    IdentifierExhaustedError,
    PasteAlreadyExistsError,
    ValidationAppError,
)
from quickpaste.schemas.paste import Paste
from quickpaste.utils.id_generator import IdGenerator, generate_paste_id, is_valid_paste_id
from quickpaste.utils.text_normalizer import (
    normalize_expiration,
    normalize_language,
    resolve_expiration,
    sanitize_content,
)

logger = logging.getLogger(__name__)


def _ttl_seconds(expires_at: datetime | None, now: datetime) -> int | None:
    """Seconds until ``expires_at``, floored at 1. None when it never expires."""
    if expires_at is None:
        return None
    return max(1, math.floor((expires_at - now).total_seconds()))


class PasteService:
    """Creates and fetches pastes on top of an injected store.

    Attributes:
        store: Paste store backend.
        config: Paste limits and defaults.
    """

    def __init__(
        self,
        store: AbstractPasteStore,
        *,
        config: PasteSettings | None = None,
        id_generator: IdGenerator = generate_paste_id,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.config = config or settings.paste
        self._generate_id = id_generator
        self._clock = clock

    def _normalize_content(self, raw_content: object) -> str:
        """Trim, bound and sanitize submitted content.

        Raises:
            ValidationAppError: If content is missing, not text, or empty.
            ContentTooLargeError: If trimmed content exceeds the ceiling.
        """
        if not isinstance(raw_content, str) or not raw_content:
            raise ValidationAppError(
                code="content_required",
                message="Content is required and must be a string",
            )

        content = raw_content.strip()
        if not content:
            raise ValidationAppError(
                code="content_empty",
                message="Content cannot be empty",
            )

        max_chars = self.config.max_content_chars
        if len(content) > max_chars:
            raise ContentTooLargeError(
                code="content_too_large",
                message=f"Content too large. Maximum size is {max_chars} characters",
                details={"max_chars": max_chars, "actual_chars": len(content)},
            )

        content = sanitize_content(content)
        if not content.strip():
            raise ValidationAppError(
                code="content_empty",
                message="Content cannot be empty",
            )
        return content

    async def create_paste(
        self,
        raw_content: object,
        raw_language: object = None,
        raw_expiration: object = None,
    ) -> Paste:
        """Validate input, assign an identifier and store the paste.

        Args:
            raw_content: Submitted text (untrusted).
            raw_language: Submitted language name; unknown values become the
                default language.
            raw_expiration: One of ``1h``, ``1d``, ``7d``, ``30d``, ``never``;
                unknown values become the default expiration.

        Returns:
            The stored Paste.

        Raises:
            ValidationAppError: If content is missing or empty.
            ContentTooLargeError: If content exceeds the ceiling.
            IdentifierExhaustedError: If no free identifier was found.
            CapacityExceededError: If the store is full.
            StoreBackendError: If the store fails.
        """
        content = self._normalize_content(raw_content)
        language = normalize_language(raw_language, self.config.default_language)
        expiration = normalize_expiration(raw_expiration, self.config.default_expiration)

        attempts = self.config.id_max_attempts
        for attempt in range(1, attempts + 1):
            paste_id = self._generate_id()
            if await self.store.exists(paste_id):
                logger.info("paste.collision", extra={"attempt": attempt, "stage": "exists"})
                continue

            now = self._clock()
            expires_at = resolve_expiration(expiration, now)
            paste = Paste(
                id=paste_id,
                content=content,
                language=language,
                expires_at=expires_at,
                created_at=now,
            )

            try:
                await self.store.put(paste, _ttl_seconds(expires_at, now))
            except PasteAlreadyExistsError:
                # Another writer took the id between exists() and put()
                logger.info("paste.collision", extra={"attempt": attempt, "stage": "put"})
                continue

            logger.info(
                "paste.created",
                extra={
                    "paste_id": paste_id,
                    "language": language,
                    "expiration": expiration,
                    "char_count": len(content),
                },
            )
            return paste

        logger.error("paste.id_exhausted", extra={"attempts": attempts})
        raise IdentifierExhaustedError(
            code="identifier_exhausted",
            message="Failed to generate unique ID. Please try again.",
            details={"attempts": attempts},
        )

    async def get_paste(self, paste_id: str) -> Paste | None:
        """Fetch a live paste; malformed identifiers never reach the store."""
        if not is_valid_paste_id(paste_id):
            return None
        return await self.store.get(paste_id)

    async def delete_paste(self, paste_id: str) -> None:
        """Remove a paste if the identifier is well formed."""
        if not is_valid_paste_id(paste_id):
            return
        await self.store.delete(paste_id)
        logger.info("paste.deleted", extra={"paste_id": paste_id})
