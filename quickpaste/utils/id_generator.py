"""Short, human-typeable paste identifiers.

Identifiers are 5 characters drawn from lowercase letters and digits with
the look-alike glyphs ``0``, ``o``, ``l`` and ``1`` removed, giving a
32-symbol alphabet and 32**5 (about 33.5M) possible values. Generation makes
no uniqueness promise; callers check the store.
"""

from __future__ import annotations

import re
import secrets
from typing import Callable

PASTE_ID_ALPHABET = "abcdefghijkmnpqrstuvwxyz23456789"
PASTE_ID_LENGTH = 5

_PASTE_ID_PATTERN = re.compile(rf"^[a-km-np-z2-9]{{{PASTE_ID_LENGTH}}}$")

IdGenerator = Callable[[], str]


def generate_paste_id() -> str:
    """Return a random identifier using a cryptographically secure source."""
    return "".join(secrets.choice(PASTE_ID_ALPHABET) for _ in range(PASTE_ID_LENGTH))


def is_valid_paste_id(value: object) -> bool:
    """Check that ``value`` has the exact identifier shape.

    Used to reject malformed ids before any store lookup.
    """
    return isinstance(value, str) and _PASTE_ID_PATTERN.fullmatch(value) is not None
