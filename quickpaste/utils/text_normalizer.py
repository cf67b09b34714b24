import re
from datetime import datetime, timedelta

ALLOWED_LANGUAGES: frozenset[str] = frozenset(
    {
        "plaintext", "javascript", "typescript", "python", "java", "csharp",
        "cpp", "go", "rust", "ruby", "php", "swift", "kotlin", "sql", "html",
        "css", "json", "yaml", "markdown", "bash",
    }
)

EXPIRATION_DELTAS: dict[str, timedelta | None] = {
    "1h": timedelta(hours=1),
    "1d": timedelta(days=1),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "never": None,
}

# NUL and C0 controls, keeping \t (0x09), \n (0x0A) and \r (0x0D)
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")


def sanitize_content(text: str) -> str:
    """Strip NUL bytes and non-printable control characters.

    Tabs, newlines and carriage returns are preserved so code keeps its
    layout.

    Args:
        text: Already trimmed paste content.

    Returns:
        str: Content safe to store and render.
    """
    return _CONTROL_CHARS.sub("", text)


def normalize_language(language: object, default: str = "plaintext") -> str:
    """Lowercase and trim a language name, falling back to ``default``."""
    if not isinstance(language, str):
        return default
    candidate = language.strip().lower()
    return candidate if candidate in ALLOWED_LANGUAGES else default


def normalize_expiration(token: object, default: str = "1d") -> str:
    """Return ``token`` if it is a known expiration choice, else ``default``."""
    if isinstance(token, str) and token in EXPIRATION_DELTAS:
        return token
    return default


def resolve_expiration(token: str, now: datetime) -> datetime | None:
    """Map a normalized expiration token to an absolute timestamp.

    Returns None for pastes that never expire.
    """
    delta = EXPIRATION_DELTAS[token]
    return None if delta is None else now + delta
