from __future__ import annotations

from quickpaste.api.routes.health import router as health_router
from quickpaste.api.routes.paste import router as paste_router

__all__ = ["health_router", "paste_router"]
