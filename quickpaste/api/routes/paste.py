from __future__ import annotations

import html

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse, PlainTextResponse

from quickpaste.adapters.rate_limit.base import RateLimitResult
from quickpaste.api.dependencies import get_paste_service
from quickpaste.core.errors import PasteNotFoundError
from quickpaste.core.rate_limit import enforce_rate_limit
from quickpaste.core.request_validation import read_json_body
from quickpaste.schemas.paste import CreatePasteResponse, Paste
from quickpaste.services.paste_service import PasteService

router = APIRouter(tags=["Pastes"])

_NOT_FOUND_HTML = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Paste Not Found</title>
</head>
<body>
    <h1>Paste Not Found</h1>
    <p>This paste may have expired or doesn't exist.</p>
    <p><a href="/">Create a new paste</a></p>
</body>
</html>"""


def _render_paste_page(paste: Paste) -> str:
    expires = paste.expires_at.isoformat() if paste.expires_at else "never"
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Paste {paste.id}</title>
</head>
<body>
    <header>
        <span class="paste-id">{paste.id}</span>
        <span class="language">{html.escape(paste.language)}</span>
        <span class="expires">Expires: {expires}</span>
        <a href="/p/{paste.id}/raw">Raw</a>
    </header>
    <pre><code class="language-{html.escape(paste.language)}">{html.escape(paste.content)}</code></pre>
</body>
</html>"""


@router.post("/paste", response_model=CreatePasteResponse)
async def create_paste(
    request: Request,
    response: Response,
    rate: RateLimitResult | None = Depends(enforce_rate_limit),
    service: PasteService = Depends(get_paste_service),
) -> CreatePasteResponse:
    """Create a paste.

    Accepts ``{"content": str, "language"?: str, "expiration"?: str}`` and
    returns the new paste identifier. The rate limit is applied before the
    body is read.

    Returns:
        CreatePasteResponse: Identifier of the stored paste.

    Raises:
        RateLimitedError: 429 when the client exhausted its budget.
        UnsupportedMediaTypeError: 415 for non-JSON bodies.
        ValidationAppError: 400 for invalid JSON or missing/empty content.
        ContentTooLargeError: 413 when content exceeds the ceiling.
    """
    payload = await read_json_body(request)
    paste = await service.create_paste(
        payload.get("content"),
        payload.get("language"),
        payload.get("expiration"),
    )

    if rate is not None:
        response.headers["X-RateLimit-Limit"] = str(rate.limit)
        response.headers["X-RateLimit-Remaining"] = str(rate.remaining)

    return CreatePasteResponse(id=paste.id)


@router.get("/api/paste/{paste_id}", response_model=Paste)
async def fetch_paste(
    paste_id: str,
    service: PasteService = Depends(get_paste_service),
) -> Paste:
    """Fetch a paste as JSON."""
    paste = await service.get_paste(paste_id)
    if paste is None:
        raise PasteNotFoundError(
            code="paste_not_found",
            message="Paste not found or has expired",
        )
    return paste


@router.get("/p/{paste_id}", response_class=HTMLResponse)
async def view_paste(
    paste_id: str,
    service: PasteService = Depends(get_paste_service),
) -> HTMLResponse:
    """Render a paste as a minimal HTML page."""
    paste = await service.get_paste(paste_id)
    if paste is None:
        return HTMLResponse(_NOT_FOUND_HTML, status_code=404)
    return HTMLResponse(_render_paste_page(paste))


@router.get("/p/{paste_id}/raw", response_class=PlainTextResponse)
async def raw_paste(
    paste_id: str,
    service: PasteService = Depends(get_paste_service),
) -> PlainTextResponse:
    """Return the paste content as plain text."""
    paste = await service.get_paste(paste_id)
    if paste is None:
        return PlainTextResponse("Paste not found", status_code=404)
    return PlainTextResponse(paste.content)
