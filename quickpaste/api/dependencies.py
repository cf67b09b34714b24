"""FastAPI dependencies resolving objects built by the app factory."""

from __future__ import annotations

from fastapi import Request

from quickpaste.adapters.store.base import AbstractPasteStore
from quickpaste.services.paste_service import PasteService


def get_paste_service(request: Request) -> PasteService:
    return request.app.state.paste_service


def get_paste_store(request: Request) -> AbstractPasteStore:
    return request.app.state.paste_store
