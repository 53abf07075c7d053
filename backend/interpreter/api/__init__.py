from fastapi import APIRouter

from interpreter.services.session.orchestrator import (
    get_active_connection_count,
    get_active_session_count,
)
from interpreter.services.translation import Language, get_translator

router = APIRouter()


@router.get("/languages")
async def list_languages():
    """Languages a client can select as translation target."""
    return [
        {"code": language.code, "name": language.display_name, "locale": language.locale}
        for language in Language
    ]


@router.get("/stats")
async def stats():
    return {
        "translation_backend": type(get_translator()).__name__ if get_translator() else None,
        "active_connections": get_active_connection_count(),
        "active_sessions": get_active_session_count(),
    }
