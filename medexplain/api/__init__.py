"""API routers for the MedExplain service."""

from medexplain.api.admin import router as admin_router
from medexplain.api.evidence import router as evidence_router
from medexplain.api.me import router as me_router
from medexplain.api.query import router as query_router
from medexplain.api.saved_answers import router as saved_answers_router

__all__ = [
    "admin_router",
    "evidence_router",
    "me_router",
    "query_router",
    "saved_answers_router",
]
