"""
API Router.

Aggregates all endpoint routers under the /api prefix.
"""

from fastapi import APIRouter

from viny.backend.api.endpoints import auth, migration, notebooks, notes, tags

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(notes.router, prefix="/notes", tags=["notes"])
router.include_router(notebooks.router, prefix="/notebooks", tags=["notebooks"])
router.include_router(tags.router, prefix="/tags", tags=["tags"])

migration_router = APIRouter()
migration_router.include_router(migration.router, prefix="/migration", tags=["migration"])
