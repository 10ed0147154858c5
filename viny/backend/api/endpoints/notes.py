"""
Notes API Endpoints.

REST API endpoints for note management. Every route acts on the caller's
own notes; a note owned by someone else is reported as not found.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Response

from viny.backend.core.dependencies import CurrentUser, DbSession, RequestId
from viny.backend.core.pagination import (
    PaginationParams,
    create_paginated_response,
    get_pagination_params,
)
from viny.backend.core.utils import split_csv
from viny.backend.models.note import NoteStatus
from viny.backend.repositories.note import NoteFilters
from viny.backend.schemas.base import ApiResponse, ResponseMetadata
from viny.backend.schemas.note import (
    EmptyTrashResponse,
    NoteCreate,
    NoteResponse,
    NoteUpdate,
)
from viny.backend.services.note import NoteService

router = APIRouter()


@router.get(
    "",
    summary="List notes (paginated)",
    description="Filter, search and page through notes. Pinned notes come first, "
    "then the most recently updated.",
)
async def list_notes(
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
    pagination: PaginationParams = Depends(get_pagination_params),
    notebook: str | None = Query(default=None, description="Notebook name"),
    status: NoteStatus | None = Query(default=None),
    is_pinned: bool | None = Query(default=None, alias="isPinned"),
    is_trashed: bool | None = Query(default=None, alias="isTrashed"),
    search: str | None = Query(
        default=None,
        max_length=200,
        description="Case-insensitive substring of title or content",
    ),
    tags: str | None = Query(
        default=None,
        description="Comma-separated tag names; matches notes with any of them",
    ),
) -> dict[str, Any]:
    """List notes with full pagination support."""
    filters = NoteFilters(
        notebook=notebook,
        status=status.value if status else None,
        is_pinned=is_pinned,
        is_trashed=is_trashed,
        search=search or None,
        tags=split_csv(tags),
    )
    notes, total = await NoteService(db, user.id).list_notes(
        filters,
        limit=pagination.limit,
        offset=pagination.offset,
    )

    return create_paginated_response(
        items=notes,
        item_schema=NoteResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
)
async def create_note(
    data: NoteCreate,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    note = await NoteService(db, user.id).create_note(data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        message="Note created",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/trash",
    response_model=ApiResponse[EmptyTrashResponse],
    summary="Empty the trash",
    description="Permanently delete every trashed note.",
)
async def empty_trash(
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[EmptyTrashResponse]:
    deleted = await NoteService(db, user.id).empty_trash()
    return ApiResponse(
        data=EmptyTrashResponse(deleted=deleted),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
async def get_note(
    note_id: int,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get a single note by ID."""
    note = await NoteService(db, user.id).get_note(note_id)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Partial update: only the fields present in the body change. "
    "Sending tags replaces the whole tag set.",
)
async def update_note(
    note_id: int,
    data: NoteUpdate,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db, user.id).update_note(note_id, data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        message="Note updated",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/{note_id}/trash",
    response_model=ApiResponse[NoteResponse],
    summary="Move a note to the trash",
)
async def trash_note(
    note_id: int,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db, user.id).trash_note(note_id)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/{note_id}/restore",
    response_model=ApiResponse[NoteResponse],
    summary="Restore a note from the trash",
)
async def restore_note(
    note_id: int,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db, user.id).restore_note(note_id)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{note_id}",
    status_code=204,
    summary="Delete a note permanently",
)
async def delete_note(
    note_id: int,
    db: DbSession,
    user: CurrentUser,
) -> Response:
    await NoteService(db, user.id).delete_note(note_id)
    return Response(status_code=204)
