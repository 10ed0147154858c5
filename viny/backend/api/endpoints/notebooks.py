"""
Notebooks API Endpoints.
"""

from fastapi import APIRouter

from viny.backend.core.dependencies import CurrentUser, DbSession, RequestId
from viny.backend.schemas.base import ApiResponse, ResponseMetadata
from viny.backend.schemas.notebook import (
    NotebookCreate,
    NotebookDeleteResponse,
    NotebookResponse,
    NotebookUpdate,
)
from viny.backend.services.notebook import NotebookService

router = APIRouter()


def _with_count(notebook, note_count: int) -> NotebookResponse:
    return NotebookResponse.model_validate(notebook).model_copy(
        update={"note_count": note_count}
    )


@router.get(
    "",
    response_model=ApiResponse[list[NotebookResponse]],
    summary="List notebooks",
    description="All notebooks alphabetically, each with its count of active notes.",
)
async def list_notebooks(
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[list[NotebookResponse]]:
    rows = await NotebookService(db, user.id).list_notebooks()
    return ApiResponse(
        data=[_with_count(notebook, count) for notebook, count in rows],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{notebook_id}",
    response_model=ApiResponse[NotebookResponse],
    summary="Get a notebook",
)
async def get_notebook(
    notebook_id: int,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[NotebookResponse]:
    notebook, count = await NotebookService(db, user.id).get_notebook(notebook_id)
    return ApiResponse(
        data=_with_count(notebook, count),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[NotebookResponse],
    status_code=201,
    summary="Create a notebook",
)
async def create_notebook(
    data: NotebookCreate,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[NotebookResponse]:
    notebook = await NotebookService(db, user.id).create_notebook(data)
    return ApiResponse(
        data=_with_count(notebook, 0),
        message="Notebook created",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{notebook_id}",
    response_model=ApiResponse[NotebookResponse],
    summary="Update a notebook",
    description="Renaming moves every note filed under the old name.",
)
async def update_notebook(
    notebook_id: int,
    data: NotebookUpdate,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[NotebookResponse]:
    notebook, count = await NotebookService(db, user.id).update_notebook(notebook_id, data)
    return ApiResponse(
        data=_with_count(notebook, count),
        message="Notebook updated",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{notebook_id}",
    response_model=ApiResponse[NotebookDeleteResponse],
    summary="Delete a notebook",
    description="Notes filed under the notebook are moved to Personal.",
)
async def delete_notebook(
    notebook_id: int,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[NotebookDeleteResponse]:
    reassigned = await NotebookService(db, user.id).delete_notebook(notebook_id)
    return ApiResponse(
        data=NotebookDeleteResponse(reassigned_notes=reassigned),
        message="Notebook deleted",
        metadata=ResponseMetadata(request_id=request_id),
    )
