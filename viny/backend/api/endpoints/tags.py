"""
Tags API Endpoints.
"""

from fastapi import APIRouter, Response

from viny.backend.core.dependencies import CurrentUser, DbSession, RequestId
from viny.backend.schemas.base import ApiResponse, ResponseMetadata
from viny.backend.schemas.tag import TagCreate, TagResponse, TagUpdate
from viny.backend.services.tag import TagService

router = APIRouter()


def _with_count(tag, note_count: int) -> TagResponse:
    return TagResponse.model_validate(tag).model_copy(update={"note_count": note_count})


@router.get(
    "",
    response_model=ApiResponse[list[TagResponse]],
    summary="List tags",
)
async def list_tags(
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[list[TagResponse]]:
    rows = await TagService(db, user.id).list_tags()
    return ApiResponse(
        data=[_with_count(tag, count) for tag, count in rows],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{tag_id}",
    response_model=ApiResponse[TagResponse],
    summary="Get a tag",
)
async def get_tag(
    tag_id: int,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[TagResponse]:
    tag, count = await TagService(db, user.id).get_tag(tag_id)
    return ApiResponse(
        data=_with_count(tag, count),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[TagResponse],
    status_code=201,
    summary="Create a tag",
)
async def create_tag(
    data: TagCreate,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[TagResponse]:
    tag = await TagService(db, user.id).create_tag(data)
    return ApiResponse(
        data=_with_count(tag, 0),
        message="Tag created",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{tag_id}",
    response_model=ApiResponse[TagResponse],
    summary="Update a tag",
)
async def update_tag(
    tag_id: int,
    data: TagUpdate,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[TagResponse]:
    tag, count = await TagService(db, user.id).update_tag(tag_id, data)
    return ApiResponse(
        data=_with_count(tag, count),
        message="Tag updated",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{tag_id}",
    status_code=204,
    summary="Delete a tag",
    description="Removes the tag from every note, then deletes it.",
)
async def delete_tag(
    tag_id: int,
    db: DbSession,
    user: CurrentUser,
) -> Response:
    await TagService(db, user.id).delete_tag(tag_id)
    return Response(status_code=204)
