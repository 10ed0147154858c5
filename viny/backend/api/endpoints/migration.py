"""
Migration API Endpoints.

Import legacy client data, export everything, and inspect or reset the
caller's data.
"""

from fastapi import APIRouter

from viny.backend.core.dependencies import CurrentUser, DbSession, RequestId
from viny.backend.schemas.base import ApiResponse, ResponseMetadata
from viny.backend.schemas.migration import (
    ExportPayload,
    ImportRequest,
    ImportResult,
    MigrationStats,
    ResetResult,
)
from viny.backend.services.migration import MigrationService

router = APIRouter()


@router.post(
    "/import",
    response_model=ApiResponse[ImportResult],
    summary="Import legacy data",
    description="Invalid records are reported by index and skipped.",
)
async def import_data(
    payload: ImportRequest,
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[ImportResult]:
    result = await MigrationService(db, user.id).import_data(payload)
    return ApiResponse(
        data=result,
        message="Import completed",
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/export",
    response_model=ApiResponse[ExportPayload],
    summary="Export all data",
)
async def export_data(
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[ExportPayload]:
    payload = await MigrationService(db, user.id).export_data()
    return ApiResponse(
        data=payload,
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/stats",
    response_model=ApiResponse[MigrationStats],
    summary="Data statistics",
)
async def stats(
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[MigrationStats]:
    result = await MigrationService(db, user.id).stats()
    return ApiResponse(
        data=result,
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/reset",
    response_model=ApiResponse[ResetResult],
    summary="Delete all data",
    description="Refused in production.",
)
async def reset(
    db: DbSession,
    user: CurrentUser,
    request_id: RequestId,
) -> ApiResponse[ResetResult]:
    result = await MigrationService(db, user.id).reset()
    return ApiResponse(
        data=result,
        message="All data deleted",
        metadata=ResponseMetadata(request_id=request_id),
    )
