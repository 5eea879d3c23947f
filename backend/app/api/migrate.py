"""POST /api/migrate/*: legacy configuration conversion."""

from __future__ import annotations

from fastapi import APIRouter

from app.migration.legacy import decode, decode_global_settings, encode
from app.models.requests import MigrateDecodeRequest, MigrateEncodeRequest
from app.models.responses import MigrateDecodeResponse, MigrateEncodeResponse

router = APIRouter(prefix="/migrate")


@router.post("/decode", response_model=MigrateDecodeResponse)
async def migrate_decode(req: MigrateDecodeRequest) -> MigrateDecodeResponse:
    return MigrateDecodeResponse(
        state=decode(req.legacy),
        settings=decode_global_settings(req.legacy),
    )


@router.post("/encode", response_model=MigrateEncodeResponse)
async def migrate_encode(req: MigrateEncodeRequest) -> MigrateEncodeResponse:
    return MigrateEncodeResponse(legacy=encode(req.state, req.settings))
