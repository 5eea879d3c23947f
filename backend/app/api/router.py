"""Master API router: mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from app.api import devices, health, hit_test, migrate, render, templates

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(devices.router)
api_router.include_router(hit_test.router)
api_router.include_router(migrate.router)
api_router.include_router(templates.router)
api_router.include_router(render.router)
