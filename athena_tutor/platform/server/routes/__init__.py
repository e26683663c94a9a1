from fastapi import APIRouter

from athena_tutor.platform.server.routes.base import base_router

root = APIRouter()
root.include_router(base_router)
