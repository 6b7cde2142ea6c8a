from fastapi import APIRouter

from clubhouse.presentation.routers.auth import router as auth_router
from clubhouse.presentation.routers.users import router as users_router
from clubhouse.presentation.routes.health import router as health_router

api = APIRouter()

# Add all routers here
routers = (health_router, auth_router, users_router)
for router in routers:
    api.include_router(router)
