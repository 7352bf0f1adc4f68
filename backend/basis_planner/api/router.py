"""Main API router combining all sub-routers."""

from fastapi import APIRouter, Depends

from basis_planner.api.activity_types import router as activity_types_router
from basis_planner.api.auth import router as auth_router
from basis_planner.api.data import router as data_router
from basis_planner.api.health import router as health_router
from basis_planner.api.landscapes import router as landscapes_router
from basis_planner.api.settings import router as settings_router
from basis_planner.api.users import router as users_router
from basis_planner.core.rate_limit import api_rate_limit

api_router = APIRouter(dependencies=[Depends(api_rate_limit)])
api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(settings_router)
api_router.include_router(activity_types_router)
api_router.include_router(landscapes_router)
api_router.include_router(users_router)
api_router.include_router(data_router)
