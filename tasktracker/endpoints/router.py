from fastapi import APIRouter
from tasktracker.endpoints.v1 import (
    tasks_api,
    activity_api,
    projects_api,
    teams_api,
    reports_api
)

api_router = APIRouter()

api_router.include_router(tasks_api.router)
api_router.include_router(activity_api.router)
api_router.include_router(projects_api.router)
api_router.include_router(teams_api.router)
api_router.include_router(reports_api.router)
