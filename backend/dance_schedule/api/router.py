"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from dance_schedule.api.routes import events, locations, schedule

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(locations.router)
api_router.include_router(events.router)
api_router.include_router(schedule.router)
