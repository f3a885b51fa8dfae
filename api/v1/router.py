# api/v1/router.py
from fastapi import APIRouter

from . import nutrition_logs, profiles

api_router = APIRouter()

# both live *under* the user resource:
#   /users/{user_id}/profile
#   /users/{user_id}/nutrition-logs
api_router.include_router(profiles.router, prefix="/users", tags=["Profiles"])
api_router.include_router(nutrition_logs.router, prefix="/users", tags=["Nutrition logs"])
