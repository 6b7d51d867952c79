"""
API v1 router combining all v1 endpoints.
"""
from fastapi import APIRouter
from placement_service.api.v1 import health, placement, questions, users

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(placement.router, prefix="/placement", tags=["placement"])
api_router.include_router(questions.router, prefix="/questions", tags=["questions"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
