"""API v1 router - includes all v1 endpoints."""

from fastapi import APIRouter

from academy.api.v1.endpoints import grading, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="", tags=["Health"])
api_router.include_router(grading.router, prefix="/grading", tags=["Grading"])
