"""
API v1 Router - Main Entry Point
Aggregates the v1 endpoints of the booking core
"""
from fastapi import APIRouter

from rusunawa.api.v1 import reservations, verification

router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
        502: {"description": "Backend Unavailable"},
    }
)

router.include_router(verification.router, tags=["Verification"])
router.include_router(reservations.router, tags=["Reservations"])
