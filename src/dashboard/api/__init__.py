"""
Router aggregating all page endpoints.
"""

from fastapi import APIRouter

from api.countries import router as countries_router

router = APIRouter()

router.include_router(countries_router, prefix="/countries", tags=["Countries"])
