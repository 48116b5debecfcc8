"""
API routes for the pro forma engine.
"""

from fastapi import APIRouter

from proforma.api import calculations

router = APIRouter()

router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
