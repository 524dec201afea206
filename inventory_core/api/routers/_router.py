"""
Inventory router module holding the shared router of all API versions
"""

from fastapi import APIRouter


router = APIRouter()
