# src/scanner/api/v1/router.py
from fastapi import APIRouter

from scanner.api.v1 import session

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(session.router)
