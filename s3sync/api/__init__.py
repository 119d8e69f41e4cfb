"""
API Router module that combines all API endpoints
"""
from fastapi import APIRouter

from s3sync.api.diagnostic import router as diagnostic_router
from s3sync.api.files import router as files_router
from s3sync.api.sync import router as sync_router

router = APIRouter()

router.include_router(diagnostic_router)
router.include_router(sync_router)
router.include_router(files_router)
