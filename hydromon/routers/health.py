from fastapi import APIRouter, Depends

from hydromon.providers.firebase_provider import FirebaseProvider
from hydromon.routers.monitoring import get_firebase_provider

router = APIRouter(tags=["health"])

@router.get("/healthz")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "hydromon-api"}

@router.get("/api/v1/health")
async def api_health_check():
    """API health check endpoint"""
    return {"status": "ok", "api_version": "v1"}

@router.get("/api/v1/test-firebase")
async def test_firebase_connection(provider: FirebaseProvider = Depends(get_firebase_provider)):
    """Firebase configuration and connectivity report"""
    return await provider.diagnostics()
