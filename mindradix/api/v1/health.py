from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from mindradix.api.deps import get_health_service
from mindradix.core.logging import get_logger
from mindradix.services.health_service import HealthService

router = APIRouter()
logger = get_logger(__name__)


@router.get("/")
async def health_check(
    health_service: HealthService = Depends(get_health_service)
) -> Dict[str, Any]:
    """
    健康检查

    返回应用的基本健康状态
    """
    try:
        return await health_service.check_health()
    except Exception as e:
        logger.error("Health check failed", error=str(e))
        raise HTTPException(status_code=503, detail="Service unavailable")


@router.get("/ready")
async def readiness_check(
    health_service: HealthService = Depends(get_health_service)
) -> Dict[str, Any]:
    """
    就绪检查

    TF-IDF 依赖的停用词表不可用时返回503
    """
    readiness_status = await health_service.check_readiness()
    if not readiness_status.get("ready", False):
        raise HTTPException(
            status_code=503,
            detail=f"Service not ready: {readiness_status.get('reason', 'Unknown')}"
        )
    return readiness_status


@router.get("/live")
async def liveness_check() -> Dict[str, str]:
    """存活探针"""
    return {"status": "alive"}
