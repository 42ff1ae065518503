from fastapi import APIRouter, Depends
from cashbook.services.health_service import HealthService
from cashbook.core.dependencies import get_health_service

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health_check(
    health_service: HealthService = Depends(get_health_service)
):
    """Service status with ledger settings and stored entry counts"""
    return health_service.health_check()


@router.get("/database")
def database_info(
    health_service: HealthService = Depends(get_health_service)
):
    """Masked connection details and the size of the entry table"""
    return health_service.get_database_info()
