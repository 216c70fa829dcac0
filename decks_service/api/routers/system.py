"""
Service-level health.
"""

from fastapi import APIRouter, Response, status

from decks_service.api.dependencies import ContainerDep, SeederDep
from decks_service.api.schemas import ServiceHealthResponse

router = APIRouter(tags=["system"])


@router.get("/health", response_model=ServiceHealthResponse)
async def service_health(
    container: ContainerDep, seeder: SeederDep, response: Response
) -> dict:
    """Readiness of this service, including the outcome of startup seeding.

    An unreachable database, or a seeding run that failed or gave up waiting
    for its dependencies, makes the service report ``degraded`` with HTTP 503.
    """
    database_ok = await container.database.health_check()
    healthy = database_ok and seeder.healthy
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "healthy" if healthy else "degraded",
        "database": "ok" if database_ok else "unavailable",
        "service": container.settings.app_name,
        "version": container.settings.app_version,
        "seeding": seeder.status(),
    }
