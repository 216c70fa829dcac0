from fastapi import APIRouter, Response
from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST

# Metrics definitions
EVENTS_PUBLISHED = Counter(
    "decks_events_published_total", "Events published to the mesh", ["event", "mode"]
)
SEEDING_RUNS = Counter(
    "decks_seeding_runs_total", "Startup seeding outcomes", ["outcome"]
)
CACHE_CLEANS = Counter(
    "decks_cache_cleans_total", "Response cache purges", ["trigger"]
)
CACHE_LOOKUPS = Counter(
    "decks_cache_lookups_total", "Response cache lookups", ["result"]
)


metrics_router = APIRouter()


@metrics_router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
