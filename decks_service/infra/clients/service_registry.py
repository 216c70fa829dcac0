"""
Discovery of the other services in the mesh.
"""

import asyncio
import time
from typing import Dict, Iterable, Optional

import httpx

from decks_service.application.ports import ServiceRegistryPort
from decks_service.domain.exceptions import DependencyUnavailableError
from decks_service.infra.config.logging_config import get_logger


class ServiceRegistry(ServiceRegistryPort):
    """Known peer services and their health endpoints.

    A service counts as available once ``GET <base_url><health_path>`` answers
    with HTTP 200.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        services: Dict[str, str],
        health_path: str = "/health",
        poll_interval: float = 1.0,
    ):
        self.http_client = http_client
        self.services = dict(services)
        self.health_path = health_path
        self.poll_interval = poll_interval
        self._log = get_logger("infra.registry")

    def url_for(self, name: str) -> str:
        try:
            return self.services[name].rstrip("/")
        except KeyError:
            raise ValueError(f"Unknown service '{name}'")

    async def is_available(self, name: str) -> bool:
        url = f"{self.url_for(name)}{self.health_path}"
        try:
            response = await self.http_client.get(url)
        except httpx.HTTPError as e:
            self._log.debug("registry.probe.failed", service=name, error=str(e))
            return False
        return response.status_code == httpx.codes.OK

    async def wait_for_services(
        self, names: Iterable[str], timeout: Optional[float] = None
    ) -> None:
        """Block until every named service is available.

        Raises:
            DependencyUnavailableError: if ``timeout`` seconds pass first.
        """
        pending = list(names)
        for name in pending:
            self.url_for(name)

        deadline = None if timeout is None else time.monotonic() + timeout
        self._log.info("registry.wait.start", services=pending, timeout=timeout)
        while True:
            checks = await asyncio.gather(*(self.is_available(n) for n in pending))
            pending = [name for name, ok in zip(pending, checks) if not ok]
            if not pending:
                self._log.info("registry.wait.done")
                return
            if deadline is not None and time.monotonic() >= deadline:
                self._log.warning("registry.wait.timeout", services=pending)
                raise DependencyUnavailableError(pending, timeout)
            await asyncio.sleep(self.poll_interval)
