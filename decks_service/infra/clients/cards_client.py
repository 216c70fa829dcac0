"""
HTTP client for the cards service actions.
"""

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from decks_service.application.ports import CardsServicePort
from decks_service.domain.exceptions import ServiceCallError
from decks_service.infra.config.logging_config import get_logger


class CardsClient(CardsServicePort):
    """``cards.find`` and ``cards.get`` over the cards service REST surface."""

    def __init__(self, http_client: httpx.AsyncClient, base_path: str = "/api/v1/cards"):
        self.http_client = http_client
        self.base_path = base_path.rstrip("/")
        self._log = get_logger("infra.cards_client")

    async def find(self, query: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        response = await self._request("cards.find", self.base_path, params=query or None)
        cards = response.json()
        if not isinstance(cards, list):
            raise ServiceCallError("cards.find", "expected a list of cards")
        self._log.info("cards.find", count=len(cards))
        return cards

    async def get(self, card_id: str) -> Optional[Dict[str, Any]]:
        response = await self._request(
            "cards.get", f"{self.base_path}/{card_id}", allow_not_found=True
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        return response.json()

    async def get_many(self, card_ids: List[str]) -> List[Dict[str, Any]]:
        if not card_ids:
            return []
        unique_ids = list(dict.fromkeys(card_ids))
        results = await asyncio.gather(*(self.get(card_id) for card_id in unique_ids))
        resolved = {
            card_id: card for card_id, card in zip(unique_ids, results) if card
        }
        missing = len(unique_ids) - len(resolved)
        if missing:
            self._log.info("cards.get.unresolved", missing=missing)
        return [resolved[card_id] for card_id in card_ids if card_id in resolved]

    async def _request(
        self,
        action: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> httpx.Response:
        try:
            response = await self.http_client.get(path, params=params)
        except httpx.HTTPError as e:
            self._log.error("cards.call.failed", action=action, error=str(e))
            raise ServiceCallError(action, str(e)) from e

        if allow_not_found and response.status_code == httpx.codes.NOT_FOUND:
            return response
        if response.is_error:
            self._log.error(
                "cards.call.failed", action=action, status_code=response.status_code
            )
            raise ServiceCallError(action, f"HTTP {response.status_code}")
        return response
