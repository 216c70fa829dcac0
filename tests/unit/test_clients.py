"""Unit tests for the cards client and the service registry."""

import httpx
import pytest

from decks_service.domain.exceptions import DependencyUnavailableError, ServiceCallError
from decks_service.infra.clients.cards_client import CardsClient
from decks_service.infra.clients.service_registry import ServiceRegistry

CARDS = {
    "a": {"_id": "a", "cardType": "black"},
    "b": {"_id": "b", "cardType": "white"},
}


def cards_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path == "/api/v1/cards":
        cards = list(CARDS.values())
        card_type = request.url.params.get("cardType")
        if card_type:
            cards = [c for c in cards if c["cardType"] == card_type]
        return httpx.Response(200, json=cards)
    if path.startswith("/api/v1/cards/"):
        card = CARDS.get(path.rsplit("/", 1)[-1])
        if card is None:
            return httpx.Response(404, json={"error": "CARD_NOT_FOUND"})
        return httpx.Response(200, json=card)
    return httpx.Response(500)


def make_client(handler) -> CardsClient:
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://cards"
    )
    return CardsClient(http_client)


class TestCardsClient:
    @pytest.mark.asyncio
    async def test_find_all(self):
        client = make_client(cards_handler)

        cards = await client.find({})

        assert [c["_id"] for c in cards] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_find_passes_query_as_params(self):
        client = make_client(cards_handler)

        cards = await client.find({"cardType": "black"})

        assert cards == [CARDS["a"]]

    @pytest.mark.asyncio
    async def test_get_not_found_returns_none(self):
        client = make_client(cards_handler)

        assert await client.get("zzz") is None
        assert await client.get("b") == CARDS["b"]

    @pytest.mark.asyncio
    async def test_get_many_keeps_order_and_drops_missing(self):
        client = make_client(cards_handler)

        cards = await client.get_many(["b", "zzz", "a", "b"])

        assert [c["_id"] for c in cards] == ["b", "a", "b"]

    @pytest.mark.asyncio
    async def test_server_error_raises_service_call_error(self):
        client = make_client(lambda request: httpx.Response(503))

        with pytest.raises(ServiceCallError, match="cards.find"):
            await client.find()

    @pytest.mark.asyncio
    async def test_transport_error_raises_service_call_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(refuse)

        with pytest.raises(ServiceCallError, match="cards.get"):
            await client.get("a")

    @pytest.mark.asyncio
    async def test_non_list_find_response_is_rejected(self):
        client = make_client(lambda request: httpx.Response(200, json={"rows": []}))

        with pytest.raises(ServiceCallError):
            await client.find()


class TestServiceRegistry:
    @pytest.mark.asyncio
    async def test_waits_until_service_healthy(self):
        attempts = []

        def handler(request):
            attempts.append(str(request.url))
            return httpx.Response(200 if len(attempts) >= 3 else 503)

        registry = ServiceRegistry(
            httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            {"cards": "http://cards:8001/"},
            poll_interval=0,
        )

        await registry.wait_for_services(["cards"], timeout=5)

        assert attempts == ["http://cards:8001/health"] * 3

    @pytest.mark.asyncio
    async def test_times_out(self):
        registry = ServiceRegistry(
            httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(503))),
            {"cards": "http://cards"},
            poll_interval=0.01,
        )

        with pytest.raises(DependencyUnavailableError) as exc:
            await registry.wait_for_services(["cards"], timeout=0.05)

        assert exc.value.services == ["cards"]
        assert exc.value.code == "DEPENDENCY_UNAVAILABLE"

    @pytest.mark.asyncio
    async def test_unreachable_counts_as_unavailable(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        registry = ServiceRegistry(
            httpx.AsyncClient(transport=httpx.MockTransport(refuse)),
            {"cards": "http://cards"},
        )

        assert await registry.is_available("cards") is False

    @pytest.mark.asyncio
    async def test_unknown_service_is_a_configuration_error(self):
        registry = ServiceRegistry(httpx.AsyncClient(), {})

        with pytest.raises(ValueError, match="Unknown service"):
            await registry.wait_for_services(["cards"], timeout=1)
