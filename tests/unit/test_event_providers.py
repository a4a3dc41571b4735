"""Unit tests for the event-provider adapters.

All HTTP calls are mocked; each test hands the adapter a real
``httpx.Response`` so status handling and JSON decoding run for real.
"""

from __future__ import annotations

import asyncio
import datetime as dt
from unittest.mock import AsyncMock

import httpx
import pytest

from src.models.event import EventCategory
from src.providers.event import (
    BandsintownProvider,
    DiceProvider,
    EventbriteProvider,
    NTSProvider,
    ResidentAdvisorProvider,
    TicketmasterProvider,
)
from src.providers.event.base import dig, iso_date_part
from src.providers.event.resident_advisor_provider import RA_AREA_IDS, area_key
from tests.conftest import json_response, make_settings

START, END = "2025-06-01", "2025-06-07"


def _client(get=None, post=None) -> AsyncMock:
    client = AsyncMock(spec=httpx.AsyncClient)
    if get is not None:
        client.get = AsyncMock(return_value=get) if isinstance(get, httpx.Response) else get
    if post is not None:
        client.post = AsyncMock(return_value=post) if isinstance(post, httpx.Response) else post
    return client


# ======================================================================
# Helpers
# ======================================================================


class TestHelpers:
    def test_iso_date_part_strips_time(self) -> None:
        assert iso_date_part("2025-06-01T20:00:00") == "2025-06-01"

    def test_iso_date_part_rejects_garbage(self) -> None:
        assert iso_date_part("next friday") is None
        assert iso_date_part(None) is None
        assert iso_date_part("") is None

    def test_dig_walks_nested_dicts(self) -> None:
        assert dig({"a": {"b": {"c": 1}}}, "a", "b", "c") == 1

    def test_dig_returns_none_on_missing_level(self) -> None:
        assert dig({"a": [1]}, "a", "b") is None
        assert dig(None, "a") is None


# ======================================================================
# Ticketmaster
# ======================================================================


def _tm_payload() -> dict:
    return {
        "_embedded": {
            "events": [
                {
                    "name": "Radiohead Live",
                    "url": "https://tm.example/e/1",
                    "dates": {"start": {"localDate": "2025-06-02"}},
                    "_embedded": {
                        "venues": [{"name": "Columbiahalle", "city": {"name": "Berlin"}}],
                        "attractions": [{"name": "Radiohead"}, {"name": "Caribou"}],
                    },
                },
                {
                    "name": "No Lineup Night",
                    "dates": {"start": {"localDate": "2025-06-03"}},
                },
                # No date: skipped.
                {"name": "Undated"},
            ]
        }
    }


class TestTicketmasterProvider:
    @pytest.mark.asyncio
    async def test_missing_key_fails_without_network_call(self) -> None:
        client = _client()
        provider = TicketmasterProvider(client, make_settings())

        result = await provider.fetch("Berlin", START, END)

        assert result.result.success is False
        assert result.result.error == "Ticketmaster API key not configured"
        assert result.events == []
        client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_maps_events_and_skips_bad_records(self) -> None:
        client = _client(get=json_response(_tm_payload()))
        provider = TicketmasterProvider(client, make_settings(ticketmaster_api_key="tm-key"))

        result = await provider.fetch("Berlin", START, END)

        assert result.result.success is True
        assert result.result.count == 2
        first, second = result.events
        assert first.name == "Radiohead Live"
        assert first.date == dt.date(2025, 6, 2)
        assert first.venue == "Columbiahalle"
        assert first.artists == ["Radiohead", "Caribou"]
        assert first.source == "Ticketmaster"
        assert first.category == EventCategory.DEFAULT
        assert second.venue == "TBD"
        assert second.city == "Berlin"
        assert second.artists == ["No Lineup Night"]

    @pytest.mark.asyncio
    async def test_request_parameters(self) -> None:
        client = _client(get=json_response({}))
        provider = TicketmasterProvider(client, make_settings(ticketmaster_api_key="tm-key"))

        await provider.fetch("Berlin", START, END)

        _, kwargs = client.get.call_args
        assert kwargs["params"]["apikey"] == "tm-key"
        assert kwargs["params"]["city"] == "Berlin"
        assert kwargs["params"]["startDateTime"] == "2025-06-01T00:00:00Z"
        assert kwargs["params"]["endDateTime"] == "2025-06-07T23:59:59Z"
        assert kwargs["params"]["classificationName"] == "music"

    @pytest.mark.asyncio
    async def test_no_embedded_block_is_an_empty_success(self) -> None:
        client = _client(get=json_response({"page": {"totalElements": 0}}))
        provider = TicketmasterProvider(client, make_settings(ticketmaster_api_key="k"))

        result = await provider.fetch("Berlin", START, END)

        assert result.result.success is True
        assert result.result.count == 0
        assert result.result.error == "No events found"

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        client = _client(get=json_response({"fault": "bad key"}, status_code=401))
        provider = TicketmasterProvider(client, make_settings(ticketmaster_api_key="k"))

        result = await provider.fetch("Berlin", START, END)

        assert result.result.success is False
        assert result.result.error == "HTTP 401"

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        response = httpx.Response(
            200, content=b"<html>oops</html>", request=httpx.Request("GET", "https://x")
        )
        client = _client(get=response)
        provider = TicketmasterProvider(client, make_settings(ticketmaster_api_key="k"))

        result = await provider.fetch("Berlin", START, END)

        assert result.result.success is False
        assert result.result.error == "invalid JSON payload"

    @pytest.mark.asyncio
    async def test_transport_timeout(self) -> None:
        client = _client(get=AsyncMock(side_effect=httpx.ReadTimeout("slow")))
        provider = TicketmasterProvider(client, make_settings(ticketmaster_api_key="k"))

        result = await provider.fetch("Berlin", START, END)

        assert result.result.success is False
        assert result.result.error == "timed out after 10s"

    @pytest.mark.asyncio
    async def test_hung_request_is_cut_off_by_provider_timeout(self) -> None:
        async def _hang(*args, **kwargs):
            await asyncio.sleep(10)

        client = _client(get=AsyncMock(side_effect=_hang))
        provider = TicketmasterProvider(
            client, make_settings(ticketmaster_api_key="k", ticketmaster_timeout=0.05)
        )

        result = await provider.fetch("Berlin", START, END)

        assert result.result.success is False
        assert result.result.error == "timed out after 0.05s"

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        client = _client(get=AsyncMock(side_effect=httpx.ConnectError("refused")))
        provider = TicketmasterProvider(client, make_settings(ticketmaster_api_key="k"))

        result = await provider.fetch("Berlin", START, END)

        assert result.result.success is False
        assert result.result.error == "refused"

    @pytest.mark.asyncio
    async def test_non_object_payload(self) -> None:
        client = _client(get=json_response(["not", "an", "object"]))
        provider = TicketmasterProvider(client, make_settings(ticketmaster_api_key="k"))

        result = await provider.fetch("Berlin", START, END)

        assert result.result.success is False
        assert result.result.error == "unexpected payload shape"

    def test_availability_follows_key(self) -> None:
        assert not TicketmasterProvider(_client(), make_settings()).is_available()
        assert TicketmasterProvider(
            _client(), make_settings(ticketmaster_api_key="k")
        ).is_available()


# ======================================================================
# Bandsintown
# ======================================================================


class TestBandsintownProvider:
    @pytest.mark.asyncio
    async def test_maps_lineup_and_fallbacks(self) -> None:
        payload = [
            {
                "title": "Björk: Cornucopia",
                "datetime": "2025-06-04T19:30:00",
                "venue": {"name": "Tempodrom", "city": "Berlin"},
                "lineup": ["Björk"],
                "url": "https://bit.example/1",
            },
            {
                "description": "Late show",
                "artist": {"name": "Burial"},
                "facebook_rsvp_url": "https://fb.example/2",
            },
            {},
        ]
        client = _client(get=json_response(payload))
        provider = BandsintownProvider(client, make_settings())

        result = await provider.fetch("Berlin", START, END)

        assert result.result.count == 3
        bjork, burial, bare = result.events
        assert bjork.artists == ["Björk"]
        assert bjork.date == dt.date(2025, 6, 4)
        assert bjork.source == "Bandsintown"
        assert burial.name == "Late show"
        assert burial.artists == ["Burial"]
        assert burial.date == dt.date(2025, 6, 1)
        assert burial.venue == "TBD"
        assert burial.url == "https://fb.example/2"
        assert bare.name == "Concert Event"
        assert bare.city == "Berlin"

    @pytest.mark.asyncio
    async def test_date_window_sent_as_pair(self) -> None:
        client = _client(get=json_response([]))
        provider = BandsintownProvider(client, make_settings(bandsintown_app_id="my-app"))

        result = await provider.fetch("Berlin", START, END)

        _, kwargs = client.get.call_args
        assert kwargs["params"] == {
            "app_id": "my-app",
            "location": "Berlin",
            "date": "2025-06-01,2025-06-07",
        }
        assert result.result.success is True
        assert result.result.count == 0

    @pytest.mark.asyncio
    async def test_object_payload_is_a_failure(self) -> None:
        client = _client(get=json_response({"errorMessage": "[NotFound]"}))
        provider = BandsintownProvider(client, make_settings())

        result = await provider.fetch("Berlin", START, END)

        assert result.result.success is False
        assert result.result.error == "unexpected payload shape"


# ======================================================================
# Eventbrite
# ======================================================================


class TestEventbriteProvider:
    @pytest.mark.asyncio
    async def test_missing_token(self) -> None:
        client = _client()
        result = await EventbriteProvider(client, make_settings()).fetch("Berlin", START, END)

        assert result.result.error == "Eventbrite API key not configured"
        client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_maps_nested_text_fields(self) -> None:
        payload = {
            "events": [
                {
                    "name": {"text": "Four Tet DJ Set"},
                    "start": {"local": "2025-06-05T22:00:00"},
                    "venue": {"name": "Berghain", "address": {"city": "Berlin"}},
                    "url": "https://eb.example/1",
                }
            ]
        }
        client = _client(get=json_response(payload))
        provider = EventbriteProvider(client, make_settings(eventbrite_api_key="eb"))

        result = await provider.fetch("Berlin", START, END)

        (event,) = result.events
        assert event.name == "Four Tet DJ Set"
        assert event.artists == ["Four Tet DJ Set"]
        assert event.venue == "Berghain"
        assert event.date == dt.date(2025, 6, 5)
        assert event.source == "Eventbrite"


# ======================================================================
# Resident Advisor
# ======================================================================


def _ra_payload() -> dict:
    return {
        "data": {
            "eventListings": {
                "data": [
                    {
                        "id": "1",
                        "listingDate": "2025-06-06T00:00:00.000Z",
                        "event": {
                            "title": "Klubnacht",
                            "date": "2025-06-06T00:00:00.000",
                            "contentUrl": "/events/1",
                            "artists": [{"name": "Aphex Twin"}, {"name": "Burial"}],
                            "venue": {"name": "Berghain"},
                        },
                    },
                    {"id": "2", "event": None},
                ],
                "totalResults": 2,
            }
        }
    }


class TestResidentAdvisorProvider:
    def test_area_key_normalization(self) -> None:
        assert area_key("New York, NY") == "new_york"
        assert area_key("  Berlin ") == "berlin"
        assert area_key("Los-Angeles") == "los_angeles"
        assert RA_AREA_IDS[area_key("London, UK")] == 13

    @pytest.mark.asyncio
    async def test_maps_listing(self) -> None:
        client = _client(post=json_response(_ra_payload()))
        provider = ResidentAdvisorProvider(client, make_settings())

        result = await provider.fetch("Berlin, Germany", START, END)

        (event,) = result.events
        assert event.name == "Klubnacht"
        assert event.city == "Berlin"
        assert event.artists == ["Aphex Twin", "Burial"]
        assert event.url == "https://ra.co/events/1"
        assert event.category == EventCategory.ELECTRONIC
        assert event.source == "Resident Advisor"

    @pytest.mark.asyncio
    async def test_sends_area_and_window(self) -> None:
        client = _client(post=json_response(_ra_payload()))
        await ResidentAdvisorProvider(client, make_settings()).fetch("Berlin", START, END)

        _, kwargs = client.post.call_args
        variables = kwargs["json"]["variables"]
        assert variables["filters"]["areas"] == {"eq": 34}
        assert variables["filters"]["listingDate"]["gte"].startswith("2025-06-01")
        assert variables["filters"]["listingDate"]["lte"].startswith("2025-06-07")

    @pytest.mark.asyncio
    async def test_unknown_area_fails_without_network_call(self) -> None:
        client = _client()
        result = await ResidentAdvisorProvider(client, make_settings()).fetch(
            "Reykjavik", START, END
        )

        assert result.result.success is False
        assert "unknown RA area" in result.result.error
        client.post.assert_not_called()

    @pytest.mark.asyncio
    async def test_graphql_errors_are_a_failure(self) -> None:
        client = _client(post=json_response({"errors": [{"message": "rate limited"}]}))
        result = await ResidentAdvisorProvider(client, make_settings()).fetch(
            "Berlin", START, END
        )

        assert result.result.success is False
        assert result.result.error == "GraphQL error: rate limited"

    @pytest.mark.asyncio
    async def test_graphql_error_object_is_a_failure(self) -> None:
        client = _client(post=json_response({"errors": {"message": "boom"}}))
        result = await ResidentAdvisorProvider(client, make_settings()).fetch(
            "Berlin", START, END
        )

        assert result.result.success is False
        assert result.result.error == "GraphQL error: boom"
        assert result.events == []


# ======================================================================
# DICE
# ======================================================================


class TestDiceProvider:
    @pytest.mark.asyncio
    async def test_sends_key_header(self) -> None:
        client = _client(get=json_response({"data": []}))
        await DiceProvider(client, make_settings(dice_api_key="dice-key")).fetch(
            "London", START, END
        )

        _, kwargs = client.get.call_args
        assert kwargs["headers"]["x-api-key"] == "dice-key"
        assert kwargs["params"]["filter[city]"] == "London"

    @pytest.mark.asyncio
    async def test_artist_list_and_lineup_slots(self) -> None:
        payload = {
            "data": [
                {
                    "name": "Jamie xx",
                    "date": "2025-06-02T21:00:00Z",
                    "venue": "Printworks",
                    "artists": ["Jamie xx"],
                },
                {
                    "name": "Floating Points b2b",
                    "date": "2025-06-03",
                    "venue": {"name": "Fabric"},
                    "location": {"city": "London"},
                    "lineup": [{"details": "Floating Points"}, {"details": "Four Tet"}],
                },
            ]
        }
        client = _client(get=json_response(payload))
        result = await DiceProvider(client, make_settings(dice_api_key="k")).fetch(
            "London", START, END
        )

        jamie, fp = result.events
        assert jamie.venue == "Printworks"
        assert jamie.artists == ["Jamie xx"]
        assert fp.venue == "Fabric"
        assert fp.artists == ["Floating Points", "Four Tet"]
        assert fp.category == EventCategory.INDEPENDENT


# ======================================================================
# NTS
# ======================================================================


class TestNTSProvider:
    @pytest.mark.asyncio
    async def test_link_fallback_for_url(self) -> None:
        payload = {
            "results": [
                {
                    "title": "NTS x Tresor",
                    "start_date": "2025-06-07",
                    "location": {"venue": "Tresor", "city": "Berlin"},
                    "artists": [{"name": "Burial"}],
                    "links": [{"href": "https://nts.example/e/1"}],
                }
            ]
        }
        client = _client(get=json_response(payload))
        result = await NTSProvider(client, make_settings()).fetch("Berlin", START, END)

        (event,) = result.events
        assert event.url == "https://nts.example/e/1"
        assert event.category == EventCategory.RADIO
        assert event.source == "NTS Radio"
        assert NTSProvider(client, make_settings()).is_available()
