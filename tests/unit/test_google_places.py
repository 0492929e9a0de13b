"""Unit tests for the Google Places / Geocoding client."""

from __future__ import annotations

import httpx
import pytest

from app.services.google_places import (
    GooglePlacesClient,
    GooglePlacesError,
    GooglePlacesNotConfiguredError,
)

TEXT_SEARCH_OK = {
    "status": "OK",
    "results": [
        {
            "name": "千光寺",
            "formatted_address": "日本、〒722-0032 広島県尾道市東土堂町１５−１",
            "place_id": "ChIJsenkoji",
            "geometry": {"location": {"lat": 34.4098, "lng": 133.1985}},
            "photos": [{"photo_reference": "photo-abc", "width": 4000, "height": 3000}],
        },
        {
            "name": "Other",
            "geometry": {"location": {"lat": 0, "lng": 0}},
        },
    ],
}

GEOCODE_OK = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "日本、広島県尾道市",
            "place_id": "ChIJonomichi",
            "geometry": {"location": {"lat": 34.4089, "lng": 133.2050}},
        }
    ],
}


class Recorder:
    """MockTransport handler returning canned bodies per path."""

    def __init__(self, bodies: dict[str, dict]):
        self.bodies = bodies
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for suffix, body in self.bodies.items():
            if request.url.path.endswith(suffix):
                return httpx.Response(200, json=body)
        return httpx.Response(404)


def _client(handler, cache, api_key: str = "test-key") -> GooglePlacesClient:
    return GooglePlacesClient(api_key=api_key, cache=cache, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_text_search_returns_first_result(dict_cache) -> None:
    recorder = Recorder({"/place/textsearch/json": TEXT_SEARCH_OK})
    location = await _client(recorder, dict_cache).text_search("千光寺 尾道")

    assert location is not None
    assert location.latitude == 34.4098
    assert location.longitude == 133.1985
    assert location.google_place_id == "ChIJsenkoji"
    assert location.photo_reference == "photo-abc"

    params = recorder.requests[0].url.params
    assert params["query"] == "千光寺 尾道"
    assert params["key"] == "test-key"


@pytest.mark.asyncio
async def test_text_search_is_cached(dict_cache) -> None:
    recorder = Recorder({"/place/textsearch/json": TEXT_SEARCH_OK})
    client = _client(recorder, dict_cache)

    first = await client.text_search("千光寺 尾道")
    second = await client.text_search("千光寺 尾道")

    assert first == second
    assert len(recorder.requests) == 1


@pytest.mark.asyncio
async def test_zero_results_is_none_and_cached(dict_cache) -> None:
    recorder = Recorder({"/place/textsearch/json": {"status": "ZERO_RESULTS", "results": []}})
    client = _client(recorder, dict_cache)

    assert await client.text_search("nowhere") is None
    assert await client.text_search("nowhere") is None
    assert len(recorder.requests) == 1


@pytest.mark.asyncio
async def test_error_status_raises(dict_cache) -> None:
    recorder = Recorder(
        {"/place/textsearch/json": {"status": "REQUEST_DENIED", "error_message": "bad key"}}
    )
    with pytest.raises(GooglePlacesError) as exc_info:
        await _client(recorder, dict_cache).text_search("千光寺")
    assert exc_info.value.status == "REQUEST_DENIED"
    assert dict_cache.store == {}


@pytest.mark.asyncio
async def test_geocode(dict_cache) -> None:
    recorder = Recorder({"/geocode/json": GEOCODE_OK})
    location = await _client(recorder, dict_cache).geocode("尾道")

    assert location.latitude == 34.4089
    assert location.photo_reference is None
    assert recorder.requests[0].url.params["address"] == "尾道"


@pytest.mark.asyncio
async def test_fetch_photo(dict_cache) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["photoreference"] == "photo-abc"
        assert request.url.params["maxwidth"] == "400"
        return httpx.Response(200, content=b"img", headers={"content-type": "image/png"})

    content, content_type = await _client(handler, dict_cache).fetch_photo("photo-abc", 400)
    assert content == b"img"
    assert content_type == "image/png"


@pytest.mark.asyncio
async def test_missing_key(dict_cache) -> None:
    client = _client(Recorder({}), dict_cache, api_key="")
    assert client.is_configured is False
    with pytest.raises(GooglePlacesNotConfiguredError):
        await client.text_search("千光寺")
