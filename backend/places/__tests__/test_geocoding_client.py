"""
Test suite for the place lookup client.

Requests never leave the process: httpx.MockTransport answers them.

Run: python3 -m pytest places/__tests__/test_geocoding_client.py -v
"""
import asyncio

import httpx
import pytest

from errors import ConfigurationError, StorageError, ValidationError
from places.client import GEOCODE_URL, PLACE_DETAILS_URL, GeocodingClient, PlaceResult

BERLIN = {
    "place_id": "ChIJAVkDPzdOqEcRcDteW0YgIQQ",
    "formatted_address": "Berlin, Germany",
    "geometry": {"location": {"lat": 52.52, "lng": 13.405}},
}


def run(coro):
    return asyncio.run(coro)


def client_for(handler, api_key="maps-key"):
    return GeocodingClient(api_key=api_key, timeout=2, transport=httpx.MockTransport(handler))


class TestLookup:

    def test_geocode_address(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"status": "OK", "results": [BERLIN]})

        result = run(client_for(handler).lookup(address="  Berlin "))

        assert result == PlaceResult(
            place_id=BERLIN["place_id"], formatted_address="Berlin, Germany", latitude=52.52, longitude=13.405,
        )
        assert str(seen[0].url).startswith(GEOCODE_URL)
        assert seen[0].url.params["address"] == "Berlin"
        assert seen[0].url.params["key"] == "maps-key"

    def test_place_id_preferred(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"status": "OK", "result": BERLIN})

        result = run(client_for(handler).lookup(address="Somewhere else", place_id=BERLIN["place_id"]))

        assert result.formatted_address == "Berlin, Germany"
        assert str(seen[0].url).startswith(PLACE_DETAILS_URL)
        assert seen[0].url.params["place_id"] == BERLIN["place_id"]

    def test_zero_results(self):
        result = run(client_for(lambda r: httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})).lookup(
            address="Atlantis",
        ))
        assert result is None

    def test_result_without_geometry(self):
        handler = lambda r: httpx.Response(200, json={"status": "OK", "results": [{"formatted_address": "Earth"}]})

        result = run(client_for(handler).geocode("Earth"))

        assert result.formatted_address == "Earth"
        assert result.latitude is None

    @pytest.mark.parametrize("address", [None, "", "   "])
    def test_nothing_to_look_up(self, address):
        with pytest.raises(ValidationError):
            run(client_for(lambda r: httpx.Response(500)).lookup(address=address))


class TestFailures:

    def test_missing_api_key(self):
        with pytest.raises(ConfigurationError):
            run(client_for(lambda r: httpx.Response(200), api_key="").geocode("Berlin"))

    def test_service_error_status(self):
        handler = lambda r: httpx.Response(200, json={"status": "REQUEST_DENIED", "error_message": "bad key"})

        with pytest.raises(StorageError, match="Failed to geocode location"):
            run(client_for(handler).geocode("Berlin"))

    def test_http_error(self):
        with pytest.raises(StorageError) as exc_info:
            run(client_for(lambda r: httpx.Response(502)).geocode("Berlin"))

        assert isinstance(exc_info.value.original_error, httpx.HTTPStatusError)

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(StorageError):
            run(client_for(handler).geocode("Berlin"))
