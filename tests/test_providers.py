"""Tests for the upstream provider clients."""

import httpx
import pytest

from foodfinder.config import Config
from foodfinder.exceptions import NotFoundError, ProviderError, ProviderTimeoutError
from foodfinder.models import GoogleDetail, Location, YelpDetail
from foodfinder.providers import GooglePlacesClient, YelpClient, create_provider

CENTER = Location(lat=37.7749, lng=-122.4194)

YELP_BUSINESS = {
    "id": "abc",
    "name": "Joe's",
    "price": "$$",
    "rating": 4.5,
    "coordinates": {"latitude": 37.0, "longitude": -122.0},
    "categories": [{"alias": "italian", "title": "Italian"}],
}

GOOGLE_PLACE = {
    "place_id": "ChIJ123",
    "name": "Luigi's",
    "types": ["italian_restaurant", "restaurant"],
    "geometry": {"location": {"lat": 37.77, "lng": -122.41}},
    "photos": [{"photo_reference": "ref-1", "width": 800, "height": 600}],
}


def mock_client(handler) -> httpx.AsyncClient:
    """Create an AsyncClient whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestYelpClient:
    """Tests for the Yelp client."""

    @pytest.mark.asyncio
    async def test_search_params_and_parsing(self):
        """Test query mapping, auth header and record parsing."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(
                200, json={"businesses": [YELP_BUSINESS, {"name": "no id"}]}
            )

        client = YelpClient("secret", client=mock_client(handler))
        results = await client.search(
            CENTER, radius_m=100000, keyword="pizza", limit=99
        )

        request = seen["request"]
        assert request.url.path == "/v3/businesses/search"
        assert request.headers["Authorization"] == "Bearer secret"
        assert request.url.params["radius"] == "40000"
        assert request.url.params["limit"] == "50"
        assert request.url.params["term"] == "pizza"
        assert request.url.params["latitude"] == "37.7749"
        assert [r.id for r in results] == ["abc"]
        assert results[0].provider == "yelp"

    @pytest.mark.asyncio
    async def test_search_defaults(self):
        """Test that omitted radius and keyword use defaults."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = request.url.params
            return httpx.Response(200, json={"businesses": []})

        client = YelpClient("secret", client=mock_client(handler))
        assert await client.search(CENTER) == []

        assert seen["params"]["radius"] == "1500"
        assert seen["params"]["limit"] == "20"
        assert "term" not in seen["params"]

    @pytest.mark.asyncio
    async def test_missing_key(self):
        """Test that a missing API key is a provider error without a request."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        client = YelpClient(None, client=mock_client(handler))

        with pytest.raises(ProviderError, match="API key"):
            await client.search(CENTER)

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        """Test that a non-2xx answer raises ProviderError."""
        client = YelpClient(
            "secret", client=mock_client(lambda r: httpx.Response(500, text="boom"))
        )

        with pytest.raises(ProviderError) as exc_info:
            await client.search(CENTER)
        assert exc_info.value.provider == "yelp"

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Test that a transport timeout raises ProviderTimeoutError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        client = YelpClient("secret", client=mock_client(handler))

        with pytest.raises(ProviderTimeoutError):
            await client.search(CENTER)

    @pytest.mark.asyncio
    async def test_malformed_payload(self):
        """Test that a non-JSON body or missing list raises ProviderError."""
        client = YelpClient(
            "secret", client=mock_client(lambda r: httpx.Response(200, text="<html>"))
        )
        with pytest.raises(ProviderError):
            await client.search(CENTER)

        client = YelpClient(
            "secret", client=mock_client(lambda r: httpx.Response(200, json={}))
        )
        with pytest.raises(ProviderError):
            await client.search(CENTER)

    @pytest.mark.asyncio
    async def test_get_details_with_reviews(self):
        """Test that details and reviews are fetched together."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/reviews"):
                return httpx.Response(
                    200,
                    json={"reviews": [{"id": "r1", "rating": 5, "text": "Great"}]},
                )
            return httpx.Response(200, json=YELP_BUSINESS)

        client = YelpClient("secret", client=mock_client(handler))
        detail = await client.get_details("abc")

        assert isinstance(detail, YelpDetail)
        assert detail.business.id == "abc"
        assert [r.id for r in detail.reviews] == ["r1"]

    @pytest.mark.asyncio
    async def test_get_details_reviews_best_effort(self):
        """Test that failing reviews do not fail the details call."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/reviews"):
                return httpx.Response(503)
            return httpx.Response(200, json=YELP_BUSINESS)

        client = YelpClient("secret", client=mock_client(handler))
        detail = await client.get_details("abc")

        assert detail.reviews == []

    @pytest.mark.asyncio
    async def test_get_details_not_found(self):
        """Test that a 404 raises NotFoundError."""
        client = YelpClient(
            "secret", client=mock_client(lambda r: httpx.Response(404, json={}))
        )

        with pytest.raises(NotFoundError):
            await client.get_details("missing")


class TestGooglePlacesClient:
    """Tests for the Google Places client."""

    @pytest.mark.asyncio
    async def test_search(self):
        """Test query mapping, key-free photo URLs and local truncation."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = request.url.params
            places = [dict(GOOGLE_PLACE, place_id=f"p{i}") for i in range(5)]
            return httpx.Response(200, json={"status": "OK", "results": places})

        client = GooglePlacesClient("gkey", client=mock_client(handler))
        results = await client.search(CENTER, radius_m=0, keyword="pasta", limit=3)

        assert seen["params"]["location"] == "37.7749,-122.4194"
        assert seen["params"]["radius"] == "1"
        assert seen["params"]["type"] == "restaurant"
        assert seen["params"]["keyword"] == "pasta"
        assert seen["params"]["key"] == "gkey"
        assert [r.place_id for r in results] == ["p0", "p1", "p2"]

        assert results[0].photos[0].url == "/api/photos/ref-1"
        assert "gkey" not in results[0].photos[0].url

    @pytest.mark.asyncio
    async def test_zero_results(self):
        """Test that ZERO_RESULTS is an empty list, not an error."""
        client = GooglePlacesClient(
            "gkey",
            client=mock_client(
                lambda r: httpx.Response(200, json={"status": "ZERO_RESULTS"})
            ),
        )

        assert await client.search(CENTER) == []

    @pytest.mark.asyncio
    async def test_error_status(self):
        """Test that a non-OK status in a 200 body raises ProviderError."""
        body = {"status": "REQUEST_DENIED", "error_message": "Invalid key"}
        client = GooglePlacesClient(
            "gkey", client=mock_client(lambda r: httpx.Response(200, json=body))
        )

        with pytest.raises(ProviderError, match="Invalid key"):
            await client.search(CENTER)

    @pytest.mark.asyncio
    async def test_get_details(self):
        """Test that place details and reviews are parsed."""
        result = dict(
            GOOGLE_PLACE,
            formatted_address="1 Main St",
            reviews=[{"author_name": "Bo", "rating": 4, "text": "Nice", "time": 0}],
        )
        client = GooglePlacesClient(
            "gkey",
            client=mock_client(
                lambda r: httpx.Response(200, json={"status": "OK", "result": result})
            ),
        )

        detail = await client.get_details("ChIJ123")

        assert isinstance(detail, GoogleDetail)
        assert detail.place.formatted_address == "1 Main St"
        assert detail.reviews[0].author_name == "Bo"
        assert detail.place.photos[0].url == "/api/photos/ref-1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["NOT_FOUND", "INVALID_REQUEST"])
    async def test_get_details_not_found(self, status):
        """Test that unknown place ids raise NotFoundError."""
        client = GooglePlacesClient(
            "gkey",
            client=mock_client(lambda r: httpx.Response(200, json={"status": status})),
        )

        with pytest.raises(NotFoundError):
            await client.get_details("nope")

    @pytest.mark.asyncio
    async def test_geocode(self):
        """Test address geocoding."""
        body = {
            "status": "OK",
            "results": [{"geometry": {"location": {"lat": 40.7, "lng": -74.0}}}],
        }
        client = GooglePlacesClient(
            "gkey", client=mock_client(lambda r: httpx.Response(200, json=body))
        )

        assert await client.geocode("New York") == Location(lat=40.7, lng=-74.0)

    @pytest.mark.asyncio
    async def test_geocode_no_match(self):
        """Test that an unknown address raises NotFoundError."""
        client = GooglePlacesClient(
            "gkey",
            client=mock_client(
                lambda r: httpx.Response(200, json={"status": "ZERO_RESULTS"})
            ),
        )

        with pytest.raises(NotFoundError):
            await client.geocode("nowhere")

    @pytest.mark.asyncio
    async def test_fetch_photo_follows_redirect(self):
        """Test that photos are fetched with the key and the redirect followed."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            if request.url.path == "/maps/api/place/photo":
                return httpx.Response(
                    302, headers={"location": "https://photos.example.com/p/1.jpg"}
                )
            return httpx.Response(
                200, content=b"jpeg-bytes", headers={"content-type": "image/jpeg"}
            )

        client = GooglePlacesClient("gkey", client=mock_client(handler))
        content, content_type = await client.fetch_photo("ref-1")

        assert content == b"jpeg-bytes"
        assert content_type == "image/jpeg"
        assert seen[0].params["key"] == "gkey"
        assert seen[0].params["photo_reference"] == "ref-1"
        assert seen[0].params["maxwidth"] == "400"

    @pytest.mark.asyncio
    async def test_fetch_photo_rejects_non_image(self):
        """Test that a non-image answer is a provider error."""
        client = GooglePlacesClient(
            "gkey",
            client=mock_client(
                lambda r: httpx.Response(200, json={"status": "INVALID_REQUEST"})
            ),
        )

        with pytest.raises(ProviderError):
            await client.fetch_photo("ref-1")


class TestCreateProvider:
    """Tests for provider selection."""

    def test_selects_by_config(self):
        """Test that the configured provider is built."""
        yelp = create_provider(Config(_env_file=None, provider="yelp"))
        google = create_provider(Config(_env_file=None, provider="google"))

        assert isinstance(yelp, YelpClient)
        assert isinstance(google, GooglePlacesClient)
