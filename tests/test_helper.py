import pytest
import requests

from upsell_app.errors import UpstreamError
from upsell_app.utils import helper
from upsell_app.utils.helper import ShopifyGIDBuilder, shopify_request, storefront_request


class FakeResponse:
    def __init__(self, payload=None, status_code=200, json_error=False):
        self.payload = payload
        self.status_code = status_code
        self.json_error = json_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        if self.json_error:
            raise ValueError("not json")
        return self.payload


@pytest.fixture()
def captured(monkeypatch):
    calls = []
    responses = []

    def fake_post(url, json=None, headers=None, timeout=None):
        calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        return responses.pop(0)

    monkeypatch.setattr(helper.requests, "post", fake_post)
    return calls, responses


def test_shopify_request_posts_to_admin_api(app, captured):
    calls, responses = captured
    responses.append(FakeResponse({"data": {"shop": {"name": "Test"}}}))

    data = shopify_request("query { shop { name } }", "test-shop.myshopify.com", "shpat_test", {"a": 1})

    assert data == {"shop": {"name": "Test"}}
    call, = calls
    assert call["url"] == f"https://test-shop.myshopify.com/admin/api/{app.config['SHOPIFY_API_VERSION']}/graphql.json"
    assert call["headers"]["X-Shopify-Access-Token"] == "shpat_test"
    assert call["json"] == {"query": "query { shop { name } }", "variables": {"a": 1}}
    assert call["timeout"] == app.config["SHOPIFY_REQUEST_TIMEOUT"]


def test_storefront_request_uses_storefront_token(app, captured):
    calls, responses = captured
    responses.append(FakeResponse({"data": {"nodes": []}}))

    storefront_request("query { nodes }", "test-shop.myshopify.com", "sf_token")

    call, = calls
    assert call["url"].endswith("/api/" + app.config["SHOPIFY_API_VERSION"] + "/graphql.json")
    assert "/admin/" not in call["url"]
    assert call["headers"]["X-Shopify-Storefront-Access-Token"] == "sf_token"
    assert "variables" not in call["json"]


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({"errors": [{"message": "Throttled"}]}),
        FakeResponse({"data": None}),
        FakeResponse(["not", "a", "dict"]),
        FakeResponse(json_error=True),
        FakeResponse({"data": {}}, status_code=502),
    ],
)
def test_bad_responses_raise_upstream_error(app, captured, response):
    _, responses = captured
    responses.append(response)

    with pytest.raises(UpstreamError):
        shopify_request("query", "test-shop.myshopify.com", "shpat_test")


def test_transport_error_raises_upstream_error(app, monkeypatch):
    def refuse(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(helper.requests, "post", refuse)

    with pytest.raises(UpstreamError):
        shopify_request("query", "test-shop.myshopify.com", "shpat_test")


def test_gid_builder_does_not_prefix_twice():
    builder = ShopifyGIDBuilder("Product")

    assert builder.build("123") == "gid://shopify/Product/123"
    assert builder.build(123) == "gid://shopify/Product/123"
    assert builder.build("gid://shopify/Product/123") == "gid://shopify/Product/123"
