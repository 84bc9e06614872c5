import logging
import os

import requests
from flask import current_app, has_app_context

from upsell_app.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2025-01"
DEFAULT_TIMEOUT = 30


def _setting(key, default):
    if has_app_context():
        return current_app.config.get(key, default)
    return os.getenv(key, default)


def shopify_headers(access_token):
    return {
        "Content-Type": "application/json",
        "X-Shopify-Access-Token": access_token,
    }


def storefront_headers(access_token):
    return {
        "Content-Type": "application/json",
        "X-Shopify-Storefront-Access-Token": access_token,
    }


def admin_graphql_url(shop_domain, api_version=None):
    api_version = api_version or _setting("SHOPIFY_API_VERSION", DEFAULT_API_VERSION)
    return f"https://{shop_domain}/admin/api/{api_version}/graphql.json"


def storefront_graphql_url(shop_domain, api_version=None):
    api_version = api_version or _setting("SHOPIFY_API_VERSION", DEFAULT_API_VERSION)
    return f"https://{shop_domain}/api/{api_version}/graphql.json"


def graphql_post(url, query, headers, variables=None, timeout=None):
    """POST a GraphQL document and return its ``data`` object.

    Transport failures, non-2xx statuses, bodies that are not JSON and
    top-level GraphQL ``errors`` all raise UpstreamError.
    """
    payload = {"query": query}
    if variables:
        payload["variables"] = variables
    timeout = timeout or float(_setting("SHOPIFY_REQUEST_TIMEOUT", DEFAULT_TIMEOUT))

    try:
        response = requests.post(url, json=payload, headers=headers, timeout=timeout)
        response.raise_for_status()
        json_data = response.json()
    except requests.RequestException as e:
        logger.warning("[Shopify] Request to %s failed: %s", url, e)
        raise UpstreamError(f"Shopify request failed: {e}") from e
    except ValueError as e:
        raise UpstreamError("Shopify returned a non-JSON response") from e

    if not isinstance(json_data, dict):
        raise UpstreamError("Shopify returned an unexpected payload")
    if json_data.get("errors"):
        raise UpstreamError(f"Shopify API error: {json_data['errors']}")
    if not isinstance(json_data.get("data"), dict):
        raise UpstreamError("Shopify response has no data")
    return json_data["data"]


def shopify_request(query, shop_domain, access_token, variables=None):
    return graphql_post(
        admin_graphql_url(shop_domain),
        query,
        shopify_headers(access_token),
        variables=variables,
    )


def storefront_request(query, shop_domain, access_token, variables=None):
    return graphql_post(
        storefront_graphql_url(shop_domain),
        query,
        storefront_headers(access_token),
        variables=variables,
    )


class ShopifyGIDBuilder:
    def __init__(self, object_type: str):
        self.object_type = object_type
        self.prefix = f"gid://shopify/{object_type}/"

    def build(self, object_id: str) -> str:
        object_id = str(object_id)
        if object_id.startswith(self.prefix):
            return object_id
        return f"{self.prefix}{object_id}"
