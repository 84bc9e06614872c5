"""Clients the checkout widget talks to: the app's public endpoint and the Storefront API."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import requests

from upsell_app.errors import UpstreamError
from upsell_app.graphql_queries.query_builders.query_builders import (
    CartLinesAddMutationBuilder,
    CartLinesQueryBuilder,
    ProductNodesQueryBuilder,
)
from upsell_app.utils.helper import ShopifyGIDBuilder, storefront_request

logger = logging.getLogger(__name__)

product_gid = ShopifyGIDBuilder("Product")


def normalize_product_id(shopify_product_id):
    """``123`` -> ``gid://shopify/Product/123``; ids already in gid form pass through."""
    return product_gid.build(shopify_product_id)


@dataclass(frozen=True)
class UpsellProduct:
    id: str
    title: str
    variant_ids: Tuple[str, ...]
    price_amount: str
    currency_code: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def variant_id(self):
        return self.variant_ids[0]


@dataclass(frozen=True)
class CartLine:
    merchandise_id: str
    id: Optional[str] = None
    quantity: int = 1


@dataclass
class CartChangeResult:
    type: str
    message: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    @property
    def is_error(self):
        return self.type == "error"


def parse_product_node(node):
    """Storefront ``Product`` node -> UpsellProduct, or None for nodes we cannot offer."""
    if not node:
        return None
    try:
        variants = node["variants"]["nodes"]
        if not variants:
            return None
        images = node["images"]["nodes"]
        price = variants[0]["price"]
        return UpsellProduct(
            id=node["id"],
            title=node["title"],
            variant_ids=tuple(variant["id"] for variant in variants),
            price_amount=str(price["amount"]),
            currency_code=price.get("currencyCode"),
            image_url=images[0]["url"] if images else None,
        )
    except (KeyError, TypeError, IndexError) as e:
        raise UpstreamError(f"Malformed product node: {e!r}") from e


class UpsellApiClient:
    """Reads ``/api/upsell`` on the app that serves the widget."""

    def __init__(self, app_url, timeout=10):
        self.app_url = app_url.rstrip("/")
        self.timeout = timeout

    def get_product_ids(self, shop_domain):
        try:
            response = requests.get(
                f"{self.app_url}/api/upsell",
                params={"shopDomain": shop_domain},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamError(f"Failed to fetch upsell items: {e}") from e
        if not response.ok:
            raise UpstreamError(f"Failed to fetch upsell items: HTTP {response.status_code}")

        try:
            items = response.json()
        except ValueError as e:
            raise UpstreamError("Upsell endpoint returned a non-JSON response") from e
        if not isinstance(items, list):
            return []
        try:
            return [item["shopifyProductId"] for item in items]
        except (KeyError, TypeError) as e:
            raise UpstreamError(f"Malformed upsell item: {e!r}") from e


class StorefrontClient:
    def __init__(self, shop_domain, access_token):
        self.shop_domain = shop_domain
        self.access_token = access_token

    def request(self, query, variables=None):
        return storefront_request(query, self.shop_domain, self.access_token, variables=variables)

    def fetch_products(self, product_ids):
        """Resolve product gids in one ``nodes`` query, in the order given."""
        if not product_ids:
            return []
        query = ProductNodesQueryBuilder().build()
        data = self.request(query, {"ids": list(product_ids)})
        nodes = data.get("nodes")
        if not isinstance(nodes, list):
            raise UpstreamError("Storefront response has no nodes")

        products = []
        for node in nodes:
            product = parse_product_node(node)
            if product is not None:
                products.append(product)
        return products


class StorefrontCart:
    """The shopper's live cart."""

    def __init__(self, client, cart_id):
        self.client = client
        self.cart_id = cart_id

    def lines(self):
        data = self.client.request(CartLinesQueryBuilder().build(), {"cartId": self.cart_id})
        cart = data.get("cart")
        if not cart:
            return []
        try:
            return [
                CartLine(
                    id=line.get("id"),
                    merchandise_id=line["merchandise"]["id"],
                    quantity=line.get("quantity", 1),
                )
                for line in cart["lines"]["nodes"]
            ]
        except (KeyError, TypeError) as e:
            raise UpstreamError(f"Malformed cart lines: {e!r}") from e

    def add_line(self, merchandise_id, quantity=1):
        mutation = CartLinesAddMutationBuilder().build()
        variables = {
            "cartId": self.cart_id,
            "lines": [{"merchandiseId": merchandise_id, "quantity": quantity}],
        }
        try:
            data = self.client.request(mutation, variables)
        except UpstreamError as e:
            return CartChangeResult(type="error", message=str(e))

        user_errors = (data.get("cartLinesAdd") or {}).get("userErrors") or []
        if user_errors:
            messages = [error.get("message", "") for error in user_errors]
            return CartChangeResult(type="error", message="; ".join(messages), errors=messages)
        return CartChangeResult(type="success")
