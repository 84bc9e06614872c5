import logging
from dataclasses import dataclass
from typing import List, Optional

from upsell_app.errors import UpstreamError
from upsell_app.graphql_queries.query_builders.query_builders import AllProductQueryBuilder
from upsell_app.utils.helper import shopify_request

logger = logging.getLogger(__name__)

PAGE_SIZE = 250


@dataclass(frozen=True)
class CatalogProduct:
    id: str
    title: str
    handle: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[str] = None


class ShopifyProductBuilder:
    """Turns one Admin API product node into a CatalogProduct.

    Anything other than the expected shape raises UpstreamError.
    """

    def __init__(self, product_data):
        self.product_data = product_data

    def _first_edge_node(self, connection):
        edges = self.product_data[connection]["edges"]
        if not edges:
            return None
        return edges[0]["node"]

    def get_image_url(self):
        node = self._first_edge_node("images")
        return node["url"] if node else None

    def get_price(self):
        node = self._first_edge_node("variants")
        return node["price"] if node else None

    def build(self):
        try:
            product_id = self.product_data["id"]
            title = self.product_data["title"]
            if not isinstance(product_id, str) or not isinstance(title, str):
                raise TypeError("id and title must be strings")
            return CatalogProduct(
                id=product_id,
                title=title,
                handle=self.product_data.get("handle"),
                image_url=self.get_image_url(),
                price=self.get_price(),
            )
        except (KeyError, TypeError, IndexError, AttributeError) as e:
            raise UpstreamError(f"Malformed product in Shopify response: {e!r}") from e


def fetch_all_products(store, page_size=PAGE_SIZE) -> List[CatalogProduct]:
    """Page through the whole catalog of ``store`` and return every product in order."""
    graphql_query = AllProductQueryBuilder().build()

    products = []
    has_next_page = True
    cursor = None
    pages = 0

    while has_next_page:
        data = shopify_request(
            query=graphql_query,
            shop_domain=store["domain"],
            access_token=store["token"],
            variables={"first": page_size, "cursor": cursor},
        )
        try:
            connection = data["products"]
            edges = connection["edges"]
            has_next_page = bool(connection["pageInfo"]["hasNextPage"])
        except (KeyError, TypeError) as e:
            raise UpstreamError(f"Malformed products page: {e!r}") from e

        for edge in edges:
            try:
                node = edge["node"]
            except (KeyError, TypeError) as e:
                raise UpstreamError(f"Malformed product edge: {e!r}") from e
            products.append(ShopifyProductBuilder(node).build())
        pages += 1

        if not edges:
            break
        if has_next_page:
            try:
                cursor = edges[-1]["cursor"]
            except (KeyError, TypeError) as e:
                raise UpstreamError(f"Product edge has no cursor: {e!r}") from e

    logger.info("[Shopify] Fetched %d products in %d pages from %s", len(products), pages, store["domain"])
    return products
