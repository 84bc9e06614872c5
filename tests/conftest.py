import pytest

from upsell_app import create_app, db
from upsell_app.store import UpsellStore

SHOP_DOMAIN = "test-shop.myshopify.com"


@pytest.fixture()
def app():
    app = create_app("testing")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def upsell_store(app):
    return app.extensions["upsell_store"]


@pytest.fixture()
def shop(upsell_store):
    return upsell_store.get_or_create_shop(SHOP_DOMAIN)


@pytest.fixture()
def logged_in_client(client):
    response = client.post("/auth/login", data={"store": "shop1", "password": "test-password"})
    assert response.status_code == 302
    return client


def product_node(index, image=True, price="10.00"):
    return {
        "id": f"gid://shopify/Product/{index}",
        "title": f"Product {index}",
        "handle": f"product-{index}",
        "images": {"edges": [{"node": {"url": f"https://cdn.example.com/{index}.png"}}] if image else []},
        "variants": {"edges": [{"node": {"price": price}}]},
    }


class FakeCatalog:
    """Stands in for ``shopify_request``, serving a catalog in pages."""

    def __init__(self, total):
        self.nodes = [product_node(i) for i in range(1, total + 1)]
        self.calls = []

    def __call__(self, query, shop_domain, access_token, variables=None):
        self.calls.append(dict(variables or {}))
        first = variables["first"]
        start = int(variables["cursor"]) if variables.get("cursor") else 0
        page = self.nodes[start:start + first]
        return {
            "products": {
                "edges": [
                    {"cursor": str(start + offset + 1), "node": node}
                    for offset, node in enumerate(page)
                ],
                "pageInfo": {"hasNextPage": start + first < len(self.nodes)},
            }
        }
