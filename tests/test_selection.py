from upsell_app.errors import UpstreamError
from upsell_app.utils import catalog

from .conftest import SHOP_DOMAIN, FakeCatalog


def test_index_requires_login(client):
    response = client.get("/")
    assert response.status_code == 302
    assert "/auth/login" in response.headers["Location"]


def test_login_creates_shop(client, upsell_store):
    assert upsell_store.find_shop_by_domain(SHOP_DOMAIN) is None

    response = client.post("/auth/login", data={"store": "shop1", "password": "test-password"})

    assert response.status_code == 302
    assert upsell_store.find_shop_by_domain(SHOP_DOMAIN) is not None


def test_login_rejects_bad_password(client, upsell_store):
    response = client.post("/auth/login", data={"store": "shop1", "password": "wrong"})

    assert response.status_code == 200
    assert b"Invalid credentials" in response.data
    assert upsell_store.find_shop_by_domain(SHOP_DOMAIN) is None


def test_index_partitions_catalog(logged_in_client, upsell_store, monkeypatch):
    monkeypatch.setattr(catalog, "shopify_request", FakeCatalog(3))
    shop = upsell_store.find_shop_by_domain(SHOP_DOMAIN)
    upsell_store.create_upsell_items(shop.id, ["gid://shopify/Product/2"])

    response = logged_in_client.get("/")

    assert response.status_code == 200
    html = response.get_data(as_text=True)
    your_products, upsell_products = html.split("<h2>Upsell Products</h2>")
    assert "Product 1" in your_products and "Product 3" in your_products
    assert "Product 2" not in your_products
    assert "Product 2" in upsell_products


def test_index_shows_catalog_error(logged_in_client, monkeypatch):
    def broken(query, shop_domain, access_token, variables=None):
        raise UpstreamError("Shopify API error: boom")

    monkeypatch.setattr(catalog, "shopify_request", broken)

    response = logged_in_client.get("/")

    assert response.status_code == 200
    assert b"Could not load products from Shopify" in response.data


def test_save_selection(logged_in_client, upsell_store):
    response = logged_in_client.post(
        "/",
        data={"selectedProducts": ["gid://shopify/Product/1", "gid://shopify/Product/2"]},
    )

    assert response.status_code == 200
    assert response.get_json() == {"success": "Products saved successfully!"}
    shop = upsell_store.find_shop_by_domain(SHOP_DOMAIN)
    assert sorted(upsell_store.list_product_ids(shop.id)) == [
        "gid://shopify/Product/1",
        "gid://shopify/Product/2",
    ]


def test_save_deduplicates_ids(logged_in_client, upsell_store):
    response = logged_in_client.post(
        "/",
        data={"intent": "save", "selectedProducts": ["p1", "p1", "p2"]},
    )

    assert response.status_code == 200
    shop = upsell_store.find_shop_by_domain(SHOP_DOMAIN)
    assert sorted(upsell_store.list_product_ids(shop.id)) == ["p1", "p2"]


def test_save_requires_products(logged_in_client):
    response = logged_in_client.post("/", data={"intent": "save"})

    assert response.status_code == 400
    assert response.get_json() == {"error": "No products selected."}


def test_unknown_intent(logged_in_client):
    response = logged_in_client.post("/", data={"intent": "archive", "selectedProducts": ["p1"]})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Unknown intent: archive"}


def test_save_conflict_is_generic_error(logged_in_client, upsell_store):
    other = upsell_store.get_or_create_shop("other-shop.myshopify.com")
    upsell_store.create_upsell_items(other.id, ["p2"])

    response = logged_in_client.post("/", data={"selectedProducts": ["p1", "p2"]})

    assert response.status_code == 500
    assert response.get_json() == {"error": "An error occurred while processing products."}
    shop = upsell_store.find_shop_by_domain(SHOP_DOMAIN)
    assert upsell_store.list_product_ids(shop.id) == []


def test_delete_selection(logged_in_client, upsell_store):
    shop = upsell_store.find_shop_by_domain(SHOP_DOMAIN)
    upsell_store.create_upsell_items(shop.id, ["p1", "p2"])

    response = logged_in_client.post("/", data={"intent": "delete", "selectedProducts": ["p1"]})

    assert response.status_code == 200
    assert response.get_json() == {"success": "Products removed successfully!"}
    assert upsell_store.list_product_ids(shop.id) == ["p2"]


def test_delete_unknown_ids_succeeds(logged_in_client, upsell_store):
    response = logged_in_client.post("/", data={"intent": "delete", "selectedProducts": ["p9"]})

    assert response.status_code == 200
    assert response.get_json() == {"success": "Products removed successfully!"}


def test_save_without_shop_row(logged_in_client, upsell_store, app):
    from upsell_app import db

    db.session.delete(upsell_store.find_shop_by_domain(SHOP_DOMAIN))
    db.session.commit()

    response = logged_in_client.post("/", data={"selectedProducts": ["p1"]})

    assert response.status_code == 404
    assert response.get_json() == {"error": f"Shop with domain {SHOP_DOMAIN} not found"}


def test_index_without_shop_row_is_empty_selection(logged_in_client, upsell_store, monkeypatch):
    from upsell_app import db

    monkeypatch.setattr(catalog, "shopify_request", FakeCatalog(2))
    db.session.delete(upsell_store.find_shop_by_domain(SHOP_DOMAIN))
    db.session.commit()

    response = logged_in_client.get("/")

    assert response.status_code == 200
    assert b"Product 1" in response.data
    assert b"No upsell products selected yet." in response.data
