import os


def load_stores():
    """Collect SHOP<n>_* environment variables into a store map keyed by "shop<n>"."""
    stores = {}
    n = 1
    while os.getenv(f"SHOP{n}_DOMAIN"):
        prefix = f"SHOP{n}_"
        stores[f"shop{n}"] = {
            "name": os.getenv(prefix + "NAME") or os.getenv(prefix + "DOMAIN"),
            "domain": os.getenv(prefix + "DOMAIN"),
            "token": os.getenv(prefix + "TOKEN"),
            "storefront_token": os.getenv(prefix + "STOREFRONT_TOKEN"),
        }
        n += 1
    return stores


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "supersecretkey")
    DEBUG = False
    TESTING = False
    TEMPLATES_AUTO_RELOAD = False
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    SHOPIFY_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2025-01")
    SHOPIFY_REQUEST_TIMEOUT = float(os.getenv("SHOPIFY_REQUEST_TIMEOUT", "30"))
    CATALOG_PAGE_SIZE = 250

    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "supersecret")
    STORES = load_stores()


class DevelopmentConfig(Config):
    DEBUG = True
    TEMPLATES_AUTO_RELOAD = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///dev.db")


class ProductionConfig(Config):
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI", "sqlite:///prod.db")


class TestingConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    ADMIN_PASSWORD = "test-password"
    STORES = {
        "shop1": {
            "name": "Test Shop",
            "domain": "test-shop.myshopify.com",
            "token": "shpat_test",
            "storefront_token": "storefront_test",
        },
    }
