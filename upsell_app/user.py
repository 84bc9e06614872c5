from flask import current_app
from flask_login import UserMixin


class ShopSession(UserMixin):
    """The logged-in merchant: one configured store and its API credentials."""

    def __init__(self, id, name, domain, token, storefront_token=None):
        self.id = id
        self.name = name
        self.domain = domain
        self.token = token
        self.storefront_token = storefront_token

    @property
    def store(self):
        return {"name": self.name, "domain": self.domain, "token": self.token}

    @classmethod
    def from_config(cls, store_key, store):
        return cls(
            id=store_key,
            name=store.get("name"),
            domain=store["domain"],
            token=store.get("token"),
            storefront_token=store.get("storefront_token"),
        )


def load_shop_session(user_id):
    store = current_app.config["STORES"].get(str(user_id))
    if not store:
        return None
    return ShopSession.from_config(str(user_id), store)
