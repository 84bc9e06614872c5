import uuid

from . import db


def _new_id():
    return uuid.uuid4().hex


class Shop(db.Model):
    __tablename__ = "shop"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    shopify_domain = db.Column(db.String(255), unique=True, nullable=False)
    upsell_items = db.relationship(
        'UpsellItem',
        backref='shop',
        lazy=True,
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Shop {self.shopify_domain}>"


class UpsellItem(db.Model):
    __tablename__ = "upsell_item"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    shop_id = db.Column(db.String(32), db.ForeignKey('shop.id', ondelete="CASCADE"), nullable=False)
    # One product can be an upsell for a single shop only
    shopify_product_id = db.Column(db.String(100), unique=True, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "shopId": self.shop_id,
            "shopifyProductId": self.shopify_product_id,
        }

    def __repr__(self):
        return f"<UpsellItem {self.shopify_product_id}>"
