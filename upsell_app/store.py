"""Persistence for shops and the products they picked as checkout upsells."""
import logging

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .errors import ConflictError, ShopNotFound
from .models import Shop, UpsellItem

logger = logging.getLogger(__name__)


def get_upsell_store():
    """Return the store registered on the current app."""
    return current_app.extensions["upsell_store"]


class UpsellStore:
    """Repository over a SQLAlchemy session.

    Every mutating call commits or rolls back before returning, so a call is
    never partially applied.
    """

    def __init__(self, session):
        self.session = session

    def find_shop_by_domain(self, domain):
        if not domain:
            return None
        return self.session.query(Shop).filter_by(shopify_domain=domain).first()

    def get_shop_by_domain(self, domain):
        shop = self.find_shop_by_domain(domain)
        if shop is None:
            raise ShopNotFound(domain)
        return shop

    def get_or_create_shop(self, domain):
        shop = self.find_shop_by_domain(domain)
        if shop is not None:
            return shop

        shop = Shop(shopify_domain=domain)
        self.session.add(shop)
        try:
            self.session.commit()
        except IntegrityError:
            # Another request created it first
            self.session.rollback()
            return self.get_shop_by_domain(domain)
        logger.info("[DB] Created new shop: %s", domain)
        return shop

    def list_product_ids(self, shop_id):
        rows = (
            self.session.query(UpsellItem.shopify_product_id)
            .filter(UpsellItem.shop_id == shop_id)
            .all()
        )
        return [row.shopify_product_id for row in rows]

    def create_upsell_items(self, shop_id, product_ids):
        items = [UpsellItem(shop_id=shop_id, shopify_product_id=pid) for pid in product_ids]
        self.session.add_all(items)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("[DB] Upsell insert rejected for shop %s: %s", shop_id, e.orig)
            raise ConflictError("One or more products are already upsell items.") from e
        except SQLAlchemyError:
            self.session.rollback()
            raise
        logger.info("[DB] Saved %d upsell items for shop %s", len(items), shop_id)
        return items

    def delete_upsell_items(self, shop_id, product_ids):
        product_ids = list(product_ids)
        if not product_ids:
            return 0
        try:
            deleted = (
                self.session.query(UpsellItem)
                .filter(
                    UpsellItem.shop_id == shop_id,
                    UpsellItem.shopify_product_id.in_(product_ids),
                )
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        # Bulk delete bypasses the identity map
        self.session.expire_all()
        logger.info("[DB] Deleted %d upsell items for shop %s", deleted, shop_id)
        return deleted
