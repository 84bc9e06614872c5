"""Merchant product selection: what the page shows and what a form post changes."""
import logging

from upsell_app.errors import ShopNotFound, UpstreamError, ValidationError
from upsell_app.utils import catalog

logger = logging.getLogger(__name__)

INTENT_SAVE = "save"
INTENT_DELETE = "delete"

SUCCESS_MESSAGES = {
    INTENT_SAVE: "Products saved successfully!",
    INTENT_DELETE: "Products removed successfully!",
}
PROCESSING_ERROR = "An error occurred while processing products."


def load_selection(upsell_store, store, page_size=catalog.PAGE_SIZE):
    """Catalog split into products still available and products already picked.

    A shop with no row yet is an empty selection. A catalog fetch failure is
    reported in ``errors`` instead of raised.
    """
    data = {
        "ok": True,
        "shop_found": False,
        "available": [],
        "selected": [],
        "selected_ids": [],
        "errors": [],
    }

    shop = upsell_store.find_shop_by_domain(store["domain"])
    selected_ids = []
    if shop is not None:
        data["shop_found"] = True
        selected_ids = upsell_store.list_product_ids(shop.id)
    data["selected_ids"] = selected_ids

    try:
        products = catalog.fetch_all_products(store, page_size=page_size)
    except UpstreamError as e:
        logger.exception("[Shopify] Could not load catalog for %s", store["domain"])
        data["ok"] = False
        data["errors"].append(str(e))
        return data

    chosen = set(selected_ids)
    for product in products:
        if product.id in chosen:
            data["selected"].append(product)
        else:
            data["available"].append(product)
    return data


def _unique(product_ids):
    return list(dict.fromkeys(pid.strip() for pid in product_ids if pid and pid.strip()))


def apply_selection(upsell_store, shop_domain, intent, product_ids):
    """Run one save or delete for ``shop_domain``.

    Returns ``(payload, status_code)`` where payload is ``{"success": msg}``
    or ``{"error": msg}``.
    """
    intent = (intent or INTENT_SAVE).strip().lower()

    try:
        shop = upsell_store.get_shop_by_domain(shop_domain)
    except ShopNotFound as e:
        return {"error": str(e)}, 404

    try:
        if intent not in SUCCESS_MESSAGES:
            raise ValidationError(f"Unknown intent: {intent}")
        product_ids = _unique(product_ids)
        if not product_ids:
            raise ValidationError("No products selected.")
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        if intent == INTENT_SAVE:
            upsell_store.create_upsell_items(shop.id, product_ids)
        else:
            upsell_store.delete_upsell_items(shop.id, product_ids)
    except Exception:
        logger.exception("[DB] Failed to %s upsell items for %s", intent, shop_domain)
        return {"error": PROCESSING_ERROR}, 500

    return {"success": SUCCESS_MESSAGES[intent]}, 200
