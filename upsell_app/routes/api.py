import logging

from flask import request
from flask_cors import cross_origin

from upsell_app.store import get_upsell_store
from upsell_app.utils.response import error_response, json_response
from . import main

logger = logging.getLogger(__name__)


@main.route('/api/upsell', methods=['GET'])
@cross_origin(
    origins="*",
    send_wildcard=True,
    methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)
def upsell_items():
    """Upsell product ids for ``?shopDomain=``, read by the checkout widget."""
    shop_domain = request.args.get('shopDomain', '')

    try:
        shop = get_upsell_store().find_shop_by_domain(shop_domain)
        if shop is None:
            return error_response("Shop not found", 404)
        return json_response([item.to_dict() for item in shop.upsell_items])
    except Exception:
        logger.exception("[API] Failed to load upsell items for %r", shop_domain)
        return error_response("Internal server error", 500)
