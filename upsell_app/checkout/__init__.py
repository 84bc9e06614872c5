from .storefront import (
    CartChangeResult,
    CartLine,
    StorefrontCart,
    StorefrontClient,
    UpsellApiClient,
    UpsellProduct,
    normalize_product_id,
)
from .widget import (
    ActionState,
    CheckoutWidget,
    WidgetState,
    available_products,
    create_checkout_widget,
)

__all__ = [
    "ActionState",
    "CartChangeResult",
    "CartLine",
    "CheckoutWidget",
    "StorefrontCart",
    "StorefrontClient",
    "UpsellApiClient",
    "UpsellProduct",
    "WidgetState",
    "available_products",
    "create_checkout_widget",
    "normalize_product_id",
]
