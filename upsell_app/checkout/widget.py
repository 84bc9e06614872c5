"""The "You might also like" checkout block.

The widget loads the shop's upsell products once on mount, then filters them
against the live cart every time it renders. Anything that goes wrong while
loading leaves the block empty; checkout itself is never affected.
"""
import atexit
import enum
import logging
import os
import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger
from jinja2 import Environment, FileSystemLoader, select_autoescape

from .storefront import (
    StorefrontCart,
    StorefrontClient,
    UpsellApiClient,
    normalize_product_id,
)

logger = logging.getLogger(__name__)

ERROR_BANNER_SECONDS = 3
ERROR_MESSAGE = "There was an issue adding this product. Please try again."
PLACEHOLDER_IMAGE = (
    "https://cdn.shopify.com/s/files/1/0533/2089/files/"
    "placeholder-images-image_medium.png?format=webp&v=1530129081"
)
CURRENCY_SYMBOLS = {"USD": "$", "CAD": "$", "AUD": "$", "EUR": "€", "GBP": "£"}

_template_env = Environment(
    loader=FileSystemLoader(os.path.join(os.path.dirname(__file__), "templates")),
    autoescape=select_autoescape(["html", "j2"]),
)


class WidgetState(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    EMPTY = "empty"
    READY = "ready"


class ActionState(enum.Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


def available_products(products, cart_lines):
    """Products with none of their variants already in the cart."""
    in_cart = {line.merchandise_id for line in cart_lines}
    return [
        product for product in products
        if not any(variant_id in in_cart for variant_id in product.variant_ids)
    ]


def format_price(amount, currency_code=None):
    try:
        value = f"{Decimal(amount):.2f}"
    except (InvalidOperation, TypeError):
        value = str(amount)
    symbol = CURRENCY_SYMBOLS.get(currency_code)
    if symbol:
        return f"{symbol}{value}"
    if currency_code:
        return f"{value} {currency_code}"
    return value


def _utcnow():
    return datetime.now(timezone.utc)


class CheckoutWidget:
    def __init__(self, shop_domain, upsell_api, storefront, cart, scheduler, clock=_utcnow,
                 owns_scheduler=False):
        self.shop_domain = shop_domain
        self.upsell_api = upsell_api
        self.storefront = storefront
        self.cart = cart
        self.scheduler = scheduler
        self.clock = clock
        self.owns_scheduler = owns_scheduler

        self.state = WidgetState.IDLE
        self.products = []
        self.show_error = False
        self._action_states = {}
        self._lock = threading.Lock()

    def mount(self):
        self.state = WidgetState.LOADING
        try:
            product_ids = self.upsell_api.get_product_ids(self.shop_domain)
            if product_ids:
                gids = [normalize_product_id(pid) for pid in product_ids]
                self.products = self.storefront.fetch_products(gids)
            else:
                self.products = []
        except Exception:
            logger.warning("[Widget] Could not load upsell products for %s", self.shop_domain, exc_info=True)
            self.products = []

        self.state = WidgetState.READY if self.products else WidgetState.EMPTY
        return self.state

    def action_state(self, variant_id):
        with self._lock:
            return self._action_states.get(variant_id, ActionState.IDLE)

    def is_adding(self, variant_id):
        return self.action_state(variant_id) is ActionState.IN_FLIGHT

    def available_products(self, cart_lines=None):
        if cart_lines is None:
            cart_lines = self.cart.lines()
        return available_products(self.products, cart_lines)

    def press_add_to_cart(self, variant_id):
        with self._lock:
            self._action_states[variant_id] = ActionState.IN_FLIGHT
        self.scheduler.add_job(self._apply_add_to_cart, args=[variant_id])

    def _apply_add_to_cart(self, variant_id):
        try:
            result = self.cart.add_line(variant_id, quantity=1)
            failed = result.is_error
        except Exception:
            logger.warning("[Widget] Add to cart failed for %s", variant_id, exc_info=True)
            failed = True
        finally:
            with self._lock:
                self._action_states[variant_id] = ActionState.IDLE

        if failed:
            self._show_error_banner()

    def _show_error_banner(self):
        with self._lock:
            if self.show_error:
                return
            self.show_error = True
        run_date = self.clock() + timedelta(seconds=ERROR_BANNER_SECONDS)
        # A busy executor can start this late; it must still run
        self.scheduler.add_job(
            self._dismiss_error,
            trigger=DateTrigger(run_date=run_date),
            misfire_grace_time=None,
            coalesce=True,
        )

    def _dismiss_error(self):
        with self._lock:
            self.show_error = False

    def is_error_visible(self):
        with self._lock:
            return self.show_error

    def close(self):
        """Stop the scheduler if this widget started it."""
        if self.owns_scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        atexit.unregister(self.close)

    def render(self):
        if self.state is WidgetState.LOADING:
            return _template_env.get_template("loading.html.j2").render()
        if self.state is not WidgetState.READY:
            return ""

        try:
            cart_lines = self.cart.lines()
        except Exception:
            logger.warning("[Widget] Could not read cart lines", exc_info=True)
            return ""

        products = self.available_products(cart_lines)
        if not products:
            return ""

        cards = [
            {
                "title": product.title,
                "variant_id": product.variant_id,
                "image_url": product.image_url or PLACEHOLDER_IMAGE,
                "price": format_price(product.price_amount, product.currency_code),
                "loading": self.is_adding(product.variant_id),
            }
            for product in products
        ]
        return _template_env.get_template("upsell_block.html.j2").render(
            products=cards,
            show_error=self.is_error_visible(),
            error_message=ERROR_MESSAGE,
        )


def create_checkout_widget(app_url, shop_domain, storefront_token, cart_id, scheduler=None):
    """Wire a widget to the real endpoints, with a started background scheduler.

    A scheduler created here is shut down by ``widget.close()`` or at exit.
    """
    owns_scheduler = scheduler is None
    if owns_scheduler:
        scheduler = BackgroundScheduler()
        scheduler.start()
    client = StorefrontClient(shop_domain, storefront_token)
    widget = CheckoutWidget(
        shop_domain=shop_domain,
        upsell_api=UpsellApiClient(app_url),
        storefront=client,
        cart=StorefrontCart(client, cart_id),
        scheduler=scheduler,
        owns_scheduler=owns_scheduler,
    )
    if owns_scheduler:
        atexit.register(widget.close)
    return widget
