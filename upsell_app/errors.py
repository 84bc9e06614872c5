class UpsellError(Exception):
    """Base class for errors raised by the upsell app."""


class ShopNotFound(UpsellError):
    def __init__(self, domain):
        self.domain = domain
        super().__init__(f"Shop with domain {domain} not found")


class ValidationError(UpsellError):
    pass


class ConflictError(UpsellError):
    """A product id is already an upsell item (for this shop or another one)."""


class UpstreamError(UpsellError):
    """Shopify returned an error or a response we could not parse."""
