import click
from flask.cli import AppGroup

from . import db
from .models import Shop, UpsellItem

upsell_cli = AppGroup("upsell", help="Inspect and maintain the upsell database.")


@upsell_cli.command("stats")
def stats():
    """Print row counts and each shop's selected products."""
    click.echo("=== Row Counts ===")
    click.echo(f"Shops: {Shop.query.count()}")
    click.echo(f"Upsell items: {UpsellItem.query.count()}")

    click.echo("\n=== Shops ===")
    for shop in Shop.query.order_by(Shop.shopify_domain).all():
        product_ids = ", ".join(item.shopify_product_id for item in shop.upsell_items) or "-"
        click.echo(f"ID: {shop.id}, Domain: {shop.shopify_domain}, Products: {product_ids}")


@upsell_cli.command("drop-db")
@click.confirmation_option(prompt="Drop all tables?")
def drop_db():
    db.drop_all()
    click.echo("Database and all tables deleted successfully.")
