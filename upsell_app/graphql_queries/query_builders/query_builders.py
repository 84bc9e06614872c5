from jinja2 import Environment, FileSystemLoader
import os


class GraphQLQueryBuilder:
    def __init__(self, template_filename):
        base_dir = os.path.dirname(os.path.dirname(__file__))  # /graphql_queries/
        template_dir = os.path.join(base_dir, 'templates')
        self.env = Environment(loader=FileSystemLoader(template_dir))
        self.template = self.env.get_template(template_filename)

    def render(self, **kwargs):
        return self.template.render(**kwargs)


class AllProductQueryBuilder(GraphQLQueryBuilder):
    """Admin API catalog page: id, title, first image and first variant price."""

    def __init__(self):
        super().__init__("get_all_products.graphql.j2")

    def build(self, images_limit=1, variants_limit=1):
        return self.render(images_limit=images_limit, variants_limit=variants_limit)


class ProductNodesQueryBuilder(GraphQLQueryBuilder):
    """Storefront API batch lookup of products by global id."""

    def __init__(self):
        super().__init__("get_product_nodes.graphql.j2")

    def build(self, images_limit=1, variants_limit=1):
        return self.render(images_limit=images_limit, variants_limit=variants_limit)


class CartLinesQueryBuilder(GraphQLQueryBuilder):
    def __init__(self):
        super().__init__("get_cart_lines.graphql.j2")

    def build(self, lines_limit=250):
        return self.render(lines_limit=lines_limit)


class CartLinesAddMutationBuilder(GraphQLQueryBuilder):
    def __init__(self):
        super().__init__("cart_lines_add.graphql.j2")

    def build(self):
        return self.render()
