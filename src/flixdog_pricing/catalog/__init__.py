"""Catalog subpackage - products and their pricing fields."""
from .products import Product, ProductCatalog, product_from_row, read_table

__all__ = ['Product', 'ProductCatalog', 'product_from_row', 'read_table']
