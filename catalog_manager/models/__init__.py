# Package exports - these allow cleaner imports like:
# from catalog_manager.models import Product, Supplier
# Used by alembic/env.py for migration autogenerate
from catalog_manager.models.user import User
from catalog_manager.models.supplier import Supplier
from catalog_manager.models.product import Product
from catalog_manager.models.product_image import ProductImage
