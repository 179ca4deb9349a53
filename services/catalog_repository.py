"""
Catalog Repository - categories and products.
"""

import logging
from typing import Dict, List

from sqlalchemy.orm import Session, selectinload

from database.models import Category, Product
from errors import InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Repository for catalog operations. The catalog is shared by all users."""

    def __init__(self, session: Session):
        self.session = session

    def _get_category(self, category_id: str) -> Category:
        category = self.session.query(Category).filter(Category.id == category_id).first()
        if not category:
            raise NotFoundError('Category not found')
        return category

    def _get_product(self, product_id: str) -> Product:
        product = self.session.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise NotFoundError('Product not found')
        return product

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    def list_categories(self) -> List[Dict]:
        categories = self.session.query(Category).options(
            selectinload(Category.products)
        ).order_by(Category.name).all()
        return [c.to_dict(include_products=True) for c in categories]

    def create_category(self, data: Dict) -> Dict:
        category = Category(name=data['name'], description=data.get('description'))
        self.session.add(category)
        self.session.flush()
        logger.info(f"Created category: {category.id}")
        return category.to_dict()

    def update_category(self, category_id: str, data: Dict) -> Dict:
        category = self._get_category(category_id)
        category.name = data['name']
        category.description = data.get('description')
        self.session.flush()
        logger.info(f"Updated category: {category_id}")
        return category.to_dict()

    def delete_category(self, category_id: str) -> None:
        """Refuses to delete a category that still has products filed under it."""
        category = self._get_category(category_id)

        product_count = self.session.query(Product).filter(
            Product.category_id == category_id
        ).count()
        if product_count:
            raise InvalidStateError(
                f"Category still has {product_count} product(s); move or delete them first"
            )

        self.session.delete(category)
        self.session.flush()
        logger.info(f"Deleted category: {category_id}")

    # =========================================================================
    # PRODUCTS
    # =========================================================================

    def list_products(self) -> List[Dict]:
        products = self.session.query(Product).options(
            selectinload(Product.category)
        ).order_by(Product.name).all()
        return [p.to_dict(include_category=True) for p in products]

    def create_product(self, data: Dict) -> Dict:
        self._get_category(data['category_id'])

        product = Product(
            category_id=data['category_id'],
            name=data['name'],
            type=data['type'],
            materials=data.get('materials', []),
            unit_cost=data['unit_cost'],
            description=data.get('description')
        )
        self.session.add(product)
        self.session.flush()
        logger.info(f"Created product: {product.id}")
        return product.to_dict(include_category=True)

    def update_product(self, product_id: str, data: Dict) -> Dict:
        product = self._get_product(product_id)
        self._get_category(data['category_id'])

        for key in ['category_id', 'name', 'type', 'materials', 'unit_cost', 'description']:
            setattr(product, key, data.get(key))

        self.session.flush()
        self.session.expire(product, ['category'])
        logger.info(f"Updated product: {product_id}")
        return product.to_dict(include_category=True)

    def delete_product(self, product_id: str) -> None:
        product = self._get_product(product_id)
        self.session.delete(product)
        self.session.flush()
        logger.info(f"Deleted product: {product_id}")
