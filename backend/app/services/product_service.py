"""
BileMo API — Product Service
==============================

What:  Catalogue CRUD. The list operation is served through the list cache;
       every write evicts the `productsCache` tag after committing.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.cache import ListCache
from app.models import Product
from app.repositories import ProductRepository
from app.schemas.product import ProductRead, ProductUpdate, ProductWrite
from app.schemas.views import product_view, render_page
from app.services.validation import merge_changes, revalidate

logger = logging.getLogger(__name__)

KIND = "products"


class ProductService:
    """Stateless; dependencies arrive per call."""

    async def list_products(
        self, db: AsyncSession, cache: ListCache, page: int, limit: int
    ) -> str:
        async def load() -> str:
            products = await ProductRepository(db).find_all_with_pagination(page, limit)
            return render_page([product_view(p) for p in products])

        return await cache.get(KIND, page, limit, load)

    async def get_product(self, db: AsyncSession, product_id: int) -> ProductRead:
        product = await ProductRepository(db).get(product_id)
        return product_view(product)

    async def create_product(
        self, db: AsyncSession, cache: ListCache, payload: ProductWrite
    ) -> ProductRead:
        product = Product(
            name=payload.name,
            description=payload.description,
            price=payload.price,
        )
        await ProductRepository(db).add(product)
        await db.commit()
        cache.invalidate(KIND)
        logger.info("Product %s created", product.id)
        return product_view(product)

    async def update_product(
        self,
        db: AsyncSession,
        cache: ListCache,
        product_id: int,
        changes: ProductUpdate,
    ) -> None:
        product = await ProductRepository(db).get(product_id)
        current = {
            "name": product.name,
            "description": product.description,
            "price": product.price,
        }
        valid = revalidate(ProductWrite, merge_changes(current, changes))

        product.name = valid.name
        product.description = valid.description
        product.price = valid.price
        product.touch()
        await db.commit()
        cache.invalidate(KIND)
        logger.info("Product %s updated", product_id)

    async def delete_product(
        self, db: AsyncSession, cache: ListCache, product_id: int
    ) -> None:
        repository = ProductRepository(db)
        product = await repository.get(product_id)
        await repository.delete(product)
        await db.commit()
        cache.invalidate(KIND)
        logger.info("Product %s deleted", product_id)


product_service = ProductService()
