"""
BileMo API — Product Route Handlers
=====================================

What:  /api/products list, detail, create, update, delete.
Who:   Any authenticated principal can read; only admins can write.

Caching Strategy:
    GET /api/products is served from the list cache (key
    getAllProducts-<page>-<limit>, tag productsCache). The payload is the
    stored JSON text, returned byte-for-byte on every hit.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache import ListCache, get_list_cache
from app.database import get_db_session
from app.routes.pagination import Page, pagination
from app.schemas.common import ErrorResponse
from app.schemas.product import ProductRead, ProductUpdate, ProductWrite
from app.security.authorization import Action, Principal
from app.security.dependencies import authorized
from app.services.product_service import product_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Products"])

_errors = {
    401: {"description": "Missing or expired JWT", "model": ErrorResponse},
    403: {"description": "Insufficient rights", "model": ErrorResponse},
}


@router.get(
    "/products",
    responses={200: {"description": "Page of products (JSON array)"}, **_errors},
    summary="List products",
)
async def list_products(
    principal: Principal = Depends(authorized("products", Action.LIST)),
    pager: Page = Depends(pagination),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> Response:
    payload = await product_service.list_products(db, cache, pager.page, pager.limit)
    return Response(content=payload, media_type="application/json")


@router.get(
    "/products/{product_id}",
    response_model=ProductRead,
    responses={404: {"description": "Product not found", "model": ErrorResponse}, **_errors},
    summary="Get a single product",
)
async def get_product(
    product_id: int,
    principal: Principal = Depends(authorized("products", Action.DETAIL)),
    db: AsyncSession = Depends(get_db_session),
) -> ProductRead:
    return await product_service.get_product(db, product_id)


@router.post(
    "/products",
    status_code=201,
    response_model=ProductRead,
    responses={400: {"description": "Invalid product", "model": ErrorResponse}, **_errors},
    summary="Create a product",
)
async def create_product(
    payload: ProductWrite,
    request: Request,
    response: Response,
    principal: Principal = Depends(authorized("products", Action.CREATE)),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> ProductRead:
    product = await product_service.create_product(db, cache, payload)
    response.headers["Location"] = str(request.url_for("get_product", product_id=product.id))
    return product


@router.put(
    "/products/{product_id}",
    status_code=204,
    response_class=Response,
    responses={
        400: {"description": "Invalid product", "model": ErrorResponse},
        404: {"description": "Product not found", "model": ErrorResponse},
        **_errors,
    },
    summary="Update a product",
)
async def update_product(
    product_id: int,
    changes: ProductUpdate,
    principal: Principal = Depends(authorized("products", Action.UPDATE)),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> Response:
    await product_service.update_product(db, cache, product_id, changes)
    return Response(status_code=204)


@router.delete(
    "/products/{product_id}",
    status_code=204,
    response_class=Response,
    responses={404: {"description": "Product not found", "model": ErrorResponse}, **_errors},
    summary="Delete a product",
)
async def delete_product(
    product_id: int,
    principal: Principal = Depends(authorized("products", Action.DELETE)),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> Response:
    await product_service.delete_product(db, cache, product_id)
    return Response(status_code=204)
