"""
BileMo API — Customer Route Handlers
======================================

What:  /api/customers list, detail, create, update, delete.
Who:   Administrators only (ROLE_ADMIN on every operation).

Caching Strategy:
    GET /api/customers is served from the list cache (key
    getAllCustomers-<page>-<limit>, tag customersCache). Customer pages
    embed user summaries, so user writes evict them as well.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.cache import ListCache, get_list_cache
from app.database import get_db_session
from app.routes.pagination import Page, pagination
from app.schemas.common import ErrorResponse
from app.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from app.security.authorization import Action, Principal
from app.security.dependencies import authorized
from app.services.customer_service import customer_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Customers"])

_errors = {
    401: {"description": "Missing or expired JWT", "model": ErrorResponse},
    403: {"description": "Administrators only", "model": ErrorResponse},
}


@router.get(
    "/customers",
    responses={200: {"description": "Page of customers (JSON array)"}, **_errors},
    summary="List customers",
)
async def list_customers(
    principal: Principal = Depends(authorized("customers", Action.LIST)),
    pager: Page = Depends(pagination),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> Response:
    payload = await customer_service.list_customers(db, cache, pager.page, pager.limit)
    return Response(content=payload, media_type="application/json")


@router.get(
    "/customers/{customer_id}",
    response_model=CustomerRead,
    responses={404: {"description": "Customer not found", "model": ErrorResponse}, **_errors},
    summary="Get a single customer",
)
async def get_customer(
    customer_id: int,
    principal: Principal = Depends(authorized("customers", Action.DETAIL)),
    db: AsyncSession = Depends(get_db_session),
) -> CustomerRead:
    return await customer_service.get_customer(db, customer_id)


@router.post(
    "/customers",
    status_code=201,
    response_model=CustomerRead,
    responses={
        400: {"description": "Invalid customer", "model": ErrorResponse},
        404: {"description": "idUser does not exist", "model": ErrorResponse},
        **_errors,
    },
    summary="Create a customer",
)
async def create_customer(
    payload: CustomerCreate,
    request: Request,
    response: Response,
    principal: Principal = Depends(authorized("customers", Action.CREATE)),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> CustomerRead:
    customer = await customer_service.create_customer(db, cache, payload)
    response.headers["Location"] = str(
        request.url_for("get_customer", customer_id=customer.id)
    )
    return customer


@router.put(
    "/customers/{customer_id}",
    status_code=204,
    response_class=Response,
    responses={
        400: {"description": "Invalid customer", "model": ErrorResponse},
        404: {"description": "Customer or idUser not found", "model": ErrorResponse},
        **_errors,
    },
    summary="Update a customer",
)
async def update_customer(
    customer_id: int,
    changes: CustomerUpdate,
    principal: Principal = Depends(authorized("customers", Action.UPDATE)),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> Response:
    await customer_service.update_customer(db, cache, customer_id, changes)
    return Response(status_code=204)


@router.delete(
    "/customers/{customer_id}",
    status_code=204,
    response_class=Response,
    responses={404: {"description": "Customer not found", "model": ErrorResponse}, **_errors},
    summary="Delete a customer",
)
async def delete_customer(
    customer_id: int,
    principal: Principal = Depends(authorized("customers", Action.DELETE)),
    db: AsyncSession = Depends(get_db_session),
    cache: ListCache = Depends(get_list_cache),
) -> Response:
    await customer_service.delete_customer(db, cache, customer_id)
    return Response(status_code=204)
