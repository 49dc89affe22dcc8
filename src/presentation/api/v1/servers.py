"""Server provisioning API endpoints."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from application.services.provisioning_service import MutationResult, ProvisioningService
from domain.models.pricing import CENT
from domain.models.resources import LimitCatalog
from infrastructure.container import get_limit_catalog, get_provisioning_service

from ...middleware.account_context import AccountContext, get_current_account
from .schemas import (
    CostBreakdownOut,
    CreateServerRequest,
    ErrorEnvelope,
    LimitCatalogEnvelope,
    LimitCatalogOut,
    ModifyServerRequest,
    MutationEnvelope,
    QuoteEnvelope,
    QuoteRequest,
    RenewalQuoteEnvelope,
    RenewalQuoteOut,
)

router = APIRouter(tags=["Servers"])

ServerID = Annotated[str, Path(min_length=1, description="Panel server identifier.")]
CurrentAccount = Annotated[AccountContext, Depends(get_current_account)]
Service = Annotated[ProvisioningService, Depends(get_provisioning_service)]

_MUTATION_RESPONSES = {
    400: {"description": "Validation, lifecycle or balance violation.", "model": ErrorEnvelope},
    401: {"description": "No authenticated account.", "model": ErrorEnvelope},
    404: {"description": "Server not found.", "model": ErrorEnvelope},
    500: {"description": "Backend unreachable or malformed response.", "model": ErrorEnvelope},
}


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _envelope(result: MutationResult) -> MutationEnvelope:
    return MutationEnvelope(
        data=result.data,
        charged=_money(result.charged) if result.charged is not None else None,
        breakdown=CostBreakdownOut.from_domain(result.breakdown) if result.breakdown else None,
    )


@router.get(
    "/limits",
    response_model=LimitCatalogEnvelope,
    summary="Resource limit catalog",
)
def get_limits(
    catalog: LimitCatalog = Depends(get_limit_catalog),
) -> LimitCatalogEnvelope:
    return LimitCatalogEnvelope(data=LimitCatalogOut.from_domain(catalog))


@router.post(
    "/servers/quote",
    response_model=QuoteEnvelope,
    summary="Price a resource bundle",
    responses={400: _MUTATION_RESPONSES[400], 500: _MUTATION_RESPONSES[500]},
)
def quote_server(body: QuoteRequest, service: Service) -> QuoteEnvelope:
    breakdown = service.quote(body.to_bundle())
    return QuoteEnvelope(data=CostBreakdownOut.from_domain(breakdown))


@router.post(
    "/servers",
    response_model=MutationEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a server",
    responses=_MUTATION_RESPONSES,
)
def create_server(
    body: CreateServerRequest,
    account: CurrentAccount,
    service: Service,
) -> MutationEnvelope:
    result = service.create(account.account_id, body.to_bundle(), body.to_options())
    return _envelope(result)


@router.patch(
    "/servers/{server_id}",
    response_model=MutationEnvelope,
    summary="Resize a server",
    responses=_MUTATION_RESPONSES,
)
def modify_server(
    server_id: ServerID,
    body: ModifyServerRequest,
    account: CurrentAccount,
    service: Service,
) -> MutationEnvelope:
    result = service.modify(account.account_id, server_id, body.to_bundle(), body.to_options())
    return _envelope(result)


@router.get(
    "/servers/{server_id}/renewal-quote",
    response_model=RenewalQuoteEnvelope,
    summary="Price a renewal",
    responses=_MUTATION_RESPONSES,
)
def get_renewal_quote(
    server_id: ServerID,
    account: CurrentAccount,
    service: Service,
) -> RenewalQuoteEnvelope:
    quote = service.quote_renewal(account.account_id, server_id)
    return RenewalQuoteEnvelope(
        data=RenewalQuoteOut(
            server_id=quote.server_id,
            breakdown=CostBreakdownOut.from_domain(quote.breakdown),
            balance=_money(quote.balance),
            remaining_after=_money(quote.remaining_after),
            days_until_expiry=quote.days_until_expiry,
            renewable=quote.renewable,
            affordable=quote.affordable,
        )
    )


@router.post(
    "/servers/{server_id}/renew",
    response_model=MutationEnvelope,
    summary="Renew a server",
    responses=_MUTATION_RESPONSES,
)
def renew_server(
    server_id: ServerID,
    account: CurrentAccount,
    service: Service,
) -> MutationEnvelope:
    return _envelope(service.renew(account.account_id, server_id))


@router.delete(
    "/servers/{server_id}",
    response_model=MutationEnvelope,
    summary="Delete a server",
    responses=_MUTATION_RESPONSES,
)
def delete_server(
    server_id: ServerID,
    account: CurrentAccount,
    service: Service,
) -> MutationEnvelope:
    return _envelope(service.delete(account.account_id, server_id))
