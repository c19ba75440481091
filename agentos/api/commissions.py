"""
Commission API endpoints
Calculate, simulate and report agent commissions
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from agentos.schemas.commission import CommissionCalculateRequest, CommissionSimulateRequest
from agentos.core.dependencies import get_commission_service
from agentos.services.commission_service import (
    ALREADY_CALCULATED,
    ORDER_NOT_FOUND,
    CommissionService,
)
from agentos.utils.periods import round_currency
from agentos.utils.responses import success_response

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_SIMULATION_AGENT = "AGT-001"


def _sample_orders() -> List[Dict[str, Any]]:
    """Demo orders taken from the shop's real catalogue"""
    return [
        {
            "id": "6940416376922",
            "name": "#3122",
            "total": 71.29,
            "currency": "MYR",
            "customer": {
                "fullName": "J*y (jay_decade)",
                "email": "jay_decade.shopee@example.com",
            },
            "lineItems": [
                {
                    "id": "19133572317274",
                    "title": "Kurung Batik Alana & Kemeja Dm-Sedondon Moden-Satin Valentino-XS-5XL",
                    "quantity": 1,
                    "price": 88,
                    "vendor": "DESA MURNI BATIK KILANG",
                }
            ],
            "createdAt": "2025-08-23T05:59:40.000Z",
            "financialStatus": "paid",
        },
        {
            "id": "6978250635354",
            "name": "#TEST-BM",
            "total": 95.00,
            "currency": "MYR",
            "customer": {
                "fullName": "Ahmad Testing",
                "email": "ahmad@test.com",
            },
            "lineItems": [
                {
                    "id": "19999999999999",
                    "title": "ADAM TRADISIONAL K1 INDIGO - Baju Melayu Pesak Satin Paloma",
                    "quantity": 1,
                    "price": 95,
                    "vendor": "DESA MURNI BATIK HQ",
                }
            ],
            "createdAt": datetime.now(timezone.utc).isoformat(),
            "financialStatus": "paid",
        },
    ]


@router.post("/calculate")
def calculate_commission(
    payload: CommissionCalculateRequest,
    service: CommissionService = Depends(get_commission_service)
):
    """
    Calculate commission from order data

    - **order**: Order document (id, total and lineItems are required)
    - **agentId**: Agent ID
    """
    if not payload.order or not payload.agent_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Order data and agent ID are required"
        )

    logger.info(f"Calculating commission for order {payload.order.get('id', 'unknown')} -> agent {payload.agent_id}")

    result = service.calculate_order_commission(payload.order, payload.agent_id)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)

    return success_response(
        data=result.commission,
        message=f"Commission calculated: RM {result.commission.total_commission:.2f}"
    )


@router.get("/calculate/{order_id}/{agent_id}")
def calculate_commission_for_order(
    order_id: str,
    agent_id: str,
    service: CommissionService = Depends(get_commission_service)
):
    """
    Calculate commission for a synced order

    - **order_id**: Order ID in the order store
    - **agent_id**: Agent ID
    """
    logger.info(f"Calculating commission for order {order_id} -> agent {agent_id}")

    result = service.calculate_commission_for_existing_order(order_id, agent_id)
    if not result.success:
        if result.code == ORDER_NOT_FOUND:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
        if result.code == ALREADY_CALCULATED:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.error)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)

    return success_response(
        data=result.commission,
        message=f"Commission calculated: RM {result.commission.total_commission:.2f}"
    )


@router.get("/agent/{agent_id}")
def get_agent_commissions(
    agent_id: str,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: int = Query(50, ge=1, le=500),
    service: CommissionService = Depends(get_commission_service)
):
    """
    Get an agent's commission history

    - **startDate** / **endDate**: Optional inclusive period on calculation time
    - **limit**: Maximum number of records
    """
    result = service.store.get_agent_commissions(agent_id, start_date, end_date)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)

    commissions = result.data[:limit]
    total_commission = sum(c.total_commission for c in commissions)
    total_orders = len(commissions)

    return success_response(data={
        "commissions": commissions,
        "summary": {
            "totalCommission": round_currency(total_commission),
            "totalOrders": total_orders,
            "averageCommission": round_currency(total_commission / total_orders) if total_orders else 0.0,
            "period": {
                "startDate": start_date.isoformat() if start_date else None,
                "endDate": end_date.isoformat() if end_date else None,
            },
        },
    })


@router.get("/agent/{agent_id}/summary")
def get_agent_commission_summary(
    agent_id: str,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    service: CommissionService = Depends(get_commission_service)
):
    """Totals, status split and monthly breakdown for an agent"""
    result = service.get_agent_commission_summary(agent_id, start_date, end_date)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.error)

    return success_response(data=result.data)


@router.post("/simulate")
def simulate_commissions(
    payload: Optional[CommissionSimulateRequest] = None,
    service: CommissionService = Depends(get_commission_service)
):
    """
    Simulate commissions on demo orders, nothing is saved

    - **agentId**: Agent ID (default AGT-001)
    """
    agent_id = (payload.agent_id if payload else None) or DEFAULT_SIMULATION_AGENT

    commissions = []
    for order in _sample_orders():
        result = service.calculate_order_commission(order, agent_id, persist=False)
        if result.success:
            commissions.append(result.commission)

    total_commission = sum(c.total_commission for c in commissions)

    return success_response(
        data={
            "commissions": commissions,
            "summary": {
                "totalOrders": len(commissions),
                "totalCommission": round_currency(total_commission),
                "averageCommission": round_currency(total_commission / len(commissions)) if commissions else 0.0,
            },
        },
        message=f"Simulated {len(commissions)} commission calculations"
    )


@router.get("/rates")
def get_commission_rates(
    service: CommissionService = Depends(get_commission_service)
):
    """Commission rate configuration"""
    return success_response(
        data=service.rates(),
        message="Commission rates configuration"
    )
