"""GET /v1/dashboard - ledger-wide totals and the next installments due"""

from datetime import date
from fastapi import APIRouter, Depends, Query

from debt_ledger.api.dependencies import get_ledger_store
from debt_ledger.api.v1.schemas import DashboardResponse, UpcomingInstallmentSchema
from debt_ledger.domain.aggregation import dashboard_totals, upcoming_installments
from debt_ledger.domain.ledger import LedgerStore

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    upcoming_limit: int = Query(3, ge=0, le=50, description="Number of upcoming installments"),
    store: LedgerStore = Depends(get_ledger_store),
):
    snapshot = store.snapshot
    totals = dashboard_totals(snapshot)
    today = date.today()

    return DashboardResponse(
        total_loaned=totals.total_loaned,
        total_profit=totals.total_profit,
        total_collected=totals.total_collected,
        total_pending=totals.total_pending,
        upcoming=[
            UpcomingInstallmentSchema.from_domain(item, today)
            for item in upcoming_installments(snapshot, upcoming_limit)
        ],
    )
