from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query

from studio_pos.api.deps import get_current_operator, get_store
from studio_pos.api.views import transaction_view
from studio_pos.domain.models import Operator
from studio_pos.domain.schemas import ReportSummaryOut, TransactionOut
from studio_pos.repos.sql_store import SqlStudioStore
from studio_pos.services.report_service import ReportService

router = APIRouter(tags=["reports"])


def get_service(store: SqlStudioStore = Depends(get_store)) -> ReportService:
    return ReportService(store)


@router.get("/transactions", response_model=List[TransactionOut])
def list_transactions(
    start: date | None = Query(None),
    end: date | None = Query(None),
    operator: Operator = Depends(get_current_operator),
    svc: ReportService = Depends(get_service),
):
    return [transaction_view(t) for t in svc.list_transactions(start, end)]


@router.get("/reports/summary", response_model=ReportSummaryOut)
def report_summary(
    start: date | None = Query(None),
    end: date | None = Query(None),
    operator: Operator = Depends(get_current_operator),
    svc: ReportService = Depends(get_service),
):
    """Revenue and volume for ``start``..``end`` plus today's figures."""
    return svc.summary(start, end)
