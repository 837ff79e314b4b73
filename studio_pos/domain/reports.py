"""Sales statistics, reduced straight from committed transactions."""

from dataclasses import dataclass
from typing import Sequence

from studio_pos.domain.models import ItemKind, Transaction


@dataclass(frozen=True)
class ReportSummary:
    total_revenue: int
    today_revenue: int
    total_transactions: int
    today_transactions: int
    studio_sessions: int
    products_sold: int


def summarize(
    in_range: Sequence[Transaction],
    today: Sequence[Transaction],
) -> ReportSummary:
    studio_sessions = 0
    products_sold = 0
    for transaction in in_range:
        for item in transaction.items:
            if item.kind is ItemKind.STUDIO:
                studio_sessions += 1
            else:
                products_sold += item.quantity

    return ReportSummary(
        total_revenue=sum(t.total for t in in_range),
        today_revenue=sum(t.total for t in today),
        total_transactions=len(in_range),
        today_transactions=len(today),
        studio_sessions=studio_sessions,
        products_sold=products_sold,
    )
