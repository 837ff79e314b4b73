from datetime import date
from typing import Callable

from studio_pos.domain.models import Transaction
from studio_pos.domain.reports import ReportSummary, summarize
from studio_pos.repos.interfaces import StudioStore
from studio_pos.utils import clock


class ReportService:
    def __init__(self, store: StudioStore, today: Callable[[], date] = clock.today):
        self.store = store
        self.today = today

    def list_transactions(
        self, start: date | None = None, end: date | None = None
    ) -> list[Transaction]:
        return self.store.list_transactions(start, end)

    def summary(self, start: date | None = None, end: date | None = None) -> ReportSummary:
        """Statistics for ``start``..``end`` plus today's figures.

        With neither bound the range is today only. A single bound leaves
        the other side open, so ``start`` alone reports everything since.
        """
        today = self.today()
        if start is None and end is None:
            start = end = today
        return summarize(
            self.store.list_transactions(start, end),
            self.store.list_transactions(today, today),
        )
