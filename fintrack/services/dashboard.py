import calendar

from sqlalchemy.orm import Session

from fintrack import crud
from fintrack.services.cache import DASHBOARD, ResponseCache, cache_key
from fintrack.utils.server_time import from_storage, month_bounds, server_now


def percent_change(current: float, previous: float) -> str:
    if previous == 0:
        change = 100.0 if current > 0 else 0.0
    else:
        change = (current - previous) / previous * 100
    return f"{change:.2f}%"


def _shift_month(year: int, month: int, delta: int):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


class DashboardService:
    def __init__(self, db: Session, cache: ResponseCache):
        self.db = db
        self.cache = cache

    def _month_total(self, owner_id: str, type: str, year: int, month: int) -> float:
        start, end = month_bounds(month, year)
        return crud.transaction.total(self.db, owner_id=owner_id, type=type, start=start, end=end)

    def build(self, owner_id: str) -> dict:
        now = server_now()
        total_income = crud.transaction.total(self.db, owner_id=owner_id, type="income")
        total_expenses = crud.transaction.total(self.db, owner_id=owner_id, type="expense")

        last_year, last_month = _shift_month(now.year, now.month, -1)
        last_month_income = self._month_total(owner_id, "income", last_year, last_month)
        last_month_expenses = self._month_total(owner_id, "expense", last_year, last_month)

        card_data = [
            {"title": "Total Income", "value": total_income,
             "percentage": percent_change(total_income, last_month_income), "type": "plus"},
            {"title": "Total Expenses", "value": total_expenses,
             "percentage": percent_change(total_expenses, last_month_expenses), "type": "minus"},
            {"title": "Last Month Income", "value": last_month_income, "percentage": None, "type": None},
            {"title": "Last Month Expenses", "value": last_month_expenses, "percentage": None, "type": None},
        ]

        monthly_overview = []
        for offset in range(5, -1, -1):
            year, month = _shift_month(now.year, now.month, -offset)
            monthly_overview.append({
                "month": calendar.month_name[month],
                "income": self._month_total(owner_id, "income", year, month),
                "expenses": self._month_total(owner_id, "expense", year, month),
            })

        recent = [
            {
                "date": from_storage(t.date).strftime("%d-%m-%Y"),
                "allocationName": name or "N/A",
                "amount": t.amount,
                "description": t.description,
            }
            for t, name in crud.transaction.recent(self.db, owner_id=owner_id, limit=6)
        ]

        return {
            "cardData": card_data,
            "monthlyOverview": monthly_overview,
            "recentTransactions": recent,
        }

    def get(self, owner_id: str) -> dict:
        return self.cache.cached(cache_key(DASHBOARD, owner_id, "summary"), DASHBOARD, lambda: self.build(owner_id))
