"""
services/export_service.py
---------------------------
Generates CSV and Excel exports of an owner's ledger.
"""

import io
from typing import Optional

import pandas as pd

from models.expense import ExpenseFilter
from repositories.expense_repo import ExpenseRepository
from utils.logger import get_logger

logger = get_logger(__name__)

COLUMNS = ["ID", "Category", "Amount", "Currency", "Date"]


class ExportService:
    """Generates downloadable expense reports in CSV and Excel formats."""

    def __init__(self, expense_repo=None):
        self.repo = expense_repo or ExpenseRepository()

    def _frame(self, owner: str, filters: Optional[ExpenseFilter]) -> pd.DataFrame:
        """Matching expenses as a DataFrame, newest first."""
        expenses = self.repo.search(owner, filters or ExpenseFilter())
        data = [
            {
                "ID": e.id,
                "Category": e.category,
                "Amount": f"{e.amount:.2f}",
                "Currency": e.currency,
                "Date": e.date.strftime("%d-%m-%Y %H:%M"),
            }
            for e in expenses
        ]
        return pd.DataFrame(data, columns=COLUMNS)

    def export_csv(self, owner: str, filters: Optional[ExpenseFilter] = None) -> io.BytesIO:
        """
        Export the owner's expenses as a CSV file.

        Args:
            owner: Username.
            filters: Optional search filters (default: whole ledger).

        Returns:
            A BytesIO buffer containing UTF-8 CSV data.
        """
        df = self._frame(owner, filters)
        buffer = io.BytesIO()
        df.to_csv(buffer, index=False, encoding="utf-8")
        buffer.seek(0)
        logger.info(f"Exported {len(df)} records as CSV for {owner}")
        return buffer

    def export_excel(self, owner: str, filters: Optional[ExpenseFilter] = None) -> io.BytesIO:
        """
        Export the owner's expenses as an Excel (.xlsx) file with a
        transactions sheet and a per-category summary sheet.

        Returns:
            A BytesIO buffer containing the workbook.
        """
        df = self._frame(owner, filters)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Expenses", index=False)

            if not df.empty:
                amounts = df.assign(Amount=df["Amount"].astype(float))
                summary = amounts.groupby("Category")["Amount"].sum().round(2).reset_index()
                summary.columns = ["Category", "Total"]
                summary = summary.sort_values(["Total", "Category"], ascending=[False, True])
                summary.to_excel(writer, sheet_name="Summary", index=False)

        buffer.seek(0)
        logger.info(f"Exported {len(df)} records as Excel for {owner}")
        return buffer
