"""Daily sales CSV ingestion.

Workflow:
1. Affiliate dashboard export (one account per file) is uploaded
2. Header is checked against the expected Indonesian column layout
3. Rows with the wrong field count or an unreadable date are skipped; pandas
   coerces the metrics and cells that are not numbers become 0
4. Rows are upserted on (account_id, date) - a re-uploaded day replaces the old values
"""
import csv
import io
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd
from sqlalchemy import func
from sqlalchemy.orm import Session

from affiliate_ops.models.account import Account
from affiliate_ops.models.sales import SalesData
from affiliate_ops.services.exceptions import NotFoundError, SalesImportError

logger = logging.getLogger(__name__)

# Column order of the affiliate dashboard export
EXPECTED_HEADERS = [
    "Tanggal",
    "Klik",
    "Pesanan",
    "Komisi Kotor(Rp)",
    "Produk Terjual",
    "Total Pembelian yang Dibuat(Rp)",
    "Pembeli Baru",
]

COLUMN_MAP = {
    "Tanggal": "date",
    "Klik": "clicks",
    "Pesanan": "orders",
    "Komisi Kotor(Rp)": "gross_commission",
    "Produk Terjual": "products_sold",
    "Total Pembelian yang Dibuat(Rp)": "total_purchases",
    "Pembeli Baru": "new_buyers",
}

INT_FIELDS = ("clicks", "orders", "products_sold", "new_buyers")
MONEY_FIELDS = ("gross_commission", "total_purchases")
METRIC_FIELDS = INT_FIELDS + MONEY_FIELDS


def _parse_dates(column: pd.Series) -> pd.Series:
    """ISO dates first, then day-first local formats (01/05/2024)."""
    parsed = pd.to_datetime(column, format="%Y-%m-%d", errors="coerce")
    missing = parsed.isna() & column.astype(str).str.strip().ne("")
    if missing.any():
        fallback = pd.to_datetime(column[missing], dayfirst=True, format="mixed", errors="coerce")
        parsed = parsed.fillna(fallback)
    return parsed


def _to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


def parse_sales_csv(content: Union[bytes, str]) -> Tuple[List[Dict], int]:
    """Parse a sales export into row dicts.

    Returns (rows, skipped_count). Raises SalesImportError when the header
    does not match EXPECTED_HEADERS.
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig")
    if not content.strip():
        raise SalesImportError("Uploaded file is empty")

    try:
        lines = list(csv.reader(io.StringIO(content.strip()), skipinitialspace=True))
    except csv.Error as e:
        raise SalesImportError(f"Could not parse CSV: {e}") from e

    headers = [cell.strip() for cell in lines[0]]
    if headers != EXPECTED_HEADERS:
        raise SalesImportError(
            "Unexpected CSV header. Expected: " + ", ".join(EXPECTED_HEADERS)
        )

    data_lines = [line for line in lines[1:] if any(cell.strip() for cell in line)]
    # A row with too few or too many fields is dropped whole, never zero-filled
    complete = [
        [cell.strip() for cell in line]
        for line in data_lines
        if len(line) == len(EXPECTED_HEADERS)
    ]
    df = pd.DataFrame(complete, columns=[COLUMN_MAP[h] for h in EXPECTED_HEADERS], dtype=str)

    df["date"] = _parse_dates(df["date"])
    df = df[df["date"].notna()].copy()

    for col in METRIC_FIELDS:
        # Thousands separators ("1,500") and stray spaces are not part of the value
        cleaned = df[col].str.replace(r"[\s,]", "", regex=True)
        df[col] = pd.to_numeric(cleaned, errors="coerce").fillna(0)

    rows = []
    for record in df.to_dict("records"):
        row = {"date": record["date"].date()}
        for col in INT_FIELDS:
            row[col] = max(int(record[col]), 0)
        for col in MONEY_FIELDS:
            row[col] = max(_to_money(record[col]), Decimal("0"))
        rows.append(row)

    skipped = len(data_lines) - len(rows)
    return rows, skipped


class SalesImportService:
    """Upload, replace and delete daily sales rows for an account"""

    def __init__(self, db: Session):
        self.db = db

    def _get_account(self, account_id: str) -> Account:
        account = self.db.query(Account).filter(Account.id == account_id).first()
        if not account:
            raise NotFoundError(f"Account {account_id} not found")
        return account

    def upsert_rows(self, account_id: str, rows: List[Dict]) -> Tuple[int, int]:
        """Insert or replace rows keyed on date. Returns (inserted, updated)."""
        # Later rows for the same day win
        by_date: Dict[date, Dict] = {}
        for row in rows:
            by_date[row["date"]] = row
        if not by_date:
            return 0, 0

        existing = {
            s.date: s
            for s in self.db.query(SalesData).filter(
                SalesData.account_id == account_id,
                SalesData.date.in_(list(by_date.keys())),
            )
        }

        inserted = updated = 0
        for day, row in by_date.items():
            current = existing.get(day)
            if current:
                for field in METRIC_FIELDS:
                    setattr(current, field, row[field])
                updated += 1
            else:
                self.db.add(SalesData(account_id=account_id, **row))
                inserted += 1

        self.db.commit()
        return inserted, updated

    def import_csv(self, account_id: str, content: Union[bytes, str]) -> Dict:
        self._get_account(account_id)
        rows, skipped = parse_sales_csv(content)
        inserted, updated = self.upsert_rows(account_id, rows)

        dates = [row["date"] for row in rows]
        logger.info(
            "Sales import for account %s: %d parsed, %d skipped, %d inserted, %d updated",
            account_id, len(rows), skipped, inserted, updated,
        )
        return {
            "account_id": account_id,
            "rows_parsed": len(rows),
            "rows_skipped": skipped,
            "inserted": inserted,
            "updated": updated,
            "start_date": min(dates) if dates else None,
            "end_date": max(dates) if dates else None,
        }

    def delete_sales_data(
        self,
        account_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        """Delete an account's rows, optionally only those inside an inclusive date range."""
        self._get_account(account_id)
        query = self.db.query(SalesData).filter(SalesData.account_id == account_id)
        if start_date and end_date:
            query = query.filter(SalesData.date >= start_date, SalesData.date <= end_date)

        deleted = query.delete(synchronize_session=False)
        self.db.commit()
        logger.info(
            "Deleted %d sales rows for account %s (range %s - %s)",
            deleted, account_id, start_date or "*", end_date or "*",
        )
        return deleted

    def account_date_ranges(self) -> List[Dict]:
        """First/last uploaded day and row count for every account with data."""
        rows = (
            self.db.query(
                SalesData.account_id,
                func.min(SalesData.date),
                func.max(SalesData.date),
                func.count(SalesData.id),
            )
            .group_by(SalesData.account_id)
            .all()
        )
        return [
            {"account_id": account_id, "start_date": start, "end_date": end, "record_count": count}
            for account_id, start, end, count in rows
        ]
