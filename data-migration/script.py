"""
This script imports transactions from CSV files into the finance tracker database.

Expected columns (header names are case-insensitive):
    date, type, category, amount            (required)
    notes, debt                             (optional)

`type` is income, expense or debt_payment. For debt payments, `debt` holds the
name of an existing debt. Every row goes through the same validation as the
API; rows that fail are reported and skipped, the rest are inserted in batches.

Amounts are read as text and parsed as exact decimals, never as floats.

Usage:
    python data-migration/script.py [folder] [--batch-size N]
"""


from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd
import structlog

from db import SessionLocal, engine, Base
from app.errors import ValidationError
from app.log import configure_logging
from app.services.store import RecordStore
from app.services.validation import validate_transaction

logger = structlog.get_logger(__name__)

IMPORT_DIR = Path("data-migration/normalized")

REQUIRED_COLUMNS = {"date", "type", "category", "amount"}


def _none_if_blank(x):
    if x is None or pd.isna(x):
        return None
    s = str(x).strip()
    return None if s == "" or s.lower() == "nan" else s


def row_to_payload(row: dict, store: RecordStore) -> dict:
    """Map one CSV row to an API-shaped transaction body."""
    payload = {
        "type": _none_if_blank(row.get("type")),
        "category": _none_if_blank(row.get("category")),
        "amount": _none_if_blank(row.get("amount")),
        "date": _none_if_blank(row.get("date")),
        "notes": _none_if_blank(row.get("notes")),
    }

    debt_name = _none_if_blank(row.get("debt"))
    if debt_name is not None:
        debt = store.find_debt_by_name(debt_name)
        if debt is None:
            raise ValidationError("debt", f"Unknown debt: {debt_name!r}")
        payload["debtId"] = debt.id

    return payload


def read_transactions_csv(path: Path) -> pd.DataFrame:
    # dtype=str keeps amounts as text until they are parsed as Decimal
    df = pd.read_csv(path, dtype=str, keep_default_na=False)

    # normalize headers
    df.columns = df.columns.str.strip().str.lower()

    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"{path.name}: missing required columns: {sorted(missing)}")

    # drop fully empty rows
    blank = df.apply(lambda col: col.str.strip() == "").all(axis=1)
    return df[~blank].copy()


def import_transactions_from_csvs(
    folder: Path = IMPORT_DIR,
    batch_size: int = 500,
    store: RecordStore | None = None,
) -> dict:
    """
    Import every *.csv in `folder`.

    Without a store, tables are created on the configured database and a
    session is opened for the run. Returns {"inserted": n, "skipped": m}.
    """
    folder = Path(folder)
    csv_files = sorted(folder.glob("*.csv"))
    if not csv_files:
        raise FileNotFoundError(f"No CSV files found in: {folder.resolve()}")

    session = None
    if store is None:
        Base.metadata.create_all(bind=engine)
        session = SessionLocal()
        store = RecordStore(session)

    inserted = skipped = 0

    try:
        for f in csv_files:
            df = read_transactions_csv(f)

            records = []
            for line_no, row in enumerate(df.to_dict(orient="records"), start=2):
                try:
                    payload = row_to_payload(row, store)
                    records.append(validate_transaction(payload, store.debt_exists))
                except ValidationError as exc:
                    skipped += 1
                    logger.warning("row_skipped", file=f.name, line=line_no, field=exc.field, reason=exc.message)

            # insert in batches
            for i in range(0, len(records), batch_size):
                store.create_transactions(records[i : i + batch_size])

            inserted += len(records)
            logger.info("file_imported", file=f.name, rows=len(records))

        logger.info("import_done", inserted=inserted, skipped=skipped)

    finally:
        if session is not None:
            session.close()

    return {"inserted": inserted, "skipped": skipped}


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import transactions from CSV files.")
    parser.add_argument("folder", nargs="?", default=str(IMPORT_DIR))
    parser.add_argument("--batch-size", type=int, default=500)
    args = parser.parse_args()

    configure_logging()
    import_transactions_from_csvs(Path(args.folder), batch_size=args.batch_size)
