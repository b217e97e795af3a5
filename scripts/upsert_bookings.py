from __future__ import annotations

import argparse
import csv
import json
import os
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from urllib import error, request


BOOKING_STATUSES = {"pending", "confirmed", "cancelled", "completed"}
PAYMENT_STATUSES = {"pending", "paid", "failed", "refunded"}


def load_env_file(env_path: str) -> None:
    if not os.path.exists(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def normalize_date(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = value.strip()
    if not value:
        return None
    for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y"):
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return None


def normalize_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def normalize_amount(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    value = value.strip().replace(",", "").lstrip("₹")
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def normalize_choice(value: Optional[str], allowed: set[str], default: str) -> str:
    if not value:
        return default
    value = value.strip().lower()
    return value if value in allowed else default


def chunk_rows(rows: Iterable[Dict[str, Any]], size: int) -> Iterable[List[Dict[str, Any]]]:
    batch: List[Dict[str, Any]] = []
    for row in rows:
        batch.append(row)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


def build_booking_payload(row: Dict[str, str]) -> Dict[str, Any]:
    booking_id = (row.get("booking_id") or "").strip()
    property_id = (row.get("property_id") or "").strip()
    check_in = normalize_date(row.get("check_in"))
    check_out = normalize_date(row.get("check_out"))
    if not booking_id or not property_id or not check_in or not check_out:
        return {}
    if check_out <= check_in:
        print(f"Skipping {booking_id}: check_out {check_out} is not after check_in {check_in}")
        return {}

    return {
        "booking_id": booking_id,
        "property_id": property_id,
        "guest_name": (row.get("guest_name") or "").strip(),
        "guest_email": (row.get("guest_email") or "").strip(),
        "guest_phone": (row.get("guest_phone") or "").strip(),
        "check_in": check_in,
        "check_out": check_out,
        "guests": normalize_int(row.get("guests")),
        "total_amount": normalize_amount(row.get("total_amount")) or 0,
        "status": normalize_choice(row.get("status"), BOOKING_STATUSES, "pending"),
        "payment_status": normalize_choice(row.get("payment_status"), PAYMENT_STATUSES, "pending"),
        "special_requests": row.get("special_requests") or "",
    }


def post_batch(url: str, headers: Dict[str, str], payload: List[Dict[str, Any]]) -> None:
    body = json.dumps(payload).encode("utf-8")
    req = request.Request(url, data=body, method="POST", headers=headers)
    try:
        with request.urlopen(req, timeout=60) as response:
            if response.status not in {200, 201, 204}:
                raise RuntimeError(f"Unexpected response: {response.status}")
    except error.HTTPError as exc:
        details = exc.read().decode("utf-8")
        raise RuntimeError(f"HTTP {exc.code}: {details}") from exc


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Import villa bookings from a CSV export into Supabase."
    )
    parser.add_argument("csv_path", help="Path to bookings CSV file")
    parser.add_argument("--batch-size", type=int, default=200, help="Rows per request batch")
    parser.add_argument(
        "--env-file",
        default=os.path.join(os.path.dirname(__file__), "..", ".env"),
        help="Path to .env file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and count rows without writing to Supabase",
    )
    args = parser.parse_args()

    load_env_file(os.path.abspath(args.env_file))

    supabase_url = os.environ.get("SUPABASE_URL")
    service_role_key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
    if not args.dry_run and (not supabase_url or not service_role_key):
        raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in .env")

    endpoint = f"{(supabase_url or '').rstrip('/')}/rest/v1/bookings?on_conflict=booking_id"
    headers = {
        "apikey": service_role_key or "",
        "Authorization": f"Bearer {service_role_key}",
        "Content-Type": "application/json",
        "Prefer": "resolution=merge-duplicates",
    }

    with open(args.csv_path, "r", encoding="utf-8", newline="") as csv_file:
        reader = csv.DictReader(csv_file)
        rows = (build_booking_payload(row) for row in reader)
        rows = (row for row in rows if row)
        total = 0
        for index, batch in enumerate(chunk_rows(rows, args.batch_size), start=1):
            total += len(batch)
            if args.dry_run:
                continue
            post_batch(endpoint, headers, batch)
            print(f"Uploaded batch {index} ({len(batch)} rows)")
    print(f"{'Validated' if args.dry_run else 'Upserted'} {total} bookings")


if __name__ == "__main__":
    main()
