"""Load NDR shipment snapshots from a CSV export.

Expected header: waybill, nsl_code, attempt_count, with optional order_id
and status_bucket columns. Header names are matched case-insensitively;
cell values are kept verbatim apart from surrounding whitespace, since NSL
codes compare case-sensitively.
"""

import csv
import logging
from pathlib import Path

from ndrdesk.errors.domain import ValidationError
from ndrdesk.services.ndr_types import ShipmentNDRRecord, StatusBucket

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("waybill", "nsl_code", "attempt_count")


def _parse_attempts(value: str, waybill: str, row: int) -> int:
    try:
        attempts = int(value.strip())
    except ValueError:
        raise ValidationError.from_code(
            "E-1003", value=value, waybill=waybill, source=f"row {row}"
        ) from None
    if attempts < 0:
        raise ValidationError.from_code(
            "E-1003", value=value, waybill=waybill, source=f"row {row}"
        )
    return attempts


def _parse_bucket(value: str | None) -> StatusBucket | None:
    if not value or not value.strip():
        return None
    try:
        return StatusBucket(value.strip().lower())
    except ValueError:
        logger.warning("Ignoring unknown status bucket %r", value)
        return None


def load_shipments_csv(path: str | Path) -> list[ShipmentNDRRecord]:
    """Read shipment snapshots from a CSV file.

    Args:
        path: Path to the CSV file.

    Returns:
        Records in file order. Blank rows are skipped.

    Raises:
        ValidationError: E-1001 if a required column is missing, E-1002 if
            the file has no rows, E-1003 for an invalid attempt count.
    """
    path = Path(path)
    records: list[ShipmentNDRRecord] = []
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        header = {name.strip().lower(): name for name in (reader.fieldnames or [])}
        for column in REQUIRED_COLUMNS:
            if column not in header:
                raise ValidationError.from_code("E-1001", column=column)

        # Row 1 is the header.
        for row_number, row in enumerate(reader, start=2):
            waybill = (row.get(header["waybill"]) or "").strip()
            if not waybill:
                continue
            order_col = header.get("order_id")
            bucket_col = header.get("status_bucket")
            records.append(
                ShipmentNDRRecord(
                    waybill=waybill,
                    nsl_code=(row.get(header["nsl_code"]) or "").strip(),
                    attempt_count=_parse_attempts(
                        row.get(header["attempt_count"]) or "", waybill, row_number
                    ),
                    status_bucket=_parse_bucket(row.get(bucket_col) if bucket_col else None),
                    order_id=((row.get(order_col) or "").strip() or None) if order_col else None,
                )
            )

    if not records:
        raise ValidationError.from_code("E-1002", path=str(path))
    logger.info("Loaded %d shipment(s) from %s", len(records), path)
    return records
