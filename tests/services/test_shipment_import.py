"""Tests for CSV shipment import."""

from pathlib import Path

import pytest

from ndrdesk.errors.domain import ValidationError
from ndrdesk.services.ndr_types import StatusBucket
from ndrdesk.services.shipment_import import load_shipments_csv


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "shipments.csv"
    path.write_text(content)
    return path


class TestLoadShipmentsCsv:
    """Tests for load_shipments_csv."""

    def test_minimal_columns(self, tmp_path):
        path = _write(tmp_path, "waybill,nsl_code,attempt_count\nW1,EOD-74,1\nW2,EOD-999,0\n")
        records = load_shipments_csv(path)
        assert [r.waybill for r in records] == ["W1", "W2"]
        assert records[0].nsl_code == "EOD-74"
        assert records[0].attempt_count == 1
        assert records[0].status_bucket is None
        assert records[0].order_id is None

    def test_optional_columns_and_header_case(self, tmp_path):
        path = _write(
            tmp_path,
            "Waybill,NSL_Code,Attempt_Count,Order_ID,Status_Bucket\n"
            "W1,EOD-21,2,ORD-9,action_required\n",
        )
        record = load_shipments_csv(path)[0]
        assert record.order_id == "ORD-9"
        assert record.status_bucket is StatusBucket.ACTION_REQUIRED

    def test_code_values_are_not_case_folded(self, tmp_path):
        path = _write(tmp_path, "waybill,nsl_code,attempt_count\nW1, eod-74 ,0\n")
        assert load_shipments_csv(path)[0].nsl_code == "eod-74"

    def test_blank_rows_skipped(self, tmp_path):
        path = _write(tmp_path, "waybill,nsl_code,attempt_count\nW1,EOD-74,0\n,,\n")
        assert len(load_shipments_csv(path)) == 1

    def test_unknown_bucket_ignored(self, tmp_path):
        path = _write(
            tmp_path, "waybill,nsl_code,attempt_count,status_bucket\nW1,EOD-74,0,lost\n"
        )
        assert load_shipments_csv(path)[0].status_bucket is None

    def test_missing_column(self, tmp_path):
        path = _write(tmp_path, "waybill,nsl_code\nW1,EOD-74\n")
        with pytest.raises(ValidationError) as exc_info:
            load_shipments_csv(path)
        assert exc_info.value.code == "E-1001"
        assert "attempt_count" in exc_info.value.message

    def test_header_only(self, tmp_path):
        path = _write(tmp_path, "waybill,nsl_code,attempt_count\n")
        with pytest.raises(ValidationError) as exc_info:
            load_shipments_csv(path)
        assert exc_info.value.code == "E-1002"

    @pytest.mark.parametrize("value", ["two", "-1", ""])
    def test_invalid_attempt_count(self, tmp_path, value):
        path = _write(tmp_path, f"waybill,nsl_code,attempt_count\nW7,EOD-74,{value}\n")
        with pytest.raises(ValidationError) as exc_info:
            load_shipments_csv(path)
        assert exc_info.value.code == "E-1003"
        assert "W7" in exc_info.value.message
        assert "row 2" in exc_info.value.message
