import pytest

from distcore.records import DistributionRecord
from distcore.timezone import derive_time_zone


@pytest.mark.parametrize(
    "customer_id, expected",
    [
        ("HOSP-100", -12),
        ("HOSP-111", -1),
        ("HOSP-124", 12),
        ("HOSP-112", 0),
        ("A1B2", 0),
        ("100", -12),
    ],
)
def test_offset_from_digits(customer_id, expected):
    assert derive_time_zone(customer_id) == expected


def test_no_digits_maps_to_zero():
    assert derive_time_zone("") == 0
    assert derive_time_zone("HOSP-ABC") == 0
    assert derive_time_zone(None) == 0


def test_only_digits_matter():
    assert derive_time_zone("HOSP-100") == derive_time_zone("CLINIC/1-0-0")
    assert derive_time_zone("HOSP-100") != derive_time_zone("HOSP-111")


def test_range_holds_for_many_ids():
    ids = [f"C-{n}" for n in range(0, 500)] + ["99999999999999999999999", "x9y9z9"]
    for cid in ids:
        assert -12 <= derive_time_zone(cid) <= 12


def test_record_time_zone_property():
    rec = DistributionRecord(customer_id="HOSP-111")
    assert rec.time_zone == -1


def test_very_long_id_does_not_raise():
    long_id = "HOSP-" + "1" * 5000
    # 111...1 (5000 ones) mod 25 == 11 since the number ends in ...11
    assert derive_time_zone(long_id) == -1


def test_filter_handles_very_long_customer_id():
    from distcore.filters import FilterState, filter_records

    rows = [{"CustomerID": "C" + "7" * 5000, "Model": "M-1", "Quantity": 1}]
    # 777...7 mod 25 == 77 mod 25 == 2 -> offset -10
    assert filter_records(rows, FilterState(time_zone_range=(-5, 5))).empty
    assert len(filter_records(rows, FilterState(time_zone_range=(-10, -10)))) == 1


def test_non_ascii_digits_are_ignored():
    assert derive_time_zone("HOSP-١٠٠") == 0
    assert derive_time_zone("HOSP-١٠٠5") == derive_time_zone("5")
