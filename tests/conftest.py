import json

import pytest

from distcore.data import generate_fallback_records
from distcore.records import to_frame


SCENARIO = [
    {
        "SupplierID": "MedTech-A", "Category": "Cardiac", "LicenseNo": "LIC-1000", "Model": "M-200",
        "LotNO": "L-5000", "SerialNo": "SN-A-1", "CustomerID": "HOSP-100", "DeliverDate": "2023-01-01", "Quantity": 10,
    },
    {
        "SupplierID": "BioLife-B", "Category": "Ortho", "LicenseNo": "LIC-1001", "Model": "M-201",
        "LotNO": "L-5001", "SerialNo": "SN-B-2", "CustomerID": "HOSP-111", "DeliverDate": "2023-02-02", "Quantity": 30,
    },
    {
        "SupplierID": "MedTech-A", "Category": "Cardiac", "LicenseNo": "LIC-1002", "Model": "M-200",
        "LotNO": "L-6002", "SerialNo": "SN-A-3", "CustomerID": "HOSP-124", "DeliverDate": "2023-03-03", "Quantity": 5,
    },
]


@pytest.fixture
def scenario_rows():
    return [dict(row) for row in SCENARIO]


@pytest.fixture
def scenario_records(scenario_rows):
    return to_frame(scenario_rows)


@pytest.fixture
def fallback_records():
    return generate_fallback_records(20)


@pytest.fixture
def data_file(tmp_path, monkeypatch, scenario_rows):
    path = tmp_path / "records.json"
    path.write_text(json.dumps(scenario_rows), encoding="utf-8")
    monkeypatch.setenv("DIST_DATA_FILE", str(path))
    return path
