import pytest

from rent_recon.core.models import PaymentRecord, TenantRecord


@pytest.fixture
def bank_rows():
    return [
        {"Date": "05/01/2024", "Description": "Zelle payment from John Smith for May Rent Conf# 12345", "Amount": 500.0},
        {"Date": "05/02/2024", "Description": "Zelle Scheduled payment from JOHN SMITH Conf# 99", "Amount": "$500.00"},
        {"Date": "05/03/2024", "Description": "Zelle payment from Maria Lopez", "Amount": 1200.0},
        {"Date": "05/04/2024", "Description": "ONLINE TRANSFER TO SAVINGS", "Amount": -2000.0},
        {"Date": "05/05/2024", "Description": "ATM WITHDRAWAL", "Amount": -60.0},
    ]


@pytest.fixture
def tenant_rows():
    return [
        {"Name": "John Smith", "Pays as": "John Smith", "ExpectedRent": 1000.0, "Apt": "A", "Email": "john@example.com"},
        {"Name": "Maria Lopez", "Pays as": "Maria Lopez", "ExpectedRent": "$1,250.00", "Apt": "B"},
        {"TenantName": "Ken Ito", "Pays As": "Ken Ito", "Expected Rent": 900.0, "apt": "A"},
    ]


@pytest.fixture
def other_rows():
    return [
        {"Description": "  Ken Ito ", "Amount": "450"},
        {"Description": "Ken Ito", "Amount": 450.0},
        {"Description": "", "Amount": 100.0},
        {"Description": "Unknown Payer", "Amount": 0.0},
    ]


@pytest.fixture
def tenant():
    return TenantRecord(payer_key="john smith", expected_rent=1000.0, name="John Smith", apt="A")


@pytest.fixture
def payments():
    return [
        PaymentRecord(payer_key="john smith", amount=500.0, date="05/01/2024"),
        PaymentRecord(payer_key="john smith", amount=500.0, date="05/02/2024"),
    ]
