"""
E2E tests for user personas walking through the API end to end.

Each persona seeds its records, drives the write endpoints and then checks
the read-side reports for a fixed reference day.

User personas:
- user_clt: Salaried employee paying groceries with meal vouchers
- user_freelancer: No financial profile, irregular deposits
- user_shop: Small shop owner tracking stock and daily costs
- user_installments: Big purchase split across months, then cancelled
"""

import pytest
from datetime import date, datetime
from fastapi.testclient import TestClient

REFERENCE = "2024-03-10"


@pytest.mark.integration
def test_user_clt_benefits_and_projection(client: TestClient, add_profile, add_subscription, add_transaction):
    """
    user_clt: Salary plus VR/VT balances
    Expected: Voucher purchases reduce balances until one is refused
    """
    owner = "user_clt"
    add_profile(
        owner_id=owner,
        fixed_income=4000,
        benefits=[{"type": "VR", "value": 300.0}, {"type": "VT", "value": 100.0}],
    )
    add_subscription("Spotify", 20, owner_id=owner)
    add_transaction("Salário", 4000, "DEPOSIT", "SALARY", date(2024, 3, 5), owner_id=owner)

    for _ in range(2):
        response = client.post(
            "/v1/transactions",
            json={
                "owner_id": owner,
                "name": "Restaurante",
                "amount": 120,
                "type": "EXPENSE",
                "category": "FOOD",
                "payment_method": "BENEFIT",
                "date": "2024-03-06",
            },
        )
        assert response.status_code == 201

    assert response.json()["benefit_remaining"] == pytest.approx(60)

    refused = client.post("/v1/benefits/deduct", json={"owner_id": owner, "category": "FOOD", "amount": 100})
    assert refused.status_code == 409
    assert refused.json()["detail"]["shortfall"] == pytest.approx(40)

    projection = client.get("/v1/projection", params={"owner_id": owner, "month": "2024-03", "reference": REFERENCE})
    assert projection.status_code == 200
    data = projection.json()
    assert data["source"] == "profile"
    assert data["benefits_total"] == pytest.approx(160)
    assert data["expenses_total"] == 240
    # 4000 + 160 - (20 + 240)
    assert data["projected_balance"] == pytest.approx(3900)


@pytest.mark.integration
def test_user_freelancer_fallback_projection(client: TestClient, add_transaction):
    """
    user_freelancer: No profile, income only from deposits
    Expected: Projection built from the month's transactions
    """
    owner = "user_freelancer"
    add_transaction("Projeto site", 2500, "DEPOSIT", "OTHER", date(2024, 3, 4), owner_id=owner)
    add_transaction("Projeto app", 1500, "DEPOSIT", "OTHER", date(2024, 3, 18), owner_id=owner)
    add_transaction("Coworking", 800, "EXPENSE", "OTHER", date(2024, 3, 2), owner_id=owner)

    response = client.get("/v1/projection", params={"owner_id": owner, "month": "2024-03"})

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "transactions"
    assert data["income_total"] == 4000
    assert data["projected_balance"] == 3200
    assert data["goal_suggestion"] == pytest.approx(960)

    breakdown = client.get("/v1/dashboard/breakdown", params={"owner_id": owner, "month": "2024-03"}).json()
    assert breakdown["variable_income"] == 4000
    assert breakdown["salary"] == 0


@pytest.mark.integration
def test_user_shop_stats_and_stock(client: TestClient, add_profile, add_cost, add_transaction, add_stock_item):
    """
    user_shop: Daily and monthly costs plus inventory
    Expected: Costs accrue per day and stock value shows from its creation month
    """
    owner = "user_shop"
    add_profile(owner_id=owner, has_stock=True)
    add_cost(10, "DAILY", datetime(2024, 2, 25), owner_id=owner)
    add_cost(300, "MONTHLY", datetime(2024, 1, 1), owner_id=owner)
    add_cost(150, "ONCE", datetime(2024, 2, 10), owner_id=owner, is_fixed=False)
    add_transaction("Vendas", 2000, "DEPOSIT", "OTHER", date(2024, 3, 8), owner_id=owner)
    add_stock_item(20, 5, datetime(2024, 2, 1), owner_id=owner, sale_price=8)

    response = client.get("/v1/stats/monthly", params={"owner_id": owner, "months": 2, "reference": REFERENCE})

    assert response.status_code == 200
    february, march = response.json()["stats"]
    # Feb: 5 days of DAILY + MONTHLY + ONCE
    assert february["costs"] == 50 + 300 + 150
    # Mar: 10 days of DAILY + MONTHLY + ONCE again
    assert march["costs"] == 100 + 300 + 150
    assert march["profit"] == 2000 - 550
    assert february["stock_value"] == march["stock_value"] == 100

    spend = client.get("/v1/costs/spend-so-far", params={"owner_id": owner, "reference": REFERENCE}).json()
    assert spend["total"] == 550

    stock = client.get("/v1/stock/summary", params={"owner_id": owner, "reference": REFERENCE}).json()
    assert stock["total_sale_value"] == 160
    assert stock["average_margin"] == pytest.approx(37.5)


@pytest.mark.integration
def test_user_installments_cancel_purchase(client: TestClient):
    """
    user_installments: Notebook split in 12 over one year, then cancelled
    Expected: Deleting any installment removes the whole group
    """
    owner = "user_installments"
    preview = client.post(
        "/v1/installments/preview",
        json={"total_amount": 6000, "count": 12, "start_date": "2024-01-31", "end_date": "2024-12-31"},
    )
    assert preview.status_code == 200
    due_dates = [inst["due_date"] for inst in preview.json()["installments"]]
    # Day clamped in February
    assert due_dates[:3] == ["2024-01-31", "2024-02-29", "2024-03-31"]

    created = client.post(
        "/v1/transactions",
        json={
            "owner_id": owner,
            "name": "Notebook",
            "amount": 6000,
            "type": "EXPENSE",
            "category": "OTHER",
            "payment_method": "CARD",
            "date": "2024-01-31",
            "installments": 12,
            "installment_end_date": "2024-12-31",
        },
    )
    assert created.status_code == 201
    ids = created.json()["transaction_ids"]
    assert len(ids) == 12

    deleted = client.post("/v1/transactions/bulk-delete", json={"owner_id": owner, "ids": [ids[4]]})
    assert deleted.status_code == 200
    assert deleted.json()["deleted_count"] == 12

    again = client.post("/v1/transactions/bulk-delete", json={"owner_id": owner, "ids": [ids[0]]})
    assert again.status_code == 404
