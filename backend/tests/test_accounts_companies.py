"""Tests for accounts, companies and revenues API."""

from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from paimcontab.main import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def account(client):
    response = client.post("/v1/accounts/", json={"name": "Lia", "email": "Lia@Example.com"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def company(client, account):
    response = client.post(
        "/v1/companies/",
        json={"account_id": account["id"], "name": "Lia Costura", "cnpj": "11.222.333/0001-44"},
    )
    assert response.status_code == 201
    return response.json()


class TestAccountsAPI:
    def test_create_normalizes_email(self, account):
        assert account["email"] == "lia@example.com"
        assert account["role"] == "user"

    def test_duplicate_email(self, client, account):
        response = client.post("/v1/accounts/", json={"name": "Outra", "email": "lia@example.com"})
        assert response.status_code == 409

    def test_create_admin(self, client):
        response = client.post(
            "/v1/accounts/", json={"name": "Admin", "email": "adm@example.com", "role": "admin"}
        )
        assert response.json()["role"] == "admin"

    def test_get(self, client, account):
        response = client.get(f"/v1/accounts/{account['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Lia"

    def test_get_not_found(self, client):
        assert client.get(f"/v1/accounts/{uuid4()}").status_code == 404


class TestCompaniesAPI:
    def test_create(self, company, account):
        assert company["account_id"] == account["id"]
        assert company["cnpj"] == "11.222.333/0001-44"

    def test_unknown_account(self, client):
        response = client.post("/v1/companies/", json={"account_id": str(uuid4()), "name": "X"})
        assert response.status_code == 404

    def test_duplicate_cnpj(self, client, account, company):
        response = client.post(
            "/v1/companies/",
            json={"account_id": account["id"], "name": "Outra", "cnpj": "11.222.333/0001-44"},
        )
        assert response.status_code == 409

    def test_get(self, client, company):
        assert client.get(f"/v1/companies/{company['id']}").json()["name"] == "Lia Costura"

    def test_get_not_found(self, client):
        assert client.get(f"/v1/companies/{uuid4()}").status_code == 404


class TestRevenuesAPI:
    def _create(self, client, company, **overrides):
        body = {
            "description": "Conserto",
            "value": "150.00",
            "date": "2024-03-10",
            "category": "servicos",
        }
        body.update(overrides)
        return client.post(f"/v1/companies/{company['id']}/revenues", json=body)

    def test_create(self, client, company):
        response = self._create(client, company)
        assert response.status_code == 201
        assert response.json()["status"] == "received"

    def test_create_rejects_non_positive_value(self, client, company):
        assert self._create(client, company, value="0").status_code == 422

    def test_create_unknown_company(self, client):
        response = self._create(client, {"id": str(uuid4())})
        assert response.status_code == 404

    def test_list_filters(self, client, company):
        self._create(client, company)
        self._create(client, company, date="2024-04-01")
        self._create(client, company, status="pending")

        response = client.get(f"/v1/companies/{company['id']}/revenues?period=2024-03")
        assert response.headers["X-Total-Count"] == "2"

        response = client.get(
            f"/v1/companies/{company['id']}/revenues?period=2024-03&status=received"
        )
        assert len(response.json()) == 1

    def test_list_invalid_period(self, client, company):
        response = client.get(f"/v1/companies/{company['id']}/revenues?period=2024-3")
        assert response.status_code == 400

    def test_create_rejects_oversized_value(self, client, company):
        assert self._create(client, company, value="10000000000").status_code == 422

    def test_get(self, client, company):
        created = self._create(client, company).json()
        response = client.get(f"/v1/revenues/{created['id']}")
        assert response.status_code == 200
        assert response.json()["description"] == "Conserto"

    def test_get_not_found(self, client):
        assert client.get(f"/v1/revenues/{uuid4()}").status_code == 404

    def test_update_is_partial(self, client, company):
        created = self._create(client, company, client_name="Ana").json()

        response = client.put(
            f"/v1/revenues/{created['id']}", json={"value": "200", "status": "pending"}
        )

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["value"]) == Decimal("200.00")
        assert data["status"] == "pending"
        assert data["client_name"] == "Ana"
        assert data["description"] == "Conserto"

    def test_update_ignores_null_required_field(self, client, company):
        created = self._create(client, company).json()
        response = client.put(
            f"/v1/revenues/{created['id']}", json={"description": None, "client_name": None}
        )
        assert response.status_code == 200
        assert response.json()["description"] == "Conserto"

    def test_update_not_found(self, client):
        response = client.put(f"/v1/revenues/{uuid4()}", json={"value": "10"})
        assert response.status_code == 404

    def test_delete(self, client, company):
        created = self._create(client, company).json()

        assert client.delete(f"/v1/revenues/{created['id']}").status_code == 204
        assert client.get(f"/v1/revenues/{created['id']}").status_code == 404
        assert client.delete(f"/v1/revenues/{created['id']}").status_code == 404

    def test_stats(self, client, company):
        self._create(client, company)
        self._create(client, company, date="2024-04-02")
        self._create(client, company, status="pending")
        self._create(
            client, company, value="100", date="2024-05-05", category="vendas", status="canceled"
        )
        self._create(client, company, date="2023-12-31")

        response = client.get(f"/v1/companies/{company['id']}/revenues/stats?year=2024")

        assert response.status_code == 200
        data = response.json()
        assert data["year"] == 2024
        assert data["totals"]["overall"]["count"] == 4
        assert Decimal(data["totals"]["overall"]["total"]) == Decimal("550.00")
        assert Decimal(data["totals"]["received"]["total"]) == Decimal("300.00")
        assert data["totals"]["pending"]["count"] == 1
        assert [(m["month"], m["count"]) for m in data["by_month"]] == [(3, 2), (4, 1), (5, 1)]
        assert [c["category"] for c in data["by_category"]] == ["servicos", "vendas"]
        assert Decimal(data["by_category"][0]["total"]) == Decimal("450.00")

    def test_stats_empty_year(self, client, company):
        response = client.get(f"/v1/companies/{company['id']}/revenues/stats?year=2020")
        data = response.json()
        assert data["totals"]["overall"]["count"] == 0
        assert Decimal(data["totals"]["overall"]["total"]) == 0
        assert data["by_month"] == []
        assert data["by_category"] == []
