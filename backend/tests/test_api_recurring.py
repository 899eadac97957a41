"""Tests for recurring series API endpoints."""

import pytest


@pytest.fixture
def rent_payload(checking_account):
    return {
        "name": "Rent",
        "recurrence_type": "monthly",
        "start_date": "2024-01-01",
        "end_date": "2024-06-30",
        "transaction_type": "withdraw",
        "from_account_id": checking_account.id,
        "amount": 1500,
        "transaction_description": "Apartment",
    }


@pytest.fixture
def rent_series(client, rent_payload):
    response = client.post("/api/v1/recurring", json=rent_payload)
    assert response.status_code == 201
    return response.json()


class TestRecurringAPI:
    """Test recurring series endpoints."""

    def test_list_empty(self, client):
        """Should return empty list when no series exist."""
        response = client.get("/api/v1/recurring")
        assert response.status_code == 200
        assert response.json() == []

    def test_create(self, rent_series, checking_account):
        """Should create series, template and instances in one call."""
        assert rent_series["series"]["name"] == "Rent"
        assert rent_series["series"]["recurrence_type"] == "monthly"
        assert rent_series["series"]["end_date"] == "2024-06-30"

        template = rent_series["template"]
        assert template["is_recurring_template"] is True
        assert template["status"] == "Created"
        assert template["date"] == "2024-01-01"
        assert template["from_account_id"] == checking_account.id
        assert template["description"] == "Apartment"
        assert float(template["amount"]) == 1500.0

        dates = [txn["date"] for txn in rent_series["instances"]]
        assert dates == ["2024-02-01", "2024-03-01", "2024-04-01", "2024-05-01", "2024-06-01"]
        assert all(txn["is_recurring_template"] is False for txn in rent_series["instances"])
        assert all(txn["status"] == "Posted" for txn in rent_series["instances"])

    def test_create_invalid_recurrence(self, client, rent_payload):
        """Unknown recurrence types are a 400 with a message."""
        response = client.post("/api/v1/recurring", json={**rent_payload, "recurrence_type": "hourly"})
        assert response.status_code == 400
        assert "Recurrence type" in response.json()["detail"]

    def test_create_missing_account(self, client, rent_payload):
        """A withdrawal without a from account is rejected."""
        response = client.post("/api/v1/recurring", json={**rent_payload, "from_account_id": None})
        assert response.status_code == 400
        assert "From account is required" in response.json()["detail"]

    def test_create_negative_amount(self, client, rent_payload):
        """Amounts must be positive."""
        response = client.post("/api/v1/recurring", json={**rent_payload, "amount": -5})
        assert response.status_code == 400

        # Nothing was written
        assert client.get("/api/v1/recurring").json() == []

    @pytest.mark.parametrize("overrides, message", [
        ({"start_date": "not-a-date"}, "Start date is invalid"),
        ({"end_date": "someday"}, "End date is invalid"),
        ({"recurrence_interval": 1.5}, "Recurrence interval"),
        ({"recurrence_interval": "often"}, "Recurrence interval"),
        ({"amount": "abc"}, "Amount must be a positive number"),
    ])
    def test_create_unparseable_values(self, client, rent_payload, overrides, message):
        """Malformed dates, intervals and amounts get the same 400 as other bad input."""
        response = client.post("/api/v1/recurring", json={**rent_payload, **overrides})
        assert response.status_code == 400
        assert message in response.json()["detail"]
        assert client.get("/api/v1/recurring").json() == []

    def test_update_unparseable_values(self, client, rent_series):
        """Updates report malformed values as a 400 as well."""
        series_id = rent_series["series"]["id"]
        response = client.put(f"/api/v1/recurring/{series_id}", json={
            "end_date": "2024-06-30",
            "amount": "lots",
        })
        assert response.status_code == 400

    def test_list(self, client, rent_series):
        """Should list created series."""
        response = client.get("/api/v1/recurring")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["id"] == rent_series["series"]["id"]

    def test_get_detail(self, client, rent_series):
        """Detail returns the series with its template and instances."""
        series_id = rent_series["series"]["id"]
        response = client.get(f"/api/v1/recurring/{series_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["series"]["id"] == series_id
        assert data["template"]["recurring_series_id"] == series_id
        assert len(data["instances"]) == 5

    def test_get_unknown(self, client):
        """Unknown series are a 404."""
        response = client.get("/api/v1/recurring/nonexistent")
        assert response.status_code == 404

    def test_update_all_instances(self, client, rent_series):
        """Scope all pushes template changes to every instance."""
        series_id = rent_series["series"]["id"]
        response = client.put(f"/api/v1/recurring/{series_id}", json={
            "end_date": "2024-06-30",
            "amount": 1600,
            "update_scope": "all",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["update_scope"] == "all"
        assert data["updated_count"] == 5
        assert data["regenerated"] == []
        assert float(data["template"]["amount"]) == 1600.0

        detail = client.get(f"/api/v1/recurring/{series_id}").json()
        assert all(float(txn["amount"]) == 1600.0 for txn in detail["instances"])

    def test_update_without_template_fields(self, client, rent_series):
        """A metadata-only update leaves the template out of the response."""
        series_id = rent_series["series"]["id"]
        response = client.put(f"/api/v1/recurring/{series_id}", json={
            "name": "Rent (new lease)",
            "end_date": "2024-06-30",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["series"]["name"] == "Rent (new lease)"
        assert data["template"] is None
        assert data["updated_count"] == 0

    def test_update_omitting_end_date_clears_it(self, client, rent_series):
        """Leaving end_date out of an update makes the series open-ended."""
        series_id = rent_series["series"]["id"]
        response = client.put(f"/api/v1/recurring/{series_id}", json={"name": "Rent"})
        assert response.status_code == 200
        data = response.json()
        assert data["series"]["end_date"] is None
        assert len(data["regenerated"]) == 12

    def test_update_invalid_scope(self, client, rent_series):
        """Unknown scopes are a 400."""
        series_id = rent_series["series"]["id"]
        response = client.put(f"/api/v1/recurring/{series_id}", json={"update_scope": "sometimes"})
        assert response.status_code == 400

    def test_update_unknown(self, client):
        """Updating a missing series is a 404."""
        response = client.put("/api/v1/recurring/nonexistent", json={"name": "x"})
        assert response.status_code == 404

    def test_generate_complete_series(self, client, rent_series):
        """A bounded series that is fully generated gains nothing."""
        series_id = rent_series["series"]["id"]
        response = client.post(f"/api/v1/recurring/{series_id}/generate")
        assert response.status_code == 200
        assert response.json() == {"results": 0, "items": []}

    def test_regenerate_from_date(self, client, rent_series):
        """regenerate_all rebuilds instances from start_from onwards."""
        series_id = rent_series["series"]["id"]
        response = client.post(
            f"/api/v1/recurring/{series_id}/generate",
            params={"regenerate_all": "true", "start_from": "2024-04-15"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["results"] == 2
        assert [txn["date"] for txn in data["items"]] == ["2024-05-01", "2024-06-01"]

        detail = client.get(f"/api/v1/recurring/{series_id}").json()
        assert len(detail["instances"]) == 5

    def test_delete(self, client, rent_series):
        """Deleting removes the series and its transactions."""
        series_id = rent_series["series"]["id"]
        response = client.delete(f"/api/v1/recurring/{series_id}")
        assert response.status_code == 200
        assert response.json()["deleted"] is True
        assert response.json()["kept_instances"] is False

        assert client.get(f"/api/v1/recurring/{series_id}").status_code == 404
        assert client.get("/api/v1/transactions").json()["total"] == 0

    def test_delete_keep_instances(self, client, rent_series):
        """keep_instances leaves standalone transactions behind."""
        series_id = rent_series["series"]["id"]
        response = client.delete(f"/api/v1/recurring/{series_id}", params={"keep_instances": "true"})
        assert response.status_code == 200
        assert response.json()["kept_instances"] is True

        data = client.get("/api/v1/transactions").json()
        assert data["total"] == 5
        assert all(txn["recurring_series_id"] is None for txn in data["items"])

    def test_delete_unknown(self, client):
        """Deleting a missing series is a 404."""
        response = client.delete("/api/v1/recurring/nonexistent")
        assert response.status_code == 404
