"""API endpoint integration tests.

Tests the FastAPI endpoints end to end against an in-memory database.
"""

from decimal import Decimal

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

OWNER_HEADERS = {"X-User-Role": "owner"}
STAFF_HEADERS = {"X-User-Role": "staff"}

BATCH_PAYLOAD = {
    "batch_date": "2025-08-01",
    "batch_name": "Layer Mash 01",
    "bag_size_kg": "50",
    "miscellaneous_cost": "500",
    "ingredients": [
        {"ingredient_name": "corn", "quantity_kg": "600", "total_cost": "15000"},
        {"ingredient_name": "soybean", "quantity_kg": "400", "total_cost": "20000"},
    ],
}


async def create_house(client: AsyncClient, name: str = "House A") -> dict:
    response = await client.post(
        "/api/v1/houses",
        headers=OWNER_HEADERS,
        json={"name": name, "capacity": 5000, "current_bird_count": 4000},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def create_batch(client: AsyncClient) -> dict:
    response = await client.post("/api/v1/feed/batches", headers=OWNER_HEADERS, json=BATCH_PAYLOAD)
    assert response.status_code == 201, response.text
    return response.json()


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        """Health endpoint should report the database."""
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert "timestamp" in data

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestRoles:
    """Test the X-User-Role header checks."""

    async def test_missing_role_is_unauthorized(self, client: AsyncClient):
        response = await client.get("/api/v1/laborers")
        assert response.status_code == 401
        assert "X-User-Role" in response.json()["detail"]

    async def test_unknown_role_is_unauthorized(self, client: AsyncClient):
        response = await client.get("/api/v1/laborers", headers={"X-User-Role": "visitor"})
        assert response.status_code == 401

    async def test_staff_cannot_manage_houses(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/houses", headers=STAFF_HEADERS, json={"name": "House Z"}
        )
        assert response.status_code == 403

    async def test_staff_cannot_generate_payroll(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payroll/generate", headers=STAFF_HEADERS, json={"month_year": "2025-08"}
        )
        assert response.status_code == 403

    async def test_staff_can_register_laborers(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/laborers",
            headers=STAFF_HEADERS,
            json={"full_name": "Asha", "monthly_salary": "26000"},
        )
        assert response.status_code == 201
        assert response.json()["is_active"] is True

    async def test_staff_cannot_delete_laborers(self, client: AsyncClient):
        created = await client.post(
            "/api/v1/laborers", headers=STAFF_HEADERS, json={"full_name": "Asha"}
        )
        response = await client.delete(
            f"/api/v1/laborers/{created.json()['id']}", headers=STAFF_HEADERS
        )
        assert response.status_code == 403


class TestErrorResponses:
    """Domain and request errors map to status codes with a stable body."""

    async def test_request_validation_is_400(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/laborers",
            headers=OWNER_HEADERS,
            json={"full_name": "Asha", "monthly_salary": "-5"},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_not_found_is_404(self, client: AsyncClient):
        response = await client.get("/api/v1/laborers/999", headers=OWNER_HEADERS)
        assert response.status_code == 404
        data = response.json()
        assert data["code"] == "NOT_FOUND"
        assert data["context"] == {"entity": "Laborer", "id": 999}

    async def test_business_rule_is_422(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/houses",
            headers=OWNER_HEADERS,
            json={"name": "Tiny", "capacity": 10, "current_bird_count": 20},
        )
        assert response.status_code == 422
        assert response.json()["code"] == "BUSINESS_RULE_VIOLATION"


class TestLaborAndPayroll:
    """Test assignments, attendance and the payroll run over HTTP."""

    async def test_attendance_and_payroll_run(self, client: AsyncClient):
        laborer = (
            await client.post(
                "/api/v1/laborers",
                headers=OWNER_HEADERS,
                json={"full_name": "Asha", "monthly_salary": "26000"},
            )
        ).json()

        for day, status in [("2025-08-01", "present"), ("2025-08-02", "half_day")]:
            response = await client.post(
                "/api/v1/work-assignments",
                headers=STAFF_HEADERS,
                json={
                    "laborer_id": laborer["id"],
                    "work_date": day,
                    "task": "egg collection",
                    "attendance_status": status,
                },
            )
            assert response.status_code == 201, response.text

        attendance = await client.get(
            f"/api/v1/laborers/{laborer['id']}/attendance",
            headers=STAFF_HEADERS,
            params={"month_year": "2025-08"},
        )
        assert attendance.status_code == 200
        summary = attendance.json()
        assert summary["working_days"] == 26
        assert Decimal(summary["days_worked"]) == Decimal("1.5")

        generated = await client.post(
            "/api/v1/payroll/generate",
            headers=OWNER_HEADERS,
            json={"month_year": "2025-08", "bonuses": {str(laborer["id"]): "100"}},
        )
        assert generated.status_code == 201, generated.text
        (row,) = generated.json()
        # 24.5 days absent plus half a day deducted: 25 days at 1000
        assert Decimal(row["salary_deductions"]) == Decimal("25000.00")
        assert Decimal(row["final_salary"]) == Decimal("1100.00")

        listed = await client.get("/api/v1/payroll/2025-08", headers=STAFF_HEADERS)
        assert [r["id"] for r in listed.json()] == [row["id"]]

        paid = await client.put(
            f"/api/v1/payroll/{row['id']}",
            headers=OWNER_HEADERS,
            json={"payment_status": "paid", "payment_date": "2025-09-05"},
        )
        assert paid.status_code == 200
        assert paid.json()["payment_status"] == "paid"

        summary = await client.get(
            "/api/v1/payroll/summary", headers=STAFF_HEADERS, params={"year": "2025"}
        )
        assert Decimal(summary.json()["total_paid"]) == Decimal("1100.00")

    async def test_rerun_is_conflict(self, client: AsyncClient):
        await client.post("/api/v1/laborers", headers=OWNER_HEADERS, json={"full_name": "Asha"})
        first = await client.post(
            "/api/v1/payroll/generate", headers=OWNER_HEADERS, json={"month_year": "2025-08"}
        )
        assert first.status_code == 201

        second = await client.post(
            "/api/v1/payroll/generate", headers=OWNER_HEADERS, json={"month_year": "2025-08"}
        )
        assert second.status_code == 409
        assert second.json()["code"] == "CONFLICT"

    async def test_malformed_month_is_400(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payroll/generate", headers=OWNER_HEADERS, json={"month_year": "August"}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_failed_run_writes_nothing(self, client: AsyncClient):
        """A laborer failing mid-run leaves the month without any payroll rows."""
        ids = []
        for name in ("Asha", "Bina"):
            created = await client.post(
                "/api/v1/laborers", headers=OWNER_HEADERS, json={"full_name": name}
            )
            ids.append(created.json()["id"])

        response = await client.post(
            "/api/v1/payroll/generate",
            headers=OWNER_HEADERS,
            json={"month_year": "2025-08", "bonuses": {str(ids[0]): "100", str(ids[1]): "-50"}},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

        listed = await client.get("/api/v1/payroll/2025-08", headers=STAFF_HEADERS)
        assert listed.json() == []

        retried = await client.post(
            "/api/v1/payroll/generate", headers=OWNER_HEADERS, json={"month_year": "2025-08"}
        )
        assert retried.status_code == 201
        assert len(retried.json()) == 2


class TestFeedEndpoints:
    """Test feed batches, inventory and recipes over HTTP."""

    async def test_create_batch_derives_totals(self, client: AsyncClient):
        batch = await create_batch(client)

        assert batch["total_bags"] == 20
        assert Decimal(batch["total_cost"]) == Decimal("35500")
        assert Decimal(batch["cost_per_bag"]) == Decimal("1775")
        assert len(batch["ingredients"]) == 2

    async def test_calculate_preview(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/feed/batches/calculate",
            headers=STAFF_HEADERS,
            json={"ingredients": BATCH_PAYLOAD["ingredients"], "miscellaneous_cost": "500"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_bags"] == 20
        assert Decimal(data["cost_per_kg"]) == Decimal("35.5")

        listed = await client.get("/api/v1/feed/batches", headers=STAFF_HEADERS)
        assert listed.json() == []

    async def test_failed_replacement_keeps_batch(self, client: AsyncClient):
        """An ingredient list rejected partway through leaves the stored batch as it was."""
        batch = await create_batch(client)

        response = await client.put(
            f"/api/v1/feed/batches/{batch['id']}",
            headers=OWNER_HEADERS,
            json={
                "miscellaneous_cost": "0",
                "ingredients": [
                    {"ingredient_name": "corn", "quantity_kg": "250", "total_cost": "6000"},
                    {"ingredient_name": "salt", "quantity_kg": "0.004", "total_cost": "1"},
                ],
            },
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

        reread = (
            await client.get(f"/api/v1/feed/batches/{batch['id']}", headers=STAFF_HEADERS)
        ).json()
        assert [i["ingredient_name"] for i in reread["ingredients"]] == ["corn", "soybean"]
        assert reread["total_bags"] == 20
        assert Decimal(reread["total_cost"]) == Decimal("35500")
        assert Decimal(reread["miscellaneous_cost"]) == Decimal("500")

    async def test_ingredient_changes_update_batch(self, client: AsyncClient):
        batch = await create_batch(client)

        added = await client.post(
            f"/api/v1/feed/batches/{batch['id']}/ingredients",
            headers=OWNER_HEADERS,
            json={"ingredient_name": "premix", "quantity_kg": "50", "total_cost": "4500"},
        )
        assert added.status_code == 201

        refreshed = (
            await client.get(f"/api/v1/feed/batches/{batch['id']}", headers=STAFF_HEADERS)
        ).json()
        assert refreshed["total_bags"] == 21
        assert Decimal(refreshed["total_cost"]) == Decimal("40000")

        removed = await client.delete(
            f"/api/v1/feed/ingredients/{added.json()['id']}", headers=OWNER_HEADERS
        )
        assert removed.status_code == 200
        assert removed.json()["total_bags"] == 20

    async def test_over_consumption_rejected(self, client: AsyncClient):
        house = await create_house(client)
        batch = await create_batch(client)

        first = await client.post(
            "/api/v1/daily-logs",
            headers=STAFF_HEADERS,
            json={
                "log_date": "2025-08-02",
                "house_id": house["id"],
                "eggs_collected": 900,
                "feed_batch_id": batch["id"],
                "feed_bags_used": "15",
            },
        )
        assert first.status_code == 201, first.text

        second = await client.post(
            "/api/v1/daily-logs",
            headers=STAFF_HEADERS,
            json={
                "log_date": "2025-08-03",
                "house_id": house["id"],
                "feed_batch_id": batch["id"],
                "feed_bags_used": "6",
            },
        )
        assert second.status_code == 422
        data = second.json()
        assert data["code"] == "INSUFFICIENT_FEED"
        assert Decimal(data["context"]["available"]) == Decimal("5")

        usage = await client.get(
            f"/api/v1/feed/batches/{batch['id']}/usage", headers=STAFF_HEADERS
        )
        assert Decimal(usage.json()["remaining_bags"]) == Decimal("5")

        delete = await client.delete(f"/api/v1/feed/batches/{batch['id']}", headers=OWNER_HEADERS)
        assert delete.status_code == 422

    async def test_recipe_cost(self, client: AsyncClient):
        recipe = await client.post(
            "/api/v1/feed/recipes",
            headers=OWNER_HEADERS,
            json={"recipe_name": "Layer", "percentages": {"corn": 50, "soybean": 50}},
        )
        assert recipe.status_code == 201, recipe.text

        cost = await client.post(
            f"/api/v1/feed/recipes/{recipe.json()['id']}/cost",
            headers=STAFF_HEADERS,
            json={"batch_size_kg": "1000", "prices_per_kg": {"corn": "2", "soybean": "3"}},
        )
        assert cost.status_code == 200
        assert Decimal(cost.json()["total_cost"]) == Decimal("2500")
        assert Decimal(cost.json()["cost_per_kg"]) == Decimal("2.5")

    async def test_recipe_over_hundred_percent(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/feed/recipes",
            headers=OWNER_HEADERS,
            json={"recipe_name": "Bad", "percentages": {"corn": 70, "soybean": 40}},
        )
        assert response.status_code == 422


class TestCostEndpoints:
    """Test egg pricing and operating costs over HTTP."""

    async def test_daily_cost(self, client: AsyncClient):
        house = await create_house(client)
        batch = await create_batch(client)
        await client.post(
            "/api/v1/daily-logs",
            headers=STAFF_HEADERS,
            json={
                "log_date": "2025-08-14",
                "house_id": house["id"],
                "eggs_collected": 1000,
                "feed_batch_id": batch["id"],
                "feed_bags_used": "2",
            },
        )

        response = await client.get(
            "/api/v1/costs/daily", headers=STAFF_HEADERS, params={"date": "2025-08-14"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_eggs"] == 1000
        assert Decimal(data["feed_cost_per_egg"]) == Decimal("3.55")
        assert Decimal(data["suggested_price"]) == Decimal("4.26")

    async def test_daily_cost_without_eggs(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/costs/daily", headers=STAFF_HEADERS, params={"date": "2025-08-14"}
        )
        assert response.status_code == 200
        assert Decimal(response.json()["total_cost_per_egg"]) == Decimal("0")

    async def test_operating_costs_owner_only(self, client: AsyncClient):
        payload = {"month_year": "2025-08", "electricity_cost": "5000"}
        denied = await client.post("/api/v1/costs/operating", headers=STAFF_HEADERS, json=payload)
        assert denied.status_code == 403

        created = await client.post("/api/v1/costs/operating", headers=OWNER_HEADERS, json=payload)
        assert created.status_code == 201
        assert Decimal(created.json()["total_monthly_cost"]) == Decimal("5000")

        duplicate = await client.post(
            "/api/v1/costs/operating", headers=OWNER_HEADERS, json=payload
        )
        assert duplicate.status_code == 409
