"""
Integration tests for the REST API endpoints.

Uses an in-memory SQLite database and the fake geocoder from conftest, so
every request runs the real calculator, repository and report code.
"""

from __future__ import annotations

from io import BytesIO
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient
from openpyxl import Workbook, load_workbook

from route_profit.infrastructure import locks
from route_profit.reports.spreadsheet import ROUTE_COLUMNS

REFERENCE_ROUTE = {
    "driver": "João Silva",
    "origin": "São Paulo, SP",
    "destinations": [
        {"city": "Rio de Janeiro, RJ", "packages": 50, "value_per_package": 25.5}
    ],
    "route_cost": 400,
}


async def _calculate(client: AsyncClient, **overrides) -> dict:
    resp = await client.post("/api/v1/routes/calculate", json={**REFERENCE_ROUTE, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


# ── Health ────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/api/v1/admin/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "history_entries": 0}


# ── Calculation ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_calculate_returns_201_with_history_id(client: AsyncClient):
    data = await _calculate(client)
    assert data["id"] > 0

    result = data["result"]
    assert result["total_revenue"] == pytest.approx(1275.0)
    assert result["total_cost"] == pytest.approx(400.0)
    assert result["profit"] == pytest.approx(875.0)
    assert result["profit_margin"] == pytest.approx(68.63, abs=0.01)
    assert result["status"] == "excellent"
    assert result["fuel_analysis"]["region"] == "São Paulo"
    assert result["fuel_analysis"]["recommendation"] == "diesel"
    assert result["destinations"][0]["id"] == "1"
    assert len(result["distance_breakdown"]) == 1


@pytest.mark.asyncio
async def test_calculate_validation_error(client: AsyncClient, geocoder):
    resp = await client.post(
        "/api/v1/routes/calculate",
        json={"origin": "", "destinations": [{"city": "Recife, PE", "packages": -1}]},
    )
    assert resp.status_code == 422
    body = resp.json()
    assert "origin: city is required" in body["errors"]
    assert "destinations[1]: packages must be >= 0" in body["errors"]
    assert geocoder.calls == []


@pytest.mark.asyncio
async def test_unknown_city_is_422_and_not_recorded(client: AsyncClient):
    resp = await client.post(
        "/api/v1/routes/calculate",
        json={**REFERENCE_ROUTE, "destinations": [{"city": "Atlantis", "packages": 1, "value_per_package": 1}]},
    )
    assert resp.status_code == 422
    assert resp.json()["city"] == "Atlantis"

    history = await client.get("/api/v1/history")
    assert history.json()["total"] == 0


@pytest.mark.asyncio
async def test_geocoder_outage_is_503(client: AsyncClient, geocoder):
    geocoder.unavailable = True
    resp = await client.post("/api/v1/routes/calculate", json=REFERENCE_ROUTE)
    assert resp.status_code == 503
    assert resp.json()["city"] == "São Paulo, SP"


@pytest.mark.asyncio
async def test_non_finite_amount_is_422_and_not_recorded(client: AsyncClient, geocoder):
    # Starlette's JSON parser accepts the bare NaN literal
    body = (
        '{"origin": "São Paulo, SP", "route_cost": NaN, "destinations": '
        '[{"city": "Rio de Janeiro, RJ", "packages": 1, "value_per_package": 10}]}'
    )
    resp = await client.post(
        "/api/v1/routes/calculate",
        content=body.encode(),
        headers={"content-type": "application/json"},
    )
    assert resp.status_code == 422
    assert resp.json()["errors"] == ["route_cost: must be a finite number"]
    assert geocoder.calls == []
    assert (await client.get("/api/v1/history")).json()["total"] == 0


@pytest.mark.asyncio
async def test_duplicate_destination_ids_are_422(client: AsyncClient):
    resp = await client.post(
        "/api/v1/routes/calculate",
        json={
            **REFERENCE_ROUTE,
            "destinations": [
                {"id": "x", "city": "Rio de Janeiro, RJ", "packages": 1, "value_per_package": 1},
                {"id": "x", "city": "Recife, PE", "packages": 1, "value_per_package": 1},
            ],
        },
    )
    assert resp.status_code == 422
    assert resp.json()["errors"] == ["destinations[2]: duplicate id"]


# ── History ───────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_history_newest_first_and_search(client: AsyncClient):
    first = await _calculate(client)
    second = await _calculate(
        client,
        driver="Pedro Costa",
        origin="Salvador, BA",
        destinations=[{"city": "Recife, PE", "packages": 30, "value_per_package": 40}],
        route_cost=350,
    )

    resp = await client.get("/api/v1/history")
    page = resp.json()
    assert page["total"] == 2
    assert [item["id"] for item in page["items"]] == [second["id"], first["id"]]

    resp = await client.get("/api/v1/history", params={"search": "recife"})
    assert [item["id"] for item in resp.json()["items"]] == [second["id"]]

    resp = await client.get(f"/api/v1/history/{first['id']}")
    assert resp.status_code == 200
    assert resp.json()["result"]["driver"] == "João Silva"


@pytest.mark.asyncio
async def test_delete_entry(client: AsyncClient):
    entry = await _calculate(client)

    resp = await client.delete(f"/api/v1/history/{entry['id']}")
    assert resp.status_code == 204

    resp = await client.delete(f"/api/v1/history/{entry['id']}")
    assert resp.status_code == 404

    resp = await client.get(f"/api/v1/history/{entry['id']}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_clear_history(client: AsyncClient):
    await _calculate(client)
    await _calculate(client)

    resp = await client.delete("/api/v1/history")
    assert resp.json() == {"removed": 2}
    assert (await client.get("/api/v1/history")).json()["total"] == 0


@pytest.mark.asyncio
async def test_busy_history_lock_is_503(client: AsyncClient):
    mock_redis = AsyncMock()
    mock_redis.set = AsyncMock(return_value=False)

    with (
        patch.object(locks.settings, "history_lock_enabled", True),
        patch.object(locks.settings, "history_lock_wait_seconds", 0.0),
        patch.object(locks, "get_redis", AsyncMock(return_value=mock_redis)),
    ):
        resp = await client.post("/api/v1/routes/calculate", json=REFERENCE_ROUTE)

    assert resp.status_code == 503
    assert resp.json() == {"detail": "History is busy, try again shortly"}
    assert (await client.get("/api/v1/history")).json()["total"] == 0


@pytest.mark.asyncio
async def test_history_exports(client: AsyncClient):
    entry = await _calculate(client)

    resp = await client.get("/api/v1/history/export.xlsx")
    assert resp.status_code == 200
    wb = load_workbook(BytesIO(resp.content))
    assert wb.active.max_row == 2

    resp = await client.get("/api/v1/history/report.pdf")
    assert resp.headers["content-type"] == "application/pdf"
    assert resp.content.startswith(b"%PDF")

    resp = await client.get(f"/api/v1/history/{entry['id']}/report.pdf")
    assert resp.content.startswith(b"%PDF")


# ── Import ────────────────────────────────────────────────────────────


def _upload(*rows) -> dict:
    wb = Workbook()
    ws = wb.active
    ws.append(list(ROUTE_COLUMNS))
    for row in rows:
        ws.append(list(row))
    buffer = BytesIO()
    wb.save(buffer)
    return {"file": ("routes.xlsx", buffer.getvalue(), "application/octet-stream")}


@pytest.mark.asyncio
async def test_import_parses_rows(client: AsyncClient):
    resp = await client.post(
        "/api/v1/routes/import",
        files=_upload(
            ("João Silva", "São Paulo, SP", "Rio de Janeiro, RJ", "Belo Horizonte, MG", None, 50, 25.5, 400),
            (None, "São Paulo, SP", "Rio de Janeiro, RJ", None, None, 50, 25.5, 400),
        ),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert [d["packages"] for d in body["routes"][0]["destinations"]] == [25, 25]
    assert body["errors"] == ["Line 3: driver name is required"]
    assert body["calculated"] == []


@pytest.mark.asyncio
async def test_import_and_calculate(client: AsyncClient):
    resp = await client.post(
        "/api/v1/routes/import",
        params={"calculate": "true"},
        files=_upload(
            ("João Silva", "São Paulo, SP", "Rio de Janeiro, RJ", None, None, 50, 25.5, 400),
            ("Ana", "São Paulo, SP", "Atlantis", None, None, 10, 5, 0),
        ),
    )
    body = resp.json()
    assert len(body["calculated"]) == 1
    assert body["errors"] == ["Route 2 (Ana): City 'Atlantis' was not found"]
    assert (await client.get("/api/v1/history")).json()["total"] == 1


@pytest.mark.asyncio
async def test_import_unreadable_file(client: AsyncClient):
    resp = await client.post(
        "/api/v1/routes/import",
        files={"file": ("routes.xlsx", b"not a workbook", "application/octet-stream")},
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_template_download(client: AsyncClient):
    resp = await client.get("/api/v1/routes/import/template")
    assert resp.status_code == 200
    assert "route-template.xlsx" in resp.headers["content-disposition"]
    assert load_workbook(BytesIO(resp.content)).sheetnames[0] == "Rotas"


# ── Analytics ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_dashboard(client: AsyncClient):
    await _calculate(client)
    await _calculate(client, route_cost=2000)

    resp = await client.get("/api/v1/analytics/dashboard")
    body = resp.json()
    assert body["total_routes"] == 2
    assert body["total_revenue"] == pytest.approx(2550.0)
    assert body["margin_status"] == "fair"
    assert body["route_types"][0]["count"] == 2

    resp = await client.get("/api/v1/analytics/dashboard/report.pdf")
    assert resp.content.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_compare(client: AsyncClient):
    good = await _calculate(client)
    bad = await _calculate(client, route_cost=1200)

    resp = await client.get("/api/v1/analytics/compare", params={"ids": [good["id"], bad["id"]]})
    assert resp.status_code == 200
    body = resp.json()
    assert body["best_profit_id"] == good["id"]
    assert [s["type"] for s in body["suggestions"]] == ["cost"]


@pytest.mark.asyncio
async def test_compare_requires_two_to_five_routes(client: AsyncClient):
    entry = await _calculate(client)
    resp = await client.get("/api/v1/analytics/compare", params={"ids": [entry["id"]]})
    assert resp.status_code == 422

    resp = await client.get("/api/v1/analytics/compare", params={"ids": [entry["id"], 1]})
    assert resp.status_code == 404
