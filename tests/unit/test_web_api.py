import pytest
from fastapi.testclient import TestClient

from journal_analytics.ingest.records import record_to_payload
from journal_analytics.web import app as web_app


@pytest.fixture
def client(tmp_path, monkeypatch, journal_records):
    config_path = tmp_path / "app.toml"
    config_path.write_text(
        f'[app]\nrecords_path = "{(tmp_path / "records.json").as_posix()}"\n\n[analytics]\njitter_seed = 1\n',
        encoding="utf-8",
    )
    monkeypatch.setenv("JOURNAL_ANALYTICS_CONFIG", str(config_path))
    web_app.get_config.cache_clear()
    web_app.get_store.cache_clear()
    web_app.get_store().replace(journal_records)
    yield TestClient(web_app.app)
    web_app.get_config.cache_clear()
    web_app.get_store.cache_clear()


def test_summary_endpoint(client):
    response = client.get("/api/summary")
    assert response.status_code == 200
    body = response.json()
    assert body["total_trades"] == 6
    assert body["total_wins"] + body["total_losses"] + body["total_breakevens"] + body["total_open"] == 6


def test_summary_endpoint_with_filters(client):
    body = client.get("/api/summary", params={"account": "Account 2"}).json()
    assert body["total_trades"] == 1
    assert body["total_open"] == 1


def test_malformed_date_filter_degrades_to_empty(client):
    response = client.get("/api/summary", params={"start": "yesterday"})
    assert response.status_code == 200
    assert response.json()["total_trades"] == 0


def test_balance_endpoint(client):
    body = client.get("/api/balance", params={"account": "Account 2"}).json()
    assert body["balance"] == pytest.approx(102_000.0)
    assert body["summary"]["total_deposits"] == 2000.0
    assert body["drawdown"]["max_drawdown"] == 0.0
    assert [point["date"] for point in body["drawdown"]["points"]] == ["2025-04-11", "2025-05-05"]


def test_monthly_and_daily_endpoints(client):
    monthly = client.get("/api/monthly-pl").json()
    assert monthly["labels"] == ["Mar 2025", "Apr 2025", "May 2025"]
    daily = client.get("/api/daily-pl", params={"start": "2025-03-01", "end": "2025-03-31"}).json()
    assert daily["labels"] == ["Mar-03", "Mar-04"]


def test_breakdowns_endpoint(client):
    body = client.get("/api/breakdowns").json()
    assert body["pair"] == {"XAUUSD": 5, "EURUSD": 1}
    assert body["most_used_strategy"] == "Strategy 1"


def test_scatter_endpoints(client):
    time_points = client.get("/api/scatter/time").json()
    duration_points = client.get("/api/scatter/duration").json()
    assert len(time_points) == 3
    assert len(duration_points) == 3
    assert all(point["x"] >= 0 for point in duration_points)
    assert client.get("/api/scatter/weekday").status_code == 404


def test_calendar_endpoint(client):
    body = client.get("/api/calendar/2025/3").json()
    assert body["month"] == {"total_pl": 415.0, "trading_days": 2}
    assert len(body["days"]) == 31
    assert body["days"][3]["date"] == "2025-03-04"
    assert body["days"][3]["trade_count"] == 2
    assert len(body["weeks"]) == 6
    assert body["weeks"][1] == {
        "week_number": 2,
        "start": "2025-03-03",
        "end": "2025-03-09",
        "total_pl": 415.0,
        "days": 7,
        "trading_days": 2,
    }
    assert client.get("/api/calendar/2025/13").status_code == 404
    assert client.get("/api/calendar/0/1").status_code == 404
    assert client.get("/api/calendar/10000/1").status_code == 404


def test_dashboard_and_strategy_report(client):
    assert client.get("/api/dashboard").json()["stats"]["total_trades"] == 6
    report = client.get("/api/strategy-report", params={"strategy": "Breakout"}).json()
    assert report["strategy"] == "Breakout"


def test_replace_records(client, journal_records):
    payload = [record_to_payload(record) for record in journal_records[:2]]
    payload.append({"type": "Nonsense"})
    response = client.put("/api/records", json=payload)
    assert response.json() == {"loaded": 2, "skipped": 1}
    assert len(client.get("/api/records").json()) == 2


def test_replace_records_rejects_bad_payload(client):
    response = client.put("/api/records", json={"rows": []})
    assert response.status_code == 400


def test_accounts_endpoint(client):
    accounts = client.get("/api/accounts").json()["accounts"]
    assert accounts[0] == "All"
    assert "Account 2" in accounts


def test_accounts_endpoint_lists_markets_and_strategies(client):
    body = client.get("/api/accounts").json()
    assert body["markets"] == ["XAUUSD", "EURUSD"]
    assert body["strategies"] == ["Strategy 1", "Breakout"]
