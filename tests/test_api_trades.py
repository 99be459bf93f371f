"""Tests for the trade lifecycle, analytics endpoints, backtests and dashboard."""

import pytest


def open_trade(client, headers, coin_id, strategy_id=None, **overrides) -> dict:
    payload = {
        "coin_id": coin_id,
        "strategy_id": strategy_id,
        "trade_date": "2024-03-01",
        "trade_time": "09:00:00",
        "avg_entry": 100,
        "stop_loss": 95,
        "quantity": 2,
        "entry_fee_percentage": 0.1,
    }
    payload.update(overrides)
    resp = client.post("/api/trades", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def close_trade(client, headers, trade_id, avg_exit, **overrides):
    payload = {
        "exit_date": "2024-03-01",
        "exit_time": "15:00:00",
        "avg_exit": avg_exit,
        "exit_fee_percentage": 0.1,
    }
    payload.update(overrides)
    return client.post(f"/api/trades/{trade_id}/exit", json=payload, headers=headers)


# ---------------------------------------------------------------------------
# 1. Lifecycle
# ---------------------------------------------------------------------------

class TestTradeLifecycle:
    def test_create_is_open_with_derived_entry_fields(self, client, auth_headers, coin):
        trade = open_trade(client, auth_headers, coin["id"])
        assert trade["status"] == "OPEN"
        assert trade["direction"] == "Long"
        assert trade["trade_value"] == pytest.approx(200.0)
        assert trade["stop_loss_percentage"] == pytest.approx(5.0)
        assert trade["commission"] == pytest.approx(0.2)
        assert trade["profit_loss"] is None
        assert trade["avg_exit"] is None

    def test_rejects_non_positive_prices(self, client, auth_headers, coin):
        resp = client.post(
            "/api/trades",
            json={"coin_id": coin["id"], "trade_date": "2024-03-01", "trade_time": "09:00:00",
                  "avg_entry": 0, "stop_loss": 95, "quantity": 1},
            headers=auth_headers,
        )
        assert resp.status_code == 422

    def test_exit_closes_once(self, client, auth_headers, coin):
        trade = open_trade(client, auth_headers, coin["id"])
        resp = close_trade(client, auth_headers, trade["id"], avg_exit=110)
        assert resp.status_code == 200
        closed = resp.json()
        assert closed["status"] == "CLOSED"
        # gross 20, fees 0.2 + 0.22
        assert closed["gross_profit_loss"] == pytest.approx(20.0)
        assert closed["profit_loss"] == pytest.approx(19.58)
        assert closed["profit_loss_percentage"] == pytest.approx(10.0)
        assert closed["duration"] == pytest.approx(6.0)

        again = close_trade(client, auth_headers, trade["id"], avg_exit=120)
        assert again.status_code == 409

    def test_exit_before_entry_rejected(self, client, auth_headers, coin):
        trade = open_trade(client, auth_headers, coin["id"])
        resp = close_trade(client, auth_headers, trade["id"], avg_exit=110,
                           exit_date="2024-02-28")
        assert resp.status_code == 422

    def test_closed_trade_is_immutable(self, client, auth_headers, coin):
        trade = open_trade(client, auth_headers, coin["id"])
        close_trade(client, auth_headers, trade["id"], avg_exit=110)
        resp = client.put(f"/api/trades/{trade['id']}", json={"quantity": 5}, headers=auth_headers)
        assert resp.status_code == 409
        assert client.delete(f"/api/trades/{trade['id']}", headers=auth_headers).status_code == 204

    def test_open_trade_can_be_edited(self, client, auth_headers, coin, strategy):
        trade = open_trade(client, auth_headers, coin["id"])
        resp = client.put(
            f"/api/trades/{trade['id']}",
            json={"quantity": 3, "strategy_id": strategy["id"], "notes": "scaled in"},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["quantity"] == 3
        assert resp.json()["strategy_id"] == strategy["id"]

    def test_preview_exit(self, client, auth_headers, coin):
        trade = open_trade(client, auth_headers, coin["id"])
        resp = client.post(
            f"/api/trades/{trade['id']}/preview-exit",
            json={"avg_exit": 90, "exit_fee_percentage": 0.1},
            headers=auth_headers,
        )
        assert resp.status_code == 200
        preview = resp.json()
        assert preview["gross_profit_loss"] == pytest.approx(-20.0)
        assert preview["commission"] == pytest.approx(0.2 + 0.18)
        assert client.get(f"/api/trades/{trade['id']}", headers=auth_headers).json()["status"] == "OPEN"

    def test_list_filters(self, client, auth_headers, coin, strategy):
        first = open_trade(client, auth_headers, coin["id"], strategy["id"], notes="breakout long")
        second = open_trade(client, auth_headers, coin["id"], trade_date="2024-04-10")
        close_trade(client, auth_headers, first["id"], avg_exit=105)

        def ids(**params):
            resp = client.get("/api/trades", params=params, headers=auth_headers)
            assert resp.status_code == 200
            return [t["id"] for t in resp.json()["items"]]

        assert len(ids()) == 2
        assert ids(status="CLOSED") == [first["id"]]
        assert ids(strategy_id=strategy["id"]) == [first["id"]]
        assert ids(date_from="2024-04-01") == [second["id"]]
        assert ids(date_to="2024-03-31") == [first["id"]]
        assert ids(search="breakout") == [first["id"]]
        assert len(ids(search="btc")) == 2
        assert client.get("/api/trades", params={"status": "PENDING"}, headers=auth_headers).status_code == 422

    def test_list_reports_total_across_pages(self, client, auth_headers, coin):
        for day in range(1, 6):
            open_trade(client, auth_headers, coin["id"], trade_date=f"2024-03-0{day}")

        resp = client.get("/api/trades", params={"limit": 2, "offset": 2}, headers=auth_headers)
        body = resp.json()
        assert [t["trade_date"] for t in body["items"]] == ["2024-03-03", "2024-03-02"]
        assert body["pagination"] == {
            "page": 2, "limit": 2, "offset": 2, "total": 5, "total_pages": 3,
        }

        last = client.get("/api/trades", params={"limit": 2, "offset": 4}, headers=auth_headers).json()
        assert len(last["items"]) == 1
        assert last["pagination"]["total"] == 5

        filtered = client.get(
            "/api/trades", params={"status": "CLOSED", "limit": 2}, headers=auth_headers
        ).json()
        assert filtered["items"] == []
        assert filtered["pagination"]["total"] == 0
        assert filtered["pagination"]["total_pages"] == 0
        assert client.get("/api/trades", params={"limit": 0}, headers=auth_headers).status_code == 422

    def test_unknown_trade_404(self, client, auth_headers):
        assert client.get("/api/trades/999", headers=auth_headers).status_code == 404


# ---------------------------------------------------------------------------
# 2. Analytics endpoints
# ---------------------------------------------------------------------------

class TestAnalyticsEndpoints:
    def test_empty_report(self, client, auth_headers):
        report = client.get("/api/trades/analytics", headers=auth_headers).json()
        assert report["total_trades"] == 0
        assert report["win_rate"] == 0
        assert report["by_coin"] == []
        assert report["by_duration"]["4weeks+"] == 0

    def test_report_over_filtered_trades(self, client, auth_headers, coin, strategy):
        win = open_trade(client, auth_headers, coin["id"], strategy["id"], entry_fee_percentage=0)
        loss = open_trade(client, auth_headers, coin["id"], strategy["id"], entry_fee_percentage=0)
        open_trade(client, auth_headers, coin["id"])
        close_trade(client, auth_headers, win["id"], avg_exit=110, exit_fee_percentage=0)
        close_trade(client, auth_headers, loss["id"], avg_exit=90, exit_fee_percentage=0)

        report = client.get("/api/trades/analytics", headers=auth_headers).json()
        assert report["total_trades"] == 3
        assert report["open_trades"] == 1
        assert report["closed_trades"] == 2
        assert report["win_rate"] == 50
        assert report["total_profit_loss"] == 0
        assert report["best_trade"] == 20
        assert report["worst_trade"] == -20
        assert report["by_coin"][0]["coin_symbol"] == "BTC"
        assert report["by_strategy"][0]["strategy_name"] == "Breakout"
        assert report["by_duration"]["30mins-24hours"] == 2

        only_strategy = client.get(
            "/api/trades/analytics", params={"strategy_id": strategy["id"]}, headers=auth_headers
        ).json()
        assert only_strategy["total_trades"] == 2

    def test_daily_pnl(self, client, auth_headers, coin):
        trade = open_trade(client, auth_headers, coin["id"], entry_fee_percentage=0)
        close_trade(client, auth_headers, trade["id"], avg_exit=105, exit_fee_percentage=0,
                    exit_date="2024-03-04")
        resp = client.get("/api/trades/daily-pnl", params={"year": 2024, "month": 3}, headers=auth_headers)
        assert resp.status_code == 200
        days = resp.json()["daily_pnl"]
        assert [(d["day"], d["pnl"], d["trades"]) for d in days] == [(4, 10.0, 1)]

        empty = client.get("/api/trades/daily-pnl", params={"year": 2024, "month": 2}, headers=auth_headers)
        assert empty.json()["daily_pnl"] == []
        bad = client.get("/api/trades/daily-pnl", params={"year": 2024, "month": 13}, headers=auth_headers)
        assert bad.status_code == 422

    def test_dashboard_summary(self, client, auth_headers, coin):
        trade = open_trade(client, auth_headers, coin["id"], entry_fee_percentage=0)
        open_trade(client, auth_headers, coin["id"], trade_date="2024-03-05")
        close_trade(client, auth_headers, trade["id"], avg_exit=110, exit_fee_percentage=0)

        summary = client.get("/api/dashboard/summary", headers=auth_headers).json()
        assert summary["total_trades"] == 2
        assert summary["open_trades"] == 1
        assert summary["total_pnl"] == 20.0
        assert summary["win_rate"] == 100.0
        assert len(summary["open_positions"]) == 1
        assert summary["recent_trades"][0]["trade_date"] == "2024-03-05"


# ---------------------------------------------------------------------------
# 3. Backtests and calculator
# ---------------------------------------------------------------------------

class TestBacktestEndpoints:
    def _add(self, client, headers, coin_id, strategy_id, entry, stop_loss, exit, day="2024-01-01"):
        resp = client.post(
            "/api/backtest",
            json={"coin_id": coin_id, "strategy_id": strategy_id, "trade_date": day,
                  "trade_time": "10:00:00", "entry": entry, "stop_loss": stop_loss, "exit": exit},
            headers=headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    def test_create_derives_direction_and_r(self, client, auth_headers, coin, strategy):
        row = self._add(client, auth_headers, coin["id"], strategy["id"], 100, 105, 90)
        assert row["direction"] == "Short"
        assert row["r_value"] == pytest.approx(2.0)

    def test_list_filter_and_sort(self, client, auth_headers, coin, strategy):
        a = self._add(client, auth_headers, coin["id"], strategy["id"], 100, 95, 110, "2024-01-01")
        b = self._add(client, auth_headers, coin["id"], strategy["id"], 100, 105, 110, "2024-01-02")
        c = self._add(client, auth_headers, coin["id"], strategy["id"], 100, 95, 105, "2024-01-03")

        def ids(**params):
            resp = client.get("/api/backtest", params=params, headers=auth_headers)
            return [r["id"] for r in resp.json()["items"]]

        assert ids() == [c["id"], b["id"], a["id"]]
        assert ids(direction="Short") == [b["id"]]
        assert ids(sort_by="r_value", sort_order="asc") == [b["id"], c["id"], a["id"]]
        assert ids(limit=1, offset=1) == [b["id"]]
        page = client.get(
            "/api/backtest", params={"direction": "Long", "limit": 1}, headers=auth_headers
        ).json()
        assert [r["id"] for r in page["items"]] == [c["id"]]
        assert page["pagination"]["total"] == 2
        assert page["pagination"]["total_pages"] == 2
        resp = client.get("/api/backtest", params={"sort_by": "exit"}, headers=auth_headers)
        assert resp.status_code == 422

    def test_update_recomputes_r(self, client, auth_headers, coin, strategy):
        row = self._add(client, auth_headers, coin["id"], strategy["id"], 100, 95, 110)
        resp = client.put(f"/api/backtest/{row['id']}", json={"exit": 115}, headers=auth_headers)
        assert resp.json()["r_value"] == pytest.approx(3.0)
        assert client.put(
            f"/api/backtest/{row['id']}", json={"exit": None}, headers=auth_headers
        ).status_code == 422
        assert client.delete(f"/api/backtest/{row['id']}", headers=auth_headers).status_code == 204

    def test_notes_can_be_cleared(self, client, auth_headers, coin, strategy):
        row = self._add(client, auth_headers, coin["id"], strategy["id"], 100, 95, 110)
        client.put(f"/api/backtest/{row['id']}", json={"notes": "late entry"}, headers=auth_headers)
        resp = client.put(f"/api/backtest/{row['id']}", json={"notes": None}, headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["notes"] is None

    def test_strategy_analytics(self, client, auth_headers, coin, strategy):
        self._add(client, auth_headers, coin["id"], strategy["id"], 100, 95, 110)
        self._add(client, auth_headers, coin["id"], strategy["id"], 100, 95, 95)
        report = client.get(f"/api/backtest/analytics/{strategy['id']}", headers=auth_headers).json()
        assert report["total_trades"] == 2
        assert report["win_percentage"] == 50
        assert report["ev"] == pytest.approx(0.5)
        assert client.get("/api/backtest/analytics/999", headers=auth_headers).status_code == 404


def test_position_size_endpoint(client, auth_headers):
    resp = client.post(
        "/api/calculator/position-size",
        json={"entry": 100, "stop_loss": 98, "account_balance": 10000, "risk_percentage": 1},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["quantity"] == pytest.approx(50.0)
