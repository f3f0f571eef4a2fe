from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from dailyreport.main import app
from dailyreport.report_job import ReportResult

client = TestClient(app)


@pytest.fixture(autouse=True)
def cron_token(monkeypatch):
    monkeypatch.setenv("CRON_TOKEN", "secret")


def test_healthz():
    assert client.get("/healthz").json() == {"ok": True}


def test_cron_check_requires_token():
    assert client.post("/cron/check").status_code == 401
    assert client.post("/cron/check?token=wrong").status_code == 401


@patch("dailyreport.main.tick")
def test_cron_check_runs_email_triggered_variant(mock_tick):
    mock_tick.return_value = ReportResult(ok=True, message="No new classroom report")
    r = client.post("/cron/check", headers={"X-Cron-Token": "secret"})
    assert r.status_code == 200
    assert r.json()["message"] == "No new classroom report"
    mock_tick.assert_called_once()


@patch("dailyreport.main.run_daily_report")
def test_manual_run(mock_run):
    mock_run.return_value = ReportResult(ok=True, message="sent", email_sent=True, metrics={"elements": 7})
    r = client.post("/report/run?token=secret")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "message": "sent", "email_sent": True, "metrics": {"elements": 7}}
