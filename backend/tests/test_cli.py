import json
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

import cli as cli_module
from services.transaction_source_client import SeedFetchError, SourceResponse


@pytest.fixture
def runner(app, monkeypatch):
    monkeypatch.setattr(cli_module, "get_app_context", app.app_context)
    return CliRunner()


def _fake_client(payload):
    client = Mock()
    client.url = "https://seed.example.com/product_transaction.json"
    client.fetch.return_value = SourceResponse(
        data=payload, url=client.url, status_code=200, duration_seconds=0.01,
    )
    return client


def test_stats_prints_month_json(runner, seeded):
    result = runner.invoke(cli_module.cli, ["stats", "--month", "3", "--year", "2022"])

    assert result.exit_code == 0, result.output
    output = json.loads(result.output)
    assert output["period"]["start"] == "2022-03-01T00:00:00Z"
    assert output["statistics"] == {"totalSales": 1155.0, "totalSold": 2, "totalNotSold": 2}
    assert len(output["barChart"]) == 4
    assert output["pieChart"][0] == {"_id": "men's clothing", "count": 2}


def test_stats_rejects_bad_month(runner):
    result = runner.invoke(cli_module.cli, ["stats", "--month", "13"])

    assert result.exit_code == 2
    assert "month" in result.output


def test_seed_command(runner, sample_payload):
    with patch("services.seed_loader.TransactionSourceClient", return_value=_fake_client(sample_payload)):
        result = runner.invoke(cli_module.cli, ["seed"])

    assert result.exit_code == 0, result.output
    assert f"Inserted: {len(sample_payload)}" in result.output


def test_seed_command_fetch_failure(runner):
    failing = Mock()
    failing.url = "https://seed.example.com/product_transaction.json"
    failing.fetch.side_effect = SeedFetchError("connection refused")

    with patch("services.seed_loader.TransactionSourceClient", return_value=failing):
        result = runner.invoke(cli_module.cli, ["seed"])

    assert result.exit_code == 1
    assert "connection refused" in result.output


def test_seed_command_store_failure(runner, sample_payload):
    from sqlalchemy.exc import OperationalError

    from db.store import SqlTransactionStore

    store_error = OperationalError("DELETE FROM transactions", {}, Exception("database is locked"))
    with patch("services.seed_loader.TransactionSourceClient", return_value=_fake_client(sample_payload)), \
            patch.object(SqlTransactionStore, "replace_all", side_effect=store_error):
        result = runner.invoke(cli_module.cli, ["seed"])

    assert result.exit_code == 1
    assert "Error seeding database" in result.output
    assert "database is locked" in result.output
    assert "Traceback" not in result.output
