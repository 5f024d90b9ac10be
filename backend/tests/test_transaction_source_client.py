"""
Tests for TransactionSourceClient

These tests use mocking to avoid hitting the real seed source.
"""

import pytest
from unittest.mock import Mock, patch

import requests

from services.transaction_source_client import (
    SeedFetchError,
    SourceResponse,
    TransactionSourceClient,
)

SOURCE_URL = "https://seed.example.com/product_transaction.json"


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def mock_session():
    session = Mock()
    session.headers = {}
    return session


@pytest.fixture
def no_sleep():
    with patch("services.transaction_source_client.time.sleep") as sleep:
        yield sleep


def _response(status_code=200, payload=None, json_error=None):
    response = Mock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


def _client(session, max_retries=3):
    return TransactionSourceClient(url=SOURCE_URL, timeout=5, max_retries=max_retries, session=session)


# =============================================================================
# Success
# =============================================================================

def test_fetch_returns_array(mock_session):
    mock_session.get.return_value = _response(payload=[{"id": 1}, {"id": 2}])

    result = _client(mock_session).fetch()

    assert isinstance(result, SourceResponse)
    assert result.data == [{"id": 1}, {"id": 2}]
    assert result.retry_count == 0
    mock_session.get.assert_called_once_with(SOURCE_URL, timeout=5.0)


def test_client_sets_headers(mock_session):
    _client(mock_session)

    assert mock_session.headers["Accept"] == "application/json"
    assert "User-Agent" in mock_session.headers


def test_defaults_come_from_app_config(app, mock_session):
    with app.app_context():
        client = TransactionSourceClient(session=mock_session)

    assert client.url == app.config["SEED_SOURCE_URL"]
    assert client.max_retries == app.config["SEED_MAX_RETRIES"]


# =============================================================================
# Retries
# =============================================================================

def test_retries_server_errors_then_succeeds(mock_session, no_sleep):
    mock_session.get.side_effect = [
        _response(status_code=503),
        _response(status_code=502),
        _response(payload=[]),
    ]

    result = _client(mock_session).fetch()

    assert result.data == []
    assert result.retry_count == 2
    assert [c.args[0] for c in no_sleep.call_args_list] == [1.0, 2.0]


def test_retries_connection_errors_until_exhausted(mock_session, no_sleep):
    mock_session.get.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(SeedFetchError) as exc:
        _client(mock_session, max_retries=2).fetch()

    assert mock_session.get.call_count == 2
    assert exc.value.url == SOURCE_URL
    assert no_sleep.call_count == 1


def test_retries_timeouts(mock_session, no_sleep):
    mock_session.get.side_effect = [requests.exceptions.Timeout("slow"), _response(payload=[{"id": 1}])]

    result = _client(mock_session).fetch()

    assert result.data == [{"id": 1}]


# =============================================================================
# Immediate failures
# =============================================================================

def test_client_error_not_retried(mock_session, no_sleep):
    mock_session.get.return_value = _response(status_code=404)

    with pytest.raises(SeedFetchError) as exc:
        _client(mock_session).fetch()

    assert exc.value.status_code == 404
    assert mock_session.get.call_count == 1
    no_sleep.assert_not_called()


def test_invalid_json_rejected(mock_session):
    mock_session.get.return_value = _response(json_error=ValueError("Expecting value"))

    with pytest.raises(SeedFetchError, match="invalid JSON"):
        _client(mock_session).fetch()


def test_non_array_body_rejected(mock_session):
    mock_session.get.return_value = _response(payload={"items": []})

    with pytest.raises(SeedFetchError, match="expected a JSON array"):
        _client(mock_session).fetch()


def test_missing_url_rejected(mock_session):
    with patch("services.transaction_source_client._app_config", return_value={"SEED_SOURCE_URL": ""}):
        with pytest.raises(SeedFetchError):
            TransactionSourceClient(session=mock_session)


# =============================================================================
# Integration (real seed source)
# =============================================================================

@pytest.mark.integration
def test_real_seed_source_returns_valid_payload():
    from config import DEFAULT_SEED_SOURCE_URL
    from services.seed_loader import parse_payload

    response = TransactionSourceClient(url=DEFAULT_SEED_SOURCE_URL, timeout=30, max_retries=2).fetch()

    assert response.data
    assert parse_payload(response.data)
