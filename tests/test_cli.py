"""
Tests for the spiceflow command line interface.
"""
import json

import pytest
from typer.testing import CliRunner

from spiceflow_cli.main import app
from spiceflow_sdk.config import TX_API_URL_ENV
from tests.test_helpers import TEST_TX_API_URL

runner = CliRunner()

BATCH = {
    "chainId": 688688,
    "calls": [{"to": "0x0000000000000000000000000000000000000001", "value": "0", "data": "0x"}],
    "recentBlock": 1,
}
STATUS_URL = f"{TEST_TX_API_URL}/intent/intent-1/step/0/status"


@pytest.fixture
def batch_file(tmp_path):
    path = tmp_path / "batches.json"
    path.write_text(json.dumps([BATCH]))
    return path


def test_hash(batch_file):
    result = runner.invoke(app, ["hash", str(batch_file)])
    assert result.exit_code == 0
    assert "chain 688688: 0x7a451f93fea14bdbffba5438f7666bd5d9d2a998218db946530bdfc2c2fb7cbb" in result.stdout
    assert "digest: 0x7ae139fbb71b5d1f4be26fbe51960c5b916ce063c23a3b183a650c2c1b1b1c48" in result.stdout


def test_hash_json(tmp_path):
    path = tmp_path / "intent.json"
    path.write_text(json.dumps({"chainBatches": [BATCH]}))
    result = runner.invoke(app, ["hash", "--json", str(path)])
    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["digest"] == "0x7ae139fbb71b5d1f4be26fbe51960c5b916ce063c23a3b183a650c2c1b1b1c48"
    assert output["chainBatches"][0]["chainId"] == "688688"


def test_hash_invalid_batch(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{**BATCH, "recentBlock": 2**256}]))
    result = runner.invoke(app, ["hash", str(path)])
    assert result.exit_code == 1


def test_hash_empty_list(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("[]")
    result = runner.invoke(app, ["hash", str(path)])
    assert result.exit_code == 1


def test_status_no_wait(requests_mock):
    requests_mock.get(STATUS_URL, json={"success": True, "data": {"status": "executing", "transactionHash": "0xbeef"}})
    result = runner.invoke(app, ["status", "intent-1", "--no-wait", "--tx-api-url", TEST_TX_API_URL])
    assert result.exit_code == 0
    assert "status: executing" in result.stdout
    assert "transaction: 0xbeef" in result.stdout


def test_status_wait_reverted(requests_mock, monkeypatch):
    monkeypatch.setenv(TX_API_URL_ENV, TEST_TX_API_URL)
    requests_mock.get(STATUS_URL, [
        {"json": {"success": True, "data": {"status": "executing"}}},
        {"json": {"success": True, "data": {"status": "reverted", "transactionHash": "0xdead"}}},
    ])
    result = runner.invoke(app, ["status", "intent-1", "--interval", "0"])
    assert result.exit_code == 1
    assert "status: reverted" in result.stdout


def test_status_requires_url(monkeypatch):
    monkeypatch.delenv(TX_API_URL_ENV, raising=False)
    result = runner.invoke(app, ["status", "intent-1"])
    assert result.exit_code == 2


def test_status_endpoint_error(requests_mock):
    requests_mock.get(STATUS_URL, status_code=404, text="unknown intent")
    result = runner.invoke(app, ["status", "intent-1", "--no-wait", "--tx-api-url", TEST_TX_API_URL])
    assert result.exit_code == 1
