"""CLI walkthrough against a temporary SQLite database."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from ticketseal.cli import cli

from tests.factories import ATTENDEE, OWNER


def _field(output: str, label: str) -> str:
    for line in output.splitlines():
        if line.startswith(label):
            return line.split(":", 1)[1].strip()
    raise AssertionError(f"{label!r} not in output:\n{output}")


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()
    env = {"TICKETSEAL_DB_PATH": str(tmp_path / "cli.db")}

    def _invoke(*args: str):
        return runner.invoke(cli, list(args), env=env)

    return _invoke


def test_issue_and_redeem_walkthrough(run):
    result = run("--sender", OWNER, "init")
    assert result.exit_code == 0, result.output
    assert OWNER in result.output

    result = run("--sender", OWNER, "issue-batch", "2")
    assert result.exit_code == 0, result.output
    batch_id = _field(result.output, "Batch ID")
    secret = _field(result.output, "Secret")
    assert secret.startswith("S")

    result = run("--sender", OWNER, "issue-ticket", batch_id, "--secret", secret)
    assert result.exit_code == 0, result.output
    ticket_id = _field(result.output, "Ticket ID")
    proof = _field(result.output, "Proof")

    result = run("--sender", ATTENDEE, "redeem", batch_id, ticket_id, proof)
    assert result.exit_code == 0, result.output
    assert "REDEEMED" in result.output

    result = run("--sender", ATTENDEE, "redeem", batch_id, ticket_id, proof)
    assert result.exit_code == 2
    assert "Error [7]" in result.output

    result = run("status", batch_id, ticket_id)
    assert result.exit_code == 0, result.output
    assert _field(result.output, "Status") == "redeemed"

    result = run("batch", batch_id)
    assert _field(result.output, "Issued") == "1/2"

    result = run("batches", OWNER)
    assert result.output.strip() == batch_id


def test_unauthorized_batch_creation(run):
    run("--sender", OWNER, "init")
    result = run("--sender", ATTENDEE, "issue-batch", "5")
    assert result.exit_code == 2
    assert "Error [1]" in result.output


def test_sender_required(run, monkeypatch):
    monkeypatch.delenv("TICKETSEAL_SENDER", raising=False)
    result = run("init")
    assert result.exit_code == 1
    assert "No sender address configured" in result.output


def test_negative_batch_id_is_a_usage_error(run):
    run("--sender", OWNER, "init")
    ticket_id = "00" * 32
    for args in (("status", "--", "-1", ticket_id), ("batch", "--", "-1")):
        result = run(*args)
        assert result.exit_code == 2
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Invalid value" in result.output
