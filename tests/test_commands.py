from __future__ import annotations

from click.testing import CliRunner

from commands.admin import quotedesk
from services.application import BusinessIdentityService, QuotationWriter


def test_init_db_is_idempotent() -> None:
    result = CliRunner().invoke(quotedesk, ["init-db"])

    assert result.exit_code == 0
    assert "Database tables are in place" in result.output


def test_default_identity_commands(make_identity) -> None:
    make_identity("Alpha Traders", is_default=True)
    beta = make_identity("Beta Steel")
    runner = CliRunner()

    shown = runner.invoke(quotedesk, ["show-default-identity"])
    assert "Alpha Traders" in shown.output

    result = runner.invoke(quotedesk, ["set-default-identity", beta])
    assert result.exit_code == 0
    assert BusinessIdentityService().get_default()["id"] == beta


def test_show_default_identity_when_none() -> None:
    result = CliRunner().invoke(quotedesk, ["show-default-identity"])

    assert result.exit_code == 0
    assert "No default business identity" in result.output


def test_set_default_identity_unknown_id_exits_1() -> None:
    result = CliRunner().invoke(quotedesk, ["set-default-identity", "missing"])

    assert result.exit_code == 1


def test_set_status_command(quotation_payload) -> None:
    created = QuotationWriter().create(quotation_payload())
    runner = CliRunner()

    ok = runner.invoke(quotedesk, ["set-status", created["id"], "EXPIRED"])
    assert ok.exit_code == 0
    assert f"{created['quotationNumber']} is now EXPIRED" in ok.output

    bad = runner.invoke(quotedesk, ["set-status", created["id"], "CANCELLED"])
    assert bad.exit_code == 1
    assert QuotationWriter().get(created["id"])["status"] == "EXPIRED"
