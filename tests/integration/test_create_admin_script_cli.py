from __future__ import annotations

import runpy
from pathlib import Path

import pytest

from libadmin.db.repositories import accounts as account_repo
from libadmin.db.repositories import admin_users as admin_repo


SCRIPT_GLOBALS = runpy.run_path(
    Path(__file__).resolve().parents[2] / "scripts" / "create_admin.py"
)
MAIN = SCRIPT_GLOBALS["main"]


def test_creates_super_admin_by_default(db_session, capsys):
    assert MAIN(["root@example.com", "rootpass"]) == 0
    out = capsys.readouterr().out
    assert "root@example.com" in out
    assert "can_manage_system" in out

    account = account_repo.get_account_by_email(db_session, "root@example.com")
    assert account.custom_claims == {"role": "super_admin", "isAdmin": True}
    profile = admin_repo.get_admin_user(db_session, account.uid)
    assert profile.role == "super_admin"
    assert profile.display_name == "root"
    assert profile.created_by == "script"


def test_explicit_role_and_name(db_session):
    assert MAIN(["lib@example.com", "libpass", "librarian", "Lina B"]) == 0
    account = account_repo.get_account_by_email(db_session, "lib@example.com")
    profile = admin_repo.get_admin_user(db_session, account.uid)
    assert profile.role == "librarian"
    assert profile.display_name == "Lina B"


def test_short_password_rejected(capsys):
    assert MAIN(["x@example.com", "123"]) == 1
    assert "at least 6" in capsys.readouterr().err


def test_unknown_role_rejected():
    with pytest.raises(SystemExit):
        MAIN(["x@example.com", "abcdef", "owner"])
