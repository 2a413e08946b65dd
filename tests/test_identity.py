"""Tests for typespeed.core.identity – local sign-in state."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from typespeed.core.identity import USER_ENV, Identity, user_id_for


@pytest.fixture(autouse=True)
def _no_env_user(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(USER_ENV, raising=False)


@pytest.fixture()
def identity_file(tmp_path: Path) -> Path:
    return tmp_path / "identity.json"


class TestUserId:
    def test_stable(self):
        assert user_id_for("ana") == user_id_for("ana")

    def test_case_insensitive(self):
        assert user_id_for("Ana") == user_id_for("ana")

    def test_distinct_users(self):
        assert user_id_for("ana") != user_id_for("bob")


class TestIdentity:
    def test_signed_out_by_default(self, identity_file: Path):
        ident = Identity(identity_file)
        assert not ident.is_signed_in()
        assert ident.user_id is None
        assert ident.username is None

    def test_sign_in(self, identity_file: Path):
        ident = Identity(identity_file)
        uid = ident.sign_in("  ana ")
        assert ident.is_signed_in()
        assert ident.username == "ana"
        assert ident.user_id == uid == user_id_for("ana")

    def test_sign_in_persists(self, identity_file: Path):
        Identity(identity_file).sign_in("ana")
        assert Identity(identity_file).username == "ana"
        assert json.loads(identity_file.read_text(encoding="utf-8")) == {"username": "ana"}

    def test_sign_out_persists(self, identity_file: Path):
        ident = Identity(identity_file)
        ident.sign_in("ana")
        ident.sign_out()
        assert not ident.is_signed_in()
        assert Identity(identity_file).username is None

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_username_rejected(self, identity_file: Path, name: str):
        with pytest.raises(ValueError):
            Identity(identity_file).sign_in(name)

    def test_corrupt_file(self, identity_file: Path):
        identity_file.write_text("{nope", encoding="utf-8")
        assert not Identity(identity_file).is_signed_in()

    def test_non_dict_file(self, identity_file: Path):
        identity_file.write_text(json.dumps(["ana"]), encoding="utf-8")
        assert not Identity(identity_file).is_signed_in()

    def test_env_user(self, identity_file: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv(USER_ENV, "envuser")
        ident = Identity(identity_file)
        assert ident.username == "envuser"
        assert not identity_file.exists()
