"""Tests for the SQLite persistence layer."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from api.errors import PersistenceError
from core.media import AuthenticatedUser, FileRecord
from db.operations import DatabaseHandler


def _record(name: str, score: float | None = 0.5, fake: bool = False) -> FileRecord:
    return FileRecord(name, f"https://drive.google.com/uc?id={name}", score, fake)


class TestUserFiles:
    def test_unknown_user_has_no_aggregate(self, db: DatabaseHandler) -> None:
        assert db.get_user_files("nobody@example.com") is None

    def test_records_come_back_in_insertion_order(self, db: DatabaseHandler, user: AuthenticatedUser) -> None:
        for name in ("a.mp4", "b.jpg", "c.mp4"):
            db.append_file_record(user, _record(name))

        names = [r.file_name for r in db.get_user_files(user.email)]

        assert names == ["a.mp4", "b.jpg", "c.mp4"]

    def test_record_fields_round_trip(self, db: DatabaseHandler, user: AuthenticatedUser) -> None:
        original = _record("a.mp4", score=None, fake=True)
        db.append_file_record(user, original)

        (stored,) = db.get_user_files(user.email)

        assert stored == original

    def test_users_do_not_see_each_other(self, db: DatabaseHandler, user: AuthenticatedUser) -> None:
        other = AuthenticatedUser(uid="uid-2", email="bob@example.com", name="Bob")
        db.append_file_record(user, _record("mine.mp4"))
        db.append_file_record(other, _record("theirs.mp4"))

        assert [r.file_name for r in db.get_user_files(user.email)] == ["mine.mp4"]
        assert [r.file_name for r in db.get_user_files(other.email)] == ["theirs.mp4"]

    def test_concurrent_appends_are_all_kept(self, db: DatabaseHandler, user: AuthenticatedUser) -> None:
        names = [f"clip{i}.mp4" for i in range(20)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda n: db.append_file_record(user, _record(n)), names))

        stored = db.get_user_files(user.email)
        assert sorted(r.file_name for r in stored) == sorted(names)


class TestUserProfile:
    def test_profile_is_upserted_last_write_wins(self, db: DatabaseHandler, user: AuthenticatedUser) -> None:
        db.append_file_record(user, _record("a.mp4"))
        renamed = AuthenticatedUser(uid=user.uid, email=user.email, name="Alice Liddell")
        db.append_file_record(renamed, _record("b.mp4"))

        profile = db.get_user(user.email)

        assert profile["name"] == "Alice Liddell"
        assert profile["uid"] == "uid-1"

    def test_same_uid_under_new_email_still_saves(self, db: DatabaseHandler, user: AuthenticatedUser) -> None:
        moved = AuthenticatedUser(uid=user.uid, email="alice.new@example.com", name=user.name)
        db.append_file_record(user, _record("before.mp4"))

        db.append_file_record(moved, _record("after.mp4"))

        assert [r.file_name for r in db.get_user_files(moved.email)] == ["after.mp4"]
        assert [r.file_name for r in db.get_user_files(user.email)] == ["before.mp4"]
        assert db.get_user(moved.email)["uid"] == user.uid

    def test_unknown_profile(self, db: DatabaseHandler) -> None:
        assert db.get_user("nobody@example.com") is None


def test_write_failure_raises_persistence_error(tmp_path: Path, user: AuthenticatedUser) -> None:
    handler = DatabaseHandler(str(tmp_path / "no-schema.db"))

    with pytest.raises(PersistenceError):
        handler.append_file_record(user, _record("a.mp4"))


def test_init_schema_is_idempotent_and_creates_parent_dir(tmp_path: Path) -> None:
    handler = DatabaseHandler(str(tmp_path / "nested" / "relay.db"))

    handler.init_schema()
    handler.init_schema()

    assert (tmp_path / "nested" / "relay.db").exists()
