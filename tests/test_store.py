"""Tests for store.UserStore."""

import asyncio
import json
from unittest.mock import patch

import pytest

from roster.exceptions import (
    DuplicateNameError,
    MissingFieldsError,
    UserNotFoundError,
    UserValidationError,
)
from roster.models import User
from roster.storage import JsonFileStorage, OperationLog
from roster.store import UserStore


def run(coro):
    return asyncio.run(coro)


def on_disk(path):
    return [User.from_dict(item) for item in json.loads(path.read_text())]


class TestLoad:
    def test_load_from_file(self, seeded_file):
        store = UserStore(JsonFileStorage(seeded_file))
        assert run(store.load()) == 2
        assert store.loaded
        assert store.get(4).name == "Bob Stone"

    def test_load_missing_file_is_empty(self, store):
        assert run(store.load()) == 0
        assert len(store) == 0


class TestCreate:
    def test_first_user_gets_id_one(self, store, data_file):
        run(store.load())
        user = run(store.create({"name": "Alice", "age": "30"}))
        assert user == User(1, "Alice", "30")
        assert store.get(1) == user
        assert on_disk(data_file) == [user]

    def test_id_follows_max(self, seeded_file):
        store = UserStore(JsonFileStorage(seeded_file))
        run(store.load())
        user = run(store.create({"name": "Carol", "age": "22"}))
        assert user.id == 5

    def test_extra_fields_ignored(self, store, data_file):
        run(store.load())
        user = run(store.create({"name": "Alice", "age": "30", "id": 99, "admin": True}))
        assert user.id == 1
        assert json.loads(data_file.read_text()) == [{"id": 1, "name": "Alice", "age": "30"}]

    @pytest.mark.parametrize(
        "payload",
        [{}, {"name": "Alice"}, {"age": "30"}, {"name": "", "age": "30"}, {"name": "Alice", "age": 0}],
    )
    def test_missing_fields(self, store, payload):
        run(store.load())
        with pytest.raises(MissingFieldsError):
            run(store.create(payload))
        assert len(store) == 0

    def test_validation_errors_leave_collection_unchanged(self, store, data_file):
        run(store.load())
        with pytest.raises(UserValidationError) as excinfo:
            run(store.create({"name": "R2D2", "age": "x"}))
        assert len(excinfo.value.errors) == 2
        assert len(store) == 0
        assert not data_file.exists()

    def test_duplicate_name(self, store):
        run(store.load())
        run(store.create({"name": "Alice", "age": "30"}))
        with pytest.raises(DuplicateNameError):
            run(store.create({"name": "Alice", "age": "25"}))
        assert len(store) == 1

    def test_concurrent_creates_get_distinct_ids(self, store, data_file):
        async def scenario():
            await store.load()
            return await asyncio.gather(
                *(store.create({"name": name, "age": "20"}) for name in ("Ann", "Ben", "Cid", "Dee"))
            )

        users = run(scenario())
        assert sorted(u.id for u in users) == [1, 2, 3, 4]
        assert on_disk(data_file) == store.snapshot()

    def test_concurrent_duplicates_only_one_wins(self, store):
        async def scenario():
            await store.load()
            return await asyncio.gather(
                store.create({"name": "Alice", "age": "30"}),
                store.create({"name": "Alice", "age": "31"}),
                return_exceptions=True,
            )

        results = run(scenario())
        assert sum(isinstance(r, User) for r in results) == 1
        assert sum(isinstance(r, DuplicateNameError) for r in results) == 1


class TestDelete:
    def test_delete_existing(self, seeded_file):
        store = UserStore(JsonFileStorage(seeded_file))
        run(store.load())
        removed = run(store.delete(1))
        assert removed == User(1, "Alice", "30")
        with pytest.raises(UserNotFoundError):
            store.get(1)
        assert on_disk(seeded_file) == [User(4, "Bob Stone", "41")]

    def test_delete_missing(self, store):
        run(store.load())
        with pytest.raises(UserNotFoundError):
            run(store.delete(9999))

    def test_highest_id_reused(self, store):
        run(store.load())
        run(store.create({"name": "Alice", "age": "30"}))
        run(store.create({"name": "Bob", "age": "30"}))
        run(store.delete(2))
        assert run(store.create({"name": "Carol", "age": "30"})).id == 2


class TestSaveFailures:
    def test_failed_save_keeps_memory_and_marks_dirty(self, store):
        run(store.load())
        with patch.object(JsonFileStorage, "save_all", return_value=False):
            user = run(store.create({"name": "Alice", "age": "30"}))
        assert store.get(1) == user
        assert store.dirty
        assert store.failed_saves == 1

    def test_next_save_clears_dirty(self, store, data_file):
        run(store.load())
        with patch.object(JsonFileStorage, "save_all", return_value=False):
            run(store.create({"name": "Alice", "age": "30"}))
        run(store.create({"name": "Bob", "age": "30"}))
        assert not store.dirty
        assert [u.name for u in on_disk(data_file)] == ["Alice", "Bob"]

    def test_flush_retries_dirty_store(self, store, data_file):
        run(store.load())
        with patch.object(JsonFileStorage, "save_all", return_value=False):
            run(store.create({"name": "Alice", "age": "30"}))
        assert run(store.flush()) is True
        assert not store.dirty
        assert [u.name for u in on_disk(data_file)] == ["Alice"]

    def test_flush_noop_when_clean(self, store, data_file):
        run(store.load())
        assert run(store.flush()) is True
        assert not data_file.exists()


class TestHooks:
    def test_backup_before_write(self, seeded_file, tmp_path):
        original = seeded_file.read_text()
        backup = tmp_path / "users_backup.json"
        store = UserStore(JsonFileStorage(seeded_file), backup_file=backup)
        run(store.load())
        run(store.create({"name": "Carol", "age": "22"}))
        assert backup.read_text() == original

    def test_no_backup_when_data_file_absent(self, data_file, tmp_path):
        backup = tmp_path / "users_backup.json"
        store = UserStore(JsonFileStorage(data_file), backup_file=backup)
        run(store.load())
        run(store.create({"name": "Alice", "age": "30"}))
        assert not backup.exists()

    def test_operation_log(self, store, tmp_path):
        log_path = tmp_path / "logs.txt"
        store.operation_log = OperationLog(log_path)
        run(store.load())
        run(store.create({"name": "Alice", "age": "30"}))
        run(store.delete(1))
        lines = log_path.read_text().splitlines()
        assert lines[0].endswith(" - created user 1")
        assert lines[1].endswith(" - deleted user 1")

    def test_rejected_request_not_logged(self, store, tmp_path):
        log_path = tmp_path / "logs.txt"
        store.operation_log = OperationLog(log_path)
        run(store.load())
        with pytest.raises(UserNotFoundError):
            run(store.delete(1))
        assert not log_path.exists()
