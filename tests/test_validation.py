"""Tests for field validation, name uniqueness and id allocation."""

import pytest

from roster.models import User
from roster.validation import (
    AGE_MESSAGE,
    NAME_MESSAGE,
    is_name_unique,
    next_user_id,
    validate_user_data,
)


class TestValidateUserData:
    def test_valid(self):
        assert validate_user_data({"name": "Alice", "age": "30"}) == []

    def test_name_with_spaces(self):
        assert validate_user_data({"name": "Mary Ann Lee", "age": "7"}) == []

    def test_integer_age_accepted(self):
        assert validate_user_data({"name": "Alice", "age": 30}) == []

    @pytest.mark.parametrize("age", [30.0, 1e2])
    def test_whole_number_float_age_accepted(self, age):
        assert validate_user_data({"name": "Alice", "age": age}) == []

    @pytest.mark.parametrize("name", ["Alice1", "O'Brien", "Anne-Marie", "Zoë", ""])
    def test_bad_name(self, name):
        assert validate_user_data({"name": name, "age": "30"}) == [NAME_MESSAGE]

    @pytest.mark.parametrize("age", ["-1", "3.5", "thirty", "30 ", "", 2.5, True])
    def test_bad_age(self, age):
        assert validate_user_data({"name": "Alice", "age": age}) == [AGE_MESSAGE]

    def test_non_string_name(self):
        assert validate_user_data({"name": 42, "age": "30"}) == [NAME_MESSAGE]

    def test_both_reported_name_first(self):
        assert validate_user_data({"name": "R2D2", "age": "old"}) == [NAME_MESSAGE, AGE_MESSAGE]

    def test_trailing_newline_rejected(self):
        assert validate_user_data({"name": "Alice", "age": "30\n"}) == [AGE_MESSAGE]


class TestIsNameUnique:
    def test_empty_collection(self):
        assert is_name_unique([], "Alice")

    def test_duplicate(self):
        assert not is_name_unique([User(1, "Alice", "30")], "Alice")

    def test_case_sensitive(self):
        assert is_name_unique([User(1, "Alice", "30")], "alice")


class TestNextUserId:
    def test_empty_starts_at_one(self):
        assert next_user_id([]) == 1

    def test_max_plus_one(self):
        users = [User(3, "A", "1"), User(1, "B", "1"), User(7, "C", "1")]
        assert next_user_id(users) == 8

    def test_highest_id_reused_after_delete(self):
        users = [User(1, "A", "1"), User(2, "B", "1")]
        users.pop()
        assert next_user_id(users) == 2
