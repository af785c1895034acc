"""Tests for the SQLAlchemy medium"""

from unittest.mock import Mock, patch

import pytest
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from preference_store.media.medium import ValueType
from preference_store.media.medium_sql import MediumSql, decode_value, encode_value


@pytest.fixture
def medium(tmp_path):
    medium = MediumSql({"connection_string": f"sqlite:///{tmp_path / 'prefs.db'}"})
    yield medium
    medium.close()


def test_table_is_created(medium):
    assert "preferences" in inspect(medium.engine).get_table_names()


@pytest.mark.parametrize(
    "value_type, value, raw",
    [
        (ValueType.TEXT, "abc", "abc"),
        (ValueType.BOOLEAN, True, "true"),
        (ValueType.BOOLEAN, False, "false"),
        (ValueType.INTEGER, -7, "-7"),
    ],
)
def test_value_encoding(value_type, value, raw):
    assert encode_value(value_type, value) == raw
    assert decode_value(value_type, raw) == value


def test_set_replaces_type(medium):
    medium.set("x", ValueType.TEXT, "five")
    medium.set("x", ValueType.INTEGER, 5)
    assert medium.get("x", ValueType.INTEGER) == 5
    assert medium.get("x", ValueType.TEXT) is None
    assert medium.keys() == ["x"]


def test_read_failure_reports_absent(medium):
    failing_session = Mock()
    failing_session.get.side_effect = SQLAlchemyError("connection lost")
    with patch.object(medium, "Session", return_value=failing_session):
        assert medium.get("x", ValueType.TEXT) is None
    failing_session.close.assert_called_once_with()


def test_write_failure_returns_false_and_rolls_back(medium):
    failing_session = Mock()
    failing_session.commit.side_effect = SQLAlchemyError("database is locked")
    with patch.object(medium, "Session", return_value=failing_session):
        assert medium.set("x", ValueType.TEXT, "v") is False
        assert medium.remove("x") is False
        assert medium.clear() is False
    assert failing_session.rollback.call_count == 3
    assert medium.get("x", ValueType.TEXT) is None


def test_unreachable_database_fails_to_open(tmp_path):
    with pytest.raises(OperationalError):
        MediumSql(
            {"connection_string": f"sqlite:///{tmp_path / 'missing_dir' / 'prefs.db'}"}
        )
