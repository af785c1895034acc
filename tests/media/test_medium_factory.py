"""Tests for creating media from configuration"""

import pytest

from preference_store.common.exceptions import InitializationError
from preference_store.media.medium_factory import (
    create_medium,
    get_medium_class,
    medium_factory,
    validate_storage_config,
)
from preference_store.media.medium_file import MediumFile
from preference_store.media.medium_memory import MediumMemory
from preference_store.media.medium_s3 import MediumS3
from preference_store.media.medium_sql import MediumSql


@pytest.mark.parametrize(
    "medium_type, medium_class",
    [("memory", MediumMemory), ("file", MediumFile), ("sql", MediumSql), ("aws_s3", MediumS3)],
)
def test_medium_classes(medium_type, medium_class):
    assert get_medium_class(medium_type) is medium_class


def test_unknown_medium_type():
    with pytest.raises(InitializationError) as exc_info:
        medium_factory({"medium_type": "redis"})
    assert "Unsupported medium type: redis" in str(exc_info.value)


def test_missing_medium_type():
    with pytest.raises(InitializationError):
        validate_storage_config({"medium_config": {}})


def test_missing_required_parameter():
    with pytest.raises(InitializationError) as exc_info:
        medium_factory({"medium_type": "file"})
    assert "'file' is missing" in str(exc_info.value)


def test_defaults_are_applied_without_touching_input():
    config = {"medium_type": "sql", "medium_config": {}}
    validated = validate_storage_config(config)
    assert validated == {"connection_string": "sqlite:///preferences.db"}
    assert config["medium_config"] == {}


def test_medium_config_must_be_a_mapping():
    with pytest.raises(InitializationError):
        validate_storage_config({"medium_type": "file", "medium_config": "prefs.json"})


def test_factory_defers_opening(tmp_path):
    path = tmp_path / "prefs.json"
    factory = medium_factory({"medium_type": "file", "medium_config": {"file": str(path)}})
    assert not path.exists()
    medium = factory()
    assert isinstance(medium, MediumFile)
    assert path.exists()


def test_create_medium_opens_immediately():
    assert isinstance(create_medium({"medium_type": "memory"}), MediumMemory)
