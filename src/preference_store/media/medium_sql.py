"""SQL medium implementation backed by SQLAlchemy. One row per entry."""

import threading
from typing import Any, List, Optional

from sqlalchemy import Column, String, Text, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from ..common.log import log
from .medium import KeyValueMedium, ValueType

info = {
    "class_name": "MediumSql",
    "description": "SQL medium. Works with any database SQLAlchemy can connect to.",
    "config_parameters": [
        {
            "name": "connection_string",
            "required": False,
            "default": "sqlite:///preferences.db",
            "description": "SQLAlchemy database URL",
            "type": "string",
        },
    ],
}

Base = declarative_base()


class PreferenceEntry(Base):
    __tablename__ = "preferences"

    key = Column(String, primary_key=True)
    value_type = Column(String, nullable=False)
    value = Column(Text, nullable=False)


def encode_value(value_type: ValueType, value: Any) -> str:
    if value_type is ValueType.BOOLEAN:
        return "true" if value else "false"
    return str(value)


def decode_value(value_type: ValueType, raw: str) -> Any:
    if value_type is ValueType.BOOLEAN:
        return raw == "true"
    if value_type is ValueType.INTEGER:
        return int(raw)
    return raw


class MediumSql(KeyValueMedium):
    """SQL medium for the preference store."""

    def __init__(self, config: dict):
        """Connect to the database and create the preferences table if needed."""
        super().__init__(config)
        self.connection_string = config.get(
            "connection_string", "sqlite:///preferences.db"
        )
        self.engine = create_engine(self.connection_string)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine)
        self.lock = threading.Lock()

    def get(self, key: str, value_type: ValueType) -> Optional[Any]:
        with self.lock:
            session = self.Session()
            try:
                item = session.get(PreferenceEntry, key)
                if item is None or item.value_type != value_type.value:
                    return None
                return decode_value(value_type, item.value)
            except (SQLAlchemyError, ValueError) as e:
                log.warning("MediumSql: read failed for key %s: %s", key, e)
                return None
            finally:
                session.close()

    def set(self, key: str, value_type: ValueType, value: Any) -> bool:
        return self._write(
            "set",
            key,
            lambda session: session.merge(
                PreferenceEntry(
                    key=key,
                    value_type=value_type.value,
                    value=encode_value(value_type, value),
                )
            ),
        )

    def remove(self, key: str) -> bool:
        return self._write(
            "remove",
            key,
            lambda session: session.query(PreferenceEntry)
            .filter_by(key=key)
            .delete(),
        )

    def clear(self) -> bool:
        return self._write(
            "clear", None, lambda session: session.query(PreferenceEntry).delete()
        )

    def keys(self) -> List[str]:
        with self.lock:
            session = self.Session()
            try:
                return [row.key for row in session.query(PreferenceEntry.key)]
            except SQLAlchemyError as e:
                log.warning("MediumSql: listing keys failed: %s", e)
                return []
            finally:
                session.close()

    def close(self):
        self.engine.dispose()

    def _write(self, operation, key, change) -> bool:
        with self.lock:
            session = self.Session()
            try:
                change(session)
                session.commit()
                return True
            except SQLAlchemyError as e:
                session.rollback()
                log.error("MediumSql: %s failed for key %s: %s", operation, key, e)
                return False
            finally:
                session.close()
