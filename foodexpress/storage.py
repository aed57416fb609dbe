import json
import logging
from typing import Any
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, Session, create_engine
from .config import CLIENT_STORAGE_URL
from .errors import StorageUnavailable
from .models import StoredValue

logger = logging.getLogger(__name__)

USER_KEY = "fx_user"
LOCATION_KEY = "fx_location"
ORDERS_KEY = "fx_orders"


class Storage:
    """Best-effort key/value store. Nothing here ever raises to the caller."""

    def get(self, key: str, default: Any = None) -> Any:
        try:
            raw = self._read(key)
            return json.loads(raw) if raw else default
        except (StorageUnavailable, ValueError) as e:
            logger.warning("Could not load %s: %s", key, e)
            return default

    def set(self, key: str, value: Any) -> None:
        try: self._write(key, json.dumps(value))
        except (StorageUnavailable, TypeError, ValueError) as e:
            logger.warning("Could not save %s: %s", key, e)

    def remove(self, key: str) -> None:
        try: self._delete(key)
        except StorageUnavailable as e:
            logger.warning("Could not remove %s: %s", key, e)

    def _read(self, key): raise NotImplementedError
    def _write(self, key, raw): raise NotImplementedError
    def _delete(self, key): raise NotImplementedError


class MemoryStorage(Storage):
    def __init__(self):
        self.data: dict[str, str] = {}

    def _read(self, key): return self.data.get(key)
    def _write(self, key, raw): self.data[key] = raw
    def _delete(self, key): self.data.pop(key, None)


class SqlStorage(Storage):
    """Values kept as JSON text in a single SQLModel table."""

    def __init__(self, url: str = CLIENT_STORAGE_URL, engine=None):
        self.engine = engine or create_engine(url)
        try: SQLModel.metadata.create_all(self.engine, tables=[StoredValue.__table__])
        except SQLAlchemyError as e:
            logger.warning("Client storage unavailable at %s: %s", url, e)

    def _read(self, key):
        try: return self._select(key)
        except SQLAlchemyError as e: raise StorageUnavailable(str(e)) from e

    def _write(self, key, raw):
        try: self._upsert(key, raw)
        except SQLAlchemyError as e: raise StorageUnavailable(str(e)) from e

    def _delete(self, key):
        try: self._drop(key)
        except SQLAlchemyError as e: raise StorageUnavailable(str(e)) from e

    def _select(self, key):
        with Session(self.engine) as session:
            row = session.get(StoredValue, key)
            return row.value if row else None

    def _upsert(self, key, raw):
        with Session(self.engine) as session:
            row = session.get(StoredValue, key)
            if row: row.value = raw
            else: row = StoredValue(key=key, value=raw)
            session.add(row); session.commit()

    def _drop(self, key):
        with Session(self.engine) as session:
            row = session.get(StoredValue, key)
            if row: session.delete(row); session.commit()
