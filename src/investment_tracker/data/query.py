"""Lightweight query builder and base repository for SQLite repositories."""

import dataclasses
import sqlite3
import typing
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Generic, Optional, TypeVar

from .database import Database, get_db

T = TypeVar("T")


class RowMapper(Generic[T]):
    """Maps sqlite3.Row objects to dataclass instances using type hints."""

    def __init__(self, model_class: type[T]):
        self._model_class = model_class
        self._fields = dataclasses.fields(model_class)  # type: ignore[arg-type]
        self._hints = typing.get_type_hints(model_class)
        self._converters = {
            f.name: self._get_converter(self._hints.get(f.name))
            for f in self._fields
        }

    def _get_converter(self, hint):
        if hint is None:
            return None

        # Optional[X] = Union[X, None]
        if typing.get_origin(hint) is typing.Union:
            non_none = [a for a in typing.get_args(hint) if a is not type(None)]
            if len(non_none) == 1:
                return self._get_converter(non_none[0])
            return None

        if hint is Decimal:
            return lambda v: Decimal(str(v))
        if hint is datetime:
            return lambda v: datetime.fromisoformat(v) if isinstance(v, str) else v
        if hint in (int, str):
            return hint
        if isinstance(hint, type) and issubclass(hint, Enum):
            return lambda v, cls=hint: cls(v)

        return None

    def map(self, row: sqlite3.Row) -> T:
        kwargs: dict = {}
        row_keys = row.keys()
        for f in self._fields:
            if f.name not in row_keys:
                # Not stored; the dataclass default applies
                continue
            raw = row[f.name]
            if raw is None:
                if f.default is not dataclasses.MISSING:
                    kwargs[f.name] = f.default
                else:
                    kwargs[f.name] = None
            else:
                conv = self._converters.get(f.name)
                kwargs[f.name] = conv(raw) if conv else raw
        return self._model_class(**kwargs)

    def map_all(self, rows) -> list[T]:
        return [self.map(r) for r in rows]

    @staticmethod
    def _serialize(val):
        """Convert Python value → SQLite-compatible value."""
        if val is None:
            return None
        if isinstance(val, Decimal):
            return str(val)
        if isinstance(val, datetime):
            return val.isoformat()
        if isinstance(val, Enum):
            return val.value
        return val  # int, str as-is

    def to_db_dict(self, obj: T, skip: frozenset = frozenset()) -> dict:
        """Return {field_name: serialized_value} for all non-skipped fields."""
        return {
            f.name: self._serialize(getattr(obj, f.name))
            for f in self._fields
            if f.name not in skip
        }


class QueryBuilder:
    """Fluent SELECT query builder for SQLite."""

    def __init__(self, table: str):
        self._table = table
        self._conditions: list[str] = []
        self._params: list = []
        self._order: Optional[str] = None

    def where(self, condition: str, *params) -> "QueryBuilder":
        self._conditions.append(condition)
        self._params.extend(params)
        return self

    def order_by(self, clause: str) -> "QueryBuilder":
        self._order = clause
        return self

    def build(self) -> tuple[str, list]:
        sql = f"SELECT * FROM {self._table}"
        if self._conditions:
            sql += " WHERE " + " AND ".join(self._conditions)
        if self._order:
            sql += f" ORDER BY {self._order}"
        return sql, list(self._params)

    def fetch_one(self, conn: sqlite3.Connection) -> Optional[sqlite3.Row]:
        sql, params = self.build()
        return conn.execute(sql, params).fetchone()

    def fetch_all(self, conn: sqlite3.Connection) -> list[sqlite3.Row]:
        sql, params = self.build()
        return conn.execute(sql, params).fetchall()


class BaseRepository(Generic[T]):
    """Base providing get, delete, _query, _insert and _commit helpers.

    `_key` names the primary key column; it is also the dataclass field used
    to address an existing object.
    """

    _table: str
    _key: str = "id"
    _mapper: RowMapper  # type: ignore[type-arg]
    _insert_skip: frozenset = frozenset({"id", "created_at"})

    def _db(self) -> Database:
        return get_db()

    def _commit(self, db: Database) -> None:
        if not db._in_transaction:
            db.conn.commit()

    def _query(self) -> QueryBuilder:
        return QueryBuilder(self._table)

    def get(self, key) -> Optional[T]:
        row = self._query().where(f"{self._key} = ?", key).fetch_one(self._db().conn)
        return self._mapper.map(row) if row else None

    def delete(self, key) -> bool:
        db = self._db()
        cursor = db.conn.execute(f"DELETE FROM {self._table} WHERE {self._key} = ?", (key,))
        self._commit(db)
        return cursor.rowcount > 0

    def _insert(self, obj: T):
        """Generic INSERT of all non-skipped fields. Returns the new rowid."""
        db = self._db()
        row_dict = self._mapper.to_db_dict(obj, skip=self._insert_skip)
        cols = ", ".join(row_dict)
        placeholders = ", ".join("?" * len(row_dict))
        cursor = db.conn.execute(
            f"INSERT INTO {self._table} ({cols}) VALUES ({placeholders})",
            list(row_dict.values()),
        )
        self._commit(db)
        return cursor.lastrowid

    def _update(self, obj: T) -> bool:
        """Generic UPDATE by primary key. Returns False if no row matched."""
        db = self._db()
        skip = self._insert_skip | {self._key}
        row_dict = self._mapper.to_db_dict(obj, skip=skip)
        set_parts = ", ".join(f"{col} = ?" for col in row_dict)
        cursor = db.conn.execute(
            f"UPDATE {self._table} SET {set_parts} WHERE {self._key} = ?",
            [*row_dict.values(), getattr(obj, self._key)],
        )
        self._commit(db)
        return cursor.rowcount > 0
