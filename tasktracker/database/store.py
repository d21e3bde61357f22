"""
Entity Store Gateway.

Predicate-based reads and writes over the tracker's record kinds. Records go
in and come out as plain dicts of column values, so nothing above this layer
holds on to ORM instances or sessions.

Predicates are dicts keyed by ``field`` or ``field__op``::

    store.find("time_entry", {"task_id__in": ids, "entry_date__gte": start})

Supported ops: eq, ne, in, gt, gte, lt, lte, isnull, icontains.
``order_by`` takes field names, prefixed with ``-`` for descending.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tasktracker.errors import NotFound, StoreFailure, ValidationError
from tasktracker.models import Task, TimeEntry, Comment, Project, Team, TeamMembership, Profile

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

MODELS = {
    "task": Task,
    "time_entry": TimeEntry,
    "comment": Comment,
    "project": Project,
    "team": Team,
    "team_member": TeamMembership,
    "profile": Profile,
}

_OPERATORS = {
    "eq": lambda col, value: col.is_(None) if value is None else col == value,
    "ne": lambda col, value: col.isnot(None) if value is None else col != value,
    "in": lambda col, value: col.in_(list(value)),
    "gt": lambda col, value: col > value,
    "gte": lambda col, value: col >= value,
    "lt": lambda col, value: col < value,
    "lte": lambda col, value: col <= value,
    "isnull": lambda col, value: col.is_(None) if value else col.isnot(None),
    "icontains": lambda col, value: col.ilike(f"%{value}%"),
}


class EntityStore(Protocol):
    """Contract the tracker core needs from a persistence layer."""

    def find(self, kind: str, predicate: Optional[dict] = None,
             order_by: Optional[List[str]] = None, limit: Optional[int] = None) -> List[Record]: ...

    def find_one(self, kind: str, predicate: dict) -> Optional[Record]: ...

    def count(self, kind: str, predicate: Optional[dict] = None) -> int: ...

    def insert(self, kind: str, fields: dict) -> Record: ...

    def update(self, kind: str, identity: Any, fields: dict) -> Record: ...

    def update_many(self, kind: str, identities: Iterable[Any], fields: dict) -> List[Record]: ...

    def delete(self, kind: str, identity: Any) -> None: ...


def record_to_dict(obj) -> Optional[Record]:
    """
    Converts a model instance to a dictionary of its column attributes.
    """
    if obj is None:
        return None
    return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}


def _model_for(kind: str):
    try:
        return MODELS[kind]
    except KeyError:
        raise ValidationError(f"Unknown record kind: {kind}")


def _column(model, name: str):
    columns = {attr.key for attr in inspect(model).column_attrs}
    if name not in columns:
        raise ValidationError(f"Unknown field '{name}' for {model.__tablename__}")
    return getattr(model, name)


def _primary_key(model):
    pk = inspect(model).primary_key
    if len(pk) != 1:
        raise ValidationError(f"{model.__tablename__} has a composite identity")
    return getattr(model, inspect(model).get_property_by_column(pk[0]).key)


class SqlEntityStore:
    """
    SQLAlchemy implementation of the Entity Store Gateway.

    Every write commits its own transaction. Any SQLAlchemy failure rolls the
    session back and surfaces as StoreFailure (IntegrityError as
    ValidationError) so callers never see driver exceptions.
    """

    def __init__(self, db: Session):
        self.db = db

    # -------------------------
    # Reads
    # -------------------------
    def _query(self, kind: str, predicate: Optional[dict]):
        model = _model_for(kind)
        query = self.db.query(model)
        for key, value in (predicate or {}).items():
            name, _, op = key.partition("__")
            op = op or "eq"
            if op not in _OPERATORS:
                raise ValidationError(f"Unsupported predicate operator: {op}")
            query = query.filter(_OPERATORS[op](_column(model, name), value))
        return model, query

    def find(self, kind, predicate=None, order_by=None, limit=None):
        try:
            model, query = self._query(kind, predicate)
            for field in order_by or []:
                descending = field.startswith("-")
                col = _column(model, field.lstrip("-"))
                query = query.order_by(col.desc() if descending else col.asc())
            if limit is not None:
                query = query.limit(limit)
            return [record_to_dict(row) for row in query.all()]
        except SQLAlchemyError as exc:
            self._fail("find", kind, exc)

    def find_one(self, kind, predicate):
        rows = self.find(kind, predicate, limit=1)
        return rows[0] if rows else None

    def count(self, kind, predicate=None):
        try:
            _, query = self._query(kind, predicate)
            return query.count()
        except SQLAlchemyError as exc:
            self._fail("count", kind, exc)

    # -------------------------
    # Writes
    # -------------------------
    def insert(self, kind, fields):
        model = _model_for(kind)
        for name in fields:
            _column(model, name)
        obj = model(**fields)
        try:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as exc:
            self._fail("insert", kind, exc)
        return record_to_dict(obj)

    def update(self, kind, identity, fields):
        model = _model_for(kind)
        obj = self._get(model, identity)
        self._assign(model, obj, fields)
        try:
            self.db.commit()
            self.db.refresh(obj)
        except SQLAlchemyError as exc:
            self._fail("update", kind, exc)
        return record_to_dict(obj)

    def update_many(self, kind, identities, fields):
        """
        Applies the same field values to every identity in one transaction.
        Raises NotFound, writing nothing, if any identity is missing.
        """
        model = _model_for(kind)
        wanted = list(dict.fromkeys(identities))
        pk = _primary_key(model)
        try:
            rows = self.db.query(model).filter(pk.in_(wanted)).all()
        except SQLAlchemyError as exc:
            self._fail("update_many", kind, exc)
        by_id = {getattr(row, pk.key): row for row in rows}
        missing = [i for i in wanted if i not in by_id]
        if missing:
            raise NotFound(f"{model.__tablename__} not found: {', '.join(map(str, missing))}")
        for obj in rows:
            self._assign(model, obj, fields)
        try:
            self.db.commit()
            for obj in rows:
                self.db.refresh(obj)
        except SQLAlchemyError as exc:
            self._fail("update_many", kind, exc)
        return [record_to_dict(by_id[i]) for i in wanted]

    def delete(self, kind, identity):
        model = _model_for(kind)
        obj = self._get(model, identity)
        try:
            self.db.delete(obj)
            self.db.commit()
        except SQLAlchemyError as exc:
            self._fail("delete", kind, exc)

    # -------------------------
    # Helpers
    # -------------------------
    def _get(self, model, identity):
        try:
            obj = self.db.get(model, identity)
        except SQLAlchemyError as exc:
            self._fail("get", model.__tablename__, exc)
        if obj is None:
            raise NotFound(f"{model.__tablename__} not found")
        return obj

    @staticmethod
    def _assign(model, obj, fields):
        for name in fields:
            _column(model, name)
        for name, value in fields.items():
            setattr(obj, name, value)

    def _fail(self, operation: str, kind: str, exc: SQLAlchemyError):
        self.db.rollback()
        if isinstance(exc, IntegrityError):
            logger.warning("Rejected %s on %s: %s", operation, kind, exc.orig)
            raise ValidationError(f"Invalid {kind} data") from exc
        logger.error("Store %s on %s failed: %s", operation, kind, exc)
        raise StoreFailure() from exc
