"""
Document store adapter.

Exposes each table as a collection with the operations the rest of the
application is allowed to use: get by id, add, update by id, delete by id and
query with equality filters, a single ordering field and a result limit.
Store failures are rolled back, logged and raised as StoreUnavailable.
"""
import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from quizdesk.core.exceptions import StoreUnavailable
from quizdesk.models import Attempt, Quiz, RevokedToken, User

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class Collection(Generic[ModelT]):
    """One named collection backed by an ORM model."""

    def __init__(self, db: Session, model: Type[ModelT], name: str):
        self.db = db
        self.model = model
        self.name = name

    def _fail(self, action: str, exc: Exception) -> StoreUnavailable:
        self.db.rollback()
        logger.error(f"Store failure during {action} on '{self.name}': {exc}", exc_info=True)
        return StoreUnavailable(f"Failed to {action} {self.name}")

    def get(self, doc_id: str) -> Optional[ModelT]:
        try:
            return self.db.get(self.model, doc_id)
        except SQLAlchemyError as e:
            raise self._fail("load", e)

    def add(self, **fields: Any) -> ModelT:
        """Insert a document; the id and timestamps are assigned by the store."""
        doc = self.model(**fields)
        try:
            self.db.add(doc)
            self.db.commit()
            self.db.refresh(doc)
        except SQLAlchemyError as e:
            raise self._fail("save", e)
        return doc

    def update(self, doc_id: str, **fields: Any) -> Optional[ModelT]:
        doc = self.get(doc_id)
        if doc is None:
            return None
        for key, value in fields.items():
            setattr(doc, key, value)
        try:
            self.db.commit()
            self.db.refresh(doc)
        except SQLAlchemyError as e:
            raise self._fail("update", e)
        return doc

    def delete(self, doc_id: str) -> bool:
        doc = self.get(doc_id)
        if doc is None:
            return False
        try:
            self.db.delete(doc)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e)
        return True

    def query(
        self,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> List[ModelT]:
        """
        Equality query over named fields.

        Args:
            order_by: Field name to sort by
            descending: Sort newest/largest first
            limit: Maximum number of documents returned
            **filters: field=value equality filters, all of which must match

        Returns:
            Matching documents
        """
        q = self.db.query(self.model)
        for field, value in filters.items():
            q = q.filter(getattr(self.model, field) == value)
        if order_by:
            column = getattr(self.model, order_by)
            q = q.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            q = q.limit(limit)
        try:
            return q.all()
        except SQLAlchemyError as e:
            raise self._fail("load", e)

    def first(self, **filters: Any) -> Optional[ModelT]:
        found = self.query(limit=1, **filters)
        return found[0] if found else None


class DocumentStore:
    """The collections used by the application, bound to one session."""

    def __init__(self, db: Session):
        self.db = db
        self.users: Collection[User] = Collection(db, User, "users")
        self.quizzes: Collection[Quiz] = Collection(db, Quiz, "quizzes")
        self.attempts: Collection[Attempt] = Collection(db, Attempt, "attempts")
        self.revoked_tokens: Collection[RevokedToken] = Collection(
            db, RevokedToken, "revoked tokens"
        )
