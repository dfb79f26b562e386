"""Record store over a SQLAlchemy session.

``RecordStore`` is the only place that talks to the session. Services get an
explicitly constructed store per request and never touch the engine or a
module-level connection.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, NoReturn, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from places_api.exceptions import StoreConflict, StoreUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Transaction:
    """Handle passed to writes that must commit or roll back together."""

    def __init__(self, db: Session):
        self.db = db
        self.active = True


class RecordStore:
    """Persistence for User and Place records."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, kind: type[T], record_id: Any) -> T | None:
        try:
            return self.db.get(kind, record_id)
        except OverflowError:
            # An id wider than the integer column cannot match any row
            self.db.rollback()
            return None
        except SQLAlchemyError as e:
            self._fail(f"find_by_id({kind.__name__}, {record_id})", e)

    def find_one(self, kind: type[T], **filters: Any) -> T | None:
        try:
            return self.db.query(kind).filter_by(**filters).first()
        except OverflowError:
            self.db.rollback()
            return None
        except SQLAlchemyError as e:
            self._fail(f"find_one({kind.__name__}, {filters})", e)

    def find_many(self, kind: type[T], **filters: Any) -> list[T]:
        try:
            return self.db.query(kind).filter_by(**filters).order_by(kind.id).all()
        except OverflowError:
            self.db.rollback()
            return []
        except SQLAlchemyError as e:
            self._fail(f"find_many({kind.__name__}, {filters})", e)

    def find_matching(self, kind: type[T], *criteria: Any) -> list[T]:
        """Records matching SQLAlchemy filter expressions."""
        try:
            return self.db.query(kind).filter(*criteria).order_by(kind.id).all()
        except SQLAlchemyError as e:
            self._fail(f"find_matching({kind.__name__})", e)

    def save(self, record: Any, txn: Transaction | None = None) -> None:
        """Insert or update a record.

        Inside a transaction the write is flushed and left for the
        transaction to commit; otherwise it is committed immediately.
        """
        if txn is not None:
            self._check(txn)
        try:
            self.db.add(record)
            if txn is None:
                self.db.commit()
                self.db.refresh(record)
            else:
                self.db.flush()
        except SQLAlchemyError as e:
            self._fail(f"save({type(record).__name__})", e)

    def remove(self, record: Any, txn: Transaction | None = None) -> None:
        if txn is not None:
            self._check(txn)
        try:
            self.db.delete(record)
            if txn is None:
                self.db.commit()
            else:
                self.db.flush()
        except SQLAlchemyError as e:
            self._fail(f"remove({type(record).__name__})", e)

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """Commit everything written through the handle, or nothing."""
        txn = Transaction(self.db)
        try:
            yield txn
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Transaction rolled back: {e}")
            if isinstance(e, IntegrityError):
                raise StoreConflict() from e
            raise StoreUnavailable() from e
        except Exception:
            self.db.rollback()
            logger.warning("Transaction rolled back")
            raise
        finally:
            txn.active = False

    def with_transaction(self, fn: Callable[[Transaction], T]) -> T:
        """Run ``fn`` inside a transaction and return its result."""
        with self.transaction() as txn:
            return fn(txn)

    def _check(self, txn: Transaction) -> None:
        if txn.db is not self.db or not txn.active:
            raise StoreUnavailable("Transaction is not active.")

    def _fail(self, operation: str, error: SQLAlchemyError) -> NoReturn:
        self.db.rollback()
        logger.error(f"Store operation {operation} failed: {error}")
        if isinstance(error, IntegrityError):
            raise StoreConflict() from error
        raise StoreUnavailable() from error
