from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Optional
import logging

from sqlalchemy import func, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from linkshort.core.exceptions import NotFound, StoreUnavailable, Timeout
from linkshort.db.models import URLItem, utcnow
from linkshort.schemas.URLMapping import URLMapping

logger = logging.getLogger(__name__)


class MappingStore(ABC):
    """Durable short code -> long URL records with atomic insert-if-absent."""

    @abstractmethod
    def put_if_absent(self, code: str, long_url: str) -> bool:
        """Insert the mapping only if ``code`` is unused; return whether it was inserted.

        At most one of any number of concurrent callers for the same code
        sees ``True``.
        """

    @abstractmethod
    def get(self, code: str) -> URLMapping:
        """Return the mapping for ``code`` or raise ``NotFound``."""

    @abstractmethod
    def find_by_long_url(self, long_url: str) -> Optional[URLMapping]:
        ...

    @abstractmethod
    def increment_hits(self, code: str) -> bool:
        ...

    @abstractmethod
    def count(self) -> int:
        ...

    def close(self):
        pass


class SQLMappingStore(MappingStore):
    def __init__(self, session_factory: sessionmaker, engine: Optional[Engine] = None):
        self.session_factory = session_factory
        self.engine = engine

    @contextmanager
    def _session(self):
        db: Session = self.session_factory()
        try:
            yield db
        except IntegrityError:
            db.rollback()
            raise
        except OperationalError as e:
            db.rollback()
            # SQLite gave up waiting on its busy timeout, which is the request budget
            if "database is locked" in str(e.orig):
                logger.warning("Mapping store lock wait exceeded: %s", e)
                raise Timeout() from e
            logger.error("Mapping store failure: %s", e)
            raise StoreUnavailable() from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Mapping store failure: %s", e)
            raise StoreUnavailable() from e
        finally:
            db.close()

    def put_if_absent(self, code: str, long_url: str) -> bool:
        with self._session() as db:
            db.add(URLItem(code=code, long_url=long_url, created_at=utcnow(), hit_count=0))
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                logger.info("Short code already taken: %s (%s)", code, e.orig)
                return False
        return True

    def get(self, code: str) -> URLMapping:
        with self._session() as db:
            row = db.get(URLItem, code)
            if row is None:
                raise NotFound()
            return URLMapping.model_validate(row)

    def find_by_long_url(self, long_url: str) -> Optional[URLMapping]:
        with self._session() as db:
            row = db.scalars(
                select(URLItem)
                .where(URLItem.long_url == long_url)
                .order_by(URLItem.created_at)
                .limit(1)
            ).first()
            return URLMapping.model_validate(row) if row is not None else None

    def increment_hits(self, code: str) -> bool:
        with self._session() as db:
            result = db.execute(
                update(URLItem)
                .where(URLItem.code == code)
                .values(hit_count=URLItem.hit_count + 1)
            )
            db.commit()
            return result.rowcount > 0

    def count(self) -> int:
        with self._session() as db:
            return db.scalar(select(func.count()).select_from(URLItem)) or 0

    def close(self):
        if self.engine is not None:
            self.engine.dispose()
