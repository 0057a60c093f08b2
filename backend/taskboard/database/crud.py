"""
Operações CRUD genéricas sobre um model ORM.

Cada operação recebe uma ``Session`` ligada a uma conexão emprestada do pool
e executa uma única unidade de trabalho: escrita confirmada com commit ou
desfeita com rollback em caso de falha.
"""

import logging
from contextlib import contextmanager
from typing import Generic, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from taskboard.core.errors import ConnectivityError, ConstraintViolationError
from taskboard.database.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


def _constraint_message(exc: IntegrityError) -> str:
    detail = str(exc.orig) if exc.orig is not None else str(exc)
    lowered = detail.lower()
    if "foreign key" in lowered:
        return "Registro referenciado inexistente ou ainda em uso"
    if "unique" in lowered or "duplicate" in lowered:
        return "Registro duplicado"
    if "not null" in lowered:
        return "Campo obrigatório ausente"
    return "Restrição do banco violada"


@contextmanager
def translate_errors(db: Session, table: str):
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        logger.info("Restricao violada em %s: %s", table, exc.orig)
        raise ConstraintViolationError(_constraint_message(exc)) from exc
    except OperationalError as exc:
        db.rollback()
        raise ConnectivityError("Falha de comunicação com o banco de dados") from exc
    except DBAPIError as exc:
        db.rollback()
        if exc.connection_invalidated:
            raise ConnectivityError("Conexão com o banco perdida durante a operação") from exc
        raise
    except SQLAlchemyError:
        db.rollback()
        raise


class CrudStore(Generic[ModelT]):
    def __init__(self, model: Type[ModelT], fields: Optional[Sequence[str]] = None):
        self.model = model
        self.table = model.__tablename__
        if fields is None:
            fields = [column.name for column in model.__table__.columns if not column.primary_key]
        self.fields = tuple(fields)

    def _values(self, payload: BaseModel) -> dict:
        data = payload.model_dump()
        return {field: data.get(field) for field in self.fields}

    def _query(self, db: Session, item_id: int):
        return db.query(self.model).filter(self.model.id == item_id)

    def create(self, db: Session, payload: BaseModel) -> ModelT:
        with translate_errors(db, self.table):
            row = self.model(**self._values(payload))
            db.add(row)
            db.commit()
            db.refresh(row)
        return row

    def read(self, db: Session, item_id: int) -> Optional[ModelT]:
        with translate_errors(db, self.table):
            return self._query(db, item_id).first()

    def read_all(self, db: Session) -> list[ModelT]:
        with translate_errors(db, self.table):
            return db.query(self.model).order_by(self.model.id.asc()).all()

    def update(self, db: Session, item_id: int, payload: BaseModel) -> Optional[ModelT]:
        with translate_errors(db, self.table):
            row = self._query(db, item_id).first()
            if row is None:
                db.rollback()
                return None
            for key, value in self._values(payload).items():
                setattr(row, key, value)
            db.commit()
            db.refresh(row)
        return row

    def delete(self, db: Session, item_id: int) -> int:
        with translate_errors(db, self.table):
            deleted = self._query(db, item_id).delete(synchronize_session=False)
            db.commit()
        return deleted
