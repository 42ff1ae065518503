"""
Base repository class with common persistence operations
"""
from typing import Type, TypeVar, Generic, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from cashbook.database import Base
from cashbook.core.exceptions import raise_not_found, DatabaseError
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository; callers decide when to commit"""

    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    def get_by_id(self, id: str) -> Optional[ModelType]:
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting {self.model.__name__} by ID {id}: {e}")
            raise DatabaseError(f"Failed to retrieve {self.model.__name__}")

    def get_by_id_or_raise(self, id: str) -> ModelType:
        obj = self.get_by_id(id)
        if not obj:
            raise_not_found(self.model.__name__, id)
        return obj

    def add(self, db_obj: ModelType) -> ModelType:
        try:
            self.db.add(db_obj)
            self.db.flush()
            return db_obj
        except SQLAlchemyError as e:
            logger.error(f"Error creating {self.model.__name__}: {e}")
            self.db.rollback()
            raise DatabaseError(f"Failed to create {self.model.__name__}")

    def flush(self):
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            logger.error(f"Error flushing {self.model.__name__}: {e}")
            self.db.rollback()
            raise DatabaseError(f"Failed to save {self.model.__name__}")

    def delete(self, db_obj: ModelType) -> bool:
        try:
            self.db.delete(db_obj)
            self.db.flush()
            return True
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {self.model.__name__} {db_obj.id}: {e}")
            self.db.rollback()
            raise DatabaseError(f"Failed to delete {self.model.__name__}")

    def commit(self):
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error committing transaction: {e}")
            self.db.rollback()
            raise DatabaseError("Failed to commit transaction")

    def rollback(self):
        self.db.rollback()
