from typing import Generic, TypeVar, Type, Optional, List, Any, Dict
from sqlalchemy.orm import Session
from sqlalchemy import select
from pydantic import BaseModel
from app.database import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Row access for models that belong to an owner.

    `scope_field` names the owning column (user_email for items,
    organization_id for tags). Reads and deletes always filter on it, so a
    row owned by someone else looks exactly like a missing row.

    Writes take `commit`; pass commit=False inside `transaction()` so the
    caller decides when the unit of work ends.
    """

    def __init__(self, model: Type[ModelType], scope_field: str):
        self.model = model
        self.scope_field = scope_field

    def _scope_column(self):
        return getattr(self.model, self.scope_field)

    def _scoped(self, scope: Any):
        return select(self.model).where(self._scope_column() == scope)

    def get(self, db: Session, id: int, scope: Any) -> Optional[ModelType]:
        """The row with `id`, or None when it is absent or owned by another scope."""
        stmt = self._scoped(scope).where(self.model.id == id)
        return db.execute(stmt).scalar_one_or_none()

    def get_multi(
        self,
        db: Session,
        *,
        scope: Any,
        skip: int = 0,
        limit: int = 100
    ) -> List[ModelType]:
        stmt = self._scoped(scope).order_by(self.model.id).offset(skip).limit(limit)
        return list(db.execute(stmt).scalars().all())

    def create(
        self,
        db: Session,
        *,
        obj_in: CreateSchemaType,
        scope: Any,
        commit: bool = True
    ) -> ModelType:
        """
        Insert a row owned by `scope`.

        Args:
            db: Database session
            obj_in: Validated creation payload
            scope: Owner value written to `scope_field`
            commit: Commit now, or only flush to get the id

        Returns:
            The new row
        """
        db_obj = self.model(**obj_in.model_dump(), **{self.scope_field: scope})
        db.add(db_obj)
        self._finish(db, db_obj, commit)
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: UpdateSchemaType | Dict[str, Any],
        commit: bool = True
    ) -> ModelType:
        """
        Apply field changes to a row already fetched through get().

        A schema contributes only the fields the client actually sent.
        """
        if isinstance(obj_in, BaseModel):
            changes = obj_in.model_dump(exclude_unset=True)
        else:
            changes = obj_in

        for field, value in changes.items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        self._finish(db, db_obj, commit)
        return db_obj

    def delete(self, db: Session, *, id: int, scope: Any) -> Optional[ModelType]:
        """Delete and commit. Returns the removed row, or None if nothing matched."""
        obj = self.get(db=db, id=id, scope=scope)
        if obj is None:
            return None
        db.delete(obj)
        db.commit()
        return obj

    @staticmethod
    def _finish(db: Session, db_obj: ModelType, commit: bool) -> None:
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
