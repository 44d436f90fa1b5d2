from typing import Iterable

from sqlalchemy import Column, ForeignKey, Integer, String, insert

from finadvisor.data.base import Base
from finadvisor.data.repositories.session_helpers import write_transaction
from finadvisor.domain.models import Category

CATEGORY_CONFLICT = "Ya existe una categoría con ese nombre para este usuario."


class CategoryORM(Base):
    __tablename__ = "categorias"
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    # Unique across all users, not per user.
    nombre = Column(String, unique=True, nullable=False)
    usuario_id = Column(
        Integer, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False
    )


def category_to_domain(category_orm: CategoryORM) -> Category:
    return Category(
        id=category_orm.id,
        nombre=category_orm.nombre,
        usuario_id=category_orm.usuario_id,
    )


def list_categories_for_user(db, user_id: int) -> list[Category]:
    categories = (
        db.query(CategoryORM)
        .filter(CategoryORM.usuario_id == user_id)
        .order_by(CategoryORM.nombre.asc())
        .all()
    )
    return [category_to_domain(c) for c in categories]


def add_category(db, nombre: str, user_id: int) -> Category:
    category_orm = CategoryORM(nombre=nombre, usuario_id=user_id)
    with write_transaction(db, CATEGORY_CONFLICT):
        db.add(category_orm)
    db.refresh(category_orm)
    return category_to_domain(category_orm)


def add_categories_bulk(db, names: Iterable[str], user_id: int) -> int:
    """
    Insert several categories for one user in a single transaction.
    Either every row lands or none does.
    """
    rows = [{"nombre": name, "usuario_id": user_id} for name in names]
    if not rows:
        return 0
    with write_transaction(db, CATEGORY_CONFLICT):
        db.execute(insert(CategoryORM), rows)
    return len(rows)


def rename_category(db, category_id: int, user_id: int, nombre: str) -> int:
    with write_transaction(db, CATEGORY_CONFLICT):
        updated = (
            db.query(CategoryORM)
            .filter(CategoryORM.id == category_id, CategoryORM.usuario_id == user_id)
            .update({CategoryORM.nombre: nombre}, synchronize_session=False)
        )
    return updated


def delete_category(db, category_id: int) -> int:
    # Referencing gastos rows are set to NULL by the foreign key rule.
    with write_transaction(db):
        deleted = (
            db.query(CategoryORM)
            .filter(CategoryORM.id == category_id)
            .delete(synchronize_session=False)
        )
    return deleted
