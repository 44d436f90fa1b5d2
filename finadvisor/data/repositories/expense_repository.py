from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String

from finadvisor.data.base import Base, as_utc
from finadvisor.data.repositories.category_repository import CategoryORM
from finadvisor.data.repositories.session_helpers import write_transaction
from finadvisor.domain.models import Expense


class ExpenseORM(Base):
    __tablename__ = "gastos"
    id = Column(String, primary_key=True)
    descripcion = Column(String, nullable=False)
    monto = Column(Float, nullable=False)
    fecha = Column(DateTime, nullable=False)
    usuario_id = Column(
        Integer, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False
    )
    categoria_id = Column(
        Integer, ForeignKey("categorias.id", ondelete="SET NULL"), nullable=True
    )


def _joined_query(db):
    return db.query(ExpenseORM, CategoryORM.nombre).outerjoin(
        CategoryORM, ExpenseORM.categoria_id == CategoryORM.id
    )


def expense_to_domain(
    expense_orm: ExpenseORM, categoria_nombre: str | None = None
) -> Expense:
    return Expense(
        id=expense_orm.id,
        descripcion=expense_orm.descripcion,
        monto=expense_orm.monto,
        fecha=as_utc(expense_orm.fecha),
        usuario_id=expense_orm.usuario_id,
        categoria_id=expense_orm.categoria_id,
        categoria_nombre=categoria_nombre,
    )


def get_expense(db, expense_id: str) -> Expense | None:
    row = _joined_query(db).filter(ExpenseORM.id == expense_id).first()
    if row is None:
        return None
    expense_orm, categoria_nombre = row
    return expense_to_domain(expense_orm, categoria_nombre)


def get_expenses_for_user(db, user_id: int) -> list[Expense]:
    rows = (
        _joined_query(db)
        .filter(ExpenseORM.usuario_id == user_id)
        .order_by(ExpenseORM.fecha.desc())
        .all()
    )
    return [expense_to_domain(e, nombre) for e, nombre in rows]


def add_expense(
    db,
    expense_id: str,
    descripcion: str,
    monto: float,
    fecha: datetime,
    user_id: int,
    categoria_id: int | None,
) -> Expense:
    expense_orm = ExpenseORM(
        id=expense_id,
        descripcion=descripcion,
        monto=monto,
        fecha=fecha,
        usuario_id=user_id,
        categoria_id=categoria_id,
    )
    with write_transaction(db, "Ya existe un gasto con ese id."):
        db.add(expense_orm)
    db.refresh(expense_orm)
    return expense_to_domain(expense_orm)


def update_expense(
    db, expense_id: str, descripcion: str, monto: float, categoria_id: int | None
) -> int:
    with write_transaction(db):
        updated = (
            db.query(ExpenseORM)
            .filter(ExpenseORM.id == expense_id)
            .update(
                {
                    ExpenseORM.descripcion: descripcion,
                    ExpenseORM.monto: monto,
                    ExpenseORM.categoria_id: categoria_id,
                },
                synchronize_session=False,
            )
        )
    return updated


def delete_expense(db, expense_id: str) -> int:
    with write_transaction(db):
        deleted = (
            db.query(ExpenseORM)
            .filter(ExpenseORM.id == expense_id)
            .delete(synchronize_session=False)
        )
    return deleted
