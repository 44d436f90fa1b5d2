from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String

from finadvisor.data.base import Base, as_utc
from finadvisor.data.repositories.session_helpers import write_transaction
from finadvisor.domain.models import Income


class IncomeORM(Base):
    __tablename__ = "ingresos"
    id = Column(String, primary_key=True)
    usuario_id = Column(
        Integer, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False
    )
    descripcion = Column(String, nullable=False)
    monto = Column(Float, nullable=False)
    fecha = Column(DateTime, nullable=False)


def income_to_domain(income_orm: IncomeORM) -> Income:
    return Income(
        id=income_orm.id,
        usuario_id=income_orm.usuario_id,
        descripcion=income_orm.descripcion,
        monto=income_orm.monto,
        fecha=as_utc(income_orm.fecha),
    )


def get_income(db, income_id: str) -> Income | None:
    income = db.query(IncomeORM).filter(IncomeORM.id == income_id).first()
    return income_to_domain(income) if income else None


def get_incomes_for_user(db, user_id: int) -> list[Income]:
    incomes = (
        db.query(IncomeORM)
        .filter(IncomeORM.usuario_id == user_id)
        .order_by(IncomeORM.fecha.desc())
        .all()
    )
    return [income_to_domain(i) for i in incomes]


def add_income(
    db, income_id: str, user_id: int, descripcion: str, monto: float, fecha: datetime
) -> Income:
    income_orm = IncomeORM(
        id=income_id,
        usuario_id=user_id,
        descripcion=descripcion,
        monto=monto,
        fecha=fecha,
    )
    with write_transaction(db, "Ya existe un ingreso con ese id."):
        db.add(income_orm)
    db.refresh(income_orm)
    return income_to_domain(income_orm)


def update_income(db, income_id: str, descripcion: str, monto: float) -> int:
    with write_transaction(db):
        updated = (
            db.query(IncomeORM)
            .filter(IncomeORM.id == income_id)
            .update(
                {IncomeORM.descripcion: descripcion, IncomeORM.monto: monto},
                synchronize_session=False,
            )
        )
    return updated


def delete_income(db, income_id: str) -> int:
    with write_transaction(db):
        deleted = (
            db.query(IncomeORM)
            .filter(IncomeORM.id == income_id)
            .delete(synchronize_session=False)
        )
    return deleted
