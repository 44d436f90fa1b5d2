from sqlalchemy import Column, Float, ForeignKey, Integer, String

from finadvisor.data.base import Base
from finadvisor.data.repositories.session_helpers import write_transaction
from finadvisor.domain.models import Goal


class GoalORM(Base):
    __tablename__ = "objetivos"
    id = Column(String, primary_key=True)
    usuario_id = Column(
        Integer, ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False
    )
    nombre = Column(String, nullable=False)
    monto_meta = Column(Float, nullable=False)
    monto_actual = Column(Float, nullable=False, default=0)
    fecha_limite = Column(String, nullable=True)
    completado = Column(Integer, nullable=False, default=0)


def goal_to_domain(goal_orm: GoalORM) -> Goal:
    return Goal(
        id=goal_orm.id,
        usuario_id=goal_orm.usuario_id,
        nombre=goal_orm.nombre,
        monto_meta=goal_orm.monto_meta,
        monto_actual=goal_orm.monto_actual,
        fecha_limite=goal_orm.fecha_limite,
        completado=goal_orm.completado,
    )


def get_goal(db, goal_id: str) -> Goal | None:
    goal = db.query(GoalORM).filter(GoalORM.id == goal_id).first()
    return goal_to_domain(goal) if goal else None


def get_goals_for_user(db, user_id: int) -> list[Goal]:
    goals = (
        db.query(GoalORM)
        .filter(GoalORM.usuario_id == user_id)
        .order_by(GoalORM.id.desc())
        .all()
    )
    return [goal_to_domain(g) for g in goals]


def add_goal(db, goal: Goal) -> Goal:
    goal_orm = GoalORM(
        id=goal.id,
        usuario_id=goal.usuario_id,
        nombre=goal.nombre,
        monto_meta=goal.monto_meta,
        monto_actual=goal.monto_actual,
        fecha_limite=goal.fecha_limite,
        completado=goal.completado,
    )
    with write_transaction(db, "Ya existe un objetivo con ese id."):
        db.add(goal_orm)
    db.refresh(goal_orm)
    return goal_to_domain(goal_orm)


def update_goal(
    db,
    goal_id: str,
    nombre: str,
    monto_meta: float,
    monto_actual: float,
    fecha_limite: str | None,
    completado: int,
) -> int:
    with write_transaction(db):
        updated = (
            db.query(GoalORM)
            .filter(GoalORM.id == goal_id)
            .update(
                {
                    GoalORM.nombre: nombre,
                    GoalORM.monto_meta: monto_meta,
                    GoalORM.monto_actual: monto_actual,
                    GoalORM.fecha_limite: fecha_limite,
                    GoalORM.completado: completado,
                },
                synchronize_session=False,
            )
        )
    return updated


def increment_goal_amount(db, goal_id: str, monto: float) -> int:
    # Single UPDATE; concurrent contributions cannot overwrite each other.
    with write_transaction(db):
        updated = (
            db.query(GoalORM)
            .filter(GoalORM.id == goal_id)
            .update(
                {GoalORM.monto_actual: GoalORM.monto_actual + monto},
                synchronize_session=False,
            )
        )
    return updated


def delete_goal(db, goal_id: str) -> int:
    with write_transaction(db):
        deleted = (
            db.query(GoalORM)
            .filter(GoalORM.id == goal_id)
            .delete(synchronize_session=False)
        )
    return deleted
