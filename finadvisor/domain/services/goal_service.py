import logging
import math
from dataclasses import replace
from typing import Any

from sqlalchemy.orm import Session

from finadvisor.data.repositories.goal_repository import (
    add_goal,
    get_goal,
    get_goals_for_user,
    increment_goal_amount,
)
from finadvisor.data.repositories.goal_repository import delete_goal as repo_delete_goal
from finadvisor.data.repositories.goal_repository import update_goal as repo_update_goal
from finadvisor.domain.errors import NotFoundError, ValidationError
from finadvisor.domain.helpers.amounts import is_non_negative_amount, is_positive_amount
from finadvisor.domain.helpers.ids import new_timestamp_id
from finadvisor.domain.models import Goal

logger = logging.getLogger(__name__)


def to_float(value: Any) -> float:
    """Numeric value of a stored amount, 0.0 when it cannot be parsed."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(result):
        return 0.0
    return result


def _normalize_deadline(fecha_limite: str | None) -> str | None:
    return fecha_limite or None


def create_goal(
    db: Session,
    usuario_id: int | None,
    nombre: str | None,
    monto_meta: float | None,
    monto_actual: float | None = 0,
    fecha_limite: str | None = None,
) -> Goal:
    if monto_actual is None:
        monto_actual = 0
    if not usuario_id or not nombre or not is_positive_amount(monto_meta):
        raise ValidationError("Datos de objetivo incompletos o inválidos.")
    if not is_non_negative_amount(monto_actual):
        raise ValidationError("Datos de objetivo incompletos o inválidos.")
    goal = add_goal(
        db,
        Goal(
            id=new_timestamp_id(),
            usuario_id=usuario_id,
            nombre=nombre,
            monto_meta=monto_meta,
            monto_actual=monto_actual,
            fecha_limite=_normalize_deadline(fecha_limite),
            completado=0,
        ),
    )
    logger.info("Created goal %s for user %s", goal.id, usuario_id)
    return goal


def list_goals(db: Session, usuario_id: int) -> list[Goal]:
    return [
        replace(
            g,
            monto_meta=to_float(g.monto_meta),
            monto_actual=to_float(g.monto_actual),
        )
        for g in get_goals_for_user(db, usuario_id)
    ]


def update_goal(
    db: Session,
    goal_id: str,
    nombre: str | None,
    monto_meta: float | None,
    monto_actual: float | None,
    fecha_limite: str | None = None,
    completado: int | bool | None = 0,
) -> Goal:
    """
    Overwrite a goal with the caller's values. ``completado`` is taken as
    given; it is not checked against the amounts.
    """
    if (
        not nombre
        or not is_positive_amount(monto_meta)
        or not is_non_negative_amount(monto_actual)
    ):
        raise ValidationError(
            "Datos de objetivo incompletos o inválidos para actualizar."
        )
    updated = repo_update_goal(
        db,
        goal_id,
        nombre=nombre,
        monto_meta=monto_meta,
        monto_actual=monto_actual,
        fecha_limite=_normalize_deadline(fecha_limite),
        completado=1 if completado else 0,
    )
    if updated == 0:
        logger.info("Goal %s not found for update", goal_id)
        raise NotFoundError("Objetivo no encontrado para actualizar.")
    goal = get_goal(db, goal_id)
    if goal is None:
        raise NotFoundError("Objetivo actualizado, pero no encontrado después de recuperar.")
    logger.info("Goal %s updated", goal_id)
    return goal


def contribute_to_goal(db: Session, goal_id: str, monto: float | None) -> Goal:
    if not is_positive_amount(monto):
        raise ValidationError("El aporte debe ser un número positivo.")
    if increment_goal_amount(db, goal_id, monto) == 0:
        logger.info("Goal %s not found for contribution", goal_id)
        raise NotFoundError("Objetivo no encontrado.")
    goal = get_goal(db, goal_id)
    if goal is None:
        raise NotFoundError("Objetivo no encontrado.")
    logger.info("Added %.2f to goal %s", monto, goal_id)
    return goal


def delete_goal(db: Session, goal_id: str) -> str:
    if repo_delete_goal(db, goal_id) == 0:
        logger.info("Goal %s not found for deletion", goal_id)
        raise NotFoundError("Objetivo no encontrado.")
    logger.info("Goal %s deleted", goal_id)
    return goal_id
