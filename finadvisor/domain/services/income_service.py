import logging

from sqlalchemy.orm import Session

from finadvisor.data.base import utcnow
from finadvisor.data.repositories.income_repository import (
    add_income,
    get_income,
    get_incomes_for_user,
)
from finadvisor.data.repositories.income_repository import (
    delete_income as repo_delete_income,
)
from finadvisor.data.repositories.income_repository import (
    update_income as repo_update_income,
)
from finadvisor.domain.errors import NotFoundError, ValidationError
from finadvisor.domain.helpers.amounts import is_positive_amount
from finadvisor.domain.helpers.ids import new_timestamp_id
from finadvisor.domain.models import Income

logger = logging.getLogger(__name__)


def create_income(
    db: Session, usuario_id: int | None, descripcion: str | None, monto: float | None
) -> Income:
    if not usuario_id or not descripcion or not is_positive_amount(monto):
        raise ValidationError("Datos de ingreso incompletos o inválidos.")
    income = add_income(
        db,
        income_id=new_timestamp_id(),
        user_id=usuario_id,
        descripcion=descripcion,
        monto=monto,
        fecha=utcnow(),
    )
    logger.info("Created income %s for user %s", income.id, usuario_id)
    return income


def list_incomes(db: Session, usuario_id: int) -> list[Income]:
    return get_incomes_for_user(db, usuario_id)


def update_income(
    db: Session, income_id: str, descripcion: str | None, monto: float | None
) -> Income:
    if not descripcion or not is_positive_amount(monto):
        raise ValidationError(
            "Datos de ingreso incompletos o inválidos para actualizar."
        )
    if repo_update_income(db, income_id, descripcion, monto) == 0:
        logger.info("Income %s not found for update", income_id)
        raise NotFoundError("Ingreso no encontrado para actualizar.")
    income = get_income(db, income_id)
    if income is None:
        raise NotFoundError("Ingreso actualizado, pero no encontrado después de recuperar.")
    logger.info("Income %s updated", income_id)
    return income


def delete_income(db: Session, income_id: str) -> str:
    if repo_delete_income(db, income_id) == 0:
        logger.info("Income %s not found for deletion", income_id)
        raise NotFoundError("Ingreso no encontrado.")
    logger.info("Income %s deleted", income_id)
    return income_id
