import logging

from sqlalchemy.orm import Session

from finadvisor.data.base import utcnow
from finadvisor.data.repositories.expense_repository import (
    add_expense,
    get_expense,
    get_expenses_for_user,
)
from finadvisor.data.repositories.expense_repository import (
    delete_expense as repo_delete_expense,
)
from finadvisor.data.repositories.expense_repository import (
    update_expense as repo_update_expense,
)
from finadvisor.domain.errors import NotFoundError, ValidationError
from finadvisor.domain.helpers.amounts import is_positive_amount
from finadvisor.domain.helpers.ids import new_timestamp_id
from finadvisor.domain.models import Expense

logger = logging.getLogger(__name__)


def _normalize_category(categoria_id: int | None) -> int | None:
    # 0 and missing values both mean "no category".
    return categoria_id or None


def _validate_fields(descripcion: str | None, monto: float | None) -> None:
    if not descripcion or not is_positive_amount(monto):
        raise ValidationError("Datos de gasto incompletos o inválidos.")


def create_expense(
    db: Session,
    descripcion: str | None,
    monto: float | None,
    usuario_id: int | None,
    categoria_id: int | None = None,
) -> Expense:
    if not usuario_id:
        raise ValidationError("Datos de gasto incompletos o inválidos.")
    _validate_fields(descripcion, monto)
    expense = add_expense(
        db,
        expense_id=new_timestamp_id(),
        descripcion=descripcion,
        monto=monto,
        fecha=utcnow(),
        user_id=usuario_id,
        categoria_id=_normalize_category(categoria_id),
    )
    logger.info("Created expense %s for user %s", expense.id, usuario_id)
    return expense


def list_expenses(db: Session, usuario_id: int) -> list[Expense]:
    return get_expenses_for_user(db, usuario_id)


def update_expense(
    db: Session,
    expense_id: str,
    descripcion: str | None,
    monto: float | None,
    categoria_id: int | None = None,
) -> Expense:
    _validate_fields(descripcion, monto)
    updated = repo_update_expense(
        db, expense_id, descripcion, monto, _normalize_category(categoria_id)
    )
    if updated == 0:
        logger.info("Expense %s not found for update", expense_id)
        raise NotFoundError("Gasto no encontrado para actualizar.")
    expense = get_expense(db, expense_id)
    if expense is None:
        raise NotFoundError("Gasto actualizado, pero no encontrado después de recuperar.")
    logger.info("Expense %s updated", expense_id)
    return expense


def delete_expense(db: Session, expense_id: str) -> str:
    if repo_delete_expense(db, expense_id) == 0:
        logger.info("Expense %s not found for deletion", expense_id)
        raise NotFoundError("Gasto no encontrado.")
    logger.info("Expense %s deleted", expense_id)
    return expense_id
