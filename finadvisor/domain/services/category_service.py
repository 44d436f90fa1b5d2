import logging

from sqlalchemy.orm import Session

from finadvisor.data.repositories.category_repository import (
    add_category,
    list_categories_for_user,
    rename_category,
)
from finadvisor.data.repositories.category_repository import (
    delete_category as repo_delete_category,
)
from finadvisor.domain.errors import NotFoundError, ValidationError
from finadvisor.domain.models import Category

logger = logging.getLogger(__name__)


def _validate(nombre: str | None, usuario_id: int | None) -> str:
    if not nombre or not nombre.strip() or not usuario_id:
        raise ValidationError("Nombre de categoría y usuario_id son requeridos.")
    return nombre.strip()


def create_category(db: Session, nombre: str | None, usuario_id: int | None) -> Category:
    nombre = _validate(nombre, usuario_id)
    category = add_category(db, nombre, usuario_id)
    logger.info("Created category %s for user %s", category.id, usuario_id)
    return category


def list_categories(db: Session, usuario_id: int) -> list[Category]:
    return list_categories_for_user(db, usuario_id)


def update_category(
    db: Session, category_id: int, nombre: str | None, usuario_id: int | None
) -> Category:
    """
    Rename a category. Only the owner can rename it: a category that does not
    exist and one owned by somebody else are both reported as not found.
    """
    nombre = _validate(nombre, usuario_id)
    if rename_category(db, category_id, usuario_id, nombre) == 0:
        logger.info(
            "Category %s not found or not owned by user %s", category_id, usuario_id
        )
        raise NotFoundError(
            "Categoría no encontrada o no tiene permisos para editarla."
        )
    logger.info("Category %s renamed to %s", category_id, nombre)
    return Category(id=category_id, nombre=nombre, usuario_id=usuario_id)


def delete_category(db: Session, category_id: int) -> int:
    # No ownership check here, unlike update_category.
    if repo_delete_category(db, category_id) == 0:
        logger.info("Category %s not found for deletion", category_id)
        raise NotFoundError("Categoría no encontrada.")
    logger.info("Category %s deleted", category_id)
    return category_id
