import logging

from passlib.context import CryptContext
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from finadvisor.data.repositories.category_repository import add_categories_bulk
from finadvisor.data.repositories.user_repository import (
    create_user,
    get_user_by_username,
)
from finadvisor.data.repositories.user_repository import list_users as repo_list_users
from finadvisor.domain.errors import AuthError, ConflictError, ServiceError, ValidationError
from finadvisor.domain.models import User

logger = logging.getLogger(__name__)

# Credentials are always stored hashed, never as supplied.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

DEFAULT_CATEGORIES = [
    "Comida",
    "Transporte",
    "Entretenimiento",
    "Servicios",
    "Vivienda",
    "Salud",
    "Educación",
    "Ropa",
    "Regalos",
    "Viajes",
    "Ahorro",
]


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def _require_credentials(nombre_usuario: str | None, contrasena: str | None) -> None:
    if not nombre_usuario or not contrasena:
        raise ValidationError("Nombre de usuario y contraseña son requeridos.")


def register_user(db: Session, nombre_usuario: str | None, contrasena: str | None) -> User:
    _require_credentials(nombre_usuario, contrasena)
    if get_user_by_username(db, nombre_usuario):
        raise ConflictError("El nombre de usuario ya existe.")
    user = create_user(db, nombre_usuario, get_password_hash(contrasena))
    logger.info("Registered user %s with id %s", user.nombre_usuario, user.id)
    return user


def seed_default_categories(session_factory: sessionmaker, user_id: int) -> bool:
    """
    Best-effort creation of the default categories for a freshly registered
    user. Runs in its own session; a failure is logged and reported as False,
    the user row is left in place.

    Category names are unique across all users, so once one user owns e.g.
    "Comida" the whole batch fails for everybody registering afterwards.
    """
    db = session_factory()
    try:
        add_categories_bulk(db, DEFAULT_CATEGORIES, user_id)
    except (ServiceError, SQLAlchemyError) as e:
        logger.warning(
            "Could not insert default categories for user %s: %s", user_id, e
        )
        return False
    finally:
        db.close()
    logger.info("Default categories inserted for user %s", user_id)
    return True


def authenticate_user(db: Session, nombre_usuario: str | None, contrasena: str | None) -> User:
    _require_credentials(nombre_usuario, contrasena)
    user = get_user_by_username(db, nombre_usuario)
    if not user or not verify_password(contrasena, user.contrasena_hash):
        logger.info("Failed login attempt for %s", nombre_usuario)
        raise AuthError("invalid credentials")
    logger.info("User %s with id %s logged in", user.nombre_usuario, user.id)
    return user


def list_users(db: Session) -> list[User]:
    return repo_list_users(db)
