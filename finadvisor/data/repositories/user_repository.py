from sqlalchemy import Column, DateTime, Integer, String

from finadvisor.data.base import Base, as_utc, utcnow
from finadvisor.data.repositories.session_helpers import write_transaction
from finadvisor.domain.models import User

USER_CONFLICT = "El nombre de usuario ya existe."


class UserORM(Base):
    __tablename__ = "usuarios"
    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    nombre_usuario = Column(String, unique=True, index=True, nullable=False)
    contrasena_hash = Column(String, nullable=False)
    fecha_registro = Column(DateTime, nullable=False, default=utcnow)


def user_to_domain(user_orm: UserORM) -> User:
    return User(
        id=user_orm.id,
        nombre_usuario=user_orm.nombre_usuario,
        contrasena_hash=user_orm.contrasena_hash,
        fecha_registro=as_utc(user_orm.fecha_registro),
    )


def get_user_by_username(db, nombre_usuario: str) -> User | None:
    user = (
        db.query(UserORM).filter(UserORM.nombre_usuario == nombre_usuario).first()
    )
    return user_to_domain(user) if user else None


def list_users(db) -> list[User]:
    return [user_to_domain(u) for u in db.query(UserORM).order_by(UserORM.id).all()]


def create_user(db, nombre_usuario: str, contrasena_hash: str) -> User:
    db_user = UserORM(nombre_usuario=nombre_usuario, contrasena_hash=contrasena_hash)
    with write_transaction(db, USER_CONFLICT):
        db.add(db_user)
    db.refresh(db_user)
    return user_to_domain(db_user)


def delete_user(db, user_id: int) -> bool:
    # Owned rows go with the user through ON DELETE CASCADE.
    with write_transaction(db):
        deleted = (
            db.query(UserORM)
            .filter(UserORM.id == user_id)
            .delete(synchronize_session=False)
        )
    return deleted > 0
