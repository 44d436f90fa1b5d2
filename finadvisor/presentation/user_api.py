from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from finadvisor.domain.models import User
from finadvisor.domain.services.auth_service import (
    authenticate_user,
    list_users,
    register_user,
    seed_default_categories,
)
from finadvisor.presentation.dependencies import get_db

router = APIRouter(tags=["usuarios"])


class CredentialsRequest(BaseModel):
    nombre_usuario: Optional[str] = None
    contrasena: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    nombre_usuario: str
    fecha_registro: datetime

    @staticmethod
    def from_domain(u: User) -> "UserResponse":
        return UserResponse(
            id=u.id, nombre_usuario=u.nombre_usuario, fecha_registro=u.fecha_registro
        )


class LoginResponse(BaseModel):
    id: int
    nombre_usuario: str


@router.post(
    "/usuarios", response_model=UserResponse, status_code=status.HTTP_201_CREATED
)
def register_user_endpoint(
    req: CredentialsRequest,
    request: Request,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Register a user. The default categories are inserted after the response
    has been produced; their failure does not undo the registration.
    """
    user = register_user(db, req.nombre_usuario, req.contrasena)
    background_tasks.add_task(
        seed_default_categories, request.app.state.session_factory, user.id
    )
    return UserResponse.from_domain(user)


@router.get("/usuarios", response_model=List[UserResponse])
def list_users_endpoint(db: Session = Depends(get_db)):
    return [UserResponse.from_domain(u) for u in list_users(db)]


@router.post("/login", response_model=LoginResponse)
def login_endpoint(req: CredentialsRequest, db: Session = Depends(get_db)):
    # No session or token is issued; the identity itself is the login state.
    user = authenticate_user(db, req.nombre_usuario, req.contrasena)
    return LoginResponse(id=user.id, nombre_usuario=user.nombre_usuario)
