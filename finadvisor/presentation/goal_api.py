from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from finadvisor.domain.models import Goal
from finadvisor.domain.services.goal_service import (
    contribute_to_goal,
    create_goal,
    delete_goal,
    list_goals,
    update_goal,
)
from finadvisor.presentation.dependencies import get_db

router = APIRouter(prefix="/objetivos", tags=["objetivos"])


class CreateGoalRequest(BaseModel):
    usuario_id: Optional[int] = None
    nombre: Optional[str] = None
    monto_meta: Optional[float] = None
    monto_actual: Optional[float] = 0
    fecha_limite: Optional[str] = None


class UpdateGoalRequest(BaseModel):
    nombre: Optional[str] = None
    monto_meta: Optional[float] = None
    monto_actual: Optional[float] = None
    fecha_limite: Optional[str] = None
    completado: Optional[int] = 0


class ContributionRequest(BaseModel):
    monto: Optional[float] = None


class GoalResponse(BaseModel):
    id: str
    usuario_id: int
    nombre: str
    monto_meta: float
    monto_actual: float
    fecha_limite: Optional[str] = None
    completado: int

    @staticmethod
    def from_domain(g: Goal) -> "GoalResponse":
        return GoalResponse(
            id=g.id,
            usuario_id=g.usuario_id,
            nombre=g.nombre,
            monto_meta=g.monto_meta,
            monto_actual=g.monto_actual,
            fecha_limite=g.fecha_limite,
            completado=g.completado,
        )


class GoalDeletedResponse(BaseModel):
    message: str
    id_eliminado: str


@router.post("", response_model=GoalResponse, status_code=status.HTTP_201_CREATED)
def create_goal_endpoint(req: CreateGoalRequest, db: Session = Depends(get_db)):
    goal = create_goal(
        db,
        usuario_id=req.usuario_id,
        nombre=req.nombre,
        monto_meta=req.monto_meta,
        monto_actual=req.monto_actual,
        fecha_limite=req.fecha_limite,
    )
    return GoalResponse.from_domain(goal)


@router.get("/usuario/{usuario_id}", response_model=List[GoalResponse])
def list_goals_endpoint(usuario_id: int, db: Session = Depends(get_db)):
    return [GoalResponse.from_domain(g) for g in list_goals(db, usuario_id)]


@router.put("/{goal_id}", response_model=GoalResponse)
def update_goal_endpoint(
    goal_id: str, req: UpdateGoalRequest, db: Session = Depends(get_db)
):
    goal = update_goal(
        db,
        goal_id,
        nombre=req.nombre,
        monto_meta=req.monto_meta,
        monto_actual=req.monto_actual,
        fecha_limite=req.fecha_limite,
        completado=req.completado,
    )
    return GoalResponse.from_domain(goal)


@router.post("/{goal_id}/aportes", response_model=GoalResponse)
def contribute_to_goal_endpoint(
    goal_id: str, req: ContributionRequest, db: Session = Depends(get_db)
):
    """
    Add an amount to the goal's current amount in one atomic statement.
    """
    return GoalResponse.from_domain(contribute_to_goal(db, goal_id, req.monto))


@router.delete("/{goal_id}", response_model=GoalDeletedResponse)
def delete_goal_endpoint(goal_id: str, db: Session = Depends(get_db)):
    deleted_id = delete_goal(db, goal_id)
    return GoalDeletedResponse(
        message="Objetivo eliminado exitosamente.", id_eliminado=deleted_id
    )
