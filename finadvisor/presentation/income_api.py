from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from finadvisor.domain.models import Income
from finadvisor.domain.services.income_service import (
    create_income,
    delete_income,
    list_incomes,
    update_income,
)
from finadvisor.presentation.dependencies import get_db

router = APIRouter(prefix="/ingresos", tags=["ingresos"])


class CreateIncomeRequest(BaseModel):
    usuario_id: Optional[int] = None
    descripcion: Optional[str] = None
    monto: Optional[float] = None


class UpdateIncomeRequest(BaseModel):
    descripcion: Optional[str] = None
    monto: Optional[float] = None


class IncomeResponse(BaseModel):
    id: str
    usuario_id: int
    descripcion: str
    monto: float
    fecha: datetime

    @staticmethod
    def from_domain(i: Income) -> "IncomeResponse":
        return IncomeResponse(
            id=i.id,
            usuario_id=i.usuario_id,
            descripcion=i.descripcion,
            monto=i.monto,
            fecha=i.fecha,
        )


class IncomeDeletedResponse(BaseModel):
    message: str
    id_eliminado: str


@router.post("", response_model=IncomeResponse, status_code=status.HTTP_201_CREATED)
def create_income_endpoint(req: CreateIncomeRequest, db: Session = Depends(get_db)):
    income = create_income(db, req.usuario_id, req.descripcion, req.monto)
    return IncomeResponse.from_domain(income)


@router.get("/usuario/{usuario_id}", response_model=List[IncomeResponse])
def list_incomes_endpoint(usuario_id: int, db: Session = Depends(get_db)):
    return [IncomeResponse.from_domain(i) for i in list_incomes(db, usuario_id)]


@router.put("/{income_id}", response_model=IncomeResponse)
def update_income_endpoint(
    income_id: str, req: UpdateIncomeRequest, db: Session = Depends(get_db)
):
    income = update_income(db, income_id, req.descripcion, req.monto)
    return IncomeResponse.from_domain(income)


@router.delete("/{income_id}", response_model=IncomeDeletedResponse)
def delete_income_endpoint(income_id: str, db: Session = Depends(get_db)):
    deleted_id = delete_income(db, income_id)
    return IncomeDeletedResponse(
        message="Ingreso eliminado exitosamente.", id_eliminado=deleted_id
    )
