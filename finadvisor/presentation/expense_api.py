from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from finadvisor.domain.models import Expense
from finadvisor.domain.services.expense_service import (
    create_expense,
    delete_expense,
    list_expenses,
    update_expense,
)
from finadvisor.presentation.dependencies import get_db

router = APIRouter(prefix="/gastos", tags=["gastos"])


class CreateExpenseRequest(BaseModel):
    descripcion: Optional[str] = None
    monto: Optional[float] = None
    usuario_id: Optional[int] = None
    categoria_id: Optional[int] = None


class UpdateExpenseRequest(BaseModel):
    descripcion: Optional[str] = None
    monto: Optional[float] = None
    categoria_id: Optional[int] = None


class ExpenseResponse(BaseModel):
    id: str
    descripcion: str
    monto: float
    fecha: datetime
    usuario_id: int
    categoria_id: Optional[int] = None
    categoria_nombre: Optional[str] = None

    @staticmethod
    def from_domain(e: Expense) -> "ExpenseResponse":
        return ExpenseResponse(
            id=e.id,
            descripcion=e.descripcion,
            monto=e.monto,
            fecha=e.fecha,
            usuario_id=e.usuario_id,
            categoria_id=e.categoria_id,
            categoria_nombre=e.categoria_nombre,
        )


class ExpenseDeletedResponse(BaseModel):
    message: str
    id_borrado: str


@router.get("/usuario/{usuario_id}", response_model=List[ExpenseResponse])
def list_expenses_endpoint(usuario_id: int, db: Session = Depends(get_db)):
    """
    Expenses of one user, newest first, each with the name of its category.
    """
    return [ExpenseResponse.from_domain(e) for e in list_expenses(db, usuario_id)]


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense_endpoint(req: CreateExpenseRequest, db: Session = Depends(get_db)):
    expense = create_expense(
        db,
        descripcion=req.descripcion,
        monto=req.monto,
        usuario_id=req.usuario_id,
        categoria_id=req.categoria_id,
    )
    return ExpenseResponse.from_domain(expense)


@router.put("/{expense_id}", response_model=ExpenseResponse)
def update_expense_endpoint(
    expense_id: str, req: UpdateExpenseRequest, db: Session = Depends(get_db)
):
    expense = update_expense(
        db,
        expense_id,
        descripcion=req.descripcion,
        monto=req.monto,
        categoria_id=req.categoria_id,
    )
    return ExpenseResponse.from_domain(expense)


@router.delete("/{expense_id}", response_model=ExpenseDeletedResponse)
def delete_expense_endpoint(expense_id: str, db: Session = Depends(get_db)):
    deleted_id = delete_expense(db, expense_id)
    return ExpenseDeletedResponse(
        message="Gasto borrado exitosamente.", id_borrado=deleted_id
    )
