from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from finadvisor.domain.models import Category
from finadvisor.domain.services.category_service import (
    create_category,
    delete_category,
    list_categories,
    update_category,
)
from finadvisor.presentation.dependencies import get_db

router = APIRouter(prefix="/categorias", tags=["categorias"])


class CategoryRequest(BaseModel):
    nombre: Optional[str] = None
    usuario_id: Optional[int] = None


class CategoryResponse(BaseModel):
    id: int
    nombre: str
    usuario_id: int

    @staticmethod
    def from_domain(c: Category) -> "CategoryResponse":
        return CategoryResponse(id=c.id, nombre=c.nombre, usuario_id=c.usuario_id)


class CategoryDeletedResponse(BaseModel):
    message: str
    id_eliminado: int


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category_endpoint(req: CategoryRequest, db: Session = Depends(get_db)):
    return CategoryResponse.from_domain(create_category(db, req.nombre, req.usuario_id))


@router.get("/usuario/{usuario_id}", response_model=List[CategoryResponse])
def list_categories_endpoint(usuario_id: int, db: Session = Depends(get_db)):
    return [CategoryResponse.from_domain(c) for c in list_categories(db, usuario_id)]


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category_endpoint(
    category_id: int, req: CategoryRequest, db: Session = Depends(get_db)
):
    category = update_category(db, category_id, req.nombre, req.usuario_id)
    return CategoryResponse.from_domain(category)


@router.delete("/{category_id}", response_model=CategoryDeletedResponse)
def delete_category_endpoint(category_id: int, db: Session = Depends(get_db)):
    deleted_id = delete_category(db, category_id)
    return CategoryDeletedResponse(
        message="Categoría eliminada exitosamente.", id_eliminado=deleted_id
    )
