# finadvisor/domain/models.py
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class User:
    id: int
    nombre_usuario: str
    contrasena_hash: str
    fecha_registro: datetime


@dataclass
class Category:
    id: int
    nombre: str
    usuario_id: int


@dataclass
class Expense:
    id: str
    descripcion: str
    monto: float
    fecha: datetime
    usuario_id: int
    categoria_id: Optional[int] = None
    categoria_nombre: Optional[str] = None


@dataclass
class Income:
    id: str
    usuario_id: int
    descripcion: str
    monto: float
    fecha: datetime


@dataclass
class Goal:
    id: str
    usuario_id: int
    nombre: str
    monto_meta: float
    monto_actual: float = 0.0
    fecha_limite: Optional[str] = None
    completado: int = 0
