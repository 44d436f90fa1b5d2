import logging
from typing import Any, Dict, List, Optional

import requests

from finadvisor.client.formatting import parse_timestamp
from finadvisor.config import Settings
from finadvisor.domain.models import Category, Expense, Goal, Income

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx answer from the API; ``message`` is the ``error`` field of the body."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def category_from_json(data: Dict[str, Any]) -> Category:
    return Category(
        id=int(data["id"]), nombre=data["nombre"], usuario_id=int(data["usuario_id"])
    )


def expense_from_json(data: Dict[str, Any]) -> Expense:
    return Expense(
        id=str(data["id"]),
        descripcion=data["descripcion"],
        monto=float(data["monto"]),
        fecha=parse_timestamp(data.get("fecha")),
        usuario_id=int(data["usuario_id"]),
        categoria_id=data.get("categoria_id"),
        categoria_nombre=data.get("categoria_nombre"),
    )


def income_from_json(data: Dict[str, Any]) -> Income:
    return Income(
        id=str(data["id"]),
        usuario_id=int(data["usuario_id"]),
        descripcion=data["descripcion"],
        monto=float(data["monto"]),
        fecha=parse_timestamp(data.get("fecha")),
    )


def goal_from_json(data: Dict[str, Any]) -> Goal:
    return Goal(
        id=str(data["id"]),
        usuario_id=int(data["usuario_id"]),
        nombre=data["nombre"],
        monto_meta=float(data.get("monto_meta") or 0),
        monto_actual=float(data.get("monto_actual") or 0),
        fecha_limite=data.get("fecha_limite"),
        completado=int(data.get("completado") or 0),
    )


class FinanceApiClient:
    """
    Thin wrapper around the REST API. Every method performs exactly one
    request and returns the decoded answer.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ):
        self.base_url = (base_url or Settings.from_env().api_url).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if not resp.ok:
            try:
                body = resp.json()
            except ValueError:
                body = None
            message = (body.get("error") if isinstance(body, dict) else None) or resp.text
            logger.warning("%s %s failed with %s: %s", method, path, resp.status_code, message)
            raise ApiError(resp.status_code, message)
        return resp.json()

    # --- Users ---

    def register(self, nombre_usuario: str, contrasena: str) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/usuarios",
            json={"nombre_usuario": nombre_usuario, "contrasena": contrasena},
        )

    def login(self, nombre_usuario: str, contrasena: str) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/login",
            json={"nombre_usuario": nombre_usuario, "contrasena": contrasena},
        )

    def list_users(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/usuarios")

    # --- Categories ---

    def list_categories(self, usuario_id: int) -> List[Category]:
        data = self._request("GET", f"/categorias/usuario/{usuario_id}")
        return [category_from_json(c) for c in data]

    def create_category(self, nombre: str, usuario_id: int) -> Category:
        data = self._request(
            "POST", "/categorias", json={"nombre": nombre, "usuario_id": usuario_id}
        )
        return category_from_json(data)

    def update_category(self, category_id: int, nombre: str, usuario_id: int) -> Category:
        data = self._request(
            "PUT",
            f"/categorias/{category_id}",
            json={"nombre": nombre, "usuario_id": usuario_id},
        )
        return category_from_json(data)

    def delete_category(self, category_id: int) -> Dict[str, Any]:
        return self._request("DELETE", f"/categorias/{category_id}")

    # --- Expenses ---

    def list_expenses(self, usuario_id: int) -> List[Expense]:
        data = self._request("GET", f"/gastos/usuario/{usuario_id}")
        return [expense_from_json(e) for e in data]

    def create_expense(
        self,
        descripcion: str,
        monto: float,
        usuario_id: int,
        categoria_id: Optional[int] = None,
    ) -> Expense:
        data = self._request(
            "POST",
            "/gastos",
            json={
                "descripcion": descripcion,
                "monto": monto,
                "usuario_id": usuario_id,
                "categoria_id": categoria_id,
            },
        )
        return expense_from_json(data)

    def update_expense(
        self,
        expense_id: str,
        descripcion: str,
        monto: float,
        categoria_id: Optional[int] = None,
    ) -> Expense:
        data = self._request(
            "PUT",
            f"/gastos/{expense_id}",
            json={
                "descripcion": descripcion,
                "monto": monto,
                "categoria_id": categoria_id,
            },
        )
        return expense_from_json(data)

    def delete_expense(self, expense_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/gastos/{expense_id}")

    # --- Incomes ---

    def list_incomes(self, usuario_id: int) -> List[Income]:
        data = self._request("GET", f"/ingresos/usuario/{usuario_id}")
        return [income_from_json(i) for i in data]

    def create_income(self, descripcion: str, monto: float, usuario_id: int) -> Income:
        data = self._request(
            "POST",
            "/ingresos",
            json={"usuario_id": usuario_id, "descripcion": descripcion, "monto": monto},
        )
        return income_from_json(data)

    def update_income(self, income_id: str, descripcion: str, monto: float) -> Income:
        data = self._request(
            "PUT",
            f"/ingresos/{income_id}",
            json={"descripcion": descripcion, "monto": monto},
        )
        return income_from_json(data)

    def delete_income(self, income_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/ingresos/{income_id}")

    # --- Goals ---

    def list_goals(self, usuario_id: int) -> List[Goal]:
        data = self._request("GET", f"/objetivos/usuario/{usuario_id}")
        return [goal_from_json(g) for g in data]

    def create_goal(
        self,
        usuario_id: int,
        nombre: str,
        monto_meta: float,
        monto_actual: float = 0,
        fecha_limite: Optional[str] = None,
    ) -> Goal:
        data = self._request(
            "POST",
            "/objetivos",
            json={
                "usuario_id": usuario_id,
                "nombre": nombre,
                "monto_meta": monto_meta,
                "monto_actual": monto_actual,
                "fecha_limite": fecha_limite,
            },
        )
        return goal_from_json(data)

    def update_goal(self, goal: Goal) -> Goal:
        data = self._request(
            "PUT",
            f"/objetivos/{goal.id}",
            json={
                "nombre": goal.nombre,
                "monto_meta": goal.monto_meta,
                "monto_actual": goal.monto_actual,
                "fecha_limite": goal.fecha_limite,
                "completado": goal.completado,
            },
        )
        return goal_from_json(data)

    def contribute_to_goal(self, goal_id: str, monto: float) -> Goal:
        data = self._request(
            "POST", f"/objetivos/{goal_id}/aportes", json={"monto": monto}
        )
        return goal_from_json(data)

    def delete_goal(self, goal_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/objetivos/{goal_id}")
