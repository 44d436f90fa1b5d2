"""
Local display state for a single logged-in user.

Lists are refreshed from the server and patched locally after every
successful write. Neither step coordinates with other sessions: two clients
editing the same user's data only see each other's changes on the next load.
"""
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable, Generic, List, Optional, TypeVar

from finadvisor.client.api_client import FinanceApiClient
from finadvisor.client.formatting import Summary, summarize
from finadvisor.domain.models import Category, Expense, Goal, Income

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class LoggedUser:
    id: int
    nombre_usuario: str


class UserSession:
    """The login state is just the identity returned by /login; it never expires."""

    def __init__(self, client: FinanceApiClient):
        self.client = client
        self.user: Optional[LoggedUser] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def register(self, nombre_usuario: str, contrasena: str) -> LoggedUser:
        data = self.client.register(nombre_usuario, contrasena)
        self.user = LoggedUser(id=data["id"], nombre_usuario=data["nombre_usuario"])
        return self.user

    def login(self, nombre_usuario: str, contrasena: str) -> LoggedUser:
        data = self.client.login(nombre_usuario, contrasena)
        self.user = LoggedUser(id=data["id"], nombre_usuario=data["nombre_usuario"])
        logger.info("Logged in as %s", self.user.nombre_usuario)
        return self.user

    def logout(self) -> None:
        self.user = None


@dataclass
class EntityList(Generic[T]):
    items: List[T] = field(default_factory=list)
    prepend: bool = True

    def replace_all(self, items: List[T]) -> None:
        self.items = list(items)

    def merge(self, item: T) -> None:
        """Replace the entry with the same id, or add it as a new one."""
        for i, existing in enumerate(self.items):
            if existing.id == item.id:
                self.items[i] = item
                return
        if self.prepend:
            self.items.insert(0, item)
        else:
            self.items.append(item)

    def remove(self, item_id: Any) -> None:
        self.items = [i for i in self.items if i.id != item_id]

    def find(self, item_id: Any) -> Optional[T]:
        return next((i for i in self.items if i.id == item_id), None)

    def __len__(self) -> int:
        return len(self.items)


def _newest_first(expenses: List[Expense]) -> List[Expense]:
    return sorted(expenses, key=lambda e: e.fecha.timestamp() if e.fecha else 0, reverse=True)


class FinanceDashboard:
    def __init__(self, client: FinanceApiClient, session: UserSession):
        self.client = client
        self.session = session
        self.categories: EntityList[Category] = EntityList()
        self.expenses: EntityList[Expense] = EntityList()
        self.incomes: EntityList[Income] = EntityList()
        # New goals go to the end of the list
        self.goals: EntityList[Goal] = EntityList(prepend=False)

    @property
    def user_id(self) -> Optional[int]:
        return self.session.user.id if self.session.user else None

    def _load(self, target: EntityList, fetch: Callable[[int], list]) -> None:
        if self.user_id is None:
            target.replace_all([])
            return
        target.replace_all(fetch(self.user_id))

    def load_categories(self) -> None:
        self._load(self.categories, self.client.list_categories)

    def load_expenses(self) -> None:
        self._load(
            self.expenses, lambda uid: _newest_first(self.client.list_expenses(uid))
        )

    def load_incomes(self) -> None:
        self._load(self.incomes, self.client.list_incomes)

    def load_goals(self) -> None:
        self._load(self.goals, self.client.list_goals)

    def load_all(self) -> None:
        self.load_categories()
        self.load_expenses()
        self.load_incomes()
        self.load_goals()

    def clear(self) -> None:
        for entity_list in (self.categories, self.expenses, self.incomes, self.goals):
            entity_list.replace_all([])

    # --- Categories: always reloaded from the server after a change ---

    def add_category(self, nombre: str) -> Category:
        category = self.client.create_category(nombre, self.user_id)
        self.load_categories()
        return category

    def rename_category(self, category_id: int, nombre: str) -> Category:
        category = self.client.update_category(category_id, nombre, self.user_id)
        self.load_categories()
        return category

    def delete_category(self, category_id: int) -> None:
        self.client.delete_category(category_id)
        self.load_categories()
        # Expenses that used it have lost their category on the server.
        self.load_expenses()

    # --- Expenses ---

    def add_expense(
        self, descripcion: str, monto: float, categoria_id: Optional[int] = None
    ) -> Expense:
        expense = self.client.create_expense(descripcion, monto, self.user_id, categoria_id)
        if expense.categoria_id and expense.categoria_nombre is None:
            category = self.categories.find(expense.categoria_id)
            if category:
                expense = replace(expense, categoria_nombre=category.nombre)
        self.expenses.merge(expense)
        return expense

    def edit_expense(
        self,
        expense_id: str,
        descripcion: str,
        monto: float,
        categoria_id: Optional[int] = None,
    ) -> Expense:
        expense = self.client.update_expense(expense_id, descripcion, monto, categoria_id)
        self.expenses.merge(expense)
        return expense

    def delete_expense(self, expense_id: str) -> None:
        self.client.delete_expense(expense_id)
        self.expenses.remove(expense_id)

    # --- Incomes ---

    def add_income(self, descripcion: str, monto: float) -> Income:
        income = self.client.create_income(descripcion, monto, self.user_id)
        self.incomes.merge(income)
        return income

    def edit_income(self, income_id: str, descripcion: str, monto: float) -> Income:
        income = self.client.update_income(income_id, descripcion, monto)
        self.incomes.merge(income)
        return income

    def delete_income(self, income_id: str) -> None:
        self.client.delete_income(income_id)
        self.incomes.remove(income_id)

    # --- Goals ---

    def add_goal(
        self,
        nombre: str,
        monto_meta: float,
        monto_actual: float = 0,
        fecha_limite: Optional[str] = None,
    ) -> Goal:
        goal = self.client.create_goal(
            self.user_id, nombre, monto_meta, monto_actual, fecha_limite
        )
        self.goals.merge(goal)
        return goal

    def edit_goal(self, goal: Goal) -> Goal:
        updated = self.client.update_goal(goal)
        self.goals.merge(updated)
        return updated

    def contribute_to_goal(self, goal_id: str, monto: float) -> Goal:
        """Add to a goal through the server-side atomic increment."""
        if monto is None or monto <= 0:
            raise ValueError("Por favor, introduce un número válido y positivo.")
        goal = self.client.contribute_to_goal(goal_id, monto)
        self.goals.merge(goal)
        return goal

    def contribute_to_goal_legacy(self, goal_id: str, monto: float) -> Optional[Goal]:
        """
        Read-modify-write contribution: the locally known amount plus ``monto``
        is sent back as a full update. Two sessions contributing at the same
        time can lose one of the contributions; prefer contribute_to_goal.
        """
        if monto is None or monto <= 0:
            raise ValueError("Por favor, introduce un número válido y positivo.")
        current = self.goals.find(goal_id)
        if current is None:
            return None
        new_amount = round(current.monto_actual + monto, 2)
        return self.edit_goal(replace(current, monto_actual=new_amount))

    def delete_goal(self, goal_id: str) -> None:
        self.client.delete_goal(goal_id)
        self.goals.remove(goal_id)

    def summary(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Summary:
        return summarize(self.expenses.items, self.incomes.items, start, end)
