import pytest

from finadvisor.data.repositories.category_repository import list_categories_for_user
from finadvisor.data.repositories.user_repository import delete_user
from finadvisor.domain.errors import (
    AuthError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from finadvisor.domain.helpers.ids import new_timestamp_id
from finadvisor.domain.services import (
    auth_service,
    category_service,
    expense_service,
    goal_service,
    income_service,
)


@pytest.fixture
def user(db):
    return auth_service.register_user(db, "ana", "pw1")


def test_timestamp_ids_are_unique_and_increasing():
    ids = [new_timestamp_id() for _ in range(200)]
    assert len(set(ids)) == len(ids)
    assert [int(i) for i in ids] == sorted(int(i) for i in ids)


@pytest.mark.parametrize(
    "value, expected",
    [
        (3, 3.0),
        ("12.5", 12.5),
        (None, 0.0),
        ("abc", 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        ("-inf", 0.0),
    ],
)
def test_to_float(value, expected):
    assert goal_service.to_float(value) == expected


def test_register_conflict(db, user):
    with pytest.raises(ConflictError):
        auth_service.register_user(db, "ana", "otra")


def test_authenticate(db, user):
    assert auth_service.authenticate_user(db, "ana", "pw1").id == user.id
    with pytest.raises(AuthError):
        auth_service.authenticate_user(db, "ana", "pw2")
    with pytest.raises(ValidationError):
        auth_service.authenticate_user(db, "ana", "")


def test_seed_default_categories(db, session_factory, user):
    assert auth_service.seed_default_categories(session_factory, user.id) is True
    assert len(list_categories_for_user(db, user.id)) == len(auth_service.DEFAULT_CATEGORIES)

    other = auth_service.register_user(db, "luis", "pw2")
    assert auth_service.seed_default_categories(session_factory, other.id) is False
    assert list_categories_for_user(db, other.id) == []
    # The failed batch leaves the first user's rows untouched.
    assert len(list_categories_for_user(db, user.id)) == len(auth_service.DEFAULT_CATEGORIES)


def test_deleting_user_cascades(db, user):
    category = category_service.create_category(db, "Casa", user.id)
    expense_service.create_expense(db, "Luz", 40, user.id, category.id)
    income_service.create_income(db, user.id, "Sueldo", 900)
    goal_service.create_goal(db, user.id, "Viaje", 1000)

    assert delete_user(db, user.id) is True

    assert category_service.list_categories(db, user.id) == []
    assert expense_service.list_expenses(db, user.id) == []
    assert income_service.list_incomes(db, user.id) == []
    assert goal_service.list_goals(db, user.id) == []


def test_category_delete_nulls_reference(db, user):
    category = category_service.create_category(db, "Ocio", user.id)
    expense = expense_service.create_expense(db, "Concierto", 60, user.id, category.id)

    category_service.delete_category(db, category.id)

    [reloaded] = expense_service.list_expenses(db, user.id)
    assert reloaded.id == expense.id
    assert reloaded.categoria_id is None
    assert reloaded.categoria_nombre is None


def test_category_validation_and_not_found(db, user):
    with pytest.raises(ValidationError):
        category_service.create_category(db, "  ", user.id)
    with pytest.raises(NotFoundError):
        category_service.update_category(db, 12345, "X", user.id)
    with pytest.raises(NotFoundError):
        category_service.delete_category(db, 12345)


def test_expense_for_unknown_user_is_a_store_failure(db):
    with pytest.raises(InternalError):
        expense_service.create_expense(db, "Nada", 1, 999)


def test_store_failure_is_a_500(client):
    resp = client.post("/gastos", json={"descripcion": "x", "monto": 1, "usuario_id": 999})
    assert resp.status_code == 500
    assert "FOREIGN KEY" in resp.json()["error"]


def test_update_goal_does_not_derive_completion(db, user):
    goal = goal_service.create_goal(db, user.id, "Moto", 500, 0)
    updated = goal_service.update_goal(db, goal.id, "Moto", 500, 500, None, 0)
    assert updated.monto_actual == 500
    assert updated.completado == 0


def test_contribute_to_goal(db, user):
    goal = goal_service.create_goal(db, user.id, "Moto", 500, 100)
    assert goal_service.contribute_to_goal(db, goal.id, 50).monto_actual == 150
    with pytest.raises(ValidationError):
        goal_service.contribute_to_goal(db, goal.id, -1)
    with pytest.raises(NotFoundError):
        goal_service.contribute_to_goal(db, "missing", 1)


def test_update_and_delete_missing_rows(db):
    with pytest.raises(NotFoundError):
        expense_service.update_expense(db, "missing", "x", 1)
    with pytest.raises(NotFoundError):
        expense_service.delete_expense(db, "missing")
    with pytest.raises(NotFoundError):
        income_service.update_income(db, "missing", "x", 1)
    with pytest.raises(NotFoundError):
        income_service.delete_income(db, "missing")
    with pytest.raises(NotFoundError):
        goal_service.update_goal(db, "missing", "x", 1, 0)
    with pytest.raises(NotFoundError):
        goal_service.delete_goal(db, "missing")


@pytest.mark.parametrize("amount", [float("inf"), float("-inf"), float("nan")])
def test_non_finite_amounts_fail_validation(db, user, amount):
    with pytest.raises(ValidationError):
        expense_service.create_expense(db, "x", amount, user.id)
    with pytest.raises(ValidationError):
        income_service.create_income(db, user.id, "x", amount)
    with pytest.raises(ValidationError):
        goal_service.create_goal(db, user.id, "x", 100, amount)
    goal = goal_service.create_goal(db, user.id, "Moto", 500, 0)
    with pytest.raises(ValidationError):
        goal_service.contribute_to_goal(db, goal.id, amount)


def test_row_gone_after_update_is_not_found(db, user, monkeypatch):
    income = income_service.create_income(db, user.id, "Sueldo", 100)
    goal = goal_service.create_goal(db, user.id, "Moto", 500, 0)
    monkeypatch.setattr(income_service, "get_income", lambda db, income_id: None)
    monkeypatch.setattr(goal_service, "get_goal", lambda db, goal_id: None)

    with pytest.raises(NotFoundError):
        income_service.update_income(db, income.id, "Sueldo", 200)
    with pytest.raises(NotFoundError):
        goal_service.update_goal(db, goal.id, "Moto", 500, 10)
    with pytest.raises(NotFoundError):
        goal_service.contribute_to_goal(db, goal.id, 10)
