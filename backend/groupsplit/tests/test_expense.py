"""
Tests for expense endpoints.
"""
from decimal import Decimal
import pytest
from sqlalchemy.exc import SQLAlchemyError
from groupsplit.core.exceptions import StorageError
from groupsplit.models import Expense, ExpenseSplit, Group, GroupMembership, User
from groupsplit.schemas.expense import ExpenseCreate
from groupsplit.services import expense_service


def test_create_expense(client, make_user, make_group):
    """Test expense creation."""
    alice = make_user("alice")
    bob = make_user("bob")
    group_id = make_group(alice, bob)

    response = client.post(
        "/api/create-expense",
        json={
            "group_id": group_id,
            "amount": 45.5,
            "description": "Dinner",
            "category": "Food",
            "date": "2026-03-01",
            "splits": [
                {"user_id": alice["id"], "amount": 22.75},
                {"user_id": bob["id"], "amount": 22.75},
            ]
        },
        headers=alice["headers"]
    )

    assert response.status_code == 201
    expense = response.json()["expense"]
    assert response.json()["message"] == "Expense created successfully"
    assert expense["paid_by"] == alice["id"]
    assert expense["payer_username"] == "alice"
    assert expense["amount"] == 45.5
    assert expense["category"] == "food"
    assert expense["date"] == "2026-03-01"
    assert [(s["username"], s["amount"]) for s in expense["splits"]] == [("alice", 22.75), ("bob", 22.75)]


def test_create_expense_defaults(client, make_user, make_group):
    alice = make_user("alice")
    group_id = make_group(alice)

    response = client.post(
        "/api/create-expense",
        json={"group_id": group_id, "amount": 10, "description": "Snacks",
              "splits": [{"user_id": alice["id"], "amount": 10}]},
        headers=alice["headers"]
    )

    assert response.status_code == 201
    assert response.json()["expense"]["category"] == "general"


def test_split_mismatch_is_rejected(client, make_user, make_group, db_session):
    alice = make_user("alice")
    bob = make_user("bob")
    group_id = make_group(alice, bob)

    response = client.post(
        "/api/create-expense",
        json={
            "group_id": group_id,
            "amount": 100,
            "description": "Hotel",
            "splits": [
                {"user_id": alice["id"], "amount": 50},
                {"user_id": bob["id"], "amount": 49.98},
            ]
        },
        headers=alice["headers"]
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Splits do not equal total amount"}
    assert db_session.query(Expense).count() == 0


def test_split_rounding_within_a_cent_is_accepted(client, make_user, make_group):
    alice = make_user("alice")
    bob = make_user("bob")
    group_id = make_group(alice, bob)

    response = client.post(
        "/api/create-expense",
        json={
            "group_id": group_id,
            "amount": 10,
            "description": "Taxi",
            "splits": [
                {"user_id": alice["id"], "amount": 5},
                {"user_id": bob["id"], "amount": 4.99},
            ]
        },
        headers=alice["headers"]
    )

    assert response.status_code == 201


def test_non_member_cannot_create_expense(client, make_user, make_group, db_session):
    alice = make_user("alice")
    mallory = make_user("mallory")
    group_id = make_group(alice)

    response = client.post(
        "/api/create-expense",
        json={"group_id": group_id, "amount": 5, "description": "x",
              "splits": [{"user_id": mallory["id"], "amount": 5}]},
        headers=mallory["headers"]
    )

    assert response.status_code == 403
    assert db_session.query(Expense).count() == 0


def test_invalid_amount_is_rejected(client, make_user, make_group):
    alice = make_user("alice")
    group_id = make_group(alice)

    response = client.post(
        "/api/create-expense",
        json={"group_id": group_id, "amount": 0, "description": "x",
              "splits": [{"user_id": alice["id"], "amount": 0}]},
        headers=alice["headers"]
    )

    assert response.status_code == 400
    assert "error" in response.json()


def test_list_expenses(client, make_user, make_group):
    alice = make_user("alice")
    bob = make_user("bob")
    group_id = make_group(alice, bob)
    for day, amount in (("2026-01-01", 10), ("2026-01-05", 20)):
        client.post(
            "/api/create-expense",
            json={"group_id": group_id, "amount": amount, "description": "d", "date": day,
                  "splits": [{"user_id": bob["id"], "amount": amount}]},
            headers=alice["headers"]
        )

    response = client.get(f"/api/groups/{group_id}/expenses", headers=bob["headers"])

    assert response.status_code == 200
    assert [e["amount"] for e in response.json()] == [20, 10]


def test_failed_splits_delete_the_expense(db_session, monkeypatch):
    user = User(username="alice", email="alice@example.com", hashed_password="x")
    db_session.add(user)
    db_session.flush()
    group = Group(name="Trip", created_by=user.id)
    db_session.add(group)
    db_session.flush()
    db_session.add(GroupMembership(group_id=group.id, user_id=user.id))
    db_session.commit()

    def failing_insert(db, expense_id, splits):
        raise SQLAlchemyError("splits table unavailable")

    monkeypatch.setattr(expense_service, "_insert_splits", failing_insert)

    data = ExpenseCreate(
        group_id=group.id,
        amount=Decimal("12.00"),
        description="Lunch",
        splits=[{"user_id": user.id, "amount": Decimal("12.00")}]
    )
    with pytest.raises(StorageError):
        expense_service.create_expense(db_session, user.id, data)

    assert db_session.query(Expense).count() == 0
    assert db_session.query(ExpenseSplit).count() == 0


def test_split_for_non_member_is_rejected(client, make_user, make_group, db_session):
    alice = make_user("alice")
    bob = make_user("bob")
    eve = make_user("eve")
    group_id = make_group(alice, bob)

    response = client.post(
        "/api/create-expense",
        json={
            "group_id": group_id,
            "amount": 30,
            "description": "Museum",
            "splits": [
                {"user_id": alice["id"], "amount": 10},
                {"user_id": bob["id"], "amount": 10},
                {"user_id": eve["id"], "amount": 10},
            ]
        },
        headers=alice["headers"]
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Split members must belong to the group"}

    balances = client.post("/api/compute-balances", json={"group_id": group_id}, headers=alice["headers"])
    assert sum(b["balance"] for b in balances.json()["balances"]) == 0
    assert db_session.query(Expense).count() == 0


def test_split_for_unknown_user_is_rejected(client, make_user, make_group, db_session):
    alice = make_user("alice")
    group_id = make_group(alice)

    response = client.post(
        "/api/create-expense",
        json={
            "group_id": group_id,
            "amount": 20,
            "description": "Parking",
            "splits": [
                {"user_id": alice["id"], "amount": 10},
                {"user_id": 9999, "amount": 10},
            ]
        },
        headers=alice["headers"]
    )

    assert response.status_code == 400
    assert db_session.query(Expense).count() == 0
    assert db_session.query(ExpenseSplit).count() == 0


def test_sub_cent_amounts_are_rejected(client, make_user, make_group, db_session):
    alice = make_user("alice")
    bob = make_user("bob")
    group_id = make_group(alice, bob)

    response = client.post(
        "/api/create-expense",
        json={
            "group_id": group_id,
            "amount": "10.005",
            "description": "Coffee",
            "splits": [
                {"user_id": alice["id"], "amount": "5.0025"},
                {"user_id": bob["id"], "amount": "5.0025"},
            ]
        },
        headers=alice["headers"]
    )

    assert response.status_code == 400
    assert "error" in response.json()
    assert db_session.query(Expense).count() == 0
