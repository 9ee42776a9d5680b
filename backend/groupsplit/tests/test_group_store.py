"""
Tests for storage failures surfacing as domain errors.
"""
import pytest
from sqlalchemy.exc import SQLAlchemyError, OperationalError
from groupsplit.core.exceptions import GroupDataUnavailable, StorageError
from groupsplit.models import Group, GroupMembership, User
from groupsplit.services import group_store
from groupsplit.services.group_store import GroupStore
from groupsplit.services.settlement_service import SettlementEngine


def _unavailable(*args, **kwargs):
    raise OperationalError("SELECT", {}, Exception("database is locked"))


@pytest.fixture
def member(db_session):
    user = User(username="alice", email="alice@example.com", hashed_password="x")
    db_session.add(user)
    db_session.flush()
    group = Group(name="Flat", created_by=user.id)
    db_session.add(group)
    db_session.flush()
    db_session.add(GroupMembership(group_id=group.id, user_id=user.id, role="admin"))
    db_session.commit()
    return group.id, user.id


def test_expense_read_failure_raises_group_data_unavailable(db_session, member, monkeypatch):
    group_id, user_id = member
    monkeypatch.setattr(group_store, "selectinload", _unavailable)
    engine = SettlementEngine(GroupStore(db_session))

    with pytest.raises(GroupDataUnavailable) as exc_info:
        engine.compute_balances(group_id, user_id)

    assert exc_info.value.message == "Failed to fetch data"
    assert exc_info.value.status_code == 500


def test_member_read_failure_raises_group_data_unavailable(db_session, member, monkeypatch):
    group_id, _ = member
    store = GroupStore(db_session)
    monkeypatch.setattr(db_session, "query", _unavailable)

    with pytest.raises(GroupDataUnavailable):
        store.get_members(group_id)


def test_reset_write_failure_raises_storage_error(db_session, member, monkeypatch):
    group_id, user_id = member
    engine = SettlementEngine(GroupStore(db_session))

    def failing_commit():
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(db_session, "commit", failing_commit)

    with pytest.raises(StorageError) as exc_info:
        engine.reset_settlements(group_id, user_id)

    assert exc_info.value.message == "Failed to reset settlements"


def test_compute_settlements_reports_storage_failure(client, make_user, make_group, monkeypatch):
    alice = make_user("alice")
    group_id = make_group(alice)
    monkeypatch.setattr(group_store, "selectinload", _unavailable)

    response = client.post("/api/compute-settlements", json={"group_id": group_id}, headers=alice["headers"])

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch data"}
