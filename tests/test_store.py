from datetime import date, datetime

import pytest
from sqlalchemy.exc import OperationalError

from tasktracker.errors import NotFound, StoreFailure, ValidationError

from conftest import ADMIN_ID, MEMBER_ID, TEAM_ID


def test_records_are_plain_dicts(store, make_task):
    task = make_task("Plain", due_date=date(2024, 2, 1))
    assert isinstance(task, dict)
    assert task["title"] == "Plain"
    assert task["due_date"] == date(2024, 2, 1)
    assert task["id"]


def test_predicate_operators(store, make_task):
    make_task("Early", due_date=date(2024, 1, 5), priority="low")
    make_task("Late", due_date=date(2024, 2, 5), priority="high")
    make_task("Undated")

    def titles(predicate):
        return sorted(t["title"] for t in store.find("task", predicate))

    assert titles({"due_date__gte": date(2024, 1, 10)}) == ["Late"]
    assert titles({"due_date__lt": date(2024, 1, 10)}) == ["Early"]
    assert titles({"due_date__isnull": True}) == ["Undated"]
    assert titles({"priority__in": ["low", "high"]}) == ["Early", "Late"]
    assert titles({"priority": None}) == ["Undated"]
    assert titles({"priority__ne": "low"}) == ["Late"]
    assert titles({"title__icontains": "LA"}) == ["Late"]


def test_order_by_and_limit(store, make_task):
    make_task("B", created_at=datetime(2024, 1, 2))
    make_task("A", created_at=datetime(2024, 1, 1))
    make_task("C", created_at=datetime(2024, 1, 3))

    newest = store.find("task", {"team_id": TEAM_ID}, order_by=["-created_at"], limit=2)
    assert [t["title"] for t in newest] == ["C", "B"]


def test_unknown_field_or_kind_is_rejected(store):
    with pytest.raises(ValidationError):
        store.find("task", {"colour": "red"})
    with pytest.raises(ValidationError):
        store.find("task", {"title__regex": "x"})
    with pytest.raises(ValidationError):
        store.find("widget", {})


def test_count(store):
    assert store.count("team_member", {"team_id": TEAM_ID}) == 2
    assert store.count("team_member", {"team_id": TEAM_ID, "role": "admin"}) == 1


def test_update_by_composite_identity(store):
    updated = store.update("team_member", (TEAM_ID, MEMBER_ID), {"role": "admin"})
    assert updated["role"] == "admin"


def test_rejected_update_leaves_no_partial_write(store, make_task):
    task = make_task("Original")

    with pytest.raises(ValidationError):
        store.update("task", task["id"], {"title": "Leaked", "bogus": 1})
    store.insert("profile", {"user_id": "user-later", "full_name": "Later"})

    assert store.find_one("task", {"id": task["id"]})["title"] == "Original"


def test_rejected_update_many_leaves_no_partial_write(store, make_task):
    first = make_task("First")
    second = make_task("Second")

    with pytest.raises(ValidationError):
        store.update_many("task", [first["id"], second["id"]], {"status": "complete", "bogus": 1})
    store.insert("profile", {"user_id": "user-later", "full_name": "Later"})

    assert store.count("task", {"status": "complete"}) == 0


def test_update_missing_record(store):
    with pytest.raises(NotFound):
        store.update("task", "nope", {"title": "x"})


def test_update_many_is_all_or_nothing(store, make_task):
    first = make_task("First")
    second = make_task("Second")

    with pytest.raises(NotFound):
        store.update_many("task", [first["id"], "missing"], {"status": "complete"})
    assert store.find_one("task", {"id": first["id"]})["status"] == "todo"

    updated = store.update_many("task", [second["id"], first["id"]], {"status": "complete"})
    assert [t["id"] for t in updated] == [second["id"], first["id"]]
    assert store.count("task", {"status": "complete"}) == 2


def test_delete_task_removes_children(store, make_task):
    task = make_task("Doomed")
    store.insert("time_entry", {"task_id": task["id"], "user_id": ADMIN_ID, "minutes": 30,
                                "entry_date": date(2024, 1, 1)})
    store.insert("comment", {"task_id": task["id"], "user_id": ADMIN_ID, "content": "bye"})

    store.delete("task", task["id"])

    assert store.find("time_entry", {"task_id": task["id"]}) == []
    assert store.find("comment", {"task_id": task["id"]}) == []


def test_constraint_violation_is_a_validation_error(store):
    with pytest.raises(ValidationError):
        store.insert("task", {"team_id": TEAM_ID, "title": None})
    # the session is usable again after the rollback
    assert store.count("profile") == 3


def test_driver_failure_surfaces_as_store_failure(store, db_session, monkeypatch):
    def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "commit", broken_commit)
    with pytest.raises(StoreFailure):
        store.insert("profile", {"user_id": "user-new", "full_name": "New"})
