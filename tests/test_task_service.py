from datetime import date, datetime

import pytest

from tasktracker.errors import NotAuthenticated, NotAuthorized, NotFound, ValidationError
from tasktracker.schemas.task_schema import TaskCreate, TaskFilters, TaskUpdate
from tasktracker.services import comment_service, task_service, time_entry_service

from conftest import ADMIN_ID, MEMBER_ID, OUTSIDER_ID, TEAM_ID


# --- Create / update -------------------------------------------------------

def test_create_task_defaults(store):
    task = task_service.create_task(
        store, MEMBER_ID, TEAM_ID,
        TaskCreate(title="  Write tests  ", priority="high", estimated_time_minutes=90),
    )
    assert task["title"] == "Write tests"
    assert task["status"] == "todo"
    assert task["creator_id"] == MEMBER_ID
    assert task["priority"] == "high"
    assert task["assignee_id"] is None


def test_create_task_needs_actor(store):
    with pytest.raises(NotAuthenticated):
        task_service.create_task(store, None, TEAM_ID, TaskCreate(title="x"))


def test_create_task_rejects_blank_title(store):
    with pytest.raises(ValidationError):
        task_service.create_task(store, ADMIN_ID, TEAM_ID, TaskCreate(title="   "))


def test_only_assignee_or_creator_may_change_status(store, make_task):
    task = make_task(assignee_id=MEMBER_ID)

    assert task_service.update_task_status(store, MEMBER_ID, task["id"], "in_progress")["status"] == "in_progress"
    assert task_service.update_task_status(store, ADMIN_ID, task["id"], "complete")["status"] == "complete"
    with pytest.raises(NotAuthorized):
        task_service.update_task_status(store, OUTSIDER_ID, task["id"], "todo")


def test_update_task_applies_only_sent_fields(store, make_task):
    task = make_task(description="keep me", priority="low", due_date=date(2024, 5, 1))

    updated = task_service.update_task(store, ADMIN_ID, task["id"], TaskUpdate(title="Renamed", due_date=None))

    assert updated["title"] == "Renamed"
    assert updated["due_date"] is None
    assert updated["description"] == "keep me"
    assert updated["priority"] == "low"


def test_update_description_clears_on_empty(store, make_task):
    task = make_task(description="old")
    updated = task_service.update_task_description(store, ADMIN_ID, task["id"], "")
    assert updated["description"] is None


def test_update_missing_task(store):
    with pytest.raises(NotFound):
        task_service.update_task_status(store, ADMIN_ID, "missing", "todo")


# --- Delete / duplicate / template ----------------------------------------

def test_delete_task_cascades_to_children(store, make_task):
    task = make_task()
    time_entry_service.add_time_entry(store, ADMIN_ID, task["id"], 30, date(2024, 1, 1))
    comment_service.add_comment(store, ADMIN_ID, task["id"], "note")

    task_service.delete_task(store, ADMIN_ID, task["id"])

    assert store.find_one("task", {"id": task["id"]}) is None
    assert store.count("time_entry") == 0
    assert store.count("comment") == 0


def test_delete_task_requires_permission(store, make_task):
    task = make_task()
    with pytest.raises(NotAuthorized):
        task_service.delete_task(store, MEMBER_ID, task["id"])


def test_duplicate_copies_fields_and_resets_status(store, make_task):
    task = make_task("Deploy", status="complete", assignee_id=MEMBER_ID, priority="urgent",
                     due_date=date(2024, 9, 1), estimated_time_minutes=60)

    copy = task_service.duplicate_task(store, MEMBER_ID, task["id"])

    assert copy["id"] != task["id"]
    assert copy["title"] == "Copy of Deploy"
    assert copy["status"] == "todo"
    assert copy["creator_id"] == MEMBER_ID
    assert copy["assignee_id"] == MEMBER_ID
    assert copy["due_date"] == date(2024, 9, 1)
    assert copy["priority"] == "urgent"


def test_template_drops_assignee_and_due_date(store, make_task):
    task = make_task("Onboard", assignee_id=MEMBER_ID, due_date=date(2024, 9, 1), estimated_time_minutes=45)

    template = task_service.convert_task_to_template(store, ADMIN_ID, task["id"])

    assert template["title"] == "[Template] Onboard"
    assert template["assignee_id"] is None
    assert template["due_date"] is None
    assert template["estimated_time_minutes"] == 45


# --- Bulk ------------------------------------------------------------------

def test_bulk_update_changes_every_task(store, make_task):
    ids = [make_task(f"T{n}")["id"] for n in range(3)]

    updated = task_service.bulk_update_tasks(store, ADMIN_ID, ids, status="complete", assignee_id=MEMBER_ID)

    assert len(updated) == 3
    assert {t["status"] for t in updated} == {"complete"}
    assert {t["assignee_id"] for t in updated} == {MEMBER_ID}


def test_bulk_update_can_unassign(store, make_task):
    task = make_task(assignee_id=MEMBER_ID)
    updated = task_service.bulk_update_tasks(store, ADMIN_ID, [task["id"]], assignee_id=None)
    assert updated[0]["assignee_id"] is None


def test_bulk_update_is_all_or_nothing(store, make_task):
    mine = make_task("Mine", creator_id=MEMBER_ID)
    theirs = make_task("Theirs")

    with pytest.raises(NotAuthorized):
        task_service.bulk_update_tasks(store, MEMBER_ID, [mine["id"], theirs["id"]], status="complete")

    assert store.find_one("task", {"id": mine["id"]})["status"] == "todo"


def test_bulk_update_needs_a_change(store, make_task):
    task = make_task()
    with pytest.raises(ValidationError):
        task_service.bulk_update_tasks(store, ADMIN_ID, [task["id"]])
    with pytest.raises(ValidationError):
        task_service.bulk_update_tasks(store, ADMIN_ID, [], status="complete")


# --- Reads -----------------------------------------------------------------

def test_all_tasks_are_enriched_and_filtered(store, make_task):
    first = make_task("Alpha", assignee_id=MEMBER_ID, created_at=datetime(2024, 1, 1))
    make_task("Beta", created_at=datetime(2024, 1, 2))
    time_entry_service.add_time_entry(store, MEMBER_ID, first["id"], 20, date(2024, 1, 3))
    time_entry_service.add_time_entry(store, MEMBER_ID, first["id"], 25, date(2024, 1, 4))
    comment_service.add_comment(store, ADMIN_ID, first["id"], "looks good")

    tasks = task_service.get_all_tasks(store, ADMIN_ID, TEAM_ID)
    assert [t["title"] for t in tasks] == ["Beta", "Alpha"]

    alpha = tasks[1]
    assert alpha["assignee"]["full_name"] == "Ben Okri"
    assert alpha["creator"]["full_name"] == "Ada Lovelace"
    assert alpha["total_tracked_minutes"] == 45
    assert alpha["comment_count"] == 1
    assert tasks[0]["total_tracked_minutes"] == 0
    assert tasks[0]["assignee"] is None

    only_mine = task_service.get_all_tasks(store, ADMIN_ID, TEAM_ID, TaskFilters(assignee_id=MEMBER_ID))
    assert [t["title"] for t in only_mine] == ["Alpha"]


def test_task_details_include_children_with_authors(store, make_task):
    task = make_task()
    time_entry_service.add_time_entry(store, MEMBER_ID, task["id"], 15, date(2024, 1, 1))
    comment_service.add_comment(store, MEMBER_ID, task["id"], "first")

    details = task_service.get_task_details(store, ADMIN_ID, task["id"])

    assert details["total_tracked_minutes"] == 15
    assert details["comment_count"] == 1
    assert details["time_entries"][0]["user"]["full_name"] == "Ben Okri"
    assert details["comments"][0]["content"] == "first"


def test_team_members_for_assignment(store):
    members = task_service.get_team_members(store, ADMIN_ID, TEAM_ID)
    assert [m["user_id"] for m in members] == [ADMIN_ID, MEMBER_ID]
    assert members[0]["profile"]["full_name"] == "Ada Lovelace"


def test_team_members_fall_back_to_profiles(store):
    members = task_service.get_team_members(store, ADMIN_ID, "team-without-members")
    assert sorted(m["user_id"] for m in members) == sorted([ADMIN_ID, MEMBER_ID, OUTSIDER_ID])


# --- Comments and time -----------------------------------------------------

def test_comment_content_is_trimmed_and_required(store, make_task):
    task = make_task()
    comment = comment_service.add_comment(store, MEMBER_ID, task["id"], "  hi  ")
    assert comment["content"] == "hi"
    assert comment["user"]["user_id"] == MEMBER_ID
    with pytest.raises(ValidationError):
        comment_service.add_comment(store, MEMBER_ID, task["id"], "   ")


def test_comment_on_missing_task(store):
    with pytest.raises(NotFound):
        comment_service.add_comment(store, MEMBER_ID, "missing", "hi")


@pytest.mark.parametrize("minutes", [0, -5, True, 1.5])
def test_time_entry_minutes_must_be_positive_integers(store, make_task, minutes):
    task = make_task()
    with pytest.raises(ValidationError):
        time_entry_service.add_time_entry(store, MEMBER_ID, task["id"], minutes, date(2024, 1, 1))


def test_delete_time_entry_returns_new_total(store, make_task):
    task = make_task()
    keep = time_entry_service.add_time_entry(store, MEMBER_ID, task["id"], 30, date(2024, 1, 1))
    drop = time_entry_service.add_time_entry(store, MEMBER_ID, task["id"], 50, date(2024, 1, 2))

    with pytest.raises(NotAuthorized):
        time_entry_service.delete_time_entry(store, ADMIN_ID, drop["id"])

    result = time_entry_service.delete_time_entry(store, MEMBER_ID, drop["id"])
    assert result == {"task_id": task["id"], "total_tracked_minutes": keep["minutes"]}
