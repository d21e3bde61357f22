from datetime import date, datetime

import pytest

from tasktracker.errors import NotFound, ValidationError
from tasktracker.schemas.project_schema import ProjectCreate, ProjectUpdate
from tasktracker.services import project_service, time_entry_service

from conftest import ADMIN_ID, MEMBER_ID, TEAM_ID


@pytest.fixture()
def project(store):
    return project_service.create_project(
        store, ADMIN_ID, TEAM_ID,
        ProjectCreate(name="Website", start_date=date(2024, 3, 1), end_date=date(2024, 3, 31)),
    )


def test_create_project_defaults_to_planning(project):
    assert project["name"] == "Website"
    assert project["status"] == "planning"
    assert project["team_id"] == TEAM_ID


def test_create_project_rejects_inverted_dates(store):
    with pytest.raises(ValidationError):
        project_service.create_project(
            store, ADMIN_ID, TEAM_ID,
            ProjectCreate(name="Backwards", start_date=date(2024, 3, 2), end_date=date(2024, 3, 1)),
        )


def test_update_project_checks_dates_against_stored_values(store, project):
    with pytest.raises(ValidationError):
        project_service.update_project(store, ADMIN_ID, TEAM_ID, project["id"],
                                       ProjectUpdate(end_date=date(2024, 2, 1)))

    updated = project_service.update_project(store, ADMIN_ID, TEAM_ID, project["id"],
                                             ProjectUpdate(status="active", description="Relaunch"))
    assert updated["status"] == "active"
    assert updated["description"] == "Relaunch"
    assert updated["name"] == "Website"


def test_project_stats(store, make_task, project):
    done = make_task("Done", project_id=project["id"], status="complete")
    make_task("Open", project_id=project["id"])
    make_task("Also open", project_id=project["id"])
    make_task("Elsewhere", status="complete")
    time_entry_service.add_time_entry(store, MEMBER_ID, done["id"], 90, date(2024, 3, 5))

    stats = project_service.get_project(store, ADMIN_ID, TEAM_ID, project["id"], hourly_rate=40)

    assert stats["task_count"] == 3
    assert stats["completed_task_count"] == 1
    assert stats["progress_percentage"] == 33
    assert stats["total_tracked_minutes"] == 90
    assert stats["total_cost"] == 60.0


def test_all_projects_newest_first_with_stats(store, project):
    older = project_service.create_project(store, ADMIN_ID, TEAM_ID, ProjectCreate(name="Legacy"))
    store.update("project", older["id"], {"created_at": datetime(2020, 1, 1)})

    projects = project_service.get_all_projects(store, ADMIN_ID, TEAM_ID)

    assert [p["name"] for p in projects] == ["Website", "Legacy"]
    assert projects[1]["progress_percentage"] == 0
    assert projects[1]["total_cost"] == 0


def test_with_stats_groups_in_memory():
    projects = [{"id": "p1"}, {"id": "p2"}]
    tasks = [{"id": "t1", "project_id": "p1", "status": "complete"}, {"id": "t2", "project_id": "p1", "status": "todo"}]
    entries = [{"task_id": "t1", "minutes": 30}, {"task_id": "t2", "minutes": 30}]

    result = project_service.with_stats(projects, tasks, entries, hourly_rate=50)

    assert result[0]["progress_percentage"] == 50
    assert result[0]["total_cost"] == 50.0
    assert result[1]["task_count"] == 0


def test_deleting_project_keeps_its_tasks(store, make_task, project):
    task = make_task("Survivor", project_id=project["id"])

    project_service.delete_project(store, ADMIN_ID, TEAM_ID, project["id"])

    survivor = store.find_one("task", {"id": task["id"]})
    assert survivor is not None
    assert survivor["project_id"] is None


def test_project_of_another_team_is_not_found(store, project):
    with pytest.raises(NotFound):
        project_service.get_project(store, ADMIN_ID, "other-team", project["id"])


def test_timesheet(store, make_task, project):
    task = make_task("Design", project_id=project["id"])
    make_task("Idle", project_id=project["id"])
    time_entry_service.add_time_entry(store, MEMBER_ID, task["id"], 30, date(2024, 3, 4))
    time_entry_service.add_time_entry(store, ADMIN_ID, task["id"], 45, date(2024, 3, 4))
    time_entry_service.add_time_entry(store, MEMBER_ID, task["id"], 60, date(2024, 3, 12))

    sheet = project_service.get_project_timesheet(
        store, ADMIN_ID, TEAM_ID, project["id"], date(2024, 3, 4), date(2024, 3, 10)
    )

    rows = {row["task_title"]: row for row in sheet["tasks"]}
    assert rows["Design"]["daily_time"] == {"2024-03-04": 75}
    assert rows["Idle"]["total_minutes"] == 0
    assert sheet["total_minutes"] == 75


def test_timesheet_rejects_inverted_range(store, project):
    with pytest.raises(ValidationError):
        project_service.get_project_timesheet(
            store, ADMIN_ID, TEAM_ID, project["id"], date(2024, 3, 10), date(2024, 3, 4)
        )
