from fastapi import APIRouter, Depends
from fastapi.responses import Response

from tasktracker.auth.dependencies import get_current_user, get_store
from tasktracker.config.settings import settings
from tasktracker.database.store import SqlEntityStore
from tasktracker.endpoints.v1.tasks_api import task_filters
from tasktracker.schemas import TaskFilters
from tasktracker.services import task_service
from tasktracker.services.report_export import render_csv
from tasktracker.utils.dates import utcnow

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/tasks.csv")
def export_tasks_csv(
    team_id: str = settings.DEFAULT_TEAM_ID,
    filters: TaskFilters = Depends(task_filters),
    store: SqlEntityStore = Depends(get_store),
    actor_id: str = Depends(get_current_user)
):
    """
    Exports the filtered, sorted task list as CSV.
    """
    tasks = task_service.get_all_tasks(store, actor_id, team_id, filters)
    filename = f"tasks-{utcnow().date().isoformat()}.csv"
    return Response(
        content=render_csv(tasks),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
