"""
Mutation coordination for a caller's local view of records.

Two shapes:

* bulk updates: one change applied to many tasks through the store, after
  which the caller's copies of those tasks are re-fetched;
* optimistic single-record mutations: a pending record is shown at once and
  later replaced by the stored record, or removed if the write fails.

Each optimistic attempt is a small state machine
(PENDING -> CONFIRMED | ROLLED_BACK) driven by the outcome of the write.
By the time a method returns, the attempt is terminal and the pending
record is gone from the view.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional

from tasktracker.constants import ErrorMessages, TEMP_ID_PREFIX
from tasktracker.database.store import EntityStore
from tasktracker.errors import StoreFailure, TrackerError, ValidationError
from tasktracker.services import comment_service, enrichment, task_service, time_entry_service
from tasktracker.utils.dates import utcnow

logger = logging.getLogger(__name__)


class MutationState(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    ROLLED_BACK = "rolled_back"


@dataclass
class OptimisticMutation:
    temp_id: str
    proposed: Dict[str, Any]
    state: MutationState = MutationState.PENDING
    record: Optional[Dict[str, Any]] = None
    error: Optional[TrackerError] = None

    @property
    def ok(self) -> bool:
        return self.state is MutationState.CONFIRMED


@dataclass
class CommentDraft:
    """
    The comment form's input. Cleared on submit, restored if the write fails.
    """
    content: str = ""
    attachments: List[dict] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.content.strip() and not self.attachments


class LocalView:
    """
    One caller's ordered copy of a record collection, keyed by ``id``.
    """

    def __init__(self, records: Optional[List[dict]] = None):
        self.records: List[dict] = list(records or [])

    def __iter__(self) -> Iterator[dict]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def ids(self) -> List[Any]:
        return [r.get("id") for r in self.records]

    def index_of(self, record_id) -> Optional[int]:
        for index, record in enumerate(self.records):
            if record.get("id") == record_id:
                return index
        return None

    def get(self, record_id) -> Optional[dict]:
        index = self.index_of(record_id)
        return None if index is None else self.records[index]

    def append(self, record: dict):
        self.records.append(record)

    def replace(self, record_id, record: dict) -> bool:
        index = self.index_of(record_id)
        if index is None:
            return False
        self.records[index] = record
        return True

    def remove(self, record_id) -> bool:
        index = self.index_of(record_id)
        if index is None:
            return False
        del self.records[index]
        return True


Listener = Callable[[MutationState, OptimisticMutation], None]


def _write_failure(exc: Exception) -> TrackerError:
    """
    The error a failed write is reported as. Anything that is not already a
    TrackerError (a store timeout, say) becomes a StoreFailure.
    """
    if isinstance(exc, TrackerError):
        return exc
    logger.error("Write failed with %s: %s", type(exc).__name__, exc, exc_info=exc)
    failure = StoreFailure()
    failure.__cause__ = exc
    return failure


def _temp_id() -> str:
    return f"{TEMP_ID_PREFIX}{uuid.uuid4().hex}"


class MutationCoordinator:
    """
    Runs writes against an entity store on behalf of one actor's view.

    Args:
        store: the entity store gateway
        clock: returns the timestamp stamped on pending records
        id_factory: returns temporary ids for pending records
    """

    def __init__(self, store: EntityStore, clock: Callable = utcnow, id_factory: Callable[[], str] = _temp_id):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def _notify(self, state: MutationState, mutation: OptimisticMutation):
        for listener in self._listeners:
            listener(state, mutation)

    # -------------------------
    # Optimistic single-record mutations
    # -------------------------
    def apply_optimistic(self, view: LocalView, proposed: dict,
                         write: Callable[[], dict]) -> OptimisticMutation:
        """
        Shows ``proposed`` in ``view`` as a pending record, runs ``write`` and
        reconciles.

        On success the pending record is swapped, at the same position, for
        the stored one. If the stored record is already in the view (say a
        refresh landed first) the pending copy is simply dropped, so one
        attempt never yields two records. On failure the pending record is
        removed and the error kept on the returned mutation.
        """
        temp_id = self.id_factory()
        pending = {**proposed, "id": temp_id, "created_at": self.clock()}
        mutation = OptimisticMutation(temp_id=temp_id, proposed=pending)

        view.append(pending)
        self._notify(MutationState.PENDING, mutation)

        try:
            record = write()
        except Exception as exc:
            view.remove(temp_id)
            mutation.state = MutationState.ROLLED_BACK
            mutation.error = _write_failure(exc)
            logger.warning("Rolled back pending record %s: %s", temp_id, mutation.error.detail)
            self._notify(MutationState.ROLLED_BACK, mutation)
            return mutation

        if view.index_of(record.get("id")) is not None:
            view.remove(temp_id)
        elif not view.replace(temp_id, record):
            view.append(record)
        mutation.state = MutationState.CONFIRMED
        mutation.record = record
        self._notify(MutationState.CONFIRMED, mutation)
        return mutation

    def submit_comment(self, view: LocalView, draft: CommentDraft, actor_id: str,
                       task_id: str, author: Optional[dict] = None) -> OptimisticMutation:
        """
        Posts the draft as a comment on ``task_id``.

        The draft is cleared while the write is in flight and restored, with
        the error message, if it fails so the user can retry.

        Raises:
            ValidationError: the draft has neither text nor attachments
        """
        draft.error = None
        if draft.is_empty:
            draft.error = ErrorMessages.EMPTY_COMMENT
            raise ValidationError(ErrorMessages.EMPTY_COMMENT)

        content, attachments = draft.content, list(draft.attachments)
        draft.content, draft.attachments = "", []

        proposed = {
            "task_id": task_id,
            "user_id": actor_id,
            "content": content,
            "attachments": attachments or None,
            "user": author,
        }
        mutation = self.apply_optimistic(
            view,
            proposed,
            lambda: comment_service.add_comment(self.store, actor_id, task_id, content, attachments),
        )
        if not mutation.ok:
            draft.content, draft.attachments = content, attachments
            draft.error = mutation.error.detail
        return mutation

    def add_time_entry(self, view: LocalView, actor_id: str, task_id: str, minutes: int,
                       entry_date: date) -> OptimisticMutation:
        proposed = {
            "task_id": task_id,
            "user_id": actor_id,
            "minutes": minutes,
            "entry_date": entry_date,
        }
        return self.apply_optimistic(
            view,
            proposed,
            lambda: time_entry_service.add_time_entry(self.store, actor_id, task_id, minutes, entry_date),
        )

    def change_status(self, task: dict, actor_id: str, new_status) -> OptimisticMutation:
        """
        Sets ``task["status"]`` immediately and writes it. On failure the
        status captured before the change is put back.
        """
        new_status = getattr(new_status, "value", new_status)
        previous = task.get("status")
        mutation = OptimisticMutation(temp_id=task["id"], proposed={"status": new_status})

        task["status"] = new_status
        self._notify(MutationState.PENDING, mutation)
        try:
            record = task_service.update_task_status(self.store, actor_id, task["id"], new_status)
        except Exception as exc:
            task["status"] = previous
            mutation.state = MutationState.ROLLED_BACK
            mutation.error = _write_failure(exc)
            logger.warning("Status change on task %s rolled back to %s: %s",
                           task["id"], previous, mutation.error.detail)
            self._notify(MutationState.ROLLED_BACK, mutation)
            return mutation

        task.update(record)
        mutation.state = MutationState.CONFIRMED
        mutation.record = record
        self._notify(MutationState.CONFIRMED, mutation)
        return mutation

    # -------------------------
    # Bulk mutations
    # -------------------------
    def bulk_update(self, view: LocalView, actor_id: str, task_ids: List[str],
                    status=None, assignee_id=task_service.UNSET) -> List[dict]:
        """
        Applies one change to every named task. Errors propagate and leave
        the view untouched. On success the affected tasks in ``view`` are
        replaced with freshly enriched copies, which are also returned.
        """
        task_service.bulk_update_tasks(self.store, actor_id, task_ids, status=status, assignee_id=assignee_id)

        refreshed = enrichment.get_tasks_by_ids(self.store, task_ids)
        for task in refreshed:
            view.replace(task["id"], task)
        return refreshed
