from typing import List, Optional

from tasktracker.constants import ErrorMessages
from tasktracker.database.store import EntityStore
from tasktracker.errors import ValidationError
from tasktracker.services import enrichment
from tasktracker.services.task_service import get_task_or_404, require_actor


def _attachment_dict(attachment) -> dict:
    if hasattr(attachment, "model_dump"):
        return attachment.model_dump()
    return dict(attachment)


def add_comment(store: EntityStore, actor_id: str, task_id: str, content: str,
                attachments: Optional[List] = None) -> dict:
    """
    Adds a comment authored by the actor and returns it with the author's
    profile under ``user``.

    Raises:
        ValidationError: no text and no attachments
        NotFound: task does not exist
    """
    require_actor(actor_id)
    text = (content or "").strip()
    files = [_attachment_dict(a) for a in attachments or []]
    if not text and not files:
        raise ValidationError(ErrorMessages.EMPTY_COMMENT)

    get_task_or_404(store, task_id)
    comment = store.insert("comment", {
        "task_id": task_id,
        "user_id": actor_id,
        "content": text or None,
        "attachments": files or None,
    })
    return enrichment.attach_authors(store, [comment])[0]


def get_comments(store: EntityStore, actor_id: str, task_id: str) -> List[dict]:
    """
    Comments on a task, oldest first, each with its author's profile.
    """
    require_actor(actor_id)
    comments = store.find("comment", {"task_id": task_id}, order_by=["created_at"])
    return enrichment.attach_authors(store, comments)
