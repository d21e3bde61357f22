"""
Batched read path that turns raw task records into enriched ones.

Child records are fetched once per collection, keyed by the set of parent
ids, and rolled up in memory. A failing sub-query leaves its field as None
instead of failing the whole read.
"""
import logging
from typing import Dict, Iterable, List, Optional

from tasktracker.database.store import EntityStore
from tasktracker.errors import StoreFailure
from tasktracker.services import rollups

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("user_id", "full_name", "avatar_url")


def profile_summary(profile: Optional[dict]) -> Optional[dict]:
    if not profile:
        return None
    return {key: profile.get(key) for key in PROFILE_FIELDS}


def fetch_profiles(store: EntityStore, user_ids: Iterable[str]) -> Optional[Dict[str, dict]]:
    """
    Profile summaries keyed by user id, or None if the lookup failed.
    """
    ids = sorted({uid for uid in user_ids if uid})
    if not ids:
        return {}
    try:
        profiles = store.find("profile", {"user_id__in": ids})
    except StoreFailure as exc:
        logger.warning("Profile lookup failed for %d users: %s", len(ids), exc.detail)
        return None
    return {p["user_id"]: profile_summary(p) for p in profiles}


def _fetch_children(store: EntityStore, kind: str, task_ids: List[str]) -> Optional[Dict[str, List[dict]]]:
    if not task_ids:
        return {}
    try:
        children = store.find(kind, {"task_id__in": task_ids})
    except StoreFailure as exc:
        logger.warning("Could not load %s rollups for %d tasks: %s", kind, len(task_ids), exc.detail)
        return None
    return rollups.group_by(children, "task_id")


def enrich_tasks(store: EntityStore, tasks: List[dict], with_comments: bool = True) -> List[dict]:
    """
    Adds assignee/creator profiles, total tracked minutes and comment count
    to each task. Input order is preserved and input dicts are not modified.
    """
    task_ids = [t["id"] for t in tasks]
    profiles = fetch_profiles(
        store,
        [t.get("assignee_id") for t in tasks] + [t.get("creator_id") for t in tasks],
    )
    entries = _fetch_children(store, "time_entry", task_ids)
    comments = _fetch_children(store, "comment", task_ids) if with_comments else None

    enriched = []
    for task in tasks:
        item = dict(task)
        item["assignee"] = profiles.get(task.get("assignee_id")) if profiles is not None else None
        item["creator"] = profiles.get(task.get("creator_id")) if profiles is not None else None
        item["total_tracked_minutes"] = (
            rollups.task_tracked_minutes(entries.get(task["id"], [])) if entries is not None else None
        )
        if with_comments:
            item["comment_count"] = (
                rollups.task_comment_count(comments.get(task["id"], [])) if comments is not None else None
            )
        enriched.append(item)
    return enriched


def get_tasks_by_ids(store: EntityStore, task_ids: Iterable[str]) -> List[dict]:
    """
    Re-fetches tasks through the enrichment path, in the order given.
    """
    wanted = list(dict.fromkeys(task_ids))
    if not wanted:
        return []
    by_id = {t["id"]: t for t in store.find("task", {"id__in": wanted})}
    return enrich_tasks(store, [by_id[i] for i in wanted if i in by_id])


def attach_authors(store: EntityStore, records: List[dict]) -> List[dict]:
    """
    Adds a ``user`` profile to comments or time entries; None when the author
    is gone or the lookup failed.
    """
    profiles = fetch_profiles(store, [r.get("user_id") for r in records]) or {}
    return [{**r, "user": profiles.get(r.get("user_id"))} for r in records]
