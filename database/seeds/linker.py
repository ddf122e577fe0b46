"""
Referential linking between independently inserted collections.

Dependents (bookings) are inserted on their own and their ids are then
appended to the owner's reference array (event.bookings). Two shapes:

- link_batch: every dependent is already inserted and each owner's id list
  is complete; one $push per owner.
- insert_and_link: insert a single dependent and immediately $push its id
  onto the owner. Safe when many dependents target the same owners
  concurrently, because the append happens server-side.

Neither shape reads the owner's array back before writing it.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from database.connection import DocumentStore, ReferencedEntityNotFoundError

logger = logging.getLogger(__name__)


def group_links(
    documents: Iterable[Mapping[str, Any]], owner_key: str
) -> dict[Any, list[Any]]:
    """
    Map each owner id to the ids of its dependents, in document order.

    Args:
        documents: Dependent documents carrying "_id" and owner_key
        owner_key: Field holding the owner id (e.g. "eventId")
    """
    links: dict[Any, list[Any]] = {}
    for document in documents:
        links.setdefault(document[owner_key], []).append(document["_id"])
    return links


async def link_batch(
    store: DocumentStore,
    owner_collection: str,
    field: str,
    links: Mapping[Any, Sequence[Any]],
) -> int:
    """
    Append each owner's accumulated dependent ids in one update per owner.

    Only valid once every dependent of every owner in links is known.

    Returns:
        Number of owners updated

    Raises:
        ReferencedEntityNotFoundError: If an owner id does not exist
    """
    updated = 0
    for owner_id, dependent_ids in links.items():
        if not dependent_ids:
            continue
        await store.push(owner_collection, owner_id, field, dependent_ids)
        updated += 1

    logger.info(
        f"Linked {sum(len(ids) for ids in links.values())} id(s) onto "
        f"{updated} {owner_collection} document(s)",
        extra={"collection": owner_collection, "count": updated},
    )
    return updated


async def insert_and_link(
    store: DocumentStore,
    collection: str,
    document: Mapping[str, Any],
    owner_collection: str,
    owner_id: Any,
    field: str,
) -> Any:
    """
    Insert one dependent and atomically append its id to the owner.

    Returns:
        The inserted document id

    Raises:
        ReferencedEntityNotFoundError: If owner_id does not exist; the
            dependent stays inserted
    """
    dependent_id = await store.insert_one(collection, document)
    await store.push(owner_collection, owner_id, field, [dependent_id])
    return dependent_id


async def fetch_by_ids(
    store: DocumentStore,
    collection: str,
    ids: Iterable[Any],
    projection: Mapping[str, Any] | None = None,
) -> dict[Any, dict[str, Any]]:
    """
    Load referenced documents keyed by _id.

    Raises:
        ReferencedEntityNotFoundError: If any id does not resolve
    """
    wanted = list(dict.fromkeys(ids))
    documents = await store.find(collection, {"_id": {"$in": wanted}}, projection)
    found = {document["_id"]: document for document in documents}

    missing = [i for i in wanted if i not in found]
    if missing:
        raise ReferencedEntityNotFoundError(collection, missing)
    return found
