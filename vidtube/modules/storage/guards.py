"""Lookups shared by the domain services: existence, ownership, paging."""

from typing import Any, Dict, Optional, Tuple

from bson import ObjectId

from vidtube.errors import BadRequestError, ForbiddenError, NotFoundError

from .store import Document, DocumentStore

MAX_PAGE_SIZE = 100


async def require_document(
    store: DocumentStore,
    collection: str,
    document_id: ObjectId,
    label: str,
    projection: Optional[Dict[str, Any]] = None,
) -> Document:
    """
    Load a document or fail.

    Raises:
        NotFoundError: If no document has that id
    """
    document = await store.find_by_id(collection, document_id, projection)
    if not document:
        raise NotFoundError(f"{label} not found")
    return document


async def require_owned(
    store: DocumentStore, collection: str, document_id: ObjectId, actor_id: ObjectId, label: str
) -> Document:
    """
    Load a document the actor owns.

    Raises:
        NotFoundError: If no document has that id
        ForbiddenError: If the document belongs to someone else
    """
    document = await require_document(store, collection, document_id, label)
    if document.get("owner") != actor_id:
        raise ForbiddenError(f"You are not the owner of this {label.lower()}")
    return document


def page_window(page: Any, limit: Any, default_limit: int = 10) -> Tuple[int, int]:
    """
    Validate 1-based pagination parameters.

    Raises:
        BadRequestError: If page or limit is not a positive integer
    """
    try:
        page_number = int(page) if page is not None else 1
        page_size = int(limit) if limit is not None else default_limit
    except (TypeError, ValueError):
        raise BadRequestError("Invalid pagination parameters")

    if page_number < 1:
        raise BadRequestError("Invalid page number")
    if page_size < 1:
        raise BadRequestError("Invalid page size")
    return page_number, min(page_size, MAX_PAGE_SIZE)
