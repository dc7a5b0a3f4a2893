"""
Owner scoping for suppliers and products.

Existence and ownership are checked by one query predicate, so a caller can
never tell "does not exist" apart from "belongs to someone else".
"""
from sqlalchemy.orm import Session
from typing import Type, TypeVar
from uuid import UUID
import logging

from catalog_manager.errors import NotFoundError

logger = logging.getLogger(__name__)

OwnedModel = TypeVar("OwnedModel")


def resolve_owned(
    db: Session,
    model: Type[OwnedModel],
    entity_id: UUID,
    owner_id: UUID,
    label: str,
) -> OwnedModel:
    """Load ``model`` by id, restricted to rows owned by ``owner_id``.

    Raises NotFoundError("<label> not found") when no such row exists for the
    caller, whether or not another user owns it.
    """
    entity = db.query(model).filter(
        model.id == entity_id,
        model.user_id == owner_id,
    ).first()

    if entity is None:
        logger.warning(f"{label} {entity_id} not found for user {owner_id}")
        raise NotFoundError(f"{label} not found")

    return entity
