"""Integer id assignment for categories and products.

Two strategies exist, selected with the ``ID_STRATEGY`` setting:

* ``sequence`` keeps the last issued id in the ``id_sequences`` table and
  bumps it inside the caller's transaction (row locked with
  ``SELECT ... FOR UPDATE`` on databases that support it). Ids never go
  backwards, so an id freed by a delete is not handed out again.
* ``max_plus_one`` reads ``max(id) + 1`` from the collection itself. Deleting
  the newest record makes its id available again.

Callers hold :func:`collection_lock` for the collection while they generate
an id and insert the record, which serializes writers within one process.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, Optional, Type

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_admin.config import settings
from catalog_admin.models.base import Base
from catalog_admin.models.category import Category
from catalog_admin.models.id_sequence import IdSequence
from catalog_admin.models.product import Product

logger = structlog.get_logger(__name__)

CATEGORIES = "categories"
PRODUCTS = "products"

_COLLECTIONS: Dict[str, Type[Base]] = {
    CATEGORIES: Category,
    PRODUCTS: Product,
}

_locks: Dict[str, asyncio.Lock] = {}


def collection_lock(collection: str) -> asyncio.Lock:
    """Return the process-wide write lock for a collection."""
    if collection not in _locks:
        _locks[collection] = asyncio.Lock()
    return _locks[collection]


async def _max_id(db: AsyncSession, collection: str) -> int:
    model = _COLLECTIONS[collection]
    result = await db.execute(select(func.max(model.id)))
    return result.scalar() or 0


class IdGenerator(ABC):
    """Hands out the next integer id for a collection."""

    strategy: str = ""

    @abstractmethod
    async def next_id(self, db: AsyncSession, collection: str) -> int:
        """Return the next id for ``collection`` within ``db``'s transaction."""


class SequenceIdGenerator(IdGenerator):
    """Counter row per collection, seeded from the collection's max id."""

    strategy = "sequence"

    async def next_id(self, db: AsyncSession, collection: str) -> int:
        result = await db.execute(
            select(IdSequence).where(IdSequence.name == collection).with_for_update()
        )
        sequence = result.scalar_one_or_none()
        current_max = await _max_id(db, collection)

        if sequence is None:
            sequence = IdSequence(name=collection, value=current_max)
            db.add(sequence)
            logger.info("id_sequence_seeded", collection=collection, value=current_max)

        # Rows inserted with explicit ids (bulk imports) push the counter forward.
        sequence.value = max(sequence.value, current_max) + 1
        await db.flush()
        return sequence.value


class MaxPlusOneIdGenerator(IdGenerator):
    """``max(id) + 1`` over the collection itself."""

    strategy = "max_plus_one"

    async def next_id(self, db: AsyncSession, collection: str) -> int:
        return await _max_id(db, collection) + 1


_GENERATORS: Dict[str, Type[IdGenerator]] = {
    SequenceIdGenerator.strategy: SequenceIdGenerator,
    MaxPlusOneIdGenerator.strategy: MaxPlusOneIdGenerator,
}


def get_id_generator(strategy: Optional[str] = None) -> IdGenerator:
    """Build the generator for ``strategy`` (defaults to ``settings.ID_STRATEGY``).

    Raises:
        ValueError: Unknown strategy name
    """
    name = strategy or settings.ID_STRATEGY
    try:
        return _GENERATORS[name]()
    except KeyError:
        raise ValueError(f"Unknown id strategy: {name}") from None
