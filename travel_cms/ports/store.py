from typing import Any, Protocol
from uuid import UUID

from travel_cms.domain.entities import Collection, ContentStatus, Entity


class ContentStorePort(Protocol):
    """
    Transactional store over the pages, posts and content_blocks collections.

    Every write is atomic per entity. Slug uniqueness is enforced at write time.
    """

    def insert(self, collection: Collection, entity: Entity) -> Entity:
        """Insert a new entity. Raises ConflictError on a slug collision."""
        ...

    def get_by_id(self, collection: Collection, entity_id: UUID) -> Entity | None:
        ...

    def get_by_slug(self, collection: Collection, slug: str) -> Entity | None:
        ...

    def list(
        self, collection: Collection, filters: dict[str, Any] | None = None
    ) -> list[Entity]:
        """List entities matching all equality filters, most recently updated first."""
        ...

    def replace(
        self,
        collection: Collection,
        entity: Entity,
        expected_status: ContentStatus | None = None,
    ) -> Entity:
        """
        Overwrite a stored entity.

        With expected_status set, the write only happens if the stored entity is
        still in that status (compare-and-swap).

        Raises:
            NotFoundError: entity absent
            StaleWriteError: stored status differs from expected_status
            ConflictError: slug collision
        """
        ...

    def delete(self, collection: Collection, entity_id: UUID) -> bool:
        """Hard delete. Returns False if nothing was deleted."""
        ...
