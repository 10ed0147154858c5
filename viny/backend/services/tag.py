"""
Tag Service.

Business logic for owner-scoped tags.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from viny.backend.core.exceptions import ConflictError, ValidationError
from viny.backend.core.utils import dedupe_names, is_hex_color
from viny.backend.models.tag import Tag
from viny.backend.repositories.tag import TagRepository
from viny.backend.schemas.tag import TagCreate, TagUpdate
from viny.backend.services.base import BaseService


class TagService(BaseService):
    """Service for tag business logic."""

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        super().__init__(session)
        self.user_id = user_id
        self.repo = TagRepository(session, user_id)

    async def list_tags(self) -> list[tuple[Tag, int]]:
        """List the owner's tags alphabetically with note counts."""
        return await self.repo.list_with_counts()

    async def get_tag(self, tag_id: int) -> tuple[Tag, int]:
        """
        Get a tag and its note count.

        Raises:
            NotFoundError: If the tag does not exist for this owner
        """
        tag = await self.repo.get_by_id(tag_id)
        return tag, await self.repo.count_notes(tag.id)

    async def create_tag(self, data: TagCreate) -> Tag:
        """
        Create a tag.

        Raises:
            ConflictError: If the owner already has a tag with this name
            ValidationError: If the color is not #RRGGBB
        """
        self._check_color(data.color)
        if await self.repo.get_by_name(data.name) is not None:
            raise ConflictError("Tag already exists")

        self._log_operation("Creating tag", user_id=self.user_id, name=data.name)
        return await self._execute_db_operation(
            "create_tag",
            self.repo.create(name=data.name, color=data.color),
        )

    async def update_tag(self, tag_id: int, data: TagUpdate) -> tuple[Tag, int]:
        """
        Update a tag's name and/or color.

        Raises:
            NotFoundError: If the tag does not exist for this owner
            ConflictError: If another tag of the owner already has the new name
        """
        tag = await self.repo.get_by_id(tag_id)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }

        if "color" in changes:
            self._check_color(changes["color"])
        if "name" in changes and changes["name"] != tag.name:
            existing = await self.repo.get_by_name(changes["name"])
            if existing is not None and existing.id != tag.id:
                raise ConflictError("Tag already exists")

        if changes:
            self._log_operation(
                "Updating tag",
                tag_id=tag_id,
                fields=list(changes.keys()),
            )
            tag = await self._execute_db_operation(
                "update_tag",
                self.repo.update(tag_id, **changes),
            )

        return tag, await self.repo.count_notes(tag.id)

    async def delete_tag(self, tag_id: int) -> None:
        """
        Delete a tag. Notes keep existing; only their links to it go.

        Raises:
            NotFoundError: If the tag does not exist for this owner
        """
        self._log_operation("Deleting tag", tag_id=tag_id)
        await self.repo.delete(tag_id)

    async def resolve_tags(self, names: list[str]) -> list[Tag]:
        """
        Resolve tag names to rows, creating missing ones.

        Blank names are ignored and duplicates collapse to their first
        occurrence. Matching is case-sensitive.
        """
        cleaned = dedupe_names(names)
        if not cleaned:
            return []
        self._log_debug("Resolving tags", names=cleaned)
        return await self._execute_db_operation(
            "resolve_tags",
            self.repo.ensure_names(cleaned),
        )

    async def set_note_tags(self, note_id: int, names: list[str]) -> list[Tag]:
        """Replace a note's tag links with exactly the given names."""
        tags = await self.resolve_tags(names)
        await self.repo.unlink_note(note_id)
        await self.repo.link(note_id, [tag.id for tag in tags])
        return tags

    @staticmethod
    def _check_color(color: str) -> None:
        if not is_hex_color(color):
            raise ValidationError(
                "Color must be a hex value like #268bd2",
                details={"color": color},
            )
