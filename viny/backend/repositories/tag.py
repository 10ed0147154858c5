"""
Tag Repository.

Data access layer for tags and the note/tag join table.
"""

from sqlalchemy import delete, func, insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from viny.backend.models.tag import DEFAULT_TAG_COLOR, Tag, note_tags
from viny.backend.repositories.base import OwnedRepository


class TagRepository(OwnedRepository[Tag]):
    """
    Repository for Tag model.

    Tag creation during note writes goes through an insert-or-ignore on the
    (user_id, name) unique constraint rather than check-then-create, so two
    requests racing to create the same name both end up linking one row.
    """

    model = Tag

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        super().__init__(session, user_id)

    async def list_with_counts(self) -> list[tuple[Tag, int]]:
        """
        List the owner's tags alphabetically with their linked note count.

        Returns:
            List of (tag, note_count) pairs
        """
        note_count = (
            select(func.count(note_tags.c.note_id))
            .where(note_tags.c.tag_id == Tag.id)
            .correlate(Tag)
            .scalar_subquery()
        )
        result = await self.session.execute(
            select(Tag, note_count.label("note_count"))
            .where(Tag.user_id == self.user_id)
            .order_by(Tag.name.asc())
        )
        return [(tag, count) for tag, count in result.all()]

    async def count_notes(self, tag_id: int) -> int:
        """Count notes linked to a tag."""
        result = await self.session.execute(
            select(func.count()).select_from(note_tags).where(note_tags.c.tag_id == tag_id)
        )
        return result.scalar_one()

    async def get_by_name(self, name: str) -> Tag | None:
        """Case-sensitive lookup of one of the owner's tags."""
        result = await self.session.execute(
            self._select().where(Tag.name == name)
        )
        return result.scalar_one_or_none()

    async def get_by_names(self, names: list[str]) -> list[Tag]:
        """Case-sensitive lookup of several of the owner's tags."""
        if not names:
            return []
        result = await self.session.execute(
            self._select().where(Tag.name.in_(names))
        )
        return list(result.scalars().all())

    async def ensure_names(self, names: list[str]) -> list[Tag]:
        """
        Resolve tag names to rows, creating the missing ones.

        Args:
            names: Already-deduplicated tag names

        Returns:
            Tags in the order the names were given
        """
        if not names:
            return []

        rows = [
            {"name": name, "color": DEFAULT_TAG_COLOR, "user_id": self.user_id}
            for name in names
        ]
        stmt = self._insert_ignore().values(rows)
        await self.session.execute(stmt)

        by_name = {tag.name: tag for tag in await self.get_by_names(names)}
        return [by_name[name] for name in names if name in by_name]

    def _insert_ignore(self):
        """INSERT ... ON CONFLICT (user_id, name) DO NOTHING for the bound dialect."""
        dialect = self.session.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert(Tag).on_conflict_do_nothing(
                index_elements=["user_id", "name"],
            )
        if dialect == "postgresql":
            return postgresql.insert(Tag).on_conflict_do_nothing(
                index_elements=["user_id", "name"],
            )
        raise NotImplementedError(f"Tag upsert not supported on {dialect}")

    async def link(self, note_id: int, tag_ids: list[int]) -> None:
        """Link a note to the given tags."""
        if not tag_ids:
            return
        await self.session.execute(
            insert(note_tags),
            [{"note_id": note_id, "tag_id": tag_id} for tag_id in tag_ids],
        )

    async def unlink_note(self, note_id: int) -> None:
        """Remove every tag link of a note."""
        await self.session.execute(
            delete(note_tags).where(note_tags.c.note_id == note_id)
        )

    async def unlink_tag(self, tag_id: int) -> None:
        """Remove every note link of a tag."""
        await self.session.execute(
            delete(note_tags).where(note_tags.c.tag_id == tag_id)
        )

    async def delete(self, id: int) -> None:
        """Delete a tag and its join rows."""
        await self.get_by_id(id)
        await self.unlink_tag(id)
        await super().delete(id)

    async def delete_all(self) -> int:
        """Delete all of the owner's tags and their links. Returns the tag count."""
        owned = select(Tag.id).where(Tag.user_id == self.user_id)
        await self.session.execute(
            delete(note_tags).where(note_tags.c.tag_id.in_(owned))
        )
        result = await self.session.execute(
            delete(Tag).where(Tag.user_id == self.user_id)
        )
        return result.rowcount

