"""
Notebook Service.

Notes reference their notebook by name, so renaming a notebook rewrites
the notes filed under the old name and deleting one moves its notes to
the default notebook.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from viny.backend.core.exceptions import ConflictError
from viny.backend.models.note import DEFAULT_NOTEBOOK
from viny.backend.models.notebook import Notebook
from viny.backend.repositories.note import NoteRepository
from viny.backend.repositories.notebook import NotebookRepository
from viny.backend.schemas.notebook import NotebookCreate, NotebookUpdate
from viny.backend.services.base import BaseService


class NotebookService(BaseService):
    """Service for notebook business logic."""

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        super().__init__(session)
        self.user_id = user_id
        self.repo = NotebookRepository(session, user_id)
        self.notes = NoteRepository(session, user_id)

    async def list_notebooks(self) -> list[tuple[Notebook, int]]:
        """List notebooks alphabetically with their live note counts."""
        return await self.repo.list_with_counts()

    async def get_notebook(self, notebook_id: int) -> tuple[Notebook, int]:
        """
        Get a notebook and the number of active notes filed under it.

        Raises:
            NotFoundError: If the notebook does not exist for this owner
        """
        notebook = await self.repo.get_by_id(notebook_id)
        count = await self.notes.count_in_notebook(notebook.name, include_trashed=False)
        return notebook, count

    async def create_notebook(self, data: NotebookCreate) -> Notebook:
        """
        Create a notebook.

        Raises:
            ConflictError: If the owner already has a notebook with this name
        """
        if await self.repo.exists_by_name(data.name):
            raise ConflictError("Notebook already exists")

        self._log_operation("Creating notebook", user_id=self.user_id, name=data.name)
        return await self._execute_db_operation(
            "create_notebook",
            self.repo.create(
                name=data.name,
                color=data.color,
                description=data.description,
            ),
        )

    async def update_notebook(
        self,
        notebook_id: int,
        data: NotebookUpdate,
    ) -> tuple[Notebook, int]:
        """
        Update a notebook, cascading a rename to its notes.

        The notes are rewritten before the notebook row so that both land
        in the same transaction or neither does.

        Raises:
            NotFoundError: If the notebook does not exist for this owner
            ConflictError: If another notebook already has the new name
        """
        notebook = await self.repo.get_by_id(notebook_id)
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key == "description"
        }

        new_name = changes.get("name")
        if new_name is not None and new_name != notebook.name:
            if await self.repo.exists_by_name(new_name, exclude_id=notebook.id):
                raise ConflictError("Notebook already exists")

            moved = await self._execute_db_operation(
                "rename_notebook_notes",
                self.notes.move_notebook(notebook.name, new_name),
            )
            self._log_operation(
                "Renamed notebook",
                notebook_id=notebook_id,
                old_name=notebook.name,
                new_name=new_name,
                notes_moved=moved,
            )

        if changes:
            notebook = await self._execute_db_operation(
                "update_notebook",
                self.repo.update(notebook_id, **changes),
            )

        count = await self.notes.count_in_notebook(notebook.name, include_trashed=False)
        return notebook, count

    async def delete_notebook(self, notebook_id: int) -> int:
        """
        Delete a notebook, moving its notes to the default notebook.

        Returns:
            Number of notes reassigned

        Raises:
            NotFoundError: If the notebook does not exist for this owner
        """
        notebook = await self.repo.get_by_id(notebook_id)

        reassigned = 0
        if await self.notes.count_in_notebook(notebook.name) > 0:
            reassigned = await self._execute_db_operation(
                "reassign_notebook_notes",
                self.notes.move_notebook(notebook.name, DEFAULT_NOTEBOOK),
            )

        await self._execute_db_operation(
            "delete_notebook",
            self.repo.delete(notebook_id),
        )
        self._log_operation(
            "Deleted notebook",
            notebook_id=notebook_id,
            name=notebook.name,
            reassigned=reassigned,
        )
        return reassigned
