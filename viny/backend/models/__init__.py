# Import every model so Base.metadata knows all tables
from viny.backend.models.base import Base
from viny.backend.models.note import DEFAULT_NOTEBOOK, Note, NoteStatus
from viny.backend.models.notebook import DEFAULT_NOTEBOOK_COLOR, Notebook
from viny.backend.models.tag import DEFAULT_TAG_COLOR, Tag, note_tags
from viny.backend.models.user import User

__all__ = [
    "Base",
    "DEFAULT_NOTEBOOK",
    "DEFAULT_NOTEBOOK_COLOR",
    "DEFAULT_TAG_COLOR",
    "Note",
    "NoteStatus",
    "Notebook",
    "Tag",
    "User",
    "note_tags",
]
