from datetime import datetime

from pydantic import Field

from constants import MAX_TITLE_LENGTH
from models.notesmodel import NoteType
from schemas.base import CamelSchema


class NoteItemSchema(CamelSchema):
    checked: bool = False
    body: str = Field(min_length=1)
    order: int | None = None


class CreateNoteSchema(CamelSchema):
    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    type: NoteType
    body: str | None = None
    items: list[NoteItemSchema] | None = None
    tags: list[str] | None = None


class UpdateNoteSchema(CamelSchema):
    """Sparse patch: only the fields sent by the client are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=MAX_TITLE_LENGTH)
    type: NoteType | None = None
    body: str | None = None
    items: list[NoteItemSchema] | None = None
    tags: list[str] | None = None


class NotesFilterSchema(CamelSchema):
    type: NoteType | None = None
    tag: str | None = None
    search: str | None = None
    include_deleted: bool = False


class NoteItemViewSchema(CamelSchema):
    checked: bool
    body: str
    order: int


class NoteViewSchema(CamelSchema):
    id: str
    user_id: str
    title: str
    type: NoteType
    body: str | None
    items: list[NoteItemViewSchema]
    tags: list[str]
    created_at: datetime
    modified_at: datetime
    deleted_at: datetime | None


class NoteStatsSchema(CamelSchema):
    total: int
    notes: int
    checklists: int
    deleted: int
