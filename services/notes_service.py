import logging
from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import Depends
from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from database import sessionDep
from errors import ForbiddenError, NotFoundError, ValidationError
from models.notesmodel import NoteItemModel, NoteType, NotesModel
from schemas.notesschema import (
    CreateNoteSchema,
    NoteStatsSchema,
    NoteViewSchema,
    NotesFilterSchema,
    UpdateNoteSchema,
)
from services import notes_logic

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NoteStore:
    """Notes and checklist items of one request, scoped by the requester id."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, createNote: CreateNoteSchema, user_id: str) -> NoteViewSchema:
        items = [item.model_dump() for item in createNote.items or []]
        notes_logic.ensure_valid(
            notes_logic.validate_create(createNote.type, createNote.body, items)
        )

        new_note = NotesModel(
            user_id=user_id,
            title=createNote.title,
            type=createNote.type,
            body=createNote.body if createNote.type == NoteType.NOTE else None,
            tags=list(createNote.tags or []),
        )

        try:
            self.session.add(new_note)
            await self.session.flush()

            if createNote.type == NoteType.CHECKLIST:
                await self._insert_items(new_note.id, notes_logic.build_items(items))

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Note %s (%s) created by user %s", new_note.id, new_note.type.value, user_id)
        return notes_logic.to_view(await self._fetch(new_note.id))

    async def find_one(self, note_id: str, user_id: str) -> NoteViewSchema:
        note = await self._load_owned(note_id, user_id)
        return notes_logic.to_view(note)

    async def find_all(
        self, user_id: str, filters: NotesFilterSchema | None = None
    ) -> list[NoteViewSchema]:
        filters = filters or NotesFilterSchema()

        query = (
            select(NotesModel)
            .where(NotesModel.user_id == user_id)
            .options(selectinload(NotesModel.items))
            .order_by(NotesModel.modified_at.desc())
        )

        if not filters.include_deleted:
            query = query.where(NotesModel.deleted_at.is_(None))

        if filters.type is not None:
            query = query.where(NotesModel.type == filters.type)

        if filters.search:
            # literal substring: % and _ in the input are not wildcards
            query = query.where(
                or_(
                    NotesModel.title.icontains(filters.search, autoescape=True),
                    NotesModel.body.icontains(filters.search, autoescape=True),
                )
            )

        result = await self.session.execute(query)
        notes = result.scalars().all()

        # tags live in a JSON column, so containment is checked here
        if filters.tag:
            notes = [note for note in notes if notes_logic.matches_tag(note.tags, filters.tag)]

        return [notes_logic.to_view(note) for note in notes]

    async def update(
        self, note_id: str, updateNote: UpdateNoteSchema, user_id: str
    ) -> NoteViewSchema:
        note = await self._load_owned(note_id, user_id)

        changes = updateNote.model_dump(exclude_unset=True, exclude_none=True)
        notes_logic.ensure_valid(notes_logic.validate_patch(note.type, changes))

        values = notes_logic.apply_patch(notes_logic.snapshot(note), changes, utcnow())
        new_items = notes_logic.item_replacement(note.type, changes)

        try:
            await self.session.execute(
                update(NotesModel).where(NotesModel.id == note_id).values(**values)
            )

            if new_items is not None:
                # delete-then-insert commits or rolls back as one unit
                await self.session.execute(
                    delete(NoteItemModel).where(NoteItemModel.note_id == note_id)
                )
                await self._insert_items(note_id, new_items)

            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Note %s updated by user %s (fields: %s)",
            note_id,
            user_id,
            ", ".join(sorted(changes)) or "none",
        )
        return notes_logic.to_view(await self._fetch(note_id))

    async def remove(self, note_id: str, user_id: str) -> None:
        await self._load_owned(note_id, user_id)

        await self._set_deleted_at(note_id, utcnow())
        logger.info("Note %s soft-deleted by user %s", note_id, user_id)

    async def hard_delete(self, note_id: str, user_id: str) -> None:
        await self._load_owned(note_id, user_id)

        try:
            await self.session.execute(
                delete(NoteItemModel).where(NoteItemModel.note_id == note_id)
            )
            await self.session.execute(delete(NotesModel).where(NotesModel.id == note_id))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Note %s permanently deleted by user %s", note_id, user_id)

    async def restore(self, note_id: str, user_id: str) -> NoteViewSchema:
        note = await self._load_owned(note_id, user_id)

        if note.deleted_at is None:
            raise ValidationError("Note is not deleted")

        await self._set_deleted_at(note_id, None)
        logger.info("Note %s restored by user %s", note_id, user_id)

        return notes_logic.to_view(await self._fetch(note_id))

    async def get_tags(self, user_id: str) -> list[str]:
        query = select(NotesModel.tags).where(
            NotesModel.user_id == user_id, NotesModel.deleted_at.is_(None)
        )
        result = await self.session.execute(query)

        return notes_logic.collect_tags(result.scalars().all())

    async def get_stats(self, user_id: str) -> NoteStatsSchema:
        active = NotesModel.deleted_at.is_(None)

        total = await self._count(NotesModel.user_id == user_id, active)
        notes = await self._count(
            NotesModel.user_id == user_id, active, NotesModel.type == NoteType.NOTE
        )
        checklists = await self._count(
            NotesModel.user_id == user_id, active, NotesModel.type == NoteType.CHECKLIST
        )
        total_including_deleted = await self._count(NotesModel.user_id == user_id)

        return notes_logic.compute_stats(total, notes, checklists, total_including_deleted)

    async def _fetch(self, note_id: str) -> NotesModel | None:
        query = (
            select(NotesModel)
            .where(NotesModel.id == note_id)
            .options(selectinload(NotesModel.items))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def _load_owned(self, note_id: str, user_id: str) -> NotesModel:
        # soft-deleted rows are visible here; existence is checked before ownership
        note = await self._fetch(note_id)

        if note is None:
            raise NotFoundError("Note not found")

        if note.user_id != user_id:
            logger.info("User %s denied access to note %s", user_id, note_id)
            raise ForbiddenError("Access denied")

        return note

    async def _insert_items(self, note_id: str, rows: list[dict[str, Any]]) -> None:
        if not rows:
            return
        await self.session.execute(
            insert(NoteItemModel), [{"note_id": note_id, **row} for row in rows]
        )

    async def _set_deleted_at(self, note_id: str, value: datetime | None) -> None:
        try:
            await self.session.execute(
                update(NotesModel).where(NotesModel.id == note_id).values(deleted_at=value)
            )
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def _count(self, *conditions: Any) -> int:
        query = select(func.count()).select_from(NotesModel).where(*conditions)
        result = await self.session.execute(query)
        return result.scalar_one()


def get_note_store(session: sessionDep) -> NoteStore:
    return NoteStore(session)


noteStoreDep = Annotated[NoteStore, Depends(get_note_store)]
