from typing import Annotated

from fastapi import APIRouter, Query, Request, Response

from limiter import limiter
from auth import currentUserDep
from models.notesmodel import NoteType
from services.notes_service import noteStoreDep
from constants import LIMIT_VALUE_NOTES, SCOPE_NOTES
from schemas.notesschema import (
    CreateNoteSchema,
    NoteStatsSchema,
    NoteViewSchema,
    NotesFilterSchema,
    UpdateNoteSchema,
)

router_notes = APIRouter(prefix="/notes", tags=["Notes"])


@router_notes.post(
    "",
    description="Accepts note object and bearer token. A note needs a body, a checklist needs at least one item. Returns the created note",
    summary="Create new note",
    status_code=201,
    response_model=NoteViewSchema,
)
@limiter.shared_limit(LIMIT_VALUE_NOTES, SCOPE_NOTES)
async def create_note(
    createNote: CreateNoteSchema,
    request: Request,
    store: noteStoreDep,
    user: currentUserDep,
):
    return await store.create(createNote, user.id)


@router_notes.get(
    "",
    description="Accepts optional type, tag, search and includeDeleted filters and bearer token. Returns the caller's notes, most recently modified first",
    summary="Get notes",
    response_model=list[NoteViewSchema],
)
@limiter.shared_limit(LIMIT_VALUE_NOTES, SCOPE_NOTES)
async def get_notes(
    request: Request,
    store: noteStoreDep,
    user: currentUserDep,
    note_type: Annotated[NoteType | None, Query(alias="type")] = None,
    tag: str | None = None,
    search: str | None = None,
    include_deleted: Annotated[bool, Query(alias="includeDeleted")] = False,
):
    filters = NotesFilterSchema(
        type=note_type, tag=tag, search=search, include_deleted=include_deleted
    )
    return await store.find_all(user.id, filters)


@router_notes.get(
    "/stats",
    description="Accepts bearer token. Returns counts of active notes by type and of soft-deleted notes",
    summary="Get note statistics",
    response_model=NoteStatsSchema,
)
@limiter.shared_limit(LIMIT_VALUE_NOTES, SCOPE_NOTES)
async def get_stats(request: Request, store: noteStoreDep, user: currentUserDep):
    return await store.get_stats(user.id)


@router_notes.get(
    "/tags",
    description="Accepts bearer token. Returns the distinct tags of the caller's active notes, sorted",
    summary="Get tags",
    response_model=list[str],
)
@limiter.shared_limit(LIMIT_VALUE_NOTES, SCOPE_NOTES)
async def get_tags(request: Request, store: noteStoreDep, user: currentUserDep):
    return await store.get_tags(user.id)


@router_notes.get(
    "/{note_id}",
    description="Accepts note id and bearer token. Returns the note, including a soft-deleted one. 403 if the note belongs to someone else",
    summary="Get note",
    response_model=NoteViewSchema,
)
@limiter.shared_limit(LIMIT_VALUE_NOTES, SCOPE_NOTES)
async def get_note(
    note_id: str, request: Request, store: noteStoreDep, user: currentUserDep
):
    return await store.find_one(note_id, user.id)


@router_notes.patch(
    "/{note_id}",
    description="Accepts any subset of title, type, body, items and tags and bearer token. Sent items replace the whole item set",
    summary="Update note",
    response_model=NoteViewSchema,
)
@limiter.shared_limit(LIMIT_VALUE_NOTES, SCOPE_NOTES)
async def update_note(
    note_id: str,
    updateNote: UpdateNoteSchema,
    request: Request,
    store: noteStoreDep,
    user: currentUserDep,
):
    return await store.update(note_id, updateNote, user.id)


@router_notes.delete(
    "/{note_id}",
    description="Accepts note id and bearer token. Moves the note to trash",
    summary="Delete note",
    status_code=204,
)
@limiter.shared_limit(LIMIT_VALUE_NOTES, SCOPE_NOTES)
async def delete_note(
    note_id: str, request: Request, store: noteStoreDep, user: currentUserDep
):
    await store.remove(note_id, user.id)

    return Response(status_code=204)


@router_notes.delete(
    "/{note_id}/hard",
    description="Accepts note id and bearer token. Removes the note and its items permanently, whether or not it is in trash",
    summary="Delete note permanently",
    status_code=204,
)
@limiter.shared_limit(LIMIT_VALUE_NOTES, SCOPE_NOTES)
async def hard_delete_note(
    note_id: str, request: Request, store: noteStoreDep, user: currentUserDep
):
    await store.hard_delete(note_id, user.id)

    return Response(status_code=204)


@router_notes.post(
    "/{note_id}/restore",
    description="Accepts note id and bearer token. Takes the note out of trash. 400 if it is not deleted",
    summary="Restore note",
    response_model=NoteViewSchema,
)
@limiter.shared_limit(LIMIT_VALUE_NOTES, SCOPE_NOTES)
async def restore_note(
    note_id: str, request: Request, store: noteStoreDep, user: currentUserDep
):
    return await store.restore(note_id, user.id)
