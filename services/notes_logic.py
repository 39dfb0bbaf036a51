"""Pure note transformations used by the note store.

Nothing here touches the database: the store loads rows, hands plain values
to these functions and persists whatever they return.
"""

from dataclasses import dataclass
from datetime import datetime
from itertools import chain
from typing import Any, Iterable, Sequence

from errors import ValidationError
from models.notesmodel import NoteType, NotesModel
from schemas.notesschema import NoteItemViewSchema, NoteStatsSchema, NoteViewSchema

PATCHABLE_FIELDS = ("title", "type", "tags")


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    message: str | None = None


VALID = ValidationResult(ok=True)


def invalid(message: str) -> ValidationResult:
    return ValidationResult(ok=False, message=message)


def ensure_valid(result: ValidationResult) -> None:
    if not result.ok:
        raise ValidationError(result.message or "Invalid note")


def validate_create(
    note_type: NoteType, body: str | None, items: Sequence[Any] | None
) -> ValidationResult:
    if note_type == NoteType.NOTE and not body:
        return invalid("Body is required for note type")
    if note_type == NoteType.CHECKLIST and not items:
        return invalid("Items are required for checklist type")
    return VALID


def validate_patch(current_type: NoteType, changes: dict[str, Any]) -> ValidationResult:
    """Check a sparse patch against the note's current type.

    A type change is validated as if the note were created fresh in the new
    type, using only what the patch itself carries: a body already stored on
    the note does not satisfy a change to NOTE.
    """
    new_type = changes.get("type")

    if new_type is not None and new_type != current_type:
        if new_type == NoteType.NOTE and not changes.get("body"):
            return invalid("Body is required when changing to note type")
        if new_type == NoteType.CHECKLIST and not changes.get("items"):
            return invalid("Items are required when changing to checklist type")

    effective_type = new_type or current_type
    if effective_type == NoteType.CHECKLIST and "items" in changes and not changes["items"]:
        return invalid("Items are required for checklist type")
    if effective_type == NoteType.NOTE:
        if "body" in changes and not changes["body"]:
            return invalid("Body is required for note type")
        if changes.get("items"):
            return invalid("Items are not allowed for note type")

    return VALID


def build_items(items: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Item rows in input order; ``order`` defaults to the array position."""
    rows = []
    for index, item in enumerate(items):
        order = item.get("order")
        rows.append(
            {
                "checked": bool(item.get("checked") or False),
                "body": item["body"],
                "order": index if order is None else order,
            }
        )
    return rows


def snapshot(note: NotesModel) -> dict[str, Any]:
    return {
        "title": note.title,
        "type": note.type,
        "body": note.body,
        "tags": list(note.tags or []),
    }


def apply_patch(
    current: dict[str, Any], changes: dict[str, Any], now: datetime
) -> dict[str, Any]:
    """New column values for a partial update. Absent fields keep their value."""
    updated = dict(current)

    for key in PATCHABLE_FIELDS:
        if key in changes:
            updated[key] = changes[key]

    if updated["type"] == NoteType.NOTE:
        if "body" in changes:
            updated["body"] = changes["body"]
    else:
        updated["body"] = None

    updated["modified_at"] = now
    return updated


def item_replacement(
    current_type: NoteType, changes: dict[str, Any]
) -> list[dict[str, Any]] | None:
    """Rows that replace the item set, or None when items stay untouched."""
    if "items" in changes:
        return build_items(changes["items"])

    new_type = changes.get("type")
    if new_type == NoteType.NOTE and current_type != NoteType.NOTE:
        return []

    return None


def matches_tag(tags: Iterable[str] | None, tag: str) -> bool:
    return tag in (tags or [])


def collect_tags(tag_lists: Iterable[Iterable[str] | None]) -> list[str]:
    return sorted(set(chain.from_iterable(tags or [] for tags in tag_lists)))


def compute_stats(
    total: int, notes: int, checklists: int, total_including_deleted: int
) -> NoteStatsSchema:
    return NoteStatsSchema(
        total=total,
        notes=notes,
        checklists=checklists,
        deleted=total_including_deleted - total,
    )


def to_view(note: NotesModel) -> NoteViewSchema:
    items = sorted(note.items or [], key=lambda item: item.order)

    return NoteViewSchema(
        id=note.id,
        user_id=note.user_id,
        title=note.title,
        type=note.type,
        body=note.body,
        items=[
            NoteItemViewSchema(checked=item.checked, body=item.body, order=item.order)
            for item in items
        ],
        tags=list(note.tags or []),
        created_at=note.created_at,
        modified_at=note.modified_at,
        deleted_at=note.deleted_at,
    )
