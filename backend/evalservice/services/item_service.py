"""
Desired-state reconciliation of the evaluation items of a grading group.

A caller submits the complete list of items a group should have after the
call. Rows carrying an ``id`` keep (and update) that stored item, rows without
one are new, and stored items missing from the list are deleted. The whole
payload is checked for ``(name, evaluation type)`` collisions before anything
is written.
"""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from evalservice.core.errors import EvaluationItemExistsError
from evalservice.models.item import EvaluationItem
from evalservice.schemas.item import EvaluationItemPayload

logger = logging.getLogger(__name__)

ItemKey = tuple[str, uuid.UUID]

# Claim marker for keys taken by rows of the payload that have no id yet
PENDING = object()

_UPDATABLE_FIELDS = ("name", "evaluation_type_id", "weight", "min_grade")


@dataclass
class SyncPlan:
    to_delete: list[EvaluationItem] = field(default_factory=list)
    to_update: list[tuple[EvaluationItem, EvaluationItemPayload]] = field(default_factory=list)
    to_create: list[EvaluationItemPayload] = field(default_factory=list)
    ignored: list[EvaluationItemPayload] = field(default_factory=list)


@dataclass
class SyncResult:
    created_count: int
    updated_count: int
    deleted_count: int
    items: list[EvaluationItem]


def _payload_key(entry: EvaluationItemPayload) -> ItemKey:
    return (entry.name, entry.evaluation_type_id)


class ItemService:
    def list_by_group(self, db: Session, group_id: uuid.UUID) -> list[EvaluationItem]:
        return (
            db.query(EvaluationItem)
            .filter(EvaluationItem.group_id == group_id)
            .order_by(EvaluationItem.evaluation_type_id, EvaluationItem.name)
            .all()
        )

    def plan(
        self, existing: Sequence[EvaluationItem], desired: Sequence[EvaluationItemPayload]
    ) -> SyncPlan:
        """Diff the stored items against the desired list without touching storage.

        Raises EvaluationItemExistsError when two rows would end up sharing a
        ``(name, evaluation type)`` pair. The check is seeded with the stored
        keys of the items that survive, so renaming one kept item onto the old
        name of another kept item is rejected too.
        """
        desired_ids = {entry.id for entry in desired if entry.id is not None}
        existing_by_id = {item.id: item for item in existing}

        plan = SyncPlan()
        claims: dict[ItemKey, object] = {}
        for item in existing:
            if item.id in desired_ids:
                claims[item.key] = item.id
            else:
                plan.to_delete.append(item)

        for entry in desired:
            key = _payload_key(entry)
            claimed_by = claims.get(key)
            if claimed_by is not None and (entry.id is None or claimed_by != entry.id):
                raise EvaluationItemExistsError(
                    f"Duplicate evaluation item '{entry.name}' for type {entry.evaluation_type_id}"
                )
            claims[key] = entry.id if entry.id is not None else PENDING

        for entry in desired:
            if entry.id is None:
                plan.to_create.append(entry)
            elif entry.id in existing_by_id:
                plan.to_update.append((existing_by_id[entry.id], entry))
            else:
                plan.ignored.append(entry)

        return plan

    def _apply_update(self, item: EvaluationItem, entry: EvaluationItemPayload) -> bool:
        changed = False
        for name in _UPDATABLE_FIELDS:
            value = getattr(entry, name)
            if getattr(item, name) != value:
                setattr(item, name, value)
                changed = True
        return changed

    def insert_best_effort(
        self,
        db: Session,
        group_id: uuid.UUID,
        entries: Sequence[EvaluationItemPayload],
    ) -> list[EvaluationItem]:
        """Insert each row in its own savepoint.

        A row rejected by the storage uniqueness constraint is skipped; the
        others still land. Returns only the rows that were written.
        """
        created = []
        for entry in entries:
            item = EvaluationItem(
                group_id=group_id,
                evaluation_system_id=entry.evaluation_system_id,
                evaluation_type_id=entry.evaluation_type_id,
                name=entry.name,
                weight=entry.weight,
                min_grade=entry.min_grade,
            )
            try:
                with db.begin_nested():
                    db.add(item)
            except IntegrityError:
                logger.warning(
                    "Skipped evaluation item '%s' in group %s: already stored", entry.name, group_id
                )
                continue
            created.append(item)
        return created

    def sync(
        self, db: Session, group_id: uuid.UUID, desired: Sequence[EvaluationItemPayload]
    ) -> SyncResult:
        existing = self.list_by_group(db, group_id)
        plan = self.plan(existing, desired)

        for entry in plan.ignored:
            logger.warning("Ignored evaluation item %s: not part of group %s", entry.id, group_id)

        # Deletes go first so updates and inserts can reuse the vacated keys
        if plan.to_delete:
            db.execute(
                delete(EvaluationItem).where(
                    EvaluationItem.id.in_([item.id for item in plan.to_delete])
                )
            )

        updated_count = 0
        for item, entry in plan.to_update:
            if self._apply_update(item, entry):
                updated_count += 1
        db.flush()

        created = self.insert_best_effort(db, group_id, plan.to_create)
        db.commit()

        logger.info(
            "Synced group %s: %d created, %d updated, %d deleted",
            group_id,
            len(created),
            updated_count,
            len(plan.to_delete),
        )
        return SyncResult(
            created_count=len(created),
            updated_count=updated_count,
            deleted_count=len(plan.to_delete),
            items=self.list_by_group(db, group_id),
        )


# Singleton instance
item_service = ItemService()
