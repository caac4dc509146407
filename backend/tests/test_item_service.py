import uuid

import pytest
from sqlalchemy.orm import Session

from evalservice.core.errors import EvaluationItemExistsError
from evalservice.models.item import EvaluationItem
from evalservice.schemas.item import EvaluationItemPayload
from evalservice.services.item_service import item_service

SYSTEM_ID = uuid.uuid4()


def _payload(name: str, type_id: uuid.UUID, weight: float = 50, item_id=None):
    return EvaluationItemPayload(
        id=item_id,
        evaluation_system_id=SYSTEM_ID,
        evaluation_type_id=type_id,
        name=name,
        weight=weight,
    )


def _stored(db: Session, group_id: uuid.UUID, name: str, type_id: uuid.UUID) -> EvaluationItem:
    item = EvaluationItem(
        group_id=group_id,
        evaluation_system_id=SYSTEM_ID,
        evaluation_type_id=type_id,
        name=name,
        weight=50,
    )
    db.add(item)
    db.commit()
    return item


def test_plan_splits_existing_and_desired(db_session: Session):
    group_id = uuid.uuid4()
    t1 = uuid.uuid4()
    keep = _stored(db_session, group_id, "Keep", t1)
    drop = _stored(db_session, group_id, "Drop", t1)
    stale_id = uuid.uuid4()

    plan = item_service.plan(
        [keep, drop],
        [
            _payload("Keep", t1, 60, item_id=keep.id),
            _payload("New", t1),
            _payload("Stale", t1, item_id=stale_id),
        ],
    )

    assert [i.id for i in plan.to_delete] == [drop.id]
    assert [(item.id, entry.weight) for item, entry in plan.to_update] == [(keep.id, 60)]
    assert [e.name for e in plan.to_create] == ["New"]
    assert [e.id for e in plan.ignored] == [stale_id]


def test_plan_rejects_a_second_pending_claim():
    t1 = uuid.uuid4()
    with pytest.raises(EvaluationItemExistsError):
        item_service.plan([], [_payload("A", t1), _payload("A", t1)])


def test_plan_allows_a_key_vacated_by_a_delete(db_session: Session):
    group_id = uuid.uuid4()
    t1 = uuid.uuid4()
    old = _stored(db_session, group_id, "A", t1)

    plan = item_service.plan([old], [_payload("A", t1)])
    assert plan.to_delete == [old]
    assert len(plan.to_create) == 1


def test_failed_conflict_check_leaves_group_untouched(db_session: Session):
    group_id = uuid.uuid4()
    t1 = uuid.uuid4()
    kept = _stored(db_session, group_id, "A", t1)
    _stored(db_session, group_id, "B", t1)

    with pytest.raises(EvaluationItemExistsError):
        item_service.sync(
            db_session, group_id, [_payload("A", t1, item_id=kept.id), _payload("A", t1)]
        )

    db_session.rollback()
    names = sorted(i.name for i in item_service.list_by_group(db_session, group_id))
    assert names == ["A", "B"]


def test_insert_skips_rows_rejected_by_storage(db_session: Session):
    group_id = uuid.uuid4()
    t1 = uuid.uuid4()
    _stored(db_session, group_id, "Final", t1)

    created = item_service.insert_best_effort(
        db_session, group_id, [_payload("Final", t1), _payload("Lab", t1)]
    )
    db_session.commit()

    assert [i.name for i in created] == ["Lab"]
    names = sorted(i.name for i in item_service.list_by_group(db_session, group_id))
    assert names == ["Final", "Lab"]


def test_sync_counts_only_rows_that_landed(db_session: Session, monkeypatch):
    group_id = uuid.uuid4()
    t1 = uuid.uuid4()

    # Simulate a concurrent writer storing "Race" between the check and the insert
    original = item_service.insert_best_effort

    def _racing_insert(db, gid, entries):
        _stored(db, gid, "Race", t1)
        return original(db, gid, entries)

    monkeypatch.setattr(item_service, "insert_best_effort", _racing_insert)

    result = item_service.sync(db_session, group_id, [_payload("Race", t1), _payload("Calm", t1)])

    assert result.created_count == 1
    assert sorted(i.name for i in result.items) == ["Calm", "Race"]
