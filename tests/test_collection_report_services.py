import uuid
from datetime import date

import pytest

from app.errors import Forbidden, InvalidStatus, NotFound
from app.models.analytics_rollup import AnalyticsRollup
from app.models.award_event import AwardEvent
from app.models.collection import Collection
from app.models.notification import Notification
from app.repositories.ledger_repository import LedgerRepository
from app.schemas.collection import CollectionCreate, CollectionUpdate
from app.schemas.report import ReportCreate
from app.services.award_service import award_for_filed_report
from app.services.collection_service import (
    create_collection,
    delete_collection,
    list_collections,
    update_collection,
)
from app.services.report_service import file_report, list_reports

from factories import new_collection, new_user


def _collection_payload(**overrides):
    data = {
        "waste_type": "organic",
        "zone": "Zone A",
        "address": "12 Collection Street, Zone A",
    }
    data.update(overrides)
    return CollectionCreate(**data)


def _report_payload(**overrides):
    data = {
        "type": "illegal_dumping",
        "title": "Mattress dumped",
        "description": "Someone left an old mattress next to the recycling point.",
        "location": "Park entrance",
    }
    data.update(overrides)
    return ReportCreate(**data)


# ============================================================
# collections
# ============================================================
def test_create_collection_is_pending_and_notifies(db, add):
    user = add(new_user())

    collection = create_collection(db, user.id, _collection_payload())

    assert collection.status == "pending"
    assert collection.priority == "normal"
    assert collection.completed_at is None

    notes = db.query(Notification).filter(Notification.user_id == user.id).all()
    assert [n.type for n in notes] == ["collection_reminder"]

    rollup = db.query(AnalyticsRollup).one()
    assert rollup.zone == "Zone A"
    assert rollup.total_collections == 1


def test_create_collection_unknown_user(db):
    with pytest.raises(NotFound):
        create_collection(db, uuid.uuid4(), _collection_payload())

    assert db.query(AnalyticsRollup).count() == 0


def test_list_collections_filters(db, add):
    alice, bob = add(new_user(name="Alice"), new_user(name="Bob"))
    create_collection(db, alice.id, _collection_payload(zone="Zone A"))
    create_collection(db, alice.id, _collection_payload(zone="Zone B"))
    create_collection(db, bob.id, _collection_payload(zone="Zone B"))

    assert len(list_collections(db, user_id=alice.id)) == 2
    assert len(list_collections(db, zone="Zone B")) == 2
    assert len(list_collections(db, status="completed")) == 0


# ============================================================
# reports
# ============================================================
def test_file_report_awards_author_and_alerts_admins(db, add):
    author, admin_one, admin_two, collector = add(
        new_user(points=0, name="Dana"),
        new_user(role="admin"),
        new_user(role="admin"),
        new_user(role="collector"),
    )

    report = file_report(db, author.id, _report_payload())

    assert report.status == "pending"
    assert LedgerRepository(db).get_points(author.id) == 5

    for admin in (admin_one, admin_two):
        notes = db.query(Notification).filter(Notification.user_id == admin.id).all()
        assert len(notes) == 1
        assert notes[0].message == "Dana reported: Mattress dumped"

    assert db.query(Notification).filter(Notification.user_id == collector.id).count() == 0


def test_report_award_is_idempotent(db, add):
    author = add(new_user(points=0))
    report = file_report(db, author.id, _report_payload())

    again = award_for_filed_report(db, report.id)

    assert again.created is False
    assert again.balance == 5
    assert db.query(AwardEvent).filter(AwardEvent.source_entity_id == report.id).count() == 1


def test_file_report_unknown_user(db):
    with pytest.raises(NotFound):
        file_report(db, uuid.uuid4(), _report_payload())


def test_list_reports_by_author(db, add):
    author, other = add(new_user(), new_user())
    file_report(db, author.id, _report_payload())
    file_report(db, other.id, _report_payload(title="Bin not emptied"))

    assert [r.title for r in list_reports(db, user_id=author.id)] == ["Mattress dumped"]
    assert len(list_reports(db)) == 2


# ============================================================
# collection edits and deletion
# ============================================================
def test_update_collection_sets_schedule_and_status(db, add):
    owner, collector = add(new_user(), new_user(role="collector"))
    collection = add(new_collection(owner.id))

    updated = update_collection(
        db,
        collection.id,
        CollectionUpdate(status="scheduled", scheduled_date=date(2026, 11, 2), scheduled_time="08:00-12:00"),
        actor_id=collector.id,
    )

    assert updated.status == "scheduled"
    assert updated.scheduled_date == date(2026, 11, 2)
    assert updated.scheduled_time == "08:00-12:00"
    assert LedgerRepository(db).get_points(owner.id) == 0


def test_update_collection_to_completed_pays_owner(db, add):
    owner, collector = add(new_user(points=0), new_user(role="collector"))
    collection = add(new_collection(owner.id, waste_type="organic"))

    updated = update_collection(
        db,
        collection.id,
        CollectionUpdate(status="completed", notes="Left by the gate"),
        actor_id=collector.id,
    )

    assert updated.status == "completed"
    assert updated.notes == "Left by the gate"
    assert updated.collector_id == collector.id
    assert LedgerRepository(db).get_points(owner.id) == 15


def test_update_collection_with_bad_status_changes_nothing(db, add):
    owner = add(new_user())
    collection = add(new_collection(owner.id))

    with pytest.raises(InvalidStatus):
        update_collection(db, collection.id, CollectionUpdate(status="lost", notes="changed"))

    db.refresh(collection)
    assert collection.notes is None
    assert collection.status == "pending"


def test_update_missing_collection(db):
    with pytest.raises(NotFound):
        update_collection(db, uuid.uuid4(), CollectionUpdate(notes="hello"))


def test_resident_deletes_own_pending_collection(db, add):
    owner = add(new_user())
    collection = add(new_collection(owner.id))
    collection_id = collection.id

    delete_collection(db, collection_id, user_id=owner.id, is_staff=False)

    assert db.query(Collection).filter(Collection.id == collection_id).count() == 0


def test_resident_cannot_delete_others_or_non_pending(db, add):
    owner, stranger = add(new_user(), new_user())
    scheduled = add(new_collection(owner.id, status="scheduled"))
    pending = add(new_collection(owner.id))

    with pytest.raises(Forbidden):
        delete_collection(db, scheduled.id, user_id=owner.id, is_staff=False)
    with pytest.raises(Forbidden):
        delete_collection(db, pending.id, user_id=stranger.id, is_staff=False)

    assert db.query(Collection).count() == 2


def test_staff_delete_any_collection(db, add):
    owner, admin = add(new_user(), new_user(role="admin"))
    collection = add(new_collection(owner.id, status="completed"))
    collection_id = collection.id

    delete_collection(db, collection_id, user_id=admin.id, is_staff=True)

    assert db.query(Collection).count() == 0
    with pytest.raises(NotFound):
        delete_collection(db, collection_id, user_id=admin.id, is_staff=True)
