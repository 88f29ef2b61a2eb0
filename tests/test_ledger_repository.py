import uuid
from datetime import date

import pytest

from app.errors import DuplicateAward, NotFound
from app.repositories.ledger_repository import LedgerRepository

from factories import new_reward, new_user


def test_increment_returns_new_balance(db, add):
    user = add(new_user(points=10))
    repo = LedgerRepository(db)

    assert repo.increment_points(user.id, 15) == 25
    db.commit()
    assert repo.get_points(user.id) == 25


def test_increment_unknown_user(db):
    with pytest.raises(NotFound):
        LedgerRepository(db).increment_points(uuid.uuid4(), 5)


def test_guarded_decrement_never_goes_negative(db, add):
    user = add(new_user(points=150))
    repo = LedgerRepository(db)

    assert repo.decrement_points(user.id, 100) is True
    assert repo.decrement_points(user.id, 100) is False
    db.commit()

    assert repo.get_points(user.id) == 50


def test_guarded_decrement_allows_exact_balance(db, add):
    user = add(new_user(points=75))
    repo = LedgerRepository(db)

    assert repo.decrement_points(user.id, 75) is True
    db.commit()
    assert repo.get_points(user.id) == 0


def test_negative_amounts_rejected(db, add):
    user = add(new_user(points=10))
    repo = LedgerRepository(db)

    with pytest.raises(ValueError):
        repo.increment_points(user.id, -1)
    with pytest.raises(ValueError):
        repo.decrement_points(user.id, -1)


def test_award_event_unique_per_source_and_kind(db, add):
    user = add(new_user())
    repo = LedgerRepository(db)
    source = uuid.uuid4()

    repo.record_award_event(user_id=user.id, kind="collection_completed", points=20, source_entity_id=source)
    with pytest.raises(DuplicateAward):
        repo.record_award_event(user_id=user.id, kind="collection_completed", points=20, source_entity_id=source)

    # a different kind on the same source is a separate award
    repo.record_award_event(user_id=user.id, kind="report_filed", points=5, source_entity_id=source)
    db.commit()


def test_insert_redemption_reports_taken_code(db, add):
    user = add(new_user(points=500))
    reward = add(new_reward())
    repo = LedgerRepository(db)

    first = repo.insert_redemption(user_id=user.id, reward_id=reward.id, points_spent=100, code="RWDTAKEN")
    assert first is not None
    assert repo.insert_redemption(user_id=user.id, reward_id=reward.id, points_spent=100, code="RWDTAKEN") is None
    db.commit()

    assert len(repo.list_redemptions(user.id)) == 1


def test_upsert_rollup_creates_then_increments(db):
    repo = LedgerRepository(db)
    day = date(2026, 3, 1)

    rollup = repo.upsert_rollup(day, "Zone A", completed_collections=1, co2_saved=1.5)
    assert rollup.completed_collections == 1
    assert rollup.total_collections == 0

    rollup = repo.upsert_rollup(day, "Zone A", completed_collections=1, recycling_weight=5.0, co2_saved=4.0)
    db.commit()

    assert rollup.completed_collections == 2
    assert rollup.recycling_weight == pytest.approx(5.0)
    assert rollup.co2_saved == pytest.approx(5.5)
    assert len(repo.list_rollups()) == 1


def test_upsert_rollup_rejects_decrements_and_unknown_counters(db):
    repo = LedgerRepository(db)

    with pytest.raises(ValueError):
        repo.upsert_rollup(date(2026, 3, 1), "Zone A", co2_saved=-1.0)
    with pytest.raises(ValueError):
        repo.upsert_rollup(date(2026, 3, 1), "Zone A", bogus=1)
