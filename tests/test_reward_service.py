import uuid
from datetime import datetime, timezone

import pytest

from app.errors import InsufficientPoints, NotFound, RedemptionConflict, RewardNotFound
from app.models.notification import Notification
from app.models.redemption import Redemption
from app.repositories.ledger_repository import LedgerRepository
from app.services import reward_service
from app.services.reward_service import (
    generate_redemption_code,
    list_redemptions,
    list_rewards,
    redeem_reward,
)

from factories import new_reward, new_user


def _balance(db, user_id):
    return LedgerRepository(db).get_points(user_id)


def test_redeem_scenario_150_minus_100(db, add):
    user = add(new_user(points=150))
    reward = add(new_reward(points_cost=100, name="Compost bin"))

    redemption = redeem_reward(db, user.id, reward.id)

    assert _balance(db, user.id) == 50

    rows = db.query(Redemption).filter(Redemption.user_id == user.id).all()
    assert len(rows) == 1
    assert rows[0].points_spent == 100
    assert rows[0].code == redemption.code

    notes = db.query(Notification).filter(Notification.user_id == user.id).all()
    assert len(notes) == 1
    assert redemption.code in notes[0].message
    assert "Compost bin" in notes[0].message


def test_redeem_exact_balance_leaves_zero(db, add):
    user = add(new_user(points=100))
    reward = add(new_reward(points_cost=100))

    redeem_reward(db, user.id, reward.id)

    assert _balance(db, user.id) == 0


def test_redeem_one_point_short(db, add):
    user = add(new_user(points=99))
    reward = add(new_reward(points_cost=100))

    with pytest.raises(InsufficientPoints) as exc:
        redeem_reward(db, user.id, reward.id)

    assert exc.value.status_code == 400
    assert exc.value.balance == 99
    assert exc.value.required == 100
    assert _balance(db, user.id) == 99
    assert db.query(Redemption).count() == 0
    assert db.query(Notification).count() == 0


def test_redeem_inactive_reward_is_not_found(db, add):
    user = add(new_user(points=500))
    reward = add(new_reward(points_cost=100, is_active=False))

    with pytest.raises(RewardNotFound):
        redeem_reward(db, user.id, reward.id)

    assert _balance(db, user.id) == 500


def test_redeem_missing_reward_and_user(db, add):
    user = add(new_user(points=500))
    reward = add(new_reward())

    with pytest.raises(RewardNotFound):
        redeem_reward(db, user.id, uuid.uuid4())
    with pytest.raises(NotFound):
        redeem_reward(db, uuid.uuid4(), reward.id)


def test_points_spent_is_a_snapshot(db, add):
    user = add(new_user(points=300))
    reward = add(new_reward(points_cost=100))

    redeem_reward(db, user.id, reward.id)

    reward.points_cost = 250
    db.commit()

    rows = list_redemptions(db, user.id)
    assert [r.points_spent for r in rows] == [100]


def test_failure_after_decrement_rolls_everything_back(db, add, monkeypatch):
    user = add(new_user(points=150))
    reward = add(new_reward(points_cost=100))

    def broken_notify(*args, **kwargs):
        raise RuntimeError("notification store down")

    monkeypatch.setattr(reward_service, "notify", broken_notify)

    with pytest.raises(RuntimeError):
        redeem_reward(db, user.id, reward.id)

    assert _balance(db, user.id) == 150
    assert db.query(Redemption).count() == 0
    assert db.query(Notification).count() == 0


def test_code_collision_is_retried(db, add, monkeypatch):
    user = add(new_user(points=500))
    reward = add(new_reward(points_cost=100))

    monkeypatch.setattr(reward_service, "generate_redemption_code", lambda: "RWDFIXED")
    redeem_reward(db, user.id, reward.id)

    codes = iter(["RWDFIXED", "RWDFIXED", "RWDFRESH"])
    monkeypatch.setattr(reward_service, "generate_redemption_code", lambda: next(codes))
    second = redeem_reward(db, user.id, reward.id)

    assert second.code == "RWDFRESH"
    assert _balance(db, user.id) == 300


def test_code_collision_exhaustion_raises_conflict(db, add, monkeypatch):
    user = add(new_user(points=500))
    reward = add(new_reward(points_cost=100))

    monkeypatch.setattr(reward_service, "generate_redemption_code", lambda: "RWDFIXED")
    redeem_reward(db, user.id, reward.id)

    with pytest.raises(RedemptionConflict) as exc:
        redeem_reward(db, user.id, reward.id)

    assert exc.value.status_code == 500
    assert _balance(db, user.id) == 400
    assert db.query(Redemption).count() == 1


def test_generated_codes_are_unique():
    codes = {generate_redemption_code() for _ in range(10_000)}
    assert len(codes) == 10_000


def test_codes_stay_unique_across_many_redemptions(db, add):
    count = 300
    user = add(new_user(points=count * 10))
    reward = add(new_reward(points_cost=10))

    for _ in range(count):
        redeem_reward(db, user.id, reward.id)

    codes = [code for (code,) in db.query(Redemption.code).all()]
    assert len(codes) == count
    assert len(set(codes)) == count
    assert _balance(db, user.id) == 0

    with pytest.raises(InsufficientPoints):
        redeem_reward(db, user.id, reward.id)


def test_code_shape():
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    code = generate_redemption_code(now)

    assert code.startswith("RWD")
    assert code.isalnum()
    assert code.upper() == code
    assert len(code) == len("RWD") + len(reward_service._to_base36(int(now.timestamp() * 1000))) + 8


def test_points_never_negative_over_sequence(db, add):
    user = add(new_user(points=120))
    cheap = add(new_reward(points_cost=50, name="Bus ticket"))
    dear = add(new_reward(points_cost=80, name="Cinema"))

    for reward in (cheap, dear, cheap, dear, cheap):
        try:
            redeem_reward(db, user.id, reward.id)
        except InsufficientPoints:
            pass
        assert _balance(db, user.id) >= 0

    # 120 -> 70 -> (80 refused) -> 20 -> (80 refused) -> (50 refused)
    assert _balance(db, user.id) == 20


def test_list_rewards_only_active_cheapest_first(db, add):
    add(
        new_reward(points_cost=200, name="Tote bag"),
        new_reward(points_cost=75, name="Coffee"),
        new_reward(points_cost=10, name="Retired", is_active=False),
    )

    assert [r.name for r in list_rewards(db)] == ["Coffee", "Tote bag"]
