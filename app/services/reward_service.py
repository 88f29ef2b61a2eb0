import logging
import secrets
import string
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from app.db import atomic
from app.errors import InsufficientPoints, NotFound, RedemptionConflict, RewardNotFound
from app.models.redemption import Redemption
from app.repositories.ledger_repository import LedgerRepository
from app.services.notification_service import notify
from app.settings import REDEMPTION_CODE_MAX_ATTEMPTS


logger = logging.getLogger(__name__)


CODE_PREFIX = "RWD"
CODE_SUFFIX_LENGTH = 8

_BASE36 = string.digits + string.ascii_uppercase


def _to_base36(value: int) -> str:
    if value <= 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


# ============================================================
# CODE GENERATION
# ============================================================
def generate_redemption_code(now: datetime | None = None) -> str:
    """RWD + base36 millisecond timestamp + random base36 suffix."""
    now = now or datetime.now(timezone.utc)
    millis = int(now.timestamp() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(CODE_SUFFIX_LENGTH))
    return f"{CODE_PREFIX}{_to_base36(millis)}{suffix}"


# ============================================================
# REDEEM (flushes only)
# ============================================================
def redeem(db: Session, user_id: UUID, reward_id: UUID) -> Redemption:
    repo = LedgerRepository(db)

    user = repo.get_user(user_id, for_update=True)
    if not user:
        raise NotFound("User", user_id)

    reward = repo.get_reward(reward_id)
    if not reward or not reward.is_active:
        raise RewardNotFound(reward_id)

    cost = int(reward.points_cost)
    balance = int(user.points or 0)
    if balance < cost:
        raise InsufficientPoints(balance=balance, required=cost)

    # the guard re-checks the stored balance at write time
    if not repo.decrement_points(user_id, cost):
        raise InsufficientPoints(balance=repo.get_points(user_id) or 0, required=cost)

    redemption = None
    for attempt in range(1, REDEMPTION_CODE_MAX_ATTEMPTS + 1):
        code = generate_redemption_code()
        redemption = repo.insert_redemption(
            user_id=user_id,
            reward_id=reward.id,
            points_spent=cost,
            code=code,
        )
        if redemption is not None:
            break
        logger.warning(
            "redemption code collision; retrying",
            extra={"user_id": str(user_id), "reward_id": str(reward.id), "attempt": attempt},
        )

    if redemption is None:
        raise RedemptionConflict(REDEMPTION_CODE_MAX_ATTEMPTS)

    notify(
        repo,
        user_id,
        type="reward_earned",
        title="Reward Redeemed!",
        message=f"You've redeemed {reward.name}. Your code: {redemption.code}",
        link="/profile/rewards",
    )

    logger.info(
        "reward redeemed",
        extra={
            "user_id": str(user_id),
            "reward_id": str(reward.id),
            "points_spent": cost,
            "code": redemption.code,
        },
    )

    return redemption


def redeem_reward(db: Session, user_id: UUID, reward_id: UUID) -> Redemption:
    """
    Exchange points for a catalog reward.

    Balance decrement, redemption row and notification commit together or
    not at all.
    """
    with atomic(db):
        redemption = redeem(db, user_id, reward_id)

    return redemption


# ============================================================
# READS
# ============================================================
def list_rewards(db: Session):
    return LedgerRepository(db).list_active_rewards()


def list_redemptions(db: Session, user_id: UUID):
    return LedgerRepository(db).list_redemptions(user_id)
