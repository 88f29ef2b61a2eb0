from uuid import UUID

from sqlalchemy.orm import Session

from app.errors import NotFound
from app.repositories.ledger_repository import LedgerRepository


def get_points_balance(db: Session, user_id: UUID) -> int:
    balance = LedgerRepository(db).get_points(user_id)
    if balance is None:
        raise NotFound("User", user_id)
    return balance
