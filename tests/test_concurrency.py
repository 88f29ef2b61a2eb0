import threading

from app.errors import InsufficientPoints, TransactionFailure
from app.models.redemption import Redemption
from app.repositories.ledger_repository import LedgerRepository
from app.services.reward_service import redeem_reward

from factories import new_reward, new_user


def test_concurrent_redemptions_never_overdraw(file_session_factory):
    session = file_session_factory()
    user = new_user(points=150)
    reward = new_reward(points_cost=100)
    session.add_all([user, reward])
    session.commit()
    user_id, reward_id = user.id, reward.id
    session.close()

    barrier = threading.Barrier(2)
    outcomes = []
    lock = threading.Lock()

    def attempt():
        db = file_session_factory()
        try:
            barrier.wait()
            redeem_reward(db, user_id, reward_id)
            result = "ok"
        except (InsufficientPoints, TransactionFailure) as e:
            result = type(e).__name__
        finally:
            db.close()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    assert len(outcomes) == 2
    assert outcomes.count("ok") == 1

    check = file_session_factory()
    try:
        assert LedgerRepository(check).get_points(user_id) == 50
        assert check.query(Redemption).count() == 1
    finally:
        check.close()
