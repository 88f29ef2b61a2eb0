from fastapi import HTTPException


class NotFound(HTTPException):
    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(status_code=404, detail=f"{entity} not found")


class RewardNotFound(NotFound):
    def __init__(self, reward_id=None):
        super().__init__("Reward", reward_id)


class InsufficientPoints(HTTPException):
    def __init__(self, balance: int, required: int):
        self.balance = int(balance)
        self.required = int(required)
        super().__init__(
            status_code=400,
            detail={
                "error": "Insufficient points",
                "balance": self.balance,
                "required": self.required,
            },
        )


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=403, detail=detail)


class InvalidStatus(HTTPException):
    def __init__(self, entity_type: str, status, reason: str | None = None):
        self.entity_type = entity_type
        self.status = status
        super().__init__(status_code=400, detail=reason or f"Invalid {entity_type} status: {status}")


class RedemptionConflict(HTTPException):
    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            status_code=500,
            detail=f"Could not generate a unique redemption code after {attempts} attempts",
        )


class TransactionFailure(HTTPException):
    def __init__(self, reason: str = ""):
        self.reason = reason
        super().__init__(status_code=503, detail="Ledger storage unavailable, retry the operation")


class DuplicateAward(Exception):
    """An AwardEvent already exists for (source_entity_id, kind). Never leaves the core."""

    def __init__(self, source_entity_id, kind: str):
        self.source_entity_id = source_entity_id
        self.kind = kind
        super().__init__(f"award {kind} already recorded for {source_entity_id}")
