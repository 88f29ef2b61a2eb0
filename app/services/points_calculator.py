from app.settings import DEFAULT_COLLECTION_WEIGHT_KG


COLLECTION_COMPLETED = "collection_completed"
REPORT_FILED = "report_filed"

AWARD_KINDS = (COLLECTION_COMPLETED, REPORT_FILED)

# waste types without their own row fall back to "other"
_COLLECTION_POINTS = {
    "recycling": 20,
    "organic": 15,
    "other": 10,
}

REPORT_POINTS = 5

# kg of CO2 saved per kg of waste handled
_CO2_FACTORS = {
    "recycling": 0.8,
    "organic": 0.3,
    "other": 0.1,
}


def _bucket(waste_type) -> str:
    key = (str(waste_type or "")).strip().lower()
    return key if key in _COLLECTION_POINTS else "other"


def points_for_action(kind: str, waste_type: str | None = None) -> int:
    """
    Points earned for an action. Never raises: unknown waste types score as
    "other" and unknown kinds score 0.
    """
    if kind == COLLECTION_COMPLETED:
        return _COLLECTION_POINTS[_bucket(waste_type)]
    if kind == REPORT_FILED:
        return REPORT_POINTS
    return 0


def co2_saved_kg(waste_type: str | None, weight_kg: float | None = None) -> float:
    """CO2 saved for `weight_kg` of waste. Unmeasured (None) uses the default weight."""
    weight = DEFAULT_COLLECTION_WEIGHT_KG
    if weight_kg is not None:
        try:
            weight = max(0.0, float(weight_kg))
        except (TypeError, ValueError):
            weight = DEFAULT_COLLECTION_WEIGHT_KG

    return weight * _CO2_FACTORS[_bucket(waste_type)]


def describe_action(kind: str, waste_type: str | None = None) -> str:
    if kind == COLLECTION_COMPLETED:
        return f"completing a {waste_type or 'general'} collection"
    if kind == REPORT_FILED:
        return "reporting an issue"
    return kind
