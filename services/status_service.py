from enum import Enum


class StatusCategory(str, Enum):
    AVAILABLE = "available"
    LOW = "low"
    OUT = "out"
    NONE = "none"

    @property
    def style_tag(self):
        if self is StatusCategory.NONE:
            return None
        return f"status-{self.value}"


# Checked in order; the first group with a hit wins.
_KEYWORDS = (
    (StatusCategory.AVAILABLE, ("available", "in stock")),
    (StatusCategory.LOW, ("low", "limited")),
    (StatusCategory.OUT, ("out", "sold")),
)


def classify(value: str) -> StatusCategory:
    text = (value or "").lower()
    for category, keywords in _KEYWORDS:
        if any(k in text for k in keywords):
            return category
    return StatusCategory.NONE


def is_status_column(name: str) -> bool:
    return "status" in (name or "").lower()
