"""Day-type rules: lunch deduction and overtime threshold per working day type.

A Standard Working Day (SWD) has a full unpaid lunch hour and measures
overtime against the full base day. Short-Continuous (SCWD) and Continuous
(CWD) days fold part or all of lunch into the shift, so the deduction and the
OT threshold shrink by the same amount.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from models import DAY_TYPE_CWD, DAY_TYPE_SCWD, DAY_TYPE_SWD

logger = logging.getLogger(__name__)

# day type -> (lunch deduction hours, OT threshold reduction hours)
DAY_TYPE_RULES: dict[str, tuple[Decimal, Decimal]] = {
    DAY_TYPE_SWD: (Decimal("1.0"), Decimal("0")),
    DAY_TYPE_SCWD: (Decimal("0.5"), Decimal("0.5")),
    DAY_TYPE_CWD: (Decimal("0"), Decimal("1.0")),
}

DAY_TYPES = [
    (DAY_TYPE_SWD, "SWD - Standard Working Day"),
    (DAY_TYPE_SCWD, "SCWD - Short Continuous Working Day"),
    (DAY_TYPE_CWD, "CWD - Continuous Working Day"),
]

# Free-text labels seen on call sheets
_LABEL_ALIASES = {
    "standard": DAY_TYPE_SWD,
    "standard day": DAY_TYPE_SWD,
    "standard working day": DAY_TYPE_SWD,
    "short continuous": DAY_TYPE_SCWD,
    "short continuous day": DAY_TYPE_SCWD,
    "short continuous working day": DAY_TYPE_SCWD,
    "semi continuous": DAY_TYPE_SCWD,
    "semi continuous day": DAY_TYPE_SCWD,
    "semi continuous working day": DAY_TYPE_SCWD,
    "continuous": DAY_TYPE_CWD,
    "continuous day": DAY_TYPE_CWD,
    "continuous working day": DAY_TYPE_CWD,
}


def _rules_for(day_type: str | None) -> tuple[Decimal, Decimal]:
    rules = DAY_TYPE_RULES.get(day_type or "")
    if rules is None:
        logger.debug("Unknown day type %r, treating as %s", day_type, DAY_TYPE_SWD)
        return DAY_TYPE_RULES[DAY_TYPE_SWD]
    return rules


def get_lunch_deduction(day_type: str | None) -> Decimal:
    """Hours of unpaid lunch subtracted from the raw working span."""
    return _rules_for(day_type)[0]


def get_ot_threshold(day_type: str | None, base_day_hours: Decimal) -> Decimal:
    """Working hours after which overtime starts."""
    return base_day_hours - _rules_for(day_type)[1]


def normalize_day_type(label: str | None) -> str:
    """Map a day-type tag or free-text description onto SWD/SCWD/CWD."""
    if not label:
        return DAY_TYPE_SWD
    tag = label.strip().upper()
    if tag in DAY_TYPE_RULES:
        return tag

    words = label.strip().lower().replace("-", " ").replace("_", " ")
    key = " ".join(words.split())
    if key in _LABEL_ALIASES:
        return _LABEL_ALIASES[key]

    logger.debug("Unrecognised day type label %r, defaulting to %s", label, DAY_TYPE_SWD)
    return DAY_TYPE_SWD
