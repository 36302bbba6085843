"""Recency boost for learned knowledge.

Freshly learned entries get a bonus that decays linearly to nothing over the
recency window, so new answers from external sources surface ahead of stale
ones with the same similarity.
"""

from __future__ import annotations

from base_template.config import TEMPLATE_CONFIG
from base_template.models import now_ms

MS_PER_DAY = 1000 * 60 * 60 * 24


def compute_recency_boost(
    learned_at: int | None,
    now: int | None = None,
    window_days: float | None = None,
    weight: float | None = None,
) -> float:
    """Return ``max(0, 1 - age_days / window) * weight``.

    Args:
        learned_at: Epoch ms the entry was learned, or None for seeded and
            trained entries (no boost).
        now: Epoch ms to measure age against. Defaults to the current time.
        window_days: Days until the boost reaches zero.
        weight: Boost at age zero.

    Returns:
        A float in ``[0, weight]``. Timestamps in the future count as age zero.
    """
    if learned_at is None:
        return 0.0
    now = now_ms() if now is None else now
    window_days = window_days or TEMPLATE_CONFIG["recency_window_days"]
    weight = TEMPLATE_CONFIG["recency_boost_weight"] if weight is None else weight

    age_days = max((now - learned_at) / MS_PER_DAY, 0.0)
    return max(0.0, 1.0 - age_days / window_days) * weight
