"""Importance x satisfaction quadrants used to prioritize improvement actions."""
from __future__ import annotations

from typing import Optional, Tuple

from survey_core.config import QUADRANT_MIDPOINT
from survey_core.models import Quadrant

PRIORITY_IMPROVEMENT = Quadrant(
    key="priority_improvement",
    name="priority improvement",
    color="#E53935",
    recommendation="Importance is high but satisfaction is low. Immediate improvement is needed.",
)
MAINTAIN_REINFORCE = Quadrant(
    key="maintain_reinforce",
    name="maintain & reinforce",
    color="#43A047",
    recommendation="Importance and satisfaction are both high. Sustain the current level.",
)
GRADUAL_IMPROVEMENT = Quadrant(
    key="gradual_improvement",
    name="gradual improvement",
    color="#FBC02D",
    recommendation="Satisfaction is high but relative importance is low. Keep the current course.",
)
STATUS_QUO = Quadrant(
    key="status_quo",
    name="status quo / monitor",
    color="#90A4AE",
    recommendation="Importance and satisfaction are both low. Re-evaluate the priority.",
)
UNKNOWN_QUADRANT = Quadrant(
    key="importance_unknown",
    name="importance not measured",
    color="#BDBDBD",
    recommendation="No importance questions were answered for this area; collect importance ratings before prioritizing.",
)

QUADRANTS: Tuple[Quadrant, ...] = (PRIORITY_IMPROVEMENT, MAINTAIN_REINFORCE, GRADUAL_IMPROVEMENT, STATUS_QUO)


def classify(importance: Optional[float], satisfaction: float) -> Quadrant:
    """Quadrant for a point on the [0, 100] x [0, 100] plane.

    A value equal to the midpoint counts as low on its axis. Unknown importance
    maps to UNKNOWN_QUADRANT.
    """
    if importance is None:
        return UNKNOWN_QUADRANT
    high_importance = importance > QUADRANT_MIDPOINT
    high_satisfaction = satisfaction > QUADRANT_MIDPOINT
    if high_importance:
        return MAINTAIN_REINFORCE if high_satisfaction else PRIORITY_IMPROVEMENT
    return GRADUAL_IMPROVEMENT if high_satisfaction else STATUS_QUO
