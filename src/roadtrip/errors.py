"""Error kinds raised by the planning core."""

from __future__ import annotations


class PlanningContractError(ValueError):
    """Raised when a caller breaks the planning contract.

    Missing or unusable start/end stops and non-positive day counts are
    caller mistakes; an empty or unsuitable candidate pool is not and never
    raises.
    """
