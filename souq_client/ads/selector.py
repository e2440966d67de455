"""Weighted selection of ad package instances with soft pacing limits.

Each eligible package gets a weight from its static priority (1-5) and how
far behind its delivery schedule it is:

- Remaining impressions <= 0 (over-delivered): ``priority * 0.1``. The
  package stays eligible but is heavily deprioritised.
- Otherwise: ``priority * max(remaining / days_left, 1)``, i.e. packages that
  need more impressions per day to meet their target are favoured.

Every weight is clamped to at least ``MIN_WEIGHT`` so no package is ever
excluded outright. This is a heuristic; it does not guarantee contracted
delivery.
"""

from __future__ import annotations

import logging
import math
import random
from datetime import date, datetime, timezone
from typing import Optional, Sequence, Union

from souq_client.data.models import DEFAULT_PRIORITY, AdPackageInstance, parse_timestamp

logger = logging.getLogger(__name__)

OVER_DELIVERY_FACTOR = 0.1
MIN_WEIGHT = 0.1


def _as_date(value: Union[str, date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_timestamp(value).date()


def days_until_end(
    end_date: Union[str, date, datetime], today: Optional[date] = None
) -> int:
    """Whole calendar days until ``end_date``, never less than 1."""
    today = today or datetime.now(timezone.utc).date()
    return max(1, (_as_date(end_date) - today).days)


def compute_weight(instance: AdPackageInstance, today: Optional[date] = None) -> float:
    """Selection weight for a single package instance."""
    priority = instance.priority or DEFAULT_PRIORITY
    remaining = instance.impressions_remaining
    days_left = days_until_end(instance.end_date, today)

    if remaining <= 0:
        weight = priority * OVER_DELIVERY_FACTOR
        logger.debug(
            f"Package {instance.campaign_package_id} over-delivered "
            f"({instance.impressions_delivered}/{instance.impressions_purchased}), "
            f"weight {weight:.2f}"
        )
    else:
        daily_target = remaining / days_left
        weight = priority * max(daily_target, 1)
        logger.debug(
            f"Package {instance.campaign_package_id}: "
            f"{instance.impressions_delivered}/{instance.impressions_purchased} impressions, "
            f"{days_left} days left, weight {weight:.2f}"
        )

    return max(MIN_WEIGHT, weight)


def select_package(
    instances: Sequence[AdPackageInstance],
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> Optional[AdPackageInstance]:
    """Pick one package instance, biased towards those behind schedule.

    Args:
        instances: Eligible package instances for a placement.
        rng: Random source. Uses the module-level generator if None.
        today: Reference date for pacing. Uses the current UTC date if None.

    Returns:
        The selected instance, or None when there is nothing to show.
    """
    if not instances:
        return None
    if len(instances) == 1:
        return instances[0]

    rng = rng or random
    weighted = [(instance, compute_weight(instance, today)) for instance in instances]
    total_weight = sum(weight for _, weight in weighted)

    if total_weight <= 0:
        return instances[math.floor(rng.random() * len(instances))]

    remaining = rng.random() * total_weight
    for instance, weight in weighted:
        remaining -= weight
        if remaining <= 0:
            return instance

    # Floating point residue
    return weighted[0][0]
