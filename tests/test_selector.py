import random
from datetime import date, datetime, timedelta, timezone

import pytest

from souq_client.ads.selector import compute_weight, days_until_end, select_package
from souq_client.data.models import AdPackageInstance

TODAY = date(2026, 3, 1)
DRAWS = 10_000
# Chi-square critical value, 2 degrees of freedom, p = 0.001
CHI_SQUARE_CRITICAL = 13.816


def make_instance(
    package_id="pkg",
    priority=3,
    purchased=1000,
    delivered=0,
    days_left=10,
):
    end = datetime(TODAY.year, TODAY.month, TODAY.day, tzinfo=timezone.utc) + timedelta(days=days_left)
    return AdPackageInstance(
        campaign_id=f"camp-{package_id}",
        campaign_package_id=package_id,
        campaign_name=f"Campaign {package_id}",
        priority=priority,
        impressions_purchased=purchased,
        impressions_delivered=delivered,
        end_date=end,
    )


class FixedRandom:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def test_over_delivered_weight_is_tenth_of_priority():
    instance = make_instance(priority=3, purchased=1000, delivered=1000, days_left=5)
    assert compute_weight(instance, TODAY) == pytest.approx(0.3)


def test_behind_schedule_weight_uses_daily_target():
    instance = make_instance(priority=5, purchased=1000, delivered=0, days_left=10)
    assert compute_weight(instance, TODAY) == pytest.approx(500)


@pytest.mark.parametrize("priority", [1, 2, 3, 4, 5])
def test_over_delivery_weight_for_every_priority(priority):
    instance = make_instance(priority=priority, purchased=100, delivered=250)
    assert compute_weight(instance, TODAY) == pytest.approx(priority * 0.1)


def test_weight_non_decreasing_in_daily_target():
    weights = [
        compute_weight(make_instance(priority=4, purchased=remaining, days_left=10), TODAY)
        for remaining in (1, 5, 10, 11, 50, 100, 1000, 5000)
    ]
    assert weights == sorted(weights)


def test_small_daily_target_floors_at_priority():
    instance = make_instance(priority=2, purchased=3, delivered=0, days_left=30)
    assert compute_weight(instance, TODAY) == pytest.approx(2)


def test_missing_priority_defaults_to_three():
    instance = make_instance(priority=0, purchased=10, delivered=10)
    assert compute_weight(instance, TODAY) == pytest.approx(0.3)


def test_weight_never_below_minimum():
    instance = make_instance(priority=-5, purchased=10, delivered=10)
    assert compute_weight(instance, TODAY) == pytest.approx(0.1)


def test_days_until_end_has_floor_of_one():
    assert days_until_end(date(2026, 2, 1), TODAY) == 1
    assert days_until_end(TODAY, TODAY) == 1
    assert days_until_end("2026-03-11T00:00:00.000Z", TODAY) == 10


def test_no_instances_selects_nothing():
    assert select_package([], rng=random.Random(1), today=TODAY) is None


def test_single_instance_always_selected():
    only = make_instance(priority=1, purchased=10, delivered=10)
    rng = random.Random(7)
    assert all(select_package([only], rng=rng, today=TODAY) is only for _ in range(100))


def test_selection_walks_cumulative_weights():
    first = make_instance("a", priority=2, purchased=10, days_left=10)  # weight 2
    second = make_instance("b", priority=3, purchased=10, days_left=10)  # weight 3
    assert select_package([first, second], rng=FixedRandom(0.3), today=TODAY) is first
    assert select_package([first, second], rng=FixedRandom(0.4), today=TODAY) is first
    assert select_package([first, second], rng=FixedRandom(0.5), today=TODAY) is second
    assert select_package([first, second], rng=FixedRandom(0.99), today=TODAY) is second


def test_selection_frequencies_match_weights():
    instances = [
        make_instance("a", priority=1, purchased=100, days_left=10),  # 10
        make_instance("b", priority=2, purchased=100, days_left=10),  # 20
        make_instance("c", priority=5, purchased=80, days_left=4),  # 100
    ]
    weights = [compute_weight(i, TODAY) for i in instances]
    total = sum(weights)

    rng = random.Random(20240601)
    counts = {i.campaign_package_id: 0 for i in instances}
    for _ in range(DRAWS):
        counts[select_package(instances, rng=rng, today=TODAY).campaign_package_id] += 1

    chi_square = 0.0
    for instance, weight in zip(instances, weights):
        expected = DRAWS * weight / total
        observed = counts[instance.campaign_package_id]
        chi_square += (observed - expected) ** 2 / expected

    assert chi_square < CHI_SQUARE_CRITICAL


def test_over_delivered_package_still_eligible():
    exhausted = make_instance("done", priority=5, purchased=100, delivered=100)
    behind = make_instance("behind", priority=1, purchased=10, days_left=10)
    # weights: 0.5 and 1.0
    assert select_package([exhausted, behind], rng=FixedRandom(0.1), today=TODAY) is exhausted
