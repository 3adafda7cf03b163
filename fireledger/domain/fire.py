"""FIRE (Financial Independence, Retire Early) projection.

The simulator grows a portfolio year by year (contribution first, then one year
of real return, rounded to the cent) until it reaches the FI number or the
60 year cap runs out.
"""

import math
from dataclasses import dataclass

from fireledger.domain.models import FireConfig, Goal, Money
from fireledger.domain.money import round_half_up

MAX_YEARS = 60


class InvalidFireConfigError(ValueError):
    """A FireConfig that cannot produce a meaningful projection."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid FIRE configuration: {field} {reason}")
        self.field = field
        self.reason = reason


@dataclass(frozen=True)
class YearValue:
    """Projected portfolio value at the end of a year."""

    year_index: int
    value_cents: Money


@dataclass(frozen=True)
class FireProjection:
    """Immutable FIRE projection result."""

    target_cents: float
    years_to_fi: int | None
    yearly_values: list[YearValue]


def validate_fire_config(config: FireConfig) -> None:
    """Check that a FireConfig can be simulated.

    Raises:
        InvalidFireConfigError: If the withdrawal rate is not positive, the
            return rate wipes out the portfolio, or a rate is not finite.
    """
    swr = config.safe_withdrawal_rate_percent
    rate = config.expected_real_return_percent

    if not math.isfinite(swr):
        raise InvalidFireConfigError("safe_withdrawal_rate_percent", "must be a finite number")
    if swr <= 0:
        raise InvalidFireConfigError("safe_withdrawal_rate_percent", f"must be greater than 0 (got {swr})")
    if not math.isfinite(rate):
        raise InvalidFireConfigError("expected_real_return_percent", "must be a finite number")
    if rate <= -100:
        raise InvalidFireConfigError("expected_real_return_percent", f"must be greater than -100 (got {rate})")


def fi_target(annual_spend_cents: Money, safe_withdrawal_rate_percent: float) -> float:
    """Calculate the FI number in cents.

    Multiplies by 100 before dividing by the percentage rate.

    Raises:
        InvalidFireConfigError: If the withdrawal rate is zero or negative.
    """
    if safe_withdrawal_rate_percent <= 0:
        raise InvalidFireConfigError(
            "safe_withdrawal_rate_percent",
            f"must be greater than 0 (got {safe_withdrawal_rate_percent})",
        )
    return annual_spend_cents * 100 / safe_withdrawal_rate_percent


def simulate_fire(config: FireConfig) -> FireProjection:
    """Project the portfolio until it reaches the FI number.

    A portfolio that already meets the target gives years_to_fi == 0 and no
    yearly values.

    Args:
        config: FIRE settings.

    Returns:
        FireProjection with years_to_fi (None if the cap was hit) and one
        YearValue per simulated year.

    Raises:
        InvalidFireConfigError: If the configuration fails validation.
    """
    validate_fire_config(config)

    target = fi_target(config.annual_spend_cents, config.safe_withdrawal_rate_percent)
    yearly_contribution = config.monthly_contribution_cents * 12
    growth = 1 + config.expected_real_return_percent / 100

    yearly_values: list[YearValue] = []
    current = config.current_portfolio_cents
    years = 0

    while current < target and years < MAX_YEARS:
        current += yearly_contribution
        current = round_half_up(current * growth)
        years += 1
        yearly_values.append(YearValue(year_index=years, value_cents=Money(current)))

    return FireProjection(
        target_cents=target,
        years_to_fi=years if current >= target else None,
        yearly_values=yearly_values,
    )


def projection_milestones(projection: FireProjection) -> list[YearValue]:
    """Pick the rows worth showing: year 1, every 5th year and the FI year."""
    return [
        v
        for v in projection.yearly_values
        if v.year_index == 1 or v.year_index % 5 == 0 or v.year_index == projection.years_to_fi
    ]


def goal_progress_percent(goal: Goal) -> int:
    """Calculate goal completion, capped at 100.

    A zero target is treated as a target of one cent.
    """
    target = goal.target_cents or 1
    return min(100, round_half_up(goal.current_cents / target * 100))
