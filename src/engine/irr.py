"""IRR computation using scipy's Newton-Raphson solver.

Pure functions. No I/O.
"""

import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from scipy.optimize import newton

from src.config import settings
from src.models.results import IRRResult, IRRStatus

logger = logging.getLogger(__name__)

SIX_PLACES = Decimal("0.000001")
TOTAL_LOSS_RATE = Decimal("-1")


def holding_period_cash_flows(
    entry_value: Decimal, exit_value: Decimal, periods: int
) -> list[Decimal]:
    """Outflow at period 0, zeros in between, inflow at the last period.

    periods=10 gives an eleven-point vector.
    """
    if periods < 1:
        raise ValueError(f"periods must be >= 1, got {periods}")
    return [-entry_value] + [Decimal("0")] * (periods - 1) + [exit_value]


def solve_irr(cash_flows: Sequence[Decimal]) -> IRRResult:
    """Find r such that sum(CF[t] / (1 + r) ** t) == 0.

    cash_flows[0] should be negative (initial investment).
    cash_flows[-1] should be the terminal value.

    Never raises. Degenerate inputs, NaN flows included, give UNDEFINED.
    A final value at or below 1% of the outflow gives TOTAL_LOSS at exactly
    -100%. A Newton run that does not settle gives NOT_CONVERGED with its
    last guess.
    """
    if not cash_flows or len(cash_flows) < 2:
        return IRRResult(status=IRRStatus.UNDEFINED)

    flows = [cf if isinstance(cf, Decimal) else Decimal(str(cf)) for cf in cash_flows]
    if any(cf.is_nan() for cf in flows):
        return IRRResult(status=IRRStatus.UNDEFINED)

    initial_investment = -flows[0]
    final_value = flows[-1]

    if initial_investment <= 0:
        return IRRResult(status=IRRStatus.UNDEFINED)

    # Newton is unstable near a root at -100%, so pin total losses
    if final_value <= initial_investment * settings.irr_total_loss_threshold:
        return IRRResult(status=IRRStatus.TOTAL_LOSS, rate=TOTAL_LOSS_RATE)

    # Convert to float for scipy
    cf_float = [float(cf) for cf in flows]

    def npv(rate: float) -> float:
        return sum(cf / (1 + rate) ** t for t, cf in enumerate(cf_float))

    def npv_prime(rate: float) -> float:
        return sum(-t * cf / (1 + rate) ** (t + 1) for t, cf in enumerate(cf_float) if t > 0)

    try:
        root, info = newton(
            npv,
            settings.irr_initial_guess,
            fprime=npv_prime,
            tol=settings.irr_tolerance,
            maxiter=settings.irr_max_iterations,
            full_output=True,
            disp=False,
        )
    except (ZeroDivisionError, OverflowError) as e:
        logger.warning("IRR iteration broke down for %s: %s", cf_float, e)
        return IRRResult(status=IRRStatus.NOT_CONVERGED)

    root = float(root)
    if not math.isfinite(root):
        logger.warning("IRR diverged for %s", cf_float)
        return IRRResult(status=IRRStatus.NOT_CONVERGED, iterations=info.iterations)

    if not info.converged:
        logger.warning(
            "IRR did not converge after %d iterations (last guess %s)", info.iterations, root
        )
        return IRRResult(
            status=IRRStatus.NOT_CONVERGED, rate=Decimal(str(root)), iterations=info.iterations
        )

    rate = Decimal(str(root)).quantize(SIX_PLACES, ROUND_HALF_UP)
    return IRRResult(status=IRRStatus.CONVERGED, rate=rate, iterations=info.iterations)


def compute_irr(cash_flows: Sequence[Decimal]) -> Decimal | None:
    """IRR as a fraction, or None when it is undefined or unreliable."""
    result = solve_irr(cash_flows)
    return result.rate if result.is_reliable else None
