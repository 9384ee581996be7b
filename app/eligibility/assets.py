"""Asset risk classifier.

Checks home and vehicle equity against the exemption caps and the
valuable-items answer. Households larger than one use the joint caps.
Equity exactly at a cap is protected.

The outcome's ``passed`` means no asset risk, the negation of the
``asset_risk`` flag reported in the evaluation result.
"""

from decimal import Decimal
from typing import Optional

from app.eligibility.models import ClassifierOutcome, money
from app.eligibility.thresholds import ThresholdTable

NAME = "asset"


def classify_assets(
    home_equity: Optional[Decimal],
    vehicle_equity: Decimal,
    has_valuable_assets: bool,
    household_size: int,
    table: ThresholdTable,
) -> ClassifierOutcome:
    """Flag non-exempt asset risk.

    Args:
        home_equity: Equity in the primary residence, or None when no home is owned
        vehicle_equity: Combined equity across all vehicles
        has_valuable_assets: Owns items above the valuable-asset floor
        household_size: Number of people in the household (>= 1)
        table: Resolved threshold table
    """
    joint = household_size > 1
    homestead_cap = table.homestead_exemption.for_household(household_size)
    vehicle_cap = table.vehicle_exemption.for_household(household_size)

    vehicle = money(vehicle_equity)
    owns_home = home_equity is not None
    home = money(home_equity) if owns_home else None

    home_protected = home is None or home <= homestead_cap
    vehicle_protected = vehicle <= vehicle_cap
    asset_risk = not home_protected or not vehicle_protected or has_valuable_assets

    metrics = {
        "homestead_exemption": homestead_cap,
        "vehicle_equity": vehicle,
        "vehicle_exemption": vehicle_cap,
        "valuable_asset_floor": table.valuable_asset_floor,
    }
    if home is not None:
        metrics["home_equity"] = home

    if asset_risk:
        exposed = []
        if not home_protected:
            exposed.append("home equity")
        if not vehicle_protected:
            exposed.append("vehicle equity")
        if has_valuable_assets:
            exposed.append("valuable personal property")
        reason = "Potential non-exempt asset risk: " + ", ".join(exposed)
    else:
        reason = "All key assets appear protected"

    return ClassifierOutcome(
        name=NAME,
        passed=not asset_risk,
        reason=reason,
        metrics=metrics,
        indicators={
            "joint_exemptions": joint,
            "owns_home": owns_home,
            "home_protected": home_protected,
            "vehicle_protected": vehicle_protected,
            "has_valuable_assets": has_valuable_assets,
        },
    )
