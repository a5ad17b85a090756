"""JSON serialization of TCO results and chart series.

JSON has no Infinity or NaN, and the engine returns both for degenerate
inputs. Non-finite numbers are written as null and their dotted paths are
listed under "non_finite" so clients can show "N/A".
"""

import math
from typing import Any

from packages.drive_catalog.records import DriveRecord
from packages.tco_engine.calculator import (
    CostBreakdown,
    TCOResults,
    build_monthly_breakdown,
    project_costs,
)


def sanitize_numbers(data: Any, path: str = "", non_finite: list[str] | None = None) -> Any:
    """
    Replace non-finite floats in nested dicts/lists with None.

    Args:
        data: Nested structure of dicts, lists and scalars
        path: Dotted path of data within the enclosing document
        non_finite: List collecting the paths of replaced values

    Returns:
        Copy of data that json can encode strictly
    """
    if non_finite is None:
        non_finite = []

    if isinstance(data, dict):
        return {
            key: sanitize_numbers(value, f"{path}.{key}" if path else str(key), non_finite)
            for key, value in data.items()
        }

    if isinstance(data, (list, tuple)):
        return [
            sanitize_numbers(value, f"{path}[{index}]", non_finite)
            for index, value in enumerate(data)
        ]

    if isinstance(data, float) and not math.isfinite(data):
        non_finite.append(path)
        return None

    return data


def serialize_results(drive: DriveRecord, results: TCOResults) -> dict[str, Any]:
    """Serialize one drive's TCO results with its monthly cost breakdown."""
    non_finite: list[str] = []
    document = sanitize_numbers(
        {
            "drive": drive.to_dict(),
            "results": results.to_dict(),
            "monthly_breakdown": serialize_breakdown(build_monthly_breakdown(results)),
        },
        non_finite=non_finite,
    )
    document["non_finite"] = non_finite
    return document


def serialize_breakdown(breakdown: CostBreakdown) -> dict[str, Any]:
    return {
        "items": [
            {
                "category": item.category,
                "description": item.description,
                "amount": item.amount,
                "unit": item.unit,
            }
            for item in breakdown.items
        ],
        "total": breakdown.total,
        "currency": breakdown.currency,
    }


def build_chart_data(
    results: list[tuple[DriveRecord, TCOResults]],
    depreciation_years: float,
) -> dict[str, Any]:
    """
    Build stacked bar series for cost per effective TB and drive performance.

    Args:
        results: (drive, results) pairs, one bar per drive
        depreciation_years: Horizon for the "total" chart

    Returns:
        Dict with a "cost_per_tbe" chart per horizon (monthly, yearly, total),
        each holding CapEx and OpEx series, and "performance" series for
        IOPS, bandwidth and endurance. Missing metrics stay None.
    """
    categories = [drive.model for drive, _ in results]
    projections = [project_costs(tco, depreciation_years) for _, tco in results]

    cost_charts = {}
    for horizon in ("monthly", "yearly", "total"):
        series = []
        for category in ("CapEx", "OpEx"):
            series.append(
                {
                    "name": f"{horizon.capitalize()} {category}/TBe",
                    "data": [
                        _item_amount(projection[horizon], category) for projection in projections
                    ],
                }
            )
        cost_charts[horizon] = {"categories": categories, "series": series}

    performance = {
        "iops": {
            "categories": ["QD1 IOPS", "Max Random Read IOPS"],
            "series": [
                {"name": drive.model, "data": [drive.iops_qd1, drive.iops_max_random_read]}
                for drive, _ in results
            ],
        },
        "bandwidth": {
            "categories": ["Sequential Read", "Sequential Write"],
            "series": [
                {
                    "name": drive.model,
                    "data": [drive.bandwidth_sequential_read, drive.bandwidth_sequential_write],
                }
                for drive, _ in results
            ],
        },
        "endurance": {
            "categories": ["Endurance (TBW)"],
            "series": [
                {"name": drive.model, "data": [drive.endurance_tbw]} for drive, _ in results
            ],
        },
    }

    non_finite: list[str] = []
    document = sanitize_numbers(
        {"cost_per_tbe": cost_charts, "performance": performance}, non_finite=non_finite
    )
    document["non_finite"] = non_finite
    return document


def _item_amount(breakdown: CostBreakdown, category: str) -> float:
    for item in breakdown.items:
        if item.category == category:
            return item.amount
    raise KeyError(category)
