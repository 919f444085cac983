"""
Chart data normalization.

Turns raw upstream OHLC records into a sorted, size-capped series of
ChartDataPoint and computes summary statistics for it. Pure functions.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Optional

from dateutil import parser as date_parser

from app.domain.markets.entities import ChartDataPoint, ChartStats

logger = logging.getLogger(__name__)

INTRADAY_MAX_POINTS = 200
DEFAULT_MAX_POINTS = 300
MAX_POINTS_BY_DAYS = {1: 100, 7: 150, 30: 200, 90: 250}

TIMEFRAME_LABELS = {
    1: "1 day (extended)",
    7: "1 week (extended)",
    30: "1 month (extended)",
}
DEFAULT_TIMEFRAME_LABEL = "3 months (extended)"

SECONDS_PER_DAY = 24 * 60 * 60


def max_points_for(days: int, is_intraday: bool) -> int:
    """Return the point budget for a timeframe."""
    if is_intraday:
        return INTRADAY_MAX_POINTS
    return MAX_POINTS_BY_DAYS.get(days, DEFAULT_MAX_POINTS)


def timeframe_label(days: int) -> str:
    return TIMEFRAME_LABELS.get(days, DEFAULT_TIMEFRAME_LABEL)


def parse_record_date(value: Any) -> Optional[datetime]:
    """Parse an upstream date string ("2024-01-01" or "2024-01-01 15:30:00").

    Naive values are taken as UTC. Returns None for anything unparsable.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = date_parser.isoparse(value.strip().replace(" ", "T", 1))
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_number(value: Any) -> Optional[float]:
    """Coerce an upstream numeric field, rejecting blanks, NaN and infinities."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _record_price(record: dict) -> Optional[float]:
    # `close` wins; a missing or zero close falls back to `price`.
    for key in ("close", "price"):
        number = to_number(record.get(key))
        if number:
            return number
    return None


def _format_time(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def _format_day(moment: datetime) -> str:
    return f"{moment.strftime('%b')} {moment.day}"


def _format_full(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {suffix}"
    )


def to_chart_point(record: dict, is_intraday: bool) -> Optional[ChartDataPoint]:
    """Convert one raw record, or return None if it is unusable."""
    if not isinstance(record, dict):
        return None
    moment = parse_record_date(record.get("date"))
    price = _record_price(record)
    if moment is None or price is None:
        return None

    timestamp = int(moment.timestamp())
    if timestamp <= 0:
        return None

    return ChartDataPoint(
        timestamp=timestamp,
        date=record["date"],
        price=price,
        open=to_number(record.get("open")) or price,
        high=to_number(record.get("high")) or price,
        low=to_number(record.get("low")) or price,
        close=price,
        volume=to_number(record.get("volume")) or 0,
        time_format=_format_time(moment) if is_intraday else _format_day(moment),
        full_date=_format_full(moment),
    )


def downsample(points: list[ChartDataPoint], max_points: int) -> list[ChartDataPoint]:
    """Keep every step-th point so the result fits within max_points."""
    if len(points) <= max_points:
        return points
    step = math.ceil(len(points) / max_points)
    return [point for index, point in enumerate(points) if index % step == 0]


def normalize_series(
    records: list[dict], days: int, is_intraday: bool = False
) -> list[ChartDataPoint]:
    """Validate, sort ascending by timestamp and down-sample raw records.

    Args:
        records: Raw upstream OHLC records in any order.
        days: Requested timeframe in days; selects the point budget.
        is_intraday: Whether records carry intraday timestamps.

    Returns:
        Chronologically sorted points, at most the timeframe's budget.
    """
    points = [
        point
        for point in (to_chart_point(record, is_intraday) for record in records)
        if point is not None
    ]
    points.sort(key=lambda point: point.timestamp)

    max_points = max_points_for(days, is_intraday)
    sampled = downsample(points, max_points)
    if len(sampled) != len(points):
        logger.debug("Sampled %d points from %d total", len(sampled), len(points))
    return sampled


def _round_price(value: float, adaptive: bool) -> float:
    return round(value, 6 if adaptive and value < 1 else 2)


def compute_stats(
    points: list[ChartDataPoint],
    *,
    original_count: int,
    requested_days: int,
    is_intraday: bool,
    cached: bool,
    source: str,
    symbol: str,
    adaptive_precision: bool = False,
) -> ChartStats:
    """Summarize a non-empty normalized series.

    With `adaptive_precision`, values below 1 keep six decimals instead of
    two (sub-dollar coins).
    """
    prices = [point.price for point in points]
    oldest, newest = points[0], points[-1]
    return ChartStats(
        min=_round_price(min(prices), adaptive_precision),
        max=_round_price(max(prices), adaptive_precision),
        avg=_round_price(sum(prices) / len(prices), adaptive_precision),
        count=len(points),
        original_count=original_count,
        actual_days_range=math.ceil(
            (newest.timestamp - oldest.timestamp) / SECONDS_PER_DAY
        ),
        requested_days=requested_days,
        interval="hourly/intraday" if is_intraday else "daily",
        timeframe=timeframe_label(requested_days),
        cached=cached,
        source=source,
        symbol=symbol,
        is_intraday=is_intraday,
        date_from=oldest.full_date,
        date_to=newest.full_date,
    )
