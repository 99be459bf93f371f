"""Shared constants and enumerations."""

TRADE_STATUSES = ["OPEN", "CLOSED"]
ORDER_TYPES = ["MARKET", "LIMIT"]
DIRECTIONS = ["Long", "Short"]

USER_ROLES = ["admin", "user"]
THEMES = ["light", "dark", "system"]
TABLE_DENSITIES = ["comfortable", "compact", "standard"]

BACKTEST_SORT_FIELDS = ["trade_date", "r_value", "created_at"]

# Holding-period bands: (exclusive upper bound in hours, label), tested in order
DURATION_BUCKETS: list[tuple[float, str]] = [
    (0.5, "0-30mins"),
    (24.0, "30mins-24hours"),
    (168.0, "1-7days"),
    (672.0, "1-4weeks"),
    (float("inf"), "4weeks+"),
]

RECENT_TRADES_LIMIT = 5
