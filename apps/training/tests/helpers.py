from datetime import datetime, timezone as dt_timezone


def at(year, month, day, hour=0):
    return datetime(year, month, day, hour, tzinfo=dt_timezone.utc)
