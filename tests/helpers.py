from datetime import datetime, timedelta


def at(days, hour=10, minute=0):
    """Naive datetime ``days`` from today at the given time"""
    base = datetime.now().replace(hour=hour, minute=minute, second=0, microsecond=0)
    return base + timedelta(days=days)


def iso_day(days):
    return at(days).date().isoformat()
