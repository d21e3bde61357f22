from datetime import date, datetime
from typing import Optional, Union


def format_minutes(minutes: int) -> str:
    """
    Renders a minute count as "{H}h {M}m", "{H}h" or "{M}m".
    Zero renders as "0m".
    """
    hours, mins = divmod(int(minutes), 60)
    if hours > 0 and mins > 0:
        return f"{hours}h {mins}m"
    if hours > 0:
        return f"{hours}h"
    return f"{mins}m"


def format_locale_date(value: Optional[Union[date, datetime]]) -> str:
    """
    en-US short date (M/D/YYYY), empty string when absent.
    """
    if value is None:
        return ""
    return f"{value.month}/{value.day}/{value.year}"
