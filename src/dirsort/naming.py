from datetime import datetime

DATE_FORMAT = "%Y-%m-%d"


def compute_name(original_name: str, prepend_date: bool, now: datetime) -> str:
    """
    Returns the name a file should have once it is organized.

    When `prepend_date` is set, the date of `now` is added in front of the
    original name, e.g. '2024-03-05_report.pdf'.
    """
    if not prepend_date:
        return original_name
    return f"{now.strftime(DATE_FORMAT)}_{original_name}"
