import math

from helmetwatch.records import is_emergency
from helmetwatch.settings import ALERTS_PER_PAGE

NO_REASON_TEXT = "No reason provided"


def filter_alerts(batch) -> list[dict]:
    return [record for record in (batch or []) if is_emergency(record)]


def total_pages_for(alert_count: int, page_size: int = ALERTS_PER_PAGE) -> int:
    return max(1, math.ceil(alert_count / page_size))


def paginate(alerts, page: int, page_size: int = ALERTS_PER_PAGE) -> dict:
    """
    Window the alert list for one page.

    A page past the end resets to page 1 rather than clamping to the last page.
    """
    alerts = list(alerts or [])
    total_pages = total_pages_for(len(alerts), page_size)
    if page > total_pages or page < 1:
        page = 1
    start = (page - 1) * page_size
    end = min(start + page_size, len(alerts))
    return {
        "items": alerts[start:end],
        "page": page,
        "total_pages": total_pages,
        "start": start,
        "end": end,
    }


def alert_reason(record) -> str:
    reason = record.get("reason") if isinstance(record, dict) else None
    if reason is None or reason == "":
        return NO_REASON_TEXT
    return str(reason)


def latest_emergency(alerts) -> dict | None:
    if not alerts:
        return None
    latest = alerts[0]
    return {"timestamp": latest.get("timestamp"), "reason": alert_reason(latest)}


def page_caption(window: dict, alert_count: int) -> str:
    if not alert_count:
        return "No emergency alerts in recent data."
    return f"Showing {window['start'] + 1}-{window['end']} of {alert_count}"


class AlertPager:
    """Current alert page, recomputed against each new alert list."""

    def __init__(self, page_size: int = ALERTS_PER_PAGE, page: int = 1):
        self.page_size = page_size
        self.page = page
        self.alerts: list[dict] = []
        self.total_pages = 1

    def recompute(self, alerts) -> dict:
        self.alerts = list(alerts or [])
        window = paginate(self.alerts, self.page, self.page_size)
        self.page = window["page"]
        self.total_pages = window["total_pages"]
        return window

    @property
    def window(self) -> dict:
        return paginate(self.alerts, self.page, self.page_size)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def next(self) -> int:
        if self.has_next:
            self.page += 1
        return self.page

    def previous(self) -> int:
        if self.has_previous:
            self.page -= 1
        return self.page
