"""
Urgency tiers and reminder text.
"""
import enum
from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

DateLike = Union[date, datetime]


class UrgencyTier(str, enum.Enum):
    """Urgency tier enumeration."""
    DUE_TODAY = "due_today"
    TOMORROW = "tomorrow"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class Urgency:
    days: int
    tier: UrgencyTier
    label: str


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_until(next_service_date: DateLike, today: DateLike) -> int:
    """Whole calendar days from ``today`` to ``next_service_date``."""
    return (_as_date(next_service_date) - _as_date(today)).days


def classify(days: int) -> Urgency:
    """Map days until service to its urgency tier. Past due dates have none."""
    if days == 0:
        return Urgency(days, UrgencyTier.DUE_TODAY, "DUE TODAY")
    if days == 1:
        return Urgency(days, UrgencyTier.TOMORROW, "due in 1 day (TOMORROW)")
    if days >= 2:
        return Urgency(days, UrgencyTier.UPCOMING, f"due in {days} days")
    raise ValueError(f"No urgency tier for {days} days until service")


def render_subject(customer, urgency: Urgency) -> str:
    return f"RO Service {urgency.label} - {customer.name}"


def render_message(customer, record, urgency: Urgency) -> str:
    """Build the reminder body shared by SMS and email."""
    lines = [
        urgency.label,
        "",
        "RO Service Reminder",
        "",
        "Customer Details:",
        "--------------------",
        f"Name: {customer.name}",
        f"Phone: {customer.phone}",
        f"Model: {customer.model}",
        f"Address: {customer.address or 'N/A'}",
        "",
        f"Service Due: {_as_date(record.next_service_date):%d/%m/%Y}",
        f"Days Remaining: {urgency.days} day{'' if urgency.days == 1 else 's'}",
    ]

    if record.priority_parts:
        lines += ["", "Priority Parts:"]
        lines += [f"   • {p.get('part', '')}: {p.get('care', '')}" for p in record.priority_parts]

    if record.notes:
        lines += ["", f"Notes: {record.notes}"]

    lines += ["", "Please schedule the service appointment."]
    return "\n".join(lines)
