"""
Upcoming event projection for BigDayBot.

Turns stored anchor dates (birthdays, anniversaries, closing dates) into
their next annual occurrence so agents know whom to reach out to.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple, Union

import logging

from agentdesk.adapters.base_adapter import Contact, UpcomingEvent

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_DAYS = 30

# (field, label) in projection order; child labels are filled per contact
ANCHOR_FIELDS: List[Tuple[str, str]] = [
    ('birthday', 'Birthday'),
    ('wedding_anniversary', 'Wedding Anniversary'),
    ('home_purchase_date', 'Home Anniversary'),
    ('move_in_date', 'Move-in Anniversary'),
    ('kid1_birthday', "{kid1_name}'s Birthday"),
    ('kid2_birthday', "{kid2_name}'s Birthday"),
    ('kid3_birthday', "{kid3_name}'s Birthday"),
    ('kid4_birthday', "{kid4_name}'s Birthday"),
]


def _event_label(contact: Contact, label: str) -> str:
    return label.format(
        kid1_name=contact.kid1_name or 'Child',
        kid2_name=contact.kid2_name or 'Child',
        kid3_name=contact.kid3_name or 'Child',
        kid4_name=contact.kid4_name or 'Child',
    )


def _parse_anchor(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value[:10], '%Y-%m-%d').date()
    except (TypeError, ValueError):
        return None


def occurrence_in_year(anchor: date, year: int) -> date:
    """Anchor month/day in the given year; Feb 29 rolls to Mar 1 off leap years."""
    try:
        return anchor.replace(year=year)
    except ValueError:
        return date(year, 3, 1)


def next_occurrence(anchor: date, today: date) -> date:
    """This year's occurrence, or next year's if it is already past."""
    occurrence = occurrence_in_year(anchor, today.year)
    if occurrence < today:
        occurrence = occurrence_in_year(anchor, today.year + 1)
    return occurrence


def project_upcoming_events(
    contacts: Iterable[Union[Contact, dict]],
    days: int = DEFAULT_HORIZON_DAYS,
    today: Optional[date] = None,
) -> List[UpcomingEvent]:
    """
    Project the anchor dates of active contacts into upcoming events.

    Args:
        contacts: Contacts (or stored contact rows)
        days: Horizon; events up to today + days are included
        today: Reference date (defaults to the current date)

    Returns:
        Events sorted ascending by date
    """
    today = today or date.today()
    end_date = today + timedelta(days=days)
    events = []

    for item in contacts:
        contact = item if isinstance(item, Contact) else Contact.from_dict(item)
        if not contact.is_active:
            continue

        for field_name, label in ANCHOR_FIELDS:
            value = getattr(contact, field_name)
            if not value:
                continue

            anchor = _parse_anchor(value)
            if anchor is None:
                logger.debug(f"Skipping unparseable {field_name} '{value}' for contact {contact.id}")
                continue

            event_date = next_occurrence(anchor, today)
            if event_date > end_date:
                continue

            years_since = None if 'birthday' in field_name else event_date.year - anchor.year
            events.append(UpcomingEvent(
                contact=contact,
                event_type=_event_label(contact, label),
                event_date=event_date,
                years_since=years_since,
            ))

    events.sort(key=lambda e: e.event_date)
    return events


def get_upcoming_events(db, agent_id: str, days: int = DEFAULT_HORIZON_DAYS,
                        today: Optional[date] = None) -> List[UpcomingEvent]:
    """Load an agent's contacts from the store and project their events."""
    return project_upcoming_events(db.get_contacts(agent_id), days=days, today=today)
