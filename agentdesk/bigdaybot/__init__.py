"""
BigDayBot - client milestone reminders

CSV contact import plus projection of upcoming birthdays and anniversaries.
"""

from agentdesk.bigdaybot.csv_parser import parse_csv, parse_csv_line
from agentdesk.bigdaybot.dates import normalize_date
from agentdesk.bigdaybot.column_map import ContactField, resolve_column, row_to_contact
from agentdesk.bigdaybot.importer import ContactCSVImporter, ImportResult, import_contacts_from_csv
from agentdesk.bigdaybot.events import project_upcoming_events, get_upcoming_events
from agentdesk.bigdaybot.template import generate_csv_template, contacts_to_csv

__all__ = [
    "parse_csv",
    "parse_csv_line",
    "normalize_date",
    "ContactField",
    "resolve_column",
    "row_to_contact",
    "ContactCSVImporter",
    "ImportResult",
    "import_contacts_from_csv",
    "project_upcoming_events",
    "get_upcoming_events",
    "generate_csv_template",
    "contacts_to_csv",
]
