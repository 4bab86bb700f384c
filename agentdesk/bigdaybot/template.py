"""
CSV template and export for BigDayBot contacts.
"""

import csv
import io
import re
from typing import Iterable, Union

from agentdesk.adapters.base_adapter import Contact
from agentdesk.bigdaybot.column_map import CSV_TEMPLATE_HEADERS

_LINE_BREAKS = re.compile(r'\r\n|\r|\n')

TEMPLATE_EXAMPLE_ROW = {
    'first_name': 'John',
    'last_name': 'Smith',
    'email': 'john@example.com',
    'phone': '555-123-4567',
    'birthday': '03/15/1985',
    'wedding_anniversary': '06/20/2010',
    'home_purchase_date': '09/01/2022',
    'move_in_date': '09/15/2022',
    'property_address': '123 Main St',
    'property_city': 'Austin',
    'property_state': 'TX',
    'property_zip': '78701',
    'kid1_name': 'Emma',
    'kid1_birthday': '04/22/2015',
    'kid2_name': 'Liam',
    'kid2_birthday': '07/08/2018',
    'notes': 'Referred by Jane Doe',
}


def generate_csv_template() -> str:
    """Header row plus one example row, for agents to fill in."""
    example = [TEMPLATE_EXAMPLE_ROW.get(h, '') for h in CSV_TEMPLATE_HEADERS]
    return ','.join(CSV_TEMPLATE_HEADERS) + '\n' + ','.join(example)


def _single_line(value) -> str:
    # parse_csv splits lines before tokenizing, so cells must not span lines
    if not value:
        return ''
    return _LINE_BREAKS.sub(' ', str(value))


def contacts_to_csv(contacts: Iterable[Union[Contact, dict]]) -> str:
    """
    Export contacts using the canonical headers.

    The output re-imports to the same records (None becomes an empty cell).
    Line breaks inside a value are written as spaces.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(CSV_TEMPLATE_HEADERS)

    for contact in contacts:
        data = contact.to_dict() if isinstance(contact, Contact) else contact
        writer.writerow([_single_line(data.get(h)) for h in CSV_TEMPLATE_HEADERS])

    return buffer.getvalue()
