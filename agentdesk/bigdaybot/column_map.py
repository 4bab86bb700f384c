"""
CSV column mapping for BigDayBot contacts.

Maps the header names agents actually use ("DOB", "Closing Date",
"Child1 Name", ...) onto canonical contact fields.
"""

from enum import Enum
from typing import Dict, Optional

from agentdesk.adapters.base_adapter import Contact
from agentdesk.bigdaybot.dates import normalize_date


class ContactField(str, Enum):
    """Canonical contact fields a CSV column can populate."""
    FIRST_NAME = 'first_name'
    LAST_NAME = 'last_name'
    EMAIL = 'email'
    PHONE = 'phone'
    BIRTHDAY = 'birthday'
    WEDDING_ANNIVERSARY = 'wedding_anniversary'
    HOME_PURCHASE_DATE = 'home_purchase_date'
    MOVE_IN_DATE = 'move_in_date'
    PROPERTY_ADDRESS = 'property_address'
    PROPERTY_CITY = 'property_city'
    PROPERTY_STATE = 'property_state'
    PROPERTY_ZIP = 'property_zip'
    KID1_NAME = 'kid1_name'
    KID1_BIRTHDAY = 'kid1_birthday'
    KID2_NAME = 'kid2_name'
    KID2_BIRTHDAY = 'kid2_birthday'
    KID3_NAME = 'kid3_name'
    KID3_BIRTHDAY = 'kid3_birthday'
    KID4_NAME = 'kid4_name'
    KID4_BIRTHDAY = 'kid4_birthday'
    NOTES = 'notes'


# Fields whose values go through the date normalizer
DATE_FIELDS = frozenset(
    f for f in ContactField
    if 'birthday' in f.value or 'anniversary' in f.value or 'date' in f.value
)

# Documented header order for templates and exports
CSV_TEMPLATE_HEADERS = [f.value for f in ContactField]

# Lower-cased header alias -> canonical field
COLUMN_ALIASES: Dict[str, ContactField] = {
    'first_name': ContactField.FIRST_NAME,
    'firstname': ContactField.FIRST_NAME,
    'first name': ContactField.FIRST_NAME,
    'last_name': ContactField.LAST_NAME,
    'lastname': ContactField.LAST_NAME,
    'last name': ContactField.LAST_NAME,
    'email': ContactField.EMAIL,
    'email address': ContactField.EMAIL,
    'phone': ContactField.PHONE,
    'phone number': ContactField.PHONE,
    'mobile': ContactField.PHONE,
    'birthday': ContactField.BIRTHDAY,
    'birth date': ContactField.BIRTHDAY,
    'birthdate': ContactField.BIRTHDAY,
    'dob': ContactField.BIRTHDAY,
    'wedding_anniversary': ContactField.WEDDING_ANNIVERSARY,
    'wedding anniversary': ContactField.WEDDING_ANNIVERSARY,
    'anniversary': ContactField.WEDDING_ANNIVERSARY,
    'wedding date': ContactField.WEDDING_ANNIVERSARY,
    'home_purchase_date': ContactField.HOME_PURCHASE_DATE,
    'home purchase date': ContactField.HOME_PURCHASE_DATE,
    'purchase date': ContactField.HOME_PURCHASE_DATE,
    'closing date': ContactField.HOME_PURCHASE_DATE,
    'close_date': ContactField.HOME_PURCHASE_DATE,
    'move_in_date': ContactField.MOVE_IN_DATE,
    'move in date': ContactField.MOVE_IN_DATE,
    'move-in date': ContactField.MOVE_IN_DATE,
    'movein': ContactField.MOVE_IN_DATE,
    'property_address': ContactField.PROPERTY_ADDRESS,
    'property address': ContactField.PROPERTY_ADDRESS,
    'address': ContactField.PROPERTY_ADDRESS,
    'property_city': ContactField.PROPERTY_CITY,
    'property city': ContactField.PROPERTY_CITY,
    'city': ContactField.PROPERTY_CITY,
    'property_state': ContactField.PROPERTY_STATE,
    'property state': ContactField.PROPERTY_STATE,
    'state': ContactField.PROPERTY_STATE,
    'property_zip': ContactField.PROPERTY_ZIP,
    'property zip': ContactField.PROPERTY_ZIP,
    'zip': ContactField.PROPERTY_ZIP,
    'zipcode': ContactField.PROPERTY_ZIP,
    'kid1_name': ContactField.KID1_NAME,
    'kid1 name': ContactField.KID1_NAME,
    'child1 name': ContactField.KID1_NAME,
    'kid1_birthday': ContactField.KID1_BIRTHDAY,
    'kid1 birthday': ContactField.KID1_BIRTHDAY,
    'child1 birthday': ContactField.KID1_BIRTHDAY,
    'kid2_name': ContactField.KID2_NAME,
    'kid2 name': ContactField.KID2_NAME,
    'child2 name': ContactField.KID2_NAME,
    'kid2_birthday': ContactField.KID2_BIRTHDAY,
    'kid2 birthday': ContactField.KID2_BIRTHDAY,
    'child2 birthday': ContactField.KID2_BIRTHDAY,
    'kid3_name': ContactField.KID3_NAME,
    'kid3 name': ContactField.KID3_NAME,
    'kid3_birthday': ContactField.KID3_BIRTHDAY,
    'kid3 birthday': ContactField.KID3_BIRTHDAY,
    'kid4_name': ContactField.KID4_NAME,
    'kid4 name': ContactField.KID4_NAME,
    'kid4_birthday': ContactField.KID4_BIRTHDAY,
    'kid4 birthday': ContactField.KID4_BIRTHDAY,
    'notes': ContactField.NOTES,
}


def resolve_column(header: str) -> Optional[ContactField]:
    """Resolve a CSV header to its canonical field (case-insensitive)."""
    if not header:
        return None
    return COLUMN_ALIASES.get(header.lower().strip())


class ContactBuilder:
    """
    Accumulates CSV values into a Contact.

    Each canonical field has an explicit branch in ``set`` so that only
    known attributes can ever be assigned.
    """

    def __init__(self, agent_id: str, import_batch_id: Optional[str] = None,
                 import_source: str = 'csv'):
        self.agent_id = agent_id
        self.import_batch_id = import_batch_id
        self.import_source = import_source
        self._values: Dict[ContactField, str] = {}

    def set(self, field: ContactField, raw_value: Optional[str]) -> None:
        """Assign one column value; blank values and bad dates are ignored."""
        if not raw_value:
            return

        if field in DATE_FIELDS:
            value = normalize_date(raw_value)
            if value is None:
                return
        else:
            value = raw_value.strip()

        self._values[field] = value

    def build(self) -> Optional[Contact]:
        """Return the contact, or None when first_name is missing."""
        first_name = self._values.get(ContactField.FIRST_NAME, '')
        if not first_name.strip():
            return None

        get = self._values.get
        return Contact(
            agent_id=self.agent_id,
            first_name=first_name,
            last_name=get(ContactField.LAST_NAME),
            email=get(ContactField.EMAIL),
            phone=get(ContactField.PHONE),
            birthday=get(ContactField.BIRTHDAY),
            wedding_anniversary=get(ContactField.WEDDING_ANNIVERSARY),
            home_purchase_date=get(ContactField.HOME_PURCHASE_DATE),
            move_in_date=get(ContactField.MOVE_IN_DATE),
            property_address=get(ContactField.PROPERTY_ADDRESS),
            property_city=get(ContactField.PROPERTY_CITY),
            property_state=get(ContactField.PROPERTY_STATE),
            property_zip=get(ContactField.PROPERTY_ZIP),
            kid1_name=get(ContactField.KID1_NAME),
            kid1_birthday=get(ContactField.KID1_BIRTHDAY),
            kid2_name=get(ContactField.KID2_NAME),
            kid2_birthday=get(ContactField.KID2_BIRTHDAY),
            kid3_name=get(ContactField.KID3_NAME),
            kid3_birthday=get(ContactField.KID3_BIRTHDAY),
            kid4_name=get(ContactField.KID4_NAME),
            kid4_birthday=get(ContactField.KID4_BIRTHDAY),
            notes=get(ContactField.NOTES),
            import_source=self.import_source,
            import_batch_id=self.import_batch_id,
        )


def row_to_contact(row: Dict[str, str], agent_id: str,
                   import_batch_id: Optional[str] = None) -> Optional[Contact]:
    """
    Convert one parsed CSV row into a Contact.

    Unrecognized columns are dropped. Returns None if the row has no
    first name.
    """
    builder = ContactBuilder(agent_id, import_batch_id)
    for header, value in row.items():
        field = resolve_column(header)
        if field is not None:
            builder.set(field, value)
    return builder.build()
