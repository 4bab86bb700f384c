"""
AgentDesk CLI entry point.

Usage:
    python -m agentdesk import-contacts FILE --agent ID   Import a contact CSV
    python -m agentdesk template [-o FILE]                Write the CSV template
    python -m agentdesk contacts --agent ID [--csv]       List (or export) contacts
    python -m agentdesk upcoming --agent ID [--days N]    Upcoming birthdays/anniversaries
    python -m agentdesk mls-search [filters]              Search MLS listings
    python -m agentdesk mls-import KEY... --agent ID      Import listings by key
    python -m agentdesk serve [--host H] [--port P]       Run the HTTP API
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from agentdesk.adapters.base_adapter import ListingSearch
from agentdesk.bigdaybot.events import DEFAULT_HORIZON_DAYS, get_upcoming_events
from agentdesk.bigdaybot.importer import import_contacts_from_csv
from agentdesk.bigdaybot.template import contacts_to_csv, generate_csv_template
from agentdesk.core.database import AgentDeskDatabase
from agentdesk.mls.exceptions import MLSError
from agentdesk.mls.factory import PROVIDERS, select_listing_client
from agentdesk.mls.importer import ListingImporter
from agentdesk.utils.config import get_db_path, load_config
from agentdesk.utils.logging import setup_logging_from_config

logger = logging.getLogger(__name__)


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_import_contacts(args, config) -> int:
    """Import contacts from a CSV file."""
    csv_text = Path(args.file).read_text(encoding='utf-8-sig')
    db = AgentDeskDatabase(get_db_path(config))

    result = import_contacts_from_csv(csv_text, args.agent, db)
    _print_json(result.to_dict())
    return 0 if result.success else 1


def cmd_template(args, config) -> int:
    """Write the CSV import template to stdout or a file."""
    template = generate_csv_template()
    if args.output:
        Path(args.output).write_text(template + '\n')
        print(f"Template written to {args.output}")
    else:
        print(template)
    return 0


def cmd_contacts(args, config) -> int:
    """List an agent's contacts as JSON or CSV."""
    db = AgentDeskDatabase(get_db_path(config))
    contacts = db.get_contacts(args.agent)

    if args.csv:
        sys.stdout.write(contacts_to_csv(contacts))
    else:
        _print_json({'contacts': contacts, 'total': len(contacts)})
    return 0


def cmd_upcoming(args, config) -> int:
    """Show upcoming events for an agent."""
    db = AgentDeskDatabase(get_db_path(config))
    events = get_upcoming_events(db, args.agent, days=args.days)
    _print_json([e.to_dict() for e in events])
    return 0


def cmd_mls_search(args, config) -> int:
    """Search MLS listings and print normalized results."""
    selection = select_listing_client(provider=args.provider, config=config)
    if selection.is_demo:
        print(f"Using {selection.provider} demo credentials", file=sys.stderr)

    search = ListingSearch(
        query=args.query,
        statuses=args.status or ['Active'],
        property_types=args.type or [],
        min_price=args.min_price,
        max_price=args.max_price,
        min_beds=args.min_beds,
        min_baths=args.min_baths,
        cities=args.city or [],
        postal_codes=args.zip or [],
        state=args.state,
        limit=args.limit,
    )

    try:
        properties = selection.client.search(search)
    except MLSError as e:
        logger.error(f"MLS search failed: {e}")
        return 1

    _print_json([p.to_dict(include_raw=False) for p in properties])
    return 0


def cmd_mls_import(args, config) -> int:
    """Import listings by provider key into an agent's properties."""
    selection = select_listing_client(provider=args.provider, config=config)
    db = AgentDeskDatabase(get_db_path(config))

    result = ListingImporter(db, selection.client).import_by_keys(args.agent, args.keys)
    _print_json(result.to_dict())
    return 0 if (result.imported or result.skipped) else 1


def cmd_serve(args, config) -> int:
    """Run the Flask API."""
    from agentdesk.api.app import create_app

    os.environ.setdefault('AGENTDESK_DB_PATH', get_db_path(config))
    api_config = config.get('api', {})
    host = args.host or api_config.get('host', '127.0.0.1')
    port = args.port or api_config.get('port', 5000)

    create_app().run(host=host, port=port, debug=args.debug)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='agentdesk',
        description='AgentDesk: contact import, client milestones and MLS listings'
    )
    parser.add_argument('--config', help='Path to config.yaml')
    subparsers = parser.add_subparsers(dest='command', required=True)

    p = subparsers.add_parser('import-contacts', help='Import contacts from a CSV file')
    p.add_argument('file', help='CSV file path')
    p.add_argument('--agent', required=True, help='Owning agent ID')
    p.set_defaults(func=cmd_import_contacts)

    p = subparsers.add_parser('template', help='Print the CSV import template')
    p.add_argument('-o', '--output', help='Write to this file instead of stdout')
    p.set_defaults(func=cmd_template)

    p = subparsers.add_parser('contacts', help="List an agent's contacts")
    p.add_argument('--agent', required=True, help='Owning agent ID')
    p.add_argument('--csv', action='store_true', help='Export as CSV')
    p.set_defaults(func=cmd_contacts)

    p = subparsers.add_parser('upcoming', help='Show upcoming birthdays and anniversaries')
    p.add_argument('--agent', required=True, help='Owning agent ID')
    p.add_argument('--days', type=int, default=DEFAULT_HORIZON_DAYS, help='Horizon in days')
    p.set_defaults(func=cmd_upcoming)

    p = subparsers.add_parser('mls-search', help='Search MLS listings')
    p.add_argument('--provider', choices=PROVIDERS, help='MLS provider (default from config)')
    p.add_argument('-q', '--query', help='Free-text search')
    p.add_argument('--status', action='append', help='Listing status (repeatable)')
    p.add_argument('--type', action='append', help='Property type (repeatable)')
    p.add_argument('--city', action='append', help='City (repeatable)')
    p.add_argument('--zip', action='append', help='Postal code (repeatable)')
    p.add_argument('--state', help='State or province')
    p.add_argument('--min-price', type=int)
    p.add_argument('--max-price', type=int)
    p.add_argument('--min-beds', type=int)
    p.add_argument('--min-baths', type=int)
    p.add_argument('--limit', type=int, default=20)
    p.set_defaults(func=cmd_mls_search)

    p = subparsers.add_parser('mls-import', help='Import listings by provider key')
    p.add_argument('keys', nargs='+', help='Listing keys / MLS IDs')
    p.add_argument('--agent', required=True, help='Owning agent ID')
    p.add_argument('--provider', choices=PROVIDERS, help='MLS provider (default from config)')
    p.set_defaults(func=cmd_mls_import)

    p = subparsers.add_parser('serve', help='Run the HTTP API')
    p.add_argument('--host')
    p.add_argument('--port', type=int)
    p.add_argument('--debug', action='store_true')
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(config_path=args.config)

    setup_logging_from_config(config)

    return args.func(args, config)


if __name__ == '__main__':
    sys.exit(main())
