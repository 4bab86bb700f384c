"""
BigDayBot endpoints: CSV import, template download, contact management.
"""

from flask import Blueprint, Response, jsonify, request

import logging

from agentdesk.api.routes import error_response, get_db
from agentdesk.bigdaybot.events import DEFAULT_HORIZON_DAYS, get_upcoming_events
from agentdesk.bigdaybot.importer import import_contacts_from_csv
from agentdesk.bigdaybot.template import generate_csv_template

logger = logging.getLogger(__name__)

bigdaybot_bp = Blueprint('bigdaybot', __name__)

TEMPLATE_FILENAME = 'bigdaybot_contacts_template.csv'


@bigdaybot_bp.route('/bigdaybot/import', methods=['POST'])
def import_contacts():
    """
    Import contacts from an uploaded CSV.

    Form fields:
        file: CSV upload
        agent_id: Owning agent
    """
    upload = request.files.get('file')
    if not upload:
        return error_response('VALIDATION_ERROR', 'No file provided', 400)

    agent_id = request.form.get('agent_id')
    if not agent_id:
        return error_response('VALIDATION_ERROR', 'agent_id is required', 400)

    try:
        csv_text = upload.read().decode('utf-8-sig')
    except UnicodeDecodeError:
        return error_response('VALIDATION_ERROR', 'File must be UTF-8 encoded text', 400)

    result = import_contacts_from_csv(csv_text, agent_id, get_db())
    return jsonify(result.to_dict())


@bigdaybot_bp.route('/bigdaybot/template', methods=['GET'])
def download_template():
    """Download the CSV import template."""
    return Response(
        generate_csv_template(),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={TEMPLATE_FILENAME}'},
    )


@bigdaybot_bp.route('/bigdaybot/contacts', methods=['GET'])
def list_contacts():
    """
    List an agent's contacts.

    Query params:
        agent_id: Owning agent (required)
        upcoming: 'true' to include projected events
        days: Event horizon (default: 30)
    """
    agent_id = request.args.get('agent_id')
    if not agent_id:
        return error_response('VALIDATION_ERROR', 'agent_id is required', 400)

    include_upcoming = request.args.get('upcoming') == 'true'
    days = request.args.get('days', DEFAULT_HORIZON_DAYS, type=int)

    try:
        db = get_db()
        contacts = db.get_contacts(agent_id)

        upcoming_events = None
        if include_upcoming:
            upcoming_events = [e.to_dict() for e in get_upcoming_events(db, agent_id, days=days)]

        return jsonify({
            'success': True,
            'contacts': contacts,
            'upcomingEvents': upcoming_events,
            'total': len(contacts),
        })
    except Exception as e:
        logger.exception("Failed to fetch contacts")
        return error_response('SERVER_ERROR', str(e), 500)


@bigdaybot_bp.route('/bigdaybot/contacts', methods=['PATCH'])
def update_contact():
    """
    Update a contact.

    Body: {"id": ..., <field>: <value>, ...}
    """
    data = request.get_json(silent=True)
    if not data:
        return error_response('INVALID_JSON', 'Request body must be JSON', 400)

    updates = dict(data)
    contact_id = updates.pop('id', None)
    if not contact_id:
        return error_response('VALIDATION_ERROR', 'Contact ID required', 400)

    if not get_db().update_contact(contact_id, updates):
        return error_response('NOT_FOUND', 'Contact not found or nothing to update', 404)

    return jsonify({'success': True})


@bigdaybot_bp.route('/bigdaybot/contacts', methods=['DELETE'])
def delete_contact():
    """Delete a contact (?id=...)."""
    contact_id = request.args.get('id')
    if not contact_id:
        return error_response('VALIDATION_ERROR', 'Contact ID required', 400)

    if not get_db().delete_contact(contact_id):
        return error_response('NOT_FOUND', 'Contact not found', 404)

    return jsonify({'success': True})
