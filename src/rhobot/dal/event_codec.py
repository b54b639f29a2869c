"""
Conversion between Event objects and DynamoDB typed attribute maps.
"""

from typing import Any, Dict

from pydantic import ValidationError

from rhobot.handlers.utils.errors import MalformedRecordError
from rhobot.models.event import Event

# DynamoDB attribute name -> Event field name
_REQUIRED_STRING_ATTRIBUTES = {
    'uuid': 'id',
    'Title': 'title',
    'StartTime': 'start_time',
    'CreatedBy': 'created_by',
    'Created': 'created',
}


def encode_event(event: Event) -> Dict[str, Dict[str, str]]:
    """
    Transform an event into DynamoDB item attributes.

    Optional attributes are only written when the event has a value for them.
    """
    attributes = {
        'uuid': {'S': event.id},
        'Title': {'S': event.title},
        'StartTime': {'S': event.start_time},
        'CreatedBy': {'S': event.created_by},
        'Created': {'S': event.created},
    }

    if event.max_participants is not None:
        attributes['MaxParticipants'] = {'N': str(event.max_participants)}

    if event.setup:
        attributes['Setup'] = {'S': event.setup}

    return attributes


def _typed_value(item: Dict[str, Any], name: str, type_descriptor: str) -> str:
    attribute = item.get(name)
    if not isinstance(attribute, dict) or type_descriptor not in attribute:
        raise MalformedRecordError(
            f"Attribute '{name}' is missing or is not of type {type_descriptor}",
            item=item,
        )
    return attribute[type_descriptor]


def decode_event(item: Dict[str, Any]) -> Event:
    """
    Transform DynamoDB item attributes into an Event.

    Raises:
        MalformedRecordError: If a required attribute is missing, has the wrong
            type, or the values do not form a valid Event
    """
    if not isinstance(item, dict):
        raise MalformedRecordError(f"Expected an attribute map, got {type(item).__name__}")

    params: Dict[str, Any] = {
        field_name: _typed_value(item, attribute_name, 'S')
        for attribute_name, field_name in _REQUIRED_STRING_ATTRIBUTES.items()
    }

    if 'MaxParticipants' in item:
        raw = _typed_value(item, 'MaxParticipants', 'N')
        try:
            params['max_participants'] = int(raw)
        except (TypeError, ValueError):
            raise MalformedRecordError(f"MaxParticipants is not an integer: {raw}", item=item)

    if 'Setup' in item:
        params['setup'] = _typed_value(item, 'Setup', 'S')

    try:
        return Event(**params)
    except ValidationError as e:
        raise MalformedRecordError(f"Invalid event data in database: {e}", item=item) from e
