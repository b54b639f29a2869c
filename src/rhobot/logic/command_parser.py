"""
Option parsing and validation for event subcommands.

Parameters arrive as chat tokens such as::

    --title Raid --startTime 2025-01-01T20:00:00Z --setup bring snacks

Parsing never raises. Problems are collected in ``ParsedOptions.errors`` so the
user sees all of them in one reply.
"""

import re
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field

from rhobot.handlers.utils.errors import ValidationError
from rhobot.models.event import is_iso8601
from rhobot.models.input import CreateEventRequest, DeleteEventRequest

# Option name -> ParsedOptions field, each taking exactly one value token
SINGLE_VALUE_OPTIONS: Dict[str, str] = {
    '--title': 'title',
    '--startTime': 'start_time',
    '--maxParticipants': 'max_participants',
    '--id': 'id',
}

SETUP_OPTION = '--setup'

OPTION_MARKER = '--'

# Optional sign and ASCII digits only
_INTEGER_PATTERN = re.compile(r'[+-]?[0-9]+')


class ParsedOptions(BaseModel):
    """Option values extracted from a command, plus every problem found."""

    title: Optional[str] = None
    start_time: Optional[str] = None
    max_participants: Optional[str] = None
    id: Optional[str] = None
    setup: Optional[str] = None
    errors: List[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def with_errors(self, *errors: str) -> 'ParsedOptions':
        return self.model_copy(update={'errors': [*self.errors, *errors]})


def looks_like_option(token: str) -> bool:
    # Substring match: setup text such as "a -- b" ends the setup early.
    return OPTION_MARKER in token


def _take_until_option(tokens: Sequence[str], start: int) -> Tuple[List[str], int]:
    """Collect tokens from start up to (not including) the next option-looking token."""
    end = start
    while end < len(tokens) and not looks_like_option(tokens[end]):
        end += 1
    return list(tokens[start:end]), end


def parse_options(tokens: Sequence[str]) -> ParsedOptions:
    """
    Pull out the known options from a command's tokens.

    Single-value options consume the next token whatever it is. ``--setup``
    consumes tokens up to the next option and joins them with spaces. Unknown
    options are reported and their values skipped.

    Args:
        tokens: The command parameters, left untouched

    Returns:
        The extracted values and any unrecognized-option errors
    """
    values: Dict[str, Optional[str]] = {}
    errors: List[str] = []

    cursor = 0
    while cursor < len(tokens):
        option = tokens[cursor]
        cursor += 1

        if option in SINGLE_VALUE_OPTIONS:
            values[SINGLE_VALUE_OPTIONS[option]] = tokens[cursor] if cursor < len(tokens) else None
            cursor += 1
        elif option == SETUP_OPTION:
            words, cursor = _take_until_option(tokens, cursor)
            values['setup'] = ' '.join(words).rstrip()
        else:
            errors.append(f'Unrecognized option: {option}')
            _, cursor = _take_until_option(tokens, cursor)

    return ParsedOptions(**values, errors=errors)


def _parse_int(value: str) -> Optional[int]:
    value = value.strip()
    if not _INTEGER_PATTERN.fullmatch(value):
        return None
    return int(value)


def validate_create_options(options: ParsedOptions) -> ParsedOptions:
    """Check the options needed to create an event."""
    errors = []

    if not options.title:
        errors.append('Event title must be specified with `--title`')

    if not options.start_time:
        errors.append('Event start time must be specified with `--startTime`')
    elif not is_iso8601(options.start_time):
        errors.append('Event start time must be ISO-8601 compatible.')

    if options.max_participants:
        max_participants = _parse_int(options.max_participants)
        if max_participants is None:
            errors.append('Max participants must be an integer.')
        elif max_participants < 0:
            errors.append('Max participants cannot be negative.')

    return options.with_errors(*errors)


def validate_delete_options(options: ParsedOptions) -> ParsedOptions:
    """Check the options needed to delete an event."""
    if not options.id:
        return options.with_errors('Event ID must be specified with `--id`')
    return options


def parse_create_event_params(tokens: Sequence[str]) -> ParsedOptions:
    return validate_create_options(parse_options(tokens))


def parse_delete_event_params(tokens: Sequence[str]) -> ParsedOptions:
    return validate_delete_options(parse_options(tokens))


def to_create_request(options: ParsedOptions) -> CreateEventRequest:
    """
    Build a create request from validated options.

    Raises:
        ValidationError: If the options have not passed validation
    """
    if not options.is_valid:
        raise ValidationError(options.errors)

    return CreateEventRequest(
        title=options.title,
        start_time=options.start_time,
        max_participants=_parse_int(options.max_participants) if options.max_participants else None,
        setup=options.setup or None,
    )


def to_delete_request(options: ParsedOptions) -> DeleteEventRequest:
    if not options.is_valid:
        raise ValidationError(options.errors)
    return DeleteEventRequest(id=options.id)

