"""
Event command handler - chat entry point for event management.

Routes ``<prefix> event <subcommand> [options]`` to the event service:

- ``create --title <str> --startTime <iso8601> [--maxParticipants <int>] [--setup <text...>]``
- ``list``
- ``delete --id <str>``
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import MetricUnit

from rhobot.dal import get_dal_handler
from rhobot.handlers.chat import CommandInvocation
from rhobot.handlers.models.env_vars import EventBotEnvVars, get_env_vars
from rhobot.handlers.utils.observability import logger as default_logger
from rhobot.handlers.utils.observability import metrics
from rhobot.logic.event_service import EventService

COMMAND_NAME = 'event'
COMMAND_HELP = 'Create and manage events.'


@dataclass(frozen=True)
class Subcommand:
    run: Callable[[CommandInvocation, Sequence[str]], Awaitable[Any]]
    help: str


class EventCommand:
    """Nested ``event`` command dispatching to create, list and delete."""

    def __init__(self, prefix: str, service: EventService, logger: Logger = default_logger):
        self.prefix = prefix
        self.name = COMMAND_NAME
        self.help = COMMAND_HELP
        self.service = service
        self.logger = logger
        self.subcommands: Dict[str, Subcommand] = {
            'create': Subcommand(service.create_event, 'Create a new event.'),
            'delete': Subcommand(service.delete_event, 'Delete an event.'),
            'list': Subcommand(service.list_events, 'List upcoming events.'),
        }

    def format_help(self) -> str:
        lines = [f'{self.help} Available subcommands:']
        lines.extend(
            f'- `{self.prefix} {self.name} {name}`: {subcommand.help}'
            for name, subcommand in self.subcommands.items()
        )
        return '\n'.join(lines)

    def matches(self, text: str) -> bool:
        tokens = text.split()
        return tokens[:2] == [self.prefix, self.name]

    async def handle_message(self, invocation: CommandInvocation, text: str) -> bool:
        """
        Run the command if the message text addresses it.

        Returns:
            True if the message was an event command
        """
        if not self.matches(text):
            return False
        await self.run(invocation, text.split()[2:])
        return True

    async def run(self, invocation: CommandInvocation, parameters: Sequence[str]) -> Any:
        """
        Run one invocation of the event command.

        Unexpected failures are logged and reported to the invoking user only,
        so they never affect other invocations.

        Args:
            invocation: The user message that triggered the command
            parameters: Tokens after the command name, starting with the subcommand
        """
        subcommand_name = parameters[0] if parameters else None
        subcommand = self.subcommands.get(subcommand_name) if subcommand_name else None
        if subcommand is None:
            await invocation.reply(self.format_help())
            return None

        try:
            return await subcommand.run(invocation, parameters[1:])
        except Exception:
            self.logger.exception('Unhandled error running event command', extra={
                'channel': invocation.channel.id,
                'subcommand': subcommand_name,
            })
            metrics.add_metric(name='EventCommandFailed', unit=MetricUnit.Count, value=1)
            await invocation.reply(f'[ERROR] Something went wrong running `{self.name} {subcommand_name}`.')
            return None
        finally:
            # Emit buffered metrics after every run
            metrics.flush_metrics(raise_on_empty_metrics=False)


def build_event_command(env: Optional[EventBotEnvVars] = None) -> EventCommand:
    """
    Build the event command from configuration.

    Args:
        env: Configuration, read from the environment when omitted
    """
    env = env or get_env_vars()
    default_logger.setLevel(env.LOG_LEVEL)

    repository = get_dal_handler(
        env.TABLE_NAME,
        region_name=env.AWS_REGION,
        endpoint_url=env.DYNAMODB_ENDPOINT,
    )
    service = EventService(repository, timezone_name=env.DISPLAY_TIMEZONE)
    return EventCommand(env.COMMAND_PREFIX, service)
