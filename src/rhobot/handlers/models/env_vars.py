"""
Environment variable models for type-safe configuration.

This module defines the Pydantic model for the environment variables the
event bot reads at startup.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field, field_validator


class EventBotEnvVars(BaseModel):
    """Environment variables for the event bot."""

    # DynamoDB table name for storing events
    TABLE_NAME: Annotated[str, Field(
        description='DynamoDB table name for event storage',
        min_length=1
    )]

    # AWS region
    AWS_REGION: Annotated[str, Field(
        default='us-east-1',
        description='AWS region the table is in'
    )] = 'us-east-1'

    # Local DynamoDB endpoint, unset in deployed environments
    DYNAMODB_ENDPOINT: Annotated[Optional[str], Field(
        default=None,
        description='DynamoDB endpoint URL override'
    )] = None

    # Everything a chat message must start with to reach the bot
    COMMAND_PREFIX: Annotated[str, Field(
        default='!rhobot',
        description='Command prefix that comes before the event command',
        min_length=1
    )] = '!rhobot'

    DISPLAY_TIMEZONE: Annotated[str, Field(
        default='UTC',
        description='IANA timezone used when showing event times'
    )] = 'UTC'

    # Service name for observability
    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='rhobot',
        description='Service name for AWS Powertools'
    )] = 'rhobot'

    # Log level for AWS Powertools Logger
    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    @field_validator('DISPLAY_TIMEZONE')
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate that the display timezone is a known IANA name."""
        from rhobot.handlers.formatting import resolve_timezone

        try:
            resolve_timezone(v)
        except (KeyError, ValueError):
            raise ValueError(f'Unknown timezone: {v}')
        return v


def get_env_vars() -> EventBotEnvVars:
    """
    Get typed environment variables for the event bot.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=EventBotEnvVars)
