"""
Chat platform collaborator interfaces.

The bot core never talks to a chat client directly; platform adapters
implement these protocols.
"""

from typing import Optional, Protocol, runtime_checkable

from rhobot.models.output import Content


@runtime_checkable
class ChatMessage(Protocol):
    """A posted message the bot can later update."""

    id: str

    async def edit(self, content: Content) -> None:
        ...

    async def add_reaction(self, emoji: str) -> None:
        ...

    async def clear_reactions(self) -> None:
        ...


@runtime_checkable
class ChatChannel(Protocol):
    """A conversation context; events are partitioned on its id."""

    id: str

    # None for direct messages
    guild_id: Optional[str]

    async def send(self, content: Content) -> ChatMessage:
        ...

    async def fetch_message(self, message_id: str) -> Optional[ChatMessage]:
        """Return the message, or None if it does not exist in this channel."""
        ...


@runtime_checkable
class CommandInvocation(Protocol):
    """The user message that triggered a command."""

    channel: ChatChannel
    author_name: str

    async def reply(self, content: Content) -> None:
        ...
