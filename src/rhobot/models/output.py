"""
Output models for chat message content.

Chat platforms render these as rich cards (an embed on Discord); plain
string replies are used for short confirmations and errors.
"""

from typing import Annotated, Union

from pydantic import BaseModel, Field


class EmbedField(BaseModel):
    """A single name/value row on a message card."""

    name: Annotated[str, Field(description='Field heading')]

    value: Annotated[str, Field(description='Field body')]


class MessageContent(BaseModel):
    """A rich message card."""

    title: Annotated[str, Field(
        description='Card title',
        examples=['Event: Friday raid night']
    )]

    description: Annotated[str | None, Field(
        default=None,
        description='Optional card description'
    )] = None

    embed_fields: Annotated[list[EmbedField], Field(
        default_factory=list,
        description='Ordered name/value rows'
    )]

    footer: Annotated[str | None, Field(
        default=None,
        description='Optional footer text',
        examples=['id: 1092837465019283746']
    )] = None

    def add_field(self, name: str, value: str) -> 'MessageContent':
        self.embed_fields.append(EmbedField(name=name, value=value))
        return self

    def field_value(self, name: str) -> str | None:
        """Return the value of the first field with the given name."""
        for field in self.embed_fields:
            if field.name == name:
                return field.value
        return None


Content = Union[str, MessageContent]
