"""Display sections of an entry.

An entry renders as a sequence of sections that are either a bulleted
list of short items or a block of text.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from plume.models.entry import Entry


class ListSection(BaseModel):
    """A section made of short items (gratitudes, accomplishments)."""

    kind: Literal["list"] = "list"
    key: str = Field(..., description="Entry field the section comes from")
    title: str = Field(..., description="Display title")
    items: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class TextSection(BaseModel):
    """A section made of a single block of text (memory, journal)."""

    kind: Literal["text"] = "text"
    key: str = Field(..., description="Entry field the section comes from")
    title: str = Field(..., description="Display title")
    value: str = Field(...)

    model_config = {"frozen": True}


Section = Annotated[Union[ListSection, TextSection], Field(discriminator="kind")]


def entry_sections(entry: Entry) -> list[Section]:
    """Return the non-empty sections of an entry in display order."""
    sections: list[Section] = []
    if entry.gratitudes:
        sections.append(ListSection(key="gratitudes", title="Gratitude", items=entry.gratitudes))
    if entry.memory:
        sections.append(TextSection(key="memory", title="Memory", value=entry.memory))
    if entry.accomplishments:
        sections.append(
            ListSection(key="accomplishments", title="Accomplishments", items=entry.accomplishments)
        )
    if entry.journal:
        sections.append(TextSection(key="journal", title="Journal", value=entry.journal))
    return sections
