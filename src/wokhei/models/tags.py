"""Typed header and item tag sets.

The wire format allows any array of string arrays as tags. Inside the
package the two tag shapes the list protocol defines are represented as
closed, typed records and lowered to the generic ``[[name, *values], ...]``
shape only at the serialization boundary via ``to_wire()``.

Emission order is fixed so the same logical record always serializes
identically (regular-kind ids are content-derived).

Header order: ``names``, ``titles``, ``description``, ``required``...,
``recommended``..., ``t``..., ``alt``, ``d``, ``client``.

Item order: ``z``, ``r``, ``d``, custom fields in input order.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import TagName
from .specs import CustomField


WireTags = list[list[str]]


@dataclass(frozen=True, slots=True)
class HeaderTagSet:
    """Validated tag set of a list header (kinds 9998/39998)."""

    names: tuple[str, str]
    client: str
    titles: tuple[str, str] | None = None
    description: str | None = None
    required: tuple[str, ...] = ()
    recommended: tuple[str, ...] = ()
    topics: tuple[str, ...] = ()
    alt: str | None = None
    d_tag: str | None = None

    def to_wire(self) -> WireTags:
        tags: WireTags = [[TagName.NAMES, *self.names]]
        if self.titles is not None:
            tags.append([TagName.TITLES, *self.titles])
        if self.description is not None:
            tags.append([TagName.DESCRIPTION, self.description])
        tags.extend([TagName.REQUIRED, f] for f in self.required)
        tags.extend([TagName.RECOMMENDED, f] for f in self.recommended)
        tags.extend([TagName.TOPIC, t] for t in self.topics)
        if self.alt is not None:
            tags.append([TagName.ALT, self.alt])
        if self.d_tag is not None:
            tags.append([TagName.IDENTIFIER, self.d_tag])
        tags.append([TagName.CLIENT, self.client])
        return [[str(v) for v in tag] for tag in tags]


@dataclass(frozen=True, slots=True)
class ItemTagSet:
    """Validated tag set of a list item (kinds 9999/39999).

    ``z`` is always present and always first.
    """

    z: str
    resource: str | None = None
    d_tag: str | None = None
    fields: tuple[CustomField, ...] = ()

    def to_wire(self) -> WireTags:
        tags: WireTags = [[TagName.PARENT, self.z]]
        if self.resource is not None:
            tags.append([TagName.RESOURCE, self.resource])
        if self.d_tag is not None:
            tags.append([TagName.IDENTIFIER, self.d_tag])
        tags.extend([f.key, f.value] for f in self.fields)
        return [[str(v) for v in tag] for tag in tags]
