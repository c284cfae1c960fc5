"""Nostr Implementation Possibilities -- DCoSL list event construction.

The NIPs layer sits in the middle of the diamond DAG and depends only on
[wokhei.models][wokhei.models]. It performs no I/O: it turns typed specs
into protocol tag sets and unsigned event drafts that the relay client
signs and publishes.

Attributes:
    EventDraft: Unsigned event (kind, wire tags, content) with
        ``to_builder()`` lowering to ``nostr_sdk.EventBuilder``.
    build_header_tags, build_header_draft: List header (kinds 9998/39998)
        tag set and draft.
    build_item_tags, build_item_draft: List item (kinds 9999/39999) tag set
        and draft; ``z`` always first.
    build_deletion_draft: NIP-09 deletion request (kind 5).
    header_dtag, item_dtag, normalize: Opt-in deterministic d-tag
        derivation.

See Also:
    [wokhei.services.lists.ListService][wokhei.services.lists.ListService]:
        Publishes the drafts built here.
"""

from wokhei.nips.dtag import header_dtag, item_dtag, normalize
from wokhei.nips.event_builders import (
    EventDraft,
    build_deletion_draft,
    build_header_draft,
    build_header_tags,
    build_item_draft,
    build_item_tags,
    default_alt,
    validate_z_pointer,
)


__all__ = [
    "EventDraft",
    "build_deletion_draft",
    "build_header_draft",
    "build_header_tags",
    "build_item_draft",
    "build_item_tags",
    "default_alt",
    "header_dtag",
    "item_dtag",
    "normalize",
    "validate_z_pointer",
]
