"""Deep merge of a persisted or remote payload over the default configuration."""

from __future__ import annotations

import copy
from collections.abc import Mapping

from hopecity.site_config.defaults import default_config
from hopecity.site_config.schema import SiteConfiguration

SECTION_KEYS = ("links", "socials", "announcement")
TOP_LEVEL_KEYS = SECTION_KEYS + ("events",)


def _merge_mapping(base: Mapping, updates: Mapping) -> dict:
    """Recursively merge *updates* into *base*; lists replace, ``None`` never erases."""
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(value, Mapping):
            current = merged.get(key)
            merged[key] = _merge_mapping(current if isinstance(current, Mapping) else {}, value)
        elif isinstance(value, list):
            merged[key] = copy.deepcopy(value)
        elif value is not None:
            merged[key] = value
    return merged


def merge_config(default: Mapping, incoming: Mapping) -> dict:
    """Merge *incoming* over *default* for the four known top-level keys.

    Sections (``links``, ``socials``, ``announcement``) merge key-wise.
    ``events`` is replaced wholesale when *incoming* carries a list, and
    kept from *default* otherwise.  Unknown top-level keys are dropped.
    Neither argument is mutated.
    """
    merged = {key: copy.deepcopy(default[key]) for key in TOP_LEVEL_KEYS if key in default}
    for key in SECTION_KEYS:
        value = incoming.get(key)
        if isinstance(value, Mapping):
            current = merged.get(key)
            merged[key] = _merge_mapping(current if isinstance(current, Mapping) else {}, value)
    events = incoming.get("events")
    if isinstance(events, list):
        merged["events"] = copy.deepcopy(events)
    return merged


def build_config(incoming: Mapping | None = None) -> SiteConfiguration:
    """Merge *incoming* onto a fresh copy of the defaults and validate it.

    Raises:
        pydantic.ValidationError: If a merged value has the wrong type.
    """
    merged = merge_config(default_config(), incoming or {})
    return SiteConfiguration.model_validate(merged)
