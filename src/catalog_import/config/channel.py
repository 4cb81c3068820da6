"""Storefront channel values consumed by the category importer."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, optional_int_env_var

DEFAULT_LOCALE = "en"


@dataclass(frozen=True, slots=True)
class ChannelConfig:
    """Default parent and locale applied to imported rows.

    ``root_category_id`` of ``None`` places rows without a parent at the root
    of the tree.
    """

    root_category_id: int | None = None
    locale: str = DEFAULT_LOCALE


def get_channel_config(
    *,
    root_category_id: int | None = None,
    locale: str | None = None,
) -> ChannelConfig:
    resolved_root = (
        root_category_id
        if root_category_id is not None
        else optional_int_env_var("CATALOG_ROOT_CATEGORY_ID")
    )
    resolved_locale = locale or optional_env_var("CATALOG_LOCALE") or DEFAULT_LOCALE
    return ChannelConfig(root_category_id=resolved_root, locale=resolved_locale)
