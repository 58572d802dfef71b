"""Dispatch value objects."""

from command_dispatch.domain.value_objects.alias_entry import AliasEntry

__all__ = ["AliasEntry"]
