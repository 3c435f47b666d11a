"""Structured component identifiers of the form ``domain:module:type:name``."""

from __future__ import annotations

import re
from dataclasses import dataclass

from riviere.errors import InvalidComponentIdError

_WHITESPACE = re.compile(r"\s+")


def slugify(name: str) -> str:
    """Lowercase a name and replace each whitespace run with a hyphen."""
    return _WHITESPACE.sub("-", name.lower())


@dataclass(frozen=True)
class ComponentId:
    """A parsed component id.

    The ``name`` segment is already slugified.
    """

    domain: str
    module: str
    type: str
    name: str

    @classmethod
    def create(cls, domain: str, module: str, type: str, name: str) -> ComponentId:
        """Build the deterministic id for a component.

        Args:
            domain: Owning domain.
            module: Module within the domain.
            type: Type tag (e.g. ``api``, ``domainop``).
            name: Human-readable component name, slugified here.
        """
        return cls(domain=domain, module=module, type=type, name=slugify(name))

    @classmethod
    def parse(cls, value: str) -> ComponentId:
        """Parse an id string.

        Raises:
            InvalidComponentIdError: If ``value`` does not have exactly four
                colon-separated segments.
        """
        parts = value.split(":")
        if len(parts) != 4:
            raise InvalidComponentIdError(value)
        domain, module, type_tag, name = parts
        return cls(domain=domain, module=module, type=type_tag, name=name)

    def __str__(self) -> str:
        return f"{self.domain}:{self.module}:{self.type}:{self.name}"


__all__ = ["ComponentId", "slugify"]
