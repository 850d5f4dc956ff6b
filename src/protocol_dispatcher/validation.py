"""Presence validation of command parameters against the schema index.

Only presence is checked: value types, ranges and nested shapes are left to
the peer, and undeclared extra keys are never rejected.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import MissingParameterError, UnknownMethodError, UnknownNamespaceError
from .schema.index import SchemaIndex


def missing_params(
    index: SchemaIndex,
    domain: str,
    command: str,
    params: Mapping[str, Any],
) -> list[str]:
    """Names of required parameters absent from ``params``, in declared order.

    A key bound to None is present; only missing keys count. A parameter is
    optional only when its flag is exactly True.
    """
    declared = index.parameters(domain, command)
    return [
        name
        for name, definition in declared.items()
        if definition.optional is not True and name not in params
    ]


def validate_params(
    index: SchemaIndex,
    domain: str,
    command: str,
    params: Mapping[str, Any] | None = None,
) -> None:
    """Check that ``domain.command`` may be sent with ``params``.

    Raises:
        UnknownNamespaceError: If the domain is not declared
        UnknownMethodError: If the command is not declared in the domain
        MissingParameterError: If any required parameter is missing
    """
    if not index.has_domain(domain):
        raise UnknownNamespaceError(domain)
    if not index.has_command(domain, command):
        raise UnknownMethodError(domain, command)

    missing = missing_params(index, domain, command, params or {})
    if missing:
        raise MissingParameterError(command, missing)
