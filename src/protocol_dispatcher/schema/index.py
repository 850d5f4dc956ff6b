"""Precomputed lookup structure over a protocol definition."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from ..errors import UnknownMethodError, UnknownNamespaceError
from .models import DomainDefinition, Parameter, ProtocolDefinition


class SchemaIndex:
    """Maps (domain, command) to the command's declared parameters.

    Built once from a ProtocolDefinition and never mutated afterwards.
    Every declared command has an entry, with an empty parameter mapping
    when the command declares no parameters.
    """

    def __init__(self, protocol: ProtocolDefinition) -> None:
        self._protocol = protocol
        parameters: dict[str, Mapping[str, Mapping[str, Parameter]]] = {}
        for domain in protocol.domains:
            commands: dict[str, Mapping[str, Parameter]] = {}
            for command in domain.commands:
                commands[command.name] = MappingProxyType(
                    {param.name: param for param in command.parameters or []}
                )
            parameters[domain.name] = MappingProxyType(commands)
        self._parameters: Mapping[str, Mapping[str, Mapping[str, Parameter]]] = (
            MappingProxyType(parameters)
        )

    @property
    def protocol(self) -> ProtocolDefinition:
        """The definition this index was built from."""
        return self._protocol

    @property
    def domains(self) -> list[str]:
        """Names of all indexed domains, in declared order."""
        return list(self._parameters)

    def has_domain(self, domain: str) -> bool:
        return domain in self._parameters

    def has_command(self, domain: str, command: str) -> bool:
        return command in self._parameters.get(domain, {})

    def parameters(self, domain: str, command: str) -> Mapping[str, Parameter]:
        """Declared parameters of ``domain.command``, keyed by name.

        Raises:
            UnknownNamespaceError: If the domain is not declared
            UnknownMethodError: If the command is not declared in the domain
        """
        commands = self._parameters.get(domain)
        if commands is None:
            raise UnknownNamespaceError(domain)
        params = commands.get(command)
        if params is None:
            raise UnknownMethodError(domain, command)
        return params

    # =========================================================================
    # Introspection
    # =========================================================================

    def domain_definition(self, domain: str) -> DomainDefinition | None:
        """First domain in the definition with a matching name, or None."""
        for definition in self._protocol.domains:
            if definition.name == domain:
                return definition
        return None

    def _require_domain(self, domain: str) -> DomainDefinition:
        definition = self.domain_definition(domain)
        if definition is None:
            raise UnknownNamespaceError(domain)
        return definition

    def domain_commands(self, domain: str) -> dict[str, dict[str, Any]]:
        """Map of command name to ``{"parameters": [...] | None}``."""
        definition = self._require_domain(domain)
        return {
            command.name: {"parameters": command.parameters}
            for command in definition.commands
        }

    def domain_command_names(self, domain: str) -> list[str]:
        return list(self.domain_commands(domain))

    def domain_event_names(self, domain: str) -> list[str]:
        """Declared event names; empty when the domain declares none."""
        definition = self._require_domain(domain)
        return [event.name for event in definition.events or []]
