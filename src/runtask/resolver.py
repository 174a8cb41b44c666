"""Expansion of task specifications into execution plans."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from runtask.definitions import TaskDefinition
from runtask.definitions import TaskReference
from runtask.definitions import is_group
from runtask.definitions import normalize_reference
from runtask.exceptions import CyclicAliasError
from runtask.exceptions import InvalidSpecificationError
from runtask.exceptions import MissingSpecificationError
from runtask.exceptions import UnknownTaskError
from runtask.registry import TaskRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Plan:
    """
    Resolved execution plan of one run request.

    The top-level `steps` run in series; nested groups and nested alias names are expanded by
    the scheduler when it reaches them. `definitions` holds every task reachable from the plan
    as it was registered at resolution time, so later registrations do not affect the plan.
    """

    steps: tuple[TaskReference, ...]
    """Top-level steps, run in series."""

    definitions: Mapping[str, TaskDefinition]
    """Definitions of every task name reachable from `steps`."""

    def lookup(self, name: str) -> TaskDefinition:
        """
        Get the definition captured for `name`.

        Raises:
            UnknownTaskError: If `name` is not part of this plan.
        """
        try:
            return self.definitions[name]
        except KeyError:
            raise UnknownTaskError(name) from None

    def __iter__(self) -> Iterator[TaskReference]:
        return iter(self.steps)

    def __len__(self) -> int:
        return len(self.steps)


def resolve(spec: Any, registry: TaskRegistry) -> Plan:
    """
    Resolve a task specification into a plan.

    A single alias name resolves to the alias body, a single leaf name to a one-step plan.
    Inside the resulting top-level sequence, alias names are spliced in place (one level only);
    leaf names and nested groups are kept unchanged. The whole reachable tree is then validated
    so that a bad specification fails before anything runs.

    Args:
        spec: A task name, or a list of task references.
        registry: Registry to resolve names against.

    Returns:
        The resolved plan.

    Raises:
        MissingSpecificationError: If `spec` is None or empty.
        InvalidSpecificationError: If `spec` contains something other than names and lists.
        UnknownTaskError: If any reachable name is not registered.
        CyclicAliasError: If an alias references itself directly or transitively.
    """
    if spec is None or (isinstance(spec, (str, list, tuple)) and len(spec) == 0):
        raise MissingSpecificationError("No task specification given to run")

    if isinstance(spec, str):
        definition = registry.get(spec)
        if definition.is_alias:
            references: list[tuple[TaskReference, tuple[str, ...]]] = [
                (ref, (spec,)) for ref in definition.body
            ]
        else:
            references = [(spec, ())]
    elif isinstance(spec, (list, tuple)):
        references = [(ref, ()) for ref in normalize_reference(spec)]
    else:
        raise InvalidSpecificationError(
            f"Invalid task specification {spec!r}; "
            "expected a task name or a list of task references"
        )

    expanded: list[tuple[TaskReference, tuple[str, ...]]] = []
    for ref, chain in references:
        if isinstance(ref, str):
            definition = registry.get(ref)
            if definition.is_alias:
                _check_cycle(ref, chain)
                expanded.extend((item, (*chain, ref)) for item in definition.body)
                continue
        expanded.append((ref, chain))

    definitions: dict[str, TaskDefinition] = {}
    validated: set[str] = set()
    for ref, chain in expanded:
        _collect(ref, registry, definitions, validated, chain)

    plan = Plan(
        steps=tuple(ref for ref, _ in expanded),
        definitions=MappingProxyType(definitions),
    )
    logger.debug(f"Resolved {spec!r} into {len(plan)} step(s): {plan.steps!r}")
    return plan


def _collect(
    ref: TaskReference,
    registry: TaskRegistry,
    definitions: dict[str, TaskDefinition],
    validated: set[str],
    chain: tuple[str, ...],
) -> None:
    """Record every definition reachable from `ref`, rejecting unknown names and alias cycles."""
    if is_group(ref):
        for item in ref:
            _collect(item, registry, definitions, validated, chain)
        return

    definition = registry.get(ref)
    definitions[ref] = definition
    if not definition.is_alias or ref in validated:
        return

    _check_cycle(ref, chain)
    for item in definition.body:
        _collect(item, registry, definitions, validated, (*chain, ref))
    validated.add(ref)


def _check_cycle(name: str, chain: tuple[str, ...]) -> None:
    if name in chain:
        raise CyclicAliasError((*chain[chain.index(name) :], name))
