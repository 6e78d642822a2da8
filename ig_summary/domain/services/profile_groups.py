"""Profile id → group label, from SUSHI config or the ImplementationGuide."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

_GROUP_PREFIX = "Profiles: "
_RESOURCE_PREFIX = "StructureDefinition/"


def groups_from_sushi_config(sushi_config: Mapping[str, Any]) -> dict[str, str]:
    """Read ``groups`` from a sushi-config.yaml document.

    SUSHI accepts ``groups`` keyed by group id; already-normalised configs
    carry a list. Both are handled.
    """
    groups = sushi_config.get("groups") or []
    if isinstance(groups, dict):
        groups = [
            {"id": group_id, **(group or {})} for group_id, group in groups.items()
        ]
    return _collect(
        (str(group.get("name") or group.get("id") or ""), group.get("resources") or [])
        for group in groups
    )


def groups_from_implementation_guide(ig: Mapping[str, Any]) -> dict[str, str]:
    definition = ig.get("definition") or {}
    names = {
        str(g.get("id")): str(g.get("name") or g.get("id"))
        for g in definition.get("grouping") or []
    }
    members: dict[str, list[str]] = {}
    for resource in definition.get("resource") or []:
        grouping_id = resource.get("groupingId")
        reference = (resource.get("reference") or {}).get("reference")
        if grouping_id in names and reference:
            members.setdefault(grouping_id, []).append(reference)
    return _collect((names[gid], refs) for gid, refs in members.items())


def _collect(groups: Iterable[tuple[str, Iterable[str]]]) -> dict[str, str]:
    resource_groups: dict[str, str] = {}
    for name, resources in groups:
        label = name.replace(_GROUP_PREFIX, "", 1)
        for resource in resources:
            resource_groups[str(resource).replace(_RESOURCE_PREFIX, "", 1)] = label
    return resource_groups
