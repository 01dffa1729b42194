"""
graph_types.py - Every kind of graph the compound link analysis can open.

The variants are listed statically in GRAPH_TYPES and paired with a total
name table, so menus never depend on introspecting the enum.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Any


class GraphType(IntEnum):
    COM_POSITION = 0
    COM_VELOCITY = 1
    COM_ACCELERATION = 2
    REFERENCE_JOINT_POSITION = 3
    REFERENCE_JOINT_VELOCITY = 4
    REFERENCE_JOINT_ACCELERATION = 5


GRAPH_TYPES: tuple[GraphType, ...] = (
    GraphType.COM_POSITION,
    GraphType.COM_VELOCITY,
    GraphType.COM_ACCELERATION,
    GraphType.REFERENCE_JOINT_POSITION,
    GraphType.REFERENCE_JOINT_VELOCITY,
    GraphType.REFERENCE_JOINT_ACCELERATION,
)

GRAPH_TYPE_NAMES: dict[GraphType, str] = {
    GraphType.COM_POSITION: 'Center of Mass Position',
    GraphType.COM_VELOCITY: 'Center of Mass Velocity',
    GraphType.COM_ACCELERATION: 'Center of Mass Acceleration',
    GraphType.REFERENCE_JOINT_POSITION: 'Reference Joint Position',
    GraphType.REFERENCE_JOINT_VELOCITY: 'Reference Joint Velocity',
    GraphType.REFERENCE_JOINT_ACCELERATION: 'Reference Joint Acceleration',
}

# Only these produce data; the rest open an empty chart.
IMPLEMENTED_GRAPH_TYPES = frozenset({
    GraphType.COM_POSITION,
    GraphType.REFERENCE_JOINT_POSITION,
})


def get_graph_types() -> list[GraphType]:
    return list(GRAPH_TYPES)


def get_graph_type_name(graph_type: Any) -> str:
    """Display name, or '' for anything that is not a known graph type."""
    if isinstance(graph_type, bool) or not isinstance(graph_type, int):
        return ''
    return GRAPH_TYPE_NAMES.get(graph_type, '')


def is_implemented(graph_type: GraphType) -> bool:
    return graph_type in IMPLEMENTED_GRAPH_TYPES


def parse_graph_type(value: Any) -> GraphType:
    """Coerce an int or member name into a GraphType; ValueError otherwise."""
    if isinstance(value, GraphType):
        return value
    if isinstance(value, str):
        try:
            return GraphType[value.upper()]
        except KeyError:
            raise ValueError(f'unknown graph type: {value!r}') from None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f'unknown graph type: {value!r}')
    return GraphType(value)
