"""
Kinematic analysis overlay for compound links.

Modules:
- graph_types: GraphType enumeration and display names
- placeholder: center of mass tracer joint injection / retraction
- reference: reference joint tracking
- controller: analysis graph state machine
"""
from __future__ import annotations

from analysis.controller import AnalysisGraphController
from analysis.graph_types import get_graph_type_name
from analysis.graph_types import get_graph_types
from analysis.graph_types import GraphType
from analysis.placeholder import PlaceholderJointError
from analysis.placeholder import PlaceholderJointManager
from analysis.reference import ReferenceJointSelector

__all__ = [
    'AnalysisGraphController',
    'GraphType',
    'get_graph_types',
    'get_graph_type_name',
    'PlaceholderJointError',
    'PlaceholderJointManager',
    'ReferenceJointSelector',
]
