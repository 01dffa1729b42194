"""
controller.py - Analysis graph state machine for the selected compound link.

States:
    closed                  no graph open
    open(graph_type)        one graph open

Transitions:
    closed  --open(t)-->  open(t)     injects a center of mass tracer for COM_POSITION
    open(t) --close()-->  closed      retracts the tracer for COM_POSITION
    open(a) --open(b)-->  open(b)     closes a first, then opens b

The mechanism, solver and selection are passed in; nothing is looked up
globally.
"""
from __future__ import annotations

import logging
from typing import Any

from analysis.graph_types import get_graph_type_name
from analysis.graph_types import get_graph_types
from analysis.graph_types import GraphType
from analysis.graph_types import is_implemented
from analysis.graph_types import parse_graph_type
from analysis.placeholder import PlaceholderJointManager
from analysis.reference import ReferenceJointSelector
from configs.appconfig import AppConfig
from configs.link_models import CompoundLink
from configs.link_models import Joint
from pylink_tools.interaction import Selection
from pylink_tools.mechanism import Mechanism
from pylink_tools.schemas import ChartSeries
from pylink_tools.solver import KinematicSolver

logger = logging.getLogger(__name__)

CLOSED = 'closed'
OPEN = 'open'


class AnalysisGraphController:
    """Opens, closes and computes the analysis graphs of one compound link panel."""

    def __init__(
        self,
        mechanism: Mechanism,
        solver: KinematicSolver,
        selection: Selection,
        placeholder_offset: float = AppConfig.COM_PLACEHOLDER_OFFSET,
    ):
        self.mechanism = mechanism
        self.solver = solver
        self.selection = selection
        self.placeholders = PlaceholderJointManager(mechanism, offset=placeholder_offset)

        joints = self.get_current_compound_link().joints
        self.reference = ReferenceJointSelector(joints[0] if joints else None)

        self.current_graph_type: GraphType | None = None
        self._analyzed_link: CompoundLink | None = None

    # =========================================================================
    # State machine
    # =========================================================================

    @property
    def state(self) -> str:
        return CLOSED if self.current_graph_type is None else OPEN

    def open_analysis_graph(self, graph_type: GraphType | int | str) -> ChartSeries:
        """
        Open a graph and return its data. An already open graph is closed first.

        If the data cannot be computed the new graph is closed again, tracer
        included, before the error is re-raised.
        """
        graph_type = parse_graph_type(graph_type)
        if self.current_graph_type is not None:
            logger.info(
                f"Switching from '{get_graph_type_name(self.current_graph_type)}' "
                f"to '{get_graph_type_name(graph_type)}'",
            )
            self.close_analysis_graph()

        compound_link = self.get_current_compound_link()
        if graph_type is GraphType.COM_POSITION:
            self.placeholders.inject(compound_link)
        elif not is_implemented(graph_type):
            logger.info(f"'{get_graph_type_name(graph_type)}' is not implemented, showing an empty graph")

        self.current_graph_type = graph_type
        self._analyzed_link = compound_link
        logger.info(f"Opened '{get_graph_type_name(graph_type)}' for '{compound_link.name}'")
        try:
            return self.get_graph_data()
        except Exception:
            logger.warning(f"Could not compute '{get_graph_type_name(graph_type)}', closing it")
            self.close_analysis_graph()
            raise

    def close_analysis_graph(self) -> None:
        """
        Close the open graph.

        The state is closed before the tracer is retracted, so a retraction
        error reaches the caller with the graph already closed.
        """
        graph_type, self.current_graph_type = self.current_graph_type, None
        compound_link, self._analyzed_link = self._analyzed_link, None
        if graph_type is None:
            logger.debug('close_analysis_graph called with no graph open')
            return

        logger.info(f"Closed '{get_graph_type_name(graph_type)}'")
        if graph_type is GraphType.COM_POSITION:
            self.placeholders.retract(compound_link)

    def get_graph_data(self) -> ChartSeries:
        """Chart series for the open graph; empty when there is nothing to plot."""
        graph_type = self.current_graph_type

        if graph_type is GraphType.COM_POSITION:
            placeholder = self.placeholders.locate(self._analyzed_link)
            animation_positions = self.solver.solve_positions()
            return self.solver.transform_positions_for_chart(animation_positions, placeholder)

        if graph_type is GraphType.REFERENCE_JOINT_POSITION:
            reference_joint = self.reference.refresh(self.mechanism)
            if reference_joint is None:
                return ChartSeries.empty()
            animation_positions = self.solver.solve_positions()
            return self.solver.transform_positions_for_chart(animation_positions, reference_joint)

        # velocity / acceleration graphs and no graph at all
        return ChartSeries.empty()

    # =========================================================================
    # Reference joint
    # =========================================================================

    def on_reference_joint_selected(self, joint: Joint) -> None:
        self.reference.select(joint)

    def get_reference_joint(self) -> Joint | None:
        return self.reference.current()

    def get_reference_candidates(self) -> list[Joint]:
        """Joints of the selected compound link the user can pick, tracer excluded."""
        return [
            j for j in self.get_current_compound_link().joints
            if not self.placeholders.is_placeholder(j)
        ]

    # =========================================================================
    # Panel getters
    # =========================================================================

    def get_current_compound_link(self) -> CompoundLink:
        selected = self.selection.get_selected_object()
        if not isinstance(selected, CompoundLink):
            raise TypeError(f'selection is not a compound link: {type(selected).__name__}')
        return selected

    def get_link_name(self) -> str:
        return self.get_current_compound_link().name

    def get_reference_joint_name(self) -> str | None:
        joint = self.get_reference_joint()
        return joint.name if joint is not None else None

    def get_reference_joint_coords(self) -> tuple[float, float] | None:
        joint = self.get_reference_joint()
        if joint is None:
            return None
        return (round(joint.x, AppConfig.CHART_DECIMALS), round(joint.y, AppConfig.CHART_DECIMALS))

    def get_com_coords(self) -> tuple[float, float]:
        tracer = self.placeholders.placeholder_id
        exclude = frozenset() if tracer is None else frozenset({tracer})
        x, y = self.get_current_compound_link().center_of_mass_excluding(exclude)
        return (round(x, AppConfig.CHART_DECIMALS), round(y, AppConfig.CHART_DECIMALS))

    def get_graph_types(self) -> list[GraphType]:
        return get_graph_types()

    def get_graph_type_name(self, graph_type: Any) -> str:
        return get_graph_type_name(graph_type)

    def summary(self) -> dict:
        """Data summary block of the panel."""
        return {
            'link_name': self.get_link_name(),
            'center_of_mass': self.get_com_coords(),
            'reference_joint': self.get_reference_joint_name(),
            'reference_joint_coords': self.get_reference_joint_coords(),
            'state': self.state,
            'graph_type': self.current_graph_type.name if self.current_graph_type is not None else None,
        }
