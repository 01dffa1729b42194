#!/usr/bin/env python3
"""
Center of Mass Analysis Demo - chart the coupler's center of mass.

WHAT THIS DEMO DOES:
====================
1. Builds the demo crank-rocker four-bar; its coupler is a compound link
   (coupler bar plus a bracket carrying a coupler point).
2. Opens the "Center of Mass Position" graph: a tracer joint is added at
   the coupler's center of mass and the mechanism is solved.
3. Closes the graph: the tracer joint is removed again and the mechanism
   is back to the joints the user placed.
4. Opens the "Reference Joint Position" graph for the coupler point.

RUN THIS DEMO:
==============
    python -m demo.com_analysis_demo

Output saved to: user/demo/com_analysis/
"""
from __future__ import annotations

from datetime import datetime

from analysis.controller import AnalysisGraphController
from analysis.graph_types import get_graph_type_name
from analysis.graph_types import GraphType
from configs.appconfig import USER_DIR
from pylink_tools.demo import create_demo_fourbar
from pylink_tools.interaction import Selection
from pylink_tools.solver import KinematicSolver
from viz_tools.chart import plot_chart_series

N_STEPS = 48


def print_section(title: str, width: int = 70):
    """Print a formatted section header."""
    print('\n' + '=' * width)
    print(f'  {title}')
    print('=' * width)


def main():
    out_dir = USER_DIR / 'demo' / 'com_analysis' / datetime.now().strftime('%Y%m%d_%H%M%S')
    out_dir.mkdir(parents=True, exist_ok=True)

    mechanism, coupler = create_demo_fourbar()
    selection = Selection(coupler)
    mechanism.add_removal_listener(selection.forget_joint)
    controller = AnalysisGraphController(mechanism, KinematicSolver(mechanism, n_steps=N_STEPS), selection)

    print_section('Mechanism')
    print(f'Joints: {sorted(mechanism.joints)}')
    print(f"Compound link '{controller.get_link_name()}' center of mass: {controller.get_com_coords()}")

    print_section(get_graph_type_name(GraphType.COM_POSITION))
    series = controller.open_analysis_graph(GraphType.COM_POSITION)
    print(f'Joints while graph is open: {sorted(mechanism.joints)}')
    print(f'Samples: {len(series)}, first: ({series.x_data[0]:.3f}, {series.y_data[0]:.3f})')
    path = plot_chart_series(series, title='com_position', out_path=out_dir)
    print(f'Saved: {path}')
    controller.close_analysis_graph()
    print(f'Joints after close: {sorted(mechanism.joints)}')

    print_section(get_graph_type_name(GraphType.REFERENCE_JOINT_POSITION))
    coupler_point = controller.get_reference_candidates()[-1]
    controller.on_reference_joint_selected(coupler_point)
    series = controller.open_analysis_graph(GraphType.REFERENCE_JOINT_POSITION)
    print(f"Reference joint '{controller.get_reference_joint_name()}', samples: {len(series)}")
    path = plot_chart_series(series, title='reference_joint_position', out_path=out_dir)
    print(f'Saved: {path}')
    controller.close_analysis_graph()


if __name__ == '__main__':
    main()
