#!/usr/bin/env python3
"""
Compound Link Analysis Backend Server
Serves the analysis controller for the demo four-bar coupler.
"""
from __future__ import annotations

import logging

import uvicorn

from analysis.controller import AnalysisGraphController
from backend.query_api import create_app
from configs.appconfig import BACKEND_PORT
from pylink_tools.demo import create_demo_fourbar
from pylink_tools.interaction import Selection
from pylink_tools.solver import KinematicSolver


def build_demo_app():
    mechanism, compound = create_demo_fourbar()
    selection = Selection(compound)
    mechanism.add_removal_listener(selection.forget_joint)
    controller = AnalysisGraphController(mechanism, KinematicSolver(mechanism), selection)
    return create_app(controller)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    print(f'Starting Compound Link Analysis Backend on port {BACKEND_PORT}...')
    uvicorn.run(build_demo_app(), host='0.0.0.0', port=BACKEND_PORT)
