"""
Shared fixtures: the demo four-bar and a crank-rocker whose coupler holds joints 5 and 6.
"""
from __future__ import annotations

import pytest

from analysis.controller import AnalysisGraphController
from pylink_tools.demo import create_demo_fourbar
from pylink_tools.interaction import Selection
from pylink_tools.mechanism import Mechanism
from pylink_tools.solver import KinematicSolver


def make_scenario_mechanism():
    """
    Crank-rocker whose coupler (a one-link compound link) holds joints 5 and 6,
    with its center of mass at (10, 20).

        ground O1 (4, 6) id 0, ground O2 (24, 6) id 1
        crank tip A (4, 16) id 5, coupler tip B (16, 24) id 6
    """
    mechanism = Mechanism(name='scenario')
    o1 = mechanism.add_joint(4.0, 6.0, name='O1', role='ground')
    o2 = mechanism.add_joint(24.0, 6.0, name='O2', role='ground')
    a = mechanism.add_joint(4.0, 16.0, name='A', role='crank', joint_id=5)
    b = mechanism.add_joint(16.0, 24.0, name='B', joint_id=6)
    mechanism.add_link([o1.id, o2.id], name='ground')
    mechanism.add_link([o1.id, a.id], name='crank')
    coupler = mechanism.add_link([a.id, b.id], name='coupler')
    mechanism.add_link([o2.id, b.id], name='rocker')
    compound = mechanism.add_compound_link([coupler.id], name='coupler_body')
    return mechanism, compound


@pytest.fixture
def demo():
    """(mechanism, coupler compound link) of the demo four-bar."""
    return create_demo_fourbar()


@pytest.fixture
def scenario():
    return make_scenario_mechanism()


def make_controller(mechanism, compound, n_steps=24):
    selection = Selection(compound)
    mechanism.add_removal_listener(selection.forget_joint)
    return AnalysisGraphController(mechanism, KinematicSolver(mechanism, n_steps=n_steps), selection)


@pytest.fixture
def controller(demo):
    mechanism, compound = demo
    return make_controller(mechanism, compound)


@pytest.fixture
def scenario_controller(scenario):
    mechanism, compound = scenario
    return make_controller(mechanism, compound)


def make_locked_fourbar():
    """
    Four-bar whose crank cannot make a full turn (Grashof condition fails):
    crank 3, coupler 3, rocker sqrt(10), ground 4. Joints 0..3, the coupler
    is the compound link.
    """
    mechanism = Mechanism(name='locked')
    o1 = mechanism.add_joint(0.0, 0.0, name='O1', role='ground')
    o2 = mechanism.add_joint(4.0, 0.0, name='O2', role='ground')
    a = mechanism.add_joint(0.0, 3.0, name='A', role='crank')
    b = mechanism.add_joint(3.0, 3.0, name='B')
    mechanism.add_link([o1.id, o2.id], name='ground')
    mechanism.add_link([o1.id, a.id], name='crank')
    coupler = mechanism.add_link([a.id, b.id], name='coupler')
    mechanism.add_link([o2.id, b.id], name='rocker')
    compound = mechanism.add_compound_link([coupler.id], name='coupler_body')
    return mechanism, compound


@pytest.fixture
def locked_controller():
    mechanism, compound = make_locked_fourbar()
    return make_controller(mechanism, compound)
