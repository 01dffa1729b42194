"""
kinematic.py - Forward kinematics for a Mechanism using pylinkage.

This module provides reusable functions for:
  - Converting the mechanism graph into pylinkage joint data
    (Static / Crank / Revolute entries with parent refs and distances)
  - Ordering joints so parents are built before children
  - Building pylinkage Joint objects and running the simulation

Design notes:
  - Ground joints are Static, crank joints rotate about a ground neighbour,
    every other joint is a Revolute on two already resolved neighbours that
    share a rigid body with it.
  - A Revolute whose position lies exactly on the line through its two
    parents is a tangent circle-circle case; pylinkage loses the joint as soon
    as rounding pushes the circles apart. Callers placing synthetic tracer
    points keep them slightly off that line.
  - Kinematic failures come back as TrajectoryResult(success=False), they are
    not raised.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Union

import numpy as np
from pylinkage.joints import Crank
from pylinkage.joints import Revolute
from pylinkage.linkage import Linkage

from pylink_tools.schemas import TrajectoryResult

if TYPE_CHECKING:
    from pylink_tools.mechanism import Mechanism

logger = logging.getLogger(__name__)


# =============================================================================
# Mechanism -> Joint Data
# =============================================================================

def joint_key(joint_id: int) -> str:
    """Name used for a joint inside pylinkage (pylinkage keys joints by name)."""
    return str(joint_id)


def _distance(p: tuple[float, float], q: tuple[float, float]) -> float:
    return float(np.hypot(q[0] - p[0], q[1] - p[1]))


def build_joint_data(mechanism: Mechanism) -> tuple[list[dict], list[int]]:
    """
    Describe every joint of the mechanism in pylinkage terms.

    Args:
        mechanism: The linkage graph

    Returns:
        (joints_data, unresolved_ids)

        joints_data: [{'name', 'type', 'x', 'y', ...refs and distances}, ...]
        unresolved_ids: joints that could not be tied to the driven chain
    """
    joints = mechanism.joints
    graph = mechanism.joint_graph()
    resolved: dict[int, dict] = {}
    static_ids: set[int] = set()

    for jid, joint in joints.items():
        if joint.role == 'ground':
            resolved[jid] = {'name': joint_key(jid), 'type': 'Static', 'x': joint.x, 'y': joint.y}
            static_ids.add(jid)

    for jid, joint in joints.items():
        if joint.role != 'crank':
            continue
        grounds = sorted(n for n in graph.neighbors(jid) if n in static_ids)
        if not grounds:
            logger.warning(f"Crank joint '{joint.name}' has no ground neighbour")
            continue
        parent = joints[grounds[0]]
        resolved[jid] = {
            'name': joint_key(jid),
            'type': 'Crank',
            'x': joint.x,
            'y': joint.y,
            'joint0': {'ref': joint_key(parent.id)},
            'distance': _distance(parent.coords, joint.coords),
        }

    pending = [jid for jid, joint in joints.items() if jid not in resolved and joint.role == 'follower']
    progress = True
    while pending and progress:
        progress = False
        for jid in list(pending):
            parents = sorted(n for n in graph.neighbors(jid) if n in resolved)[:2]
            if len(parents) < 2:
                continue
            joint = joints[jid]
            if all(p in static_ids for p in parents):
                resolved[jid] = {'name': joint_key(jid), 'type': 'Static', 'x': joint.x, 'y': joint.y}
                static_ids.add(jid)
            else:
                p0, p1 = joints[parents[0]], joints[parents[1]]
                resolved[jid] = {
                    'name': joint_key(jid),
                    'type': 'Revolute',
                    'x': joint.x,
                    'y': joint.y,
                    'joint0': {'ref': joint_key(p0.id)},
                    'joint1': {'ref': joint_key(p1.id)},
                    'distance0': _distance(p0.coords, joint.coords),
                    'distance1': _distance(p1.coords, joint.coords),
                }
            pending.remove(jid)
            progress = True

    unresolved = [jid for jid in joints if jid not in resolved]
    joints_data = [resolved[jid] for jid in joints if jid in resolved]
    return joints_data, unresolved


# =============================================================================
# Solve Order Computation (Topological Sort)
# =============================================================================

def _parents(jdata: dict) -> set[str]:
    if jdata['type'] == 'Crank':
        return {jdata['joint0']['ref']}
    if jdata['type'] == 'Revolute':
        return {jdata['joint0']['ref'], jdata['joint1']['ref']}
    return set()


def compute_proper_solve_order(joints_data: list[dict]) -> list[str]:
    """
    Compute solve order using Kahn's algorithm.

    Static joints come first, then Cranks, then Revolutes; parents are always
    placed before their children.
    """
    joint_info = {j['name']: j for j in joints_data}
    dependencies = {name: _parents(jdata) for name, jdata in joint_info.items()}
    priority = {'Static': 0, 'Crank': 1, 'Revolute': 2}

    def sort_key(name):
        return (priority.get(joint_info[name]['type'], 3), int(name) if name.isdigit() else name)

    queue = [name for name, deps in dependencies.items() if not deps]
    result = []
    while queue:
        queue.sort(key=sort_key)
        current = queue.pop(0)
        result.append(current)
        for name, deps in dependencies.items():
            if current in deps:
                deps.remove(current)
                if not deps and name not in result:
                    queue.append(name)

    if len(result) != len(joints_data):
        missing = set(joint_info) - set(result)
        logger.warning(f'Could not resolve order for joints: {sorted(missing)}')
        result.extend(sorted(missing))

    return result


# =============================================================================
# Joint Object Building
# =============================================================================

JointObject = Union[Crank, Revolute, tuple[float, float]]  # Static joints are tuples


def build_joint_objects(
    joints_data: list[dict],
    solve_order: list[str],
    angle_per_step: float,
) -> dict[str, JointObject]:
    """
    Build pylinkage Joint objects from joint data.

    Args:
        joints_data: List of joint data dicts
        solve_order: Order to build joints (respects dependencies)
        angle_per_step: Crank rotation per simulation step

    Returns:
        Map of joint_name -> Joint object (or tuple for Static)
    """
    joint_info = {j['name']: j for j in joints_data}
    joint_objects: dict[str, JointObject] = {}

    for joint_name in solve_order:
        jdata = joint_info.get(joint_name)
        if jdata is None:
            continue
        jtype = jdata['type']

        if jtype == 'Static':
            joint_objects[joint_name] = (jdata['x'], jdata['y'])

        elif jtype == 'Crank':
            parent = joint_objects.get(jdata['joint0']['ref'])
            if parent is None:
                logger.debug(f"Crank '{joint_name}' parent not built, skipping")
                continue
            joint_objects[joint_name] = Crank(
                x=jdata['x'],
                y=jdata['y'],
                joint0=parent,
                distance=jdata['distance'],
                angle=angle_per_step,
                name=joint_name,
            )

        elif jtype == 'Revolute':
            parent0 = joint_objects.get(jdata['joint0']['ref'])
            parent1 = joint_objects.get(jdata['joint1']['ref'])
            if parent0 is None or parent1 is None:
                logger.debug(f"Revolute '{joint_name}' parents not built, skipping")
                continue
            joint_objects[joint_name] = Revolute(
                x=jdata['x'],
                y=jdata['y'],
                joint0=parent0,
                joint1=parent1,
                distance0=jdata['distance0'],
                distance1=jdata['distance1'],
                name=joint_name,
            )

    return joint_objects


# =============================================================================
# Linkage Construction
# =============================================================================

def make_linkage(
    joint_objects: dict[str, JointObject],
    solve_order: list[str],
    name: str = 'linkage',
) -> tuple[Linkage | None, str | None]:
    """
    Build a pylinkage Linkage object from joint objects.

    Returns:
        (Linkage, None) on success, (None, error_message) on failure
    """
    linkage_joints = []
    for joint_name in solve_order:
        joint = joint_objects.get(joint_name)
        if joint is not None and not isinstance(joint, tuple):
            linkage_joints.append(joint)

    if not any(isinstance(j, Crank) for j in linkage_joints):
        return None, 'No Crank joint found. A Crank is required to drive the mechanism.'

    linkage = Linkage(
        joints=tuple(linkage_joints),
        order=tuple(linkage_joints),
        name=name,
    )
    return linkage, None


# =============================================================================
# Simulation
# =============================================================================

def run_simulation(
    linkage: Linkage,
    joint_objects: dict[str, JointObject],
    solve_order: list[str],
    n_steps: int,
) -> tuple[dict[str, list[list[float]]], str | None]:
    """
    Run forward kinematics over one crank revolution.

    Returns:
        (trajectories dict, None) on success, ({}, error_message) on failure

        trajectories: { joint_name: [[x0, y0], [x1, y1], ...], ... }
    """
    trajectories: dict[str, list[list[float]]] = {name: [] for name in solve_order if name in joint_objects}
    linkage_joint_names = {j.name for j in linkage.joints}

    try:
        linkage.rebuild()

        for coords in linkage.step(iterations=n_steps):
            for joint, coord in zip(linkage.joints, coords):
                if coord[0] is None or coord[1] is None:
                    raise ValueError(f"joint '{joint.name}' could not be placed")
                trajectories[joint.name].append([float(coord[0]), float(coord[1])])

            for joint_name, joint in joint_objects.items():
                if joint_name not in linkage_joint_names:
                    trajectories[joint_name].append([float(joint[0]), float(joint[1])])

        return trajectories, None

    except Exception as e:
        logger.exception('Simulation failed')
        return {}, str(e)


# =============================================================================
# High-Level Orchestrator
# =============================================================================

def compute_trajectory(mechanism: Mechanism, n_steps: int) -> TrajectoryResult:
    """
    Compute every joint's trajectory across one motion cycle.

    Args:
        mechanism: The linkage graph
        n_steps: Samples per cycle

    Returns:
        TrajectoryResult with trajectories keyed by joint_key(joint_id), or error
    """
    joints_data, unresolved = build_joint_data(mechanism)

    if not joints_data:
        return TrajectoryResult(False, {}, n_steps, {}, error='No joints found in mechanism')
    if unresolved:
        return TrajectoryResult(
            False, {}, n_steps, {},
            error=f'Joints not connected to the driven chain: {unresolved}',
        )

    solve_order = compute_proper_solve_order(joints_data)
    joint_types = {j['name']: j['type'] for j in joints_data}

    angle_per_step = 2 * np.pi / n_steps
    joint_objects = build_joint_objects(joints_data, solve_order, angle_per_step)

    linkage, error = make_linkage(joint_objects, solve_order, mechanism.name)
    if error:
        return TrajectoryResult(False, {}, n_steps, {}, error=error)

    trajectories, sim_error = run_simulation(linkage, joint_objects, solve_order, n_steps)
    if sim_error:
        return TrajectoryResult(False, {}, n_steps, {}, error=f'Simulation failed: {sim_error}')

    return TrajectoryResult(
        success=True,
        trajectories=trajectories,
        n_steps=n_steps,
        joint_types=joint_types,
    )
