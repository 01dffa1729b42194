"""
solver.py - Kinematic solver service used by the analysis overlay.

Wraps compute_trajectory() for one Mechanism and reshapes single-joint
trajectories into ChartSeries for plotting.
"""
from __future__ import annotations

import logging

import numpy as np

from configs.appconfig import AppConfig
from configs.link_models import Joint
from pylink_tools.kinematic import compute_trajectory
from pylink_tools.kinematic import joint_key
from pylink_tools.mechanism import Mechanism
from pylink_tools.schemas import AnimationPositions
from pylink_tools.schemas import ChartSeries

logger = logging.getLogger(__name__)


class SolverError(RuntimeError):
    """Raised when the mechanism cannot be simulated over a full cycle."""


class TrajectoryNotFoundError(KeyError):
    """Raised when a joint has no trajectory in an AnimationPositions."""


class KinematicSolver:
    """
    Computes joint positions for the mechanism it was built with.

    Reads the mechanism on every call, so joints added after construction
    (such as a center of mass tracer) are part of the next solve.
    """

    def __init__(
        self,
        mechanism: Mechanism,
        n_steps: int = AppConfig.N_STEPS,
        input_speed_rpm: float = AppConfig.INPUT_SPEED_RPM,
    ):
        if n_steps < 1:
            raise ValueError(f'n_steps must be positive, got {n_steps}')
        if input_speed_rpm <= 0:
            raise ValueError(f'input_speed_rpm must be positive, got {input_speed_rpm}')
        self.mechanism = mechanism
        self.n_steps = n_steps
        self.input_speed_rpm = input_speed_rpm

    def sample_times(self) -> np.ndarray:
        period = AppConfig.cycle_period(self.input_speed_rpm)
        return np.arange(self.n_steps) * (period / self.n_steps)

    def solve_positions(self) -> AnimationPositions:
        """Positions of every joint across one motion cycle."""
        result = compute_trajectory(self.mechanism, self.n_steps)
        if not result.success:
            raise SolverError(result.error)

        positions = {}
        for joint_id in self.mechanism.joints:
            traj = result.trajectories.get(joint_key(joint_id))
            if traj is not None:
                positions[joint_id] = np.asarray(traj, dtype=float)

        logger.debug(f'Solved {len(positions)} joints over {self.n_steps} steps')
        return AnimationPositions(positions=positions, times=self.sample_times())

    def transform_positions_for_chart(
        self,
        animation_positions: AnimationPositions,
        joint: Joint,
    ) -> ChartSeries:
        """Project one joint's trajectory onto x/y/time-label series."""
        traj = animation_positions.positions.get(joint.id)
        if traj is None:
            raise TrajectoryNotFoundError(joint.id)

        decimals = AppConfig.CHART_DECIMALS
        return ChartSeries(
            x_data=[float(x) for x in traj[:, 0]],
            y_data=[float(y) for y in traj[:, 1]],
            time_labels=[f'{t:.{decimals}f}' for t in animation_positions.times],
        )
