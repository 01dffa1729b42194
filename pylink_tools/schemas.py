"""
schemas.py - Data structures for linkage kinematics and chart output.

Dataclasses used across pylink_tools and analysis modules.
"""
from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field

import numpy as np


@dataclass
class TrajectoryResult:
    """Result of a trajectory computation."""
    success: bool
    trajectories: dict[str, list[list[float]]]  # joint_key -> [[x,y], ...]
    n_steps: int
    joint_types: dict[str, str]
    error: str | None = None


@dataclass
class AnimationPositions:
    """Position of every joint at each sampled instant of one motion cycle."""
    positions: dict[int, np.ndarray]  # joint_id -> (n_steps, 2)
    times: np.ndarray                 # (n_steps,) seconds

    @property
    def n_steps(self) -> int:
        return len(self.times)


@dataclass
class ChartSeries:
    """
    Index-aligned time series for one point: entry i of x_data, y_data and
    time_labels describe the same sampled instant.
    """
    x_data: list[float] = field(default_factory=list)
    y_data: list[float] = field(default_factory=list)
    time_labels: list[str] = field(default_factory=list)

    def __post_init__(self):
        if not (len(self.x_data) == len(self.y_data) == len(self.time_labels)):
            raise ValueError(
                f'chart series lengths differ: x={len(self.x_data)}, '
                f'y={len(self.y_data)}, labels={len(self.time_labels)}',
            )

    @classmethod
    def empty(cls) -> ChartSeries:
        return cls([], [], [])

    def is_empty(self) -> bool:
        return not self.x_data

    def __len__(self) -> int:
        return len(self.x_data)

    def to_dict(self) -> dict:
        return {
            'xData': list(self.x_data),
            'yData': list(self.y_data),
            'timeLabels': list(self.time_labels),
        }
