"""
placeholder.py - Center of mass tracer joints.

The solver only traces joints. To chart a compound link's center of mass a
temporary joint is added at that point, the mechanism is solved, and the joint
is removed again when the graph closes. The manager keeps the id of the joint
it created, so removal never has to guess which joint is the tracer.
"""
from __future__ import annotations

import logging

from configs.appconfig import AppConfig
from configs.link_models import CompoundLink
from configs.link_models import Joint
from pylink_tools.mechanism import Mechanism

logger = logging.getLogger(__name__)


class PlaceholderJointError(RuntimeError):
    """Tracer lifecycle violation: double inject, or retract with nothing injected."""


def highest_id_joint(compound_link: CompoundLink) -> Joint:
    """Joint with the largest id across all constituent links."""
    joints = [j for link in compound_link.links.values() for j in link.joints.values()]
    if not joints:
        raise PlaceholderJointError(f"compound link '{compound_link.name}' has no joints")
    return max(joints, key=lambda j: j.id)


class PlaceholderJointManager:
    """Injects and retracts at most one tracer joint at a time."""

    def __init__(self, mechanism: Mechanism, offset: float = AppConfig.COM_PLACEHOLDER_OFFSET):
        self.mechanism = mechanism
        self.offset = offset
        self._placeholder_id: int | None = None

    @property
    def placeholder_id(self) -> int | None:
        return self._placeholder_id

    def is_placeholder(self, joint: Joint) -> bool:
        return self._placeholder_id is not None and joint.id == self._placeholder_id

    def inject(self, compound_link: CompoundLink) -> Joint:
        """Add a tracer joint just off the compound link's center of mass."""
        if self._placeholder_id is not None:
            raise PlaceholderJointError(
                f'placeholder joint {self._placeholder_id} is still attached, retract it first',
            )
        com_x, com_y = compound_link.center_of_mass
        # Both axes shifted: a tracer exactly in line with its parent joints
        # cannot be placed by the solver.
        coords = (com_x - self.offset, com_y - self.offset)
        joint = self.mechanism.add_joint_to_link(compound_link.id, coords)
        self._placeholder_id = joint.id
        logger.debug(
            f"Injected placeholder joint {joint.id} on '{compound_link.name}' "
            f'at ({coords[0]:.6f}, {coords[1]:.6f})',
        )
        return joint

    def locate(self, compound_link: CompoundLink) -> Joint:
        """The tracer joint injected on this compound link."""
        if self._placeholder_id is None:
            raise PlaceholderJointError('no placeholder joint has been injected')
        if not compound_link.has_joint(self._placeholder_id):
            raise PlaceholderJointError(
                f"placeholder joint {self._placeholder_id} is not on '{compound_link.name}'",
            )
        joint = self.mechanism.get_joint(self._placeholder_id)
        newest = highest_id_joint(compound_link)
        if newest.id != joint.id:
            logger.warning(
                f"Joint {newest.id} was added to '{compound_link.name}' after "
                f'placeholder joint {joint.id}',
            )
        return joint

    def retract(self, compound_link: CompoundLink) -> None:
        """Remove the tracer joint from the mechanism."""
        if self._placeholder_id is None:
            raise PlaceholderJointError(
                f"no placeholder joint to remove from '{compound_link.name}'",
            )
        placeholder_id, self._placeholder_id = self._placeholder_id, None
        self.mechanism.remove_joint(placeholder_id)
        logger.debug(f"Retracted placeholder joint {placeholder_id} from '{compound_link.name}'")
