"""
reference.py - The joint analysed by the reference joint graphs.
"""
from __future__ import annotations

import logging

from configs.link_models import Joint
from pylink_tools.mechanism import Mechanism

logger = logging.getLogger(__name__)


class ReferenceJointSelector:
    """
    Tracks one reference joint. select() does not check that the joint is on
    the selected compound link; that is left to the caller.
    """

    def __init__(self, initial: Joint | None = None):
        self._joint = initial

    def select(self, joint: Joint) -> None:
        self._joint = joint

    def current(self) -> Joint | None:
        return self._joint

    def clear(self) -> None:
        self._joint = None

    def refresh(self, mechanism: Mechanism) -> Joint | None:
        """Forget the reference if its joint was removed from the mechanism."""
        if self._joint is not None and not mechanism.has_joint(self._joint.id):
            logger.info(f"Reference joint '{self._joint.name}' no longer exists, clearing it")
            self._joint = None
        return self._joint
