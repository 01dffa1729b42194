"""
mechanism.py - Mutable linkage graph shared by the editor, the solver and the
analysis overlay.

The Mechanism owns every joint, simple link and compound link. Joint ids are
allocated from a counter that only grows, so an id is never handed out twice
while the mechanism is alive, even after the joint holding it was removed.

Usage:

    mechanism = Mechanism()
    a = mechanism.add_joint(0, 0, role='ground')
    b = mechanism.add_joint(1, 0, role='crank')
    crank = mechanism.add_link([a.id, b.id], name='crank')

    tracer = mechanism.add_joint_to_link(crank.id, (0.5, 0.0))
    mechanism.remove_joint(tracer.id)
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from collections.abc import Iterable

import networkx as nx

from configs.link_models import CompoundLink
from configs.link_models import Joint
from configs.link_models import JointRole
from configs.link_models import Link

logger = logging.getLogger(__name__)


class LinkNotFoundError(KeyError):
    """Raised when a link or compound link id is not part of the mechanism."""


class JointNotFoundError(KeyError):
    """Raised when a joint id is not part of the mechanism."""


RemovalListener = Callable[[Joint], None]


class Mechanism:
    """
    Linkage graph: joints, simple links and compound links.

    Simple links and compound links share one id space so that
    add_joint_to_link() can take either.
    """

    def __init__(self, name: str = 'mechanism'):
        self.name = name
        self._joints: dict[int, Joint] = {}
        self._links: dict[int, Link] = {}
        self._compound_links: dict[int, CompoundLink] = {}
        self._next_joint_id = 0
        self._next_link_id = 0
        self._removal_listeners: list[RemovalListener] = []

    # =========================================================================
    # Construction
    # =========================================================================

    def add_joint(
        self,
        x: float,
        y: float,
        *,
        name: str | None = None,
        role: JointRole = 'follower',
        joint_id: int | None = None,
    ) -> Joint:
        """Create a free-standing joint. Attach it with add_link()."""
        joint_id = self._allocate_joint_id(joint_id)
        joint = Joint(id=joint_id, name=name or f'joint_{joint_id}', x=x, y=y, role=role)
        self._joints[joint_id] = joint
        logger.debug(f"Added joint '{joint.name}' (id={joint_id}) at ({x:.3f}, {y:.3f})")
        return joint

    def add_link(
        self,
        joint_ids: Iterable[int],
        *,
        name: str | None = None,
        mass: float = 1.0,
        link_id: int | None = None,
    ) -> Link:
        """Create a simple link over existing joints."""
        link_id = self._allocate_link_id(link_id)
        joints = {jid: self.get_joint(jid) for jid in joint_ids}
        link = Link(id=link_id, name=name or f'link_{link_id}', mass=mass, joints=joints)
        for joint in joints.values():
            joint.link_ids.append(link_id)
        self._links[link_id] = link
        logger.debug(f"Added link '{link.name}' (id={link_id}) with joints {list(joints)}")
        return link

    def add_compound_link(
        self,
        link_ids: Iterable[int],
        *,
        name: str | None = None,
        compound_id: int | None = None,
    ) -> CompoundLink:
        """Group existing simple links into one rigid body."""
        compound_id = self._allocate_link_id(compound_id)
        links = {}
        for lid in link_ids:
            if lid not in self._links:
                raise LinkNotFoundError(lid)
            links[lid] = self._links[lid]
        compound = CompoundLink(id=compound_id, name=name or f'compound_{compound_id}', links=links)
        self._compound_links[compound_id] = compound
        return compound

    def _allocate_joint_id(self, requested: int | None) -> int:
        if requested is None:
            requested = self._next_joint_id
        elif requested in self._joints or requested < self._next_joint_id:
            raise ValueError(f'joint id {requested} is already taken or was used before')
        self._next_joint_id = requested + 1
        return requested

    def _allocate_link_id(self, requested: int | None) -> int:
        if requested is None:
            requested = self._next_link_id
        elif requested in self._links or requested in self._compound_links:
            raise ValueError(f'link id {requested} is already taken')
        self._next_link_id = max(self._next_link_id, requested + 1)
        return requested

    # =========================================================================
    # Mutation used by the analysis overlay
    # =========================================================================

    def add_joint_to_link(self, link_id: int, coords: tuple[float, float]) -> Joint:
        """
        Allocate a new joint at coords and attach it to a link.

        link_id may name a compound link, in which case the joint goes on its
        first constituent link (the body is rigid, any member will do).
        """
        link = self._resolve_link(link_id)
        joint = self.add_joint(coords[0], coords[1])
        link.joints[joint.id] = joint
        joint.link_ids.append(link.id)
        return joint

    def remove_joint(self, joint_id: int) -> None:
        """Detach a joint from every link and delete it."""
        joint = self._joints.pop(joint_id, None)
        if joint is None:
            raise JointNotFoundError(joint_id)
        for link_id in joint.link_ids:
            link = self._links.get(link_id)
            if link is not None:
                link.joints.pop(joint_id, None)
        joint.link_ids.clear()
        logger.debug(f"Removed joint '{joint.name}' (id={joint_id})")
        for listener in list(self._removal_listeners):
            listener(joint)

    def add_removal_listener(self, listener: RemovalListener) -> None:
        self._removal_listeners.append(listener)

    def _resolve_link(self, link_id: int) -> Link:
        if link_id in self._links:
            return self._links[link_id]
        compound = self._compound_links.get(link_id)
        if compound is None:
            raise LinkNotFoundError(link_id)
        return next(iter(compound.links.values()))

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def joints(self) -> dict[int, Joint]:
        return dict(self._joints)

    @property
    def links(self) -> dict[int, Link]:
        return dict(self._links)

    @property
    def compound_links(self) -> dict[int, CompoundLink]:
        return dict(self._compound_links)

    def has_joint(self, joint_id: int) -> bool:
        return joint_id in self._joints

    def get_joint(self, joint_id: int) -> Joint:
        try:
            return self._joints[joint_id]
        except KeyError:
            raise JointNotFoundError(joint_id) from None

    def get_link(self, link_id: int) -> Link:
        try:
            return self._links[link_id]
        except KeyError:
            raise LinkNotFoundError(link_id) from None

    def get_compound_link(self, compound_id: int) -> CompoundLink:
        try:
            return self._compound_links[compound_id]
        except KeyError:
            raise LinkNotFoundError(compound_id) from None

    def bodies(self) -> list[list[int]]:
        """
        Joint ids grouped by rigid body.

        One group per compound link, plus one per simple link that is not part
        of any compound link.
        """
        grouped: set[int] = set()
        bodies = []
        for compound in self._compound_links.values():
            bodies.append([j.id for j in compound.joints])
            grouped.update(compound.links)
        for link_id, link in self._links.items():
            if link_id not in grouped:
                bodies.append(list(link.joints))
        return bodies

    def joint_graph(self) -> nx.Graph:
        """Graph over joint ids; two joints are adjacent when they share a rigid body."""
        graph = nx.Graph()
        for joint_id, joint in self._joints.items():
            graph.add_node(joint_id, role=joint.role)
        for body in self.bodies():
            for i, a in enumerate(body):
                for b in body[i + 1:]:
                    graph.add_edge(a, b)
        return graph

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'joints': [j.as_dict() for j in self._joints.values()],
            'links': [link.as_dict() for link in self._links.values()],
            'compound_links': [c.as_dict() for c in self._compound_links.values()],
        }
