from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Literal, Tuple

import numpy as np
from pydantic import BaseModel, Field, field_validator
from typing_extensions import Annotated

JointRole = Literal['ground', 'crank', 'follower']


class Joint(BaseModel):
    """A point of articulation in the mechanism."""
    id: Annotated[int, Field(ge=0, frozen=True, description="Identity allocated by the mechanism, never reused")]
    name: str = Field(default="joint", description="Human readable name")
    x: float = Field(description="X coordinate")
    y: float = Field(description="Y coordinate")
    role: JointRole = Field(default='follower', description="ground joints are fixed, crank joints drive the mechanism")
    link_ids: List[int] = Field(default_factory=list, description="Links this joint belongs to")

    model_config = {
        # Validate on assignment
        "validate_assignment": True,
        "extra": "forbid",
    }

    @property
    def coords(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def as_dict(self):
        """Convert to dictionary, similar to dataclass asdict()"""
        return self.model_dump()


class Link(BaseModel):
    """A simple rigid link holding one or more joints."""
    id: Annotated[int, Field(ge=0, frozen=True, description="Unique identifier for the link")]
    name: str = Field(default="link", description="Name for the link")
    mass: Annotated[float, Field(gt=0, description="Mass used to weight the compound center of mass")] = 1.0
    joints: Dict[int, Joint] = Field(default_factory=dict, description="Joints on this link, keyed by joint id")

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",
    }

    @property
    def center_of_mass(self) -> Tuple[float, float]:
        """Centroid of the link's joints."""
        return self.centroid()

    def centroid(self, exclude: FrozenSet[int] = frozenset()) -> Tuple[float, float]:
        pts = [j.coords for jid, j in self.joints.items() if jid not in exclude]
        if not pts:
            raise ValueError(f"link '{self.name}' has no joints")
        cx, cy = np.array(pts, dtype=float).mean(axis=0)
        return (float(cx), float(cy))

    def as_dict(self):
        data = self.model_dump(exclude={'joints'})
        data['joints'] = list(self.joints.keys())
        return data


class CompoundLink(BaseModel):
    """A rigid grouping of simple links that move as one body."""
    id: Annotated[int, Field(ge=0, frozen=True, description="Unique identifier for the compound link")]
    name: str = Field(default="compound_link", description="Name for the compound link")
    links: Dict[int, Link] = Field(default_factory=dict, description="Constituent links, keyed by link id")

    model_config = {
        "validate_assignment": True,
        "extra": "forbid",
    }

    @field_validator('links')
    @classmethod
    def validate_links(cls, v):
        if not v:
            raise ValueError("a compound link needs at least one link")
        return v

    @property
    def joints(self) -> List[Joint]:
        """Joints of every constituent link in native order, without duplicates."""
        seen: Dict[int, Joint] = {}
        for link in self.links.values():
            for joint_id, joint in link.joints.items():
                if joint_id not in seen:
                    seen[joint_id] = joint
        return list(seen.values())

    def get_joints(self) -> List[Joint]:
        return self.joints

    def has_joint(self, joint_id: int) -> bool:
        return any(joint_id in link.joints for link in self.links.values())

    @property
    def center_of_mass(self) -> Tuple[float, float]:
        """
        Mass weighted mean of the constituent links' centers of mass.

        Computed on every access; the returned tuple is a fresh value, so
        callers may offset it without touching the link.
        """
        return self.center_of_mass_excluding(frozenset())

    def center_of_mass_excluding(self, joint_ids: FrozenSet[int]) -> Tuple[float, float]:
        """Center of mass ignoring the given joints (e.g. a tracer placed on the link)."""
        weighted = [
            (link.mass, link.centroid(joint_ids)) for link in self.links.values()
            if any(jid not in joint_ids for jid in link.joints)
        ]
        if not weighted:
            raise ValueError(f"compound link '{self.name}' has no joints")
        masses = np.array([m for m, _ in weighted], dtype=float)
        centers = np.array([c for _, c in weighted], dtype=float)
        cx, cy = (centers * masses[:, None]).sum(axis=0) / masses.sum()
        return (float(cx), float(cy))

    def as_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'links': [link.as_dict() for link in self.links.values()],
        }
