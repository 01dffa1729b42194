"""
test_mechanism.py - Tests for the Mechanism graph and its mutation primitives.
"""
from __future__ import annotations

import pytest

from pylink_tools.interaction import Selection
from pylink_tools.mechanism import JointNotFoundError
from pylink_tools.mechanism import LinkNotFoundError
from pylink_tools.mechanism import Mechanism


# =============================================================================
# Test: id allocation
# =============================================================================

def test_joint_ids_increase_monotonically():
    """Ids are handed out in increasing order"""
    mechanism = Mechanism()
    ids = [mechanism.add_joint(float(i), 0.0).id for i in range(3)]
    assert ids == [0, 1, 2]


def test_explicit_joint_id_advances_allocator():
    """An explicit id moves the counter past it"""
    mechanism = Mechanism()
    mechanism.add_joint(0.0, 0.0, joint_id=5)
    assert mechanism.add_joint(1.0, 0.0).id == 6


def test_explicit_joint_id_cannot_go_backwards():
    """Ids below the counter are refused"""
    mechanism = Mechanism()
    mechanism.add_joint(0.0, 0.0, joint_id=5)
    with pytest.raises(ValueError):
        mechanism.add_joint(0.0, 0.0, joint_id=3)


def test_removed_ids_are_not_reused(scenario):
    """A removed joint's id is never handed out again"""
    mechanism, compound = scenario
    added = mechanism.add_joint_to_link(compound.id, (10.0, 20.0))
    mechanism.remove_joint(added.id)
    again = mechanism.add_joint_to_link(compound.id, (10.0, 20.0))
    assert again.id > added.id


# =============================================================================
# Test: add_joint_to_link / remove_joint
# =============================================================================

def test_add_joint_to_simple_link(demo):
    """The new joint is on the link and in the mechanism"""
    mechanism, _ = demo
    crank = next(link for link in mechanism.links.values() if link.name == 'crank')
    joint = mechanism.add_joint_to_link(crank.id, (0.0, 0.5))
    assert joint.id in crank.joints
    assert joint.link_ids == [crank.id]
    assert mechanism.get_joint(joint.id).coords == (0.0, 0.5)


def test_add_joint_to_compound_link_uses_first_link(scenario):
    """A compound link id resolves to its first link"""
    mechanism, compound = scenario
    joint = mechanism.add_joint_to_link(compound.id, (10.0, 20.0))
    first_link = next(iter(compound.links.values()))
    assert joint.id in first_link.joints
    assert joint.id in [j.id for j in compound.joints]


def test_add_joint_to_unknown_link_fails():
    """Unknown link ids raise LinkNotFoundError"""
    mechanism = Mechanism()
    with pytest.raises(LinkNotFoundError):
        mechanism.add_joint_to_link(42, (0.0, 0.0))


def test_remove_joint_detaches_from_links(scenario):
    """A removed joint disappears from every link"""
    mechanism, compound = scenario
    joint = mechanism.add_joint_to_link(compound.id, (10.0, 20.0))
    mechanism.remove_joint(joint.id)
    assert not mechanism.has_joint(joint.id)
    assert [j.id for j in compound.joints] == [5, 6]
    assert joint.link_ids == []


def test_remove_unknown_joint_fails():
    """Removing a missing joint raises JointNotFoundError"""
    mechanism = Mechanism()
    with pytest.raises(JointNotFoundError):
        mechanism.remove_joint(3)


def test_removal_listener_clears_selection(scenario):
    """A selected joint that is removed must not stay selected"""
    mechanism, compound = scenario
    joint = mechanism.add_joint_to_link(compound.id, (10.0, 20.0))
    selection = Selection(joint)
    mechanism.add_removal_listener(selection.forget_joint)

    mechanism.remove_joint(joint.id)

    assert selection.get_selected_object() is None


def test_removal_listener_keeps_unrelated_selection(scenario):
    """Removing another joint keeps the selection"""
    mechanism, compound = scenario
    joint = mechanism.add_joint_to_link(compound.id, (10.0, 20.0))
    selection = Selection(compound)
    mechanism.add_removal_listener(selection.forget_joint)

    mechanism.remove_joint(joint.id)

    assert selection.get_selected_object() is compound


# =============================================================================
# Test: rigid bodies
# =============================================================================

def test_bodies_group_compound_links(demo):
    """Coupler bar and bracket form one body; other links are their own bodies"""
    mechanism, compound = demo
    bodies = mechanism.bodies()
    assert sorted(j.id for j in compound.joints) in [sorted(b) for b in bodies]
    assert len(bodies) == 4  # coupler body + ground, crank, rocker


def test_joint_graph_connects_joints_on_same_body(demo):
    """Joints sharing a rigid body are adjacent"""
    mechanism, _ = demo
    graph = mechanism.joint_graph()
    names = {j.name: j.id for j in mechanism.joints.values()}
    assert graph.has_edge(names['A'], names['C'])  # same compound link
    assert graph.has_edge(names['O2'], names['B'])  # rocker
    assert not graph.has_edge(names['O1'], names['B'])
