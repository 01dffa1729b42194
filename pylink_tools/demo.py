# Demo: crank-rocker four-bar whose coupler is a compound link
from __future__ import annotations

from configs.link_models import CompoundLink
from pylink_tools.mechanism import Mechanism

# Joint positions of the demo four-bar
#   ground O1 (0, 0), ground O2 (3, 0)
#   crank O1-A = 1, coupler A-B = sqrt(10), rocker O2-B = 2
GROUND_LEFT = (0.0, 0.0)
GROUND_RIGHT = (3.0, 0.0)
CRANK_TIP = (0.0, 1.0)
COUPLER_TIP = (3.0, 2.0)
COUPLER_POINT = (2.0, 3.0)


def create_demo_fourbar(with_coupler_point: bool = True) -> tuple[Mechanism, CompoundLink]:
    """
    Build the demo mechanism.

    The coupler compound link is the coupler bar A-B, plus (optionally) a
    lighter bracket B-C carrying a coupler point C.

    Returns:
        (mechanism, coupler compound link)
    """
    mechanism = Mechanism(name='demo_fourbar')

    o1 = mechanism.add_joint(*GROUND_LEFT, name='O1', role='ground')
    o2 = mechanism.add_joint(*GROUND_RIGHT, name='O2', role='ground')
    a = mechanism.add_joint(*CRANK_TIP, name='A', role='crank')
    b = mechanism.add_joint(*COUPLER_TIP, name='B')

    mechanism.add_link([o1.id, o2.id], name='ground')
    mechanism.add_link([o1.id, a.id], name='crank')
    coupler = mechanism.add_link([a.id, b.id], name='coupler')
    mechanism.add_link([o2.id, b.id], name='rocker')

    link_ids = [coupler.id]
    if with_coupler_point:
        c = mechanism.add_joint(*COUPLER_POINT, name='C')
        bracket = mechanism.add_link([b.id, c.id], name='bracket', mass=0.5)
        link_ids.append(bracket.id)

    compound = mechanism.add_compound_link(link_ids, name='coupler_body')
    return mechanism, compound


if __name__ == '__main__':
    mechanism, compound = create_demo_fourbar()
    print(f'Mechanism: {mechanism.name}')
    print(f'Joints: {[j.name for j in mechanism.joints.values()]}')
    print(f"Compound link '{compound.name}' center of mass: {compound.center_of_mass}")
