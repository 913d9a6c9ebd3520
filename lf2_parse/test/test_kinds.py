import pytest

from .. import parse_object_data
from ..kinds import (
    ItrKind,
    Effect,
    CPointKind,
    OPointKind,
    State,
    BdyKind,
    FacingDirection,
    OPointFacing,
    FrameTarget,
    decode_state,
    decode_bdy_kind,
    decode_facing,
    frame_target,
)
from ..model import Bdy, Itr, OPoint, CPoint
from . import samples


def test_decode_state():
    assert decode_state(0) == (State.STANDING, None)
    assert decode_state(3006) == (State.BALL_FLYING_PIERCING, None)
    assert decode_state(8000) == (State.TRANSFORM_TO, 0)
    assert decode_state(8052) == (State.TRANSFORM_TO, 52)
    with pytest.raises(ValueError):
        decode_state(42)


def test_decode_bdy_kind():
    assert decode_bdy_kind(0) == BdyKind(hostage=False)
    assert decode_bdy_kind(1061) == BdyKind(hostage=True, freed_frame=61)
    assert decode_bdy_kind(-1061) == BdyKind(hostage=True, freed_frame=-61)
    for value in (1, 999, 2000, -1):
        with pytest.raises(ValueError):
            decode_bdy_kind(value)


def test_decode_facing():
    assert decode_facing(0) == OPointFacing(1, FacingDirection.PARENT_SAME)
    assert decode_facing(1) == OPointFacing(1, FacingDirection.PARENT_OPPOSITE)
    assert decode_facing(10) == OPointFacing(1, FacingDirection.RIGHT)
    assert decode_facing(20) == OPointFacing(2, FacingDirection.PARENT_SAME)
    assert decode_facing(31) == OPointFacing(3, FacingDirection.PARENT_OPPOSITE)
    with pytest.raises(ValueError):
        decode_facing(-1)


def test_frame_target():
    assert frame_target(61) == FrameTarget(61, False)
    assert frame_target(-121) == FrameTarget(121, True)


def test_model_properties():
    obj = parse_object_data(samples.FREEZE)

    punch = obj.frame(60)
    assert punch.frame_state == State.ATTACKING
    assert [bdy.bdy_kind for bdy in punch.elements_of(Bdy)] == [
        BdyKind(hostage=False), BdyKind(hostage=True, freed_frame=61),
    ]
    itr, = punch.elements_of(Itr)
    assert itr.itr_kind == ItrKind.NORMAL
    assert itr.itr_effect is None

    catch = obj.frame(120)
    assert catch.next_target == FrameTarget(121, True)
    assert catch.frame_state == State.CATCHING
    assert catch.elements_of(CPoint)[0].cpoint_kind == CPointKind.CATCHER
    assert catch.elements_of(Itr)[0].itr_kind == ItrKind.CATCH_STUNNED
    opoint, = catch.elements_of(OPoint)
    assert opoint.opoint_kind == OPointKind.SPAWN
    assert opoint.opoint_facing == OPointFacing(3, FacingDirection.PARENT_OPPOSITE)


def test_unknown_codes_do_not_fail_parsing():
    text = samples.header_with() + samples.frame(
        0, "odd", "state: 42", "itr: kind: 99 effect: 77 itr_end:"
    )
    frame = parse_object_data(text).frame(0)
    assert frame.state == 42
    with pytest.raises(ValueError):
        frame.frame_state
    itr, = frame.elements_of(Itr)
    with pytest.raises(ValueError):
        itr.itr_kind
    with pytest.raises(ValueError):
        itr.itr_effect
    assert Effect(2) == Effect.FIRE
