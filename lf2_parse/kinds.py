"""
Decoders for the numeric codes LF2 packs into object data tags.

The mapper keeps every code as the integer written in the file; these helpers
give the codes meaning on request and raise `ValueError` for codes LF2 does
not define.
"""

from enum import Enum, IntEnum
from typing import NamedTuple, Optional, Tuple


class ItrKind(IntEnum):
    """`itr: kind:` values."""
    NORMAL = 0
    CATCH_STUNNED = 1
    WEAPON_PICK = 2
    CATCH_FORCE = 3
    FALLING = 4
    WEAPON_STRENGTH = 5
    SUPER_PUNCH = 6
    ROLL_WEAPON_PICK = 7
    HEAL_BALL = 8
    REFLECTIVE_SHIELD = 9
    SONATA_OF_DEATH = 10
    SONATA_OF_DEATH_2 = 11
    WALL = 14
    WHIRLWIND_WIND = 15
    WHIRLWIND_ICE = 16


class Effect(IntEnum):
    """`itr: effect:` values."""
    NORMAL = 0
    BLOOD = 1
    FIRE = 2
    ICE = 3
    REFLECT = 4
    REFLECTS = 5
    FIRE_GROUND = 20
    FIRE_BREATH = 21
    FIRE_EXPLODE = 22
    POWER_EXPLODE = 23
    ICICLE = 30


class CPointKind(IntEnum):
    CATCHER = 1
    CAUGHT = 2


class OPointKind(IntEnum):
    SPAWN = 1
    HOLD_LIGHT_WEAPON = 2


class WPointKind(IntEnum):
    HOLDING = 1
    HELD = 2
    DROPPING = 3


class State(IntEnum):
    """Frame `state:` values. 8000-8099 all decode to `TRANSFORM_TO`."""
    STANDING = 0
    WALKING = 1
    RUNNING = 2
    ATTACKING = 3
    JUMPING = 4
    DASHING = 5
    ROWING = 6
    DEFEND = 7
    BROKEN_DEFENCE = 8
    CATCHING = 9
    CAUGHT = 10
    INJURED = 11
    FALLING = 12
    ICE = 13
    LYING = 14
    OTHER = 15
    STUNNED = 16
    DRINKING = 17
    BURNING = 18
    FIRE_RUN = 19
    HIT_GROUND = 100
    Z_MOVEMENT = 301
    TELEPORT_NEAREST_ENEMY = 400
    TELEPORT_FURTHEST_ALLY = 401
    TRANSFORM_CHECK = 500
    TRANSFORM = 501
    LIGHT_WEAPON_IN_SKY = 1000
    LIGHT_WEAPON_IN_HAND = 1001
    LIGHT_WEAPON_BEING_THROWN = 1002
    LIGHT_WEAPON_JUST_ON_GROUND = 1003
    LIGHT_WEAPON_ON_GROUND = 1004
    HEAL = 1700
    HEAVY_WEAPON_IN_SKY = 2000
    HEAVY_WEAPON_IN_HAND = 2001
    HEAVY_WEAPON_ON_GROUND = 2004
    BALL_FLYING = 3000
    BALL_FLYING_HITTING = 3001
    BALL_FLYING_HIT = 3002
    BALL_FLYING_REBOUND = 3003
    BALL_FLYING_DISAPPEAR = 3004
    BALL_FLYING_NO_SHADOW = 3005
    BALL_FLYING_PIERCING = 3006
    TRANSFORM_TO = 8000
    LOUIS_TRANSFORM = 9995
    LOUIS_TRANSFORM_SPAWN_ARMOUR = 9996
    MESSAGE = 9997
    DELETE_OBJECT = 9998
    BROKEN_WEAPON = 9999


TRANSFORM_TO_RANGE = range(8000, 8100)


def decode_state(value: int) -> Tuple[State, Optional[int]]:
    """
    Return the state and, for `TRANSFORM_TO`, the object id to transform into.
    """
    if value in TRANSFORM_TO_RANGE:
        return State.TRANSFORM_TO, value - State.TRANSFORM_TO
    return State(value), None


class BdyKind(NamedTuple):
    """
    `bdy: kind:` is 0 for a normal body. 1000-1999 (or -1999 to -1000) makes
    a hostage body that switches to frame `code - 1000` when freed.
    """
    hostage: bool
    freed_frame: Optional[int] = None


def decode_bdy_kind(value: int) -> BdyKind:
    if value == 0:
        return BdyKind(hostage=False)
    if 1000 <= value <= 1999:
        return BdyKind(hostage=True, freed_frame=value - 1000)
    if -1999 <= value <= -1000:
        return BdyKind(hostage=True, freed_frame=value + 1000)
    raise ValueError(f"{value} is not a valid bdy kind")


class FacingDirection(Enum):
    PARENT_SAME = "parent_same"
    PARENT_OPPOSITE = "parent_opposite"
    RIGHT = "right"


class OPointFacing(NamedTuple):
    count: int
    direction: FacingDirection


def decode_facing(value: int) -> OPointFacing:
    """
    `opoint: facing:` packs a spawn count in the tens and the direction in the
    parity of the value. 10 is the exception: one object always facing right.
    """
    if value < 0:
        raise ValueError(f"{value} is not a valid opoint facing")
    if value == 0:
        return OPointFacing(1, FacingDirection.PARENT_SAME)
    if value == 1:
        return OPointFacing(1, FacingDirection.PARENT_OPPOSITE)
    if value == 10:
        return OPointFacing(1, FacingDirection.RIGHT)
    direction = FacingDirection.PARENT_SAME if value % 2 == 0 else FacingDirection.PARENT_OPPOSITE
    return OPointFacing(value // 10, direction)


class FrameTarget(NamedTuple):
    number: int
    flip_facing: bool


def frame_target(value: int) -> FrameTarget:
    """A negative frame reference means the same frame with the facing flipped."""
    return FrameTarget(abs(value), value < 0)
