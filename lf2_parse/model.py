"""
Immutable in-memory model of an LF2 object data file.

Every tag is optional unless stated otherwise: an absent tag is `None`, never
a made-up default. Sequences are tuples so a built model cannot be changed.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Optional, Tuple, Type, TypeVar, Union

from . import kinds


@dataclass(frozen=True)
class Path:
    """A relative file path as written, e.g. `sprite\\sys\\frozen_0.bmp`."""
    segments: Tuple[str, ...]
    separator: Optional[str] = None

    def __str__(self) -> str:
        return (self.separator or "/").join(self.segments)

    @property
    def name(self) -> str:
        return self.segments[-1]


@dataclass(frozen=True)
class SpriteSheet:
    """
    One `file(first-last): path w: h: row: col:` line of the header: a sprite
    sheet of `row * col` cells, each `w` by `h` pixels.
    """
    file: Path
    w: int
    h: int
    row: int
    col: int
    first_pic: Optional[int] = None
    last_pic: Optional[int] = None

    @property
    def capacity(self) -> int:
        return self.row * self.col


class ElementKind(Enum):
    BDY = "bdy"
    BPOINT = "bpoint"
    CPOINT = "cpoint"
    ITR = "itr"
    OPOINT = "opoint"
    WPOINT = "wpoint"


@dataclass(frozen=True)
class Bdy:
    """Hittable body of the object."""
    element_kind: ClassVar[ElementKind] = ElementKind.BDY

    kind: Optional[int] = None
    x: Optional[int] = None
    y: Optional[int] = None
    w: Optional[int] = None
    h: Optional[int] = None
    zwidth: Optional[int] = None

    @property
    def bdy_kind(self) -> Optional[kinds.BdyKind]:
        return None if self.kind is None else kinds.decode_bdy_kind(self.kind)


@dataclass(frozen=True)
class BPoint:
    """Bleeding coordinates when the character has low HP."""
    element_kind: ClassVar[ElementKind] = ElementKind.BPOINT

    x: Optional[int] = None
    y: Optional[int] = None


@dataclass(frozen=True)
class CPoint:
    """Aligns a catching character with the character it holds."""
    element_kind: ClassVar[ElementKind] = ElementKind.CPOINT

    kind: Optional[int] = None
    x: Optional[int] = None
    y: Optional[int] = None
    decrease: Optional[int] = None
    dircontrol: Optional[int] = None
    hurtable: Optional[int] = None
    injury: Optional[int] = None
    aaction: Optional[int] = None
    jaction: Optional[int] = None
    vaction: Optional[int] = None
    taction: Optional[int] = None
    throwinjury: Optional[int] = None
    throwvx: Optional[int] = None
    throwvy: Optional[int] = None
    throwvz: Optional[int] = None
    fronthurtact: Optional[int] = None
    backhurtact: Optional[int] = None
    cover: Optional[int] = None

    @property
    def cpoint_kind(self) -> Optional[kinds.CPointKind]:
        return None if self.kind is None else kinds.CPointKind(self.kind)


@dataclass(frozen=True)
class Itr:
    """Interaction this object places on another."""
    element_kind: ClassVar[ElementKind] = ElementKind.ITR

    kind: Optional[int] = None
    x: Optional[int] = None
    y: Optional[int] = None
    w: Optional[int] = None
    h: Optional[int] = None
    zwidth: Optional[int] = None
    dvx: Optional[int] = None
    dvy: Optional[int] = None
    dvz: Optional[int] = None
    fall: Optional[int] = None
    bdefend: Optional[int] = None
    injury: Optional[int] = None
    effect: Optional[int] = None
    arest: Optional[int] = None
    vrest: Optional[int] = None
    # one value, or front and back catch frames
    catchingact: Optional[Tuple[int, ...]] = None
    caughtact: Optional[Tuple[int, ...]] = None

    @property
    def itr_kind(self) -> Optional[kinds.ItrKind]:
        return None if self.kind is None else kinds.ItrKind(self.kind)

    @property
    def itr_effect(self) -> Optional[kinds.Effect]:
        return None if self.effect is None else kinds.Effect(self.effect)


@dataclass(frozen=True)
class OPoint:
    """Spawns an object."""
    element_kind: ClassVar[ElementKind] = ElementKind.OPOINT

    kind: Optional[int] = None
    x: Optional[int] = None
    y: Optional[int] = None
    action: Optional[int] = None
    dvx: Optional[int] = None
    dvy: Optional[int] = None
    oid: Optional[int] = None
    facing: Optional[int] = None

    @property
    def opoint_kind(self) -> Optional[kinds.OPointKind]:
        return None if self.kind is None else kinds.OPointKind(self.kind)

    @property
    def opoint_facing(self) -> Optional[kinds.OPointFacing]:
        return None if self.facing is None else kinds.decode_facing(self.facing)


@dataclass(frozen=True)
class WPoint:
    """Where a held weapon sits and how it behaves."""
    element_kind: ClassVar[ElementKind] = ElementKind.WPOINT

    kind: Optional[int] = None
    x: Optional[int] = None
    y: Optional[int] = None
    weaponact: Optional[int] = None
    attacking: Optional[int] = None
    cover: Optional[int] = None
    dvx: Optional[int] = None
    dvy: Optional[int] = None
    dvz: Optional[int] = None

    @property
    def wpoint_kind(self) -> Optional[kinds.WPointKind]:
        return None if self.kind is None else kinds.WPointKind(self.kind)


Element = Union[Bdy, BPoint, CPoint, Itr, OPoint, WPoint]
E = TypeVar('E', Bdy, BPoint, CPoint, Itr, OPoint, WPoint)


@dataclass(frozen=True)
class Frame:
    number: int
    name: str
    centerx: Optional[int] = None
    centery: Optional[int] = None
    dvx: Optional[int] = None
    dvy: Optional[int] = None
    dvz: Optional[int] = None
    hit_a: Optional[int] = None
    hit_d: Optional[int] = None
    hit_j: Optional[int] = None
    hit_fa: Optional[int] = None
    hit_ua: Optional[int] = None
    hit_da: Optional[int] = None
    hit_fj: Optional[int] = None
    hit_uj: Optional[int] = None
    hit_dj: Optional[int] = None
    hit_ja: Optional[int] = None
    mp: Optional[int] = None
    next_frame: Optional[int] = None
    pic: Optional[int] = None
    sound: Optional[Path] = None
    state: Optional[int] = None
    wait: Optional[int] = None
    elements: Tuple[Element, ...] = ()

    def elements_of(self, element_type: Type[E]) -> Tuple[E, ...]:
        """Elements of one variant, in source order."""
        return tuple(element for element in self.elements if isinstance(element, element_type))

    @property
    def next_target(self) -> Optional[kinds.FrameTarget]:
        return None if self.next_frame is None else kinds.frame_target(self.next_frame)

    @property
    def frame_state(self) -> Optional[kinds.State]:
        return None if self.state is None else kinds.decode_state(self.state)[0]


@dataclass(frozen=True)
class ObjectData:
    """
    One parsed object data file. Only `name` is required; a header without
    `file` lines has no sprite sheets.
    """
    name: str
    head: Optional[Path] = None
    small: Optional[Path] = None
    sprite_sheets: Tuple[SpriteSheet, ...] = ()
    walking_frame_rate: Optional[int] = None
    walking_speed: Optional[Decimal] = None
    walking_speed_z: Optional[Decimal] = None
    running_frame_rate: Optional[int] = None
    running_speed: Optional[Decimal] = None
    running_speed_z: Optional[Decimal] = None
    heavy_walking_speed: Optional[Decimal] = None
    heavy_walking_speed_z: Optional[Decimal] = None
    heavy_running_speed: Optional[Decimal] = None
    heavy_running_speed_z: Optional[Decimal] = None
    jump_height: Optional[Decimal] = None
    jump_distance: Optional[Decimal] = None
    jump_distance_z: Optional[Decimal] = None
    dash_height: Optional[Decimal] = None
    dash_distance: Optional[Decimal] = None
    dash_distance_z: Optional[Decimal] = None
    rowing_height: Optional[Decimal] = None
    rowing_distance: Optional[Decimal] = None
    frames: Tuple[Frame, ...] = ()

    @property
    def sprite_sheet(self) -> Optional[SpriteSheet]:
        return self.sprite_sheets[0] if self.sprite_sheets else None

    def frame(self, number: int) -> Optional[Frame]:
        for frame in self.frames:
            if frame.number == number:
                return frame
        return None
