import logging
from decimal import Decimal

import pytest

from .. import parse_object_data, try_parse_object_data
from ..errors import NumericRangeError, SemanticError, DecodeError, StructuralParseError
from ..grammar import ObjectGrammar
from ..mapper import ObjectDataMapper, Lexeme
from ..model import Bdy, BPoint, CPoint, Itr, OPoint, WPoint, Path, ElementKind
from ..parser import Parser
from . import samples


def test_freeze():
    obj = parse_object_data(samples.FREEZE)

    assert obj.name == "Freeze"
    assert obj.head == Path(("sprite", "sys", "freeze_f.bmp"), "\\")
    assert str(obj.small) == "sprite\\sys\\freeze_s.bmp"
    assert obj.walking_frame_rate == 3
    assert obj.walking_speed == Decimal("4.000000")
    assert obj.walking_speed_z == Decimal("2.5")
    assert obj.jump_height == Decimal("-16.299999")
    assert obj.rowing_distance == Decimal("5")

    assert len(obj.sprite_sheets) == 2
    sheet = obj.sprite_sheet
    assert sheet.file.name == "freeze_0.bmp"
    assert (sheet.w, sheet.h, sheet.row, sheet.col) == (79, 79, 10, 7)
    assert (sheet.first_pic, sheet.last_pic) == (0, 69)
    assert sheet.capacity == 70
    assert obj.sprite_sheets[1].first_pic == 70

    assert [frame.number for frame in obj.frames] == [0, 60, 120]
    standing = obj.frame(0)
    assert standing.name == "standing"
    assert (standing.pic, standing.wait, standing.next_frame) == (0, 5, 1)
    assert (standing.hit_a, standing.hit_d, standing.hit_j) == (60, 110, 210)
    assert standing.hit_fa is None
    assert standing.elements == (Bdy(kind=0, x=21, y=16, w=43, h=63),)
    assert obj.frame(1) is None


def test_frame_fields():
    punch = parse_object_data(samples.FREEZE).frame(60)
    assert (punch.hit_fa, punch.hit_ua, punch.hit_da) == (235, 240, 245)
    assert (punch.hit_fj, punch.hit_uj, punch.hit_dj, punch.hit_ja) == (250, 255, 260, 265)
    assert punch.mp == -50
    assert punch.sound == Path(("data", "007.wav"), "\\")
    assert punch.centerx == 39


def test_element_order():
    punch = parse_object_data(samples.FREEZE).frame(60)
    assert [type(element) for element in punch.elements] == [WPoint, Bdy, Itr, BPoint, Bdy]
    assert [element.element_kind for element in punch.elements][:2] == [ElementKind.WPOINT, ElementKind.BDY]
    assert [bdy.kind for bdy in punch.elements_of(Bdy)] == [0, 1061]
    assert punch.elements_of(BPoint) == (BPoint(x=36, y=26),)
    assert punch.elements_of(CPoint) == ()

    itr, = punch.elements_of(Itr)
    assert (itr.kind, itr.x, itr.w, itr.fall, itr.vrest, itr.bdefend, itr.injury) == (0, 44, 35, 20, 15, 8, 20)
    assert itr.dvy is None
    assert itr.catchingact is None


def test_catch_elements():
    catch = parse_object_data(samples.FREEZE).frame(120)
    assert catch.next_frame == -121

    cpoint, = catch.elements_of(CPoint)
    assert (cpoint.kind, cpoint.throwvy, cpoint.decrease, cpoint.taction) == (1, -8, -7, 232)
    assert cpoint.cover is None

    itr, = catch.elements_of(Itr)
    assert itr.catchingact == (120, 120)
    assert itr.caughtact == (130,)

    opoint, = catch.elements_of(OPoint)
    assert (opoint.oid, opoint.facing, opoint.action) == (209, 31, 0)


def test_float_forms():
    obj = parse_object_data(samples.header_with("walking_speed 1.", "walking_speedz:-0.5", "jump_height: 2.25"))
    assert obj.walking_speed == Decimal("1.0")
    assert str(obj.walking_speed) == "1.0"
    assert obj.walking_speed_z == Decimal("-0.5")
    assert obj.jump_height == Decimal("2.25")


def test_header_order_is_free():
    obj = parse_object_data(
        "<bmp_begin>\nwalking_speedz 1.0\nsmall: s.bmp\nname: Freeze\nwalking_speed 2.0\n<bmp_end>\n"
    )
    assert (obj.name, obj.walking_speed, obj.walking_speed_z) == ("Freeze", Decimal("2.0"), Decimal("1.0"))
    assert obj.small == Path(("s.bmp",), None)
    assert obj.head is None
    assert obj.sprite_sheets == ()
    assert obj.frames == ()


def test_duplicate_tags_keep_last():
    text = samples.header_with("walking_speed 1.0", "walking_speed 2.0") + samples.frame(
        0, "standing",
        "pic: 1 pic: 2",
        "bdy: x: 1 x: 3 bdy_end:",
    )
    obj = parse_object_data(text)
    assert obj.walking_speed == Decimal("2.0")
    frame = obj.frame(0)
    assert frame.pic == 2
    assert frame.elements == (Bdy(x=3),)


def test_duplicate_name_keeps_last():
    obj = parse_object_data("<bmp_begin>\nname: First\nname: Second\n<bmp_end>\n")
    assert obj.name == "Second"


def test_missing_name():
    with pytest.raises(SemanticError) as info:
        parse_object_data("<bmp_begin>\nwalking_speed 1.0\n<bmp_end>\n")
    assert info.value.field == "name"
    assert info.value.missing == ("name",)
    assert (info.value.line, info.value.column) == (1, 1)


def test_incomplete_sprite_sheet():
    text = samples.header_with("file(0-3): sprite\\a.bmp  w: 79  h: 79")
    with pytest.raises(SemanticError) as info:
        parse_object_data(text)
    error = info.value
    assert error.field == "file"
    assert error.missing == ("row", "col")
    assert "`row:`" in str(error)
    assert error.line == 3


def test_out_of_order_sprite_sheet():
    with pytest.raises(StructuralParseError) as info:
        parse_object_data(samples.header_with("file: a.bmp  h: 79  w: 79  row: 1  col: 1"))
    assert info.value.rule == "SpriteSheet"
    assert "row:" in info.value.expected
    assert "<bmp_end>" in info.value.expected


@pytest.mark.parametrize("line, field", [
    ("wait: 4294967296", "wait"),
    ("centerx: 2147483648", "centerx"),
    ("mp: -2147483649", "mp"),
])
def test_numeric_range(line, field):
    text = samples.header_with() + samples.frame(0, "standing", line)
    with pytest.raises(NumericRangeError) as info:
        parse_object_data(text)
    error = info.value
    assert error.field == field
    assert error.text == line.split()[-1]
    assert error.line == 5


def test_numeric_limits():
    text = samples.header_with() + samples.frame(0, "standing", "wait: 4294967295", "mp: -2147483648")
    frame = parse_object_data(text).frame(0)
    assert frame.wait == 4294967295
    assert frame.mp == -2147483648


def test_frame_number_range():
    text = samples.header_with() + samples.frame(4294967296, "standing")
    with pytest.raises(NumericRangeError) as info:
        parse_object_data(text)
    assert info.value.field == "number"
    assert (info.value.minimum, info.value.maximum) == (0, 4294967295)


def test_int_bits():
    text = samples.header_with() + samples.frame(0, "standing", "centerx: 40000")
    tree = Parser(ObjectGrammar).parse(text)
    with pytest.raises(NumericRangeError) as info:
        ObjectDataMapper(int_bits=16).map(tree, text)
    assert info.value.maximum == 32767
    assert ObjectDataMapper().map(tree, text).frame(0).centerx == 40000


def test_duplicate_frame_numbers():
    text = samples.header_with() + samples.frame(0, "standing") + samples.frame(0, "again")
    with pytest.raises(SemanticError) as info:
        parse_object_data(text)
    error = info.value
    assert error.field == "number"
    assert error.line == 7
    assert "4:1" in error.message


def test_mapper_is_reusable():
    mapper = ObjectDataMapper()
    text = samples.header_with() + samples.frame(0, "standing")
    tree = Parser(ObjectGrammar).parse(text)
    assert mapper.map(tree, text) == mapper.map(tree, text)


def test_trailing_content_is_ignored(caplog):
    text = samples.HEADER + samples.STANDING + "<frame> 1 broken\n   pic: abc\n<frame_end>\n"
    with caplog.at_level(logging.WARNING, logger="lf2_parse"):
        obj = parse_object_data(text)
    assert [frame.number for frame in obj.frames] == [0]
    assert "ignoring" in caplog.text


def test_broken_frame_drops_the_rest(caplog):
    text = samples.HEADER + "<frame> 1 broken\n   pic: abc\n<frame_end>\n" + samples.STANDING
    with caplog.at_level(logging.WARNING, logger="lf2_parse"):
        obj = try_parse_object_data(text)
    assert obj.frames == ()
    assert "from 26:1 to the end of input" in caplog.text
    assert "27:9: expected `Int` while parsing `pic` in `Frame`, found `abc`" in caplog.text


def test_blank_trailing_content_is_silent(caplog):
    with caplog.at_level(logging.WARNING, logger="lf2_parse"):
        parse_object_data(samples.FREEZE + "\n\n   \t\n")
    assert caplog.text == ""


def test_bytes_input():
    assert parse_object_data(samples.FREEZE.encode("utf-8")).name == "Freeze"

    with pytest.raises(DecodeError) as info:
        parse_object_data(samples.header_with().encode("utf-8") + b"\xff\xfe")
    assert info.value.offset == len(samples.header_with())


def test_try_parse_object_data():
    assert try_parse_object_data(samples.FREEZE).name == "Freeze"

    error = try_parse_object_data("<bmp_begin>\n")
    assert isinstance(error, StructuralParseError)
    assert isinstance(error, ValueError)


def test_path_revalidation():
    mapper = ObjectDataMapper()
    mapper.walker.with_context(source="head: a//b")
    with pytest.raises(SemanticError) as info:
        mapper.convert(Lexeme("Path", "a//b", 6, 10), "head")
    assert info.value.field == "head"
    assert info.value.column == 7


def test_minimal_header_without_frames():
    obj = parse_object_data(samples.header_with("file: sprite\\a.bmp w: 10 h: 20 row: 3 col: 4"))
    assert obj.frames == ()
    assert obj.sprite_sheet.file == Path(("sprite", "a.bmp"), "\\")
    assert (obj.sprite_sheet.first_pic, obj.sprite_sheet.last_pic) == (None, None)
    assert obj.sprite_sheet.capacity == 12


def test_prefix_statistics():
    obj = parse_object_data(samples.header_with("walking_speedz:1.5", "dash_distance1.", "running_speedz 2.0"))
    assert obj.walking_speed_z == Decimal("1.5")
    assert obj.walking_speed is None
    assert obj.dash_distance == Decimal("1.0")
    assert obj.dash_distance_z is None
    assert obj.running_speed_z == Decimal("2.0")


def test_catchingact_arity():
    text = samples.header_with() + samples.frame(
        0, "catching",
        "itr: catchingact:3 itr_end:",
        "itr: catchingact:3 4 caughtact: -5 6 itr_end:",
    )
    one, two = parse_object_data(text).frame(0).elements_of(Itr)
    assert one.catchingact == (3,)
    assert two.catchingact == (3, 4)
    assert two.caughtact == (-5, 6)


def test_arbitrary_trailing_content():
    text = samples.HEADER + samples.STANDING + "#~ <unknown_block> 12 ?? \x00 ]]"
    obj = try_parse_object_data(text)
    assert [frame.number for frame in obj.frames] == [0]


def test_element_numeric_range():
    text = samples.header_with() + samples.frame(0, "standing", "bdy: x: 2147483648 bdy_end:")
    with pytest.raises(NumericRangeError) as info:
        parse_object_data(text)
    assert info.value.field == "x"
    assert info.value.text == "2147483648"
    assert (info.value.line, info.value.column) == (5, 9)
