"""
The LF2 object data grammar.

An object file is a `<bmp_begin>` ... `<bmp_end>` header followed by
`<frame>` ... `<frame_end>` blocks. Frames hold directives and `bdy:`,
`bpoint:`, `cpoint:`, `itr:`, `opoint:` and `wpoint:` elements. Anything
after the last complete frame is accepted and ignored.

Inside a block, tags may appear in any order and any number of times. Every
block combines its alternatives with `longest`, so a keyword that is a prefix
of another (`walking_speed`, `walking_speedz`) can never shadow it.
"""

from .abstract import (
    Grammar,
    grammar,
    minmax,
    joined,
    longest,
    option,
    tag,
    Literal,
    RegExp,
    Rest,
    EndOfInput,
)

# Lexical rules

INT = RegExp(r"-?[0-9]+").with_name("Int")
UINT = RegExp(r"[0-9]+").with_name("Uint")
FLOAT = RegExp(r"-?[0-9]+\.[0-9]*").with_name("Float")

SEGMENT_PATTERN = r"[A-Za-z0-9_.\-]+"
SEPARATOR_PATTERN = r"[/\\]"

PATH = RegExp(rf"{SEGMENT_PATTERN}(?:{SEPARATOR_PATTERN}{SEGMENT_PATTERN})*").with_name("Path")
FRAME_NAME = RegExp(SEGMENT_PATTERN).with_name("FrameName")
OBJECT_NAME = RegExp(r"[A-Za-z_.\-][A-Za-z0-9_.\-]*").with_name("ObjectName")

LEXEMES = {rule.get_node_name(): rule for rule in (INT, UINT, FLOAT, PATH, FRAME_NAME, OBJECT_NAME)}


def stat(field: str, keyword: str, value: RegExp):
    """Header statistics are written `keyword value`, optionally `keyword: value`."""
    return tag(field, keyword, option(Literal(":")), value)


def element(name: str, keyword: str, *tags):
    return joined(
        Literal(f"{keyword}:"),
        minmax()(longest(*tags)),
        Literal(f"{keyword}_end:"),
    ).with_name(name)


# Header

SPRITE_SHEET = joined(
    Literal("file"),
    option(
        joined(
            Literal("("), UINT, Literal("-"), UINT, Literal(")")
        ).with_name("SpriteRange")
    ),
    Literal(":"),
    PATH,
    option(tag("w", "w:", UINT)),
    option(tag("h", "h:", UINT)),
    option(tag("row", "row:", UINT)),
    option(tag("col", "col:", UINT)),
).with_name("SpriteSheet")

HEADER = joined(
    Literal("<bmp_begin>"),
    minmax()(
        longest(
            tag("name", "name:", OBJECT_NAME),
            tag("head", "head:", PATH),
            tag("small", "small:", PATH),
            SPRITE_SHEET,
            stat("walking_frame_rate", "walking_frame_rate", UINT),
            stat("walking_speed", "walking_speed", FLOAT),
            stat("walking_speed_z", "walking_speedz", FLOAT),
            stat("running_frame_rate", "running_frame_rate", UINT),
            stat("running_speed", "running_speed", FLOAT),
            stat("running_speed_z", "running_speedz", FLOAT),
            stat("heavy_walking_speed", "heavy_walking_speed", FLOAT),
            stat("heavy_walking_speed_z", "heavy_walking_speedz", FLOAT),
            stat("heavy_running_speed", "heavy_running_speed", FLOAT),
            stat("heavy_running_speed_z", "heavy_running_speedz", FLOAT),
            stat("jump_height", "jump_height", FLOAT),
            stat("jump_distance", "jump_distance", FLOAT),
            stat("jump_distance_z", "jump_distancez", FLOAT),
            stat("dash_height", "dash_height", FLOAT),
            stat("dash_distance", "dash_distance", FLOAT),
            stat("dash_distance_z", "dash_distancez", FLOAT),
            stat("rowing_height", "rowing_height", FLOAT),
            stat("rowing_distance", "rowing_distance", FLOAT),
        )
    ),
    Literal("<bmp_end>"),
).with_name("Header")

# Frame elements

BDY = element(
    "Bdy", "bdy",
    tag("kind", "kind:", INT),
    tag("x", "x:", INT),
    tag("y", "y:", INT),
    tag("w", "w:", UINT),
    tag("h", "h:", UINT),
    tag("zwidth", "zwidth:", UINT),
)

BPOINT = element(
    "BPoint", "bpoint",
    tag("x", "x:", INT),
    tag("y", "y:", INT),
)

CPOINT = element(
    "CPoint", "cpoint",
    tag("kind", "kind:", UINT),
    tag("x", "x:", INT),
    tag("y", "y:", INT),
    tag("decrease", "decrease:", INT),
    tag("dircontrol", "dircontrol:", INT),
    tag("hurtable", "hurtable:", INT),
    tag("injury", "injury:", INT),
    tag("aaction", "aaction:", INT),
    tag("jaction", "jaction:", INT),
    tag("vaction", "vaction:", INT),
    tag("taction", "taction:", INT),
    tag("throwinjury", "throwinjury:", INT),
    tag("throwvx", "throwvx:", INT),
    tag("throwvy", "throwvy:", INT),
    tag("throwvz", "throwvz:", INT),
    tag("fronthurtact", "fronthurtact:", INT),
    tag("backhurtact", "backhurtact:", INT),
    tag("cover", "cover:", INT),
)

ITR = element(
    "Itr", "itr",
    tag("kind", "kind:", UINT),
    tag("x", "x:", INT),
    tag("y", "y:", INT),
    tag("w", "w:", UINT),
    tag("h", "h:", UINT),
    tag("zwidth", "zwidth:", UINT),
    tag("dvx", "dvx:", INT),
    tag("dvy", "dvy:", INT),
    tag("dvz", "dvz:", INT),
    tag("fall", "fall:", INT),
    tag("bdefend", "bdefend:", INT),
    tag("injury", "injury:", INT),
    tag("effect", "effect:", UINT),
    tag("arest", "arest:", UINT),
    tag("vrest", "vrest:", UINT),
    tag("catchingact", "catchingact:", INT, option(INT)),
    tag("caughtact", "caughtact:", INT, option(INT)),
)

OPOINT = element(
    "OPoint", "opoint",
    tag("kind", "kind:", UINT),
    tag("x", "x:", INT),
    tag("y", "y:", INT),
    tag("action", "action:", INT),
    tag("dvx", "dvx:", INT),
    tag("dvy", "dvy:", INT),
    tag("oid", "oid:", UINT),
    tag("facing", "facing:", UINT),
)

WPOINT = element(
    "WPoint", "wpoint",
    tag("kind", "kind:", UINT),
    tag("x", "x:", INT),
    tag("y", "y:", INT),
    tag("weaponact", "weaponact:", INT),
    tag("attacking", "attacking:", UINT),
    tag("cover", "cover:", INT),
    tag("dvx", "dvx:", INT),
    tag("dvy", "dvy:", INT),
    tag("dvz", "dvz:", INT),
)

ELEMENT_NAMES = ("Bdy", "BPoint", "CPoint", "Itr", "OPoint", "WPoint")

# Frame

FRAME = joined(
    Literal("<frame>"),
    UINT,
    FRAME_NAME,
    minmax()(
        longest(
            tag("centerx", "centerx:", INT),
            tag("centery", "centery:", INT),
            tag("dvx", "dvx:", INT),
            tag("dvy", "dvy:", INT),
            tag("dvz", "dvz:", INT),
            tag("hit_a", "hit_a:", INT),
            tag("hit_d", "hit_d:", INT),
            tag("hit_j", "hit_j:", INT),
            tag("hit_fa", "hit_Fa:", INT),
            tag("hit_ua", "hit_Ua:", INT),
            tag("hit_da", "hit_Da:", INT),
            tag("hit_fj", "hit_Fj:", INT),
            tag("hit_uj", "hit_Uj:", INT),
            tag("hit_dj", "hit_Dj:", INT),
            tag("hit_ja", "hit_ja:", INT),
            tag("mp", "mp:", INT),
            tag("next_frame", "next:", INT),
            tag("pic", "pic:", INT),
            tag("sound", "sound:", PATH),
            tag("state", "state:", UINT),
            tag("wait", "wait:", UINT),
            BDY,
            BPOINT,
            CPOINT,
            ITR,
            OPOINT,
            WPOINT,
        )
    ),
    Literal("<frame_end>"),
).with_name("Frame")


@grammar(
    joined(
        HEADER,
        minmax()(FRAME),
        Rest().with_name("Trailing"),
        EndOfInput(),
    )
)
class ObjectGrammar(Grammar):
    """A whole object data file."""
    name = "Object"

    def ignore(self):
        return (Literal(" "), Literal("\t"), Literal("\r"), Literal("\n"))
