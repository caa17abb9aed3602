"""Static table translating Scratch 2.0 opcodes to Scratch 3.0 blocks.

Each entry names the canonical opcode and lists, in the order they appear in
the legacy record, the arguments the record carries. An argument is either
an input (optionally backed by an editable shadow of the given opcode) or a
field (optionally tagged with the variable type it references).
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class InputArg:
    name: str
    shadow_opcode: Optional[str] = None


@dataclass(frozen=True)
class FieldArg:
    name: str
    variable_type: Optional[str] = None


ArgumentDescriptor = Union[InputArg, FieldArg]


@dataclass(frozen=True)
class OpcodeSpec:
    opcode: str
    args: Tuple[ArgumentDescriptor, ...] = ()


def _spec(opcode: str, *args: ArgumentDescriptor) -> OpcodeSpec:
    return OpcodeSpec(opcode, tuple(args))


SPEC_MAP: Dict[str, OpcodeSpec] = {
    # Motion
    "forward:": _spec("motion_movesteps", InputArg("STEPS", "math_number")),
    "turnRight:": _spec("motion_turnright", InputArg("DEGREES", "math_number")),
    "turnLeft:": _spec("motion_turnleft", InputArg("DEGREES", "math_number")),
    "heading:": _spec("motion_pointindirection", InputArg("DIRECTION", "math_angle")),
    "pointTowards:": _spec("motion_pointtowards", InputArg("TOWARDS", "motion_pointtowards_menu")),
    "gotoX:y:": _spec("motion_gotoxy", InputArg("X", "math_number"), InputArg("Y", "math_number")),
    "gotoSpriteOrMouse:": _spec("motion_goto", InputArg("TO", "motion_goto_menu")),
    "glideSecs:toX:y:elapsed:from:": _spec(
        "motion_glidesecstoxy",
        InputArg("SECS", "math_number"),
        InputArg("X", "math_number"),
        InputArg("Y", "math_number"),
    ),
    "changeXposBy:": _spec("motion_changexby", InputArg("DX", "math_number")),
    "xpos:": _spec("motion_setx", InputArg("X", "math_number")),
    "changeYposBy:": _spec("motion_changeyby", InputArg("DY", "math_number")),
    "ypos:": _spec("motion_sety", InputArg("Y", "math_number")),
    "bounceOffEdge": _spec("motion_ifonedgebounce"),
    "setRotationStyle": _spec("motion_setrotationstyle", FieldArg("STYLE")),
    "xpos": _spec("motion_xposition"),
    "ypos": _spec("motion_yposition"),
    "heading": _spec("motion_direction"),

    # Looks
    "say:duration:elapsed:from:": _spec(
        "looks_sayforsecs", InputArg("MESSAGE", "text"), InputArg("SECS", "math_number")
    ),
    "say:": _spec("looks_say", InputArg("MESSAGE", "text")),
    "think:duration:elapsed:from:": _spec(
        "looks_thinkforsecs", InputArg("MESSAGE", "text"), InputArg("SECS", "math_number")
    ),
    "think:": _spec("looks_think", InputArg("MESSAGE", "text")),
    "show": _spec("looks_show"),
    "hide": _spec("looks_hide"),
    "lookLike:": _spec("looks_switchcostumeto", InputArg("COSTUME", "looks_costume")),
    "nextCostume": _spec("looks_nextcostume"),
    "startScene": _spec("looks_switchbackdropto", InputArg("BACKDROP", "looks_backdrops")),
    "nextScene": _spec("looks_nextbackdrop"),
    "changeGraphicEffect:by:": _spec(
        "looks_changeeffectby", FieldArg("EFFECT"), InputArg("CHANGE", "math_number")
    ),
    "setGraphicEffect:to:": _spec(
        "looks_seteffectto", FieldArg("EFFECT"), InputArg("VALUE", "math_number")
    ),
    "filterReset": _spec("looks_cleargraphiceffects"),
    "changeSizeBy:": _spec("looks_changesizeby", InputArg("CHANGE", "math_number")),
    "setSizeTo:": _spec("looks_setsizeto", InputArg("SIZE", "math_number")),
    "comeToFront": _spec("looks_gotofrontback"),
    "goBackByLayers:": _spec("looks_goforwardbackwardlayers", InputArg("NUM", "math_integer")),
    "scale": _spec("looks_size"),

    # Sound
    "playSound:": _spec("sound_play", InputArg("SOUND_MENU", "sound_sounds_menu")),
    "doPlaySoundAndWait": _spec("sound_playuntildone", InputArg("SOUND_MENU", "sound_sounds_menu")),
    "stopAllSounds": _spec("sound_stopallsounds"),
    "changeVolumeBy:": _spec("sound_changevolumeby", InputArg("VOLUME", "math_number")),
    "setVolumeTo:": _spec("sound_setvolumeto", InputArg("VOLUME", "math_number")),
    "volume": _spec("sound_volume"),

    # Music extension
    "rest:elapsed:from:": _spec("music.restForBeats", InputArg("BEATS", "math_number")),
    "changeTempoBy:": _spec("music.changeTempo", InputArg("TEMPO", "math_number")),
    "setTempoTo:": _spec("music.setTempo", InputArg("TEMPO", "math_number")),
    "tempo": _spec("music.getTempo"),

    # Pen extension
    "clearPenTrails": _spec("pen.clear"),
    "stampCostume": _spec("pen.stamp"),
    "putPenDown": _spec("pen.penDown"),
    "putPenUp": _spec("pen.penUp"),
    "penColor:": _spec("pen.setPenColorToColor", InputArg("COLOR", "colour_picker")),
    "changePenHueBy:": _spec("pen.changePenHueBy", InputArg("HUE", "math_number")),
    "setPenHueTo:": _spec("pen.setPenHueToNumber", InputArg("HUE", "math_number")),
    "changePenShadeBy:": _spec("pen.changePenShadeBy", InputArg("SHADE", "math_number")),
    "setPenShadeTo:": _spec("pen.setPenShadeToNumber", InputArg("SHADE", "math_number")),
    "changePenSizeBy:": _spec("pen.changePenSizeBy", InputArg("SIZE", "math_number")),
    "penSize:": _spec("pen.setPenSizeTo", InputArg("SIZE", "math_number")),

    # Events
    "whenGreenFlag": _spec("event_whenflagclicked"),
    "whenKeyPressed": _spec("event_whenkeypressed", FieldArg("KEY_OPTION")),
    "whenClicked": _spec("event_whenthisspriteclicked"),
    "whenSceneStarts": _spec("event_whenbackdropswitchesto", FieldArg("BACKDROP")),
    "whenSensorGreaterThan": _spec(
        "event_whengreaterthan", FieldArg("WHENGREATERTHANMENU"), InputArg("VALUE", "math_number")
    ),
    "whenIReceive": _spec(
        "event_whenbroadcastreceived", FieldArg("BROADCAST_OPTION", "broadcast_msg")
    ),
    "broadcast:": _spec("event_broadcast", InputArg("BROADCAST_INPUT", "event_broadcast_menu")),
    "doBroadcastAndWait": _spec(
        "event_broadcastandwait", InputArg("BROADCAST_INPUT", "event_broadcast_menu")
    ),

    # Control
    "wait:elapsed:from:": _spec("control_wait", InputArg("DURATION", "math_positive_number")),
    "doRepeat": _spec(
        "control_repeat", InputArg("TIMES", "math_whole_number"), InputArg("SUBSTACK")
    ),
    "doForever": _spec("control_forever", InputArg("SUBSTACK")),
    "doIf": _spec("control_if", InputArg("CONDITION"), InputArg("SUBSTACK")),
    "doIfElse": _spec(
        "control_if_else", InputArg("CONDITION"), InputArg("SUBSTACK"), InputArg("SUBSTACK2")
    ),
    "doWaitUntil": _spec("control_wait_until", InputArg("CONDITION")),
    "doUntil": _spec("control_repeat_until", InputArg("CONDITION"), InputArg("SUBSTACK")),
    "stopScripts": _spec("control_stop", FieldArg("STOP_OPTION")),
    "whenCloned": _spec("control_start_as_clone"),
    "createCloneOf": _spec(
        "control_create_clone_of", InputArg("CLONE_OPTION", "control_create_clone_of_menu")
    ),
    "deleteClone": _spec("control_delete_this_clone"),

    # Sensing
    "touching:": _spec(
        "sensing_touchingobject", InputArg("TOUCHINGOBJECTMENU", "sensing_touchingobjectmenu")
    ),
    "touchingColor:": _spec("sensing_touchingcolor", InputArg("COLOR", "colour_picker")),
    "color:sees:": _spec(
        "sensing_coloristouchingcolor",
        InputArg("COLOR", "colour_picker"),
        InputArg("COLOR2", "colour_picker"),
    ),
    "distanceTo:": _spec(
        "sensing_distanceto", InputArg("DISTANCETOMENU", "sensing_distancetomenu")
    ),
    "doAsk": _spec("sensing_askandwait", InputArg("QUESTION", "text")),
    "answer": _spec("sensing_answer"),
    "keyPressed:": _spec("sensing_keypressed", InputArg("KEY_OPTION", "sensing_keyoptions")),
    "mousePressed": _spec("sensing_mousedown"),
    "mouseX": _spec("sensing_mousex"),
    "mouseY": _spec("sensing_mousey"),
    "soundLevel": _spec("sensing_loudness"),
    "timer": _spec("sensing_timer"),
    "timerReset": _spec("sensing_resettimer"),
    "getAttribute:of:": _spec(
        "sensing_of", FieldArg("PROPERTY"), InputArg("OBJECT", "sensing_of_object_menu")
    ),
    "timeAndDate": _spec("sensing_current", FieldArg("CURRENTMENU")),
    "timestamp": _spec("sensing_dayssince2000"),
    "getUserName": _spec("sensing_username"),

    # Operators
    "+": _spec("operator_add", InputArg("NUM1", "math_number"), InputArg("NUM2", "math_number")),
    "-": _spec("operator_subtract", InputArg("NUM1", "math_number"), InputArg("NUM2", "math_number")),
    "*": _spec("operator_multiply", InputArg("NUM1", "math_number"), InputArg("NUM2", "math_number")),
    "/": _spec("operator_divide", InputArg("NUM1", "math_number"), InputArg("NUM2", "math_number")),
    "randomFrom:to:": _spec(
        "operator_random", InputArg("FROM", "math_number"), InputArg("TO", "math_number")
    ),
    "<": _spec("operator_lt", InputArg("OPERAND1", "text"), InputArg("OPERAND2", "text")),
    "=": _spec("operator_equals", InputArg("OPERAND1", "text"), InputArg("OPERAND2", "text")),
    ">": _spec("operator_gt", InputArg("OPERAND1", "text"), InputArg("OPERAND2", "text")),
    "&": _spec("operator_and", InputArg("OPERAND1"), InputArg("OPERAND2")),
    "|": _spec("operator_or", InputArg("OPERAND1"), InputArg("OPERAND2")),
    "not": _spec("operator_not", InputArg("OPERAND")),
    "concatenate:with:": _spec(
        "operator_join", InputArg("STRING1", "text"), InputArg("STRING2", "text")
    ),
    "letter:of:": _spec(
        "operator_letter_of", InputArg("LETTER", "math_whole_number"), InputArg("STRING", "text")
    ),
    "stringLength:": _spec("operator_length", InputArg("STRING", "text")),
    "%": _spec("operator_mod", InputArg("NUM1", "math_number"), InputArg("NUM2", "math_number")),
    "rounded": _spec("operator_round", InputArg("NUM", "math_number")),
    "computeFunction:of:": _spec(
        "operator_mathop", FieldArg("OPERATOR"), InputArg("NUM", "math_number")
    ),

    # Data
    "readVariable": _spec("data_variable", FieldArg("VARIABLE", "")),
    "setVar:to:": _spec("data_setvariableto", FieldArg("VARIABLE", ""), InputArg("VALUE", "text")),
    "changeVar:by:": _spec(
        "data_changevariableby", FieldArg("VARIABLE", ""), InputArg("VALUE", "math_number")
    ),
    "showVariable:": _spec("data_showvariable", FieldArg("VARIABLE", "")),
    "hideVariable:": _spec("data_hidevariable", FieldArg("VARIABLE", "")),
    "contentsOfList:": _spec("data_listcontents", FieldArg("LIST", "list")),
    "append:toList:": _spec("data_addtolist", InputArg("ITEM", "text"), FieldArg("LIST", "list")),
    "deleteLine:ofList:": _spec(
        "data_deleteoflist", InputArg("INDEX", "math_integer"), FieldArg("LIST", "list")
    ),
    "insert:at:ofList:": _spec(
        "data_insertatlist",
        InputArg("ITEM", "text"),
        InputArg("INDEX", "math_integer"),
        FieldArg("LIST", "list"),
    ),
    "setLine:ofList:to:": _spec(
        "data_replaceitemoflist",
        InputArg("INDEX", "math_integer"),
        FieldArg("LIST", "list"),
        InputArg("ITEM", "text"),
    ),
    "getLine:ofList:": _spec(
        "data_itemoflist", InputArg("INDEX", "math_integer"), FieldArg("LIST", "list")
    ),
    "lineCountOfList:": _spec("data_lengthoflist", FieldArg("LIST", "list")),
    "list:contains:": _spec(
        "data_listcontainsitem", FieldArg("LIST", "list"), InputArg("ITEM", "text")
    ),
    "showList:": _spec("data_showlist", FieldArg("LIST", "list")),
    "hideList:": _spec("data_hidelist", FieldArg("LIST", "list")),

    # Procedures; "call" arguments come from each record's own signature
    "procDef": _spec("procedures_definition"),
    "call": _spec("procedures_call"),
    "getParam": _spec("argument_reporter_string_number", FieldArg("VALUE")),
}
