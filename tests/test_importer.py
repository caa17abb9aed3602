import asyncio

import pytest

from sb2import.diagnostics import DiagnosticContext
from sb2import.errors import AssetLoadError
from sb2import.importer import deserialize
from sb2import.targets import VariableType


def _project():
    return {
        "objName": "Stage",
        "variables": [{"name": "score", "value": 0, "isPersistent": False}],
        "lists": [{"listName": "items", "contents": ["a", "b"]}],
        "scripts": [[10, 20, [["whenGreenFlag"], ["broadcast:", ""]]]],
        "costumes": [{"costumeName": "backdrop1", "baseLayerID": 0, "baseLayerMD5": "bg.png",
                      "rotationCenterX": 240, "rotationCenterY": 180}],
        "sounds": [{"soundName": "pop", "soundID": 0, "md5": "pop.wav", "rate": 11025,
                    "sampleCount": 258, "format": ""}],
        "tempoBPM": 90,
        "children": [
            {
                "objName": "Cat",
                "scratchX": 12,
                "scratchY": -5,
                "scale": 0.5,
                "direction": -90,
                "rotationStyle": "leftRight",
                "currentCostumeIndex": 1.5,
                "isDraggable": True,
                "visible": False,
                "variables": [{"name": "counter", "value": 3, "isPersistent": False}],
                "scripts": [
                    [0, 0, [["whenIReceive", "message1"],
                            ["changeVar:by:", "score", 1],
                            ["changeVar:by:", "counter", 1]]],
                    [5, 5, [["whenIReceive", ""], ["oldBlock:"], ["clearPenTrails"]]],
                ],
                "costumes": [{"costumeName": "cat", "baseLayerID": 1, "baseLayerMD5": "cat.svg"}],
            },
            {"target": "Cat", "cmd": "getVar:", "param": "score"},
            {
                "objName": "Dog",
                "variables": [{"name": "counter", "value": 0}],
                "scripts": [[0, 0, [["readVariable", "counter"]]]],
            },
        ],
    }


def _import(project, loaders, **kwargs):
    return asyncio.run(deserialize(project, loaders.load_costume, loaders.load_sound, **kwargs))


def test_targets_are_in_document_order_and_watchers_dropped(loaders):
    result = _import(_project(), loaders)

    assert [t.name for t in result.targets] == ["Stage", "Cat", "Dog"]
    assert result.targets[0].is_stage is True
    assert not any(t.is_stage for t in result.targets[1:])


def test_variables_inherit_root_scope(loaders):
    stage, cat, dog = _import(_project(), loaders).targets

    score_id = f"{stage.id}-score"
    assert stage.variables[score_id].name == "score"
    changes = [b for b in cat.blocks if b.opcode == "data_changevariableby"]
    assert changes[0].fields["VARIABLE"].id == score_id
    assert changes[1].fields["VARIABLE"].id == f"{cat.id}-counter"
    assert f"{cat.id}-counter" in cat.variables
    assert f"{dog.id}-counter" in dog.variables
    assert f"{cat.id}-counter" != f"{dog.id}-counter"


def test_lists_are_declared_with_contents(loaders):
    stage = _import(_project(), loaders).targets[0]
    items = stage.lookup_variable_by_name("items", VariableType.LIST)

    assert items.id == f"{stage.id}-items"
    assert items.value == ["a", "b"]


def test_broadcasts_become_stage_variables(loaders):
    stage, cat, _ = _import(_project(), loaders).targets

    broadcasts = {
        v.name: v.id for v in stage.variables.values()
        if v.type == VariableType.BROADCAST_MESSAGE
    }
    # "message1" is taken explicitly, so the empty name becomes message2
    assert set(broadcasts) == {"message1", "message2"}
    hats = [b for b in cat.blocks if b.opcode == "event_whenbroadcastreceived"]
    assert hats[1].fields["BROADCAST_OPTION"].value == "message2"
    assert hats[1].fields["BROADCAST_OPTION"].id == broadcasts["message2"]
    menus = [b for b in stage.blocks if b.opcode == "event_broadcast_menu"]
    assert menus[0].fields["BROADCAST_OPTION"].value == "message2"


def test_scripts_are_positioned_and_linked(loaders):
    stage, cat, _ = _import(_project(), loaders).targets

    top = stage.blocks.top_level_blocks()
    assert len(top) == 1
    assert top[0].opcode == "event_whenflagclicked"
    assert top[0].parent is None
    assert top[0].x == 15
    assert top[0].y == pytest.approx(44)

    second_script = [b for b in cat.blocks.top_level_blocks() if b.x == 7.5][0]
    after_hat = cat.blocks.get(second_script.next)
    assert after_hat.opcode == "pen.clear"
    assert after_hat.parent == second_script.id


def test_unknown_blocks_are_reported(loaders):
    diagnostics = DiagnosticContext()
    result = _import(_project(), loaders, diagnostics=diagnostics)

    warnings = diagnostics.get_warnings()
    assert [(w.target, w.opcode) for w in warnings] == [("Cat", "oldBlock:")]
    assert result.extensions.extension_ids == {"pen"}


def test_sprite_properties_are_converted(loaders):
    stage, cat, _ = _import(_project(), loaders).targets

    assert (cat.x, cat.y) == (12, -5)
    assert cat.size == 50
    assert cat.direction == -90
    assert cat.rotation_style == "left-right"
    assert cat.current_costume == 2
    assert cat.draggable is True
    assert cat.visible is False
    assert stage.tempo == 90


def test_assets_are_loaded_and_attached(loaders):
    stage, cat, dog = _import(_project(), loaders).targets

    assert sorted(loaders.costume_calls) == ["bg.png", "cat.svg"]
    assert loaders.sound_calls == ["pop.wav"]
    assert stage.costumes[0]["name"] == "backdrop1"
    assert stage.costumes[0]["rotationCenterX"] == 240
    assert stage.sounds[0]["rate"] == 11025
    assert cat.costumes[0]["bitmapResolution"] == 1
    assert dog.costumes == []


def test_asset_failure_fails_the_import(loaders):
    loaders.fail_on.add("cat.svg")

    with pytest.raises(AssetLoadError):
        _import(_project(), loaders)


def test_object_without_name_yields_nothing(loaders):
    result = _import({"target": "Stage", "cmd": "timer"}, loaders)

    assert result.targets == []


def test_force_sprite_imports_a_lone_sprite(loaders):
    sprite = {
        "objName": "Ball",
        "variables": [{"name": "speed", "value": 2}],
        "scripts": [[0, 0, [["broadcast:", "bounce"]]]],
    }
    (ball,) = _import(sprite, loaders, force_sprite=True).targets

    assert ball.is_stage is False
    assert f"{ball.id}-speed" in ball.variables
    assert ball.lookup_variable_by_name("bounce", VariableType.BROADCAST_MESSAGE) is not None


def test_every_block_id_is_unique(loaders):
    result = _import(_project(), loaders)
    ids = [b.id for t in result.targets for b in t.blocks]

    assert len(ids) == len(set(ids))


def test_assets_load_only_after_every_object_is_decoded(loaders):
    diagnostics = DiagnosticContext()
    seen_at_load = []

    async def load_costume(md5ext, costume):
        seen_at_load.append((md5ext, [w.opcode for w in diagnostics.get_warnings()]))
        return await loaders.load_costume(md5ext, costume)

    asyncio.run(deserialize(_project(), load_costume, loaders.load_sound, diagnostics=diagnostics))

    # The stage backdrop loads after the Cat's scripts have been decoded
    assert sorted(seen_at_load) == [("bg.png", ["oldBlock:"]), ("cat.svg", ["oldBlock:"])]


def test_targets_carry_their_layer_order(loaders):
    result = _import(_project(), loaders)

    assert [t.layer_order for t in result.targets] == [0, 1, 2]


def test_malformed_script_is_reported_and_skipped(loaders):
    diagnostics = DiagnosticContext()
    project = {"objName": "Stage", "scripts": [[0, 0], [1, 1, [["show"]]]]}

    (stage,) = _import(project, loaders, diagnostics=diagnostics).targets

    assert [b.opcode for b in stage.blocks] == ["looks_show"]
    assert [str(d) for d in diagnostics.diagnostics] == [
        "Error: Malformed script entry: Target 'Stage'"
    ]


def test_unknown_reporter_in_colour_input_does_not_fail_the_import(loaders):
    project = {"objName": "Stage", "scripts": [[0, 0, [["penColor:", ["sensor:", "slider"]]]]]}

    (stage,) = _import(project, loaders).targets

    colours = [b for b in stage.blocks if b.opcode == "colour_picker"]
    assert colours[0].fields["COLOUR"].value == "#990000"
    broadcasts = [v for v in stage.variables.values() if v.type == VariableType.BROADCAST_MESSAGE]
    assert broadcasts == []


def test_decode_failure_requests_no_assets(loaders):
    requested = []

    def load_costume(md5ext, costume):
        requested.append(md5ext)
        return loaders.load_costume(md5ext, costume)

    project = {
        "objName": "Stage",
        "costumes": [{"costumeName": "backdrop1", "baseLayerID": 0, "baseLayerMD5": "bg.png"}],
        "children": [{"objName": "Cat", "variables": [{"value": 1}]}],
    }

    with pytest.raises(KeyError):
        asyncio.run(deserialize(project, load_costume, loaders.load_sound))
    assert requested == []
