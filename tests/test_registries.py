from sb2import.parsed_node import BlockField
from sb2import.registries import BroadcastMessageRegistry, VariableIdRegistry


def test_root_scope_ids_are_shared_with_nested_scopes():
    registry = VariableIdRegistry()
    registry.reset()
    stage = registry.resolver("stageId", True)
    sprite = registry.resolver("spriteId", False)

    assert stage("score") == "stageId-score"
    assert sprite("score") == "stageId-score"


def test_local_names_are_scoped_to_their_target():
    registry = VariableIdRegistry()
    registry.reset()
    registry.resolver("stageId", True)("score")
    first = registry.resolver("spriteA", False)
    second = registry.resolver("spriteB", False)

    assert first("counter") == "spriteA-counter"
    assert second("counter") == "spriteB-counter"
    # Local names never leak into other scopes
    assert registry.resolver("spriteC", False)("counter") == "spriteC-counter"


def test_reset_forgets_root_names():
    registry = VariableIdRegistry()
    registry.resolver("stageId", True)("score")
    registry.reset()

    assert registry.resolver("spriteId", False)("score") == "spriteId-score"


def test_broadcast_registration_is_idempotent_and_case_insensitive():
    registry = BroadcastMessageRegistry()

    first = registry.register("Start")
    again = registry.register("start")

    assert first == "broadcastMsgId-start"
    assert again == first
    assert list(registry.messages) == ["start"]


def test_empty_broadcast_name_resolves_to_message1():
    registry = BroadcastMessageRegistry()
    first_field = BlockField("BROADCAST_OPTION", "")
    second_field = BlockField("BROADCAST_OPTION", "")

    first_id = registry.register("", first_field)
    second_id = registry.register("", second_field)
    messages = registry.finalize()

    assert first_id == second_id
    assert first_field.value == "message1"
    assert second_field.value == "message1"
    assert messages["message1"] == first_id
    assert registry.empty_name_key not in messages


def test_empty_broadcast_name_skips_taken_message_names():
    registry = BroadcastMessageRegistry()
    registry.register("message1")
    deferred = BlockField("BROADCAST_OPTION", "")
    registry.register("", deferred)

    messages = registry.finalize()

    assert deferred.value == "message2"
    assert set(messages) == {"message1", "message2"}
    assert messages["message1"] == "broadcastMsgId-message1"


def test_finalize_without_empty_name_changes_nothing():
    registry = BroadcastMessageRegistry()
    registry.register("go")

    assert registry.finalize() == {"go": "broadcastMsgId-go"}
