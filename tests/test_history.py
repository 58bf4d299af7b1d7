# tests/test_history.py
import pytest

from gateway.core.errors import ValidationError
from gateway.services.history import (
    ChatMessage,
    ReconciledConversation,
    Turn,
    build_transcript,
    reconcile,
)


def m(role, content):
    return ChatMessage(role=role, content=content)


def test_last_user_message_becomes_next_prompt():
    conv = reconcile(None, [m("user", "hi"), m("assistant", "hello"), m("user", "how are you")])
    assert conv.next_prompt == "how are you"
    assert conv.history == [Turn("user", "hi"), Turn("model", "hello")]


def test_explicit_prompt_keeps_history():
    conv = reconcile("explain X", [m("user", "unused")])
    assert conv.next_prompt == "explain X"
    assert conv.history == [Turn("user", "unused")]


@pytest.mark.parametrize(
    "prompt, messages",
    [
        (None, []),
        ("   ", []),
        (None, [m("user", "   ")]),
        (None, [m("system", "be nice"), m("assistant", "hello")]),
    ],
)
def test_no_resolvable_prompt_is_rejected(prompt, messages):
    with pytest.raises(ValidationError) as exc:
        reconcile(prompt, messages)
    assert "prompt is required" in str(exc.value)


def test_trailing_blank_message_is_dropped():
    conv = reconcile(None, [m("user", "first"), m("assistant", "  ")])
    assert conv.next_prompt == "first"
    assert conv.history == []


def test_system_messages_fold_into_instruction():
    conv = reconcile(
        None,
        [m("system", " rule one "), m("user", "q"), m("system", "rule two")],
        system_instruction="outer",
    )
    assert conv.system_instruction == "outer\n\nrule one\n\nrule two"
    assert conv.history == []
    assert conv.next_prompt == "q"


def test_system_message_equals_system_field():
    from_messages = reconcile(None, [m("system", "be brief"), m("user", "hi")])
    from_field = reconcile(None, [m("user", "hi")], system_instruction="be brief")
    assert from_messages.system_instruction == from_field.system_instruction == "be brief"


def test_no_system_instruction_is_none():
    assert reconcile("hi", []).system_instruction is None


def test_trailing_model_turn_without_prompt_is_rejected():
    with pytest.raises(ValidationError) as exc:
        reconcile(None, [m("user", "write a poem"), m("assistant", "Roses are red")])
    assert exc.value.message == "prompt is required"


def test_trailing_model_turn_with_explicit_prompt_keeps_history():
    conv = reconcile("another one", [m("user", "write a poem"), m("assistant", "Roses are red")])
    assert conv.next_prompt == "another one"
    assert conv.history == [Turn("user", "write a poem"), Turn("model", "Roses are red")]


def test_accepts_dict_messages_and_unknown_roles():
    conv = reconcile(None, [{"role": "tool", "content": "x"}, {"role": "USER", "content": "y"}])
    assert conv.history == [Turn("user", "x")]
    assert conv.next_prompt == "y"


def test_transcript_format():
    conv = ReconciledConversation(
        system_instruction="Be terse.",
        history=[Turn("user", "hi"), Turn("model", "hello")],
        next_prompt="bye",
    )
    assert build_transcript(conv) == "System: Be terse.\nUser: hi\nAssistant: hello\nUser: bye"


def test_transcript_without_system():
    conv = ReconciledConversation(system_instruction=None, history=[], next_prompt="only")
    assert build_transcript(conv) == "User: only"
