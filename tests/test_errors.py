# tests/test_errors.py
from types import SimpleNamespace

from gateway.core.errors import ProviderError, normalize_error


def test_string_passthrough():
    assert normalize_error("boom") == "boom"


def test_message_attribute_wins():
    assert normalize_error(ProviderError("upstream down")) == "upstream down"
    assert normalize_error(SimpleNamespace(message="from attr")) == "from attr"


def test_message_key_of_mapping():
    assert normalize_error({"message": "x", "code": 7}) == "x"


def test_mapping_without_message_is_dumped():
    assert normalize_error({"code": 7}) == '{"code": 7}'


def test_exception_without_text_uses_type_name():
    assert normalize_error(RuntimeError()) == "RuntimeError"


def test_unserializable_value():
    assert normalize_error(object()) == "Unknown error"
