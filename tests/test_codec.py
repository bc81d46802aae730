import json

import pytest
from pydantic import BaseModel, Field

from polydoc.codec.codec import PolymorphicCodec
from polydoc.codec.registry import TypeRegistry
from polydoc.core.exceptions import (
    CodecError,
    MalformedPayload,
    TypeRegistryError,
    UnknownTypeLabel,
    UnregisteredVariant,
)
from polydoc.documents.student import Student, StudentDev


def _codec(**kwargs) -> PolymorphicCodec:
    registry = TypeRegistry()
    registry.register("Student", Student)
    registry.register("StudentDev", StudentDev)
    return PolymorphicCodec(registry, **kwargs)


def test_base_document_round_trip():
    codec = _codec()
    original = Student(id=1, name="Name1", size=1, data_encoded="dlskfndlksfnkldsnfkl=")

    decoded = codec.decode(codec.encode(original), "Student")

    assert type(decoded) is Student
    assert decoded == original
    assert decoded.version == 1


def test_variant_round_trip_keeps_extra_field():
    codec = _codec()
    original = StudentDev(id=2, name="Name2", size=2, data_encoded="abc=", university="home")

    decoded = codec.decode(codec.encode(original), "StudentDev")

    assert type(decoded) is StudentDev
    assert decoded.id == 2
    assert decoded.name == "Name2"
    assert decoded.size == 2
    assert decoded.data_encoded == "abc="
    assert decoded.university == "home"
    assert decoded.version == 1


def test_encoded_body_has_no_discriminator():
    codec = _codec()

    for doc in (
        Student(id=1, name="a", size=1, data_encoded="x"),
        StudentDev(id=2, name="b", size=2, data_encoded="y", university="home"),
    ):
        body = codec.encode(doc)
        assert b"$type" not in body
        assert "$type" not in json.loads(body)


def test_encoded_body_uses_wire_keys():
    codec = _codec()
    body = json.loads(codec.encode(StudentDev(id=2, name="Name2", size=2, data_encoded="abc=", university="home")))

    assert body == {
        "id": 2,
        "name": "Name2",
        "size": 2,
        "dataEncoded": "abc=",
        "university": "home",
    }


def test_absent_fields_are_omitted_not_null():
    codec = _codec()
    body = codec.encode(Student(id=3, name="Name3", size=3, data_encoded=None))

    parsed = json.loads(body)
    assert "dataEncoded" not in parsed
    assert b"null" not in body

    decoded = codec.decode(body, "Student")
    assert decoded.data_encoded is None


def test_absent_fields_emitted_as_null_when_omission_disabled():
    registry = TypeRegistry(omit_none=False)
    registry.register("Student", Student)
    codec = PolymorphicCodec(registry)

    parsed = json.loads(codec.encode(Student(name="n")))
    assert parsed["dataEncoded"] is None
    assert parsed["id"] is None


def test_version_is_never_read_from_payload():
    codec = _codec()
    payload = json.dumps({"id": 1, "name": "n", "size": 1, "version": 7, "_version": 9}).encode()

    decoded = codec.decode(payload, "Student")

    assert decoded.version == 1


def test_unknown_members_are_ignored():
    codec = _codec()
    payload = b'{"name": "n", "size": 4, "somethingElse": true}'

    decoded = codec.decode(payload, "Student")

    assert decoded == Student(name="n", size=4)


def test_decoding_variant_body_with_base_label_drops_variant_fields():
    codec = _codec()
    body = codec.encode(StudentDev(id=2, name="Name2", size=2, university="home"))

    decoded = codec.decode(body, "Student")

    assert type(decoded) is Student
    assert not hasattr(decoded, "university")


def test_unknown_label_raises():
    codec = _codec()
    body = codec.encode(Student(name="n"))

    with pytest.raises(UnknownTypeLabel) as exc:
        codec.decode(body, "NotRegistered")

    assert exc.value.label == "NotRegistered"


def test_unknown_label_wins_over_malformed_body():
    codec = _codec()

    with pytest.raises(UnknownTypeLabel):
        codec.decode(b"not json", "NotRegistered")


@pytest.mark.parametrize(
    "payload, reason",
    [
        (b"{not json", "not valid JSON"),
        (b"\xff\xfe\x00", "not valid UTF-8"),
        (b"[1, 2, 3]", "not a JSON object"),
        (b'{"size": 1}', "does not match shape"),
        (b'{"name": "n", "size": "big"}', "does not match shape"),
    ],
)
def test_malformed_payloads_raise(payload, reason):
    codec = _codec()

    with pytest.raises(MalformedPayload, match=reason):
        codec.decode(payload, "Student")


def test_malformed_payload_carries_label_detail():
    codec = _codec()

    with pytest.raises(MalformedPayload) as exc:
        codec.decode(b'{"size": 1}', "StudentDev")

    assert exc.value.details["label"] == "StudentDev"
    assert exc.value.__cause__ is not None


def test_legacy_discriminator_matching_label_is_accepted():
    codec = _codec()
    payload = b'{"$type": "StudentDev", "name": "n", "size": 1, "university": "home"}'

    decoded = codec.decode(payload, "StudentDev")

    assert decoded == StudentDev(name="n", size=1, university="home")


def test_legacy_discriminator_conflicting_with_label_raises():
    codec = _codec()
    payload = b'{"$type": "Student", "name": "n", "size": 1}'

    with pytest.raises(MalformedPayload, match="does not match the requested label"):
        codec.decode(payload, "StudentDev")


def test_custom_discriminator_key():
    codec = _codec(discriminator_key="_kind")
    payload = b'{"_kind": "Student", "name": "n"}'

    with pytest.raises(MalformedPayload):
        codec.decode(payload, "StudentDev")
    assert b"_kind" not in codec.encode(codec.decode(payload, "Student"))


def test_decode_accepts_str_payload():
    codec = _codec()

    decoded = codec.decode('{"name": "n", "size": 2}', "Student")

    assert decoded == Student(name="n", size=2)


def test_decode_mapping_rejects_non_mapping():
    codec = _codec()

    with pytest.raises(MalformedPayload, match="not a JSON object"):
        codec.decode_mapping(["n"], "Student")  # type: ignore[arg-type]


def test_encode_unregistered_type_raises():
    codec = _codec()

    class Stray(BaseModel):
        name: str

    with pytest.raises(UnregisteredVariant, match="Stray"):
        codec.encode(Stray(name="n"))


def test_label_for_instance_and_type():
    codec = _codec()

    assert codec.label_for(StudentDev(name="n")) == "StudentDev"
    assert codec.label_for(Student) == "Student"


def test_codec_freezes_its_registry():
    codec = _codec()

    assert codec.registry.frozen


def test_indent_produces_pretty_output_with_same_content():
    compact = _codec()
    pretty = _codec(indent=2)
    doc = StudentDev(id=2, name="Name2", size=2, university="home")

    pretty_body = pretty.encode(doc)

    assert b"\n" in pretty_body
    assert b"\n" not in compact.encode(doc)
    assert json.loads(pretty_body) == json.loads(compact.encode(doc))


def test_non_ascii_text_is_utf8_encoded():
    codec = _codec()
    body = codec.encode(Student(name="Zoë"))

    assert "Zoë".encode("utf-8") in body
    assert codec.decode(body, "Student").name == "Zoë"


def test_student_dev_scenario():
    codec = _codec()
    body = codec.encode(StudentDev(id=2, name="Name2", size=2, data_encoded="abc=", university="home"))

    decoded = codec.decode(body, "StudentDev")

    assert decoded == StudentDev(id=2, name="Name2", size=2, data_encoded="abc=", university="home")
    assert decoded.version == 1


def test_shape_with_field_on_discriminator_key_is_rejected():
    class Tagged(BaseModel):
        name: str
        kind: str = Field(alias="$type")

    registry = TypeRegistry()
    registry.register("Tagged", Tagged)

    with pytest.raises(TypeRegistryError, match="reserved as the type discriminator"):
        PolymorphicCodec(registry)

    assert not registry.frozen


def test_discriminator_key_colliding_with_base_field_is_rejected():
    registry = TypeRegistry()
    registry.register("Student", Student)

    with pytest.raises(TypeRegistryError, match="Student.name"):
        PolymorphicCodec(registry, discriminator_key="name")


def test_encode_lone_surrogate_raises_codec_error():
    codec = _codec()

    with pytest.raises(CodecError):
        codec.encode(Student(name="bad \ud800"))
