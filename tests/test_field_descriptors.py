from typing import Optional

from pydantic import BaseModel, Field

from polydoc.codec.fields import FieldDescriptor, describe_shape
from polydoc.documents.student import Student, StudentDev


def test_student_field_table_uses_camel_case_wire_keys():
    table = describe_shape(Student)

    assert table == (
        FieldDescriptor(name="id", wire_key="id"),
        FieldDescriptor(name="name", wire_key="name"),
        FieldDescriptor(name="size", wire_key="size"),
        FieldDescriptor(name="data_encoded", wire_key="dataEncoded"),
    )


def test_variant_table_is_base_table_plus_own_fields():
    base = describe_shape(Student)
    variant = describe_shape(StudentDev)

    assert variant[: len(base)] == base
    assert variant[len(base):] == (FieldDescriptor(name="university", wire_key="university"),)


def test_version_stamp_has_no_descriptor():
    names = {d.name for d in describe_shape(StudentDev)}
    assert "version" not in names
    assert "_version" not in names


def test_omit_if_absent_follows_default_and_field_override():
    class Shape(BaseModel):
        kept: Optional[str] = Field(default=None, json_schema_extra={"omit_if_absent": False})
        dropped: Optional[str] = None
        hidden: Optional[str] = Field(default=None, exclude=True)

    table = {d.name: d for d in describe_shape(Shape)}

    assert table["kept"].omit_if_absent is False
    assert table["dropped"].omit_if_absent is True
    assert "hidden" not in table

    relaxed = {d.name: d for d in describe_shape(Shape, omit_none=False)}
    assert relaxed["dropped"].omit_if_absent is False
