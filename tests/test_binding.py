"""
Tests for the Data Binding Resolver.
"""
import asyncio
import logging

from form_cli.core.binding import bind_fields, query_field_values, snapshot_fields
from form_cli.kernel import Field, FieldType, Value

from conftest import DATA_URL, PERSON_DATA

PERSON = "http://schema.org/Person"


def make_field(prop: str, multiple: bool = False, field_type: FieldType = FieldType.SINGLE_LINE_TEXT) -> Field:
    return Field(
        field_type=field_type,
        type_name=field_type.value,
        property=f"http://schema.org/{prop}",
        label=prop,
        multiple=multiple,
    )


class TestQueryFieldValues:
    """Test binding one field to existing data."""

    def test_absent_data_yields_no_values(self, make_ctx):
        ctx = make_ctx()
        assert asyncio.run(query_field_values(ctx, None, make_field("name"), PERSON)) == []
        assert asyncio.run(query_field_values(ctx, "", make_field("name"), PERSON)) == []

    def test_values_carry_origin_subject(self, make_ctx):
        values = asyncio.run(
            query_field_values(make_ctx(), PERSON_DATA, make_field("birthDate"), PERSON, DATA_URL)
        )
        assert values == [
            Value(raw="1990-04-02", origin_subject="http://example.org/people#alice"),
        ]

    def test_only_instances_of_target_class(self, make_ctx):
        """Rex is a Dog and must not be bound to a Person form."""
        values = asyncio.run(
            query_field_values(make_ctx(), PERSON_DATA, make_field("name", multiple=True), PERSON, DATA_URL)
        )
        assert {v.raw for v in values} == {"Alice", "Bob"}

    def test_multiple_values_on_single_field_warns_but_keeps_all(self, make_ctx, caplog):
        """No silent truncation of surplus values."""
        field = make_field("name", multiple=False)
        field.label = "Name"
        with caplog.at_level(logging.WARNING):
            values = asyncio.run(query_field_values(make_ctx(), PERSON_DATA, field, PERSON, DATA_URL))
        assert len(values) == 2
        assert "Multiple values found for Name" in caplog.text

    def test_multiple_field_does_not_warn(self, make_ctx, caplog):
        with caplog.at_level(logging.WARNING):
            asyncio.run(
                query_field_values(make_ctx(), PERSON_DATA, make_field("name", multiple=True), PERSON, DATA_URL)
            )
        assert "Multiple values" not in caplog.text


class TestBindFields:
    """Test binding all fields and taking the original snapshot."""

    def test_bind_fields_replaces_values(self, make_ctx):
        fields = [make_field("name", multiple=True), make_field("email")]
        fields[1].values = [Value(raw="stale")]
        asyncio.run(bind_fields(make_ctx(), PERSON_DATA, fields, PERSON, DATA_URL))
        assert len(fields[0].values) == 2
        assert fields[1].values == []

    def test_snapshot_is_independent_of_edits(self):
        field = make_field("name", multiple=True)
        field.values = [Value(raw="Alice", origin_subject="http://example.org/people#alice")]
        snapshot = snapshot_fields([field])

        field.values.append(Value(raw="Alicia"))
        del field.values[0]

        assert isinstance(snapshot, tuple)
        assert snapshot[0].values == [
            Value(raw="Alice", origin_subject="http://example.org/people#alice"),
        ]
