"""
Tests for the Field Editing State Machine.
"""
import asyncio
import logging
from datetime import datetime, timezone

import pytest

from form_cli.kernel import Field, FieldType, Option, Value
from form_cli.reasoning.editing import (
    EditAction,
    EditState,
    FieldEditor,
    FieldStatus,
    can_add_value,
    edit_fields,
    legal_actions,
)

from conftest import RandomPrompter, ScriptedPrompter

ADD, REMOVE, DONE = EditAction.ADD, EditAction.REMOVE, EditAction.DONE


def make_field(field_type: FieldType, required=False, multiple=False, values=None, **kwargs) -> Field:
    return Field(
        field_type=field_type,
        type_name=kwargs.pop("type_name", field_type.value),
        property="http://example.org/p",
        label="Field",
        required=required,
        multiple=multiple,
        values=values or [],
        **kwargs,
    )


class TestLegalActions:
    """Legal actions are a pure function of (required, multiple, count)."""

    @pytest.mark.parametrize(
        "required, multiple, count, expected",
        [
            (False, False, 0, [ADD, DONE]),
            (False, False, 1, [REMOVE, DONE]),
            (False, False, 2, [REMOVE, DONE]),
            (False, True, 0, [ADD, DONE]),
            (False, True, 3, [ADD, REMOVE, DONE]),
            (True, False, 0, [ADD]),
            (True, False, 1, [REMOVE, DONE]),
            (True, True, 0, [ADD]),
            (True, True, 2, [ADD, REMOVE, DONE]),
        ],
    )
    def test_action_table(self, required, multiple, count, expected):
        assert legal_actions(FieldStatus(required, multiple, count)) == expected

    def test_never_empty(self):
        for required in (False, True):
            for multiple in (False, True):
                for count in range(3):
                    assert legal_actions(FieldStatus(required, multiple, count))


class TestFieldEditor:
    """Test driving one field through the state machine."""

    def test_required_date_scenario(self):
        """Add a date to an empty required field, then finish."""
        field = make_field(FieldType.DATE, required=True)
        picked = datetime(2024, 5, 1, tzinfo=timezone.utc)
        prompter = ScriptedPrompter([ADD, picked, DONE])

        editor = FieldEditor(field, prompter)
        asyncio.run(editor.run())

        assert editor.state is EditState.DONE
        assert field.values == [Value(raw="2024-05-01T00:00:00+00:00")]
        assert prompter.offered(0) == [ADD]
        assert prompter.offered(1) == [REMOVE, DONE]

    def test_done_not_offered_for_empty_required_field(self):
        field = make_field(FieldType.DATE, required=True)
        prompter = ScriptedPrompter([DONE])
        with pytest.raises(AssertionError):
            asyncio.run(FieldEditor(field, prompter).run())
        assert DONE not in prompter.offered(0)

    @pytest.mark.parametrize("seed", range(40))
    def test_required_field_never_done_empty(self, seed):
        """Whatever the user picks, a required field finishes with a value."""
        field = make_field(FieldType.SINGLE_LINE_TEXT, required=True, multiple=bool(seed % 2))
        editor = FieldEditor(field, RandomPrompter(seed))
        asyncio.run(editor.run())

        assert field.values
        for record in editor.history:
            if record.to_state is EditState.DONE:
                assert record.value_count > 0

    def test_text_values_are_verbatim(self):
        field = make_field(FieldType.MULTI_LINE_TEXT, multiple=True)
        prompter = ScriptedPrompter([ADD, 'say "hi"\nbye', DONE])
        asyncio.run(FieldEditor(field, prompter).run())
        assert field.values == [Value(raw='say "hi"\nbye')]

    def test_boolean_values(self):
        field = make_field(FieldType.BOOLEAN, multiple=True)
        prompter = ScriptedPrompter([ADD, True, ADD, False, DONE])
        asyncio.run(FieldEditor(field, prompter).run())
        assert [v.raw for v in field.values] == ["true", "false"]

    def test_choice_appends_option_value(self):
        options = [
            Option(value="http://example.org/red", label="Red"),
            Option(value="http://example.org/green", label="Green"),
        ]
        field = make_field(FieldType.CHOICE, options=options)
        prompter = ScriptedPrompter([ADD, "Green", DONE])
        asyncio.run(FieldEditor(field, prompter).run())
        assert field.values == [Value(raw="http://example.org/green")]

    def test_remove_by_position(self):
        """Removing drops exactly the selected entry, even among duplicates."""
        values = [
            Value(raw="a", origin_subject="http://example.org/s1"),
            Value(raw="b", origin_subject="http://example.org/s1"),
            Value(raw="a", origin_subject="http://example.org/s2"),
        ]
        field = make_field(FieldType.SINGLE_LINE_TEXT, multiple=True, values=list(values))
        prompter = ScriptedPrompter([REMOVE, 2, DONE])
        asyncio.run(FieldEditor(field, prompter).run())
        assert field.values == values[:2]

    def test_remove_offers_rendered_values(self):
        options = [Option(value="http://example.org/red", label="Red")]
        field = make_field(
            FieldType.CHOICE,
            options=options,
            values=[Value(raw="http://example.org/red")],
        )
        prompter = ScriptedPrompter([REMOVE, "Red", DONE])
        asyncio.run(FieldEditor(field, prompter).run())
        assert field.values == []
        remove_prompt = [c for c in prompter.calls if c[0] == "choose"][1]
        assert [choice.title for choice in remove_prompt[2]] == ["Red"]

    def test_unknown_type_adds_nothing(self, caplog):
        field = make_field(FieldType.UNKNOWN, type_name="ColorPicker")
        prompter = ScriptedPrompter([ADD, DONE])
        with caplog.at_level(logging.WARNING):
            asyncio.run(FieldEditor(field, prompter).run())
        assert field.values == []
        assert "ColorPicker" in caplog.text

    def test_history_records_transitions(self):
        field = make_field(FieldType.SINGLE_LINE_TEXT)
        editor = FieldEditor(field, ScriptedPrompter([ADD, "x", DONE]))
        asyncio.run(editor.run())
        assert [(r.from_state, r.to_state) for r in editor.history] == [
            (EditState.CHOOSING_ACTION, EditState.ADDING),
            (EditState.ADDING, EditState.CHOOSING_ACTION),
            (EditState.CHOOSING_ACTION, EditState.DONE),
        ]


class TestEditFields:

    def test_fields_edited_in_order(self):
        first = make_field(FieldType.SINGLE_LINE_TEXT, required=True)
        second = make_field(FieldType.BOOLEAN)
        prompter = ScriptedPrompter([ADD, "one", DONE, ADD, True, DONE])
        asyncio.run(edit_fields([first, second], prompter))
        assert first.values == [Value(raw="one")]
        assert second.values == [Value(raw="true")]
        assert not prompter.answers

    @pytest.mark.parametrize(
        "field_type, options",
        [
            (FieldType.UNKNOWN, []),
            (FieldType.CHOICE, []),
        ],
    )
    def test_required_field_without_possible_values_is_skipped(self, field_type, options, caplog):
        """An empty required field that Add cannot fill never traps the editor."""
        stuck = make_field(field_type, required=True, options=options)
        after = make_field(FieldType.BOOLEAN)
        prompter = ScriptedPrompter([ADD, False, DONE])

        with caplog.at_level(logging.WARNING):
            asyncio.run(edit_fields([stuck, after], prompter))

        assert stuck.values == []
        assert after.values == [Value(raw="false")]
        assert not prompter.answers
        assert "Skipping required field" in caplog.text

    def test_optional_unknown_field_is_still_edited(self):
        field = make_field(FieldType.UNKNOWN, type_name="ColorPicker")
        prompter = ScriptedPrompter([DONE])
        asyncio.run(edit_fields([field], prompter))
        assert prompter.offered(0) == [ADD, DONE]

    def test_can_add_value(self):
        assert can_add_value(make_field(FieldType.SINGLE_LINE_TEXT))
        assert can_add_value(make_field(FieldType.CHOICE, options=[Option(value="urn:x", label="X")]))
        assert not can_add_value(make_field(FieldType.CHOICE))
        assert not can_add_value(make_field(FieldType.UNKNOWN))
