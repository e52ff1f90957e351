"""
Field Editing State Machine

Drives the interactive edit of one field:
    ChoosingAction → (Adding | Removing) → ChoosingAction ... → Done

Which actions are offered is a pure function of (required, multiple, value
count). Done is only ever offered when the field's requirement is met, so a
required field cannot finish empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Awaitable, Callable

from ..kernel.types import Field, FieldType, Value
from ..core.rendering import render_value
from ..shell.prompts import Choice, Prompter

logger = logging.getLogger(__name__)


class EditState(Enum):
    CHOOSING_ACTION = "ChoosingAction"
    ADDING = "Adding"
    REMOVING = "Removing"
    DONE = "Done"


class EditAction(Enum):
    ADD = "Add"
    REMOVE = "Remove"
    DONE = "Done"


@dataclass(frozen=True)
class FieldStatus:
    """The part of a field that decides which actions are legal."""

    required: bool
    multiple: bool
    value_count: int

    @classmethod
    def of(cls, field: Field) -> FieldStatus:
        return cls(
            required=field.required,
            multiple=field.multiple,
            value_count=len(field.values),
        )


@dataclass
class ActionRule:
    """
    Rule for an action offered in ChoosingAction.

    The action is offered only when every check passes.
    """

    action: EditAction
    to_state: EditState
    required_checks: list[str]

    def __str__(self) -> str:
        return f"{self.action.value} → {self.to_state.value}"


# =============================================================================
# CHECK FUNCTIONS
# =============================================================================

def _check_accepts_value(status: FieldStatus) -> bool:
    """Single-valued fields take a value only while empty."""
    return status.multiple or status.value_count == 0


def _check_has_values(status: FieldStatus) -> bool:
    return status.value_count > 0


def _check_requirement_met(status: FieldStatus) -> bool:
    return not status.required or status.value_count > 0


CHECK_REGISTRY: dict[str, Callable[[FieldStatus], bool]] = {
    "accepts_value": _check_accepts_value,
    "has_values": _check_has_values,
    "requirement_met": _check_requirement_met,
}


ACTION_RULES: list[ActionRule] = [
    ActionRule(EditAction.ADD, EditState.ADDING, ["accepts_value"]),
    ActionRule(EditAction.REMOVE, EditState.REMOVING, ["has_values"]),
    ActionRule(EditAction.DONE, EditState.DONE, ["requirement_met"]),
]


def legal_actions(
    status: FieldStatus,
    rules: list[ActionRule] | None = None,
    check_registry: dict[str, Callable[[FieldStatus], bool]] | None = None,
) -> list[EditAction]:
    """Actions offered for a field in the given status, in menu order."""
    rules = rules or ACTION_RULES
    check_registry = check_registry or CHECK_REGISTRY
    return [
        rule.action
        for rule in rules
        if all(check_registry[name](status) for name in rule.required_checks)
    ]


# =============================================================================
# ADD HANDLERS
# =============================================================================

async def _add_text(field: Field, prompter: Prompter) -> Value | None:
    text = await prompter.text(
        field.display_name,
        multiline=field.field_type is FieldType.MULTI_LINE_TEXT,
    )
    return Value(raw=text)


async def _add_choice(field: Field, prompter: Prompter) -> Value | None:
    if not field.options:
        logger.warning(f"Choice field '{field.display_name}' has no options to pick from")
        return None
    picked = await prompter.choose(
        field.display_name,
        [Choice(title=option.label, value=option.value) for option in field.options],
    )
    return Value(raw=picked)


async def _add_date(field: Field, prompter: Prompter) -> Value | None:
    moment = await prompter.date(field.display_name)
    return Value(raw=moment.isoformat())


async def _add_boolean(field: Field, prompter: Prompter) -> Value | None:
    answer = await prompter.confirm(field.display_name)
    return Value(raw="true" if answer else "false")


async def _add_unknown(field: Field, prompter: Prompter) -> Value | None:
    logger.warning(f"Cannot add values to field of unsupported type '{field.type_name}'")
    return None


ADD_HANDLERS: dict[FieldType, Callable[[Field, Prompter], Awaitable[Value | None]]] = {
    FieldType.SINGLE_LINE_TEXT: _add_text,
    FieldType.MULTI_LINE_TEXT: _add_text,
    FieldType.CHOICE: _add_choice,
    FieldType.DATE: _add_date,
    FieldType.BOOLEAN: _add_boolean,
    FieldType.UNKNOWN: _add_unknown,
}


# =============================================================================
# FIELD EDITOR
# =============================================================================

@dataclass
class TransitionRecord:
    """One step taken by the editor."""

    action: EditAction
    from_state: EditState
    to_state: EditState
    value_count: int


@dataclass
class FieldEditor:
    """
    State machine for editing one field.

    The field's value list is mutated in place.
    """

    field: Field
    prompter: Prompter
    state: EditState = EditState.CHOOSING_ACTION
    history: list[TransitionRecord] = dataclass_field(default_factory=list)

    def available_actions(self) -> list[EditAction]:
        return legal_actions(FieldStatus.of(self.field))

    def _target_state(self, action: EditAction) -> EditState:
        for rule in ACTION_RULES:
            if rule.action is action:
                return rule.to_state
        raise ValueError(f"No rule for action {action}")

    def _record(self, action: EditAction, to_state: EditState) -> None:
        self.history.append(
            TransitionRecord(
                action=action,
                from_state=self.state,
                to_state=to_state,
                value_count=len(self.field.values),
            )
        )
        self.state = to_state

    async def step(self) -> EditState:
        """Ask for one action and carry it out."""
        if self.state is EditState.DONE:
            return self.state

        actions = self.available_actions()
        action = await self.prompter.choose(
            f"{self.field.display_name}: what do you want to do?",
            [Choice(title=a.value, value=a) for a in actions],
        )
        if action not in actions:
            raise ValueError(f"Action {action} is not available for {self.field.display_name}")

        self._record(action, self._target_state(action))

        if self.state is EditState.ADDING:
            await self._add()
            self._record(action, EditState.CHOOSING_ACTION)
        elif self.state is EditState.REMOVING:
            await self._remove()
            self._record(action, EditState.CHOOSING_ACTION)

        return self.state

    async def run(self) -> Field:
        """Edit until the user chooses Done."""
        self.state = EditState.CHOOSING_ACTION
        while self.state is not EditState.DONE:
            await self.step()
        return self.field

    async def _add(self) -> None:
        value = await ADD_HANDLERS[self.field.field_type](self.field, self.prompter)
        if value is not None:
            self.field.values.append(value)

    async def _remove(self) -> None:
        choices = [
            Choice(title=render_value(self.field, value) or value.raw, value=index)
            for index, value in enumerate(self.field.values)
        ]
        index = await self.prompter.choose("Which value do you want to remove?", choices)
        del self.field.values[index]


def can_add_value(field: Field) -> bool:
    """False when Add can never produce a value for `field`."""
    if field.field_type is FieldType.UNKNOWN:
        return False
    if field.field_type is FieldType.CHOICE and not field.options:
        return False
    return True


async def edit_fields(fields: list[Field], prompter: Prompter) -> None:
    """
    Edit every field in order; a field is finished before the next starts.

    An empty required field that cannot take a value is skipped, since Done
    would never be offered for it.
    """
    for field in fields:
        if field.required and not field.values and not can_add_value(field):
            logger.warning(
                f"Skipping required field '{field.display_name}': no value can be added"
            )
            continue
        await FieldEditor(field, prompter).run()
