"""Interaction Mapper: DOM event handlers to htmx round-trip attributes.

Handler intent is recovered with regular expressions over the handler's
source text. A body that matches nothing yields an unmatched ``Action`` and
the caller emits only the event trigger, if any.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from . import constants
from .naming import lower_first

logger = logging.getLogger(__name__)

_GENERIC_SETTER = re.compile(r"\bset([A-Z][\w$]*)\s*\(")
_CALL = re.compile(r"(?<![\w$.])([A-Za-z_$][\w$]*)\s*\(")
_TRIVIAL_ARGUMENT = re.compile(r"[\w$]*")


@dataclass(frozen=True)
class Action:
    """Result of matching a handler body against the known patterns."""

    matched: bool
    path: str = ""
    value_expr: str = ""


UNMATCHED = Action(matched=False)


def is_event_attribute(name: str) -> bool:
    return len(name) > 2 and name.startswith("on") and name[2].isupper()


def event_name(attribute: str) -> str:
    """``onClick`` -> ``click``."""
    return attribute[2:].lower()


def _call_arguments(body: str, open_paren: int) -> str:
    """Text between the parenthesis at ``open_paren`` and its partner."""
    depth = 0
    for i in range(open_paren, len(body)):
        if body[i] == "(":
            depth += 1
        elif body[i] == ")":
            depth -= 1
            if depth == 0:
                return body[open_paren + 1 : i].strip()
    return body[open_paren + 1 :].strip()


class InteractionMapper:
    """Maps (event, handler body) pairs to protocol attributes."""

    def __init__(self, component_name: str, setters: dict[str, str] | None = None):
        self.component_name = component_name
        # setter identifier -> state name
        self._setters = dict(setters or {})

    def _endpoint(self, action: str) -> str:
        return constants.ENDPOINT_TEMPLATE.format(
            component=self.component_name.lower(), action=action
        )

    def _target(self) -> dict[str, str]:
        return {
            constants.HX_TARGET: constants.TARGET_TEMPLATE.format(name=self.component_name),
            constants.HX_SWAP: constants.SWAP_OUTER_HTML,
        }

    def match_setter(self, body: str) -> Action:
        for setter in sorted(self._setters, key=len, reverse=True):
            found = re.search(rf"(?<![\w$.]){re.escape(setter)}\s*\(", body)
            if found:
                return self._setter_action(body, self._setters[setter], found.end() - 1)
        found = _GENERIC_SETTER.search(body)
        if found:
            return self._setter_action(body, lower_first(found.group(1)), found.end() - 1)
        return UNMATCHED

    @staticmethod
    def _setter_action(body: str, state_name: str, open_paren: int) -> Action:
        argument = _call_arguments(body, open_paren)
        value = "" if _TRIVIAL_ARGUMENT.fullmatch(argument) else argument
        return Action(matched=True, path=state_name, value_expr=value)

    def match_call(self, body: str) -> Action:
        for found in _CALL.finditer(body):
            name = found.group(1)
            if name in constants.JS_KEYWORDS:
                continue
            return Action(matched=True, path=name.lower())
        return UNMATCHED

    def match(self, body: str) -> Action:
        action = self.match_setter(body)
        if action.matched:
            return action
        return self.match_call(body)

    def attributes(self, event: str, body: str) -> dict[str, str]:
        """Protocol attributes for one event handler, in emission order.

        Focus and blur carry no value, so they only follow the call-derived
        path; routing them to a setter would post an empty value.
        """
        if event == "submit":
            return {constants.HX_POST: self._endpoint(constants.SUBMIT_ACTION), **self._target()}

        attributes: dict[str, str] = {}
        if event == "change":
            attributes[constants.HX_TRIGGER] = constants.CHANGE_TRIGGER
            action = self.match(body)
        elif event in ("focus", "blur"):
            attributes[constants.HX_TRIGGER] = event
            action = self.match_call(body)
        elif event == "click":
            action = self.match(body)
        else:
            logger.debug("Unsupported event %s", event)
            return {}

        if not action.matched:
            logger.debug("No action recognised for %s handler: %s", event, body)
            return attributes

        attributes[constants.HX_POST] = self._endpoint(action.path)
        attributes.update(self._target())
        if event == "click" and action.value_expr:
            attributes[constants.HX_VALS] = constants.VALUE_PAYLOAD_TEMPLATE.format(
                expr=action.value_expr
            )
        return attributes


def setter_names(state: Iterable) -> dict[str, str]:
    """Setter identifier -> state name for a component's State entries."""
    return {entry.setter: entry.name for entry in state if entry.setter}
