"""Effect classification."""

from __future__ import annotations

from . import constants
from .component import Component, EffectDefinition


def is_data_fetching(effect: EffectDefinition) -> bool:
    """True when the body only fetches data.

    A body touching the DOM, the window or browser storage is never
    data-fetching, whatever else it does.
    """
    body = effect.body
    if any(indicator in body for indicator in constants.SIDE_EFFECT_INDICATORS):
        return False
    return any(indicator in body for indicator in constants.FETCH_INDICATORS)


def client_effects(component: Component) -> list[tuple[int, EffectDefinition]]:
    """(1-based number, effect) for every effect that needs client wiring."""
    return [
        (number, effect)
        for number, effect in enumerate(component.effects, start=1)
        if not is_data_fetching(effect)
    ]
