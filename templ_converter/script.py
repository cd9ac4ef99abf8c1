"""Companion lifecycle script wiring effects and cleanup to htmx events."""

from __future__ import annotations

import logging
from string import Template

from . import constants
from .codegen import finish
from .component import Component, EffectDefinition
from .effects import client_effects
from .options import ConversionOptions

logger = logging.getLogger(__name__)

_SCRIPT = Template(
    """\
// Lifecycle wiring for ${Component} instances rendered by the server.
document.addEventListener('DOMContentLoaded', function() {
	const prefix = '${Component}-';

	function initialize${Component}(id) {
		const element = document.getElementById(prefix + id);
		if (!element) {
			return;
		}
${effects}
	}

	// Re-initialise after every partial replacement.
	document.body.addEventListener('htmx:afterSwap', function(event) {
		const target = event.detail.target;
		if (target && target.id && target.id.startsWith(prefix)) {
			initialize${Component}(target.id.slice(prefix.length));
		}
	});

	// Release server-held state before an instance leaves the page.
	document.body.addEventListener('htmx:beforeCleanupElement', function(event) {
		const element = event.detail.elt;
		if (element && element.id && element.id.startsWith(prefix)) {
			const id = element.id.slice(prefix.length);
			fetch('/api/${lower}/${cleanup}?id=' + encodeURIComponent(id), { method: 'POST' });
		}
	});

	document.querySelectorAll('[id^="' + prefix + '"]').forEach(function(element) {
		initialize${Component}(element.id.slice(prefix.length));
	});
});
"""
)

_IMMEDIATE = Template(
    """\
		// effect ${number}: runs once per render
		fetch('/api/${lower}/${effect}/${number}?id=' + encodeURIComponent(id), { method: 'POST' });"""
)

_ON_SETTLE = Template(
    """\
		// effect ${number}: depends on ${dependencies}; re-run after each settle
		element.addEventListener('htmx:afterSettle', function() {
			fetch('/api/${lower}/${effect}/${number}?id=' + encodeURIComponent(id), { method: 'POST' });
		});"""
)


class LifecycleScriptGenerator:
    """Builds the client-side script for one resolved component."""

    def effect_call(self, component: Component, number: int, effect: EffectDefinition) -> str:
        template = _ON_SETTLE if effect.has_dependencies else _IMMEDIATE
        return template.substitute(
            number=str(number),
            lower=component.name.lower(),
            effect=constants.EFFECT_ACTION_PREFIX,
            dependencies=", ".join(effect.dependencies),
        )

    def generate(self, component: Component, options: ConversionOptions) -> str:
        """Script source, or an empty string when nothing needs wiring."""
        if not options.partial_updates or not (component.state or component.effects):
            return ""
        wired = client_effects(component)
        skipped = len(component.effects) - len(wired)
        if skipped:
            logger.debug("%d data-fetching effect(s) of %s left to the server", skipped, component.name)
        effects = "\n".join(self.effect_call(component, number, effect) for number, effect in wired)
        script = _SCRIPT.substitute(
            Component=component.name,
            lower=component.name.lower(),
            cleanup=constants.CLEANUP_ACTION,
            effects=effects or "\t\t// no client-side effects",
        )
        return finish(script, options)
