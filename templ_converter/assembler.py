"""Assembler: turns a resolved component into the final artifact bundle."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from .codegen import finish, join_blocks
from .component import Component
from .expressions import ExpressionTranslator
from .go_types import go_type
from .handlers import StateEffectGenerator, props_struct
from .imports import ImportResolver, format_imports
from .interactions import InteractionMapper, setter_names
from .naming import lower_first
from .options import ConversionOptions
from .renderer import ElementTreeRenderer
from .resolve import resolve
from .result import ConversionResult
from .script import LifecycleScriptGenerator

logger = logging.getLogger(__name__)

GENERATED_HEADER = "// Code generated by templ-converter from {name}. DO NOT EDIT."

_DEFAULT = object()


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class TemplateAssembler:
    """Builds the ``.templ`` artifact around the rendered element tree."""

    def __init__(self, imports: Optional[ImportResolver] = None):
        self.imports = imports or ImportResolver()

    def parameters(self, component: Component, options: ConversionOptions, legacy_state: bool) -> list[str]:
        params: list[str] = []
        if component.props:
            params.append(f"props {component.name}Props")
        if options.partial_updates:
            params.append("id string")
        if legacy_state and component.state:
            entry = component.state[0]
            params.append(f"{entry.name} {go_type(entry.type, entry.initial_value)}")
        return params

    def helper_functions(self, component: Component) -> list[str]:
        """Extension point for Go helpers emitted after the template."""
        return []

    def assemble(
        self,
        component: Component,
        options: ConversionOptions,
        renderer: ElementTreeRenderer,
        legacy_state: bool = False,
    ) -> str:
        signature = (
            f"templ {lower_first(component.name)}"
            f"({', '.join(self.parameters(component, options, legacy_state))}) {{"
        )
        body = renderer.render_text(component.jsx, level=1)
        blocks = [
            GENERATED_HEADER.format(name=component.name) + f"\n\npackage {options.namespace}",
            finish(format_imports(self.imports.template_imports(component, options)), options),
            finish(props_struct(component), options),
            f"{signature}\n{body}\n}}",
            *self.helper_functions(component),
        ]
        return join_blocks(blocks)

    def assemble_controller(self, component: Component, options: ConversionOptions, body: str) -> str:
        if not body:
            return ""
        blocks = [
            GENERATED_HEADER.format(name=component.name) + f"\n\npackage {options.namespace}",
            finish(format_imports(self.imports.controller_imports(component, options)), options),
            body,
        ]
        return join_blocks(blocks)


class Converter:
    """Runs the full pipeline: resolve, render, generate, assemble.

    Passing ``handler_generator=None`` selects the legacy mode: the template
    takes the first State entry as a raw parameter and no controller or
    script is produced.
    """

    def __init__(
        self,
        handler_generator=_DEFAULT,
        script_generator: Optional[LifecycleScriptGenerator] = None,
        translator: Optional[ExpressionTranslator] = None,
        assembler: Optional[TemplateAssembler] = None,
        clock: Callable[[], str] = _utc_now,
    ):
        self.translator = translator or ExpressionTranslator()
        if handler_generator is _DEFAULT:
            handler_generator = StateEffectGenerator(self.translator)
        self.handler_generator: Optional[StateEffectGenerator] = handler_generator
        self.script_generator = script_generator or LifecycleScriptGenerator()
        self.assembler = assembler or TemplateAssembler()
        self.clock = clock

    def convert(self, component: Component, options: Optional[ConversionOptions] = None) -> ConversionResult:
        """Convert one component.

        Args:
            component: The Component Model. It is not modified.
            options: Conversion options; defaults apply when omitted.

        Returns:
            An immutable ConversionResult.

        Raises:
            ValidationError: If the model is malformed. Nothing is emitted.
        """
        options = options or ConversionOptions()
        stage = logger.info if options.debug else logger.debug

        resolved = resolve(component, options)
        stage("Resolved component %s (%d props, %d state, %d effects, %d callbacks)",
              resolved.name, len(resolved.props), len(resolved.state),
              len(resolved.effects), len(resolved.callbacks))

        mapper = InteractionMapper(resolved.name, setter_names(resolved.state))
        renderer = ElementTreeRenderer(resolved.name, options, self.translator, mapper)
        legacy = self.handler_generator is None

        template = self.assembler.assemble(resolved, options, renderer, legacy_state=legacy)
        stage("Rendered template for %s (%d chars)", resolved.name, len(template))

        controller = ""
        script = ""
        if not legacy:
            body = self.handler_generator.generate(resolved, options)
            controller = self.assembler.assemble_controller(resolved, options, body)
            script = self.script_generator.generate(resolved, options)
            stage("Generated controller (%d chars) and script (%d chars)", len(controller), len(script))

        logger.info("Converted component %s", resolved.name)
        return ConversionResult(
            component_name=resolved.name,
            template=template,
            controller=controller,
            script=script,
            options=options.clone(),
            converted_at=self.clock(),
            settings=options.settings(),
        )
