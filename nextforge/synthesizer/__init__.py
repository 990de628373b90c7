"""nextforge synthesizer -- turns plan entries into source files via the model."""

from nextforge.synthesizer.components import (
    COMPONENT_DIRECTORIES,
    ComponentSynthesizer,
    SynthesisError,
    component_directory,
)
from nextforge.synthesizer.type_defs import TypeDefinitionError, synthesize_types

__all__ = [
    "COMPONENT_DIRECTORIES",
    "ComponentSynthesizer",
    "SynthesisError",
    "TypeDefinitionError",
    "component_directory",
    "synthesize_types",
]
