"""
Prompt templates for LLM CMS MCP Server.

A prompt is a fixed instruction text with named placeholders. Rendering
substitutes argument values, falling back to declared defaults, and wraps
the text as a single user message.
"""

from string import Template
from typing import Any, Dict, List, Optional

import structlog

from ..protocol.schemas import MCPValidationError, Prompt, PromptArgument

logger = structlog.get_logger(__name__)


class PromptParameter:
    """Declared prompt argument with an optional default."""

    def __init__(
        self,
        name: str,
        description: str,
        required: bool = False,
        default: Optional[str] = None,
    ):
        self.name = name
        self.description = description
        self.required = required
        self.default = default

    def to_argument(self) -> PromptArgument:
        return PromptArgument(name=self.name, description=self.description, required=self.required)


class PromptTemplate:
    """
    Static, parametrized instruction template.

    Placeholders use ``$name`` syntax from ``string.Template``.
    """

    def __init__(
        self,
        name: str,
        description: str,
        template: str,
        parameters: Optional[List[PromptParameter]] = None,
    ):
        self.name = name
        self.description = description
        self.template = Template(template)
        self.parameters = parameters or []

    def get_schema(self) -> Prompt:
        """Get the prompt descriptor."""
        return Prompt(
            name=self.name,
            description=self.description,
            arguments=[parameter.to_argument() for parameter in self.parameters],
        )

    def resolve_arguments(self, arguments: Any) -> Dict[str, str]:
        """
        Resolve call arguments against the declared parameters.

        Undeclared arguments are ignored. Missing or empty optional
        arguments take their defaults.

        Raises:
            MCPValidationError: If arguments are not an object or a required
                argument is missing
        """
        if not isinstance(arguments, dict):
            raise MCPValidationError(
                "Prompt arguments must be an object",
                data={"actual_type": type(arguments).__name__},
            )

        values: Dict[str, str] = {}
        for parameter in self.parameters:
            value = arguments.get(parameter.name)
            if value is None or value == "":
                if parameter.required:
                    raise MCPValidationError(
                        f"Missing required argument: {parameter.name}",
                        data={"prompt": self.name, "missing_argument": parameter.name},
                    )
                value = parameter.default if parameter.default is not None else ""
            values[parameter.name] = str(value)
        return values

    def render(self, arguments: Any) -> Dict[str, Any]:
        """
        Render the prompt as an MCP ``prompts/get`` result.

        Returns:
            Dict with ``description`` and a single user-role ``messages`` entry
        """
        values = self.resolve_arguments(arguments)
        text = self.template.substitute(values)

        logger.debug("Rendered prompt", prompt=self.name, arguments=values)

        return {
            "description": self.description,
            "messages": [
                {
                    "role": "user",
                    "content": {"type": "text", "text": text},
                }
            ],
        }
