"""Registry for safe tool registration and execution."""

from __future__ import annotations

import logging
from typing import Any, Literal

from pydantic import Field, ValidationError, create_model

from invoice_assistant.tools.base import Tool

LOGGER = logging.getLogger(__name__)


class ToolRegistry:
    """Explicit registry of invoice operations.

    The parameter schema each tool declares is both exported to the model and
    used to validate the arguments the model sends back, so the two cannot
    drift apart.
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def names(self) -> list[str]:
        return list(self._tools)

    def list_tool_specs(self) -> list[dict[str, Any]]:
        return [
            {
                "functionDeclarations": [
                    {
                        "name": tool.name,
                        "description": tool.description,
                        "parameters": _to_provider_schema(tool.parameters_schema),
                    }
                    for tool in self._tools.values()
                ]
            }
        ]

    async def execute(self, tool_name: str, arguments: dict[str, Any]) -> Any:
        """Run a tool and return its result, or ``{"error": ...}``. Never raises."""

        tool = self._tools.get(tool_name)
        if tool is None:
            LOGGER.warning("Model requested unknown operation %r", tool_name)
            return {"error": f"unknown operation {tool_name}"}

        try:
            validated = _validate_json_schema(tool.parameters_schema, arguments or {})
        except ValueError as exc:
            LOGGER.info("Rejected %s arguments: %s", tool_name, exc)
            return {"error": str(exc)}

        try:
            result = await tool.run(**validated)
        except Exception as exc:  # noqa: BLE001
            LOGGER.exception("Operation %s failed", tool_name)
            return {"error": f"Operation {tool_name} failed: {exc}"}

        succeeded = not (isinstance(result, dict) and "error" in result)
        LOGGER.info("Executed %s (%s) succeeded=%s", tool_name, tool.operation.value, succeeded)
        return result


def _validate_json_schema(schema: dict[str, Any], payload: dict[str, Any]) -> dict[str, Any]:
    props = schema.get("properties", {})
    required = set(schema.get("required", []))
    fields: dict[str, tuple[Any, Any]] = {}
    for name, config in props.items():
        typ: Any = _python_type(config.get("type", "string"))
        if "enum" in config:
            typ = Literal[tuple(config["enum"])]
        default = ... if name in required else None
        if "minimum" in config:
            default = Field(default, ge=config["minimum"])
        fields[name] = (typ if name in required else typ | None, default)

    model = create_model("ToolInputModel", **fields)
    try:
        value = model(**payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid input for tool: {exc}") from exc
    return value.model_dump(exclude_none=True)


def _python_type(schema_type: str) -> type[Any]:
    mapping: dict[str, type[Any]] = {
        "string": str,
        "integer": int,
        "number": float,
        "boolean": bool,
        "object": dict,
        "array": list,
    }
    return mapping.get(schema_type, str)


def _to_provider_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Convert a JSON schema to Gemini's dialect (upper-case type names)."""

    converted: dict[str, Any] = {}
    for key, value in schema.items():
        if key == "type":
            converted[key] = str(value).upper()
        elif key == "properties":
            converted[key] = {name: _to_provider_schema(prop) for name, prop in value.items()}
        elif key == "items":
            converted[key] = _to_provider_schema(value)
        else:
            converted[key] = value
    return converted
