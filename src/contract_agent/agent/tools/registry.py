"""
agent.tools.registry - Tool registration, discovery, and definitions.

Central registry mapping operation names to tool objects. Definitions are
built once per registration from each tool's Pydantic schema and handed to
the model on every tool-enabled call.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from langchain_core.utils.json_schema import dereference_refs

from contract_agent.domain.models import OperationDefinition
from contract_agent.agent.tools.base import BaseTool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Manages tool registration and lookup."""

    def __init__(self):
        self._tools: dict[str, BaseTool] = {}
        self._definitions: dict[str, OperationDefinition] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool by its name."""
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' already registered")
        self._tools[tool.name] = tool
        self._definitions[tool.name] = _build_definition(tool)
        logger.debug("Registered tool: %s (%s)", tool.name, tool.category)

    def get(self, name: str) -> Optional[BaseTool]:
        """Get a tool by name, or None when nothing is registered under it."""
        return self._tools.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def all(self) -> list[BaseTool]:
        """Return all registered tools."""
        return list(self._tools.values())

    def names(self) -> list[str]:
        """Return all registered tool names."""
        return list(self._tools.keys())

    def definitions(self) -> list[OperationDefinition]:
        """Return the declared definitions in registration order."""
        return list(self._definitions.values())


def _build_definition(tool: BaseTool) -> OperationDefinition:
    schema = tool.get_schema().model_json_schema(by_alias=True)
    return OperationDefinition(
        name=tool.name,
        description=tool.description,
        parameters=_clean_schema(schema),
    )


def _clean_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """Inline $refs and drop Pydantic titles so the schema reads like a hand-written one."""
    inlined = dereference_refs(schema)
    inlined.pop("$defs", None)
    return _strip_titles(inlined)


def _strip_titles(node: Any) -> Any:
    if isinstance(node, dict):
        return {
            key: _strip_titles(value)
            for key, value in node.items()
            # "title" under "properties" is a field name, not metadata
            if not (key == "title" and isinstance(value, str))
        }
    if isinstance(node, list):
        return [_strip_titles(item) for item in node]
    return node
