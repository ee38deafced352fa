"""Tool registry: the capabilities a step-execution engine could dispatch into.

The orchestrator only enumerates these; it never invokes one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolDefinition:
    """Schema definition for a tool exposed to the LLM."""

    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=dict)  # JSON Schema, root type "object"


class ToolRegistry:
    """Registry of tool definitions.

    Latest-wins on name collision. Insertion-order stable.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}

    def register(self, tool: ToolDefinition) -> None:
        """Register a tool. Overwrites any existing tool with the same name."""
        self._tools[tool.name] = tool

    def unregister(self, name: str) -> None:
        """Remove a tool by name. No-op if not found."""
        self._tools.pop(name, None)

    def get(self, name: str) -> ToolDefinition | None:
        return self._tools.get(name)

    def definitions(self) -> list[ToolDefinition]:
        """Return all tool definitions in registration order."""
        return list(self._tools.values())

    def names(self) -> list[str]:
        """Return all registered tool names in registration order."""
        return list(self._tools.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)


# --- Step capability definitions (JSON Schema) ---

_PATH = {"type": "string", "description": "File or directory path"}

STEP_TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="list-directory",
        description="List the entries of a directory.",
        parameters={
            "type": "object",
            "properties": {"path": _PATH},
            "required": ["path"],
        },
    ),
    ToolDefinition(
        name="search-text",
        description="Search file contents using a regex pattern.",
        parameters={
            "type": "object",
            "properties": {
                "pattern": {"type": "string", "description": "Regex pattern"},
                "path": _PATH,
            },
            "required": ["pattern"],
        },
    ),
    ToolDefinition(
        name="glob-match",
        description="Find files matching a glob pattern.",
        parameters={
            "type": "object",
            "properties": {
                "pattern": {"type": "string", "description": "Glob pattern (e.g., '**/*.py')"},
                "path": _PATH,
            },
            "required": ["pattern"],
        },
    ),
    ToolDefinition(
        name="view-file",
        description="Read a file and return its content.",
        parameters={
            "type": "object",
            "properties": {"path": _PATH},
            "required": ["path"],
        },
    ),
    ToolDefinition(
        name="replace-text",
        description="Replace an exact string occurrence in a file.",
        parameters={
            "type": "object",
            "properties": {
                "path": _PATH,
                "old_string": {"type": "string", "description": "Exact text to find"},
                "new_string": {"type": "string", "description": "Replacement text"},
            },
            "required": ["path", "old_string", "new_string"],
        },
    ),
    ToolDefinition(
        name="write-file",
        description="Write content to a file, creating it if needed.",
        parameters={
            "type": "object",
            "properties": {
                "path": _PATH,
                "content": {"type": "string", "description": "The full file content"},
            },
            "required": ["path", "content"],
        },
    ),
    ToolDefinition(
        name="run-shell",
        description="Execute a shell command.",
        parameters={
            "type": "object",
            "properties": {"command": {"type": "string", "description": "The command to run"}},
            "required": ["command"],
        },
    ),
)

STEP_TOOL_NAMES: tuple[str, ...] = tuple(d.name for d in STEP_TOOL_DEFINITIONS)


def default_tool_registry() -> ToolRegistry:
    """A registry holding every step capability, in canonical order."""
    registry = ToolRegistry()
    for definition in STEP_TOOL_DEFINITIONS:
        registry.register(definition)
    return registry


# --- The agent itself, as a tool an outer LLM can call ---

AGENT_TOOL_DEFINITION = ToolDefinition(
    name="plan_agent",
    description=(
        "Carries out a complex programming task end to end. Describe the task in detail: "
        "the agent plans the necessary steps, shows you the plan and, once you confirm, "
        "runs the steps one after another. It never starts work without confirmation."
    ),
    parameters={
        "type": "object",
        "properties": {
            "prompt": {"type": "string", "description": "The task the agent should perform"},
            "file_paths": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Paths of files relevant to the task (optional)",
            },
        },
        "required": ["prompt"],
    },
)
