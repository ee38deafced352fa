"""Plan Agent: plan a coding task with an LLM, confirm it, then run it step by step."""

__version__ = "0.1.0"

from plan_agent.config import AgentConfig
from plan_agent.context import collect_context
from plan_agent.errors import (
    AgentError,
    ConfigurationError,
    InvocationError,
    PlanningTransportError,
    SessionActiveError,
)
from plan_agent.events import EventEmitter
from plan_agent.executor import StepExecutor
from plan_agent.files import FileReader, LocalFileReader, StubFileReader
from plan_agent.gate import (
    AutoApprovePresenter,
    AutoCancelPresenter,
    CallbackPresenter,
    ConfirmationGate,
    ConsolePresenter,
    PlanPresenter,
    QueuePresenter,
)
from plan_agent.llm import PlanningRequest, StreamEvent, StreamTransport, StubTransport, create_transport
from plan_agent.models import AgentSession, Artifact, ContextEntry, SessionState, Step
from plan_agent.orchestrator import Orchestrator
from plan_agent.parser import parse_steps
from plan_agent.scheduler import CancellationToken, TaskQueue
from plan_agent.tools import AGENT_TOOL_DEFINITION, STEP_TOOL_NAMES, ToolRegistry, default_tool_registry

__all__ = [
    "__version__",
    # Core orchestrator
    "Orchestrator",
    "AgentConfig",
    "StepExecutor",
    # Data model
    "AgentSession",
    "Artifact",
    "ContextEntry",
    "SessionState",
    "Step",
    # Pipeline stages
    "collect_context",
    "parse_steps",
    # Confirmation
    "ConfirmationGate",
    "PlanPresenter",
    "AutoApprovePresenter",
    "AutoCancelPresenter",
    "CallbackPresenter",
    "ConsolePresenter",
    "QueuePresenter",
    # LLM transport
    "PlanningRequest",
    "StreamEvent",
    "StreamTransport",
    "StubTransport",
    "create_transport",
    # Files
    "FileReader",
    "LocalFileReader",
    "StubFileReader",
    # Scheduling
    "CancellationToken",
    "TaskQueue",
    # Events
    "EventEmitter",
    # Tools
    "AGENT_TOOL_DEFINITION",
    "STEP_TOOL_NAMES",
    "ToolRegistry",
    "default_tool_registry",
    # Errors
    "AgentError",
    "ConfigurationError",
    "InvocationError",
    "PlanningTransportError",
    "SessionActiveError",
]
