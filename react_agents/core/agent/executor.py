"""
Execution loop that drives a ReAct agent using an LLM and registered tools.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..primitives.actions import AgentAction, AgentFinish, AgentStep, DecisionKind
from ..primitives.errors import (
    AgentCancelledError,
    AgentRunError,
    ConfigurationError,
    ErrorKind,
    ParseError,
    ToolExecutionError,
    ToolInvalidError,
)
from ..primitives.memory import BufferMemory
from ..primitives.tools import Tool, ToolRegistry
from .agent import EARLY_STOPPING_METHODS, Agent


ENV_PREFIX = "REACT_AGENTS_"
PARSE_ERROR_TOOL = "_Exception"
PARSE_ERROR_OBSERVATION = (
    "Invalid or incomplete response. Could not parse your output, please follow the format instructions."
)
DEFAULT_SESSION_ID = "default"

ParsingErrorHandler = Union[bool, str, Callable[[ParseError], str]]


class ExecutorState(str, Enum):
    RUNNING = "running"
    FINISHED = "finished"
    STOPPED_MAX_ITERATIONS = "stopped_max_iterations"
    STOPPED_TIME_LIMIT = "stopped_time_limit"
    CANCELLED = "cancelled"
    FAILED = "failed"


def _env_value(name: str, convert: Callable[[str], Any]) -> Any:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return convert(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from exc


def _env_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ValueError(raw)


@dataclass
class ExecutorConfig:
    max_iterations: Optional[int] = 15
    max_execution_time: Optional[float] = None  # seconds
    early_stopping_method: str = "force"
    return_intermediate_steps: bool = False
    handle_parsing_errors: ParsingErrorHandler = True
    max_parse_retries: int = 3
    propagate_tool_errors: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.max_iterations is not None and self.max_iterations < 1:
            raise ConfigurationError("max_iterations must be a positive integer or None.")
        if self.max_execution_time is not None and self.max_execution_time <= 0:
            raise ConfigurationError("max_execution_time must be a positive number of seconds or None.")
        if self.early_stopping_method not in EARLY_STOPPING_METHODS:
            raise ConfigurationError(
                f"Got unsupported early_stopping_method '{self.early_stopping_method}'. "
                f"Expected one of {EARLY_STOPPING_METHODS}."
            )
        if self.max_parse_retries < 0:
            raise ConfigurationError("max_parse_retries cannot be negative.")
        if not isinstance(self.handle_parsing_errors, (bool, str)) and not callable(self.handle_parsing_errors):
            raise ConfigurationError("handle_parsing_errors must be a bool, a string, or a callable.")

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, **overrides: Any) -> "ExecutorConfig":
        """
        Build a config from ``<prefix>MAX_ITERATIONS``, ``<prefix>MAX_EXECUTION_TIME``,
        ``<prefix>EARLY_STOPPING_METHOD`` and ``<prefix>VERBOSE``. Explicit
        keyword overrides win over the environment.
        """
        values: Dict[str, Any] = {}
        env_fields = {
            "max_iterations": _env_value(f"{prefix}MAX_ITERATIONS", int),
            "max_execution_time": _env_value(f"{prefix}MAX_EXECUTION_TIME", float),
            "early_stopping_method": _env_value(f"{prefix}EARLY_STOPPING_METHOD", str),
            "verbose": _env_value(f"{prefix}VERBOSE", _env_bool),
        }
        for name, value in env_fields.items():
            if value is not None:
                values[name] = value
        values.update(overrides)
        return cls(**values)


@dataclass
class AgentRunResult:
    state: ExecutorState
    return_values: Dict[str, str]
    intermediate_steps: Optional[List[AgentStep]] = None
    stopped_early: bool = False
    iterations: int = 0

    @property
    def output(self) -> str:
        return self.return_values.get("output", "")

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = dict(self.return_values)
        if self.intermediate_steps is not None:
            payload["intermediate_steps"] = list(self.intermediate_steps)
        return payload


@dataclass
class _RunContext:
    inputs: Dict[str, Any]
    session_id: str
    history: List[AgentStep] = field(default_factory=list)
    parse_failures: int = 0
    iterations: int = 0
    started_at: float = field(default_factory=time.monotonic)


class AgentExecutor:
    """
    Runs the plan -> act -> observe loop until the agent finishes, a limit is
    hit, the caller cancels, or an unrecoverable error occurs.

    An executor keeps no per-run state on the instance, so one executor can
    serve several runs at once as long as the tools themselves allow it.
    """

    def __init__(
        self,
        agent: Agent,
        tools: Iterable[Tool],
        *,
        memory: Optional[BufferMemory] = None,
        config: Optional[ExecutorConfig] = None,
    ) -> None:
        self.agent = agent
        self.tools = ToolRegistry(tools)
        self.memory = memory
        self.config = config or ExecutorConfig()
        unknown = [name for name in agent.allowed_tools if name not in self.tools]
        if unknown:
            raise ConfigurationError(
                f"Allowed tools {unknown} do not match the tools passed to the executor {self.tools.names()}."
            )
        self._logger = logging.getLogger(__name__)
        self._log_level = logging.INFO if self.config.verbose else logging.DEBUG

    @classmethod
    def from_agent_and_tools(
        cls,
        agent: Agent,
        tools: Iterable[Tool],
        *,
        memory: Optional[BufferMemory] = None,
        **config_kwargs: Any,
    ) -> "AgentExecutor":
        return cls(agent, tools, memory=memory, config=ExecutorConfig(**config_kwargs))

    def run(
        self,
        inputs: Union[str, Mapping[str, Any]],
        *,
        session_id: str = DEFAULT_SESSION_ID,
        cancel_event: Optional[threading.Event] = None,
    ) -> AgentRunResult:
        """
        Drive the agent until it produces a result.

        Raises :class:`AgentRunError` (with the steps taken so far) when the
        run fails, and :class:`AgentCancelledError` when ``cancel_event`` is
        set; the check happens before every model call, never mid-tool.
        """
        run = _RunContext(inputs=self._prepare_inputs(inputs, session_id), session_id=session_id)
        self._log(
            "\n%s\n[EXECUTION START]\nState: %s\nInput: %s\nMax iterations: %s\n%s",
            "=" * 80,
            ExecutorState.RUNNING.value,
            run.inputs.get("input", ""),
            self.config.max_iterations,
            "=" * 80,
        )

        while True:
            if cancel_event is not None and cancel_event.is_set():
                self._log_state(ExecutorState.CANCELLED, run)
                raise AgentCancelledError(run.history)

            stopped = self._limit_reached(run)
            if stopped is not None:
                try:
                    finish = self.agent.return_stopped_response(
                        self.config.early_stopping_method, run.history, run.inputs
                    )
                except Exception as exc:
                    raise self._model_failure(exc, run) from exc
                return self._finish(stopped, finish, run, stopped_early=True)

            run.iterations += 1
            try:
                decision = self.agent.plan(run.history, run.inputs)
            except ParseError as exc:
                run.parse_failures += 1
                observation = self._handle_parse_error(exc, run)
                action = AgentAction(tool=PARSE_ERROR_TOOL, tool_input=observation, log=exc.llm_output)
                run.history.append(AgentStep(action=action, observation=observation))
                continue
            except Exception as exc:
                raise self._model_failure(exc, run) from exc

            if decision.kind is DecisionKind.FINISH:
                self._log(
                    "\n%s\n[TURN %d] FINAL ANSWER RECEIVED\n%s\n%s",
                    "=" * 80,
                    run.iterations,
                    decision.output.strip(),
                    "=" * 80,
                )
                return self._finish(ExecutorState.FINISHED, decision, run)

            self._log(
                "\n%s\n[TURN %d] TOOL ACTION\nTool: %s\nInput: %s\n%s",
                "-" * 80,
                run.iterations,
                decision.tool,
                decision.tool_input,
                "-" * 80,
            )
            observation, tool = self._take_action(decision, run)
            run.history.append(AgentStep(action=decision, observation=observation))

            if tool is not None and tool.return_direct:
                finish = AgentFinish(return_values={"output": observation}, log=decision.log)
                return self._finish(ExecutorState.FINISHED, finish, run)

    def _prepare_inputs(self, inputs: Union[str, Mapping[str, Any]], session_id: str) -> Dict[str, Any]:
        prepared: Dict[str, Any] = {"input": inputs} if isinstance(inputs, str) else dict(inputs)
        if self.memory is not None:
            loaded = self.memory.load_memory_variables(session_id)
            for key, value in loaded.items():
                prepared.setdefault(key, value)
        return prepared

    def _limit_reached(self, run: _RunContext) -> Optional[ExecutorState]:
        max_iterations = self.config.max_iterations
        if max_iterations is not None and run.iterations >= max_iterations:
            return ExecutorState.STOPPED_MAX_ITERATIONS
        max_time = self.config.max_execution_time
        if max_time is not None and time.monotonic() - run.started_at >= max_time:
            return ExecutorState.STOPPED_TIME_LIMIT
        return None

    def _handle_parse_error(self, exc: ParseError, run: _RunContext) -> str:
        handler = self.config.handle_parsing_errors
        if handler is False:
            self._log_state(ExecutorState.FAILED, run)
            raise AgentRunError(str(exc), kind=ErrorKind.PARSE, history=run.history) from exc
        if run.parse_failures > self.config.max_parse_retries:
            self._log_state(ExecutorState.FAILED, run)
            raise AgentRunError(
                f"Model output could not be parsed after {run.parse_failures} attempts: {exc}",
                kind=ErrorKind.PARSE,
                history=run.history,
            ) from exc
        if handler is True:
            observation = PARSE_ERROR_OBSERVATION
        elif isinstance(handler, str):
            observation = handler
        else:
            observation = handler(exc)
        self._logger.warning(
            "Could not parse model output (attempt %d of %d): %s",
            run.parse_failures,
            self.config.max_parse_retries,
            exc,
        )
        return observation

    def _model_failure(self, exc: Exception, run: _RunContext) -> AgentRunError:
        self._logger.error("Model call failed: %s", exc)
        self._log_state(ExecutorState.FAILED, run)
        return AgentRunError(str(exc), kind=ErrorKind.MODEL, history=run.history)

    def _take_action(self, action: AgentAction, run: _RunContext) -> Tuple[str, Optional[Tool]]:
        """Run the requested tool; the tool is ``None`` when the name is unknown."""
        try:
            tool = self.tools.get(action.tool)
        except ToolInvalidError as error:
            self._logger.warning("Model requested unknown tool '%s'.", action.tool)
            return str(error), None
        try:
            observation = self._invoke_tool(tool, action.tool_input)
        except ToolExecutionError as error:
            if self.config.propagate_tool_errors:
                self._log_state(ExecutorState.FAILED, run)
                raise AgentRunError(str(error), kind=ErrorKind.TOOL_EXECUTION, history=run.history) from error
            self._logger.warning("%s", error)
            observation = str(error)
        self._log(
            "\n%s\n[TOOL RESULT] %s\n%s\n%s",
            "-" * 80,
            tool.name,
            observation.strip(),
            "-" * 80,
        )
        return observation, tool

    def _invoke_tool(self, tool: Tool, tool_input: str) -> str:
        try:
            return tool.invoke(tool_input)
        except Exception as exc:
            raise ToolExecutionError(tool.name, str(exc)) from exc

    def _finish(
        self,
        state: ExecutorState,
        finish: AgentFinish,
        run: _RunContext,
        *,
        stopped_early: bool = False,
    ) -> AgentRunResult:
        return_values = dict(finish.return_values)
        if self.memory is not None:
            self.memory.save_context(run.session_id, run.inputs, return_values)
        self._log_state(state, run)
        return AgentRunResult(
            state=state,
            return_values=return_values,
            intermediate_steps=list(run.history) if self.config.return_intermediate_steps else None,
            stopped_early=stopped_early,
            iterations=run.iterations,
        )

    def _log_state(self, state: ExecutorState, run: _RunContext) -> None:
        self._log(
            "\n%s\n[EXECUTION %s]\nIterations: %d\nSteps recorded: %d\n%s",
            "=" * 80,
            state.name,
            run.iterations,
            len(run.history),
            "=" * 80,
        )

    def _log(self, message: str, *args: Any) -> None:
        self._logger.log(self._log_level, message, *args)
