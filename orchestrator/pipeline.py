"""Pipeline Controller - Central orchestrator for Agent Foundry.

The controller is the main entry point that:
1. Classifies the request and answers plain questions directly
2. Asks the planner for a roadmap and starts (or loads) a configuration
3. Builds every planned tool, then every planned agent
4. Picks the entry point, validates, and materializes the project

Every failure, expected or not, ends in a PipelineResult envelope.
"""

import re
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, Union

from pydantic import BaseModel, ValidationError

from agents import (
    AgentBuilderAgent,
    Generator,
    PlanningAgent,
    ToolBuilderAgent,
    placeholder_agent,
    placeholder_tool,
)
from contracts import (
    AgentBuildRequest,
    BuiltAgent,
    BuiltTool,
    ConfigurationParseError,
    CostBudgetExceeded,
    EntryPoint,
    EntryPointKind,
    GenerationFailure,
    PipelineCancelled,
    PipelineResult,
    PipelineState,
    Plan,
    PlanRequest,
    ProjectConfiguration,
    RequestIntent,
    RequiredAgent,
    RequiredTool,
    ResponseType,
    ResultStatus,
    StepBudgetExceeded,
    ToolBuildRequest,
    WorkflowSpec,
    WorkflowStep,
)
from orchestrator.run_state import PipelineRun
from orchestrator.step_budget import StepBudget
from providers.cost_logger import get_pipeline_cost_logger
from stages import (
    PROVISIONAL_ENTRY_NAMES,
    add_agent,
    add_tool,
    add_workflow,
    init_config,
    load_config,
    set_entry_point,
    validate_config,
)
from config import settings


DEFAULT_PROJECT_NAME = "agent-project"

CAPABILITIES_MESSAGE = (
    "I generate Mastra agent projects from a description. Describe the agent you "
    "want (what it should do and which tools or services it needs) and I will plan "
    "it, build its tools and agents, validate the configuration and scaffold the "
    "project. Pass an existing configuration to extend a project instead."
)


def slugify_project_name(text: str, max_words: int = 4) -> str:
    """kebab-case slug from the first words of a description."""
    words = re.findall(r"[a-z0-9]+", (text or "").lower())
    return "-".join(words[:max_words]) or DEFAULT_PROJECT_NAME


class PipelineController:
    """State machine for one request: plan, init, build tools, build agents, finalize.

    Responsibilities:
    - Sequence generator and stage calls against a bounded step budget
    - Substitute placeholders for failed tool and agent builds
    - Choose the entry point and validate before materializing
    - Convert every failure into a FinalConfig envelope
    """

    def __init__(
        self,
        planner: Optional[Generator] = None,
        tool_builder: Optional[Generator] = None,
        agent_builder: Optional[Generator] = None,
        materializer=None,
        classifier=None,
        route_requests: bool = True,
        max_steps: Optional[int] = None,
        output_dir: Optional[str] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        materialize: bool = True,
        cancel_event: Optional[threading.Event] = None,
        build_concurrency: Optional[int] = None,
        max_cost_usd: Optional[float] = None,
    ):
        """Initialize the controller.

        Args:
            planner: Generator producing a Plan (default PlanningAgent)
            tool_builder: Generator producing a BuiltTool (default ToolBuilderAgent)
            agent_builder: Generator producing a BuiltAgent (default AgentBuilderAgent)
            materializer: Object with materialize(config, output_path) (default ProjectMaterializer)
            classifier: Object with classify(text, has_existing_config) (default RequestClassifier)
            route_requests: Classify requests first and answer questions without building
            max_steps: Generator and stage invocations allowed per run
            output_dir: Directory generated projects are written into
            provider: LLM provider for the default generators
            model: Model override for the default generators
            materialize: Write the project tree after validation
            cancel_event: Set by the caller to abort the run before its next step
            build_concurrency: Parallel builds per loop (1 builds sequentially)
            max_cost_usd: LLM spend allowed per run, checked before every step
        """
        self.provider = provider
        self.model = model
        self.planner = planner or PlanningAgent(model=model, provider=provider)
        self.tool_builder = tool_builder or ToolBuilderAgent(model=model, provider=provider)
        self.agent_builder = agent_builder or AgentBuilderAgent(model=model, provider=provider)

        if materializer is None and materialize:
            from scaffold import ProjectMaterializer
            materializer = ProjectMaterializer()
        self.materializer = materializer
        self.materialize = materialize

        self.route_requests = route_requests
        if classifier is None and route_requests:
            from router import RequestClassifier
            classifier = RequestClassifier(model=model, provider=provider)
        self.classifier = classifier

        self.max_steps = max_steps if max_steps is not None else settings.max_steps
        self.output_dir = Path(output_dir or settings.output_dir)
        self.cancel_event = cancel_event or threading.Event()
        self.build_concurrency = build_concurrency or settings.build_concurrency
        self.max_cost_usd = max_cost_usd or settings.max_cost_per_run_usd

        self.run_record: Optional[PipelineRun] = None
        self.budget: Optional[StepBudget] = None
        self._cost_baseline = 0.0

    def cancel(self) -> None:
        """Ask a running pipeline to stop before its next step."""
        self.cancel_event.set()

    def run_manifest(self) -> dict:
        """Steps, cost and duration of the most recent run."""
        if self.run_record is None or self.budget is None:
            return {}
        manifest = self.budget.generate_manifest(self._run_cost())
        manifest["run_id"] = self.run_record.run_id
        manifest["duration_seconds"] = self.run_record.duration_seconds
        return manifest

    def run(
        self,
        user_request: str,
        existing_config: Optional[ProjectConfiguration] = None,
        existing_config_json: Optional[str] = None,
    ) -> PipelineResult:
        """Execute one pipeline run.

        Args:
            user_request: Free-text description of the project or change
            existing_config: Configuration to extend (edit mode)
            existing_config_json: Serialized configuration to load and extend

        Returns:
            PipelineResult envelope; never raises
        """
        started = datetime.now()
        self.run_record = PipelineRun(
            run_id=f"run_{started.strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:6]}",
            started_at=started,
        )
        self.budget = StepBudget(self.max_steps)
        self._cost_baseline = get_pipeline_cost_logger().total_cost

        try:
            has_existing = existing_config is not None or existing_config_json is not None
            if self.route_requests and self.classifier is not None:
                classification = self.classifier.classify(user_request, has_existing)
                self.run_record.log(
                    f"Request classified as {classification.intent.value} "
                    f"({classification.confidence:.2f})"
                )
                if classification.intent == RequestIntent.QUERY:
                    return self._query_response()

            if existing_config_json is not None:
                self._step("load")
                existing_config = load_config(existing_config_json)
                self.run_record.log(f"Loaded configuration '{existing_config.project_name}'")

            plan = self._run_planning(user_request, existing_config)
            config = self._run_initializing(plan, existing_config)
            config = self._run_building_tools(plan, config)
            config = self._run_building_agents(plan, config)
            return self._run_finalizing(plan, config)

        except Exception as e:
            return self._handle_error(e)

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def _run_planning(
        self,
        user_request: str,
        existing_config: Optional[ProjectConfiguration],
    ) -> Plan:
        self.run_record.log("Planning project")
        self._step("plan")
        request = PlanRequest(user_request=user_request, existing_config=existing_config)
        plan = self._coerce(self.planner.generate(request), Plan, self.planner)
        self.run_record.plan = plan
        self.run_record.log(
            f"Plan: {len(plan.required_tools)} tool(s), {len(plan.required_agents)} agent(s), "
            f"entry point {plan.entry_point.value}"
        )
        return plan

    def _run_initializing(
        self,
        plan: Plan,
        existing_config: Optional[ProjectConfiguration],
    ) -> ProjectConfiguration:
        self._transition(PipelineState.INITIALIZING)
        if existing_config is not None:
            self.run_record.log("Extending loaded configuration; init skipped")
            config = existing_config
        else:
            self._step("init")
            project_name = plan.project_name or slugify_project_name(plan.project_overview)
            config = init_config(project_name, plan.project_overview, plan.entry_point)
            self.run_record.log(f"Initialized configuration '{project_name}'")
        self.run_record.config = config
        return config

    def _run_building_tools(self, plan: Plan, config: ProjectConfiguration) -> ProjectConfiguration:
        self._transition(PipelineState.BUILDING_TOOLS)
        context = self._context(plan)
        specs = plan.required_tools

        if self._parallel(specs):
            # Each request sees the names a sequential run would have seen
            requests = []
            known = config.tool_names()
            for spec in specs:
                requests.append((spec, list(known)))
                known.append(spec.name)
            self.budget.reserve([f"build-tool:{s.name}" for s in specs])
            built = self._map_parallel(
                lambda item: self._build_tool(item[0], context, item[1]), requests
            )
            for tool in built:
                config = self._merge_tool(config, tool)
        else:
            for spec in specs:
                self._step(f"build-tool:{spec.name}")
                tool = self._build_tool(spec, context, config.tool_names())
                config = self._merge_tool(config, tool)

        self.run_record.config = config
        return config

    def _run_building_agents(self, plan: Plan, config: ProjectConfiguration) -> ProjectConfiguration:
        self._transition(PipelineState.BUILDING_AGENTS)
        context = self._context(plan)
        specs = plan.required_agents
        available_tools = config.tool_names()

        if self._parallel(specs):
            self.budget.reserve([f"build-agent:{s.name}" for s in specs])
            built = self._map_parallel(
                lambda spec: self._build_agent(spec, available_tools, context), specs
            )
            for agent in built:
                config = self._merge_agent(config, agent)
        else:
            for spec in specs:
                self._step(f"build-agent:{spec.name}")
                agent = self._build_agent(spec, available_tools, context)
                config = self._merge_agent(config, agent)

        self.run_record.config = config
        return config

    def _run_finalizing(self, plan: Plan, config: ProjectConfiguration) -> PipelineResult:
        self._transition(PipelineState.FINALIZING)
        kind = plan.entry_point

        if kind == EntryPointKind.WORKFLOW and not config.workflows:
            self._step("add-workflow")
            workflow = self._sequential_workflow(plan, config)
            config = add_workflow(config, workflow)
            self.run_record.log(
                f"Synthesized workflow '{workflow.name}' with {len(workflow.steps)} step(s)"
            )

        entry_name = self._select_entry_name(plan, config)
        self._step("set-entry-point")
        config = set_entry_point(config, EntryPoint(kind=kind, name=entry_name))
        self.run_record.config = config
        self.run_record.log(f"Entry point: {kind.value} '{entry_name}'")

        self._step("validate")
        validation = validate_config(config)
        if not validation.is_valid:
            for error in validation.errors:
                self.run_record.log(f"  Validation error: {error}")
            return self._failure(
                f"configuration is invalid ({len(validation.errors)} error(s))",
                errors=validation.errors,
            )

        project_path = None
        message = f"Project '{config.project_name}' configured"
        if self.materialize and self.materializer is not None:
            result = self.materializer.materialize(config, str(self.output_dir))
            for line in result.logs:
                self.run_record.log(f"  {line}")
            if not result.success:
                return self._failure(result.message, errors=[result.message])
            project_path = result.project_path
            message = result.message

        self._transition(PipelineState.SUCCEEDED)
        self.run_record.log(message)
        return PipelineResult(
            response_type=ResponseType.FINAL_CONFIG,
            status=ResultStatus.SUCCESS,
            message=message,
            final_config=config,
            project_path=project_path,
            errors=[],
            state=self.run_record.state,
            steps_used=self.budget.used,
            run_id=self.run_record.run_id,
            cost_usd=self._run_cost(),
        )

    # ------------------------------------------------------------------
    # Builds
    # ------------------------------------------------------------------

    def _build_tool(self, spec: RequiredTool, context: str, existing_tools: List[str]) -> BuiltTool:
        """Build one tool, substituting a placeholder on failure."""
        request = ToolBuildRequest(tool_spec=spec, context=context, existing_tools=list(existing_tools))
        try:
            tool = self._coerce(self.tool_builder.generate(request), BuiltTool, self.tool_builder)
            self.run_record.log(f"  Built tool '{tool.name}'")
            return tool
        except GenerationFailure as e:
            self.run_record.log(f"  Tool '{spec.name}' failed ({e}); using placeholder")
            self.run_record.placeholders.append(f"tool:{spec.name}")
            return placeholder_tool(spec)

    def _build_agent(self, spec: RequiredAgent, available_tools: List[str], context: str) -> BuiltAgent:
        """Build one agent, substituting a placeholder on failure."""
        request = AgentBuildRequest(agent_spec=spec, available_tools=list(available_tools), context=context)
        try:
            agent = self._coerce(self.agent_builder.generate(request), BuiltAgent, self.agent_builder)
            self.run_record.log(f"  Built agent '{agent.name}'")
            return agent
        except GenerationFailure as e:
            self.run_record.log(f"  Agent '{spec.name}' failed ({e}); using placeholder")
            self.run_record.placeholders.append(f"agent:{spec.name}")
            return placeholder_agent(spec, available_tools)

    def _merge_tool(self, config: ProjectConfiguration, tool: BuiltTool) -> ProjectConfiguration:
        self._step(f"add-tool:{tool.name}")
        return add_tool(config, tool.to_tool_spec(), tool.dependencies)

    def _merge_agent(self, config: ProjectConfiguration, agent: BuiltAgent) -> ProjectConfiguration:
        self._step(f"add-agent:{agent.name}")
        return add_agent(config, agent.to_agent_spec())

    def _parallel(self, specs: list) -> bool:
        return self.build_concurrency > 1 and len(specs) > 1

    def _map_parallel(self, fn: Callable, items: list) -> list:
        """Run fn over items in a thread pool; results come back in input order."""
        self._check_cancelled()
        self._check_spend()
        with ThreadPoolExecutor(max_workers=min(self.build_concurrency, len(items))) as executor:
            futures = [executor.submit(fn, item) for item in items]
            return [future.result() for future in futures]

    # ------------------------------------------------------------------
    # Finalizing helpers
    # ------------------------------------------------------------------

    def _select_entry_name(self, plan: Plan, config: ProjectConfiguration) -> str:
        """Plan-declared name if it exists, else the current name, else the first item."""
        if plan.entry_point == EntryPointKind.AGENT:
            names = config.agent_names()
        else:
            names = config.workflow_names()

        if plan.entry_point_name and plan.entry_point_name in names:
            return plan.entry_point_name
        if config.entry_point.kind == plan.entry_point and config.entry_point.name in names:
            return config.entry_point.name
        if names:
            return names[0]
        return PROVISIONAL_ENTRY_NAMES[plan.entry_point]

    def _sequential_workflow(self, plan: Plan, config: ProjectConfiguration) -> WorkflowSpec:
        """One agent step per agent, in configuration order."""
        return WorkflowSpec(
            name=plan.entry_point_name or PROVISIONAL_ENTRY_NAMES[EntryPointKind.WORKFLOW],
            description=plan.project_overview,
            input_schema="z.object({ input: z.string().describe('Request for the workflow') })",
            output_schema="z.object({ output: z.string().describe('Final result') })",
            steps=[
                WorkflowStep(id=f"{agent.name}-step", type="agent", config={"agent": agent.name})
                for agent in config.agents
            ],
        )

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _context(self, plan: Plan) -> str:
        context = plan.project_overview
        if plan.implementation_steps:
            steps = "\n".join(f"- {s}" for s in plan.implementation_steps)
            context = f"{context}\n\nImplementation steps:\n{steps}"
        return context

    def _coerce(self, output, schema, generator):
        """Validate generator output against its contract."""
        if isinstance(output, schema):
            return output
        role = getattr(generator, "role", "generator")
        try:
            data = output.model_dump() if isinstance(output, BaseModel) else output
            return schema.model_validate(data)
        except ValidationError as e:
            raise GenerationFailure(role, cause=e) from e

    def _check_cancelled(self) -> None:
        if self.cancel_event.is_set():
            raise PipelineCancelled("pipeline cancelled")

    def _check_spend(self) -> None:
        spent = self._run_cost()
        if spent > self.max_cost_usd:
            raise CostBudgetExceeded(self.max_cost_usd, spent)

    def _step(self, label: str) -> None:
        """Check for cancellation and spend, then consume one step."""
        self._check_cancelled()
        self._check_spend()
        self.budget.consume(label)

    def _transition(self, state: PipelineState) -> None:
        self.run_record.transition(state)
        self.run_record.log(f"State: {state.value}")

    def _run_cost(self) -> float:
        return round(max(0.0, get_pipeline_cost_logger().total_cost - self._cost_baseline), 6)

    def _query_response(self) -> PipelineResult:
        return PipelineResult(
            response_type=ResponseType.QUERY_RESPONSE,
            status=ResultStatus.SUCCESS,
            message=CAPABILITIES_MESSAGE,
            final_config=None,
            errors=[],
            state=None,
            steps_used=0,
            run_id=self.run_record.run_id,
            cost_usd=self._run_cost(),
        )

    def _failure(self, message: str, errors: Optional[List[str]] = None) -> PipelineResult:
        """Move to failed and build the failure envelope."""
        self.run_record.error = message
        if not self.run_record.state.is_terminal:
            self.run_record.transition(PipelineState.FAILED)
        self.run_record.log(f"Run failed: {message}")
        return PipelineResult(
            response_type=ResponseType.FINAL_CONFIG,
            status=ResultStatus.FAILURE,
            message=message,
            final_config=None,
            errors=errors if errors is not None else [message],
            state=PipelineState.FAILED,
            steps_used=self.budget.used if self.budget else 0,
            run_id=self.run_record.run_id,
            cost_usd=self._run_cost(),
        )

    def _handle_error(self, error: Exception) -> PipelineResult:
        """Convert any exception raised during the run into a failure envelope."""
        failed_in = self.run_record.state
        if isinstance(error, ConfigurationParseError):
            return self._failure(str(error))
        if isinstance(error, GenerationFailure) and failed_in == PipelineState.PLANNING:
            return self._failure(f"planning failed: {error}")
        if isinstance(error, (StepBudgetExceeded, CostBudgetExceeded, PipelineCancelled)):
            return self._failure(str(error))
        return self._failure(f"{failed_in.value} failed: {type(error).__name__}: {error}")


def run_pipeline(
    user_request: str,
    existing_config: Optional[Union[ProjectConfiguration, str]] = None,
    output_dir: Optional[str] = None,
    provider: Optional[str] = None,
    model: Optional[str] = None,
    max_steps: Optional[int] = None,
    materialize: bool = True,
) -> PipelineResult:
    """Convenience function to run the pipeline once.

    Args:
        user_request: Free-text description of the project or change
        existing_config: Configuration (or its JSON text) to extend
        output_dir: Directory generated projects are written into
        provider: LLM provider (openai, anthropic, gemini, deepseek)
        model: Model override for every generator
        max_steps: Step budget for the run
        materialize: Write the project tree after validation

    Returns:
        PipelineResult envelope
    """
    controller = PipelineController(
        output_dir=output_dir,
        provider=provider,
        model=model,
        max_steps=max_steps,
        materialize=materialize,
    )
    if isinstance(existing_config, str):
        return controller.run(user_request, existing_config_json=existing_config)
    return controller.run(user_request, existing_config=existing_config)
