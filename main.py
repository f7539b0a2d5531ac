#!/usr/bin/env python3
"""Agent Foundry CLI - Entry point for generating Mastra agent projects.

Usage:
    # Generate a new project
    python main.py --request "Build me a weather agent that can fetch forecasts"

    # Extend an existing configuration
    python main.py --request "Add a tool that converts units" --edit ./weather-agent.json

    # Plan and build without writing files, saving the configuration instead
    python main.py -r ./request.txt --no-scaffold --save-config ./config.json

    # Check a previously generated project
    python main.py --check-status weather-agent
"""

import sys
import json
from contextlib import redirect_stdout
from pathlib import Path
from typing import Optional

try:
    import click
    from rich.console import Console
    from rich.panel import Panel
    from rich.progress import Progress, SpinnerColumn, TextColumn
    from rich.table import Table
except ImportError:
    print("Missing dependencies. Run: pip install click rich")
    sys.exit(1)

from contracts import PipelineResult, ResponseType
from orchestrator import PipelineController
from router import classify_request
from scaffold import ProjectMaterializer
from stages import dump_config
from providers import list_providers as get_available_providers
from config import settings


console = Console()


def read_request(request: str) -> str:
    """Read the request from a file, or treat the argument as literal text."""
    path = Path(request)
    if path.is_file():
        return path.read_text(encoding="utf-8", errors="replace")
    return request


def print_result(result: PipelineResult) -> None:
    """Render a pipeline envelope."""
    console.print("\n" + "=" * 60)

    if result.response_type == ResponseType.QUERY_RESPONSE:
        console.print(Panel(result.message, title="Agent Foundry", border_style="blue"))
        return

    if not result.succeeded:
        console.print(f"[red]Failed:[/red] {result.message}")
        for error in result.errors:
            if error != result.message:
                console.print(f"  [red]-[/red] {error}")
        console.print(f"[dim]Run ID:[/dim] {result.run_id}  [dim]Steps:[/dim] {result.steps_used}")
        return

    config = result.final_config
    console.print(f"[green]Status:[/green] {result.status.value}")
    console.print(f"[green]Run ID:[/green] {result.run_id}")
    console.print(f"[green]Project:[/green] {config.project_name}")
    console.print(f"[green]Entry point:[/green] {config.entry_point.kind.value} '{config.entry_point.name}'")
    console.print(f"[green]Steps used:[/green] {result.steps_used}")
    console.print(f"[green]Total cost:[/green] ${result.cost_usd:.4f}")

    if config.tools:
        table = Table(title="Tools")
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        for tool in config.tools:
            table.add_row(tool.name, tool.description)
        console.print(table)

    if config.agents:
        table = Table(title="Agents")
        table.add_column("Name", style="cyan")
        table.add_column("Model")
        table.add_column("Tools")
        for agent in config.agents:
            table.add_row(agent.name, agent.model, ", ".join(agent.tools) or "-")
        console.print(table)

    if result.project_path:
        console.print(f"\n[bold]Project written to:[/bold] {result.project_path}")

    console.print("\n" + "=" * 60)


def print_manifest(manifest: dict) -> None:
    """Render the step breakdown of a run."""
    if not manifest:
        return
    summary = manifest["summary"]
    table = Table(title="Steps")
    table.add_column("Step", style="cyan")
    table.add_column("Count", justify="right")
    for label, count in manifest["by_label"].items():
        table.add_row(label, str(count))
    console.print(table)
    console.print(
        f"[dim]{summary['steps_used']}/{summary['max_steps']} steps "
        f"({summary['budget_used_percent']}%) in {manifest['duration_seconds']}s[/dim]"
    )


@click.command()
@click.option(
    "--request", "-r", "request",
    required=False,
    help="Path to a request file or the literal request text"
)
@click.option(
    "--edit", "edit_path",
    default=None,
    help="Existing configuration JSON to extend"
)
@click.option(
    "--output", "-o", "output_dir",
    default=None,
    help=f"Output directory (default: {settings.output_dir})"
)
@click.option(
    "--provider", "-p",
    type=click.Choice(["openai", "anthropic", "gemini", "deepseek"]),
    default=None,
    help="LLM provider (default: inferred from the model)"
)
@click.option(
    "--model",
    default=None,
    help="Model name for every generator (e.g., gpt-4o, claude-sonnet)"
)
@click.option(
    "--max-steps",
    type=int,
    default=None,
    help=f"Generator and stage calls allowed per run (default: {settings.max_steps})"
)
@click.option(
    "--concurrency",
    type=int,
    default=None,
    help="Parallel tool/agent builds (default: sequential)"
)
@click.option(
    "--no-scaffold",
    is_flag=True,
    help="Validate the configuration but don't write project files"
)
@click.option(
    "--save-config",
    default=None,
    help="Write the final configuration JSON to this path"
)
@click.option(
    "--check-status",
    "check_status_project",
    default=None,
    help="Check whether a generated project exists and is complete, then exit"
)
@click.option(
    "--classify-only",
    is_flag=True,
    help="Only classify the request, don't run the pipeline"
)
@click.option(
    "--list-providers",
    is_flag=True,
    help="List available providers and exit"
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print the result envelope as JSON"
)
def main(
    request: Optional[str],
    edit_path: Optional[str],
    output_dir: Optional[str],
    provider: Optional[str],
    model: Optional[str],
    max_steps: Optional[int],
    concurrency: Optional[int],
    no_scaffold: bool,
    save_config: Optional[str],
    check_status_project: Optional[str],
    classify_only: bool,
    list_providers: bool,
    as_json: bool,
):
    """Agent Foundry: generate Mastra agent projects from a description.

    Plans the project, builds each tool and agent with a language model,
    validates the assembled configuration and scaffolds the project tree.
    """
    # Handle --list-providers
    if list_providers:
        console.print("[bold]Available LLM Providers:[/bold]\n")
        providers_status = get_available_providers()
        for name, available in providers_status.items():
            status = "[green]✓ Ready[/green]" if available else "[red]✗ No API key[/red]"
            console.print(f"  {name:12} {status}")
        console.print("\n[dim]Set API keys via environment variables:[/dim]")
        console.print("  OPENAI_API_KEY, ANTHROPIC_API_KEY, GOOGLE_API_KEY, DEEPSEEK_API_KEY")
        return

    # Handle --check-status
    if check_status_project:
        status = ProjectMaterializer().check_status(check_status_project, output_dir)
        if as_json:
            click.echo(json.dumps(status.to_json_dict(), indent=2))
        else:
            colour = "green" if status.is_valid else "red"
            console.print(f"[{colour}]{status.message}[/{colour}]")
            for name in status.files:
                console.print(f"  {name}")
        sys.exit(0 if status.is_valid else 1)

    if not request:
        console.print("[red]Error: --request is required[/red]")
        sys.exit(1)

    request_text = read_request(request)
    if not request_text.strip():
        console.print("[red]Error: Request is empty[/red]")
        sys.exit(1)

    existing_json = None
    if edit_path:
        try:
            existing_json = Path(edit_path).read_text(encoding="utf-8")
        except OSError as e:
            console.print(f"[red]Error: cannot read {edit_path}: {e}[/red]")
            sys.exit(1)

    if classify_only:
        console.print("\n[bold]Classifying request...[/bold]")
        classification = classify_request(
            request_text, existing_json is not None, provider=provider, model=model
        )
        console.print(f"  [green]Intent:[/green] {classification.intent.value}")
        console.print(f"  [green]Confidence:[/green] {classification.confidence:.0%}")
        console.print(f"  [green]Evidence:[/green] {classification.evidence}")
        return

    if not as_json:
        console.print(Panel.fit(
            "[bold blue]Agent Foundry[/bold blue]\n"
            "[dim]Mastra agent project generator[/dim]",
            border_style="blue"
        ))
        if provider or model:
            console.print(f"\n[dim]Provider:[/dim] {provider or 'auto-detect'}")
            if model:
                console.print(f"[dim]Model:[/dim] {model}")
        if edit_path:
            console.print(f"[dim]Editing:[/dim] {edit_path}")

    controller = PipelineController(
        output_dir=output_dir,
        provider=provider,
        model=model,
        max_steps=max_steps,
        materialize=not no_scaffold,
        build_concurrency=concurrency,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        disable=as_json,
    ) as progress:
        task = progress.add_task("Generating...", total=None)
        if as_json:
            # Keep stdout for the envelope
            with redirect_stdout(sys.stderr):
                result = controller.run(request_text, existing_config_json=existing_json)
        else:
            result = controller.run(request_text, existing_config_json=existing_json)
        progress.update(task, completed=True)

    if save_config and result.final_config is not None:
        Path(save_config).write_text(dump_config(result.final_config), encoding="utf-8")
        if not as_json:
            console.print(f"[dim]Configuration saved to:[/dim] {save_config}")

    if as_json:
        click.echo(json.dumps(result.to_json_dict(), indent=2))
    else:
        print_result(result)
        if result.response_type != ResponseType.QUERY_RESPONSE:
            print_manifest(controller.run_manifest())

    if not result.succeeded:
        sys.exit(1)


if __name__ == "__main__":
    main()
