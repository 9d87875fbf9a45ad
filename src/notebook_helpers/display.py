"""
Markdown rendering of LLM responses for Jupyter notebooks.
"""

from typing import Optional, Sequence

from IPython.display import Markdown, display

from common.logging import get_logger
from schemas.llm_types import LLMResponse

logger = get_logger(__name__)


def format_cost(cost: Optional[float]) -> str:
    if cost is None:
        return "n/a"
    return f"${cost:.6f}"


def _cell(text: str) -> str:
    return (text or "").replace("|", "\\|").replace("\n", "<br>")


def format_metadata_table(response: LLMResponse) -> str:
    rows = [
        ("Provider", response.provider),
        ("Model", response.model_name),
        ("Prompt tokens", str(response.prompt_tokens)),
        ("Completion tokens", str(response.completion_tokens)),
        ("Total tokens", str(response.total_tokens)),
        ("Cost", format_cost(response.cost)),
        ("Latency", f"{response.latency_ms:.0f} ms"),
    ]
    lines = ["| Field | Value |", "|---|---|"]
    lines.extend(f"| {name} | {_cell(value)} |" for name, value in rows)
    return "\n".join(lines)


def format_response_markdown(response: LLMResponse, title: Optional[str] = None) -> str:
    """
    Render a response as markdown: optional heading, the text, then a metadata table.

    Args:
        response (LLMResponse): Response to render.
        title (str, optional): Heading shown above the response.

    Returns:
        str: Markdown document.
    """
    parts = []
    if title:
        parts.append(f"### {title}")
    parts.append(response.content or "_(empty response)_")
    parts.append("---")
    parts.append(format_metadata_table(response))
    return "\n\n".join(parts)


def format_comparison_markdown(
    responses: Sequence[LLMResponse], labels: Optional[Sequence[str]] = None
) -> str:
    """
    Render several responses as one markdown table, one row per response.

    Raises:
        ValueError: If labels are given and their count differs from responses.
    """
    if labels is not None and len(labels) != len(responses):
        raise ValueError("labels must match responses one to one")

    lines = [
        "| # | Provider | Model | Tokens | Cost | Latency | Response |",
        "|---|---|---|---|---|---|---|",
    ]
    for i, response in enumerate(responses):
        label = labels[i] if labels is not None else str(i + 1)
        lines.append(
            f"| {_cell(label)} | {response.provider} | {response.model_name} "
            f"| {response.total_tokens} | {format_cost(response.cost)} "
            f"| {response.latency_ms:.0f} ms | {_cell(response.content)} |"
        )
    return "\n".join(lines)


def display_response(response: LLMResponse, title: Optional[str] = None) -> None:
    display(Markdown(format_response_markdown(response, title)))


def display_comparison(
    responses: Sequence[LLMResponse], labels: Optional[Sequence[str]] = None
) -> None:
    display(Markdown(format_comparison_markdown(responses, labels)))


def run_experiment(
    service,
    prompt: str,
    system: Optional[str] = None,
    log=None,
    label: Optional[str] = None,
    show: bool = True,
    **kwargs,
) -> LLMResponse:
    """
    Run one prompt through an LLMService, record it and optionally display it.

    Args:
        service (LLMService): Configured service.
        prompt (str): User prompt.
        system (str, optional): System prompt.
        log (ExperimentLog, optional): Log receiving the record.
        label (str, optional): Label stored with the record and used as heading.
        show (bool): Render the response in the notebook.
        **kwargs: Runtime overrides passed to the provider.

    Returns:
        LLMResponse: The response.
    """
    response = service.complete(prompt, system=system, **kwargs)

    if log is not None:
        log.record(prompt, response, system=system, label=label)
    if show:
        display_response(response, title=label)

    logger.debug("Experiment executed", extra={"label": label, "provider": response.provider})
    return response
