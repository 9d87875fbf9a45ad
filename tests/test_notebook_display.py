from types import SimpleNamespace

import pytest

from notebook_helpers import display as display_mod
from notebook_helpers.display import (
    format_comparison_markdown,
    format_response_markdown,
    run_experiment,
)
from notebook_helpers.experiments import ExperimentLog


def test_response_markdown_contains_text_and_metadata(make_response):
    markdown = format_response_markdown(make_response(), title="Baseline")

    assert markdown.startswith("### Baseline\n\nhello\n\n---")
    assert "| Provider | openai |" in markdown
    assert "| Model | gpt-4o-mini |" in markdown
    assert "| Total tokens | 1500 |" in markdown
    assert "| Cost | $0.000450 |" in markdown
    assert "| Latency | 123 ms |" in markdown


def test_unknown_cost_rendered_as_na(make_response):
    markdown = format_response_markdown(make_response(cost=None))

    assert "| Cost | n/a |" in markdown


def test_empty_response_placeholder(make_response):
    assert "_(empty response)_" in format_response_markdown(make_response(content=""))


def test_comparison_table_escapes_cells(make_response):
    markdown = format_comparison_markdown(
        [
            make_response(content="a | b\nc"),
            make_response(provider="anthropic", model_name="claude-3-5-haiku-20241022", cost=None),
        ],
        labels=["v1", "v2"],
    )

    lines = markdown.splitlines()
    assert len(lines) == 4
    assert lines[2].startswith("| v1 | openai | gpt-4o-mini | 1500 | $0.000450 |")
    assert "a \\| b<br>c" in lines[2]
    assert "| n/a |" in lines[3]


def test_comparison_label_count_must_match(make_response):
    with pytest.raises(ValueError):
        format_comparison_markdown([make_response()], labels=["a", "b"])


def test_display_response_renders_markdown(monkeypatch, make_response):
    shown = []
    monkeypatch.setattr(display_mod, "display", shown.append)

    display_mod.display_response(make_response())

    assert len(shown) == 1
    assert "hello" in shown[0].data


def test_run_experiment_records_and_displays(monkeypatch, make_response):
    shown = []
    monkeypatch.setattr(display_mod, "display", shown.append)
    calls = []

    def complete(prompt, system=None, **kwargs):
        calls.append((prompt, system, kwargs))
        return make_response()

    service = SimpleNamespace(complete=complete)
    log = ExperimentLog()

    response = run_experiment(
        service, "Say hi", system="Be terse.", log=log, label="v1", temperature=0.0
    )

    assert response.content == "hello"
    assert calls == [("Say hi", "Be terse.", {"temperature": 0.0})]
    assert len(log) == 1
    assert log.records[0].label == "v1"
    assert log.records[0].system == "Be terse."
    assert "### v1" in shown[0].data


def test_run_experiment_can_skip_display(monkeypatch, make_response):
    shown = []
    monkeypatch.setattr(display_mod, "display", shown.append)
    service = SimpleNamespace(complete=lambda prompt, system=None: make_response())

    run_experiment(service, "Say hi", show=False)

    assert shown == []
