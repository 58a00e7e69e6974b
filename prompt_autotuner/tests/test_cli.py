"""Tests for the command-line entry point."""

import pytest

from prompt_autotuner.__main__ import build_parser, run


def test_parser_collects_repeated_options():
    args = build_parser().parse_args(
        [
            "Summarize this.",
            "--model",
            "gpt-4o",
            "--model",
            "gpt-4o-mini",
            "--benchmark",
            "MMLU",
            "--threshold",
            "65",
        ]
    )

    assert args.prompt == "Summarize this."
    assert args.models == ["gpt-4o", "gpt-4o-mini"]
    assert args.benchmarks == ["MMLU"]
    assert args.threshold == 65.0
    assert not args.semantic


def test_parser_rejects_unknown_benchmark():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["p", "--benchmark", "NotABenchmark"])


@pytest.mark.asyncio
async def test_missing_api_key_exits_with_error(monkeypatch, tmp_path, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    code = await run(build_parser().parse_args(["Summarize this."]))

    assert code == 1
    assert "OPENAI_API_KEY not found" in capsys.readouterr().out
