"""Unit tests for RenderPipeline against a stub renderer."""

from pathlib import Path

import pytest
from loguru import logger

from wkpdf.contexts.rendering import (
    ConfigurationError,
    ProcessError,
    RenderError,
    RenderPipeline,
    RenderState,
    RenderTimeoutError,
    SpawnError,
    classify_result,
)
from wkpdf.contexts.rendering.process import ProcessResult
from wkpdf.utils.event_logging import get_recent_events


# classify_result


@pytest.mark.unit
@pytest.mark.parametrize("returncode", [0, 1])
def test_classify_success_codes(returncode):
    result = ProcessResult(stdout=b"%PDF-1.4", stderr="Done", returncode=returncode)
    assert classify_result(result) == b"%PDF-1.4"


@pytest.mark.unit
def test_classify_fatal_exit_code():
    result = ProcessResult(stdout=b"%PDF-1.4", stderr="", returncode=2)

    with pytest.raises(ProcessError) as exc_info:
        classify_result(result)

    assert exc_info.value.returncode == 2


@pytest.mark.unit
@pytest.mark.parametrize("stderr", ["Error: failed to load", "ERROR", "QNetwork error 5", "xError"])
@pytest.mark.parametrize("returncode", [0, 1, 2])
def test_classify_error_in_stderr_wins(stderr, returncode):
    result = ProcessResult(stdout=b"%PDF-1.4", stderr=stderr, returncode=returncode)

    with pytest.raises(RenderError) as exc_info:
        classify_result(result)

    assert exc_info.value.stderr == stderr


@pytest.mark.unit
def test_classify_empty_stdout():
    result = ProcessResult(stdout=b"", stderr="", returncode=0)

    with pytest.raises(RenderError, match="didn't return any data"):
        classify_result(result)


@pytest.mark.unit
def test_classify_stderr_without_error_word_is_ignored():
    result = ProcessResult(
        stdout=b"%PDF-1.4", stderr="Warning: Failed to load font", returncode=1
    )
    assert classify_result(result) == b"%PDF-1.4"


@pytest.mark.unit
def test_classify_signal_death_with_partial_output_is_success():
    result = ProcessResult(stdout=b"%PDF-partial", stderr="", returncode=-11)
    assert classify_result(result) == b"%PDF-partial"


@pytest.mark.unit
def test_classify_signal_death_without_output():
    result = ProcessResult(stdout=b"", stderr="", returncode=-9)

    with pytest.raises(RenderError, match="didn't return any data"):
        classify_result(result)


# RenderPipeline


@pytest.mark.unit
def test_render_default_scenario(make_pipeline, stub_renderer, scratch_dir):
    """Default config: exact argument vector, stdout returned, scratch file gone."""
    stub_renderer.configure(stdout="%PDF-1.4...")
    pipeline = make_pipeline()

    output = pipeline.render()

    assert output == b"%PDF-1.4..."
    scratch_path = pipeline.scratch_path
    assert scratch_path.parent == scratch_dir.resolve()
    assert stub_renderer.calls == [
        ["--orientation", "Portrait", "--page-size", "A4", "--title", "T", str(scratch_path), "-"]
    ]
    assert not scratch_path.exists()
    assert pipeline.state is RenderState.DONE


@pytest.mark.unit
def test_render_passes_all_options(make_pipeline, stub_renderer):
    pipeline = make_pipeline(
        copies=2, orientation="Landscape", page_size="Letter", toc=True, grayscale=True
    )
    pipeline.render()

    (args,) = stub_renderer.calls
    assert args[:9] == [
        "--copies",
        "2",
        "--orientation",
        "Landscape",
        "--page-size",
        "Letter",
        "--toc",
        "--grayscale",
        "--title",
    ]


@pytest.mark.unit
def test_render_exit_code_one_is_success(make_pipeline, stub_renderer):
    stub_renderer.configure(stdout="%PDF-1.4", stderr="Warning: slow page", exit_code=1)
    assert make_pipeline().render() == b"%PDF-1.4"


@pytest.mark.unit
def test_render_exit_code_two_is_process_error(make_pipeline, stub_renderer):
    stub_renderer.configure(stdout="%PDF-1.4", exit_code=2)
    pipeline = make_pipeline()

    with pytest.raises(ProcessError) as exc_info:
        pipeline.render()

    assert exc_info.value.returncode == 2
    assert pipeline.state is RenderState.FAILED
    assert not pipeline.scratch_path.exists()


@pytest.mark.unit
def test_render_error_in_stderr(make_pipeline, stub_renderer):
    stub_renderer.configure(stdout="%PDF-1.4", stderr="Exit with code 1 due to network Error")
    pipeline = make_pipeline()

    with pytest.raises(RenderError) as exc_info:
        pipeline.render()

    assert "network Error" in exc_info.value.stderr
    assert not pipeline.scratch_path.exists()


@pytest.mark.unit
def test_render_no_output(make_pipeline, stub_renderer):
    stub_renderer.configure(stdout="")

    with pytest.raises(RenderError, match="didn't return any data"):
        make_pipeline().render()


@pytest.mark.unit
def test_render_empty_html_fails_before_spawn(make_pipeline, stub_renderer):
    pipeline = make_pipeline(html="")

    with pytest.raises(ConfigurationError, match="HTML content not set"):
        pipeline.render()

    assert stub_renderer.calls == []
    assert pipeline.scratch_path is None
    assert pipeline.state is RenderState.FAILED


@pytest.mark.unit
def test_render_without_title_fails_before_spawn(make_pipeline, stub_renderer):
    pipeline = make_pipeline(title=None)

    with pytest.raises(ConfigurationError, match="Title is not set"):
        pipeline.render()

    assert stub_renderer.calls == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "setter, message",
    [("set_html", "HTML content not set"), ("set_title", "Title is not set")],
)
def test_setting_none_fails_before_spawn(make_pipeline, stub_renderer, setter, message):
    pipeline = getattr(make_pipeline(), setter)(None)

    with pytest.raises(ConfigurationError, match=message):
        pipeline.render()

    assert stub_renderer.calls == []


@pytest.mark.unit
def test_sequential_renders_reflect_latest_html(make_pipeline, stub_renderer):
    stub_renderer.configure(stdout="%PDF-", echo_input=True)
    pipeline = make_pipeline(html="<p>first render, longer content</p>")

    first = pipeline.render()
    first_path = pipeline.scratch_path
    second = pipeline.set_html("<p>two</p>").render()

    assert first == b"%PDF-<p>first render, longer content</p>"
    assert second == b"%PDF-<p>two</p>"
    assert pipeline.scratch_path == first_path
    assert not first_path.exists()


@pytest.mark.unit
def test_render_multibyte_html(make_pipeline, stub_renderer):
    stub_renderer.configure(stdout="%PDF-", echo_input=True)
    output = make_pipeline(html="<p>日本語</p>").render()

    assert output == "%PDF-<p>日本語</p>".encode("utf-8")


@pytest.mark.unit
def test_title_reaches_renderer_verbatim(make_pipeline, stub_renderer):
    title = 'He said "hi"; $(touch /tmp/pwned) `id`'
    make_pipeline(title=title).render()

    (args,) = stub_renderer.calls
    assert args[args.index("--title") + 1] == title


@pytest.mark.unit
def test_missing_renderer_raises_spawn_error(make_pipeline, tmp_path):
    pipeline = make_pipeline(binpath=tmp_path / "missing-wkhtmltopdf")

    with pytest.raises(SpawnError):
        pipeline.render()

    assert not pipeline.scratch_path.exists()


@pytest.mark.unit
def test_render_timeout_kills_renderer(make_pipeline, stub_renderer):
    stub_renderer.configure(sleep=30)
    pipeline = make_pipeline(timeout=0.5)

    with pytest.raises(RenderTimeoutError):
        pipeline.render()

    assert pipeline.state is RenderState.FAILED
    assert not pipeline.scratch_path.exists()


@pytest.mark.unit
def test_scratch_delete_failure_does_not_mask_success(make_pipeline, monkeypatch):
    def refuse(self, missing_ok=False):
        raise PermissionError("busy")

    messages = []
    handler_id = logger.add(messages.append, level="WARNING")
    monkeypatch.setattr(Path, "unlink", refuse)
    try:
        output = make_pipeline().render()
    finally:
        logger.remove(handler_id)

    assert output == b"%PDF-1.4 stub"
    assert any("Could not remove scratch file" in message for message in messages)


@pytest.mark.unit
@pytest.mark.parametrize("path", ["relative/scratch", "/definitely/not/a/real/dir"])
def test_invalid_scratch_directory_fails_at_construction(path, stub_renderer):
    with pytest.raises(ConfigurationError):
        RenderPipeline.from_options(
            {"html": "<p>x</p>", "title": "T", "path": path, "binpath": stub_renderer.path}
        )

    assert stub_renderer.calls == []


@pytest.mark.unit
def test_fluent_setters(make_pipeline):
    pipeline = (
        make_pipeline()
        .set_title("New")
        .set_orientation("landscape")
        .set_page_size("Letter")
        .set_copies(4)
        .set_toc()
        .set_grayscale()
    )

    config = pipeline.config
    assert config.title == "New"
    assert config.orientation.value == "Landscape"
    assert config.page_size == "Letter"
    assert config.copies == 4
    assert config.toc is True
    assert config.grayscale is True


@pytest.mark.unit
def test_set_copies_rejects_non_integer(make_pipeline):
    with pytest.raises(ConfigurationError, match="copies must be an integer"):
        make_pipeline().set_copies("many")


@pytest.mark.unit
def test_get_help_returns_stdout(make_pipeline, stub_renderer):
    stub_renderer.configure(help_text="Name:\n  wkhtmltopdf 0.12.6\n")

    assert make_pipeline().get_help() == "Name:\n  wkhtmltopdf 0.12.6\n"
    assert stub_renderer.calls == [["--extended-help"]]


@pytest.mark.unit
def test_render_events_are_logged(make_pipeline, stub_renderer, tmp_path):
    events_file = tmp_path / "events.jsonl"
    pipeline = make_pipeline()
    pipeline.events_file = events_file

    pipeline.render()
    stub_renderer.configure(exit_code=3)
    with pytest.raises(ProcessError):
        pipeline.render()

    events = get_recent_events(10, pipeline_id=pipeline.pipeline_id, events_file=events_file)
    assert [e["event_type"] for e in events] == [
        "render_started",
        "render_completed",
        "render_started",
        "render_failed",
    ]
    assert events[1]["bytes"] == len(b"%PDF-1.4 stub")
    assert events[3]["error"] == "ProcessError"


@pytest.mark.unit
def test_unwritable_event_log_does_not_fail_render(make_pipeline, stub_renderer, tmp_path):
    # A directory cannot be opened for appending
    pipeline = make_pipeline()
    pipeline.events_file = tmp_path

    messages = []
    handler_id = logger.add(messages.append, level="WARNING")
    try:
        assert pipeline.render() == b"%PDF-1.4 stub"

        stub_renderer.configure(exit_code=3)
        with pytest.raises(ProcessError):
            pipeline.render()
    finally:
        logger.remove(handler_id)

    assert any("Could not write render event 'render_completed'" in m for m in messages)
    assert any("Could not write render event 'render_failed'" in m for m in messages)
