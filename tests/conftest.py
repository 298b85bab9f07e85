"""Shared fixtures: stub renderer executables and scratch directories."""

import json
import stat
import sys
from pathlib import Path
from typing import List

import pytest

from wkpdf.contexts.rendering import RenderPipeline

STUB_TEMPLATE = """#!{python}
import json
import sys
import time
from pathlib import Path

behavior = json.loads(Path({behavior!r}).read_text())
with open({calls!r}, "a") as f:
    f.write(json.dumps(sys.argv[1:]) + "\\n")

if sys.argv[1:] == ["--extended-help"]:
    sys.stdout.write(behavior["help_text"])
    sys.exit(0)

if behavior["sleep"]:
    time.sleep(behavior["sleep"])

out = behavior["stdout"].encode("utf-8")
if behavior["echo_input"]:
    out += Path(sys.argv[-2]).read_bytes()
sys.stdout.buffer.write(out)
sys.stdout.flush()
sys.stderr.write(behavior["stderr"])
sys.exit(behavior["exit_code"])
"""


class StubRenderer:
    """
    Executable stand-in for wkhtmltopdf.

    Records the arguments of every invocation and answers with whatever
    configure() was last told (stdout, stderr, exit code).
    """

    def __init__(self, directory: Path):
        directory.mkdir(parents=True, exist_ok=True)
        self.path = directory / "fake-wkhtmltopdf"
        self.behavior_file = directory / "behavior.json"
        self.calls_file = directory / "calls.jsonl"

        self.path.write_text(
            STUB_TEMPLATE.format(
                python=sys.executable,
                behavior=str(self.behavior_file),
                calls=str(self.calls_file),
            )
        )
        self.path.chmod(self.path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        self.configure()

    def configure(
        self,
        stdout: str = "%PDF-1.4 stub",
        stderr: str = "",
        exit_code: int = 0,
        echo_input: bool = False,
        sleep: float = 0,
        help_text: str = "Name:\n  wkhtmltopdf 0.12.6 (stub)\n",
    ) -> "StubRenderer":
        self.behavior_file.write_text(
            json.dumps(
                {
                    "stdout": stdout,
                    "stderr": stderr,
                    "exit_code": exit_code,
                    "echo_input": echo_input,
                    "sleep": sleep,
                    "help_text": help_text,
                }
            )
        )
        return self

    @property
    def calls(self) -> List[List[str]]:
        if not self.calls_file.exists():
            return []
        return [json.loads(line) for line in self.calls_file.read_text().splitlines()]


@pytest.fixture
def stub_renderer(tmp_path) -> StubRenderer:
    return StubRenderer(tmp_path / "bin")


@pytest.fixture
def scratch_dir(tmp_path) -> Path:
    directory = tmp_path / "scratch"
    directory.mkdir()
    return directory


@pytest.fixture
def make_pipeline(stub_renderer, scratch_dir):
    """Factory for pipelines wired to the stub renderer."""

    def _make(**options) -> RenderPipeline:
        defaults = {
            "html": "<p>hi</p>",
            "title": "T",
            "path": scratch_dir,
            "binpath": stub_renderer.path,
        }
        return RenderPipeline.from_options({**defaults, **options})

    return _make
