"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest
from loguru import logger

_FAKE_OPTIMIZER = """#!/bin/sh
dir=$(cd "$(dirname "$0")" && pwd)
echo "$*" >> "$dir/calls.log"
for arg in "$@"; do
    if [ "$arg" = "--directory" ]; then
        echo "Directory mode"
        exit "$(cat "$dir/exit_code" 2>/dev/null || echo 0)"
    fi
done
code=$(cat "$dir/exit_code" 2>/dev/null || echo 0)
if [ "$code" != "0" ]; then
    echo "Failing with $code"
    exit "$code"
fi
extra=$(cat "$dir/extra_lines" 2>/dev/null || echo 0)
while IFS= read -r file; do
    [ -n "$file" ] || continue
    echo "$file" >> "$dir/files.log"
    printf 'optimized:%s' "$(basename "$file")" > "$file"
    echo "Optimized $file"
    i=0
    while [ "$i" -lt "$extra" ]; do
        echo "Progress $i for $file"
        i=$((i + 1))
    done
done
exit 0
"""


@dataclass
class FakeCli:
    """A stand-in ImageOptim-CLI install: records its calls and rewrites every file it receives."""

    path: Path

    def fail_with(self, code: int) -> None:
        (self.path / "exit_code").write_text(str(code))

    def print_per_file(self, lines: int) -> None:
        (self.path / "extra_lines").write_text(str(lines))

    @property
    def calls(self) -> list[str]:
        log = self.path / "calls.log"
        return log.read_text().splitlines() if log.exists() else []

    @property
    def files(self) -> list[str]:
        log = self.path / "files.log"
        return log.read_text().splitlines() if log.exists() else []


@pytest.fixture()
def fake_cli(tmp_path: Path) -> FakeCli:
    path = tmp_path / "imageoptim-cli" / "bin"
    path.mkdir(parents=True)
    script = path / "imageOptim"
    script.write_text(_FAKE_OPTIMIZER)
    script.chmod(0o755)
    return FakeCli(path=path)


@pytest.fixture()
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
