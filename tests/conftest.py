"""Shared test fixtures for mkdist."""

from __future__ import annotations

from pathlib import Path

import pytest

from mkdist import BuildOptions, Toolchain
from tests.helpers.fakes import FakeDeclarations, FakeSass, FakeTransformer


@pytest.fixture
def toolchain():
    """Toolchain made of fakes; no external executables needed."""
    return Toolchain(
        transformer=FakeTransformer(),
        declarations=FakeDeclarations(),
        stylesheets=FakeSass(),
    )


@pytest.fixture
def options():
    return BuildOptions()


PROJECT_FILES = {
    "README.md": "# fixture\n",
    "foo.js": "export default 'foo'\n",
    "index.ts": "export const answer = 42\n",
    "types.d.ts": "export type Foo = string\n",
    "components/blank.vue": "<template><div /></template>\n",
    "components/js.vue": "<template><div /></template>\n<script>export default {}</script>\n",
    "components/ts.vue": (
        '<template><div /></template>\n<script lang="ts">export default { n: 1 as const }</script>\n'
    ),
}


@pytest.fixture
def project(tmp_path) -> Path:
    """A small project root with a src/ tree."""
    src = tmp_path / "src"
    for rel, contents in PROJECT_FILES.items():
        file = src / rel
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_text(contents)
    return tmp_path
