"""End-to-end tests for make() over a real source tree (external tools faked)."""

from __future__ import annotations

import os
import stat

import pytest

from mkdist import ConfigError, TransformError, create_loader, make
from mkdist.build.runner import load_all
from mkdist.build.walker import walk


def _relative(result, project):
    dist = project / "dist"
    return [p.relative_to(dist).as_posix() for p in result.written_files]


def _snapshot(project):
    dist = project / "dist"
    return {
        p.relative_to(dist).as_posix(): p.read_text()
        for p in sorted(dist.rglob("*"))
        if p.is_file()
    }


class TestMake:
    def test_default_build(self, project, toolchain):
        result = make(root_dir=project, toolchain=toolchain)

        assert result.ok
        assert _relative(result, project) == [
            "README.md",
            "foo.mjs",
            "index.mjs",
            "types.d.ts",
            "components/blank.vue",
            "components/js.vue",
            "components/ts.vue.mjs",
            "components/ts.vue",
        ]
        dist = project / "dist"
        assert (dist / "README.md").read_text() == "# fixture\n"
        assert (dist / "types.d.ts").read_text() == "export type Foo = string\n"
        assert (dist / "index.mjs").read_text() == "/* ts */\nexport const answer = 42\n"
        assert (dist / "components/ts.vue").read_text().startswith("<template>")

    def test_declarations_everywhere(self, project, toolchain):
        result = make(root_dir=project, toolchain=toolchain, declaration=True)

        assert _relative(result, project) == [
            "README.md",
            "foo.d.ts",
            "foo.mjs",
            "index.d.ts",
            "index.mjs",
            "types.d.ts",
            "components/blank.vue",
            "components/js.vue",
            "components/ts.vue.d.ts",
            "components/ts.vue.mjs",
            "components/ts.vue",
        ]

    def test_declarations_restricted_to_ts(self, project, toolchain):
        result = make(root_dir=project, toolchain=toolchain, declaration="ts")
        written = _relative(result, project)

        assert "index.d.ts" in written
        assert "components/ts.vue.d.ts" in written
        assert "foo.d.ts" not in written

    def test_single_ts_file(self, tmp_path, toolchain):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "index.ts").write_text("export default 1")

        plain = make(root_dir=tmp_path, toolchain=toolchain)
        assert _relative(plain, tmp_path) == ["index.mjs"]

        with_dts = make(root_dir=tmp_path, toolchain=toolchain, declaration=True)
        assert _relative(with_dts, tmp_path) == ["index.d.ts", "index.mjs"]

    def test_module_type_letters(self, tmp_path, toolchain):
        src = tmp_path / "src"
        src.mkdir()
        (src / "a.mts").write_text("export {}")
        (src / "b.cts").write_text("export {}")

        result = make(root_dir=tmp_path, toolchain=toolchain, declaration=True, ext="mjs")

        assert _relative(result, tmp_path) == ["a.d.mts", "a.mjs", "b.d.cts", "b.mjs"]

    def test_cjs_format(self, project, toolchain):
        make(root_dir=project, toolchain=toolchain, format="cjs")
        dist = project / "dist"
        foo = (dist / "foo.js").read_text()
        assert "__toCommonJS" not in foo
        assert foo.endswith("module.exports = stdin_default;\n")
        assert (dist / "index.js").exists()

    def test_idempotent(self, project, toolchain):
        first = make(root_dir=project, toolchain=toolchain, declaration=True)
        snapshot = _snapshot(project)
        second = make(root_dir=project, toolchain=toolchain, declaration=True)

        assert _relative(first, project) == _relative(second, project)
        assert _snapshot(project) == snapshot

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_dist_files_readable_like_copies(self, project, toolchain):
        """Compiled artifacts get the same umask-derived mode as raw copies."""
        make(root_dir=project, toolchain=toolchain, declaration=True)

        mask = os.umask(0)
        os.umask(mask)
        dist = project / "dist"
        modes = {
            p.relative_to(dist).as_posix(): stat.S_IMODE(p.stat().st_mode)
            for p in dist.rglob("*")
            if p.is_file()
        }

        assert modes["index.mjs"] == 0o666 & ~mask
        assert modes["index.d.ts"] == modes["README.md"]
        assert set(modes.values()) == {0o666 & ~mask}

    def test_concurrent_matches_sequential(self, project, toolchain):
        sequential = make(root_dir=project, toolchain=toolchain, declaration=True)
        expected = _snapshot(project)
        concurrent = make(root_dir=project, toolchain=toolchain, declaration=True, concurrency=4)

        assert _relative(concurrent, project) == _relative(sequential, project)
        assert _snapshot(project) == expected


class TestFailures:
    def test_failing_file_does_not_stop_others(self, project, toolchain):
        (project / "src" / "bad.ts").write_text("SYNTAX ERROR")

        result = make(root_dir=project, toolchain=toolchain)

        assert not result.ok
        assert [f.path for f in result.failures] == ["bad.ts"]
        assert isinstance(result.failures[0].error, TransformError)
        assert result.failures[0].message.startswith("TransformError:")
        assert "bad.mjs" not in _relative(result, project)
        assert "index.mjs" in _relative(result, project)
        assert result.run_log["files"]["bad.ts"]["status"] == "failed"

    def test_failure_under_concurrency(self, project, toolchain):
        (project / "src" / "bad.ts").write_text("SYNTAX ERROR")
        result = make(root_dir=project, toolchain=toolchain, concurrency=3)
        assert [f.path for f in result.failures] == ["bad.ts"]
        assert "index.mjs" in _relative(result, project)

    def test_missing_typechecker_is_not_a_failure(self, project, toolchain):
        toolchain.declarations.available = False
        result = make(root_dir=project, toolchain=toolchain, declaration=True)

        assert result.ok
        assert not any(p.endswith(".d.ts") and p != "types.d.ts" for p in _relative(result, project))

    def test_src_inside_dist_rejected(self, project, toolchain):
        with pytest.raises(ConfigError):
            make(root_dir=project, toolchain=toolchain, src_dir="dist/src", dist_dir="dist")


class TestOptions:
    def test_unhandled_files_skipped(self, project, toolchain):
        result = make(root_dir=project, toolchain=toolchain, copy_unhandled=False)

        assert result.skipped == ["README.md", "types.d.ts"]
        assert not (project / "dist" / "README.md").exists()

    def test_pattern(self, project, toolchain):
        result = make(root_dir=project, toolchain=toolchain, pattern=["**", "!**/*.vue"])
        assert _relative(result, project) == ["README.md", "foo.mjs", "index.mjs", "types.d.ts"]

    def test_alias(self, project, toolchain):
        result = make(root_dir=project, toolchain=toolchain, alias={"components": "ui"})
        written = _relative(result, project)
        assert "ui/ts.vue.mjs" in written
        assert "ui/blank.vue" in written
        assert not any(p.startswith("components/") for p in written)

    def test_clean_removes_stale_files(self, project, toolchain):
        stale = project / "dist" / "stale.js"
        stale.parent.mkdir()
        stale.write_text("old")

        make(root_dir=project, toolchain=toolchain)
        assert not stale.exists()

    def test_no_clean_keeps_stale_files(self, project, toolchain):
        stale = project / "dist" / "stale.js"
        stale.parent.mkdir()
        stale.write_text("old")

        make(root_dir=project, toolchain=toolchain, clean=False)
        assert stale.exists()

    def test_dist_inside_src_is_not_walked(self, tmp_path, toolchain):
        (tmp_path / "index.ts").write_text("export {}")

        make(root_dir=tmp_path, toolchain=toolchain, src_dir=".", dist_dir="dist")
        second = make(root_dir=tmp_path, toolchain=toolchain, src_dir=".", dist_dir="dist", clean=False)

        assert _relative(second, tmp_path) == ["index.mjs"]


class TestLoadAll:
    def test_every_file_gets_an_outcome_in_order(self, project, toolchain):
        (project / "src" / "bad.ts").write_text("SYNTAX ERROR")
        files = walk(project / "src")
        chain = create_loader(toolchain=toolchain)

        outcomes = load_all(chain, files, concurrency=4)

        assert len(outcomes) == len(files)
        by_path = dict(zip([f.relative for f in files], outcomes))
        assert isinstance(by_path["bad.ts"], TransformError)
        assert by_path["README.md"][0] is None
        assert by_path["index.ts"][0][-1].path == "index.ts"
        assert not any(o is None for o in outcomes)
