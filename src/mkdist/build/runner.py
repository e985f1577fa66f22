"""Run driver — load every source file and write the dist tree."""

from __future__ import annotations

import logging
import shutil
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from mkdist.build.chain import LoaderChain, Toolchain, create_loader
from mkdist.build.walker import SourceFile, walk
from mkdist.build.writer import DistWriter
from mkdist.core.config import BuildOptions
from mkdist.core.errors import ConfigError
from mkdist.core.logging import BuildLogger
from mkdist.core.models import FileFailure, OutputDescriptor

logger = logging.getLogger(__name__)

# Per-file outcome: (result, seconds) or the exception the loader raised
_Outcome = tuple[list[OutputDescriptor] | None, float] | Exception


@dataclass
class BuildResult:
    """Summary of a mkdist run."""

    written_files: list[Path] = field(default_factory=list)
    failures: list[FileFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    total_time: float = 0.0
    run_log: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def make(
    options: BuildOptions | None = None,
    *,
    toolchain: Toolchain | None = None,
    build_logger: BuildLogger | None = None,
    **overrides,
) -> BuildResult:
    """Build ``root_dir/dist_dir`` from ``root_dir/src_dir``.

    Args:
        options: Build options; ``overrides`` are applied on top.
        toolchain: External tools for the loaders (tests pass fakes).
        build_logger: Structured run logger; a quiet one is created if omitted.

    Returns:
        BuildResult with the written paths in discovery order. Files whose
        loader raised are listed in ``failures``; everything else is still
        written.

    Raises:
        WalkError: the source directory does not exist.
        ConfigError: bad options, or a dist directory that would swallow the sources.
        OSError: the dist tree cannot be written.
    """
    start_time = time.time()
    options = options or BuildOptions()
    if overrides:
        options = options.replace(**overrides)

    src_dir = options.src_path.absolute()
    dist_dir = options.dist_path.absolute()
    if src_dir == dist_dir or src_dir.is_relative_to(dist_dir):
        raise ConfigError(f"Dist directory {dist_dir} must not contain the sources")

    patterns = list(options.pattern)
    if dist_dir.is_relative_to(src_dir):
        patterns.append(f"!{dist_dir.relative_to(src_dir).as_posix()}/**")

    files = walk(src_dir, patterns, options.alias)
    chain = create_loader(options, toolchain=toolchain)
    build_logger = build_logger or BuildLogger()
    build_logger.run_start(src_dir, dist_dir, len(files))

    if options.clean and dist_dir.exists():
        logger.debug("Removing %s", dist_dir)
        shutil.rmtree(dist_dir)

    outcomes = load_all(chain, files, options.concurrency)

    result = BuildResult()
    writer = DistWriter(dist_dir)
    for source, outcome in zip(files, outcomes):
        if isinstance(outcome, Exception):
            failure = FileFailure(path=source.relative, error=outcome)
            result.failures.append(failure)
            build_logger.file_failed(source.relative, failure.message)
            continue

        outputs, elapsed = outcome
        if outputs is None:
            if options.copy_unhandled:
                writer.write(OutputDescriptor(
                    path=source.path,
                    contents=None,
                    src_path=str(source.file),
                    source_file=source.file,
                ))
                build_logger.file_copied(source.relative)
            else:
                result.skipped.append(source.relative)
                build_logger.file_skipped(source.relative)
            continue

        writer.write_all(outputs)
        build_logger.file_loaded(
            source.relative,
            outputs=len(outputs),
            declarations=sum(1 for o in outputs if o.declaration),
            elapsed=elapsed,
        )

    result.written_files = writer.written
    result.total_time = time.time() - start_time
    build_logger.run_finish(len(result.written_files))
    result.run_log = build_logger.run_log.to_dict()
    return result


def load_all(chain: LoaderChain, files: list[SourceFile], concurrency: int = 1) -> list[_Outcome]:
    """Load every file through ``chain``, in parallel when ``concurrency > 1``.

    Outcomes are returned in the same order as ``files``; a loader error is
    captured as that file's outcome instead of aborting the others.
    """

    def _load_one(source: SourceFile) -> tuple[list[OutputDescriptor] | None, float]:
        started = time.time()
        return chain.load_file(source.to_input()), time.time() - started

    if concurrency <= 1 or len(files) <= 1:
        outcomes: list[_Outcome] = []
        for source in files:
            try:
                outcomes.append(_load_one(source))
            except Exception as exc:
                outcomes.append(exc)
        return outcomes

    results: list[_Outcome | None] = [None] * len(files)
    with ThreadPoolExecutor(max_workers=concurrency) as pool:
        futures = {pool.submit(_load_one, source): i for i, source in enumerate(files)}
        for future in as_completed(futures):
            idx = futures[future]
            try:
                results[idx] = future.result()
            except Exception as exc:
                results[idx] = exc

    return results  # type: ignore[return-value]
