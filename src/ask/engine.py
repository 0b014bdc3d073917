"""Execution paths: the local claude binary or a remote provider API."""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import shlex
import shutil
import sys
from collections.abc import Awaitable, Callable, Mapping
from typing import TextIO

from .errors import ExitError, LaunchError, ResolutionError
from .llm.registry import ProviderRegistry
from .output import OutputCoordinator

logger = logging.getLogger(__name__)

CLAUDE_BINARY = "claude"
PROMPT_FLAG = "-p"
CHUNK_SIZE = 4096


def find_claude(binary: str = CLAUDE_BINARY) -> str:
    path = shutil.which(binary)
    if not path:
        raise ResolutionError(binary)
    return path


def build_claude_args(prompt: str, model: str, passthrough: list[str]) -> list[str]:
    """``-p <prompt> [--model <id>] [passthrough...]``"""
    args = [PROMPT_FLAG, prompt]
    if model:
        args += ["--model", model]
    args += passthrough
    return args


def format_command(binary: str, args: list[str]) -> str:
    """Shell-quoted command line equivalent to running ``binary args``."""
    return shlex.join([os.path.basename(binary), *args])


async def _pump(
    reader: asyncio.StreamReader,
    write: Callable[[str], Awaitable[None]],
) -> None:
    # Incremental decoding keeps multi-byte characters split across reads intact
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    while True:
        chunk = await reader.read(CHUNK_SIZE)
        if not chunk:
            break
        text = decoder.decode(chunk)
        if text:
            await write(text)
    tail = decoder.decode(b"", final=True)
    if tail:
        await write(tail)


async def run_claude(
    prompt: str,
    model: str,
    passthrough: list[str],
    output: OutputCoordinator,
    dry_run: bool = False,
    binary: str = CLAUDE_BINARY,
    stdout: TextIO | None = None,
) -> None:
    """Run the assistant binary in single-shot mode.

    Raises:
        ResolutionError: ``binary`` is not on PATH.
        LaunchError: the process could not be started.
        ExitError: the process exited non-zero.
    """
    path = find_claude(binary)
    args = build_claude_args(prompt, model, passthrough)

    if dry_run:
        print(format_command(binary, args), file=stdout or sys.stdout)
        return

    logger.debug("running %s with %d args", path, len(args))
    output.start()
    try:
        try:
            proc = await asyncio.create_subprocess_exec(
                path,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise LaunchError(binary, str(e)) from e

        try:
            await asyncio.gather(
                _pump(proc.stdout, output.emit),
                _pump(proc.stderr, output.err.write),
            )
            code = await proc.wait()
        except asyncio.CancelledError:
            if proc.returncode is None:
                proc.terminate()
                await proc.wait()
            raise
    finally:
        await output.stop_spinner()

    if code != 0:
        raise ExitError(binary, code)
    output.flush()


async def run_api(
    prompt: str,
    model: str,
    registry: ProviderRegistry,
    provider_name: str,
    output: OutputCoordinator,
    base_url: str = "",
    dry_run: bool = False,
    environ: Mapping[str, str] | None = None,
    stdout: TextIO | None = None,
) -> None:
    """Stream an answer from the named provider.

    Raises:
        ProviderNotFoundError: ``provider_name`` is not registered.
        ProviderError: the API failed.
    """
    provider = registry.lookup(provider_name)
    model_id = provider.resolve_model(model)

    if dry_run:
        print(f"{provider.name} {model_id}: {prompt}", file=stdout or sys.stdout)
        return

    environ = os.environ if environ is None else environ
    api_key = environ.get(provider.env_key, "") if provider.env_key else ""
    if provider.env_key and not api_key:
        logger.debug("%s is not set", provider.env_key)

    logger.debug("calling %s with model %s", provider.name, model_id)
    output.start()
    try:
        await provider.run(prompt, model, api_key, base_url, output.emit)
    finally:
        await output.stop_spinner()
    output.flush()
