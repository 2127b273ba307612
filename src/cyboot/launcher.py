"""Plan, spawn and supervise the package manager's install step.

A run moves through Planning -> Spawned -> Draining -> Terminated. Planning
failures raise before any process exists; once spawned, the child's stdout
and stderr are relayed chunk by chunk through the redactor until it exits.
Nothing is retried and no timeout is applied.
"""

import asyncio
import logging
import os
import signal
import subprocess
import sys
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import BinaryIO, TextIO

from cyboot.constants import BINARY_URL_VAR, CERT_PATH_VAR
from cyboot.environment import compose_environment, host_platform, public_binary_url
from cyboot.errors import ResolutionError
from cyboot.managers import (
    detect_manager,
    install_args,
    install_hint,
    resolve_entrypoint,
    resolve_runtime,
)
from cyboot.models import (
    CLEAN,
    InvocationRequest,
    LaunchPlan,
    LauncherConfig,
    PackageManager,
    ProcessOutcome,
)
from cyboot.redaction import install_log_redaction

log = logging.getLogger(__name__)

CHUNK_SIZE = 4096


def build_plan(
    request: InvocationRequest,
    config: LauncherConfig,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    system: str | None = None,
    machine: str | None = None,
) -> LaunchPlan:
    """Run detection, resolution and composition; raise instead of returning a partial plan."""
    source = os.environ if environ is None else environ
    if system is None or machine is None:
        host_system, host_machine = host_platform()
        system = system or host_system
        machine = machine or host_machine

    manager = detect_manager(request, source)

    runtime = resolve_runtime(source)
    if runtime is None:
        raise ResolutionError(
            f"Could not find a Node runtime to run {manager}.\n"
            "Install Node.js and make sure `node` is on PATH."
        )

    entrypoint = resolve_entrypoint(manager, source, runtime=runtime, cwd=cwd)
    if entrypoint is None:
        raise ResolutionError(
            f"Could not resolve a JS CLI entrypoint for {manager}.\n{install_hint(manager)}"
        )

    composed = compose_environment(source, config, request.injection_mode, system, machine)
    return LaunchPlan(
        manager=manager,
        runtime=str(runtime),
        entrypoint=str(entrypoint),
        args=install_args(manager, request.debug),
        env=composed.env,
        redaction=composed.redaction,
        debug=request.debug,
        injection_mode=request.injection_mode,
    )


def describe_plan(plan: LaunchPlan, stdout: TextIO) -> None:
    """Announce the run: a one-line banner, or debug log lines with --debug."""
    args = " ".join(plan.args)
    if not plan.debug:
        suffix = " (clean-install)" if plan.injection_mode == CLEAN else ""
        print(f"Running: {plan.manager} {args}{suffix}", file=stdout, flush=True)
        return

    log.debug("pm=%s", plan.manager)
    log.debug("node=%s", plan.runtime)
    log.debug("pm cli=%s", plan.entrypoint)
    log.debug("pm args=%s", args)
    log.debug("injection mode=%s", plan.injection_mode)
    if CERT_PATH_VAR in plan.env:
        log.debug("cert=%s", plan.env[CERT_PATH_VAR])
    if BINARY_URL_VAR in plan.env:
        log.debug("cypress url (redacted): %s", public_binary_url(plan.env[BINARY_URL_VAR]))


async def _relay(
    reader: asyncio.StreamReader,
    sink: BinaryIO | None,
    redact: Callable[[bytes], bytes],
) -> None:
    """Copy chunks from `reader` to `sink` as they arrive; discard when sink is None."""
    while True:
        chunk = await reader.read(CHUNK_SIZE)
        if not chunk:
            return
        if sink is None:
            continue
        try:
            sink.write(redact(chunk))
            sink.flush()
        except OSError as e:
            # Reader went away (e.g. `cyboot | head`); keep draining so the child never blocks.
            log.debug("output relay stopped: %s", e)
            sink = None


def _spawn_options() -> dict:
    if os.name == "nt":
        return {"creationflags": subprocess.CREATE_NO_WINDOW}
    return {}


def _signal_name(returncode: int) -> str:
    try:
        return signal.Signals(-returncode).name
    except ValueError:
        return f"signal {-returncode}"


async def supervise(plan: LaunchPlan, stdout: BinaryIO, stderr: BinaryIO) -> ProcessOutcome:
    """Spawn the plan and relay its redacted output until the child terminates."""
    redact = plan.redaction.redactor()
    try:
        process = await asyncio.create_subprocess_exec(
            *plan.argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=dict(plan.env),
            **_spawn_options(),
        )
    except OSError as e:
        return ProcessOutcome(spawn_error=str(e))
    log.debug("spawned %s (pid %s)", plan.manager, process.pid)

    try:
        await asyncio.gather(
            _relay(process.stdout, stdout if plan.debug else None, redact),
            _relay(process.stderr, stderr, redact),
        )
    finally:
        returncode = await process.wait()
    log.debug("%s exited with %s", plan.manager, returncode)

    if returncode is not None and returncode < 0 and os.name != "nt":
        return ProcessOutcome(signal_name=_signal_name(returncode))
    return ProcessOutcome(exit_code=returncode)


def run_plan(
    plan: LaunchPlan,
    stdout: BinaryIO | None = None,
    stderr: BinaryIO | None = None,
) -> ProcessOutcome:
    out = stdout if stdout is not None else sys.stdout.buffer
    err = stderr if stderr is not None else sys.stderr.buffer
    return asyncio.run(supervise(plan, out, err))


def report_outcome(
    outcome: ProcessOutcome,
    manager: PackageManager,
    stderr: TextIO,
    redact: Callable[[bytes], bytes] | None = None,
) -> int:
    """Write a message for abnormal outcomes and return this process's exit code."""
    if outcome.spawn_error is not None:
        message = f"Failed to start {manager}: {outcome.spawn_error}"
        if redact is not None:
            message = redact(message.encode()).decode(errors="replace")
        print(message, file=stderr)
    elif outcome.signal_name is not None:
        print(f"{manager} terminated by signal: {outcome.signal_name}", file=stderr)
    elif outcome.exit_code is None:
        print(f"{manager} exited without a status code", file=stderr)
    return outcome.exit_status()


def launch(
    request: InvocationRequest,
    config: LauncherConfig,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> int:
    """Plan and run one install; raises LauncherError when planning fails."""
    plan = build_plan(request, config, environ=environ, cwd=cwd)
    install_log_redaction(plan.redaction.secrets)
    describe_plan(plan, sys.stdout)
    outcome = run_plan(plan)
    return report_outcome(outcome, plan.manager, sys.stderr, plan.redaction.redactor())
