"""Lifecycle of the external presentation server used in proxy mode.

The supervisor owns at most one child process. Every upload restarts it so
the server picks up the new document; restarts are serialized so two
children never race for the same port.
"""

from __future__ import annotations

import asyncio
import logging
import shlex
import subprocess
from enum import Enum
from pathlib import Path
from typing import List, Optional, Set

logger = logging.getLogger(__name__)


class ProcessState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class RendererSupervisor:
    """Start, restart and stop one presentation-server subprocess.

    Args:
        command: Executable (optionally with leading arguments, shell-quoted)
        document_path: Markdown file handed to the server
        host: Interface the server binds to
        port: Port the server binds to
        settle_seconds: Pause after a child exits so the OS releases its port
        stop_timeout: Seconds to wait after SIGTERM before killing the child
    """

    def __init__(
        self,
        command: str,
        document_path: Path,
        host: str = "0.0.0.0",
        port: int = 1948,
        settle_seconds: float = 1.0,
        stop_timeout: float = 5.0,
    ):
        self.command = command
        self.document_path = document_path
        self.host = host
        self.port = port
        self.settle_seconds = settle_seconds
        self.stop_timeout = stop_timeout

        self._lock = asyncio.Lock()
        self._state = ProcessState.STOPPED
        self._process: Optional[asyncio.subprocess.Process] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> ProcessState:
        return self._state

    @property
    def pid(self) -> Optional[int]:
        return self._process.pid if self._process else None

    def argv(self) -> List[str]:
        return [
            *shlex.split(self.command),
            str(self.document_path),
            "--host",
            self.host,
            "--port",
            str(self.port),
        ]

    async def start(self) -> None:
        async with self._lock:
            if self._state is ProcessState.RUNNING:
                return
            await self._spawn()

    async def restart(self) -> None:
        async with self._lock:
            if await self._terminate():
                await asyncio.sleep(self.settle_seconds)
            await self._spawn()

    async def stop(self) -> None:
        async with self._lock:
            await self._terminate()

    def schedule_restart(self) -> asyncio.Task:
        """Restart in the background; the caller does not wait for the new child."""
        task = asyncio.get_running_loop().create_task(self.restart())
        self._tasks.add(task)
        task.add_done_callback(self._background_done)
        return task

    def _background_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Renderer task {task.get_name()} failed: {exc!r}")

    async def _spawn(self) -> None:
        argv = self.argv()
        logger.info(f"Starting renderer: {shlex.join(argv)}")
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except OSError as e:
            logger.error(f"Failed to start renderer {argv[0]!r}: {e}")
            self._process = None
            self._state = ProcessState.STOPPED
            return

        self._process = process
        self._state = ProcessState.RUNNING
        watcher = asyncio.get_running_loop().create_task(self._watch(process))
        self._tasks.add(watcher)
        watcher.add_done_callback(self._background_done)
        logger.info(f"Renderer running (pid {process.pid}) on port {self.port}")

    async def _watch(self, process: asyncio.subprocess.Process) -> None:
        try:
            if process.stdout is not None:
                await self._forward_output(process)
        finally:
            code = await process.wait()
            if self._process is process:
                # exited without being asked to
                logger.warning(f"Renderer (pid {process.pid}) exited with status {code}")
                self._process = None
                self._state = ProcessState.STOPPED
            else:
                logger.info(f"Renderer (pid {process.pid}) stopped with status {code}")

    async def _forward_output(self, process: asyncio.subprocess.Process) -> None:
        while True:
            try:
                raw_line = await process.stdout.readline()
            except ValueError:
                # line longer than the stream limit; the reader already discarded it
                logger.info(f"[renderer {process.pid}] <overlong output line dropped>")
                continue
            if not raw_line:
                return
            logger.info(f"[renderer {process.pid}] {raw_line.decode(errors='replace').rstrip()}")

    async def _terminate(self) -> bool:
        """Stop the current child and wait for it to exit.

        Returns True if there was a child to stop.
        """
        process = self._process
        if process is None:
            return False
        self._process = None
        self._state = ProcessState.STOPPED

        if process.returncode is None:
            try:
                process.terminate()
            except ProcessLookupError:
                pass
            try:
                await asyncio.wait_for(process.wait(), timeout=self.stop_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Renderer (pid {process.pid}) ignored SIGTERM, killing it")
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()
        return True
