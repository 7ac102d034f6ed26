"""Copy lines from several pipes to one output device.

Each source gets its own thread. Whole lines are written under a shared
lock so lines from different pipes never interleave mid-line.
"""

import subprocess
import threading
from collections.abc import Sequence

from .lineread.reader import LineReader
from .lineread.sources import ByteSource, StreamSource
from .telemetry import get_logger, metrics
from .vt.devices import OutputDevice, standard_device
from .vt.output import output_string
from .vt.types import OutputFlags

logger = get_logger(__name__)


class LinePump:
    """Pumps every added source to ``device`` until end of input.

    Example:
        pump = LinePump(device, OutputFlags.STDOUT)
        pump.add(StreamSource(proc.stdout))
        pump.add(StreamSource(proc.stderr))
        pump.join()
    """

    def __init__(self, device: OutputDevice, flags: OutputFlags = OutputFlags.STDOUT):
        self.device = device
        self.flags = flags
        self.lock = threading.Lock()
        self.lines_written = 0
        self._threads: list[threading.Thread] = []

    def add(self, source: ByteSource, name: str | None = None) -> threading.Thread:
        """Start a thread pumping ``source``."""
        thread = threading.Thread(
            target=self._pump,
            args=(source,),
            name=name or f"line-pump-{len(self._threads)}",
            daemon=True,
        )
        self._threads.append(thread)
        thread.start()
        return thread

    def _pump(self, source: ByteSource) -> None:
        with LineReader(source) as reader:
            for line in reader:
                with self.lock:
                    output_string(self.device, self.flags, line + "\n")
                    self.lines_written += 1
            if reader.error is not None:
                logger.warning(f"{threading.current_thread().name} stopped: {reader.error.name}")
        source.close()
        metrics.inc("pump.sources_drained")

    def join(self, timeout: float | None = None) -> None:
        """Wait for every pumping thread to finish."""
        for thread in self._threads:
            thread.join(timeout)


def pump_process(
    args: Sequence[str], device: OutputDevice | None = None, flags: OutputFlags = OutputFlags.STDOUT
) -> int:
    """Run a child process, pumping its stdout and stderr line by line.

    Returns:
        the child's exit code
    """
    device = device or standard_device(flags)
    logger.debug(f"Running {list(args)}")
    # unbuffered so readiness polling on the descriptor sees every byte
    proc = subprocess.Popen(
        args, bufsize=0, stdin=subprocess.DEVNULL, stdout=subprocess.PIPE, stderr=subprocess.PIPE
    )
    pump = LinePump(device, flags)
    pump.add(StreamSource(proc.stdout), name="line-pump-stdout")
    pump.add(StreamSource(proc.stderr), name="line-pump-stderr")
    pump.join()
    return proc.wait()
