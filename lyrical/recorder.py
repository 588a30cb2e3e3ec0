"""Microphone capture via SoX `rec`."""
import asyncio
import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

from .config import RECORDER_BIN, RECORDING_DURATION, RECORDING_RATE

logger = logging.getLogger(__name__)


def _record_cmd(output_path: Path, duration: float, binary: str) -> list[str]:
    return [
        binary, "-q",
        "-c", "1",
        "-r", str(RECORDING_RATE),
        str(output_path),
        "trim", "0", f"{duration:g}",
    ]


async def record_sample(
    duration: float = RECORDING_DURATION,
    output_path: Optional[Path] = None,
    binary: str = RECORDER_BIN,
) -> tuple[Optional[Path], str]:
    """
    Record `duration` seconds from the default input device to a WAV file.
    Returns (path, error_message).
    """
    if output_path is None:
        output_path = Path(tempfile.mktemp(suffix=".wav", prefix="lyrical-"))

    cmd = _record_cmd(output_path, duration, binary)
    try:
        proc = subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE)
    except OSError as e:
        return None, f"Failed to start {binary}: {e}"

    loop = asyncio.get_running_loop()
    try:
        # Grace period on top of the recording length before giving up
        returncode = await loop.run_in_executor(None, lambda: proc.wait(timeout=duration + 10))
    except subprocess.TimeoutExpired:
        proc.kill()
        output_path.unlink(missing_ok=True)
        return None, f"{binary} did not finish within {duration + 10:.0f}s"
    except asyncio.CancelledError:
        proc.terminate()
        try:
            proc.wait(timeout=2)
        except subprocess.TimeoutExpired:
            proc.kill()
        output_path.unlink(missing_ok=True)
        raise

    stderr = proc.stderr.read().decode(errors="replace").strip() if proc.stderr else ""
    if returncode != 0:
        output_path.unlink(missing_ok=True)
        return None, f"{binary} exited with code {returncode}: {stderr[:200]}"
    if not output_path.exists() or output_path.stat().st_size < 100:
        output_path.unlink(missing_ok=True)
        return None, "Recording is empty"

    logger.info("Recorded %.1fs sample to %s", duration, output_path)
    return output_path, ""
