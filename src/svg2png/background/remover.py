"""
Background Remover
==================

Makes a flat background transparent by flood-filling from the top-left
pixel with ImageMagick.

Process:
    1. Write the input PNG into a private temporary directory
    2. Run: <binary> in.png -alpha set -fuzz <N>% -fill none
            -draw "color 0,0 floodfill" out.png
    3. Read out.png back

Every pixel connected to (0, 0) whose colour is within the fuzz tolerance
of the top-left pixel becomes fully transparent.
"""

import logging
import subprocess
import tempfile
from pathlib import Path
from typing import List

from svg2png.errors import BackgroundRemovalError, EmptyInputError


logger = logging.getLogger(__name__)


DEFAULT_BINARY = "convert"
DEFAULT_FUZZ_PERCENT = 10.0
DEFAULT_TIMEOUT_SECONDS = 30.0

_INPUT_NAME = "input.png"
_OUTPUT_NAME = "output.png"


class BackgroundRemover:
    """
    ImageMagick-backed background removal.

    Attributes:
        binary: ImageMagick executable ("convert" or "magick")
        fuzz_percent: Colour tolerance for the flood fill
        timeout_seconds: Maximum runtime of one invocation
    """

    def __init__(
        self,
        binary: str = DEFAULT_BINARY,
        fuzz_percent: float = DEFAULT_FUZZ_PERCENT,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if not 0 <= fuzz_percent <= 100:
            raise ValueError("fuzz_percent must be in [0, 100]")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self.binary = binary
        self.fuzz_percent = fuzz_percent
        self.timeout_seconds = timeout_seconds

    def build_command(self, input_path: Path, output_path: Path) -> List[str]:
        """Build the ImageMagick argument list."""
        return [
            self.binary,
            str(input_path),
            "-alpha", "set",
            "-fuzz", f"{self.fuzz_percent:g}%",
            "-fill", "none",
            "-draw", "color 0,0 floodfill",
            str(output_path),
        ]

    def remove(self, png: bytes) -> bytes:
        """
        Remove the background of a PNG image.

        Args:
            png: Input PNG bytes

        Returns:
            PNG bytes with the background region transparent

        Raises:
            EmptyInputError: If the input is empty
            BackgroundRemovalError: If the tool is missing, times out,
                exits non-zero or produces no output
        """
        if not png:
            raise EmptyInputError()

        with tempfile.TemporaryDirectory(prefix="svg2png-") as tmp:
            input_path = Path(tmp) / _INPUT_NAME
            output_path = Path(tmp) / _OUTPUT_NAME
            input_path.write_bytes(png)

            cmd = self.build_command(input_path, output_path)
            logger.debug(f"Running background removal: {' '.join(cmd)}")

            try:
                completed = subprocess.run(
                    cmd,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    timeout=self.timeout_seconds,
                    check=False,
                )
            except FileNotFoundError as e:
                raise BackgroundRemovalError(
                    f"ImageMagick binary {self.binary!r} not found"
                ) from e
            except subprocess.TimeoutExpired as e:
                raise BackgroundRemovalError(
                    f"{self.binary} timed out after {self.timeout_seconds}s"
                ) from e

            if completed.returncode != 0:
                stderr = completed.stderr.decode("utf-8", errors="replace").strip()
                raise BackgroundRemovalError(
                    f"{self.binary} exited with status {completed.returncode}: {stderr}"
                )

            if not output_path.exists():
                raise BackgroundRemovalError(f"{self.binary} produced no output file")

            result = output_path.read_bytes()

        logger.debug(f"Background removed: {len(png)} -> {len(result)} bytes")
        return result
