"""
Raster Container Writer
=======================

Order-enforcing PNG writer for RGBA 8-bit images.

Stream Layout:
    signature -> IHDR -> ancillary chunks (pHYs) -> IDAT -> IEND

Design Rules:
    - The header is written before any other chunk
    - Ancillary chunks are only accepted between header and image data;
      decoders ignore or reject a pHYs chunk that follows IDAT
    - Every failure is raised as EncodingFailure
    - A writer produces exactly one image
"""

import enum
import logging
import struct
import zlib
from typing import Iterator, Optional, Tuple

import numpy as np

from svg2png.encoding.density import PHYS_CHUNK_TYPE, DensityDescriptor
from svg2png.errors import EncodingFailure
from svg2png.models.geometry import CanvasSize


logger = logging.getLogger(__name__)


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

BIT_DEPTH = 8
COLOR_TYPE_RGBA = 6
CHANNELS = 4

FILTER_NONE = 0


class _WriterState(enum.Enum):
    NEW = "new"
    HEADER_WRITTEN = "header_written"
    IMAGE_WRITTEN = "image_written"
    FINISHED = "finished"


def _chunk(chunk_type: bytes, data: bytes) -> bytes:
    """Frame a chunk: length, type, data, CRC over type + data."""
    crc = zlib.crc32(data, zlib.crc32(chunk_type))
    return struct.pack(">I", len(data)) + chunk_type + data + struct.pack(">I", crc)


class PngWriter:
    """
    Incremental PNG writer with strict chunk ordering.

    Example:
        writer = PngWriter()
        writer.write_header(CanvasSize(20, 20))
        writer.write_chunk(b"pHYs", density.to_bytes())
        writer.write_image_data(pixels)
        png = writer.finish()
    """

    def __init__(self, compression_level: int = 6) -> None:
        """
        Initialize writer.

        Args:
            compression_level: zlib level for IDAT (0-9)
        """
        if not 0 <= compression_level <= 9:
            raise ValueError("compression_level must be in [0, 9]")

        self.compression_level = compression_level

        self._parts: list = []
        self._canvas: Optional[CanvasSize] = None
        self._state = _WriterState.NEW

    @property
    def state(self) -> str:
        return self._state.value

    def write_header(self, canvas: CanvasSize) -> None:
        """
        Write the PNG signature and IHDR chunk.

        Raises:
            EncodingFailure: If called twice or with an empty canvas
        """
        if self._state is not _WriterState.NEW:
            raise EncodingFailure(
                f"Failed to write PNG header: writer is {self._state.value}"
            )
        if canvas.is_empty:
            raise EncodingFailure(f"Failed to write PNG header: empty canvas {canvas}")

        try:
            ihdr = struct.pack(
                ">IIBBBBB",
                canvas.width,
                canvas.height,
                BIT_DEPTH,
                COLOR_TYPE_RGBA,
                0,  # compression method
                0,  # filter method
                0,  # no interlace
            )
        except struct.error as e:
            raise EncodingFailure(f"Failed to write PNG header: {e}") from e

        logger.debug(f"Writing PNG header: {canvas}")
        self._parts.append(PNG_SIGNATURE)
        self._parts.append(_chunk(b"IHDR", ihdr))
        self._canvas = canvas
        self._state = _WriterState.HEADER_WRITTEN

    def write_chunk(self, chunk_type: bytes, data: bytes) -> None:
        """
        Append an ancillary chunk between the header and image data.

        Raises:
            EncodingFailure: If the header is missing or image data was written
        """
        name = chunk_type.decode("ascii", errors="replace")
        if self._state is not _WriterState.HEADER_WRITTEN:
            raise EncodingFailure(
                f"Failed to write {name} chunk: writer is {self._state.value}"
            )
        if len(chunk_type) != 4 or not chunk_type.isalpha():
            raise EncodingFailure(f"Failed to write chunk: invalid type {chunk_type!r}")
        if chunk_type in (b"IHDR", b"IDAT", b"IEND"):
            raise EncodingFailure(f"Failed to write chunk: {name} is not ancillary")

        logger.debug(f"Writing {name} chunk ({len(data)} bytes)")
        self._parts.append(_chunk(chunk_type, data))

    def write_image_data(self, pixels: np.ndarray) -> None:
        """
        Compress and append RGBA pixels as a single IDAT chunk.

        Args:
            pixels: Array of shape (height, width, 4), dtype uint8

        Raises:
            EncodingFailure: On wrong state, shape, dtype or compression error
        """
        if self._state is not _WriterState.HEADER_WRITTEN or self._canvas is None:
            raise EncodingFailure(
                f"Failed to write PNG data: writer is {self._state.value}"
            )

        expected = (self._canvas.height, self._canvas.width, CHANNELS)
        if pixels.shape != expected:
            raise EncodingFailure(
                f"Failed to write PNG data: pixel shape {pixels.shape} != {expected}"
            )
        if pixels.dtype != np.uint8:
            raise EncodingFailure(f"Failed to write PNG data: dtype {pixels.dtype}")

        height, width, _ = expected
        try:
            # Each scanline is prefixed with its filter type byte
            raw = np.empty((height, width * CHANNELS + 1), dtype=np.uint8)
            raw[:, 0] = FILTER_NONE
            raw[:, 1:] = pixels.reshape(height, width * CHANNELS)
            compressed = zlib.compress(raw.tobytes(), self.compression_level)
        except (zlib.error, MemoryError) as e:
            raise EncodingFailure(f"Failed to write PNG data: {e}") from e

        logger.debug(
            f"Writing PNG image data: {len(compressed)} bytes compressed "
            f"from {raw.nbytes}"
        )
        self._parts.append(_chunk(b"IDAT", compressed))
        self._state = _WriterState.IMAGE_WRITTEN

    def finish(self) -> bytes:
        """
        Append IEND and return the complete PNG stream.

        Raises:
            EncodingFailure: If image data is missing or already finished
        """
        if self._state is not _WriterState.IMAGE_WRITTEN:
            raise EncodingFailure(
                f"Failed to finish PNG: writer is {self._state.value}"
            )

        self._parts.append(_chunk(b"IEND", b""))
        self._state = _WriterState.FINISHED

        data = b"".join(self._parts)
        self._parts = []
        return data


def encode_png(
    pixels: np.ndarray,
    canvas: CanvasSize,
    density: DensityDescriptor,
    compression_level: int = 6,
) -> bytes:
    """
    Encode RGBA pixels as a PNG carrying a pHYs chunk.

    Args:
        pixels: Array of shape (height, width, 4), dtype uint8
        canvas: Canvas size the pixels were rendered at
        density: Physical density descriptor
        compression_level: zlib level for IDAT

    Returns:
        Complete PNG byte stream

    Raises:
        EncodingFailure: If any part of the stream cannot be written
    """
    writer = PngWriter(compression_level=compression_level)
    writer.write_header(canvas)
    writer.write_chunk(PHYS_CHUNK_TYPE, density.to_bytes())
    writer.write_image_data(pixels)
    png = writer.finish()
    logger.debug(f"PNG encoding complete: {len(png)} bytes")
    return png


# =============================================================================
# Reading
# =============================================================================

def iter_chunks(data: bytes) -> Iterator[Tuple[bytes, bytes]]:
    """
    Walk the chunks of a PNG stream.

    Args:
        data: Complete PNG byte stream

    Yields:
        (chunk_type, chunk_data) in file order

    Raises:
        ValueError: On bad signature, truncated chunk or CRC mismatch
    """
    if data[:8] != PNG_SIGNATURE:
        raise ValueError("not a PNG stream")

    offset = 8
    while offset < len(data):
        if offset + 8 > len(data):
            raise ValueError(f"truncated chunk header at offset {offset}")
        length, chunk_type = struct.unpack(">I4s", data[offset:offset + 8])
        end = offset + 12 + length
        if end > len(data):
            raise ValueError(f"truncated {chunk_type!r} chunk at offset {offset}")

        body = data[offset + 8:offset + 8 + length]
        (crc,) = struct.unpack(">I", data[end - 4:end])
        if crc != zlib.crc32(body, zlib.crc32(chunk_type)):
            raise ValueError(f"CRC mismatch in {chunk_type!r} chunk")

        yield chunk_type, body
        offset = end


def read_density(data: bytes) -> Optional[DensityDescriptor]:
    """
    Extract the pHYs descriptor from a PNG stream.

    Returns:
        DensityDescriptor, or None if the stream has no pHYs chunk
    """
    for chunk_type, body in iter_chunks(data):
        if chunk_type == PHYS_CHUNK_TYPE:
            return DensityDescriptor.from_bytes(body)
        if chunk_type == b"IDAT":
            # pHYs after image data is not valid
            return None
    return None
