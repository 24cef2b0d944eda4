"""
Compressed-file container and the file-level compress/decompress operations.

Compressed files have the following layout:

  1. null-terminated extension of the original file   e.g. b"jpg\\0"
  2. length of the original file in bytes              signed 32-bit int
  3. length of the flattened tree in bytes             signed 32-bit int
  4. flattened Huffman tree
  5. packed bit stream, to the end of the file

Both integers use the byte order from CompressorConfig (little-endian by
default).
"""

import filecmp
import os
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Union

import codec

PathLike = Union[str, Path]

INT32_MAX = 2**31 - 1


class ContainerFormatError(ValueError):
    pass

class AlreadyCompressedError(ValueError):
    pass


@dataclass
class CompressorConfig:
    suffix: str = "huf"
    decompressed_tag: str = "_decompressed"
    byteorder: str = "little"

    def __post_init__(self):
        if self.byteorder not in ("little", "big"):
            raise ValueError(f"byteorder must be 'little' or 'big', got {self.byteorder!r}")
        self.suffix = self.suffix.lstrip(".")
        if not self.suffix:
            raise ValueError("suffix must not be empty")

    @property
    def int_format(self) -> str:
        return ("<" if self.byteorder == "little" else ">") + "i"


# File names

def file_base_name(path: PathLike) -> str:
    # "pictures/nebula.jpg" => "nebula"
    return Path(path).name.split(".", 1)[0]

def file_extension(path: PathLike) -> str:
    # "hamlet.txt" => "txt", "notes.tar.gz" => "tar.gz", "README" => ""
    parts = Path(path).name.split(".", 1)
    return parts[1] if len(parts) == 2 else ""

def is_compressed_name(path: PathLike, config: CompressorConfig) -> bool:
    return file_extension(path) == config.suffix

def make_compressed_file_name(path: PathLike, config: CompressorConfig) -> Path:
    # "hamlet.txt" => "hamlet.huf", in the same directory
    p = Path(path)
    return p.with_name(f"{file_base_name(p)}.{config.suffix}")

def _join_name(base: str, extension: str) -> str:
    return f"{base}.{extension}" if extension else base

def make_unique_decompressed_file_name(directory: PathLike, base: str, extension: str,
                                       config: CompressorConfig) -> Path:
    """
    Pick a name that does not overwrite anything:
    base.ext, base_decompressed.ext, base_decompressed (1).ext, (2), ...
    """
    directory = Path(directory)
    candidate = directory / _join_name(base, extension)
    if not candidate.exists():
        return candidate
    tagged = base + config.decompressed_tag
    candidate = directory / _join_name(tagged, extension)
    if not candidate.exists():
        return candidate
    num = 1
    while True:
        candidate = directory / _join_name(f"{tagged} ({num})", extension)
        if not candidate.exists():
            return candidate
        num += 1

def file_size(path: PathLike) -> int:
    try:
        return os.stat(path).st_size
    except FileNotFoundError:
        return 0

def files_are_identical(path1: PathLike, path2: PathLike) -> bool:
    if not (os.path.isfile(path1) and os.path.isfile(path2)):
        return False
    return filecmp.cmp(path1, path2, shallow=False)


# Container

def _check_extension(extension: str) -> None:
    # the extension becomes part of an output file name
    separators = [s for s in ("/", os.sep, os.altsep) if s]
    if extension in (".", "..") or any(s in extension for s in separators):
        raise ContainerFormatError(f"extension {extension!r} is not a plain file name suffix")


def container_header(extension: str, encoded: codec.EncodedData, config: CompressorConfig) -> bytes:
    """Fields 1-3 of the layout; raises ValueError before anything is written."""
    ext_bytes = os.fsencode(extension)
    if b"\0" in ext_bytes:
        raise ValueError(f"extension {extension!r} contains a null byte")
    for name, value in (("original length", encoded.original_length),
                        ("flattened tree length", len(encoded.flat_tree))):
        if value > INT32_MAX:
            raise ValueError(f"{name} {value} does not fit in a signed 32-bit field")

    fmt = config.int_format
    return (ext_bytes + b"\0"
            + struct.pack(fmt, encoded.original_length)
            + struct.pack(fmt, len(encoded.flat_tree)))


def write_container(stream: BinaryIO, extension: str, encoded: codec.EncodedData,
                    config: CompressorConfig, header: Optional[bytes] = None) -> int:
    """Write header and payload to stream; returns the number of bytes written."""
    if header is None:
        header = container_header(extension, encoded, config)
    stream.write(header)
    stream.write(encoded.flat_tree)
    stream.write(encoded.packed)
    return len(header) + len(encoded.flat_tree) + len(encoded.packed)


def read_container(data: bytes, config: CompressorConfig) -> Tuple[str, codec.EncodedData]:
    terminator = data.find(b"\0")
    if terminator < 0:
        raise ContainerFormatError("missing null terminator after the original extension")
    extension = os.fsdecode(data[:terminator])
    _check_extension(extension)
    pos = terminator + 1

    fmt = config.int_format
    size = struct.calcsize(fmt)
    if len(data) < pos + 2 * size:
        raise ContainerFormatError("header ends before the length fields")
    original_length, = struct.unpack_from(fmt, data, pos)
    flat_tree_length, = struct.unpack_from(fmt, data, pos + size)
    pos += 2 * size
    if original_length < 0 or flat_tree_length < 0:
        raise ContainerFormatError(
            f"negative length field (original={original_length}, tree={flat_tree_length})")

    if len(data) < pos + flat_tree_length:
        raise ContainerFormatError(
            f"flattened tree needs {flat_tree_length} bytes, only {len(data) - pos} left")
    flat_tree = data[pos:pos + flat_tree_length]
    packed = data[pos + flat_tree_length:]
    return extension, codec.EncodedData(flat_tree, packed, original_length)


# Files

def compress_file(path: PathLike, config: Optional[CompressorConfig] = None) -> Path:
    """Compress path next to itself and return the name of the compressed file."""
    config = config or CompressorConfig()
    path = Path(path)
    if is_compressed_name(path, config):
        raise AlreadyCompressedError(f"{path} is already compressed")

    data = path.read_bytes() # one read serves both the frequency count and the encoding
    encoded = codec.encode(data)
    extension = file_extension(path)
    header = container_header(extension, encoded, config) # an existing output stays intact if this fails

    compressed_path = make_compressed_file_name(path, config)
    with compressed_path.open("wb") as f:
        write_container(f, extension, encoded, config, header=header)
    return compressed_path


def decompress_file(path: PathLike, config: Optional[CompressorConfig] = None,
                    outdir: Optional[PathLike] = None) -> Path:
    """Decompress path into a fresh file and return its name."""
    config = config or CompressorConfig()
    path = Path(path)
    extension, encoded = read_container(path.read_bytes(), config)
    data = codec.decode(*encoded)

    directory = Path(outdir) if outdir is not None else path.parent
    decompressed_path = make_unique_decompressed_file_name(directory, file_base_name(path), extension, config)
    if decompressed_path.parent != directory:
        raise ContainerFormatError(f"output name {decompressed_path} leaves {directory}")
    decompressed_path.write_bytes(data)
    return decompressed_path
