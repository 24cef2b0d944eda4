"""
Huffman file compressor.

How to run:
  python huf.py hamlet.txt              (writes hamlet.huf)
  python huf.py hamlet.huf              (writes hamlet.txt, or hamlet_decompressed.txt if taken)
  python huf.py hamlet.txt --verify     (also checks the round trip)
  python huf.py                         (interactive prompt, blank line quits)
"""

import argparse
import tempfile
from pathlib import Path
from typing import List, Optional

import compressor as comp

BANNER = "\n".join([
    "+---------------------------+",
    "|   H   H  U   U  FFFFF     |",
    "|   H   H  U   U  F         |",
    "|   HHHHH  U   U  FFFF      |",
    "|   H   H  U   U  F         |",
    "|   H   H   UUU   F         |",
    "+--- C O M P R E S S O R ---+",
])

# Errors reported per file; decode and container errors are all ValueErrors
FILE_ERRORS = (OSError, ValueError)


def verify_round_trip(original: Path, compressed: Path, config: comp.CompressorConfig) -> bool:
    with tempfile.TemporaryDirectory() as tmp:
        restored = comp.decompress_file(compressed, config, outdir=tmp)
        return comp.files_are_identical(original, restored)


def process_file(filename: str, config: comp.CompressorConfig, verify: bool = False) -> bool:
    """Compress or decompress one file, printing the outcome. Returns success."""
    path = Path(filename)
    try:
        if comp.is_compressed_name(path, config):
            decompressed = comp.decompress_file(path, config)
            print(f'Decompressed file "{decompressed}" created')
        else:
            compressed = comp.compress_file(path, config)
            print(f'Compressed file "{compressed}" created')
            print(f"{comp.file_size(path)} bytes -> {comp.file_size(compressed)} bytes")
            if verify:
                ok = verify_round_trip(path, compressed, config)
                print("Round trip: " + ("identical" if ok else "MISMATCH"))
                if not ok:
                    return False
    except FILE_ERRORS as e:
        print(f"ERROR: {filename}: {e}")
        return False
    finally:
        print()
    return True


def prompt_for_file_name_or_quit(config: comp.CompressorConfig) -> str:
    print(f'Enter file to compress or ".{config.suffix}" file to decompress.')
    print("(Leave blank to quit.)")
    while True:
        try:
            filename = input("> ").strip()
        except EOFError:
            return ""
        if filename == "" or Path(filename).is_file():
            return filename
        print(f'File "{filename}" not found.')
        print("Is it spelled incorrectly or missing a directory?")
        print("(Leave blank to quit.)")


def interactive(config: comp.CompressorConfig, verify: bool = False) -> int:
    print(BANNER)
    print()
    while True:
        filename = prompt_for_file_name_or_quit(config)
        if not filename:
            return 0
        process_file(filename, config, verify)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Compress files with static Huffman coding, or restore them.")
    ap.add_argument("files", nargs="*", help="Files to compress, or compressed files to restore (none: interactive)")
    ap.add_argument("--suffix", type=str, default="huf", help="Extension used for compressed files")
    ap.add_argument("--byteorder", type=str, choices=("little", "big"), default="little",
                    help="Byte order of the header length fields")
    ap.add_argument("--verify", action="store_true", help="Decompress after compressing and compare")
    args = ap.parse_args(argv)

    try:
        config = comp.CompressorConfig(suffix=args.suffix, byteorder=args.byteorder)
    except ValueError as e:
        ap.error(str(e))

    if not args.files:
        return interactive(config, args.verify)

    failures = 0
    for filename in args.files:
        if not process_file(filename, config, args.verify):
            failures += 1
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
