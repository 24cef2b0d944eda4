"""
Benchmark: static Huffman codec on synthetic data

Measures, per dataset and size, how close the codec gets to the entropy bound
and what the container header costs, with repeated runs for timing.

Outputs (in --outdir):
  - metrics.csv     (raw row per run)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --runs 3 --dist-size-kb 256 --scale-max-kb 2048
  python experiments.py --dist-generators uniform256,zipf128,single_symbol --skip scaling
"""

from __future__ import annotations

import argparse
import csv
import dataclasses
import io
import math
import random
import statistics
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import matplotlib.pyplot as plt

import huffman as huff
from bitstream import pack_bits_from_codes, unpack_and_decode
from compressor import CompressorConfig, write_container
from codec import EncodedData
from flat_tree import flatten_tree, unflatten_tree


def timed(fn: Callable, *args):
    """Call fn(*args); returns (result, elapsed milliseconds)."""
    start = time.perf_counter()
    result = fn(*args)
    return result, (time.perf_counter() - start) * 1000.0


def shannon_entropy(frequency_table: List[int]) -> float:
    """Bits per symbol; the lower bound for any symbol-by-symbol code."""
    total = sum(frequency_table)
    if total == 0:
        return 0.0
    h = 0.0
    for count in frequency_table:
        if count:
            p = count / total
            h -= p * math.log2(p)
    return h


# Synthetic datasets, each described by per-byte sampling weights

# rough per-mille letter frequencies of English prose
ENGLISH_LETTERS = {
    "e": 127, "t": 91, "a": 82, "o": 75, "i": 70, "n": 67, "s": 63, "h": 61,
    "r": 60, "d": 43, "l": 40, "c": 28, "u": 28, "m": 24, "w": 24, "f": 22,
    "g": 20, "y": 20, "p": 19, "b": 15, "v": 10, "k": 8, "j": 2, "x": 2,
    "q": 1, "z": 1,
}

def english_weights() -> Dict[int, float]:
    weights = {ord(ch): float(w) for ch, w in ENGLISH_LETTERS.items()}
    weights.update({ord(ch.upper()): w / 20 for ch, w in ENGLISH_LETTERS.items()})
    weights.update({ord(" "): 180.0, ord("\n"): 15.0, ord("."): 10.0, ord(","): 10.0})
    return weights

def uniform_weights(alphabet: int) -> Dict[int, float]:
    return dict.fromkeys(range(alphabet), 1.0)

def zipf_weights(alphabet: int, s: float) -> Dict[int, float]:
    return {rank: 1.0 / (rank + 1) ** s for rank in range(alphabet)}

def dominant_weights(dominant: int, share: float) -> Dict[int, float]:
    weights = dict.fromkeys(range(256), (1.0 - share) / 255)
    weights[dominant] = share
    return weights

def gen_weighted(size: int, weights: Dict[int, float], seed: int = 0) -> bytes:
    rng = random.Random(seed)
    symbols = list(weights)
    return bytes(rng.choices(symbols, weights=list(weights.values()), k=size))

def gen_single_symbol(size: int, symbol: int = ord('a')) -> bytes:
    return bytes([symbol]) * size

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], bytes]] = {
    "uniform256": lambda size, seed: gen_weighted(size, uniform_weights(256), seed),
    "uniform128": lambda size, seed: gen_weighted(size, uniform_weights(128), seed),
    "zipf128": lambda size, seed: gen_weighted(size, zipf_weights(128, 1.2), seed),
    "zipf64": lambda size, seed: gen_weighted(size, zipf_weights(64, 1.2), seed),
    "repetitive90": lambda size, seed: gen_weighted(size, dominant_weights(ord('A'), 0.90), seed),
    "repetitive99": lambda size, seed: gen_weighted(size, dominant_weights(ord('A'), 0.99), seed),
    "english_like": lambda size, seed: gen_weighted(size, english_weights(), seed),
    "single_symbol": lambda size, seed: gen_single_symbol(size),
}

def generate_dataset(name: str, size_bytes: int, seed: int) -> Tuple[str, bytes]:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        raise ValueError(f"unknown generator {name!r} (known: {', '.join(sorted(GENERATOR_REGISTRY))})")
    return name, fn(size_bytes, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    file_size_bytes: int
    run_id: int
    unique_symbols: int

    build_tree_ms: float
    encode_ms: float
    decode_ms: float
    total_ms: float

    packed_bytes: int
    flat_tree_bytes: int
    container_bytes: int
    compression_ratio: float  # container bytes / original bytes

    avg_code_bits: float
    entropy_bits: float
    correctness_ok: int  # 1 or 0


def _build(ft: List[int]):
    root = huff.build_huffman_tree(ft)
    return huff.generate_huffman_codes(root), flatten_tree(root)

def _decode(flat: bytes, packed: bytes, length: int) -> bytes:
    # from the flattened tree, as a reader of the file would
    return unpack_and_decode(packed, unflatten_tree(flat), length)


def run_one(data: bytes, config: Optional[CompressorConfig] = None) -> MetricRow:
    config = config or CompressorConfig()
    ft = huff.count_byte_frequencies(data)

    (code_map, flat), build_tree_ms = timed(_build, ft)
    packed, encode_ms = timed(pack_bits_from_codes, data, code_map)
    decoded, decode_ms = timed(_decode, flat, packed, len(data))

    container_bytes = write_container(io.BytesIO(), "bin", EncodedData(flat, packed, len(data)), config)
    total_bits = huff.encoded_bit_length(ft, code_map)

    return MetricRow(
        exp_name="",
        dataset_name="",
        file_size_bytes=len(data),
        run_id=0,
        unique_symbols=sum(1 for c in ft if c),
        build_tree_ms=build_tree_ms,
        encode_ms=encode_ms,
        decode_ms=decode_ms,
        total_ms=build_tree_ms + encode_ms + decode_ms,
        packed_bytes=len(packed),
        flat_tree_bytes=len(flat),
        container_bytes=container_bytes,
        compression_ratio=container_bytes / max(1, len(data)),
        avg_code_bits=total_bits / max(1, len(data)),
        entropy_bits=shannon_entropy(ft),
        correctness_ok=1 if decoded == data else 0,
    )


def run_experiment(exp_name: str, jobs: Iterable[Tuple[str, int]], runs: int, seed: int,
                   config: CompressorConfig) -> List[MetricRow]:
    """One row per (generator, size) job and run; seeds differ per size and run."""
    rows = []
    for gen_name, size_b in jobs:
        for run_id in range(1, runs + 1):
            _, data = generate_dataset(gen_name, size_b, seed + size_b + run_id)
            row = run_one(data, config)
            row.exp_name = exp_name
            row.dataset_name = gen_name
            row.run_id = run_id
            rows.append(row)
    return rows


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fieldnames = [f.name for f in dataclasses.fields(MetricRow)]
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        w.writerows(dataclasses.asdict(r) for r in rows)


SUMMARY_METRICS = ("compression_ratio", "avg_code_bits", "entropy_bits",
                   "build_tree_ms", "encode_ms", "decode_ms", "total_ms")

def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)

def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, file_size_bytes and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.file_size_bytes)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "file_size_bytes", "n_runs"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size_b = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "file_size_bytes": size_b,
                "n_runs": len(items),
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / len(items),
            }
            for m in SUMMARY_METRICS:
                row[f"{m}_mean"], row[f"{m}_stdev"] = mean_stdev([getattr(x, m) for x in items])
            w.writerow(row)


# Plotting

def plot_experiment_1(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp1_distribution"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))

    def mean_for(dataset: str, field: str) -> float:
        vals = [getattr(r, field) for r in exp_rows if r.dataset_name == dataset]
        return statistics.mean(vals) if vals else float("nan")

    x = list(range(len(datasets)))

    plt.figure()
    plt.plot(x, [mean_for(d, "avg_code_bits") for d in datasets], marker="o", label="Huffman code length")
    plt.plot(x, [mean_for(d, "entropy_bits") for d in datasets], marker="o", label="entropy")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Bits per Symbol")
    plt.title("Experiment 1: Code Length vs Entropy by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_bits_per_symbol.png", dpi=200)
    plt.close()

    plt.figure()
    plt.plot(x, [mean_for(d, "compression_ratio") for d in datasets], marker="o")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Compressed Bytes / Original Bytes")
    plt.title("Experiment 1: Compression Ratio by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "exp1_compression_ratio.png", dpi=200)
    plt.close()

    plt.figure()
    for field, label in (("encode_ms", "encode"), ("decode_ms", "decode")):
        plt.plot(x, [mean_for(d, field) for d in datasets], marker="o", label=label)
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Time (ms)")
    plt.title("Experiment 1: Encode/Decode Time by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_time.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    distributions = sorted(set(r.dataset_name for r in exp_rows))

    for dist in distributions:
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.file_size_bytes for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.file_size_bytes == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        for field, label in (("encode_ms", "encode"), ("decode_ms", "decode"), ("total_ms", "total")):
            plt.plot(sizes, [mean_size(s, field) for s in sizes], marker="o", label=label)
        plt.xlabel("File Size (bytes)")
        plt.ylabel("Time (ms)")
        plt.title(f"Experiment 2: Runtime vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_time_{dist}.png", dpi=200)
        plt.close()

        # header overhead matters most for small files
        plt.figure()
        plt.plot(sizes, [mean_size(s, "compression_ratio") for s in sizes], marker="o")
        plt.xscale("log", base=2)
        plt.xlabel("File Size (bytes)")
        plt.ylabel("Compressed Bytes / Original Bytes")
        plt.title(f"Experiment 2: Compression Ratio vs Size ({dist})")
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_compression_ratio_{dist}.png", dpi=200)
        plt.close()


# Main

def generator_list(s: str) -> List[str]:
    names = [x.strip() for x in s.split(",") if x.strip()]
    unknown = [n for n in names if n not in GENERATOR_REGISTRY]
    if unknown:
        raise argparse.ArgumentTypeError(f"unknown generator(s): {', '.join(unknown)}")
    return names

def doubling_sizes(min_bytes: int, max_bytes: int) -> List[int]:
    sizes = []
    s = max(1, min_bytes)
    while s <= max_bytes:
        sizes.append(s)
        s *= 2
    return sizes

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Benchmark the Huffman codec on synthetic data.")
    ap.add_argument("--outdir", type=Path, default=Path("results"), help="Where CSV files and charts go")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per dataset and size")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--byteorder", choices=("little", "big"), default="little",
                    help="Header byte order used when sizing the container")
    ap.add_argument("--skip", action="append", choices=("distribution", "scaling"), default=[],
                    help="Leave out an experiment (repeatable)")

    dist = ap.add_argument_group("distribution experiment (fixed size)")
    dist.add_argument("--dist-size-kb", type=int, default=512)
    dist.add_argument("--dist-generators", type=generator_list,
                      default=["uniform256", "zipf128", "repetitive90", "english_like"])

    scale = ap.add_argument_group("scaling experiment (sizes double from min to max)")
    scale.add_argument("--scale-min-kb", type=int, default=1)
    scale.add_argument("--scale-max-kb", type=int, default=4096)
    scale.add_argument("--scale-generators", type=generator_list,
                       default=["uniform256", "zipf128", "english_like"])
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = CompressorConfig(byteorder=args.byteorder)
    args.outdir.mkdir(parents=True, exist_ok=True)

    rows: List[MetricRow] = []
    if "distribution" not in args.skip:
        size_b = max(1, args.dist_size_kb) * 1024
        jobs = [(g, size_b) for g in args.dist_generators]
        rows += run_experiment("exp1_distribution", jobs, args.runs, args.seed, config)
        print(f"distribution: {len(jobs)} dataset(s) done")
    if "scaling" not in args.skip:
        sizes = doubling_sizes(args.scale_min_kb * 1024, args.scale_max_kb * 1024)
        jobs = [(g, s) for g in args.scale_generators for s in sizes]
        rows += run_experiment("exp2_size_scaling", jobs, args.runs, args.seed + 10_000, config)
        print(f"scaling: {len(jobs)} dataset/size pair(s) done")

    metrics_csv = args.outdir / "metrics.csv"
    summary_csv = args.outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)
    plot_experiment_1(rows, args.outdir)
    plot_experiment_2(rows, args.outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv} and grouped summary to {summary_csv}")
    print(f"Round-trip correctness rate: {ok_rate:.3f}")
    print("Charts saved in:", args.outdir.resolve())
    return 0 if ok_rate == 1.0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
