# Huffman decompression
# experiments.py
# 10/19/26

"""
Huffman decompression benchmarks

Runs repeated compress/decompress round trips on synthetic text to measure
how tree rebuilding and bitstream decoding behave across symbol
distributions and input sizes

Outputs (in --outdir):
  - metrics.csv     (raw row per run per configuration)
  - summary.csv     (grouped mean/stdev)
  - *.png           (charts)

How to run:
  python experiments.py --outdir results --runs 5
  python experiments.py --outdir results --runs 7 --exp1_size_kb 256 --exp2_max_kb 2048
  python experiments.py --outdir results --runs 5 --exp1_generators uniform95,zipf64,repetitive90,english_like
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import string
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Tuple

import matplotlib.pyplot as plt

import huffman as huff
from bitstream import read_bitstream
from freqtable import FrequencyTable


# Utilities

def now_ns() -> int:
    return time.perf_counter_ns()

def ns_to_ms(ns: int) -> float:
    return ns / 1_000_000.0

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def bits_per_symbol(compressed_bytes: int, frequency_table: FrequencyTable) -> float:
    # average compressed size of one symbol, header and padding included
    return round(compressed_bytes * 8 / max(1, frequency_table.total()), 2)


# Synthetic dataset generators

ALPHABET = string.ascii_letters + string.digits + string.punctuation + " "

def _sample(rng: random.Random, chars: str, weights: List[float], size: int) -> str:
    total = sum(weights)
    cdf = []
    acc = 0.0
    for w in weights:
        acc += w / total
        cdf.append(acc)

    out = []
    for _ in range(size):
        r = rng.random()
        lo, hi = 0, len(cdf) - 1
        while lo < hi:
            mid = (lo + hi) // 2
            if r <= cdf[mid]:
                hi = mid
            else:
                lo = mid + 1
        out.append(chars[lo])
    return "".join(out)

def gen_uniform(size: int, alphabet: int = len(ALPHABET), seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = ALPHABET[:alphabet]
    return "".join(rng.choice(chars) for _ in range(size))

def gen_repetitive(size: int, dominant: str = "A", dom_frac: float = 0.90, seed: int = 0) -> str:
    rng = random.Random(seed)
    others = [ch for ch in ALPHABET if ch != dominant]
    return "".join(dominant if rng.random() < dom_frac else rng.choice(others) for _ in range(size))

def gen_zipf_like(size: int, alphabet: int = 64, s: float = 1.2, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = ALPHABET[:alphabet]
    weights = [1.0 / ((i + 1) ** s) for i in range(len(chars))]
    return _sample(rng, chars, weights, size)

def gen_english_like(size: int, seed: int = 0) -> str:
    rng = random.Random(seed)
    chars = (
        " etaoinshrdlcumwfgypbvkjxq"
        "ETAOINSHRDLCUMWFGYPBVKJXQ"
        "\n"
    )
    weights = []
    for ch in chars:
        if ch == ' ':
            weights.append(13.0)
        elif ch == '\n':
            weights.append(1.5)
        elif ch.lower() in "etaoinshrdlu":
            weights.append(6.0)
        elif ch.lower() in "cmfwgypbvk":
            weights.append(2.5)
        else:
            weights.append(1.2)
    return _sample(rng, chars, weights, size)

GENERATOR_REGISTRY: Dict[str, Callable[[int, int], str]] = {
    "uniform95": lambda size, seed: gen_uniform(size, seed=seed),
    "uniform32": lambda size, seed: gen_uniform(size, alphabet=32, seed=seed),
    "zipf64": lambda size, seed: gen_zipf_like(size, alphabet=64, s=1.2, seed=seed),
    "zipf16": lambda size, seed: gen_zipf_like(size, alphabet=16, s=1.2, seed=seed),
    "repetitive90": lambda size, seed: gen_repetitive(size, dom_frac=0.90, seed=seed),
    "repetitive99": lambda size, seed: gen_repetitive(size, dom_frac=0.99, seed=seed),
    "single_symbol": lambda size, seed: "a" * size,
    "english_like": lambda size, seed: gen_english_like(size, seed=seed),
}

def generate_dataset(name: str, size: int, seed: int) -> Tuple[str, str]:
    fn = GENERATOR_REGISTRY.get(name)
    if fn is None:
        raise ValueError(f"unknown generator {name!r}, choose from {', '.join(sorted(GENERATOR_REGISTRY))}")
    return name, fn(size, seed)


# Experiment runner

@dataclass
class MetricRow:
    exp_name: str
    dataset_name: str
    text_size: int
    run_id: int
    unique_symbols: int

    build_tree_ms: float
    build_codes_ms: float
    encode_ms: float
    read_bits_ms: float
    decode_ms: float
    total_decompress_ms: float

    compressed_bytes: int
    pad_bits: int
    max_code_length: int
    compression_ratio: float
    bits_per_symbol: float
    correctness_ok: int  # 1 or 0


def run_one(text: str) -> MetricRow:
    ft = FrequencyTable.from_text(text)

    # Encoder side, timed so the decode cost can be put next to it
    t0 = now_ns()
    packed = huff.compress(text, ft)
    t1 = now_ns()
    encode_ms = ns_to_ms(t1 - t0)

    # Decoder side, one stage at a time
    t2 = now_ns()
    tree = huff.build_huffman_tree(ft)
    t3 = now_ns()
    code_table = huff.generate_code_table(tree)
    t4 = now_ns()
    bits = read_bitstream(packed)
    t5 = now_ns()
    decoded = huff.huffman_decode(bits, code_table)
    t6 = now_ns()

    pad_bits = packed[0] if packed else 0
    correctness_ok = 1 if "".join(decoded) == text else 0

    return MetricRow(
        exp_name="",
        dataset_name="",
        text_size=len(text),
        run_id=0,
        unique_symbols=len(ft),
        build_tree_ms=ns_to_ms(t3 - t2),
        build_codes_ms=ns_to_ms(t4 - t3),
        encode_ms=encode_ms,
        read_bits_ms=ns_to_ms(t5 - t4),
        decode_ms=ns_to_ms(t6 - t5),
        total_decompress_ms=ns_to_ms(t6 - t2),
        compressed_bytes=len(packed),
        pad_bits=pad_bits,
        max_code_length=code_table.max_length,
        compression_ratio=len(packed) / max(1, len(text.encode("utf-8"))),
        bits_per_symbol=bits_per_symbol(len(packed), ft),
        correctness_ok=correctness_ok,
    )


def write_csv(path: Path, rows: List[MetricRow]) -> None:
    fields = list(MetricRow.__dataclass_fields__.keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=fields)
        w.writeheader()
        for r in rows:
            w.writerow({k: getattr(r, k) for k in fields})


SUMMARY_METRICS = [
    "compression_ratio",
    "bits_per_symbol",
    "encode_ms",
    "build_tree_ms",
    "build_codes_ms",
    "decode_ms",
    "total_decompress_ms",
]

def mean_stdev(vals: List[float]) -> Tuple[float, float]:
    if len(vals) == 1:
        return vals[0], 0.0
    return statistics.mean(vals), statistics.stdev(vals)


def group_summary(rows: List[MetricRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name, text_size and compute mean/stdev
    """
    key_to: Dict[Tuple[str, str, int], List[MetricRow]] = {}
    for r in rows:
        key = (r.exp_name, r.dataset_name, r.text_size)
        key_to.setdefault(key, []).append(r)

    summary_fields = ["exp_name", "dataset_name", "text_size", "n_runs"]
    for m in SUMMARY_METRICS:
        summary_fields += [f"{m}_mean", f"{m}_stdev"]
    summary_fields.append("correctness_ok_rate")

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for key, items in sorted(key_to.items()):
            exp_name, dataset_name, size = key
            row = {
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "text_size": size,
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
    plt.plot(x, [mean_for(d, "bits_per_symbol") for d in datasets], marker="o")
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Compressed Bits per Symbol")
    plt.title("Experiment 1: Bits per Symbol by Distribution")
    plt.tight_layout()
    plt.savefig(outdir / "exp1_bits_per_symbol.png", dpi=200)
    plt.close()

    plt.figure()
    for field, label in (("build_tree_ms", "build tree"), ("build_codes_ms", "build codes"), ("decode_ms", "decode")):
        plt.plot(x, [mean_for(d, field) for d in datasets], marker="o", label=label)
    plt.xticks(x, datasets, rotation=20, ha="right")
    plt.ylabel("Time (ms)")
    plt.title("Experiment 1: Decompression Stages by Distribution")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "exp1_stage_time.png", dpi=200)
    plt.close()


def plot_experiment_2(rows: List[MetricRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "exp2_size_scaling"]
    if not exp_rows:
        return

    distributions = sorted(set(r.dataset_name for r in exp_rows))

    for dist in distributions:
        dist_rows = [r for r in exp_rows if r.dataset_name == dist]
        sizes = sorted(set(r.text_size for r in dist_rows))

        def mean_size(size: int, field: str) -> float:
            vals = [getattr(r, field) for r in dist_rows if r.text_size == size]
            return statistics.mean(vals) if vals else float("nan")

        plt.figure()
        plt.plot(sizes, [mean_size(s, "encode_ms") for s in sizes], marker="o", label="encode")
        plt.plot(sizes, [mean_size(s, "total_decompress_ms") for s in sizes], marker="o", label="decompress")
        plt.xlabel("Text Size (symbols)")
        plt.ylabel("Time (ms)")
        plt.title(f"Experiment 2: Time vs Size ({dist})")
        plt.legend()
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_time_{dist}.png", dpi=200)
        plt.close()

        plt.figure()
        plt.plot(sizes, [mean_size(s, "compression_ratio") for s in sizes], marker="o")
        plt.xlabel("Text Size (symbols)")
        plt.ylabel("Compressed Bytes / Original Bytes")
        plt.title(f"Experiment 2: Compression Ratio vs Size ({dist})")
        plt.tight_layout()
        plt.savefig(outdir / f"exp2_compression_ratio_{dist}.png", dpi=200)
        plt.close()


# Main

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser()
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV and plots")
    ap.add_argument("--runs", type=int, default=5, help="Repetitions per configuration (>=3 recommended for timing)")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--no_plots", action="store_true", help="Only write the CSV files")

    # Experiment toggles
    ap.add_argument("--no_exp1", action="store_true", help="Disable experiment 1 (distribution)")
    ap.add_argument("--no_exp2", action="store_true", help="Disable experiment 2 (size scaling)")

    # Experiment 1 controls
    ap.add_argument("--exp1_size_kb", type=int, default=64, help="Experiment 1 fixed text size in K symbols")
    ap.add_argument("--exp1_generators", type=str, default="uniform95,zipf64,repetitive90,english_like",
                    help="Comma-separated dataset generator names for experiment 1")

    # Experiment 2 controls
    ap.add_argument("--exp2_min_kb", type=int, default=1, help="Experiment 2 min size in K symbols (power-of-two growth)")
    ap.add_argument("--exp2_max_kb", type=int, default=512, help="Experiment 2 max size in K symbols (power-of-two growth)")
    ap.add_argument("--exp2_generators", type=str, default="uniform95,zipf64,english_like",
                    help="Comma-separated dataset generator names for experiment 2")
    return ap

def run_experiments(args: argparse.Namespace) -> List[MetricRow]:
    rows: List[MetricRow] = []

    # Experiment 1: distributions (fixed size)
    if not args.no_exp1:
        fixed_size = max(1, args.exp1_size_kb) * 1024
        for gen_name in parse_csv_list(args.exp1_generators):
            for run_id in range(1, args.runs + 1):
                dataset_name, text = generate_dataset(gen_name, fixed_size, args.seed + run_id)
                row = run_one(text)
                row.exp_name = "exp1_distribution"
                row.dataset_name = dataset_name
                row.run_id = run_id
                rows.append(row)

    # Experiment 2: size scaling (powers of 2)
    if not args.no_exp2:
        sizes: List[int] = []
        s = max(1, args.exp2_min_kb) * 1024
        while s <= max(1, args.exp2_max_kb) * 1024:
            sizes.append(s)
            s *= 2

        for gen_name in parse_csv_list(args.exp2_generators):
            for size in sizes:
                for run_id in range(1, args.runs + 1):
                    dataset_name, text = generate_dataset(gen_name, size, args.seed + 10_000 + size + run_id)
                    row = run_one(text)
                    row.exp_name = "exp2_size_scaling"
                    row.dataset_name = dataset_name
                    row.run_id = run_id
                    rows.append(row)

    return rows

def main(argv: List[str] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows = run_experiments(args)

    # Write raw and summary
    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    # Plots
    if not args.no_plots:
        plot_experiment_1(rows, outdir)
        plot_experiment_2(rows, outdir)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Round-trip correctness rate: {ok_rate:.3f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
