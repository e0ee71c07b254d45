"""
Verification harness for the 5-symbol Huffman code table

Runs directed and randomized frequency vectors through the encoder and checks
every result against an independent reference Huffman build

Outputs (in --outdir):
  - metrics.csv     (one row per frequency vector)
  - summary.csv     (grouped per dataset)
  - input.txt, golden.txt   (with --export_vectors, for an external test bench)
  - *.png           (code length charts)

How to run:
  python experiments.py --outdir results --runs 200
  python experiments.py --outdir results --runs 50 --generators uniform,dominant --export_vectors
  python experiments.py --freqs 31,1,1,1,1
"""

from __future__ import annotations

import argparse
import csv
import random
import statistics
import sys
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt

from code_packing import LENGTH_WIDTH, encode, format_word, pack_fields, pack_frequencies
from huffman_table import CODE_WIDTH, MAX_FREQUENCY, NUM_SYMBOLS, SYMBOLS, build_code_table, validate_frequencies
from reference_huffman import is_prefix_free, kraft_sum, optimal_cost, reference_bitstrings


# Utilities

def safe_mkdir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)

def parse_csv_list(s: str) -> List[str]:
    return [x.strip() for x in s.split(",") if x.strip()]

def parse_frequencies(s: str) -> List[int]:
    parts = parse_csv_list(s)
    try:
        values = [int(x) for x in parts]
    except ValueError:
        raise ValueError(f"frequencies must be integers: {s!r}") from None
    return validate_frequencies(values)


# Frequency vector generators

def gen_all_zero(seed: int = 0) -> List[int]:
    return [0] * NUM_SYMBOLS

def gen_all_equal(seed: int = 0) -> List[int]:
    rng = random.Random(seed)
    value = rng.randint(0, MAX_FREQUENCY)
    return [value] * NUM_SYMBOLS

def gen_uniform(seed: int = 0) -> List[int]:
    rng = random.Random(seed)
    return [rng.randint(0, MAX_FREQUENCY) for _ in range(NUM_SYMBOLS)]

def gen_dominant(seed: int = 0) -> List[int]:
    # one heavy symbol, the rest small
    rng = random.Random(seed)
    out = [rng.randint(0, 3) for _ in range(NUM_SYMBOLS)]
    out[rng.randrange(NUM_SYMBOLS)] = rng.randint(MAX_FREQUENCY - 7, MAX_FREQUENCY)
    return out

def gen_skewed(seed: int = 0) -> List[int]:
    # geometric-looking spread in random symbol order
    rng = random.Random(seed)
    out = [min(MAX_FREQUENCY, (1 << i) + rng.randint(0, 1)) for i in range(NUM_SYMBOLS)]
    rng.shuffle(out)
    return out

GENERATOR_REGISTRY: Dict[str, Callable[[int], List[int]]] = {
    "all_zero": gen_all_zero,
    "all_equal": gen_all_equal,
    "uniform": gen_uniform,
    "dominant": gen_dominant,
    "skewed": gen_skewed,
}

DIRECTED_VECTORS: List[Tuple[str, List[int]]] = [
    ("all_ones", [1, 1, 1, 1, 1]),
    ("dominant_a", [31, 1, 1, 1, 1]),
    ("all_zero", [0, 0, 0, 0, 0]),
    ("all_max", [MAX_FREQUENCY] * NUM_SYMBOLS),
    ("ascending", [1, 2, 3, 4, 5]),
    ("descending", [5, 4, 3, 2, 1]),
    ("dominant_e", [1, 1, 1, 1, 31]),
    ("pairs", [2, 2, 1, 1, 0]),
]


# Checks

@dataclass
class CheckRow:
    exp_name: str
    dataset_name: str
    run_id: int
    frequencies: str
    code_word: str
    length_word: str
    lengths: str

    weighted_length: int
    optimal_length: int
    average_length: float

    deterministic_ok: int
    lengths_ok: int
    kraft_ok: int
    prefix_ok: int
    optimal_ok: int
    codes_ok: int  # bit-exact match with the reference tree
    correctness_ok: int  # 1 only if every check passed


def run_one(frequencies: List[int]) -> CheckRow:
    table = build_code_table(frequencies)
    packed = encode(frequencies)
    packed_again = encode(frequencies)

    lengths = table.lengths
    weighted = table.weighted_length(frequencies)
    optimal = optimal_cost(frequencies)

    deterministic_ok = int(packed == packed_again and packed.length_fields == lengths)
    lengths_ok = int(len(lengths) == NUM_SYMBOLS and all(1 <= l <= CODE_WIDTH for l in lengths))
    kraft_ok = int(kraft_sum(lengths) == 1)
    prefix_ok = int(is_prefix_free(cw.bitstring for cw in table))
    optimal_ok = int(weighted == optimal)
    codes_ok = int([cw.bitstring for cw in table] == reference_bitstrings(frequencies))
    checks = (deterministic_ok, lengths_ok, kraft_ok, prefix_ok, optimal_ok, codes_ok)

    return CheckRow(
        exp_name="",
        dataset_name="",
        run_id=0,
        frequencies=" ".join(str(f) for f in frequencies),
        code_word=format_word(packed.codes, CODE_WIDTH),
        length_word=format_word(packed.lengths, LENGTH_WIDTH),
        lengths=" ".join(str(l) for l in lengths),
        weighted_length=weighted,
        optimal_length=optimal,
        average_length=weighted / max(1, sum(frequencies)),
        deterministic_ok=deterministic_ok,
        lengths_ok=lengths_ok,
        kraft_ok=kraft_ok,
        prefix_ok=prefix_ok,
        optimal_ok=optimal_ok,
        codes_ok=codes_ok,
        correctness_ok=int(all(checks)),
    )


def write_csv(path: Path, rows: List[CheckRow]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=[fl.name for fl in fields(CheckRow)])
        w.writeheader()
        w.writerows(asdict(r) for r in rows)


def spread(vals: List[float]) -> Tuple[float, float]:
    # single samples have no spread
    stdev = statistics.stdev(vals) if len(vals) > 1 else 0.0
    return statistics.mean(vals), stdev


def group_summary(rows: List[CheckRow], out_path: Path) -> None:
    """
    Group by exp_name, dataset_name and compute mean/stdev plus pass rates
    """
    key_to: Dict[Tuple[str, str], List[CheckRow]] = {}
    for r in rows:
        key_to.setdefault((r.exp_name, r.dataset_name), []).append(r)

    summary_fields = [
        "exp_name", "dataset_name", "n_runs",
        "weighted_length_mean", "weighted_length_stdev",
        "average_length_mean", "average_length_stdev",
        "max_length",
        "kraft_ok_rate", "prefix_ok_rate", "optimal_ok_rate", "codes_ok_rate",
        "correctness_ok_rate",
    ]

    with out_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=summary_fields)
        w.writeheader()
        for (exp_name, dataset_name), items in sorted(key_to.items()):
            wl_m, wl_s = spread([x.weighted_length for x in items])
            al_m, al_s = spread([x.average_length for x in items])
            n = len(items)
            w.writerow({
                "exp_name": exp_name,
                "dataset_name": dataset_name,
                "n_runs": n,
                "weighted_length_mean": wl_m,
                "weighted_length_stdev": wl_s,
                "average_length_mean": al_m,
                "average_length_stdev": al_s,
                "max_length": max(max(int(l) for l in x.lengths.split()) for x in items),
                "kraft_ok_rate": sum(x.kraft_ok for x in items) / n,
                "prefix_ok_rate": sum(x.prefix_ok for x in items) / n,
                "optimal_ok_rate": sum(x.optimal_ok for x in items) / n,
                "codes_ok_rate": sum(x.codes_ok for x in items) / n,
                "correctness_ok_rate": sum(x.correctness_ok for x in items) / n,
            })


def golden_words(frequencies: List[int]) -> Tuple[int, int]:
    """Code word and length word packed from the reference tree, not from the encoder"""
    codes = reference_bitstrings(frequencies)
    return (
        pack_fields([int(c, 2) for c in codes], CODE_WIDTH),
        pack_fields([len(c) for c in codes], LENGTH_WIDTH),
    )


def export_vectors(rows: List[CheckRow], outdir: Path) -> None:
    """
    Writes input.txt (5 frequencies per line, a first) and golden.txt
    (packed frequency word, code word and length word in hex, one line per input)
    """
    with (outdir / "input.txt").open("w", encoding="utf-8") as fin, \
         (outdir / "golden.txt").open("w", encoding="utf-8") as fgold:
        for r in rows:
            freqs = [int(x) for x in r.frequencies.split()]
            code_word, length_word = golden_words(freqs)
            fin.write(r.frequencies + "\n")
            fgold.write(f"{pack_frequencies(freqs):07x} {code_word:05x} {length_word:04x}\n")


# Plotting

def plot_length_histogram(rows: List[CheckRow], outdir: Path) -> None:
    exp_rows = [r for r in rows if r.exp_name == "randomized"]
    if not exp_rows:
        return

    datasets = sorted(set(r.dataset_name for r in exp_rows))
    depths = list(range(1, CODE_WIDTH + 1))
    bar_w = 0.8 / len(datasets)

    plt.figure()
    for i, d in enumerate(datasets):
        counts = [0] * len(depths)
        for r in exp_rows:
            if r.dataset_name != d:
                continue
            for l in r.lengths.split():
                counts[int(l) - 1] += 1
        total = max(1, sum(counts))
        x = [depth + (i - (len(datasets) - 1) / 2) * bar_w for depth in depths]
        plt.bar(x, [c / total for c in counts], width=bar_w, label=d)
    plt.xticks(depths, [str(d) for d in depths])
    plt.xlabel("Code Length (bits)")
    plt.ylabel("Share of Codewords")
    plt.title("Code Length Distribution by Generator")
    plt.legend()
    plt.tight_layout()
    plt.savefig(outdir / "code_length_histogram.png", dpi=200)
    plt.close()


def plot_cost_vs_optimal(rows: List[CheckRow], outdir: Path) -> None:
    if not rows:
        return

    plt.figure()
    for d in sorted(set(r.dataset_name for r in rows)):
        sel = [r for r in rows if r.dataset_name == d]
        plt.scatter([r.optimal_length for r in sel], [r.weighted_length for r in sel], s=12, label=d)
    top = max(max(r.optimal_length, r.weighted_length) for r in rows)
    plt.plot([0, top], [0, top], linestyle="--", color="gray")
    plt.xlabel("Reference Optimum (sum f * len)")
    plt.ylabel("Encoder Weighted Length (sum f * len)")
    plt.title("Encoder Cost vs Reference Optimum")
    plt.legend(fontsize="small")
    plt.tight_layout()
    plt.savefig(outdir / "cost_vs_optimal.png", dpi=200)
    plt.close()


def print_table(frequencies: List[int]) -> None:
    table = build_code_table(frequencies)
    packed = encode(frequencies)
    print("symbol freq len code  field")
    for i, cw in enumerate(table):
        print(f"{SYMBOLS[i]:>6} {frequencies[i]:>4} {cw.length:>3} {cw.bitstring:<5} {cw.padded_bitstring}")
    print("codes:  ", format_word(packed.codes, CODE_WIDTH))
    print("lengths:", format_word(packed.lengths, LENGTH_WIDTH))


# Main

def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Check the 5-symbol Huffman encoder against a reference build")
    ap.add_argument("--outdir", type=str, default="results", help="Output directory for CSV, vectors and plots")
    ap.add_argument("--runs", type=int, default=200, help="Random vectors per generator")
    ap.add_argument("--seed", type=int, default=123, help="Base random seed")
    ap.add_argument("--generators", type=str, default=",".join(GENERATOR_REGISTRY),
                    help="Comma-separated generator names for the randomized runs")
    ap.add_argument("--no_directed", action="store_true", help="Skip the directed vectors")
    ap.add_argument("--no_plots", action="store_true", help="Do not write charts")
    ap.add_argument("--export_vectors", action="store_true", help="Write input.txt/golden.txt for a test bench")
    ap.add_argument("--freqs", type=str, default=None, help="Print the table for one vector a,b,c,d,e and exit")
    args = ap.parse_args(argv)

    if args.freqs is not None:
        try:
            frequencies = parse_frequencies(args.freqs)
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 2
        print_table(frequencies)
        return 0

    outdir = Path(args.outdir)
    safe_mkdir(outdir)

    rows: List[CheckRow] = []

    if not args.no_directed:
        for run_id, (name, freqs) in enumerate(DIRECTED_VECTORS, start=1):
            row = run_one(freqs)
            row.exp_name = "directed"
            row.dataset_name = name
            row.run_id = run_id
            rows.append(row)

    for gen_name in parse_csv_list(args.generators):
        fn = GENERATOR_REGISTRY.get(gen_name)
        if fn is None:
            print(f"[WARN] unknown generator {gen_name!r}, skipped", file=sys.stderr)
            continue
        for run_id in range(1, args.runs + 1):
            row = run_one(fn(args.seed + run_id))
            row.exp_name = "randomized"
            row.dataset_name = gen_name
            row.run_id = run_id
            rows.append(row)

    metrics_csv = outdir / "metrics.csv"
    summary_csv = outdir / "summary.csv"
    write_csv(metrics_csv, rows)
    group_summary(rows, summary_csv)

    if args.export_vectors:
        export_vectors(rows, outdir)
        print(f"[INFO] Test bench vectors written to {outdir / 'input.txt'} and {outdir / 'golden.txt'}")

    if not args.no_plots:
        plot_length_histogram(rows, outdir)
        plot_cost_vs_optimal(rows, outdir)

    failed = [r for r in rows if not r.correctness_ok]
    for r in failed:
        print(f"[WARN] check failed for {r.dataset_name} run {r.run_id}: freqs={r.frequencies}", file=sys.stderr)

    ok_rate = sum(r.correctness_ok for r in rows) / max(1, len(rows))
    print(f"Wrote {len(rows)} rows to {metrics_csv}")
    print(f"Wrote grouped summary to {summary_csv}")
    print(f"Correctness rate across all vectors: {ok_rate:.3f}")
    if not args.no_plots:
        print("Charts saved in:", outdir.resolve())
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
