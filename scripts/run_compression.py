import os
import sys
import time
import json
import math
import matplotlib.pyplot as plt
import numpy as np
from collections import Counter
from datetime import datetime
from huffstream.processor import HuffProcessor
from huffstream.tree import PSEUDO_EOF, make_encodings, make_tree


# ---------- Setup ----------
def ensure_dirs():
    base = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
    out = os.path.join(base, "output")
    os.makedirs(out, exist_ok=True)
    return {
        "project_root": base,
        "data_dir": os.path.join(base, "data"),
        "out_dir": out
    }


def collect_inputs(argv, data_dir):
    """Files named on the command line, else every file in the data directory."""
    if argv:
        return list(argv)
    if not os.path.isdir(data_dir):
        raise FileNotFoundError(f"Data directory not found: {data_dir}")
    return sorted(
        os.path.join(data_dir, name) for name in os.listdir(data_dir)
        if os.path.isfile(os.path.join(data_dir, name))
    )


# ---------- Visualization ----------
def plot_comparisons(results, out_dir):
    """Generate comparison charts across the compressed files."""
    plt.style.use('seaborn-v0_8-darkgrid')
    plt.rcParams.update({"font.size": 10, "figure.dpi": 110})

    names = list(results.keys())
    ratios = np.array([r["compression_ratio"] for r in results.values()])
    comp_times = np.array([r["compression_time"] for r in results.values()])
    decomp_times = np.array([r["decompression_time"] for r in results.values()])
    avg_lengths = np.array([r["average_code_length"] for r in results.values()])
    entropies = np.array([r["entropy"] for r in results.values()])
    space_saved = (1 - ratios) * 100
    throughput = 1 / (comp_times + 1e-9)  # pseudo relative speed

    # ===== Basic Comparative Graphs =====
    plots = [
        ("Compression Ratio (Compressed/Original)", ratios, "Ratio", "comparison_ratios.png"),
        ("Compression Time Comparison", comp_times, "Time (s)", "comparison_times.png"),
        ("Decompression Time Comparison", decomp_times, "Time (s)", "comparison_decompression_times.png"),
        ("Percentage Space Saved", space_saved, "% Saved", "comparison_space_saved.png"),
    ]
    for title, vals, ylabel, filename in plots:
        plt.figure(figsize=(7, 5))
        bars = plt.bar(names, vals)
        plt.bar_label(bars, fmt="%.3f", padding=3)
        plt.title(title)
        plt.ylabel(ylabel)
        plt.xticks(rotation=15)
        plt.tight_layout()
        plt.savefig(os.path.join(out_dir, filename))
        plt.close()

    # ===== Code Length vs Entropy =====
    x = np.arange(len(names))
    plt.figure(figsize=(7, 5))
    plt.bar(x - 0.2, entropies, width=0.4, label="Entropy (bits/byte)")
    plt.bar(x + 0.2, avg_lengths, width=0.4, label="Avg Code Length (bits/byte)")
    plt.xticks(x, names, rotation=15)
    plt.legend()
    plt.title("Huffman Code Length vs Entropy Limit")
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "code_length_vs_entropy.png"))
    plt.close()

    # ===== Trade-off Scatter: Ratio vs Time =====
    plt.figure(figsize=(7, 5))
    plt.scatter(comp_times, ratios, s=150, color="royalblue")
    for i, name in enumerate(names):
        plt.text(comp_times[i], ratios[i], name, fontsize=9)
    plt.xlabel("Compression Time (s)")
    plt.ylabel("Compression Ratio (lower is better)")
    plt.title("Compression Time vs Compression Ratio Trade-off")
    plt.grid(True, linestyle="--", alpha=0.6)
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "compression_tradeoff.png"))
    plt.close()

    # ===== Normalized Metrics =====
    metrics = np.vstack([ratios, comp_times, decomp_times, space_saved])
    spread = metrics.max(axis=1, keepdims=True) - metrics.min(axis=1, keepdims=True)
    normalized = (metrics - metrics.min(axis=1, keepdims=True)) / np.where(spread == 0, 1, spread)
    labels = ["Ratio", "Comp Time", "Decomp Time", "Space Saved"]
    plt.figure(figsize=(8, 5))
    for i, label in enumerate(labels):
        plt.plot(names, normalized[i], marker="o", label=label)
    plt.legend()
    plt.title("Normalized Metric Comparison (0–1 Scale)")
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "normalized_metrics.png"))
    plt.close()

    # ===== Throughput Chart =====
    plt.figure(figsize=(7, 5))
    plt.bar(names, throughput / throughput.max(), color="lightgreen")
    plt.title("Relative Compression Throughput")
    plt.ylabel("Relative speed (fastest = 1)")
    plt.xticks(rotation=15)
    plt.tight_layout()
    plt.savefig(os.path.join(out_dir, "compression_throughput.png"))
    plt.close()

    print(f" Saved 8 visualizations in {out_dir}")


# ---------- Helpers ----------
def save_bits_file(data_bytes, path):
    bits = "".join(f"{b:08b}" for b in data_bytes)
    with open(path, "w", encoding="utf-8") as f:
        f.write(bits)
    print(f" Binary bitstring written to {path}")


def encoding_map(data_bytes):
    """Per-symbol statistics and Huffman codes for ``data_bytes``."""
    freq = Counter(data_bytes)
    counts = [freq.get(sym, 0) for sym in range(PSEUDO_EOF)] + [1]
    encodings = make_encodings(make_tree(counts))
    total = sum(freq.values())

    entropy = 0.0
    avg_length = 0.0
    for sym, cnt in freq.items():
        p = cnt / total
        entropy -= p * math.log2(p)
        avg_length += p * encodings[sym].length

    return {
        "total_symbols": total,
        "unique_symbols": len(freq),
        "entropy": round(entropy, 6),
        "average_code_length": round(avg_length, 6),
        "eof_code": str(encodings[PSEUDO_EOF]),
        "symbols": {
            str(sym): {
                "char": chr(sym) if 32 <= sym < 127 else f"\\x{sym:02x}",
                "count": cnt,
                "probability": round(cnt / total, 6),
                "code": str(encodings[sym]),
                "code_length": encodings[sym].length
            }
            for sym, cnt in sorted(freq.items())
        }
    }


def export_encoding_map(data_bytes, out_path):
    enc_map = encoding_map(data_bytes)
    with open(out_path, "w") as f:
        json.dump(enc_map, f, indent=2)
    print(f" Encoding map written to {out_path}")
    return enc_map


def run_one(processor, data, out_base):
    """Compress and decompress ``data``, saving artifacts under ``out_base``."""
    t0 = time.time()
    comp = processor.compress_bytes(data)
    t1 = time.time()
    decomp = processor.decompress_bytes(comp)
    t2 = time.time()

    with open(out_base + ".bin", "wb") as f:
        f.write(comp)
    save_bits_file(comp, out_base + "_bits.txt")
    enc_map = export_encoding_map(data, out_base + "_encoding_map.json")

    return {
        "original_size": len(data),
        "compressed_size": len(comp),
        "compression_ratio": round(len(comp) / len(data), 6),
        "compression_time": round(t1 - t0, 6),
        "decompression_time": round(t2 - t1, 6),
        "entropy": enc_map["entropy"],
        "average_code_length": enc_map["average_code_length"],
        "lossless": decomp == data
    }


# ---------- Main ----------
def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    paths = ensure_dirs()
    out_dir = paths["out_dir"]
    inputs = collect_inputs(argv, paths["data_dir"])

    results = {}
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    processor = HuffProcessor()

    for path in inputs:
        name = os.path.basename(path)
        print(f"\n Reading {name}...")
        with open(path, "rb") as f:
            data = f.read()
        if not data:
            print(f" Skipped {name} (empty).")
            continue
        print(f" Read complete. Size: {len(data):,} bytes")

        base = os.path.join(out_dir, f"huffman_{os.path.splitext(name)[0]}_{ts}")
        r = run_one(processor, data, base)
        results[name] = r
        print(f" Huffman Done. Ratio={r['compression_ratio']:.4f}, Lossless={r['lossless']}")

    if not results:
        print(" Nothing to compress.")
        return results

    # ===================================================
    #  Save & Visualize
    # ===================================================
    results_path = os.path.join(out_dir, f"compression_comparison_{ts}.json")
    with open(results_path, "w") as f:
        json.dump(results, f, indent=2)

    plot_comparisons(results, out_dir)

    print("\n Compression comparison complete!")
    print(f"Results saved in: {results_path}")
    return results


if __name__ == "__main__":
    main()
