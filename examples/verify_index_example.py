#!/usr/bin/env python3

# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# examples/verify_index_example.py

"""
Example: verify a hash index, then split-compare each mismatched file
against a second copy kept under another root.

Usage: verify_index_example.py INDEX MIRROR_ROOT
"""

import sys
from pathlib import Path, PureWindowsPath

from file_verify import VerificationStats, compare_splits, load_index, verify_items


def mirror_path(original: str, index_root: str, mirror_root: Path) -> Path:
    """Map a path recorded under the index root onto the mirror."""
    try:
        rel = PureWindowsPath(original).relative_to(PureWindowsPath(index_root))
    except ValueError:
        return mirror_root / PureWindowsPath(original).name
    return mirror_root.joinpath(*rel.parts)


def run_example(index_path: Path, mirror_root: Path, workers: int = 4):
    run, items = load_index(index_path)
    print(f"Index root: {run.root}  algorithm: {run.algorithm}  items: {len(items):,}")

    stats = VerificationStats(total=len(items), total_bytes=run.total_bytes)
    stats.start()
    result = verify_items(run.algorithm, items, stats, workers=workers)
    stats.stop()

    snap = stats.snapshot()
    print(f"ok={snap.ok} mismatched={snap.hash_mismatches} "
          f"missing={snap.stat_errors} resized={snap.size_mismatches} "
          f"in {snap.duration_ms / 1000:.1f}s")

    for m in result.mismatches:
        copy = mirror_path(m.path, run.root or "", mirror_root)
        if not copy.exists():
            print(f"  {m.path}: no mirror copy")
            continue

        cmp = compare_splits([m.path, copy], 16, run.algorithm)
        if cmp.identical:
            print(f"  {m.path}: mirror copy matches the live file")
        else:
            ranges = ", ".join(
                f"{cmp.windows[s].start}-{cmp.windows[s].end}"
                for s in cmp.differing_splits
            )
            print(f"  {m.path}: differs in bytes {ranges or 'tail only'}")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        sys.exit(__doc__)
    run_example(Path(sys.argv[1]), Path(sys.argv[2]))
