"""
Benchmark: recdiff reconciliation cost on growing lists.

The reconciler pairs records with a linear scan of the unmatched pool,
so its cost grows with len(old) × len(new).  This script makes that
visible and shows what the keyed output buys over a positional diff.

The point is NOT "we're fast" — the point is:
    a reordered list with one edit yields ONE change, not N.
"""

import os
import random
import sys
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from recdiff.core import LENGTH_ONLY, compare, reconcile


# ═══════════════════════════════════════════════════════════════════
#  TEST DATA
# ═══════════════════════════════════════════════════════════════════

CONFIG_A = {
    "server": {"host": "0.0.0.0", "port": 443, "tls": True, "workers": 4},
    "database": {"host": "db.internal", "port": 5432, "name": "production", "ssl": True},
    "logging": {"level": "WARN", "format": "json", "outputs": ["stdout", "file"]},
    "users": [
        {"id": 1, "name": "Alice", "roles": ["admin"]},
        {"id": 2, "name": "Bob", "roles": ["dev"]},
        {"id": 3, "name": "Carol", "roles": ["dev", "ops"]},
    ],
}

CONFIG_B = {
    "server": {"host": "0.0.0.0", "port": 8080, "tls": False, "workers": 8},
    "database": {"host": "db.staging", "port": 5432, "name": "staging", "ssl": False},
    "logging": {"level": "DEBUG", "format": "text", "outputs": ["stdout"]},
    "users": [
        {"id": 3, "name": "Carol", "roles": ["dev"]},
        {"id": 1, "name": "Alice", "roles": ["admin"]},
        {"id": 4, "name": "Dave", "roles": []},
    ],
}


def make_rows(n: int, seed: int) -> list[dict]:
    rng = random.Random(seed)
    return [
        {"id": i, "name": f"row-{i}", "score": rng.randint(0, 100), "tags": ["a"] * rng.randint(0, 3)}
        for i in range(n)
    ]


def shuffled_with_edits(rows: list[dict], edits: int, seed: int) -> list[dict]:
    rng = random.Random(seed)
    out = [dict(r) for r in rows]
    for r in rng.sample(out, min(edits, len(out))):
        r["score"] += 1
    rng.shuffle(out)
    return out


def timed(fn, *args, repeat: int = 3) -> float:
    best = float("inf")
    for _ in range(repeat):
        t0 = time.perf_counter()
        fn(*args)
        best = min(best, time.perf_counter() - t0)
    return best


# ═══════════════════════════════════════════════════════════════════
#  §1  CONFIG DIFF
# ═══════════════════════════════════════════════════════════════════

print("=" * 70)
print("  §1  NESTED CONFIG DIFF")
print("=" * 70)

for change in compare(CONFIG_A, CONFIG_B):
    print(f"    {change!r}")

t = timed(compare, CONFIG_A, CONFIG_B, repeat=1000)
print(f"\n  compare(CONFIG_A, CONFIG_B): {t * 1e6:.1f} µs")


# ═══════════════════════════════════════════════════════════════════
#  §2  KEYED vs LENGTH-ONLY
# ═══════════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §2  KEYED RECONCILIATION vs LENGTH-ONLY")
print("=" * 70)

rows = make_rows(200, seed=1)
edited = shuffled_with_edits(rows, edits=3, seed=2)

keyed = compare(rows, edited)
length_only = compare(rows, edited, LENGTH_ONLY)
print("  200 rows, shuffled, 3 edited")
print(f"    keyed changes:       {len(keyed)}")
print(f"    length-only changes: {len(length_only)}")


# ═══════════════════════════════════════════════════════════════════
#  §3  SCALING
# ═══════════════════════════════════════════════════════════════════

print()
print("=" * 70)
print("  §3  RECONCILE SCALING  (expected ~4× per doubling)")
print("=" * 70)
print(f"  {'rows':>6}  {'seconds':>10}  {'ratio':>6}")

previous = None
for n in (125, 250, 500, 1000, 2000):
    old = make_rows(n, seed=n)
    new = shuffled_with_edits(old, edits=n // 10, seed=n + 1)
    t = timed(reconcile, old, new, repeat=1)
    ratio = f"{t / previous:.1f}" if previous else "-"
    print(f"  {n:>6}  {t:>10.4f}  {ratio:>6}")
    previous = t
