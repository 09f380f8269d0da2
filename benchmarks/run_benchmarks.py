"""
DSS Lab: Benchmark Runner

  1. Timing with warmup + percentile reporting for every engine operation
  2. Nonce-reuse attack success rate over freshly generated key material
  3. Miller-Rabin agreement with a numpy sieve of Eratosthenes
All randomness in 2 and 3 comes from random.Random(SEED), so reruns match.
"""
import csv
import json
import math
import os
import random
import statistics
import time

import numpy as np

from src.attacks.nonce_reuse import recover_key_from_reused_nonce
from src.dsa_ref.config import DEFAULT_CONFIG
from src.dsa_ref.errors import InvalidNonce, NotRecoverable
from src.dsa_ref.keys import SigningKey, generate_key_pair
from src.dsa_ref.numbertheory import is_prime
from src.dsa_ref.params import generate_parameters

SEED = 42
RESULTS_DIR = "results"


# ─────────────────────────────────────────────────────────────────────────────
# Timing with warmup + percentiles
# ─────────────────────────────────────────────────────────────────────────────
def measure_time(func, *args, n_warmup=10, n_measure=100):
    all_t = []
    for _ in range(n_warmup + n_measure):
        t0 = time.perf_counter()
        func(*args)
        t1 = time.perf_counter()
        all_t.append((t1 - t0) * 1000)

    measured = all_t[n_warmup:]
    mean = statistics.mean(measured)
    std  = statistics.stdev(measured) if len(measured) > 1 else 0.0
    med  = statistics.median(measured)
    p5   = float(np.percentile(measured, 5))
    p95  = float(np.percentile(measured, 95))
    p99  = float(np.percentile(measured, 99))
    se   = std / math.sqrt(len(measured))
    return mean, std, med, p5, p95, p99, mean - 1.96*se, mean + 1.96*se


def pack(t, n):
    mean, std, med, p5, p95, p99, lo, hi = t
    return {"n": n, "mean": mean, "std": std, "median": med,
            "p5": p5, "p95": p95, "p99": p99, "ci95_lo": lo, "ci95_hi": hi}


def run_efficiency_benchmarks(config=DEFAULT_CONFIG, n_eff=1000, n_gen=10):
    print(f"\n[3/4] BENCHMARKS (ops: n={n_eff} w/warmup | parameter generation: n={n_gen})")
    print("-" * 70)

    params = generate_parameters(config)
    sk = SigningKey.generate(params)
    msg = "DSS Lab benchmark message"

    print(f"  Parameter Generation (n={n_gen})...")
    pg = measure_time(generate_parameters, config, n_warmup=2, n_measure=n_gen)

    print(f"  Key Generation (n={n_eff})...")
    kg = measure_time(generate_key_pair, params, n_warmup=50, n_measure=n_eff)

    print(f"  Random-Nonce Sign (n={n_eff})...")
    rs = measure_time(sk.sign, msg, n_warmup=50, n_measure=n_eff)

    print(f"  RFC 6979 Sign (n={n_eff})...")
    ds = measure_time(sk.sign, msg, "deterministic", n_warmup=50, n_measure=n_eff)

    sig = sk.sign(msg).signature
    print(f"  Verification (n={n_eff})...")
    ver = measure_time(sk.verifying_key.verify, msg, sig, n_warmup=50, n_measure=n_eff)

    k = 1 + (params.q // 3)
    sig1 = sk.sign(msg, nonce=k).signature
    sig2 = sk.sign(msg + "!", nonce=k).signature
    print(f"  Nonce-Reuse Recovery (n={n_eff})...")
    rec = measure_time(recover_key_from_reused_nonce, msg, sig1, msg + "!", sig2, params,
                       n_warmup=50, n_measure=n_eff)

    results = {
        "parameter_generation": pack(pg, n_gen),
        "key_generation":       pack(kg, n_eff),
        "random_sign":          pack(rs, n_eff),
        "deterministic_sign":   pack(ds, n_eff),
        "verification":         pack(ver, n_eff),
        "nonce_recovery":       pack(rec, n_eff),
    }

    hdr = f"  {'Op':<22} {'n':>5} {'Mean':>8} {'Std':>8} {'Median':>8} {'p5':>8} {'p95':>8} {'CI95':>18}"
    print(hdr)
    print("  " + "-" * (len(hdr) - 2))
    for name, m in results.items():
        label = name.replace('_', ' ').title()
        print(f"  {label:<22} {m['n']:>5} {m['mean']:>8.3f} {m['std']:>8.3f} "
              f"{m['median']:>8.3f} {m['p5']:>8.3f} {m['p95']:>8.3f} "
              f"[{m['ci95_lo']:.3f}, {m['ci95_hi']:.3f}]")
    return results


# ─────────────────────────────────────────────────────────────────────────────
# Nonce-reuse attack experiment
# ─────────────────────────────────────────────────────────────────────────────
def run_attack_experiment(config=DEFAULT_CONFIG, n_attack=200):
    rng = random.Random(SEED)
    recovered = collisions = degenerate = 0

    for trial in range(n_attack):
        params = generate_parameters(config, rng)
        sk = SigningKey.generate(params, rng)
        k = rng.randrange(1, params.q)
        m1, m2 = f"trial {trial} message A", f"trial {trial} message B"
        try:
            sig1 = sk.sign(m1, nonce=k).signature
            sig2 = sk.sign(m2, nonce=k).signature
        except InvalidNonce:
            degenerate += 1
            continue
        try:
            result = recover_key_from_reused_nonce(m1, sig1, m2, sig2, params)
        except NotRecoverable:
            # H(m1) == H(m2) mod q; expected about n/q times
            collisions += 1
            continue
        if result.private_key == sk.key_pair.private_key:
            recovered += 1

    usable = n_attack - collisions - degenerate
    return {
        "trials": n_attack,
        "recovered": recovered,
        "digest_collisions": collisions,
        "degenerate_nonces": degenerate,
        "success_rate": recovered / usable if usable else 0.0,
    }


# ─────────────────────────────────────────────────────────────────────────────
# Miller-Rabin vs sieve
# ─────────────────────────────────────────────────────────────────────────────
def sieve(bound):
    flags = np.ones(bound, dtype=bool)
    flags[:2] = False
    for i in range(2, int(math.isqrt(bound - 1)) + 1):
        if flags[i]:
            flags[i * i::i] = False
    return flags


def run_primality_experiment(prime_bound=50000, rounds=DEFAULT_CONFIG.rounds):
    rng = random.Random(SEED)
    truth = sieve(prime_bound)
    mr = np.array([is_prime(n, rounds, rng) for n in range(prime_bound)])
    false_pos = int(np.sum(mr & ~truth))
    false_neg = int(np.sum(~mr & truth))
    return {
        "bound": prime_bound,
        "rounds": rounds,
        "primes": int(np.sum(truth)),
        "false_positives": false_pos,
        "false_negatives": false_neg,
        "composites": int(prime_bound - np.sum(truth)),
    }


def run_property_experiments(config=DEFAULT_CONFIG, n_attack=200, prime_bound=50000):
    print(f"\n[4/4] PROPERTY EXPERIMENTS")
    print(f"  Seed: {SEED} (deterministic)  |  Attack trials: {n_attack}  |  Sieve bound: {prime_bound}")
    print("-" * 65)

    attack = run_attack_experiment(config, n_attack)
    primality = run_primality_experiment(prime_bound, config.rounds)

    print(f"  {'Nonce-reuse recoveries':<30} {attack['recovered']:>8} / {attack['trials']}")
    print(f"  {'Digest collisions mod q':<30} {attack['digest_collisions']:>8}")
    print(f"  {'Attack success rate':<30} {attack['success_rate']:>8.2%}")
    print(f"  {'Miller-Rabin false positives':<30} {primality['false_positives']:>8}")
    print(f"  {'Miller-Rabin false negatives':<30} {primality['false_negatives']:>8}")
    return {"nonce_reuse": attack, "primality": primality}


# ─────────────────────────────────────────────────────────────────────────────
# Export
# ─────────────────────────────────────────────────────────────────────────────
def write_csv(filename, fieldnames, data):
    os.makedirs(os.path.dirname(filename), exist_ok=True)
    with open(filename, 'w', newline='') as f:
        w = csv.DictWriter(f, fieldnames=fieldnames)
        w.writeheader()
        w.writerows(data)


def run_all(config=DEFAULT_CONFIG, n_eff=1000, n_attack=200, prime_bound=50000, results_dir=RESULTS_DIR):
    os.makedirs(results_dir, exist_ok=True)

    eff = run_efficiency_benchmarks(config, n_eff=n_eff)
    props = run_property_experiments(config, n_attack, prime_bound)

    print("\nEXPORTING")
    all_res = {"efficiency": eff, "properties": props}
    with open(os.path.join(results_dir, "benchmark_results.json"), "w") as f:
        json.dump(all_res, f, indent=4)

    eff_rows = [{"Operation": k, **v} for k, v in eff.items()]
    write_csv(os.path.join(results_dir, "efficiency.csv"),
              ["Operation", "n", "mean", "std", "median", "p5", "p95", "p99", "ci95_lo", "ci95_hi"],
              eff_rows)

    a, p = props["nonce_reuse"], props["primality"]
    prop_rows = [
        {"Metric": "Nonce-reuse success rate",     "Value": a["success_rate"]},
        {"Metric": "Digest collisions mod q",      "Value": a["digest_collisions"]},
        {"Metric": "Miller-Rabin false positives", "Value": p["false_positives"]},
        {"Metric": "Miller-Rabin false negatives", "Value": p["false_negatives"]},
    ]
    write_csv(os.path.join(results_dir, "properties.csv"), ["Metric", "Value"], prop_rows)
    print(f"Results written to {results_dir}/ directory.")
    return all_res
