import argparse
import logging
import sys
from dataclasses import replace

from benchmarks.run_benchmarks import run_all
from src.dsa_ref.config import DSSConfig
from src.dsa_ref.errors import DSSError


def run_tests(config):
    print("[1/4] FUNCTIONAL CORRECTNESS")
    from src.dsa_ref.keys import SigningKey
    from src.dsa_ref.params import DomainParameters, generate_parameters, validate_parameters

    params = validate_parameters(generate_parameters(config))
    print(f"  [OK] Domain parameters valid (p: {params.p.bit_length()} bits, q: {params.q.bit_length()} bits)")

    sk = SigningKey.generate(params)
    result = sk.sign("hello")
    assert sk.verifying_key.verify("hello", result.signature)
    assert not sk.verifying_key.verify("hello!", result.signature)
    print("  [OK] Random-nonce sign / verify correct")

    det1 = sk.sign("hello", nonce_mode="deterministic")
    det2 = sk.sign("hello", nonce_mode="deterministic")
    assert det1.signature == det2.signature
    print("  [OK] RFC 6979 deterministic nonce stable")

    toy = DomainParameters(23, 11, 4)
    toy_sig = SigningKey(toy, 5).sign("hello", nonce=3).signature
    assert toy_sig == (7, 2)
    print("  [OK] Toy vector p=23 q=11 g=4 x=5 k=3 -> (7, 2)")

    print("\n[2/4] SECURITY PROPERTY CHECKS")
    from src.attacks.edge_cases import demonstrate_invalid_signatures, demonstrate_nonce_reuse

    try:
        demo = demonstrate_nonce_reuse("Hello World", "Secret Message", 12345 % (params.q - 1) + 1,
                                       params, sk.key_pair)
    except DSSError as exc:
        print(f"  [--] Nonce reuse demo skipped: {exc}")
    else:
        if demo.attack_succeeded:
            print("  [OK] Nonce reuse leaks the private key (attack reproduced)")
        else:
            print(f"  [--] Nonce reuse demo inconclusive: {demo.recovery.reason}")

    cases = demonstrate_invalid_signatures("hello", params, sk.key_pair)
    rejected = sum(case.rejected for case in cases)
    print(f"  [OK] Malformed signatures rejected: {rejected}/{len(cases)}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="DSS Lab Validation Master Script")
    parser.add_argument("--quick", action="store_true", help="Run a fast iteration benchmark for development")
    parser.add_argument("--skip-benchmarks", action="store_true", help="Only run the functional checks")
    parser.add_argument("--q-bits", type=int, default=None, help="Bit length of q (default from DSS_Q_BITS or 16)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine retries at DEBUG level")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = DSSConfig.from_env()
    if args.q_bits is not None:
        try:
            config = replace(config, q_bits=args.q_bits)
        except ValueError as exc:
            parser.error(str(exc))

    try:
        run_tests(config)
    except AssertionError:
        print("  [FAIL] functional check failed", file=sys.stderr)
        raise

    if args.skip_benchmarks:
        sys.exit(0)
    if args.quick:
        run_all(config, n_eff=100, n_attack=20, prime_bound=5000)
    else:
        run_all(config, n_eff=1000, n_attack=200, prime_bound=50000)
