"""
HashVault - Main Entry Point

Command line front end for the hash core:

    python -m hashvault.main hash sha256 "abc"
    python -m hashvault.main hash sha512 --file archive.tar
    python -m hashvault.main hmac sha256 "key" "message"
    python -m hashvault.main pbkdf2 "password" "salt" 4096 32 --algorithm sha1
    python -m hashvault.main selftest

Exit status is 0 on success, 1 if a self-test fails, 2 on usage errors
(including unknown algorithms).
"""

import argparse
import sys
from typing import List, Optional

from .core_crypto.algorithms import UnsupportedAlgorithmError, algorithm_names
from .core_crypto.backend import DEFAULT_BACKEND, NATIVE, SOFTWARE
from .core_crypto.registry import get_hash_function


FILE_CHUNK_SIZE = 64 * 1024

# (label, callable producing hex, expected hex)
SELF_TEST_VECTORS = [
    ("SHA-1('abc')", lambda: get_hash_function('sha1')("abc"),
     "a9993e364706816aba3e25717850c26c9cd0d89d"),
    ("SHA-224('abc')", lambda: get_hash_function('sha224')("abc"),
     "23097d223405d8228642a477bda255b32aadbce4bda0b3f7e36c9da7"),
    ("SHA-256('')", lambda: get_hash_function('sha256')(""),
     "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"),
    ("SHA-256('abc')", lambda: get_hash_function('sha256')("abc"),
     "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"),
    ("SHA-384('abc')", lambda: get_hash_function('sha384')("abc"),
     "cb00753f45a35e8bb5a03d699ac65007272c32ab0eded163"
     "1a8b605a43ff5bed8086072ba1e7cc2358baeca134c825a7"),
    ("SHA-512('abc')", lambda: get_hash_function('sha512')("abc"),
     "ddaf35a193617abacc417349ae20413112e6fa4e89a97ea20a9eeee64b55d39a"
     "2192992a274fc1a836ba3c23a3feebbd454d4423643ce80e2a9ac94fa54ca49f"),
    ("HMAC-SHA-256 (RFC 4231 #2)",
     lambda: get_hash_function('sha256').hmac("Jefe", "what do ya want for nothing?"),
     "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843"),
    ("PBKDF2-HMAC-SHA-1 (RFC 6070, c=2)",
     lambda: get_hash_function('sha1').pbkdf2("password", "salt", 2, 20).hex(),
     "ea6c014dc72d6f8ccd1ed92ace1d41f0d8de8957"),
]


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="hashvault",
        description="SHA-1 / SHA-2 hashing, HMAC and PBKDF2",
    )
    ap.add_argument("--backend", choices=(SOFTWARE, NATIVE), default=DEFAULT_BACKEND,
                    help=f"Engine backend (default {DEFAULT_BACKEND})")

    sub = ap.add_subparsers(dest="cmd", required=True)

    p_hash = sub.add_parser("hash", help="Hash text or a file")
    p_hash.add_argument("algorithm", help=f"One of: {', '.join(algorithm_names())}")
    p_hash.add_argument("text", nargs="?", default=None)
    p_hash.add_argument("--file", default=None, help="Hash the contents of a file instead")

    p_hmac = sub.add_parser("hmac", help="HMAC of a text message")
    p_hmac.add_argument("algorithm")
    p_hmac.add_argument("key")
    p_hmac.add_argument("text")

    p_kdf = sub.add_parser("pbkdf2", help="Derive a key with PBKDF2-HMAC")
    p_kdf.add_argument("password")
    p_kdf.add_argument("salt")
    p_kdf.add_argument("iterations", type=int)
    p_kdf.add_argument("dk_len", type=int)
    p_kdf.add_argument("--algorithm", default="sha256")

    sub.add_parser("selftest", help="Check published test vectors")

    return ap


def _hash_file(function, path: str) -> str:
    engine = function.create()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(FILE_CHUNK_SIZE), b''):
            engine.update(chunk)
    return engine.hex()


def run_self_test() -> bool:
    """Print PASS/FAIL for each published vector; True if all pass."""
    print("=" * 60)
    print("HashVault Self-Test")
    print("=" * 60)

    all_passed = True
    for label, compute, expected in SELF_TEST_VECTORS:
        passed = compute() == expected
        all_passed = all_passed and passed
        print(f"  {label}: {'✓ PASS' if passed else '✗ FAIL'}")

    print("=" * 60)
    print("All tests passed!" if all_passed else "Some tests FAILED!")
    return all_passed


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for HashVault."""
    ap = _build_parser()
    args = ap.parse_args(argv)

    try:
        if args.cmd == "selftest":
            return 0 if run_self_test() else 1

        if args.cmd == "hash":
            if args.file is not None and args.text is not None:
                print("Provide either text or --file, not both.", file=sys.stderr)
                return 2
            function = get_hash_function(args.algorithm, args.backend)
            if args.file is not None:
                print(_hash_file(function, args.file))
            elif args.text is not None:
                print(function(args.text))
            else:
                print("Provide text or --file.", file=sys.stderr)
                return 2
            return 0

        if args.cmd == "hmac":
            function = get_hash_function(args.algorithm, args.backend)
            print(function.hmac(args.key, args.text))
            return 0

        if args.cmd == "pbkdf2":
            function = get_hash_function(args.algorithm, args.backend)
            print(function.pbkdf2(args.password, args.salt, args.iterations, args.dk_len).hex())
            return 0

        print("Unknown command.", file=sys.stderr)
        return 2

    except UnsupportedAlgorithmError as e:
        print(f"Unsupported algorithm: {e}", file=sys.stderr)
        return 2
    except (ValueError, TypeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
