"""
RSAVault - Main Entry Point

Command-line front end and benchmarking harness.

Benchmarks (one elapsed time in microseconds per line):
    rsavault genkey <bits> [--runs N]
    rsavault encrypt <bits> <msglen> [--runs N]

Scripted use:
    rsavault keygen <bits>
    rsavault encrypt-text --pub KEY TEXT
    rsavault decrypt --pub KEY --priv KEY CIPHERTEXT
    rsavault sign --pub KEY --priv KEY TEXT
    rsavault verify --pub KEY MESSAGE SIGNATURE

Exit status: 0 success, 1 decoding failure / bad signature, 2 bad input.
"""

import argparse
import secrets
import string
import sys
from typing import List, Optional

from .config import RSAConfig
from .core_crypto.barrett import barrett_constant_for
from .errors import DecodingError, ParseError, ValidationError
from .logging import configure, get_logger
from .protocol.text_rsa import (
    decrypt, encrypt, format_keys, generate_keys, parse_keys, parse_public_key, sign, verify,
)
from .utils import count_time


logger = get_logger(__name__)

_ALPHANUMERIC = string.ascii_letters + string.digits


def _random_message(length: int) -> str:
    return ''.join(secrets.choice(_ALPHANUMERIC) for _ in range(length))


def bench_genkey(bits: int, runs: int, rounds: int) -> List[int]:
    """Time `runs` key generations; returns microseconds per run."""
    timings = []
    for _ in range(runs):
        micros, _ = count_time(lambda: generate_keys(bits, rounds))
        timings.append(micros)
    return timings


def bench_encrypt(bits: int, msglen: int, runs: int, rounds: int) -> List[int]:
    """Time `runs` encryptions of fresh random messages under one key."""
    n, _ = generate_keys(bits, rounds)
    constant = barrett_constant_for(n)
    timings = []
    for _ in range(runs):
        message = _random_message(msglen)
        micros, _ = count_time(lambda: encrypt(message, n, constant))
        timings.append(micros)
    return timings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rsavault',
        description='Textbook RSA on a from-scratch BigInt stack.',
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='enable debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('genkey', help='benchmark key generation')
    p.add_argument('bits')
    p.add_argument('--runs', type=int, default=None)

    p = sub.add_parser('encrypt', help='benchmark encryption of random text')
    p.add_argument('bits')
    p.add_argument('msglen')
    p.add_argument('--runs', type=int, default=None)

    p = sub.add_parser('keygen', help='print a new public/private key pair')
    p.add_argument('bits')

    p = sub.add_parser('encrypt-text', help='encrypt text with a public key')
    p.add_argument('--pub', required=True)
    p.add_argument('text')

    p = sub.add_parser('decrypt', help='decrypt a ciphertext')
    p.add_argument('--pub', required=True)
    p.add_argument('--priv', required=True)
    p.add_argument('ciphertext')

    p = sub.add_parser('sign', help='sign text with a private key')
    p.add_argument('--pub', required=True)
    p.add_argument('--priv', required=True)
    p.add_argument('text')

    p = sub.add_parser('verify', help='verify a signature')
    p.add_argument('--pub', required=True)
    p.add_argument('message')
    p.add_argument('signature')

    return parser


def _int_arg(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ParseError(f"parse arg failed: {name} must be an integer, got {value!r}")


def run(args: argparse.Namespace, config: RSAConfig) -> int:
    rounds = config.miller_rabin_rounds
    runs = getattr(args, 'runs', None) or config.benchmark_runs

    if args.command == 'genkey':
        for micros in bench_genkey(_int_arg(args.bits, 'bits'), runs, rounds):
            print(micros)
    elif args.command == 'encrypt':
        timings = bench_encrypt(_int_arg(args.bits, 'bits'),
                                _int_arg(args.msglen, 'msglen'), runs, rounds)
        for micros in timings:
            print(micros)
    elif args.command == 'keygen':
        n, d = generate_keys(_int_arg(args.bits, 'bits'), rounds)
        pub_key, priv_key = format_keys(n, d)
        print(pub_key)
        print(priv_key)
    elif args.command == 'encrypt-text':
        n = parse_public_key(args.pub)
        print(encrypt(args.text, n, barrett_constant_for(n)))
    elif args.command == 'decrypt':
        n, d, _ = parse_keys(args.pub, args.priv)
        print(decrypt(args.ciphertext, n, barrett_constant_for(n), d))
    elif args.command == 'sign':
        n, d, _ = parse_keys(args.pub, args.priv)
        print(sign(args.text, n, barrett_constant_for(n), d))
    elif args.command == 'verify':
        n = parse_public_key(args.pub)
        ok, recovered = verify(args.message, args.signature, n, barrett_constant_for(n))
        print(ok)
        print(recovered)
        return 0 if ok else 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for RSAVault."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure(args.verbose)

    try:
        config = RSAConfig.from_env()
        return run(args, config)
    except DecodingError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1
    except (ParseError, ValidationError) as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
