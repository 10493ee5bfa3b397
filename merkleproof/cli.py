from __future__ import annotations

import sys
import struct
import argparse
import json as _json

from typing import List, Optional

from merkleproof.builder import construct_proofs
from merkleproof.verifier import VerifierConfig, is_proof_valid, is_proof_valid_unchecked
from merkleproof.errors import (
    MerkleError,
    ConstructionError,
    BufferTooShort,
    SiblingCountExceeded,
)


def _decode_message(msg: str, as_hex: bool) -> bytes:
    """Turn a command-line message into payload bytes.

    Args:
        msg: Message argument as given on the command line.
        as_hex: When True, msg is hex; otherwise it is UTF-8 text.
    """
    if as_hex:
        return bytes.fromhex(msg)
    return msg.encode("utf-8")


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def _parse_hex(value: str, what: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise ValueError(f"{what} is not valid hex")


def cmd_build(messages: list[str], *, depth: int, as_hex: bool = False, fmt: str = "verifier", as_json: bool = False) -> bool:
    """Build a tree over messages and print its root and per-message proofs.

    Args:
        messages: Payloads, in leaf order.
        depth: Tree depth.
        as_hex: Messages are hex-encoded bytes rather than text.
        fmt: "verifier" for count-prefixed proofs, "builder" for depth-prefixed.
        as_json: Emit a single JSON object instead of text lines.
    """
    payloads = [_decode_message(m, as_hex) for m in messages]
    root, proofs = construct_proofs(payloads, depth)
    if fmt == "verifier":
        encoded = [p.to_verifier().pack().hex() for p in proofs]
    elif fmt == "builder":
        encoded = [p.pack().hex() for p in proofs]
    else:
        raise ValueError(f"unknown proof format: {fmt}")

    if as_json:
        print(_json.dumps({
            "root": root.hex(),
            "depth": depth,
            "format": fmt,
            "proofs": [{"message": m, "proof": e} for m, e in zip(messages, encoded)],
        }))
    else:
        print(f"root\t{root.hex()}")
        for m, e in zip(messages, encoded):
            print(f"{e}\t{m}")
    return True


def cmd_verify(
    message: str,
    *,
    root: str,
    proof: str,
    offset: int = 0,
    as_hex: bool = False,
    max_siblings: Optional[int] = None,
    unchecked: bool = False,
) -> bool:
    """Verify one count-prefixed proof against a trusted root.

    Args:
        message: Candidate payload.
        root: Trusted root digest (hex).
        proof: Buffer holding the proof (hex); may contain other proofs too.
        offset: Byte offset of the proof within the buffer.
        as_hex: Message is hex-encoded bytes rather than text.
        max_siblings: Sibling ceiling for the checked path (0 disables it).
        unchecked: Skip bounds checks entirely (trusted input only).

    Prints:
        "OK" when the proof reconstructs root, "FAIL" otherwise.
    """
    payload = _decode_message(message, as_hex)
    root_b = _parse_hex(root, "root")
    buf = _parse_hex(proof, "proof")
    if unchecked:
        ok, end = is_proof_valid_unchecked(buf, offset, root_b, payload)
    else:
        config = VerifierConfig() if max_siblings is None else VerifierConfig(max_siblings=max_siblings or None)
        ok, end = is_proof_valid(buf, offset, root_b, payload, config=config)
    print("OK" if ok else "FAIL")
    if end < len(buf):
        print(f"next proof at offset {end}", file=sys.stderr)
    return ok


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(prog="merkleproof", description="Keccak Merkle tree proofs")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_build = sub.add_parser("build", help="Build a tree and print root and proofs")
    ap_build.add_argument("messages", nargs="+", help="Messages, in leaf order")
    ap_build.add_argument("--depth", type=int, required=True, help="Tree depth (2**depth >= number of messages)")
    ap_build.add_argument("--hex", action="store_true", help="Messages are hex-encoded bytes")
    ap_build.add_argument(
        "--format",
        choices=["verifier", "builder"],
        default="verifier",
        help="Proof encoding: count-prefixed 'verifier' (default) or depth-prefixed 'builder'",
    )
    ap_build.add_argument("--json", action="store_true", help="Emit JSON")

    ap_verify = sub.add_parser("verify", help="Verify a proof against a root")
    ap_verify.add_argument("message", help="Candidate message")
    ap_verify.add_argument("--root", required=True, help="Trusted root digest (hex)")
    ap_verify.add_argument("--proof", required=True, help="Count-prefixed proof buffer (hex)")
    ap_verify.add_argument("--offset", type=int, default=0, help="Offset of the proof within the buffer")
    ap_verify.add_argument("--hex", action="store_true", help="Message is hex-encoded bytes")
    ap_verify.add_argument("--max-siblings", type=_non_negative_int, default=None, help="Reject proofs with more siblings (0 = no limit)")
    ap_verify.add_argument("--unchecked", action="store_true", help="Skip bounds checks (trusted input only)")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "build":
            cmd_build(args.messages, depth=args.depth, as_hex=args.hex, fmt=args.format, as_json=args.json)
        elif args.cmd == "verify":
            ok = cmd_verify(
                args.message,
                root=args.root,
                proof=args.proof,
                offset=args.offset,
                as_hex=args.hex,
                max_siblings=args.max_siblings,
                unchecked=args.unchecked,
            )
            sys.exit(0 if ok else 1)
        else:
            raise RuntimeError("Unknown command")
    except ConstructionError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Hint: increase --depth or pass fewer messages.", file=sys.stderr)
        sys.exit(2)
    except (BufferTooShort, SiblingCountExceeded, struct.error, IndexError) as e:
        # unchecked reads past the buffer surface as struct.error or IndexError
        print(f"Error: malformed proof: {e}", file=sys.stderr)
        sys.exit(2)
    except (MerkleError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
