"""Probability that a random draw matches a selected set of SNPs."""

from __future__ import annotations

import struct
import sys
from typing import Optional, Sequence

_USAGE = "Syntax:  match-probability <n> <m> <f> <p>"


def _single(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def partial_factorial(low: int, high: int, divider: float) -> float:
    """Product of ``i / divider`` for ``i`` from ``low + 1`` to ``high``."""
    result = 1.0
    for i in range(low + 1, high + 1):
        result = result * i / divider
    return result


def match_probability(n: int, m: int, f: int, p: float) -> float:
    """Probability for ``n`` SNPs of which a fraction ``p`` are drawn and ``f`` are fixed.

    ``m`` is accepted for the command's argument layout but does not enter
    the result.
    """
    if n <= 0:
        raise ValueError("n must be positive")
    drawn = int(_single(_single(p) * n))
    result = partial_factorial(drawn - f, drawn, n)
    result *= partial_factorial(n - drawn - (drawn - f), n - drawn, n)
    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the probability for ``<n> <m> <f> <p>`` given on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 4:
        print(_USAGE, file=sys.stderr)
        return 1
    try:
        n, m, f = (int(a, 10) for a in args[:3])
        p = float(args[3])
        result = match_probability(n, m, f, p)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(f" Result: {result:g}")
    return 0


if __name__ == "__main__":
    sys.exit(main())