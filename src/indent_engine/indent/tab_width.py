"""Infer the buffer's indent unit width from nearby indentation."""

from __future__ import annotations

import math
from typing import List, Sequence

from indent_engine.buffer import TextSource

SAMPLE_SIZE = 2


def collect_indent_samples(
    source: TextSource, start_line: int, *, limit: int = SAMPLE_SIZE
) -> List[int]:
    """Scan backward from ``start_line`` for distinct nonzero indent lengths.

    Stops after ``limit`` distinct values or at the first line.
    """

    samples: List[int] = []
    for number in range(start_line, -1, -1):
        length = source.line_information(number).indent_length
        if length == 0 or length in samples:
            continue
        samples.append(length)
        if len(samples) >= limit:
            break
    return samples


def tab_width_from_samples(samples: Sequence[int], default: int) -> int:
    """Return the GCD of the first two samples, or ``default``.

    Fewer than two samples, or coprime samples such as 3 and 4, carry no
    usable unit.
    """

    if len(samples) < SAMPLE_SIZE:
        return default
    width = math.gcd(samples[0], samples[1])
    if width != 1:
        return width
    return default


def infer_tab_width(source: TextSource, start_line: int, default: int) -> int:
    return tab_width_from_samples(collect_indent_samples(source, start_line), default)


__all__ = ["collect_indent_samples", "tab_width_from_samples", "infer_tab_width"]
