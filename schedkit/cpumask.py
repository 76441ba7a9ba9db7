"""CPU selection and cpumask helpers built on :class:`Bitmap`."""

from __future__ import annotations

from collections.abc import Iterable

from schedkit.bitmap import WORD_BITS, Bitmap


class NoCpuAvailableError(LookupError):
    """Raised when a mask has no CPU left to pick."""


def pick_any_cpu_from(mask: Bitmap, start: int) -> tuple[int, int]:
    """Claim a CPU from ``mask``, scanning words from ``start`` round-robin.

    The CPU is cleared from the mask. Returns ``(cpu, word_index)``; the
    word index is the start to pass next time.
    """
    nwords = len(mask.words)
    for step in range(nwords):
        ind = (start + step) % nwords
        word = mask.words[ind]
        if not word:
            continue
        bit = (word & -word).bit_length() - 1
        mask.words[ind] = word & ~(1 << bit)
        return ind * WORD_BITS + bit, ind
    raise NoCpuAvailableError("no CPU available in mask")


def pick_any_cpu(mask: Bitmap) -> int:
    """Claim and return the lowest CPU in ``mask``."""
    cpu, _ = pick_any_cpu_from(mask, 0)
    return cpu


def vacate_cpu(mask: Bitmap, cpu: int) -> None:
    """Return ``cpu`` to ``mask``."""
    if not 0 <= cpu < mask.nr_cpu_ids:
        raise ValueError(f"invalid cpu {cpu}")
    mask.set_cpu(cpu)


def _mask_like(like: Bitmap, cpus: Iterable[int]) -> Bitmap:
    tmp = Bitmap(like.nr_cpu_ids)
    limit = len(tmp.words) * WORD_BITS
    for cpu in cpus:
        if cpu < 0:
            raise ValueError(f"invalid cpu {cpu}")
        if cpu < limit:
            tmp.set_cpu(cpu)
    return tmp


def subset_cpumask(big: Bitmap, cpus: Iterable[int]) -> bool:
    """Return whether every CPU of ``cpus`` that fits the mask is in ``big``."""
    return big.contains(_mask_like(big, cpus))


def intersects_cpumask(mask: Bitmap, cpus: Iterable[int]) -> bool:
    """Return whether ``mask`` shares any CPU with ``cpus``."""
    return mask.intersects(_mask_like(mask, cpus))


def and_cpumask(dst: Bitmap, mask: Bitmap, cpus: Iterable[int]) -> None:
    """Store the CPUs that are both in ``mask`` and ``cpus`` into ``dst``."""
    dst.and_(mask, _mask_like(mask, cpus))