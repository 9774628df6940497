"""Dust and gas bands of the protoplanetary disk.

The disk is an ordered arena of :class:`DustBand` records that always
partitions ``[0, outer_edge]`` into contiguous, ascending, non-overlapping
intervals.  Each band carries two flags: whether dust and whether gas is
still present.  Sweeping a protoplanet's influence zone clears the flags
over that range, splitting bands at the zone edges, after which
neighbouring bands with identical flags are merged again.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

__all__ = ["DustBand", "DustDisk"]

logger = logging.getLogger(__name__)


@dataclass
class DustBand:
    """Radial band ``[inner, outer]`` in AU."""

    inner: float
    outer: float
    dust: bool = True
    gas: bool = True

    @property
    def width(self) -> float:
        return self.outer - self.inner

    def same_flags(self, other: "DustBand") -> bool:
        return self.dust == other.dust and self.gas == other.gas


class DustDisk:
    """Owned band arena mutated only by the accretion engine.

    Parameters
    ----------
    outer_edge:
        Outer radius of the dusty disk in AU (the stellar dust limit).
    inner_bound, outer_bound:
        Radii bracketing the orbits at which protoplanets may be injected.
        ``dust_left`` only considers bands touching this range.
    """

    def __init__(self, outer_edge: float, inner_bound: float, outer_bound: float) -> None:
        self.outer_edge = float(outer_edge)
        self.inner_bound = float(inner_bound)
        self.outer_bound = float(outer_bound)
        self.bands: List[DustBand] = [DustBand(0.0, self.outer_edge, dust=True, gas=True)]
        self.dust_left = True

    def __len__(self) -> int:
        return len(self.bands)

    def has_dust(self, inner: float, outer: float) -> bool:
        """Return ``True`` if any band intersecting ``[inner, outer]`` has dust."""

        for band in self.bands:
            if band.outer < inner:
                continue
            if band.inner >= outer:
                break
            if band.dust:
                return True
        return False

    def consume(self, inner: float, outer: float, retain_gas: bool) -> None:
        """Clear dust (and gas unless ``retain_gas``) over ``[inner, outer]``.

        Parameters
        ----------
        inner, outer:
            Swept range in AU.  Negative radii are clamped to zero.
        retain_gas:
            ``True`` when the sweeping body stayed below its critical mass
            and therefore leaves the gas in place.
        """
        inner = max(inner, 0.0)
        if outer <= inner:
            return
        updated: List[DustBand] = []
        for band in self.bands:
            if band.outer <= inner or band.inner >= outer:
                updated.append(band)
                continue
            if band.inner < inner:
                updated.append(DustBand(band.inner, inner, band.dust, band.gas))
            updated.append(
                DustBand(
                    max(band.inner, inner),
                    min(band.outer, outer),
                    dust=False,
                    gas=band.gas and retain_gas,
                )
            )
            if band.outer > outer:
                updated.append(DustBand(outer, band.outer, band.dust, band.gas))
        self.bands = updated
        self._merge()
        self.dust_left = self._accessible_dust()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Swept [%.4f, %.4f] AU (gas kept=%s): %d bands, dust left=%s",
                inner,
                outer,
                retain_gas,
                len(self.bands),
                self.dust_left,
            )

    def _merge(self) -> None:
        merged: List[DustBand] = []
        for band in self.bands:
            if band.width <= 0.0:
                continue
            if merged and merged[-1].same_flags(band):
                merged[-1].outer = band.outer
            else:
                merged.append(band)
        self.bands = merged

    def _accessible_dust(self) -> bool:
        return any(
            band.dust and band.outer >= self.inner_bound and band.inner <= self.outer_bound
            for band in self.bands
        )

    def is_partition(self) -> bool:
        """Return ``True`` if the bands tile ``[0, outer_edge]`` with merged flags."""

        if not self.bands or self.bands[0].inner != 0.0 or self.bands[-1].outer != self.outer_edge:
            return False
        for left, right in zip(self.bands, self.bands[1:]):
            if left.outer != right.inner or left.same_flags(right):
                return False
        return all(band.width > 0.0 for band in self.bands)
