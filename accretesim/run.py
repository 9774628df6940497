"""Command-line entry point: generate one planetary system.

Usage::

    python -m accretesim.run --config system.yml --seed 42 \
        --override accretion.alpha=5 --outdir out/ --quiet

The datasheet is printed to stdout.  With an output directory the run
also writes ``summary.json``, ``datasheet.txt`` and the planet table.
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

from . import datasheet
from .config_utils import configure_logging, load_config
from .io import tables, writer
from .orchestrator import SystemResult, generate_system
from .provenance import collect_provenance
from .random_source import RandomSource
from .schema import Config
from .star import StellarTemplate

__all__ = ["build_template", "resolve_seed", "run_system", "write_outputs", "main"]

logger = logging.getLogger(__name__)


def build_template(cfg: Config, catalog: tables.StellarCatalog, rng: RandomSource) -> StellarTemplate:
    """Resolve the configured star into a template.

    A named template wins over a spectral class; with neither the class is
    drawn from the stellar population.  Explicit values then override the
    template fields.
    """
    selection = cfg.star
    if selection.template is not None:
        template = catalog.get(selection.template)
    else:
        template = catalog.choose(rng, selection.spectral_class)
    overrides: Dict[str, Any] = {
        key: getattr(selection, key)
        for key in ("mass", "luminosity", "radius", "temperature")
        if getattr(selection, key) is not None
    }
    if overrides:
        template = replace(template, **overrides)
    logger.info("Selected stellar template %s (%s)", template.name, template.spectral_class)
    return template


def resolve_seed(cfg: Config, seed: Optional[int] = None) -> int:
    """Return the seed of the run, drawing a fresh one when none is configured."""

    if seed is None:
        seed = cfg.seed
    if seed is None:
        seed = int(np.random.SeedSequence().generate_state(1)[0])
    return seed


def run_system(cfg: Config, seed: Optional[int] = None) -> SystemResult:
    """Generate the system described by ``cfg``.

    ``seed`` takes precedence over ``cfg.seed``.
    """
    rng = RandomSource.from_seed(resolve_seed(cfg, seed))
    chemicals = tables.load_chemicals(cfg.tables.chemicals)
    catalog = tables.load_stellar_catalog(cfg.tables.stars)
    template = build_template(cfg, catalog, rng)
    return generate_system(
        template,
        rng,
        chemicals,
        cfg.accretion.to_parameters(),
        cfg.moons.to_capture(),
        deviate=cfg.star.deviate,
        max_injections=cfg.accretion.max_injections,
    )


def write_outputs(result: SystemResult, cfg: Config, outdir: Path, seed: Optional[int]) -> None:
    """Write the summary, the datasheet and the planet table to ``outdir``."""

    outdir = Path(outdir)
    summary = writer.system_summary(result)
    summary["provenance"] = collect_provenance(seed=seed, config=cfg.model_dump(mode="json"))
    writer.write_summary(summary, outdir / "summary.json")
    fmt = cfg.output.table_format
    writer.write_planet_table(writer.planets_frame(result), outdir / f"planets.{fmt}", fmt=fmt)
    if cfg.output.write_datasheet:
        (outdir / "datasheet.txt").write_text(datasheet.render_system(result), encoding="utf-8")
    logger.info("Wrote outputs to %s", outdir)


def main(argv: Optional[List[str]] = None) -> SystemResult:
    """Command line entry point."""

    parser = argparse.ArgumentParser(description="Generate a planetary system with the accrete model")
    parser.add_argument("--config", type=Path, help="Path to YAML configuration (defaults apply without one)")
    parser.add_argument("--seed", type=int, help="Seed of the random source; overrides the configuration")
    parser.add_argument(
        "--override",
        action="append",
        nargs="+",
        metavar="PATH=VALUE",
        help="Apply configuration overrides using dotted paths; e.g. --override star.template=G2V",
    )
    parser.add_argument("--outdir", type=Path, help="Write summary, datasheet and planet table here")
    parser.add_argument(
        "--quiet",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Suppress INFO logs and Python warnings",
    )
    args = parser.parse_args(argv)

    override_list: List[str] = []
    if args.override:
        for group in args.override:
            override_list.extend(group)
    configure_logging(logging.WARNING if args.quiet else logging.INFO, suppress_warnings=args.quiet)
    cfg = load_config(args.config, overrides=override_list)

    seed = resolve_seed(cfg, args.seed)
    logger.info("Random seed %d", seed)
    result = run_system(cfg, seed=seed)
    sys.stdout.write(datasheet.render_system(result))

    outdir = args.outdir if args.outdir is not None else cfg.output.outdir
    if outdir is not None:
        write_outputs(result, cfg, outdir, seed)
    return result


if __name__ == "__main__":  # pragma: no cover - standard CLI entrypoint
    logging.basicConfig(level=logging.INFO)
    main()
