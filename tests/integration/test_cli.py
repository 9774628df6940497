import json

import pandas as pd
import pyarrow.parquet as pq
import pytest

from accretesim import run
from accretesim.errors import ConfigurationError


def test_cli_writes_outputs(tmp_path, capsys):
    outdir = tmp_path / "out"
    result = run.main(["--seed", "7", "--override", "star.template=G2V", "--outdir", str(outdir)])

    stdout = capsys.readouterr().out
    assert stdout.startswith("Primary: G2V")
    assert f"Planets: {len(result.planets)}" in stdout

    summary = json.loads((outdir / "summary.json").read_text(encoding="utf-8"))
    assert summary["planet_count"] == len(result.planets)
    assert summary["provenance"]["seed"] == 7
    assert summary["provenance"]["config"]["star"]["template"] == "G2V"

    table = pd.read_csv(outdir / "planets.csv")
    assert len(table) == len(result.bodies())
    assert (table["parent_index"] == -1).sum() == len(result.planets)
    assert (outdir / "datasheet.txt").read_text(encoding="utf-8") == stdout


def test_cli_seed_is_reproducible(tmp_path, capsys):
    first = run.main(["--seed", "11", "--override", "star.template=K5V"])
    second = run.main(["--seed", "11", "--override", "star.template=K5V"])
    capsys.readouterr()
    assert [p.sma for p in first.planets] == [p.sma for p in second.planets]


def test_cli_parquet_table(tmp_path, capsys):
    run.main(
        [
            "--seed",
            "3",
            "--override",
            "star.template=G2V",
            "output.table_format=parquet",
            "output.write_datasheet=false",
            "--outdir",
            str(tmp_path),
        ]
    )
    capsys.readouterr()
    table = pq.read_table(tmp_path / "planets.parquet")
    units = json.loads(table.schema.metadata[b"units"])
    assert units["mass_earth"] == "M_Earth"
    assert not (tmp_path / "datasheet.txt").exists()


def test_cli_reads_yaml_config(tmp_path, capsys):
    config = tmp_path / "system.yml"
    config.write_text(
        "seed: 21\nstar:\n  spectral_class: K\n  deviate: false\naccretion:\n  max_injections: 100000\n",
        encoding="utf-8",
    )
    result = run.main(["--config", str(config)])
    capsys.readouterr()
    assert result.star.spectral_class == "K"


def test_cli_rejects_bad_override():
    with pytest.raises(ConfigurationError):
        run.main(["--override", "accretion.alpha=-1"])
