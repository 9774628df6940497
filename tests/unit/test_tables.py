import pytest

from accretesim import constants
from accretesim.errors import ConfigurationError, TableLoadError
from accretesim.io import tables
from accretesim.warnings import TableWarning


def test_bundled_chemicals_are_converted_to_millibars():
    chemicals = tables.load_chemicals()
    assert len(chemicals) == 15
    by_symbol = {species.symbol: species for species in chemicals}
    assert by_symbol["He"].max_ipp == pytest.approx(61000.0 * constants.MMHG_TO_MILLIBARS)
    assert by_symbol["O3"].max_ipp == pytest.approx(0.1 * constants.PPM_PRESSURE)
    assert by_symbol["H"].max_ipp == 0.0


def test_missing_table_is_fatal(tmp_path):
    with pytest.raises(TableLoadError):
        tables.load_chemicals(tmp_path / "absent.csv")


def test_missing_column_is_fatal(tmp_path):
    path = tmp_path / "stars.csv"
    path.write_text("name,spectral_class,mass\nX,G,1.0\n", encoding="utf-8")
    with pytest.raises(TableLoadError):
        tables.load_stellar_catalog(path)


def test_bundled_catalog_lookup():
    catalog = tables.load_stellar_catalog()
    sun = catalog.get("G2V")
    assert sun.mass == 1.0 and sun.luminosity == 1.0
    assert {"M", "K", "G", "F", "A", "B", "O", "D", "R"} <= set(catalog.by_class)
    with pytest.raises(ConfigurationError):
        catalog.get("Z9")


def test_choose_restricts_to_requested_class(scripted_rng):
    catalog = tables.load_stellar_catalog()
    template = catalog.choose(scripted_rng(0.3), "k")
    assert template.spectral_class == "K"


@pytest.mark.parametrize(
    "draws, expected",
    [
        ((0.5, 0.5), "M"),
        ((0.5, 0.8), "K"),
        ((0.5, 0.9), "G"),
        ((0.5, 0.98), "F"),
        ((0.5, 0.995), "A"),
        ((0.95,), "D"),
        ((0.99,), "R"),
        ((0.999, 0.5), "B"),
        ((0.999, 0.9), "O"),
    ],
)
def test_stellar_population_draw(scripted_rng, draws, expected):
    assert tables.StellarCatalog.draw_class(scripted_rng(*draws)) == expected


def test_bad_template_rows_are_dropped(tmp_path):
    path = tmp_path / "stars.csv"
    path.write_text(
        "name,spectral_class,mass,luminosity,radius,temperature,absolute_magnitude,red,green,blue\n"
        "good,G,1.0,1.0,1.0,5780,4.8,255,255,255\n"
        "bad,G,-1.0,1.0,1.0,5780,4.8,255,255,255\n",
        encoding="utf-8",
    )
    with pytest.warns(TableWarning):
        catalog = tables.load_stellar_catalog(path)
    assert [template.name for template in catalog.templates] == ["good"]


def test_missing_class_falls_back_to_populated_one(tmp_path, scripted_rng):
    path = tmp_path / "stars.csv"
    path.write_text(
        "name,spectral_class,mass,luminosity,radius,temperature,absolute_magnitude,red,green,blue\n"
        "K5V,K,0.7,0.16,0.72,4440,7.3,255,222,180\n",
        encoding="utf-8",
    )
    catalog = tables.load_stellar_catalog(path)
    assert catalog.choose(scripted_rng(0.5), "O").name == "K5V"
