from pathlib import Path

import pytest

from catalog_pipeline.utils.corrections import load_corrections

PACKAGED_CORRECTIONS = Path(__file__).resolve().parent.parent / "catalog_pipeline" / "corrections.yaml"


def test_packaged_corrections_cover_known_defects():
    corrections = load_corrections(PACKAGED_CORRECTIONS)

    assert corrections["swap_repair"]["rating"] == "TV-MA"
    assert set(corrections["swap_repair"]["show_ids"]) == {"s5542", "s5795", "s5814"}
    assert corrections["rating_synonyms"] == {"UR": "NR"}
    assert corrections["reference_ratings"]["s5990"] == "TV-PG"
    assert corrections["version"]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_corrections(tmp_path / "corrections.yaml")


def test_missing_section(tmp_path):
    path = tmp_path / "corrections.yaml"
    path.write_text("swap_repair: {rating: TV-MA, show_ids: []}\nrating_synonyms: {}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="reference_ratings"):
        load_corrections(path)


def test_swap_repair_needs_rating(tmp_path):
    path = tmp_path / "corrections.yaml"
    path.write_text(
        "swap_repair: {show_ids: [s1]}\nrating_synonyms: {}\nreference_ratings: {}\n",
        encoding="utf-8")
    with pytest.raises(ValueError, match="swap_repair"):
        load_corrections(path)


def test_empty_sections_become_empty_mappings(tmp_path):
    path = tmp_path / "corrections.yaml"
    path.write_text(
        "version: 3\nswap_repair: {rating: TV-MA}\nrating_synonyms:\nreference_ratings:\n",
        encoding="utf-8")
    corrections = load_corrections(path)
    assert corrections["swap_repair"]["show_ids"] == []
    assert corrections["rating_synonyms"] == {}
    assert corrections["reference_ratings"] == {}
    assert corrections["version"] == "3"
