import pandas as pd
import pytest

from catalog_pipeline.adapters.netflix_adapter import EXPECTED_COLUMNS, NetflixAdapter, read_catalog_csv
from catalog_pipeline.errors import CatalogValidationError, DomainError, LoadError
from catalog_pipeline.utils.basic_validator import OUTPUT_COLUMNS

from conftest import RAW_ROWS, make_raw_frame


def test_read_catalog_csv_keeps_text_and_quoted_commas(raw_csv):
    df = read_catalog_csv(raw_csv)

    assert list(df.columns) == EXPECTED_COLUMNS
    assert len(df) == len(RAW_ROWS)
    row = df.set_index("show_id").loc["s2"]
    assert row["cast"] == "Ama Qamata, Khosi Ngema, Gail Mabalane"
    assert row["release_year"] == "2021"
    # Leere Zellen sind beim Laden noch leere Strings
    assert df.set_index("show_id").loc["s5542", "duration"] == ""
    assert df.notna().all().all()


def test_read_catalog_csv_missing_file(tmp_path):
    with pytest.raises(LoadError) as exc_info:
        read_catalog_csv(tmp_path / "nope.csv")
    assert exc_info.value.path == tmp_path / "nope.csv"


def test_read_catalog_csv_rejects_wrong_header(tmp_path):
    path = tmp_path / "wrong.csv"
    path.write_text("show_id,type,title\ns1,Movie,Foo\n", encoding="utf-8")
    with pytest.raises(LoadError, match="Header"):
        read_catalog_csv(path)


def test_read_catalog_csv_rejects_empty_file(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(LoadError):
        read_catalog_csv(path)


def test_extract_uses_configured_path(adapter, raw_csv):
    df = adapter.extract()
    assert len(df) == len(RAW_ROWS)


def test_transform_output_schema_and_row_count(cleaned_catalog, raw_catalog):
    assert list(cleaned_catalog.columns) == OUTPUT_COLUMNS
    assert len(cleaned_catalog) == len(raw_catalog)
    assert set(cleaned_catalog["show_id"]) == set(raw_catalog["show_id"])


def test_transform_does_not_mutate_input(adapter, raw_catalog):
    before = raw_catalog.copy()
    adapter.transform(raw_catalog)
    pd.testing.assert_frame_equal(raw_catalog, before)


def test_transform_is_idempotent(adapter, raw_catalog):
    first = adapter.transform(raw_catalog)
    second = adapter.transform(raw_catalog)
    pd.testing.assert_frame_equal(first, second)


def test_transform_scenarios(cleaned_catalog):
    by_id = cleaned_catalog.set_index("show_id")

    assert by_id.loc["s5542", "rating"] == "TV-MA"
    assert by_id.loc["s5542", "movie_length"] == 74
    assert pd.isna(by_id.loc["s5542", "season_total"])

    assert by_id.loc["s7059", "rating"] == "NR"
    assert by_id.loc["s5990", "rating"] == "TV-PG"

    assert by_id.loc["s8", "season_total"] == 3
    assert pd.isna(by_id.loc["s8", "movie_length"])
    assert pd.isna(by_id.loc["s8", "date_added_as_date"])
    assert by_id.loc["s3", "date_added_as_date"] == pd.Timestamp("2021-09-24")
    assert by_id.loc["s9", "release_year"] == 1993


def test_transform_writes_repair_audit(adapter, raw_catalog, tmp_path):
    adapter.transform(raw_catalog)

    audit_files = list(tmp_path.rglob("NetflixAdapter_repairs.csv"))
    assert len(audit_files) == 1
    audit = pd.read_csv(audit_files[0], keep_default_na=False)
    changed = set(zip(audit["show_id"], audit["column"]))
    assert changed == {("s5542", "rating"), ("s5542", "duration"),
                       ("s7059", "rating"), ("s5990", "rating")}


def test_transform_fails_fast_on_unexpected_type(adapter):
    rows = [dict(RAW_ROWS[0]), dict(RAW_ROWS[1], type="Documentary")]
    with pytest.raises(DomainError) as exc_info:
        adapter.transform(make_raw_frame(rows))
    assert exc_info.value.show_ids == ["s2"]


def test_adapter_loads_corrections_from_path(tmp_path):
    path = tmp_path / "corrections.yaml"
    path.write_text(
        "version: v1\n"
        "swap_repair: {rating: TV-MA, show_ids: [s5542]}\n"
        "rating_synonyms: {UR: NR}\n"
        "reference_ratings: {s5990: TV-PG}\n",
        encoding="utf-8")
    adapter = NetflixAdapter({"file_path": tmp_path / "x.csv", "corrections_path": path})
    assert adapter.corrections["swap_repair"]["show_ids"] == ["s5542"]
    assert adapter.content_types == {"movie": "Movie", "show": "TV Show"}


def test_repair_audit_is_rewritten_when_nothing_is_repaired(adapter, raw_catalog, tmp_path):
    adapter.transform(raw_catalog)
    adapter.transform(make_raw_frame([RAW_ROWS[0], RAW_ROWS[1]]))

    audit_files = list(tmp_path.rglob("NetflixAdapter_repairs.csv"))
    assert len(audit_files) == 1
    audit = pd.read_csv(audit_files[0], keep_default_na=False)
    assert list(audit.columns) == ["show_id", "column", "old_value", "new_value"]
    assert audit.empty


def test_transform_rejects_stage_that_changes_row_count(adapter, raw_catalog):
    adapter.stages = lambda: [("Kürzen", lambda df: df.iloc[1:])]
    with pytest.raises(CatalogValidationError) as exc_info:
        adapter.transform(raw_catalog)
    assert exc_info.value.df_name == "Stufe 'Kürzen'"
    assert "Zeilenanzahl" in exc_info.value.errors[0]
