import pandas as pd
import pytest
import yaml

from catalog_pipeline.adapters.netflix_adapter import EXPECTED_COLUMNS, NetflixAdapter

RAW_ROWS = [
    {"show_id": "s1", "type": "Movie", "title": "Dick Johnson Is Dead", "director": "Kirsten Johnson",
     "country": "United States", "date_added": "September 25, 2021", "release_year": "2020",
     "rating": "PG-13", "duration": "90 min", "listed_in": "Documentaries",
     "description": "As her father nears the end of his life, filmmaker Kirsten Johnson stages his death."},
    {"show_id": "s2", "type": "TV Show", "title": "Blood & Water", "cast": "Ama Qamata, Khosi Ngema, Gail Mabalane",
     "country": "South Africa", "date_added": "September 24, 2021", "release_year": "2021",
     "rating": "TV-MA", "duration": "2 Seasons", "listed_in": "International TV Shows, TV Dramas, TV Mysteries",
     "description": "After crossing paths at a party, a Cape Town teen sets out to prove something."},
    {"show_id": "s3", "type": "TV Show", "title": "Ganglands", "director": "Julien Leclercq",
     "date_added": " September 24, 2021", "release_year": "2021", "rating": "TV-MA",
     "duration": "1 Season", "listed_in": "Crime TV Shows, International TV Shows, TV Action & Adventure",
     "description": "To protect his family from a powerful drug lord, skilled thief Mehdi joins a gang."},
    {"show_id": "s5542", "type": "Movie", "title": "Louis C.K. 2017", "director": "Louis C.K.",
     "cast": "Louis C.K.", "country": "United States", "date_added": "April 4, 2017",
     "release_year": "2017", "rating": "74 min", "duration": "", "listed_in": "Movies",
     "description": "Louis C.K. muses on religion, eternal love, giving dogs drugs and more."},
    {"show_id": "s7059", "type": "Movie", "title": "Hitler's Circle of Evil", "country": "United Kingdom",
     "date_added": "March 1, 2018", "release_year": "2017", "rating": "UR", "duration": "99 min",
     "listed_in": "Documentaries, International Movies", "description": "A look at Hitler's inner circle."},
    {"show_id": "s5990", "type": "Movie", "title": "13TH: A Conversation with Oprah Winfrey & Ava DuVernay",
     "cast": "Oprah Winfrey, Ava DuVernay", "date_added": "January 26, 2017", "release_year": "2017",
     "rating": "", "duration": "37 min", "listed_in": "Movies",
     "description": "Oprah Winfrey sits down with director Ava DuVernay to discuss her documentary."},
    {"show_id": "s8", "type": "TV Show", "title": "Kota Factory", "country": "India",
     "date_added": "", "release_year": "2021", "rating": "TV-MA", "duration": "3 Seasons",
     "listed_in": "International TV Shows, Romantic TV Shows, TV Comedies",
     "description": "In a city of coaching centers, a teacher gets students ready for exams."},
    {"show_id": "s9", "type": "Movie", "title": "Sankofa", "director": "Haile Gerima",
     "country": "India, United States", "date_added": "August 20, 2019", "release_year": "1993",
     "rating": "TV-14", "duration": "125 min", "listed_in": "Dramas, Independent Movies, International Movies",
     "description": "On a photo shoot in Ghana, an American model slips back in time."},
]


def make_raw_frame(rows: list[dict]) -> pd.DataFrame:
    """Baut ein DataFrame wie es der Loader liefert: 12 Textspalten, "" statt NA."""
    records = [{col: row.get(col, "") for col in EXPECTED_COLUMNS} for row in rows]
    return pd.DataFrame(records, columns=EXPECTED_COLUMNS).astype("string")


@pytest.fixture
def raw_catalog() -> pd.DataFrame:
    return make_raw_frame(RAW_ROWS)


@pytest.fixture
def corrections() -> dict:
    return {
        "version": "test-1",
        "swap_repair": {"rating": "TV-MA", "show_ids": ["s5542"]},
        "rating_synonyms": {"UR": "NR"},
        "reference_ratings": {"s5990": "TV-PG"},
    }


@pytest.fixture
def adapter(corrections, tmp_path) -> NetflixAdapter:
    return NetflixAdapter({
        "file_path": tmp_path / "netflix_titles.csv",
        "corrections": corrections,
        "aux_base_dir": tmp_path,
    })


@pytest.fixture
def cleaned_catalog(adapter, raw_catalog) -> pd.DataFrame:
    return adapter.transform(raw_catalog)


@pytest.fixture
def raw_csv(tmp_path, raw_catalog):
    path = tmp_path / "netflix_titles.csv"
    raw_catalog.to_csv(path, index=False)
    return path


@pytest.fixture
def pipeline_config(tmp_path, raw_csv, corrections):
    """Schreibt config.yaml + corrections.yaml nach tmp_path und liefert den Config-Pfad."""
    (tmp_path / "corrections.yaml").write_text(yaml.safe_dump(corrections), encoding="utf-8")
    config = {
        "logging": {"level": "INFO"},
        "sources": {"NetflixAdapter": {
            "file_path": raw_csv.name,
            "corrections_path": "corrections.yaml",
        }},
        "content_types": {"movie": "Movie", "show": "TV Show"},
        "validation": {"expected_rows": len(RAW_ROWS), "reports_dir": "reports"},
        "output": {"csv_path": "out/netflix_titles_clean.csv"},
        "reports": {"enabled": False},
    }
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return config_path
