from pathlib import Path

from utils.encoding import detect_encoding
from utils.fuzzy import fuzzy_match_string, match_header
from utils.synonyms import normalize_phrase, normalize_text, tokenize


def test_tokenize():
    assert tokenize("Distance (miles)!") == ["distance", "miles"]
    assert tokenize("") == []


def test_normalize_text_maps_synonyms():
    assert normalize_text("Add up the averages") == ["sum", "the", "average"]
    assert normalize_text("Plot it over time") == ["chart", "it", "trend"]
    assert normalize_phrase("find online") == "search"


def test_fuzzy_match_string():
    assert fuzzy_match_string("revenu", ["Revenue", "Cost"], threshold=80) is None
    assert fuzzy_match_string("revenu", ["revenue", "cost"], threshold=80) == "revenue"
    assert fuzzy_match_string("", ["a"]) is None


def test_match_header():
    headers = ["City", "Distance (miles)", "Trip count"]
    assert match_header(tokenize("chart distance miles"), headers) == "Distance (miles)"
    assert match_header(tokenize("by city"), headers) == "City"
    assert match_header(tokenize("show trip totals"), headers) == "Trip count"
    assert match_header(tokenize("hello"), headers) is None


def test_detect_encoding_bom(tmp_path: Path):
    path = tmp_path / "bom.csv"
    path.write_bytes(b"\xef\xbb\xbfa,b\n1,2\n")
    assert detect_encoding(path) == "utf-8-sig"
