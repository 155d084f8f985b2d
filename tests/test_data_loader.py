"""
Tests for the term dataset loader.

Uses the bundled data/terms.csv plus small temporary CSV files.
"""

import os
import sys
import tempfile

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bkmap import config
from bkmap.common import data_loader
from bkmap.common.data_loader import TermRecord


def write_csv(text):
    handle = tempfile.NamedTemporaryFile("w", suffix=".csv", delete=False)
    with handle:
        handle.write(text)
    return handle.name


# =========================================================================
# Tests: Loading
# =========================================================================

def test_load_bundled_dataset():
    data_loader.clear_cache()
    df = data_loader.load_dataset()
    assert len(df) == 76
    assert list(df.columns) == ["term", "frequency", "category"]


def test_load_is_cached():
    data_loader.clear_cache()
    first = data_loader.load_dataset()
    assert data_loader.load_dataset() is first
    assert data_loader.load_dataset(force_reload=True) is not first


def test_missing_file_raises():
    data_loader.clear_cache()
    try:
        data_loader.load_dataset(os.path.join(config.DATA_DIR, "does-not-exist.csv"))
        assert False, "Should have raised FileNotFoundError"
    except FileNotFoundError:
        pass


def test_missing_key_column_raises():
    data_loader.clear_cache()
    path = write_csv("word,frequency\nbook,1\n")
    try:
        data_loader.load_dataset(path)
        assert False, "Should have raised ValueError"
    except ValueError:
        pass
    finally:
        os.remove(path)


def test_null_terms_filtered():
    data_loader.clear_cache()
    path = write_csv("term,frequency\nbook,1\n,2\ncake,3\n")
    try:
        df = data_loader.load_dataset(path)
        assert df["term"].tolist() == ["book", "cake"]
        assert df.index.tolist() == [0, 1]
    finally:
        os.remove(path)
        data_loader.clear_cache()


def test_numeric_terms_become_strings():
    data_loader.clear_cache()
    path = write_csv("term,frequency\n123,1\n42,2\n")
    try:
        assert data_loader.get_all_terms(path) == ["123", "42"]
    finally:
        os.remove(path)
        data_loader.clear_cache()


# =========================================================================
# Tests: Accessors
# =========================================================================

def test_get_all_terms_keeps_duplicates():
    data_loader.clear_cache()
    terms = data_loader.get_all_terms()
    assert len(terms) == 76
    assert terms.count("mitten") == 2
    assert terms[0] == "book"


def test_get_all_records():
    data_loader.clear_cache()
    records = data_loader.get_all_records()
    assert len(records) == 76
    first = records[0]
    assert isinstance(first, TermRecord)
    assert first.term == "book"
    assert first.attributes == {"frequency": 412, "category": "noun"}
    assert isinstance(first.attributes["frequency"], int)
    assert first.to_dict() == {"term": "book", "frequency": 412, "category": "noun"}


def test_sample_terms_reproducible():
    data_loader.clear_cache()
    a = data_loader.get_sample_terms(10, seed=7)
    b = data_loader.get_sample_terms(10, seed=7)
    assert a == b
    assert len(a) == 10
    assert set(a) <= set(data_loader.get_all_terms())


def test_sample_terms_capped_at_dataset_size():
    data_loader.clear_cache()
    assert len(data_loader.get_sample_terms(10_000, seed=1)) == 76


def test_dataset_stats():
    data_loader.clear_cache()
    stats = data_loader.get_dataset_stats()
    assert stats["total_rows"] == 76
    assert stats["unique_terms"] == 75
    assert stats["max_term_length"] == 8
    assert stats["mean_term_length"] > 0
    assert set(stats["null_counts"]) == {"term", "frequency", "category"}


# =========================================================================
# Tests: Synthetic Terms
# =========================================================================

def test_generate_terms_bounds():
    terms = data_loader.generate_terms(500, seed=3, alphabet="xyz", min_length=2, max_length=4)
    assert len(terms) == 500
    assert all(2 <= len(t) <= 4 for t in terms)
    assert set("".join(terms)) <= set("xyz")


def test_generate_terms_defaults():
    terms = data_loader.generate_terms(100, seed=5)
    assert all(
        config.SYNTHETIC_MIN_LENGTH <= len(t) <= config.SYNTHETIC_MAX_LENGTH for t in terms
    )
    assert terms == data_loader.generate_terms(100, seed=5)


def test_generate_terms_invalid_bounds():
    for min_length, max_length in ((-1, 3), (5, 2)):
        try:
            data_loader.generate_terms(1, min_length=min_length, max_length=max_length)
            assert False, "Should have raised ValueError"
        except ValueError:
            pass


# =========================================================================
# Main
# =========================================================================

if __name__ == "__main__":
    test_functions = [
        obj for name, obj in list(globals().items())
        if name.startswith("test_") and callable(obj)
    ]
    passed = 0
    failed = 0
    for test_fn in test_functions:
        try:
            test_fn()
            passed += 1
            print(f"  PASS: {test_fn.__name__}")
        except Exception as e:
            failed += 1
            print(f"  FAIL: {test_fn.__name__}: {e}")

    print(f"\n{'='*60}")
    print(f"Results: {passed} passed, {failed} failed out of {passed + failed}")
    if failed == 0:
        print("All tests passed!")
    else:
        print("Some tests failed!")
        sys.exit(1)
