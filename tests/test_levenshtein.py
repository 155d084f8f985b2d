"""
Unit tests for the weighted Levenshtein metric.

Tests cover the classic base cases, weighted costs, scratch row reuse
across differently sized inputs, and agreement with a full-table
reference implementation.
"""

import random
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bkmap.metrics.levenshtein import Levenshtein


def reference_distance(a, b, ins=1, dele=1, sub=1):
    """Full (len(a)+1) x (len(b)+1) table, no row reuse."""
    table = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]
    for i in range(1, len(a) + 1):
        table[i][0] = i * dele
    for j in range(1, len(b) + 1):
        table[0][j] = j * ins
    for i in range(1, len(a) + 1):
        for j in range(1, len(b) + 1):
            table[i][j] = min(
                table[i - 1][j] + dele,
                table[i][j - 1] + ins,
                table[i - 1][j - 1] + (0 if a[i - 1] == b[j - 1] else sub),
            )
    return table[len(a)][len(b)]


# =========================================================================
# Tests: Base Cases
# =========================================================================

def test_empty_strings():
    assert Levenshtein().distance("", "") == 0


def test_empty_to_nonempty():
    lev = Levenshtein()
    assert lev.distance("", "abc") == 3
    assert lev.distance("abc", "") == 3


def test_identical():
    lev = Levenshtein()
    assert lev.distance("abc", "abc") == 0
    assert lev.distance("kitten", "kitten") == 0


def test_kitten_sitting():
    lev = Levenshtein()
    assert lev.distance("kitten", "sitting") == 3
    assert lev.distance("sitting", "kitten") == 3


def test_classic_pairs():
    lev = Levenshtein()
    pairs = [
        ("a", "", 1), ("", "a", 1), ("a", "a", 0), ("x", "a", 1),
        ("aa", "", 2), ("ax", "aa", 1), ("a", "aa", 1), ("aa", "a", 1),
        ("abcdef", "", 6), ("vintner", "writers", 5), ("vintners", "writers", 4),
        ("flaw", "lawn", 2), ("saturday", "sunday", 3),
    ]
    for a, b, expected in pairs:
        assert lev.distance(a, b) == expected, f"distance({a!r}, {b!r})"


def test_non_string_sequences():
    lev = Levenshtein()
    assert lev.distance([1, 2, 3], [2, 3, 5]) == 2
    assert lev.distance((1, 2), (1, 2)) == 0
    assert lev.distance(b"abc", b"abd") == 1
    assert lev.distance(["the", "quick", "fox"], ["the", "fox"]) == 1


def test_callable_alias():
    lev = Levenshtein()
    assert lev("book", "back") == 2


# =========================================================================
# Tests: Weighted Costs
# =========================================================================

def test_weighted_empty_cases():
    lev = Levenshtein(insertion_cost=2, deletion_cost=1, substitution_cost=5)
    assert lev.distance("", "") == 0
    assert lev.distance("", "abc") == 6
    assert lev.distance("abc", "") == 3
    assert lev.distance("abc", "abc") == 0


def test_weighted_kitten_sitting():
    unit = Levenshtein()
    weighted = Levenshtein(insertion_cost=2, deletion_cost=1, substitution_cost=5)
    # Substitution (5) costs more than delete + insert (3), so the two
    # substitutions become delete/insert pairs: 2 deletions + 3 insertions.
    assert unit.distance("kitten", "sitting") == 3
    assert weighted.distance("kitten", "sitting") == 8
    # Reversed: 3 deletions + 2 insertions.
    assert weighted.distance("sitting", "kitten") == 7


def test_cheap_substitution():
    lev = Levenshtein(insertion_cost=3, deletion_cost=3, substitution_cost=1)
    assert lev.distance("abc", "xyz") == 3
    assert lev.distance("ab", "abc") == 3


def test_zero_costs():
    lev = Levenshtein(insertion_cost=0, deletion_cost=0, substitution_cost=0)
    assert lev.distance("abc", "defgh") == 0
    lev = Levenshtein(insertion_cost=0, deletion_cost=1, substitution_cost=1)
    assert lev.distance("", "abc") == 0
    assert lev.distance("abc", "") == 3


def test_symmetric_when_insert_equals_delete():
    lev = Levenshtein(insertion_cost=2, deletion_cost=2, substitution_cost=3)
    rng = random.Random(1)
    for _ in range(100):
        a = "".join(rng.choice("abc") for _ in range(rng.randint(0, 8)))
        b = "".join(rng.choice("abc") for _ in range(rng.randint(0, 8)))
        assert lev.distance(a, b) == lev.distance(b, a)


def test_negative_cost_raises():
    for kwargs in ({"insertion_cost": -1}, {"deletion_cost": -1}, {"substitution_cost": -2}):
        try:
            Levenshtein(**kwargs)
            assert False, f"Should have raised ValueError for {kwargs}"
        except ValueError:
            pass


def test_default_costs_from_config():
    lev = Levenshtein()
    assert lev.insertion_cost == 1
    assert lev.deletion_cost == 1
    assert lev.substitution_cost == 1


# =========================================================================
# Tests: Scratch Row Reuse
# =========================================================================

def test_long_then_short_inputs():
    lev = Levenshtein()
    assert lev.distance("a" * 50, "b" * 40) == 50
    assert lev.distance("ab", "a") == 1
    assert lev.distance("", "") == 0
    assert lev.distance("abc", "abd") == 1
    assert lev.distance("x" * 30, "") == 30


def test_cache_sized_to_last_query():
    lev = Levenshtein()
    lev.distance("abcdefgh", "abcdefghij")
    assert len(lev._cache) == 10
    lev.distance("abc", "ab")
    assert len(lev._cache) == 2


def test_reused_instance_matches_reference():
    rng = random.Random(42)
    for ins, dele, sub in [(1, 1, 1), (2, 1, 5), (1, 3, 2), (4, 4, 1), (0, 2, 1)]:
        lev = Levenshtein(insertion_cost=ins, deletion_cost=dele, substitution_cost=sub)
        for _ in range(200):
            a = "".join(rng.choice("abcd") for _ in range(rng.randint(0, 10)))
            b = "".join(rng.choice("abcd") for _ in range(rng.randint(0, 10)))
            assert lev.distance(a, b) == reference_distance(a, b, ins, dele, sub), (
                f"costs=({ins}, {dele}, {sub}) a={a!r} b={b!r}"
            )


def test_triangle_inequality():
    lev = Levenshtein()
    rng = random.Random(3)
    words = ["".join(rng.choice("abc") for _ in range(rng.randint(0, 6))) for _ in range(30)]
    for x in words:
        for y in words:
            for z in words[:10]:
                assert lev.distance(x, z) <= lev.distance(x, y) + lev.distance(y, z)


# =========================================================================
# Tests: Configuration
# =========================================================================

def test_to_config():
    lev = Levenshtein(insertion_cost=2, deletion_cost=3, substitution_cost=4)
    assert lev.to_config() == {
        "name": "levenshtein",
        "insertion_cost": 2,
        "deletion_cost": 3,
        "substitution_cost": 4,
    }


def test_from_config_round_trip():
    lev = Levenshtein(insertion_cost=2, deletion_cost=1, substitution_cost=5)
    rebuilt = Levenshtein.from_config(lev.to_config())
    assert rebuilt.to_config() == lev.to_config()
    assert rebuilt.distance("kitten", "sitting") == 8


def test_repr():
    assert repr(Levenshtein(2, 1, 5)) == (
        "Levenshtein(insertion_cost=2, deletion_cost=1, substitution_cost=5)"
    )


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
