from robosim.core.knowledge_base import KNOWLEDGE_BASE, score_entry, search_knowledge_base


def test_sand_query_ranks_sand_experiments_first():
    results = search_knowledge_base("sand")

    assert [r.experiment for r in results] == [
        "Sand Gait V1",
        "Sand Gait V2",
        "Sand Gait V3",
        "PID Optimization Study",
    ]
    assert [r.relevance_score for r in results] == [1.0, 1.0, 1.0, 0.3]


def test_no_match():
    assert search_knowledge_base("xyzzy") == []


def test_results_are_bounded_and_sorted():
    results = search_knowledge_base("drone battery wind hover")

    assert len(results) <= 5
    scores = [r.relevance_score for r in results]
    assert scores == sorted(scores, reverse=True)
    assert all(0 < s <= 1 for s in scores)


def test_wind_bonus_from_findings():
    urban = next(e for e in KNOWLEDGE_BASE if e.experiment == "Urban Canyon Navigation")

    # "wind" matches one finding as a phrase and as a word, plus the wind bonus
    assert score_entry(urban, "wind") == 0.8


def test_short_words_are_ignored():
    thermal = next(e for e in KNOWLEDGE_BASE if e.experiment == "Thermal Management Test")

    assert score_entry(thermal, "at") == 0.2
