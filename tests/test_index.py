import pytest

from anagram_server.managers.index import AnagramIndex
from anagram_server.schemas import WordCounts
from anagram_server.stores.memory import MemoryStore
from anagram_server.words import InvalidWord


async def add_all(index: AnagramIndex, words) -> WordCounts:
    total = WordCounts()
    for word in words:
        total += await index.add(word)
    return total


async def full_scan_counts(index: AnagramIndex) -> tuple:
    sizes = []
    await index.store.each(lambda values, key: sizes.append(len(values)))
    return sum(sizes), sum(size - 1 for size in sizes if size > 1)


def test_store_is_required() -> None:
    with pytest.raises(ValueError):
        AnagramIndex(None)


async def test_add_counts_anagrams(index) -> None:
    counts = await add_all(index, ["read", "dear", "dare"])
    assert counts == WordCounts(word=3, anagram=2)
    assert index.word_count() == 3
    assert index.anagram_count() == 2


async def test_add_duplicate_is_noop(index) -> None:
    await index.add("care")
    again = await index.add("care")
    assert again == WordCounts(word=0, anagram=0)
    assert index.word_count() == 1
    assert index.anagram_count() == 0


async def test_add_trims_and_rejects_invalid(index) -> None:
    assert await index.add("  race ") == WordCounts(word=1, anagram=0)
    assert await index.get("race", include_input=True) == ["race"]
    for bad in ["hunter2", "-race", "ra--ce", "", None]:
        with pytest.raises(InvalidWord):
            await index.add(bad)
    assert index.word_count() == 1


async def test_case_makes_distinct_entries(index) -> None:
    assert await index.add("Acer") == WordCounts(word=1, anagram=0)
    assert await index.add("acer") == WordCounts(word=1, anagram=1)


async def test_get_excludes_exact_input_only(index) -> None:
    await add_all(index, ["Acer", "acre", "crea", "race", "care", "acer"])

    assert sorted(await index.get("acer")) == ["Acer", "acre", "care", "crea", "race"]
    assert sorted(await index.get("Acer")) == ["acer", "acre", "care", "crea", "race"]
    assert sorted(await index.get("acer", include_input=True)) == ["Acer", "acer", "acre", "care", "crea", "race"]


async def test_get_lowercase_resolves_proper_noun(index) -> None:
    await add_all(index, ["Canadas", "acandas", "scandaa"])

    assert sorted(await index.get("canadas")) == ["Canadas", "acandas", "scandaa"]
    assert sorted(await index.get("Canadas")) == ["acandas", "scandaa"]
    assert sorted(await index.get("acandas")) == ["Canadas", "scandaa"]


async def test_get_unknown_word_returns_nothing(index) -> None:
    await add_all(index, ["Asher", "shear"])
    assert await index.get("share") == []
    assert await index.get("nothing") == []
    with pytest.raises(InvalidWord):
        await index.get("hunter2")


async def test_get_exclude_proper_nouns_keeps_included_input(index) -> None:
    await add_all(index, ["Acer", "acre", "crea", "race", "care", "acer"])

    assert sorted(await index.get("acer", exclude_proper_nouns=True)) == ["acre", "care", "crea", "race"]
    result = await index.get("Acer", exclude_proper_nouns=True, include_input=True)
    assert sorted(result) == ["Acer", "acer", "acre", "care", "crea", "race"]


async def test_get_limit_applies_after_filters(index) -> None:
    await add_all(index, ["Acer", "acre", "crea", "race", "care", "acer"])

    assert await index.get("acer", limit=2) == ["Acer", "acre"]
    assert await index.get("acer", exclude_proper_nouns=True, limit=2) == ["acre", "crea"]
    # non-positive or non-int limits are ignored
    for limit in [0, -1, None, True, "2"]:
        assert len(await index.get("acer", limit=limit)) == 5


async def test_delete_scenario(index) -> None:
    assert await add_all(index, ["read", "dear", "dare"]) == WordCounts(word=3, anagram=2)
    assert sorted(await index.get("read")) == ["dare", "dear"]

    assert await index.delete("dear") == 1
    assert await index.get("read") == ["dare"]

    assert await index.delete("dare") == 1
    assert await index.delete("dare") == 0
    assert index.word_count() == 1
    assert index.anagram_count() == 0


async def test_delete_leaves_singleton_stored(index) -> None:
    await add_all(index, ["read", "dear"])
    await index.delete("dear")
    assert await index.get("read") == []
    assert await index.get("read", include_input=True) == ["read"]
    assert (index.word_count(), index.anagram_count()) == (1, 0)


async def test_delete_exact_does_not_fold_proper_nouns(index) -> None:
    await add_all(index, ["Acer", "race"])
    assert await index.delete("acer") == 0
    assert await index.get("race") == ["Acer"]


async def test_delete_including_anagrams(index) -> None:
    await add_all(index, ["Acer", "acre", "crea", "race", "care", "acer", "Zoidberg"])
    assert await index.delete("care", include_anagrams=True) == 6
    assert (index.word_count(), index.anagram_count()) == (1, 0)
    assert await index.delete("care", include_anagrams=True) == 0


async def test_delete_including_anagrams_of_unknown_word(index) -> None:
    await add_all(index, ["Canadas", "acandas", "scandaa"])
    await index.delete("scandaa")
    assert await index.delete("scandaa", include_anagrams=True) == 0
    assert await index.get("acandas") == ["Canadas"]


async def test_delete_rejects_invalid(index) -> None:
    with pytest.raises(InvalidWord):
        await index.delete("hunter2")


async def test_counters_match_full_scan(index) -> None:
    await add_all(index, ["read", "dear", "dare", "Acer", "acer", "race", "Zoidberg", "zoidberg", "x"])
    await index.delete("dear")
    await index.delete("race", include_anagrams=True)
    await index.add("dear")
    await index.delete("x")
    assert await full_scan_counts(index) == (index.word_count(), index.anagram_count())


async def test_clear_resets_everything(index) -> None:
    await add_all(index, ["read", "dear", "dare"])
    await index.clear()
    assert (index.word_count(), index.anagram_count()) == (0, 0)
    assert await index.get("read") == []
    assert await index.anagrams_by_cardinality() == []
    assert await index.max_length_anagrams() == []


async def test_load_accumulates_and_skips_invalid(index, caplog) -> None:
    lines = [
        "read dear\n",
        "\n",
        "   dare   hunter2\tCanadas\n",
        "read",
    ]
    with caplog.at_level("WARNING"):
        counts = await index.load(lines)

    assert counts == WordCounts(word=4, anagram=2)
    assert index.word_count() == 4
    assert "Skipped 1 invalid tokens" in caplog.text


async def test_load_from_file(tmp_path) -> None:
    path = tmp_path / "dictionary.txt"
    path.write_text("listen silent\nenlist\ntinsel\nevil vile\n", encoding="utf-8")
    index = AnagramIndex(MemoryStore())
    with path.open(encoding="utf-8") as handle:
        counts = await index.load(handle)
    assert counts == WordCounts(word=6, anagram=4)
