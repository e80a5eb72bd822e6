import json
import threading

import pytest

from TermSearch.build_inverted_index import InvertedIndexBuilder, load_documents
from TermSearch.config import DEFAULT_CONFIG, load_config
from TermSearch.index.inverted_index import InvertedIndex
from TermSearch.index.synchronized import SynchronizedIndex
from TermSearch.main import main
from TermSearch.preprocessing.document import Document

DOCUMENTS = [
    {"id": "d1", "title": "Cats", "text": "The cat sat on the mat."},
    {"id": "d2", "title": "Dogs", "text": "A dog chased the cat."},
    {"id": "d3", "title": "Birds", "text": "Birds sing."},
]


@pytest.fixture
def documents_file(tmp_path):
    path = tmp_path / "documents.json"
    path.write_text(json.dumps(DOCUMENTS), encoding="utf-8")
    return path


def test_load_documents_from_list():
    documents = load_documents([{"title": "x"}, "plain text", {"id": "z", "text": "y"}])

    assert [d.id for d in documents] == ["1", "2", "z"]
    assert documents[1].text == "plain text"


def test_load_documents_from_mapping():
    documents = load_documents({"a": "first", "b": {"title": "second"}})

    assert [(d.id, d.combined_text) for d in documents] == [("a", "first"), ("b", "second")]


@pytest.mark.parametrize("data", [42, "text", [1, 2], {"a": 3}])
def test_load_documents_rejects_unknown_layouts(data):
    with pytest.raises(ValueError):
        load_documents(data)


def test_index_documents_registers_batch():
    builder = InvertedIndexBuilder(InvertedIndex())
    builder.index_documents([Document("a", text="cat cat"), Document("b", text="dog")])
    builder.index_documents([Document("c", text="cat")])

    assert builder.index.number_of_sources == 3
    assert builder.document_count == 3
    assert builder.index.get_term_frequency("cat", "a") == 2
    # dog is rarer than cat, and a has cat twice
    assert builder.index.search("cat dog") == ["b: 50%", "a: 50%", "c: 50%"]


@pytest.mark.parametrize("word", ["python3", "snake_case", "3rd", "e-mail"])
def test_indexed_words_are_found_as_typed(word):
    builder = InvertedIndexBuilder(InvertedIndex())
    builder.index_documents([Document("a", text=f"learn {word} today")])

    assert builder.index.search(word) == ["a: 100%"]


def test_index_documents_counts_duplicate_ids_once():
    builder = InvertedIndexBuilder(InvertedIndex())

    count = builder.index_documents([
        Document("a", text="cat"),
        Document("a", text="cat dog"),
        Document("b", text="dog"),
    ])

    assert count == 2
    assert builder.index.number_of_sources == 2
    assert builder.index.get_term_frequency("cat", "a") == 2


def test_build_from_json(documents_file):
    builder = InvertedIndexBuilder()

    assert builder.build_from_json(documents_file) == 3
    assert builder.index.search("cat dog") == ["d2: 100%", "d1: 50%"]
    assert builder.sample(2) == [
        "'a' -> 1 documents: ['d2']",
        "'birds' -> 1 documents: ['d3']",
    ]


def test_build_from_json_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        InvertedIndexBuilder().build_from_json(tmp_path / "missing.json")


def test_build_from_directory(tmp_path):
    (tmp_path / "a.txt").write_text("red fish", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.md").write_text("blue fish", encoding="utf-8")
    (tmp_path / "c.bin").write_text("red", encoding="utf-8")
    (tmp_path / ".hidden").mkdir()
    (tmp_path / ".hidden" / "d.txt").write_text("red", encoding="utf-8")

    builder = InvertedIndexBuilder()

    assert builder.build_from_directory(tmp_path) == 2
    assert builder.index.search("red fish") == ["a.txt: 100%", "sub/b.md: 50%"]


def test_build_from_directory_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        InvertedIndexBuilder().build_from_directory(tmp_path / "nope")


def test_load_config_defaults_when_missing(tmp_path):
    assert load_config(tmp_path / "missing.json") == DEFAULT_CONFIG


def test_load_config_defaults_when_malformed(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    assert load_config(path) == DEFAULT_CONFIG


def test_load_config_merges_sections(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"ranking": {"use_idf": False}}), encoding="utf-8")

    config = load_config(path)

    assert config["ranking"] == {"use_idf": False, "sublinear_tf": True}
    assert config["preprocessing"] == DEFAULT_CONFIG["preprocessing"]


def test_packaged_config_loads():
    config = load_config()

    assert config["ranking"]["use_idf"] is True
    assert "strip_punctuation" in config["pipeline_order"]


def test_synchronized_index_concurrent_adds():
    index = SynchronizedIndex()

    def ingest(source):
        index.add_all(["cat", "dog"] * 50, source)
        index.register_sources(1)

    threads = [threading.Thread(target=ingest, args=(f"doc{i}",)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert index.number_of_sources == 8
    assert index.index.get_term_frequency("cat", "doc3") == 50
    assert index.search("cat") == [f"doc{i}: 100%" for i in range(8)]


def test_cli_query(documents_file, capsys):
    assert main(["--documents", str(documents_file), "--query", "cat"]) == 0

    output = capsys.readouterr().out
    assert "d1" in output
    assert "100%" in output


def test_cli_requires_corpus():
    assert main([]) == 1


def test_cli_reports_missing_corpus(tmp_path):
    assert main(["--documents", str(tmp_path / "missing.json")]) == 1
