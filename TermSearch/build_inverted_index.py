import json
import logging
import os
import time
from typing import Iterable

from TermSearch.config import load_config
from TermSearch.index.inverted_index import InvertedIndex
from TermSearch.preprocessing.document import Document
from TermSearch.preprocessing.tokenizer import RegexMatchTokenizer

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".txt", ".md"}


class InvertedIndexBuilder:
    """Feeds documents into an InvertedIndex, one add() per term occurrence."""

    def __init__(self, index: InvertedIndex = None, config=None):
        self.config = config or load_config()
        self.index = index if index is not None else InvertedIndex.from_config(self.config)
        self.tokenizer = RegexMatchTokenizer()
        self.document_count = 0

    def index_documents(self, documents: Iterable[Document]) -> int:
        """
        Index a batch of documents and register them with the index.

        Records sharing an id are merged into one source, so the corpus size
        grows by the number of distinct ids.

        Returns:
            Number of distinct documents in the batch
        """
        start_time = time.time()
        seen_ids = set()

        for document in documents:
            if document.id in seen_ids:
                logger.warning(f"Duplicate document id '{document.id}', merging its terms into the earlier record")
            seen_ids.add(document.id)
            for term in document.raw_terms(self.tokenizer):
                self.index.add(term, document.id)

        batch_size = len(seen_ids)
        self.index.register_sources(batch_size)
        self.document_count += batch_size

        logger.info(f"Indexed {batch_size} documents in {time.time() - start_time:.2f} seconds")
        return batch_size

    def build_from_json(self, json_file) -> int:
        """
        Build the index from a JSON file containing documents.

        The file holds either a list of {id, title, text} records or a mapping
        of id -> record (or id -> plain text).
        """
        if not os.path.exists(json_file):
            raise FileNotFoundError(f"Documents file {json_file} does not exist")

        logger.info(f"Loading documents from {json_file}")
        with open(json_file, 'r', encoding='utf-8') as f:
            data = json.load(f)

        return self.index_documents(load_documents(data))

    def build_from_directory(self, docs_path) -> int:
        """Build the index from the .txt and .md files under a directory."""
        if not os.path.isdir(docs_path):
            raise FileNotFoundError(f"Documents directory {docs_path} does not exist")

        logger.info(f"Scanning {docs_path}")
        documents = []
        for root, dirs, files in os.walk(docs_path):
            # Skip hidden directories
            dirs[:] = sorted(d for d in dirs if not d.startswith("."))
            for filename in sorted(files):
                if os.path.splitext(filename)[1].lower() not in SUPPORTED_EXTENSIONS:
                    continue

                filepath = os.path.join(root, filename)
                rel_path = os.path.relpath(filepath, start=docs_path).replace("\\", "/")
                try:
                    with open(filepath, "r", encoding="utf-8", errors="ignore") as f:
                        text = f.read()
                except OSError as e:
                    logger.warning(f"Skipping {filepath}: {e}")
                    continue

                documents.append(Document(id=rel_path, text=text))

        return self.index_documents(documents)

    def sample(self, sample_size=10) -> list[str]:
        """Describe the first terms of the index (alphabetically sorted)"""
        lines = []
        for term in self.index.terms()[:sample_size]:
            sources = self.index.get_sources(term)
            more = '...' if len(sources) > 5 else ''
            lines.append(f"'{term}' -> {len(sources)} documents: {sources[:5]}{more}")
        return lines


def load_documents(data) -> list[Document]:
    """Convert parsed JSON into Document objects."""
    if isinstance(data, list):
        documents = []
        for i, record in enumerate(data):
            if isinstance(record, str):
                documents.append(Document(id=str(i + 1), text=record))
            elif isinstance(record, dict):
                documents.append(Document.from_dict(record, default_id=str(i + 1)))
            else:
                raise ValueError(f"Unsupported document record at position {i}: {type(record).__name__}")
        return documents

    if isinstance(data, dict):
        documents = []
        for doc_id, record in data.items():
            if isinstance(record, str):
                documents.append(Document(id=doc_id, text=record))
            elif isinstance(record, dict):
                documents.append(Document.from_dict({**record, "id": record.get("id", doc_id)}))
            else:
                raise ValueError(f"Unsupported document record for id {doc_id}: {type(record).__name__}")
        return documents

    raise ValueError(f"Unsupported documents layout: {type(data).__name__}")
