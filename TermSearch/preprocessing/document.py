from typing import Dict, Iterator
from .tokenizer import Tokenizer, RegexMatchTokenizer, TokenType


class Document:
    """
    Represents a document fed into the index.
    Holds the identifier and text; the index only ever sees its raw terms.
    """

    def __init__(self, id: str, title: str = "", text: str = "", metadata: Dict = None):
        """
        Initialize a document with content.

        Args:
            id: Unique identifier, used as the source in the index
            title: Document title
            text: Main document text
            metadata: Additional document metadata
        """
        self.id = str(id)
        self.title = title or ""
        self.text = text or ""
        self.metadata = metadata or {}

    def __repr__(self):
        return f"Document(id={self.id!r}, title={self.title!r})"

    @property
    def combined_text(self) -> str:
        return f"{self.title} {self.text}".strip()

    @classmethod
    def from_dict(cls, data: dict, default_id: str = None) -> 'Document':
        """
        Build a document from a JSON record with id, title and text/content fields.
        """
        doc_id = data.get("id", default_id)
        if doc_id is None:
            raise ValueError(f"Document has no id: {data!r}")

        metadata = {k: v for k, v in data.items() if k not in ("id", "title", "text", "content")}
        return cls(
            id=doc_id,
            title=data.get("title", ""),
            text=data.get("text", data.get("content", "")),
            metadata=metadata
        )

    def raw_terms(self, tokenizer: Tokenizer = None) -> Iterator[str]:
        """
        Yield the raw word and number tokens of the title and text.
        Sanitization is left to the index.
        """
        tokenizer = tokenizer or RegexMatchTokenizer()
        for token in tokenizer.tokenize(self.combined_text):
            if token.token_type in (TokenType.WORD, TokenType.NUMBER):
                yield token.processed_form
