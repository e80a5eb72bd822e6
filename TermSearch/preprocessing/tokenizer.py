import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    WORD = "word"
    NUMBER = "number"
    PUNCT = "punct"


@dataclass
class Token:
    token_type: TokenType
    processed_form: str
    position: int
    length: int


class Tokenizer(ABC):
    @abstractmethod
    def tokenize(self, text: str) -> list[Token]:
        raise NotImplementedError()


class RegexMatchTokenizer(Tokenizer):
    """Splits text into word, number and punctuation tokens."""

    # Letters, digits and underscores stay in one WORD, as sanitize keeps them together
    token_spec = [
        ("NUMBER", r"\d+(?:[.,]\d+)*(?!\w)"),
        ("WORD", r"\w+(?:['\-]\w+)*"),
        ("PUNCT", r"[^\w\s]"),
    ]

    def __init__(self):
        self.pattern = re.compile(
            "|".join(f"(?P<{name}>{pattern})" for name, pattern in self.token_spec)
        )

    def tokenize(self, text: str) -> list[Token]:
        tokens = []
        for mo in self.pattern.finditer(text):
            kind = TokenType[mo.lastgroup]
            value = mo.group()
            tokens.append(Token(kind, value, mo.start(), len(value)))
        return tokens
