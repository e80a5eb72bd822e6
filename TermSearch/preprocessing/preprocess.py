from abc import ABC, abstractmethod
from .tokenizer import Token, TokenType
from ..config import load_config
import json
import logging
import os
import re
import unicodedata

logger = logging.getLogger(__name__)

STOP_WORDS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")


class TokenPreprocessor(ABC):
    @abstractmethod
    def preprocess(self, token: Token, document: str) -> Token:
        raise NotImplementedError()

    def preprocess_all(self, tokens: list[Token], document: str) -> list[Token]:
        return [self.preprocess(token, document) for token in tokens]


class LowercasePreprocessor(TokenPreprocessor):
    def preprocess(self, token: Token, document: str) -> Token:
        token.processed_form = token.processed_form.lower()
        return token


class RemoveDiacriticsPreprocessor(TokenPreprocessor):
    """Preprocessor for removing diacritics."""

    def preprocess(self, token: Token, document: str) -> Token:
        if token.token_type != TokenType.WORD:
            return token

        # NFD splits accented characters into base character + combining mark
        normalized = unicodedata.normalize('NFD', token.processed_form)
        token.processed_form = ''.join([c for c in normalized if not unicodedata.combining(c)])
        return token


class PunctuationPreprocessor(TokenPreprocessor):
    """Strips every character that is not a letter or a digit."""

    pattern = re.compile(r"[\W_]+")

    def preprocess(self, token: Token, document: str) -> Token:
        token.processed_form = self.pattern.sub("", token.processed_form)
        return token


class StopWordsPreprocessor(TokenPreprocessor):
    """Preprocessor for removing stop words."""

    def __init__(self, language="en", stop_words_dir=STOP_WORDS_DIR):
        """
        Initialize preprocessor for removing stop words.

        Args:
            language: Language code, selects stopwords-<language>.json
            stop_words_dir: Directory containing stop words files
        """
        self.stop_words = set()

        path = os.path.join(stop_words_dir, f"stopwords-{language}.json")
        if os.path.exists(path):
            with open(path, 'r', encoding='utf-8') as f:
                self.stop_words = set(json.load(f))
        else:
            logger.warning(f"Stop words file {path} not found, stop word removal disabled")

    def preprocess(self, token: Token, document: str) -> Token:
        if token.token_type == TokenType.WORD and token.processed_form.lower() in self.stop_words:
            token.processed_form = ""
        return token


class NonsenseTokenPreprocessor(TokenPreprocessor):
    """Preprocessor for removing punctuation tokens and too short words."""

    def __init__(self, min_word_length=1, remove_types=None):
        """
        Args:
            min_word_length: Minimum word length (shorter will be removed)
            remove_types: List of token types to remove
        """
        self.min_word_length = min_word_length
        self.remove_types = remove_types or [TokenType.PUNCT]

    def preprocess(self, token: Token, document: str) -> Token:
        if token.token_type in self.remove_types:
            token.processed_form = ""
            return token

        if token.token_type == TokenType.WORD and len(token.processed_form) < self.min_word_length:
            token.processed_form = ""

        return token


class PreprocessingPipeline:
    """Pipeline of token preprocessors."""

    def __init__(self, preprocessors, name="Default Pipeline"):
        self.preprocessors = preprocessors
        self.name = name

    def __repr__(self):
        steps = ", ".join(type(p).__name__ for p in self.preprocessors)
        return f"PreprocessingPipeline({self.name}: {steps})"

    def preprocess(self, tokens: list[Token], document: str) -> list[Token]:
        """
        Apply all preprocessors to the tokens in place.

        Args:
            tokens: List of tokens to preprocess
            document: Original document text

        Returns:
            The same list of tokens
        """
        for preprocessor in self.preprocessors:
            preprocessor.preprocess_all(tokens, document)

        return tokens


def create_preprocessing_pipeline(config=None, name="SanitizePipeline"):
    """Create preprocessing pipeline based on configuration"""
    if not config:
        config = load_config()

    preprocessors = []
    preproc_config = config.get("preprocessing", {})

    for step in config.get("pipeline_order", []):
        if step == "lowercase" and preproc_config.get("lowercase", True):
            preprocessors.append(LowercasePreprocessor())

        elif step == "remove_diacritics" and preproc_config.get("remove_diacritics", True):
            preprocessors.append(RemoveDiacriticsPreprocessor())

        elif step == "strip_punctuation" and preproc_config.get("strip_punctuation", True):
            preprocessors.append(PunctuationPreprocessor())

        elif step == "stop_words" and preproc_config.get("stop_words", {}).get("use", False):
            language = preproc_config.get("stop_words", {}).get("language", "en")
            preprocessors.append(StopWordsPreprocessor(language=language))

        elif step == "nonsense_tokens" and preproc_config.get("nonsense_tokens", {}).get("remove", True):
            min_length = preproc_config.get("nonsense_tokens", {}).get("min_word_length", 1)
            preprocessors.append(NonsenseTokenPreprocessor(min_word_length=min_length))

        else:
            logger.debug(f"Skipping pipeline step '{step}'")

    # Fall back to the minimal canonical form
    if not preprocessors:
        preprocessors = [
            LowercasePreprocessor(),
            PunctuationPreprocessor()
        ]

    return PreprocessingPipeline(preprocessors, name=name)


_default_pipeline = None


def sanitize(term: str, pipeline: PreprocessingPipeline = None) -> str:
    """
    Normalize a raw term into its canonical index form.

    Args:
        term: Raw term string
        pipeline: Pipeline to apply (defaults to the configured one)

    Returns:
        Canonical term, or an empty string if the term should be discarded
    """
    global _default_pipeline

    if not term:
        return ""

    if pipeline is None:
        if _default_pipeline is None:
            _default_pipeline = create_preprocessing_pipeline()
        pipeline = _default_pipeline

    token = Token(
        token_type=TokenType.WORD,
        processed_form=term,
        position=0,
        length=len(term)
    )
    pipeline.preprocess([token], term)

    return token.processed_form if token.processed_form else ""
