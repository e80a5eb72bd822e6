"""
Preprocessing module turning raw text into canonical index terms.
Includes tokenization, lowercase conversion, diacritics and punctuation removal.
"""

from .preprocess import sanitize, create_preprocessing_pipeline, PreprocessingPipeline
from .document import Document
