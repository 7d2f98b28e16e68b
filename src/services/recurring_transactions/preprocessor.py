"""
Transaction description preprocessor.

Turns transaction descriptions into TF-IDF term vectors so that
"NETFLIX.COM 8663579" and "Netflix.com" land close together.

Each added transaction becomes a Document holding its term-frequency map.
Inverse document frequencies depend on the whole corpus, so they are not
stored per document: the TF-IDF matrix is rebuilt from the term-frequency
maps every time get_datums() is called.
"""

import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List

import numpy as np
from sklearn.feature_extraction import DictVectorizer
from sklearn.feature_extraction.text import TfidfTransformer

from models.transaction import Transaction

logger = logging.getLogger(__name__)

# Boilerplate that banks prepend/append to descriptions
NOISE_TERMS = frozenset({
    'ach', 'pos', 'debit', 'credit', 'card', 'purchase', 'recurring',
    'www', 'com', 'net', 'org', 'inc', 'llc', 'ltd', 'co', 'the',
})

_SPLIT_PATTERN = re.compile(r"[^a-z0-9&']+")
_DIGIT_PATTERN = re.compile(r"\d")


def tokenize(text: str) -> List[str]:
    """
    Split a description into normalized terms.

    Case-folds the text, splits on punctuation and whitespace, and drops
    reference numbers (any token containing a digit), single characters and
    common banking boilerplate. If nothing survives, the raw tokens are
    kept so that every non-empty description still produces terms.
    """
    raw = [token.strip("'&") for token in _SPLIT_PATTERN.split(text.casefold())]
    raw = [token for token in raw if token]
    terms = [
        token for token in raw
        if len(token) > 1 and not _DIGIT_PATTERN.search(token) and token not in NOISE_TERMS
    ]
    return terms or raw


def normalize_description(text: str) -> str:
    """Return the normalized, space-joined form of a description."""
    return " ".join(tokenize(text))


@dataclass(frozen=True, eq=False)
class Document:
    """Per-transaction term representation."""
    transaction: Transaction
    term_weights: Dict[str, float]

    @classmethod
    def from_transaction(cls, txn: Transaction) -> 'Document':
        terms = tokenize(txn.description)
        counts = Counter(terms)
        total = len(terms)
        weights = {term: count / total for term, count in counts.items()} if total else {}
        return cls(transaction=txn, term_weights=weights)


@dataclass(frozen=True, eq=False)
class Datum:
    """Clustering input: a transaction with its TF-IDF vector."""
    index: int
    transaction: Transaction
    document: Document
    vector: np.ndarray


class PreProcessor:
    """
    Accumulates documents for a detection session.

    Documents are kept in insertion order and never merged or dropped; the
    vocabulary grows as new transactions are added.
    """

    def __init__(self):
        self.documents: List[Document] = []
        self.document_frequency: Counter = Counter()

    def add_transaction(self, txn: Transaction) -> Document:
        """Build and store the Document for txn."""
        document = Document.from_transaction(txn)
        self.documents.append(document)
        self.document_frequency.update(document.term_weights.keys())
        return document

    def vocabulary(self) -> List[str]:
        """All terms seen so far, sorted."""
        return sorted(self.document_frequency)

    def get_datums(self) -> List[Datum]:
        """
        Vectorize every document against the current corpus.

        Returns:
            One Datum per added transaction, in insertion order
        """
        if not self.documents:
            return []

        vectors = self._vectorize()
        return [
            Datum(index=i, transaction=document.transaction, document=document, vector=vectors[i])
            for i, document in enumerate(self.documents)
        ]

    def _vectorize(self) -> np.ndarray:
        n_documents = len(self.documents)

        # sort=True keeps column order independent of insertion order
        vectorizer = DictVectorizer(sparse=True, sort=True)
        term_matrix = vectorizer.fit_transform([document.term_weights for document in self.documents])

        if term_matrix.shape[1] == 0:
            logger.warning(
                f"Empty vocabulary across {n_documents} documents. Using zero vectors."
            )
            return np.zeros((n_documents, 1))

        transformer = TfidfTransformer(norm='l2', smooth_idf=True)
        tfidf_matrix = transformer.fit_transform(term_matrix)

        logger.debug(
            f"Vectorized {n_documents} documents over {term_matrix.shape[1]} terms"
        )
        return tfidf_matrix.toarray()
