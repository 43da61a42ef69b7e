"""Character n-gram feature extraction.

Names are lowercased and prefixed with a single space, so the vocabulary
can hold name-initial n-grams such as ``" zh"``. Slicing works on code
points, which keeps Cyrillic and CJK names intact.
"""
from typing import Container, Dict, Iterator, List

from name_nationality.config import NGRAM_MAX, NGRAM_MIN


def prepare_name(name: str) -> str:
    """Lowercase a name and prepend the word-boundary space.

    Example:
        >>> prepare_name("Wang")
        ' wang'
    """
    return " " + name.lower()


def iter_ngrams(text: str, min_n: int = NGRAM_MIN, max_n: int = NGRAM_MAX) -> Iterator[str]:
    """Yield every n-gram of ``text`` with length between min_n and max_n.

    N-grams are produced position by position, shortest first at each
    position. ``text`` is used as given; call prepare_name() first to get
    the model's feature scheme.
    """
    length = len(text)
    for i in range(length):
        for n in range(min_n, max_n + 1):
            if i + n > length:
                break
            yield text[i:i + n]


def extract_features(name: str, vocabulary: Container[str]) -> Dict[str, int]:
    """Count the vocabulary n-grams that occur in a name.

    Args:
        name: Raw name, any case or script
        vocabulary: Recognized n-grams (a set or mapping for fast lookup)

    Returns:
        Dictionary mapping each recognized n-gram to its count. N-grams
        outside the vocabulary are dropped, never stored with a zero count.

    Example:
        >>> extract_features("Anna", {"a", " a", "nn"})
        {' a': 1, 'a': 2, 'nn': 1}
    """
    counts: Dict[str, int] = {}
    for ngram in iter_ngrams(prepare_name(name)):
        if ngram in vocabulary:
            counts[ngram] = counts.get(ngram, 0) + 1
    return counts


def name_ngrams(name: str) -> List[str]:
    """Return all n-grams of a name under the model's feature scheme.

    Suitable as the ``analyzer`` of a scikit-learn CountVectorizer, so a
    vocabulary fitted on training names matches extract_features().
    """
    return list(iter_ngrams(prepare_name(name)))
