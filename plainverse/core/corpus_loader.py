"""
Reading and writing corpus JSON files.

Source and checkpoint files share one shape:
{books: [{name, shortName, chapters: [{number, verses: [{number, text, plainText?}], summary?}]}]}
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from plainverse.core.canon import canonical_sort
from plainverse.core.exceptions import CorpusStructureError
from plainverse.core.models import Corpus

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def parse_corpus(data: dict, source: str = "<memory>") -> Corpus:
    """
    Validate raw JSON data as a corpus and put its books in canonical order.

    Raises:
        CorpusStructureError: If the data does not describe a valid corpus
    """
    if not isinstance(data, dict) or 'books' not in data:
        raise CorpusStructureError(source, "top-level object must contain 'books'")
    try:
        corpus = Corpus.model_validate(data)
    except ValidationError as e:
        raise CorpusStructureError(source, str(e)) from e

    corpus.books = canonical_sort(corpus.books)
    return corpus


def load_corpus(path: PathLike) -> Corpus:
    """
    Load a corpus file.

    Args:
        path: JSON file to read

    Returns:
        Parsed Corpus

    Raises:
        CorpusStructureError: If the file is missing, not JSON, or invalid
    """
    path = Path(path)
    if not path.is_file():
        raise CorpusStructureError(str(path), "file not found")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CorpusStructureError(str(path), f"invalid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise CorpusStructureError(str(path), f"not valid UTF-8: {e}") from e

    corpus = parse_corpus(data, str(path))
    logger.debug(f"Loaded {corpus.verse_count()} verses from {path}")
    return corpus


def dump_corpus(corpus: Corpus) -> str:
    return json.dumps(corpus.to_wire(), indent=2, ensure_ascii=False)


def save_corpus(corpus: Corpus, path: PathLike) -> Path:
    """
    Atomically write a corpus file.

    The data is written to a temporary file in the same directory and moved
    into place, so an interrupted write leaves the previous file intact.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(dump_corpus(corpus))
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path
