"""
Post-processing normalizer shared by the rule engine and the language model path.

normalize_text is idempotent: running it on its own output changes nothing.
"""
import re

_DOUBLE_QUOTES = re.compile(r'[“”„‟″‶«»]')
_SINGLE_QUOTES = re.compile(r'[‘’‚‛′‵]')
_WHITESPACE = re.compile(r'\s+')
_SPACE_BEFORE_PUNCT = re.compile(r'\s+([,.;:!?])')
_MISSING_SPACE_AFTER_PUNCT = re.compile(r'([,;:])(?=[A-Za-z])')
_REPEATED_DOUBLE_QUOTES = re.compile(r'"{2,}')
_REPEATED_SINGLE_QUOTES = re.compile(r"'{2,}")
# A closing quote that drifted away from the end of the text, possibly doubled
_TRAILING_DOUBLE_QUOTES = re.compile(r'\s*"(?:\s*")*$')
_TRAILING_SINGLE_QUOTES = re.compile(r"\s*'(?:\s*')*$")
_SENTENCE_START = re.compile(r'([.!?]["\']?\s+["\'(]*)([a-z])')
_TEXT_START = re.compile(r'^(["\'(]*)([a-z])')
_ENDS_SENTENCE = re.compile(r'[.!?]$')
_FIRST_LETTER = re.compile(r'[A-Za-z]')


def _upper_second(match: re.Match) -> str:
    return match.group(1) + match.group(2).upper()


def normalize_quotes(text: str) -> str:
    """Convert curly, prime and guillemet quote variants to straight quotes"""
    text = _DOUBLE_QUOTES.sub('"', text)
    return _SINGLE_QUOTES.sub("'", text)


def balance_quotes(text: str) -> str:
    """Close a dangling double quote when the text ends a sentence without one"""
    if text.count('"') % 2 == 1 and _ENDS_SENTENCE.search(text):
        return text + '"'
    return text


def starts_with_capital(text: str) -> bool:
    """True when the first letter of the text is upper case"""
    first = _FIRST_LETTER.search(text)
    return bool(first) and first.group(0).isupper()


def normalize_text(text: str, capitalize_first: bool = True) -> str:
    """
    Clean up transformed verse text.

    Args:
        text: Text produced by the rule cascade or the language model
        capitalize_first: Upper-case the first letter of the text. The rule
            engine turns this off when the source verse began in lower case.

    Returns:
        Normalized text
    """
    result = normalize_quotes(text)
    result = _WHITESPACE.sub(' ', result).strip()
    result = _SPACE_BEFORE_PUNCT.sub(r'\1', result)
    result = _MISSING_SPACE_AFTER_PUNCT.sub(r'\1 ', result)
    result = _REPEATED_DOUBLE_QUOTES.sub('"', result)
    result = _REPEATED_SINGLE_QUOTES.sub("'", result)
    result = _TRAILING_SINGLE_QUOTES.sub("'", result)
    result = _TRAILING_DOUBLE_QUOTES.sub('"', result)
    result = _SENTENCE_START.sub(_upper_second, result)
    if capitalize_first:
        result = _TEXT_START.sub(_upper_second, result)
    return balance_quotes(result)
