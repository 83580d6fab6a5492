"""
Rule-based modernization of archaic English.

The rule engine is a pure, deterministic cascade of pattern rewrites grouped
into five named stages. Stages always run in this order:

1. PHRASE        - multi-word idioms ("it came to pass that", "inasmuch as").
                   First, so single-word rules never split an idiom apart.
2. PRONOUN       - thee/thou/thy/thine/ye.
3. VERB_LEXICON  - explicit archaic verb forms (hath, doth, saith, knowest...).
4. VERB_SUFFIX   - productive fallback for unseen "-eth" verbs. Runs after
                   the lexicon, so it only sees forms no lexicon entry matched.
5. VOCABULARY    - archaic words (wherefore, unto, spake, behold...).

New rules belong in the stage that matches their kind; a rule that must see
text before another stage rewrites it belongs in an earlier stage.

Every pattern is anchored on word boundaries. Literal replacements keep the
leading capitalisation of the text they replace. Ambiguous tokens carry
context guards (lookaheads, or a callable checking the preceding word).

After the cascade the shared normalizer cleans whitespace, punctuation and
quotes. The engine never raises and never performs I/O.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, Tuple, Union

from plainverse.core.normalizer import normalize_text, starts_with_capital

Replacement = Union[str, Callable[[re.Match], str]]

_PRECEDING_WORD = re.compile(r'([A-Za-z]+)\W*$')


class RuleStage(Enum):
    """Rule stages in application order"""
    PHRASE = "phrase"
    PRONOUN = "pronoun"
    VERB_LEXICON = "verb_lexicon"
    VERB_SUFFIX = "verb_suffix"
    VOCABULARY = "vocabulary"


def match_case(source: str, replacement: str) -> str:
    """Carry a leading capital from the matched text over to its replacement"""
    if replacement and source[:1].isupper() and replacement[:1].islower():
        return replacement[0].upper() + replacement[1:]
    return replacement


@dataclass(frozen=True)
class Rule:
    """A word-boundary pattern and its literal or computed replacement"""
    pattern: re.Pattern
    replacement: Replacement

    def apply(self, text: str) -> str:
        if callable(self.replacement):
            return self.pattern.sub(self.replacement, text)
        literal = self.replacement
        return self.pattern.sub(lambda m: match_case(m.group(0), literal), text)


def _rule(pattern: str, replacement: Replacement) -> Rule:
    return Rule(re.compile(pattern, re.IGNORECASE), replacement)


def _word(word: str, replacement: str) -> Rule:
    return _rule(rf'\b{word}\b', replacement)


def _preceding_word(match: re.Match) -> str:
    found = _PRECEDING_WORD.search(match.string, 0, match.start())
    return found.group(1).lower() if found else ""


def _unless_preceded_by(blocked: FrozenSet[str], replacement: str, keep_at_start: bool = False):
    """
    Build a replacement that leaves the match alone when the previous word is
    in ``blocked`` (or, with ``keep_at_start``, when there is no previous word).
    """
    def replace(match: re.Match) -> str:
        previous = _preceding_word(match)
        if previous in blocked or (keep_at_start and not previous):
            return match.group(0)
        return match_case(match.group(0).lstrip(' ,'), replacement)
    return replace


# "save" as a verb follows these words; otherwise it means "except"
_SAVE_AS_VERB = frozenset({
    "to", "will", "shall", "can", "may", "might", "could", "would", "should",
    "must", "cannot", "not", "did", "do", "does", "and", "or", "he", "she",
    "they", "we", "i", "you", "god", "lord",
})

# "abode" is a noun after determiners and possessives
_ABODE_AS_NOUN = frozenset({
    "a", "an", "the", "his", "her", "their", "my", "our", "your", "its", "thy", "thine",
})

PHRASE_RULES: Tuple[Rule, ...] = (
    _rule(r'\band it came to pass that\b', "and"),
    _rule(r'\bit came to pass that\b', ""),
    _rule(r'\bit came to pass,?\s*', ""),
    _rule(r'\binasmuch as\b', "since"),
    _rule(r'\binsomuch that\b', "so much that"),
    _rule(r'(?<=\w),?\s+even so\b', ""),
    _rule(r'\band thus\b', "and so"),
    _rule(r'\bof a surety\b', "certainly"),
    _rule(r'\bwith one accord\b', "together"),
    _rule(r'\bfrom this time forth\b', "from now on"),
    _rule(r'\bafter this manner\b', "in this way"),
    _rule(r'\bexceedingly\b', "very"),
    _rule(r'\bwo\s+unto\b', "woe to"),
    _rule(r'\bsave it be\b', "unless"),
    _rule(r'\bsave it were\b', "except"),
    _rule(r'\bsave only\b', "except for"),
    _rule(
        r',?\s*\bsave\b(?=\s+(?:that|those|this|the|they|he|she|it|we|I)\b)',
        _unless_preceded_by(_SAVE_AS_VERB, " except", keep_at_start=True),
    ),
)

PRONOUN_RULES: Tuple[Rule, ...] = (
    _word("thee", "you"),
    _word("thou", "you"),
    _word("thy", "your"),
    _word("thine", "your"),
    _word("ye", "you"),
    _word("thyself", "yourself"),
)

_VERB_LEXICON = {
    # auxiliaries
    "hath": "has", "doth": "does", "hast": "have", "dost": "do",
    "wilt": "will", "shalt": "will", "wouldst": "would", "couldst": "could",
    "shouldst": "should", "canst": "can", "didst": "did", "hadst": "had",
    "wast": "were", "mayest": "may", "mightest": "might",
    # second person -est
    "knowest": "know", "sayest": "say", "doest": "do", "givest": "give",
    "makest": "make", "takest": "take", "goest": "go", "comest": "come",
    "seest": "see", "hearest": "hear", "lovest": "love", "believest": "believe",
    "saidst": "said",
    # third person -eth
    "cometh": "comes", "goeth": "goes", "saith": "says", "maketh": "makes",
    "taketh": "takes", "giveth": "gives", "seeth": "sees", "knoweth": "knows",
    "loveth": "loves", "liveth": "lives", "dieth": "dies", "believeth": "believes",
    "receiveth": "receives", "perceiveth": "perceives", "bringeth": "brings",
    "thinketh": "thinks", "speaketh": "speaks", "worketh": "works",
    "walketh": "walks", "standeth": "stands", "sitteth": "sits",
    "leadeth": "leads", "teacheth": "teaches", "reacheth": "reaches",
    "preacheth": "preaches", "heareth": "hears", "feareth": "fears",
    "appeareth": "appears", "dwelleth": "dwells", "falleth": "falls",
    "calleth": "calls", "findeth": "finds", "bindeth": "binds",
    "holdeth": "holds", "telleth": "tells", "filleth": "fills",
    "killeth": "kills", "reigneth": "reigns", "remaineth": "remains",
    "obtaineth": "obtains", "containeth": "contains", "suffereth": "suffers",
    "offereth": "offers", "answereth": "answers", "remembereth": "remembers",
    "desireth": "desires", "requireth": "requires", "expireth": "expires",
    "endureth": "endures", "proceedeth": "proceeds", "exceedeth": "exceeds",
    "needeth": "needs", "passeth": "passes", "possesseth": "possesses",
    "blesseth": "blesses", "confesseth": "confesses", "testifieth": "testifies",
    "glorifieth": "glorifies", "sanctifieth": "sanctifies",
    "justifieth": "justifies", "signifieth": "signifies",
    "prophesieth": "prophesies", "destroyeth": "destroys", "employeth": "employs",
    "enjoyeth": "enjoys", "sheweth": "shows", "abideth": "stays",
    "hateth": "hates", "smiteth": "smites", "writeth": "writes",
    "shineth": "shines", "prepareth": "prepares", "declareth": "declares",
    "changeth": "changes", "avengeth": "avenges",
    "provoketh": "provokes", "forsaketh": "forsakes", "partaketh": "partakes",
    "awaketh": "awakes", "escapeth": "escapes", "becometh": "becomes",
    "overcometh": "overcomes",
}

VERB_LEXICON_RULES: Tuple[Rule, ...] = tuple(
    _word(archaic, modern) for archaic, modern in _VERB_LEXICON.items()
) + (
    # "art" as a verb, not the noun
    _rule(r'\bart\b(?!\s+(?:of|gallery|museum|class|work|form|style|piece)\b)', "are"),
)

# Words ending in "eth" that are not archaic verbs
_SUFFIX_EXCEPTIONS = frozenset({
    "teeth", "seth", "beth", "heth", "teth", "meth", "kenneth",
})
_ES_ENDINGS = ("s", "sh", "ch", "x", "z", "o", "v", "c", "dg", "rg", "lg", "u", "th")
# One-syllable stem ending in vowel + single consonant: "hop" from "hopeth" is "hope"
_SILENT_E_STEM = re.compile(r"^[^aeiouy]*[aeiou][^aeiouwxy]$")


def modernize_eth(match: re.Match) -> str:
    """
    Productive fallback: "walketh" -> "walks", "pusheth" -> "pushes",
    "crieth" -> "cries", "hopeth" -> "hopes". Capitalised words (proper
    nouns such as Nazareth), ordinals (twentieth) and known non-verbs are
    left alone.
    """
    word = match.group(0)
    base = match.group(1)
    lowered = word.lower()
    if word[0].isupper() or lowered in _SUFFIX_EXCEPTIONS or lowered.endswith("tieth"):
        return word
    if len(base) < 2:
        return word
    if base.endswith("i"):
        return base[:-1] + "ies"
    if _SILENT_E_STEM.match(base.lower()):
        return base + "es"
    if base.lower().endswith(_ES_ENDINGS):
        return base + "es"
    return base + "s"


VERB_SUFFIX_RULES: Tuple[Rule, ...] = (
    Rule(re.compile(r'\b([A-Za-z]+)eth\b'), modernize_eth),
)

VOCABULARY_RULES: Tuple[Rule, ...] = (
    _word("wherefore", "therefore"),
    _word("behold", "see"),
    _word("yea", "yes"),
    _word("nay", "no"),
    _word("verily", "truly"),
    _word("hitherto", "until now"),
    _word("henceforth", "from now on"),
    _word("whence", "from where"),
    _word("thence", "from there"),
    _word("hither", "here"),
    _word("thither", "there"),
    _word("whither", "where"),
    _word("herein", "in this"),
    _word("therein", "in that"),
    _word("wherein", "in which"),
    _word("hereof", "of this"),
    _word("thereof", "of that"),
    _word("whereof", "of which"),
    _word("hereto", "to this"),
    _word("thereto", "to that"),
    _word("hereby", "by this"),
    _word("thereby", "by that"),
    _word("whereby", "by which"),
    _word("herewith", "with this"),
    _word("therewith", "with that"),
    _word("unto", "to"),
    _word("whereupon", "after which"),
    _word("thereupon", "after that"),
    _word("notwithstanding", "despite"),
    _word("forthwith", "immediately"),
    _word("straightway", "immediately"),
    _word("sundry", "various"),
    _rule(
        r'\bdivers\b(?=\s+(?:ways|places|manners|times|kinds|colou?rs|diseases|things|nations|people)\b)',
        "various",
    ),
    _word("multitude", "crowd"),
    _word("begat", "fathered"),
    _word("begotten", "fathered"),
    _word("brethren", "brothers"),
    _word("kindred", "relatives"),
    _word("bidden", "told"),
    _word("bade", "told"),
    _word("wist", "knew"),
    _word("spake", "spoke"),
    _word("shew", "show"),
    _word("shewn", "shown"),
    _word("shewed", "showed"),
    _word("waxed", "grew"),
    _rule(
        r'\bwax\b(?=\s+(?:strong|old|cold|bold|great|worse|weak|dim|fat|rich|proud|angry|wroth)\b)',
        "grow",
    ),
    _rule(r'\babode\b', _unless_preceded_by(_ABODE_AS_NOUN, "stayed")),
    _rule(r'\bsore\b(?!\s+(?:ankle|foot|feet|throat|back|head|eyes?|arm|leg|muscle)\b)', "great"),
    _word("smote", "struck"),
    _word("slew", "killed"),
    _word("slain", "killed"),
    _word("wroth", "angry"),
    _word("peradventure", "perhaps"),
    _word("haply", "perhaps"),
    _word("mayhap", "perhaps"),
    _rule(r'\bwithout\b(?=\s+the\s+(?:city|gate|camp|wall)\b)', "outside"),
    _rule(r'\bwithin\b(?=\s+the\s+(?:city|gate|camp|wall)\b)', "inside"),
    _word("afore", "before"),
    _word("ere", "before"),
    _word("lest", "so that not"),
    _word("saviour", "Savior"),
    _word("behaviour", "behavior"),
    _word("favour", "favor"),
    _word("honour", "honor"),
    _word("labour", "labor"),
    _word("neighbour", "neighbor"),
)

RULE_STAGES: Dict[RuleStage, Tuple[Rule, ...]] = {
    RuleStage.PHRASE: PHRASE_RULES,
    RuleStage.PRONOUN: PRONOUN_RULES,
    RuleStage.VERB_LEXICON: VERB_LEXICON_RULES,
    RuleStage.VERB_SUFFIX: VERB_SUFFIX_RULES,
    RuleStage.VOCABULARY: VOCABULARY_RULES,
}


def apply_stage(text: str, stage: RuleStage) -> str:
    """Apply the rules of a single stage, without normalization"""
    for rule in RULE_STAGES[stage]:
        text = rule.apply(text)
    return text


def apply_rules(text: str) -> str:
    """
    Modernize a verse with the full rule cascade.

    Args:
        text: Archaic verse text

    Returns:
        Modernized, normalized text. A verse that started with a capital
        letter still does, even when a leading idiom was removed.
    """
    result = text
    for stage in RuleStage:
        result = apply_stage(result, stage)
    return normalize_text(result, capitalize_first=starts_with_capital(text))
