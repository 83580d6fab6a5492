"""
Prompt text for the language model modernization call.

The user prompt carries one verse only. Neighbouring verses are never
included.
"""
from typing import Optional

SYSTEM_INSTRUCTION = """You convert archaic, King James style English into plain, modern English. Rewrite each scripture verse so it is clear and accessible while keeping its meaning and reverent tone.

Guidelines:
- Convert archaic pronouns (thee, thou, thy, thine, ye) to modern equivalents (you, your)
- Convert archaic verb forms (-eth and -est endings, hath, doth, art, wilt) to modern forms
- Simplify complex sentence structures while keeping the meaning
- Drop filler phrases such as "it came to pass" and "and behold"
- Keep names of people and places unchanged
- Do not add interpretation or commentary and do not change doctrinal content
- Rewrite only the verse you are given
- Output only the rewritten verse, with no explanation"""


def build_verse_prompt(
    verse_text: str,
    book: Optional[str] = None,
    chapter: Optional[int] = None,
    verse: Optional[int] = None
) -> str:
    """Build the user prompt for a single verse"""
    reference = ""
    if book and chapter is not None and verse is not None:
        reference = f" ({book} {chapter}:{verse})"
    elif book:
        reference = f" ({book})"
    return f'Rewrite this verse{reference} in plain, modern English:\n\n"{verse_text}"'
