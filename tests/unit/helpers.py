"""
Corpus builders shared by plainverse unit tests
"""


def make_corpus_data(transformed=None, texts=None):
    """
    Two books in canonical order: 1 Nephi (chapters 1-2) and Jacob (chapter 1).

    Args:
        transformed: Optional {(book, chapter, verse): plainText} to include
        texts: Optional {(book, chapter, verse): text} overriding source text
    """
    transformed = transformed or {}
    texts = texts or {}
    layout = [
        ("The First Book of Nephi", "1 Nephi", {1: 3, 2: 2}),
        ("The Book of Jacob", "Jacob", {1: 2}),
    ]
    books = []
    for name, short_name, chapters in layout:
        chapter_list = []
        for chapter_number, verse_total in chapters.items():
            verses = []
            for verse_number in range(1, verse_total + 1):
                key = (short_name, chapter_number, verse_number)
                verse = {
                    "number": verse_number,
                    "text": texts.get(key, f"And thou hast spoken unto {short_name} {chapter_number}:{verse_number}."),
                }
                if key in transformed:
                    verse["plainText"] = transformed[key]
                verses.append(verse)
            chapter_list.append({"number": chapter_number, "verses": verses})
        books.append({"name": name, "shortName": short_name, "chapters": chapter_list})
    return {"books": books}
