"""Typographic normalization of curly quotation marks into corner brackets."""

import re

# Matched pairs only: opening mark, lazy interior on one line, closing mark.
# Reversed pairs show up when editors flip directional quotes in CJK text.
QUOTE_PATTERNS = [
    (re.compile(r'“(.+?)”'), '「', '」'),  # “…” -> 「…」
    (re.compile(r'”(.+?)“'), '「', '」'),  # ”…“ -> 「…」
    (re.compile(r'‘(.+?)’'), '『', '』'),  # ‘…’ -> 『…』
    (re.compile(r'’(.+?)‘'), '『', '』'),  # ’…‘ -> 『…』
]


def normalize_quotes(text: str) -> str:
    """
    Replace matched pairs of directional quotes with corner brackets.

    Double quotes become 「」 and single quotes become 『』. Unmatched or
    mismatched marks are left as they are.

    Example:
        >>> normalize_quotes('他说“你好”')
        '他说「你好」'
    """
    if not text:
        return text

    for pattern, opening, closing in QUOTE_PATTERNS:
        text = pattern.sub(lambda match: f'{opening}{match.group(1)}{closing}', text)
    return text


__all__ = ['normalize_quotes']
