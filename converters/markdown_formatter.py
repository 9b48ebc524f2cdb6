"""Canonical Markdown formatter used by canonicalize mode."""

import logging
import re
from typing import List, Optional, Tuple

FENCE_PATTERN = re.compile(r'^\s*(```|~~~)')
HEADING_PATTERN = re.compile(r'^(#{1,6})[ \t]+(.*?)(?:[ \t]+#+)?[ \t]*$')
THEMATIC_BREAK_PATTERN = re.compile(r'^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$')
BULLET_PATTERN = re.compile(r'^(\s*)[*+][ \t]+')
# Inline code, link or image destinations and autolinks keep their markers
PROTECTED_SPAN_PATTERN = re.compile(r'(`+).+?\1|\]\([^)\n]*\)|<[A-Za-z][A-Za-z0-9+.-]*:[^>\s]*>')
PLACEHOLDER_PATTERN = re.compile(r'\x00(\d+)\x00')
EMPHASIS_PATTERN = re.compile(r'(?<![*\w\\])\*(?![*\s])(.+?)(?<![\s*\\])\*(?![*\w])')
UNDERSCORE_STRONG_PATTERN = re.compile(r'(?<![\w\\])__(?=\S)(.+?)(?<=\S)__(?!\w)')


class MarkdownFormatter:
    """
    Reformats Markdown into one canonical layout.

    Prose wrapping is preserved (lines are never reflowed), so image and link
    syntax always stays on the line it was emitted on. The formatter:
    1. Normalizes ATX headings to a single space and no closing hashes
    2. Normalizes thematic breaks to ``---`` and bullets to ``-``
    3. Uses ``_`` for emphasis and ``**`` for strong emphasis
    4. Trims trailing whitespace while keeping two-space hard breaks
    5. Keeps at most one blank line between blocks and ends with one newline

    Fenced code blocks are copied through untouched.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('wordpress_markdown_migrator.converters.markdownformatter')

    def format(self, markdown: str) -> str:
        """Return ``markdown`` in canonical form."""
        if not markdown or not markdown.strip():
            return ''

        lines = markdown.replace('\r\n', '\n').replace('\r', '\n').split('\n')
        result: List[Tuple[str, bool]] = []  # (line, inside fenced code)
        in_fence = False
        fence_marker = ''

        for index, line in enumerate(lines):
            fence_match = FENCE_PATTERN.match(line)
            if fence_match:
                marker = fence_match.group(1)
                if not in_fence:
                    in_fence = True
                    fence_marker = marker
                elif marker == fence_marker:
                    in_fence = False
                result.append((line.rstrip(), True))
                continue

            if in_fence:
                result.append((line, True))
                continue

            next_line = lines[index + 1] if index + 1 < len(lines) else ''
            result.append((self._format_line(line, next_line), False))

        self.logger.debug(f"Formatted {len(lines)} markdown lines")
        return self._collapse_blank_lines(result)

    def _format_line(self, line: str, next_line: str) -> str:
        """Format a single line outside fenced code."""
        hard_break = line.endswith('  ') and bool(line.strip()) and bool(next_line.strip())
        line = line.rstrip()

        if THEMATIC_BREAK_PATTERN.match(line):
            return '---'

        heading = HEADING_PATTERN.match(line)
        if heading:
            return f"{heading.group(1)} {heading.group(2).strip()}"

        line = BULLET_PATTERN.sub(lambda m: f"{m.group(1)}- ", line)
        line = self._normalize_emphasis(line)

        if hard_break:
            line += '  '
        return line

    def _normalize_emphasis(self, line: str) -> str:
        """Rewrite emphasis markers outside inline code and link destinations."""
        if '*' not in line and '__' not in line:
            return line

        protected: List[str] = []

        def stash(match: re.Match) -> str:
            protected.append(match.group(0))
            return f"\x00{len(protected) - 1}\x00"

        line = PROTECTED_SPAN_PATTERN.sub(stash, line)
        line = self._rewrite_emphasis(line)
        return PLACEHOLDER_PATTERN.sub(lambda match: protected[int(match.group(1))], line)

    @staticmethod
    def _rewrite_emphasis(text: str) -> str:
        text = UNDERSCORE_STRONG_PATTERN.sub(r'**\1**', text)
        return EMPHASIS_PATTERN.sub(r'_\1_', text)

    @staticmethod
    def _collapse_blank_lines(lines: List[Tuple[str, bool]]) -> str:
        """Join lines keeping at most one blank line in a row, one trailing newline."""
        cleaned: List[str] = []
        for line, protected in lines:
            if protected or line.strip():
                cleaned.append(line)
            elif cleaned and cleaned[-1] != '':
                cleaned.append('')

        while cleaned and cleaned[-1] == '':
            cleaned.pop()

        return '\n'.join(cleaned) + '\n'


__all__ = ['MarkdownFormatter']
