"""
PdfTextSanitizer: Clean generated text before it is drawn into a PDF.

The exporter draws with the PDF standard fonts (Helvetica family), which
only cover the Windows-1252 character set. Text coming back from the brief
service regularly contains characters outside that set (emoji, arrows,
CJK punctuation, stars used as bullets) and occasionally mojibake from
upstream encoding mix-ups. Drawn as-is these render as empty boxes.

Problems addressed:
1. Mojibake (encoding corruption): â€™ -> '
2. Compatibility forms: ligatures, full-width characters, ellipsis
3. Control, format and private-use characters
4. Characters the standard fonts cannot draw -> ASCII transliteration
5. Runs of spaces and blank lines

Uses ftfy for encoding recovery, unicodedata for character classification
and unidecode for transliteration.
"""

import re
import time
import unicodedata

import ftfy
from unidecode import unidecode

# Encoding of the PDF standard Type 1 fonts (WinAnsiEncoding)
PDF_FONT_ENCODING = "cp1252"


class PdfTextSanitizer:
    """
    Sanitize text for reliable rendering with the PDF standard fonts.

    Performs a multi-stage cleanup:
    1. Fix mojibake using ftfy
    2. Normalize Unicode (NFKC form)
    3. Remove control, format and private-use characters
    4. Transliterate characters the fonts cannot encode
    5. Normalize whitespace
    """

    def __init__(self, preserve_newlines: bool = True):
        """
        Initialize the sanitizer.

        Args:
            preserve_newlines: If True, keep newlines. If False, replace with spaces.
        """
        self.preserve_newlines = preserve_newlines
        self.sanitization_log = []

    def sanitize(self, text: str) -> tuple[str, dict]:
        """
        Sanitize text and return cleaned text + statistics.

        Args:
            text: Raw text from the brief service or the user

        Returns:
            (cleaned_text, stats_dict) where stats_dict contains:
            - mojibake_fixed: Count of characters changed by ftfy
            - control_chars_removed: Count of control/format characters removed
            - private_use_removed: Count of private-use/surrogate chars removed
            - transliterations: Count of characters transliterated for the fonts
        """
        self.sanitization_log = []
        stats = {
            "mojibake_fixed": 0,
            "control_chars_removed": 0,
            "private_use_removed": 0,
            "transliterations": 0,
        }
        if not text:
            return "", stats

        start = time.time()

        text, stats["mojibake_fixed"] = self._fix_mojibake(text)
        text = unicodedata.normalize('NFKC', text)
        text, stats["control_chars_removed"], stats["private_use_removed"] = self._clean_problematic_chars(text)
        text, stats["transliterations"] = self._transliterate_unencodable(text)
        text = self._clean_whitespace(text)

        self._log(f"Sanitized {len(text)} chars in {time.time() - start:.3f}s")
        return text, stats

    def clean(self, text: str) -> str:
        """Sanitize and return only the cleaned text."""
        return self.sanitize(text)[0]

    def _fix_mojibake(self, text: str) -> tuple[str, int]:
        """Fix mojibake (encoding corruption) using ftfy."""
        original = text
        text = ftfy.fix_text(text)
        fixes = sum(1 for a, b in zip(original, text) if a != b)
        if fixes > 0:
            self._log(f"Fixed {fixes} mojibake/encoding corruption characters")
        return text, fixes

    def _clean_problematic_chars(self, text: str) -> tuple[str, int, int]:
        """
        Remove or replace control, format and private-use characters.

        Returns:
            (cleaned_text, control_removed_count, private_use_count)
        """
        cleaned = []
        control_removed = 0
        private_use_removed = 0

        for char in text:
            category = unicodedata.category(char)

            if char == '\n':
                cleaned.append('\n' if self.preserve_newlines else ' ')
            elif char == '\t':
                cleaned.append(' ')
            elif category in ('Co', 'Cs'):
                private_use_removed += 1
            elif category[0] == 'C':
                control_removed += 1
                # Control characters become spaces; format characters (zero-width) vanish
                if category == 'Cc':
                    cleaned.append(' ')
            else:
                cleaned.append(char)

        if control_removed:
            self._log(f"Removed {control_removed} control/format characters")
        if private_use_removed:
            self._log(f"Removed {private_use_removed} private-use/surrogate characters")

        return ''.join(cleaned), control_removed, private_use_removed

    def _transliterate_unencodable(self, text: str) -> tuple[str, int]:
        """
        Replace characters outside the font encoding with ASCII equivalents.

        Characters the fonts can draw (accents, em dash, middle dot, curly
        quotes) are kept; everything else goes through unidecode, which maps
        symbols without an equivalent (most emoji) to an empty string.
        """
        converted = []
        transliterations = 0
        for char in text:
            try:
                char.encode(PDF_FONT_ENCODING)
                converted.append(char)
            except UnicodeEncodeError:
                transliterations += 1
                converted.append(unidecode(char))

        if transliterations:
            self._log(f"Transliterated {transliterations} characters the PDF fonts cannot draw")

        return ''.join(converted), transliterations

    def _clean_whitespace(self, text: str) -> str:
        """Collapse runs of spaces and limit blank lines to one."""
        text = re.sub(r' {2,}', ' ', text)
        text = re.sub(r' *\n *', '\n', text)
        text = re.sub(r'\n{3,}', '\n\n', text)
        return text.strip()

    def _log(self, message: str) -> None:
        """Log sanitization actions for debugging."""
        self.sanitization_log.append(message)

    def get_log(self) -> list[str]:
        """Return the sanitization log."""
        return self.sanitization_log.copy()
