"""
Unit tests for PdfTextSanitizer.

Covers the text problems that show up in generated briefs before they are
drawn with the PDF standard fonts: mojibake, emoji, control characters and
ragged whitespace.
"""

from briefdesk.sanitization import PdfTextSanitizer


class TestMojibakeFix:
    """Test mojibake (encoding corruption) fixing."""

    def test_fix_utf8_read_as_cp1252(self):
        sanitizer = PdfTextSanitizer()

        cleaned, stats = sanitizer.sanitize("donâ€™t stop")

        assert cleaned == "don't stop"
        assert stats["mojibake_fixed"] > 0

    def test_legitimate_accents_preserved(self):
        """Accented letters are in the font encoding and must survive."""
        sanitizer = PdfTextSanitizer()

        for text in ["José García", "Montréal", "Müller", "naïveté"]:
            cleaned, stats = sanitizer.sanitize(text)
            assert cleaned == text
            assert stats["transliterations"] == 0


class TestUnencodableCharacters:
    """Test characters the standard fonts cannot draw."""

    def test_emoji_is_removed(self):
        cleaned, stats = PdfTextSanitizer().sanitize("Launch 🚀 now")

        assert cleaned == "Launch now"
        assert stats["transliterations"] == 1

    def test_symbols_are_transliterated(self):
        cleaned, _ = PdfTextSanitizer().sanitize("Awareness → Consideration")

        assert "→" not in cleaned
        assert cleaned.startswith("Awareness")
        assert cleaned.endswith("Consideration")

    def test_dashes_and_middle_dot_are_kept(self):
        text = "HIGHLIGHT · AUDIENCE — short"

        assert PdfTextSanitizer().clean(text) == text

    def test_ligatures_are_normalized(self):
        assert PdfTextSanitizer().clean("ﬁne") == "fine"


class TestControlCharacters:
    def test_control_and_zero_width_characters_are_removed(self):
        cleaned, _ = PdfTextSanitizer().sanitize("Brand\x07 Es\u200bsence")

        assert cleaned == "Brand Essence"

    def test_private_use_characters_are_removed(self):
        cleaned, stats = PdfTextSanitizer().sanitize("Icon\ue000 here")

        assert cleaned == "Icon here"
        assert stats["private_use_removed"] == 1

    def test_tab_becomes_space(self):
        assert PdfTextSanitizer().clean("a\tb") == "a b"


class TestWhitespace:
    def test_runs_are_collapsed(self):
        cleaned = PdfTextSanitizer().clean("  one   two  \n\n\n\nthree  ")

        assert cleaned == "one two\n\nthree"

    def test_newlines_can_be_flattened(self):
        assert PdfTextSanitizer(preserve_newlines=False).clean("one\ntwo") == "one two"

    def test_empty_input(self):
        cleaned, stats = PdfTextSanitizer().sanitize("")

        assert cleaned == ""
        assert all(value == 0 for value in stats.values())


class TestLogging:
    def test_log_records_actions(self):
        sanitizer = PdfTextSanitizer()
        sanitizer.sanitize("Launch 🚀")

        log = sanitizer.get_log()
        assert any("Transliterated" in line for line in log)

        log.append("mutated")
        assert "mutated" not in sanitizer.get_log()
