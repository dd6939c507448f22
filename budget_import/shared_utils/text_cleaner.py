"""
Text Cleaner - Handles cell text cleaning and normalization
"""
import re


class TextCleaner:
    """Cleans and normalizes spreadsheet cell text for matching."""

    def clean_cell(self, value) -> str:
        """
        Edge-trim a raw cell value into text.
        Non-breaking and zero-width spaces are treated as whitespace.
        """
        if value is None:
            return ""
        text = str(value)
        text = text.replace('\u00a0', ' ').replace('\u200b', '')
        return text.strip()

    def normalize_header(self, text: str) -> str:
        """
        Normalize a header cell for synonym lookup:
        lowercase, trim, separators to spaces, collapsed whitespace.
        """
        if not text:
            return ""

        # Replace all dash variants with standard dash
        text = re.sub(r"[\u2010-\u2015\u2212]", "-", text)

        text = text.lower().strip()
        text = re.sub(r"[:\-_]", " ", text)
        text = re.sub(r"\s+", " ", text)
        return text.strip()

    def row_text(self, cells) -> str:
        """Join a row into one lowercase string for phrase search."""
        return " ".join(cells).lower()

    def is_blank(self, text) -> bool:
        return not text or not str(text).strip()
