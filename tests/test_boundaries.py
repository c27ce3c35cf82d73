"""Tests for smart_chunking.boundaries."""

from smart_chunking.boundaries import (
    TextSpan,
    split_paragraphs,
    split_sentences,
    split_words,
)


class TestParagraphs:
    def test_empty_string(self):
        """Empty text has no paragraphs."""
        assert split_paragraphs("") == []

    def test_none_input(self):
        """None is treated as empty text."""
        assert split_paragraphs(None) == []

    def test_whitespace_only(self):
        """Whitespace-only text has no paragraphs."""
        assert split_paragraphs("  \n\n \t \n") == []

    def test_two_paragraphs(self):
        """A blank line separates two paragraphs with exact offsets."""
        text = "Para one.\n\nPara two."
        result = split_paragraphs(text)
        assert [p.text for p in result] == ["Para one.", "Para two."]
        assert (result[0].start, result[0].end) == (0, 9)
        assert (result[1].start, result[1].end) == (11, 20)

    def test_offsets_point_into_source(self):
        """Offsets of a stripped paragraph still slice the source."""
        text = "  \n\n  Hello world  \n"
        result = split_paragraphs(text)
        assert len(result) == 1
        assert result[0].text == "Hello world"
        assert text[result[0].start:result[0].end] == "Hello world"

    def test_multiple_blank_lines(self):
        """Several blank lines count as one separator."""
        assert len(split_paragraphs("A\n\n\n\nB")) == 2

    def test_blank_line_with_spaces(self):
        """A line holding only spaces is blank."""
        assert len(split_paragraphs("A\n   \nB")) == 2

    def test_windows_line_endings(self):
        """CRLF line endings are handled."""
        result = split_paragraphs("First\r\n\r\nSecond")
        assert [p.text for p in result] == ["First", "Second"]

    def test_single_newlines_stay_together(self):
        """Single newlines do not split a paragraph."""
        result = split_paragraphs("line one\nline two\nline three")
        assert len(result) == 1
        assert result[0].text == "line one\nline two\nline three"

    def test_paragraph_indices_sequential(self):
        """Paragraph indices count paragraphs, not lines."""
        result = split_paragraphs("A\n\nB\n\n\nC")
        assert [p.paragraph_index for p in result] == [0, 1, 2]


class TestSentences:
    def test_empty_string(self):
        """Empty text has no sentences."""
        assert split_sentences("") == []

    def test_none_input(self):
        """None is treated as empty text."""
        assert split_sentences(None) == []

    def test_two_sentences(self):
        """Periods followed by whitespace end sentences."""
        result = split_sentences("First sentence. Second sentence.")
        assert [s.text for s in result] == ["First sentence.", "Second sentence."]

    def test_question_and_exclamation(self):
        """Question and exclamation marks end sentences."""
        result = split_sentences("Is it done? Yes! It is.")
        assert [s.text for s in result] == ["Is it done?", "Yes!", "It is."]

    def test_punctuation_runs_stay_attached(self):
        """Runs of terminators stay with their sentence."""
        result = split_sentences("Wait... what?! Fine.")
        assert [s.text for s in result] == ["Wait...", "what?!", "Fine."]

    def test_trailing_fragment_kept(self):
        """Text after the last terminator is kept as a sentence."""
        result = split_sentences("First one. Second without end")
        assert len(result) == 2
        assert result[1].text == "Second without end"

    def test_no_split_inside_decimal(self):
        """A period inside a number does not end a sentence."""
        result = split_sentences("Pi is about 3.14 in practice. Next.")
        assert result[0].text == "Pi is about 3.14 in practice."

    def test_closing_quote_attached(self):
        """Closing quotes stay with the sentence they end."""
        result = split_sentences('He said "stop." Then he left.')
        assert [s.text for s in result] == ['He said "stop."', "Then he left."]

    def test_offsets_relative_to_source(self):
        """Sentence offsets are relative to the whole document."""
        text = "Intro.\n\nAlpha one. Beta two."
        paragraph = split_paragraphs(text)[1]
        sentences = split_sentences(paragraph)
        assert sentences[1].start == text.index("Beta")
        assert text[sentences[1].start:sentences[1].end] == "Beta two."
        assert all(s.paragraph_index == 1 for s in sentences)

    def test_no_characters_lost(self):
        """Splitting drops only whitespace."""
        text = "One. Two?  Three!\nFour and five"
        joined = "".join(s.text for s in split_sentences(text))
        assert "".join(joined.split()) == "".join(text.split())


class TestWords:
    def test_empty(self):
        """Empty text has no words."""
        assert split_words("") == []

    def test_offsets(self):
        """Word offsets slice the source text."""
        text = "alpha  beta\ngamma"
        result = split_words(text)
        assert [w.text for w in result] == ["alpha", "beta", "gamma"]
        assert all(text[w.start:w.end] == w.text for w in result)

    def test_inherits_span_offset(self):
        """Words inherit the offset and paragraph of their span."""
        span = TextSpan(text="x y", start=10, end=13, paragraph_index=4)
        result = split_words(span)
        assert [(w.start, w.paragraph_index) for w in result] == [(10, 4), (12, 4)]
