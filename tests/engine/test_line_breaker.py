"""Tests for greedy line breaking."""

from docpress.engine.line_breaker import LineBreaker


def fixed_measure(text, font, size):
    return len(text) * size * 0.5


class TestLineBreaker:
    """Test cases for LineBreaker."""

    def test_empty_text_gives_one_empty_line(self):
        """Empty input still occupies one line."""
        lines = LineBreaker(fixed_measure).break_text("", 100, "Helvetica", 10)

        assert len(lines) == 1
        assert lines[0].text == ""

    def test_greedy_fill(self):
        """Words are appended while the line still fits."""
        # 10pt at half an em: 5pt per character, 50pt fits ten characters
        lines = LineBreaker(fixed_measure).break_text("aaa bbb ccc ddd", 50, "Helvetica", 10)

        assert [line.text for line in lines] == ["aaa bbb", "ccc ddd"]
        assert all(line.width <= 50 for line in lines)

    def test_long_token_alone_on_line(self):
        """A token wider than the line sits alone and is flagged."""
        token = "x" * 40
        lines = LineBreaker(fixed_measure).break_text(f"short {token} tail", 50, "Helvetica", 10)

        assert [line.text for line in lines] == ["short", token, "tail"]
        assert lines[1].overflows
        assert not lines[0].overflows

    def test_newlines_are_hard_breaks(self):
        """Explicit newlines always start a new line, blank lines included."""
        lines = LineBreaker(fixed_measure).break_text("one\n\ntwo", 500, "Helvetica", 10)

        assert [line.text for line in lines] == ["one", "", "two"]

    def test_line_count_is_deterministic(self):
        """Identical input gives identical results."""
        breaker = LineBreaker(fixed_measure)
        text = "lorem ipsum dolor sit amet " * 20

        counts = {breaker.line_count(text, 120, "Helvetica", 10) for _ in range(5)}

        assert len(counts) == 1
