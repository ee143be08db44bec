"""Tests for the HTML snippets used by the Streamlit panels."""

from financify.display import big_number, message_box


class TestMessageBox:
    """Tests for the insight and error panels."""

    def test_ai_text_is_escaped(self):
        html = message_box("Overview", '<img src=x onerror="alert(1)"> & more')

        assert "<img" not in html
        assert "&lt;img src=x onerror=&quot;alert(1)&quot;&gt; &amp; more" in html

    def test_error_text_is_escaped(self):
        html = message_box("Something went wrong", "<script>boom()</script>", "error-box")

        assert html.startswith('<div class="error-box">')
        assert "<script>" not in html
        assert "&lt;script&gt;boom()&lt;/script&gt;" in html

    def test_line_breaks_kept(self):
        html = message_box("Overview", "first\nsecond")
        assert "<p>first<br>second</p>" in html

    def test_title_is_escaped(self):
        assert "<h4>a &lt;b&gt;</h4>" in message_box("a <b>", "text")


class TestBigNumber:
    """Tests for the highlight figures."""

    def test_plain(self):
        assert big_number("$1,234.50") == '<p class="big-number">$1,234.50</p>'

    def test_with_color(self):
        html = big_number("-€75.50", color="#dc2626")
        assert html == '<p class="big-number" style="color:#dc2626">-€75.50</p>'

    def test_color_cannot_break_out_of_attribute(self):
        html = big_number("1", color='red"><script>')
        assert "<script>" not in html
