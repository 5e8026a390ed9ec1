from rendering import render_markdown, strip_tags


def test_strip_tags_keeps_text():
    assert strip_tags("<p><b>Bold</b> text</p>") == "Bold text"
    assert strip_tags(None) == ""


def test_strip_tags_does_not_span_lines():
    assert strip_tags("<p\nclass='x'>Hi</p>") == "<p\nclass='x'>Hi"


def test_render_markdown_tables():
    html = render_markdown("| a | b |\n|---|---|\n| 1 | 2 |")
    assert "<table>" in html
    assert render_markdown("") == ""
