"""Tests for HTML to Markdown rendering."""

import pytest

from docsnap.conversion.markdown import MarkdownRenderer, clean_markdown, render_to_markdown
from docsnap.dom.tree import DocumentTree
from docsnap.models.config import ExtractionConfig
from docsnap.models.document import CodeBlock, Heading

URL = "https://docs.example.com/guide/intro"


def region_of(html: str):
    """Parse html and return its first div as the region."""
    return DocumentTree.from_html(f"<html><body><div>{html}</div></body></html>", URL).select_one("div")


def render(html: str) -> str:
    return render_to_markdown(region_of(html), URL).content


class TestBlockElements:
    """Tests for block-level tag rules."""

    def test_single_paragraph(self):
        """Test a plain paragraph renders wrapped in blank lines."""
        renderer = MarkdownRenderer()
        assert renderer.render_node(region_of("<p>Hello world</p>"), URL) == "\n\nHello world\n\n"

    def test_paragraph_content_trimmed(self):
        """Test final content is trimmed."""
        assert render("<p>Hello world</p>") == "Hello world"

    @pytest.mark.parametrize("level", [1, 2, 3, 4, 5, 6])
    def test_headings(self, level):
        """Test h1-h6 render with matching hash marks."""
        assert render(f"<h{level}> Title </h{level}>") == f"{'#' * level} Title"

    def test_whitespace_collapsed(self):
        """Test runs of whitespace in text collapse to one space."""
        assert render("<p>Hello\n     world</p>") == "Hello world"

    def test_line_break(self):
        """Test br renders a newline."""
        assert render("<p>one<br>two</p>") == "one\ntwo"

    def test_blockquote(self):
        """Test every blockquote line is prefixed."""
        assert render("<blockquote>first<br>second</blockquote>") == "> first\n> second"

    def test_horizontal_rule(self):
        """Test hr renders a thematic break."""
        assert render("<p>a</p><hr><p>b</p>") == "a\n\n---\n\nb"

    def test_blank_lines_collapsed(self):
        """Test adjacent blocks are separated by exactly one blank line."""
        assert render("<h2>Title</h2><p>Body</p>") == "## Title\n\nBody"


class TestInlineElements:
    """Tests for inline tag rules."""

    def test_strong_and_emphasis(self):
        """Test bold and italic markers."""
        assert render("<p><strong>bold</strong> <b>b</b> <em>it</em> <i>i</i></p>") == "**bold** **b** *it* *i*"

    def test_inline_code(self):
        """Test inline code is trimmed and wrapped in backticks."""
        assert render("<p>Use <code> pip </code> here</p>") == "Use `pip` here"

    def test_link_absolutized(self):
        """Test relative links resolve against the base URL."""
        assert render('<p><a href="/other">Other</a></p>') == "[Other](https://docs.example.com/other)"

    def test_link_without_href(self):
        """Test anchors without href render their text."""
        assert render("<p><a>Plain</a></p>") == "Plain"

    def test_link_without_text(self):
        """Test anchors without text render nothing."""
        assert render('<p>x<a href="/a"> </a>y</p>') == "xy"

    def test_image(self):
        """Test images resolve their src and keep alt text."""
        assert render('<p><img src="img/a.png" alt="Diagram"></p>') == "![Diagram](https://docs.example.com/guide/img/a.png)"

    def test_image_default_alt(self):
        """Test images without alt use a placeholder."""
        assert render('<p><img src="/a.png"></p>') == "![image](https://docs.example.com/a.png)"

    def test_image_without_src(self):
        """Test images without src render nothing."""
        assert render('<p>a<img alt="x">b</p>') == "ab"

    def test_unknown_tags_unwrapped(self):
        """Test unknown tags pass their children through."""
        assert render("<p><span>Hi</span> <custom-tag>there</custom-tag></p>") == "Hi there"


class TestCodeBlocks:
    """Tests for pre/code rendering and collection."""

    def test_fenced_python_block(self):
        """Test a language-tagged code block renders as a fenced block."""
        renderer = MarkdownRenderer()
        region = region_of('<pre><code class="language-python">print(1)</code></pre>')

        assert renderer.render_node(region, URL) == "\n\n```python\nprint(1)\n```\n\n"

    def test_fenced_block_collected(self):
        """Test the code block is collected once with its language."""
        result = render_to_markdown(region_of('<pre><code class="language-python">print(1)</code></pre>'), URL)

        assert result.code_blocks == [CodeBlock(language="python", code="print(1)")]

    def test_raw_text_used(self):
        """Test nested markup inside code is not rendered as Markdown."""
        html = '<pre><code class="language-html"><span class="tok">&lt;b&gt;</span> <strong>x</strong></code></pre>'
        assert render(html) == "```html\n<b> x\n```"

    def test_pre_without_code(self):
        """Test a bare pre uses its own class for the language."""
        assert render('<pre class="lang-bash">ls -la</pre>') == "```bash\nls -la\n```"

    def test_unlabeled_fence(self):
        """Test code without a language gets an unlabeled fence."""
        assert render("<pre><code>x = 1</code></pre>") == "```\nx = 1\n```"

    def test_empty_pre_not_collected(self):
        """Test empty code blocks are not collected."""
        result = render_to_markdown(region_of("<pre><code>  </code></pre>"), URL)
        assert result.code_blocks == []

    def test_code_blocks_in_order(self):
        """Test code blocks are collected in document order."""
        html = '<pre><code class="language-go">a</code></pre><p>x</p><pre><code class="language-rust">b</code></pre>'
        result = render_to_markdown(region_of(html), URL)

        assert [block.language for block in result.code_blocks] == ["go", "rust"]

    def test_blank_lines_in_code_preserved(self):
        """Test consecutive blank lines inside a code block survive cleanup."""
        html = '<pre><code class="language-python">import os\n\n\ndef main():\n    pass</code></pre>'
        result = render_to_markdown(region_of(html), URL)

        assert result.content == "```python\nimport os\n\n\ndef main():\n    pass\n```"
        assert result.code_blocks[0].code == "import os\n\n\ndef main():\n    pass"

    def test_trailing_spaces_in_code_preserved(self):
        """Test trailing spaces inside a code block are kept in the content."""
        result = render_to_markdown(region_of("<pre>a  \nb</pre>"), URL)

        assert result.content == "```\na  \nb\n```"
        assert result.code_blocks[0].code == "a  \nb"

    def test_content_matches_collected_code(self):
        """Test every collected code block appears verbatim in the content."""
        html = (
            "<p>Intro  </p>"
            '<pre><code class="language-yaml">key: value  \n\n\n\nother: 1</code></pre>'
            "<p>Between</p>"
            '<pre><code class="language-bash">echo hi\n\n\n\necho bye</code></pre>'
        )
        result = render_to_markdown(region_of(html), URL)

        for block in result.code_blocks:
            assert f"```{block.language}\n{block.code}\n```" in result.content
        assert result.content.startswith("Intro\n\n```yaml")


class TestLists:
    """Tests for list rendering."""

    def test_ordered_list(self):
        """Test ordered lists are numbered from 1."""
        assert render("<ol><li>a</li><li>b</li></ol>") == "1. a\n2. b"

    def test_unordered_list(self):
        """Test unordered lists use dashes."""
        assert render("<ul><li>one</li><li><em>two</em></li></ul>") == "- one\n- *two*"

    def test_non_li_children_ignored(self):
        """Test only direct li children are rendered."""
        assert render("<ul><li>x</li><span>stray</span></ul>") == "- x"


class TestTables:
    """Tests for table rendering."""

    def test_header_and_data_row(self):
        """Test a header row is followed by one separator."""
        html = "<table><tr><th>H1</th><th>H2</th></tr><tr><td>a</td><td>b</td></tr></table>"
        assert render(html) == "| H1 | H2 |\n| --- | --- |\n| a | b |"

    def test_single_separator(self):
        """Test later header cells never emit a second separator."""
        html = (
            "<table><tr><th>H1</th><th>H2</th></tr>"
            "<tr><td>a</td><td>b</td></tr>"
            "<tr><th>X</th><td>y</td></tr></table>"
        )
        lines = render(html).split("\n")

        assert lines == ["| H1 | H2 |", "| --- | --- |", "| a | b |", "| X | y |"]

    def test_separator_after_first_row_without_th(self):
        """Test tables without header cells still get a separator after row one."""
        html = "<table><tr><td>a</td></tr><tr><td>b</td></tr></table>"
        assert render(html) == "| a |\n| --- |\n| b |"

    def test_cell_text_trimmed(self):
        """Test cell whitespace is trimmed and collapsed."""
        html = "<table><tr><td>  spaced\n  out </td></tr></table>"
        assert render(html) == "| spaced out |\n| --- |"

    def test_empty_table(self):
        """Test tables without rows render nothing."""
        assert render("<p>a</p><table></table><p>b</p>") == "a\n\nb"


class TestHiddenAndRemoved:
    """Tests for hidden elements and preprocessing removal."""

    def test_hidden_attribute(self):
        """Test elements with hidden render nothing."""
        assert render("<p>shown</p><p hidden>secret</p>") == "shown"

    def test_aria_hidden(self):
        """Test aria-hidden=true renders nothing, case-insensitively."""
        assert render('<p>shown</p><p aria-hidden="TRUE">secret</p><p aria-hidden="false">also</p>') == "shown\n\nalso"

    def test_removed_elements(self):
        """Test disallowed elements are removed before rendering."""
        html = (
            "<p>keep</p><nav>menu</nav><script>alert(1)</script><style>p{}</style>"
            "<div class='ad'>buy</div><div class='cookie-banner'>cookies</div><iframe>frame</iframe>"
        )
        assert render(html) == "keep"

    def test_source_tree_not_mutated(self):
        """Test rendering works on a copy and leaves the tree intact."""
        tree = DocumentTree.from_html(
            "<html><body><article><p>text</p><nav><a href='/a'>A</a></nav><script>x</script></article></body></html>",
            URL,
        )
        region = tree.select_one("article")

        render_to_markdown(region, URL)

        assert len(tree.select("nav")) == 1
        assert len(tree.select("script")) == 1
        assert len(region.find_all("a")) == 1

    def test_custom_remove_selectors(self):
        """Test removal selectors come from configuration."""
        config = ExtractionConfig(remove_selectors=[".edit-link", "[[bad"])
        region = region_of("<p>body</p><p class='edit-link'>Edit this page</p>")

        assert render_to_markdown(region, URL, config).content == "body"


class TestHeadingCollection:
    """Tests for heading collection."""

    def test_headings_in_order_with_ids(self):
        """Test headings are collected in order with optional ids."""
        result = render_to_markdown(region_of("<h1 id='top'>Top</h1><p>x</p><h3>Sub</h3><h2 id='b'>B</h2>"), URL)

        assert result.headings == [
            Heading(level=1, text="Top", id="top"),
            Heading(level=3, text="Sub"),
            Heading(level=2, text="B", id="b"),
        ]

    def test_removed_headings_excluded(self):
        """Test headings inside removed elements are not collected."""
        result = render_to_markdown(region_of("<h1>Kept</h1><nav><h2>Menu</h2></nav>"), URL)

        assert [h.text for h in result.headings] == ["Kept"]

    def test_heading_count_matches_content(self):
        """Test every rendered heading is collected."""
        result = render_to_markdown(region_of("<h2>A</h2><div><h2>B</h2><section><h4>C</h4></section></div>"), URL)

        assert len(result.headings) == 3
        assert result.content == "## A\n\n## B\n\n#### C"


class TestCleanMarkdown:
    """Tests for clean_markdown."""

    def test_trailing_whitespace_and_blank_runs(self):
        """Test trailing spaces are stripped and blank runs collapse."""
        assert clean_markdown("\n\na  \n\n\n\nb \n\n") == "a\n\nb"

    def test_fenced_code_left_untouched(self):
        """Test cleanup skips fenced regions but still normalizes prose."""
        markdown = "Text  \n\n\n\n```py\nx = 1  \n\n\n\ny = 2\n```\n\n\n\nMore  "

        assert clean_markdown(markdown) == "Text\n\n```py\nx = 1  \n\n\n\ny = 2\n```\n\nMore"
