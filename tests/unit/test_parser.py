"""
test_parser.py
--------------
Unit tests for tooldocs.parser.

Tests front matter handling, the heading tree, tables, code, links, list
items, prose blocks and recovery from malformed input.
"""
from tooldocs.dataclasses.document import Document, DocumentInput
from tooldocs.parser import ensure_document, parse


class TestParseFrontMatter:
    """Test front matter extraction."""

    def test_embedded_front_matter(self, valid_page):
        """Test values are read and converted to strings."""
        doc = parse(valid_page)
        assert doc.front_matter_present
        assert doc.front_matter["title"] == "Azure Storage tools for the Azure MCP Server"
        assert doc.front_matter["ms.date"] == "2025-01-17"
        assert list(doc.front_matter)[:2] == ["title", "description"]

    def test_no_front_matter(self, body_only_page):
        """Test a page without a front matter block."""
        doc = parse(body_only_page)
        assert not doc.front_matter_present
        assert doc.front_matter == {}
        assert doc.headings[0].line == 1

    def test_separate_front_matter_text(self, body_only_page):
        """Test front matter supplied apart from the body."""
        doc = parse(body_only_page, front_matter_text="title: Separate\nms.topic: reference")
        assert doc.front_matter_present
        assert doc.front_matter["title"] == "Separate"

    def test_override_replaces_keys(self, valid_page):
        """Test override values replace parsed keys."""
        doc = parse(valid_page, front_matter_override={"ms.topic": "how-to", "author": "docs"})
        assert doc.front_matter["ms.topic"] == "how-to"
        assert doc.front_matter["author"] == "docs"
        assert doc.front_matter["title"].startswith("Azure Storage")

    def test_invalid_yaml_is_an_anomaly(self, broken_yaml_page):
        """Test invalid YAML degrades to empty front matter plus an anomaly."""
        doc = parse(broken_yaml_page)
        assert doc.front_matter == {}
        assert doc.front_matter_present
        assert [a.code for a in doc.anomalies] == ["invalid-front-matter"]
        # Body is still parsed
        assert doc.headings[0].text == "Broken tools for the Azure MCP Server"

    def test_unterminated_front_matter(self):
        """Test an unclosed front matter block is recorded."""
        doc = parse("---\ntitle: x\n\n# Heading\n")
        assert "unterminated-front-matter" in [a.code for a in doc.anomalies]
        assert not doc.front_matter_present

    def test_scalar_front_matter(self):
        """Test YAML that is not a mapping."""
        doc = parse("---\njust a string\n---\n# Heading\n")
        assert doc.front_matter == {}
        assert "front-matter-not-mapping" in [a.code for a in doc.anomalies]


class TestParseHeadings:
    """Test the heading tree."""

    def test_heading_tree(self, valid_page):
        """Test headings nest under the nearest lower-level heading."""
        doc = parse(valid_page)
        assert len(doc.headings) == 1
        h1 = doc.headings[0]
        assert h1.level == 1
        assert [c.text for c in h1.children] == ["Available operations", "Related content"]
        assert h1.children[0].children[0].text == "List storage accounts"

    def test_line_numbers_include_front_matter(self, valid_page):
        """Test heading lines refer to the original text."""
        doc = parse(valid_page)
        lines = valid_page.splitlines()
        for heading in doc.iter_headings():
            assert lines[heading.line - 1].lstrip("# ") == heading.text

    def test_skipped_level_is_kept(self):
        """Test H1 -> H3 is attached, not rejected."""
        doc = parse("# Title\n\n### Deep\n")
        assert doc.headings[0].children[0].level == 3

    def test_anchor_round_trip(self):
        """Test the anchor of '## List Storage Accounts'."""
        doc = parse("## List Storage Accounts\n\n[text](#list-storage-accounts)\n")
        assert doc.headings[0].anchor_slug == "list-storage-accounts"
        assert "list-storage-accounts" in doc.anchors

    def test_duplicate_headings_get_suffixes(self):
        """Test repeated headings get -1, -2 suffixes."""
        doc = parse("## Examples\n\n## Examples\n\n## Examples\n")
        assert [h.anchor_slug for h in doc.headings] == ["examples", "examples-1", "examples-2"]

    def test_explicit_anchor(self):
        """Test <a id> anchors are collected."""
        doc = parse('<a id="custom"></a>\n\n# Title\n')
        assert "custom" in doc.anchors


class TestParseBlocks:
    """Test tables, code, links and lists."""

    def test_parameter_table(self, valid_page):
        """Test tables are positional: first row is the header."""
        doc = parse(valid_page)
        table = doc.tables[0]
        assert table.header_row == ("Parameter", "Required or optional", "Description")
        assert table.rows[0][0] == "Subscription"
        assert not table.is_ragged

    def test_ragged_table(self):
        """Test rows with a different cell count are an anomaly."""
        doc = parse("| A | B |\n|---|---|\n| 1 | 2 | 3 |\n")
        assert doc.tables[0].is_ragged
        assert "ragged-table" in [a.code for a in doc.anomalies]

    def test_code_spans(self):
        """Test inline and fenced code are kept verbatim."""
        doc = parse("Run `tool.op --x` now.\n\n```bash\ntool.op --subscription s\n```\n")
        inline = [s for s in doc.code_spans if not s.is_fenced]
        fenced = [s for s in doc.code_spans if s.is_fenced]
        assert inline[0].text == "tool.op --x"
        assert fenced[0].text == "tool.op --subscription s\n"
        assert fenced[0].info == "bash"

    def test_indented_code_block(self):
        """Test indented code is a block but not a fence."""
        doc = parse("Intro.\n\n    tool.op --x\n\nAfter.\n")
        block = [s for s in doc.code_spans if s.is_block][0]
        assert not block.is_fenced
        assert block.location == 3
        assert block.content_line == 3

    def test_unclosed_fence(self):
        """Test an unclosed fence is recorded."""
        doc = parse("# Title\n\n```\ncode without end\n")
        assert "unclosed-code-fence" in [a.code for a in doc.anomalies]

    def test_links(self):
        """Test Markdown, anchor and HTML links."""
        doc = parse(
            '[a](other.md#part) and [b](#local) and <a href="https://example.com/x">c</a>\n'
        )
        targets = {link.target: link for link in doc.links}
        assert targets["other.md#part"].target_document == "other.md"
        assert targets["other.md#part"].target_anchor == "part"
        assert targets["#local"].is_anchor
        assert targets["https://example.com/x"].is_external

    def test_list_items(self, valid_page):
        """Test list items keep their marker and list index."""
        doc = parse(valid_page)
        prompts = [i for i in doc.list_items if i.text.startswith("**")]
        assert len(prompts) == 5
        assert {i.marker for i in prompts} == {"-"}
        assert len({i.list_index for i in prompts}) == 1

    def test_html_comment(self, valid_page):
        """Test HTML comments are collected."""
        doc = parse(valid_page)
        assert [c.text for c in doc.html_comments] == ["storage.account.list"]

    def test_prose_excludes_code(self):
        """Test text blocks leave inline code out."""
        doc = parse("Use `{placeholder}` with the Key Vault.\n")
        assert "{placeholder}" not in doc.text_blocks[0].text
        assert "Key Vault" in doc.text_blocks[0].text


class TestParseProperties:
    """Test parser-wide guarantees."""

    def test_determinism(self, valid_page, broken_yaml_page):
        """Test two parses of the same text are equal."""
        for text in (valid_page, broken_yaml_page, "", "# x\n|a|\n```"):
            assert parse(text) == parse(text)

    def test_never_raises(self):
        """Test garbage input yields a Document."""
        for text in ("", "---", "---\n---", "|||\n|-|", "<!-- open", "[x](", "\x00\x01"):
            assert isinstance(parse(text), Document)

    def test_ensure_document_inputs(self, valid_page):
        """Test mappings and DocumentInputs are parsed."""
        doc = ensure_document({"id": "a.md", "content": valid_page, "frontMatterOverride": {"x": 1}})
        assert doc.id == "a.md"
        assert doc.front_matter["x"] == "1"
        same = ensure_document(DocumentInput("a.md", valid_page, {"x": 1}))
        assert same == doc
        assert ensure_document(doc) is doc
