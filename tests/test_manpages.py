"""Tests for manpages.py: rman output tidying and man page retrieval."""
import gzip

from gman.manpages import (
    CROSS_REFERENCE_TEMPLATE,
    ManPageSource,
    read_man_source,
    strip_overstrike,
    tidy_formatter_html,
)


RMAN_OUTPUT = """<html><body>
<a href="#toc">Table of Contents</a><p>
<h2><a name='sect0' href='#toc0'>Name</a></h2>
printf - formatted output
<h2><a name="sect1" href="#toc1">Synopsis
continued</a></h2>
<b>int printf(const char *format, ...);</b>
<hr><p>
<a name="toc"><b>Table of Contents</b></a><p>
<ul>
<li><a name="toc0" href="#sect0">Name</a></li>
<li><a name="toc1" href="#sect1">Synopsis</a></li>
<ul><li><a name="toc2" href="#sect2">Subsection</a></li></ul>
</ul>
</body></html>
"""


def test_tidy_removes_trailing_table_of_contents():
    result = tidy_formatter_html(RMAN_OUTPUT)
    assert "toc0" not in result
    assert "Subsection" not in result
    assert result.endswith("\n</body></html>\n")


def test_tidy_removes_through_last_list_close():
    text = "<p>intro</p><HR><P>toc<ul><li>a<ul><li>b</ul></ul>\nafter"
    assert tidy_formatter_html(text) == "<p>intro</p>\nafter"


def test_tidy_unwraps_section_anchors_in_both_quote_styles():
    result = tidy_formatter_html(RMAN_OUTPUT)
    assert "<h2>Name</h2>" in result
    assert "<h2>Synopsis\ncontinued</h2>" in result
    assert "sect0" not in result
    assert "sect1" not in result


def test_tidy_unwraps_uppercase_anchor():
    text = "<A NAME='sect12' HREF='#toc12'>DESCRIPTION</A>"
    assert tidy_formatter_html(text) == "DESCRIPTION"


def test_tidy_leaves_other_anchors():
    text = '<a href="man:open(2)">open</a> <a name="sect" href="#toc">x</a>'
    assert tidy_formatter_html(text) == text


def test_tidy_removes_table_of_contents_link():
    result = tidy_formatter_html(RMAN_OUTPUT)
    assert "Table of Contents</a><p>" not in result
    assert '<a href="#toc">' not in result


def test_strip_overstrike_removes_bold_and_underline():
    bold = "N\x08NA\x08AM\x08ME\x08E"
    underline = "_\x08f_\x08i_\x08l_\x08e"
    assert strip_overstrike(f"{bold} {underline}") == "NAME file"


def test_read_man_source_plain_and_gzip(tmp_path):
    plain = tmp_path / "ls.1"
    plain.write_text(".TH LS 1\n")
    packed = tmp_path / "cat.1.gz"
    with gzip.open(packed, "wt", encoding="utf-8") as handle:
        handle.write(".TH CAT 1\n")

    assert read_man_source(plain) == ".TH LS 1\n"
    assert read_man_source(str(packed)) == ".TH CAT 1\n"


class ScriptedRunner:
    """Records argv lists and answers from a table keyed on the program."""

    def __init__(self, outputs):
        self.outputs = outputs
        self.calls = []

    def __call__(self, argv, input_text=None):
        self.calls.append((list(argv), input_text))
        return self.outputs.get(argv[0], "")


def test_fetch_with_formatter_pipes_source_through_rman(tmp_path):
    source = tmp_path / "printf.3.gz"
    with gzip.open(source, "wt", encoding="utf-8") as handle:
        handle.write(".TH PRINTF 3\n")
    runner = ScriptedRunner({
        "man": f"{source}\n/other/printf.3p.gz\n",
        "/usr/bin/rman": "<body>doc<hr><p><ul><li>toc</ul></body>",
    })

    page = ManPageSource("/usr/bin/rman", runner).fetch("2:3", "printf")

    assert runner.calls[0] == (["man", "-S", "2:3", "-w", "printf"], None)
    argv, stdin = runner.calls[1]
    assert argv == ["/usr/bin/rman", "-f", "HTML", "-r", CROSS_REFERENCE_TEMPLATE, "-S"]
    assert stdin == ".TH PRINTF 3\n"
    assert page.html == "<body>doc</body>"
    assert page.formatted
    assert page.location == "man:printf(2:3)"


def test_fetch_with_formatter_and_unknown_page_is_empty():
    runner = ScriptedRunner({"man": ""})

    page = ManPageSource("/usr/bin/rman", runner).fetch("3", "nosuchpage")

    assert page.is_empty
    assert [argv for argv, _ in runner.calls] == [["man", "-S", "3", "-w", "nosuchpage"]]


def test_fetch_without_formatter_uses_plain_man():
    runner = ScriptedRunner({"man": "P\x08PR\x08RI\x08IN\x08NT\x08TF\x08F <stdio.h>\n"})

    page = ManPageSource(None, runner).fetch("2:3", "printf")

    assert runner.calls == [(["man", "-S", "2:3", "printf"], None)]
    assert page.html == "<pre>PRINTF &lt;stdio.h&gt;\n</pre>"
    assert not page.formatted


def test_plain_output_is_not_tidied():
    runner = ScriptedRunner({"man": "<hr><p>kept</ul>"})
    page = ManPageSource(None, runner).fetch("1", "x")
    assert "kept" in page.html


def test_shell_metacharacters_stay_in_one_argument():
    runner = ScriptedRunner({})
    page_name = "printf'; rm -rf ~; echo '"

    ManPageSource(None, runner).fetch("2:3", page_name)

    assert runner.calls[0][0] == ["man", "-S", "2:3", page_name]
