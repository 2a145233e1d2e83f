"""Tests for output formatters."""

import csv
import io
import json

import pytest

from cxx_metrics.analysis import FileAnalysis
from cxx_metrics.exceptions import ParsingError
from cxx_metrics.formatters import (
    CsvFormatter,
    JsonFormatter,
    RichFormatter,
    TextFormatter,
    get_formatter,
)
from cxx_metrics.formatters.text_formatter import HEADER, NAME_WIDTH
from cxx_metrics.traversal import FunctionRecord


@pytest.fixture
def analyses():
    records = [
        FunctionRecord("/src", "main.cpp", "ns::Foo::bar", 0, 6, 1),
        FunctionRecord("/src", "main.cpp", "main", 2, 13, 3),
    ]
    return [
        FileAnalysis("/src/main.cpp", records, diagnostics=["/src/main.cpp:9: unknown type name 'widget'"]),
        FileAnalysis("/src/broken.cpp", error=ParsingError("/src/broken.cpp", "bad")),
        FileAnalysis("/src/empty.cpp"),
    ]


class TestGetFormatter:
    @pytest.mark.parametrize(
        "name, cls",
        [("text", TextFormatter), ("csv", CsvFormatter), ("json", JsonFormatter), ("rich", RichFormatter)],
    )
    def test_known(self, name, cls):
        assert isinstance(get_formatter(name), cls)

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_formatter("xml")


class TestTextFormatter:
    def test_layout(self, analyses):
        lines = TextFormatter().format(analyses).splitlines()
        assert lines[0] == "/src/main.cpp"
        assert lines[1] == HEADER
        assert lines[2] == "ns::Foo::bar".ljust(NAME_WIDTH) + "\t0\t6\t1"
        assert lines[3] == "main".ljust(NAME_WIDTH) + "\t2\t13\t3"

    def test_header_columns(self):
        assert HEADER.split("\t")[1:] == ["args", "lines", "McCabe"]
        assert HEADER.split("\t")[0].rstrip() == "name"

    def test_failed_files_skipped(self, analyses):
        output = TextFormatter().format(analyses)
        assert "broken.cpp" not in output

    def test_file_without_functions_still_listed(self, analyses):
        lines = TextFormatter().format(analyses).splitlines()
        assert lines[-2:] == ["/src/empty.cpp", HEADER]

    def test_long_names_not_truncated(self):
        name = "n" * (NAME_WIDTH + 10)
        analysis = FileAnalysis("/a.cpp", [FunctionRecord("/", "a.cpp", name, 0, 1, 0)])
        assert f"{name}\t0\t1\t0" in TextFormatter().format([analysis])

    def test_streams_to_given_stream(self, analyses):
        stream = io.StringIO()
        TextFormatter().render(iter(analyses), stream)
        assert stream.getvalue() == TextFormatter().format(analyses)


class TestCsvFormatter:
    def test_rows(self, analyses):
        rows = list(csv.reader(io.StringIO(CsvFormatter().format(analyses))))
        assert rows[0] == ["module", "file", "name", "args", "lines", "mccabe"]
        assert rows[1:] == [
            ["/src", "main.cpp", "ns::Foo::bar", "0", "6", "1"],
            ["/src", "main.cpp", "main", "2", "13", "3"],
        ]

    def test_header_only_when_empty(self):
        assert CsvFormatter().format([]) == "module,file,name,args,lines,mccabe\n"


class TestJsonFormatter:
    def test_document(self, analyses):
        data = json.loads(JsonFormatter().format(analyses))
        files = data["files"]
        assert [f["path"] for f in files] == ["/src/main.cpp", "/src/broken.cpp", "/src/empty.cpp"]
        assert files[0]["ok"] is True
        assert files[0]["error"] is None
        assert files[0]["diagnostics"] == ["/src/main.cpp:9: unknown type name 'widget'"]
        assert files[1]["diagnostics"] == []
        assert files[0]["functions"][1] == {
            "module": "/src",
            "file": "main.cpp",
            "qualified_name": "main",
            "arg_count": 2,
            "line_count": 13,
            "score": 3,
        }
        assert files[1]["ok"] is False
        assert "broken.cpp" in files[1]["error"]
        assert files[2]["functions"] == []


class TestRichFormatter:
    def test_contains_names(self, analyses):
        output = RichFormatter().format(analyses)
        assert "ns::Foo::bar" in output
        assert "main.cpp" in output
        assert "broken.cpp" not in output

    def test_bracketed_names_are_literal(self):
        record = FunctionRecord("/", "a.cpp", "Vec::operator[]", 1, 3, 0)
        output = RichFormatter().format([FileAnalysis("/a.cpp", [record])])
        assert "operator[]" in output
