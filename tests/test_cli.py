"""
Tests for CLI functionality.

This module contains unit tests for argument parsing, command dispatch
and exit codes.
"""

import json

import pytest

from docx_merger import read_content_controls
from docx_merger.cli import EXIT_CODES, load_replacements, main, parse_arguments
from docx_merger.exceptions import ErrorKind, InvalidArgumentError
from tests.helpers import DocxFactory, content_control, paragraph


@pytest.fixture
def sources(docx_factory):
    a = docx_factory.build("a.docx", [content_control("ClientName", "placeholder", alias="Client")])
    b = docx_factory.build("b.docx", [paragraph("Second")])
    return [str(a), str(b)]


class TestParseArguments:
    """Test cases for argument parsing."""

    def test_parse_merge(self):
        args = parse_arguments(["merge", "a.docx", "b.docx", "-o", "out.docx", "--set", "A=1", "--set", "B=2"])
        assert args.command == "merge"
        assert args.inputs == ["a.docx", "b.docx"]
        assert args.output == "out.docx"
        assert args.assignments == ["A=1", "B=2"]
        assert args.log_level == "INFO"

    def test_parse_log_level_case_insensitive(self):
        args = parse_arguments(["--log-level", "debug", "version"])
        assert args.log_level == "DEBUG"

    def test_merge_requires_output(self):
        with pytest.raises(SystemExit):
            parse_arguments(["merge", "a.docx"])

    def test_parse_help(self):
        with pytest.raises(SystemExit):
            parse_arguments(["-h"])


class TestLoadReplacements:
    """Test cases for building the replacement mapping."""

    def test_assignments(self):
        assert load_replacements(["ClientName=Acme", "Note=a=b", "Empty="], None) == {
            "ClientName": "Acme",
            "Note": "a=b",
            "Empty": "",
        }

    def test_file_then_assignments(self, temp_dir):
        values = temp_dir / "values.json"
        values.write_text(json.dumps({"ClientName": "File", "Year": 2024}), encoding="utf-8")

        result = load_replacements(["ClientName=Cli"], str(values))
        assert result == {"ClientName": "Cli", "Year": "2024"}

    def test_assignment_without_separator(self):
        with pytest.raises(InvalidArgumentError):
            load_replacements(["ClientName"], None)

    @pytest.mark.parametrize("content", ["[1, 2]", "{not json"])
    def test_invalid_file(self, temp_dir, content):
        values = temp_dir / "values.json"
        values.write_text(content, encoding="utf-8")
        with pytest.raises(InvalidArgumentError):
            load_replacements([], str(values))

    def test_missing_file(self, temp_dir):
        with pytest.raises(InvalidArgumentError):
            load_replacements([], str(temp_dir / "missing.json"))


class TestMain:
    """Test cases for command dispatch and exit codes."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage:" in capsys.readouterr().out

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert "docx-merger v" in capsys.readouterr().out

    def test_merge(self, sources, temp_dir, capsys):
        output = temp_dir / "merged.docx"
        code = main(["--no-rich", "merge", *sources, "-o", str(output), "--set", "ClientName=Acme"])

        assert code == 0
        assert "Merged file created" in capsys.readouterr().out
        assert read_content_controls(output) == {"ClientName": "Acme"}
        assert len([n for n in DocxFactory.names(output) if n.startswith("word/footer")]) == 2

    def test_update_controls(self, sources, temp_dir, capsys):
        values = temp_dir / "values.json"
        values.write_text(json.dumps({"ClientName": "Acme"}), encoding="utf-8")

        assert main(["update-controls", sources[0], "--replacements", str(values)]) == 0
        assert "Updated 1 content control(s)" in capsys.readouterr().out
        assert read_content_controls(sources[0]) == {"ClientName": "Acme"}

    def test_update_controls_without_replacements(self, sources, capsys):
        assert main(["update-controls", sources[0]]) == EXIT_CODES[ErrorKind.INVALID_ARGUMENT]
        assert "Invalid argument" in capsys.readouterr().err

    def test_inspect_json(self, sources, capsys):
        assert main(["inspect", sources[0], "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == [{"tag": "ClientName", "alias": "Client", "text": "placeholder"}]

    def test_inspect_table(self, sources, capsys):
        assert main(["inspect", sources[0]]) == 0
        assert "ClientName" in capsys.readouterr().out

    def test_missing_input_exit_code(self, sources, temp_dir, capsys):
        output = temp_dir / "merged.docx"
        code = main(["merge", sources[0], str(temp_dir / "missing.docx"), "-o", str(output)])

        assert code == 3
        assert "File not found" in capsys.readouterr().err
        assert not output.exists()

    def test_corrupt_input_exit_code(self, sources, temp_dir, capsys):
        broken = temp_dir / "broken.docx"
        broken.write_bytes(b"not a zip archive")

        code = main(["merge", sources[0], str(broken), "-o", str(temp_dir / "merged.docx")])

        assert code == 4
        assert "Not a valid DOCX file" in capsys.readouterr().err

    def test_missing_part_exit_code(self, sources, docx_factory, temp_dir):
        incomplete = docx_factory.build("incomplete.docx", omit=["word/_rels/document.xml.rels"])
        code = main(["merge", sources[0], str(incomplete), "-o", str(temp_dir / "merged.docx")])
        assert code == 3

    def test_missing_output_directory_exit_code(self, sources, temp_dir, capsys):
        output = temp_dir / "nodir" / "merged.docx"
        assert main(["merge", *sources, "-o", str(output)]) == 3
        assert "File not found" in capsys.readouterr().err

    def test_output_directory_exit_code(self, sources, temp_dir):
        assert main(["merge", *sources, "-o", str(temp_dir)]) == 2

    def test_output_same_as_input(self, sources):
        assert main(["merge", *sources, "-o", sources[1]]) == 2
