from pathlib import Path

from lessondex import parser
from lessondex.errors import EncodingError, ParseError, ReadError
from lessondex.models import Section
from lessondex.parser import decode_text, load_document, parse_sections


def test_heading_marker_variants() -> None:
    assert parser._match_heading("# Title ##\n") == (1, "Title")
    assert parser._match_heading("## C#") == (2, "C#")
    assert parser._match_heading("   ### Indented") == (3, "Indented")
    assert parser._match_heading("#") == (1, "")
    assert parser._match_heading("#hashtag") is None
    assert parser._match_heading("####### seven") is None
    assert parser._match_heading("    # code block") is None


def test_setext_underline_is_not_a_heading() -> None:
    text = "Title\n=====\n\nParagraph\n---\n"
    assert parse_sections(text) == [Section(level=0, heading="", body=text)]


def test_unclosed_fence_runs_to_end() -> None:
    text = "```js\n# not a heading\nconst x = 1;\n"
    assert parse_sections(text) == [Section(level=0, heading="", body=text)]


def test_fence_closes_only_on_matching_character() -> None:
    text = "~~~\n```\n# inside\n~~~\n# Real\n"
    assert parse_sections(text) == [
        Section(level=0, heading="", body="~~~\n```\n# inside\n~~~\n"),
        Section(level=1, heading="Real", body=""),
    ]


def test_shorter_fence_does_not_close_longer_one() -> None:
    lines = list(parser.scan_lines("````\n```\n# x\n````\nafter\n"))
    assert [in_code for _, in_code in lines] == [True, True, True, True, False]


def test_split_lines_is_lossless() -> None:
    for text in ["", "a", "a\n", "a\n\nb", "\n\n"]:
        assert "".join(parser.split_lines(text)) == text


def test_parse_sections_rejects_binary_text() -> None:
    try:
        parse_sections("# Title\n\x00\x01")
        raise AssertionError("Expected EncodingError for NUL bytes.")
    except EncodingError as exc:
        assert isinstance(exc, ParseError)
        assert "NUL" in str(exc)


def test_decode_text_handles_bom_and_crlf() -> None:
    assert decode_text("\ufeff# Title\r\nbody\r\n".encode("utf-8")) == "# Title\nbody\n"


def test_decode_text_rejects_invalid_utf8() -> None:
    try:
        decode_text(b"\xff\xfe\xfa", path="bad.md")
        raise AssertionError("Expected EncodingError for invalid UTF-8.")
    except EncodingError as exc:
        assert exc.path == "bad.md"
        assert "not valid UTF-8" in str(exc)
        assert isinstance(exc.__cause__, UnicodeDecodeError)


def test_load_document_binary_file_raises_encoding_error(tmp_path: Path) -> None:
    path = tmp_path / "image.md"
    path.write_bytes(b"PK\x03\x04\x00\x00binary")
    try:
        load_document(path)
        raise AssertionError("Expected EncodingError for binary content.")
    except EncodingError as exc:
        assert exc.path == str(path)


def test_load_document_missing_path_raises_read_error(tmp_path: Path) -> None:
    missing = tmp_path / "missing.md"
    try:
        load_document(missing)
        raise AssertionError("Expected ReadError for missing file.")
    except ReadError as exc:
        assert exc.path == str(missing)
        assert isinstance(exc.__cause__, OSError)


def test_load_document_directory_raises_read_error(tmp_path: Path) -> None:
    try:
        load_document(tmp_path)
        raise AssertionError("Expected ReadError for a directory.")
    except ReadError as exc:
        assert str(tmp_path) in str(exc)


def test_load_document_control_bytes_raise_encoding_error(tmp_path: Path) -> None:
    path = tmp_path / "controls.md"
    path.write_bytes(bytes(range(1, 9)) + b"\x0e\x0f\x10\x11\x7f" * 20)
    try:
        load_document(path)
        raise AssertionError("Expected EncodingError for control bytes.")
    except EncodingError as exc:
        assert exc.path == str(path)
        assert "U+0001" in str(exc)


def test_parse_sections_rejects_delete_and_vertical_tab() -> None:
    for text in ["# T\nbody\x7f\n", "# T\n\x0b\n"]:
        try:
            parse_sections(text)
            raise AssertionError(f"Expected EncodingError for {text!r}.")
        except EncodingError as exc:
            assert "control character" in str(exc)


def test_parse_sections_rejects_lone_surrogate() -> None:
    try:
        parse_sections("# T\n\udc80\n")
        raise AssertionError("Expected EncodingError for an unpaired surrogate.")
    except EncodingError as exc:
        assert "surrogate" in str(exc)


def test_whitespace_controls_are_text() -> None:
    text = "# T\n\tindented\x0c\r\n"
    assert parse_sections(text) == [Section(level=1, heading="T", body="\tindented\x0c\r\n")]
