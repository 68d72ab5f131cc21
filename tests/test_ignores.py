import os

import pytest

from contextforge.ignores import DEFAULT_IGNORES, IgnorePatterns, is_binary


@pytest.mark.parametrize(
    "path",
    [
        "node_modules",
        os.path.join("web", "node_modules"),
        ".git",
        "go.mod",
        os.path.join("assets", "logo.png"),
        "archive.tar.gz",
        "LICENSE",
    ],
)
def test_default_patterns_ignore(path):
    assert IgnorePatterns().should_ignore(path) is True


@pytest.mark.parametrize(
    "path",
    ["main.go", os.path.join("src", "app.py"), "photo.PNG", "README.md"],
)
def test_default_patterns_keep(path):
    assert IgnorePatterns().should_ignore(path) is False


def test_custom_patterns_are_prefixed():
    patterns = IgnorePatterns(["tests", "docs"])
    assert patterns.custom_patterns == ["*/tests", "*/docs"]
    assert patterns.default_patterns == list(DEFAULT_IGNORES)


def test_custom_pattern_matches_base_name_anywhere():
    patterns = IgnorePatterns(["tests"])
    assert patterns.should_ignore("tests") is True
    assert patterns.should_ignore(os.path.join("pkg", "tests")) is True
    assert patterns.should_ignore(os.path.join("a", "b", "tests")) is True
    assert patterns.should_ignore("testsuite") is False


def test_custom_wildcards_do_not_cross_separators():
    patterns = IgnorePatterns(["src/*.py"])
    assert patterns.should_ignore(os.path.join("a", "src", "x.py")) is True
    assert patterns.should_ignore(os.path.join("a", "b", "src", "x.py")) is False


def test_custom_glob_on_base_name():
    patterns = IgnorePatterns(["*.log"])
    assert patterns.should_ignore(os.path.join("var", "run.log")) is True
    assert patterns.should_ignore(os.path.join("var", "run.txt")) is False


def test_character_class_pattern():
    patterns = IgnorePatterns(["data[0-9]"])
    assert patterns.should_ignore("data7") is True
    assert patterns.should_ignore("datax") is False


def test_malformed_pattern_matches_nothing():
    patterns = IgnorePatterns(["["])
    assert patterns.should_ignore("[") is False
    assert patterns.should_ignore("anything") is False


def test_empty_content_is_text():
    assert is_binary(b"") is False


def test_null_byte_means_binary():
    assert is_binary(b"abc\x00def") is True


def test_plain_text_is_not_binary():
    assert is_binary(b"hello\r\n\tworld\n") is False


def test_mostly_control_characters_is_binary():
    assert is_binary(b"\x01\x02\x03\x04a") is True


def test_ratio_at_threshold_is_text():
    assert is_binary(b"\x01\x02\x03" + b"a" * 7) is False


def test_only_first_512_bytes_are_inspected():
    assert is_binary(b"a" * 512 + b"\x00") is False
    assert is_binary(b"a" * 511 + b"\x00") is True