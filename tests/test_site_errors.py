"""Tests for site_errors.py."""

import logging
from pathlib import Path

import pytest

from site_errors import ErrorKind, SiteError, list_dir, read_text, report, write_text


def test_str_includes_kind_and_path():
    err = SiteError(ErrorKind.WRITE_FAILED, "disk full", Path("index.html"))
    assert str(err) == "[write_failed] disk full (index.html)"
    assert str(SiteError(ErrorKind.TARGET_ELEMENT_MISSING, "no #x")) == "[target_element_missing] no #x"


@pytest.mark.parametrize(
    "kind, level",
    [
        (ErrorKind.ITEM_PARSE_FAILED, logging.WARNING),
        (ErrorKind.DATE_UNPARSABLE, logging.WARNING),
        (ErrorKind.WRITE_FAILED, logging.ERROR),
        (ErrorKind.DIRECTORY_UNREADABLE, logging.ERROR),
        (ErrorKind.TARGET_ELEMENT_MISSING, logging.ERROR),
    ],
)
def test_report_level_and_kind(kind, level, caplog):
    caplog.set_level(logging.DEBUG)
    report(SiteError(kind, "something"))
    record = caplog.records[-1]
    assert record.levelno == level
    assert record.error_kind == kind.value


def test_list_dir_sorted(tmp_path: Path):
    for name in ("b.html", "a.html"):
        (tmp_path / name).write_text("", encoding="utf-8")
    assert list_dir(tmp_path) == ["a.html", "b.html"]


def test_list_dir_missing(tmp_path: Path):
    with pytest.raises(SiteError) as info:
        list_dir(tmp_path / "missing")
    assert info.value.kind is ErrorKind.DIRECTORY_UNREADABLE
    assert isinstance(info.value.__cause__, OSError)


def test_read_write_roundtrip_and_failures(tmp_path: Path):
    p = tmp_path / "page.html"
    write_text(p, "Pelúcia")
    assert read_text(p) == "Pelúcia"

    with pytest.raises(SiteError) as info:
        write_text(tmp_path / "missing" / "page.html", "x")
    assert info.value.kind is ErrorKind.WRITE_FAILED

    with pytest.raises(SiteError) as info:
        read_text(tmp_path / "nope.html")
    assert info.value.kind is ErrorKind.DIRECTORY_UNREADABLE
