#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.

import os

import pytest

from binpack_tabu.binpack.parser import (
    decimal_places,
    get_data_available,
    parse_binpack_multi,
    parse_file,
    parse_folder,
    parse_scaled_int,
    parse_simple_instance,
)

MULTI_DECIMAL = """1
 t1
 100.0 5 3
 10.0
 20.0
 30.0
 40.0
 50.0
"""

MULTI_ORLIB = """ 2
 u4_00
 150 4 2
 42
 69
 67
 57
 u3_01
 150 3
 100 50
 150
"""


def test_no_dataset(fake_data_home):
    with pytest.raises(FileNotFoundError, match="python -m binpack_tabu.datasets"):
        get_data_available()


def test_get_data_available(tmp_path):
    (tmp_path / "b.txt").write_text("2 10 3 4")
    (tmp_path / "a.txt").write_text("2 10 3 4")
    (tmp_path / ".hidden").write_text("2 10 3 4")
    (tmp_path / "subdir").mkdir()
    files = get_data_available(data_folder=str(tmp_path))
    assert [os.path.basename(f) for f in files] == ["a.txt", "b.txt"]


@pytest.mark.parametrize(
    "content",
    ["3 10\n4 5 6\n", "10 3\n4 5 6\n", "# a comment\n3 10\n\n  # another\n4\n5\n6\n"],
)
def test_simple_instance(content):
    problem = parse_simple_instance(content, name="simple")
    assert problem.name == "simple"
    assert problem.capacity_bin == 10
    assert problem.sizes == (4, 5, 6)
    assert problem.opt_bins is None


@pytest.mark.parametrize(
    "content, message",
    [
        ("3 10", "Too few integers"),
        ("3 10 4 5", "Invalid simple instance format"),
        ("2 10 4.5 3", "Non-integer token '4.5'"),
        ("2 0 0 0", "Capacity must be > 0"),
        ("2 10 0 3", "Item sizes must be > 0"),
        ("2 10 4 11", "max_size 11 > capacity 10"),
    ],
)
def test_simple_instance_errors(content, message):
    with pytest.raises(ValueError, match=message):
        parse_simple_instance(content)


def test_decimal_places():
    assert decimal_places("12") == 0
    assert decimal_places("12.250") == 3
    assert decimal_places("-1.5") == 1
    assert decimal_places("u120_00") is None
    assert decimal_places("1e3") is None


def test_parse_scaled_int():
    assert parse_scaled_int("33.5", 1) == 335
    assert parse_scaled_int("7", 2) == 700
    assert parse_scaled_int("0.05", 3) == 50
    with pytest.raises(ValueError, match="negative value not allowed"):
        parse_scaled_int("-1", 0)
    with pytest.raises(ValueError, match="too many decimals"):
        parse_scaled_int("1.25", 1)


def test_multi_with_decimals():
    problems = parse_binpack_multi(MULTI_DECIMAL, stem="binpack_test")
    assert len(problems) == 1
    problem = problems[0]
    assert problem.name == "binpack_test_t1"
    assert problem.capacity_bin == 1000
    assert problem.sizes == (100, 200, 300, 400, 500)
    assert problem.opt_bins == 3


def test_multi_orlib_layout():
    problems = parse_binpack_multi(MULTI_ORLIB, stem="binpack0")
    assert [p.name for p in problems] == ["binpack0_u4_00", "binpack0_u3_01"]
    assert problems[0].sizes == (42, 69, 67, 57)
    assert problems[0].opt_bins == 2
    # sizes may share lines
    assert problems[1].sizes == (100, 50, 150)
    assert problems[1].opt_bins is None


@pytest.mark.parametrize(
    "content, message",
    [
        ("", "empty file"),
        ("1\n 100 2\n 3\n 4\n", "header mismatch"),
        ("2\n t1\n 100 2\n 30\n 40\n", "unexpected EOF"),
        ("1\n t1\n 100 2\n 30\n x\n", "non-numeric size token 'x'"),
        ("1\n t1\n 100 2\n 30\n 140\n", "found item larger than capacity"),
        ("1\n t1\n 100 2\n 0.0000001 1\n", "too many decimals"),
    ],
)
def test_multi_errors(content, message):
    with pytest.raises(ValueError, match=message):
        parse_binpack_multi(content)


def test_parse_file(tmp_path):
    simple_path = tmp_path / "small.txt"
    simple_path.write_text("3 10\n4 5 6\n")
    problems = parse_file(str(simple_path))
    assert len(problems) == 1
    assert problems[0].name == "small"

    multi_path = tmp_path / "binpack_test.txt"
    multi_path.write_text(MULTI_DECIMAL)
    problems = parse_file(str(multi_path))
    assert [p.name for p in problems] == ["binpack_test_t1"]


def test_parse_file_unknown_format(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("hello world\n")
    with pytest.raises(ValueError, match="Unrecognized dataset format"):
        parse_file(str(path))


def test_parse_folder(tmp_path):
    (tmp_path / "a.txt").write_text("3 10\n4 5 6\n")
    (tmp_path / "b.txt").write_text(MULTI_ORLIB)
    (tmp_path / "c.txt").write_text("not an instance\n")
    (tmp_path / ".d.txt").write_text("not an instance\n")
    problems = parse_folder(str(tmp_path))
    assert [p.name for p in problems] == ["a", "b_u4_00", "b_u3_01"]


def test_parse_folder_errors(tmp_path):
    with pytest.raises(ValueError, match="No files found"):
        parse_folder(str(tmp_path))
    (tmp_path / "c.txt").write_text("not an instance\n")
    with pytest.raises(ValueError, match="Unrecognized dataset format"):
        parse_folder(str(tmp_path))
