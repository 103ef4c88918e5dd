#  Copyright (c) 2025 AIRBUS and its affiliates.
#  This source code is licensed under the MIT license found in the
#  LICENSE file in the root directory of this source tree.
"""Readers for bin packing instance files.

Two layouts are recognized:

- simple: whitespace separated integers, either ``n capacity sizes...`` or
  ``capacity n sizes...``, with full-line ``#`` comments;
- OR-Library "BinPack": the number of instances, then for each instance a
  name line, a ``capacity n [best_known]`` line and the n sizes. Sizes may
  be decimal, in which case capacity and sizes are scaled by the same power
  of ten to become integers.
"""

import logging
import os
import re
from collections.abc import Iterator
from typing import Optional

from binpack_tabu.binpack.problem import BinPackProblem
from binpack_tabu.datasets import BINPACK_DATADIRNAME, get_data_home

logger = logging.getLogger(__name__)

MAX_DECIMAL_SCALE = 6

_number_regex = re.compile(r"-?(\d+)(?:\.(\d+))?", flags=re.ASCII)
_integer_regex = re.compile(r"\d+", flags=re.ASCII)


def get_data_available(
    data_folder: Optional[str] = None, data_home: Optional[str] = None
) -> list[str]:
    """Get datasets available for bin packing.

    Params:
        data_folder: folder where datasets for bin packing should be found.
            If None, we look in "binpack" subdirectory of `data_home`.
        data_home: root directory for all datasets. Is None, set by
            default to "~/binpack_tabu_data"

    """
    if data_folder is None:
        data_home = get_data_home(data_home=data_home)
        data_folder = f"{data_home}/{BINPACK_DATADIRNAME}"

    try:
        files = sorted(os.listdir(data_folder))
    except FileNotFoundError as e:
        raise FileNotFoundError(
            f"{data_folder} not found. "
            "You can fetch the OR-Library instances with `python -m binpack_tabu.datasets`."
        ) from e
    return [
        os.path.abspath(os.path.join(data_folder, f))
        for f in files
        if not f.startswith(".") and os.path.isfile(os.path.join(data_folder, f))
    ]


def decimal_places(token: str) -> Optional[int]:
    """Number of decimals of a numeric token, None if it is not a number."""
    match = _number_regex.fullmatch(token.strip())
    if match is None:
        return None
    decimals = match.group(2)
    return 0 if decimals is None else len(decimals)


def parse_scaled_int(token: str, scale: int) -> int:
    """Read a non negative decimal token as an integer number of 10**-scale units."""
    token = token.strip()
    if token.startswith("-"):
        raise ValueError(f"negative value not allowed: {token}")
    match = _number_regex.fullmatch(token)
    if match is None:
        raise ValueError(f"invalid number: {token}")
    integer_part, decimals = match.group(1), match.group(2) or ""
    if len(decimals) > scale:
        raise ValueError(f"too many decimals in {token} for scale {scale}")
    return int(integer_part) * 10**scale + int(decimals or "0") * 10 ** (
        scale - len(decimals)
    )


def _content_lines(content: str) -> Iterator[str]:
    for line in content.splitlines():
        line = line.strip()
        if len(line) == 0 or line.startswith("#"):
            continue
        yield line


def parse_simple_instance(content: str, name: str = "dataset") -> BinPackProblem:
    values = []
    for line in _content_lines(content):
        for token in line.split():
            if _integer_regex.fullmatch(token) is None:
                raise ValueError(f"Non-integer token '{token}'")
            values.append(int(token))
    if len(values) < 3:
        raise ValueError("Too few integers")

    if values[0] == len(values) - 2:
        capacity = values[1]
    elif values[1] == len(values) - 2:
        capacity = values[0]
    else:
        raise ValueError("Invalid simple instance format")
    sizes = values[2:]
    if capacity == 0:
        raise ValueError("Capacity must be > 0")
    if any(size == 0 for size in sizes):
        raise ValueError("Item sizes must be > 0")
    if max(sizes) > capacity:
        raise ValueError(f"max_size {max(sizes)} > capacity {capacity}")
    return BinPackProblem.from_sizes(sizes=sizes, capacity_bin=capacity, name=name)


def parse_binpack_multi(content: str, stem: str = "dataset") -> list[BinPackProblem]:
    lines = list(_content_lines(content))
    if len(lines) == 0:
        raise ValueError("empty file")
    if _integer_regex.fullmatch(lines[0]) is None:
        raise ValueError("not a multi-instance file")
    nb_instances = int(lines[0])
    if len(lines) < 3:
        raise ValueError("unexpected EOF after instance count")
    # an instance name is never a pure number in this layout
    header = lines[2].split()
    if (
        decimal_places(lines[1]) is not None
        or len(header) < 2
        or decimal_places(header[0]) is None
        or _integer_regex.fullmatch(header[1]) is None
    ):
        raise ValueError("multi-instance header mismatch")

    problems = []
    index_line = 1

    def next_line(what: str) -> str:
        nonlocal index_line
        if index_line >= len(lines):
            raise ValueError(f"unexpected EOF while reading {what}")
        index_line += 1
        return lines[index_line - 1]

    for _ in range(nb_instances):
        name = next_line("instance name")
        header_line = next_line("instance header")
        header = header_line.split()
        if len(header) < 2:
            raise ValueError(f"invalid header line: {header_line}")
        capacity_token = header[0]
        if _integer_regex.fullmatch(header[1]) is None:
            raise ValueError(f"invalid n in header: {header_line}")
        nb_items = int(header[1])
        opt_bins = None
        if len(header) > 2 and _integer_regex.fullmatch(header[2]) is not None:
            opt_bins = int(header[2])

        size_tokens: list[str] = []
        while len(size_tokens) < nb_items:
            for token in next_line("item sizes").split():
                if decimal_places(token) is None:
                    raise ValueError(f"non-numeric size token '{token}' in {stem}")
                size_tokens.append(token)
                if len(size_tokens) == nb_items:
                    break

        capacity_scale = decimal_places(capacity_token)
        if capacity_scale is None:
            raise ValueError(f"invalid capacity: {capacity_token}")
        scale = max([capacity_scale] + [decimal_places(t) for t in size_tokens])
        if scale > MAX_DECIMAL_SCALE:
            raise ValueError(f"too many decimals (scale={scale}) in {stem}")
        capacity = parse_scaled_int(capacity_token, scale)
        if capacity == 0:
            raise ValueError(f"capacity must be > 0 in {stem}")
        sizes = []
        for token in size_tokens:
            size = parse_scaled_int(token, scale)
            if size == 0:
                raise ValueError(f"item sizes must be > 0 in {stem}")
            if size > capacity:
                raise ValueError(
                    f"found item larger than capacity in {stem}: size={size} > capacity={capacity}"
                )
            sizes.append(size)
        problems.append(
            BinPackProblem.from_sizes(
                sizes=sizes,
                capacity_bin=capacity,
                name=f"{stem}_{name}",
                opt_bins=opt_bins,
            )
        )
    return problems


def parse_file(file_path: str) -> list[BinPackProblem]:
    """Parse a file in any of the supported layouts.

    Returns:
        the instances of the file, a single one for the simple layout.

    """
    with open(file_path, "r") as f:
        content = f.read()
    stem = os.path.splitext(os.path.basename(file_path))[0]
    try:
        return [parse_simple_instance(content, name=stem)]
    except ValueError as e:
        simple_error = e
    try:
        return parse_binpack_multi(content, stem=stem)
    except ValueError as e:
        multi_error = e
    raise ValueError(
        f"Unrecognized dataset format in {file_path}. Supported: simple integer instance "
        f"({simple_error}), or BinPack multi-instance files ({multi_error})."
    )


def parse_folder(data_folder: str) -> list[BinPackProblem]:
    """Parse every readable instance file of a folder, in file name order.

    Files that cannot be parsed are skipped with a warning, unless no file
    at all can be parsed.

    """
    problems = []
    errors = []
    for file_path in get_data_available(data_folder=data_folder):
        try:
            problems.extend(parse_file(file_path))
        except ValueError as e:
            logger.warning(f"Skipping {file_path}: {e}")
            errors.append(str(e))
    if len(problems) == 0:
        if len(errors) == 0:
            raise ValueError(f"No files found in {data_folder}")
        raise ValueError("\n".join(errors))
    return problems
