"""Shared fakes for the NFT trait viewer tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from columnCodec import label_to_index
from ownedNfts import OwnershipRecord


def _split_cell(cell: str) -> tuple[int, int]:
    letters = cell.rstrip("0123456789")
    return int(cell[len(letters):]), label_to_index(letters)


class FakeWorksheet:
    """In-memory stand-in for the parts of gspread.Worksheet the cache uses."""

    def __init__(self, rows: list[list[str]] | None = None, row_count: int = 100, col_count: int = 26) -> None:
        self.cells: dict[tuple[int, int], str] = {}
        self.row_count = row_count
        self.col_count = col_count
        self.calls: list[tuple[str, Any]] = []
        for r, row in enumerate(rows or [], start=1):
            for c, value in enumerate(row, start=1):
                if value != "":
                    self.cells[(r, c)] = value

    def _bounds(self, a1: str) -> tuple[int, int, int, int]:
        start, _, end = a1.partition(":")
        start_row, start_col = _split_cell(start)
        end_row, end_col = _split_cell(end or start)
        return start_row, start_col, end_row, end_col

    def get_all_values(self) -> list[list[str]]:
        self.calls.append(("get_all_values", None))
        if not self.cells:
            return []
        max_row = max(r for r, _ in self.cells)
        max_col = max(c for _, c in self.cells)
        return [[self.cells.get((r, c), "") for c in range(1, max_col + 1)] for r in range(1, max_row + 1)]

    def update(self, range_name: str, values: list[list[Any]], value_input_option: str = "RAW") -> None:
        self.calls.append(("update", range_name))
        start_row, start_col, _, _ = self._bounds(range_name)
        for r, row in enumerate(values, start=start_row):
            for c, value in enumerate(row, start=start_col):
                if r > self.row_count or c > self.col_count:
                    raise ValueError(f"{range_name} exceeds grid limits")
                if value == "":
                    self.cells.pop((r, c), None)
                else:
                    self.cells[(r, c)] = value

    def batch_clear(self, ranges: list[str]) -> None:
        self.calls.append(("batch_clear", ranges))
        for a1 in ranges:
            start_row, start_col, end_row, end_col = self._bounds(a1)
            for key in list(self.cells):
                if start_row <= key[0] <= end_row and start_col <= key[1] <= end_col:
                    del self.cells[key]

    def add_cols(self, count: int) -> None:
        self.calls.append(("add_cols", count))
        self.col_count += count

    def add_rows(self, count: int) -> None:
        self.calls.append(("add_rows", count))
        self.row_count += count

    def row_values(self, row: int) -> list[str]:
        values = self.get_all_values()
        return values[row - 1] if row <= len(values) else []


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self) -> Any:
        return json.loads(self.text)


class FakeSession:
    """Replays canned responses and records the params of every GET."""

    def __init__(self, responses: list[FakeResponse]) -> None:
        self.responses = list(responses)
        self.requests: list[tuple[str, dict[str, str]]] = []

    def get(self, url: str, params: dict[str, str] | None = None, **kwargs: Any) -> FakeResponse:
        self.requests.append((url, dict(params or {})))
        return self.responses.pop(0)


class FakeRenderer:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    def render(self, headers: list[str], rows: list[list[str]], sheet_key: str, image_count: int = 0) -> None:
        self.calls.append({"headers": headers, "rows": rows, "sheet_key": sheet_key, "image_count": image_count})


def make_nft(token_id: str, traits: dict[str, Any] | None = None, image: str | None = None) -> dict[str, Any]:
    nft: dict[str, Any] = {
        "id": {"tokenId": token_id},
        "metadata": {"attributes": [{"trait_type": k, "value": v} for k, v in (traits or {}).items()]},
    }
    if image:
        nft["media"] = [{"gateway": image}]
    return nft


def make_record(token_id: str, traits: dict[str, str] | None = None, image: str | None = None) -> OwnershipRecord:
    return OwnershipRecord(
        token_id=token_id,
        traits={k.casefold(): v for k, v in (traits or {}).items()},
        image_url=image,
    )


@pytest.fixture
def worksheet() -> FakeWorksheet:
    return FakeWorksheet()


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()
