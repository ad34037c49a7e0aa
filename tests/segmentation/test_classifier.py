"""Tests for kind classification and title extraction."""

from __future__ import annotations

import pytest

from blockdoc.models import RawBlock
from blockdoc.segmentation import classify, classify_block, extract_title, fallback_title
from tests._fixtures.project_builder import make_file


@pytest.mark.parametrize(
    ("first_line", "kind", "title"),
    [
        ("class Foo {", "class", "Foo"),
        ("export default class Foo extends Base {", "class", "Foo"),
        ("export default function Bar() {", "component", "Bar"),
        ("export function Header({ title }) {", "component", "Header"),
        ("export function add(a,b) { return a + b; }", "function", "add"),
        ("async function load(url) {", "function", "load"),
        ("function* ids() {", "function", "ids"),
        ("const handler = async (event) => {", "script", "handler"),
        ("export const useToggle = (initial) => {", "script", "useToggle"),
        ("let state = {", "script", "state"),
    ],
)
def test_classify_and_title(first_line: str, kind: str, title: str) -> None:
    assert classify(first_line) == kind
    assert extract_title(first_line) == title


def test_class_wins_over_other_tokens() -> None:
    assert classify("export default function makeclass Foo() {") == "class"


def test_unmatched_first_line_uses_fallback_title() -> None:
    raw = RawBlock(start_line=2, end_line=6, text="(function () {\n  init();\n})();")
    kind, title = classify_block(raw, make_file("src/boot.js", raw.text))

    assert kind == "function"
    assert title == "function (lines 3-7)"
    assert title == fallback_title(kind, raw)


def test_config_block_is_forced_to_config_kind() -> None:
    content = 'export default function config() { return { "class ": 1 } }'
    raw = RawBlock(start_line=0, end_line=0, text=content, is_config=True)

    assert classify_block(raw, make_file("vite.config.ts", content)) == (
        "config",
        "vite.config.ts Configuration",
    )


def test_title_uses_trimmed_first_line() -> None:
    raw = RawBlock(start_line=0, end_line=2, text="  class Queue {\n  push() {}\n  }")

    assert classify_block(raw, make_file("src/queue.js", raw.text)) == ("class", "Queue")
