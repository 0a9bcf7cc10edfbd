from __future__ import annotations

import os

import pytest

from mdscroll.layout import flatten
from mdscroll.parser import parse_markdown
from mdscroll.wrap import wrap_text

atheris = pytest.importorskip("atheris")


def test_parse_and_flatten_with_fuzzed_documents():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)
    rendered = 0

    for _ in range(64):
        if provider.remaining_bytes() == 0:
            break
        source = provider.ConsumeUnicodeNoSurrogates(256)
        width = provider.ConsumeIntInRange(0, 120)
        document = flatten(parse_markdown(source), width)
        assert document.total_height == len(document.lines)
        rendered += 1

    assert rendered  # ensure we exercised the loop


def test_wrap_text_with_fuzzed_input():
    data = os.urandom(4096)
    provider = atheris.FuzzedDataProvider(data)

    while provider.remaining_bytes() > 0:
        text = provider.ConsumeUnicodeNoSurrogates(64).replace("\n", " ")
        width = provider.ConsumeIntInRange(1, 40)
        for line in wrap_text(text, width):
            assert line in text
