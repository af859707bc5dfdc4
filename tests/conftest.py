from __future__ import annotations

from pathlib import Path

import pytest

OHMS_LAW = """\
---
title: Ohm's Law
date: 2024-01-15
tags: circuits, resistors
excerpt: The one equation every EE knows.
---
[text]
Voltage equals current times resistance.

[latex]
V = IR

[image]
src: images/circuit.jpg
caption: Test circuit
"""

GALLERY = """\
---
description: Bench photos and field trips.
---
[image]
src: images/bench.jpg
caption: The bench

[text]
Not an image.

[image]
src: images/scope.jpg
"""


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    (root / "lab-notes").mkdir(parents=True)
    (root / "lab-notes" / "index.txt").write_text("# posts\nohms-law\n\nmissing-post\n", encoding="utf-8")
    (root / "lab-notes" / "ohms-law.txt").write_text(OHMS_LAW, encoding="utf-8")
    (root / "gallery").mkdir()
    (root / "gallery" / "index.txt").write_text(GALLERY, encoding="utf-8")
    return root
