from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

ROUTING_LESSON = """# React Router

React Router adds client-side routing.

## Installing

```bash
# install the package
npm install react-router-dom
```

## Nested routes

Use `<Outlet />` to render children.

---

## Knowledge Check

**Q1.** What component renders nested routes?

**A1.** The `Outlet` component.

**Q2.** How do you install React Router?

**A2.** Run:

```bash
npm install react-router-dom
```
"""

INTRO_LESSON = """# Introduction to React

React is a library for building user interfaces.

Components are reusable pieces of UI.
"""

TESTING_LESSON = """# Testing React

## Knowledge Check

**Q1.** Which library renders components in tests?

**A1.** React Testing Library.
"""


@pytest.fixture
def routing_lesson() -> str:
    return ROUTING_LESSON


@pytest.fixture
def lesson_dir(tmp_path: Path) -> Path:
    """Directory of three lessons, one of them nested and one without questions."""
    root = tmp_path / "lessons"
    (root / "advanced").mkdir(parents=True)
    (root / "01-intro.md").write_text(INTRO_LESSON, encoding="utf-8")
    (root / "02-routing.md").write_text(ROUTING_LESSON, encoding="utf-8")
    (root / "advanced" / "testing.md").write_text(TESTING_LESSON, encoding="utf-8")
    (root / "notes.txt").write_text("not a lesson", encoding="utf-8")
    return root
