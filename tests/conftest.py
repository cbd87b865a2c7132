"""Shared pytest fixtures for tjp tests."""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from tjp.core.grammar import Registry
from tjp.core.model import Project
from tjp.core.rules import build_grammar
from tjp.core.session import ParseSession

PROJECT_HEADER = 'project test "Test Project" "1.0" 2024-01-01 - 2024-12-31\n'

SAMPLE_TJP = """\
project acso "Accounting Software" "1.0" 2024-01-01 - 2024-06-30 {
  timingresolution 60 min
  dailyworkinghours 8
  scenario plan "Plan" {
    scenario delayed "Delayed"
  }
}

flags important, hidden

resource dev "Developers" {
  resource dev1 "Paul Smith"
  resource dev2 "Sebastien Bono"
  vacation "Holiday" 2024-02-01 - 2024-02-05
}
resource test "Tester" {
  workinghours mon - fri 9:00 - 17:00
}

task acso "Accounting Software" {
  task spec "Specification" {
    effort 20d
    allocate dev1, dev2 { select order }
    flags important
  }
  task software "Software Development" {
    depends !spec
    priority 800
    task database "Database coupling" {
      effort 10d
      allocate dev1 { alternative dev2 persistent }
    }
    task gui "Graphical User Interface" {
      depends !database { gapduration 2d }
      length 5d
      delayed:length 8d
    }
  }
  task deliveries "Milestones" {
    task start "Project start" {
      milestone
      start 2024-01-01
    }
  }
}

htmltaskreport "overview.html" {
  columns no, name { title "Task" }, start, end, effort
  hidetask ~important
  sorttasks plan.start.up, tree
  scenarios plan, delayed
  headline "Project Overview"
}
"""


@pytest.fixture
def registry() -> Registry:
    """Return a freshly built TJP grammar."""
    return build_grammar()


@pytest.fixture
def session() -> Iterator[ParseSession]:
    """Return a parse session with the default configuration."""
    with ParseSession() as parse_session:
        yield parse_session


@pytest.fixture
def sample_tjp() -> str:
    """Return a complete TJP document using most of the language."""
    return SAMPLE_TJP


@pytest.fixture
def sample_project(session: ParseSession, sample_tjp: str) -> Project:
    """Return the project parsed from the sample document."""
    return session.parse_text(sample_tjp, "sample.tjp")


@pytest.fixture
def parse(session: ParseSession) -> Callable[..., Project]:
    """Return a helper that parses a document body after a standard project header."""

    def _parse(body: str, header: str = PROJECT_HEADER) -> Project:
        return session.parse_text(header + body, "test.tjp")

    return _parse


@pytest.fixture
def tjp_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a factory writing TJP text into the temporary directory."""

    def _write(text: str, name: str = "project.tjp") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
