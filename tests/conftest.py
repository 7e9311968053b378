"""Shared fixtures for satlock tests."""

from __future__ import annotations

import pathlib
import textwrap

import pytest


APP_MANIFEST = textwrap.dedent("""\
    name: app
    version: "1.0.0"
    requires:
      web: "^2.0.0"
    index:
      web:
        "2.0.0":
          requires: {lib: ">=1.0.0"}
        "2.1.0":
          requires: {lib: ">=1.1.0"}
      lib:
        "1.0.0": {}
        "1.1.0": {}
        "1.2.0": {}
""")

CONFLICTING_MANIFEST = textwrap.dedent("""\
    name: broken
    requires:
      web: "*"
      legacy: "*"
    index:
      web:
        "1.0.0":
          conflicts: {legacy: "*"}
      legacy:
        "0.9.0": {}
""")


@pytest.fixture
def project_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """A project directory holding a resolvable satlock.yaml."""
    (tmp_path / "satlock.yaml").write_text(APP_MANIFEST)
    return tmp_path


@pytest.fixture
def conflicting_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """A project directory whose requirements cannot all hold."""
    (tmp_path / "satlock.yaml").write_text(CONFLICTING_MANIFEST)
    return tmp_path
