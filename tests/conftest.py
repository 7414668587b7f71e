"""Shared pytest fixtures for pubsentinel tests."""

from pathlib import Path

import pytest

SAMPLE_PUBSPEC = """\
name: sample_app
description: A sample Flutter app.
version: 1.0.0+1

environment:
  sdk: '>=3.0.0 <4.0.0'

dependencies:
  flutter:
    sdk: flutter
  http: ^1.1.0
  provider: "6.0.5"
  collection: any
  local_pkg:
    path: ../local_pkg

dev_dependencies:
  flutter_test:
    sdk: flutter
  lints: ~2.1.1

flutter:
  uses-material-design: true
"""


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def sample_pubspec() -> str:
    return SAMPLE_PUBSPEC


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    (tmp_path / "pubspec.yaml").write_text(SAMPLE_PUBSPEC)
    return tmp_path
