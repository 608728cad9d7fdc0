"""Pytest configuration shared by the unit and end-to-end suites.

What:
  Make the source tree importable and give every test a clean runtime
  configuration and log threshold.

Why:
  The loader caches ``onlinebayes.yaml`` and the logger keeps a process-wide
  threshold. Without resets, tests would depend on execution order.

How:
  Prepend ``onlinebayes/src`` to ``sys.path`` when present, point
  ``ONLINEBAYES_CONFIG_PATH`` at the canned fixture file and reset both the
  cache and the log level around each test.

Interfaces:
  :func:`runtime_config` (autouse fixture), :data:`CONFIG_PATH`.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "onlinebayes" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest

from onlinebayes.config.loader import reset_runtime_config
from onlinebayes.utils.logging import set_log_level

CONFIG_PATH = Path(__file__).resolve().parent / "data" / "onlinebayes.yaml"


@pytest.fixture(autouse=True)
def runtime_config(monkeypatch: pytest.MonkeyPatch):
    """Apply the canned configuration file for every test.

    Args:
      monkeypatch: Pytest helper used to set ``ONLINEBAYES_CONFIG_PATH``.
    """

    monkeypatch.setenv("ONLINEBAYES_CONFIG_PATH", str(CONFIG_PATH))
    reset_runtime_config()
    set_log_level("WARN")
    try:
        yield
    finally:
        reset_runtime_config()
        set_log_level("WARN")
