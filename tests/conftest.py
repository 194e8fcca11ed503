"""Shared test setup: keep JSONL logs and config out of the home directory."""

import os
import tempfile

os.environ["DEVMIND_LOG_DIR"] = tempfile.mkdtemp(prefix="devmind-logs-")
os.environ["DEVMIND_CONFIG_DIR"] = tempfile.mkdtemp(prefix="devmind-config-")
