"""Shared fixtures: fake translator, tree builder, run context factory."""
import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from treetrans.sync import (
    BatchGovernor,
    CheckpointStore,
    RunContext,
    UnresolvedTermCollector,
    REPORT_FILENAME,
)
from treetrans.translators.base import TranslationContext
from treetrans.utils.config import Config
from treetrans.utils.exceptions import TranslationError, SetupError

CONFIG_ENV_VARS = [
    "SOURCE_DIR", "TARGET_DIR", "EXCLUDE", "BATCH_SIZE", "INTERVAL_TIME", "TRAVERSAL",
    "SOURCE_LANG", "TARGET_LANG", "TRANSLATE_EXTENSIONS", "GEMINI_MODEL",
    "DEBUG_MODE", "LOG_FILE", "GEMINI_API_KEY", "GOOGLE_API_KEY",
]


class FakeTranslator:
    """In-memory translator: prefixes every line, records calls."""

    name = "fake"

    def __init__(self, fail_on=(), reachable=True):
        self.fail_on = set(fail_on)
        self.reachable = reachable
        self.calls = []
        self.checked = False

    def translate(self, text, context):
        self.calls.append(context.source_file)
        if context.source_file in self.fail_on:
            raise TranslationError("Simulated failure", source_file=context.source_file, api=self.name)
        return "\n".join(f"[{context.target_lang}] {line}" for line in text.split("\n"))

    def check_connection(self, context=None):
        self.checked = True
        if not self.reachable:
            raise SetupError("Simulated provider outage")


def write_tree(root: Path, files: dict) -> None:
    """Create files under root; str values as UTF-8 text, bytes as-is."""
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")


def set_mtime(path: Path, ms: int) -> None:
    ns = ms * 1_000_000
    os.utime(path, ns=(ns, ns))


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so values loaded from a .env file are undone too
    for name in CONFIG_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def trees(tmp_path):
    source = tmp_path / "nl"
    target = tmp_path / "en"
    source.mkdir()
    return source, target


@pytest.fixture
def fake_translator():
    return FakeTranslator()


@pytest.fixture
def make_config(trees):
    source, target = trees

    def _make(batch_size=100, interval_ms=0, **overrides):
        config = Config()
        config.paths.source_dir = str(source)
        config.paths.target_dir = str(target)
        config.batch.size = batch_size
        config.batch.interval_ms = interval_ms
        config.apply_overrides(**overrides)
        return config

    return _make


@pytest.fixture
def make_context(trees):
    source, target = trees

    def _make(cap=100, interval_ms=0, exclude=(), extensions=(".rst",)):
        target.mkdir(exist_ok=True)
        store = CheckpointStore(target)
        return RunContext(
            source_root=source,
            target_root=target,
            languages=TranslationContext("Dutch", "English"),
            store=store,
            checkpoint=store.load(),
            governor=BatchGovernor(cap),
            terms=UnresolvedTermCollector(target / REPORT_FILENAME),
            extensions=tuple(extensions),
            exclude=tuple(exclude),
            interval_ms=interval_ms,
        )

    return _make
