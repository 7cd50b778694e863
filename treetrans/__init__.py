"""
Incremental document-tree translation.

Structure:
    treetrans/
    ├── sync/           - Checkpoint, staleness, batch cap, walker, reconciler
    ├── translators/    - Text transform (Gemini)
    ├── utils/          - Configuration, logging, exceptions
    ├── pipeline.py     - One bounded run
    └── translate.py    - CLI

Quick Usage:
    from treetrans.utils.config import Config
    from treetrans.pipeline import run_pipeline

    result = run_pipeline(Config.load("treetrans.yaml"))

CLI:
    python -m treetrans.translate ./docs/nl ./docs/en
"""

__version__ = "1.0.0"
