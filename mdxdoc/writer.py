"""Persist a render result to a documentation directory."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from .config import OutputConfig
from .document import RenderedDocument
from .logging import get_logger
from .pipeline import RenderResult

NAVIGATION_FILENAME = "mint.json"


class DocumentWriter:
    """Writes pages under ``<output>/<base_path>/`` and the manifest at ``<output>``."""

    def __init__(self, config: OutputConfig | None = None) -> None:
        self.config = config or OutputConfig()
        self.logger = get_logger("writer")

    def write(self, result: RenderResult, output_dir: Path) -> List[Path]:
        output_dir = Path(output_dir).expanduser()
        pages_root = output_dir / result.references.base_path if result.references.base_path else output_dir
        written: List[Path] = []
        for document in [*result.pages, result.overview]:
            written.append(self._write_document(document, pages_root))

        if self.config.navigation and result.navigation:
            manifest = output_dir / NAVIGATION_FILENAME
            manifest.parent.mkdir(parents=True, exist_ok=True)
            manifest.write_text(json.dumps(result.navigation, indent=2) + "\n", encoding="utf-8")
            written.append(manifest)

        self.logger.info("Wrote %d file(s) to %s", len(written), output_dir)
        return written

    def _write_document(self, document: RenderedDocument, pages_root: Path) -> Path:
        target = pages_root / f"{document.location}{self.config.extension}"
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(document.to_text(), encoding="utf-8")
        self.logger.debug("Wrote %s", target)
        return target


__all__ = ["DocumentWriter", "NAVIGATION_FILENAME"]
