"""
Export of generated sites and composition of standalone preview documents.
"""

import html as html_lib
import json
from pathlib import Path
from typing import Dict, Union

from sketch2site.models import CodeGenerationResult


BASE_STYLES = """    /* Reset */
    * {
      margin: 0;
      padding: 0;
      box-sizing: border-box;
    }

    body {
      font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, Cantarell, sans-serif;
      line-height: 1.6;
      color: #333;
    }"""


def compose_preview_document(html: str, css: str, javascript: str, title: str = "Preview") -> str:
    """
    Wrap generated fragments into one self-contained HTML document.

    Args:
        html: Body markup.
        css: Stylesheet, inlined after a small reset.
        javascript: Script, inlined at the end of the body.
        title: Document title.

    Returns:
        Complete HTML document string.
    """
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{html_lib.escape(title)}</title>
  <style>
{BASE_STYLES}

    /* Generated CSS */
{css}
  </style>
</head>
<body>
{html}

  <script>
{javascript}
  </script>
</body>
</html>
"""


def compose_index_document(html: str, title: str = "Website") -> str:
    """HTML document that links ``styles.css`` and ``script.js`` next to it."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{html_lib.escape(title)}</title>
  <link rel="stylesheet" href="styles.css">
</head>
<body>
{html}

  <script src="script.js"></script>
</body>
</html>
"""


class ArtifactManager:
    """Writes generated sites to disk."""

    def __init__(self, output_dir: Union[str, Path] = "outputs"):
        """
        Initialize artifact manager.

        Args:
            output_dir: Root directory for exported sites.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def create_site_directory(self, site_id: str) -> Path:
        site_dir = self.output_dir / site_id
        site_dir.mkdir(parents=True, exist_ok=True)
        return site_dir

    def save_site(self, site_id: str, result: CodeGenerationResult, title: str = "Website") -> Dict[str, Path]:
        """
        Write a generation result as a static site.

        Args:
            site_id: Directory name under the output root.
            result: Generation result (incomplete results are written too).
            title: Document title.

        Returns:
            Mapping of artifact name to written path.
        """
        site_dir = self.create_site_directory(site_id)
        paths = {
            "index": site_dir / "index.html",
            "styles": site_dir / "styles.css",
            "script": site_dir / "script.js",
            "preview": site_dir / "preview.html",
            "metadata": site_dir / "generation.json",
        }

        paths["index"].write_text(compose_index_document(result.html, title), encoding="utf-8")
        paths["styles"].write_text(result.css, encoding="utf-8")
        paths["script"].write_text(result.javascript, encoding="utf-8")
        paths["preview"].write_text(
            compose_preview_document(result.html, result.css, result.javascript, title),
            encoding="utf-8",
        )
        metadata = {"complete": result.complete, "errors": result.errors or []}
        paths["metadata"].write_text(json.dumps(metadata, indent=2), encoding="utf-8")
        return paths
