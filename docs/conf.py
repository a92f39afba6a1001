"""Sphinx configuration for Contact Book API documentation."""

import os
import sys
from datetime import datetime

sys.path.insert(0, os.path.abspath(".."))
os.environ.setdefault("SECRET_KEY", "docs-build-only")

project = "Contact Book API"
current_year = datetime.now().year
copyright = f"{current_year}, Contact Book"
author = "Contact Book Team"

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
]


templates_path = ["_templates"]
exclude_patterns: list[str] = []

html_theme = "alabaster"

html_static_path = ["_static"]
