"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths to the bundled corpus being
   scattered throughout the code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find the JSON corpus when the app is frozen into an executable.

Exports:
    RESOURCES_PATH (str): Absolute path to the package resources directory.
    DATA_PATH (str): Directory holding pages.json, visuals.json and derivations.json.
"""
import sys
import os
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, "mathwiki", relative_path)

    # Development mode: resolve relative to this file (src/mathwiki/)
    package_dir: Path = Path(__file__).parent
    return os.path.join(str(package_dir), relative_path)


# Global Constants
RESOURCES_PATH: str = get_resource_path("resources")
DATA_PATH: str = os.environ.get("MATHWIKI_DATA_PATH") or os.path.join(RESOURCES_PATH, "data")

CORPUS_FILES: tuple[str, ...] = ("pages", "visuals", "derivations")

# Search
SEARCH_DEBOUNCE_MS: int = 120
DEFAULT_SEARCH_LIMIT: int = 40
SEARCH_RESULT_LIMIT: int = 80
AUTOCOMPLETE_LIMIT: int = 8

# Home screen
AVAILABLE_TAGS: tuple[str, ...] = ("Algebra", "Calculus", "Statistics")
FEATURED_PAGE_IDS: tuple[str, ...] = (
    "quadratic-formula",
    "derivative-definition",
    "normal-distribution",
    "bayes-theorem",
    "pi",
)

# Deep links emitted for linked segments: mathwiki://<page id>
LINK_SCHEME: str = "mathwiki"
