"""
Utility functions for migration report generation and saving.

This module provides functions to:
- Render the per-artifact outcome table
- Save the JSON migration summary
"""
import json
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List

from tabulate import tabulate

from utils.logging_utils import get_logger

logger = get_logger(__name__)


# ============================================================================
# Migration Summary
# ============================================================================

def build_results_table(results: List[Any]) -> str:
    """Render MigrationResult objects as a grid table."""
    rows = [
        [i, result.outcome.tag, result.artifact, result.target_reference or "-"]
        for i, result in enumerate(results, 1)
    ]
    return tabulate(rows, headers=["#", "Outcome", "Artifact", "Target"], tablefmt="grid")


def summarize_results(results: List[Any]) -> Dict[str, Any]:
    """Count MigrationResult objects per outcome tag."""
    counts = Counter(result.outcome.tag for result in results)
    return {
        "total": len(results),
        "succeeded": sum(1 for result in results if result.succeeded),
        "failed": sum(1 for result in results if not result.succeeded),
        "by_outcome": dict(sorted(counts.items())),
    }


# ============================================================================
# Report Saving Functions
# ============================================================================

def save_json(path: str, data: Any) -> str:
    """
    Write JSON data to a file with indentation.

    Args:
        path: Path to save the JSON file; missing parent directories are created
        data: Data to save

    Returns:
        Path to the saved file
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    with open(p, "w") as f:
        json.dump(data, f, indent=2)

    logger.info(f"Saved report to {p}")
    return str(p)
