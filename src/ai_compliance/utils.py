"""
Utility functions for the compliance engine.

Includes:
- Logging setup
- Answer sheet loading (YAML or JSON)
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging for the engine.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def load_answer_sheet(path: Path) -> Dict[str, Any]:
    """
    Load a questionnaire answer sheet.

    JSON is a subset of YAML, so both formats go through yaml.safe_load.

    Args:
        path: Path to a .yaml/.yml/.json file

    Returns:
        Mapping of section -> answers (empty dict for an empty file)

    Raises:
        ValueError: If the file does not contain a mapping
    """
    path = Path(path)
    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Answer sheet {path} must contain a mapping, got {type(data).__name__}")

    logger.debug(f"Loaded answer sheet {path} ({len(data)} sections)")
    return data
