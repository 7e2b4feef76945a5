"""Validation gate for local spec files.

Every spec file is parsed before anything is uploaded. The gate is
all-or-nothing: if a single file has errors, nothing is returned for
upload and every failing file is reported together.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Union

from .errors import ValidationFailedError
from .models import LocalTest
from .parser import parse_file
from .spec_files import SPEC_FOLDER, find_spec_files

logger = logging.getLogger(__name__)

__all__ = ["validate", "report_errors"]


def report_errors(errors: Dict[str, Dict[int, str]]) -> None:
    """Log every failing file followed by its messages."""
    logger.error("Parsing errors:")
    logger.error("")
    for file_name, file_errors in errors.items():
        logger.error(f" {file_name}")
        for line_no in sorted(file_errors):
            location = f"line {line_no}: " if line_no else ""
            logger.error(f"\t{location}{file_errors[line_no]}")


def validate(
    spec_folder: Union[str, Path] = SPEC_FOLDER, debug: bool = False
) -> Dict[str, LocalTest]:
    """Parse every spec file under the root.

    Args:
        spec_folder: Spec-file root
        debug: Log each parsed test

    Returns:
        Mapping of file path to parsed test, only when all files are valid

    Raises:
        ValidationFailedError: If any file has parse errors
    """
    tests: Dict[str, LocalTest] = {}
    for path in find_spec_files(spec_folder):
        tests[str(path)] = parse_file(path)

    errors = {name: test.errors for name, test in tests.items() if test.has_errors}
    if errors:
        report_errors(errors)
        raise ValidationFailedError(errors)

    if debug:
        for file_name, test in tests.items():
            logger.debug(repr(test))
            logger.debug(file_name)
            logger.debug(test.description)
            for step in test.steps:
                logger.debug(f"\t{step}")
    else:
        logger.info("[VALID]")

    return tests
