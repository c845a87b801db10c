"""
HUMAN logging level -- User-facing notices.

Custom level between INFO (20) and WARNING (30). It does not indicate
severity: it marks the messages a person running the command should read
(clipboard failures, a library that had to be recreated, a notebook that
could not be updated) without the technical noise of INFO/DEBUG.

Hierarchy:
    debug  (10) -> HTTP details, regex misses, scores
    info   (20) -> System operations (config loaded, snippet saved)
    human  (25) -> * Notices for the user
    warn   (30) -> Non-fatal problems
    error  (40) -> Errors
"""

import logging

import structlog

HUMAN = 25
logging.addLevelName(HUMAN, "HUMAN")


def _human_method(self, message, *args, **kwargs):
    if self.isEnabledFor(HUMAN):
        self._log(HUMAN, message, args, **kwargs)


logging.Logger.human = _human_method

# Register the level in structlog to avoid KeyError: 25
if hasattr(structlog, "stdlib"):
    try:
        structlog.stdlib.LEVEL_TO_NAME[HUMAN] = "human"
    except (AttributeError, KeyError):
        pass
