"""Path normalization for report output."""

import re

NESTED_DEPENDENCY_DIR = 'node_modules'
NESTED_MARKER = '/~/'

_NESTED_SEGMENT = re.compile(r'(?:[/\\]' + NESTED_DEPENDENCY_DIR + r')+[/\\]')


def clean_path(path: str) -> str:
    """Collapse every nested node_modules segment into the compact /~/ marker.

    Example:
        /app/node_modules/a/node_modules/b -> /app/~/a/~/b
    """
    return NESTED_MARKER.join(_NESTED_SEGMENT.split(path))


def normalize(path: str, context: str) -> str:
    """Clean a path and make it relative to the project context when it lies inside it."""
    cleaned = clean_path(path)

    if context and cleaned.startswith(context):
        cleaned = '.' + cleaned[len(context):]

    return cleaned


class PathNormalizer:
    """Normalizer bound to one project context."""

    def __init__(self, context: str):
        self.context = context

    def __call__(self, path: str) -> str:
        return normalize(path, self.context)
