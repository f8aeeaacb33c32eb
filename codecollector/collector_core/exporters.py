"""
Exporters writing a traversal result as JSON, plain text or Markdown
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Type, Union

from pygments.lexers import get_lexer_for_filename, guess_lexer
from pygments.util import ClassNotFound

from .errors import UnsupportedFormatError
from .result import TraversalResult
from ..utils import get_logger

logger = get_logger(__name__)

SEPARATOR_WIDTH = 80
FALLBACK_LANGUAGE = "plaintext"

# Content guesses scoring below this are too weak to label a block
MIN_GUESS_SCORE = 0.5


def detect_language(relative_path: str, content: str) -> str:
    """
    Language name for a fenced code block

    The file name decides first. The content is only consulted when the
    name is not recognised, and a guess from it is kept only when the
    lexer is confident (a shebang line, for example). Falls back to
    ``plaintext``.
    """
    try:
        lexer = get_lexer_for_filename(relative_path, code=content)
    except ClassNotFound:
        if not content.strip():
            return FALLBACK_LANGUAGE
        try:
            lexer = guess_lexer(content)
        except ClassNotFound:
            return FALLBACK_LANGUAGE
        if lexer.analyse_text(content) < MIN_GUESS_SCORE:
            return FALLBACK_LANGUAGE

    if not lexer.aliases or lexer.aliases[0] == 'text':
        return FALLBACK_LANGUAGE
    return lexer.aliases[0]


class ResultExporter(ABC):
    """Base class for traversal result exporters"""

    extension = ""

    @abstractmethod
    def render(self, result: TraversalResult) -> str:
        """Render the whole document"""
        pass

    def export(self, result: TraversalResult, output_base: Union[str, Path]) -> Path:
        """
        Write the document to ``output_base`` plus this format's extension

        Returns:
            Path of the written file
        """
        output_path = Path(f"{output_base}{self.extension}")
        output_path.write_text(self.render(result), encoding='utf-8')
        logger.info(f"Wrote {len(result.files)} files to {output_path}")
        return output_path


class JsonExporter(ResultExporter):
    """Structured output preserving tree text and path/content pairs"""

    extension = ".json"

    def render(self, result: TraversalResult) -> str:
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False) + "\n"


class TextExporter(ResultExporter):
    """Human-readable report, files separated by a fixed-width rule"""

    extension = ".txt"

    def render(self, result: TraversalResult) -> str:
        parts = [
            "Code Collection Report\n\n",
            "Directory Structure:\n\n",
            result.tree,
            "\n",
        ]
        for record in result.files:
            parts.append(f"File: {record.relative_path}\n\n")
            parts.append("Content:\n\n")
            parts.append(record.text)
            parts.append("\n\n")
            parts.append("-" * SEPARATOR_WIDTH + "\n\n")
        return ''.join(parts)


class MarkdownExporter(ResultExporter):
    """Markdown report with one fenced, language-tagged block per file"""

    extension = ".md"

    def render(self, result: TraversalResult) -> str:
        parts = [
            "# Code Collection Report\n\n",
            "## Directory Structure\n\n",
            "```plaintext\n",
            result.tree,
            "```\n\n",
            "## File Contents\n\n",
        ]
        for record in result.files:
            text = record.text
            parts.append(f"### {record.relative_path}\n\n")
            parts.append(f"```{detect_language(record.relative_path, text)}\n")
            parts.append(text)
            parts.append("\n```\n\n")
        return ''.join(parts)


EXPORTERS: Dict[str, Type[ResultExporter]] = {
    'json': JsonExporter,
    'text': TextExporter,
    'markdown': MarkdownExporter,
}


def get_exporter(output_format: str) -> ResultExporter:
    """
    Exporter for a format name

    Raises:
        UnsupportedFormatError: For unknown formats
    """
    exporter_class = EXPORTERS.get(output_format)
    if exporter_class is None:
        raise UnsupportedFormatError(f"unsupported output format: {output_format}")
    return exporter_class()


def export_output(result: TraversalResult, output_base: Union[str, Path], output_format: str) -> Path:
    """Write ``result`` in ``output_format`` next to ``output_base``"""
    return get_exporter(output_format).export(result, output_base)
