"""Renders a whole project as one block of text, ready to paste elsewhere."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple, Union

from jinja2 import Template

# One banner per file, followed by its content and a blank line.
FLATTEN_TEMPLATE = (
    "{% for path, content in files %}"
    "// ===== {{ path }} =====\n"
    "{{ content }}\n"
    "\n"
    "{% endfor %}"
)


class TextExporter:
    """Concatenates project files under '// ===== path =====' banners."""

    def __init__(self, template: Optional[str] = None):
        self.template = Template(template or FLATTEN_TEMPLATE, keep_trailing_newline=True)

    def render(self, entries: Iterable[Tuple[str, Union[bytes, str]]]) -> str:
        """
        Renders the template over (path, content) pairs.

        Args:
            entries: Files in output order. Files without content are left out.
                Bytes are decoded as UTF-8, with undecodable sequences replaced.
        """
        files = [
            (path, content.decode("utf-8", errors="replace") if isinstance(content, bytes) else content)
            for path, content in entries
            if content
        ]
        return self.template.render(files=files)
