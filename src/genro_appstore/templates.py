# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Extraction of component templates from HTML source text.

Only top-level <template> elements are returned: a template nested in
another template's content belongs to that content. Inline <script>
elements are moved out of the content into Template.script.

Example:
    >>> html = '<template id="x-hello" title><p>Hi</p><script>go()</script></template>'
    >>> [t] = extract_templates(html)
    >>> t.id, t.content, t.script
    ('x-hello', '<p>Hi</p>', 'go()')
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html.parser import HTMLParser


@dataclass
class Template:
    """A component template.

    Attributes:
        id: Component name taken from the id attribute, or None.
        attributes: All attributes of the <template> element.
        content: Inner HTML with scripts removed.
        script: Concatenated text of the inline scripts.
    """

    id: str | None
    attributes: dict[str, str] = field(default_factory=dict)
    content: str = ''
    script: str = ''

    @property
    def observed_attributes(self) -> tuple[str, ...]:
        """Attribute names whose changes are forwarded to components."""
        return tuple(self.attributes)


class _TemplateParser(HTMLParser):
    """Collects top-level <template> elements while parsing."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self.templates: list[Template] = []
        self._depth = 0
        self._in_script = False
        self._attrs: dict[str, str] = {}
        self._content: list[str] = []
        self._script: list[str] = []

    def _emit(self, text: str) -> None:
        if self._depth:
            (self._script if self._in_script else self._content).append(text)

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == 'template':
            self._depth += 1
            if self._depth == 1:
                self._attrs = {name: value or '' for name, value in attrs}
                self._content = []
                self._script = []
                return
        elif tag == 'script' and self._depth == 1:
            self._in_script = True
            return
        self._emit(self.get_starttag_text() or f'<{tag}>')

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._emit(self.get_starttag_text() or f'<{tag}/>')

    def handle_endtag(self, tag: str) -> None:
        if not self._depth:
            return
        if tag == 'script' and self._in_script:
            self._in_script = False
            return
        if tag == 'template':
            self._depth -= 1
            if not self._depth:
                self.templates.append(Template(
                    id=self._attrs.get('id') or None,
                    attributes=self._attrs,
                    content=''.join(self._content).strip(),
                    script=''.join(self._script),
                ))
                return
        self._emit(f'</{tag}>')

    def handle_data(self, data: str) -> None:
        self._emit(data)

    def handle_entityref(self, name: str) -> None:
        self._emit(f'&{name};')

    def handle_charref(self, name: str) -> None:
        self._emit(f'&#{name};')

    def handle_comment(self, data: str) -> None:
        self._emit(f'<!--{data}-->')


def extract_templates(html: str) -> list[Template]:
    """Return the top-level templates found in html, in document order."""
    parser = _TemplateParser()
    parser.feed(html.strip())
    parser.close()
    return parser.templates
