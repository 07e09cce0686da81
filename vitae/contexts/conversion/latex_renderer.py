"""
Generic LaTeX-to-HTML Renderer

Parses LaTeX with pylatexenc and renders the node tree to a plain HTML string.
Only a small vocabulary of standard commands gets real markup; every other
macro becomes an inert marker span (<span class="macro macro-NAME"></span>)
followed by the content of the brace groups after it. The conversion passes
turn those markers into résumé markup afterwards.

Output contract:
    - Paragraphs (blank line or \\par separated) become <p>...</p>
    - Headings, lists, environments and display math are block elements
    - \\section -> <h3>, \\subsection -> <h4> (promoted later by the passes)
    - \\\\ -> <br class="linebreak">, $x$ -> <span class="inline-math">x</span>
    - Text & and alignment & -> &#x26;, escaped \\& -> &amp;
"""

import html
import re
from typing import List, Optional, Tuple

from pylatexenc.latexwalker import (
    LatexCharsNode,
    LatexCommentNode,
    LatexEnvironmentNode,
    LatexGroupNode,
    LatexMacroNode,
    LatexMathNode,
    LatexSpecialsNode,
    LatexWalker,
    LatexWalkerError,
    get_default_latex_context_db,
)
from pylatexenc.macrospec import EnvironmentSpec, MacroSpec, SpecialsSpec

from vitae.contexts.conversion.exceptions import LatexRenderError
from vitae.contexts.conversion.html_patterns import AMPERSAND_ENTITY, LINEBREAK, marker
from vitae.utils.latex_parsing_tools import extract_environment_content

INLINE = "inline"
BLOCK = "block"
PARBREAK = "parbreak"

Token = Tuple[str, str]

BLANK_LINE = re.compile(r"\n[ \t]*\n")
WHITESPACE = re.compile(r"[ \t\r\n]+")

HEADING_LEVELS = {
    "chapter": 2,
    "section": 3,
    "subsection": 4,
    "subsubsection": 5,
    "paragraph": 6,
}

INLINE_TAGS = {
    "textbf": "strong",
    "textit": "em",
    "emph": "em",
    "textsl": "em",
    "underline": "u",
    "texttt": "code",
    "textsuperscript": "sup",
    "textsubscript": "sub",
}

SIZE_SWITCHES = (
    "tiny", "scriptsize", "footnotesize", "small", "normalsize",
    "large", "Large", "LARGE", "huge", "Huge",
)
FONT_SWITCHES = {
    "bfseries": ("<strong>", "</strong>"),
    "itshape": ("<em>", "</em>"),
    "scshape": ('<span class="scshape">', "</span>"),
}

CHARACTER_MACROS = {
    "&": "&amp;",
    "%": "%",
    "$": "$",
    "#": "#",
    "_": "_",
    "{": "{",
    "}": "}",
    " ": " ",
    ",": " ",
    "LaTeX": "LaTeX",
    "TeX": "TeX",
    "ldots": "…",
    "textbullet": "•",
    "textbar": "|",
}

# Layout commands with no visible HTML counterpart
IGNORED_MACROS = (
    "noindent", "centering", "raggedright", "raggedleft", "hfill", "vfill",
    "newpage", "clearpage", "pagebreak", "smallskip", "medskip", "bigskip",
    "hline", "title", "author", "date", "hspace", "-", "/", "@",
)

TABULAR_ENVIRONMENTS = ("tabular", "tabular*", "tabularx", "array")
LIST_ENVIRONMENTS = {"itemize": "ul", "enumerate": "ol", "description": "ul"}

SPECIALS_TEXT = {
    "&": AMPERSAND_ENTITY,
    "~": "\u00a0",
    "--": "–",
    "---": "—",
}


def escape_text(text: str) -> str:
    """Escape text the way the renderer does (& and < only)."""
    return text.replace("&", AMPERSAND_ENTITY).replace("<", "&#x3C;")


def build_latex_context():
    """Default pylatexenc context plus argument specs for the rendered vocabulary."""
    context = get_default_latex_context_db().filter_context()
    context.add_context_category(
        "vitae-rendering",
        macros=[
            MacroSpec("\\", "*["),
            MacroSpec("href", "{{"),
            MacroSpec("url", "{"),
            MacroSpec("vspace", "*{"),
            MacroSpec("hspace", "*{"),
            MacroSpec("title", "{"),
            MacroSpec("author", "{"),
            MacroSpec("date", "{"),
            MacroSpec("item", "["),
            *[MacroSpec(name, "{") for name in INLINE_TAGS],
            *[MacroSpec(name, "*[{") for name in HEADING_LEVELS],
        ],
        environments=[
            EnvironmentSpec("tabular", "[{"),
            EnvironmentSpec("tabular*", "{[{"),
            EnvironmentSpec("tabularx", "{[{"),
            EnvironmentSpec("itemize", "["),
            EnvironmentSpec("enumerate", "["),
        ],
        specials=[SpecialsSpec(chars) for chars in SPECIALS_TEXT],
        prepend=True,
    )
    return context


def _verbatim(nodes) -> str:
    return "".join(node.latex_verbatim() for node in nodes if node is not None)


def _arg(node, index: int):
    nodeargd = getattr(node, "nodeargd", None)
    if nodeargd is None or not nodeargd.argnlist or index >= len(nodeargd.argnlist):
        return None
    return nodeargd.argnlist[index]


def _arg_nodes(node, index: int) -> list:
    """Child nodes of a macro argument ([] when the argument is absent)."""
    argument = _arg(node, index)
    if argument is None:
        return []
    if isinstance(argument, LatexGroupNode):
        return argument.nodelist
    return [argument]


class LatexHtmlRenderer:
    """
    Render LaTeX source to a generic HTML fragment.

    Example:
        >>> renderer = LatexHtmlRenderer()
        >>> renderer.render(r"\\begin{document}Hello \\textbf{world}\\end{document}")
        '<p>Hello <strong>world</strong></p>'
    """

    def __init__(self):
        self.latex_context = build_latex_context()

    def render(self, latex: str) -> str:
        """
        Render the document body (or the whole text without a document environment).

        Raises:
            LatexRenderError: If the walker cannot parse the source
        """
        try:
            body, _, _ = extract_environment_content(latex, "document")
        except ValueError:
            body = latex

        try:
            walker = LatexWalker(body, latex_context=self.latex_context, tolerant_parsing=False)
            nodelist, _, _ = walker.get_latex_nodes(pos=0)
        except LatexWalkerError as e:
            position = getattr(e, "pos", None) or 0
            raise LatexRenderError(
                f"LaTeX parsing failed: {e}",
                latex_snippet=body[max(position - 40, 0):position + 160],
                original_error=e,
            ) from e

        return self._blocks(nodelist)

    # ------------------------------------------------------------------
    # Token assembly
    # ------------------------------------------------------------------

    def _blocks(self, nodes) -> str:
        """Render nodes as block content, wrapping inline runs in paragraphs."""
        parts = []
        pending: List[str] = []

        def flush():
            paragraph = WHITESPACE.sub(" ", "".join(pending)).strip()
            if paragraph:
                parts.append(f"<p>{paragraph}</p>")
            pending.clear()

        for kind, markup in self._tokens(nodes):
            if kind == INLINE:
                pending.append(markup)
            elif kind == PARBREAK:
                flush()
            else:
                flush()
                parts.append(markup)
        flush()

        return "\n".join(parts)

    def _inline(self, nodes, in_group: bool = True) -> str:
        """Render nodes as one inline run (paragraph breaks become spaces)."""
        rendered = "".join(
            " " if kind == PARBREAK else markup
            for kind, markup in self._tokens(nodes, in_group=in_group)
        )
        return WHITESPACE.sub(" ", rendered)

    def _tokens(self, nodes, in_group: bool = False) -> List[Token]:
        tokens: List[Token] = []
        nodes = [node for node in nodes if node is not None]

        for index, node in enumerate(nodes):
            if isinstance(node, LatexMacroNode) and in_group and self._is_switch(node):
                opening, closing = self._switch_tags(node.macroname)
                rest = self._inline(nodes[index + 1:]).strip()
                tokens.append((INLINE, f"{opening}{rest}{closing}"))
                break
            tokens.extend(self._node_tokens(node))

        return tokens

    @staticmethod
    def _is_switch(node) -> bool:
        return node.macroname in SIZE_SWITCHES or node.macroname in FONT_SWITCHES

    @staticmethod
    def _switch_tags(name: str) -> Tuple[str, str]:
        if name in FONT_SWITCHES:
            return FONT_SWITCHES[name]
        return f'<span class="textsize-{name}">', "</span>"

    # ------------------------------------------------------------------
    # Node rendering
    # ------------------------------------------------------------------

    def _node_tokens(self, node) -> List[Token]:
        if isinstance(node, LatexCharsNode):
            return self._chars_tokens(node.chars)
        if isinstance(node, LatexGroupNode):
            return self._tokens(node.nodelist, in_group=True)
        if isinstance(node, LatexMacroNode):
            return self._macro_tokens(node)
        if isinstance(node, LatexEnvironmentNode):
            return [(BLOCK, self._environment(node))]
        if isinstance(node, LatexMathNode):
            return [self._math_token(node)]
        if isinstance(node, LatexSpecialsNode):
            chars = node.specials_chars
            return [(INLINE, SPECIALS_TEXT.get(chars, escape_text(chars)))]
        if isinstance(node, LatexCommentNode):
            if BLANK_LINE.search(getattr(node, "comment_post_space", "") or ""):
                return [(PARBREAK, "")]
            return []
        return []

    def _chars_tokens(self, chars: str) -> List[Token]:
        tokens: List[Token] = []
        for index, chunk in enumerate(BLANK_LINE.split(chars)):
            if index:
                tokens.append((PARBREAK, ""))
            text = chunk.replace("---", "—").replace("--", "–").replace("~", "\u00a0")
            tokens.append((INLINE, WHITESPACE.sub(" ", escape_text(text))))
        return tokens

    def _post_space_tokens(self, node) -> List[Token]:
        # Whitespace swallowed after a control word may hold a paragraph break
        if BLANK_LINE.search(getattr(node, "macro_post_space", "") or ""):
            return [(PARBREAK, "")]
        return []

    def _macro_tokens(self, node) -> List[Token]:
        name = node.macroname

        if name in HEADING_LEVELS:
            level = HEADING_LEVELS[name]
            title = self._inline(_arg_nodes(node, 2)).strip()
            return [(BLOCK, f"<h{level}>{title}</h{level}>")]

        if name == "par":
            return [(PARBREAK, "")]

        if name == "\\":
            return [(INLINE, LINEBREAK)]

        if name in INLINE_TAGS:
            tag = INLINE_TAGS[name]
            return [(INLINE, f"<{tag}>{self._inline(_arg_nodes(node, 0))}</{tag}>")]

        if name == "href":
            url = html.escape(_verbatim(_arg_nodes(node, 0)).strip())
            text = self._inline(_arg_nodes(node, 1))
            return [(INLINE, f'<a class="href" href="{url}">{text}</a>')]

        if name == "url":
            url = _verbatim(_arg_nodes(node, 0)).strip()
            return [(INLINE, f'<a class="href" href="{html.escape(url)}">{escape_text(url)}</a>')]

        if name == "vspace":
            length = html.escape(_verbatim(_arg_nodes(node, 1)).strip())
            return [(INLINE, f'<span class="vspace" style="margin-top: {length}"></span>')]

        if name in CHARACTER_MACROS:
            return [(INLINE, CHARACTER_MACROS[name])] + self._post_space_tokens(node)

        if name in IGNORED_MACROS or self._is_switch(node):
            return self._post_space_tokens(node)

        # No rendering rule: inert marker, arguments (if any) rendered after it
        tokens = [(INLINE, marker(name))]
        nodeargd = getattr(node, "nodeargd", None)
        for argument in (nodeargd.argnlist if nodeargd and nodeargd.argnlist else []):
            if isinstance(argument, LatexGroupNode):
                tokens.extend(self._tokens(argument.nodelist, in_group=True))
        return tokens + self._post_space_tokens(node)

    def _math_token(self, node) -> Token:
        content = escape_text(_verbatim(node.nodelist).strip())
        if node.displaytype == "display":
            return (BLOCK, f'<div class="display-math">{content}</div>')
        return (INLINE, f'<span class="inline-math">{content}</span>')

    def _environment(self, node) -> str:
        name = node.environmentname

        if name in LIST_ENVIRONMENTS:
            tag = LIST_ENVIRONMENTS[name]
            items = "".join(f"<li>{item}</li>" for item in self._list_items(node.nodelist))
            return f"<{tag}>{items}</{tag}>"

        if name in TABULAR_ENVIRONMENTS:
            # Column specs and widths are arguments, so they never reach the body
            content = self._inline(node.nodelist, in_group=False).strip()
        else:
            content = self._blocks(node.nodelist)

        return f'<div class="environment {html.escape(name)}">{content}</div>'

    def _list_items(self, nodes) -> List[str]:
        items: List[str] = []
        current: Optional[list] = None

        for node in nodes:
            if isinstance(node, LatexMacroNode) and node.macroname == "item":
                if current is not None:
                    items.append(self._inline(current).strip())
                current = []
            elif current is not None:
                current.append(node)

        if current is not None:
            items.append(self._inline(current).strip())

        return items


_default_renderer: Optional[LatexHtmlRenderer] = None


def render_latex_to_html(latex: str) -> str:
    """Render LaTeX with a shared renderer instance (the context is built once)."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = LatexHtmlRenderer()
    return _default_renderer.render(latex)
