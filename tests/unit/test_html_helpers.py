"""Unit tests for the HTML helpers shared by the conversion passes."""

import pytest

from vitae.contexts.conversion.html_helpers import (
    HrefCommand,
    clean_text,
    href_to_anchor,
    normalize_date_range,
    parse_href_command,
    render_inline_latex,
    replace_icon_macros,
)
from vitae.contexts.conversion.html_patterns import SEPARATOR, marker


class TestIconMacros:
    """Tests for replace_icon_macros."""

    def test_known_icons(self):
        fragment = marker("faGithub") + " github " + marker("faEnvelope")
        result = replace_icon_macros(fragment)

        assert result == '<i class="fab fa-github"></i> github <i class="fas fa-envelope"></i>'

    def test_unknown_icon_falls_back(self):
        assert replace_icon_macros(marker("faRocket")) == '<i class="fas fa-circle"></i>'

    def test_idempotent(self):
        fragment = marker("faLinkedin") + marker("faMobile") + "text"
        once = replace_icon_macros(fragment)

        assert replace_icon_macros(once) == once

    def test_other_markers_untouched(self):
        fragment = marker("resumeItem")
        assert replace_icon_macros(fragment) == fragment


class TestParseHref:
    """Tests for parse_href_command and href_to_anchor."""

    def test_uline_display_text(self):
        parsed = parse_href_command(r"\href{https://x.com}{\uline{Link}}")
        assert parsed == HrefCommand(url="https://x.com", text="Link")

    def test_unterminated_uline_keeps_text(self):
        """Display text with an unclosed underline still yields the bare text."""
        parsed = parse_href_command(r"\href{https://github.com/u/r}{\uline{Source Code")
        assert parsed == HrefCommand(url="https://github.com/u/r", text="Source Code")

    def test_escaped_characters_unescaped(self):
        parsed = parse_href_command(r"\href{https://x.com}{R\&D Lab}")
        assert parsed.text == "R&D Lab"

    def test_no_href_returns_none(self):
        assert parse_href_command("plain text") is None
        assert parse_href_command(r"\href{https://x.com} no text") is None

    def test_anchor_with_target(self):
        anchor = href_to_anchor(r"\href{https://acme.example.com}{\uline{Acme Corp}}")
        assert anchor == (
            '<a href="https://acme.example.com" target="_blank" rel="noopener noreferrer">'
            "Acme Corp</a>"
        )

    def test_anchor_bold(self):
        anchor = href_to_anchor(r"\href{https://acme.example.com}{Acme}", make_bold=True)
        assert "<strong>Acme</strong></a>" in anchor

    def test_fallback_plain_text(self):
        """An argument without \\href becomes inline text instead of raising."""
        assert href_to_anchor(r"Acme \& Co", make_bold=True) == "<strong>Acme & Co</strong>"
        assert href_to_anchor("Internal tool") == "Internal tool"


class TestTextCleanup:
    """Tests for clean_text and normalize_date_range."""

    def test_clean_text(self):
        fragment = (
            '<a class="href" href="https://x.com">x</a><br class="linebreak">'
            '<span class="inline-math">|</span> y '
        )
        assert clean_text(fragment) == f'<a href="https://x.com">x</a> {SEPARATOR} y'

    @pytest.mark.parametrize(
        "dates, expected",
        [
            ("Sep. 2019 --   Jun. 2023", "Sep. 2019 – Jun. 2023"),
            ("Oct 2023--Present", "Oct 2023 – Present"),
            ("2021", "2021"),
        ],
    )
    def test_normalize_date_range(self, dates, expected):
        assert normalize_date_range(dates) == expected


class TestInlineLatex:
    """Tests for render_inline_latex."""

    def test_formatting_commands_become_tags(self):
        result = render_inline_latex(r"\textbf{Lead} on \emph{Python $|$ Go} with \texttt{gRPC}")
        assert result == f"<strong>Lead</strong> on <em>Python {SEPARATOR} Go</em> with <code>gRPC</code>"

    def test_nested_commands(self):
        assert render_inline_latex(r"\textbf{\textit{Both}}") == "<strong><em>Both</em></strong>"

    def test_math_dashes_and_escapes(self):
        result = render_inline_latex(r"$O(n)$ R\&D 2019--2021 up~to 50\%")
        assert result == '<span class="inline-math">O(n)</span> R&D 2019–2021 up to 50%'

    def test_escaped_dollar_is_not_math(self):
        assert render_inline_latex(r"\$5 and \$10") == "$5 and $10"

    def test_href_text_formatting(self):
        parsed = parse_href_command(r"\href{https://x.com}{\textbf{Demo}}")
        assert parsed.text == "<strong>Demo</strong>"
