"""
LaTeX Parsing Tools

Fundamental parsing utilities for extracting LaTeX structures from raw source.

Self-contained module with no context dependencies.
All LaTeX patterns are defined as constants below for visibility and maintainability.
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

from vitae.utils.text_processing import extract_balanced_delimiters


@dataclass(frozen=True)
class LaTeXPatterns:
    """
    LaTeX pattern templates for parsing and manipulation.

    These are format string templates that accept command/environment names.
    Use .format() to substitute the command name.
    """

    # Command patterns (use with .format(command=name))
    COMMAND_WITH_BRACES: str = (
        r"\\{command}\{{([^}}]+)\}}"  # Matches \cmd{content}, captures content (no nesting)
    )
    COMMAND_OPENING: str = r"\\{command}\{{"  # Matches \cmd{ exactly (no space before brace)

    # Environment patterns (use with .format(env=name))
    BEGIN_ENV: str = r"\\begin\{{{env}\}}"  # Matches \begin{envname}
    END_ENV: str = r"\\end\{{{env}\}}"  # Matches \end{envname}

    # Escaped characters that unescape to themselves in plain text
    ESCAPED_TEXT_CHAR: str = r"\\([&%$#_{}])"


def extract_sequential_params(
    latex_str: str, start_pos: int, num_params: int
) -> Tuple[List[str], int]:
    """
    Extract N sequential brace-delimited parameters from a position, handling nested braces.

    Characters between parameters that are not an opening brace are skipped.
    Escaped braces (\\{, \\}) do not change the nesting depth.

    Args:
        latex_str: LaTeX source
        start_pos: Position to start searching
        num_params: Number of {...} parameters to extract

    Returns:
        (params, end_pos) where params holds at most num_params values (fewer if
        the text ends first) and end_pos is the position after the last closed brace

    Example:
        >>> latex = "\\\\resumeTrioHeading{Title}{Tech {nested}}{Link}"
        >>> extract_sequential_params(latex, 18, 3)
        (['Title', 'Tech {nested}', 'Link'], 46)
    """
    params = []
    pos = start_pos
    end_pos = start_pos

    for _ in range(num_params):
        # Find opening brace
        while pos < len(latex_str) and latex_str[pos] != "{":
            pos += 1

        if pos >= len(latex_str):
            break

        try:
            param_value, pos = extract_balanced_delimiters(latex_str, pos + 1)
        except ValueError:
            break

        params.append(param_value)
        end_pos = pos

    return params, end_pos


def extract_environment_content(
    text: str, env_name: str, start_pos: int = 0, include_env_command_in_positions: bool = False
) -> Tuple[str, int, int]:
    """
    Extract content from LaTeX environment, handling nested environments.

    Finds \\begin{env_name} and matching \\end{env_name}, correctly handling
    nested environments of the same name.

    Args:
        text: LaTeX text
        env_name: Environment name (e.g., 'document', 'abstract', 'tabular*')
        start_pos: Position to start searching (default: 0)
        include_env_command_in_positions: If True, returned positions span the
                                          \\begin and \\end commands themselves

    Returns:
        (content, begin_pos, end_pos) where:
        - content: Text between the returned positions
        - begin_pos: Position after \\begin{env_name} (or at \\begin if requested)
        - end_pos: Position at \\end{env_name} (or after it if requested)

    Raises:
        ValueError: If environment is not found or unmatched

    Example:
        >>> text = "\\\\begin{itemize} foo \\\\begin{itemize} bar \\\\end{itemize} \\\\end{itemize}"
        >>> content, begin, end = extract_environment_content(text, "itemize")
        >>> content
        ' foo \\\\begin{itemize} bar \\\\end{itemize} '
    """
    env_name_escaped = re.escape(env_name)
    begin_pattern = re.compile(LaTeXPatterns.BEGIN_ENV.format(env=env_name_escaped))
    end_pattern = re.compile(LaTeXPatterns.END_ENV.format(env=env_name_escaped))

    begin_match = begin_pattern.search(text, start_pos)
    if not begin_match:
        raise ValueError(f"No \\begin{{{env_name}}} found")

    pos = begin_match.end()
    depth = 1

    while depth > 0:
        end_nested = end_pattern.search(text, pos)
        if not end_nested:
            break

        begin_nested = begin_pattern.search(text, pos)
        if begin_nested and begin_nested.start() < end_nested.start():
            depth += 1
            pos = begin_nested.end()
            continue

        depth -= 1
        if depth == 0:
            if include_env_command_in_positions:
                begin_pos, end_pos = begin_match.start(), end_nested.end()
            else:
                begin_pos, end_pos = begin_match.end(), end_nested.start()
            return text[begin_pos:end_pos], begin_pos, end_pos
        pos = end_nested.end()

    raise ValueError(f"Unmatched \\begin{{{env_name}}}")


def replace_command(text: str, command: str, prefix: str = "", suffix: str = "") -> str:
    """
    Replace LaTeX command with optional prefix/suffix around content.

    Handles nested braces correctly using balanced delimiter matching.

    Args:
        text: Text containing the command
        command: Command name without backslash (e.g., "uline", "textbf")
        prefix: String to insert before content (default: "")
        suffix: String to insert after content (default: "")

    Returns:
        Text with command replaced by prefix + content + suffix

    Examples:
        >>> replace_command("\\\\uline{Source}", "uline")
        'Source'
        >>> replace_command("Normal \\\\textbf{bold} text", "textbf", "<b>", "</b>")
        'Normal <b>bold</b> text'
    """
    result = text
    command_pattern = f"\\{command}{{"
    search_from = 0

    while True:
        pos = result.find(command_pattern, search_from)
        if pos == -1:
            break

        brace_pos = pos + len(command_pattern)

        try:
            content, end_pos = extract_balanced_delimiters(result, brace_pos)
        except ValueError:
            # Unterminated command: keep whatever follows the opening brace
            result = result[:pos] + prefix + result[brace_pos:] + suffix
            break

        replacement = prefix + content + suffix
        result = result[:pos] + replacement + result[end_pos:]
        search_from = pos

    return result


def unescape_latex_text(text: str) -> str:
    """
    Turn escaped LaTeX special characters back into plain characters.

    Example:
        >>> unescape_latex_text("R\\\\&D at 100\\\\%")
        'R&D at 100%'
    """
    return re.sub(LaTeXPatterns.ESCAPED_TEXT_CHAR, r"\1", text)
