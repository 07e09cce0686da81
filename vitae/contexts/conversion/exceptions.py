"""Custom exceptions for the conversion context."""

from typing import Optional


class LatexRenderError(Exception):
    """
    Exception raised when the generic LaTeX renderer cannot parse the source.

    Attributes:
        message: Error description
        latex_snippet: The LaTeX content around the failure
        original_error: The underlying walker error
    """

    def __init__(
        self,
        message: str,
        latex_snippet: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.latex_snippet = latex_snippet
        self.original_error = original_error

        parts = [message]

        if latex_snippet:
            snippet = latex_snippet[:200] + "..." if len(latex_snippet) > 200 else latex_snippet
            parts.append(f"\nNear LaTeX:\n{snippet}")

        super().__init__("\n".join(parts))
