"""Code language detection from class attributes."""

from typing import Optional, Union

LANGUAGE_PREFIXES = ("language-", "lang-")

# Bare class names some highlighters use instead of a prefix
KNOWN_LANGUAGES = frozenset(
    {
        "javascript",
        "typescript",
        "python",
        "ruby",
        "go",
        "rust",
        "java",
        "cpp",
        "c",
        "bash",
        "shell",
        "json",
        "yaml",
        "html",
        "css",
        "sql",
        "kotlin",
        "swift",
    }
)


def detect_language(classes: Optional[Union[str, list[str]]]) -> str:
    """
    Pull a language tag out of a class attribute.

    Tokens are scanned in order and the first hit wins: either a
    ``language-``/``lang-`` prefixed token (prefix stripped) or a bare
    token naming a known language.

    Args:
        classes: Class attribute as a string or a list of tokens

    Returns:
        Lowercase language tag, or an empty string if none found
    """
    if not classes:
        return ""
    tokens = classes.split() if isinstance(classes, str) else classes

    for token in tokens:
        for prefix in LANGUAGE_PREFIXES:
            if token.startswith(prefix):
                return token[len(prefix) :].lower()
        if token.lower() in KNOWN_LANGUAGES:
            return token.lower()

    return ""
