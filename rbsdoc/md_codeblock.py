"""Utility for generating Markdown code blocks."""


def md_codeblock(code: str, lang: str = "ruby") -> str:
    """Generate a fenced Markdown code block."""
    return f"""```{lang}
{code.rstrip()}
```"""
