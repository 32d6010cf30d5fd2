"""Final normalization pass over rendered markdown."""

import re

FENCE_RE = re.compile(r"^\s*(```|~~~)")


def post_process(markdown: str) -> str:
    """Normalize blank lines and whitespace outside fenced code blocks.

    Runs of blank lines collapse to one, trailing whitespace is removed and
    the document ends with exactly one newline.
    """
    out: list[str] = []
    in_fence = False
    blank_run = 0
    for line in markdown.splitlines():
        if FENCE_RE.match(line):
            in_fence = not in_fence
        elif in_fence:
            out.append(line.rstrip())
            continue

        line = line.rstrip()
        if not line:
            blank_run += 1
            if blank_run > 1:
                continue
        else:
            blank_run = 0
        out.append(line)
    return "\n".join(out).strip("\n") + "\n"
