"""Logic for harvesting usage examples from RSpec/Minitest files."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from rbsdoc.document_model import SpecExampleDoc

DESCRIBED_CLASS_RE = re.compile(r"(?:RSpec\.)?describe\s+([A-Z][\w:]+)")
LET_RE = re.compile(r"let!?\(:(\w+)\)\s*\{([^}]+)\}")
SUBJECT_RE = re.compile(r"subject(?:\(:(\w+)\))?\s*\{([^}]+)\}")
METHOD_GROUP_RE = re.compile(r"""describe\s+['"]([#.])(\w+[?!=]?)['"]""")
BEHAVIOR_RE = re.compile(r"""\bit\s+['"]([^'"]+)['"]""")


@dataclass
class SpecExamples:
    """Examples and behaviors collected for one described class."""

    lets: list[SpecExampleDoc] = field(default_factory=list)
    subjects: list[SpecExampleDoc] = field(default_factory=list)
    behaviors: dict[str, list[str]] = field(default_factory=dict)
    method_examples: dict[str, list[SpecExampleDoc]] = field(default_factory=dict)


class SpecExampleLoader:
    """Index ``*_spec.rb`` and ``*_test.rb`` files by the class they describe."""

    def __init__(self, spec_path: Path, logger: logging.Logger | None = None) -> None:
        self.spec_path = spec_path
        self.logger = logger

    def load(self) -> dict[str, SpecExamples]:
        examples: dict[str, SpecExamples] = {}
        if not self.spec_path.is_dir():
            return examples

        files = sorted(
            [*self.spec_path.rglob("*_spec.rb"), *self.spec_path.rglob("*_test.rb")]
        )
        if self.logger and files:
            self.logger.info("Loading examples from %d spec files", len(files))
        for file in files:
            try:
                content = file.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                if self.logger:
                    self.logger.warning("Skipping unreadable spec %s: %s", file, exc)
                continue
            self._parse(content, examples)
        return examples

    def _parse(self, content: str, examples: dict[str, SpecExamples]) -> None:
        described = DESCRIBED_CLASS_RE.search(content)
        if not described:
            return
        data = examples.setdefault(described.group(1), SpecExamples())

        for name, code in LET_RE.findall(content):
            data.lets.append(SpecExampleDoc(name, code.strip()))
        for name, code in SUBJECT_RE.findall(content):
            data.subjects.append(SpecExampleDoc(name or "subject", code.strip()))

        current: str | None = None
        for line in content.splitlines():
            group = METHOD_GROUP_RE.search(line)
            if group:
                current = group.group(1) + group.group(2)
                continue
            behavior = BEHAVIOR_RE.search(line)
            if behavior and current:
                data.behaviors.setdefault(current, []).append(behavior.group(1))

        for key in data.behaviors:
            method = key[1:]
            call = re.compile(rf"\.{re.escape(method)}\b")
            snippets = [e for e in (*data.subjects, *data.lets) if call.search(e.code)]
            if snippets:
                data.method_examples[key] = snippets
