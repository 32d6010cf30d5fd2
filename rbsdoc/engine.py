"""Orchestration of the documentation pipeline."""

import json
import logging
from pathlib import Path
from typing import Any

from rbsdoc.document_model import ProjectDoc
from rbsdoc.drift_checker import DriftReport, check_drift
from rbsdoc.file_writer import FileWriter, WriteResult
from rbsdoc.generated_signature_loader import GeneratedSignatureLoader, find_signature_dir
from rbsdoc.github_linker import GithubLinker
from rbsdoc.inline_annotation_scanner import InlineAnnotationScanner
from rbsdoc.merge_type_sources import merge_type_sources
from rbsdoc.render_project import render_project
from rbsdoc.ruby_source_parser import RubySourceParser
from rbsdoc.semantic_extractor import SemanticExtractor
from rbsdoc.serialize_project import project_to_dict
from rbsdoc.spec_example_loader import SpecExampleLoader


class DocEngine:
    """Build, write and check documentation for one project root."""

    def __init__(self, config: dict[str, Any], logger: logging.Logger | None = None) -> None:
        self.config = config
        self.logger = logger
        self.root = Path(config.get("root", ".")).resolve()
        self.output = self.root / config["output"]

    def source_files(self) -> list[Path]:
        source_dir = self.root / self.config["source_path"]
        files = sorted(source_dir.rglob("*.rb")) if source_dir.is_dir() else []
        if not files:
            msg = f"No .rb files found under: {source_dir}"
            raise SystemExit(msg)
        return files

    def build(self, changed_files: list[Path] | None = None) -> ProjectDoc:
        """Parse the sources and extract the merged document model.

        With ``changed_files`` every source is still parsed so cross
        references resolve, but only namespaces touched by those files are
        marked for regeneration.
        """
        files = self.source_files()
        inline = InlineAnnotationScanner(self.logger).scan(files)
        generated = GeneratedSignatureLoader(
            find_signature_dir(self.root, self.config["rbs_path"]), self.logger
        ).load()
        sources = merge_type_sources(inline, generated)

        spec_examples = None
        if self.config.get("include_specs"):
            spec_examples = SpecExampleLoader(
                self.root / self.config["spec_path"], self.logger
            ).load()

        source_filter = None
        if changed_files:
            source_filter = {str(Path(f).resolve()) for f in changed_files}

        registry = RubySourceParser(self.logger).parse_files(files)
        extractor = SemanticExtractor(
            sources,
            spec_examples=spec_examples,
            namespace_filter=self.config.get("namespace_filter"),
            source_filter=source_filter,
            file_namespaces=inline.file_namespaces,
            root=self.root,
            logger=self.logger,
        )
        return extractor.extract(
            registry,
            title=self.config["project_title"],
            description=self.config.get("index_description") or "",
            root=self.root,
        )

    def render(self, project: ProjectDoc) -> dict[str, str]:
        github = GithubLinker(
            self.config.get("github_repo"), self.config["github_branch"], self.root
        )
        config = {**self.config, "root": str(self.root)}
        return render_project(project, config, github)

    def refresh(
        self, changed_files: list[Path] | None = None, json_path: Path | None = None
    ) -> WriteResult:
        """Write changed pages, plus the serialized model when ``json_path`` is set."""
        project = self.build(changed_files)
        result = FileWriter(self.output, self.logger).write(self.render(project))
        if json_path:
            json_path.parent.mkdir(parents=True, exist_ok=True)
            json_path.write_text(
                json.dumps(project_to_dict(project), indent=2), encoding="utf-8"
            )
        return result

    def check(self, changed_files: list[Path] | None = None) -> DriftReport:
        project = self.build(changed_files)
        return check_drift(
            self.render(project), self.output, partial=bool(changed_files)
        )
