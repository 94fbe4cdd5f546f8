#!/usr/bin/env python3
"""
reference.py
------------
Reference integrity checks: commands, parameters, anchors and links.

Single-document mode:
    - Command-shaped tokens (dotted names such as storage.account.list) in
      inline code, code blocks and HTML comments are looked up in the
      catalog. A token whose namespace the catalog knows but whose command
      it does not is a guaranteed-wrong reference (error). A token from an
      unknown namespace only looks like a command (warning).
    - Parameter tokens (--flags, bare inline code such as `tenant`, and
      parameter table names) are checked against the nearest preceding
      resolved command in the same or an enclosing section (warning).
    - Internal anchor links (#slug) must match a heading slug or an explicit
      <a id="..."> anchor of the same document (error).
    - External URLs are checked for obvious malformations.

Cross-document mode merges every document's ReferenceIndex and resolves
links such as other-doc.md#slug: an unknown target document is an error,
an unknown anchor inside a known document is a warning.

Usage:
    from tooldocs.validators.reference import ReferenceValidator

    validator = ReferenceValidator()
    result = validator.validate_document(doc, {"tool.op": {"parameters": ["subscription"]}})
    cross = validator.validate_corpus(documents, catalog)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import difflib
import posixpath
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple
from urllib.parse import unquote

# --- Local imports ---
from tooldocs.catalog import CommandCatalog, normalize_parameter, parameter_key
from tooldocs.configs.rules import QualityRules
from tooldocs.core.logging_manager import safe_logger
from tooldocs.dataclasses.document import Document
from tooldocs.dataclasses.results import (
    CrossDocumentResult,
    Issue,
    OutboundLink,
    ReferenceIndex,
    ReferenceResult,
    ERROR,
    WARNING,
)
from tooldocs.parser import ensure_document
from tooldocs.validators.base import DocumentValidator, ValidationContext
from tooldocs.validators.sections import (
    command_tokens,
    is_parameter_table,
    operation_command,
    operation_headings,
    parameter_rows,
)


LONG_FLAG_RE = re.compile(r"(?<![\w-])--([a-z][a-z0-9-]*)", re.IGNORECASE)
BARE_PARAMETER_RE = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")


@dataclass(frozen=True)
class _Token:
    """A command or parameter token with where it was found."""

    text: str
    line: int
    fenced: bool = False
    block: int = -1  # index of the code block it came from, -1 otherwise


class ReferenceValidator(DocumentValidator):
    """Validates command, parameter, anchor and link references."""

    name = "reference"

    def validate(self, doc: Document, context: ValidationContext) -> ReferenceResult:
        return self.validate_document(doc, context.catalog, context.rules)

    # ----- Single document -----

    def validate_document(
        self,
        doc: Any,
        catalog: Any = None,
        rules: Optional[QualityRules] = None,
    ) -> ReferenceResult:
        """
        Validate the references of one document.

        Args:
            doc: Parsed Document (or {id, content} input)
            catalog: CommandCatalog or raw catalog mapping
            rules: Rule set (defaults to the validator's rules)

        Returns:
            ReferenceResult carrying the document's ReferenceIndex

        Raises:
            CatalogError: If a raw catalog mapping is malformed
        """
        rules = rules or self.rules
        doc = ensure_document(doc)
        catalog = CommandCatalog.from_mapping(catalog if catalog is not None else {})
        result = ReferenceResult(validator=self.name, document_id=doc.id)

        resolved = self._check_commands(doc, catalog, rules, result)
        parameters = self._check_parameters(doc, catalog, rules, resolved, result)
        self._check_anchors(doc, result)
        self._check_urls(doc, rules, result)

        documented = set()
        for heading in operation_headings(doc, rules):
            command = operation_command(doc, heading, rules)
            if command is not None:
                documented.add(command)

        result.index = ReferenceIndex(
            doc_id=doc.id,
            anchors=doc.anchors,
            commands_referenced=frozenset(t.text for t in resolved),
            parameters_referenced=frozenset(parameters),
            outbound_links=tuple(self._outbound_links(doc)),
            commands_documented=frozenset(documented),
        )

        safe_logger(self.logger).log_debug(
            "references_validated",
            {
                "document": doc.id,
                "commands": len(result.index.commands_referenced),
                "errors": len(result.errors),
            },
        )
        return result

    # ----- Commands -----

    def _command_tokens(self, doc: Document, rules: QualityRules) -> List[_Token]:
        tokens: List[_Token] = []
        block = 0
        for span in doc.code_spans:
            if not span.is_block:
                tokens.extend(_Token(t, span.location) for t in command_tokens(span.text, rules))
                continue
            for number, line in enumerate(span.text.splitlines(), start=span.content_line):
                tokens.extend(
                    _Token(t, number, True, block)
                    for t in command_tokens(line, rules)
                )
            block += 1
        for comment in doc.html_comments:
            tokens.extend(_Token(t, comment.line) for t in command_tokens(comment.text, rules))
        return sorted(tokens, key=lambda t: t.line)

    def _check_commands(
        self,
        doc: Document,
        catalog: CommandCatalog,
        rules: QualityRules,
        result: ReferenceResult,
    ) -> List[_Token]:
        """Look up command tokens; returns the resolved ones in line order."""
        if not catalog:
            return []

        resolved: List[_Token] = []
        reported: Set[Tuple[str, int]] = set()
        for token in self._command_tokens(doc, rules):
            if token.text in catalog:
                resolved.append(token)
                continue
            if (token.text, token.line) in reported:
                continue
            reported.add((token.text, token.line))

            close = difflib.get_close_matches(token.text, list(catalog), n=1)
            suggestion = f"Did you mean '{close[0]}'?" if close else None
            namespace = token.text.split(".", 1)[0]
            if namespace in catalog.namespaces:
                result.add_error(
                    "unknown-command",
                    f"Command '{token.text}' is not in the catalog",
                    token.line,
                    suggestion,
                )
            elif not token.fenced:
                result.add_warning(
                    "possible-unknown-command",
                    f"'{token.text}' looks like a command but matches no catalog namespace",
                    token.line,
                    suggestion,
                )
        return resolved

    # ----- Parameters -----

    def _parameter_tokens(self, doc: Document, rules: QualityRules) -> List[_Token]:
        tokens: List[_Token] = []
        block = 0
        for span in doc.code_spans:
            if span.is_block:
                for number, line in enumerate(span.text.splitlines(), start=span.content_line):
                    tokens.extend(
                        _Token(f, number, True, block)
                        for f in LONG_FLAG_RE.findall(line)
                    )
                block += 1
                continue
            text = span.text.strip()
            flags = LONG_FLAG_RE.findall(text)
            if flags:
                tokens.extend(_Token(f, span.location) for f in flags)
            elif BARE_PARAMETER_RE.match(text):
                tokens.append(_Token(text, span.location))
        for comment in doc.html_comments:
            tokens.extend(_Token(f, comment.line) for f in LONG_FLAG_RE.findall(comment.text))
        for table in doc.tables:
            if is_parameter_table(table, rules):
                tokens.extend(_Token(name, table.line) for name, _row in parameter_rows(table))
        return sorted(tokens, key=lambda t: t.line)

    def _owning_command(
        self, doc: Document, token: _Token, resolved: List[_Token]
    ) -> Optional[str]:
        """Nearest preceding resolved command whose section encloses the token."""
        if token.fenced:
            same_block = [c for c in resolved if c.fenced and c.block == token.block and c.line <= token.line]
            return same_block[-1].text if same_block else None

        for command in reversed(resolved):
            if command.line > token.line or command.fenced:
                continue
            heading = doc.innermost_heading(command.line)
            if heading is None or token.line <= doc.section_end(heading):
                return command.text
        return None

    def _check_parameters(
        self,
        doc: Document,
        catalog: CommandCatalog,
        rules: QualityRules,
        resolved: List[_Token],
        result: ReferenceResult,
    ) -> Set[Tuple[str, str]]:
        """Check parameter tokens; returns the (command, parameter) pairs checked."""
        checked: Set[Tuple[str, str]] = set()
        if not resolved:
            return checked

        for token in self._parameter_tokens(doc, rules):
            command = self._owning_command(doc, token, resolved)
            if command is None:
                continue
            name = normalize_parameter(token.text)
            pair = (command, name)
            if pair in checked:
                continue
            checked.add(pair)

            known = catalog.parameters_for(command)
            if parameter_key(name) in {parameter_key(p) for p in known}:
                continue
            close = difflib.get_close_matches(name, sorted(known), n=1)
            result.add_warning(
                "unknown-parameter",
                f"Parameter '{name}' is not a parameter of '{command}'",
                token.line,
                f"Did you mean '{close[0]}'?" if close else None,
            )
        return checked

    # ----- Anchors and links -----

    def _check_anchors(self, doc: Document, result: ReferenceResult) -> None:
        anchors = doc.anchors
        for link in doc.links:
            if not link.is_anchor:
                continue
            anchor = unquote(link.target[1:])
            if anchor in anchors:
                continue
            close = difflib.get_close_matches(anchor, sorted(anchors), n=1)
            result.add_error(
                "unresolved-anchor",
                f"Anchor '#{anchor}' does not match any heading in this document",
                link.location,
                f"Did you mean '#{close[0]}'?" if close else None,
            )

    def _check_urls(self, doc: Document, rules: QualityRules, result: ReferenceResult) -> None:
        for link in doc.links:
            target = link.target
            if not target or link.is_anchor:
                continue
            if link.is_external:
                if re.search(r"\s", target):
                    result.add_error("malformed-url", f"URL '{target}' contains whitespace", link.location)
                elif len(target) < rules.min_url_length:
                    result.add_warning("malformed-url", f"URL '{target}' is suspiciously short", link.location)
                elif target.endswith((".", ",")):
                    result.add_warning(
                        "malformed-url",
                        f"URL '{target}' ends with punctuation",
                        link.location,
                    )
            elif "\\" in target:
                result.add_warning(
                    "backslash-in-link",
                    f"Relative link '{target}' uses backslashes",
                    link.location,
                    "Use forward slashes in relative links",
                )

    def _outbound_links(self, doc: Document) -> List[OutboundLink]:
        links = []
        base = posixpath.dirname(doc.id)
        for link in doc.links:
            path = link.target_document
            if path is None or not path.lower().endswith(".md"):
                continue
            target = posixpath.normpath(posixpath.join(base, unquote(path)))
            if target.startswith("../") or target.startswith("/"):
                # Outside the corpus (shared includes, site-absolute paths)
                continue
            anchor = link.target_anchor
            links.append(
                OutboundLink(
                    target_document=target,
                    anchor=unquote(anchor) if anchor else None,
                    line=link.location,
                    raw_target=link.target,
                )
            )
        return links

    # ----- Corpus -----

    def resolve_indices(
        self,
        indices: Iterable[ReferenceIndex],
        known_documents: Iterable[str] = (),
        failed_ids: Iterable[str] = (),
    ) -> CrossDocumentResult:
        """
        Resolve inter-document links over merged reference indices.

        Args:
            indices: One ReferenceIndex per document
            known_documents: Link targets that live outside the corpus
            failed_ids: Documents that exist but could not be indexed; links
                to them count as resolved and their anchors are not checked

        Returns:
            CrossDocumentResult with link issues and aggregate counts
        """
        ordered = sorted(indices, key=lambda i: i.doc_id)
        by_id: Dict[str, ReferenceIndex] = {}
        for index in ordered:
            by_id.setdefault(index.doc_id, index)
        known = set(known_documents)
        failed = set(failed_ids)

        result = CrossDocumentResult(validated_documents=len(ordered))
        commands: Set[str] = set()
        parameters: Set[Tuple[str, str]] = set()
        documented_by: Dict[str, List[str]] = {}

        for index in ordered:
            commands |= index.commands_referenced
            parameters |= index.parameters_referenced
            for command in sorted(index.commands_documented):
                documented_by.setdefault(command, []).append(index.doc_id)

            for link in index.outbound_links:
                target = by_id.get(link.target_document)
                if target is None:
                    if (
                        link.target_document in failed
                        or link.target_document in known
                        or posixpath.basename(link.target_document) in known
                    ):
                        continue
                    result.add_issue(
                        Issue(
                            ERROR,
                            "unresolved-document",
                            f"Link '{link.raw_target}' points to unknown document "
                            f"'{link.target_document}'",
                            link.line,
                            index.doc_id,
                        )
                    )
                elif link.anchor and link.anchor not in target.anchors:
                    close = difflib.get_close_matches(link.anchor, sorted(target.anchors), n=1)
                    result.add_issue(
                        Issue(
                            WARNING,
                            "unresolved-document-anchor",
                            f"Anchor '#{link.anchor}' does not exist in '{target.doc_id}'",
                            link.line,
                            index.doc_id,
                            f"Did you mean '#{close[0]}'?" if close else None,
                        )
                    )

        for command, doc_ids in sorted(documented_by.items()):
            for doc_id in doc_ids[1:]:
                result.add_issue(
                    Issue(
                        WARNING,
                        "duplicate-command-documentation",
                        f"Command '{command}' is documented in both '{doc_ids[0]}' and '{doc_id}'",
                        None,
                        doc_id,
                    )
                )

        result.validated_commands = len(commands)
        result.validated_parameters = len(parameters)

        safe_logger(self.logger).log_operation(
            "references_corpus_resolved",
            {
                "documents": result.validated_documents,
                "commands": result.validated_commands,
                "errors": len(result.errors),
            },
        )
        return result

    def validate_corpus(
        self,
        documents: Iterable[Any],
        catalog: Any = None,
        rules: Optional[QualityRules] = None,
    ) -> CrossDocumentResult:
        """
        Validate inter-document references of a corpus.

        Args:
            documents: Parsed Documents or {id, content} inputs
            catalog: CommandCatalog or raw catalog mapping
            rules: Rule set (defaults to the validator's rules)

        Returns:
            CrossDocumentResult (per-document issues stay in validate_document)

        Raises:
            CatalogError: If a raw catalog mapping is malformed
        """
        rules = rules or self.rules
        catalog = CommandCatalog.from_mapping(catalog if catalog is not None else {})
        indices = [
            self.validate_document(doc, catalog, rules).index for doc in documents
        ]
        return self.resolve_indices(indices, rules.known_documents)
