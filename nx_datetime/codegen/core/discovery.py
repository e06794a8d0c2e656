"""
Declaration discovery.

Builds Declaration lists either from Python source, by walking its syntax
tree for classes carrying the extension marker (user code is never
imported), or from a JSON manifest describing declarations directly.
"""

import ast
import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from nx_datetime.logging_config import get_logger

from .schema import (
    DIRECTIVES_BY_NAME,
    Declaration,
    Diagnostic,
    Directive,
    Field,
    Severity,
    directive_from_dict,
)

logger = get_logger(__name__)


class DiscoveryError(Exception):
    """Raised when an input can't be turned into declarations."""

    code = "DiscoveryError"

    def __init__(self, message: str, declaration: Optional[str] = None,
                 field_name: Optional[str] = None):
        super().__init__(message)
        self.declaration = declaration
        self.field_name = field_name


class InvalidDirectiveError(DiscoveryError):
    code = "InvalidDirective"


@dataclass
class DiscoveryResult:
    """Declarations found in one input plus field-level problems."""

    declarations: List[Declaration] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


def source_digest(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def module_name_for(path: Union[str, Path]) -> str:
    """
    Dotted module name of a source file, climbing through packages.

    Args:
        path: Path to a ``.py`` file

    Returns:
        Module name such as ``app.models`` for ``app/models.py`` when
        ``app/__init__.py`` exists
    """
    path = Path(path).resolve()
    parts = [] if path.stem == "__init__" else [path.stem]

    parent = path.parent
    while (parent / "__init__.py").exists():
        parts.insert(0, parent.name)
        parent = parent.parent

    return ".".join(parts)


def _error_diagnostic(error: DiscoveryError, source_path: Optional[str]) -> Diagnostic:
    return Diagnostic(
        severity=Severity.ERROR,
        code=error.code,
        message=str(error),
        declaration=error.declaration,
        field=error.field_name,
        source_path=source_path,
    )


class DeclarationCollector(ast.NodeVisitor):
    """Collects marked top-level classes of one module."""

    def __init__(self, module_name: str, marker_name: str = "datetime_extension",
                 source_path: Optional[str] = None, digest: Optional[str] = None):
        self.module_name = module_name
        self.marker_name = marker_name
        self.source_path = source_path
        self.digest = digest
        self.aliases: Dict[str, str] = {}
        self.result = DiscoveryResult()

    # Imports are tracked so aliased names resolve to their canonical form

    def visit_Import(self, node: ast.Import):
        for alias in node.names:
            if alias.asname:
                self.aliases[alias.asname] = alias.name

    def visit_ImportFrom(self, node: ast.ImportFrom):
        if not node.module or node.level:
            return
        for alias in node.names:
            self.aliases[alias.asname or alias.name] = f"{node.module}.{alias.name}"

    def visit_Module(self, node: ast.Module):
        for stmt in node.body:
            # Only module-level classes can be imported by the generated unit
            if isinstance(stmt, (ast.ClassDef, ast.Import, ast.ImportFrom)):
                self.visit(stmt)

    def visit_ClassDef(self, node: ast.ClassDef):
        if not any(self._is_marker(d) for d in node.decorator_list):
            return

        qualified = f"{self.module_name}.{node.name}" if self.module_name else node.name
        fields = []
        members = []
        for stmt in node.body:
            if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
                members.append(stmt.name)
                continue
            if isinstance(stmt, ast.Assign):
                members.extend(t.id for t in stmt.targets if isinstance(t, ast.Name))
                continue
            if not isinstance(stmt, ast.AnnAssign) or not isinstance(stmt.target, ast.Name):
                continue
            try:
                field_obj = self._build_field(stmt, qualified)
            except DiscoveryError as e:
                logger.debug("Skipping field in %s: %s", qualified, e)
                self.result.diagnostics.append(_error_diagnostic(e, self.source_path))
                members.append(stmt.target.id)
                continue
            if field_obj is None:
                members.append(stmt.target.id)
            else:
                fields.append(field_obj)

        self.result.declarations.append(
            Declaration(
                name=node.name,
                namespace=self.module_name,
                fields=tuple(fields),
                source_path=self.source_path,
                source_digest=self.digest,
                members=tuple(members),
            )
        )

    # Helpers

    def _canonical(self, node: ast.expr) -> str:
        """Dotted name of a Name/Attribute chain with import aliases resolved."""
        text = ast.unparse(node)
        head, _, rest = text.partition(".")
        if head in self.aliases:
            head = self.aliases[head]
        return f"{head}.{rest}" if rest else head

    def _short_name(self, node: ast.expr) -> str:
        return self._canonical(node).rsplit(".", 1)[-1]

    def _is_marker(self, decorator: ast.expr) -> bool:
        if isinstance(decorator, ast.Call):
            decorator = decorator.func
        if isinstance(decorator, (ast.Name, ast.Attribute)):
            return self._short_name(decorator) == self.marker_name
        return False

    def _build_field(self, stmt: ast.AnnAssign, declaration: str) -> Optional[Field]:
        name = stmt.target.id
        annotation = stmt.annotation

        # Quoted annotations
        if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
            try:
                annotation = ast.parse(annotation.value, mode="eval").body
            except SyntaxError as e:
                raise DiscoveryError(
                    f"Unparseable annotation {annotation.value!r}", declaration, name
                ) from e

        if self._is_subscript_of(annotation, "ClassVar"):
            return None

        # Annotated[Optional[X], ...] or Optional[Annotated[X, ...]]
        annotation, metadata = self._split_annotated(annotation)
        base, nullable = self._unwrap_optional(annotation)
        if not metadata:
            base, metadata = self._split_annotated(base)

        directives = tuple(
            d for d in (self._build_directive(m, declaration, name) for m in metadata) if d
        )

        return Field(
            name=name,
            type_name=self._canonical(base),
            directives=directives,
            nullable=nullable,
            line=stmt.lineno,
        )

    def _is_subscript_of(self, node: ast.expr, name: str) -> bool:
        return isinstance(node, ast.Subscript) and self._short_name(node.value) == name

    def _split_annotated(self, node: ast.expr) -> Tuple[ast.expr, List[ast.expr]]:
        """Type and metadata of ``Annotated[X, ...]``; other nodes pass through."""
        if not self._is_subscript_of(node, "Annotated"):
            return node, []
        elements = node.slice.elts if isinstance(node.slice, ast.Tuple) else [node.slice]
        return elements[0], list(elements[1:])

    def _unwrap_optional(self, node: ast.expr) -> Tuple[ast.expr, bool]:
        """Strip ``Optional[X]``, ``Union[X, None]`` and ``X | None``."""
        if self._is_subscript_of(node, "Optional"):
            return node.slice, True

        if self._is_subscript_of(node, "Union") and isinstance(node.slice, ast.Tuple):
            members = [e for e in node.slice.elts if not _is_none(e)]
            if len(members) == 1 and len(node.slice.elts) == 2:
                return members[0], True

        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            if _is_none(node.right):
                return node.left, True
            if _is_none(node.left):
                return node.right, True

        return node, False

    def _build_directive(self, node: ast.expr, declaration: str, field_name: str) -> Optional[Directive]:
        if not isinstance(node, ast.Call):
            return None
        directive_cls = DIRECTIVES_BY_NAME.get(self._short_name(node.func))
        if directive_cls is None:
            return None

        try:
            args = [ast.literal_eval(a) for a in node.args]
            kwargs = {k.arg: ast.literal_eval(k.value) for k in node.keywords if k.arg}
        except ValueError as e:
            raise InvalidDirectiveError(
                f"{directive_cls.__name__} arguments must be literals",
                declaration,
                field_name,
            ) from e

        try:
            return directive_cls(*args, **kwargs)
        except TypeError as e:
            raise InvalidDirectiveError(
                f"Invalid {directive_cls.__name__} arguments: {e}", declaration, field_name
            ) from e


def _is_none(node: ast.expr) -> bool:
    return isinstance(node, ast.Constant) and node.value is None


def discover_source(
    source: str,
    module_name: str,
    source_path: Optional[str] = None,
    marker_name: str = "datetime_extension",
) -> DiscoveryResult:
    """
    Find marked declarations in Python source text.

    Args:
        source: Module source code
        module_name: Dotted module name the declarations live in
        source_path: Path recorded as the generated units' dependency
        marker_name: Decorator name marking a declaration

    Returns:
        DiscoveryResult with declarations in source order

    Raises:
        DiscoveryError: If the source does not parse
    """
    try:
        tree = ast.parse(source, filename=source_path or "<source>")
    except SyntaxError as e:
        raise DiscoveryError(f"Invalid Python source {source_path or '<source>'}: {e}") from e

    collector = DeclarationCollector(
        module_name,
        marker_name=marker_name,
        source_path=source_path,
        digest=source_digest(source),
    )
    collector.visit(tree)

    logger.debug(
        "Discovered %d declaration(s) in %s",
        len(collector.result.declarations),
        source_path or module_name,
    )
    return collector.result


def discover_file(
    path: Union[str, Path],
    module_name: Optional[str] = None,
    marker_name: str = "datetime_extension",
) -> DiscoveryResult:
    """Read and scan one Python source file."""
    from nx_datetime.utils import read_source

    path = Path(path)
    source = read_source(path)
    return discover_source(
        source,
        module_name or module_name_for(path),
        source_path=path.as_posix(),
        marker_name=marker_name,
    )


def discover_manifest(data: Any, source_path: Optional[str] = None) -> DiscoveryResult:
    """
    Build declarations from a JSON manifest.

    The manifest is either a list of declarations or an object with a
    ``declarations`` list. Each declaration has ``name``, ``namespace``,
    an optional ``source``, optional ``members`` (names already defined on
    the type) and ``fields`` of ``{"name", "type", "nullable"?,
    "directives": [{"kind", ...}]}``.

    Args:
        data: Parsed JSON
        source_path: Where the manifest came from

    Returns:
        DiscoveryResult

    Raises:
        DiscoveryError: If the manifest structure is invalid
    """
    entries = data.get("declarations") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise DiscoveryError("Manifest must contain a list of declarations")

    result = DiscoveryResult()
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            raise DiscoveryError(f"Manifest declaration #{index} needs a 'name'")
        if not entry["name"].isidentifier():
            raise DiscoveryError(f"Invalid declaration name: {entry['name']!r}")

        namespace = entry.get("namespace", "")
        qualified = f"{namespace}.{entry['name']}" if namespace else entry["name"]
        origin = entry.get("source") or source_path
        members = entry.get("members", [])
        if not isinstance(members, list) or not all(isinstance(m, str) for m in members):
            raise DiscoveryError(f"'members' of {qualified} must be a list of names")

        fields = []
        for raw_field in entry.get("fields", []):
            try:
                fields.append(_manifest_field(raw_field, qualified))
            except DiscoveryError as e:
                result.diagnostics.append(_error_diagnostic(e, origin))

        result.declarations.append(
            Declaration(
                name=entry["name"],
                namespace=namespace,
                fields=tuple(fields),
                source_path=origin,
                source_digest=source_digest(json.dumps(entry, sort_keys=True)),
                members=tuple(members),
            )
        )

    return result


def _manifest_field(raw: Any, declaration: str) -> Field:
    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
        raise DiscoveryError("Manifest field needs a 'name'", declaration)

    name = raw["name"]
    if not name.isidentifier():
        raise DiscoveryError(f"Invalid field name: {name!r}", declaration, name)
    if not isinstance(raw.get("type"), str):
        raise DiscoveryError("Manifest field needs a 'type'", declaration, name)

    directives = []
    for raw_directive in raw.get("directives", []):
        if not isinstance(raw_directive, dict):
            raise InvalidDirectiveError("Directive must be an object", declaration, name)
        try:
            directives.append(directive_from_dict(raw_directive))
        except ValueError as e:
            raise InvalidDirectiveError(str(e), declaration, name) from e

    return Field(
        name=name,
        type_name=raw["type"],
        directives=tuple(directives),
        nullable=bool(raw.get("nullable", False)),
    )
