"""
Description collector (declaration source -> field descriptions).

Reads the Python source that declares a class and attaches the documentation
of each field to the matching PropertyMapping entry.

Documentation format, checked in this order:
    1. A run of ``#:`` comment lines directly above the field
       (the attribute-comment convention understood by Sphinx autodoc)
    2. A string literal directly below the field (attribute docstring)
    3. For ``@property`` getters, the getter's docstring

Only the summary is kept: the first paragraph, markers stripped, lines
joined with single spaces. A field without documentation gets "".

Example:
    class Interior:
        #: Number of seats inside the car.
        NumberSeats: int = 5

    -> "Interior.NumberSeats": "Number of seats inside the car."

ARCHITECTURAL RULE:
    Paths are rebuilt here from the parse tree, independently of the
    reflective walk. They MUST come from paths.canonical_path() and the
    enter_class() stack, or descriptions silently stop matching.
"""

import ast
import inspect
import io
import logging
import tokenize
import warnings
from typing import Dict, Iterator, List, Optional, Tuple

from propcollect.model import PropertyMapping
from propcollect.paths import NestingStack, canonical_path, enter_class

logger = logging.getLogger(__name__)

DOC_COMMENT_MARKER = "#:"

_FUNCTION_NODES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)


class DescriptionParseError(Exception):
    """Raised when a declaration source cannot be parsed or lacks the expected class."""
    pass


# =========================================================================
# SOURCE HANDLING
# =========================================================================

def _parse(source: str, label: str) -> ast.Module:
    try:
        return ast.parse(source)
    except SyntaxError as e:
        raise DescriptionParseError(f"Failed to parse {label}: {e}") from e


def _iter_class_defs(
    node: ast.AST, chain: Tuple[str, ...] = (), local: bool = False
) -> Iterator[Tuple[ast.ClassDef, Tuple[str, ...]]]:
    """
    Depth-first pre-order walk yielding (class node, enclosing class names).

    The chain follows __qualname__: it carries through if/try/with blocks,
    and every class below a function body (at any depth) has no chain.
    """
    for child in ast.iter_child_nodes(node):
        if isinstance(child, ast.ClassDef):
            yield child, chain
            yield from _iter_class_defs(child, () if local else chain + (child.name,), local)
        elif isinstance(child, _FUNCTION_NODES):
            yield from _iter_class_defs(child, (), True)
        else:
            yield from _iter_class_defs(child, chain, local)


def _find_class(tree: ast.Module, class_name: str) -> Tuple[ast.ClassDef, Tuple[str, ...]]:
    matches = [(node, chain) for node, chain in _iter_class_defs(tree) if node.name == class_name]
    if not matches:
        raise DescriptionParseError(f"Class '{class_name}' not found in declaration source")
    if len(matches) > 1:
        warnings.warn(
            f"Class '{class_name}' is declared {len(matches)} times; using the first declaration",
            UserWarning,
        )
    return matches[0]


def _isolate_class(source: str, node: ast.ClassDef) -> str:
    """Cut the class (with its decorators) out of the module source and remove its indentation."""
    lines = source.splitlines(keepends=True)
    start = min([node.lineno] + [dec.lineno for dec in node.decorator_list]) - 1
    indent = node.col_offset

    snippet = []
    for line in lines[start:node.end_lineno]:
        if not line.strip():
            snippet.append("\n")
        elif not line[:indent].strip():
            snippet.append(line[indent:])
        else:
            # Less-indented continuation inside a string literal
            snippet.append(line)
    return "".join(snippet)


def _comment_lines(source: str) -> Dict[int, str]:
    """Map line number -> comment text, for lines holding nothing but a comment."""
    comments: Dict[int, str] = {}
    try:
        for tok in tokenize.generate_tokens(io.StringIO(source).readline):
            if tok.type == tokenize.COMMENT and not tok.line[:tok.start[1]].strip():
                comments[tok.start[0]] = tok.string.strip()
    except (tokenize.TokenError, SyntaxError) as e:
        raise DescriptionParseError(f"Failed to tokenize declaration source: {e}") from e
    return comments


# =========================================================================
# DOCUMENTATION EXTRACTION
# =========================================================================

def summarize(text: str) -> str:
    """First paragraph of a documentation block, as one line."""
    paragraph: List[str] = []
    for line in inspect.cleandoc(text).splitlines():
        line = line.strip()
        if not line:
            if paragraph:
                break
            continue
        paragraph.append(line)
    return " ".join(paragraph)


def _leading_doc_comment(comments: Dict[int, str], lineno: int) -> Optional[str]:
    block = []
    line = lineno - 1
    while line in comments and comments[line].startswith(DOC_COMMENT_MARKER):
        block.append(comments[line][len(DOC_COMMENT_MARKER):].strip())
        line -= 1
    if not block:
        return None
    block.reverse()
    return "\n".join(block)


def _string_statement(node: Optional[ast.stmt]) -> Optional[str]:
    if (isinstance(node, ast.Expr) and isinstance(node.value, ast.Constant)
            and isinstance(node.value.value, str)):
        return node.value.value
    return None


def _field_name(node: ast.stmt) -> Optional[str]:
    """Name of the field a class-body statement declares, or None."""
    if isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
        annotation = ast.unparse(node.annotation)
        if annotation.startswith(("ClassVar", "typing.ClassVar")):
            return None
        name = node.target.id
    elif isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        if not any(isinstance(dec, ast.Name) and dec.id == "property" for dec in node.decorator_list):
            return None
        name = node.name
    else:
        return None
    return None if name.startswith("_") else name


def _field_documentation(node: ast.stmt, following: Optional[ast.stmt], comments: Dict[int, str]) -> str:
    first_line = node.lineno
    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and node.decorator_list:
        first_line = min(dec.lineno for dec in node.decorator_list)

    doc = _leading_doc_comment(comments, first_line)
    if doc is None:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            doc = ast.get_docstring(node)
        else:
            doc = _string_statement(following)
    return summarize(doc) if doc else ""


# =========================================================================
# NESTING WALK
# =========================================================================

def _walk_class(
    node: ast.ClassDef,
    parent_name: Optional[str],
    stack: NestingStack,
    comments: Dict[int, str],
    found: Dict[str, str],
) -> NestingStack:
    """
    Record the fields of ``node`` and its nested classes into ``found``.

    ``stack`` is the nesting stack as left by the previously entered class.
    The returned stack is handed to the next class entered, which trims
    whatever this branch left behind.
    """
    stack = enter_class(stack, parent_name, node.name)
    return _walk_block(node.body, node.name, stack, stack, comments, found)


def _statement_blocks(node: ast.stmt) -> List[List[ast.stmt]]:
    """Statement lists nested in a compound statement (if, try, with, for, while)."""
    blocks = [getattr(node, name, None) for name in ("body", "orelse", "finalbody")]
    blocks.extend(handler.body for handler in getattr(node, "handlers", ()))
    return [block for block in blocks if block]


def _walk_block(
    body: List[ast.stmt],
    class_name: str,
    own_stack: NestingStack,
    stack: NestingStack,
    comments: Dict[int, str],
    found: Dict[str, str],
) -> NestingStack:
    for index, child in enumerate(body):
        if isinstance(child, ast.ClassDef):
            stack = _walk_class(child, class_name, stack, comments, found)
            continue

        name = _field_name(child)
        if name is not None:
            following = body[index + 1] if index + 1 < len(body) else None
            found[canonical_path(own_stack, name)] = _field_documentation(child, following, comments)
        elif not isinstance(child, _FUNCTION_NODES):
            for block in _statement_blocks(child):
                stack = _walk_block(block, class_name, own_stack, stack, comments, found)

    return stack


def describe_fields(source: str, root_class: str, include_enclosing: bool = True) -> Dict[str, str]:
    """
    Extract field descriptions for one class of a Python source.

    Args:
        source: Module source text
        root_class: Name of the class to describe (its nested classes included)
        include_enclosing: Prefix paths with the classes lexically
            enclosing root_class in the module

    Returns:
        Dict canonical path -> summary ("" for undocumented fields)

    Raises:
        DescriptionParseError: If the source cannot be parsed or has no such class
    """
    tree = _parse(source, "declaration source")
    node, enclosing = _find_class(tree, root_class)

    # The walk sees only this class, never the rest of the module
    snippet = _isolate_class(source, node)
    root = _parse(snippet, f"class '{root_class}'").body[0]
    comments = _comment_lines(snippet)

    seed: NestingStack = enclosing if include_enclosing else ()
    parent_name = seed[-1] if seed else None

    found: Dict[str, str] = {}
    _walk_class(root, parent_name, seed, comments, found)
    return found


def collect_descriptions_from_string(
    source: str,
    mapping: PropertyMapping,
    root_class: Optional[str] = None,
    include_enclosing: bool = True,
) -> PropertyMapping:
    """
    Set the description of every mapping entry documented in ``source``.

    Args:
        source: Module source text declaring the collected class
        mapping: Mapping to enrich in place
        root_class: Class to describe. Defaults to the container name of
            the first Field in the mapping; for mappings mixing several
            top-level classes only that one class is described.
        include_enclosing: Must match the prefix mode used when collecting

    Returns:
        The same mapping. Entries whose path is not found keep their description.
    """
    if not mapping:
        return mapping

    if root_class is None:
        containers = mapping.container_names()
        root_class = containers[0]
        if len(containers) > 1:
            logger.debug("Mapping spans %d classes; describing from '%s'", len(containers), root_class)

    matched = 0
    for path, summary in describe_fields(source, root_class, include_enclosing).items():
        if path in mapping:
            mapping[path].description = summary
            matched += 1
    logger.debug("Matched %d description(s) for class '%s'", matched, root_class)
    return mapping


def collect_descriptions(
    source_path: str,
    mapping: PropertyMapping,
    root_class: Optional[str] = None,
    include_enclosing: bool = True,
) -> PropertyMapping:
    """
    Read a declaration file and set field descriptions from it.

    See collect_descriptions_from_string().

    Raises:
        FileNotFoundError: If the file doesn't exist
        DescriptionParseError: If parsing fails
    """
    try:
        with open(source_path, "r", encoding="utf-8") as f:
            source = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Declaration file not found: {source_path}")

    return collect_descriptions_from_string(
        source, mapping, root_class=root_class, include_enclosing=include_enclosing
    )


__all__ = [
    "DOC_COMMENT_MARKER",
    "DescriptionParseError",
    "summarize",
    "describe_fields",
    "collect_descriptions",
    "collect_descriptions_from_string",
]
