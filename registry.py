"""
Tool registry and dynamic loader.

Walks a tool tree, imports every tool file, checks that its `tool`
attribute is tool-shaped, namespaces the name with the server prefix, and
registers a wrapped handler that validates input before calling the tool.

One bad tool file must not take down the whole server: import errors,
malformed definitions and duplicate names are logged and skipped. Nothing
raised during a load pass escapes load_from_directory().

Traversal order is deterministic: entries of each directory are visited in
lexicographic order, depth-first, so the same tree always registers the
same tools in the same order.
"""

import hashlib
import importlib.util
import inspect
import keyword
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Any, Awaitable, Callable, Mapping

from logging_config import logger, log_tool_registered, log_tool_skipped
from models import DevtoolsError, ErrorKind, ToolDefinition, ToolResponse
from validation import is_supported_schema, parse_input, shape_of

# Attribute a tool file must define
TOOL_ATTRIBUTE = "tool"

# Loadable tool files
TOOL_FILE_SUFFIX = ".py"

WrappedHandler = Callable[[Mapping[str, Any] | None], Awaitable[ToolResponse]]


# ============================================================================
# TYPES
# ============================================================================

@dataclass(frozen=True)
class RegisteredTool:
    """A tool as the server sees it: namespaced, shaped, wrapped."""
    qualified_name: str
    description: str
    shape: dict[str, Any]
    call: WrappedHandler
    definition: ToolDefinition
    source: Path
    category: str | None = None
    subcategory: str | None = None


@dataclass(frozen=True)
class SkippedModule:
    path: Path
    kind: ErrorKind
    message: str


@dataclass
class LoadReport:
    """Outcome of one load_from_directory() pass."""
    root: Path
    registered: list[str] = field(default_factory=list)
    skipped: list[SkippedModule] = field(default_factory=list)


# ============================================================================
# NAMING & SHAPE CHECK
# ============================================================================

def qualified_name(prefix: str, name: str) -> str:
    """
    Namespace a tool name with the server prefix.

    The prefix is used verbatim when empty or already ending in "_",
    otherwise joined with "_":
        ("docker_", "ps") → "docker_ps"
        ("docker", "ps")  → "docker_ps"
        ("", "ps")        → "ps"
    """
    if not prefix or prefix.endswith("_"):
        return f"{prefix}{name}"
    return f"{prefix}_{name}"


def is_tool_shaped(value: Any) -> bool:
    """
    Minimal structural check for a tool definition.

    Requires: not None, string name, string description, callable handler,
    non-None input_schema. Duck-typed; ToolDefinition is not required.
    """
    if value is None:
        return False
    try:
        return (
            isinstance(getattr(value, "name", None), str)
            and isinstance(getattr(value, "description", None), str)
            and callable(getattr(value, "handler", None))
            and getattr(value, "input_schema", None) is not None
        )
    except Exception:
        # Properties that raise on access count as not tool-shaped
        return False


def _safe_attr(value: Any, attr: str) -> Any:
    try:
        return getattr(value, attr, None)
    except Exception:
        return None


def _describe_shape_problem(value: Any) -> str:
    if value is None:
        return f"no `{TOOL_ATTRIBUTE}` attribute"
    problems = []
    if not isinstance(_safe_attr(value, "name"), str):
        problems.append("name is not a string")
    if not isinstance(_safe_attr(value, "description"), str):
        problems.append("description is not a string")
    if not callable(_safe_attr(value, "handler")):
        problems.append("handler is not callable")
    if _safe_attr(value, "input_schema") is None:
        problems.append("input_schema is missing")
    return f"`{TOOL_ATTRIBUTE}` is not tool-shaped ({', '.join(problems)})"


# ============================================================================
# HANDLER WRAPPING
# ============================================================================

def wrap_handler(name: str, definition: Any) -> WrappedHandler:
    """
    Wrap a tool handler with input validation.

    The wrapper validates raw arguments against the tool's schema, then calls
    the handler once with the parsed value and returns its result unchanged.

    Raises (from the wrapper):
        DevtoolsError(INVALID_INPUT): Arguments failed the schema; the
            handler is not called
        DevtoolsError(HANDLER_FAILED): The handler raised something other
            than a DevtoolsError
    """
    schema = definition.input_schema
    handler = definition.handler

    async def call(arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        raw = {} if arguments is None else arguments
        try:
            parsed = parse_input(schema, raw)
        except DevtoolsError as e:
            raise DevtoolsError(
                e.kind, f"Invalid input for {name}: {e.message}"
            ) from e

        try:
            result = handler(parsed)
            if inspect.isawaitable(result):
                result = await result
        except DevtoolsError:
            raise
        except Exception as e:
            logger.error(f"Tool {name} failed: {e}")
            raise DevtoolsError(
                ErrorKind.HANDLER_FAILED, f"Tool {name} failed: {e}"
            ) from e
        return result

    call.__name__ = name
    call.__doc__ = definition.description
    return call


# ============================================================================
# REGISTRY
# ============================================================================

class ToolRegistry:
    """
    Registry of tools discovered from a tool tree.

    One instance per server. Entries are written once during loading and
    read-only afterwards; iteration follows registration order.
    """

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix
        self._entries: dict[str, RegisteredTool] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> RegisteredTool | None:
        return self._entries.get(name)

    def get_all_tools(self) -> dict[str, ToolDefinition]:
        """Qualified name → original definition, in registration order."""
        return {name: entry.definition for name, entry in self._entries.items()}

    def get_entries(self) -> dict[str, RegisteredTool]:
        return dict(self._entries)

    def get_tools_by_category(self, category: str) -> list[RegisteredTool]:
        return [e for e in self._entries.values() if e.category == category]

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        definition: Any,
        source: Path,
        prefix: str | None = None,
        location: tuple[str, ...] = (),
    ) -> RegisteredTool:
        """
        Register one tool-shaped definition.

        Args:
            definition: Object passing is_tool_shaped()
            source: File the definition came from
            prefix: Name prefix (default: the registry's prefix)
            location: Directory segments of the file under the tree root,
                used for category/subcategory when the definition has none

        Raises:
            DevtoolsError(INVALID_TOOL_SHAPE): Definition isn't tool-shaped,
                its input_schema is a kind parse_input() can't validate, or
                a field name can't be a keyword argument
            DevtoolsError(DUPLICATE_TOOL): Qualified name already registered
        """
        if not is_tool_shaped(definition):
            raise DevtoolsError(ErrorKind.INVALID_TOOL_SHAPE, _describe_shape_problem(definition))

        schema = definition.input_schema
        if not is_supported_schema(schema):
            raise DevtoolsError(
                ErrorKind.INVALID_TOOL_SHAPE,
                f"Unsupported input schema type: {type(schema).__name__}",
            )
        shape = shape_of(schema)
        bad_fields = [
            str(k) for k in shape
            if not isinstance(k, str) or not k.isidentifier() or keyword.iskeyword(k)
        ]
        if bad_fields:
            raise DevtoolsError(
                ErrorKind.INVALID_TOOL_SHAPE,
                f"Input field names are not valid parameter names: {', '.join(bad_fields)}",
            )

        name = qualified_name(self.prefix if prefix is None else prefix, definition.name)
        existing = self._entries.get(name)
        if existing is not None:
            raise DevtoolsError(
                ErrorKind.DUPLICATE_TOOL,
                f"Tool {name} already registered from {existing.source}",
            )

        category = getattr(definition, "category", None) or (location[0] if location else None)
        subcategory = getattr(definition, "subcategory", None) or (
            location[1] if len(location) > 1 else None
        )

        entry = RegisteredTool(
            qualified_name=name,
            description=definition.description,
            shape=shape,
            call=wrap_handler(name, definition),
            definition=definition,
            source=source,
            category=category,
            subcategory=subcategory,
        )
        self._entries[name] = entry
        log_tool_registered(name)
        return entry

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_from_directory(self, root: str | Path, prefix: str | None = None) -> LoadReport:
        """
        Discover and register every tool under root.

        Args:
            root: Tool tree to walk recursively
            prefix: Name prefix for this pass (default: the registry's prefix)

        Returns:
            LoadReport listing registered names and skipped files. A missing
            or unreadable root yields an empty report, never an exception.
        """
        root = Path(root)
        report = LoadReport(root=root)

        try:
            entries = _sorted_entries(root)
        except OSError as e:
            logger.error(f"Cannot read tool directory {root}: {e}")
            report.skipped.append(SkippedModule(root, ErrorKind.DIRECTORY_READ, str(e)))
            return report

        self._load_entries(root, root, entries, prefix, report)

        logger.info(
            f"Loaded {len(report.registered)} tools from {root} "
            f"({len(report.skipped)} skipped)"
        )
        return report

    def _load_entries(
        self,
        root: Path,
        directory: Path,
        entries: list[os.DirEntry[str]],
        prefix: str | None,
        report: LoadReport,
    ) -> None:
        for entry in entries:
            path = Path(entry.path)
            if _is_tool_dir(entry):
                try:
                    children = _sorted_entries(path)
                except OSError as e:
                    log_tool_skipped(path, f"cannot read directory: {e}")
                    report.skipped.append(SkippedModule(path, ErrorKind.DIRECTORY_READ, str(e)))
                    continue
                self._load_entries(root, path, children, prefix, report)
            elif _is_tool_file(entry):
                self._load_file(root, path, prefix, report)

    def _load_file(self, root: Path, path: Path, prefix: str | None, report: LoadReport) -> None:
        try:
            module = _import_tool_file(root, path)
        except (Exception, SystemExit) as e:
            log_tool_skipped(path, f"import failed: {type(e).__name__}: {e}")
            report.skipped.append(SkippedModule(path, ErrorKind.MODULE_LOAD, str(e)))
            return

        location = path.relative_to(root).parent.parts
        try:
            entry = self.register(
                getattr(module, TOOL_ATTRIBUTE, None), path, prefix=prefix, location=location
            )
        except DevtoolsError as e:
            if e.kind == ErrorKind.DUPLICATE_TOOL:
                logger.error(f"Skipping tool file {path}: {e.message}")
            else:
                log_tool_skipped(path, e.message)
            report.skipped.append(SkippedModule(path, e.kind, e.message))
            return
        except Exception as e:
            # Tool objects whose attributes raise on access
            message = f"`{TOOL_ATTRIBUTE}` is not tool-shaped ({type(e).__name__}: {e})"
            log_tool_skipped(path, message)
            report.skipped.append(SkippedModule(path, ErrorKind.INVALID_TOOL_SHAPE, message))
            return

        report.registered.append(entry.qualified_name)


# ============================================================================
# FILESYSTEM HELPERS
# ============================================================================

def _sorted_entries(directory: Path) -> list[os.DirEntry[str]]:
    """List a directory in lexicographic name order."""
    with os.scandir(directory) as it:
        return sorted(it, key=lambda e: e.name)


def _is_tool_dir(entry: os.DirEntry[str]) -> bool:
    if entry.name.startswith((".", "__")):
        return False
    try:
        return entry.is_dir()
    except OSError:
        return False


def _is_tool_file(entry: os.DirEntry[str]) -> bool:
    if not entry.name.endswith(TOOL_FILE_SUFFIX) or entry.name.startswith("_"):
        return False
    try:
        return entry.is_file()
    except OSError:
        return False


def _module_name(root: Path, path: Path) -> str:
    """Synthetic module name, unique per (tree root, relative path)."""
    root_id = hashlib.sha1(str(root.resolve()).encode()).hexdigest()[:10]
    rel = path.relative_to(root).with_suffix("")
    return f"devtools_tools_{root_id}." + ".".join(rel.parts)


def _import_tool_file(root: Path, path: Path) -> ModuleType:
    """
    Import a tool file by path.

    The module is placed in sys.modules while executing (pydantic and
    dataclasses look it up there) and removed again if execution fails.
    """
    name = _module_name(root, path)
    spec = importlib.util.spec_from_file_location(name, str(path))
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot create import spec for {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(name, None)
        raise
    return module
