"""
Tool Documentation Resources

Generates devtools://tools/* resources from the tool registry.
Single source of truth: each tool's description and input shape ARE the
documentation, so the docs can't drift from what the transport advertises.
"""

import inspect
from typing import Any, Mapping

from pydantic.fields import FieldInfo

from registry import RegisteredTool, ToolRegistry

TOOL_URI_PREFIX = "devtools://tools/"


def _type_name(annotation: Any) -> str:
    if annotation is None or annotation is inspect.Parameter.empty:
        return "any"
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace("typing.", "")


def _field_row(name: str, info: Any) -> str:
    if isinstance(info, FieldInfo):
        type_name = _type_name(info.annotation)
        if info.is_required():
            default = "required"
        elif info.default_factory is not None:
            default = "(computed)"
        else:
            default = repr(info.default)
        description = info.description or ""
    else:
        type_name = _type_name(getattr(info, "annotation", None))
        default = repr(info.default) if hasattr(info, "default") else "required"
        description = getattr(info, "description", "") or ""
    return f"| `{name}` | `{type_name}` | {default} | {description} |"


def category_label(entry: RegisteredTool, categories: Mapping[str, str]) -> str:
    """Label for a tool's grouping: "category/subcategory" first, then category."""
    group = "/".join(p for p in (entry.category, entry.subcategory) if p)
    return categories.get(group) or categories.get(entry.category or "", "")


def tool_to_markdown(entry: RegisteredTool, categories: Mapping[str, str] | None = None) -> str:
    """
    Render one registered tool as markdown.

    Sections: title, description, grouping, parameter table.
    Tools without an object-shaped schema get a note instead of a table.
    """
    lines = [f"# {entry.qualified_name}", "", entry.description.strip(), ""]

    group = "/".join(p for p in (entry.category, entry.subcategory) if p)
    if group:
        label = category_label(entry, categories or {})
        suffix = f" ({label})" if label else ""
        lines.extend([f"Category: `{group}`{suffix}", ""])

    if entry.shape:
        lines.extend([
            "## Parameters",
            "",
            "| Param | Type | Default | Description |",
            "|-------|------|---------|-------------|",
        ])
        lines.extend(_field_row(name, info) for name, info in entry.shape.items())
    else:
        lines.append("No parameters.")

    return "\n".join(lines) + "\n"


class ToolResourceRegistry:
    """
    Documentation resources for one server's tool registry.

    Markdown is rendered lazily and cached per URI.
    """

    def __init__(self, registry: ToolRegistry, categories: Mapping[str, str] | None = None) -> None:
        self._registry = registry
        self._categories = dict(categories or {})
        self._cache: dict[str, dict[str, str]] = {}

    def get_tool_names(self) -> set[str]:
        return set(self._registry.get_entries())

    def get_resource(self, uri: str) -> dict[str, str]:
        """
        Get resource by URI.

        Args:
            uri: Resource URI (e.g., "devtools://tools/docker_ps")

        Returns:
            Resource dict with uri, mimeType, text

        Raises:
            KeyError: If tool not found
        """
        if uri in self._cache:
            return self._cache[uri]

        if not uri.startswith(TOOL_URI_PREFIX):
            raise KeyError(f"Not a tool resource: {uri}")

        tool_name = uri[len(TOOL_URI_PREFIX):]
        entry = self._registry.get(tool_name)
        if entry is None:
            raise KeyError(f"Tool not found: {tool_name}")

        resource = {
            "uri": uri,
            "mimeType": "text/markdown",
            "text": tool_to_markdown(entry, self._categories),
        }
        self._cache[uri] = resource
        return resource

    def list_resources(self) -> list[dict[str, str]]:
        """List all available tool resources, sorted by name."""
        resources: list[dict[str, str]] = []
        for name, entry in sorted(self._registry.get_entries().items()):
            first_line = entry.description.strip().split("\n")[0] or "No description"
            resources.append({
                "uri": f"{TOOL_URI_PREFIX}{name}",
                "name": name,
                "description": first_line[:100],
            })
        return resources

    def overview_markdown(self, server_name: str, description: str = "", prefix: str = "") -> str:
        """Server overview: what it is and a table of every tool."""
        lines = [f"# {server_name}", ""]
        if description:
            lines.extend([description, ""])
        if prefix:
            lines.extend([f"Tool prefix: `{prefix}`", ""])
        resources = self.list_resources()
        lines.append(f"## Tools ({len(resources)})")
        lines.append("")
        if not resources:
            lines.append("No tools loaded.")
        else:
            lines.extend(["| Tool | Description |", "|------|-------------|"])
            lines.extend(f"| `{r['name']}` | {r['description']} |" for r in resources)
            lines.extend([
                "",
                f"Per-tool docs: `{TOOL_URI_PREFIX}{{tool_name}}`",
            ])
            lines.extend(self._category_lines())
        return "\n".join(lines) + "\n"

    def _category_lines(self) -> list[str]:
        counts: dict[str, int] = {}
        for entry in self._registry.get_entries().values():
            if entry.category:
                counts[entry.category] = counts.get(entry.category, 0) + 1
        if not counts:
            return []
        lines = ["", "## Categories", ""]
        for category in sorted(counts):
            label = self._categories.get(category)
            suffix = f": {label}" if label else ""
            lines.append(f"- `{category}` ({counts[category]}){suffix}")
        return lines
