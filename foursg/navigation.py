"""
Navigation tree mirroring the content folder hierarchy.

A folder becomes a collapsible group; its index document (if any) turns
the group label into a link.  Rendering highlights the current page and
opens every group on the path to it.
"""

import html
import re
from dataclasses import dataclass, field

from .graph import DocumentNode
from .paths import PathResolver

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


@dataclass
class NavNode:
    name: str
    path: str = ""
    output_path: str = ""
    children: list["NavNode"] = field(default_factory=list)
    is_index: bool = False

    def contains(self, output_path: str) -> bool:
        """True if this node or any descendant renders *output_path*."""
        if self.output_path == output_path:
            return True
        return any(child.contains(output_path) for child in self.children)


def build_navigation_tree(documents: list[DocumentNode], paths: PathResolver) -> list[NavNode]:
    """Build root-level NavNodes from the document set, sorted by source path."""
    root_nodes: list[NavNode] = []
    dir_map: dict[str, NavNode] = {}

    for document in sorted(documents, key=lambda d: d.path):
        parts = document.path.split("/")
        output_path = paths.output_path_for(document.path)

        if len(parts) == 1:
            root_nodes.append(NavNode(
                name=document.basename,
                path=document.path,
                output_path=output_path,
                is_index=document.is_index,
            ))
            continue

        current_path = ""
        for part in parts[:-1]:
            parent_path = current_path
            current_path = f"{current_path}/{part}" if current_path else part
            if current_path in dir_map:
                continue
            dir_node = NavNode(name=part, path=current_path)
            dir_map[current_path] = dir_node
            if parent_path:
                dir_map[parent_path].children.append(dir_node)
            else:
                root_nodes.append(dir_node)

        folder = dir_map[current_path]
        if document.is_index:
            folder.output_path = output_path
            folder.is_index = True
        else:
            folder.children.append(NavNode(
                name=document.basename,
                path=document.path,
                output_path=output_path,
            ))

    return root_nodes


def _render_label(node: NavNode, current_output_path: str, paths: PathResolver) -> str:
    name = html.escape(node.name)
    if not node.output_path:
        return f"<span>{name}</span>"
    href = paths.relative_path(current_output_path, node.output_path)
    active = ' class="active"' if node.output_path == current_output_path else ""
    return f'<a href="{html.escape(href)}"{active}>{name}</a>'


def render_nav_tree(nodes: list[NavNode], current_output_path: str, paths: PathResolver) -> str:
    """Render *nodes* as nested <ul> lists for the page at *current_output_path*."""
    if not nodes:
        return ""

    out = ["<ul>"]
    for node in nodes:
        out.append("<li>")
        if node.children:
            folder_id = "nav-" + _NON_ALNUM_RE.sub("-", node.path)
            open_attr = " open" if node.contains(current_output_path) else ""
            out.append(f'<details id="{folder_id}" class="nav-folder"{open_attr}>')
            out.append(f"<summary>{_render_label(node, current_output_path, paths)}</summary>")
            out.append(render_nav_tree(node.children, current_output_path, paths))
            out.append("</details>")
        else:
            out.append(_render_label(node, current_output_path, paths))
        out.append("</li>")
    out.append("</ul>")
    return "".join(out)
