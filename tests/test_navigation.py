"""Tests for foursg.navigation."""

from foursg.graph import DocumentNode
from foursg.navigation import NavNode, build_navigation_tree, render_nav_tree
from foursg.paths import PathResolver

DOC_PATHS = ["index.md", "blog/index.md", "blog/post1.md", "blog/2024/deep.md", "about.md"]


def _tree(doc_paths=DOC_PATHS):
    paths = PathResolver("foursg/site")
    documents = [DocumentNode(path=p, body="") for p in doc_paths]
    return build_navigation_tree(documents, paths), paths


def _walk(nodes, ancestors=()):
    for node in nodes:
        yield node, ancestors
        yield from _walk(node.children, ancestors + (node,))


class TestBuildNavigationTree:
    def test_structure(self):
        roots, _ = _tree()
        assert [n.name for n in roots] == ["about", "blog", "index"]

        blog = roots[1]
        assert blog.output_path == "foursg/site/blog/index.html"
        assert blog.is_index
        assert [c.name for c in blog.children] == ["2024", "post1"]

        folder_2024 = blog.children[0]
        assert folder_2024.output_path == ""
        assert [c.name for c in folder_2024.children] == ["deep"]

    def test_every_document_appears_exactly_once(self):
        roots, paths = _tree()
        output_paths = [n.output_path for n, _ in _walk(roots) if n.output_path]
        for doc_path in DOC_PATHS:
            assert output_paths.count(paths.output_path_for(doc_path)) == 1

    def test_ancestors_are_folders(self):
        roots, _ = _tree()
        for node, ancestors in _walk(roots):
            for ancestor in ancestors:
                assert node.path.startswith(ancestor.path + "/")

    def test_input_order_does_not_matter(self):
        first, _ = _tree()
        second, _ = _tree(list(reversed(DOC_PATHS)))
        assert first == second


class TestRenderNavTree:
    def test_current_page_highlighted_and_expanded(self):
        roots, paths = _tree()
        out = render_nav_tree(roots, "foursg/site/blog/post1.html", paths)

        assert '<details id="nav-blog" class="nav-folder" open>' in out
        assert '<details id="nav-blog-2024" class="nav-folder">' in out
        assert '<summary><a href="index.html">blog</a></summary>' in out
        assert '<summary><span>2024</span></summary>' in out
        assert '<a href="post1.html" class="active">post1</a>' in out
        assert '<a href="../about.html">about</a>' in out

    def test_nested_list(self):
        roots, paths = _tree()
        out = render_nav_tree(roots, "foursg/site/index.html", paths)
        assert out.startswith("<ul><li>")
        assert out.endswith("</li></ul>")
        assert " open" not in out

    def test_deterministic(self):
        roots, paths = _tree()
        current = "foursg/site/blog/2024/deep.html"
        assert render_nav_tree(roots, current, paths) == render_nav_tree(_tree()[0], current, paths)

    def test_empty(self):
        assert render_nav_tree([], "foursg/site/index.html", PathResolver("foursg/site")) == ""

    def test_names_escaped(self):
        paths = PathResolver("foursg/site")
        node = NavNode(name="<b>", output_path="foursg/site/b.html")
        assert "&lt;b&gt;" in render_nav_tree([node], "foursg/site/index.html", paths)
