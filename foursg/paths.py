"""
Output path resolution for the site generator.

Every path handled here is a slash-separated path relative to the content
root (the same shape the content store uses), so the results are identical
on every host OS.

  notes/My Page.md       → <output>/notes/my-page.html
  Notes/Index.md         → <output>/notes/index.html
  Art/graphics/Pic 1.png → <output>/art/graphics/Pic 1.png
"""

import posixpath
import re
import unicodedata

MARKDOWN_EXTENSION = ".md"
HTML_EXTENSION = ".html"
INDEX_NAME = "index"
EMPTY_SLUG = "untitled"

# Symbols spelled out rather than dropped: "Tom & Jerry" → "tom-and-jerry"
_CHAR_MAP = {"&": "and", "%": "percent", "$": "dollar", "<": "less", ">": "greater", "|": "or"}
_REMOVE_RE = re.compile(r"[*+~.()'\"!:@\u200b]")
_STRICT_RE = re.compile(r"[^A-Za-z0-9\s]")
_SPACE_RE = re.compile(r"\s+")


def sanitize_segment(name: str) -> str:
    """Convert one path segment to a lower-case, hyphen-separated slug.

    Diacritics are folded to ASCII, punctuation is removed and runs of
    whitespace (or existing hyphens) collapse into a single hyphen.
    The transform is idempotent: a sanitized segment maps to itself.

    'Café Notes'  → 'cafe-notes'
    'What's New!' → 'whats-new'
    'a -- b'      → 'a-b'
    """
    text = unicodedata.normalize("NFKD", name)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = "".join(_CHAR_MAP.get(ch, ch) for ch in text.replace("-", " "))
    text = _REMOVE_RE.sub("", text)
    text = _STRICT_RE.sub("", text)
    text = _SPACE_RE.sub("-", text.strip())
    return text.lower() or EMPTY_SLUG


def sanitize_directory(dir_path: str) -> str:
    """Sanitize each segment of a directory path independently."""
    if not dir_path:
        return ""
    return "/".join(sanitize_segment(part) for part in dir_path.split("/") if part)


def document_stem(path: str) -> str:
    """Base name of a document path without its markdown extension."""
    name = posixpath.basename(path)
    if name.endswith(MARKDOWN_EXTENSION):
        return name[: -len(MARKDOWN_EXTENSION)]
    return name


def is_index_name(stem: str) -> bool:
    """True for the folder landing-page name, compared case-insensitively."""
    return stem.lower() == INDEX_NAME


class PathResolver:
    """Maps source paths onto the output tree rooted at *output_root*."""

    def __init__(self, output_root: str):
        self.output_root = output_root.strip("/")

    def output_path_for(self, document_path: str) -> str:
        """Output HTML path for a markdown document, with sanitized segments."""
        stem = document_stem(document_path)
        # index keeps its literal name so folders keep a canonical landing page
        name = INDEX_NAME if is_index_name(stem) else sanitize_segment(stem)
        directory = sanitize_directory(posixpath.dirname(document_path))
        return self._join(directory, name + HTML_EXTENSION)

    def image_output_path_for(self, image_path: str) -> str:
        """Output path for an image; folders are sanitized, the file name is kept."""
        # Image names must keep matching their embeds, so only folders are slugged
        directory = sanitize_directory(posixpath.dirname(image_path))
        return self._join(directory, posixpath.basename(image_path))

    def relative_path(self, from_output_path: str, to_output_path: str) -> str:
        """Path from the directory containing *from_output_path* to *to_output_path*."""
        start = posixpath.dirname(from_output_path) or "."
        return posixpath.relpath(to_output_path, start).replace("\\", "/")

    def relative_path_to_site_root(self, output_path: str) -> str:
        """Prefix leading from *output_path* back to the site root, "./" or "../"-style."""
        start = posixpath.dirname(output_path) or "."
        relative = posixpath.relpath(self.output_root or ".", start)
        if relative in ("", "."):
            return "./"
        return relative.replace("\\", "/") + "/"

    def page_url(self, output_path: str) -> str:
        """Site-relative URL of an output file, e.g. 'blog/post1.html'."""
        prefix = self.output_root + "/"
        if self.output_root and output_path.startswith(prefix):
            return output_path[len(prefix):]
        return output_path

    def _join(self, directory: str, filename: str) -> str:
        parts = [p for p in (self.output_root, directory, filename) if p]
        return "/".join(parts)
