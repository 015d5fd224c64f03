import pytest

from foursg.store import LocalContentStore


def write_files(root, files: dict) -> None:
    """Create *files* ({relative path: str | bytes}) under *root*."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")


@pytest.fixture
def vault(tmp_path):
    """A content root with a root index, a nested post and an image."""
    write_files(tmp_path, {
        "index.md": "---\nsite_name: Demo\nsite_url: https://demo.test\n---\n# Home\n",
        "blog/post1.md": "See [[index]]",
        "images/pic.png": b"\x89PNG\r\n\x1a\nfake",
    })
    return tmp_path


@pytest.fixture
def store(vault):
    return LocalContentStore(vault)
