"""Placeholder text marking an in-flight upload and its final substitution."""

import uuid

from drop_uploader.editor.base import BaseEditor
from drop_uploader.logging.logger import Log
from drop_uploader.upload.models import Category, UploadResult, UploadSuccess


def image_markdown(url: str) -> str:
    return f"![]({url})"


def link_markdown(name: str, url: str) -> str:
    return f"[{name}]({url})"


def embed_markdown(stored_name: str) -> str:
    return f"![[{stored_name}]]"


def render_success(name: str, category: Category, url: str) -> str:
    """Markdown that replaces the placeholder once an upload succeeded."""
    if category is Category.IMAGE:
        return image_markdown(url)
    return link_markdown(name, url)


def replace_first(editor: BaseEditor, old: str, new: str) -> bool:
    """Replace the first exact occurrence of ``old`` in the whole document.

    Returns False, leaving the document untouched, when ``old`` is absent.
    """
    content = editor.get_value()
    if old not in content:
        return False
    editor.set_value(content.replace(old, new, 1))
    return True


class PlaceholderRegistry:
    """Hands out placeholder tokens unique among the active ones in a document."""

    def __init__(self) -> None:
        self._active: set[str] = set()

    @property
    def active(self) -> frozenset[str]:
        return frozenset(self._active)

    def new_token(self, name: str, editor: BaseEditor) -> str:
        content = editor.get_value()
        while True:
            token = f"![Uploading {name}... {uuid.uuid4().hex[:8]}]()"
            if token not in self._active and token not in content:
                self._active.add(token)
                return token

    def release(self, token: str) -> None:
        self._active.discard(token)


class Placeholder:
    """One placeholder's lifecycle: inserted once, resolved once."""

    def __init__(self, editor: BaseEditor, registry: PlaceholderRegistry, name: str) -> None:
        self._editor = editor
        self._registry = registry
        self._resolved = False
        self.token = registry.new_token(name, editor)

    def insert(self) -> None:
        self._editor.replace_selection(self.token)

    def resolve(self, name: str, category: Category, result: UploadResult) -> bool:
        """Swap the token for the result's Markdown, or remove it on failure.

        Returns whether the token was still present in the document.
        """
        if self._resolved:
            raise RuntimeError(f"Placeholder {self.token!r} already resolved")
        self._resolved = True
        self._registry.release(self.token)
        if isinstance(result, UploadSuccess):
            replacement = render_success(name, category, result.url)
        else:
            replacement = ""
        replaced = replace_first(self._editor, self.token, replacement)
        if not replaced:
            Log.debug(f"Placeholder for {name} no longer in document, skipping")
        return replaced
