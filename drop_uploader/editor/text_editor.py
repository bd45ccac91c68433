from drop_uploader.editor.base import BaseEditor


def _map_position(old: str, new: str, position: int) -> int:
    """Carry a position in ``old`` over to ``new``.

    Positions before the changed span stay put, positions after it shift by
    the length delta, and positions inside it land at the end of the new span.
    """
    prefix = 0
    limit = min(len(old), len(new))
    while prefix < limit and old[prefix] == new[prefix]:
        prefix += 1
    suffix = 0
    while suffix < limit - prefix and old[-1 - suffix] == new[-1 - suffix]:
        suffix += 1
    if position <= prefix:
        return position
    if position >= len(old) - suffix:
        return position + len(new) - len(old)
    return len(new) - suffix


class TextEditor(BaseEditor):
    """In-memory document with a caret and an optional selection.

    Replacing the full text maps the caret through the edit; inserting moves it
    past the inserted text.
    """

    def __init__(self, text: str = "", caret: int | None = None, selection_end: int | None = None) -> None:
        self._text = text
        self._caret = len(text) if caret is None else max(0, min(caret, len(text)))
        end = self._caret if selection_end is None else selection_end
        self._selection_end = max(self._caret, min(end, len(text)))

    @property
    def caret(self) -> int:
        return self._caret

    def get_value(self) -> str:
        return self._text

    def set_value(self, text: str) -> None:
        caret = _map_position(self._text, text, self._caret)
        self._text = text
        self._move_caret(caret)

    def replace_selection(self, text: str) -> None:
        self._text = self._text[: self._caret] + text + self._text[self._selection_end :]
        self._move_caret(self._caret + len(text))

    def _move_caret(self, position: int) -> None:
        self._caret = max(0, min(position, len(self._text)))
        self._selection_end = self._caret
