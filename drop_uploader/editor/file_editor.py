from pathlib import Path

from drop_uploader.editor.text_editor import TextEditor


class FileEditor(TextEditor):
    """A Markdown file on disk, edited with the caret at the end of the document.

    Every edit is written back immediately.
    """

    def __init__(self, path: Path) -> None:
        super().__init__(path.read_text(encoding="utf-8"))
        self._path = path

    @property
    def source_path(self) -> str | None:
        return str(self._path)

    def set_value(self, text: str) -> None:
        super().set_value(text)
        self._move_caret(len(text))
        self._flush()

    def replace_selection(self, text: str) -> None:
        super().replace_selection(text)
        self._flush()

    def _flush(self) -> None:
        self._path.write_text(self.get_value(), encoding="utf-8")
