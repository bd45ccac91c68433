import asyncio
from collections import defaultdict
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from drop_uploader.config.manager import ConfigManager
from drop_uploader.config.settings import Settings
from drop_uploader.config.upload_config import HeaderEntry, PdfDisposition, UploadConfig
from drop_uploader.editor.text_editor import TextEditor
from drop_uploader.host.base import BaseAttachmentStorage, BaseNotifier, BaseSettingsStore
from drop_uploader.host.events import EventKind, FileEvent
from drop_uploader.host.prompts import FixedChoicePrompt
from drop_uploader.orchestrator.orchestrator import UploadOrchestrator, build_orchestrator
from drop_uploader.transport.base import BaseHttpClient
from drop_uploader.transport.httpx_adapter import HttpxClientAdapter
from drop_uploader.upload.models import UploadFailure, UploadResult, UploadSuccess, UploadTarget
from drop_uploader.upload.uploader import UploadClient


class _GatedUploadClient:
    """Upload client whose calls block until the test opens that file's gate."""

    def __init__(self) -> None:
        self.started: list[str] = []
        self.finished: list[str] = []
        self.gates: defaultdict[str, asyncio.Event] = defaultdict(asyncio.Event)

    async def upload(self, target: UploadTarget, config: UploadConfig) -> UploadResult:
        self.started.append(target.name)
        await self.gates[target.name].wait()
        self.finished.append(target.name)
        return UploadSuccess(url=f"https://cdn.example.com/{target.name}")


def _target(name: str) -> UploadTarget:
    return UploadTarget(name=name, data=b"bytes")


def _make_config_manager(**changes: object) -> ConfigManager:
    store = MagicMock(spec=BaseSettingsStore)
    store.load.return_value = None
    manager = ConfigManager(store)
    manager.update(endpoint="https://e", response_path="url", **changes)
    return manager


def _make_orchestrator(
    upload_client: object | None = None,
    answer: bool | None = True,
    **changes: object,
) -> tuple[UploadOrchestrator, MagicMock, MagicMock, FixedChoicePrompt]:
    if upload_client is None:
        upload_client = MagicMock(spec=UploadClient)
        upload_client.upload = AsyncMock(return_value=UploadSuccess(url="https://u"))
    storage = MagicMock(spec=BaseAttachmentStorage)
    storage.save = AsyncMock(return_value="report 1.pdf")
    notifier = MagicMock(spec=BaseNotifier)
    prompt = FixedChoicePrompt(answer)
    orchestrator = UploadOrchestrator(
        config_manager=_make_config_manager(**changes),
        upload_client=upload_client,  # type: ignore[arg-type]
        attachment_storage=storage,
        prompt=prompt,
        notifier=notifier,
    )
    return orchestrator, storage, notifier, prompt


async def _settle(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


class TestPassThrough:
    @pytest.mark.asyncio
    async def test_no_files(self) -> None:
        orchestrator, *_ = _make_orchestrator()
        event = FileEvent(kind=EventKind.DROP)

        assert orchestrator.handle_event(event, TextEditor()) is None
        assert not event.suppressed

    @pytest.mark.asyncio
    async def test_only_other_files(self) -> None:
        orchestrator, *_ = _make_orchestrator()
        editor = TextEditor("body")
        event = FileEvent(kind=EventKind.PASTE, files=[_target("a.txt")])

        assert orchestrator.handle_event(event, editor) is None
        assert not event.default_prevented
        assert not event.propagation_stopped
        assert editor.get_value() == "body"

    @pytest.mark.asyncio
    async def test_no_active_editor(self) -> None:
        orchestrator, *_ = _make_orchestrator()
        event = FileEvent(kind=EventKind.DROP, files=[_target("a.png")])

        assert orchestrator.handle_event(event, None) is None
        assert not event.suppressed

    @pytest.mark.asyncio
    async def test_pdf_with_save_locally_left_to_host(self) -> None:
        orchestrator, storage, *_ = _make_orchestrator()
        event = FileEvent(kind=EventKind.DROP, files=[_target("r.pdf")])

        assert orchestrator.handle_event(event, TextEditor()) is None
        storage.save.assert_not_awaited()


class TestImages:
    @pytest.mark.asyncio
    async def test_suppresses_and_uploads(self) -> None:
        orchestrator, _storage, notifier, _prompt = _make_orchestrator()
        editor = TextEditor()
        event = FileEvent(kind=EventKind.DROP, files=[_target("a.png"), _target("notes.txt")])

        task = orchestrator.handle_event(event, editor)
        assert task is not None
        assert event.suppressed
        await task

        assert editor.get_value() == "![](https://u)"
        notifier.notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_removes_placeholder_and_notifies(self) -> None:
        client = MagicMock(spec=UploadClient)
        client.upload = AsyncMock(return_value=UploadFailure(reason="Server responded with status 500"))
        orchestrator, _storage, notifier, _prompt = _make_orchestrator(client)
        editor = TextEditor("intro ")

        task = orchestrator.handle_event(FileEvent(EventKind.DROP, [_target("a.png")]), editor)
        assert task is not None
        await task

        assert editor.get_value() == "intro "
        notifier.notify.assert_called_once_with("Upload failed: Server responded with status 500")

    @pytest.mark.asyncio
    async def test_one_failure_does_not_block_others(self) -> None:
        results = {
            "a.png": UploadSuccess(url="https://u/a"),
            "b.png": UploadFailure(reason="boom"),
            "c.png": UploadSuccess(url="https://u/c"),
        }
        client = MagicMock(spec=UploadClient)
        client.upload = AsyncMock(side_effect=lambda target, config: results[target.name])
        orchestrator, _storage, notifier, _prompt = _make_orchestrator(client)
        editor = TextEditor()

        files = [_target(name) for name in results]
        task = orchestrator.handle_event(FileEvent(EventKind.DROP, files), editor)
        assert task is not None
        await task

        assert editor.get_value() == "![](https://u/a)![](https://u/c)"
        assert notifier.notify.call_count == 1

    @pytest.mark.asyncio
    async def test_images_complete_in_any_order(self) -> None:
        client = _GatedUploadClient()
        orchestrator, *_ = _make_orchestrator(client)
        editor = TextEditor()

        task = orchestrator.handle_event(
            FileEvent(EventKind.DROP, [_target("a.png"), _target("b.png")]), editor
        )
        await _settle()
        client.gates["b.png"].set()
        await _settle()

        assert client.finished == ["b.png"]
        assert editor.get_value().endswith("![](https://cdn.example.com/b.png)")
        client.gates["a.png"].set()
        assert task is not None
        await task
        assert editor.get_value() == (
            "![](https://cdn.example.com/a.png)![](https://cdn.example.com/b.png)"
        )


class TestConcurrency:
    @pytest.mark.asyncio
    async def test_images_dispatched_before_pdfs_serialized(self) -> None:
        client = _GatedUploadClient()
        orchestrator, *_ = _make_orchestrator(client, pdf_disposition=PdfDisposition.UPLOAD)
        files = [
            _target("1.png"),
            _target("2.png"),
            _target("3.png"),
            _target("first.pdf"),
            _target("second.pdf"),
        ]

        task = orchestrator.handle_event(FileEvent(EventKind.DROP, files), TextEditor())
        await _settle()

        assert set(client.started) == {"1.png", "2.png", "3.png", "first.pdf"}
        assert client.finished == []

        client.gates["first.pdf"].set()
        await _settle()
        assert "second.pdf" in client.started

        for gate in ("1.png", "2.png", "3.png", "second.pdf"):
            client.gates[gate].set()
        assert task is not None
        await task
        assert sorted(client.finished) == ["1.png", "2.png", "3.png", "first.pdf", "second.pdf"]

    @pytest.mark.asyncio
    async def test_image_placeholders_inserted_before_pdf(self) -> None:
        client = _GatedUploadClient()
        orchestrator, *_ = _make_orchestrator(client, pdf_disposition=PdfDisposition.UPLOAD)
        editor = TextEditor()

        task = orchestrator.handle_event(
            FileEvent(EventKind.DROP, [_target("r.pdf"), _target("a.png")]), editor
        )
        await _settle()

        text = editor.get_value()
        assert text.index("Uploading a.png") < text.index("Uploading r.pdf")
        for gate in ("r.pdf", "a.png"):
            client.gates[gate].set()
        assert task is not None
        await task

    @pytest.mark.asyncio
    async def test_wait_idle(self) -> None:
        orchestrator, *_ = _make_orchestrator()
        editor = TextEditor()
        orchestrator.handle_event(FileEvent(EventKind.DROP, [_target("a.png")]), editor)
        orchestrator.handle_event(FileEvent(EventKind.PASTE, [_target("b.png")]), editor)

        await orchestrator.wait_idle()

        assert editor.get_value() == "![](https://u)![](https://u)"


class TestPdfDisposition:
    @pytest.mark.asyncio
    async def test_upload_renders_named_link(self) -> None:
        orchestrator, *_ = _make_orchestrator(pdf_disposition=PdfDisposition.UPLOAD)
        editor = TextEditor()

        task = orchestrator.handle_event(FileEvent(EventKind.DROP, [_target("r.pdf")]), editor)
        assert task is not None
        await task

        assert editor.get_value() == "[r.pdf](https://u)"

    @pytest.mark.asyncio
    async def test_ask_accepted_uploads(self) -> None:
        orchestrator, storage, _notifier, prompt = _make_orchestrator(
            answer=True, pdf_disposition=PdfDisposition.ASK_EACH_TIME
        )
        editor = TextEditor()

        task = orchestrator.handle_event(FileEvent(EventKind.DROP, [_target("r.pdf")]), editor)
        assert task is not None
        await task

        assert prompt.questions == ["How do you want to handle this PDF?"]
        assert editor.get_value() == "[r.pdf](https://u)"
        storage.save.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", [False, None])
    async def test_ask_declined_or_dismissed_saves_locally(self, answer: bool | None) -> None:
        orchestrator, storage, _notifier, _prompt = _make_orchestrator(
            answer=answer, pdf_disposition=PdfDisposition.ASK_EACH_TIME
        )
        editor = TextEditor()
        pdf = _target("report.pdf")

        task = orchestrator.handle_event(FileEvent(EventKind.DROP, [pdf]), editor)
        assert task is not None
        await task

        storage.save.assert_awaited_once_with("report.pdf", b"bytes", None)
        assert editor.get_value() == "![[report 1.pdf]]"

    @pytest.mark.asyncio
    async def test_asks_once_per_pdf(self) -> None:
        orchestrator, storage, _notifier, prompt = _make_orchestrator(
            answer=False, pdf_disposition=PdfDisposition.ASK_EACH_TIME
        )

        task = orchestrator.handle_event(
            FileEvent(EventKind.DROP, [_target("a.pdf"), _target("b.pdf")]), TextEditor()
        )
        assert task is not None
        await task

        assert len(prompt.questions) == 2
        assert storage.save.await_count == 2

    @pytest.mark.asyncio
    async def test_local_save_error_notified_and_next_pdf_continues(self) -> None:
        orchestrator, storage, notifier, _prompt = _make_orchestrator(
            answer=False, pdf_disposition=PdfDisposition.ASK_EACH_TIME
        )
        storage.save.side_effect = [PermissionError("read-only vault"), "b.pdf"]
        editor = TextEditor()

        task = orchestrator.handle_event(
            FileEvent(EventKind.DROP, [_target("a.pdf"), _target("b.pdf")]), editor
        )
        assert task is not None
        await task

        notifier.notify.assert_called_once_with("Could not add a.pdf: read-only vault")
        assert editor.get_value() == "![[b.pdf]]"

    @pytest.mark.asyncio
    async def test_unexpected_storage_error_does_not_stop_batch(self) -> None:
        client = _GatedUploadClient()
        orchestrator, storage, notifier, _prompt = _make_orchestrator(
            client, answer=False, pdf_disposition=PdfDisposition.ASK_EACH_TIME
        )
        storage.save.side_effect = [RuntimeError("vault locked"), "b.pdf"]
        client.gates["a.png"].set()
        editor = TextEditor()

        task = orchestrator.handle_event(
            FileEvent(EventKind.DROP, [_target("a.png"), _target("a.pdf"), _target("b.pdf")]),
            editor,
        )
        assert task is not None
        await task

        notifier.notify.assert_called_once_with("Could not add a.pdf: vault locked")
        assert storage.save.await_count == 2
        assert editor.get_value() == "![](https://cdn.example.com/a.png)![[b.pdf]]"


class TestDocumentEdits:
    @pytest.mark.asyncio
    async def test_image_resolving_before_next_pdf_keeps_insertions_apart(self) -> None:
        client = _GatedUploadClient()
        orchestrator, *_ = _make_orchestrator(client, pdf_disposition=PdfDisposition.UPLOAD)
        editor = TextEditor()
        files = [_target("a.png"), _target("first.pdf"), _target("second.pdf")]

        task = orchestrator.handle_event(FileEvent(EventKind.DROP, files), editor)
        await _settle()
        client.gates["a.png"].set()
        await _settle()
        client.gates["first.pdf"].set()
        await _settle()
        client.gates["second.pdf"].set()
        assert task is not None
        await task

        assert editor.get_value() == (
            "![](https://cdn.example.com/a.png)"
            "[first.pdf](https://cdn.example.com/first.pdf)"
            "[second.pdf](https://cdn.example.com/second.pdf)"
        )

    @pytest.mark.asyncio
    async def test_unencodable_header_removes_placeholder(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"url": "u"}))
        upload_client = UploadClient(HttpxClientAdapter(timeout_seconds=5, transport=transport))
        orchestrator, _storage, notifier, _prompt = _make_orchestrator(
            upload_client, headers=[HeaderEntry(key="X-User", value="José")]
        )
        editor = TextEditor("intro ")

        task = orchestrator.handle_event(FileEvent(EventKind.DROP, [_target("a.png")]), editor)
        assert task is not None
        await task
        await orchestrator.aclose()

        assert editor.get_value() == "intro "
        assert notifier.notify.call_count == 1
        assert notifier.notify.call_args.args[0].startswith("Upload failed: Invalid request")


class TestClose:
    @pytest.mark.asyncio
    async def test_aclose_releases_http_client(self) -> None:
        http = MagicMock(spec=BaseHttpClient)
        orchestrator, *_ = _make_orchestrator(UploadClient(http))

        await orchestrator.aclose()

        http.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_built_orchestrator_closes_its_own_client(self) -> None:
        http = MagicMock(spec=BaseHttpClient)
        with patch(
            "drop_uploader.orchestrator.orchestrator.HttpxClientAdapter", return_value=http
        ):
            orchestrator = build_orchestrator(
                Settings(),
                _make_config_manager(),
                prompt=FixedChoicePrompt(True),
                notifier=MagicMock(spec=BaseNotifier),
            )

        await orchestrator.aclose()

        http.aclose.assert_awaited_once()
