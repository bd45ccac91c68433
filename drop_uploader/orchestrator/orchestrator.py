import asyncio
from pathlib import Path

from drop_uploader.config.manager import ConfigManager
from drop_uploader.config.settings import Settings
from drop_uploader.config.upload_config import PdfDisposition
from drop_uploader.editor.base import BaseEditor
from drop_uploader.editor.placeholder import Placeholder, PlaceholderRegistry, embed_markdown
from drop_uploader.host.attachment_storage import LocalAttachmentStorage
from drop_uploader.host.base import BaseAttachmentStorage, BaseChoicePrompt, BaseNotifier
from drop_uploader.host.events import FileEvent
from drop_uploader.logging.logger import Log
from drop_uploader.orchestrator.planner import BatchPlan, plan_batch
from drop_uploader.transport.base import BaseHttpClient
from drop_uploader.transport.httpx_adapter import HttpxClientAdapter
from drop_uploader.upload.classifier import classify
from drop_uploader.upload.models import UploadFailure, UploadResult, UploadTarget
from drop_uploader.upload.uploader import UploadClient

PDF_QUESTION = "How do you want to handle this PDF?"
PDF_ACCEPT_LABEL = "Upload to API"
PDF_REJECT_LABEL = "Save locally"


class UploadOrchestrator:
    """Routes intercepted files to uploads or local saves.

    Batch: classify -> suppress event -> images in parallel, PDFs one by one.
    Each file ends in its own terminal result; nothing is retried.
    """

    def __init__(
        self,
        config_manager: ConfigManager,
        upload_client: UploadClient,
        attachment_storage: BaseAttachmentStorage,
        prompt: BaseChoicePrompt,
        notifier: BaseNotifier,
    ) -> None:
        self._config_manager = config_manager
        self._upload_client = upload_client
        self._attachment_storage = attachment_storage
        self._prompt = prompt
        self._notifier = notifier
        self._placeholders = PlaceholderRegistry()
        self._batches: set[asyncio.Task[None]] = set()

    def handle_event(self, event: FileEvent, editor: BaseEditor | None) -> asyncio.Task[None] | None:
        """Entry point for host drop/paste callbacks. Must run inside the event loop.

        Returns the scheduled batch task, or None when the event is left to
        the host's native handling.
        """
        if not event.files or editor is None:
            return None
        plan = plan_batch(event.files, self._config_manager.config)
        if not plan.intercept:
            return None

        event.suppress()
        Log.info(
            f"Intercepted {event.kind.value} of {len(event.files)} file(s): "
            f"{len(plan.images)} image(s), {len(plan.pdfs)} pdf(s)"
        )
        task = asyncio.create_task(self.process_batch(plan, editor))
        self._batches.add(task)
        task.add_done_callback(self._batches.discard)
        return task

    async def process_batch(self, plan: BatchPlan, editor: BaseEditor) -> None:
        image_tasks = [self._start_upload(image, editor) for image in plan.images]
        try:
            for pdf in plan.pdfs:
                await self._process_pdf(pdf, editor)
        finally:
            if image_tasks:
                await asyncio.gather(*image_tasks)

    async def upload_file(self, target: UploadTarget, editor: BaseEditor) -> UploadResult:
        """Insert a placeholder, upload, then substitute the placeholder."""
        placeholder = self._insert_placeholder(target, editor)
        return await self._finish_upload(target, placeholder)

    def _start_upload(self, target: UploadTarget, editor: BaseEditor) -> asyncio.Task[UploadResult]:
        placeholder = self._insert_placeholder(target, editor)
        return asyncio.create_task(self._finish_upload(target, placeholder))

    def _insert_placeholder(self, target: UploadTarget, editor: BaseEditor) -> Placeholder:
        placeholder = Placeholder(editor, self._placeholders, target.name)
        placeholder.insert()
        return placeholder

    async def _finish_upload(self, target: UploadTarget, placeholder: Placeholder) -> UploadResult:
        result = await self._upload_client.upload(target, self._config_manager.config)
        placeholder.resolve(target.name, classify(target.name), result)
        if isinstance(result, UploadFailure):
            self._notifier.notify(f"Upload failed: {result.reason}")
        return result

    async def wait_idle(self) -> None:
        """Wait until every scheduled batch has finished."""
        while self._batches:
            await asyncio.gather(*list(self._batches))

    async def aclose(self) -> None:
        """Release the HTTP client. Call once no more events will be handled."""
        await self._upload_client.aclose()

    async def _process_pdf(self, target: UploadTarget, editor: BaseEditor) -> None:
        """Handle one PDF; an error here never stops the PDFs after it."""
        try:
            if await self._should_upload_pdf():
                await self.upload_file(target, editor)
            else:
                await self._save_locally(target, editor)
        except Exception as exc:
            Log.exception(f"Handling {target.name} failed")
            self._notifier.notify(f"Could not add {target.name}: {exc}")

    async def _should_upload_pdf(self) -> bool:
        disposition = self._config_manager.config.pdf_disposition
        if disposition is PdfDisposition.UPLOAD:
            return True
        if disposition is PdfDisposition.ASK_EACH_TIME:
            answer = await self._prompt.ask(PDF_QUESTION, PDF_ACCEPT_LABEL, PDF_REJECT_LABEL)
            # dismissed -> save locally
            return answer is True
        return False

    async def _save_locally(self, target: UploadTarget, editor: BaseEditor) -> None:
        stored_name = await self._attachment_storage.save(
            target.name, target.data, editor.source_path
        )
        editor.replace_selection(embed_markdown(stored_name))


def build_orchestrator(
    settings: Settings,
    config_manager: ConfigManager,
    prompt: BaseChoicePrompt,
    notifier: BaseNotifier,
    attachments_root: Path | None = None,
    http_client: BaseHttpClient | None = None,
) -> UploadOrchestrator:
    """Build an UploadOrchestrator with the bundled adapters.

    The orchestrator owns the HTTP client either way; release it with
    ``await orchestrator.aclose()``.
    """
    http_client = http_client or HttpxClientAdapter(timeout_seconds=settings.http_timeout_seconds)
    storage = LocalAttachmentStorage(
        root=attachments_root or Path.cwd(),
        attachments_dir=settings.attachments_dir,
    )
    return UploadOrchestrator(
        config_manager=config_manager,
        upload_client=UploadClient(http_client),
        attachment_storage=storage,
        prompt=prompt,
        notifier=notifier,
    )
