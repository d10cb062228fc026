"""
Fire-and-forget submission of downstream file work.

Publishing to the broker is blocking network I/O, so each submission runs in a
worker thread inside its own asyncio task. The caller gets that task back as
the result channel (it resolves to the Celery task id, or None on failure) and
never has to await it.
"""

import asyncio
from typing import Any, Callable, Optional, Set

from roomspace.utils.logging import get_logger

logger = get_logger(__name__)


class DownstreamDispatcher:
    def __init__(self, client: Optional[Any] = None):
        self._client = client
        self._pending: Set[asyncio.Task] = set()

    @property
    def client(self):
        if self._client is None:
            from roomspace.utils.celery_client import task_client
            self._client = task_client
        return self._client

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def submit(self, label: str, send: Callable[..., str], **kwargs: Any) -> asyncio.Task:
        """Start send(**kwargs) in the background and return the tracking task"""
        task = asyncio.create_task(self._send(label, send, kwargs), name=f"downstream:{label}")
        # Event loop only keeps weak references to tasks
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _send(self, label: str, send: Callable[..., str], kwargs: dict) -> Optional[str]:
        try:
            task_id = await asyncio.to_thread(send, **kwargs)
            logger.info(f"[DOWNSTREAM] {label} submitted - task_id: {task_id}")
            return task_id
        except Exception as e:
            logger.error(f"[DOWNSTREAM] {label} failed - kwargs: {kwargs}, error: {str(e)}", exc_info=True)
            return None

    def cleanup_file_index(self, file) -> asyncio.Task:
        return self.submit(
            "file_index_cleanup",
            self.client.cleanup_file_index,
            file_id=str(file.id),
            uploader_id=file.uploader_id,
            room_id=file.room_id,
            file_path=file.file_path,
        )

    def process_file(self, file) -> asyncio.Task:
        return self.submit(
            "file_processing",
            self.client.create_file_embedding_task,
            file_id=str(file.id),
            uploader_id=file.uploader_id,
            file_path=file.file_path,
            mime_type=file.mime_type,
            room_id=file.room_id,
        )

    async def drain(self) -> None:
        """Wait for every in-flight submission (shutdown and tests)"""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


dispatcher = DownstreamDispatcher()
