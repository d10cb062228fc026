"""
Celery client for handing file work to the external task workers.

The API process never runs these tasks itself; it only publishes them
by name, so it needs the broker connection and none of the worker code.
"""

from typing import Dict, Any, Optional
from celery import Celery

from roomspace.configs.settings import settings
from roomspace.utils.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Task Names - Must match the names registered in the worker
# =============================================================================
class TaskNames:
    """Task name constants - keep in sync with worker task registrations"""
    # File tasks (queue: files)
    FILE_INDEX_CLEANUP = "tasks.files.cleanup_index"

    # Embedding tasks (queue: embeddings)
    FILE_EMBEDDING_RUN = "tasks.embedding.run_file_embedding"


# =============================================================================
# Queue Names
# =============================================================================
class QueueNames:
    """Queue name constants"""
    FILES = "files"
    EMBEDDINGS = "embeddings"


# =============================================================================
# Celery Client
# =============================================================================
class CeleryTaskClient:
    """
    Client for sending tasks to Celery workers.

    Only needs the broker connection; does not import any task modules.
    """

    def __init__(self, app_name: str = "celery_client"):
        self.app_name = app_name
        self._celery_app: Optional[Celery] = None
        self._initialize_client()
        logger.info(f"Initialized Celery Client: {app_name}")

    def _initialize_client(self):
        """Initialize the Celery client connection"""
        try:
            self._celery_app = Celery(
                self.app_name,
                broker=settings.get_broker_url,
                backend=settings.get_result_backend,
            )

            self._celery_app.conf.update(
                task_serializer=settings.CELERY_TASK_SERIALIZER,
                accept_content=settings.CELERY_ACCEPT_CONTENT,
                result_serializer=settings.CELERY_RESULT_SERIALIZER,
                timezone=settings.CELERY_TIMEZONE,
                enable_utc=settings.CELERY_ENABLE_UTC,
                result_expires=3600,
                task_ignore_result=False,
                task_track_started=True,
            )

        except Exception as e:
            logger.error(f"Failed to initialize Celery client: {e}")
            raise

    @property
    def celery_app(self) -> Celery:
        """Get the Celery app instance"""
        if self._celery_app is None:
            self._initialize_client()
        return self._celery_app

    def send_task(
        self,
        task_name: str,
        queue: str,
        kwargs: Dict[str, Any] = None,
        args: tuple = None,
    ) -> str:
        """
        Send a task to the Celery worker.

        Args:
            task_name: The registered task name
            queue: Target queue name
            kwargs: Task keyword arguments
            args: Task positional arguments

        Returns:
            Task ID
        """
        try:
            result = self.celery_app.send_task(
                task_name,
                args=args or (),
                kwargs=kwargs or {},
                queue=queue
            )
            logger.info(f"Task sent: {task_name} -> {queue} (ID: {result.id})")
            return result.id
        except Exception as e:
            logger.error(f"Error sending task {task_name}: {e}")
            raise

    # =========================================================================
    # File Tasks
    # =========================================================================
    def cleanup_file_index(
        self,
        file_id: str,
        uploader_id: str,
        room_id: str = None,
        file_path: str = None,
    ) -> str:
        """Remove search-index artifacts (chunks, vectors) derived from a deleted file"""
        logger.info(f"Creating index cleanup task: file={file_id}")

        return self.send_task(
            task_name=TaskNames.FILE_INDEX_CLEANUP,
            queue=QueueNames.FILES,
            kwargs={
                'file_id': file_id,
                'uploader_id': uploader_id,
                'room_id': room_id,
                'file_path': file_path,
            }
        )

    def create_file_embedding_task(
        self,
        file_id: str,
        uploader_id: str,
        file_path: str,
        mime_type: str,
        room_id: str = None,
    ) -> str:
        """Create a file embedding task for a newly registered file"""
        logger.info(f"Creating embedding task: file={file_id}, object={file_path}")

        return self.send_task(
            task_name=TaskNames.FILE_EMBEDDING_RUN,
            queue=QueueNames.EMBEDDINGS,
            kwargs={
                'file_id': file_id,
                'uploader_id': uploader_id,
                'file_path': file_path,
                'mime_type': mime_type,
                'room_id': room_id,
            }
        )


# =============================================================================
# Singleton Instance
# =============================================================================
task_client = CeleryTaskClient("roomspace_client")
