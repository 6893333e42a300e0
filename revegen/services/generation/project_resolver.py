"""
项目ID解析
优先使用配置的项目ID，否则从服务端自动发现默认项目
"""

import asyncio
from typing import Optional

from revegen.core.exceptions import ApiError, ReveError
from revegen.core.http.transport import ReveTransport
from revegen.core.log_messages import log_messages
from revegen.core.log_utils import get_logger

logger = get_logger(__name__)

NO_PROJECTS_MESSAGE = (
    "No projects found. Please provide a project_id in the options. You can find your "
    "project ID in the browser network tab when making requests to "
    "\"/api/project/{projectId}/generation\"."
)
DISCOVERY_UNAVAILABLE_MESSAGE = (
    "Cannot auto-detect project ID. The /api/projects endpoint was not found. Please "
    "provide a project_id in the options. You can find your project ID in the browser "
    "network tab when making generation requests."
)


class ProjectResolver:
    """项目ID解析器，发现结果在客户端实例内缓存"""

    def __init__(self, transport: ReveTransport, project_id: Optional[str] = None):
        self.transport = transport
        self._project_id = project_id or None
        self._lock = asyncio.Lock()

    async def resolve(self) -> str:
        """
        获取项目ID

        Returns:
            str: 项目ID

        Raises:
            ApiError: 账号下没有项目，或服务端不支持自动发现
        """
        if self._project_id:
            return self._project_id

        async with self._lock:
            # 等锁期间可能已被其他任务解析
            if self._project_id:
                return self._project_id
            self._project_id = await self._discover()
            logger.info(log_messages.PROJECT_RESOLVED, project_id=self._project_id)
            return self._project_id

    async def _discover(self) -> str:
        path = self.transport.settings.api_path("projects")
        try:
            projects = await self.transport.get_json(path, operation="getting project ID")
        except ReveError as e:
            if e.status_code == 404:
                raise ApiError(DISCOVERY_UNAVAILABLE_MESSAGE, status_code=404) from e
            raise

        if isinstance(projects, list) and projects:
            first = projects[0]
            if isinstance(first, dict) and first.get("id"):
                return str(first["id"])

        raise ApiError(NO_PROJECTS_MESSAGE)
