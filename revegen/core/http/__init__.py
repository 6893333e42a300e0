"""
HTTP传输模块
"""

from revegen.core.http.error_handler import handle_http_error
from revegen.core.http.transport import ReveTransport, build_default_headers

__all__ = ["ReveTransport", "build_default_headers", "handle_http_error"]
