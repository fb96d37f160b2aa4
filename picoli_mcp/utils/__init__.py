from .get_endpoint import get_endpoint
from .http_client import picoli_request
from .response_utils import error_result, http_error_result, json_result, short_url

__all__ = ["get_endpoint", "picoli_request", "error_result", "http_error_result", "json_result", "short_url"]
