"""Wire protocol of the signing service.

Key concepts:
- Commands: bridge → service requests ({module, method, args})
- Replies: service → bridge answers ({code, message, responseObject})
- Correlation: positional; the next reply belongs to the only pending command
"""

from .commands import COMMON_UTILS_MODULE, Command, CommonUtilsMethod
from .replies import DEFAULT_FAILURE_MESSAGE, SUCCESS_CODE, Reply

__all__ = [
    "COMMON_UTILS_MODULE",
    "Command",
    "CommonUtilsMethod",
    "DEFAULT_FAILURE_MESSAGE",
    "Reply",
    "SUCCESS_CODE",
]
