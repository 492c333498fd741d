"""
Invocation result models.

Standardizes the output of the Lambda invocation client.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field


class InvocationResult(BaseModel):
    """
    Result of a single Lambda Invoke API call.

    Used to decouple the dispatcher from httpx Response objects.
    """

    success: bool
    status_code: int
    payload: bytes = b""
    headers: Dict[str, str] = Field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_logic_error(self) -> bool:
        """Returns True if it's a Lambda logical error (X-Amz-Function-Error)."""
        return self.function_error is not None

    @property
    def function_error(self) -> Optional[str]:
        for key, value in self.headers.items():
            if key.lower() == "x-amz-function-error":
                return value
        return None
