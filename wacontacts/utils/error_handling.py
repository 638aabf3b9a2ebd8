"""
Utilities for standardized error responses.
"""
from typing import Any, Dict, Optional, Union
import logging
from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from wacontacts.core.exceptions import (
    WacontactsException,
    ValidationError,
    NotFoundError,
    ImportStateError,
)

logger = logging.getLogger("wacontacts.errors")

class ErrorResponse:
    """Standard error response format."""
    
    @staticmethod
    def model(
        status_code: int,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Create a standardized error response model.
        
        Args:
            status_code: HTTP status code
            code: Error code
            message: Error message
            details: Additional error details
            
        Returns:
            Dict: Standardized error response
        """
        return {
            "status": "error",
            "code": code,
            "message": message,
            "details": details or {}
        }
    
    @staticmethod
    def from_exception(exception: Union[Exception, WacontactsException]) -> Dict[str, Any]:
        """
        Create error response from exception.
        
        Args:
            exception: Exception to process
            
        Returns:
            Dict: Standardized error response
        """
        if isinstance(exception, WacontactsException):
            return ErrorResponse.model(
                status_code=exception.status_code,
                code=exception.code,
                message=exception.message,
                details=exception.details
            )
        elif isinstance(exception, HTTPException):
            return ErrorResponse.model(
                status_code=exception.status_code,
                code=f"HTTP_{exception.status_code}",
                message=exception.detail,
                details=getattr(exception, "details", None)
            )
        elif isinstance(exception, (RequestValidationError, PydanticValidationError)):
            return ErrorResponse.model(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                code="VALIDATION_ERROR",
                message="Validation error",
                details={"errors": jsonable_encoder(exception.errors())}
            )
        else:
            return ErrorResponse.model(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                code="INTERNAL_ERROR",
                message=str(exception),
                details={"type": type(exception).__name__}
            )


def log_exception(exception: Exception) -> None:
    """Log expected client errors quietly and everything else loudly."""
    if isinstance(exception, (ValidationError, NotFoundError, ImportStateError, RequestValidationError)):
        logger.info(f"Expected exception: {exception}")
    else:
        logger.error(f"Exception: {exception}", exc_info=exception)


def error_to_dict(exception: WacontactsException) -> Dict[str, str]:
    """Compact code/message pair stored on a session after a failed step."""
    return {"code": exception.code, "message": exception.message}
