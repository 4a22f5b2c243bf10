"""SparkMail Python SDK - Suppression list and subaccount management."""

import logging

__version__ = "0.1.0"

from .client import SparkMailClient
from .models import (
    AVAILABLE_GRANTS,
    VALID_STATUSES,
    ErrorDetail,
    Subaccount,
    SuppressionEntry,
    SuppressionListWrapper,
    default_grants,
    is_valid_grant,
    is_valid_status,
)
from .response import Response
from .exceptions import (
    SparkMailError,
    ConfigurationError,
    InvalidArgumentError,
    TransportError,
    FormatError,
    UnexpectedResponseError,
    APIError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    SubaccountInUseError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "SparkMailClient",
    "Response",
    "Subaccount",
    "SuppressionEntry",
    "SuppressionListWrapper",
    "ErrorDetail",
    "AVAILABLE_GRANTS",
    "VALID_STATUSES",
    "default_grants",
    "is_valid_grant",
    "is_valid_status",
    "SparkMailError",
    "ConfigurationError",
    "InvalidArgumentError",
    "TransportError",
    "FormatError",
    "UnexpectedResponseError",
    "APIError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "SubaccountInUseError",
]
