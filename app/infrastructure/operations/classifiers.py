"""Error classifiers for provider exceptions.

Converts transport-specific exceptions (AWS SDK, Twilio REST client) into
standardized OperationResult objects so every notification provider reports
failures the same way.

Key Functions:
- classify_aws_error(): SES/SNS errors → OperationResult
- classify_twilio_error(): Twilio REST errors → OperationResult

Usage:
    from infrastructure.operations.classifiers import classify_aws_error

    try:
        response = sns_client.publish(PhoneNumber=phone, Message=body)
    except (ClientError, BotoCoreError) as exc:
        return classify_aws_error(exc)
"""

from botocore.exceptions import ClientError
from twilio.base.exceptions import TwilioRestException

from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

# SES v2 and SNS codes that mean "slow down"
AWS_THROTTLING_CODES = frozenset(
    {
        "Throttling",
        "ThrottlingException",
        "ThrottledException",
        "TooManyRequestsException",
        "LimitExceededException",
        "KMSThrottlingException",
        "RequestLimitExceeded",
    }
)

AWS_ACCESS_DENIED_CODES = frozenset(
    {
        "AccessDeniedException",
        "AuthorizationErrorException",
        "UnauthorizedOperation",
        "AccountSuspendedException",
    }
)

AWS_INVALID_REQUEST_CODES = frozenset(
    {
        "ValidationException",
        "InvalidParameterException",
        "InvalidParameterValueException",
        "BadRequestException",
        "MessageRejected",
        "MailFromDomainNotVerifiedException",
    }
)


def classify_aws_error(exc: Exception) -> OperationResult:
    """Classify AWS SDK errors into OperationResult.

    Handles botocore.exceptions.ClientError exceptions by mapping AWS error
    codes to appropriate OperationStatus values. Follows AWS SDK convention
    of treating unknown errors as transient (retry by default).

    Error Code Mapping:
    - Throttling family: → TRANSIENT_ERROR with retry_after
    - Access denied / suspended account: → UNAUTHORIZED
    - NotFoundException / ResourceNotFoundException: → NOT_FOUND
    - Validation / rejected message: → PERMANENT_ERROR
    - Other: → TRANSIENT_ERROR (AWS convention)

    Args:
        exc: Exception raised by boto3/botocore

    Returns:
        OperationResult with appropriate status, message, error_code, and
        retry_after (if applicable)

    Example:
        try:
            ses_client.send_email(**request)
        except (ClientError, BotoCoreError) as e:
            return classify_aws_error(e)
    """
    if not isinstance(exc, ClientError):
        # BotoCoreError (endpoint, credentials, timeout) and friends
        return OperationResult.transient_error(
            f"AWS connection error: {type(exc).__name__}: {str(exc)}",
            error_code="CONNECTION_ERROR",
        )

    error_info = exc.response.get("Error", {}) if exc.response else {}
    error_code = error_info.get("Code", "Unknown")
    error_message = error_info.get("Message") or str(exc)

    if error_code in AWS_THROTTLING_CODES:
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            f"AWS API throttled: {error_message}",
            error_code="RATE_LIMITED",
            retry_after=60,
        )

    if error_code in AWS_ACCESS_DENIED_CODES:
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            f"AWS API access denied: {error_message}",
            error_code="FORBIDDEN",
        )

    if error_code in ("NotFoundException", "ResourceNotFoundException"):
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            f"AWS resource not found: {error_message}",
            error_code="NOT_FOUND",
        )

    if error_code in AWS_INVALID_REQUEST_CODES:
        return OperationResult.permanent_error(
            f"AWS rejected request ({error_code}): {error_message}",
            error_code="INVALID_REQUEST",
        )

    return OperationResult.transient_error(
        f"AWS API error ({error_code}): {error_message}",
        error_code=error_code,
    )


def classify_twilio_error(exc: Exception) -> OperationResult:
    """Classify Twilio REST client errors into OperationResult.

    Status Code Mapping:
    - 429: Rate limiting → TRANSIENT_ERROR with retry_after
    - 401/403: Bad credentials → UNAUTHORIZED
    - 404: → NOT_FOUND
    - 5xx: → TRANSIENT_ERROR
    - Other 4xx (invalid number, unverified sender): → PERMANENT_ERROR

    Args:
        exc: Exception raised by twilio.rest.Client

    Returns:
        OperationResult describing the failure
    """
    if not isinstance(exc, TwilioRestException):
        return OperationResult.transient_error(
            f"Twilio connection error: {type(exc).__name__}: {str(exc)}",
            error_code="CONNECTION_ERROR",
        )

    status_code = exc.status
    detail = exc.msg or str(exc)
    if exc.code:
        detail = f"{detail} (twilio code {exc.code})"

    if status_code == 429:
        return OperationResult.error(
            OperationStatus.TRANSIENT_ERROR,
            "Twilio API rate limited",
            error_code="RATE_LIMITED",
            retry_after=60,
        )

    if status_code in (401, 403):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED,
            f"Twilio authentication failed: {detail}",
            error_code="UNAUTHORIZED",
        )

    if status_code == 404:
        return OperationResult.error(
            OperationStatus.NOT_FOUND,
            f"Twilio resource not found: {detail}",
            error_code="NOT_FOUND",
        )

    if status_code and 500 <= status_code < 600:
        return OperationResult.transient_error(
            f"Twilio server error ({status_code}): {detail}",
            error_code="SERVER_ERROR",
        )

    return OperationResult.permanent_error(
        f"Twilio client error ({status_code}): {detail}",
        error_code="HTTP_ERROR",
    )
