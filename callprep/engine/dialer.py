"""Call preparation service.

Entry point for "click to call": normalizes the number, makes sure the
auth token is fresh, resolves dial strategies, and returns a descriptor
the UI can act on. Also exposes the integration status query.

Nothing here places a call or writes a call record. The UI opens one of
the returned URIs and separately hands a CallAttempt to the call log via
record_attempt().

Usage:
    from callprep.engine.dialer import CallRequest, CallService

    service = CallService.from_config(config)
    response = service.prepare_call(CallRequest(phone_number="954-793-9065", user_id=1))
    print(response.dial_string)
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from callprep.core.config import Config
from callprep.core.exceptions import CallLogError, ValidationError
from callprep.core.logging import get_logger, mask_phone
from callprep.core.phone import NormalizedPhone, normalize_phone
from callprep.engine.call_log import CallAttempt, CallLogRecorder
from callprep.engine.strategies import (
    DialStrategy,
    StrategyKind,
    StrategyResolver,
    generate_call_id,
)
from callprep.integrations.status import IntegrationStatus, StatusReporter
from callprep.integrations.token import TokenManager

logger = get_logger(__name__)

STATUS_READY = "ready"
STATUS_FALLBACK = "fallback"


@dataclass
class CallRequest:
    """A user's request to call a number.

    Attributes:
        phone_number: Raw number as typed or stored
        user_id: User placing the call
        contact_name: Contact being called
        extension: Extension dialed after connect
    """

    phone_number: str
    user_id: int = 1
    contact_name: Optional[str] = None
    extension: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CallRequest":
        """Build from a camelCase request body.

        Raises:
            ValidationError: If userId is present but not an integer
        """
        try:
            user_id = int(data.get("userId") or 1)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"userId must be an integer, got {data.get('userId')!r}") from e
        return cls(
            phone_number=str(data.get("phoneNumber") or ""),
            user_id=user_id,
            contact_name=data.get("contactName") or None,
            extension=data.get("extension") or None,
        )


@dataclass
class CallDescriptor:
    """Request-scoped result of resolving a call.

    Attributes:
        call_id: Correlates this preparation with a later log entry
        normalized_phone: Canonical and display forms
        strategies: Ordered dial strategies (at least one)
        status: "ready" or "fallback"
        message: Human-readable summary
    """

    call_id: str
    normalized_phone: NormalizedPhone
    strategies: list[DialStrategy]
    status: str
    message: str


@dataclass
class CallResponse:
    """What prepare_call hands back to the UI.

    Attributes:
        success: Always True; preparation degrades instead of failing
        call_id: Correlation id
        strategies: Ordered dial strategies
        dial_string: URI of the first strategy
        display_number: Formatted number
        message: Human-readable summary
        status: "ready" or "fallback"
        instructions: One line per strategy, in order
    """

    success: bool
    call_id: str
    strategies: list[DialStrategy]
    dial_string: str
    display_number: str
    message: str
    status: str
    instructions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Wire shape for JSON responses."""
        return {
            "success": self.success,
            "callId": self.call_id,
            "strategies": [s.to_dict() for s in self.strategies],
            "dialString": self.dial_string,
            "displayNumber": self.display_number,
            "message": self.message,
            "status": self.status,
            "instructions": list(self.instructions),
        }


class CallService:
    """Prepares outbound calls and reports integration status.

    Construct once in the composition root and share. The only state is
    the token cache inside the TokenManager.
    """

    def __init__(
        self,
        tokens: TokenManager,
        resolver: StrategyResolver,
        reporter: StatusReporter,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._tokens = tokens
        self._resolver = resolver
        self._reporter = reporter
        self._clock = clock

    @classmethod
    def from_config(cls, config: Config, clock: Callable[[], float] = time.time) -> "CallService":
        """Wire up the default collaborators from a Config."""
        tokens = TokenManager(config, clock=clock)
        return cls(
            tokens=tokens,
            resolver=StrategyResolver(config, tokens, clock=clock),
            reporter=StatusReporter(config, tokens),
            clock=clock,
        )

    def prepare_call(self, request: CallRequest) -> CallResponse:
        """Turn a call request into a ready-to-dial response.

        Never raises for bad input or missing credentials: an unparseable
        number still yields a tel: link, and missing credentials reduce
        the strategies to tel: alone.

        Args:
            request: Number, contact and user

        Returns:
            CallResponse with at least one strategy
        """
        descriptor = self.describe_call(request)
        response = CallResponse(
            success=True,
            call_id=descriptor.call_id,
            strategies=descriptor.strategies,
            dial_string=descriptor.strategies[0].uri,
            display_number=descriptor.normalized_phone.display,
            message=descriptor.message,
            status=descriptor.status,
            instructions=self._instructions(descriptor.strategies),
        )

        logger.info(
            "Call prepared",
            extra={
                "context": {
                    "call_id": descriptor.call_id,
                    "user_id": request.user_id,
                    "phone": mask_phone(descriptor.normalized_phone.canonical),
                    "status": descriptor.status,
                    "strategies": [s.kind.value for s in descriptor.strategies],
                }
            },
        )
        return response

    def describe_call(self, request: CallRequest) -> CallDescriptor:
        """Resolve a request into a CallDescriptor."""
        phone = normalize_phone(request.phone_number)
        if not phone.canonical:
            logger.warning("Call requested with no dialable digits")

        if self._resolver.provider_enabled:
            # Keep the cached token current.
            self._tokens.ensure_valid_token()

        strategies = self._resolver.resolve(phone, request.contact_name, request.extension)
        provider_links = any(s.kind is not StrategyKind.DIRECT_TEL for s in strategies)
        status = STATUS_READY if provider_links else STATUS_FALLBACK

        target = request.contact_name or phone.display or "unknown number"
        message = f"Call ready for {target}"
        if not provider_links:
            if self._resolver.provider_enabled:
                message += " (MightyCall links unavailable for this number; dial directly)"
            else:
                message += " (MightyCall not configured; dial directly)"

        return CallDescriptor(
            call_id=generate_call_id(clock=self._clock),
            normalized_phone=phone,
            strategies=strategies,
            status=status,
            message=message,
        )

    def get_status(self) -> IntegrationStatus:
        """Fresh integration status. Never raises."""
        return self._reporter.get_status()

    def status_instructions(self, status: Optional[IntegrationStatus] = None) -> list[str]:
        """Guidance lines for the given (or a freshly probed) status."""
        return self._reporter.instructions_for(status or self.get_status())

    def record_attempt(
        self,
        response: CallResponse,
        request: CallRequest,
        recorder: CallLogRecorder,
        outcome: str = "initiated",
    ) -> CallAttempt:
        """Hand a prepared call to the call log.

        Separate from prepare_call so a broken call log never blocks dialing.

        Args:
            response: Result of prepare_call
            request: The original request
            recorder: Call log store
            outcome: Initial outcome label

        Returns:
            The recorded attempt

        Raises:
            CallLogError: If the recorder fails
        """
        contact = request.contact_name or ""
        attempt = CallAttempt(
            call_id=response.call_id,
            user_id=request.user_id,
            contact_name=contact,
            phone_number=response.display_number,
            outcome=outcome,
            notes=f"Call to {contact or response.display_number} via MightyCall",
        )
        try:
            recorder.record(attempt)
        except Exception as e:
            logger.error(
                f"Failed to record call attempt: {e}",
                extra={"context": {"call_id": response.call_id}},
            )
            raise CallLogError(f"Failed to record call {response.call_id}: {e}") from e
        return attempt

    @staticmethod
    def _instructions(strategies: list[DialStrategy]) -> list[str]:
        return [f"{s.priority}. {s.kind.label}: {s.uri}" for s in strategies]
