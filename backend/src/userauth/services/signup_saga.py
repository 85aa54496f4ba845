"""Sign-up workflow with best-effort compensation.

Signing up creates the Cognito user first and the profile row second.
The two writes cannot be committed atomically, so a failed profile write
is followed by at most one attempt to delete the Cognito user again.

State transitions::

    STARTED --provider create--> PROVIDER_CREATED
    PROVIDER_CREATED --profile write--> LOCALLY_PERSISTED
    PROVIDER_CREATED --profile write fails, delete--> COMPENSATION_ATTEMPTED

A provider create failure propagates to the caller unchanged while the
saga is still STARTED; nothing needs undoing at that point.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from dataclasses import field
from typing import Optional
from typing import Protocol

from userauth.exceptions import IdentityProviderError
from userauth.identity.cognito import Registration
from userauth.store.models import UserProfile
from userauth.utils.logging import get_logger
from userauth.utils.logging import mask_email

logger = get_logger(__name__)


class SignUpState(str, enum.Enum):
    STARTED = "STARTED"
    PROVIDER_CREATED = "PROVIDER_CREATED"
    LOCALLY_PERSISTED = "LOCALLY_PERSISTED"
    COMPENSATION_ATTEMPTED = "COMPENSATION_ATTEMPTED"


class SignUpOutcome(str, enum.Enum):
    """Terminal outcomes of a sign up that got past the provider create."""

    SUCCEEDED = "SUCCEEDED"
    # Cognito user exists without a profile; manual cleanup required.
    USER_CREATED_IN_COGNITO_BUT_DB_WRITE_FAILED = "UserCreatedInCognitoButDbWriteFailed"
    # Delete failed too; manual cleanup required.
    DB_WRITE_FAILED_AND_ROLLBACK_FAILED = "DbWriteFailedAndRollbackFailed"
    # Cognito user removed again; the caller may retry from scratch.
    USER_ROLLED_BACK_AFTER_DB_WRITE_FAILURE = "UserRolledBackAfterDbWriteFailure"


class IdentityProvider(Protocol):
    @property
    def can_delete_users(self) -> bool: ...

    def sign_up(self, email: str, password: str, full_name: str) -> Registration: ...

    def admin_delete_user(self, email: str) -> None: ...


class ProfileWriter(Protocol):
    def create(self, email: str, full_name: str) -> UserProfile: ...


@dataclass
class SignUpResult:
    outcome: SignUpOutcome
    registration: Registration
    profile: Optional[UserProfile] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is SignUpOutcome.SUCCEEDED


@dataclass
class SignUpSaga:
    """Run one sign up through provider create, profile write and rollback.

    A saga instance is single-use; ``states`` records every state it has
    entered, in order.
    """

    identity_provider: IdentityProvider
    user_store: ProfileWriter
    states: list[SignUpState] = field(default_factory=lambda: [SignUpState.STARTED])

    @property
    def state(self) -> SignUpState:
        return self.states[-1]

    def _enter(self, state: SignUpState) -> None:
        self.states.append(state)

    def run(self, email: str, password: str, full_name: str) -> SignUpResult:
        """Execute the saga.

        Raises:
            IdentityProviderError: If the provider rejects the sign up.
        """
        if self.state is not SignUpState.STARTED:
            raise RuntimeError(f"Sign-up saga already ran (state {self.state.value})")

        registration = self.identity_provider.sign_up(email, password, full_name)
        self._enter(SignUpState.PROVIDER_CREATED)

        try:
            profile = self.user_store.create(email, full_name)
        except Exception:
            logger.error(
                f"Profile write failed after Cognito sign up for {mask_email(email)}",
                extra={"user_sub": registration.user_sub},
                exc_info=True,
            )
            return SignUpResult(
                outcome=self._compensate(email, registration),
                registration=registration,
            )

        self._enter(SignUpState.LOCALLY_PERSISTED)
        return SignUpResult(
            outcome=SignUpOutcome.SUCCEEDED,
            registration=registration,
            profile=profile,
        )

    def _compensate(self, email: str, registration: Registration) -> SignUpOutcome:
        if not self.identity_provider.can_delete_users:
            logger.error(
                "Cannot roll back Cognito user: USER_POOL_ID is not configured",
                extra={"user_sub": registration.user_sub},
            )
            return SignUpOutcome.USER_CREATED_IN_COGNITO_BUT_DB_WRITE_FAILED

        self._enter(SignUpState.COMPENSATION_ATTEMPTED)
        try:
            self.identity_provider.admin_delete_user(email)
        except Exception as exc:
            code = exc.code if isinstance(exc, IdentityProviderError) else type(exc).__name__
            logger.error(
                "Rollback of Cognito user failed",
                extra={"user_sub": registration.user_sub, "error_code": code},
            )
            return SignUpOutcome.DB_WRITE_FAILED_AND_ROLLBACK_FAILED

        logger.warning(
            "Rolled back Cognito user after profile write failure",
            extra={"user_sub": registration.user_sub},
        )
        return SignUpOutcome.USER_ROLLED_BACK_AFTER_DB_WRITE_FAILURE
