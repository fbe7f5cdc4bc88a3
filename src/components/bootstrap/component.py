"""Owner bootstrap gate.

Exactly one owner account may ever exist. The gate reports whether sign-up
is still open, refuses sign-up once an account exists, and treats any
authenticated session as the owner. It can also create the owner headlessly
from environment credentials on first start.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from urllib.parse import urlsplit

from src.core.ports.auth import AccountExistsError, AuthError, AuthUnavailableError
from src.domain.entities import Session
from src.domain.errors import AuthorizationError, StoreError, ValidationError
from src.rules.models import OwnerRules

from .models import (
    BootstrapInput,
    BootstrapOutput,
    BootstrapValidationError,
    OwnerStatus,
    PasswordResetInput,
    SignInInput,
    SignUpInput,
)
from .ports import AuthAdapterPort

logger = logging.getLogger(__name__)

OWNER_EXISTS_MESSAGE = "Account creation is not allowed. An owner account already exists."


def run_check_owner_status(auth: AuthAdapterPort) -> OwnerStatus:
    """Report whether the owner account can still be created.

    Fails closed: if the account count cannot be read, sign-up is reported
    as not allowed and the error is carried on the status.
    """
    try:
        count = auth.count_accounts()
    except Exception as e:
        logger.error("Owner status check failed: %s", e)
        return OwnerStatus.fail_closed(str(e) or "Unable to check owner status")

    return OwnerStatus(can_signup=count == 0, user_count=count)


def is_owner(session: Session | None) -> bool:
    """Any authenticated session belongs to the owner."""
    return session is not None


def require_owner(session: Session | None) -> Session:
    """Return the owner session or raise AuthorizationError."""
    if session is None or not is_owner(session):
        raise AuthorizationError()
    return session


def _validate_sign_up(data: SignUpInput, rules: OwnerRules) -> None:
    missing = [
        name
        for name, value in (("email", data.email), ("password", data.password))
        if not value or not value.strip()
    ]
    if missing:
        raise ValidationError(missing)

    if len(data.password) < rules.password_min_length:
        raise ValidationError(
            invalid_fields=["password"],
            message=f"Password must be at least {rules.password_min_length} characters",
        )
    if data.confirm_password is not None and data.confirm_password != data.password:
        raise ValidationError(
            invalid_fields=["confirm_password"], message="Passwords do not match"
        )


def run_sign_up(data: SignUpInput, auth: AuthAdapterPort, rules: OwnerRules) -> Session:
    """Create the owner account if none exists yet.

    Args:
        data: Email, password and optional confirmation.
        auth: Auth service holding the accounts.
        rules: Owner configuration (password policy).

    Returns:
        The new owner's session.

    Raises:
        ValidationError: Input is incomplete or the password is rejected.
        AuthorizationError: An owner already exists, or the gate could not
            confirm that none does.
        StoreError: The account store failed during the insert.
    """
    _validate_sign_up(data, rules)

    status = run_check_owner_status(auth)
    if status.error is not None:
        raise AuthorizationError(f"Unable to verify owner status: {status.error}")
    if not status.can_signup:
        logger.warning("Rejected sign-up attempt: owner already exists")
        raise AuthorizationError(OWNER_EXISTS_MESSAGE)

    try:
        session = auth.sign_up(data.email.strip(), data.password)
    except AccountExistsError as e:
        # Lost the race against a concurrent sign-up
        logger.warning("Sign-up lost race to another account creation")
        raise AuthorizationError(OWNER_EXISTS_MESSAGE) from e
    except AuthUnavailableError as e:
        raise StoreError(e.args[0]) from e

    logger.info("Owner account created for %s", session.email)
    return session


def run_sign_in(data: SignInInput, auth: AuthAdapterPort) -> Session:
    if not data.email or not data.password:
        raise ValidationError(
            [n for n, v in (("email", data.email), ("password", data.password)) if not v]
        )
    try:
        return auth.sign_in(data.email.strip(), data.password)
    except AuthUnavailableError as e:
        raise StoreError(e.args[0]) from e
    except AuthError as e:
        raise AuthorizationError(str(e)) from e


def _origin(url: str) -> str | None:
    """scheme://host[:port] of an http(s) URL, lower-cased; None otherwise."""
    parts = urlsplit(url.strip())
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        return None
    return f"{parts.scheme.lower()}://{parts.netloc.lower()}"


def run_password_reset(
    data: PasswordResetInput, auth: AuthAdapterPort, allowed_origins: Iterable[str]
) -> None:
    """Send a reset link; the response is the same for unknown addresses.

    The link target must be on one of allowed_origins; the emailed link
    carries a live reset token.
    """
    if not data.email or not data.email.strip():
        raise ValidationError(["email"])
    origin = _origin(data.redirect_to)
    if origin is None or origin not in {_origin(o) for o in allowed_origins}:
        logger.warning("Password reset refused for redirect %r", data.redirect_to)
        raise ValidationError(invalid_fields=["redirect_to"])
    try:
        auth.send_password_reset(data.email.strip(), data.redirect_to)
    except AuthUnavailableError as e:
        raise StoreError(e.args[0]) from e


def run_complete_password_reset(
    token: str, new_password: str, auth: AuthAdapterPort, rules: OwnerRules
) -> None:
    if not token:
        raise ValidationError(["token"])
    if not new_password or len(new_password) < rules.password_min_length:
        raise ValidationError(
            invalid_fields=["password"],
            message=f"Password must be at least {rules.password_min_length} characters",
        )
    try:
        auth.complete_password_reset(token, new_password)
    except AuthUnavailableError as e:
        raise StoreError(e.args[0]) from e
    except AuthError as e:
        raise AuthorizationError(str(e)) from e


def _validate_bootstrap_input(
    bootstrap_input: BootstrapInput, rules: OwnerRules
) -> tuple[BootstrapValidationError, ...]:
    errors: list[BootstrapValidationError] = []

    email = bootstrap_input.bootstrap_email or ""
    if "@" not in email:
        errors.append(
            BootstrapValidationError(
                code="INVALID_EMAIL",
                message="Bootstrap email is not a valid address",
                field="bootstrap_email",
            )
        )

    password = bootstrap_input.bootstrap_password or ""
    if len(password) < rules.password_min_length:
        errors.append(
            BootstrapValidationError(
                code="WEAK_PASSWORD",
                message=(
                    "Bootstrap password must be at least "
                    f"{rules.password_min_length} characters"
                ),
                field="bootstrap_password",
            )
        )

    return tuple(errors)


def run_bootstrap(
    bootstrap_input: BootstrapInput,
    auth: AuthAdapterPort,
    rules: OwnerRules,
) -> BootstrapOutput:
    """Create the owner from environment credentials on an empty system.

    Args:
        bootstrap_input: Email and password for the owner account.
        auth: Auth service holding the accounts.
        rules: Owner configuration.

    Returns:
        BootstrapOutput with the result of the operation.
    """
    if not rules.bootstrap_from_env:
        return BootstrapOutput.skipped("Bootstrap is not enabled in rules")

    status = run_check_owner_status(auth)
    if status.error is not None:
        return BootstrapOutput.skipped(f"Owner status unavailable: {status.error}")
    if not status.can_signup:
        return BootstrapOutput.skipped("Owner account already exists")

    if not bootstrap_input.bootstrap_email or not bootstrap_input.bootstrap_password:
        return BootstrapOutput.skipped(
            "Bootstrap email and/or password not provided. "
            "Set FOLIO_BOOTSTRAP_EMAIL and FOLIO_BOOTSTRAP_PASSWORD environment variables."
        )

    validation_errors = _validate_bootstrap_input(bootstrap_input, rules)
    if validation_errors:
        return BootstrapOutput.failed(validation_errors)

    try:
        session = auth.sign_up(
            bootstrap_input.bootstrap_email.strip(), bootstrap_input.bootstrap_password
        )
    except AccountExistsError:
        return BootstrapOutput.skipped("Owner account already exists")

    logger.info("Bootstrapped owner account %s", session.email)
    return BootstrapOutput.created_owner(session)
