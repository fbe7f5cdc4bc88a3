"""Owner bootstrap gate.

Controls creation of the single owner account and answers whether a
session belongs to the owner.
"""

from .component import (
    OWNER_EXISTS_MESSAGE,
    is_owner,
    require_owner,
    run_bootstrap,
    run_check_owner_status,
    run_complete_password_reset,
    run_password_reset,
    run_sign_in,
    run_sign_up,
)
from .models import (
    BootstrapInput,
    BootstrapOutput,
    BootstrapValidationError,
    OwnerStatus,
    PasswordResetInput,
    SignInInput,
    SignUpInput,
)
from .ports import AuthAdapterPort, SessionSourcePort
from .session import SessionContext

__all__ = [
    # Entry points
    "run_check_owner_status",
    "run_sign_up",
    "run_sign_in",
    "run_password_reset",
    "run_complete_password_reset",
    "run_bootstrap",
    "is_owner",
    "require_owner",
    "OWNER_EXISTS_MESSAGE",
    # Models
    "OwnerStatus",
    "SignUpInput",
    "SignInInput",
    "PasswordResetInput",
    "BootstrapInput",
    "BootstrapOutput",
    "BootstrapValidationError",
    # Session
    "SessionContext",
    # Ports
    "AuthAdapterPort",
    "SessionSourcePort",
]
