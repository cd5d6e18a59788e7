"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    kind = "app_error"

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    kind = "validation_error"

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class Unauthenticated(AppError):
    """Raised when a mutation is attempted without a caller identity."""

    kind = "unauthenticated"

    def __init__(self, message="Not authenticated."):
        """Initialize the error."""
        super().__init__(message, 401)


class Unauthorized(AppError):
    """Raised when the caller lacks membership or a required role."""

    kind = "unauthorized"

    def __init__(self, message="Not authorized."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotAMember(Unauthorized):
    """Raised when the caller is not a member of the group."""

    kind = "not_a_member"

    def __init__(self, message="Not a member of this group."):
        """Initialize the error."""
        super().__init__(message)


class NotGroupCreator(Unauthorized):
    """Raised when an action is reserved to the group's creator."""

    kind = "not_group_creator"

    def __init__(self, message="Only the group creator can invite members."):
        """Initialize the error."""
        super().__init__(message)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    kind = "not_found"

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class GroupNotFound(NotFoundError):
    """Raised when a group does not exist."""

    kind = "group_not_found"

    def __init__(self, message="Group not found."):
        """Initialize the error."""
        super().__init__(message)


class NotificationNotFound(NotFoundError):
    """Raised when a notification does not exist or belongs to someone else."""

    kind = "notification_not_found"

    def __init__(self, message="Notification not found."):
        """Initialize the error."""
        super().__init__(message)


class InvitationNotFound(NotFoundError):
    """Raised when no invitation matches a code."""

    kind = "invitation_not_found"

    def __init__(self, message="Invitation code not found."):
        """Initialize the error."""
        super().__init__(message)


class InvalidState(AppError):
    """Raised when the current state does not allow the requested transition."""

    kind = "invalid_state"

    def __init__(self, message="Invalid state.", status_code=409):
        """Initialize the error."""
        super().__init__(message, status_code)


class NotYourTurn(InvalidState):
    """Raised when someone other than the turn-holder tries to write or pass."""

    kind = "not_your_turn"

    def __init__(self, message="Not your turn to write."):
        """Initialize the error."""
        super().__init__(message)


class AlreadyMember(InvalidState):
    """Raised when redeeming an invitation for a group the user already belongs to."""

    kind = "already_member"

    def __init__(self, message="Already a member of this group."):
        """Initialize the error."""
        super().__init__(message)


class InvitationAlreadyUsed(InvalidState):
    """Raised when an invitation has already been accepted or declined."""

    kind = "invitation_already_used"

    def __init__(self, message="This invitation has already been used."):
        """Initialize the error."""
        super().__init__(message)


class InvitationExpired(InvalidState):
    """Raised when an invitation is past its expiry."""

    kind = "invitation_expired"

    def __init__(self, message="This invitation has expired."):
        """Initialize the error."""
        super().__init__(message, 410)


class InviteCodeCollision(InvalidState):
    """Raised when no unused invite code could be generated."""

    kind = "invite_code_collision"

    def __init__(self, message="Could not generate a unique invite code."):
        """Initialize the error."""
        super().__init__(message, 503)


class AIServiceError(Exception):
    """Raised by the completion client when the AI service cannot answer."""

    pass
