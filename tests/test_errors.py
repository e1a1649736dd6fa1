"""
Tests for the error taxonomy and event channel names.
"""
import pytest

from launchpad.domain.errors import (
    AppError,
    ConflictError,
    ErrorCode,
    FieldError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    UnauthenticatedError,
    ValidationFailedError,
)
from launchpad.domain.events import (
    Events,
    channel_name,
    comment_added_payload,
    startup_upvoted_payload,
)


class TestErrorKinds:
    """Each kind carries a stable code and status."""

    @pytest.mark.parametrize("error, code, status", [
        (NotFoundError("Startup", 1), ErrorCode.NOT_FOUND, 404),
        (ValidationFailedError([FieldError("name", "Name is required")]), ErrorCode.BAD_USER_INPUT, 400),
        (UnauthenticatedError(), ErrorCode.UNAUTHENTICATED, 401),
        (ForbiddenError(), ErrorCode.FORBIDDEN, 403),
        (ConflictError("Already exists"), ErrorCode.CONFLICT, 409),
        (InternalError(), ErrorCode.INTERNAL_SERVER_ERROR, 500),
    ])
    def test_code_and_status(self, error, code, status):
        assert isinstance(error, AppError)
        assert error.code == code
        assert error.status_code == status

    def test_each_code_has_one_kind(self):
        codes = [kind.code for kind in AppError.__subclasses__()]
        assert sorted(codes) == sorted(ErrorCode)

    def test_only_internal_error_is_unexpected(self):
        assert NotFoundError("Startup").expected
        assert ConflictError("taken").expected
        assert not InternalError().expected


class TestNotFoundError:

    def test_message_with_id(self):
        error = NotFoundError("Startup", "999")

        assert error.message == "Startup with id '999' not found"
        assert str(error) == error.message
        assert error.extensions() == {"resource": "Startup", "resourceId": "999"}

    def test_message_without_id(self):
        error = NotFoundError("Category")

        assert error.message == "Category not found"
        assert error.extensions() == {"resource": "Category"}

    def test_numeric_id_is_stringified(self):
        assert NotFoundError("Startup", 7).resource_id == "7"


class TestValidationFailedError:

    def test_carries_every_field_error(self):
        errors = [FieldError("name", "Name is required"), FieldError("url", "URL is required")]
        error = ValidationFailedError(errors)

        assert error.message == "Validation failed"
        assert error.errors == tuple(errors)
        assert error.extensions() == {"fieldErrors": [
            {"field": "name", "message": "Name is required"},
            {"field": "url", "message": "URL is required"},
        ]}

    def test_requires_at_least_one_error(self):
        with pytest.raises(ValueError):
            ValidationFailedError([])


class TestInternalError:

    def test_wraps_cause(self):
        cause = KeyError("missing")
        error = InternalError(cause)

        assert error.cause is cause
        assert error.__cause__ is cause
        assert error.message == "Internal server error"

    def test_string_cause(self):
        error = InternalError("pool exhausted")

        assert isinstance(error.cause, RuntimeError)
        assert str(error.cause) == "pool exhausted"

    def test_repr(self):
        assert repr(ConflictError("taken")) == "<ConflictError code=CONFLICT message='taken'>"


class TestChannelNames:
    """Channel naming for filtered subscriptions."""

    def test_global_channel(self):
        assert channel_name(Events.STARTUP_UPVOTED) == "STARTUP_UPVOTED"

    def test_keyed_channel(self):
        assert channel_name(Events.COMMENT_ADDED, 5) == "COMMENT_ADDED:5"
        assert channel_name(Events.COMMENT_ADDED, "s1") == "COMMENT_ADDED:s1"

    def test_empty_key_is_global(self):
        assert channel_name(Events.COMMENT_ADDED, "") == "COMMENT_ADDED"

    def test_event_required(self):
        with pytest.raises(ValueError):
            channel_name("")

    def test_payload_shapes(self):
        assert startup_upvoted_payload({"id": 1}) == {"startupUpvoted": {"id": 1}}
        assert comment_added_payload({"id": 2}) == {"commentAdded": {"id": 2}}
