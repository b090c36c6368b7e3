import logging

import pytest

from artifact_viewers.errors import (
    ArtifactViewerError,
    DimensionMismatchError,
    MetadataStoreError,
    MissingFieldError,
    PodNameError,
    ValidationError,
)
from artifact_viewers.logging_utils import (
    LoggingReporter,
    get_user_message,
    log_exception,
    parse_log_level,
    run_with_error_handling,
)


def test_user_message_defaults_to_message() -> None:
    exc = ArtifactViewerError("internal detail")
    assert get_user_message(exc) == "internal detail"

    exc = ArtifactViewerError("internal detail", user_message="Try again later.")
    assert get_user_message(exc) == "Try again later."


def test_unexpected_error_message() -> None:
    assert get_user_message(RuntimeError("boom")) == "Unexpected error: boom"


def test_error_hierarchy() -> None:
    assert issubclass(MissingFieldError, ValidationError)
    assert issubclass(PodNameError, ValidationError)
    assert issubclass(DimensionMismatchError, ValidationError)


def test_metadata_store_error_carries_stage() -> None:
    exc = MetadataStoreError("Failed to get_artifact_types: down", stage="catalog")
    assert exc.context == {"stage": "catalog"}
    assert exc.log_message().endswith("{'stage': 'catalog'}")


def test_log_exception_hides_traceback_by_default(caplog) -> None:
    logger = logging.getLogger("artifact_viewers.test")
    with caplog.at_level(logging.INFO, logger="artifact_viewers.test"):
        message = log_exception(logger, ValidationError("bad pod"))

    assert message == "bad pod"
    assert [record.levelno for record in caplog.records] == [logging.ERROR]
    assert caplog.records[0].exc_info is None


def test_run_with_error_handling_logs_and_reraises(caplog) -> None:
    logger = logging.getLogger("artifact_viewers.test")

    def _fail() -> None:
        raise ValidationError("bad input", user_message="Input was rejected.")

    with caplog.at_level(logging.ERROR, logger="artifact_viewers.test"):
        with pytest.raises(ValidationError):
            run_with_error_handling(_fail, logger=logger)

    assert "Input was rejected." in caplog.text


def test_logging_reporter_levels(caplog) -> None:
    reporter = LoggingReporter(logging.getLogger("artifact_viewers.test"))
    with caplog.at_level(logging.DEBUG, logger="artifact_viewers.test"):
        reporter.report("debug", "quiet")
        reporter.report("warning", "careful")

    assert [(record.levelno, record.getMessage()) for record in caplog.records] == [
        (logging.DEBUG, "quiet"),
        (logging.WARNING, "careful"),
    ]

    with pytest.raises(ValueError):
        reporter.report("fatal", "nope")


@pytest.mark.parametrize(
    ("value", "expected"),
    [("info", logging.INFO), (" DEBUG ", logging.DEBUG), (logging.ERROR, logging.ERROR)],
)
def test_parse_log_level(value, expected: int) -> None:
    assert parse_log_level(value) == expected


def test_parse_log_level_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        parse_log_level("loud")
