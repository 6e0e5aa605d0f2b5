"""Unit tests for the loguru logger adaptor."""

from loguru import logger as loguru_logger

from deployment_storage.observability.logger_adaptor import (
    StorageLogger,
    get_logger,
    setup_logging,
)


class TestLoggerAdaptor:
    def test_get_logger_is_cached(self):
        first = get_logger("deployment_storage.tests")

        assert isinstance(first, StorageLogger)
        assert get_logger("deployment_storage.tests") is first
        assert first.name == "deployment_storage.tests"

    def test_default_name(self):
        assert get_logger().name == "deployment_storage"

    def test_messages_carry_logger_name(self):
        messages = []
        sink_id = loguru_logger.add(
            lambda message: messages.append(message.record), level="DEBUG"
        )
        try:
            get_logger("deployment_storage.sink_test").info("uploading artifact")
        finally:
            loguru_logger.remove(sink_id)

        assert messages[-1]["message"] == "uploading artifact"
        assert messages[-1]["extra"]["logger_name"] == "deployment_storage.sink_test"

    def test_setup_logging_installs_single_sink(self):
        handler_id = setup_logging("debug")
        try:
            assert isinstance(handler_id, int)
        finally:
            loguru_logger.remove(handler_id)

    def test_error_messages_reach_sink(self):
        messages = []
        sink_id = loguru_logger.add(
            lambda message: messages.append(message.record), level="DEBUG"
        )
        try:
            get_logger("deployment_storage.sink_test").error("download timed out")
        finally:
            loguru_logger.remove(sink_id)

        assert messages[-1]["level"].name == "ERROR"
