import logging

import pytest

from codechat.common.logger import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_adds_file_handler(tmp_path, restore_root_logger):
    log_file = tmp_path / "codechat.log"

    setup_logging(log_file_path=log_file, verbose=True)
    logging.getLogger("codechat.test").debug("surface rebuilt")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert restore_root_logger.level == logging.DEBUG
    assert "surface rebuilt" in log_file.read_text(encoding="utf-8")


def test_setup_logging_from_yaml_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "from_config.log"
    config_path = tmp_path / "logging.yaml"
    config_path.write_text(
        "\n".join(
            [
                "version: 1",
                "disable_existing_loggers: false",
                "handlers:",
                "  file_handler:",
                "    class: logging.FileHandler",
                "    filename: placeholder.log",
                "    level: INFO",
                "root:",
                "  level: INFO",
                "  handlers: [file_handler]",
            ]
        ),
        encoding="utf-8",
    )

    setup_logging(config_file_path=config_path, log_file_path=log_file)
    logging.getLogger("codechat.test").info("configured from yaml")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert "configured from yaml" in log_file.read_text(encoding="utf-8")
