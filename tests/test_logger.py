from mikankernel.logger import Logger, LogLevel


def make_logger(level=LogLevel.WARN):
    lines = []
    return Logger(lines.append, level), lines


def test_levels_filter_by_numeric_priority():
    logger, lines = make_logger(LogLevel(6))
    assert logger.level == LogLevel.INFO
    assert logger.log(LogLevel(3), "e\n") == 2
    assert logger.log(LogLevel(4), "w\n") == 2
    assert logger.log(LogLevel(6), "i\n") == 2
    assert logger.log(LogLevel(7), "d\n") == 0
    assert lines == ["e\n", "w\n", "i\n"]


def test_default_threshold_is_warn():
    lines = []
    logger = Logger(lines.append)
    assert logger.log(LogLevel.DEBUG, "hidden\n") == 0
    assert logger.log(LogLevel.WARN, "shown\n") == len("shown\n")
    assert lines == ["shown\n"]


def test_error_is_formatted():
    logger, lines = make_logger()
    written = logger.log(LogLevel.ERROR, "value %d at %s\n", 42, "here")
    assert lines == ["value 42 at here\n"]
    assert written == len(lines[0])


def test_filtered_message_not_written():
    logger, lines = make_logger(LogLevel.ERROR)
    assert logger.log(LogLevel.INFO, "info %d\n", 1) == 0
    assert lines == []


def test_set_level_enables_debug():
    logger, lines = make_logger()
    logger.set_level(LogLevel.DEBUG)
    logger.log(LogLevel.DEBUG, "dbg %x\n", 255)
    assert lines == ["dbg ff\n"]
    assert logger.level == LogLevel.DEBUG