# unlockwatch.logging - logging setup
# Messages go to stderr, filtered by UNLOCKWATCH_VERBOSE, and, when the
# systemd Python bindings are installed, to the journal at DEBUG level.

import logging
import os

try:
	from systemd.journal import JournalHandler
except ImportError:
	# Journal output is optional (the "journal" extra).
	JournalHandler = None

# Raw bus traffic is logged below DEBUG.
TRACE = logging.DEBUG - 5

logging.addLevelName(TRACE, 'TRACE')

class Logger(logging.getLoggerClass()):
	def trace(self, *args, **kwargs):
		self.log(TRACE, *args, **kwargs)

logging.setLoggerClass(Logger)

# UNLOCKWATCH_VERBOSE=0 is INFO; each step up or down moves one level.
LEVELS = [
	logging.CRITICAL,
	logging.ERROR,
	logging.WARNING,
	logging.INFO,
	logging.DEBUG,
	TRACE,
]

def get_stderr_level():
	return LEVELS[max(0, min(len(LEVELS) - 1, 3 + int(os.getenv('UNLOCKWATCH_VERBOSE', '0'))))]

# Send DEBUG and above to the journal, independently of the stderr
# threshold.  Returns the added handler, or None.
def add_journal_handler(logger, handler_class=None):
	if handler_class is None:
		handler_class = JournalHandler
	if handler_class is None or os.getenv('UNLOCKWATCH_JOURNAL', '1') == '0':
		return None
	handler = handler_class(SYSLOG_IDENTIFIER='unlockwatch')
	handler.setLevel(logging.DEBUG)
	logger.addHandler(handler)
	# The logger itself must let DEBUG through; the stderr handler
	# keeps its own threshold.
	logger.setLevel(min(logger.getEffectiveLevel(), logging.DEBUG))
	return handler

stderr_handler = logging.StreamHandler()
stderr_handler.setLevel(get_stderr_level())

logging.basicConfig(
	format=os.getenv('UNLOCKWATCH_LOG_FORMAT', '%(name)s: %(message)s'),
	level=get_stderr_level(),
	handlers=[stderr_handler],
)
log = logging.getLogger('unlockwatch')
add_journal_handler(log)

# Flush pending output, for exits which skip the interpreter's cleanup.
def flush():
	for handler in logging.getLogger().handlers + log.handlers:
		handler.flush()
