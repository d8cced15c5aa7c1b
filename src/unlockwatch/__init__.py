# unlockwatch.__init__ - core definitions and entry point
# Watches a logind session's lock state on the system bus, and runs a
# command every time the session is unlocked.

import os
import signal
import sys

# -----------------------------------------------------------------------------
# Exceptions

# Represents an expected failure mode, which is unlikely to be due to
# a bug in unlockwatch.  In this case, we do not need to print an
# exception stack trace; just print the error message and quit.
class UserError(Exception):
	pass

# -----------------------------------------------------------------------------
# Import unlockwatch modules
# Placed after the declarations above, so that they can be used by the
# imported modules.

import unlockwatch.config
from unlockwatch.logging import log
from unlockwatch.monitor import LockStateMonitor
from unlockwatch.session_id import SessionId
from unlockwatch.supervisor import ProcessSupervisor

# -----------------------------------------------------------------------------
# Commands

# Exit right away when receiving a SIGINT/SIGTERM.  A running unlock
# command is left alone, and so is the bus connection: closing it
# would wait for the bus thread, which may be stuck in a D-Bus call.
def signal_exit(signalnum, _frame):
	log.info('Got signal %r - exiting.', signal.strsignal(signalnum))
	unlockwatch.logging.flush()
	os._exit(0)

def get_session_id(args):
	if args:
		session_id = args[0]
	else:
		session_id = os.getenv('XDG_SESSION_ID')
		if session_id is None:
			raise UserError('No session ID given, and XDG_SESSION_ID is not set.')
	return SessionId.parse(session_id)

# Connect to the bus, and find the session we are asked about.
# The D-Bus bindings are only imported when they are needed.
def connect(session_id, configurator):
	import unlockwatch.bus
	import unlockwatch.logind

	bus = unlockwatch.bus.Bus()
	bus.connect()
	try:
		session = unlockwatch.logind.SessionHandle.resolve(bus, session_id, configurator.resolver)
	except BaseException:
		bus.close()
		raise
	return (bus, session)

def watch(args):
	session_id = get_session_id(args)
	configurator = unlockwatch.config.load()
	log.debug('Unlock command: %r', configurator.command)

	signal.signal(signal.SIGINT, signal_exit)
	signal.signal(signal.SIGTERM, signal_exit)

	(bus, session) = connect(session_id, configurator)
	try:
		monitor = LockStateMonitor(session, ProcessSupervisor(), configurator.command)
		monitor.run()
	finally:
		bus.close()

def status(args):
	session_id = get_session_id(args)
	configurator = unlockwatch.config.load()

	(bus, session) = connect(session_id, configurator)
	try:
		sys.stdout.write('Session: %s\nObject path: %s\nActive: %s\nLockedHint: %s\n' % (
			session_id,
			session.path,
			session.is_active(),
			session.is_locked(),
		))
	finally:
		bus.close()

def sessions(_args):
	import unlockwatch.bus
	import unlockwatch.logind

	bus = unlockwatch.bus.Bus()
	bus.connect()
	try:
		for session in bus.run_sync(lambda: unlockwatch.logind.list_sessions(bus.system_bus)):
			sys.stdout.write('\t'.join(str(field) for field in session) + '\n')
	finally:
		bus.close()

# -----------------------------------------------------------------------------
# Entry point

def main():
	args = sys.argv[1:]

	help_text = '''
Usage: unlockwatch COMMAND [SESSION_ID]

Commands:
  help         Print this message.
  watch        Run the unlock command whenever the session is unlocked.
  status       Print the session's current state.
  sessions     List logind sessions.

SESSION_ID defaults to the value of $XDG_SESSION_ID.
'''

	if not args:
		sys.stderr.write(help_text)
		return 2

	try:
		match args[0]:
			case 'help':
				sys.stdout.write(help_text)

			case 'watch':
				watch(args[1:])

			case 'status':
				status(args[1:])

			case 'sessions':
				sessions(args[1:])

			case _:
				log.critical('Unknown command: %r', args[0])
				return 1

		return 0

	except UserError as e:
		log.critical('Fatal error: %s', e)
		return 1
