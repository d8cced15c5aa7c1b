# unlockwatch.monitor - reacts to the session being locked and unlocked
# Consumes the session's LockedHint change stream and drives the
# process supervisor accordingly.

from unlockwatch.logging import log

class LockStateMonitor:
	# session must provide is_active() and locked_hint_changes(), the
	# latter returning an iterable of booleans whose first item is the
	# current value (see unlockwatch.logind.SessionHandle).
	def __init__(self, session, supervisor, command):
		self.log = log.getChild('monitor')
		self.session = session
		self.supervisor = supervisor
		self.command = command

	def run(self):
		'''Process LockedHint changes until the stream ends.'''
		changes = iter(self.session.locked_hint_changes())

		# The first item is whatever the current state is, and not a
		# transition, so ignore it.
		next(changes, None)

		self.log.info('Watching LockedHint changes of session %s.', self.session)

		for locked in changes:
			self.handle_change(locked)

		self.log.info('LockedHint change stream ended.')

	def handle_change(self, locked):
		self.log.trace('LockedHint changed: %s', locked)

		# Events of a session in the background are ignored entirely,
		# including any supervision of a previously started command.
		if not self.session.is_active():
			self.log.debug('Ignoring LockedHint=%s of inactive session.', locked)
			return

		if not locked:
			self.log.info('Session unlocked.')
			self.supervisor.restart(self.command)
		elif self.supervisor.is_tracking():
			self.log.info('Session locked.')
			self.supervisor.reconcile()
		else:
			self.log.debug('Session locked, no unlock command to reconcile.')
