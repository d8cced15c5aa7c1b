# unlockwatch.supervisor - single-slot supervision of the unlock command
# Ensures that at most one instance of the unlock command is running at
# any time, even if the session is locked and unlocked again faster
# than the command completes.

import subprocess

import unlockwatch
from unlockwatch.logging import log

# How long to wait for a killed unlock command to go away, in seconds.
REAP_TIMEOUT = 1

class SpawnError(unlockwatch.UserError):
	def __init__(self, command, error):
		super().__init__('Failed to start unlock command %r: %s' % (list(command.argv), error))
		self.command = command
		self.error = error


# Default process launcher.
# The child gets its own session, so that it is not affected by
# signals sent to our process group (e.g. a ^C in the terminal).
def popen_launcher(argv, env):
	return subprocess.Popen(argv, env=env, start_new_session=True)


class ProcessSupervisor:
	# launcher is a callable accepting (argv, env) and returning a
	# process handle, which must have the poll(), kill() and wait()
	# methods and the pid attribute of subprocess.Popen.
	def __init__(self, launcher=popen_launcher):
		self.log = log.getChild('supervisor')
		self.launcher = launcher

		# Handle of the unlock command we started last, if it has
		# not been reconciled yet.
		self.process = None

	def reconcile(self):
		'''Collect the tracked process if it exited, or kill it if it
		is still running.  Either way, stop tracking it.'''
		process = self.process
		if process is None:
			return

		# Unset this first, so that no failure below can leave us
		# tracking a process we already gave up on.
		self.process = None

		returncode = process.poll()
		if returncode is not None:
			self.log.info('Unlock command (PID %d) exited with status %d.', process.pid, returncode)
			return

		self.log.info('Unlock command (PID %d) is still running, killing it.', process.pid)
		try:
			process.kill()
		except OSError as e:
			self.log.warning('Failed to kill unlock command (PID %d): %s', process.pid, e)
			return

		# Reap it, so that it does not linger as a zombie.
		try:
			process.wait(timeout=REAP_TIMEOUT)
		except subprocess.TimeoutExpired:
			self.log.warning('Killed unlock command (PID %d) did not exit within %s seconds.',
							 process.pid, REAP_TIMEOUT)

	def start(self, command):
		'''Launch the command without waiting for it, and track it.'''
		assert self.process is None, 'Starting a process while another one is tracked'

		self.log.debug('Starting unlock command: %s', command)
		try:
			process = self.launcher(list(command.argv), command.environ())
		except (OSError, ValueError) as e:
			raise SpawnError(command, e) from e
		self.log.info('Started unlock command (PID %d).', process.pid)

		self.process = process
		return process

	def restart(self, command):
		self.reconcile()
		return self.start(command)

	def is_tracking(self):
		return self.process is not None
