# unlockwatch.command - the command to run when the session is unlocked

import collections
import os

import unlockwatch

# The command run when no configuration says otherwise.
DEFAULT_ARGV = ('at-unlock',)

# An immutable, pre-validated command line plus extra environment.
# Validation happens once, here, so that the supervisor can spawn it
# as-is on every unlock.
class UnlockCommand(collections.namedtuple('UnlockCommand', ['argv', 'env'])):
	__slots__ = ()

	def __new__(cls, argv=DEFAULT_ARGV, env=None):
		if isinstance(argv, str):
			raise unlockwatch.UserError('Unlock command must be a list of arguments, not %r' % (argv,))
		argv = tuple(argv)
		if not argv:
			raise unlockwatch.UserError('Unlock command must not be empty')
		if not all(isinstance(arg, str) for arg in argv) or not argv[0]:
			raise unlockwatch.UserError('Invalid unlock command %r' % (argv,))
		if any('\0' in arg for arg in argv):
			raise unlockwatch.UserError('Unlock command %r contains a null byte' % (argv,))

		env = dict(env or {})
		for name, value in env.items():
			if not isinstance(name, str) or not name or '=' in name or '\0' in name:
				raise unlockwatch.UserError('Invalid environment variable name %r' % (name,))
			if not isinstance(value, str):
				raise unlockwatch.UserError('Environment variable %s must be a string, not %r' % (name, value))
			if '\0' in value:
				raise unlockwatch.UserError('Environment variable %s contains a null byte' % (name,))

		return super().__new__(cls, argv, tuple(sorted(env.items())))

	# Build the complete environment of the child process, which
	# inherits ours.
	def environ(self, base=None):
		return dict(os.environ if base is None else base, **dict(self.env))

	def __str__(self):
		return ' '.join(self.argv)
