# unlockwatch.config - loads and evaluates the user's configuration

import importlib.util
import os
import sys

import unlockwatch
from unlockwatch.command import UnlockCommand
from unlockwatch.logging import log

# Ways to find the object path of a session (see unlockwatch.logind).
RESOLVERS = ('list', 'path')

# The user config module.
module = None

class Configurator:
	def __init__(self):
		self.reset()

	def reset(self):
		# Command to run when the session is unlocked.
		self.command = UnlockCommand()
		# How to find the session's object path (see unlockwatch.logind).
		self.resolver = 'list'

	# Re-evaluate the configuration and update our settings to match.
	def evaluate(self):
		log.debug('Evaluating configuration.')

		# Reset settings before (re-)evaluating the user configuration.
		self.reset()

		if not module:
			return

		# Evaluate the user-defined configuration function.
		module.config(self)

	# Public API follows:

	def unlock_command(self, *argv, **env):
		'''Called from the user's configuration to set the command which
		is run when the session is unlocked.  Keyword arguments are
		added to the command's environment.'''
		self.command = UnlockCommand(argv, env)

	def resolve_session_by(self, method):
		'''Called from the user's configuration to select how the
		session's object path is found: 'list' asks logind for its
		session list, 'path' derives it from the session ID.'''
		if method not in RESOLVERS:
			raise unlockwatch.UserError('Invalid session resolution method %r - must be one of %s' % (
				method, ', '.join(RESOLVERS),
			))
		self.resolver = method


configurator = Configurator()

def get_config_files():
	config_dirs = os.getenv('XDG_CONFIG_DIRS', '/etc').split(':')
	config_dirs = [os.getenv('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))] + config_dirs
	return [d + '/unlockwatch/config.py' for d in config_dirs if d]

# Load the configuration file, and evaluate it.
def load():
	global module
	module = None

	config_files = get_config_files()
	for config_file in config_files:
		if os.path.exists(config_file):
			log.debug('Loading configuration from %r.', config_file)

			# https://docs.python.org/3/library/importlib.html#importing-a-source-file-directly
			module_name = 'unlockwatch_user_config'
			spec = importlib.util.spec_from_file_location(module_name, config_file)
			module = importlib.util.module_from_spec(spec)
			sys.modules[module_name] = module
			spec.loader.exec_module(module)
			if not callable(getattr(module, 'config', None)):
				raise unlockwatch.UserError('Configuration file %r does not define a config function' % (config_file,))
			break
	else:
		log.warning('No configuration file found, using defaults.')
		log.debug('Looked in: %r', config_files)

	configurator.evaluate()
	return configurator
