# Sample unlockwatch configuration file.
# Copy to ~/.config/unlockwatch/config.py and adjust.

# The configuration file must define a function, config, which
# receives an object with the following methods:
#
# - c.unlock_command(*argv, **env)
#   Sets the command run whenever the session is unlocked.  Keyword
#   arguments are added to the command's environment.  The default is
#   to run `at-unlock`.
#
#   Only one instance of the command runs at a time: if the session
#   is locked again while the command is still running, it is killed.
#
# - c.resolve_session_by(method)
#   Selects how the session's D-Bus object is found:
#   'list' (the default) looks the session up in logind's session list;
#   'path' derives the object path from the session ID directly.

import os

def config(c):
	c.unlock_command(
		os.path.expanduser('~/bin/at-unlock'),
		'--quiet',
		UNLOCKWATCH_SESSION=os.getenv('XDG_SESSION_ID', ''),
	)
