# unlockwatch.session_id - identifier of the logind session to watch

import unlockwatch

class EmptySessionId(unlockwatch.UserError):
	def __init__(self):
		super().__init__('Session Id must be a non-empty string')


class SessionId:
	'''Names a login session, as known to systemd-logind (e.g. "2" or "c1").

	Any non-empty string is accepted verbatim: the namespace belongs to
	logind, so we do not try to validate it any further.
	'''

	__slots__ = ('_session_id',)

	def __init__(self, session_id: str):
		if not session_id:
			raise EmptySessionId()
		object.__setattr__(self, '_session_id', session_id)

	@classmethod
	def parse(cls, s: str) -> 'SessionId':
		return cls(s)

	def __setattr__(self, name, value):
		raise AttributeError('SessionId is immutable')

	def __eq__(self, other):
		if isinstance(other, SessionId):
			return self._session_id == other._session_id
		return NotImplemented

	def __hash__(self):
		return hash(self._session_id)

	def __str__(self):
		return self._session_id

	def __repr__(self):
		return 'SessionId(%r)' % (self._session_id,)
