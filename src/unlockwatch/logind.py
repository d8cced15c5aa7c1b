# unlockwatch.logind - systemd-logind integration
# Finds the session object on the system bus, reads its properties,
# and turns its LockedHint change notifications into a blocking stream.

import queue

import dbus
import dbus.exceptions

from unlockwatch.bus import BusError
from unlockwatch.logging import log
from unlockwatch.session_id import SessionId

LOGIND_SERVICE = 'org.freedesktop.login1'
LOGIND_PATH = '/org/freedesktop/login1'
MANAGER_INTERFACE = 'org.freedesktop.login1.Manager'
SESSION_INTERFACE = 'org.freedesktop.login1.Session'
PROPERTIES_INTERFACE = 'org.freedesktop.DBus.Properties'

SESSION_PATH_PREFIX = LOGIND_PATH + '/session/'

# Escape a string for use as a D-Bus object path element, the way
# systemd does it (bus_label_escape): anything other than letters, and
# digits in a non-leading position, is encoded as _xx.
def escape_path_label(label):
	if not label:
		return '_'
	return ''.join(
		c if ('a' <= c <= 'z' or 'A' <= c <= 'Z' or (i > 0 and '0' <= c <= '9'))
		else ''.join('_%02x' % b for b in c.encode())
		for i, c in enumerate(label)
	)

def session_path_from_template(session_id):
	return SESSION_PATH_PREFIX + escape_path_label(str(session_id))


# Return logind's session list, as (session_id, uid, user_name, seat,
# object_path) tuples.  Must be called on the bus thread.
def list_sessions(system_bus):
	manager = system_bus.get_object(LOGIND_SERVICE, LOGIND_PATH)
	try:
		sessions = manager.ListSessions(dbus_interface=MANAGER_INTERFACE)
	except dbus.exceptions.DBusException as e:
		raise BusError('Failed to list logind sessions: %s' % (e,)) from e
	return [
		(str(sess_id), int(uid), str(user_name), str(seat), str(path))
		for (sess_id, uid, user_name, seat, path) in sessions
	]

# Must be called on the bus thread.
def session_path_from_list(system_bus, session_id):
	for (sess_id, _uid, _user_name, _seat, path) in list_sessions(system_bus):
		if sess_id and SessionId(sess_id) == session_id:
			return path
	raise BusError("Can't find session object path for session %s" % (session_id,))


class LockedHintStream:
	'''Blocking iterator over LockedHint values.

	Fed from the bus thread, consumed from the main thread.  Ends when
	the bus connection is closed, and raises any error which occurred
	while producing values.'''

	_END = object()

	def __init__(self):
		self.queue = queue.Queue()

	def put(self, locked):
		self.queue.put(bool(locked))

	def fail(self, error):
		self.queue.put(error)

	def end(self):
		self.queue.put(self._END)

	def __iter__(self):
		return self

	def __next__(self):
		item = self.queue.get()
		if item is self._END:
			# Keep returning StopIteration on further calls.
			self.queue.put(item)
			raise StopIteration
		if isinstance(item, Exception):
			raise item
		return item


class SessionHandle:
	def __init__(self, bus, session_id, path):
		self.log = log.getChild('logind')
		self.bus = bus
		self.session_id = session_id
		self.path = path
		self.proxy = None

	@classmethod
	def resolve(cls, bus, session_id, method='list'):
		'''Find the object path of the given session.'''
		if method == 'list':
			path = bus.run_sync(lambda: session_path_from_list(bus.system_bus, session_id))
		elif method == 'path':
			path = session_path_from_template(session_id)
		else:
			raise ValueError('Unknown session resolution method %r' % (method,))
		log.getChild('logind').debug('Session %s has object path %s.', session_id, path)
		return cls(bus, session_id, path)

	# Runs on the bus thread:
	def _get_proxy(self):
		if self.proxy is None:
			self.proxy = self.bus.system_bus.get_object(LOGIND_SERVICE, self.path, introspect=False)
		return self.proxy

	# Runs on the bus thread:
	def _get(self, name):
		try:
			value = self._get_proxy().Get(SESSION_INTERFACE, name, dbus_interface=PROPERTIES_INTERFACE)
		except dbus.exceptions.DBusException as e:
			raise BusError('Failed to read %s of session %s (%s): %s' % (
				name, self.session_id, self.path, e,
			)) from e
		return bool(value)

	def is_active(self):
		return self.bus.run_sync(lambda: self._get('Active'))

	def is_locked(self):
		return self.bus.run_sync(lambda: self._get('LockedHint'))

	def locked_hint_changes(self):
		'''Subscribe to LockedHint changes.

		The first item of the returned stream is the current value.'''
		stream = LockedHintStream()

		# Runs on the bus thread:
		def handle_properties_changed(interface, changed, invalidated):
			if interface != SESSION_INTERFACE:
				return
			if 'LockedHint' in changed:
				stream.put(changed['LockedHint'])
			elif 'LockedHint' in invalidated:
				try:
					stream.put(self._get('LockedHint'))
				except BusError as e:
					stream.fail(e)

		def handle_disconnection(_connection):
			self.log.debug('Disconnected from the system bus.')
			stream.end()

		# Subscribe and read the current value in one go on the bus
		# thread, so that no change can be queued before it.
		def subscribe():
			system_bus = self.bus.system_bus
			system_bus.add_signal_receiver(
				handle_properties_changed,
				signal_name='PropertiesChanged',
				dbus_interface=PROPERTIES_INTERFACE,
				bus_name=LOGIND_SERVICE,
				path=self.path,
			)
			system_bus.call_on_disconnection(handle_disconnection)
			stream.put(self._get('LockedHint'))
		self.bus.run_sync(subscribe)

		return stream

	def __str__(self):
		return str(self.session_id)
