# unlockwatch.bus - D-Bus interop and main loop
# Connects to the system bus, and runs a GLib MainLoop in a thread to
# dispatch the signals we subscribe to.

import threading

import dbus
import dbus.exceptions
from dbus.mainloop.glib import DBusGMainLoop
from gi.repository import GLib

import unlockwatch
from unlockwatch.logging import log

class BusError(unlockwatch.UserError):
	pass


class Bus:
	def __init__(self):
		self.log = log.getChild('bus')
		self.mainloop = None
		self.glib_thread = None
		self.dbus_mainloop = None
		self.system_bus = None

	def start_mainloop(self):
		self.mainloop = GLib.MainLoop()
		# A daemon thread, so that it cannot hold up the exit of the
		# process.
		self.glib_thread = threading.Thread(target=self.glib_thread_func, daemon=True)
		self.glib_thread.start()

	def connect(self):
		self.start_mainloop()

		def setup():
			self.dbus_mainloop = DBusGMainLoop()
			system_bus = dbus.SystemBus(private=True, mainloop=self.dbus_mainloop)
			# libdbus would otherwise _exit() the whole process when the
			# bus goes away; we want to end the change stream instead.
			system_bus.set_exit_on_disconnect(False)
			return system_bus

		try:
			self.system_bus = self.run_sync(setup)
		except dbus.exceptions.DBusException as e:
			self.close()
			raise BusError('Failed to connect to system bus: %s' % (e,)) from e

		self.log.debug('Connected to system bus as %s.', self.system_bus.get_unique_name())

	def close(self):
		if self.system_bus is not None:
			self.run_sync(self.system_bus.close)
			self.system_bus = None
		self.dbus_mainloop = None
		if self.glib_thread is not None:
			self.run_async(self.mainloop.quit)
			self.glib_thread.join()
			self.glib_thread = None
		self.mainloop = None

	# Run a function on the GLib main loop thread.
	# The function is run asynchronously, discarding the return value.
	def run_async(self, func):
		# Note: this works (without an explicit reference to the main
		# loop) because the main loop is attached to the default GLib
		# context.  There is at most one Bus per process.
		GLib.idle_add(func)

	# Run a function on the GLib main loop thread.
	# The function is run synchronously, propagating any return value or exception.
	def run_sync(self, func):
		event = threading.Event()
		result_getter = []
		def run():
			try:
				value = func()
				result_getter.append(lambda: value)
			except Exception as e:
				# Re-throw in the calling thread
				def make_raiser(ex):
					def raiser():
						raise ex
					return raiser
				result_getter.append(make_raiser(e))
			event.set()
			# Run once only.
			return False

		GLib.idle_add(run)
		event.wait()
		assert len(result_getter) == 1
		return result_getter[0]()

	def glib_thread_func(self):
		self.mainloop.run()
