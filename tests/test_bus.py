"""Tests for the GLib main loop thread and system bus connection."""

import threading

import pytest

dbus = pytest.importorskip("dbus")
pytest.importorskip("gi")

import unlockwatch
from unlockwatch.bus import Bus, BusError


@pytest.fixture
def bus():
	bus = Bus()
	bus.start_mainloop()
	yield bus
	bus.close()


class TestMainLoop:
	def test_run_sync_returns_value(self, bus):
		assert bus.run_sync(lambda: 42) == 42

	def test_run_sync_runs_on_glib_thread(self, bus):
		assert bus.run_sync(threading.current_thread) is bus.glib_thread

	def test_run_sync_propagates_exception(self, bus):
		def fail():
			raise KeyError("missing")
		with pytest.raises(KeyError, match="missing"):
			bus.run_sync(fail)

	def test_run_async_runs_eventually(self, bus):
		done = threading.Event()
		bus.run_async(done.set)
		assert done.wait(5)

	def test_close_stops_thread(self):
		bus = Bus()
		bus.start_mainloop()
		thread = bus.glib_thread
		bus.close()
		assert not thread.is_alive()
		assert bus.glib_thread is None
		assert bus.mainloop is None


class TestConnect:
	def test_connection_failure_is_bus_error(self, monkeypatch):
		def system_bus(**_kwargs):
			raise dbus.exceptions.DBusException("no socket")
		monkeypatch.setattr(dbus, "SystemBus", system_bus)

		bus = Bus()
		with pytest.raises(BusError, match="Failed to connect to system bus: no socket") as excinfo:
			bus.connect()
		assert isinstance(excinfo.value, unlockwatch.UserError)
		assert bus.glib_thread is None
		assert bus.system_bus is None
