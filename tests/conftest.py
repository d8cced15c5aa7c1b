"""Shared pytest fixtures: fake sessions and processes."""

import itertools
import subprocess

import pytest

from unlockwatch.command import UnlockCommand
from unlockwatch.supervisor import ProcessSupervisor


class FakeProcess:
	"""Stands in for subprocess.Popen."""

	def __init__(self, pid, argv, env):
		self.pid = pid
		self.argv = argv
		self.env = env
		self.returncode = None
		self.kill_calls = 0
		self.kill_error = None
		self.ignores_kill = False
		self.wait_timeouts = []

	def poll(self):
		return self.returncode

	def kill(self):
		self.kill_calls += 1
		if self.kill_error is not None:
			raise self.kill_error
		if not self.ignores_kill:
			self.returncode = -9

	def wait(self, timeout=None):
		self.wait_timeouts.append(timeout)
		if self.returncode is None:
			raise subprocess.TimeoutExpired(self.argv, timeout)
		return self.returncode


class FakeLauncher:
	"""Records launches; raises `error` instead when it is set."""

	def __init__(self):
		self.processes = []
		self.error = None
		self._pids = itertools.count(1000)

	def __call__(self, argv, env):
		if self.error is not None:
			raise self.error
		process = FakeProcess(next(self._pids), argv, env)
		self.processes.append(process)
		return process


class FakeSession:
	"""A session whose LockedHint stream and Active values are scripted.

	`active` is either a bool, used for every read, or a list of values
	returned by successive reads."""

	def __init__(self, changes, active=True):
		self.changes = changes
		self.active = active
		self.active_reads = 0

	def locked_hint_changes(self):
		return iter(self.changes)

	def is_active(self):
		self.active_reads += 1
		if isinstance(self.active, list):
			return self.active.pop(0)
		return self.active

	def __str__(self):
		return 'fake'


@pytest.fixture
def launcher():
	return FakeLauncher()


@pytest.fixture
def supervisor(launcher):
	return ProcessSupervisor(launcher=launcher)


@pytest.fixture
def command():
	return UnlockCommand(['at-unlock'], {'UNLOCKWATCH_TEST': '1'})
