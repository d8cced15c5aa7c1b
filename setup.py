from setuptools import setup

setup(
	name='unlockwatch',
	version='0.1.0',
	description='Run a command whenever a logind session is unlocked',
	packages=['unlockwatch'],
	package_dir={'':'src'},
	python_requires='>=3.10',
	install_requires=[
		'dbus-python',
		'PyGObject',
	],
	extras_require={
		'test': ['pytest<9.1'],
		'journal': ['systemd-python'],
	},
	entry_points={
		'console_scripts': [
			'unlockwatch=unlockwatch:main',
		]
	}
)
