"""
Test fixtures: small executables the shell can run.

Scripts are written into a temporary directory that tests use as the
search path, so nothing depends on what /usr/bin holds.
"""

import os
import sys
from typing import Optional


# Echoes argv and the inherited environment, one entry per line.
MYECHO = """
import os, sys
for i, arg in enumerate(sys.argv[1:], 1):
    print("argv[%d]: %s" % (i, arg))
print("environment:")
for key, value in os.environ.items():
    print("environ: %s=%s" % (key, value))
"""

# Exits with the status given as first argument.
STATUS = """
import sys
sys.exit(int(sys.argv[1]) if len(sys.argv) > 1 else 0)
"""

# Copies stdin to stdout.
COPY = """
import sys
sys.stdout.write(sys.stdin.read())
"""

# Announces itself, then sleeps until killed.
SLEEPER = """
import signal, sys, time
signal.signal(signal.SIGINT, signal.SIG_DFL)
print("ready", flush=True)
time.sleep(30)
"""

# Dies by its own SIGTERM.
SELFKILL = """
import os, signal
os.kill(os.getpid(), signal.SIGTERM)
"""

SCRIPTS = {
    'myecho': MYECHO,
    'status': STATUS,
    'copy': COPY,
    'sleeper': SLEEPER,
    'selfkill': SELFKILL,
}


def write_script(directory: str, name: str, body: str, mode: int = 0o755) -> str:
    """Write a Python script with a shebang for this interpreter."""
    path = os.path.join(directory, name)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(f"#!{sys.executable}\n")
        f.write(body.lstrip('\n'))
    os.chmod(path, mode)
    return path


def make_bin_dir(directory: str) -> str:
    """Populate directory with every fixture script and return it."""
    os.makedirs(directory, exist_ok=True)
    for name, body in SCRIPTS.items():
        write_script(directory, name, body)
    return directory


def package_root() -> str:
    """Directory that holds the simpsh package."""
    import simpsh
    return os.path.dirname(os.path.dirname(os.path.abspath(simpsh.__file__)))


def subprocess_env(config_path: Optional[str] = None) -> dict[str, str]:
    """Environment for running 'python -m simpsh' in a subprocess."""
    env = dict(os.environ)
    root = package_root()
    existing = env.get('PYTHONPATH')
    env['PYTHONPATH'] = root if not existing else root + os.pathsep + existing
    env.pop('SIMPSH_CONFIG', None)
    if config_path:
        env['SIMPSH_CONFIG'] = config_path
    return env


def parse_echo_output(text: str) -> tuple[list[str], dict[str, str]]:
    """Split myecho output into (argv[1:], environment)."""
    args = []
    environ = {}
    for line in text.splitlines():
        if line.startswith('argv['):
            args.append(line.split(': ', 1)[1])
        elif line.startswith('environ: '):
            key, _, value = line[len('environ: '):].partition('=')
            environ[key] = value
    return args, environ
