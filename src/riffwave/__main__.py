import sys

from riffwave.cli.commands import app

sys.exit(app())
