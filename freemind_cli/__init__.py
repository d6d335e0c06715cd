# freemind_cli/__init__.py
# Description: Command line client for the Freemind calendar/task registry
#
__version__ = "0.3.0"
