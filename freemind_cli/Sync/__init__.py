# freemind_cli/Sync/__init__.py
