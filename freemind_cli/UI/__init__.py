# freemind_cli/UI/__init__.py
