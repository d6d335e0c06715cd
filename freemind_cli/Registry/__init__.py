# freemind_cli/Registry/__init__.py
# Description: Registry records, local state and the streaming XML patch engine
