# Constants.py
# Description: Constants shared by the registry engine, the API client and the console UI
#
# Imports
#
# 3rd-Party Imports
#
# Local Imports
#
########################################################################################################################
#
# Functions:

# --- Wire format ---
REGISTRY_TAG = "registry"
ENTRY_TAG = "entry"
ENTRY_ID_ATTRIBUTE = "id"
TITLE_TAG = "name"
DESCRIPTION_TAG = "description"
DUE_TAG = "due"

# Identifiers are unsigned 16-bit; 0 means "no identifier"
MAX_ENTRY_ID = 0xFFFF
# Due dates are unsigned 32-bit UNIX timestamps
MAX_DUE_TIMESTAMP = 0xFFFFFFFF

# --- HTTP protocol ---
XML_MEDIA_TYPE = "text/xml"
USER_AGENT = "Freemind CLI"
USER_HEADER = "user"
ENDPOINT_FETCH = "/xml/fetch"
ENDPOINT_UPDATE = "/xml/update"
ENDPOINT_GET_BY_ID = "/xml/get_by_id/{entry_id}"

# --- Console ---
UNSYNCED_MARKER = "*"
SYNCED_MARKER = " "
MENU_RULE = "================================"

#
# End of Constants.py
########################################################################################################################
