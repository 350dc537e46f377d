"""
Paths of the BingoSync service, relative to the base URL
"""

# Room pages, formatted with the room id
ROOM_BOARD = "room/{room}/board"
ROOM_FEED = "room/{room}/feed"
ROOM_SETTINGS = "room/{room}/room-settings"

# JSON POST endpoints
API_JOIN_ROOM = "api/join-room"
API_SELECT = "api/select"
API_CHAT = "api/chat"
API_COLOR = "api/color"
API_REVEAL = "api/revealed"
API_NEW_CARD = "api/new-card"
