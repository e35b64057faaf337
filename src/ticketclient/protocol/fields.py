"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Frame discriminator, present on every frame in both directions.
TIPO = "tipo"

# Outbound (client -> daemon)
TICKET = "ticket"
GET_PRINTERS = "get_printers"
PING = "ping"
STATUS = "status"

# Inbound (daemon -> client)
INFO = "info"
ACK = "ack"
RESULT = "result"
ERROR = "error"
PONG = "pong"
PRINTERS = "printers"

# Frame fields
ID = "id"
DATOS = "datos"
MENSAJE = "mensaje"
CURRENT = "current"
CAPACITY = "capacity"

# Result status reported for a successful job
SUCCESS = "success"

# Queue snapshot defaults applied when the daemon omits a field
DEFAULT_CURRENT = 0
DEFAULT_CAPACITY = 100

# Printer classification
THERMAL = "thermal"

# Phrases identifying classes of error frames
AUTH_FAILED = "Authentication failed"
RATE_LIMITED = "Rate limited"

# Document command kinds, in the order the schema lists them
TEXT = "text"
SEPARATOR = "separator"
TABLE = "table"
BARCODE = "barcode"
QR = "qr"
RAW = "raw"
FEED = "feed"
CUT = "cut"
BEEP = "beep"

COMMAND_KINDS = (TEXT, SEPARATOR, TABLE, BARCODE, QR, RAW, FEED, CUT, BEEP)

CUT_PARTIAL = "partial"
CUT_FULL = "full"
